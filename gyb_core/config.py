"""Configuration helpers shared across CLI, engine and rendering layers."""

from __future__ import annotations

import logging
from pathlib import Path

import yaml

from .constants import (
    DEFAULT_GRID_SETTINGS,
    DEFAULT_RUNTIME_PATHS,
    DEFAULT_SIZE_TIERS,
    DEFAULT_SPIRAL_SETTINGS,
    DISPLAY_SIZE_RANK,
)
from .orchestrator import LayoutOrchestrator
from .sizing import SizeTier
from .spiral import SpiralSettings

logger = logging.getLogger("gyb")

_INTEGER_SPIRAL_KEYS = ('max_attempts',)
_NON_NEGATIVE_SPIRAL_KEYS = (
    'jitter_amplitude',
    'collision_padding',
    'margin_x',
    'margin_y',
    'first_start_radius',
    'start_radius',
    'fallback_base_radius',
    'fallback_radius_step',
)


def _read_config(config_file: Path) -> dict:
    with open(config_file, 'r') as f:
        return yaml.safe_load(f) or {}


def _section(config: dict, name: str, config_file: Path) -> dict:
    section = config.get(name, {})
    if section is None:
        return {}
    if not isinstance(section, dict):
        raise ValueError(f"Invalid {name} section in {config_file}; expected mapping.")
    return section


class CoreConfigService:
    """Stateful access wrapper for core config helpers."""

    def __init__(self, config_file: Path = Path("config.yaml")) -> None:
        self.config_file = config_file

    def load_runtime_paths(self) -> dict[str, str]:
        return load_runtime_paths(self.config_file)

    def load_grid_settings(self) -> dict[str, int]:
        return load_grid_settings(self.config_file)

    def load_spiral_settings(self) -> SpiralSettings:
        return load_spiral_settings(self.config_file)

    def load_size_tiers(self) -> list[SizeTier]:
        return load_size_tiers(self.config_file)

    def build_orchestrator(self) -> LayoutOrchestrator:
        """Create a LayoutOrchestrator configured from the bound config file."""
        grid_settings = self.load_grid_settings()
        return LayoutOrchestrator(
            spiral_settings=self.load_spiral_settings(),
            max_columns=grid_settings['max_columns'],
            pwyw_grid_columns=grid_settings['pwyw_grid_columns'],
            size_tiers=self.load_size_tiers(),
        )


def load_runtime_paths(config_file: Path = Path("config.yaml")) -> dict[str, str]:
    """Load runtime path defaults from config YAML.

    Paths are read from top-level ``runtime_paths`` and merged with minimal
    defaults when keys are missing.
    """
    paths = DEFAULT_RUNTIME_PATHS.copy()
    runtime_paths = _section(_read_config(config_file), 'runtime_paths', config_file)

    for key in DEFAULT_RUNTIME_PATHS:
        if key in runtime_paths:
            value = runtime_paths[key]
            if not isinstance(value, str) or not value.strip():
                raise ValueError(f"runtime_paths.{key} must be a non-empty string")
            paths[key] = value.strip()

    return paths


def load_grid_settings(config_file: Path = Path("config.yaml")) -> dict[str, int]:
    """Load grid column settings, applying defaults for missing keys."""
    settings = DEFAULT_GRID_SETTINGS.copy()
    grid_config = _section(_read_config(config_file), 'grid', config_file)

    for key in DEFAULT_GRID_SETTINGS:
        if key in grid_config:
            value = grid_config[key]
            if not isinstance(value, int) or isinstance(value, bool) or value <= 0:
                raise ValueError(f"grid.{key} must be a positive integer")
            settings[key] = value

    return settings


def load_spiral_settings(config_file: Path = Path("config.yaml")) -> SpiralSettings:
    """Load word-cloud spiral constants from the ``spiral`` section.

    Unknown keys are rejected so typos do not silently fall back to defaults.
    """
    spiral_config = _section(_read_config(config_file), 'spiral', config_file)

    unknown = sorted(set(spiral_config) - set(DEFAULT_SPIRAL_SETTINGS))
    if unknown:
        raise ValueError(f"Unknown spiral setting(s) in {config_file}: {', '.join(unknown)}")

    values: dict[str, float | int] = dict(DEFAULT_SPIRAL_SETTINGS)
    for key, raw_value in spiral_config.items():
        if key in _INTEGER_SPIRAL_KEYS:
            if not isinstance(raw_value, int) or isinstance(raw_value, bool) or raw_value <= 0:
                raise ValueError(f"spiral.{key} must be a positive integer")
            values[key] = raw_value
            continue

        try:
            value = float(raw_value)
        except (TypeError, ValueError) as exc:
            raise ValueError(f"spiral.{key} must be numeric") from exc

        if key in _NON_NEGATIVE_SPIRAL_KEYS:
            if value < 0:
                raise ValueError(f"spiral.{key} must be >= 0")
        elif value <= 0:
            raise ValueError(f"spiral.{key} must be > 0")
        values[key] = value

    return SpiralSettings(**values)


def _parse_size_tier(index: int, raw_tier: object) -> SizeTier:
    if not isinstance(raw_tier, dict):
        raise ValueError(f"size_tiers[{index}] must be a mapping")

    size = raw_tier.get('size')
    if size not in DISPLAY_SIZE_RANK:
        allowed = ', '.join(DISPLAY_SIZE_RANK)
        raise ValueError(f"size_tiers[{index}].size must be one of: {allowed}")

    try:
        min_amount = float(raw_tier.get('min_amount', 0))
        max_raw = raw_tier.get('max_amount')
        max_amount = float(max_raw) if max_raw is not None else None
        text_font_size = float(raw_tier['text_font_size'])
        logo_width = float(raw_tier['logo_width'])
    except KeyError as exc:
        raise ValueError(f"size_tiers[{index}] is missing '{exc.args[0]}'") from exc
    except (TypeError, ValueError) as exc:
        raise ValueError(f"size_tiers[{index}] has a non-numeric amount or size") from exc

    if min_amount < 0:
        raise ValueError(f"size_tiers[{index}] has invalid min_amount")
    if max_amount is not None and max_amount < min_amount:
        raise ValueError(f"size_tiers[{index}].max_amount must be >= min_amount")
    if text_font_size <= 0 or logo_width <= 0:
        raise ValueError(f"size_tiers[{index}] has invalid display sizes")

    return SizeTier(size, min_amount, max_amount, text_font_size, logo_width)


def load_size_tiers(config_file: Path = Path("config.yaml")) -> list[SizeTier]:
    """Load pay-what-you-want size tiers; the default tiers apply when none are configured."""
    config = _read_config(config_file)
    configured = config.get('size_tiers')
    if configured is None:
        return [SizeTier(**tier) for tier in DEFAULT_SIZE_TIERS]
    if not isinstance(configured, list):
        raise ValueError(f"Invalid size_tiers section in {config_file}; expected list.")

    return [_parse_size_tier(index, raw_tier) for index, raw_tier in enumerate(configured)]
