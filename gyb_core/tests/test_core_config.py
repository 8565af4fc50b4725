from pathlib import Path

import pytest

from gyb_core.config import (
    CoreConfigService,
    load_grid_settings,
    load_runtime_paths,
    load_size_tiers,
    load_spiral_settings,
)
from gyb_core.constants import DEFAULT_RUNTIME_PATHS
from gyb_core.orchestrator import LayoutOrchestrator
from gyb_core.spiral import SpiralSettings


def _write(tmp_path, text):
    config_file = tmp_path / "config.yaml"
    config_file.write_text(text)
    return config_file


def test_defaults_when_sections_missing(tmp_path):
    config_file = _write(tmp_path, "logging:\n  console_level: INFO\n")
    assert load_runtime_paths(config_file) == DEFAULT_RUNTIME_PATHS
    assert load_grid_settings(config_file) == {"max_columns": 4, "pwyw_grid_columns": 3}
    assert load_spiral_settings(config_file) == SpiralSettings()
    assert [tier.size for tier in load_size_tiers(config_file)] == ["small", "medium", "large", "xlarge"]


def test_empty_file_uses_defaults(tmp_path):
    config_file = _write(tmp_path, "")
    assert load_spiral_settings(config_file).max_attempts == 2000


def test_runtime_paths_override(tmp_path):
    config_file = _write(tmp_path, "runtime_paths:\n  out_dir: ' renders '\n")
    paths = load_runtime_paths(config_file)
    assert paths["out_dir"] == "renders"
    assert paths["settings_file"] == DEFAULT_RUNTIME_PATHS["settings_file"]


def test_runtime_paths_rejects_blank(tmp_path):
    config_file = _write(tmp_path, "runtime_paths:\n  out_dir: ''\n")
    with pytest.raises(ValueError, match="runtime_paths.out_dir"):
        load_runtime_paths(config_file)


@pytest.mark.parametrize("value", ["0", "-2", "2.5", "true", "three"])
def test_grid_settings_reject_bad_values(tmp_path, value):
    config_file = _write(tmp_path, f"grid:\n  max_columns: {value}\n")
    with pytest.raises(ValueError, match="grid.max_columns"):
        load_grid_settings(config_file)


def test_section_must_be_mapping(tmp_path):
    config_file = _write(tmp_path, "grid: [1, 2]\n")
    with pytest.raises(ValueError, match="expected mapping"):
        load_grid_settings(config_file)


def test_spiral_overrides(tmp_path):
    config_file = _write(
        tmp_path,
        "spiral:\n"
        "  angle_step: 0.5\n"
        "  max_attempts: 300\n"
        "  jitter_amplitude: 0\n",
    )
    settings = load_spiral_settings(config_file)
    assert settings.angle_step == 0.5
    assert settings.max_attempts == 300
    assert settings.jitter_amplitude == 0.0
    assert settings.radius_step == 4.0


@pytest.mark.parametrize(
    "line,message",
    [
        ("max_attempts: 0", "spiral.max_attempts must be a positive integer"),
        ("max_attempts: 10.5", "spiral.max_attempts must be a positive integer"),
        ("angle_step: 0", "spiral.angle_step must be > 0"),
        ("radius_step: fast", "spiral.radius_step must be numeric"),
        ("collision_padding: -1", "spiral.collision_padding must be >= 0"),
        ("angel_step: 0.4", "Unknown spiral setting"),
    ],
)
def test_spiral_validation(tmp_path, line, message):
    config_file = _write(tmp_path, f"spiral:\n  {line}\n")
    with pytest.raises(ValueError, match=message):
        load_spiral_settings(config_file)


def test_size_tiers_from_config(tmp_path):
    config_file = _write(
        tmp_path,
        "size_tiers:\n"
        "  - {size: small, min_amount: 1, max_amount: 9, text_font_size: 10, logo_width: 30}\n"
        "  - {size: large, min_amount: 10, text_font_size: 24, logo_width: 90}\n",
    )
    tiers = load_size_tiers(config_file)
    assert [(t.size, t.max_amount, t.text_font_size) for t in tiers] == [("small", 9.0, 10.0), ("large", None, 24.0)]


@pytest.mark.parametrize(
    "tier,message",
    [
        ("{size: huge, min_amount: 1, text_font_size: 10, logo_width: 30}", "size must be one of"),
        ("{size: small, min_amount: 1, logo_width: 30}", "missing 'text_font_size'"),
        ("{size: small, min_amount: 10, max_amount: 5, text_font_size: 10, logo_width: 30}", "max_amount"),
        ("{size: small, min_amount: 1, text_font_size: 0, logo_width: 30}", "invalid display sizes"),
        ("small", "must be a mapping"),
    ],
)
def test_size_tier_validation(tmp_path, tier, message):
    config_file = _write(tmp_path, f"size_tiers:\n  - {tier}\n")
    with pytest.raises(ValueError, match=message):
        load_size_tiers(config_file)


def test_size_tiers_must_be_list(tmp_path):
    config_file = _write(tmp_path, "size_tiers:\n  small: 1\n")
    with pytest.raises(ValueError, match="expected list"):
        load_size_tiers(config_file)


def test_core_config_service_builds_orchestrator(tmp_path):
    config_file = _write(
        tmp_path,
        "grid:\n"
        "  max_columns: 6\n"
        "  pwyw_grid_columns: 2\n"
        "spiral:\n"
        "  max_attempts: 50\n",
    )
    service = CoreConfigService(config_file)
    orchestrator = service.build_orchestrator()
    assert isinstance(orchestrator, LayoutOrchestrator)
    assert orchestrator.max_columns == 6
    assert orchestrator.pwyw_grid_columns == 2
    assert orchestrator.placer.settings.max_attempts == 50
    assert len(orchestrator.size_tiers) == 4


def test_core_config_service_delegates_loaders(tmp_path):
    config_file = _write(tmp_path, "grid:\n  max_columns: 5\n")
    service = CoreConfigService(config_file)
    assert service.load_grid_settings()["max_columns"] == 5
    assert service.load_runtime_paths() == DEFAULT_RUNTIME_PATHS
    assert service.load_spiral_settings() == SpiralSettings()
    assert len(service.load_size_tiers()) == 4


def test_repository_config_loads():
    service = CoreConfigService(Path(__file__).resolve().parents[2] / "config.yaml")
    assert service.load_spiral_settings() == SpiralSettings()
    assert service.load_grid_settings() == {"max_columns": 4, "pwyw_grid_columns": 3}
