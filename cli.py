"""
CLI and configuration utilities for gyb.

Handles command-line argument parsing and validation of layout overrides.
"""

from __future__ import annotations

import argparse
import difflib
import logging
import sys
from pathlib import Path

import yaml

from gyb_core.config import CoreConfigService, load_runtime_paths as core_load_runtime_paths
from gyb_core.constants import (
    DEFAULT_RUNTIME_PATHS,
    LAYOUT_STYLE_ALIASES,
    VALID_DISPLAY_TYPES,
    VALID_LAYOUT_STYLES,
)
from gyb_core.orchestrator import LayoutOrchestrator

logger = logging.getLogger("gyb")

__version__ = "1.0.0"
LAYOUT_STYLE_CHOICES = tuple(VALID_LAYOUT_STYLES) + tuple(LAYOUT_STYLE_ALIASES.keys())


def _resolve_runtime_path_defaults() -> tuple[Path, dict[str, str]]:
    """Pre-parse --config and read runtime path defaults (out_dir, settings_file) from it."""
    config_probe = argparse.ArgumentParser(add_help=False)
    config_probe.add_argument("--config", type=Path, default=Path("config.yaml"))
    probe_args, _ = config_probe.parse_known_args()
    config_path = probe_args.config

    if "--help" in sys.argv or "-h" in sys.argv:
        return config_path, dict(DEFAULT_RUNTIME_PATHS)

    try:
        runtime_paths = core_load_runtime_paths(config_path)
    except (ValueError, OSError, yaml.YAMLError) as exc:
        raise CLIError(
            f"Failed to load runtime_paths from {config_path}: {exc}",
            "Check the runtime_paths section of the config file, or pass another --config.",
        ) from exc

    return config_path, runtime_paths


class CLIError(ValueError):
    """Bad command-line input, reported as a message plus an optional hint line."""

    def __init__(self, message: str, hint: str | None = None):
        self.message = message
        self.hint = hint
        super().__init__(self.__str__())

    def __str__(self) -> str:
        if self.hint:
            return f"{self.message}\nHint: {self.hint}"
        return self.message


class FriendlyArgumentParser(argparse.ArgumentParser):
    """ArgumentParser whose errors become CLIError with a hint for common flag mistakes."""

    def error(self, message: str) -> None:
        hint = None
        if "unrecognized arguments" in message:
            if "--layout_style" in message or "--style" in message:
                hint = "Use --layout-style (for example: --layout-style word-cloud)."
            elif "--display_type" in message:
                hint = "Use --display-type, not --display_type."
        elif "--display-type" in message and "invalid choice" in message:
            hint = f"Allowed display types: {', '.join(VALID_DISPLAY_TYPES)}."
        usage = self.format_usage().strip()
        raise CLIError(f"Argument error: {message}\n{usage}", hint=hint)


def _suggest_values(value: str, options: list[str], max_suggestions: int = 5) -> str | None:
    """Return close matches for ``value`` as a comma-separated string, or None."""
    matches = difflib.get_close_matches(value, options, n=max_suggestions, cutoff=0.5)
    if not matches:
        return None
    return ", ".join(matches)


def parse_layout_style(layout_style: str | None) -> str | None:
    """
    Validate a --layout-style override.

    Aliases ('cloud', 'list', 'ordered', 'sections') are accepted as given;
    the engine resolves them.

    Raises:
        CLIError: If the value is not a known style or alias.
    """
    if layout_style is None:
        return None

    value = layout_style.strip().lower()
    if value in LAYOUT_STYLE_CHOICES:
        return value

    suggestions = _suggest_values(value, list(LAYOUT_STYLE_CHOICES))
    hint = f"Allowed values: {', '.join(LAYOUT_STYLE_CHOICES)}."
    if suggestions:
        hint = f"Did you mean one of: {suggestions}?"
    raise CLIError(f"Unknown layout style '{layout_style}'.", hint)


def validate_dimension(name: str, value: float | None) -> float | None:
    """Validate an optional container dimension override."""
    if value is None:
        return None
    if value <= 0:
        raise CLIError(
            f"--{name} must be greater than 0 (got {value:g}).",
            f"Omit --{name} to size the container from the sponsor count.",
        )
    return value


def validate_inputs(args: argparse.Namespace) -> None:
    """
    Check that the selected input files exist and at least one was given.

    Raises:
        CLIError: If neither --campaign nor --sponsors was given, or a file is missing.
    """
    if args.campaign is None and args.sponsors is None:
        raise CLIError(
            "No sponsors to lay out.",
            "Provide --campaign FILE (with inline sponsors) and/or --sponsors FILE.",
        )
    for flag, path in (("--campaign", args.campaign), ("--sponsors", args.sponsors)):
        if path is not None and not Path(path).is_file():
            raise CLIError(f"{flag} file not found: {path}")
    if args.sponsors is not None and Path(args.sponsors).suffix.lower() not in ('.csv', '.yaml', '.yml'):
        raise CLIError(
            f"Unsupported sponsor file type '{Path(args.sponsors).suffix}'.",
            "Use a .csv, .yaml or .yml sponsor file.",
        )


def parse_args() -> argparse.Namespace:
    """
    Parse command-line arguments for gyb.

    Returns:
        argparse.Namespace: Parsed command-line arguments.
    """
    config_path_default, runtime_paths = _resolve_runtime_path_defaults()

    parser = FriendlyArgumentParser(
        description="Lay out campaign sponsors as a grid, list or word cloud and render the result.",
        epilog="""
Examples:
  %(prog)s --campaign campaign.yaml                        # Layout from campaign file
  %(prog)s --campaign campaign.yaml --sponsors sponsors.csv
  %(prog)s --sponsors sponsors.csv --layout-style word-cloud --display-type both
  %(prog)s --campaign campaign.yaml --export placements.csv --no-render
  %(prog)s --campaign campaign.yaml --dry-run              # Preview without rendering
        """,
        formatter_class=argparse.RawDescriptionHelpFormatter
    )

    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")

    # Inputs
    input_group = parser.add_argument_group("inputs")
    input_group.add_argument(
        "-c", "--campaign",
        type=Path,
        default=None,
        help="Campaign YAML file with a 'layout' section and optional 'positions', 'grid' or 'sponsors'"
    )
    input_group.add_argument(
        "-S", "--sponsors",
        type=Path,
        default=None,
        help="Sponsor records as CSV or YAML (replaces sponsors listed in the campaign file)"
    )

    # Layout overrides
    layout_group = parser.add_argument_group("layout overrides")
    layout_group.add_argument(
        "--layout-style",
        type=str,
        default=None,
        help=f"Override the campaign layout style ({', '.join(LAYOUT_STYLE_CHOICES)})"
    )
    layout_group.add_argument(
        "--display-type",
        choices=VALID_DISPLAY_TYPES,
        default=None,
        help="Override the sponsor display type: 'text-only', 'logo-only' or 'both'"
    )
    layout_group.add_argument(
        "--width",
        type=float,
        default=None,
        help="Word-cloud container width in px (default: 600)"
    )
    layout_group.add_argument(
        "--height",
        type=float,
        default=None,
        help="Word-cloud container height in px (default: max(800, 60 per sponsor))"
    )

    # Output options
    output_group = parser.add_argument_group("output options")
    output_group.add_argument(
        "--out-dir",
        type=Path,
        default=Path(runtime_paths["out_dir"]),
        help=f"Output directory for rendered images (default: {runtime_paths['out_dir']})"
    )
    output_group.add_argument(
        "--export",
        type=Path,
        default=None,
        metavar="FILE",
        help="Write the placement table to a CSV file"
    )
    output_group.add_argument(
        "--no-render",
        action="store_true",
        help="Skip image rendering (useful with --export)"
    )
    output_group.add_argument(
        "--config",
        type=Path,
        default=config_path_default,
        help=f"Path to config YAML file (default: {config_path_default})"
    )
    output_group.add_argument(
        "--settings",
        type=Path,
        default=Path(runtime_paths["settings_file"]),
        help=f"Path to plot settings YAML file (default: {runtime_paths['settings_file']})"
    )

    # Display options
    display_group = parser.add_argument_group("display options")
    display_group.add_argument(
        "-s", "--show",
        action="store_true",
        help="Open the rendered image after generation"
    )

    # Advanced options
    advanced_group = parser.add_argument_group("advanced options")
    advanced_group.add_argument(
        "--dry-run",
        action="store_true",
        help="Preview the layout summary without writing images or exports"
    )
    advanced_group.add_argument(
        "-q", "--quiet",
        action="store_true",
        help="Suppress console output except errors (log file unaffected)"
    )
    advanced_group.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Enable verbose console output (DEBUG level, log file always at DEBUG)"
    )

    args = parser.parse_args()
    args.layout_style = parse_layout_style(args.layout_style)
    args.width = validate_dimension("width", args.width)
    args.height = validate_dimension("height", args.height)
    return args


def load_orchestrator(config_file: Path) -> LayoutOrchestrator:
    """
    Build the layout orchestrator from config YAML.

    Args:
        config_file: Path to config YAML file.

    Returns:
        LayoutOrchestrator: Engine configured with grid, spiral and size tier settings.

    Raises:
        CLIError: If the configuration is missing or invalid.
    """
    try:
        return CoreConfigService(config_file).build_orchestrator()
    except (ValueError, OSError, yaml.YAMLError) as exc:
        raise CLIError(
            str(exc),
            "Check the grid, spiral and size_tiers sections of config.yaml.",
        ) from exc
