"""
gyb: sponsor layout engine for crowdfunding campaigns.

Main entry point for the gyb application. Loads a campaign and its sponsors,
runs the layout engine, and exports and renders the placement result.
"""

import logging
import sys
from dataclasses import replace
from pathlib import Path

import yaml

from cli import parse_args, validate_inputs, load_orchestrator, CLIError
from gyb_core.models import LayoutConfig
from gyb_data.campaign import Campaign, load_campaign
from gyb_data.export import export_placements
from gyb_data.records import load_sponsors
from gyb_plot.orchestrator import layout_filename, plot_layout
from logging_config import setup_logging, get_logger


def _configure_console_logging(args, logger) -> None:
    """Apply console verbosity rules based on CLI flags."""
    gyb_logger = logging.getLogger("gyb")
    console_handlers = [
        handler for handler in gyb_logger.handlers
        if isinstance(handler, logging.StreamHandler) and not isinstance(handler, logging.FileHandler)
    ]
    if args.verbose:
        for handler in console_handlers:
            handler.setLevel(logging.DEBUG)
        logger.debug("Verbose mode enabled (console output at DEBUG level)")
    elif args.quiet:
        for handler in console_handlers:
            handler.setLevel(logging.ERROR)
    elif args.dry_run:
        for handler in console_handlers:
            if handler.level > logging.INFO:
                handler.setLevel(logging.INFO)


def _load_inputs(args) -> Campaign:
    """Load the campaign file and sponsor file, applying CLI layout overrides."""
    try:
        if args.campaign is not None:
            campaign = load_campaign(args.campaign)
        else:
            campaign = Campaign(name=Path(args.sponsors).stem, layout=LayoutConfig())
        if args.sponsors is not None:
            campaign.sponsors = load_sponsors(args.sponsors)
    except (ValueError, OSError, yaml.YAMLError) as exc:
        raise CLIError(
            f"Failed to load campaign inputs: {exc}",
            "Check the campaign YAML layout section and the sponsor file columns.",
        ) from exc

    overrides = {}
    if args.layout_style is not None:
        overrides['layout_style'] = args.layout_style
    if args.display_type is not None:
        overrides['sponsor_display_type'] = args.display_type
    if args.width is not None:
        overrides['container_width'] = args.width
    if args.height is not None:
        overrides['container_height'] = args.height
    if overrides:
        campaign.layout = replace(campaign.layout, **overrides)
    return campaign


def _handle_dry_run(args, campaign: Campaign, logger) -> int:
    """Render dry-run summary and exit early."""
    layout = campaign.layout
    logger.info("DRY RUN MODE - No images or exports will be written")
    logger.info(f"Campaign: {campaign.name}")
    logger.info(f"Sponsors: {len(campaign.sponsors)}")
    logger.info(f"Layout style: {layout.layout_style}")
    logger.info(f"Campaign type: {layout.campaign_type}")
    logger.info(f"Display type: {layout.sponsor_display_type}")
    logger.info(f"Positions: {len(layout.positions) if layout.has_grid else 'none'}")
    logger.info(f"Container: {layout.container_width or 'auto'} x {layout.container_height or 'auto'}")
    logger.info(f"Export file: {args.export if args.export else 'none'}")
    if args.no_render:
        logger.info("Render: skipped (--no-render)")
    else:
        logger.info(f"Output image: {args.out_dir / layout_filename(campaign.name, layout.layout_style)}")
    logger.info(f"Show image: {args.show}")
    return 0


def _run_layout(args, campaign: Campaign, logger) -> int:
    """Run the layout engine, then export and render the result."""
    orchestrator = load_orchestrator(args.config)
    result = orchestrator.render_layout(campaign.sponsors, campaign.layout)

    fallbacks = sum(1 for placed in result.placed if placed.fallback)
    if fallbacks:
        logger.warning(f"{fallbacks} sponsor(s) used fallback positions and may overlap")

    if args.export:
        export_placements(result, args.export)

    if not args.no_render:
        plot_layout(result, campaign.name, args.out_dir, args.settings, show=args.show)
    return 0


def main() -> int:
    """
    Main entry point for gyb.

    Parses command-line arguments, loads the campaign and sponsor records,
    lays the sponsors out and writes the requested outputs.
    """
    try:
        args = parse_args()
    except CLIError as e:
        print(f"ERROR: {e}", file=sys.stderr)
        return 2

    # Initialize logging
    try:
        setup_logging(args.config)
    except (ValueError, OSError, yaml.YAMLError) as e:
        print(f"ERROR: Failed to set up logging from {args.config}: {e}", file=sys.stderr)
        return 2
    logger = get_logger("gyb")  # Use explicit name, not __name__

    # Handle verbose/quiet flags for console output
    _configure_console_logging(args, logger)

    try:
        validate_inputs(args)
        campaign = _load_inputs(args)
    except CLIError as e:
        logger.error(str(e))
        return 2

    # Dry-run mode: show what would be done without executing
    if args.dry_run:
        return _handle_dry_run(args, campaign, logger)

    try:
        return _run_layout(args, campaign, logger)
    except CLIError as e:
        logger.error(str(e))
        return 2


if __name__ == "__main__":
    exit_code = main()
    in_debugger = (
        sys.gettrace() is not None
        or "debugpy" in sys.modules
        or "pydevd" in sys.modules
    )
    if not in_debugger:
        raise SystemExit(exit_code)
