"""
Plot orchestration for gyb.

Turns a LayoutResult into an image file, naming the output after the
campaign and layout style.
"""

from __future__ import annotations

import logging
import re
from pathlib import Path

from gyb_core.models import LayoutResult
from .visualizer import SponsorVisualizer

logger = logging.getLogger("gyb")


def layout_filename(campaign_name: str, layout_style: str, suffix: str = ".png") -> str:
    """Build a filesystem-safe file name such as ``spring_drive_word-cloud.png``."""
    stem = re.sub(r"[^A-Za-z0-9_-]+", "_", campaign_name.strip()).strip("_") or "campaign"
    return f"{stem}_{layout_style}{suffix}"


def plot_layout(
    result: LayoutResult,
    campaign_name: str,
    out_dir: Path,
    settings: Path,
    show: bool = False,
    title: str | None = None,
) -> str:
    """
    Render a layout result to ``out_dir`` and return the saved file path.

    Args:
        result: Layout produced by the LayoutOrchestrator.
        campaign_name: Campaign name used for the file name and default title.
        out_dir: Directory for output images (created when missing).
        settings: Path to plot settings YAML file (for styling).
        show: Open the saved image in the system viewer.
        title: Optional title; defaults to the campaign name.
    """
    out_dir = Path(out_dir)
    out_dir.mkdir(parents=True, exist_ok=True)
    plot_file = out_dir / layout_filename(campaign_name, result.layout_style)

    vis = SponsorVisualizer(result, settings_file=str(settings))
    vis.plot(save_file=str(plot_file), title=campaign_name if title is None else title)
    logger.info(f"Saved {result.layout_style} layout ({len(result.placed)} sponsor(s)) to {plot_file}")

    if show:
        SponsorVisualizer.show_saved_plots([str(plot_file)])
    return str(plot_file)
