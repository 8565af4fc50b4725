"""Plotting-layer package for gyb."""

from .orchestrator import layout_filename, plot_layout
from .visualizer import SponsorVisualizer

__all__ = ["layout_filename", "plot_layout", "SponsorVisualizer"]
