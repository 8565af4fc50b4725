"""Data-layer package for gyb (record loading and export)."""

from .campaign import Campaign, load_campaign
from .export import export_placements, placements_to_frame, slots_to_frame
from .records import load_sponsors, position_from_mapping, sponsor_from_mapping

__all__ = [
    "Campaign",
    "export_placements",
    "load_campaign",
    "load_sponsors",
    "placements_to_frame",
    "position_from_mapping",
    "slots_to_frame",
    "sponsor_from_mapping",
]
