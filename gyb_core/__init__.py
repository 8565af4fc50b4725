"""Core sponsor layout engine shared across gyb packages."""

from .config import (
    CoreConfigService,
    load_grid_settings,
    load_runtime_paths,
    load_size_tiers,
    load_spiral_settings,
)
from .filtering import filter_sponsors
from .grid import assign_by_position_id, assign_positions, calculate_grid_layout, group_sections
from .models import (
    Box,
    GridSlot,
    LayoutConfig,
    LayoutResult,
    PlacedSponsor,
    Position,
    SectionSummary,
    SlotStatus,
    SponsorRecord,
    Variant,
)
from .orchestrator import LayoutOrchestrator
from .pricing import PricingConfig, calculate_position_price, generate_positions
from .ranking import rank_sponsors
from .sizing import SizeTier, calculate_size_tier, resolve_variant, size_of
from .spiral import SpiralPlacer, SpiralSettings

__all__ = [
    "assign_by_position_id",
    "assign_positions",
    "Box",
    "calculate_grid_layout",
    "calculate_position_price",
    "calculate_size_tier",
    "CoreConfigService",
    "filter_sponsors",
    "generate_positions",
    "GridSlot",
    "group_sections",
    "LayoutConfig",
    "LayoutOrchestrator",
    "LayoutResult",
    "load_grid_settings",
    "load_runtime_paths",
    "load_size_tiers",
    "load_spiral_settings",
    "PlacedSponsor",
    "Position",
    "PricingConfig",
    "rank_sponsors",
    "resolve_variant",
    "SectionSummary",
    "size_of",
    "SizeTier",
    "SlotStatus",
    "SponsorRecord",
    "SpiralPlacer",
    "SpiralSettings",
    "Variant",
]
