"""
Layout orchestration for sponsor displays.

Selects the placement strategy for a campaign's layout style and runs the
filter, rank and place stages, returning a renderable result.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence

from .constants import (
    DEFAULT_GRID_SETTINGS,
    FALLBACK_LAYOUT_STYLE,
    LAYOUT_STYLE_ALIASES,
    VALID_DISPLAY_TYPES,
    VALID_LAYOUT_STYLES,
)
from .filtering import filter_sponsors, is_payment_eligible, requires_approved_logo
from .grid import assign_by_position_id, assign_positions, build_slots, calculate_grid_layout
from .models import LayoutConfig, LayoutResult, PlacedSponsor, SponsorRecord, Variant
from .ranking import rank_sponsors
from .sizing import SizeTier, apply_size_tier, footprint, resolve_variant
from .spiral import SpiralPlacer, SpiralSettings

logger = logging.getLogger("gyb")


def resolve_layout_style(layout_style: str | None) -> str:
    """Map aliases to canonical styles; unknown styles fall back to amount-ordered."""
    style = str(layout_style or "").strip().lower()
    style = LAYOUT_STYLE_ALIASES.get(style, style)
    if style in VALID_LAYOUT_STYLES:
        return style
    logger.warning(f"Unknown layout style '{layout_style}'; falling back to {FALLBACK_LAYOUT_STYLE}")
    return FALLBACK_LAYOUT_STYLE


def resolve_display_type(display_type: str | None) -> str:
    value = str(display_type or "").strip().lower()
    if value in VALID_DISPLAY_TYPES:
        return value
    logger.warning(f"Unknown sponsor display type '{display_type}'; using text-only")
    return "text-only"


class LayoutOrchestrator:
    """Run the filter, rank and place pipeline for one campaign render."""

    def __init__(
        self,
        spiral_settings: SpiralSettings | None = None,
        max_columns: int = DEFAULT_GRID_SETTINGS["max_columns"],
        pwyw_grid_columns: int = DEFAULT_GRID_SETTINGS["pwyw_grid_columns"],
        size_tiers: Sequence[SizeTier] | None = None,
    ) -> None:
        self.placer = SpiralPlacer(spiral_settings)
        self.max_columns = max_columns
        self.pwyw_grid_columns = pwyw_grid_columns
        self.size_tiers = list(size_tiers) if size_tiers else None

    def render(self, sponsors: Sequence[SponsorRecord], config: LayoutConfig) -> list[PlacedSponsor]:
        """Return the placed sponsors for a campaign, in display order."""
        return self.render_layout(sponsors, config).placed

    def render_layout(self, sponsors: Sequence[SponsorRecord], config: LayoutConfig) -> LayoutResult:
        """
        Produce the full layout result for a campaign.

        Grid layouts match sponsors to the positions they claimed. Size- and
        amount-ordered layouts rank sponsors into a flow list, or map amount
        ranks onto positions for pay-what-you-want grids. Word clouds place
        boxes with the spiral placer. Unknown styles render as amount-ordered.

        Args:
            sponsors: Sponsor records for the campaign.
            config: Layout configuration.

        Returns:
            LayoutResult: Placements (and grid slots where applicable).
        """
        style = resolve_layout_style(config.layout_style)
        display_type = resolve_display_type(config.sponsor_display_type)
        sponsors = self._apply_size_tiers(sponsors, config.campaign_type)

        if style == "grid":
            if config.has_grid:
                result = self._render_grid(sponsors, config, display_type)
            else:
                logger.debug(f"Grid layout without positions; rendering as {FALLBACK_LAYOUT_STYLE}")
                result = self._render_ordered(sponsors, config, display_type, FALLBACK_LAYOUT_STYLE)
        elif style == "word-cloud":
            result = self._render_cloud(sponsors, config, display_type)
        else:
            result = self._render_ordered(sponsors, config, display_type, style)

        logger.info(
            f"Rendered {len(result.placed)} of {len(sponsors)} sponsor(s) "
            f"with {result.layout_style} layout ({result.mode})"
        )
        return result

    def _apply_size_tiers(self, sponsors: Sequence[SponsorRecord], campaign_type: str) -> list[SponsorRecord]:
        if not self.size_tiers or campaign_type != "pay-what-you-want":
            return list(sponsors)
        return [apply_size_tier(sponsor, self.size_tiers) for sponsor in sponsors]

    @staticmethod
    def _place(sponsor: SponsorRecord, display_type: str, rank: int, position_id: str | None = None) -> PlacedSponsor:
        variant = resolve_variant(sponsor, display_type)
        width, height = footprint(sponsor, variant)
        return PlacedSponsor(
            sponsor=sponsor,
            variant=variant,
            width=width,
            height=height,
            rank=rank,
            position_id=position_id,
        )

    @staticmethod
    def _visible(sponsors: Sequence[SponsorRecord], display_type: str) -> list[SponsorRecord]:
        visible = [s for s in sponsors if resolve_variant(s, display_type) is not Variant.HIDDEN]
        if len(visible) < len(sponsors):
            logger.debug(f"Skipping {len(sponsors) - len(visible)} sponsor(s) with nothing to display")
        return visible

    def _render_grid(self, sponsors: Sequence[SponsorRecord], config: LayoutConfig, display_type: str) -> LayoutResult:
        positions = list(config.positions)
        eligible = self._visible(filter_sponsors(sponsors, display_type, include_pending=False), display_type)
        assigned = assign_by_position_id(eligible, positions)

        order = {str(position.position_id): index for index, position in enumerate(positions, start=1)}
        placements = {
            position_id: self._place(sponsor, display_type, order[position_id], position_id)
            for position_id, sponsor in assigned.items()
        }
        reserved_ids = [
            str(sponsor.position_id).strip()
            for sponsor in sponsors
            if sponsor.position_id is not None
            and is_payment_eligible(sponsor, include_pending=False)
            and requires_approved_logo(sponsor, display_type)
            and str(sponsor.position_id).strip() not in placements
        ]
        slots = build_slots(positions, placements, reserved_ids)
        _, columns = calculate_grid_layout(len(positions), config.columns, self.max_columns)
        return LayoutResult(
            layout_style="grid",
            mode="grid",
            sponsor_display_type=display_type,
            placed=list(placements.values()),
            slots=slots,
            columns=columns,
        )

    def _render_ordered(
        self,
        sponsors: Sequence[SponsorRecord],
        config: LayoutConfig,
        display_type: str,
        style: str,
    ) -> LayoutResult:
        eligible = self._visible(filter_sponsors(sponsors, display_type), display_type)
        ranked = rank_sponsors(eligible, config.campaign_type, style)

        if style == "amount-ordered" and config.has_grid and config.campaign_type == "pay-what-you-want":
            positions = list(config.positions)
            assigned = assign_positions(ranked, positions)
            placements = {
                position_id: self._place(sponsor, display_type, rank, position_id)
                for rank, (position_id, sponsor) in enumerate(assigned.items(), start=1)
            }
            return LayoutResult(
                layout_style=style,
                mode="grid",
                sponsor_display_type=display_type,
                placed=list(placements.values()),
                slots=build_slots(positions, placements),
                columns=config.columns or self.pwyw_grid_columns,
            )

        placed = [self._place(sponsor, display_type, rank) for rank, sponsor in enumerate(ranked, start=1)]
        _, columns = calculate_grid_layout(len(placed), config.columns, self.max_columns)
        return LayoutResult(
            layout_style=style,
            mode="flow",
            sponsor_display_type=display_type,
            placed=placed,
            columns=columns,
        )

    def _render_cloud(self, sponsors: Sequence[SponsorRecord], config: LayoutConfig, display_type: str) -> LayoutResult:
        eligible = self._visible(filter_sponsors(sponsors, display_type), display_type)
        width, height = self.placer.container_size(len(eligible), config.container_width, config.container_height)
        placed = self.placer.place(eligible, display_type, width, height)
        return LayoutResult(
            layout_style="word-cloud",
            mode="cloud",
            sponsor_display_type=display_type,
            placed=placed,
            width=width,
            height=height,
        )
