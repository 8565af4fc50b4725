"""Visual variant resolution, render footprints and amount-based size tiers."""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass, replace

from .constants import (
    CAPTION_FONT_SIZE,
    CAPTION_LINE_HEIGHT,
    CAPTION_MAX_LINES,
    DEFAULT_SIZE_TIERS,
    LOGO_ASPECT,
    LOGO_PADDING,
    LOGO_WITH_NAME_GAP,
    LOGO_WITH_NAME_MIN_WIDTH,
    TEXT_CHAR_WIDTH,
    TEXT_LINE_HEIGHT,
    TEXT_MIN_CHARS,
)
from .models import SponsorRecord, Variant


@dataclass(frozen=True)
class SizeTier:
    """Amount band with the text and logo sizes it renders at."""

    size: str
    min_amount: float
    max_amount: float | None
    text_font_size: float
    logo_width: float

    def contains(self, amount: float) -> bool:
        if amount < self.min_amount:
            return False
        return self.max_amount is None or amount <= self.max_amount


def default_size_tiers() -> list[SizeTier]:
    return [SizeTier(**tier) for tier in DEFAULT_SIZE_TIERS]


def resolve_variant(sponsor: SponsorRecord, display_type: str) -> Variant:
    """
    Decide which visual variant a sponsor is drawn with.

    A logo is only drawn for a logo sponsor that has a logo URL; its caption is
    added when both names and logos are displayed and a display name exists.
    Text is drawn in 'text-only' mode and for text sponsors in the other modes.
    A logo sponsor without a logo URL has nothing to show in the logo modes.
    """
    has_logo = sponsor.is_logo and bool(sponsor.logo_url)
    if has_logo and display_type == "both" and sponsor.display_name:
        return Variant.LOGO_WITH_NAME
    if has_logo and display_type in ("logo-only", "both"):
        return Variant.LOGO_ONLY
    if display_type == "text-only":
        return Variant.TEXT_ONLY
    if display_type in ("logo-only", "both") and sponsor.sponsor_type == "text":
        return Variant.TEXT_ONLY
    return Variant.HIDDEN


def text_footprint(name: str, font_size: float) -> tuple[float, float]:
    width = max(font_size * len(name) * TEXT_CHAR_WIDTH, font_size * TEXT_MIN_CHARS)
    return width, font_size * TEXT_LINE_HEIGHT


def footprint(sponsor: SponsorRecord, variant: Variant) -> tuple[float, float]:
    """Return the (width, height) bounding box of a sponsor drawn as ``variant``."""
    if variant is Variant.LOGO_WITH_NAME:
        logo_width = sponsor.logo_width
        caption_height = CAPTION_FONT_SIZE * CAPTION_LINE_HEIGHT * CAPTION_MAX_LINES
        width = max(logo_width + LOGO_PADDING, LOGO_WITH_NAME_MIN_WIDTH)
        height = logo_width * LOGO_ASPECT + caption_height + LOGO_WITH_NAME_GAP
        return width, height
    if variant is Variant.LOGO_ONLY:
        logo_width = sponsor.logo_width
        return logo_width + LOGO_PADDING, logo_width * LOGO_ASPECT + LOGO_PADDING
    if variant is Variant.TEXT_ONLY:
        return text_footprint(sponsor.name or "", sponsor.font_size)
    return 0.0, 0.0


def size_of(sponsor: SponsorRecord, display_type: str) -> tuple[float, float]:
    """Resolve the sponsor's variant for ``display_type`` and return its footprint."""
    return footprint(sponsor, resolve_variant(sponsor, display_type))


def calculate_size_tier(amount: float, tiers: Sequence[SizeTier] | None) -> SizeTier | None:
    """
    Determine which size tier an amount falls into.

    Tiers are searched from the highest ``min_amount`` down; the first tier
    containing the amount wins. Amounts matching no tier get the smallest
    tier. Returns None when no tiers are defined.
    """
    if not tiers:
        return None

    sorted_tiers = sorted(tiers, key=lambda tier: tier.min_amount)
    for tier in reversed(sorted_tiers):
        if tier.contains(amount):
            return tier
    return sorted_tiers[0]


def calculate_display_sizes(tier: SizeTier, sponsor_type: str) -> dict[str, float]:
    if sponsor_type == "text":
        return {"font_size": tier.text_font_size}
    if sponsor_type == "logo":
        return {"logo_width": tier.logo_width}
    return {}


def apply_size_tier(sponsor: SponsorRecord, tiers: Sequence[SizeTier] | None) -> SponsorRecord:
    """Fill missing precomputed sizes and display tier from the amount's size tier."""
    tier = calculate_size_tier(sponsor.amount_value, tiers)
    if tier is None:
        return sponsor

    sizes = calculate_display_sizes(tier, sponsor.sponsor_type)
    updates: dict[str, object] = {}
    if "font_size" in sizes and sponsor.calculated_font_size is None:
        updates["calculated_font_size"] = sizes["font_size"]
    if "logo_width" in sizes and sponsor.calculated_logo_width is None:
        updates["calculated_logo_width"] = sizes["logo_width"]
    if not updates:
        return sponsor
    updates["display_size"] = tier.size
    return replace(sponsor, **updates)
