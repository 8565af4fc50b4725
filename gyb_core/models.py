"""Data model for sponsor records, layout configuration and placement results."""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from enum import Enum

from .constants import (
    DEFAULT_AMOUNT,
    DEFAULT_BASE_SIZE,
    DEFAULT_DISPLAY_SIZE,
    DEFAULT_FONT_SIZE,
    DEFAULT_LOGO_WIDTH,
    DISPLAY_SIZE_RANK,
)


def as_number(value: object, default: float) -> float:
    """Return ``value`` as a finite float, or ``default`` when it is missing or malformed."""
    if value is None or isinstance(value, bool):
        return default
    try:
        number = float(value)
    except (TypeError, ValueError):
        return default
    if math.isnan(number) or math.isinf(number):
        return default
    return number


def as_size(value: object, default: float) -> float:
    """Like :func:`as_number` but zero and negative sizes also fall back."""
    number = as_number(value, default)
    return number if number > 0 else default


@dataclass(frozen=True)
class SponsorRecord:
    """
    A sponsor as supplied by the campaign backend.

    Numeric fields may be missing or malformed; the accessor properties apply
    the documented fallbacks so the engine never has to.

    Attributes:
        id: Opaque sponsor identifier.
        name: Sponsor name (text shown in text variants).
        amount: Contribution amount.
        sponsor_type: 'text' or 'logo'.
        display_name: Caption shown under a logo when names and logos are both displayed.
        message: Optional sponsor message.
        position_id: Grid position claimed by the sponsor (grid campaigns only).
        logo_url: Logo location for logo sponsors.
        logo_approval_status: 'pending', 'approved' or 'rejected'.
        payment_status: 'pending', 'paid' or 'failed'.
        calculated_font_size: Precomputed text size in px.
        calculated_logo_width: Precomputed logo width in px.
        display_size: Display tier ('small', 'medium', 'large', 'xlarge').
    """

    id: str
    name: str
    amount: float | None = DEFAULT_AMOUNT
    sponsor_type: str = "text"
    display_name: str | None = None
    message: str | None = None
    position_id: str | None = None
    logo_url: str | None = None
    logo_approval_status: str | None = None
    payment_status: str = "paid"
    calculated_font_size: float | None = None
    calculated_logo_width: float | None = None
    display_size: str = DEFAULT_DISPLAY_SIZE

    @property
    def is_logo(self) -> bool:
        return self.sponsor_type == "logo"

    @property
    def is_approved(self) -> bool:
        return self.logo_approval_status == "approved"

    @property
    def is_pending_payment(self) -> bool:
        return self.payment_status == "pending"

    @property
    def amount_value(self) -> float:
        return as_number(self.amount, DEFAULT_AMOUNT)

    @property
    def font_size(self) -> float:
        return as_size(self.calculated_font_size, DEFAULT_FONT_SIZE)

    @property
    def logo_width(self) -> float:
        return as_size(self.calculated_logo_width, DEFAULT_LOGO_WIDTH)

    @property
    def base_size(self) -> float:
        """Scalar size used to order word-cloud placement (font size, else logo width, else 20)."""
        font_size = as_size(self.calculated_font_size, 0)
        if font_size:
            return font_size
        return as_size(self.calculated_logo_width, DEFAULT_BASE_SIZE)

    @property
    def display_rank(self) -> int:
        return DISPLAY_SIZE_RANK.get(self.display_size, DISPLAY_SIZE_RANK[DEFAULT_DISPLAY_SIZE])

    @property
    def position_number(self) -> int:
        """Numeric value of ``position_id`` (0 when absent or not an integer)."""
        if self.position_id is None:
            return 0
        try:
            return int(str(self.position_id).strip())
        except ValueError:
            return 0


@dataclass(frozen=True)
class Position:
    """One purchasable slot in a grid or section layout."""

    position_id: str
    price: float = 0.0
    is_taken: bool = False
    section: str | None = None
    row: int | None = None
    col: int | None = None


@dataclass(frozen=True)
class LayoutConfig:
    """
    Describes how a campaign's sponsors are arranged.

    Attributes:
        layout_style: 'grid', 'size-ordered', 'amount-ordered' or 'word-cloud' (aliases accepted).
        campaign_type: 'fixed', 'positional' or 'pay-what-you-want'.
        sponsor_display_type: 'text-only', 'logo-only' or 'both'.
        positions: Ordered grid positions, empty for free-form layouts.
        columns: Optional grid column count.
        container_width: Word-cloud container width in px (default applied when None).
        container_height: Word-cloud container height in px (default applied when None).
    """

    layout_style: str = "amount-ordered"
    campaign_type: str = "pay-what-you-want"
    sponsor_display_type: str = "text-only"
    positions: tuple[Position, ...] = ()
    columns: int | None = None
    container_width: float | None = None
    container_height: float | None = None

    @property
    def has_grid(self) -> bool:
        return bool(self.positions)


class Variant(Enum):
    """Visual variant a sponsor is drawn with, resolved once per sponsor."""

    LOGO_WITH_NAME = "logo-with-name"
    LOGO_ONLY = "logo-only"
    TEXT_ONLY = "text-only"
    HIDDEN = "hidden"


class SlotStatus(Enum):
    FILLED = "filled"
    RESERVED = "reserved"
    TAKEN = "taken"
    AVAILABLE = "available"


@dataclass(frozen=True)
class Box:
    """Axis-aligned box with its origin at the top-left corner."""

    x: float
    y: float
    width: float
    height: float

    def overlaps(self, other: Box, padding: float = 0.0) -> bool:
        """Return True when the padded boxes intersect. Symmetric in ``self`` and ``other``."""
        return not (
            self.x + self.width + padding < other.x
            or other.x + other.width + padding < self.x
            or self.y + self.height + padding < other.y
            or other.y + other.height + padding < self.y
        )


@dataclass(frozen=True)
class PlacedSponsor:
    """
    A sponsor with its render footprint and either a grid position or coordinates.

    Grid and flow placements leave ``x``/``y`` as None; word-cloud placements
    leave ``position_id`` as None.
    """

    sponsor: SponsorRecord
    variant: Variant
    width: float
    height: float
    rank: int
    x: float | None = None
    y: float | None = None
    position_id: str | None = None
    fallback: bool = False

    @property
    def dimmed(self) -> bool:
        return self.sponsor.is_pending_payment

    @property
    def box(self) -> Box | None:
        if self.x is None or self.y is None:
            return None
        return Box(self.x, self.y, self.width, self.height)

    def to_dict(self) -> dict[str, object]:
        """Flatten sponsor fields and placement fields into one mapping."""
        return {
            "id": self.sponsor.id,
            "name": self.sponsor.name,
            "display_name": self.sponsor.display_name,
            "amount": self.sponsor.amount_value,
            "sponsor_type": self.sponsor.sponsor_type,
            "payment_status": self.sponsor.payment_status,
            "display_size": self.sponsor.display_size,
            "variant": self.variant.value,
            "rank": self.rank,
            "position_id": self.position_id,
            "x": self.x,
            "y": self.y,
            "width": self.width,
            "height": self.height,
            "dimmed": self.dimmed,
            "fallback": self.fallback,
        }


@dataclass(frozen=True)
class GridSlot:
    position: Position
    status: SlotStatus
    placed: PlacedSponsor | None = None


@dataclass(frozen=True)
class SectionSummary:
    section: str
    price: float
    available: int
    total: int
    slots: tuple[GridSlot, ...] = ()


@dataclass
class LayoutResult:
    """
    Output of one orchestrated render.

    Attributes:
        layout_style: Resolved layout style that produced the result.
        mode: 'grid', 'flow' or 'cloud'.
        placed: Placed sponsors in display (rank) order.
        slots: One slot per grid position ('grid' mode only).
        columns: Column count for grid and flow modes.
        width: Container width for 'cloud' mode.
        height: Container height for 'cloud' mode.
    """

    layout_style: str
    mode: str
    sponsor_display_type: str
    placed: list[PlacedSponsor] = field(default_factory=list)
    slots: list[GridSlot] = field(default_factory=list)
    columns: int | None = None
    width: float | None = None
    height: float | None = None

    @property
    def is_empty(self) -> bool:
        return not self.placed and not self.slots
