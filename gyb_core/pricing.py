"""Position pricing and grid position generation."""

from __future__ import annotations

import math
from dataclasses import dataclass, field

from .constants import VALID_ARRANGEMENTS
from .models import Position


@dataclass(frozen=True)
class PricingConfig:
    """
    Campaign pricing settings.

    ``sections`` maps a section label ('top', 'middle', 'bottom') to its
    per-slot amount; positional campaigns use either ``price_multiplier`` or
    ``base_price`` plus ``price_per_position``.
    """

    fixed_price: float | None = None
    base_price: float | None = None
    price_per_position: float | None = None
    price_multiplier: float | None = None
    sections: dict[str, float] = field(default_factory=dict)


def calculate_position_price(position: int, pricing: PricingConfig, section: str | None = None) -> float:
    """
    Price a position in a positional campaign.

    Section pricing wins when a section is given, then multiplicative
    (``position * price_multiplier``), then additive
    (``base_price + position * price_per_position``).

    Raises:
        ValueError: If the configuration matches no pricing mode or holds negative values.
    """
    if pricing.sections and section:
        if section not in pricing.sections:
            raise ValueError(f"Section configuration not found for {section}")
        return float(pricing.sections[section])

    if pricing.price_multiplier:
        if pricing.price_multiplier <= 0:
            raise ValueError("Invalid pricing config: price_multiplier must be positive")
        return position * pricing.price_multiplier

    if pricing.base_price is not None and pricing.price_per_position is not None:
        if pricing.base_price < 0 or pricing.price_per_position < 0:
            raise ValueError("Invalid pricing config: base_price and price_per_position must be non-negative")
        return pricing.base_price + position * pricing.price_per_position

    raise ValueError(
        "Invalid pricing config for positional pricing: provide sections, price_multiplier, "
        "or base_price with price_per_position"
    )


def _position_price(number: int, campaign_type: str, pricing: PricingConfig) -> float:
    if campaign_type == "fixed" and pricing.fixed_price:
        return float(pricing.fixed_price)
    if campaign_type == "positional":
        return float(calculate_position_price(number, pricing))
    return 0.0


def generate_positions(
    total_positions: int,
    columns: int,
    campaign_type: str,
    pricing: PricingConfig,
    arrangement: str = "horizontal",
) -> list[Position]:
    """
    Build the numbered positions of a grid.

    Horizontal arrangement numbers row by row (1, 2, 3 across the first row);
    vertical arrangement numbers column by column.

    Raises:
        ValueError: For a non-positive column count or an unknown arrangement.
    """
    if columns <= 0:
        raise ValueError("columns must be a positive integer")
    if arrangement not in VALID_ARRANGEMENTS:
        allowed = ", ".join(VALID_ARRANGEMENTS)
        raise ValueError(f"Invalid arrangement '{arrangement}'. Use one of: {allowed}.")
    if total_positions <= 0:
        return []

    rows = math.ceil(total_positions / columns)
    if arrangement == "horizontal":
        cells = [(row, col) for row in range(rows) for col in range(columns)]
    else:
        cells = [(row, col) for col in range(columns) for row in range(rows)]

    positions = []
    for number, (row, col) in enumerate(cells[:total_positions], start=1):
        positions.append(
            Position(
                position_id=str(number),
                price=_position_price(number, campaign_type, pricing),
                row=row + 1,
                col=col + 1,
            )
        )
    return positions
