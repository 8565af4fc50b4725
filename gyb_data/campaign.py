"""Campaign file loading: layout configuration, positions and inline sponsors."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field, replace
from pathlib import Path

import yaml

from gyb_core.constants import VALID_ARRANGEMENTS, VALID_CAMPAIGN_TYPES
from gyb_core.models import LayoutConfig, Position, SponsorRecord, as_number
from gyb_core.pricing import PricingConfig, generate_positions

from .records import normalize_keys, positions_from_records, sponsors_from_records

logger = logging.getLogger("gyb")

CAMPAIGN_KEY_ALIASES = {
    'layoutStyle': 'layout_style',
    'campaignType': 'campaign_type',
    'sponsorDisplayType': 'sponsor_display_type',
    'containerWidth': 'container_width',
    'containerHeight': 'container_height',
    'totalPositions': 'total_positions',
    'fixedPrice': 'fixed_price',
    'basePrice': 'base_price',
    'pricePerPosition': 'price_per_position',
    'priceMultiplier': 'price_multiplier',
}


@dataclass
class Campaign:
    """A campaign file's layout configuration and any sponsors listed inline."""

    name: str
    layout: LayoutConfig
    sponsors: list[SponsorRecord] = field(default_factory=list)


def _normalize(raw: dict) -> dict:
    data = normalize_keys(raw)
    return {CAMPAIGN_KEY_ALIASES.get(key, key): value for key, value in data.items()}


def _optional_positive(value: object, key: str) -> float | None:
    if value is None:
        return None
    number = as_number(value, 0.0)
    if number <= 0:
        raise ValueError(f"layout.{key} must be > 0")
    return number


def parse_pricing(raw: dict | None) -> PricingConfig:
    """Build a PricingConfig from the ``pricing`` mapping of a generated grid."""
    if not raw:
        return PricingConfig()
    if not isinstance(raw, dict):
        raise ValueError("grid.pricing must be a mapping")

    data = _normalize(raw)
    sections = data.get('sections', {}) or {}
    if not isinstance(sections, dict):
        raise ValueError("grid.pricing.sections must be a mapping")

    def number(key: str) -> float | None:
        return float(data[key]) if key in data else None

    return PricingConfig(
        fixed_price=number('fixed_price'),
        base_price=number('base_price'),
        price_per_position=number('price_per_position'),
        price_multiplier=number('price_multiplier'),
        sections={str(name): float(amount) for name, amount in sections.items()},
    )


def build_positions(grid: dict, campaign_type: str) -> list[Position]:
    """Generate numbered positions from a ``grid`` mapping (total_positions, columns, arrangement, pricing)."""
    if not isinstance(grid, dict):
        raise ValueError("grid must be a mapping")

    data = _normalize(grid)
    try:
        total = int(data['total_positions'])
        columns = int(data['columns'])
    except KeyError as exc:
        raise ValueError(f"grid is missing '{exc.args[0]}'") from exc
    except (TypeError, ValueError) as exc:
        raise ValueError("grid.total_positions and grid.columns must be integers") from exc

    arrangement = str(data.get('arrangement', VALID_ARRANGEMENTS[0]))
    return generate_positions(total, columns, campaign_type, parse_pricing(data.get('pricing')), arrangement)


def layout_from_mapping(layout: dict, positions: list[Position] | None = None) -> LayoutConfig:
    """Build a LayoutConfig from the ``layout`` mapping of a campaign file."""
    if not isinstance(layout, dict):
        raise ValueError("layout must be a mapping")

    data = _normalize(layout)
    campaign_type = str(data.get('campaign_type', 'pay-what-you-want')).strip().lower()
    if campaign_type not in VALID_CAMPAIGN_TYPES:
        allowed = ', '.join(VALID_CAMPAIGN_TYPES)
        raise ValueError(f"Invalid layout.campaign_type '{campaign_type}'. Use one of: {allowed}.")

    columns = data.get('columns')
    if columns is not None and (not isinstance(columns, int) or isinstance(columns, bool) or columns <= 0):
        raise ValueError("layout.columns must be a positive integer")

    return LayoutConfig(
        layout_style=str(data.get('layout_style', 'amount-ordered')),
        campaign_type=campaign_type,
        sponsor_display_type=str(data.get('sponsor_display_type', 'text-only')),
        positions=tuple(positions or ()),
        columns=columns,
        container_width=_optional_positive(data.get('container_width'), 'container_width'),
        container_height=_optional_positive(data.get('container_height'), 'container_height'),
    )


def load_campaign(campaign_path: Path) -> Campaign:
    """
    Load a campaign YAML file.

    The file holds a ``layout`` mapping, optionally explicit ``positions``
    or a ``grid`` mapping to generate them, and optionally inline
    ``sponsors``.

    Raises:
        ValueError: If a section has the wrong shape or invalid values.
    """
    campaign_path = Path(campaign_path)
    with open(campaign_path, 'r') as f:
        document = yaml.safe_load(f) or {}
    if not isinstance(document, dict):
        raise ValueError(f"Invalid campaign file {campaign_path}; expected mapping.")

    layout = layout_from_mapping(document.get('layout') or {}, [])

    if document.get('positions') is not None:
        positions = positions_from_records(document['positions'])
    elif document.get('grid') is not None:
        positions = build_positions(document['grid'], layout.campaign_type)
        if layout.columns is None:
            # draw with the column count the positions were numbered with
            layout = replace(layout, columns=int(_normalize(document['grid'])['columns']))
    else:
        positions = []
    layout = replace(layout, positions=tuple(positions))
    sponsors = sponsors_from_records(document.get('sponsors') or [])
    name = str(document.get('name') or campaign_path.stem)

    logger.debug(
        f"Loaded campaign '{name}': {layout.layout_style}, {len(positions)} position(s), "
        f"{len(sponsors)} inline sponsor(s)"
    )
    return Campaign(name=name, layout=layout, sponsors=sponsors)
