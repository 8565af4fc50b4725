"""Conversion of raw sponsor and position records into engine models."""

from __future__ import annotations

import logging
import math
from pathlib import Path

import pandas as pd
import yaml

from gyb_core.constants import DEFAULT_DISPLAY_SIZE, DISPLAY_SIZE_RANK
from gyb_core.models import Position, SponsorRecord, as_number

logger = logging.getLogger("gyb")

# Backend JSON uses camelCase; files written by hand usually use snake_case.
FIELD_ALIASES = {
    '_id': 'id',
    'sponsorId': 'id',
    'displayName': 'display_name',
    'positionId': 'position_id',
    'sponsorType': 'sponsor_type',
    'logoUrl': 'logo_url',
    'logoApprovalStatus': 'logo_approval_status',
    'paymentStatus': 'payment_status',
    'calculatedFontSize': 'calculated_font_size',
    'calculatedLogoWidth': 'calculated_logo_width',
    'displaySize': 'display_size',
    'isTaken': 'is_taken',
}
CSV_STRING_COLUMNS = ('id', '_id', 'position_id', 'positionId', 'name', 'display_name', 'displayName')


def _is_missing(value: object) -> bool:
    if value is None:
        return True
    if isinstance(value, float) and math.isnan(value):
        return True
    return isinstance(value, str) and not value.strip()


def normalize_keys(raw: dict) -> dict:
    """Return a copy of ``raw`` with camelCase keys mapped to snake_case and blanks dropped."""
    normalized = {}
    for key, value in raw.items():
        if _is_missing(value):
            continue
        normalized[FIELD_ALIASES.get(key, key)] = value
    return normalized


def _optional_text(value: object) -> str | None:
    if _is_missing(value):
        return None
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value).strip()


def _optional_size(value: object) -> float | None:
    number = as_number(value, 0.0)
    return number if number > 0 else None


def _flag(value: object) -> bool:
    if isinstance(value, str):
        return value.strip().lower() in ('true', 'yes', '1')
    return bool(value)


def sponsor_from_mapping(raw: dict, index: int = 0) -> SponsorRecord:
    """
    Build a SponsorRecord from a loosely typed mapping.

    Missing or malformed numbers are left for the model's fallbacks (amount
    becomes 0, sizes None), unknown display sizes become 'medium', and a
    missing id is replaced by ``sponsor-<n>``.

    Raises:
        ValueError: If ``raw`` is not a mapping.
    """
    if not isinstance(raw, dict):
        raise ValueError(f"Sponsor record {index + 1} must be a mapping")

    data = normalize_keys(raw)
    sponsor_type = str(data.get('sponsor_type', 'text')).strip().lower()
    if sponsor_type not in ('text', 'logo'):
        logger.debug(f"Unknown sponsor_type '{sponsor_type}' for record {index + 1}; treating as text")
        sponsor_type = 'text'

    display_size = str(data.get('display_size', DEFAULT_DISPLAY_SIZE)).strip().lower()
    if display_size not in DISPLAY_SIZE_RANK:
        display_size = DEFAULT_DISPLAY_SIZE

    return SponsorRecord(
        id=_optional_text(data.get('id')) or f"sponsor-{index + 1}",
        name=_optional_text(data.get('name')) or "",
        amount=as_number(data.get('amount'), 0.0),
        sponsor_type=sponsor_type,
        display_name=_optional_text(data.get('display_name')),
        message=_optional_text(data.get('message')),
        position_id=_optional_text(data.get('position_id')),
        logo_url=_optional_text(data.get('logo_url')),
        logo_approval_status=_optional_text(data.get('logo_approval_status')),
        payment_status=(_optional_text(data.get('payment_status')) or 'paid').lower(),
        calculated_font_size=_optional_size(data.get('calculated_font_size')),
        calculated_logo_width=_optional_size(data.get('calculated_logo_width')),
        display_size=display_size,
    )


def position_from_mapping(raw: dict, index: int = 0) -> Position:
    """Build a Position; the id defaults to the 1-based index."""
    if not isinstance(raw, dict):
        raise ValueError(f"Position record {index + 1} must be a mapping")

    data = normalize_keys(raw)
    row = as_number(data.get('row'), 0.0)
    col = as_number(data.get('col'), 0.0)
    return Position(
        position_id=_optional_text(data.get('position_id')) or str(index + 1),
        price=as_number(data.get('price'), 0.0),
        is_taken=_flag(data.get('is_taken', False)),
        section=_optional_text(data.get('section')),
        row=int(row) if row > 0 else None,
        col=int(col) if col > 0 else None,
    )


def sponsors_from_records(records: list) -> list[SponsorRecord]:
    if not isinstance(records, list):
        raise ValueError("Sponsors must be a list of records")
    return [sponsor_from_mapping(raw, index) for index, raw in enumerate(records)]


def positions_from_records(records: list) -> list[Position]:
    if not isinstance(records, list):
        raise ValueError("Positions must be a list of records")
    return [position_from_mapping(raw, index) for index, raw in enumerate(records)]


def read_sponsors_csv(csv_path: Path) -> pd.DataFrame:
    """Read a sponsor table, keeping identifier columns as text."""
    header = pd.read_csv(csv_path, nrows=0)
    dtypes = {column: str for column in CSV_STRING_COLUMNS if column in header.columns}
    return pd.read_csv(csv_path, dtype=dtypes)


def load_sponsors(path: Path) -> list[SponsorRecord]:
    """
    Load sponsor records from a CSV or YAML file.

    YAML files hold either a list of records or a mapping with a
    ``sponsors`` list.

    Args:
        path: Path to a .csv, .yaml or .yml file.

    Returns:
        list[SponsorRecord]: Sponsors in file order.
    """
    path = Path(path)
    suffix = path.suffix.lower()
    if suffix == '.csv':
        df = read_sponsors_csv(path)
        records = df.to_dict(orient='records')
    elif suffix in ('.yaml', '.yml'):
        with open(path, 'r') as f:
            document = yaml.safe_load(f) or []
        records = document.get('sponsors', []) if isinstance(document, dict) else document
    else:
        raise ValueError(f"Unsupported sponsor file type '{path.suffix}'; use .csv, .yaml or .yml")

    sponsors = sponsors_from_records(records)
    logger.debug(f"Loaded {len(sponsors)} sponsor(s) from {path}")
    return sponsors
