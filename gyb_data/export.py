"""Tabular export of layout results."""

from __future__ import annotations

import logging
from pathlib import Path

import pandas as pd

from gyb_core.models import LayoutResult

logger = logging.getLogger("gyb")

PLACEMENT_COLUMNS = [
    'rank',
    'id',
    'name',
    'display_name',
    'amount',
    'sponsor_type',
    'payment_status',
    'display_size',
    'variant',
    'position_id',
    'x',
    'y',
    'width',
    'height',
    'dimmed',
    'fallback',
]
SLOT_COLUMNS = ['position_id', 'section', 'price', 'status', 'sponsor_id', 'sponsor_name']


def placements_to_frame(result: LayoutResult) -> pd.DataFrame:
    """Return one row per placed sponsor, in display order."""
    rows = [placed.to_dict() for placed in result.placed]
    return pd.DataFrame(rows, columns=PLACEMENT_COLUMNS)


def slots_to_frame(result: LayoutResult) -> pd.DataFrame:
    """Return one row per grid slot (empty for flow and cloud layouts)."""
    rows = []
    for slot in result.slots:
        sponsor = slot.placed.sponsor if slot.placed is not None else None
        rows.append({
            'position_id': slot.position.position_id,
            'section': slot.position.section,
            'price': slot.position.price,
            'status': slot.status.value,
            'sponsor_id': sponsor.id if sponsor else None,
            'sponsor_name': sponsor.name if sponsor else None,
        })
    return pd.DataFrame(rows, columns=SLOT_COLUMNS)


def export_placements(result: LayoutResult, out_file: Path) -> Path:
    """Write placements (or grid slots, for grid results) to CSV and return the path."""
    out_file = Path(out_file)
    out_file.parent.mkdir(parents=True, exist_ok=True)
    df = slots_to_frame(result) if result.mode == 'grid' else placements_to_frame(result)
    df.to_csv(out_file, index=False)
    logger.info(f"Wrote {len(df)} row(s) to {out_file}")
    return out_file
