"""Grid shape helpers and sponsor-to-position assignment."""

from __future__ import annotations

import logging
import math
from collections.abc import Iterable, Sequence

from .models import GridSlot, PlacedSponsor, Position, SectionSummary, SlotStatus, SponsorRecord

logger = logging.getLogger("gyb")


def calculate_grid_layout(num_cells: int, columns: int | None = None, max_cols: int = 4) -> tuple[int, int]:
    """
    Calculate the (rows, columns) used to draw grid cells or flow cards.

    Args:
        num_cells: Number of cells to arrange.
        columns: Fixed column count; derived from ``num_cells`` when None.
        max_cols: Upper bound for derived column counts (default 4).

    Returns:
        tuple[int, int]: (num_rows, num_cols), never smaller than (1, 1).
    """
    if columns is not None and columns > 0:
        num_cols = columns
    elif num_cells <= 0:
        return (1, 1)
    else:
        num_cols = max(1, min(max_cols, math.ceil(math.sqrt(num_cells))))

    num_rows = max(1, math.ceil(num_cells / num_cols))
    return (num_rows, num_cols)


def assign_positions(
    ranked_sponsors: Sequence[SponsorRecord],
    positions: Sequence[Position],
) -> dict[str, SponsorRecord]:
    """
    Map the i-th ranked sponsor to the i-th position.

    Positions are taken in enumeration order (sections included, in the order
    they appear). Sponsors beyond the last position are not assigned.

    Returns:
        dict[str, SponsorRecord]: position id to sponsor, in position order.
    """
    filled = min(len(ranked_sponsors), len(positions))
    if len(ranked_sponsors) > len(positions):
        logger.debug(
            "Dropping %d sponsor(s) beyond the %d available position(s)",
            len(ranked_sponsors) - len(positions),
            len(positions),
        )
    return {positions[i].position_id: ranked_sponsors[i] for i in range(filled)}


def assign_by_position_id(
    sponsors: Iterable[SponsorRecord],
    positions: Sequence[Position],
) -> dict[str, SponsorRecord]:
    """
    Match sponsors to the positions they claimed through ``position_id``.

    Ids are compared as strings. Sponsors without a matching position are
    skipped; when two sponsors claim one position the first keeps it.

    Returns:
        dict[str, SponsorRecord]: position id to sponsor, in position order.
    """
    claims: dict[str, SponsorRecord] = {}
    for sponsor in sponsors:
        if sponsor.position_id is None:
            continue
        key = str(sponsor.position_id).strip()
        if key in claims:
            logger.debug(f"Position {key} already claimed; ignoring sponsor {sponsor.id}")
            continue
        claims[key] = sponsor

    assigned: dict[str, SponsorRecord] = {}
    for position in positions:
        key = str(position.position_id)
        if key in claims:
            assigned[key] = claims.pop(key)

    if claims:
        logger.debug(f"Ignoring {len(claims)} sponsor(s) whose position id matches no position")
    return assigned


def build_slots(
    positions: Sequence[Position],
    placements: dict[str, PlacedSponsor],
    reserved_ids: Iterable[str] = (),
) -> list[GridSlot]:
    """
    Resolve the display status of every position.

    A position is filled when it has a placement, reserved when its sponsor
    is held back pending logo approval, taken when marked taken without a
    displayable sponsor, and available otherwise.
    """
    reserved = {str(position_id) for position_id in reserved_ids}
    slots = []
    for position in positions:
        key = str(position.position_id)
        placed = placements.get(key)
        if placed is not None:
            slots.append(GridSlot(position, SlotStatus.FILLED, placed))
        elif key in reserved:
            slots.append(GridSlot(position, SlotStatus.RESERVED))
        elif position.is_taken:
            slots.append(GridSlot(position, SlotStatus.TAKEN))
        else:
            slots.append(GridSlot(position, SlotStatus.AVAILABLE))
    return slots


def group_sections(slots: Sequence[GridSlot]) -> list[SectionSummary]:
    """
    Group slots by section label in order of first appearance.

    Each summary reports the first slot's price and how many of its slots are
    still available. Slots without a section are grouped under ''.
    """
    grouped: dict[str, list[GridSlot]] = {}
    for slot in slots:
        grouped.setdefault(slot.position.section or "", []).append(slot)

    summaries = []
    for section, section_slots in grouped.items():
        available = sum(1 for slot in section_slots if slot.status is SlotStatus.AVAILABLE)
        summaries.append(
            SectionSummary(
                section=section,
                price=section_slots[0].position.price,
                available=available,
                total=len(section_slots),
                slots=tuple(section_slots),
            )
        )
    return summaries
