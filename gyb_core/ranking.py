"""Ordering policies for each layout style."""

from __future__ import annotations

from collections.abc import Callable, Sequence

from .models import SponsorRecord


def _key_and_direction(campaign_type: str, layout_style: str) -> tuple[Callable[[SponsorRecord], float], bool]:
    """Return (sort key, descending) for a layout style and campaign type."""
    if layout_style == "size-ordered":
        if campaign_type == "fixed":
            return (lambda s: s.position_number), False
        if campaign_type == "positional":
            return (lambda s: s.position_number), True
        return (lambda s: s.display_rank), True
    if layout_style == "word-cloud":
        return (lambda s: s.base_size), True
    return (lambda s: s.amount_value), True


def rank_sponsors(
    sponsors: Sequence[SponsorRecord],
    campaign_type: str,
    layout_style: str,
) -> list[SponsorRecord]:
    """
    Order sponsors by the layout's policy.

    | layout style   | campaign type | key                    | direction  |
    |----------------|---------------|------------------------|------------|
    | amount-ordered | any           | amount                 | descending |
    | size-ordered   | fixed         | numeric position id    | ascending  |
    | size-ordered   | positional    | numeric position id    | descending |
    | size-ordered   | other         | display size tier      | descending |
    | word-cloud     | any           | base size              | descending |

    Any other style ranks by amount. Sorting is stable: equal keys keep their
    input order, including for descending keys.
    """
    key, descending = _key_and_direction(campaign_type, layout_style)
    if descending:
        return sorted(sponsors, key=lambda s: -key(s))
    return sorted(sponsors, key=key)
