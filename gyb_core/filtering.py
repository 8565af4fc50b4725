"""Sponsor eligibility rules applied before ranking and placement."""

from __future__ import annotations

import logging
from collections.abc import Iterable

from .models import SponsorRecord

logger = logging.getLogger("gyb")


def requires_approved_logo(sponsor: SponsorRecord, display_type: str) -> bool:
    """Return True when the sponsor is a logo that cannot be shown yet in this display mode."""
    if display_type == "text-only":
        return False
    return sponsor.is_logo and not sponsor.is_approved


def is_payment_eligible(sponsor: SponsorRecord, include_pending: bool = True) -> bool:
    if sponsor.payment_status == "paid":
        return True
    return include_pending and sponsor.payment_status == "pending"


def filter_sponsors(
    sponsors: Iterable[SponsorRecord],
    display_type: str,
    include_pending: bool = True,
) -> list[SponsorRecord]:
    """
    Remove sponsors that should not currently be displayed.

    Logo sponsors are dropped unless approved whenever logos are displayed
    ('logo-only' or 'both'); in 'text-only' mode approval is ignored. Failed
    payments are always dropped, pending payments only when
    ``include_pending`` is False.

    Args:
        sponsors: Sponsor records in input order.
        display_type: Campaign sponsor display type.
        include_pending: Keep sponsors whose payment is still pending.

    Returns:
        list[SponsorRecord]: Eligible sponsors, input order preserved.
    """
    kept: list[SponsorRecord] = []
    dropped_logos = 0
    dropped_payments = 0
    for sponsor in sponsors:
        if not is_payment_eligible(sponsor, include_pending):
            dropped_payments += 1
            continue
        if requires_approved_logo(sponsor, display_type):
            dropped_logos += 1
            continue
        kept.append(sponsor)

    if dropped_logos or dropped_payments:
        logger.debug(
            "Filtered sponsors: kept %d, dropped %d unapproved logo(s) and %d by payment status",
            len(kept),
            dropped_logos,
            dropped_payments,
        )
    return kept
