"""Routing lookup: (primary, secondary) case type to letter template, team and pipeline."""

from __future__ import annotations

from typing import Optional

from lightpoint.models import CaseType, Routing

_COMPLAINTS_TEAM = "HMRC Complaints Team (Tier 1)"
_PENALTY_TEAM = "HMRC Penalty Appeals Team"
_REVIEW_TEAM = "HMRC Statutory Review Team"
_TRIBUNAL = "First-tier Tribunal (Tax Chamber)"

ROUTING_TABLE: dict[tuple[CaseType, Optional[CaseType]], Routing] = {
    (CaseType.COMPLAINT, None): Routing(
        primary_letter_type="complaint",
        recipient_team=_COMPLAINTS_TEAM,
        pipeline="complaint",
    ),
    (CaseType.PENALTY_APPEAL, None): Routing(
        primary_letter_type="penalty_appeal",
        recipient_team=_PENALTY_TEAM,
        pipeline="penalty_appeal",
    ),
    # Mixed: the stronger side (the secondary type) leads
    (CaseType.MIXED, CaseType.COMPLAINT): Routing(
        primary_letter_type="complaint",
        secondary_letter_type="penalty_appeal",
        recipient_team=_COMPLAINTS_TEAM,
        pipeline="complaint",
    ),
    (CaseType.MIXED, CaseType.PENALTY_APPEAL): Routing(
        primary_letter_type="penalty_appeal",
        secondary_letter_type="complaint",
        recipient_team=_PENALTY_TEAM,
        pipeline="penalty_appeal",
    ),
    (CaseType.STATUTORY_REVIEW, None): Routing(
        primary_letter_type="statutory_review",
        recipient_team=_REVIEW_TEAM,
        pipeline="penalty_appeal",
    ),
    (CaseType.STATUTORY_REVIEW, CaseType.COMPLAINT): Routing(
        primary_letter_type="statutory_review",
        secondary_letter_type="complaint",
        recipient_team=_REVIEW_TEAM,
        pipeline="penalty_appeal",
    ),
    (CaseType.TRIBUNAL_APPEAL, None): Routing(
        primary_letter_type="tribunal_notice",
        recipient_team=_TRIBUNAL,
        pipeline="penalty_appeal",
    ),
    (CaseType.TRIBUNAL_APPEAL, CaseType.COMPLAINT): Routing(
        primary_letter_type="tribunal_notice",
        secondary_letter_type="complaint",
        recipient_team=_TRIBUNAL,
        pipeline="penalty_appeal",
    ),
}


def route(primary: CaseType, secondary: Optional[CaseType] = None) -> Routing:
    """Pure lookup. Unknown pairs fall back to the primary type's own row."""
    routing = ROUTING_TABLE.get((primary, secondary))
    if routing is None and primary == CaseType.MIXED:
        routing = ROUTING_TABLE[(CaseType.MIXED, CaseType.COMPLAINT)]
    if routing is None:
        routing = ROUTING_TABLE[(primary, None)]
    return routing.model_copy()
