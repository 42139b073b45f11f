"""
Approval routing for new submissions.

Decides, from the ministry text a submitter typed, whether the
announcement waits for a coordinator or goes straight to the
communications team.
"""

from dataclasses import dataclass
from typing import Callable, Optional

from portal.core.logging import get_logger
from portal.services.ministry.ministry_directory import MinistryEntry

logger = get_logger(__name__)

MinistryLookup = Callable[[str], Optional[MinistryEntry]]


@dataclass(frozen=True)
class RoutingDecision:
    requires_approval: bool
    ministry_id: Optional[str] = None
    ministry_name: Optional[str] = None
    approval_coordinator: Optional[str] = None
    needs_editorial_review: bool = False


UNRESOLVED = RoutingDecision(requires_approval=False, needs_editorial_review=True)


def route(ministry_text: Optional[str], ministry_lookup: MinistryLookup) -> RoutingDecision:
    """
    Route a submission by its ministry.

    Args:
        ministry_text: Free-text ministry from the intake form
        ministry_lookup: Resolves trimmed text to an active ministry or None

    Returns:
        RoutingDecision. Unknown, blank or unresolvable ministries never
        block a submission: they publish without approval and are flagged
        for editorial review.
    """
    text = " ".join((ministry_text or "").split())
    if not text:
        return UNRESOLVED

    try:
        entry = ministry_lookup(text)
    except Exception:
        logger.warning(
            f"Ministry lookup failed for '{text}', routing without approval",
            exc_info=True,
        )
        return UNRESOLVED

    if entry is None:
        logger.info(f"Ministry '{text}' not in directory, flagged for editorial review")
        return UNRESOLVED

    if entry.requires_approval:
        return RoutingDecision(
            requires_approval=True,
            ministry_id=entry.id,
            ministry_name=entry.name,
            approval_coordinator=entry.approval_coordinator,
        )
    return RoutingDecision(requires_approval=False, ministry_id=entry.id, ministry_name=entry.name)
