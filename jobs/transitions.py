"""Application status transitions and job post capacity accounting.

Everything here is pure: callers pass the stored values in and persist the
returned ``TransitionPlan`` themselves (see ``jobs.store``). Only a change
into ``SHORTLISTED`` takes a position and only ``SHORTLISTED -> REJECTED``
gives one back; every other move leaves ``positions_filled`` alone.
"""

from __future__ import annotations

from dataclasses import dataclass

from .constants import ApplicationStatus, JobPostStatus
from .exceptions import CapacityExceeded, InvalidRequest


@dataclass(frozen=True)
class TransitionPlan:
    previous_status: str
    requested_status: str
    delta: int
    positions_filled: int
    post_status: str

    @property
    def changes_status(self) -> bool:
        return self.previous_status != self.requested_status


def parse_status(value) -> ApplicationStatus:
    """Map raw request input onto an ``ApplicationStatus`` or raise ``InvalidRequest``."""
    if not isinstance(value, str) or not value.strip():
        raise InvalidRequest("Status required")
    try:
        return ApplicationStatus(value.strip().upper())
    except ValueError:
        raise InvalidRequest(f"Unknown application status: {value}") from None


def capacity_delta(previous: str, requested: str) -> int:
    if requested == ApplicationStatus.SHORTLISTED and previous != ApplicationStatus.SHORTLISTED:
        return 1
    if previous == ApplicationStatus.SHORTLISTED and requested == ApplicationStatus.REJECTED:
        return -1
    return 0


def derive_post_status(current: str, positions_filled: int, positions_available: int) -> str:
    # CLOSED only changes through an explicit reopen.
    if current == JobPostStatus.CLOSED:
        return JobPostStatus.CLOSED
    if positions_filled >= positions_available:
        return JobPostStatus.FILLED
    if current == JobPostStatus.FILLED:
        return JobPostStatus.OPEN
    return current


def plan_transition(
    previous: str,
    requested: str,
    *,
    positions_filled: int,
    positions_available: int,
    post_status: str,
) -> TransitionPlan:
    """Work out the new capacity and post status for one application move.

    Raises ``CapacityExceeded`` when a shortlist has no free position left.
    """
    delta = capacity_delta(previous, requested)
    if delta > 0 and positions_filled >= positions_available:
        raise CapacityExceeded()

    filled = max(0, positions_filled + delta)
    return TransitionPlan(
        previous_status=previous,
        requested_status=requested,
        delta=delta,
        positions_filled=filled,
        post_status=derive_post_status(post_status, filled, positions_available),
    )
