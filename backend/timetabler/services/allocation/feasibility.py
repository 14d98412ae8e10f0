"""Hard-constraint checks for a single (course, venue, day, time) candidate."""
from __future__ import annotations

from timetabler.schemas.allocation import AllocationPolicy
from timetabler.services.allocation.domain import (
    CourseSpec,
    PlannedEntry,
    RejectionReason,
    Schedule,
    VenueSpec,
)


def _same_day(schedule: Schedule, day: str) -> list[PlannedEntry]:
    return [entry for entry in schedule if entry.day == day]


def check_feasibility(
    course: CourseSpec,
    venue: VenueSpec,
    day: str,
    time: int,
    schedule: Schedule,
    policy: AllocationPolicy,
) -> RejectionReason | None:
    """Return the first rule the candidate breaks, or ``None`` when it is legal.

    Rules are evaluated in a fixed order and the first failure wins, so the
    reason reported for a candidate is stable across runs.
    """
    if course.expected_students > venue.capacity:
        return RejectionReason.capacity

    end = time + course.duration_hours
    if time < policy.day_start_hour or end > policy.day_end_hour:
        return RejectionReason.working_hours

    if course.required_venue_type is not None and course.required_venue_type != venue.type:
        return RejectionReason.venue_type

    if not course.required_resources <= venue.resources:
        return RejectionReason.resources

    day_entries = _same_day(schedule, day)
    if any(entry.venue_id == venue.id and entry.overlaps(time, end) for entry in day_entries):
        return RejectionReason.venue_busy

    if course.lecturer is None:
        return RejectionReason.missing_lecturer

    lecturer_entries = [entry for entry in day_entries if entry.lecturer_id == course.lecturer.id]
    if any(entry.overlaps(time, end) for entry in lecturer_entries):
        return RejectionReason.lecturer_busy

    if policy.enforce_lecturer_break and any(entry.adjoins(time, end) for entry in lecturer_entries):
        return RejectionReason.lecturer_break

    return None


def is_feasible(
    course: CourseSpec,
    venue: VenueSpec,
    day: str,
    time: int,
    schedule: Schedule,
    policy: AllocationPolicy,
) -> bool:
    return check_feasibility(course, venue, day, time, schedule, policy) is None
