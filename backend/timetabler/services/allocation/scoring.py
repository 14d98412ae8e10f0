from __future__ import annotations

from timetabler.schemas.allocation import ScoreWeights
from timetabler.services.allocation.domain import CourseSpec, Schedule, VenueSpec


def compute_score(
    course: CourseSpec,
    venue: VenueSpec,
    day: str,
    time: int,
    schedule: Schedule,
    weights: ScoreWeights,
) -> float:
    """Rank a feasible candidate; higher is better.

    Every term is always applied. Capacity feasibility guarantees the
    utilization ratio stays within ``[0, 1]``.
    """
    score = 0.0

    lecturer = course.lecturer
    if lecturer is not None:
        if time in lecturer.preferred_times:
            score += weights.time_preference
        if day in lecturer.preferred_days:
            score += weights.day_preference

    score += (course.expected_students / venue.capacity) * weights.utilization

    if venue.resources and not course.required_resources:
        score += weights.resource_waste

    crowding = sum(1 for entry in schedule if entry.day == day and entry.start_time == time)
    score += crowding * weights.slot_crowding

    same_day_usage = sum(1 for entry in schedule if entry.day == day and entry.venue_id == venue.id)
    score += same_day_usage * weights.venue_same_day

    return score
