from __future__ import annotations

from collections import Counter
from collections.abc import Sequence
from dataclasses import dataclass, field
import logging

from timetabler.schemas.allocation import AllocationPolicy
from timetabler.services.allocation.domain import CourseSpec, RejectionReason, Schedule, Slot, VenueSpec
from timetabler.services.allocation.feasibility import check_feasibility
from timetabler.services.allocation.scoring import compute_score

logger = logging.getLogger(__name__)


@dataclass
class SearchOutcome:
    slot: Slot | None = None
    score: float | None = None
    rejections: Counter[RejectionReason] = field(default_factory=Counter)

    def rejection_summary(self) -> dict[str, int]:
        return {reason.value: count for reason, count in sorted(self.rejections.items(), key=lambda item: item[0].value)}


class SlotSearchEngine:
    """Exhaustive search over ``days x time_slots x venues`` for one course.

    Candidates are visited with days outermost and venues innermost. Only a
    strictly higher score replaces the current best, so the earliest candidate
    in that order wins ties.
    """

    def __init__(self, policy: AllocationPolicy) -> None:
        self.policy = policy

    def search(
        self,
        course: CourseSpec,
        days: Sequence[str],
        time_slots: Sequence[int],
        venues: Sequence[VenueSpec],
        schedule: Schedule,
    ) -> SearchOutcome:
        outcome = SearchOutcome()
        for day in days:
            for time in time_slots:
                for venue in venues:
                    reason = check_feasibility(course, venue, day, time, schedule, self.policy)
                    if reason is not None:
                        outcome.rejections[reason] += 1
                        continue
                    score = compute_score(course, venue, day, time, schedule, self.policy.weights)
                    if outcome.score is None or score > outcome.score:
                        outcome.score = score
                        outcome.slot = Slot(venue=venue, day=day, time=time)

        if outcome.slot is not None:
            logger.debug(
                "Best slot for %s | day=%s | time=%s | venue=%s | score=%.2f",
                course.code,
                outcome.slot.day,
                outcome.slot.time,
                outcome.slot.venue.name,
                outcome.score,
            )
        return outcome

    def find_best_slot(
        self,
        course: CourseSpec,
        days: Sequence[str],
        time_slots: Sequence[int],
        venues: Sequence[VenueSpec],
        schedule: Schedule,
    ) -> Slot | None:
        return self.search(course, days, time_slots, venues, schedule).slot
