from __future__ import annotations

from collections.abc import Iterator, Sequence
from contextlib import contextmanager
from dataclasses import dataclass, field
import logging
from threading import Event, Lock
from time import perf_counter
from typing import Any

from timetabler.core.exceptions import (
    AllocationBusyError,
    AllocationCancelledError,
    AlreadyScheduledError,
    NoSlotAvailableError,
    ResourceExhaustionError,
    ResourceNotFoundError,
)
from timetabler.models.schedule_entry import ScheduleEntry
from timetabler.schemas.allocation import AllocationPolicy
from timetabler.services.allocation.domain import (
    CourseSpec,
    PlannedEntry,
    Schedule,
    Slot,
    UnallocatedCourse,
    VenueSpec,
)
from timetabler.services.allocation.events import (
    ENTRY_CREATED,
    ENTRY_REMOVED,
    SCHEDULE_GENERATED,
    EventPublisher,
    NullEventPublisher,
)
from timetabler.services.allocation.repositories import CourseRepository, ScheduleRepository, VenueRepository
from timetabler.services.allocation.search import SlotSearchEngine

logger = logging.getLogger(__name__)

# One schedule per process: every run that persists entries takes this lock.
schedule_lock = Lock()


@dataclass
class GenerationResult:
    generated: list[ScheduleEntry] = field(default_factory=list)
    unallocated: list[UnallocatedCourse] = field(default_factory=list)

    @property
    def message(self) -> str:
        if self.unallocated:
            codes = ", ".join(item.course.code for item in self.unallocated)
            return f"Completed with conflicts: {codes}"
        return "Timetable generated successfully"


def sort_by_demand(courses: Sequence[CourseSpec]) -> list[CourseSpec]:
    # sorted() is stable, so equal demand keeps repository order.
    return sorted(courses, key=lambda course: -course.expected_students)


def plan_entry(course: CourseSpec, slot: Slot) -> PlannedEntry:
    return PlannedEntry(
        course_id=course.id,
        venue_id=slot.venue.id,
        lecturer_id=course.lecturer.id,
        day=slot.day,
        start_time=slot.time,
        end_time=slot.time + course.duration_hours,
    )


class AllocationOrchestrator:
    """Drive the greedy allocation pass.

    The orchestrator is the only owner of a mutable schedule; feasibility and
    scoring only ever see immutable snapshots of it. Runs that write to the
    schedule store are serialized through ``lock``.
    """

    def __init__(
        self,
        *,
        courses: CourseRepository,
        venues: VenueRepository,
        schedule: ScheduleRepository,
        policy: AllocationPolicy,
        publisher: EventPublisher | None = None,
        lock: Lock | None = None,
        lock_timeout_seconds: float = 30.0,
    ) -> None:
        self.courses = courses
        self.venues = venues
        self.schedule = schedule
        self.policy = policy
        self.publisher = publisher or NullEventPublisher()
        self.lock = lock if lock is not None else schedule_lock
        self.lock_timeout_seconds = lock_timeout_seconds
        self.search_engine = SlotSearchEngine(policy)

    @contextmanager
    def _serialized(self, operation: str) -> Iterator[None]:
        if not self.lock.acquire(timeout=self.lock_timeout_seconds):
            raise AllocationBusyError(
                "Another allocation run is in progress",
                details={"operation": operation},
            )
        try:
            yield
        finally:
            self.lock.release()

    def _publish(self, event_name: str, payload: dict[str, Any]) -> None:
        try:
            self.publisher.publish(event_name, payload)
        except Exception:
            logger.debug("Event publication failed for %s", event_name, exc_info=True)

    def plan(
        self,
        courses: Sequence[CourseSpec],
        venues: Sequence[VenueSpec],
        cancel_event: Event | None = None,
    ) -> tuple[list[PlannedEntry], list[UnallocatedCourse]]:
        """Run the in-memory greedy pass without touching persistence."""
        planned: list[PlannedEntry] = []
        unallocated: list[UnallocatedCourse] = []
        for course in sort_by_demand(courses):
            if cancel_event is not None and cancel_event.is_set():
                raise AllocationCancelledError(
                    "Allocation run cancelled",
                    details={"processed": len(planned) + len(unallocated)},
                )
            outcome = self.search_engine.search(
                course,
                self.policy.days,
                self.policy.time_slots,
                venues,
                tuple(planned),
            )
            if outcome.slot is None:
                rejections = outcome.rejection_summary()
                logger.warning("Course unallocated | code=%s | rejections=%s", course.code, rejections)
                unallocated.append(UnallocatedCourse(course=course, rejections=rejections))
                continue
            planned.append(plan_entry(course, outcome.slot))
        return planned, unallocated

    def bulk_generate(self, cancel_event: Event | None = None) -> GenerationResult:
        with self._serialized("bulk_generate"):
            started = perf_counter()
            courses = self.courses.find_all_with_lecturer()
            venues = self.venues.find_all()
            logger.info("ALLOCATION RUN START | courses=%s | venues=%s", len(courses), len(venues))
            try:
                planned, unallocated = self.plan(courses, venues, cancel_event)
                # Clearing and inserting share one transaction; a failed run keeps the old schedule.
                self.schedule.delete_all()
                generated = self.schedule.insert_many(planned)
            except Exception:
                logger.exception(
                    "ALLOCATION RUN FAILED | courses=%s | runtime_ms=%s",
                    len(courses),
                    int((perf_counter() - started) * 1000),
                )
                raise

            result = GenerationResult(generated=generated, unallocated=unallocated)
            logger.info(
                "ALLOCATION RUN COMPLETE | allocated=%s | unallocated=%s | runtime_ms=%s",
                len(generated),
                len(unallocated),
                int((perf_counter() - started) * 1000),
            )
        self._publish(
            SCHEDULE_GENERATED,
            {
                "allocated": len(result.generated),
                "unallocated": [item.course.code for item in result.unallocated],
                "message": result.message,
            },
        )
        return result

    def _resolve_course(self, course_id: str) -> CourseSpec:
        course = self.courses.find_by_id(course_id)
        if course is None:
            raise ResourceNotFoundError("Course", course_id)
        return course

    def _place(self, course: CourseSpec, existing_schedule: Schedule) -> PlannedEntry:
        venues = self.venues.find_all()
        if not venues:
            raise ResourceExhaustionError("No venues available for allocation")
        outcome = self.search_engine.search(
            course,
            self.policy.days,
            self.policy.time_slots,
            venues,
            existing_schedule,
        )
        if outcome.slot is None:
            raise NoSlotAvailableError(course.code, outcome.rejection_summary())
        return plan_entry(course, outcome.slot)

    def allocate_single(self, course_id: str, existing_schedule: Sequence[PlannedEntry]) -> PlannedEntry:
        """Place one course against ``existing_schedule``; the caller persists it."""
        course = self._resolve_course(course_id)
        return self._place(course, tuple(existing_schedule))

    def allocate_and_commit(self, course_id: str) -> ScheduleEntry:
        with self._serialized("allocate_single"):
            course = self._resolve_course(course_id)
            existing = tuple(self.schedule.find_all())
            if any(entry.course_id == course.id for entry in existing):
                raise AlreadyScheduledError(course.code)
            planned = self._place(course, existing)
            (record,) = self.schedule.insert_many([planned])
            logger.info(
                "Course allocated | code=%s | day=%s | start=%s | venue_id=%s",
                course.code,
                planned.day,
                planned.start_time,
                planned.venue_id,
            )
        self._publish(
            ENTRY_CREATED,
            {
                "entry_id": record.id,
                "course_id": planned.course_id,
                "course_code": course.code,
                "venue_id": planned.venue_id,
                "day": planned.day,
                "start_time": planned.start_time,
                "end_time": planned.end_time,
            },
        )
        return record

    def deallocate(self, entry_id: str) -> None:
        with self._serialized("deallocate"):
            if not self.schedule.delete(entry_id):
                raise ResourceNotFoundError("Schedule entry", entry_id)
            logger.info("Schedule entry removed | entry_id=%s", entry_id)
        self._publish(ENTRY_REMOVED, {"entry_id": entry_id})
