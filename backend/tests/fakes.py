"""In-memory stand-ins for the allocation repositories and event publisher."""
from __future__ import annotations

import itertools

from timetabler.core.exceptions import PersistenceError
from timetabler.models.schedule_entry import ScheduleEntry
from timetabler.models.venue import VenueType
from timetabler.services.allocation.domain import CourseSpec, LecturerSpec, PlannedEntry, VenueSpec


def make_lecturer(lecturer_id="lec-1", days=(), times=()):
    return LecturerSpec(
        id=lecturer_id,
        name=f"Lecturer {lecturer_id}",
        preferred_days=frozenset(days),
        preferred_times=frozenset(times),
    )


def make_course(
    course_id="c-1",
    *,
    students=30,
    duration=2,
    resources=(),
    venue_type=None,
    lecturer=None,
    code=None,
):
    return CourseSpec(
        id=course_id,
        code=code or course_id.upper(),
        title=f"Course {course_id}",
        expected_students=students,
        duration_hours=duration,
        required_resources=frozenset(resources),
        required_venue_type=venue_type,
        lecturer=lecturer,
    )


def make_venue(venue_id="v-1", *, capacity=100, venue_type=VenueType.lecture_hall, resources=()):
    return VenueSpec(
        id=venue_id,
        name=f"Venue {venue_id}",
        capacity=capacity,
        type=venue_type,
        resources=frozenset(resources),
    )


def make_entry(*, course_id="x", venue_id="v-1", lecturer_id="lec-1", day="Monday", start=8, end=10):
    return PlannedEntry(
        course_id=course_id,
        venue_id=venue_id,
        lecturer_id=lecturer_id,
        day=day,
        start_time=start,
        end_time=end,
    )


class InMemoryCourseRepository:
    def __init__(self, courses):
        self.courses = list(courses)

    def find_all_with_lecturer(self):
        return list(self.courses)

    def find_by_id(self, course_id):
        return next((course for course in self.courses if course.id == course_id), None)


class InMemoryVenueRepository:
    def __init__(self, venues):
        self.venues = list(venues)

    def find_all(self):
        return list(self.venues)


class InMemoryScheduleRepository:
    def __init__(self, entries=(), *, fail_on_insert=False):
        self._ids = itertools.count(1)
        self.records: list[ScheduleEntry] = [self._record(entry) for entry in entries]
        self.fail_on_insert = fail_on_insert
        self.delete_all_calls = 0
        self._pending_clear = False

    def _record(self, entry):
        return ScheduleEntry(
            id=f"entry-{next(self._ids)}",
            course_id=entry.course_id,
            venue_id=entry.venue_id,
            lecturer_id=entry.lecturer_id,
            day=entry.day,
            start_time=entry.start_time,
            end_time=entry.end_time,
        )

    def delete_all(self):
        self.delete_all_calls += 1
        self._pending_clear = True

    def insert_many(self, entries):
        if self.fail_on_insert:
            self._pending_clear = False
            raise PersistenceError("Unable to persist the schedule")
        if self._pending_clear:
            self.records = []
            self._pending_clear = False
        created = [self._record(entry) for entry in entries]
        self.records.extend(created)
        return created

    def find_all(self):
        return [
            PlannedEntry(
                course_id=record.course_id,
                venue_id=record.venue_id,
                lecturer_id=record.lecturer_id,
                day=record.day,
                start_time=record.start_time,
                end_time=record.end_time,
            )
            for record in self.records
        ]

    def delete(self, entry_id):
        before = len(self.records)
        self.records = [record for record in self.records if record.id != entry_id]
        return len(self.records) != before


class RecordingPublisher:
    def __init__(self):
        self.events = []

    def publish(self, event_name, payload):
        self.events.append((event_name, payload))

    @property
    def names(self):
        return [name for name, _ in self.events]
