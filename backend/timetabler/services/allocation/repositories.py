from __future__ import annotations

from collections.abc import Sequence
import logging
from typing import Protocol

from sqlalchemy import delete, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from timetabler.core.exceptions import PersistenceError
from timetabler.models.course import Course
from timetabler.models.lecturer import Lecturer
from timetabler.models.schedule_entry import ScheduleEntry
from timetabler.models.venue import Venue
from timetabler.services.allocation.domain import CourseSpec, LecturerSpec, PlannedEntry, VenueSpec

logger = logging.getLogger(__name__)


class CourseRepository(Protocol):
    def find_all_with_lecturer(self) -> list[CourseSpec]: ...

    def find_by_id(self, course_id: str) -> CourseSpec | None: ...


class VenueRepository(Protocol):
    def find_all(self) -> list[VenueSpec]: ...


class ScheduleRepository(Protocol):
    def delete_all(self) -> None: ...

    def insert_many(self, entries: Sequence[PlannedEntry]) -> list[ScheduleEntry]: ...

    def find_all(self) -> list[PlannedEntry]: ...

    def delete(self, entry_id: str) -> bool: ...


def lecturer_to_spec(lecturer: Lecturer) -> LecturerSpec:
    return LecturerSpec(
        id=lecturer.id,
        name=lecturer.name,
        preferred_days=frozenset(lecturer.preferred_days or []),
        preferred_times=frozenset(int(item) for item in lecturer.preferred_times or []),
    )


def course_to_spec(course: Course, lecturer: Lecturer | None) -> CourseSpec:
    return CourseSpec(
        id=course.id,
        code=course.code,
        title=course.title,
        expected_students=course.expected_students,
        duration_hours=course.duration_hours,
        required_resources=frozenset(course.required_resources or []),
        required_venue_type=course.required_venue_type,
        lecturer=lecturer_to_spec(lecturer) if lecturer is not None else None,
    )


def venue_to_spec(venue: Venue) -> VenueSpec:
    return VenueSpec(
        id=venue.id,
        name=venue.name,
        capacity=venue.capacity,
        type=venue.type,
        resources=frozenset(venue.resources or []),
    )


def entry_to_planned(entry: ScheduleEntry) -> PlannedEntry:
    return PlannedEntry(
        course_id=entry.course_id,
        venue_id=entry.venue_id,
        lecturer_id=entry.lecturer_id,
        day=entry.day,
        start_time=entry.start_time,
        end_time=entry.end_time,
    )


class SqlCourseRepository:
    def __init__(self, db: Session) -> None:
        self.db = db

    def find_all_with_lecturer(self) -> list[CourseSpec]:
        try:
            courses = list(self.db.execute(select(Course).order_by(Course.created_at, Course.code)).scalars())
            lecturer_ids = {course.lecturer_id for course in courses if course.lecturer_id}
            lecturers: dict[str, Lecturer] = {}
            if lecturer_ids:
                lecturers = {
                    item.id: item
                    for item in self.db.execute(select(Lecturer).where(Lecturer.id.in_(lecturer_ids))).scalars()
                }
        except SQLAlchemyError as exc:
            logger.exception("Failed to load courses")
            raise PersistenceError("Unable to load courses") from exc
        return [course_to_spec(course, lecturers.get(course.lecturer_id or "")) for course in courses]

    def find_by_id(self, course_id: str) -> CourseSpec | None:
        try:
            course = self.db.get(Course, course_id)
            if course is None:
                return None
            lecturer = self.db.get(Lecturer, course.lecturer_id) if course.lecturer_id else None
        except SQLAlchemyError as exc:
            logger.exception("Failed to load course %s", course_id)
            raise PersistenceError(f"Unable to load course {course_id}") from exc
        return course_to_spec(course, lecturer)


class SqlVenueRepository:
    def __init__(self, db: Session) -> None:
        self.db = db

    def find_all(self) -> list[VenueSpec]:
        try:
            venues = list(self.db.execute(select(Venue).order_by(Venue.created_at, Venue.name)).scalars())
        except SQLAlchemyError as exc:
            logger.exception("Failed to load venues")
            raise PersistenceError("Unable to load venues") from exc
        return [venue_to_spec(venue) for venue in venues]


class SqlScheduleRepository:
    """Schedule persistence.

    ``delete_all`` only stages the delete; ``insert_many`` and ``delete`` commit.
    A regeneration therefore replaces the old schedule in a single transaction.
    """

    def __init__(self, db: Session) -> None:
        self.db = db

    def delete_all(self) -> None:
        try:
            self.db.execute(delete(ScheduleEntry))
        except SQLAlchemyError as exc:
            self.db.rollback()
            logger.exception("Failed to clear schedule")
            raise PersistenceError("Unable to clear the schedule") from exc

    def insert_many(self, entries: Sequence[PlannedEntry]) -> list[ScheduleEntry]:
        records = [
            ScheduleEntry(
                course_id=entry.course_id,
                venue_id=entry.venue_id,
                lecturer_id=entry.lecturer_id,
                day=entry.day,
                start_time=entry.start_time,
                end_time=entry.end_time,
            )
            for entry in entries
        ]
        try:
            self.db.add_all(records)
            self.db.commit()
            for record in records:
                self.db.refresh(record)
        except SQLAlchemyError as exc:
            self.db.rollback()
            logger.exception("Failed to persist %d schedule entries", len(records))
            raise PersistenceError("Unable to persist the schedule") from exc
        return records

    def find_all(self) -> list[PlannedEntry]:
        try:
            entries = list(self.db.execute(select(ScheduleEntry)).scalars())
        except SQLAlchemyError as exc:
            logger.exception("Failed to load schedule")
            raise PersistenceError("Unable to load the schedule") from exc
        return [entry_to_planned(entry) for entry in entries]

    def delete(self, entry_id: str) -> bool:
        try:
            entry = self.db.get(ScheduleEntry, entry_id)
            if entry is None:
                return False
            self.db.delete(entry)
            self.db.commit()
        except SQLAlchemyError as exc:
            self.db.rollback()
            logger.exception("Failed to delete schedule entry %s", entry_id)
            raise PersistenceError(f"Unable to delete schedule entry {entry_id}") from exc
        return True
