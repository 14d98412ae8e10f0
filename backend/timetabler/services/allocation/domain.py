"""Value types shared by the allocation engine.

The engine never touches ORM rows: repositories translate persisted records into
these frozen snapshots, and the orchestrator translates planned entries back.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum

from timetabler.models.venue import VenueType


class RejectionReason(str, Enum):
    capacity = "capacity"
    working_hours = "working_hours"
    venue_type = "venue_type"
    resources = "resources"
    venue_busy = "venue_busy"
    missing_lecturer = "missing_lecturer"
    lecturer_busy = "lecturer_busy"
    lecturer_break = "lecturer_break"


@dataclass(frozen=True)
class LecturerSpec:
    id: str
    name: str = ""
    preferred_days: frozenset[str] = frozenset()
    preferred_times: frozenset[int] = frozenset()


@dataclass(frozen=True)
class CourseSpec:
    id: str
    code: str
    title: str
    expected_students: int
    duration_hours: int
    required_resources: frozenset[str] = frozenset()
    required_venue_type: VenueType | None = None
    lecturer: LecturerSpec | None = None


@dataclass(frozen=True)
class VenueSpec:
    id: str
    name: str
    capacity: int
    type: VenueType = VenueType.lecture_hall
    resources: frozenset[str] = frozenset()


@dataclass(frozen=True)
class Slot:
    venue: VenueSpec
    day: str
    time: int


@dataclass(frozen=True)
class PlannedEntry:
    course_id: str
    venue_id: str
    lecturer_id: str
    day: str
    start_time: int
    end_time: int

    def overlaps(self, start: int, end: int) -> bool:
        return self.start_time < end and self.end_time > start

    def adjoins(self, start: int, end: int) -> bool:
        return self.end_time == start or self.start_time == end


Schedule = tuple[PlannedEntry, ...]


@dataclass(frozen=True)
class UnallocatedCourse:
    course: CourseSpec
    rejections: dict[str, int] = field(default_factory=dict)
