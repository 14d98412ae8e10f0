from collections import defaultdict
from typing import Dict, List, Sequence

from timetabler.models.schedule_entry import ScheduleEntry
from timetabler.schemas.conflict import ConflictDetail, ConflictReport
from timetabler.services.allocation.domain import CourseSpec, VenueSpec


class ConflictService:
    """Audit a persisted schedule against the allocator's hard constraints."""

    def __init__(
        self,
        entries: Sequence[ScheduleEntry],
        course_map: Dict[str, CourseSpec],
        venue_map: Dict[str, VenueSpec],
        *,
        enforce_lecturer_break: bool = True,
    ):
        self.entries = list(entries)
        self.course_map = course_map
        self.venue_map = venue_map
        self.enforce_lecturer_break = enforce_lecturer_break

    def _check_entry(self, entry: ScheduleEntry) -> List[ConflictDetail]:
        conflicts: List[ConflictDetail] = []
        course = self.course_map.get(entry.course_id)
        venue = self.venue_map.get(entry.venue_id)
        if course is None or venue is None:
            return [ConflictDetail(
                id=f"ref-{entry.id}",
                conflict_type="unknown_reference",
                description=f"Entry {entry.id} references a missing course or venue",
                severity="hard",
                affected_entries=[entry.id],
            )]

        if entry.end_time != entry.start_time + course.duration_hours:
            conflicts.append(ConflictDetail(
                id=f"dur-{entry.id}",
                conflict_type="duration_mismatch",
                description=f"{course.code} runs {entry.start_time}-{entry.end_time} but lasts {course.duration_hours}h",
                severity="hard",
                affected_entries=[entry.id],
            ))
        if venue.capacity < course.expected_students:
            conflicts.append(ConflictDetail(
                id=f"cap-{entry.id}",
                conflict_type="venue_capacity",
                description=f"Venue {venue.name} capacity ({venue.capacity}) < Students ({course.expected_students})",
                severity="hard",
                affected_entries=[entry.id],
            ))
        if course.required_venue_type is not None and course.required_venue_type != venue.type:
            conflicts.append(ConflictDetail(
                id=f"type-{entry.id}",
                conflict_type="venue_type",
                description=f"{course.code} requires {course.required_venue_type.value} but {venue.name} is a {venue.type.value}",
                severity="hard",
                affected_entries=[entry.id],
            ))
        missing = sorted(course.required_resources - venue.resources)
        if missing:
            conflicts.append(ConflictDetail(
                id=f"res-{entry.id}",
                conflict_type="venue_resources",
                description=f"Venue {venue.name} lacks {', '.join(missing)} for {course.code}",
                severity="hard",
                affected_entries=[entry.id],
            ))
        return conflicts

    def detect_conflicts(self) -> ConflictReport:
        conflicts: List[ConflictDetail] = []

        entries_by_day = defaultdict(list)
        for entry in self.entries:
            conflicts.extend(self._check_entry(entry))
            entries_by_day[entry.day].append(entry)

        for day, day_entries in entries_by_day.items():
            n = len(day_entries)
            for i in range(n):
                e1 = day_entries[i]
                for j in range(i + 1, n):
                    e2 = day_entries[j]
                    overlap = e1.start_time < e2.end_time and e2.start_time < e1.end_time
                    if overlap and e1.venue_id == e2.venue_id:
                        venue_name = getattr(self.venue_map.get(e1.venue_id), "name", e1.venue_id)
                        conflicts.append(ConflictDetail(
                            id=f"venue-{e1.id}-{e2.id}",
                            conflict_type="venue_conflict",
                            description=f"Venue overlap in {venue_name} on {day}: {e1.course_id} and {e2.course_id}",
                            severity="hard",
                            affected_entries=[e1.id, e2.id],
                        ))
                    if e1.lecturer_id != e2.lecturer_id:
                        continue
                    if overlap:
                        conflicts.append(ConflictDetail(
                            id=f"lec-{e1.id}-{e2.id}",
                            conflict_type="lecturer_conflict",
                            description=f"Lecturer overlap for {e1.lecturer_id} on {day}: {e1.course_id} and {e2.course_id}",
                            severity="hard",
                            affected_entries=[e1.id, e2.id],
                        ))
                    elif self.enforce_lecturer_break and (
                        e1.end_time == e2.start_time or e2.end_time == e1.start_time
                    ):
                        conflicts.append(ConflictDetail(
                            id=f"brk-{e1.id}-{e2.id}",
                            conflict_type="lecturer_break",
                            description=f"Lecturer {e1.lecturer_id} has back-to-back classes on {day}",
                            severity="hard",
                            affected_entries=[e1.id, e2.id],
                        ))

        return ConflictReport(conflicts=conflicts)
