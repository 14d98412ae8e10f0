import pytest

from timetabler.models.venue import VenueType
from timetabler.schemas.allocation import AllocationPolicy
from timetabler.services.allocation.domain import RejectionReason
from timetabler.services.allocation.feasibility import check_feasibility, is_feasible

from fakes import make_course, make_entry, make_lecturer, make_venue

POLICY = AllocationPolicy()
LECTURER = make_lecturer("lec-1")


def _check(course, venue, day="Monday", time=10, schedule=(), policy=POLICY):
    return check_feasibility(course, venue, day, time, tuple(schedule), policy)


def test_free_slot_is_feasible():
    course = make_course(students=120, resources={"Projector"}, lecturer=LECTURER)
    venue = make_venue(capacity=150, resources={"Projector", "Whiteboard"})
    assert _check(course, venue) is None
    assert is_feasible(course, venue, "Monday", 10, (), POLICY)


def test_capacity_exceeded():
    course = make_course(students=151, lecturer=LECTURER)
    assert _check(course, make_venue(capacity=150)) is RejectionReason.capacity


def test_capacity_exactly_full_is_allowed():
    course = make_course(students=150, lecturer=LECTURER)
    assert _check(course, make_venue(capacity=150)) is None


@pytest.mark.parametrize(
    ("time", "duration", "expected"),
    [
        (7, 1, RejectionReason.working_hours),
        (8, 2, None),
        (16, 2, None),
        (17, 2, RejectionReason.working_hours),
    ],
)
def test_working_hour_bounds(time, duration, expected):
    course = make_course(duration=duration, lecturer=LECTURER)
    assert _check(course, make_venue(), time=time) is expected


def test_custom_working_hours():
    policy = AllocationPolicy(day_start_hour=9, day_end_hour=12)
    course = make_course(duration=2, lecturer=LECTURER)
    assert _check(course, make_venue(), time=8, policy=policy) is RejectionReason.working_hours
    assert _check(course, make_venue(), time=10, policy=policy) is None
    assert _check(course, make_venue(), time=11, policy=policy) is RejectionReason.working_hours


def test_required_venue_type_must_match():
    course = make_course(venue_type=VenueType.laboratory, lecturer=LECTURER)
    assert _check(course, make_venue()) is RejectionReason.venue_type
    assert _check(course, make_venue(venue_type=VenueType.laboratory)) is None


def test_missing_resource_rejected():
    course = make_course(resources={"Projector", "Computers"}, lecturer=LECTURER)
    venue = make_venue(resources={"Projector"})
    assert _check(course, venue) is RejectionReason.resources


def test_venue_overlap_rejected_but_touching_interval_allowed():
    course = make_course(duration=2, lecturer=make_lecturer("lec-2"))
    venue = make_venue("v-1")
    busy = [make_entry(venue_id="v-1", lecturer_id="lec-1", start=9, end=11)]
    assert _check(course, venue, time=10, schedule=busy) is RejectionReason.venue_busy
    assert _check(course, venue, time=8, schedule=busy) is RejectionReason.venue_busy
    assert _check(course, venue, time=11, schedule=busy) is None


def test_venue_overlap_only_counts_same_day():
    course = make_course(lecturer=LECTURER)
    busy = [make_entry(venue_id="v-1", lecturer_id="other", day="Tuesday", start=10, end=12)]
    assert _check(course, make_venue("v-1"), day="Monday", time=10, schedule=busy) is None


def test_course_without_lecturer_is_never_feasible():
    course = make_course(lecturer=None)
    assert _check(course, make_venue()) is RejectionReason.missing_lecturer


def test_lecturer_overlap_in_another_venue_rejected():
    course = make_course(duration=2, lecturer=LECTURER)
    busy = [make_entry(venue_id="v-2", lecturer_id="lec-1", start=10, end=12)]
    assert _check(course, make_venue("v-1"), time=10, schedule=busy) is RejectionReason.lecturer_busy


@pytest.mark.parametrize("time", [8, 12])
def test_back_to_back_classes_rejected(time):
    course = make_course(duration=2, lecturer=LECTURER)
    busy = [make_entry(venue_id="v-2", lecturer_id="lec-1", start=10, end=12)]
    assert _check(course, make_venue("v-1"), time=time, schedule=busy) is RejectionReason.lecturer_break


def test_back_to_back_allowed_when_break_rule_disabled():
    policy = AllocationPolicy(enforce_lecturer_break=False)
    course = make_course(duration=2, lecturer=LECTURER)
    busy = [make_entry(venue_id="v-2", lecturer_id="lec-1", start=10, end=12)]
    assert _check(course, make_venue("v-1"), time=12, schedule=busy, policy=policy) is None


def test_rules_short_circuit_in_order():
    # Too big and outside working hours: capacity is reported first.
    course = make_course(students=500, lecturer=None)
    assert _check(course, make_venue(capacity=100), time=20) is RejectionReason.capacity

    # Venue clash is checked before the missing lecturer.
    course = make_course(lecturer=None)
    busy = [make_entry(venue_id="v-1", start=10, end=12)]
    assert _check(course, make_venue("v-1"), time=10, schedule=busy) is RejectionReason.venue_busy
