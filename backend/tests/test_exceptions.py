from timetabler.core.exceptions import (
    AllocationBusyError,
    AllocationError,
    AppError,
    NoSlotAvailableError,
    PersistenceError,
    ResourceExhaustionError,
    ResourceNotFoundError,
)


def test_allocation_error_structure():
    err = AllocationBusyError("Another allocation run is in progress", details={"operation": "bulk_generate"})
    assert err.status_code == 409
    assert err.details == {"operation": "bulk_generate"}
    assert isinstance(err, AllocationError)
    assert isinstance(err, AppError)


def test_app_error_defaults():
    err = AppError("Generic error")
    assert err.status_code == 500
    assert err.details == {}


def test_error_kinds_map_to_distinct_statuses():
    assert ResourceNotFoundError("Course", "c-1").status_code == 404
    assert ResourceExhaustionError("No venues available for allocation").status_code == 409
    assert PersistenceError("Unable to persist the schedule").status_code == 500

    err = NoSlotAvailableError("CS101", {"lecturer_busy": 4})
    assert err.status_code == 409
    assert err.message == "No available slot found for CS101"
    assert err.details["rejections"] == {"lecturer_busy": 4}
