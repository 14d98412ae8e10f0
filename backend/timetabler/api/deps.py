from collections.abc import Generator

from fastapi import Depends
from sqlalchemy.orm import Session

from timetabler.core.config import Settings, get_settings
from timetabler.db.session import SessionLocal
from timetabler.services.allocation.events import EventPublisher, HubEventPublisher
from timetabler.services.allocation.orchestrator import AllocationOrchestrator
from timetabler.services.allocation.repositories import (
    SqlCourseRepository,
    SqlScheduleRepository,
    SqlVenueRepository,
)


def get_db() -> Generator[Session, None, None]:
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def get_event_publisher() -> EventPublisher:
    return HubEventPublisher()


def get_orchestrator(
    db: Session = Depends(get_db),
    settings: Settings = Depends(get_settings),
    publisher: EventPublisher = Depends(get_event_publisher),
) -> AllocationOrchestrator:
    return AllocationOrchestrator(
        courses=SqlCourseRepository(db),
        venues=SqlVenueRepository(db),
        schedule=SqlScheduleRepository(db),
        policy=settings.allocation_policy(),
        publisher=publisher,
        lock_timeout_seconds=settings.allocation_lock_timeout_seconds,
    )
