import logging

from fastapi import APIRouter, Depends, WebSocket, WebSocketDisconnect, status
from sqlalchemy import select
from sqlalchemy.orm import Session

from timetabler.api.deps import get_db, get_orchestrator
from timetabler.core.config import Settings, get_settings
from timetabler.models.schedule_entry import ScheduleEntry
from timetabler.schemas.allocation import DAY_ORDER
from timetabler.schemas.conflict import ConflictReport
from timetabler.schemas.timetable import (
    AllocateCourseResponse,
    GenerateTimetableResponse,
    ScheduleEntryOut,
    UnallocatedCourseOut,
)
from timetabler.services.allocation.orchestrator import AllocationOrchestrator
from timetabler.services.allocation.repositories import SqlCourseRepository, SqlVenueRepository
from timetabler.services.conflict_service import ConflictService
from timetabler.services.notification_hub import SCHEDULE_CHANNEL, notification_hub

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("/", response_model=list[ScheduleEntryOut])
def list_schedule(db: Session = Depends(get_db)) -> list[ScheduleEntryOut]:
    entries = db.execute(select(ScheduleEntry)).scalars()
    return sorted(entries, key=lambda entry: (DAY_ORDER.index(entry.day), entry.start_time, entry.venue_id))


@router.post("/generate", response_model=GenerateTimetableResponse)
def generate_timetable(
    orchestrator: AllocationOrchestrator = Depends(get_orchestrator),
) -> GenerateTimetableResponse:
    result = orchestrator.bulk_generate()
    return GenerateTimetableResponse(
        allocated=len(result.generated),
        message=result.message,
        generated=[ScheduleEntryOut.model_validate(entry) for entry in result.generated],
        unallocated=[UnallocatedCourseOut.from_record(item) for item in result.unallocated],
    )


@router.post(
    "/courses/{course_id}/allocate",
    response_model=AllocateCourseResponse,
    status_code=status.HTTP_201_CREATED,
)
def allocate_course(
    course_id: str,
    orchestrator: AllocationOrchestrator = Depends(get_orchestrator),
) -> AllocateCourseResponse:
    entry = orchestrator.allocate_and_commit(course_id)
    return AllocateCourseResponse(
        msg=f"Course allocated to {entry.day} {entry.start_time}:00-{entry.end_time}:00",
        entry=ScheduleEntryOut.model_validate(entry),
    )


@router.delete("/entries/{entry_id}")
def deallocate_entry(
    entry_id: str,
    orchestrator: AllocationOrchestrator = Depends(get_orchestrator),
) -> dict:
    orchestrator.deallocate(entry_id)
    return {"success": True, "msg": "Course deallocated"}


@router.get("/conflicts", response_model=ConflictReport)
def detect_conflicts(
    db: Session = Depends(get_db),
    settings: Settings = Depends(get_settings),
) -> ConflictReport:
    course_map = {course.id: course for course in SqlCourseRepository(db).find_all_with_lecturer()}
    venue_map = {venue.id: venue for venue in SqlVenueRepository(db).find_all()}
    entries = list(db.execute(select(ScheduleEntry)).scalars())
    service = ConflictService(
        entries,
        course_map,
        venue_map,
        enforce_lecturer_break=settings.allocation_enforce_lecturer_break,
    )
    return service.detect_conflicts()


@router.websocket("/ws")
async def schedule_websocket(websocket: WebSocket) -> None:
    await notification_hub.connect(SCHEDULE_CHANNEL, websocket)
    try:
        await websocket.send_json({"event": "connected", "channel": SCHEDULE_CHANNEL})
        while True:
            message = await websocket.receive_text()
            if message.strip().lower() == "ping":
                await websocket.send_json({"event": "pong"})
    except WebSocketDisconnect:
        logger.debug("Schedule websocket disconnected")
    finally:
        await notification_hub.disconnect(SCHEDULE_CHANNEL, websocket)
