from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy import delete, select
from sqlalchemy.orm import Session

from timetabler.api.deps import get_db
from timetabler.models.course import Course
from timetabler.models.lecturer import Lecturer
from timetabler.models.schedule_entry import ScheduleEntry
from timetabler.schemas.course import CourseCreate, CourseOut, CourseUpdate

router = APIRouter()

# Fields the placement of an existing entry depends on.
SCHEDULED_FIELDS = {"lecturer_id", "duration_hours", "expected_students", "required_resources", "required_venue_type"}


def _ensure_lecturer(db: Session, lecturer_id: str | None) -> None:
    if lecturer_id and db.get(Lecturer, lecturer_id) is None:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Lecturer not found")


def _has_entries(db: Session, course_id: str) -> bool:
    return db.execute(select(ScheduleEntry.id).where(ScheduleEntry.course_id == course_id).limit(1)).first() is not None


@router.get("/", response_model=list[CourseOut])
def list_courses(db: Session = Depends(get_db)) -> list[CourseOut]:
    return list(db.execute(select(Course).order_by(Course.created_at, Course.code)).scalars())


@router.post("/", response_model=CourseOut, status_code=status.HTTP_201_CREATED)
def create_course(payload: CourseCreate, db: Session = Depends(get_db)) -> CourseOut:
    existing = db.execute(select(Course).where(Course.code == payload.code)).scalar_one_or_none()
    if existing:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail="Course code already exists")
    _ensure_lecturer(db, payload.lecturer_id)
    course = Course(**payload.model_dump())
    db.add(course)
    db.commit()
    db.refresh(course)
    return course


@router.put("/{course_id}", response_model=CourseOut)
def update_course(course_id: str, payload: CourseUpdate, db: Session = Depends(get_db)) -> CourseOut:
    course = db.get(Course, course_id)
    if course is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Course not found")

    data = payload.model_dump(exclude_unset=True)
    if "code" in data:
        existing = db.execute(select(Course).where(Course.code == data["code"], Course.id != course_id)).scalar_one_or_none()
        if existing:
            raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail="Course code already exists")
    if "lecturer_id" in data:
        _ensure_lecturer(db, data["lecturer_id"])

    changed = sorted(key for key in data if key in SCHEDULED_FIELDS and getattr(course, key) != data[key])
    if changed and _has_entries(db, course_id):
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail=f"Course is scheduled; deallocate it before changing {', '.join(changed)}",
        )

    for key, value in data.items():
        setattr(course, key, value)
    db.commit()
    db.refresh(course)
    return course


@router.delete("/{course_id}")
def delete_course(course_id: str, db: Session = Depends(get_db)) -> dict:
    course = db.get(Course, course_id)
    if course is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Course not found")
    removed = db.execute(delete(ScheduleEntry).where(ScheduleEntry.course_id == course_id)).rowcount
    db.delete(course)
    db.commit()
    return {"success": True, "removed_entries": removed}
