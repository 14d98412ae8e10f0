from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy import select
from sqlalchemy.orm import Session

from timetabler.api.deps import get_db
from timetabler.models.lecturer import Lecturer
from timetabler.schemas.lecturer import LecturerCreate, LecturerOut, LecturerPreferences

router = APIRouter()


@router.get("/", response_model=list[LecturerOut])
def list_lecturers(db: Session = Depends(get_db)) -> list[LecturerOut]:
    return list(db.execute(select(Lecturer).order_by(Lecturer.name)).scalars())


@router.post("/", response_model=LecturerOut, status_code=status.HTTP_201_CREATED)
def create_lecturer(payload: LecturerCreate, db: Session = Depends(get_db)) -> LecturerOut:
    if payload.email:
        existing = db.execute(select(Lecturer).where(Lecturer.email == payload.email)).scalar_one_or_none()
        if existing:
            raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail="Lecturer email already exists")
    lecturer = Lecturer(**payload.model_dump())
    db.add(lecturer)
    db.commit()
    db.refresh(lecturer)
    return lecturer


@router.put("/{lecturer_id}/preferences", response_model=LecturerOut)
def update_preferences(
    lecturer_id: str,
    payload: LecturerPreferences,
    db: Session = Depends(get_db),
) -> LecturerOut:
    lecturer = db.get(Lecturer, lecturer_id)
    if lecturer is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Lecturer not found")
    lecturer.preferred_days = payload.preferred_days
    lecturer.preferred_times = payload.preferred_times
    db.commit()
    db.refresh(lecturer)
    return lecturer
