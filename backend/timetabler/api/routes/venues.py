from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy import delete, select
from sqlalchemy.orm import Session

from timetabler.api.deps import get_db
from timetabler.models.schedule_entry import ScheduleEntry
from timetabler.models.venue import Venue
from timetabler.schemas.venue import VenueCreate, VenueOut, VenueUpdate

router = APIRouter()

# Fields the placement of an existing entry depends on.
SCHEDULED_FIELDS = {"capacity", "type", "resources"}


def _get_venue_or_404(db: Session, venue_id: str) -> Venue:
    venue = db.get(Venue, venue_id)
    if venue is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Venue not found")
    return venue


def _has_entries(db: Session, venue_id: str) -> bool:
    return db.execute(select(ScheduleEntry.id).where(ScheduleEntry.venue_id == venue_id).limit(1)).first() is not None


@router.get("/", response_model=list[VenueOut])
def list_venues(db: Session = Depends(get_db)) -> list[VenueOut]:
    return list(db.execute(select(Venue).order_by(Venue.created_at, Venue.name)).scalars())


@router.get("/{venue_id}", response_model=VenueOut)
def get_venue(venue_id: str, db: Session = Depends(get_db)) -> VenueOut:
    return _get_venue_or_404(db, venue_id)


@router.post("/", response_model=VenueOut, status_code=status.HTTP_201_CREATED)
def create_venue(payload: VenueCreate, db: Session = Depends(get_db)) -> VenueOut:
    existing = db.execute(select(Venue).where(Venue.name == payload.name)).scalar_one_or_none()
    if existing:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail="Venue name already exists")
    venue = Venue(**payload.model_dump())
    db.add(venue)
    db.commit()
    db.refresh(venue)
    return venue


@router.put("/{venue_id}", response_model=VenueOut)
def update_venue(venue_id: str, payload: VenueUpdate, db: Session = Depends(get_db)) -> VenueOut:
    venue = _get_venue_or_404(db, venue_id)

    data = payload.model_dump(exclude_unset=True)
    if "name" in data:
        existing = db.execute(select(Venue).where(Venue.name == data["name"], Venue.id != venue_id)).scalar_one_or_none()
        if existing:
            raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail="Venue name already exists")

    changed = sorted(key for key in data if key in SCHEDULED_FIELDS and getattr(venue, key) != data[key])
    if changed and _has_entries(db, venue_id):
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail=f"Venue is scheduled; deallocate its entries before changing {', '.join(changed)}",
        )

    for key, value in data.items():
        setattr(venue, key, value)
    db.commit()
    db.refresh(venue)
    return venue


@router.delete("/{venue_id}")
def delete_venue(venue_id: str, db: Session = Depends(get_db)) -> dict:
    venue = _get_venue_or_404(db, venue_id)
    removed = db.execute(delete(ScheduleEntry).where(ScheduleEntry.venue_id == venue_id)).rowcount
    db.delete(venue)
    db.commit()
    return {"success": True, "removed_entries": removed}
