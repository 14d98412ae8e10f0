import uuid
from datetime import datetime

from sqlalchemy import DateTime, Enum as SAEnum, Integer, JSON, String
from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy.sql import func

from timetabler.db.base import Base
from timetabler.models.venue import VenueType


class Course(Base):
    __tablename__ = "courses"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    code: Mapped[str] = mapped_column(String(50), unique=True, index=True, nullable=False)
    title: Mapped[str] = mapped_column(String(200), nullable=False)
    expected_students: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    duration_hours: Mapped[int] = mapped_column(Integer, nullable=False, default=1)
    required_resources: Mapped[list[str]] = mapped_column(JSON, nullable=False, default=list)
    required_venue_type: Mapped[VenueType | None] = mapped_column(
        SAEnum(VenueType, name="venue_type"), nullable=True
    )
    lecturer_id: Mapped[str | None] = mapped_column(String(36), nullable=True, index=True)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default=func.now())
    updated_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), onupdate=func.now())
