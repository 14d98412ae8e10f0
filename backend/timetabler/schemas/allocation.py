from __future__ import annotations

from pydantic import BaseModel, Field, field_validator, model_validator

DAY_ORDER = (
    "Monday",
    "Tuesday",
    "Wednesday",
    "Thursday",
    "Friday",
)
DAY_SHORT_MAP = {
    "Mon": "Monday",
    "Tue": "Tuesday",
    "Wed": "Wednesday",
    "Thu": "Thursday",
    "Fri": "Friday",
}
DEFAULT_DAYS = DAY_ORDER
DEFAULT_TIME_SLOTS = (8, 10, 12, 14, 16)


def normalize_day(value: str) -> str:
    day = value.strip()
    day = DAY_SHORT_MAP.get(day, day)
    if day not in DAY_ORDER:
        raise ValueError(f"Invalid day value: {value}")
    return day


def parse_hour(value: int | str) -> int:
    """Accept ``10``, ``"10"`` or ``"10:00"`` and return the hour of day."""
    if isinstance(value, bool):
        raise ValueError("Hour must be an integer or HH:MM string")
    if isinstance(value, int):
        hour = value
    else:
        text = str(value).strip()
        if ":" in text:
            hours, minutes = text.split(":", 1)
            if not minutes.isdigit() or int(minutes) != 0:
                raise ValueError("Times must fall on the hour")
            text = hours
        if not text.isdigit():
            raise ValueError(f"Invalid hour value: {value}")
        hour = int(text)
    if not 0 <= hour <= 23:
        raise ValueError("Hour must be between 0 and 23")
    return hour


class ScoreWeights(BaseModel):
    time_preference: float = 2000
    day_preference: float = 1500
    utilization: float = 1000
    resource_waste: float = Field(default=-300, le=0)
    slot_crowding: float = Field(default=-50, le=0)
    venue_same_day: float = Field(default=-50, le=0)


class AllocationPolicy(BaseModel):
    days: list[str] = Field(default_factory=lambda: list(DEFAULT_DAYS), min_length=1)
    time_slots: list[int] = Field(default_factory=lambda: list(DEFAULT_TIME_SLOTS), min_length=1)
    day_start_hour: int = Field(default=8, ge=0, le=23)
    day_end_hour: int = Field(default=18, ge=1, le=24)
    enforce_lecturer_break: bool = True
    weights: ScoreWeights = Field(default_factory=ScoreWeights)

    model_config = {"frozen": True}

    @field_validator("days")
    @classmethod
    def order_days(cls, value: list[str]) -> list[str]:
        days = {normalize_day(item) for item in value}
        return [day for day in DAY_ORDER if day in days]

    @field_validator("time_slots", mode="before")
    @classmethod
    def sort_time_slots(cls, value: list[int | str]) -> list[int]:
        if not isinstance(value, (list, tuple)):
            raise ValueError("time_slots must be a list")
        return sorted({parse_hour(item) for item in value})

    @model_validator(mode="after")
    def validate_hours(self) -> "AllocationPolicy":
        if self.day_end_hour <= self.day_start_hour:
            raise ValueError("day_end_hour must be after day_start_hour")
        return self
