from pydantic import BaseModel, Field, field_validator

from timetabler.schemas.allocation import normalize_day, parse_hour


class LecturerPreferences(BaseModel):
    preferred_days: list[str] = Field(default_factory=list, max_length=5)
    preferred_times: list[int] = Field(default_factory=list, max_length=24)

    @field_validator("preferred_days")
    @classmethod
    def validate_days(cls, value: list[str]) -> list[str]:
        return list(dict.fromkeys(normalize_day(item) for item in value))

    @field_validator("preferred_times", mode="before")
    @classmethod
    def validate_times(cls, value: list[int | str]) -> list[int]:
        if not isinstance(value, list):
            raise ValueError("preferred_times must be a list")
        return sorted({parse_hour(item) for item in value})


class LecturerBase(LecturerPreferences):
    name: str = Field(min_length=1, max_length=200)
    email: str | None = Field(default=None, max_length=255)


class LecturerCreate(LecturerBase):
    pass


class LecturerOut(LecturerBase):
    id: str

    model_config = {"from_attributes": True}
