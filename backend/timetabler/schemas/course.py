from pydantic import BaseModel, Field, field_validator, model_validator

from timetabler.models.venue import VenueType
from timetabler.schemas.venue import _clean_resources, _reject_nulls

NULLABLE_COURSE_FIELDS = frozenset({"required_venue_type", "lecturer_id"})


class CourseBase(BaseModel):
    code: str = Field(min_length=1, max_length=50)
    title: str = Field(min_length=1, max_length=200)
    expected_students: int = Field(ge=0, le=5000)
    duration_hours: int = Field(default=1, ge=1, le=8)
    required_resources: list[str] = Field(default_factory=list, max_length=50)
    required_venue_type: VenueType | None = None
    lecturer_id: str | None = Field(default=None, max_length=36)

    @field_validator("required_resources")
    @classmethod
    def clean_resources(cls, value: list[str]) -> list[str]:
        return _clean_resources(value)


class CourseCreate(CourseBase):
    pass


class CourseUpdate(BaseModel):
    code: str | None = Field(default=None, min_length=1, max_length=50)
    title: str | None = Field(default=None, min_length=1, max_length=200)
    expected_students: int | None = Field(default=None, ge=0, le=5000)
    duration_hours: int | None = Field(default=None, ge=1, le=8)
    required_resources: list[str] | None = Field(default=None, max_length=50)
    required_venue_type: VenueType | None = None
    lecturer_id: str | None = Field(default=None, max_length=36)

    @field_validator("required_resources")
    @classmethod
    def clean_resources(cls, value: list[str] | None) -> list[str] | None:
        if value is None:
            return value
        return _clean_resources(value)

    @model_validator(mode="after")
    def reject_null_required(self) -> "CourseUpdate":
        _reject_nulls(self, NULLABLE_COURSE_FIELDS)
        return self


class CourseOut(CourseBase):
    id: str

    model_config = {"from_attributes": True}
