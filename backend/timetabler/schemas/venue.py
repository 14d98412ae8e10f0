from pydantic import BaseModel, Field, field_validator, model_validator

from timetabler.models.venue import VenueType


def _clean_resources(value: list[str]) -> list[str]:
    return list(dict.fromkeys(item.strip() for item in value if item.strip()))


def _reject_nulls(model: BaseModel, nullable: frozenset[str] = frozenset()) -> None:
    """Partial updates may omit a field but may not null a required column."""
    nulled = sorted(
        name for name in model.model_fields_set if name not in nullable and getattr(model, name) is None
    )
    if nulled:
        raise ValueError(f"Fields cannot be null: {', '.join(nulled)}")


class VenueBase(BaseModel):
    name: str = Field(min_length=1, max_length=100)
    capacity: int = Field(ge=1, le=5000)
    type: VenueType = VenueType.lecture_hall
    resources: list[str] = Field(default_factory=list, max_length=50)

    @field_validator("resources")
    @classmethod
    def clean_resources(cls, value: list[str]) -> list[str]:
        return _clean_resources(value)


class VenueCreate(VenueBase):
    pass


class VenueUpdate(BaseModel):
    name: str | None = Field(default=None, min_length=1, max_length=100)
    capacity: int | None = Field(default=None, ge=1, le=5000)
    type: VenueType | None = None
    resources: list[str] | None = Field(default=None, max_length=50)

    @field_validator("resources")
    @classmethod
    def clean_resources(cls, value: list[str] | None) -> list[str] | None:
        if value is None:
            return value
        return _clean_resources(value)

    @model_validator(mode="after")
    def reject_null_required(self) -> "VenueUpdate":
        _reject_nulls(self)
        return self


class VenueOut(VenueBase):
    id: str

    model_config = {"from_attributes": True}
