from __future__ import annotations

from pydantic import BaseModel, Field

from timetabler.services.allocation.domain import UnallocatedCourse


class ScheduleEntryOut(BaseModel):
    id: str
    course_id: str
    venue_id: str
    lecturer_id: str
    day: str
    start_time: int
    end_time: int

    model_config = {"from_attributes": True}


class UnallocatedCourseOut(BaseModel):
    id: str
    code: str
    title: str
    expected_students: int
    rejections: dict[str, int] = Field(default_factory=dict)

    @classmethod
    def from_record(cls, record: UnallocatedCourse) -> "UnallocatedCourseOut":
        return cls(
            id=record.course.id,
            code=record.course.code,
            title=record.course.title,
            expected_students=record.course.expected_students,
            rejections=record.rejections,
        )


class GenerateTimetableResponse(BaseModel):
    success: bool = True
    allocated: int
    message: str
    generated: list[ScheduleEntryOut]
    unallocated: list[UnallocatedCourseOut]


class AllocateCourseResponse(BaseModel):
    msg: str
    entry: ScheduleEntryOut
