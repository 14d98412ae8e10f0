from pydantic import BaseModel
from typing import Literal, List

class ConflictDetail(BaseModel):
    id: str
    conflict_type: Literal[
        "venue_conflict",
        "lecturer_conflict",
        "lecturer_break",
        "venue_capacity",
        "venue_type",
        "venue_resources",
        "duration_mismatch",
        "unknown_reference",
    ]
    description: str
    severity: Literal["hard", "soft"]
    affected_entries: List[str]  # schedule entry ids involved

class ConflictReport(BaseModel):
    conflicts: List[ConflictDetail]

    @property
    def is_clean(self) -> bool:
        return not self.conflicts
