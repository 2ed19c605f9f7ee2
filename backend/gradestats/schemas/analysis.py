"""
Analysis request/response schemas.
AnalysisPayload is the allow-list of writable columns; id, id_user and timestamps are never taken from the body.
"""
from datetime import datetime
from decimal import Decimal
from pydantic import BaseModel, ConfigDict, Field


class AnalysisPayload(BaseModel):
    year: int | None = None
    semester: int | None = None
    subject: str | None = None
    id_group: str | None = None
    id_department: str | None = None
    count_stud: int | None = None
    count5: int | None = None
    count4: int | None = None
    count3: int | None = None
    count2: int | None = None
    count_passed: int | None = None
    count_released: int | None = None
    count_not_cert: int | None = None
    count_acad_leave: int | None = None
    count_expelled: int | None = None
    quality: Decimal | None = Field(default=None, max_digits=6, decimal_places=2)
    overall: float | None = None
    average: float | None = None


class AnalysisCreateRequest(AnalysisPayload):
    pass


class AnalysisUpdateRequest(AnalysisPayload):
    """Partial update: only fields present in the body are written."""


class AnalysisResponse(AnalysisPayload):
    model_config = ConfigDict(from_attributes=True)

    id: int
    id_user: int
    created_at: datetime | None = None
    updated_at: datetime | None = None
