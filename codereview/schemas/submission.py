"""Submission Schemas — code payloads and the direct status set.

Invariants:
    - code is non-empty
    - StatusUpdate.status is one of the four lifecycle states
"""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field

from codereview.core.domain_types import SubmissionStatus


class SubmissionCreate(BaseModel):
    project_id: UUID
    code: str = Field(min_length=1)


class SubmissionUpdate(BaseModel):
    code: str | None = Field(None, min_length=1)


class StatusUpdate(BaseModel):
    status: SubmissionStatus


class SubmissionResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    project_id: UUID
    user_id: UUID
    code: str
    status: SubmissionStatus
    created_at: datetime
    updated_at: datetime
