"""
Pydantic models for the tracked sender endpoints.
"""

import uuid
from datetime import datetime

from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator


class SenderRequest(BaseModel):
    """Body for creating or editing a tracked sender."""

    email: EmailStr = Field(..., description="Sender address to track", examples=["hr@company.com"])
    label: str | None = Field(None, max_length=255, description="A friendly name to identify this sender")

    @field_validator("email", mode="before")
    @classmethod
    def strip_email(cls, value: object) -> object:
        return value.strip() if isinstance(value, str) else value

    @field_validator("label")
    @classmethod
    def blank_label_is_none(cls, value: str | None) -> str | None:
        if value is None or not value.strip():
            return None
        return value.strip()


class Sender(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    email: str
    label: str | None
    created_at: datetime


class SenderResponse(BaseModel):
    request_id: str = Field(default_factory=lambda: str(uuid.uuid4()))
    data: Sender


class SenderListResponse(BaseModel):
    request_id: str = Field(default_factory=lambda: str(uuid.uuid4()))
    data: list[Sender]
