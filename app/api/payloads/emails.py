import uuid
from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field


class Email(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    sender_mail_id: uuid.UUID
    sender_email: str
    subject: str
    content: str | None
    received_at: datetime


class EmailListResponse(BaseModel):
    request_id: str = Field(default_factory=lambda: str(uuid.uuid4()))
    data: list[Email]


class DashboardSummary(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    sender_count: int
    email_count: int
    connected_account_count: int


class DashboardResponse(BaseModel):
    request_id: str = Field(default_factory=lambda: str(uuid.uuid4()))
    data: DashboardSummary
