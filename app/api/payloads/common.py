import uuid

from pydantic import BaseModel, Field


class DeleteResponse(BaseModel):
    """Response model for delete endpoints."""

    request_id: str = Field(default_factory=lambda: str(uuid.uuid4()))
    success: bool = Field(True, description="Whether the deletion was successful")
