from pydantic import BaseModel, Field


class AuthorizeRequest(BaseModel):
    """Request body for starting a mailbox connection."""

    redirect_url: str | None = Field(None, description="Page to return to once the mailbox is connected")


class AuthorizeResponse(BaseModel):
    url: str = Field(..., description="Provider consent URL to send the browser to")
