from pydantic import BaseModel


class ErrorDetail(BaseModel):
    type: str
    message: str
    fields: dict[str, str] | None = None


class APIError(BaseModel):
    request_id: str
    error: ErrorDetail
