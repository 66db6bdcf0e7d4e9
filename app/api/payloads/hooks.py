from pydantic import BaseModel


class HookUser(BaseModel):
    email: str


class HookEmailData(BaseModel):
    token: str | None = None
    token_hash: str
    redirect_to: str = ""
    email_action_type: str
    site_url: str | None = None


class AuthEmailHookPayload(BaseModel):
    """Payload posted by the managed auth provider's send-email hook."""

    user: HookUser
    email_data: HookEmailData
