import logging

from pydantic import Field, ValidationInfo, field_validator
from pydantic_settings import BaseSettings

from app.environment import EnvironmentName
from settings.log import LoggingSettings


class DatabaseSettings(BaseSettings):
    host: str = Field(alias="DATABASE_HOST", default="postgresql://localhost:5432")
    name: str = Field(alias="DATABASE_NAME", default="mailflow")
    min_pool_size: int = Field(alias="DATABASE_MIN_POOL_SIZE", default=5)
    max_pool_size: int = Field(alias="DATABASE_MAX_POOL_SIZE", default=20)

    @property
    def async_host(self) -> str:
        """Return the host URL with async driver for SQLAlchemy async engine."""
        return self.host.replace("postgresql://", "postgresql+asyncpg://", 1)

    @property
    def dsn(self) -> str:
        """Plain libpq DSN, used by the raw asyncpg listener connection."""
        return f"{self.host}/{self.name}"


class SentrySettings(BaseSettings):
    dsn: str | None = Field(alias="SENTRY_DSN", default=None)

    @property
    def is_enabled(self) -> bool:
        return bool(self.dsn)


class AuthSettings(BaseSettings):
    url: str = Field(alias="AUTH_URL", default="http://localhost:54321")
    jwt_secret: str = Field(alias="AUTH_JWT_SECRET")
    jwt_audience: str = Field(alias="AUTH_JWT_AUDIENCE", default="authenticated")


class GoogleSettings(BaseSettings):
    client_id: str | None = Field(alias="GOOGLE_CLIENT_ID", default=None)
    client_secret: str | None = Field(alias="GOOGLE_CLIENT_SECRET", default=None)


class MicrosoftSettings(BaseSettings):
    client_id: str | None = Field(alias="MICROSOFT_CLIENT_ID", default=None)
    client_secret: str | None = Field(alias="MICROSOFT_CLIENT_SECRET", default=None)


class MailerSettings(BaseSettings):
    api_key: str | None = Field(alias="RESEND_API_KEY", default=None)
    api_url: str = Field(alias="RESEND_API_URL", default="https://api.resend.com/emails")
    sender: str = Field(alias="MAILER_FROM", default="MailFlow <onboarding@resend.dev>")
    timeout: int = Field(alias="MAILER_TIMEOUT", default=10)


class HttpSettings(BaseSettings):
    timeout: int = Field(alias="HTTP_TIMEOUT", default=15)


class Settings(BaseSettings):
    model_config = {"env_file": ".env", "extra": "allow"}

    environment: EnvironmentName = Field(alias="ENVIRONMENT")
    public_url: str = Field(alias="PUBLIC_URL", default="http://localhost:8001")
    app_origin: str = Field(alias="APP_ORIGIN", default="http://localhost:8080")
    token_encryption_key: str = Field(alias="TOKEN_ENCRYPTION_KEY")

    auth: AuthSettings = Field(default_factory=AuthSettings)
    database: DatabaseSettings = Field(default_factory=DatabaseSettings)
    google: GoogleSettings = Field(default_factory=GoogleSettings)
    http: HttpSettings = Field(default_factory=HttpSettings)
    logging: LoggingSettings = Field(default_factory=LoggingSettings)
    mailer: MailerSettings = Field(default_factory=MailerSettings)
    microsoft: MicrosoftSettings = Field(default_factory=MicrosoftSettings)
    sentry: SentrySettings = Field(default_factory=SentrySettings)

    @field_validator("environment", mode="before")
    def set_environment(cls, name: str, info: ValidationInfo) -> EnvironmentName:
        try:
            return EnvironmentName(name)
        except ValueError:
            logging.getLogger(__name__).warning(f"Invalid environment: {name}")
            return EnvironmentName.DEVELOPMENT
