import enum
from http import HTTPStatus
from typing import Any


class ErrorType(enum.Enum):
    CONFIRMATION_REQUIRED = "confirmation_required"
    ENTITY_ALREADY_EXISTS = "entity_already_exists"
    ENTITY_NOT_FOUND = "entity_not_found"
    INTERNAL_ERROR = "internal_error"
    INVALID_DATA = "invalid_data"
    INVALID_STATE = "invalid_state"
    MISSING_CONFIGURATION = "missing_configuration"
    THIRD_PARTY_REQUEST = "third_party_request"
    UNHANDLED_EXCEPTION = "unhandled_exception"
    UNAUTHORIZED_USER = "unauthorized_user"
    UNSPECIFIED = "unspecified"


class BaseError(Exception):
    extra: dict[str, Any]

    def __init__(
        self,
        message: str,
        error_type: ErrorType = ErrorType.UNSPECIFIED,
        status_code: HTTPStatus = HTTPStatus.INTERNAL_SERVER_ERROR,
        **kwargs: Any,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.error_type = error_type
        self.status_code = status_code
        self.extra = {}

        action = kwargs.get("action")
        if action:
            self.extra["action"] = action
        user = kwargs.get("user")
        if user:
            self.extra["user"] = str(user)

    def __str__(self) -> str:
        return f"error: {self.error_type.value}; description: {self.message}"


class EntityAlreadyExistError(BaseError):
    def __init__(
        self,
        message: str,
        error_type: ErrorType = ErrorType.ENTITY_ALREADY_EXISTS,
        status_code: HTTPStatus = HTTPStatus.BAD_REQUEST,
        **kwargs: Any,
    ) -> None:
        super().__init__(message, error_type, status_code, **kwargs)


class EntityNotFoundError(BaseError):
    def __init__(
        self,
        message: str,
        error_type: ErrorType = ErrorType.ENTITY_NOT_FOUND,
        status_code: HTTPStatus = HTTPStatus.NOT_FOUND,
        **kwargs: Any,
    ) -> None:
        super().__init__(message, error_type, status_code, **kwargs)


class InvalidDataError(BaseError):
    def __init__(
        self,
        message: str,
        error_type: ErrorType = ErrorType.INVALID_DATA,
        status_code: HTTPStatus = HTTPStatus.BAD_REQUEST,
        **kwargs: Any,
    ) -> None:
        super().__init__(message, error_type, status_code, **kwargs)


class ConfirmationRequiredError(BaseError):
    """Raised when a destructive action is attempted without explicit confirmation."""

    def __init__(
        self,
        message: str,
        error_type: ErrorType = ErrorType.CONFIRMATION_REQUIRED,
        status_code: HTTPStatus = HTTPStatus.BAD_REQUEST,
        **kwargs: Any,
    ) -> None:
        super().__init__(message, error_type, status_code, **kwargs)


class OAuthConfigurationError(BaseError):
    def __init__(
        self,
        message: str,
        error_type: ErrorType = ErrorType.MISSING_CONFIGURATION,
        status_code: HTTPStatus = HTTPStatus.BAD_REQUEST,
        **kwargs: Any,
    ) -> None:
        super().__init__(message, error_type, status_code, **kwargs)


class InvalidOAuthStateError(BaseError):
    def __init__(
        self,
        message: str,
        error_type: ErrorType = ErrorType.INVALID_STATE,
        status_code: HTTPStatus = HTTPStatus.BAD_REQUEST,
        **kwargs: Any,
    ) -> None:
        super().__init__(message, error_type, status_code, **kwargs)


class OAuthProviderError(BaseError):
    def __init__(
        self,
        message: str,
        error_type: ErrorType = ErrorType.THIRD_PARTY_REQUEST,
        status_code: HTTPStatus = HTTPStatus.BAD_GATEWAY,
        **kwargs: Any,
    ) -> None:
        super().__init__(message, error_type, status_code, **kwargs)


class MailerError(BaseError):
    def __init__(
        self,
        message: str,
        error_type: ErrorType = ErrorType.THIRD_PARTY_REQUEST,
        status_code: HTTPStatus = HTTPStatus.INTERNAL_SERVER_ERROR,
        **kwargs: Any,
    ) -> None:
        super().__init__(message, error_type, status_code, **kwargs)
