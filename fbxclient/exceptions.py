"""python-fbxclient exceptions."""

from __future__ import annotations

from asyncio import TimeoutError as _asyncioTimeoutError
from enum import Enum
from functools import cache
from typing import Any


class FreeboxException(Exception):
    """Base exception for library errors."""


class TimeoutError(FreeboxException, _asyncioTimeoutError):
    """Timeout exception for appliance errors."""

    def __repr__(self) -> str:
        return FreeboxException.__repr__(self)

    def __str__(self) -> str:
        return FreeboxException.__str__(self)


class _ConnectionError(FreeboxException):
    """Connection exception for appliance errors."""


class ResolutionError(FreeboxException):
    """The api endpoint of the appliance could not be discovered."""


class PairingRejected(FreeboxException):
    """The pairing request ended with a status other than granted."""

    def __init__(self, *args: Any, **kwargs: Any) -> None:
        self.status = kwargs.get("status")
        super().__init__(*args)


class ApiError(FreeboxException):
    """Base exception for errors reported in the response envelope."""

    def __init__(self, *args: Any, **kwargs: Any) -> None:
        self.error_code: ApiErrorCode | None = kwargs.get("error_code")
        self.msg: str | None = kwargs.get("msg")
        super().__init__(*args)

    def __repr__(self) -> str:
        err_code = self.error_code.__repr__() if self.error_code else ""
        return f"{self.__class__.__name__}({err_code})"

    def __str__(self) -> str:
        err_code = f" (error_code={self.error_code.value})" if self.error_code else ""
        return super().__str__() + err_code


class AuthorizeError(ApiError):
    """The application registration request was refused."""


class AuthorizeCheckError(ApiError):
    """A pairing status poll was refused."""


class LoginChallengeError(ApiError):
    """The login challenge could not be obtained."""


class AuthenticationError(ApiError):
    """Base exception for appliance authentication errors."""


class LoginError(AuthenticationError):
    """The session could not be opened with the application token."""


class ApiErrorCode(Enum):
    """Enum for appliance error codes."""

    def __str__(self) -> str:
        return f"{self.name}({self.value})"

    @staticmethod
    @cache
    def from_str(value: str) -> ApiErrorCode:
        """Convert an error code string to an ApiErrorCode."""
        return ApiErrorCode(value)

    AUTH_REQUIRED = "auth_required"
    INVALID_TOKEN = "invalid_token"
    PENDING_TOKEN = "pending_token"
    INSUFFICIENT_RIGHTS = "insufficient_rights"
    DENIED_FROM_EXTERNAL_IP = "denied_from_external_ip"
    INVALID_REQUEST = "invalid_request"
    RATELIMITED = "ratelimited"
    NEW_APPS_DENIED = "new_apps_denied"
    APPS_DENIED = "apps_denied"
    INTERNAL_ERROR = "internal_error"
    INVALID_SESSION = "invalid_session"

    # Library internal for unknown error codes
    INTERNAL_UNKNOWN_ERROR = "internal_unknown_error"


AUTHENTICATION_ERRORS = [
    ApiErrorCode.AUTH_REQUIRED,
    ApiErrorCode.INVALID_TOKEN,
    ApiErrorCode.PENDING_TOKEN,
    ApiErrorCode.INVALID_SESSION,
]

#: Login refusals meaning the application token itself is no longer usable.
REPAIR_REQUIRED_ERRORS = [
    ApiErrorCode.INVALID_TOKEN,
    ApiErrorCode.PENDING_TOKEN,
]
