"""
GoTrue API Error Classes

Two tiers of failure:

- ``AuthError``: a structured rejection returned by the auth service
  (HTTP status + message). Operations return it in the outcome's error
  channel instead of raising it.
- everything else (``NetworkError``, ``MalformedResponseError``, programming
  errors): raised out of the operation unchanged.
"""

import json
from datetime import datetime, timezone
from typing import Any, Dict, Optional


class GoTrueError(Exception):
    """Base error class for the GoTrue API client."""

    def __init__(
        self,
        code: str,
        message: str,
        status: int = 500,
        details: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message)
        self.code = code
        self.message = message
        self.status = status
        self.details = details or {}
        self.timestamp = datetime.now(timezone.utc).isoformat().replace("+00:00", "Z")

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for logging/serialization."""
        return {
            "name": self.__class__.__name__,
            "code": self.code,
            "message": self.message,
            "status": self.status,
            "details": self.details,
            "timestamp": self.timestamp,
        }

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(status={self.status!r}, message={self.message!r})"


class AuthError(GoTrueError):
    """Error response returned by the auth service."""

    def __init__(
        self,
        message: str,
        status: int,
        code: str = "AUTH_API_ERROR",
        details: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(code, message, status, details)

    @classmethod
    def from_api_response(cls, body: Dict[str, Any], status: int) -> "AuthError":
        """Create error from a decoded error body."""
        code = body.get("error_code") or body.get("code")
        return cls(
            message=get_error_message(body),
            status=status or 500,
            code=str(code) if code else "AUTH_API_ERROR",
            details=body,
        )


class NetworkError(GoTrueError):
    """Network error (connection issues, timeouts)."""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__("NETWORK_ERROR", message, 0, details)


class MalformedResponseError(GoTrueError):
    """Response body could not be decoded or had an unexpected shape."""

    def __init__(
        self,
        message: str,
        status: int = 0,
        details: Optional[Dict[str, Any]] = None,
    ):
        super().__init__("MALFORMED_RESPONSE", message, status, details)


class ConfigurationError(GoTrueError):
    """Configuration error."""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__("CONFIGURATION_ERROR", message, 0, details)


def get_error_message(body: Any) -> str:
    """Pick the human readable message out of a service error body."""
    if isinstance(body, dict):
        for key in ("msg", "message", "error_description", "error"):
            value = body.get(key)
            if value:
                return str(value)
    return json.dumps(body)


def is_auth_error(error: Any) -> bool:
    """Check if error is a structured service error."""
    return isinstance(error, AuthError)


def classify_error(error: BaseException) -> AuthError:
    """
    Return ``error`` if it is a service error, otherwise re-raise it.

    Used by every operation so that anticipated rejections land in the
    outcome while infrastructure failures keep propagating untouched.
    """
    if isinstance(error, AuthError):
        return error
    raise error
