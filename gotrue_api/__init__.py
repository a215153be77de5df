"""
GoTrue API Python Client

An asyncio client for the GoTrue auth service HTTP API: OpenID Connect
sign-in, token refresh, invite/recovery/link flows and user administration.

Service errors come back in ``outcome.error``; every other failure is raised.
"""

from .client import GoTrueApi, create_gotrue_api
from .types import (
    GoTrueApiConfig,
    Transport,
    Provider,
    LinkType,
    User,
    Session,
    OpenIDConnectCredentials,
    AdminUserAttributes,
    Outcome,
    SessionResponse,
    UserResponse,
    UserListResponse,
    DataResponse,
    SignOutResponse,
)
from .errors import (
    GoTrueError,
    AuthError,
    NetworkError,
    MalformedResponseError,
    ConfigurationError,
    is_auth_error,
    classify_error,
)
from .fetch import HTTPTransport

__version__ = "1.0.0"
__all__ = [
    # Clients
    "GoTrueApi",
    "create_gotrue_api",
    # Types
    "GoTrueApiConfig",
    "Transport",
    "Provider",
    "LinkType",
    "User",
    "Session",
    "OpenIDConnectCredentials",
    "AdminUserAttributes",
    # Outcomes
    "Outcome",
    "SessionResponse",
    "UserResponse",
    "UserListResponse",
    "DataResponse",
    "SignOutResponse",
    # Errors
    "GoTrueError",
    "AuthError",
    "NetworkError",
    "MalformedResponseError",
    "ConfigurationError",
    "is_auth_error",
    "classify_error",
    # Transport
    "HTTPTransport",
]
