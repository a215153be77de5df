"""
GoTrue API Type Definitions

Configuration, request/response payloads and the outcome types returned by
every client operation.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import (
    Any,
    Dict,
    Generic,
    List,
    Literal,
    Mapping,
    Optional,
    Protocol,
    TypeVar,
    runtime_checkable,
)

from .errors import AuthError, MalformedResponseError
from .helpers import expires_at


T = TypeVar("T")

HTTPMethod = Literal["GET", "POST", "PUT", "DELETE"]


@runtime_checkable
class Transport(Protocol):
    """
    Transport interface for custom implementations.

    ``request`` must return the decoded JSON body of a 2xx response (``None``
    when ``no_resolve_json`` is set) and raise ``AuthError`` for a structured
    error response. Any other failure may be raised as-is.
    """

    async def request(
        self,
        method: HTTPMethod,
        url: str,
        *,
        headers: Mapping[str, str],
        body: Optional[Dict[str, Any]] = None,
        no_resolve_json: bool = False,
    ) -> Any:
        ...


@dataclass
class GoTrueApiConfig:
    """Client configuration options."""

    # Base URL of the auth service, e.g. https://project.example.com/auth/v1
    url: str
    # Headers sent with every request (service key for admin operations)
    headers: Dict[str, str] = field(default_factory=dict)
    # Request timeout in seconds for the default transport (default: 30)
    timeout: float = 30.0
    # Custom transport (default: None, uses HTTPTransport)
    transport: Optional[Transport] = None
    # Enable debug logging (default: False)
    debug: bool = False


class Provider(str, Enum):
    """Third-party identity providers supported by the service."""

    APPLE = "apple"
    AZURE = "azure"
    BITBUCKET = "bitbucket"
    DISCORD = "discord"
    FACEBOOK = "facebook"
    GITHUB = "github"
    GITLAB = "gitlab"
    GOOGLE = "google"
    KEYCLOAK = "keycloak"
    LINKEDIN = "linkedin"
    NOTION = "notion"
    SLACK = "slack"
    SPOTIFY = "spotify"
    TWITCH = "twitch"
    TWITTER = "twitter"
    WORKOS = "workos"


class LinkType(str, Enum):
    """Link kinds accepted by ``generate_link``."""

    SIGNUP = "signup"
    MAGICLINK = "magiclink"
    RECOVERY = "recovery"
    INVITE = "invite"


@dataclass
class User:
    """
    User returned by the service.

    Every field is optional; the object is passed through as sent. The full
    decoded object is kept in ``raw`` so fields this client does not model
    are still available.
    """

    id: Optional[str] = None
    aud: str = ""
    role: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None
    app_metadata: Dict[str, Any] = field(default_factory=dict)
    user_metadata: Dict[str, Any] = field(default_factory=dict)
    identities: List[Dict[str, Any]] = field(default_factory=list)
    confirmed_at: Optional[str] = None
    email_confirmed_at: Optional[str] = None
    phone_confirmed_at: Optional[str] = None
    invited_at: Optional[str] = None
    last_sign_in_at: Optional[str] = None
    action_link: Optional[str] = None
    created_at: str = ""
    updated_at: Optional[str] = None
    raw: Dict[str, Any] = field(default_factory=dict, repr=False)

    @classmethod
    def from_dict(cls, data: Any) -> "User":
        """Create from dictionary."""
        if not isinstance(data, dict):
            raise MalformedResponseError("Expected a user object", details={"body": data})
        return cls(
            id=data.get("id"),
            aud=data.get("aud", ""),
            role=data.get("role"),
            email=data.get("email"),
            phone=data.get("phone"),
            app_metadata=data.get("app_metadata") or {},
            user_metadata=data.get("user_metadata") or {},
            identities=data.get("identities") or [],
            confirmed_at=data.get("confirmed_at"),
            email_confirmed_at=data.get("email_confirmed_at"),
            phone_confirmed_at=data.get("phone_confirmed_at"),
            invited_at=data.get("invited_at"),
            last_sign_in_at=data.get("last_sign_in_at"),
            action_link=data.get("action_link"),
            created_at=data.get("created_at", ""),
            updated_at=data.get("updated_at"),
            raw=dict(data),
        )


@dataclass
class Session:
    """
    Session issued by the token endpoint.

    The full decoded response is kept in ``raw`` (e.g. ``provider_refresh_token``).
    """

    access_token: str
    refresh_token: str = ""
    token_type: str = "bearer"
    expires_in: Optional[int] = None
    # Epoch seconds, derived from expires_in at normalization time
    expires_at: Optional[int] = None
    provider_token: Optional[str] = None
    user: Optional[User] = None
    raw: Dict[str, Any] = field(default_factory=dict, repr=False)

    @classmethod
    def from_dict(cls, data: Any, now: Optional[float] = None) -> "Session":
        """Create from a token response, deriving ``expires_at``."""
        if not isinstance(data, dict) or "access_token" not in data:
            raise MalformedResponseError("Expected a session object", details={"body": data})
        expires_in = data.get("expires_in")
        user_data = data.get("user")
        return cls(
            access_token=data["access_token"],
            refresh_token=data.get("refresh_token", ""),
            token_type=data.get("token_type", "bearer"),
            expires_in=expires_in,
            expires_at=expires_at(expires_in, now) if expires_in is not None else None,
            provider_token=data.get("provider_token"),
            user=User.from_dict(user_data) if user_data else None,
            raw=dict(data),
        )


@dataclass
class OpenIDConnectCredentials:
    """Credentials for an OpenID Connect id_token sign-in."""

    id_token: str
    nonce: str
    client_id: Optional[str] = None
    issuer: Optional[str] = None
    provider: Optional[Literal["google", "apple"]] = None

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for API requests."""
        result: Dict[str, Any] = {
            "id_token": self.id_token,
            "nonce": self.nonce,
        }
        if self.client_id is not None:
            result["client_id"] = self.client_id
        if self.issuer is not None:
            result["issuer"] = self.issuer
        if self.provider is not None:
            result["provider"] = self.provider
        return result


@dataclass
class AdminUserAttributes:
    """Attributes for creating or updating a user with admin rights."""

    email: Optional[str] = None
    phone: Optional[str] = None
    password: Optional[str] = None
    email_confirm: Optional[bool] = None
    phone_confirm: Optional[bool] = None
    user_metadata: Optional[Dict[str, Any]] = None
    app_metadata: Optional[Dict[str, Any]] = None
    ban_duration: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for API requests."""
        return {
            key: value
            for key, value in (
                ("email", self.email),
                ("phone", self.phone),
                ("password", self.password),
                ("email_confirm", self.email_confirm),
                ("phone_confirm", self.phone_confirm),
                ("user_metadata", self.user_metadata),
                ("app_metadata", self.app_metadata),
                ("ban_duration", self.ban_duration),
            )
            if value is not None
        }


# =============================================================================
# Outcomes
# =============================================================================

@dataclass(frozen=True)
class Outcome(Generic[T]):
    """Result of an operation: exactly one of ``data`` and ``error`` is set."""

    data: Optional[T] = None
    error: Optional[AuthError] = None

    def __post_init__(self) -> None:
        if (self.data is None) == (self.error is None):
            raise ValueError(f"{type(self).__name__} needs exactly one of data or error")

    @classmethod
    def ok(cls, data: Any) -> Any:
        return cls(data=data)

    @classmethod
    def fail(cls, error: AuthError) -> Any:
        return cls(error=error)


class SessionResponse(Outcome[Session]):
    @property
    def session(self) -> Optional[Session]:
        return self.data


class UserResponse(Outcome[User]):
    @property
    def user(self) -> Optional[User]:
        return self.data


class UserListResponse(Outcome[List[User]]):
    @property
    def users(self) -> Optional[List[User]]:
        return self.data


class DataResponse(Outcome[Dict[str, Any]]):
    """Outcome whose payload is the response body, uninterpreted."""


@dataclass(frozen=True)
class SignOutResponse:
    """Result of ``sign_out``; there is no payload on success."""

    error: Optional[AuthError] = None
