"""
GoTrue API Client

Asynchronous client for the GoTrue auth service HTTP API: OpenID Connect
sign-in, token refresh, sign-out, invite/recovery/link flows and the admin
user endpoints.

Every operation returns an outcome object instead of raising for service
errors. An error response from the service (``AuthError``) ends up in
``outcome.error``; any other failure is raised to the caller untouched.
"""

import logging
from typing import Any, Callable, Dict, List, Mapping, Optional, Type, Union

from .errors import ConfigurationError, MalformedResponseError, classify_error
from .fetch import HTTPTransport
from .helpers import QueryParams, build_query_string, encode_uri_component
from .types import (
    AdminUserAttributes,
    DataResponse,
    GoTrueApiConfig,
    HTTPMethod,
    LinkType,
    OpenIDConnectCredentials,
    Outcome,
    Provider,
    Session,
    SessionResponse,
    SignOutResponse,
    Transport,
    User,
    UserListResponse,
    UserResponse,
)


logger = logging.getLogger("gotrue_api")

AttributesInput = Union[AdminUserAttributes, Mapping[str, Any]]


# =============================================================================
# Response normalizers
# =============================================================================

def _normalize_session(data: Any) -> Session:
    return Session.from_dict(data)


def _normalize_user(data: Any) -> User:
    return User.from_dict(data)


def _normalize_user_list(data: Any) -> List[User]:
    """Unwrap the ``{"users": [...]}`` envelope of the list endpoint."""
    if not isinstance(data, dict) or not isinstance(data.get("users"), list):
        raise MalformedResponseError("Expected a users envelope", details={"body": data})
    return [User.from_dict(user) for user in data["users"]]


def _normalize_body(data: Any) -> Any:
    if data is None:
        raise MalformedResponseError("Expected a response body")
    return data


def _normalize_optional_body(data: Any) -> Any:
    # recover answers with an empty object, or nothing at all
    return {} if data is None else data


def _attributes_body(attributes: AttributesInput) -> Dict[str, Any]:
    if isinstance(attributes, AdminUserAttributes):
        return attributes.to_dict()
    return dict(attributes)


class GoTrueApi:
    """
    GoTrue API Client - asynchronous SDK entry point.

    Holds only immutable configuration (base URL, default headers and the
    transport), so a single instance can serve concurrent calls.

    Admin operations authenticate with whatever service credentials the
    default headers carry; never expose those in a browser.
    """

    def __init__(self, config: GoTrueApiConfig) -> None:
        """Initialize the GoTrue API client."""
        self._validate_config(config)

        self._url = config.url.rstrip("/")
        self._headers: Dict[str, str] = dict(config.headers or {})
        self._debug = config.debug

        # Transport (only closed here if created here)
        self._owns_transport = config.transport is None
        self._transport: Transport = (
            config.transport if config.transport is not None else HTTPTransport(timeout=config.timeout)
        )

        self._log(f"GoTrueApi initialized (url={self._url})")

    def _validate_config(self, config: GoTrueApiConfig) -> None:
        """Validate configuration."""
        if not config.url:
            raise ConfigurationError("url is required")
        if not config.url.startswith(("http://", "https://")):
            raise ConfigurationError(
                "Invalid url. Expected an absolute http(s) URL",
                {"url": config.url},
            )

    def _log(self, message: str, *args: Any) -> None:
        """Log debug message."""
        if self._debug:
            logger.debug(f"[GoTrue] {message}", *args)

    @property
    def url(self) -> str:
        return self._url

    @property
    def headers(self) -> Dict[str, str]:
        """Copy of the default headers."""
        return dict(self._headers)

    # =========================================================================
    # Request building
    # =========================================================================

    def _create_request_headers(self, jwt: str) -> Dict[str, str]:
        """
        Copy the configured headers and add the bearer token.

        Args:
            jwt: A valid, logged-in JWT.
        """
        headers = dict(self._headers)
        headers["Authorization"] = f"Bearer {jwt}"
        return headers

    async def _request(
        self,
        method: HTTPMethod,
        path: str,
        body: Optional[Dict[str, Any]] = None,
        headers: Optional[Dict[str, str]] = None,
        no_resolve_json: bool = False,
    ) -> Any:
        """Send one request through the transport."""
        return await self._transport.request(
            method,
            f"{self._url}{path}",
            headers=headers if headers is not None else dict(self._headers),
            body=body,
            no_resolve_json=no_resolve_json,
        )

    async def _execute(
        self,
        outcome_cls: Type[Outcome],
        normalize: Callable[[Any], Any],
        method: HTTPMethod,
        path: str,
        body: Optional[Dict[str, Any]] = None,
    ) -> Any:
        """Run a request and fold service errors into ``outcome_cls``."""
        try:
            data = await self._request(method, path, body=body)
        except Exception as error:
            auth_error = classify_error(error)
            self._log(f"{outcome_cls.__name__} request rejected (status={auth_error.status})")
            return outcome_cls.fail(auth_error)

        return outcome_cls.ok(normalize(data))

    def get_url_for_provider(
        self,
        provider: Union[Provider, str],
        redirect_to: Optional[str] = None,
        scopes: Optional[str] = None,
        query_params: Optional[QueryParams] = None,
    ) -> str:
        """
        Generate the login URL for a third-party provider. Nothing is fetched.

        Args:
            provider: One of the providers supported by the service
            redirect_to: URL or mobile address to send the user to after
                they are confirmed
            scopes: Space-separated list of scopes granted to the OAuth
                application
            query_params: Extra query parameters for the OAuth application,
                as a mapping or a sequence of pairs

        Raises:
            ValueError: If ``provider`` is not a supported provider
        """
        provider = Provider(provider)
        query = build_query_string(
            [
                ("provider", provider.value),
                ("redirect_to", redirect_to),
                ("scopes", scopes),
            ],
            query_params,
        )
        return f"{self._url}/authorize{query}"

    # =========================================================================
    # Session Methods
    # =========================================================================

    async def sign_in_with_openid_connect(
        self, credentials: OpenIDConnectCredentials
    ) -> SessionResponse:
        """
        Log in an OpenID Connect user with their id_token.

        Args:
            credentials: id_token, nonce and optionally client_id, issuer
                and provider

        Returns:
            SessionResponse with the new session, or the service error
        """
        self._log("OpenID Connect sign-in")
        return await self._execute(
            SessionResponse,
            _normalize_session,
            "POST",
            "/token" + build_query_string([("grant_type", "id_token")]),
            body=credentials.to_dict(),
        )

    async def refresh_access_token(self, refresh_token: str) -> SessionResponse:
        """
        Generate a new JWT.

        Args:
            refresh_token: A valid refresh token that was returned on login
        """
        self._log("Refreshing access token")
        return await self._execute(
            SessionResponse,
            _normalize_session,
            "POST",
            "/token" + build_query_string([("grant_type", "refresh_token")]),
            body={"refresh_token": refresh_token},
        )

    async def sign_out(self, jwt: str) -> SignOutResponse:
        """
        Remove a logged-in session. The response body is ignored.

        Args:
            jwt: A valid, logged-in JWT
        """
        self._log("Sign out")
        try:
            await self._request(
                "POST",
                "/logout",
                body={},
                headers=self._create_request_headers(jwt),
                no_resolve_json=True,
            )
        except Exception as error:
            return SignOutResponse(error=classify_error(error))

        return SignOutResponse()

    # =========================================================================
    # Account Flow Methods
    # =========================================================================

    async def invite_user_by_email(
        self,
        email: str,
        redirect_to: Optional[str] = None,
        data: Optional[Dict[str, Any]] = None,
    ) -> UserResponse:
        """
        Send an invite link to an email address.

        Args:
            email: The email address of the user
            redirect_to: URL or mobile address to send the user to after
                they are confirmed
            data: Optional user metadata
        """
        self._log("Invite user")
        body: Dict[str, Any] = {"email": email}
        if data is not None:
            body["data"] = data
        return await self._execute(
            UserResponse,
            _normalize_user,
            "POST",
            "/invite" + build_query_string([("redirect_to", redirect_to)]),
            body=body,
        )

    async def reset_password_for_email(
        self,
        email: str,
        redirect_to: Optional[str] = None,
        captcha_token: Optional[str] = None,
    ) -> DataResponse:
        """
        Send a password reset request to an email address.

        Args:
            email: The email address of the user
            redirect_to: URL or mobile address to send the user to after
                they are confirmed
            captcha_token: Verification token from the captcha challenge
        """
        self._log("Password recovery")
        security: Dict[str, Any] = {}
        if captcha_token is not None:
            security["captcha_token"] = captcha_token
        return await self._execute(
            DataResponse,
            _normalize_optional_body,
            "POST",
            "/recover" + build_query_string([("redirect_to", redirect_to)]),
            body={"email": email, "gotrue_meta_security": security},
        )

    async def generate_link(
        self,
        link_type: Union[LinkType, str],
        email: str,
        password: Optional[str] = None,
        data: Optional[Dict[str, Any]] = None,
        redirect_to: Optional[str] = None,
    ) -> DataResponse:
        """
        Generate a link to be sent via email or other channels.

        The payload is returned as sent by the service: a user for most
        link types, a session-like object for some. It is not interpreted.

        Args:
            link_type: signup, magiclink, recovery or invite
            email: The user's email
            password: User password. For signup only
            data: Optional user metadata. For signup only
            redirect_to: URL to send the user to once the link is used
        """
        link_type = LinkType(link_type)
        self._log(f"Generate {link_type.value} link")
        body: Dict[str, Any] = {"type": link_type.value, "email": email}
        if password is not None:
            body["password"] = password
        if data is not None:
            body["data"] = data
        if redirect_to is not None:
            body["redirect_to"] = redirect_to
        return await self._execute(
            DataResponse,
            _normalize_body,
            "POST",
            "/admin/generate_link",
            body=body,
        )

    # =========================================================================
    # User Admin Methods
    # =========================================================================

    async def create_user(self, attributes: AttributesInput) -> UserResponse:
        """
        Create a new user.

        Args:
            attributes: The data to create the user with
        """
        return await self._execute(
            UserResponse,
            _normalize_user,
            "POST",
            "/admin/users",
            body=_attributes_body(attributes),
        )

    async def list_users(self) -> UserListResponse:
        """Get a list of users."""
        return await self._execute(
            UserListResponse,
            _normalize_user_list,
            "GET",
            "/admin/users",
        )

    async def get_user_by_id(self, uid: str) -> UserResponse:
        """Get user by id."""
        return await self._execute(
            UserResponse,
            _normalize_user,
            "GET",
            f"/admin/users/{encode_uri_component(uid)}",
        )

    async def update_user_by_id(self, uid: str, attributes: AttributesInput) -> UserResponse:
        """
        Update the user data.

        Args:
            uid: The user's unique identifier
            attributes: The data to update
        """
        return await self._execute(
            UserResponse,
            _normalize_user,
            "PUT",
            f"/admin/users/{encode_uri_component(uid)}",
            body=_attributes_body(attributes),
        )

    async def delete_user(self, uid: str) -> UserResponse:
        """
        Delete a user.

        Returns:
            UserResponse holding the deleted user
        """
        self._log("Deleting user")
        return await self._execute(
            UserResponse,
            _normalize_user,
            "DELETE",
            f"/admin/users/{encode_uri_component(uid)}",
            body={},
        )

    # =========================================================================
    # Lifecycle
    # =========================================================================

    async def close(self) -> None:
        """Close the default transport."""
        if self._owns_transport and isinstance(self._transport, HTTPTransport):
            await self._transport.close()

    async def __aenter__(self) -> "GoTrueApi":
        return self

    async def __aexit__(self, *args: Any) -> None:
        await self.close()


# =============================================================================
# Factory Functions
# =============================================================================

def create_gotrue_api(config: GoTrueApiConfig) -> GoTrueApi:
    """Create a new GoTrue API client."""
    return GoTrueApi(config)
