"""
Session manager.

Exchanges credentials with the RusTour API, persists the session token
and tracks the signed-in principal.

Network calls run concurrently; applying their results to the token store
and the in-memory user happens under one lock with no awaits inside, so
concurrent operations land in completion order (last writer wins).
"""

import asyncio
import logging
import threading
from enum import Enum
from dataclasses import dataclass
from typing import Awaitable, Callable, Optional

from pydantic import ValidationError

from .base import BaseService, ServiceContext, validate_base_url
from ..auth.errors import AuthError, AuthErrorKind
from ..auth.models import Credentials, RegistrationRequest, LoginResponse, User
from ..transport import ResponseDecodeError, TransportError, TransportResponse

logger = logging.getLogger(__name__)


class SessionState(str, Enum):
    """Derived session state."""
    LOGGED_OUT = "logged_out"
    AUTHENTICATING = "authenticating"
    LOGGED_IN = "logged_in"


@dataclass
class AuthResult:
    """Completion value of a session operation."""
    success: bool
    user: Optional[User] = None
    token: Optional[str] = None
    error: Optional[AuthError] = None

    @classmethod
    def failure(cls, error: AuthError) -> "AuthResult":
        return cls(success=False, error=error)

    def to_dict(self) -> dict:
        result = {"success": self.success}
        if self.user:
            result["user"] = self.user.to_dict()
        if self.error:
            result["error"] = {"kind": self.error.kind.value, "message": self.error.message}
        return result


class SessionManager(BaseService):
    """
    Login, registration and logout state machine.

    sign_in only stores the token and register only sets the current user;
    reconcile() is the consistency check for the mixed states this allows.
    """

    def __init__(self, context: ServiceContext):
        """
        Initialize the session manager.

        Raises:
            ValueError: If the configured base URL is malformed
        """
        super().__init__(context)
        validate_base_url(self.config.api_base_url)
        self._lock = threading.Lock()
        self._current_user: Optional[User] = None
        self._in_flight = 0

    # Read accessors

    @property
    def current_user(self) -> Optional[User]:
        return self._current_user

    @property
    def is_logged_in(self) -> bool:
        return self._current_user is not None

    @property
    def token(self) -> Optional[str]:
        return self.token_store.get()

    @property
    def state(self) -> SessionState:
        if self._current_user is not None:
            return SessionState.LOGGED_IN
        if self._in_flight:
            return SessionState.AUTHENTICATING
        return SessionState.LOGGED_OUT

    @property
    def is_consistent(self) -> bool:
        """True when token and user are both present or both absent."""
        with self._lock:
            return (self.token_store.get() is not None) == (self._current_user is not None)

    # Operations

    async def sign_in(self, email: str, password: str) -> AuthResult:
        """
        Exchange credentials for a session token.

        Input is forwarded as is. On success the token is persisted; the
        current user is left untouched and returned as it stands.
        """
        credentials = Credentials(email=email, password=password)

        self._in_flight += 1
        try:
            response = await self._post(self.config.login_url, credentials.to_wire())
            token = self._read_token(response)

            with self._lock:
                self.token_store.set(token)
                user = self._current_user
        except AuthError as e:
            logger.warning(f"Sign-in failed ({e.kind.value}): {e.message}")
            return AuthResult.failure(e)
        finally:
            self._in_flight -= 1

        logger.info("Signed in, session token stored")
        return AuthResult(success=True, user=user, token=token)

    async def register(
        self,
        first_name: str,
        last_name: str,
        email: str,
        password: str,
        role: str = "User"
    ) -> AuthResult:
        """
        Register a new account.

        On success the decoded user becomes the current user. The token
        store is not touched.
        """
        request = RegistrationRequest(
            email=email,
            password=password,
            first_name=first_name,
            last_name=last_name,
            role=role
        )

        self._in_flight += 1
        try:
            response = await self._post(self.config.register_url, request.to_wire())
            user = self._read_user(response)

            with self._lock:
                self._current_user = user
        except AuthError as e:
            logger.warning(f"Registration failed ({e.kind.value}): {e.message}")
            return AuthResult.failure(e)
        finally:
            self._in_flight -= 1

        logger.info(f"Registered {user.email} as {user.role}")
        return AuthResult(success=True, user=user)

    def sign_out(self):
        """Clear the current user and the stored token. Idempotent."""
        with self._lock:
            self._clear()
        logger.info("Signed out")

    def reconcile(self) -> bool:
        """
        Treat a half-populated session as logged out.

        Returns:
            True if the session is logged in with both token and user
        """
        with self._lock:
            has_token = self.token_store.get() is not None
            has_user = self._current_user is not None
            if has_token != has_user:
                logger.warning(
                    f"Inconsistent session (token={has_token}, user={has_user}), signing out"
                )
                self._clear()
                return False
            return has_user

    def update_profile(
        self,
        email: Optional[str] = None,
        notifications_enabled: Optional[bool] = None,
        profile_image: Optional[bytes] = None
    ) -> Optional[User]:
        """
        Edit the signed-in user in place. In-memory only.

        Returns:
            The updated user, or None when logged out
        """
        with self._lock:
            user = self._current_user
            if user is None:
                logger.warning("Profile update ignored, no user signed in")
                return None

            if email is not None:
                user.email = email
            if notifications_enabled is not None:
                user.notifications_enabled = notifications_enabled
            if profile_image is not None:
                user.profile_image = profile_image

        logger.debug("Profile updated")
        return user

    # Callback-style bridge

    def start_sign_in(
        self,
        email: str,
        password: str,
        on_complete: Callable[[AuthResult], None]
    ) -> "asyncio.Task[AuthResult]":
        """
        Run sign_in in the background and report through a callback.

        The callback runs exactly once, on the current event loop. The
        returned task is the cancellation handle: a cancelled call applies
        no state and skips the callback. A call that dies with an
        unexpected exception is logged and also skips the callback.
        """
        return self._start(lambda: self.sign_in(email, password), on_complete)

    def start_register(
        self,
        first_name: str,
        last_name: str,
        email: str,
        password: str,
        on_complete: Callable[[AuthResult], None],
        role: str = "User"
    ) -> "asyncio.Task[AuthResult]":
        """Run register in the background and report through a callback."""
        return self._start(
            lambda: self.register(first_name, last_name, email, password, role),
            on_complete
        )

    def _start(
        self,
        operation: Callable[[], Awaitable[AuthResult]],
        on_complete: Callable[[AuthResult], None]
    ) -> "asyncio.Task[AuthResult]":
        loop = asyncio.get_running_loop()
        task = loop.create_task(operation())

        def _deliver(finished: "asyncio.Task[AuthResult]"):
            if finished.cancelled():
                logger.info("Session operation cancelled")
                return
            error = finished.exception()
            if error is not None:
                logger.error("Session operation failed unexpectedly, no result delivered", exc_info=error)
                return
            on_complete(finished.result())

        task.add_done_callback(_deliver)
        return task

    # Helpers

    def _clear(self):
        self._current_user = None
        self.token_store.set(None)

    async def _post(self, url: str, payload: dict) -> TransportResponse:
        try:
            return await self.transport.post_json(url, payload)
        except TransportError as e:
            raise AuthError(AuthErrorKind.TRANSPORT, str(e), cause=e) from e
        except ResponseDecodeError as e:
            raise AuthError(AuthErrorKind.INVALID_RESPONSE, cause=e) from e

    def _check_response(self, response: TransportResponse):
        if not response.is_success:
            raise AuthError(
                AuthErrorKind.INVALID_RESPONSE,
                f"Invalid Response (HTTP {response.status_code})"
            )
        if not response.body:
            raise AuthError(AuthErrorKind.NO_DATA)

    def _read_token(self, response: TransportResponse) -> str:
        self._check_response(response)
        try:
            return LoginResponse.model_validate_json(response.body).token
        except ValidationError as e:
            raise AuthError(AuthErrorKind.INVALID_RESPONSE, cause=e) from e

    def _read_user(self, response: TransportResponse) -> User:
        self._check_response(response)
        try:
            return User.from_json(response.body)
        except ValidationError as e:
            raise AuthError(AuthErrorKind.DECODE, cause=e) from e
