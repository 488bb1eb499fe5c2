"""Explicit authentication session with a defined lifecycle."""

import logging
from collections.abc import Callable
from dataclasses import dataclass, field
from enum import Enum
from typing import Protocol
from uuid import UUID

from calorie_cam.domain.models import AuthIdentity
from calorie_cam.errors import AuthenticationError

_logger = logging.getLogger(__name__)


class AuthGateway(Protocol):
    """Interface for the auth backend."""

    def sign_up(
        self, email: str, password: str, display_name: str | None
    ) -> AuthIdentity | None:
        """Register a user; return the identity when a session was issued."""

    def sign_in(self, email: str, password: str) -> AuthIdentity:
        """Authenticate with email and password."""

    def sign_out(self, access_token: str | None) -> None:
        """Revoke the session for the access token."""

    def get_user(self, access_token: str) -> AuthIdentity | None:
        """Resolve an access token to its user, or None when invalid."""


class ProfileCreator(Protocol):
    """Creates the profile row for a newly registered user."""

    def create_profile(
        self, user_id: UUID, display_name: str | None, email: str | None
    ) -> object:
        """Create and return a profile."""


class SessionState(Enum):
    """Lifecycle states of an auth session."""

    INITIALIZING = "initializing"
    AUTHENTICATED = "authenticated"
    UNAUTHENTICATED = "unauthenticated"
    DISPOSED = "disposed"


AuthListener = Callable[[SessionState, AuthIdentity | None], None]


@dataclass
class Subscription:
    """Handle returned by ``AuthSession.subscribe``."""

    session: "AuthSession"
    listener: AuthListener

    def unsubscribe(self) -> None:
        """Stop receiving session changes."""
        self.session._remove_listener(self.listener)


@dataclass
class AuthSession:
    """Holds the current identity and notifies listeners on every change.

    Lifecycle: INITIALIZING -> AUTHENTICATED | UNAUTHENTICATED -> DISPOSED.
    Sign-in and sign-out move between the two middle states; nothing moves a
    session out of DISPOSED.
    """

    gateway: AuthGateway
    profiles: ProfileCreator | None = None
    state: SessionState = SessionState.INITIALIZING
    identity: AuthIdentity | None = None
    _listeners: list[AuthListener] = field(default_factory=list)

    def subscribe(self, listener: AuthListener) -> Subscription:
        """Register a listener for state changes."""
        self._ensure_active()
        self._listeners.append(listener)
        return Subscription(session=self, listener=listener)

    def restore(self, access_token: str | None) -> SessionState:
        """Resolve an existing access token into a session state."""
        self._ensure_active()
        identity = self.gateway.get_user(access_token) if access_token else None
        if identity is not None and identity.access_token is None:
            identity = AuthIdentity(
                user_id=identity.user_id,
                email=identity.email,
                access_token=access_token,
                refresh_token=identity.refresh_token,
            )
        self._transition(identity)
        return self.state

    def sign_in(self, email: str, password: str) -> AuthIdentity:
        """Authenticate with email and password."""
        self._ensure_active()
        identity = self.gateway.sign_in(email, password)
        self._transition(identity)
        return identity

    def sign_up(
        self, email: str, password: str, display_name: str | None = None
    ) -> AuthIdentity | None:
        """Register a user and create their profile."""
        self._ensure_active()
        identity = self.gateway.sign_up(email, password, display_name)
        if identity is None:
            self._transition(None)
            return None
        self._create_profile(identity, email, display_name)
        self._transition(identity if identity.access_token else None)
        return identity

    def sign_out(self) -> None:
        """Revoke the current session."""
        self._ensure_active()
        token = self.identity.access_token if self.identity else None
        self.gateway.sign_out(token)
        self._transition(None)

    def dispose(self) -> None:
        """End the session and drop all listeners."""
        if self.state is SessionState.DISPOSED:
            return
        self.identity = None
        self.state = SessionState.DISPOSED
        self._notify()
        self._listeners.clear()

    def require_user(self) -> AuthIdentity:
        """Return the authenticated identity or raise."""
        if self.state is not SessionState.AUTHENTICATED or self.identity is None:
            raise AuthenticationError("User not authenticated")
        return self.identity

    def _create_profile(
        self, identity: AuthIdentity, email: str, display_name: str | None
    ) -> None:
        if self.profiles is None:
            return
        try:
            self.profiles.create_profile(
                identity.user_id,
                display_name or email.split("@")[0],
                email,
            )
        except Exception as exc:
            _logger.warning(
                "Profile creation failed: %s",
                exc,
                extra={"user_id": str(identity.user_id)},
            )

    def _transition(self, identity: AuthIdentity | None) -> None:
        self.identity = identity
        self.state = (
            SessionState.AUTHENTICATED
            if identity is not None
            else SessionState.UNAUTHENTICATED
        )
        self._notify()

    def _notify(self) -> None:
        for listener in list(self._listeners):
            listener(self.state, self.identity)

    def _remove_listener(self, listener: AuthListener) -> None:
        if listener in self._listeners:
            self._listeners.remove(listener)

    def _ensure_active(self) -> None:
        if self.state is SessionState.DISPOSED:
            raise AuthenticationError("Session has been disposed")
