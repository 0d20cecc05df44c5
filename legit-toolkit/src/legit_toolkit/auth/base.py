"""
Authentication provider abstractions.

An 'AuthProvider' answers one question for the rest of the toolkit: who is
signed in right now, if anyone. The session controller receives a provider in
its constructor instead of reading an ambient global, which keeps it testable
without a UI framework. Sign-in flows themselves (Firebase, OAuth, ...) live in
concrete providers outside this package.

'StaticAuthProvider' holds the user in memory; it backs the terminal client and
the tests.
"""

from abc import ABC, abstractmethod

from loguru import logger

from legit_toolkit.conversation_database.data_models.user import User


class AuthenticationRequiredError(Exception):
    """Raised when an operation needs a signed-in user and there is none."""


class AuthProvider(ABC):
    """Abstract source of the current user."""

    @property
    @abstractmethod
    def current_user(self) -> User | None:
        """The signed-in user, or None when nobody is signed in."""

    @property
    def loading(self) -> bool:
        """True while the provider is still resolving the session."""
        return False

    def require_user(self) -> User:
        """Return the current user or raise 'AuthenticationRequiredError'."""
        user = self.current_user
        if user is None:
            raise AuthenticationRequiredError("A signed-in user is required")
        return user


class StaticAuthProvider(AuthProvider):
    def __init__(self, user: User | None = None) -> None:
        self._user = user

    @property
    def current_user(self) -> User | None:
        return self._user

    def sign_in(self, user_id: str, display_name: str | None = None) -> User:
        self._user = User(id=user_id, display_name=display_name)
        logger.info(f"Signed in as {user_id!r}")
        return self._user

    def sign_out(self) -> None:
        if self._user is not None:
            logger.info(f"Signed out {self._user.id!r}")
        self._user = None
