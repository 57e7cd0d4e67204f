"""
Watchlist - Authentication State.

Holds the signed-in user for this process and tells subscribers
when it changes. Credential checking happens upstream; this only
tracks who the current user is.
"""

import logging
from dataclasses import dataclass
from typing import Callable, Optional
from uuid import UUID

from core.events import Disposer, EventSource
from core.exceptions import NotAuthenticatedError


logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class User:
    """An authenticated user."""
    id: UUID
    email: Optional[str] = None


class AuthState:
    """
    Current user plus change notifications.

    Usage:
        auth = AuthState()
        dispose = auth.subscribe(lambda user: print(user))
        auth.sign_in(User(id=uuid4()))
        dispose()
    """

    def __init__(self) -> None:
        self._user: Optional[User] = None
        self._changes: EventSource[Optional[User]] = EventSource("auth")

    @property
    def user(self) -> Optional[User]:
        return self._user

    @property
    def is_authenticated(self) -> bool:
        return self._user is not None

    def subscribe(self, listener: Callable[[Optional[User]], None]) -> Disposer:
        """Be told of every sign-in/sign-out; returns the unsubscribe callable."""
        return self._changes.subscribe(listener)

    def sign_in(self, user: User) -> None:
        self._user = user
        logger.info(f"User signed in: {user.id}")
        self._changes.emit(user)

    def sign_out(self) -> None:
        if self._user is None:
            return
        logger.info(f"User signed out: {self._user.id}")
        self._user = None
        self._changes.emit(None)

    def require_user(self) -> User:
        """
        Raises:
            NotAuthenticatedError: If nobody is signed in
        """
        if self._user is None:
            raise NotAuthenticatedError()
        return self._user
