"""Authentication gate state shared by every page of the console."""

from __future__ import annotations

import logging
from typing import Callable, Optional

from ..domain.entities import User
from ..domain.ports import UseCaseError

LOGGER = logging.getLogger(__name__)

LOGIN_PATH = "/login"
HOME_PATH = "/dashboard"
SESSION_EXPIRED_MESSAGE = "Your session has expired. Please sign in again."


class SessionVM:
    """Tracks the signed-in user and decides where a page request may go.

    ``check`` treats any failure as "anonymous"; ``logout`` clears local state
    even when the backend call fails. ``expire`` is called when another page
    finds the backend session gone, so the next gate check redirects to
    sign-in.
    """

    def __init__(
        self,
        *,
        load_user: Callable[[], User],
        login: Callable[[str, str, bool], User],
        logout: Callable[[], None],
    ) -> None:
        self._load_user = load_user
        self._login = login
        self._logout = logout

        self.user: Optional[User] = None
        self.is_loading: bool = True
        self.error: Optional[str] = None
        self.on_expired: Optional[Callable[[], None]] = None

    @property
    def is_authenticated(self) -> bool:
        return self.user is not None

    @property
    def is_authorized(self) -> bool:
        return self.user is not None and self.user.is_authorized

    def check(self) -> Optional[User]:
        self.is_loading = True
        try:
            self.user = self._load_user()
        except UseCaseError as err:
            LOGGER.debug("No active session: %s", err.message)
            self.user = None
        finally:
            self.is_loading = False
        return self.user

    def login(self, login_identifier: str, password: str, remember_me: bool = False) -> bool:
        self.error = None
        try:
            user = self._login(login_identifier, password, remember_me)
        except UseCaseError as err:
            LOGGER.warning("Login failed for %s: %s", login_identifier, err.message)
            self.error = err.message
            self.user = None
            return False
        if not user.is_authorized:
            self.error = "Access denied. Only staff accounts can use this console."
            self.user = None
            return False
        self.user = user
        self.is_loading = False
        LOGGER.info("Signed in as %s", user.username)
        return True

    def logout(self) -> None:
        try:
            self._logout()
        except UseCaseError as err:
            LOGGER.error("Logout error: %s", err.message)
        finally:
            self.user = None
            self.error = None

    def expire(self) -> None:
        if self.user is None and not self.is_loading:
            return
        LOGGER.warning("Session for %s expired", self.user.username if self.user else "unknown user")
        self.user = None
        self.is_loading = False
        self.error = SESSION_EXPIRED_MESSAGE
        if self.on_expired:
            self.on_expired()

    def redirect_for(self, path: str) -> Optional[str]:
        """Return the path a request for ``path`` should be sent to, or None."""
        if self.is_loading:
            return None
        if path == LOGIN_PATH:
            return HOME_PATH if self.is_authorized else None
        if not self.is_authorized:
            return LOGIN_PATH
        return None


__all__ = ["HOME_PATH", "LOGIN_PATH", "SESSION_EXPIRED_MESSAGE", "SessionVM"]
