"""Use cases for the operator session (login, current user, logout)."""

from __future__ import annotations

from dataclasses import dataclass

from opsdesk.domain.entities import User
from opsdesk.domain.mapping import map_user
from opsdesk.domain.ports import AuthPort, UseCaseError
from opsdesk.usecases.error_mapping import map_api_error


@dataclass
class Login:
    auth_port: AuthPort

    def __call__(self, login_identifier: str, password: str, remember_me: bool = False) -> User:
        identifier = (login_identifier or "").strip()
        if not identifier or not password:
            raise UseCaseError("CREDENTIALS_REQUIRED", "Please enter your login and password.")
        try:
            payload = self.auth_port.login(identifier, password, remember_me)
        except Exception as exc:
            raise map_api_error(
                exc,
                default_code="LOGIN_FAILED",
                default_message="Login failed",
            ) from exc
        return map_user(payload)


@dataclass
class LoadCurrentUser:
    auth_port: AuthPort

    def __call__(self) -> User:
        try:
            return map_user(self.auth_port.current_user())
        except Exception as exc:
            raise map_api_error(
                exc,
                default_code="SESSION_CHECK_FAILED",
                default_message="Failed to load current user",
            ) from exc


@dataclass
class Logout:
    auth_port: AuthPort

    def __call__(self) -> None:
        try:
            self.auth_port.logout()
        except Exception as exc:
            raise map_api_error(
                exc,
                default_code="LOGOUT_FAILED",
                default_message="Logout failed",
            ) from exc


__all__ = ["LoadCurrentUser", "Login", "Logout"]
