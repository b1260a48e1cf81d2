from __future__ import annotations

from opsdesk.domain.ports import AuthPort, Payload, ProfilePort

from .rest_base import RestAdapterBase


class AuthRestAdapter(RestAdapterBase, AuthPort):
    """Session authentication endpoints under ``/api/authentication/``."""

    def login(self, login_identifier: str, password: str, remember_me: bool = False) -> Payload:
        ctx = "login"
        body = {
            "login_identifier": login_identifier,
            "password": password,
            "remember_me": bool(remember_me),
        }
        resp = self.session.post(self._make_url("authentication/owner/login"), json_body=body)
        self._ensure_ok(resp, ctx)
        return self._json_dict(resp, ctx)

    def current_user(self) -> Payload:
        ctx = "current_user"
        resp = self.session.get(self._make_url("authentication/user"))
        self._ensure_ok(resp, ctx)
        return self._json_dict(resp, ctx)

    def logout(self) -> None:
        resp = self.session.post(self._make_url("authentication/logout"))
        self._ensure_ok(resp, "logout")


class ProfileRestAdapter(RestAdapterBase, ProfilePort):
    """Current-user profile (``/api/profile/``)."""

    def get_profile(self) -> Payload:
        ctx = "profile"
        resp = self.session.get(self._make_url("profile"))
        self._ensure_ok(resp, ctx)
        return self._json_dict(resp, ctx)

    def update_profile(self, body) -> Payload:
        ctx = "update_profile"
        resp = self.session.patch(self._make_url("profile"), json_body=dict(body))
        self._ensure_ok(resp, ctx)
        return self._json_dict(resp, ctx)


__all__ = ["AuthRestAdapter", "ProfileRestAdapter"]
