from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Mapping

from opsdesk.domain.entities import Profile
from opsdesk.domain.mapping import map_profile
from opsdesk.domain.payloads import build_profile_update
from opsdesk.domain.ports import ProfilePort, UseCaseError
from opsdesk.usecases.error_mapping import map_api_error


@dataclass
class LoadProfile:
    profile_port: ProfilePort

    def __call__(self) -> Profile:
        try:
            return map_profile(self.profile_port.get_profile())
        except Exception as exc:
            raise map_api_error(
                exc,
                default_code="PROFILE_LOAD_FAILED",
                default_message="Failed to load profile",
            ) from exc


@dataclass
class UpdateProfile:
    """Validate the password trio locally, then PATCH the profile."""

    profile_port: ProfilePort

    def __call__(self, form: Mapping[str, Any]) -> Profile:
        try:
            body = build_profile_update(form)
        except ValueError as exc:
            raise UseCaseError("VALIDATION_ERROR", str(exc)) from exc
        try:
            return map_profile(self.profile_port.update_profile(body))
        except Exception as exc:
            raise map_api_error(
                exc,
                default_code="PROFILE_UPDATE_FAILED",
                default_message="Failed to update profile",
            ) from exc


__all__ = ["LoadProfile", "UpdateProfile"]
