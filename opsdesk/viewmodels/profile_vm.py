from __future__ import annotations

import logging
from dataclasses import asdict
from typing import Any, Callable, Dict, Mapping, Optional

from ..domain.entities import Profile
from ..domain.ports import UseCaseError

LOGGER = logging.getLogger(__name__)

PASSWORD_FIELDS = ("current_password", "new_password", "confirm_password")


class ProfileVM:
    """Holds the editable profile form for the signed-in operator."""

    def __init__(
        self,
        *,
        load: Callable[[], Profile],
        update: Callable[[Mapping[str, Any]], Profile],
        on_changed: Optional[Callable[["ProfileVM"], None]] = None,
        on_alert: Optional[Callable[[str, str, str], None]] = None,
    ) -> None:
        self._load = load
        self._update = update
        self.on_changed = on_changed
        self.on_alert = on_alert

        self.profile: Optional[Profile] = None
        self.form: Dict[str, Any] = {}
        self.is_loading = False
        self.is_saving = False
        self.error: Optional[str] = None

    def load(self) -> None:
        self.is_loading = True
        self.error = None
        self._notify()
        try:
            profile = self._load()
        except UseCaseError as err:
            LOGGER.error("Profile load failed: %s", err.message)
            self.error = err.message
            self.is_loading = False
            self._notify()
            return
        self._apply(profile)
        self.is_loading = False
        self._notify()

    def set_field(self, name: str, value: Any) -> None:
        self.form[name] = value

    def save(self) -> bool:
        """PATCH the profile; validation problems are alerted, not raised."""
        self.is_saving = True
        self._notify()
        try:
            profile = self._update(dict(self.form))
        except UseCaseError as err:
            LOGGER.error("Profile update failed: %s", err.message)
            self.is_saving = False
            title = "Validation Error" if err.code == "VALIDATION_ERROR" else "Error"
            self._alert(title, err.message, "error")
            self._notify()
            return False
        self._apply(profile)
        self.is_saving = False
        self._alert("Success", "Profile updated successfully.", "success")
        self._notify()
        return True

    def _apply(self, profile: Profile) -> None:
        self.profile = profile
        form = asdict(profile)
        form.pop("id", None)
        form.pop("photo_url", None)
        for key in PASSWORD_FIELDS:
            form[key] = ""
        self.form = form

    def _alert(self, title: str, message: str, level: str) -> None:
        if self.on_alert:
            self.on_alert(title, message, level)

    def _notify(self) -> None:
        if self.on_changed:
            self.on_changed(self)


__all__ = ["PASSWORD_FIELDS", "ProfileVM"]
