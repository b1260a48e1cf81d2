from __future__ import annotations

from pathlib import Path
from typing import Any, Dict, Mapping, Optional, Protocol

ResourcePath = str
RecordId = int
Payload = Dict[str, Any]


# ---- Error model ----
class UseCaseError(Exception):
    """Base class for use case level errors (user-presentable)."""

    def __init__(self, code: str, message: str, *, meta: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.code = code
        self.message = message
        self.meta = dict(meta or {})


# ---- Ports (Hexagonal boundaries) ----
class ResourcePort(Protocol):
    """Collection endpoints shared by every admin resource.

    Implementations return raw JSON payloads; mapping into view-model
    projections happens in use cases.
    """

    def list(self, resource: ResourcePath, params: Mapping[str, Any]) -> Payload: ...  # {"results": [...], "count": n}
    def retrieve(self, resource: ResourcePath, record_id: RecordId) -> Payload: ...
    def create(self, resource: ResourcePath, body: Mapping[str, Any]) -> Payload: ...
    def update(self, resource: ResourcePath, record_id: RecordId, body: Mapping[str, Any]) -> Payload: ...
    def delete(self, resource: ResourcePath, record_id: RecordId) -> None: ...
    def statistics(self, resource: ResourcePath, params: Optional[Mapping[str, Any]] = None) -> Payload: ...
    def action(
        self,
        resource: ResourcePath,
        name: str,
        *,
        record_id: Optional[RecordId] = None,
        body: Optional[Mapping[str, Any]] = None,
    ) -> Payload: ...
    def bulk_upload(self, resource: ResourcePath, file_path: str | Path) -> Payload: ...
    def download_template(self, resource: ResourcePath) -> bytes: ...
    def update_billing(self, billing_id: RecordId, body: Mapping[str, Any]) -> Payload: ...  # AMC billing row
    def dashboard(self) -> Payload: ...


class AuthPort(Protocol):
    """Session login against the backend."""

    def login(self, login_identifier: str, password: str, remember_me: bool = False) -> Payload: ...
    def current_user(self) -> Payload: ...
    def logout(self) -> None: ...


class ProfilePort(Protocol):
    """Current-user profile endpoint."""

    def get_profile(self) -> Payload: ...
    def update_profile(self, body: Mapping[str, Any]) -> Payload: ...


class StoragePort(Protocol):
    """Persistence for user preferences."""

    def save_user_prefs(self, prefs: Dict) -> None: ...
    def load_user_prefs(self) -> Dict: ...
