from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Dict, Mapping, Optional

from opsdesk.domain.ports import Payload, RecordId, ResourcePath, ResourcePort

from .rest_base import RestAdapterBase

LOGGER = logging.getLogger(__name__)

SPREADSHEET_MIME = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"
AMC_BILLINGS_PATH = "amc-billings"
DASHBOARD_PATH = "dashboard/stats"


class ResourceRestAdapter(RestAdapterBase, ResourcePort):
    """REST adapter for the paginated admin collections (``/api/{resource}/``).

    Returns raw JSON; mapping into projections is done by use cases.
    """

    def list(self, resource: ResourcePath, params: Mapping[str, Any]) -> Payload:
        url = self._make_url(resource)
        ctx = f"list[{resource}]"
        LOGGER.debug("%s params=%s", ctx, dict(params))
        resp = self.session.get(url, params=dict(params))
        self._ensure_ok(resp, ctx)
        data = self._json_any(resp)
        if isinstance(data, list):
            return {"results": data, "count": len(data)}
        if not isinstance(data, dict):
            raise RuntimeError(f"{ctx}: expected object response")
        return data

    def retrieve(self, resource: ResourcePath, record_id: RecordId) -> Payload:
        ctx = f"retrieve[{resource}/{record_id}]"
        resp = self.session.get(self._make_url(f"{resource}/{int(record_id)}"))
        self._ensure_ok(resp, ctx)
        return self._json_dict(resp, ctx)

    def create(self, resource: ResourcePath, body: Mapping[str, Any]) -> Payload:
        ctx = f"create[{resource}]"
        resp = self.session.post(self._make_url(resource), json_body=dict(body))
        self._ensure_ok(resp, ctx)
        return self._json_dict(resp, ctx)

    def update(self, resource: ResourcePath, record_id: RecordId, body: Mapping[str, Any]) -> Payload:
        ctx = f"update[{resource}/{record_id}]"
        resp = self.session.patch(self._make_url(f"{resource}/{int(record_id)}"), json_body=dict(body))
        self._ensure_ok(resp, ctx)
        return self._json_dict(resp, ctx)

    def delete(self, resource: ResourcePath, record_id: RecordId) -> None:
        ctx = f"delete[{resource}/{record_id}]"
        resp = self.session.delete(self._make_url(f"{resource}/{int(record_id)}"))
        self._ensure_ok(resp, ctx)

    def statistics(self, resource: ResourcePath, params: Optional[Mapping[str, Any]] = None) -> Payload:
        ctx = f"statistics[{resource}]"
        resp = self.session.get(self._make_url(f"{resource}/statistics"), params=dict(params or {}))
        self._ensure_ok(resp, ctx)
        return self._json_dict(resp, ctx)

    def action(
        self,
        resource: ResourcePath,
        name: str,
        *,
        record_id: Optional[RecordId] = None,
        body: Optional[Mapping[str, Any]] = None,
    ) -> Payload:
        """POST to a DRF ``@action`` route, detail-level when ``record_id`` is given."""
        if record_id is None:
            path = f"{resource}/{name}"
        else:
            path = f"{resource}/{int(record_id)}/{name}"
        ctx = f"action[{path}]"
        resp = self.session.post(self._make_url(path), json_body=dict(body) if body is not None else {})
        self._ensure_ok(resp, ctx)
        data = self._json_any(resp)
        return data if isinstance(data, dict) else {}

    def bulk_upload(self, resource: ResourcePath, file_path: str | Path) -> Payload:
        path = Path(file_path)
        if not path.is_file():
            raise FileNotFoundError(f"Upload file not found: {path}")
        ctx = f"bulk_upload[{resource}]"
        with path.open("rb") as handle:
            files: Dict[str, Any] = {"file": (path.name, handle, SPREADSHEET_MIME)}
            resp = self.session.post_multipart(self._make_url(f"{resource}/bulk-upload"), files=files)
        self._ensure_ok(resp, ctx)
        return self._json_dict(resp, ctx)

    def download_template(self, resource: ResourcePath) -> bytes:
        ctx = f"template[{resource}]"
        resp = self.session.get(
            self._make_url(f"{resource}/template"),
            accept=SPREADSHEET_MIME,
            timeout=self.cfg.download_timeout_s,
        )
        self._ensure_ok(resp, ctx)
        return resp.content

    def update_billing(self, billing_id: RecordId, body: Mapping[str, Any]) -> Payload:
        ctx = f"update_billing[{billing_id}]"
        resp = self.session.patch(self._make_url(f"{AMC_BILLINGS_PATH}/{int(billing_id)}"), json_body=dict(body))
        self._ensure_ok(resp, ctx)
        return self._json_dict(resp, ctx)

    def dashboard(self) -> Payload:
        ctx = "dashboard"
        resp = self.session.get(self._make_url(DASHBOARD_PATH))
        self._ensure_ok(resp, ctx)
        return self._json_dict(resp, ctx)


__all__ = ["AMC_BILLINGS_PATH", "DASHBOARD_PATH", "ResourceRestAdapter", "SPREADSHEET_MIME"]
