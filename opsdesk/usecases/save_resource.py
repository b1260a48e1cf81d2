"""Use cases for creating and updating resource records.

Both build the request body with the resource's own payload builder so the
per-resource blank-field conventions stay in the domain layer.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Dict, Mapping

from opsdesk.domain.ports import RecordId, ResourcePort, UseCaseError
from opsdesk.domain.resources import ResourceSpec
from opsdesk.usecases.error_mapping import map_api_error

LOGGER = logging.getLogger(__name__)


@dataclass
class CreateResource:
    """Build a create body from form values and POST it."""

    resource_port: ResourcePort

    def __call__(self, spec: ResourceSpec, form: Mapping[str, Any]) -> Dict[str, Any]:
        try:
            body = spec.build_create(form)
            LOGGER.debug("create %s body=%s", spec.key, body)
            return self.resource_port.create(spec.path, body)
        except UseCaseError:
            raise
        except Exception as exc:
            raise map_api_error(
                exc,
                default_code="CREATE_FAILED",
                default_message=f"Failed to create {spec.singular}",
            ) from exc


@dataclass
class UpdateResource:
    """Build an update body from form values and PATCH it."""

    resource_port: ResourcePort

    def __call__(self, spec: ResourceSpec, record_id: RecordId, form: Mapping[str, Any]) -> Dict[str, Any]:
        try:
            body = spec.build_update(form)
            LOGGER.debug("update %s/%s body=%s", spec.key, record_id, body)
            return self.resource_port.update(spec.path, record_id, body)
        except UseCaseError:
            raise
        except Exception as exc:
            raise map_api_error(
                exc,
                default_code="UPDATE_FAILED",
                default_message=f"Failed to update {spec.singular}",
            ) from exc


__all__ = ["CreateResource", "UpdateResource"]
