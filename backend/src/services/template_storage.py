"""
Template storage backends used by the editor.

The editor persists templates either through the REST service or into a
local JSON file (the equivalent of browser-local storage). Both implement
the ``TemplateStorage`` protocol; ``get_template_storage`` picks one from
configuration.
"""

import json
import logging
import uuid
from pathlib import Path
from typing import Any, Dict, List, Optional, Protocol

import httpx
from pydantic import ValidationError

from core.config import (
    API_BASE_URL,
    API_TIMEOUT_SECONDS,
    LOCAL_TEMPLATES_PATH,
    TEMPLATE_STORAGE_BACKEND,
)
from core.constants import DUPLICATE_TEMPLATE_SUFFIX
from core.exceptions import TemplateNotFoundError, TemplateStorageError
from shared_types.template import Template
from utils.datetime_utils import utc_now_iso

logger = logging.getLogger(__name__)


class TemplateStorage(Protocol):
    def list_templates(self) -> List[Template]: ...

    def get_template(self, template_id: str) -> Template: ...

    def create_template(self, template: Template) -> Template: ...

    def update_template(self, template_id: str, updates: Dict[str, Any]) -> Template: ...

    def delete_template(self, template_id: str) -> None: ...

    def duplicate_template(self, template_id: str, name: Optional[str] = None) -> Template: ...


class ApiTemplateStorage:
    """
    Stores templates through the REST API.

    ``client`` may be any httpx.Client (tests pass FastAPI's TestClient);
    when omitted one is created against ``base_url``.
    """

    def __init__(
        self,
        base_url: Optional[str] = None,
        client: Optional[httpx.Client] = None,
        api_prefix: str = "/api",
    ) -> None:
        self.client = client or httpx.Client(
            base_url=base_url or API_BASE_URL,
            timeout=API_TIMEOUT_SECONDS,
        )
        self.api_prefix = api_prefix.rstrip("/")

    def list_templates(self) -> List[Template]:
        data = self._request("GET", "/templates", action="fetch templates")
        if not isinstance(data, list):
            logger.error(f"Failed to fetch templates: expected a list, got {type(data).__name__}")
            raise TemplateStorageError("Failed to fetch templates")
        return [self._to_template(item, "fetch templates") for item in data]

    def get_template(self, template_id: str) -> Template:
        data = self._request("GET", f"/templates/{template_id}", action="fetch template", template_id=template_id)
        return self._to_template(data, "fetch template")

    def create_template(self, template: Template) -> Template:
        data = self._request("POST", "/templates", action="create template", json=template.editable_fields())
        return self._to_template(data, "create template")

    def update_template(self, template_id: str, updates: Dict[str, Any]) -> Template:
        data = self._request(
            "PUT",
            f"/templates/{template_id}",
            action="update template",
            template_id=template_id,
            json=updates,
        )
        return self._to_template(data, "update template")

    def delete_template(self, template_id: str) -> None:
        self._request("DELETE", f"/templates/{template_id}", action="delete template", template_id=template_id)

    def duplicate_template(self, template_id: str, name: Optional[str] = None) -> Template:
        body = {"name": name} if name else {}
        data = self._request(
            "POST",
            f"/templates/{template_id}/duplicate",
            action="duplicate template",
            template_id=template_id,
            json=body,
        )
        return self._to_template(data, "duplicate template")

    def _request(
        self,
        method: str,
        path: str,
        action: str,
        template_id: Optional[str] = None,
        json: Optional[Any] = None,
    ) -> Any:
        try:
            response = self.client.request(method, f"{self.api_prefix}{path}", json=json)
        except httpx.HTTPError as e:
            logger.exception(f"Failed to {action}: {e}")
            raise TemplateStorageError(f"Failed to {action}") from e

        if response.status_code == 404 and template_id is not None:
            raise TemplateNotFoundError(template_id)
        try:
            response.raise_for_status()
        except httpx.HTTPStatusError as e:
            logger.exception(f"Failed to {action}: {e}")
            raise TemplateStorageError(f"Failed to {action}") from e
        try:
            return response.json()
        except ValueError as e:
            logger.exception(f"Failed to {action}: response is not JSON: {e}")
            raise TemplateStorageError(f"Failed to {action}") from e

    @staticmethod
    def _to_template(data: Any, action: str) -> Template:
        try:
            return Template.model_validate(data)
        except ValidationError as e:
            logger.exception(f"Failed to {action}: invalid template in response: {e}")
            raise TemplateStorageError(f"Failed to {action}") from e


class LocalTemplateStorage:
    """Keeps every template in one JSON file on disk."""

    def __init__(self, path: Optional[Path] = None) -> None:
        self.path = Path(path or LOCAL_TEMPLATES_PATH)

    def list_templates(self) -> List[Template]:
        return self._read_templates()

    def get_template(self, template_id: str) -> Template:
        for template in self._read_templates():
            if template.id == template_id:
                return template
        raise TemplateNotFoundError(template_id)

    def create_template(self, template: Template) -> Template:
        now = utc_now_iso()
        created = template.model_copy(update={"id": str(uuid.uuid4()), "created_at": now, "updated_at": now})
        templates = self._read_templates()
        templates.append(created)
        self._write_templates(templates)
        return created

    def update_template(self, template_id: str, updates: Dict[str, Any]) -> Template:
        templates = self._read_templates()
        for index, template in enumerate(templates):
            if template.id != template_id:
                continue
            document = template.to_document()
            document.update(updates)
            document = {key: value for key, value in document.items() if value is not None}
            document["id"] = template_id
            document["updatedAt"] = utc_now_iso()
            try:
                updated = Template.model_validate(document)
            except ValidationError as e:
                raise TemplateStorageError(f"Invalid template update: {e}") from e
            templates[index] = updated
            self._write_templates(templates)
            return updated
        raise TemplateNotFoundError(template_id)

    def delete_template(self, template_id: str) -> None:
        templates = self._read_templates()
        remaining = [t for t in templates if t.id != template_id]
        if len(remaining) == len(templates):
            raise TemplateNotFoundError(template_id)
        self._write_templates(remaining)

    def duplicate_template(self, template_id: str, name: Optional[str] = None) -> Template:
        original = self.get_template(template_id)
        copy = original.model_copy(update={"name": name or f"{original.name}{DUPLICATE_TEMPLATE_SUFFIX}"})
        return self.create_template(copy)

    def _read_templates(self) -> List[Template]:
        if not self.path.exists():
            return []
        try:
            data = json.loads(self.path.read_text("utf-8"))
            return [Template.model_validate(item) for item in data]
        except (OSError, ValueError) as e:
            # Corrupt or unreadable store is treated as empty, like a cleared browser storage
            logger.warning(f"Failed to load templates from {self.path}: {e}")
            return []

    def _write_templates(self, templates: List[Template]) -> None:
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            self.path.write_text(
                json.dumps([t.to_document() for t in templates], indent=2),
                encoding="utf-8",
            )
        except OSError as e:
            logger.exception(f"Failed to save templates to {self.path}: {e}")
            raise TemplateStorageError("Failed to save templates") from e


def get_template_storage(backend: Optional[str] = None) -> TemplateStorage:
    """Build the storage backend selected by TEMPLATE_STORAGE_BACKEND ("local" or "api")."""
    selected = (backend or TEMPLATE_STORAGE_BACKEND).strip().lower()
    if selected == "api":
        return ApiTemplateStorage()
    if selected == "local":
        return LocalTemplateStorage()
    raise ValueError(f"Unknown template storage backend: {selected}")
