"""
Template JSON export/import, backups and render-request payloads.
"""

import json
import logging
from typing import Any, Dict, List

from pydantic import ValidationError

from core.exceptions import TemplateImportError
from editor.preview import render_order
from services.template_storage import TemplateStorage
from shared_types.template import Template
from utils.datetime_utils import utc_now_iso

logger = logging.getLogger(__name__)

BACKUP_VERSION = "1.0"

# Layer keys that mean nothing to a renderer
EDITOR_ONLY_LAYER_KEYS = ("locked",)


def _dumps(document: Any) -> str:
    return json.dumps(document, indent=2, ensure_ascii=False)


def _parse_json(text: str) -> Any:
    try:
        return json.loads(text)
    except (TypeError, ValueError) as e:
        raise TemplateImportError(f"Invalid JSON: {e}") from e


def _validate_template(data: Any) -> Template:
    if not isinstance(data, dict):
        raise TemplateImportError("Template JSON must be an object")
    try:
        return Template.model_validate(data)
    except ValidationError as e:
        raise TemplateImportError(f"Invalid template: {e}") from e


def export_template_json(template: Template) -> str:
    return _dumps(template.to_document())


def import_template_json(text: str) -> Template:
    """Parse and validate a template exported by ``export_template_json``."""
    return _validate_template(_parse_json(text))


def export_backup(storage: TemplateStorage) -> str:
    """Every stored template in one versioned backup document."""
    templates = storage.list_templates()
    logger.info(f"Exporting backup of {len(templates)} templates")
    return _dumps({
        "version": BACKUP_VERSION,
        "exportDate": utc_now_iso(),
        "templates": [template.to_document() for template in templates],
    })


def import_backup(storage: TemplateStorage, text: str) -> List[Template]:
    """
    Restore a backup made by ``export_backup``.

    Each template is created anew, so restored copies get fresh ids and sit
    alongside whatever is already stored. The whole backup is validated
    before anything is written.
    """
    data = _parse_json(text)
    if not isinstance(data, dict) or not isinstance(data.get("templates"), list):
        raise TemplateImportError("Invalid backup file format")

    templates = [_validate_template(item) for item in data["templates"]]
    restored = [storage.create_template(template) for template in templates]
    logger.info(f"Restored {len(restored)} templates from backup")
    return restored


def dynamic_fields(template: Template) -> List[str]:
    """Names of the dynamic fields bound by layers, in render order, without repeats."""
    names: List[str] = []
    for layer in render_order(template.layers):
        if layer.dynamic_field and layer.dynamic_field not in names:
            names.append(layer.dynamic_field)
    return names


def build_render_request(template: Template, data: Dict[str, Any]) -> Dict[str, Any]:
    """Payload for the external render endpoint: the template plus values for its dynamic fields."""
    fields = dynamic_fields(template)
    unknown = sorted(key for key in data if key not in fields)
    if unknown:
        logger.warning(f"Dropping render data with no matching dynamic field: {', '.join(unknown)}")

    document = template.to_document()
    document["layers"] = [
        {key: value for key, value in layer.items() if key not in EDITOR_ONLY_LAYER_KEYS}
        for layer in document.get("layers", [])
    ]
    return {
        "template": document,
        "data": {key: value for key, value in data.items() if key in fields},
    }
