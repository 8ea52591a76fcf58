"""
Service for managing stored templates.

Plain CRUD over the ``templates`` table. There is no optimistic concurrency
control: the last update to a row wins.
"""

import logging
from typing import Any, Dict, List, Optional

from fastapi import HTTPException, status
from sqlalchemy.orm import Session

from core.constants import DUPLICATE_TEMPLATE_SUFFIX
from models import Template
from utils.datetime_utils import ensure_utc

logger = logging.getLogger(__name__)

# Columns a client may write; id and timestamps are managed here
WRITABLE_COLUMNS = (
    "name",
    "width",
    "height",
    "background_color",
    "background_gradient",
    "layers",
    "output_format",
    "fps",
    "duration",
)


class TemplateService:
    @staticmethod
    def list_templates(db: Session) -> List[Template]:
        """List all templates, most recently updated first."""
        return db.query(Template).order_by(Template.updated_at.desc()).all()

    @staticmethod
    def get_template(db: Session, template_id: str) -> Template:
        """Get a template by ID, raising 404 if it does not exist."""
        template = db.query(Template).filter(Template.id == template_id).first()
        if not template:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Template not found")
        return template

    @staticmethod
    def create_template(db: Session, values: Dict[str, Any]) -> Template:
        """Create a new template from column values."""
        template = Template(**_writable(values))
        if template.layers is None:
            template.layers = []
        db.add(template)
        db.commit()
        db.refresh(template)
        logger.info(f"Created template {template.id} ({template.name!r})")
        return template

    @staticmethod
    def update_template(db: Session, template_id: str, updates: Dict[str, Any]) -> Template:
        """Apply the supplied column values to an existing template."""
        template = TemplateService.get_template(db, template_id)

        for column, value in _writable(updates).items():
            setattr(template, column, value)

        db.commit()
        db.refresh(template)
        return template

    @staticmethod
    def delete_template(db: Session, template_id: str) -> None:
        """Permanently delete a template."""
        template = TemplateService.get_template(db, template_id)
        db.delete(template)
        db.commit()
        logger.info(f"Deleted template {template_id}")

    @staticmethod
    def duplicate_template(db: Session, template_id: str, name: Optional[str] = None) -> Template:
        """Copy every field of a template into a new row with a new id."""
        original = TemplateService.get_template(db, template_id)
        values = {column: getattr(original, column) for column in WRITABLE_COLUMNS}
        values["name"] = name or f"{original.name}{DUPLICATE_TEMPLATE_SUFFIX}"
        return TemplateService.create_template(db, values)


def _writable(values: Dict[str, Any]) -> Dict[str, Any]:
    unknown = set(values) - set(WRITABLE_COLUMNS)
    if unknown:
        raise ValueError(f"Unknown template fields: {', '.join(sorted(unknown))}")
    return dict(values)


def serialize_template(template: Template) -> Dict[str, Any]:
    """Map a stored row (snake_case columns) to the camelCase template document."""
    created_at = ensure_utc(template.created_at)
    updated_at = ensure_utc(template.updated_at)
    return {
        "id": template.id,
        "name": template.name,
        "width": template.width,
        "height": template.height,
        "backgroundColor": template.background_color,
        "backgroundGradient": template.background_gradient,
        "layers": template.layers or [],
        "outputFormat": template.output_format,
        "fps": template.fps,
        "duration": template.duration,
        "createdAt": created_at.isoformat() if created_at else None,
        "updatedAt": updated_at.isoformat() if updated_at else None,
    }
