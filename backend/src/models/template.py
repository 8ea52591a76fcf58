"""
Template model.
"""

import uuid
from datetime import datetime
from typing import Any, Dict, List, Optional
from sqlalchemy import JSON, String, Integer, Float, TIMESTAMP, Index, CheckConstraint
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.orm import Mapped, mapped_column

from core.constants import MAX_STRING_LENGTH
from core.database import Base

# JSONB on PostgreSQL, generic JSON (text) on SQLite
JSONType = JSON().with_variant(JSONB(), "postgresql")


def _new_template_id() -> str:
    return str(uuid.uuid4())


class Template(Base):
    """
    A stored template: canvas settings plus the layer list as a JSON blob.

    Layers and gradients are kept in the client's camelCase document shape.
    """
    __tablename__ = "templates"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=_new_template_id)
    name: Mapped[str] = mapped_column(String(MAX_STRING_LENGTH), nullable=False)
    width: Mapped[int] = mapped_column(Integer, nullable=False)
    height: Mapped[int] = mapped_column(Integer, nullable=False)
    background_color: Mapped[Optional[str]] = mapped_column(String(32), nullable=True)

    # JSON fields holding document fragments
    background_gradient: Mapped[Optional[Dict[str, Any]]] = mapped_column(JSONType, nullable=True)
    layers: Mapped[List[Dict[str, Any]]] = mapped_column(JSONType, nullable=False, default=list)

    output_format: Mapped[str] = mapped_column(String(10), nullable=False, default="png", server_default="png")
    fps: Mapped[Optional[float]] = mapped_column(Float, nullable=True)
    duration: Mapped[Optional[float]] = mapped_column(Float, nullable=True)

    created_at: Mapped[datetime] = mapped_column(TIMESTAMP(timezone=True), nullable=False)
    updated_at: Mapped[datetime] = mapped_column(TIMESTAMP(timezone=True), nullable=False)

    __table_args__ = (
        Index("idx_templates_updated_at", "updated_at"),
        CheckConstraint("width > 0 AND height > 0", name="check_template_dimensions"),
        CheckConstraint("output_format IN ('png', 'jpg', 'webp', 'mp4', 'gif')", name="check_output_format"),
    )
