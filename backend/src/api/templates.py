from typing import Any, Dict, List, Optional
from fastapi import APIRouter, Body, Depends, status
from pydantic import BaseModel, Field
from sqlalchemy.orm import Session

from core.constants import MAX_STRING_LENGTH
from core.database import get_db
from services import TemplateService
from services.template_service import serialize_template
from shared_types.template import DocumentModel, Gradient, Layer, OutputFormat, Template, TemplateFields


router = APIRouter()

# Columns that may not be cleared once set
REQUIRED_COLUMNS = {"name", "width", "height", "layers", "output_format"}

# --- Schemas ---

class TemplateCreate(TemplateFields):
    pass

class TemplateUpdate(DocumentModel):
    name: Optional[str] = Field(None, min_length=1, max_length=MAX_STRING_LENGTH)
    width: Optional[int] = Field(None, gt=0)
    height: Optional[int] = Field(None, gt=0)
    background_color: Optional[str] = None
    background_gradient: Optional[Gradient] = None
    layers: Optional[List[Layer]] = None
    output_format: Optional[OutputFormat] = None
    fps: Optional[float] = Field(None, gt=0)
    duration: Optional[float] = Field(None, gt=0)

class TemplateDuplicate(BaseModel):
    name: Optional[str] = Field(None, min_length=1, max_length=MAX_STRING_LENGTH)

class DeleteResponse(BaseModel):
    success: bool


def _to_columns(data: DocumentModel, only_set: bool) -> Dict[str, Any]:
    """Convert a validated request body into column values."""
    names = data.model_fields_set if only_set else set(type(data).model_fields)
    columns: Dict[str, Any] = {}
    for name in names:
        value = getattr(data, name)
        if name in REQUIRED_COLUMNS and value is None:
            raise ValueError(f"{name} cannot be null")
        if name == "layers":
            value = [layer.to_document() for layer in value]
        elif name == "background_gradient" and value is not None:
            value = value.to_document()
        columns[name] = value
    return columns

# --- Endpoints ---

@router.get("/templates", response_model=List[Template], response_model_exclude_none=True, summary="List templates")
def list_templates(db: Session = Depends(get_db)):
    """List all templates, most recently updated first."""
    return [serialize_template(t) for t in TemplateService.list_templates(db)]

@router.post("/templates", response_model=Template, response_model_exclude_none=True, status_code=status.HTTP_201_CREATED, summary="Create a template")
def create_template(template_data: TemplateCreate, db: Session = Depends(get_db)):
    """Create a new template. The server assigns the id and timestamps."""
    template = TemplateService.create_template(db, _to_columns(template_data, only_set=False))
    return serialize_template(template)

@router.get("/templates/{template_id}", response_model=Template, response_model_exclude_none=True, summary="Get a template")
def get_template(template_id: str, db: Session = Depends(get_db)):
    """Get a specific template by ID."""
    return serialize_template(TemplateService.get_template(db, template_id))

@router.put("/templates/{template_id}", response_model=Template, response_model_exclude_none=True, summary="Update a template")
def update_template(template_id: str, template_data: TemplateUpdate, db: Session = Depends(get_db)):
    """Update an existing template. Only the fields present in the body change."""
    updates = _to_columns(template_data, only_set=True)
    return serialize_template(TemplateService.update_template(db, template_id, updates))

@router.delete("/templates/{template_id}", response_model=DeleteResponse, summary="Delete a template")
def delete_template(template_id: str, db: Session = Depends(get_db)):
    """Permanently delete a template."""
    TemplateService.delete_template(db, template_id)
    return {"success": True}

@router.post("/templates/{template_id}/duplicate", response_model=Template, response_model_exclude_none=True, summary="Duplicate a template")
def duplicate_template(
    template_id: str,
    duplicate_data: Optional[TemplateDuplicate] = Body(None),
    db: Session = Depends(get_db)
):
    """
    Copy a template into a new one.
    The copy is named "<original> (Copy)" unless a name is given.
    """
    name = duplicate_data.name if duplicate_data else None
    return serialize_template(TemplateService.duplicate_template(db, template_id, name))
