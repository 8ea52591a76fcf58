"""
Services package for shared business logic.

This package contains the template CRUD service used by the REST API and
the storage backends used by the editor.
"""

from .template_service import TemplateService
from .template_storage import (
    ApiTemplateStorage,
    LocalTemplateStorage,
    TemplateStorage,
    get_template_storage,
)

__all__ = [
    "TemplateService",
    "TemplateStorage",
    "ApiTemplateStorage",
    "LocalTemplateStorage",
    "get_template_storage",
]
