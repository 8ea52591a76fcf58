"""
Shared type definitions for the template editor backend.

This module contains the template document model used by the API, the
storage backends and the editor.
"""

from shared_types.template import Layer, Template, TemplateFields

__all__ = ["Layer", "Template", "TemplateFields"]
