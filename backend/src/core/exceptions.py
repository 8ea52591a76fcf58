"""
Domain exceptions raised by the editor core and template storage backends.

The REST service itself reports failures with HTTPException; these are used
on the editor side, where there is no HTTP layer to translate into.
"""


class TemplateStorageError(Exception):
    """A storage backend failed to read or write templates."""


class TemplateNotFoundError(TemplateStorageError):
    """No template exists with the requested id."""

    def __init__(self, template_id: str):
        super().__init__(f"Template not found: {template_id}")
        self.template_id = template_id


class TemplateImportError(ValueError):
    """Imported template JSON could not be parsed or validated."""
