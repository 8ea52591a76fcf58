# Package initialization
# Import all models so they are registered with Base.metadata
from .template import Template

__all__ = [
    "Template",
]
