"""
Utility modules for the template editor.

This package contains small shared helpers: datetime handling and colour
conversion.
"""
