"""
Application configuration using python-dotenv.

This module loads environment variables from .env file into os.environ
for use throughout the application.
"""

import os
import pathlib
from dotenv import load_dotenv


# Determine if we're running in a test environment
# Don't load .env file during testing to ensure predictable test behavior
is_testing = os.getenv("PYTEST_VERSION") is not None or any("pytest" in str(frame) for frame in __import__('inspect').stack(0))

# Load .env file into os.environ (only outside of testing)
if not is_testing:
    # Try multiple possible locations for .env file
    possible_paths = [
        pathlib.Path(__file__).parent.parent.parent / ".env",  # backend/.env (when run from backend/src)
        pathlib.Path(__file__).parent.parent.parent.parent / ".env",  # .env (when run from src)
        pathlib.Path.cwd() / ".env",  # .env in current directory
    ]

    for env_path in possible_paths:
        if env_path.exists():
            load_dotenv(env_path)
            break


def _get_bool(name: str, default: bool) -> bool:
    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in {"1", "true", "yes", "on"}


# Configuration constants with defaults
def get_database_url():
    """Get the database URL from environment."""
    return os.getenv(
        "DATABASE_URL",
        "sqlite:///./template_editor.db"
    )

DATABASE_URL = get_database_url()
AUTO_CREATE_TABLES = _get_bool("AUTO_CREATE_TABLES", True)
API_BASE_URL = os.getenv("API_BASE_URL", "http://localhost:8000")
API_TIMEOUT_SECONDS = float(os.getenv("API_TIMEOUT_SECONDS", "10"))
FRONTEND_URL = os.getenv("FRONTEND_URL", "http://localhost:5173")

# Editor persistence backend: "local" (JSON file) or "api" (REST service)
TEMPLATE_STORAGE_BACKEND = os.getenv("TEMPLATE_STORAGE_BACKEND", "local").strip().lower()
LOCAL_TEMPLATES_PATH = os.getenv("LOCAL_TEMPLATES_PATH", "data/templates.json")

# Extra directories searched for TrueType fonts during text measurement
FONT_DIRS = [path.strip() for path in os.getenv("FONT_DIRS", "").split(",") if path.strip()]
