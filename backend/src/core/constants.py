"""Application constants and configuration values."""

from core.config import FRONTEND_URL

# Database field lengths
MAX_STRING_LENGTH = 255

# Database connection settings
DB_POOL_RECYCLE_SECONDS = 300  # 5 minutes

# CORS origins for development and production
_CORS_ORIGINS_RAW = [
    "http://localhost:5173",      # React dev server (Vite)
    "http://localhost:3000",
    FRONTEND_URL,
]

# Filter out None values and empty strings to avoid CORS errors
CORS_ORIGINS = [origin for origin in _CORS_ORIGINS_RAW if origin and origin.strip()]

# Template defaults
DEFAULT_TEMPLATE_NAME = "Untitled Template"
DEFAULT_TEMPLATE_SIZE = 1080
DEFAULT_BACKGROUND_COLOR = "#ffffff"
DEFAULT_OUTPUT_FORMAT = "png"
DUPLICATE_TEMPLATE_SUFFIX = " (Copy)"

# Editor view state
MIN_ZOOM = 0.1
MAX_ZOOM = 3.0
DEFAULT_GRID_SIZE = 10

# Layer editing
DUPLICATE_LAYER_OFFSET = 20  # Pixels added to x and y of a duplicated layer
DUPLICATE_LAYER_SUFFIX = " Copy"
NUDGE_STEP = 1
NUDGE_STEP_LARGE = 10  # With Alt held

# Text layout
DEFAULT_MIN_FONT_SIZE = 12
DEFAULT_LINE_HEIGHT = 1.2
DEFAULT_ALTERNATE_SEPARATOR = "~"
DEFAULT_IMAGE_RADIUS = 20  # Used for the "rounded" image mask when no radius is set

# Animation
CURSOR_BLINK_SECONDS = 0.5
DEFAULT_CURSOR_CHAR = "|"
