"""
Constants and configuration values for Color Sorter.

This module centralizes all constant values, magic numbers, and
configuration settings used throughout the application.
"""

# Ingestion limits
MAX_IMAGES = 60
SUPPORTED_DECODED_FORMATS = {"PNG", "JPEG"}
SUPPORTED_EXTENSIONS = {".png", ".jpg", ".jpeg"}
IMAGE_FILE_FILTER = "Images (*.png *.jpg *.jpeg)"

# Weight range
MIN_WEIGHT = 1
MAX_WEIGHT = 5
DEFAULT_WEIGHT = 3

# Grid limits and defaults
MIN_GRID_DIMENSION = 1
MAX_GRID_DIMENSION = 10
MIN_GAP = 0
MAX_GAP = 50
DEFAULT_ROWS = 3
DEFAULT_COLS = 4
DEFAULT_GAP = 10

# Hue direction identifiers (persisted form)
HUE_ASCENDING = "hue-asc"
HUE_DESCENDING = "hue-desc"

# Dominant color extraction
ANALYSIS_MAX_SIZE = 100
QUANTIZATION_STEP = 16
MIN_ALPHA = 128
NEAR_WHITE_THRESHOLD = 240
FALLBACK_COLOR = (128, 128, 128)

# Export
DEFAULT_CELL_SIZE = (200, 200)
EXPORT_BACKGROUND_COLOR = "#f3f4f6"
EXPORT_FILE_PREFIX = "sorted-images-"
EXPORT_FORMAT = "PNG"
EXPORT_EXTENSION = ".png"

# Persistence
PROJECT_FILE_NAME = "imageColorSorterProject.json"
SCHEMA_VERSION = 1
AUTOSAVE_DELAY_MS = 1000

# Project field names
FIELD_SCHEMA_VERSION = "schema_version"
FIELD_SETTINGS = "settings"
FIELD_IMAGES = "images"
FIELD_ROWS = "rows"
FIELD_COLS = "cols"
FIELD_GAP = "gap"
FIELD_SORT_DIRECTION = "sortDirection"
FIELD_ID = "id"
FIELD_FILE_NAME = "name"
FIELD_COLOR = "color"
FIELD_WEIGHT = "weight"
FIELD_RED = "r"
FIELD_GREEN = "g"
FIELD_BLUE = "b"

# UI constants
DEFAULT_WINDOW_WIDTH = 1200
DEFAULT_WINDOW_HEIGHT = 850
SELECTION_BORDER_COLOR = "#3b82f6"
PICKING_BORDER_COLOR = "#f59e0b"
