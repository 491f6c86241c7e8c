"""
Image data models for Color Sorter.

This module defines core data structures used throughout the sorting system.

Classes:
    HueDirection: Ascending or descending hue order
    ImageRecord: One uploaded image with its color and weight
    GridConfig: Grid dimensions, gap and hue direction

Type Aliases:
    RgbColor: A tuple of 3 integers representing RGB color values (0-255)
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Optional, Sequence, Tuple

from CS_Libs.ImageLib.image_codec import decode_image_bytes
from CS_Libs.constants import (
    DEFAULT_COLS,
    DEFAULT_GAP,
    DEFAULT_ROWS,
    DEFAULT_WEIGHT,
    FIELD_COLS,
    FIELD_GAP,
    FIELD_ROWS,
    FIELD_SORT_DIRECTION,
    HUE_ASCENDING,
    HUE_DESCENDING,
    MAX_GAP,
    MAX_GRID_DIMENSION,
    MAX_WEIGHT,
    MIN_GAP,
    MIN_GRID_DIMENSION,
    MIN_WEIGHT,
)

RgbColor = Tuple[int, int, int]


class HueDirection(str, Enum):
    ASCENDING = HUE_ASCENDING
    DESCENDING = HUE_DESCENDING

    def toggled(self) -> "HueDirection":
        if self is HueDirection.ASCENDING:
            return HueDirection.DESCENDING
        return HueDirection.ASCENDING


def validate_color(color: Sequence[int]) -> RgbColor:
    """
    Validate and normalize an RGB triplet.

    Args:
        color: Sequence of three channel values

    Returns:
        The color as a tuple of ints

    Raises:
        ValueError: If the color does not have 3 channels in 0-255
    """
    values = tuple(color)
    if len(values) != 3:
        raise ValueError(f"color must have 3 channels, got {len(values)}")
    for value in values:
        if isinstance(value, bool) or int(value) != value or not (0 <= value <= 255):
            raise ValueError(f"color channels must be integers 0-255, got {values}")
    return tuple(int(value) for value in values)


def validate_weight(weight: int) -> int:
    if isinstance(weight, bool) or int(weight) != weight:
        raise ValueError(f"weight must be an integer, got {weight!r}")
    if not (MIN_WEIGHT <= weight <= MAX_WEIGHT):
        raise ValueError(f"weight must be {MIN_WEIGHT}-{MAX_WEIGHT}, got {weight}")
    return int(weight)


@dataclass(eq=False)
class ImageRecord:
    """An uploaded image and its sort attributes.

    Attributes:
        id: Unique identifier assigned at ingestion
        source: Original encoded file bytes
        raster: Decoded RGBA PIL Image, or None once released from memory
        color: Representative RGB color (validated on every assignment)
        weight: Sort priority 1-5 (validated on every assignment)
        name: Original file name
    """
    id: str
    source: bytes
    raster: Optional[Any]
    color: RgbColor
    weight: int = DEFAULT_WEIGHT
    name: str = ""
    size: Tuple[int, int] = field(default=(0, 0))

    def __post_init__(self):
        if self.raster is not None and self.size == (0, 0):
            self.size = tuple(self.raster.size)

    def __setattr__(self, name: str, value: Any) -> None:
        if name == "color":
            value = validate_color(value)
        elif name == "weight":
            value = validate_weight(value)
        super().__setattr__(name, value)

    @property
    def width(self) -> int:
        return self.size[0]

    @property
    def height(self) -> int:
        return self.size[1]

    @property
    def is_loaded(self) -> bool:
        return self.raster is not None

    def load_raster(self) -> Any:
        """
        Return the decoded raster, decoding the stored source if it was released.

        The record itself is not modified.

        Raises:
            ImageDecodeError: If the stored source cannot be decoded
        """
        if self.raster is not None:
            return self.raster
        return decode_image_bytes(self.source, self.name or self.id)

    def release_raster(self) -> None:
        """Drop the decoded raster; it is re-decoded from source on demand."""
        self.raster = None


@dataclass
class GridConfig:
    """Grid layout and ordering settings.

    Attributes:
        rows: Number of grid rows (1-10)
        cols: Number of grid columns (1-10)
        gap: Spacing between cells in pixels (0-50)
        hue_direction: Secondary sort direction
    """
    rows: int = DEFAULT_ROWS
    cols: int = DEFAULT_COLS
    gap: int = DEFAULT_GAP
    hue_direction: HueDirection = HueDirection.ASCENDING

    def __post_init__(self):
        """Validate grid parameters."""
        self.hue_direction = HueDirection(self.hue_direction)

        for name in ("rows", "cols", "gap"):
            value = getattr(self, name)
            if isinstance(value, bool) or not isinstance(value, int):
                raise ValueError(f"{name} must be an integer, got {value!r}")

        if not (MIN_GRID_DIMENSION <= self.rows <= MAX_GRID_DIMENSION):
            raise ValueError(f"rows must be {MIN_GRID_DIMENSION}-{MAX_GRID_DIMENSION}, got {self.rows}")

        if not (MIN_GRID_DIMENSION <= self.cols <= MAX_GRID_DIMENSION):
            raise ValueError(f"cols must be {MIN_GRID_DIMENSION}-{MAX_GRID_DIMENSION}, got {self.cols}")

        if not (MIN_GAP <= self.gap <= MAX_GAP):
            raise ValueError(f"gap must be {MIN_GAP}-{MAX_GAP}, got {self.gap}")

    @property
    def capacity(self) -> int:
        return self.rows * self.cols

    def to_dict(self) -> Dict[str, Any]:
        """Convert to the persisted settings dictionary."""
        return {
            FIELD_ROWS: self.rows,
            FIELD_COLS: self.cols,
            FIELD_GAP: self.gap,
            FIELD_SORT_DIRECTION: self.hue_direction.value,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "GridConfig":
        """Create from a persisted settings dictionary."""
        return cls(
            rows=int(data.get(FIELD_ROWS, DEFAULT_ROWS)),
            cols=int(data.get(FIELD_COLS, DEFAULT_COLS)),
            gap=int(data.get(FIELD_GAP, DEFAULT_GAP)),
            hue_direction=HueDirection(data.get(FIELD_SORT_DIRECTION, HUE_ASCENDING)),
        )
