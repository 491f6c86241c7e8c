"""
Pytest configuration and shared fixtures for Color Sorter tests.

This module provides shared test fixtures and configuration
used across multiple test modules.
"""

import io

import pytest
from PIL import Image

from CS_Libs.ImageLib.image_models import ImageRecord


@pytest.fixture
def temp_project_dir(tmp_path):
    """
    Provide a temporary directory for project files.

    Args:
        tmp_path: Pytest's built-in temporary directory fixture

    Returns:
        Path object pointing to a temporary directory
    """
    return tmp_path


@pytest.fixture
def sample_rgb_colors():
    """
    Provide sample RGB colors with known hues.

    Returns:
        Dict mapping a name to an (R, G, B) tuple
    """
    return {
        "red": (255, 0, 0),        # hue 0
        "yellow": (255, 255, 0),   # hue 60
        "green": (0, 255, 0),      # hue 120
        "cyan": (0, 255, 255),     # hue 180
        "blue": (0, 0, 255),       # hue 240
        "gray": (128, 128, 128),   # achromatic, hue 0
    }


@pytest.fixture
def make_image_bytes():
    """
    Provide a factory that encodes a solid-color image.

    Returns:
        Callable (color, size=(10, 10), fmt="PNG") -> bytes
    """
    def _make(color, size=(10, 10), fmt="PNG"):
        mode = "RGBA" if len(color) == 4 and fmt == "PNG" else "RGB"
        image = Image.new(mode, size, tuple(color[:len(mode)]))
        buffer = io.BytesIO()
        image.save(buffer, format=fmt)
        return buffer.getvalue()

    return _make


@pytest.fixture
def make_record():
    """
    Provide a factory for ImageRecords backed by a solid-color raster.

    Returns:
        Callable (record_id, color, weight=3, size=(10, 10)) -> ImageRecord
    """
    def _make(record_id, color, weight=3, size=(10, 10)):
        raster = Image.new("RGBA", size, tuple(color) + (255,))
        return ImageRecord(
            id=record_id,
            source=b"",
            raster=raster,
            color=tuple(color),
            weight=weight,
            name=f"{record_id}.png",
        )

    return _make
