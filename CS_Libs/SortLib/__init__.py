"""
SortLib - Record ordering

This module provides the weighted hue sort used for both the grid
display and the exported image.
"""

from CS_Libs.SortLib.sort_engine import sort_key, sort_records

__all__ = [
    "sort_key",
    "sort_records",
]
