"""
GridLib - Grid layout and export

This module provides grid geometry, the display truncation rule and the
composited export for the Color Sorter project.
"""

from CS_Libs.GridLib.grid_compositor import (
    GridGeometry,
    compute_grid_geometry,
    display_cell_size,
    visible_records,
    compose_grid,
    build_export_filename,
    export_grid,
)

__all__ = [
    "GridGeometry",
    "compute_grid_geometry",
    "display_cell_size",
    "visible_records",
    "compose_grid",
    "build_export_filename",
    "export_grid",
]
