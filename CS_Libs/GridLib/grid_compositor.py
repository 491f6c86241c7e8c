"""
Grid layout and export compositing for Color Sorter.

The grid has `cols` equal columns and `rows` rows separated by a uniform gap.
Only the first rows*cols records of an ordering are ever placed; the excess is
silently left out of both the display and the export.

Export draws every included record stretched to the cell size onto a neutral
background. Records whose raster was released from memory are re-decoded from
their stored source first. The export is all-or-nothing: if any cell fails to
decode, no image is produced.

Classes:
    GridGeometry: Cell size, gap and derived canvas/cell positions

Functions:
    compute_grid_geometry: Geometry for a config and measured cell size
    display_cell_size: Square cell size for an on-screen grid of given width
    visible_records: The records that fit in the grid
    compose_grid: Render an ordering into one flattened image
    build_export_filename: Suggested export file name
    export_grid: Compose and write the export PNG
"""

import concurrent.futures
import logging
import time
from dataclasses import dataclass
from pathlib import Path
from typing import Any, List, Optional, Sequence, Tuple

from PIL import Image

from CS_Libs.ImageLib.image_models import GridConfig, ImageRecord
from CS_Libs.constants import (
    DEFAULT_CELL_SIZE,
    EXPORT_BACKGROUND_COLOR,
    EXPORT_EXTENSION,
    EXPORT_FILE_PREFIX,
    EXPORT_FORMAT,
)
from CS_Libs.errors import ExportDecodeError, ImageDecodeError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class GridGeometry:
    """Pixel geometry of a rows x cols grid.

    Attributes:
        rows: Number of rows
        cols: Number of columns
        gap: Spacing between adjacent cells in pixels
        cell_width: Width of one cell in pixels
        cell_height: Height of one cell in pixels
    """
    rows: int
    cols: int
    gap: int
    cell_width: int
    cell_height: int

    @property
    def capacity(self) -> int:
        return self.rows * self.cols

    @property
    def canvas_size(self) -> Tuple[int, int]:
        width = self.cols * self.cell_width + (self.cols - 1) * self.gap
        height = self.rows * self.cell_height + (self.rows - 1) * self.gap
        return width, height

    def cell_position(self, index: int) -> Tuple[int, int]:
        """Return the (row, col) of the index-th cell in row-major order."""
        return index // self.cols, index % self.cols

    def cell_origin(self, index: int) -> Tuple[int, int]:
        """Return the top-left pixel (x, y) of the index-th cell."""
        row, col = self.cell_position(index)
        return col * (self.cell_width + self.gap), row * (self.cell_height + self.gap)


def compute_grid_geometry(config: GridConfig, cell_size: Optional[Tuple[int, int]] = None) -> GridGeometry:
    """
    Build grid geometry from a config and the size of one rendered cell.

    Args:
        config: Grid configuration
        cell_size: (width, height) measured from the displayed grid; when
                   missing or not positive, DEFAULT_CELL_SIZE is used

    Returns:
        GridGeometry for the grid
    """
    if cell_size is None or cell_size[0] <= 0 or cell_size[1] <= 0:
        cell_size = DEFAULT_CELL_SIZE

    return GridGeometry(
        rows=config.rows,
        cols=config.cols,
        gap=config.gap,
        cell_width=int(cell_size[0]),
        cell_height=int(cell_size[1]),
    )


def display_cell_size(config: GridConfig, available_width: int) -> Tuple[int, int]:
    """Square cell size for `cols` equal columns filling `available_width`."""
    side = (available_width - (config.cols - 1) * config.gap) // config.cols
    side = max(1, side)
    return side, side


def visible_records(view: Sequence[ImageRecord], config: GridConfig) -> Tuple[ImageRecord, ...]:
    return tuple(view[: config.capacity])


def _load_cell_rasters(
    records: Sequence[ImageRecord],
    use_threading: bool = False,
    max_workers: Optional[int] = None,
) -> List[Any]:
    """
    Materialize the raster of every record, waiting for all of them.

    Raises:
        ExportDecodeError: If any record's raster cannot be decoded
    """
    pending = [index for index, record in enumerate(records) if not record.is_loaded]
    rasters: List[Any] = [record.raster for record in records]

    if use_threading and len(pending) > 1:
        with concurrent.futures.ThreadPoolExecutor(max_workers=max_workers) as executor:
            futures = {executor.submit(records[index].load_raster): index for index in pending}
            concurrent.futures.wait(futures)

        for future, index in sorted(futures.items(), key=lambda item: item[1]):
            try:
                rasters[index] = future.result()
            except ImageDecodeError as e:
                raise ExportDecodeError(f"Error decoding cell {index} ({records[index].name}): {str(e)}") from e
    else:
        for index in pending:
            try:
                rasters[index] = records[index].load_raster()
            except ImageDecodeError as e:
                raise ExportDecodeError(f"Error decoding cell {index} ({records[index].name}): {str(e)}") from e

    return rasters


def compose_grid(
    view: Sequence[ImageRecord],
    config: GridConfig,
    cell_size: Optional[Tuple[int, int]] = None,
    use_threading: bool = False,
    max_workers: Optional[int] = None,
) -> Any:
    """
    Render an ordering into a single flattened grid image.

    Args:
        view: Records in display order
        config: Grid configuration
        cell_size: Size of one displayed cell (DEFAULT_CELL_SIZE if unknown)
        use_threading: Decode released rasters in a thread pool
        max_workers: Maximum number of decode threads (default: None = CPU count)

    Returns:
        RGB PIL Image of size GridGeometry.canvas_size

    Raises:
        ExportDecodeError: If any included record fails to decode
    """
    geometry = compute_grid_geometry(config, cell_size)
    included = visible_records(view, config)

    if len(view) > len(included):
        logger.debug(f"Export truncated to {len(included)} of {len(view)} images")

    rasters = _load_cell_rasters(included, use_threading=use_threading, max_workers=max_workers)

    canvas = Image.new("RGB", geometry.canvas_size, EXPORT_BACKGROUND_COLOR)
    cell_dims = (geometry.cell_width, geometry.cell_height)
    for index, raster in enumerate(rasters):
        cell = raster.convert("RGBA").resize(cell_dims, Image.Resampling.BILINEAR)
        canvas.paste(cell, geometry.cell_origin(index), cell)

    return canvas


def build_export_filename(timestamp_ms: Optional[int] = None) -> str:
    if timestamp_ms is None:
        timestamp_ms = int(time.time() * 1000)
    return f"{EXPORT_FILE_PREFIX}{timestamp_ms}{EXPORT_EXTENSION}"


def export_grid(
    view: Sequence[ImageRecord],
    config: GridConfig,
    output_dir: Path,
    cell_size: Optional[Tuple[int, int]] = None,
    filename: Optional[str] = None,
    use_threading: bool = False,
    overwrite: bool = False,
) -> Path:
    """
    Compose the grid and save it as a PNG file.

    Args:
        view: Records in display order
        config: Grid configuration
        output_dir: Directory to write into (created if missing)
        cell_size: Size of one displayed cell
        filename: Output file name (default: build_export_filename())
        use_threading: Decode released rasters in a thread pool
        overwrite: Replace an existing file of the same name

    Returns:
        Path of the written file

    Raises:
        ExportDecodeError: If any included record fails to decode
        ValueError: If the file exists and overwrite=False
        OSError: If the file cannot be written
    """
    image = compose_grid(view, config, cell_size=cell_size, use_threading=use_threading)

    output_dir = Path(output_dir)
    output_dir.mkdir(parents=True, exist_ok=True)
    output_file = output_dir / (filename or build_export_filename())

    if output_file.exists() and not overwrite:
        raise ValueError(
            f"Output file already exists: {output_file}. "
            f"Set overwrite=True to replace."
        )

    try:
        image.save(output_file, format=EXPORT_FORMAT)
    except Exception as e:
        raise OSError(f"Failed to save image to {output_file}: {str(e)}") from e

    logger.info(f"Exported {image.width}x{image.height} grid to {output_file}")
    return output_file
