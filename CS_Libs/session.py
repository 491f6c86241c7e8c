"""
Session state for Color Sorter.

A ColorSorterSession owns the record set, the grid configuration, the
selection and the current interaction mode. Every mutation is applied in full
before the sorted view is recomputed, and the sorted view is always
recomputed from scratch once the session has been processed.

Classes:
    Idle, Picking, EditingWeight: Interaction modes (exactly one is active)
    IngestResult: Records added and files rejected by one upload batch
    ColorSorterSession: Record set, configuration and operations on them
"""

import dataclasses
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Iterable, List, Optional, Sequence, Set, Tuple, Union

from CS_Libs.ColorLib.pixel_sampler import DisplayRect, sample_pixel
from CS_Libs.GridLib.grid_compositor import export_grid, visible_records
from CS_Libs.ImageLib.image_models import GridConfig, ImageRecord, RgbColor
from CS_Libs.ImageLib.ingestion import ImageIngestor, read_upload
from CS_Libs.ProjStoreLib.project_store import (
    SavedRecord,
    apply_saved_weights,
    load_project,
    save_project,
)
from CS_Libs.SortLib.sort_engine import sort_records
from CS_Libs.errors import ImageDecodeError, PreconditionError, UnsupportedFormatError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Idle:
    pass


@dataclass(frozen=True)
class Picking:
    record_id: str


@dataclass(frozen=True)
class EditingWeight:
    record_id: str


InteractionMode = Union[Idle, Picking, EditingWeight]
IDLE = Idle()


@dataclass
class IngestResult:
    added: List[ImageRecord] = field(default_factory=list)
    errors: List[Tuple[str, Exception]] = field(default_factory=list)


class ColorSorterSession:
    """Record set, grid configuration and interaction state of one user session."""

    def __init__(self, config: Optional[GridConfig] = None, ingestor: Optional[ImageIngestor] = None):
        self.records: List[ImageRecord] = []
        self.config = config or GridConfig()
        self.ingestor = ingestor or ImageIngestor()
        self.selected_ids: Set[str] = set()
        self.mode: InteractionMode = IDLE
        self.preview_color: Optional[RgbColor] = None
        self.is_processed = False
        self.sorted_view: Tuple[ImageRecord, ...] = ()
        self.saved_records: List[SavedRecord] = []

    def get_record(self, record_id: str) -> ImageRecord:
        for record in self.records:
            if record.id == record_id:
                return record
        raise KeyError(f"No image with id {record_id}")

    def _refresh(self) -> None:
        if not self.is_processed:
            return
        if not self.records:
            self.sorted_view = ()
            return
        self.sorted_view = sort_records(self.records, self.config.hue_direction)

    def _apply_saved(self, records: Sequence[ImageRecord]) -> None:
        """Apply pending saved entries to records; each entry is used once."""
        if not self.saved_records or not records:
            return
        applied = {entry.id for entry in apply_saved_weights(records, self.saved_records)}
        self.saved_records = [entry for entry in self.saved_records if entry.id not in applied]

    # Ingestion

    def ingest_files(self, files: Sequence[Tuple[str, bytes]]) -> IngestResult:
        """
        Add a batch of uploaded files.

        The whole batch is rejected if it would exceed the record cap. Within
        an accepted batch, files with an unsupported encoding or undecodable
        data are reported in the result and skipped.

        Args:
            files: (file name, encoded bytes) pairs

        Returns:
            IngestResult with the added records and per-file errors

        Raises:
            CapacityExceededError: If the batch would exceed the record cap
        """
        self.ingestor.check_capacity(len(self.records), len(files))

        result = IngestResult()
        pending = []
        for name, data in files:
            try:
                pending.append((name, self.ingestor.submit(name, data)))
            except UnsupportedFormatError as e:
                logger.warning(str(e))
                result.errors.append((name, e))

        for name, future in pending:
            try:
                result.added.append(future.result())
            except ImageDecodeError as e:
                logger.warning(str(e))
                result.errors.append((name, e))

        self._apply_saved(result.added)

        self.records.extend(result.added)
        self._refresh()
        logger.info(f"Ingested {len(result.added)} of {len(files)} files ({len(self.records)} total)")
        return result

    def ingest_file(self, name: str, data: bytes) -> ImageRecord:
        """
        Add a single uploaded file.

        Raises:
            CapacityExceededError: If the record cap is already reached
            UnsupportedFormatError: If the data is not PNG or JPEG
            ImageDecodeError: If the data cannot be decoded
        """
        result = self.ingest_files([(name, data)])
        if result.errors:
            raise result.errors[0][1]
        return result.added[0]

    def ingest_paths(self, paths: Iterable[Path]) -> IngestResult:
        return self.ingest_files([read_upload(Path(path)) for path in paths])

    # Ordering

    def process(self) -> Tuple[ImageRecord, ...]:
        """
        Compute the sorted view and keep it current from now on.

        Raises:
            PreconditionError: If no images have been uploaded
        """
        if not self.records:
            raise PreconditionError("Upload images before processing")
        self.is_processed = True
        self._refresh()
        return self.sorted_view

    def display_records(self) -> Tuple[ImageRecord, ...]:
        if self.is_processed:
            return self.sorted_view
        return tuple(self.records)

    def visible_records(self) -> Tuple[ImageRecord, ...]:
        return visible_records(self.display_records(), self.config)

    def set_weight(self, record_id: str, weight: int) -> None:
        self.get_record(record_id).weight = weight
        self._refresh()

    def set_color(self, record_id: str, color: RgbColor) -> None:
        self.get_record(record_id).color = color
        self._refresh()

    def set_config(self, **changes) -> GridConfig:
        """
        Update grid settings; invalid values leave the current config untouched.

        Raises:
            ValueError: If a value is out of range
        """
        self.config = dataclasses.replace(self.config, **changes)
        self._refresh()
        return self.config

    def toggle_direction(self) -> GridConfig:
        return self.set_config(hue_direction=self.config.hue_direction.toggled())

    # Selection and deletion

    def toggle_selection(self, record_id: str) -> bool:
        """Toggle selection of a record; ignored while picking a color."""
        if isinstance(self.mode, Picking):
            return False
        self.get_record(record_id)
        if record_id in self.selected_ids:
            self.selected_ids.discard(record_id)
        else:
            self.selected_ids.add(record_id)
        return True

    def remove_records(self, record_ids: Iterable[str]) -> int:
        doomed = set(record_ids)
        before = len(self.records)
        self.records = [record for record in self.records if record.id not in doomed]
        self.sorted_view = tuple(record for record in self.sorted_view if record.id not in doomed)
        self.selected_ids -= doomed

        if not isinstance(self.mode, Idle) and self.mode.record_id in doomed:
            self.mode = IDLE
            self.preview_color = None

        self._refresh()
        removed = before - len(self.records)
        logger.info(f"Removed {removed} images")
        return removed

    def delete_selected(self) -> int:
        if not self.selected_ids:
            return 0
        return self.remove_records(list(self.selected_ids))

    # Interaction modes

    def toggle_weight_panel(self, record_id: str) -> InteractionMode:
        self.get_record(record_id)
        if self.mode == EditingWeight(record_id):
            self.mode = IDLE
        else:
            self.mode = EditingWeight(record_id)
            self.preview_color = None
        return self.mode

    def open_weight_panel(self, record_id: str) -> None:
        self.get_record(record_id)
        self.mode = EditingWeight(record_id)
        self.preview_color = None

    def close_weight_panel(self) -> None:
        if isinstance(self.mode, EditingWeight):
            self.mode = IDLE

    def start_picking(self, record_id: str) -> None:
        """Enter picking mode for one record, replacing any other mode."""
        self.get_record(record_id)
        self.mode = Picking(record_id)
        self.preview_color = None

    def cancel_picking(self) -> None:
        if isinstance(self.mode, Picking):
            self.mode = IDLE
            self.preview_color = None

    def _sample(self, record_id: str, pointer: Tuple[float, float], rect: DisplayRect) -> Optional[RgbColor]:
        if self.mode != Picking(record_id):
            return None
        return sample_pixel(self.get_record(record_id).load_raster(), pointer, rect)

    def preview_pick(self, record_id: str, pointer: Tuple[float, float], rect: DisplayRect) -> Optional[RgbColor]:
        """Sample the color under the pointer without committing it."""
        color = self._sample(record_id, pointer, rect)
        if color is not None:
            self.preview_color = color
        return color

    def commit_pick(self, record_id: str, pointer: Tuple[float, float], rect: DisplayRect) -> Optional[RgbColor]:
        """Overwrite the record's color with the sampled pixel and leave picking mode."""
        color = self._sample(record_id, pointer, rect)
        if color is None:
            return None

        self.mode = IDLE
        self.preview_color = None
        self.set_color(record_id, color)
        logger.debug(f"Picked color {color} for {record_id}")
        return color

    # Export and persistence

    def export(
        self,
        output_dir: Path,
        cell_size: Optional[Tuple[int, int]] = None,
        use_threading: bool = False,
    ) -> Path:
        """
        Write the current grid as a PNG file.

        Raises:
            PreconditionError: If no sorted view has been computed
            ExportDecodeError: If any included image fails to decode
        """
        if not self.is_processed or not self.sorted_view:
            raise PreconditionError("Process the images before exporting")
        return export_grid(self.sorted_view, self.config, output_dir, cell_size=cell_size, use_threading=use_threading)

    def save(self, store_path: Path) -> None:
        save_project(store_path, self.config, self.records)

    def restore(self, store_path: Path) -> bool:
        """
        Restore settings and saved weights from the project file.

        Saved weights are applied to current records and to records uploaded
        later; a saved color only comes back for the same record id.

        Returns:
            False if nothing had been saved

        Raises:
            PersistenceError: If the project file is unreadable
        """
        loaded = load_project(store_path)
        if loaded is None:
            return False

        config, saved = loaded
        if config is not None:
            self.config = config
        self.saved_records = saved
        self._apply_saved(self.records)
        self._refresh()
        logger.info(f"Restored settings and {len(saved)} saved weights from {store_path}")
        return True
