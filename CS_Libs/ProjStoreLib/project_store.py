"""
Settings and weight persistence for Color Sorter.

This module handles the persistence layer: a JSON project file holding the
grid settings and, per record, its id, color and weight. Raster data is never
written; after a restore the images have to be uploaded again.

The project file schema:
- schema_version
- settings: rows, cols, gap, sortDirection
- images: list of {id, color: {r, g, b}, weight, name}

Classes:
    SavedRecord: Persisted (id, color, weight) of one record

Functions:
    get_store_path: Location of the project file in a base directory
    save_project: Write settings and record attributes
    load_project: Read settings and record attributes back
    clear_project: Remove the project file
    apply_saved_weights: Reapply saved weights (and colors, by id) to records
"""

import json
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional, Tuple

from CS_Libs.ImageLib.image_models import (
    GridConfig,
    ImageRecord,
    RgbColor,
    validate_color,
    validate_weight,
)
from CS_Libs.constants import (
    FIELD_BLUE,
    FIELD_COLOR,
    FIELD_GREEN,
    FIELD_FILE_NAME,
    FIELD_ID,
    FIELD_IMAGES,
    FIELD_RED,
    FIELD_SCHEMA_VERSION,
    FIELD_SETTINGS,
    FIELD_WEIGHT,
    PROJECT_FILE_NAME,
    SCHEMA_VERSION,
)
from CS_Libs.errors import PersistenceError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SavedRecord:
    id: str
    color: RgbColor
    weight: int
    name: str = ""

    def to_dict(self) -> Dict[str, Any]:
        r, g, b = self.color
        return {
            FIELD_ID: self.id,
            FIELD_COLOR: {FIELD_RED: r, FIELD_GREEN: g, FIELD_BLUE: b},
            FIELD_WEIGHT: self.weight,
            FIELD_FILE_NAME: self.name,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "SavedRecord":
        """
        Create from a persisted entry.

        Raises:
            ValueError: If the entry has an invalid color or weight
            KeyError: If a required field is missing
        """
        color = data[FIELD_COLOR]
        return cls(
            id=str(data[FIELD_ID]),
            color=validate_color((color[FIELD_RED], color[FIELD_GREEN], color[FIELD_BLUE])),
            weight=validate_weight(data[FIELD_WEIGHT]),
            name=str(data.get(FIELD_FILE_NAME) or ""),
        )

    @classmethod
    def from_record(cls, record: ImageRecord) -> "SavedRecord":
        return cls(id=record.id, color=record.color, weight=record.weight, name=record.name)


def get_store_path(base_dir: Path) -> Path:
    base_dir = Path(base_dir)
    base_dir.mkdir(parents=True, exist_ok=True)
    return base_dir / PROJECT_FILE_NAME


def clear_project(store_path: Path) -> None:
    Path(store_path).unlink(missing_ok=True)


def save_project(store_path: Path, config: GridConfig, records: Iterable[ImageRecord]) -> None:
    """
    Persist grid settings and per-record color and weight.

    If the write fails, the previously stored project is removed so the
    store does not keep stale or partial data.

    Args:
        store_path: Project file path
        config: Grid configuration to save
        records: Records whose id, color and weight are saved

    Raises:
        PersistenceError: If the project file cannot be written
    """
    store_path = Path(store_path)
    payload: Dict[str, Any] = {
        FIELD_SCHEMA_VERSION: SCHEMA_VERSION,
        FIELD_SETTINGS: config.to_dict(),
        FIELD_IMAGES: [SavedRecord.from_record(record).to_dict() for record in records],
    }

    try:
        store_path.write_text(json.dumps(payload, indent=2), encoding="utf-8")
    except OSError as e:
        logger.warning(f"Saving project to {store_path} failed, clearing stored data: {e}")
        try:
            clear_project(store_path)
        except OSError:
            logger.warning(f"Could not clear {store_path}")
        raise PersistenceError(f"Failed to save project to {store_path}: {str(e)}") from e

    logger.debug(f"Saved project with {len(payload[FIELD_IMAGES])} images to {store_path}")


def _normalize_saved_records(entries: Any) -> List[SavedRecord]:
    if not isinstance(entries, list):
        return []

    saved: List[SavedRecord] = []
    for entry in entries:
        if not isinstance(entry, dict):
            continue
        try:
            saved.append(SavedRecord.from_dict(entry))
        except (KeyError, TypeError, ValueError):
            logger.debug(f"Skipping invalid saved image entry: {entry!r}")
    return saved


def load_project(store_path: Path) -> Optional[Tuple[Optional[GridConfig], List[SavedRecord]]]:
    """
    Load grid settings and saved record attributes.

    Args:
        store_path: Project file path

    Returns:
        None if nothing has been saved, otherwise (config, saved records);
        config is None when the file has no settings section

    Raises:
        PersistenceError: If the file exists but cannot be read or parsed
    """
    store_path = Path(store_path)
    if not store_path.exists():
        return None

    try:
        payload = json.loads(store_path.read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError) as e:
        raise PersistenceError(f"Failed to load project from {store_path}: {str(e)}") from e

    if not isinstance(payload, dict):
        raise PersistenceError(f"Project file {store_path} is not a JSON object")

    config: Optional[GridConfig] = None
    settings = payload.get(FIELD_SETTINGS)
    if isinstance(settings, dict):
        try:
            config = GridConfig.from_dict(settings)
        except (TypeError, ValueError) as e:
            raise PersistenceError(f"Invalid settings in {store_path}: {str(e)}") from e

    return config, _normalize_saved_records(payload.get(FIELD_IMAGES))


def apply_saved_weights(records: Iterable[ImageRecord], saved: Iterable[SavedRecord]) -> List[SavedRecord]:
    """
    Reapply saved attributes to records.

    A record matching a saved entry by id gets back both its color and its
    weight. Records uploaded again in a new session get new ids, so those fall
    back to matching by file name and only recover the weight; their color
    stays the one extracted from the uploaded pixels. Each saved entry is
    applied at most once.

    Returns:
        The saved entries that were applied
    """
    entries = list(saved)
    by_id = {entry.id: entry for entry in entries}
    by_name: Dict[str, List[SavedRecord]] = {}
    for entry in entries:
        if entry.name:
            by_name.setdefault(entry.name, []).append(entry)

    used: Dict[str, SavedRecord] = {}
    for record in records:
        entry = by_id.get(record.id)
        if entry is not None and entry.id not in used:
            record.color = entry.color
        else:
            candidates = [c for c in by_name.get(record.name, []) if c.id not in used]
            if not candidates:
                continue
            entry = candidates[0]

        used[entry.id] = entry
        record.weight = entry.weight
    return list(used.values())
