"""
ProjStoreLib - Project file storage

This module handles persistence of Color Sorter settings and
per-image weights.
"""

from CS_Libs.ProjStoreLib.project_store import (
    SavedRecord,
    get_store_path,
    save_project,
    load_project,
    clear_project,
    apply_saved_weights,
)

__all__ = [
    "SavedRecord",
    "get_store_path",
    "save_project",
    "load_project",
    "clear_project",
    "apply_saved_weights",
]
