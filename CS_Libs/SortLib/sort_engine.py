"""
Weight and hue ordering of image records.

Records are ordered by weight (highest first) and then by the hue of their
current color. The sort is stable, so records with equal weight and hue keep
their input order. Saturation and lightness are never consulted; achromatic
colors sort at hue 0.

Functions:
    sort_key: Sort key of a single record
    sort_records: Ordered view over a collection of records
"""

from typing import Iterable, Tuple

from CS_Libs.ColorLib.hsl_converter import hue_of
from CS_Libs.ImageLib.image_models import HueDirection, ImageRecord


def sort_key(record: ImageRecord, hue_direction: HueDirection = HueDirection.ASCENDING) -> Tuple[int, float]:
    hue = hue_of(record.color)
    if hue_direction is HueDirection.DESCENDING:
        hue = -hue
    return -record.weight, hue


def sort_records(
    records: Iterable[ImageRecord],
    hue_direction: HueDirection = HueDirection.ASCENDING,
) -> Tuple[ImageRecord, ...]:
    """
    Order records by weight descending, then hue in the given direction.

    Args:
        records: Records in collection (insertion) order
        hue_direction: Secondary key direction

    Returns:
        A new tuple holding the same records in sorted order
    """
    direction = HueDirection(hue_direction)
    return tuple(sorted(records, key=lambda record: sort_key(record, direction)))
