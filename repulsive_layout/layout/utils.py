"""Utility helpers shared across layout modules."""

from __future__ import annotations

import logging
import numbers
from typing import Dict, Hashable, Mapping, Optional, Tuple, TypeVar

logger = logging.getLogger(__name__)

K = TypeVar("K", bound=Hashable)


def coerce_float(value: object) -> Optional[float]:
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, numbers.Real):
        return float(value)
    if isinstance(value, str):
        try:
            return float(value)
        except ValueError:
            return None
    return None


def coerce_index(value: object) -> Optional[int]:
    if isinstance(value, bool):
        return None
    if isinstance(value, numbers.Integral):
        return int(value)
    if isinstance(value, float) and value.is_integer():
        return int(value)
    return None


def normalize_point_coords(
    coords: Mapping[K, Tuple[float, float]],
    scale: float = 100.0,
) -> Dict[K, Tuple[float, float]]:
    """Normalize a coordinate mapping into ``[0, scale]`` for each axis."""

    if not coords:
        return {}

    xs = [pt[0] for pt in coords.values()]
    ys = [pt[1] for pt in coords.values()]
    min_x, max_x = min(xs), max(xs)
    min_y, max_y = min(ys), max(ys)
    span_x = max_x - min_x
    span_y = max_y - min_y

    normalized: Dict[K, Tuple[float, float]] = {}
    for key, (x, y) in coords.items():
        nx = 0.0 if span_x == 0 else (x - min_x) / span_x
        ny = 0.0 if span_y == 0 else (y - min_y) / span_y
        normalized[key] = (nx * scale, ny * scale)

    logger.debug("Normalized coordinates for %d nodes with scale=%s", len(coords), scale)
    return normalized
