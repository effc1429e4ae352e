"""Minimal 2D vector arithmetic on ``(x, y)`` tuples."""

from __future__ import annotations

import math
from typing import Tuple

Vec2 = Tuple[float, float]


def add(a: Vec2, b: Vec2) -> Vec2:
    return a[0] + b[0], a[1] + b[1]


def subtract(a: Vec2, b: Vec2) -> Vec2:
    return a[0] - b[0], a[1] - b[1]


def scale(v: Vec2, s: float) -> Vec2:
    return v[0] * s, v[1] * s


def length(v: Vec2) -> float:
    return math.sqrt(max(v[0] * v[0] + v[1] * v[1], 0.0))


__all__ = ["Vec2", "add", "subtract", "scale", "length"]
