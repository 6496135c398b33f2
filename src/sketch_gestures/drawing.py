"""Drawing value types: strokes of 2D points as captured by the input layer.

Coordinates are in whatever space the capture layer uses; the rasterizer
scales the drawing to fit its canvas, so only relative positions matter.

Usage:
    drawing = Drawing.from_dict({"strokes": [[[0, 0], [10, 10]]]})
    drawing.stroke_count  # 1
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Iterable, Sequence

import numpy as np

Point = tuple[float, float]


@dataclass(frozen=True)
class Stroke:
    """One pointer-down to pointer-up path."""
    points: tuple[Point, ...] = ()

    @classmethod
    def from_points(cls, points: Iterable[Sequence[float]]) -> Stroke:
        parsed = []
        for p in points:
            if len(p) != 2:
                raise ValueError(f"Point must have 2 coordinates, got {len(p)}")
            parsed.append((float(p[0]), float(p[1])))
        return cls(points=tuple(parsed))

    def as_array(self) -> np.ndarray:
        """Points as a float64 array of shape (N, 2)."""
        return np.asarray(self.points, dtype=np.float64).reshape(-1, 2)

    def __len__(self) -> int:
        return len(self.points)


@dataclass(frozen=True)
class Drawing:
    """An ordered sequence of strokes forming one candidate gesture."""
    strokes: tuple[Stroke, ...] = field(default_factory=tuple)

    @classmethod
    def from_strokes(cls, strokes: Iterable[Iterable[Sequence[float]]]) -> Drawing:
        return cls(strokes=tuple(Stroke.from_points(s) for s in strokes))

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Drawing:
        """Build a drawing from ``{"strokes": [[[x, y], ...], ...]}``."""
        if not isinstance(data, dict) or "strokes" not in data:
            raise ValueError("Drawing data must be a mapping with a 'strokes' key")
        strokes = data["strokes"]
        if not isinstance(strokes, list):
            raise ValueError("'strokes' must be a list of point lists")
        try:
            return cls.from_strokes(strokes)
        except TypeError as e:
            raise ValueError(f"Malformed stroke data: {e}") from e

    def to_dict(self) -> dict:
        return {"strokes": [[list(p) for p in s.points] for s in self.strokes]}

    @property
    def stroke_count(self) -> int:
        return len(self.strokes)

    @property
    def point_count(self) -> int:
        return sum(len(s) for s in self.strokes)

    @property
    def is_empty(self) -> bool:
        return self.point_count == 0

    def bounds(self) -> tuple[float, float, float, float] | None:
        """(min_x, min_y, max_x, max_y) over all points, or None if empty."""
        if self.is_empty:
            return None
        pts = np.concatenate([s.as_array() for s in self.strokes if len(s)])
        mn = pts.min(axis=0)
        mx = pts.max(axis=0)
        return float(mn[0]), float(mn[1]), float(mx[0]), float(mx[1])
