"""Drawing rasterization into fixed-size grayscale images.

Strokes are rendered white on black with OpenCV, scaled uniformly to fit the
padded canvas and centred. Rendering happens at ``supersample`` times the
target size and is then area-averaged down, which gives smooth anti-aliased
edges even for thin lines on small canvases.

Usage:
    rasterizer = DrawingRasterizer(width=28, height=28)
    gray = rasterizer.rasterize(drawing)  # uint8, shape (28, 28)
"""

from __future__ import annotations

import cv2
import numpy as np

from sketch_gestures.drawing import Drawing
from sketch_gestures.errors import RasterizationError

# Fixed-point bits passed to OpenCV drawing calls for sub-pixel precision.
_SHIFT = 4
_SHIFT_SCALE = 1 << _SHIFT


class DrawingRasterizer:
    """Converts a ``Drawing`` into a (height, width) uint8 grayscale image."""

    def __init__(
        self,
        width: int = 28,
        height: int = 28,
        line_width: float = 2.0,
        padding: int = 2,
        supersample: int = 4,
    ):
        if width <= 0 or height <= 0:
            raise ValueError(f"Image size must be positive, got {width}x{height}")
        if padding < 0 or 2 * padding >= min(width, height):
            raise ValueError(f"Padding {padding} leaves no room on a {width}x{height} canvas")
        if line_width <= 0:
            raise ValueError(f"line_width must be positive, got {line_width}")
        if supersample < 1:
            raise ValueError(f"supersample must be >= 1, got {supersample}")

        self.width = width
        self.height = height
        self.line_width = line_width
        self.padding = padding
        self.supersample = supersample

    @property
    def shape(self) -> tuple[int, int]:
        """Output image shape as (height, width)."""
        return self.height, self.width

    def rasterize(self, drawing: Drawing) -> np.ndarray:
        """Render the drawing.

        Raises:
            RasterizationError: the drawing has no points, has non-finite
                coordinates, or all its points coincide.
        """
        arrays = [s.as_array() for s in drawing.strokes if len(s)]
        if not arrays:
            raise RasterizationError("Drawing has no points")

        pts = np.concatenate(arrays)
        if not np.all(np.isfinite(pts)):
            raise RasterizationError("Drawing has non-finite coordinates")

        origin = pts.min(axis=0)
        extent = pts.max(axis=0) - origin
        if float(extent.max()) <= 0.0:
            raise RasterizationError("Drawing has zero extent")

        ss = self.supersample
        canvas_w, canvas_h = self.width * ss, self.height * ss
        pad = self.padding * ss
        box = np.array([canvas_w - 2 * pad, canvas_h - 2 * pad], dtype=np.float64)

        # Uniform scale; a zero extent on one axis (a straight line) only
        # constrains the other.
        with np.errstate(divide="ignore"):
            ratios = np.where(extent > 0, box / np.where(extent > 0, extent, 1.0), np.inf)
        scale = float(ratios.min())
        offset = (np.array([canvas_w, canvas_h]) - extent * scale) / 2.0

        thickness = max(1, int(round(self.line_width * ss)))
        canvas = np.zeros((canvas_h, canvas_w), dtype=np.uint8)

        for stroke_pts in arrays:
            mapped = (stroke_pts - origin) * scale + offset
            fixed = np.round(mapped * _SHIFT_SCALE).astype(np.int32)
            if len(fixed) == 1:
                cv2.circle(
                    canvas, (int(fixed[0, 0]), int(fixed[0, 1])),
                    max(1, thickness // 2) * _SHIFT_SCALE, 255, -1, cv2.LINE_AA, _SHIFT,
                )
            else:
                cv2.polylines(
                    canvas, [fixed.reshape(-1, 1, 2)], False, 255,
                    thickness, cv2.LINE_AA, _SHIFT,
                )

        if ss == 1:
            return canvas
        return cv2.resize(canvas, (self.width, self.height), interpolation=cv2.INTER_AREA)
