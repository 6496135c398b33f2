"""Grayscale image → model input tensor."""

from __future__ import annotations

import numpy as np

from sketch_gestures.errors import TensorConstructionError

MAX_INTENSITY = 255.0


def normalize_grayscale(image: np.ndarray) -> np.ndarray:
    """Scale a grayscale image into a (1, W, H) float64 tensor in [0, 1].

    The pixels keep their row-major order: the tensor is the image buffer
    laid out as (1, W, H), not a transpose of it.

    Args:
        image: Intensities in [0, 255], shape (H, W) as produced by OpenCV.

    Returns:
        Fresh array equal to ``image.reshape(-1).reshape(1, W, H) / 255.0``.

    Raises:
        TensorConstructionError: if the image is not a non-empty 2D grid of
            finite values within [0, 255].
    """
    try:
        gray = np.asarray(image)
    except (TypeError, ValueError) as e:
        raise TensorConstructionError(f"Image is not array-like: {e}") from e

    if gray.ndim != 2:
        raise TensorConstructionError(f"Expected a 2D image, got shape {gray.shape}")
    if gray.size == 0:
        raise TensorConstructionError(f"Image is empty, shape {gray.shape}")
    if not (np.issubdtype(gray.dtype, np.integer) or np.issubdtype(gray.dtype, np.floating)):
        raise TensorConstructionError(f"Unsupported image dtype {gray.dtype}")

    values = gray.astype(np.float64)
    if not np.all(np.isfinite(values)):
        raise TensorConstructionError("Image contains non-finite values")
    if values.min() < 0.0 or values.max() > MAX_INTENSITY:
        raise TensorConstructionError(
            f"Intensities must be in [0, 255], got [{values.min()}, {values.max()}]"
        )

    height, width = values.shape
    return values.reshape(1, width, height) / MAX_INTENSITY
