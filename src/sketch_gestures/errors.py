"""Failure taxonomy for the drawing → scores path.

The three ``PredictionError`` kinds are expected outcomes: the predictor folds
them into "no prediction". ``LabelCountMismatchError`` is a programming error
(a model that does not match the label table) and always propagates.
"""

from __future__ import annotations


class PredictionError(Exception):
    """Base class for recoverable prediction failures."""

    kind = "prediction"


class RasterizationError(PredictionError):
    """The drawing could not be turned into an image (empty or degenerate)."""

    kind = "rasterization"


class TensorConstructionError(PredictionError):
    """The grayscale image could not be converted into an input tensor."""

    kind = "tensor"


class ClassifierError(PredictionError):
    """The model failed to produce an output for a tensor."""

    kind = "classifier"


class LabelCountMismatchError(ValueError):
    """Model output or label sidecar disagrees with ``ALL_LABELS``."""
