"""Drawing → per-label scores.

Rasterizes the drawing, normalizes the image into the model's input tensor
and runs the classifier. Every recoverable failure along the way collapses to
``None`` ("no prediction"); callers simply wait for more input.
"""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from typing import Optional

import numpy as np

from sketch_gestures.drawing import Drawing
from sketch_gestures.errors import (
    ClassifierError,
    LabelCountMismatchError,
    PredictionError,
)
from sketch_gestures.labels import NUM_LABELS, GestureLabel, label_at
from sketch_gestures.metrics import MetricsCollector
from sketch_gestures.model import GestureModel
from sketch_gestures.profiler import PipelineProfiler
from sketch_gestures.rasterizer import DrawingRasterizer
from sketch_gestures.tensor import normalize_grayscale

logger = logging.getLogger("sketch_gestures.predictor")


@dataclass
class Prediction:
    """A score vector plus its best label."""
    scores: list[float]
    label: GestureLabel
    score: float

    @classmethod
    def from_scores(cls, scores: list[float]) -> Prediction:
        best = int(np.argmax(scores))
        return cls(scores=scores, label=label_at(best), score=scores[best])

    def top(self, k: int = 3) -> list[tuple[GestureLabel, float]]:
        """Best ``k`` labels, highest score first."""
        order = sorted(range(len(self.scores)), key=lambda i: (-self.scores[i], i))
        return [(label_at(i), self.scores[i]) for i in order[:k]]

    def score_of(self, label: GestureLabel) -> float:
        return self.scores[label.index]


class GesturePredictor:
    """Runs drawings through rasterizer, normalizer and classifier.

    The classifier is injected so it can be a shared process-wide handle in
    production and a fake in tests.
    """

    def __init__(
        self,
        model: GestureModel,
        rasterizer: Optional[DrawingRasterizer] = None,
        profiler: Optional[PipelineProfiler] = None,
        metrics: Optional[MetricsCollector] = None,
    ):
        self.model = model
        self.rasterizer = rasterizer or DrawingRasterizer()
        self.profiler = profiler or PipelineProfiler()
        self.metrics = metrics

    def predict_label_values(self, drawing: Drawing) -> Optional[list[float]]:
        """Compute a score for every label.

        Returns:
            List where index ``i`` holds the score of ``ALL_LABELS[i]``, or
            None if the drawing could not be rasterized, converted or
            classified.

        Raises:
            LabelCountMismatchError: the model output does not have exactly
                one value per label.
        """
        t_start = time.perf_counter()
        try:
            with self.profiler.stage("total"):
                with self.profiler.stage("image_generation"):
                    gray = self.rasterizer.rasterize(drawing)
                    tensor = normalize_grayscale(gray)

                with self.profiler.stage("prediction"):
                    values = self._run_model(tensor)
        except PredictionError as e:
            logger.debug("No prediction (%s): %s", e.kind, e)
            if self.metrics is not None:
                self.metrics.record_failure(e.kind)
            return None

        if values.size != NUM_LABELS:
            raise LabelCountMismatchError(
                f"Model returned {values.size} values, expected {NUM_LABELS}"
            )

        logger.debug(
            "image_generation=%.3fms prediction=%.3fms total=%.3fms",
            self.profiler.last_ms("image_generation") or 0.0,
            self.profiler.last_ms("prediction") or 0.0,
            self.profiler.last_ms("total") or 0.0,
        )
        if self.metrics is not None:
            self.metrics.record_prediction(time.perf_counter() - t_start)

        return [float(v) for v in values]

    def predict(self, drawing: Drawing) -> Optional[Prediction]:
        """Like ``predict_label_values`` but also picks the best label."""
        scores = self.predict_label_values(drawing)
        if scores is None:
            return None
        return Prediction.from_scores(scores)

    def _run_model(self, tensor: np.ndarray) -> np.ndarray:
        try:
            output = self.model.predict(tensor)
            return np.asarray(output, dtype=np.float64).reshape(-1)
        except ClassifierError:
            raise
        except Exception as e:
            raise ClassifierError(str(e) or type(e).__name__) from e
