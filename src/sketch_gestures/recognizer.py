"""Label selection on top of the predictor.

Picks the best scoring label and applies the acceptance policy: drawings with
too few strokes for the label wait for more strokes, and labels that may be
the start of a larger gesture are held for a short delay before being emitted.
"""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass, replace
from enum import Enum
from typing import Optional, Sequence

import numpy as np

from sketch_gestures.drawing import Drawing
from sketch_gestures.labels import GestureLabel, label_at
from sketch_gestures.policy import required_number_of_strokes, should_delay_recognition
from sketch_gestures.predictor import GesturePredictor

logger = logging.getLogger("sketch_gestures.recognizer")


class Decision(Enum):
    ACCEPT = "accept"
    DELAY = "delay"
    NEED_MORE_STROKES = "need_more_strokes"
    BELOW_THRESHOLD = "below_threshold"


@dataclass
class Recognition:
    """Best label for a drawing and what the caller should do with it."""
    label: GestureLabel
    score: float
    decision: Decision
    stroke_count: int
    timestamp: float = 0.0

    @property
    def accepted(self) -> bool:
        return self.decision is Decision.ACCEPT

    def to_dict(self) -> dict:
        return {
            "label": self.label.value,
            "score": round(self.score, 6),
            "decision": self.decision.value,
            "stroke_count": self.stroke_count,
            "timestamp": self.timestamp,
        }


def select_label(
    scores: Optional[Sequence[float]],
    stroke_count: int,
    min_score: float = 0.0,
) -> Optional[Recognition]:
    """Choose the highest scoring label and decide whether to accept it.

    Ties go to the label that comes first in ``ALL_LABELS``.

    Returns:
        A Recognition, or None when there are no scores.
    """
    if scores is None or len(scores) == 0:
        return None

    best = int(np.argmax(scores))
    label = label_at(best)
    score = float(scores[best])

    if stroke_count < required_number_of_strokes(label):
        decision = Decision.NEED_MORE_STROKES
    elif score < min_score:
        decision = Decision.BELOW_THRESHOLD
    elif should_delay_recognition(label):
        decision = Decision.DELAY
    else:
        decision = Decision.ACCEPT

    return Recognition(label=label, score=score, decision=decision, stroke_count=stroke_count)


class GestureRecognizer:
    """Turns successive drawing updates into emitted labels.

    Call ``update`` whenever the drawing changes (e.g. a stroke ends) and
    ``poll`` periodically; both return the Recognition to emit, if any.

    Usage:
        recognizer = GestureRecognizer(predictor, delay_seconds=0.5)
        result = recognizer.update(drawing)
        ...
        result = result or recognizer.poll()
    """

    def __init__(
        self,
        predictor: GesturePredictor,
        min_score: float = 0.0,
        delay_seconds: float = 0.5,
    ):
        if delay_seconds < 0:
            raise ValueError(f"delay_seconds must be >= 0, got {delay_seconds}")
        self.predictor = predictor
        self.min_score = min_score
        self.delay_seconds = delay_seconds

        self._pending: Optional[tuple[Recognition, float]] = None
        self._last: Optional[Recognition] = None

    def update(self, drawing: Drawing, now: Optional[float] = None) -> Optional[Recognition]:
        """Classify the current drawing.

        A newer drawing always supersedes a pending delayed label.
        """
        now = now if now is not None else time.monotonic()
        self._pending = None

        scores = self.predictor.predict_label_values(drawing)
        result = select_label(scores, drawing.stroke_count, self.min_score)
        if result is None:
            return None

        result.timestamp = now
        self._last = result
        logger.debug(
            "Best label %s (%.3f) with %d stroke(s): %s",
            result.label.value, result.score, result.stroke_count, result.decision.value,
        )

        if result.decision is Decision.ACCEPT:
            return self._emit(result)
        if result.decision is Decision.DELAY:
            self._pending = (result, now + self.delay_seconds)
        return None

    def poll(self, now: Optional[float] = None) -> Optional[Recognition]:
        """Emit the pending delayed label once its delay has elapsed."""
        if self._pending is None:
            return None

        now = now if now is not None else time.monotonic()
        result, deadline = self._pending
        if now < deadline:
            return None

        self._pending = None
        return self._emit(replace(result, decision=Decision.ACCEPT, timestamp=now))

    def reset(self):
        """Drop any pending label and history."""
        self._pending = None
        self._last = None

    def _emit(self, result: Recognition) -> Recognition:
        metrics = self.predictor.metrics
        if metrics is not None:
            metrics.record_label(result.label.value)
        return result

    @property
    def pending(self) -> Optional[Recognition]:
        return self._pending[0] if self._pending else None

    @property
    def last(self) -> Optional[Recognition]:
        """Most recent selection, whatever its decision."""
        return self._last
