"""Shared fixtures: fake classifiers and sample drawings."""

import numpy as np
import pytest

from sketch_gestures.drawing import Drawing
from sketch_gestures.labels import NUM_LABELS, GestureLabel


class FakeModel:
    """Returns fixed scores and remembers the tensors it was given."""

    def __init__(self, scores=None):
        self.scores = np.zeros(NUM_LABELS) if scores is None else np.asarray(scores, dtype=np.float64)
        self.calls: list[np.ndarray] = []

    def predict(self, tensor):
        self.calls.append(tensor)
        return self.scores


class FailingModel:
    def __init__(self, exc=None):
        self.exc = exc or RuntimeError("model exploded")

    def predict(self, tensor):
        raise self.exc


def scores_favoring(label: GestureLabel, high: float = 0.9) -> np.ndarray:
    scores = np.full(NUM_LABELS, (1.0 - high) / (NUM_LABELS - 1))
    scores[label.index] = high
    return scores


@pytest.fixture
def x_drawing():
    return Drawing.from_strokes([
        [(0, 0), (50, 50), (100, 100)],
        [(100, 0), (50, 50), (0, 100)],
    ])


@pytest.fixture
def ascending_line():
    return Drawing.from_strokes([[(0, 100), (50, 50), (100, 0)]])


@pytest.fixture
def empty_drawing():
    return Drawing()
