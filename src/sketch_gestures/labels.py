"""Gesture label enumeration and its dense ordering.

Model outputs are indexed by a label's position in ``ALL_LABELS``, not by any
identifier of the label itself, so the score vector stays exactly as long as
the label set.
"""

from __future__ import annotations

from enum import Enum


class GestureLabel(Enum):
    """Gesture categories the drawing model can predict.

    Values are the wire names used by model label sidecars and the CLI.
    """
    XMARK = "xmark"
    CHECKMARK = "checkmark"
    PLUS_SIGN = "plusSign"
    CIRCLE = "circle"
    TRIANGLE = "triangle"
    SQUARE = "square"
    HEART = "heart"
    STAR = "star"
    FACE_HAPPY = "faceHappy"
    FACE_SAD = "faceSad"
    LINE_ASCENDING = "lineAscending"
    LINE_DESCENDING = "lineDescending"
    LINE_HORIZONTAL = "lineHorizontal"
    LINE_VERTICAL = "lineVertical"
    SEMICIRCLE_OPEN_UP = "semicircleOpenUp"
    SEMICIRCLE_OPEN_DOWN = "semicircleOpenDown"
    ARROW_LEFT = "arrowLeft"
    ARROW_RIGHT = "arrowRight"

    @classmethod
    def from_name(cls, name: str) -> GestureLabel:
        """Parse a wire name such as ``"plusSign"``."""
        try:
            return cls(name)
        except ValueError:
            raise ValueError(f"Unknown gesture label: {name!r}") from None

    @property
    def index(self) -> int:
        return _INDEX[self]


# Order matters: this is the order of the model's output vector.
ALL_LABELS: tuple[GestureLabel, ...] = (
    GestureLabel.XMARK,
    GestureLabel.CHECKMARK,
    GestureLabel.PLUS_SIGN,
    GestureLabel.CIRCLE,
    GestureLabel.TRIANGLE,
    GestureLabel.SQUARE,
    GestureLabel.HEART,
    GestureLabel.STAR,
    GestureLabel.FACE_HAPPY,
    GestureLabel.FACE_SAD,
    GestureLabel.LINE_ASCENDING,
    GestureLabel.LINE_DESCENDING,
    GestureLabel.LINE_HORIZONTAL,
    GestureLabel.LINE_VERTICAL,
    GestureLabel.SEMICIRCLE_OPEN_UP,
    GestureLabel.SEMICIRCLE_OPEN_DOWN,
    GestureLabel.ARROW_LEFT,
    GestureLabel.ARROW_RIGHT,
)

NUM_LABELS = len(ALL_LABELS)

_INDEX: dict[GestureLabel, int] = {label: i for i, label in enumerate(ALL_LABELS)}


def label_index(label: GestureLabel) -> int:
    """Position of ``label`` in the model output vector."""
    return _INDEX[label]


def label_at(index: int) -> GestureLabel:
    """Label stored at ``index`` of the model output vector."""
    if not 0 <= index < NUM_LABELS:
        raise IndexError(f"Label index {index} out of range [0, {NUM_LABELS})")
    return ALL_LABELS[index]


def label_names() -> list[str]:
    """Wire names in output order, as written to ``.labels.json`` sidecars."""
    return [label.value for label in ALL_LABELS]
