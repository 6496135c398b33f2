"""Heuristic acceptance rules for recognized labels.

Both tables are hand-tuned product data. Labels not listed fall back to the
defaults (one stroke, no delay).
"""

from __future__ import annotations

from sketch_gestures.labels import GestureLabel

DEFAULT_REQUIRED_STROKES = 1

REQUIRED_STROKES: dict[GestureLabel, int] = {
    GestureLabel.XMARK: 2,
    GestureLabel.PLUS_SIGN: 2,
    GestureLabel.FACE_HAPPY: 3,
    GestureLabel.FACE_SAD: 3,
}

# Labels that may be the first part of a bigger drawing.
DELAYED_LABELS: frozenset[GestureLabel] = frozenset({
    GestureLabel.LINE_ASCENDING,      # first stroke of an x mark
    GestureLabel.SEMICIRCLE_OPEN_UP,  # mouth of a face drawn before the eyes
})


def required_number_of_strokes(label: GestureLabel) -> int:
    """Minimum strokes a drawing needs before ``label`` can match."""
    return REQUIRED_STROKES.get(label, DEFAULT_REQUIRED_STROKES)


def should_delay_recognition(label: GestureLabel) -> bool:
    """Whether to give the user time to keep drawing before emitting ``label``.

    A delayed label is held back because the drawing may be a subset of
    another gesture the user is still completing.
    """
    return label in DELAYED_LABELS
