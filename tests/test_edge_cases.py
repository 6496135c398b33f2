"""Edge case tests: extreme inputs must never crash the predictor."""

import numpy as np
import pytest

from conftest import FakeModel
from sketch_gestures.drawing import Drawing, Stroke
from sketch_gestures.predictor import GesturePredictor
from sketch_gestures.rasterizer import DrawingRasterizer


class TestDrawingEdgeCases:
    @pytest.mark.parametrize("strokes", [
        [],
        [[]],
        [[], []],
        [[(5, 5)]],
        [[(5, 5)], [(5, 5)]],
        [[(0, 0), (float("inf"), 0)]],
        [[(float("nan"), float("nan"))]],
    ])
    def test_rejected_drawings_give_none(self, strokes):
        model = FakeModel()
        assert GesturePredictor(model).predict_label_values(Drawing.from_strokes(strokes)) is None
        assert model.calls == []

    def test_huge_coordinates(self):
        drawing = Drawing.from_strokes([[(0, 0), (1e9, 1e9)], [(1e9, 0), (0, 1e9)]])
        assert GesturePredictor(FakeModel()).predict_label_values(drawing) is not None

    def test_tiny_coordinates(self):
        drawing = Drawing.from_strokes([[(0, 0), (1e-6, 1e-6)]])
        gray = DrawingRasterizer().rasterize(drawing)
        assert gray.max() > 0

    def test_negative_coordinates(self):
        drawing = Drawing.from_strokes([[(-50, -50), (-10, -30)]])
        assert GesturePredictor(FakeModel()).predict_label_values(drawing) is not None

    def test_many_points(self):
        t = np.linspace(0, 2 * np.pi, 5000)
        drawing = Drawing.from_strokes([np.stack([np.cos(t), np.sin(t)], axis=1).tolist()])
        gray = DrawingRasterizer().rasterize(drawing)
        assert gray.shape == (28, 28)
        assert gray[14, 14] == 0  # circle interior stays empty

    def test_empty_stroke_among_others(self):
        drawing = Drawing(strokes=(Stroke(), Stroke.from_points([(0, 0), (4, 4)])))
        assert drawing.stroke_count == 2
        assert GesturePredictor(FakeModel()).predict_label_values(drawing) is not None

    def test_repeated_predictions_are_deterministic(self, x_drawing):
        model = FakeModel()
        predictor = GesturePredictor(model)
        predictor.predict_label_values(x_drawing)
        predictor.predict_label_values(x_drawing)
        np.testing.assert_array_equal(model.calls[0], model.calls[1])
