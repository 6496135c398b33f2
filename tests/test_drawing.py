"""Tests for drawing value types."""

import numpy as np
import pytest

from sketch_gestures.drawing import Drawing, Stroke


class TestStroke:
    def test_from_points_converts_to_floats(self):
        stroke = Stroke.from_points([[1, 2], (3, 4)])
        assert stroke.points == ((1.0, 2.0), (3.0, 4.0))
        assert len(stroke) == 2

    def test_as_array_shape(self):
        stroke = Stroke.from_points([(0, 0), (1, 1), (2, 0)])
        arr = stroke.as_array()
        assert arr.shape == (3, 2)
        assert arr.dtype == np.float64

    def test_empty_stroke_array(self):
        assert Stroke().as_array().shape == (0, 2)

    def test_wrong_point_arity(self):
        with pytest.raises(ValueError, match="2 coordinates"):
            Stroke.from_points([(1, 2, 3)])


class TestDrawing:
    def test_counts(self, x_drawing):
        assert x_drawing.stroke_count == 2
        assert x_drawing.point_count == 6
        assert not x_drawing.is_empty

    def test_empty(self, empty_drawing):
        assert empty_drawing.stroke_count == 0
        assert empty_drawing.is_empty
        assert empty_drawing.bounds() is None

    def test_strokes_without_points_are_empty(self):
        drawing = Drawing(strokes=(Stroke(), Stroke()))
        assert drawing.stroke_count == 2
        assert drawing.is_empty

    def test_bounds(self, x_drawing):
        assert x_drawing.bounds() == (0.0, 0.0, 100.0, 100.0)

    def test_dict_round_trip(self, x_drawing):
        data = x_drawing.to_dict()
        assert Drawing.from_dict(data) == x_drawing

    def test_immutable(self, x_drawing):
        with pytest.raises(AttributeError):
            x_drawing.strokes = ()


class TestFromDict:
    def test_missing_strokes_key(self):
        with pytest.raises(ValueError, match="strokes"):
            Drawing.from_dict({"points": []})

    def test_strokes_not_a_list(self):
        with pytest.raises(ValueError):
            Drawing.from_dict({"strokes": "abc"})

    def test_malformed_points(self):
        with pytest.raises(ValueError):
            Drawing.from_dict({"strokes": [[1, 2, 3]]})

    def test_not_a_mapping(self):
        with pytest.raises(ValueError):
            Drawing.from_dict([[0, 0]])
