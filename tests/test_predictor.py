"""Tests for the drawing → scores adapter."""

import logging

import numpy as np
import pytest

from conftest import FailingModel, FakeModel, scores_favoring
from sketch_gestures.errors import ClassifierError, LabelCountMismatchError
from sketch_gestures.labels import ALL_LABELS, NUM_LABELS, GestureLabel
from sketch_gestures.metrics import MetricsCollector
from sketch_gestures.predictor import GesturePredictor, Prediction
from sketch_gestures.profiler import PipelineProfiler
from sketch_gestures.rasterizer import DrawingRasterizer


class BrokenRasterizer:
    """Produces an image the normalizer cannot use."""

    def rasterize(self, drawing):
        return np.zeros((0, 28), dtype=np.uint8)


class TestPredictLabelValues:
    def test_returns_one_score_per_label(self, x_drawing):
        model = FakeModel(scores_favoring(GestureLabel.XMARK))
        scores = GesturePredictor(model).predict_label_values(x_drawing)
        assert isinstance(scores, list)
        assert len(scores) == NUM_LABELS
        assert all(isinstance(s, float) for s in scores)

    def test_preserves_order(self, x_drawing):
        raw = np.linspace(0.0, 1.0, NUM_LABELS)
        scores = GesturePredictor(FakeModel(raw)).predict_label_values(x_drawing)
        assert scores == [float(v) for v in raw]

    def test_model_receives_normalized_tensor(self, x_drawing):
        model = FakeModel()
        GesturePredictor(model, rasterizer=DrawingRasterizer(width=32, height=24)).predict_label_values(x_drawing)
        assert len(model.calls) == 1
        tensor = model.calls[0]
        assert tensor.shape == (1, 32, 24)
        assert tensor.min() >= 0.0
        assert tensor.max() <= 1.0
        assert tensor.max() > 0.0

    def test_flattens_batched_output(self, x_drawing):
        model = FakeModel(np.ones((1, NUM_LABELS)))
        scores = GesturePredictor(model).predict_label_values(x_drawing)
        assert scores == [1.0] * NUM_LABELS


class TestNoPrediction:
    def test_empty_drawing(self, empty_drawing):
        model = FakeModel()
        assert GesturePredictor(model).predict_label_values(empty_drawing) is None
        assert model.calls == []

    def test_tensor_failure(self, x_drawing):
        model = FakeModel()
        predictor = GesturePredictor(model, rasterizer=BrokenRasterizer())
        assert predictor.predict_label_values(x_drawing) is None
        assert model.calls == []

    def test_classifier_exception(self, x_drawing):
        assert GesturePredictor(FailingModel()).predict_label_values(x_drawing) is None

    def test_classifier_error(self, x_drawing):
        model = FailingModel(ClassifierError("bad input"))
        assert GesturePredictor(model).predict_label_values(x_drawing) is None

    def test_non_numeric_output(self, x_drawing):
        model = FakeModel()
        model.scores = ["a"] * NUM_LABELS
        assert GesturePredictor(model).predict_label_values(x_drawing) is None

    def test_failures_recorded_by_kind(self, x_drawing, empty_drawing):
        metrics = MetricsCollector()
        GesturePredictor(FakeModel(), metrics=metrics).predict_label_values(empty_drawing)
        GesturePredictor(FailingModel(), metrics=metrics).predict_label_values(x_drawing)
        GesturePredictor(FakeModel(), rasterizer=BrokenRasterizer(), metrics=metrics).predict_label_values(x_drawing)
        assert metrics.failure_counts == {"rasterization": 1, "classifier": 1, "tensor": 1}
        assert metrics.predictions_total == 0

    def test_failure_logged(self, empty_drawing, caplog):
        with caplog.at_level(logging.DEBUG, logger="sketch_gestures.predictor"):
            GesturePredictor(FakeModel()).predict_label_values(empty_drawing)
        assert "rasterization" in caplog.text


class TestLabelCountMismatch:
    def test_short_output_raises(self, x_drawing):
        model = FakeModel(np.zeros(NUM_LABELS - 1))
        with pytest.raises(LabelCountMismatchError):
            GesturePredictor(model).predict_label_values(x_drawing)

    def test_long_output_raises(self, x_drawing):
        model = FakeModel(np.zeros(NUM_LABELS + 3))
        with pytest.raises(LabelCountMismatchError, match=str(NUM_LABELS)):
            GesturePredictor(model).predict_label_values(x_drawing)


class TestTiming:
    def test_stages_profiled(self, x_drawing):
        profiler = PipelineProfiler()
        GesturePredictor(FakeModel(), profiler=profiler).predict_label_values(x_drawing)
        summary = profiler.summary()
        assert set(summary) == {"image_generation", "prediction", "total"}

    def test_timings_logged(self, x_drawing, caplog):
        with caplog.at_level(logging.DEBUG, logger="sketch_gestures.predictor"):
            GesturePredictor(FakeModel()).predict_label_values(x_drawing)
        assert "image_generation=" in caplog.text
        assert "prediction=" in caplog.text

    def test_disabled_profiler_same_result(self, x_drawing):
        raw = np.linspace(0.0, 1.0, NUM_LABELS)
        profiler = PipelineProfiler()
        profiler.enabled = False
        with_timing = GesturePredictor(FakeModel(raw)).predict_label_values(x_drawing)
        without = GesturePredictor(FakeModel(raw), profiler=profiler).predict_label_values(x_drawing)
        assert with_timing == without

    def test_latency_recorded(self, x_drawing):
        metrics = MetricsCollector()
        GesturePredictor(FakeModel(), metrics=metrics).predict_label_values(x_drawing)
        assert metrics.predictions_total == 1


class TestPrediction:
    def test_predict_picks_best(self, x_drawing):
        model = FakeModel(scores_favoring(GestureLabel.PLUS_SIGN))
        prediction = GesturePredictor(model).predict(x_drawing)
        assert prediction.label is GestureLabel.PLUS_SIGN
        assert prediction.score == pytest.approx(0.9)

    def test_predict_none(self, empty_drawing):
        assert GesturePredictor(FakeModel()).predict(empty_drawing) is None

    def test_top(self):
        scores = [0.0] * NUM_LABELS
        scores[GestureLabel.HEART.index] = 0.7
        scores[GestureLabel.STAR.index] = 0.2
        top = Prediction.from_scores(scores).top(2)
        assert top == [(GestureLabel.HEART, 0.7), (GestureLabel.STAR, 0.2)]

    def test_top_ties_keep_label_order(self):
        top = Prediction.from_scores([0.5] * NUM_LABELS).top(3)
        assert [label for label, _ in top] == list(ALL_LABELS[:3])

    def test_score_of(self):
        scores = list(np.linspace(0, 1, NUM_LABELS))
        prediction = Prediction.from_scores(scores)
        assert prediction.score_of(GestureLabel.CIRCLE) == scores[GestureLabel.CIRCLE.index]
