"""sketch-gestures - Freehand gesture drawing recognition with a pre-trained model."""

__version__ = "0.1.0"

from sketch_gestures.labels import ALL_LABELS, GestureLabel, label_at, label_index
from sketch_gestures.drawing import Drawing, Stroke
from sketch_gestures.errors import (
    ClassifierError,
    LabelCountMismatchError,
    PredictionError,
    RasterizationError,
    TensorConstructionError,
)
from sketch_gestures.policy import required_number_of_strokes, should_delay_recognition
from sketch_gestures.rasterizer import DrawingRasterizer
from sketch_gestures.tensor import normalize_grayscale
from sketch_gestures.model import GestureModel, load_model, shared_model
from sketch_gestures.predictor import GesturePredictor, Prediction
from sketch_gestures.recognizer import Decision, GestureRecognizer, Recognition, select_label
from sketch_gestures.profiler import PipelineProfiler
from sketch_gestures.metrics import MetricsCollector
from sketch_gestures.config import RecognizerConfig, load_config
