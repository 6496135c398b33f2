"""Recognizer configuration.

Loaded from YAML, either as top-level keys or under a ``recognizer:`` section:

    recognizer:
      image_width: 28
      image_height: 28
      model_path: models/gestures.onnx
      min_score: 0.5
      delay_seconds: 0.6
"""

from __future__ import annotations

import logging
from dataclasses import asdict, dataclass, fields
from pathlib import Path
from typing import Optional

import yaml

from sketch_gestures.metrics import MetricsCollector
from sketch_gestures.model import GestureModel
from sketch_gestures.predictor import GesturePredictor
from sketch_gestures.profiler import PipelineProfiler
from sketch_gestures.rasterizer import DrawingRasterizer
from sketch_gestures.recognizer import GestureRecognizer

logger = logging.getLogger("sketch_gestures.config")


@dataclass
class RecognizerConfig:
    image_width: int = 28
    image_height: int = 28
    line_width: float = 2.0
    padding: int = 2
    supersample: int = 4
    model_path: Optional[str] = None
    model_backend: Optional[str] = None
    min_score: float = 0.0
    delay_seconds: float = 0.5
    enable_profiling: bool = True

    def __post_init__(self):
        if self.image_width <= 0 or self.image_height <= 0:
            raise ValueError(
                f"Image size must be positive, got {self.image_width}x{self.image_height}"
            )
        if self.line_width <= 0:
            raise ValueError(f"line_width must be positive, got {self.line_width}")
        if self.padding < 0:
            raise ValueError(f"padding must be >= 0, got {self.padding}")
        if 2 * self.padding >= min(self.image_width, self.image_height):
            raise ValueError(
                f"Padding {self.padding} leaves no room on a "
                f"{self.image_width}x{self.image_height} canvas"
            )
        if self.supersample < 1:
            raise ValueError(f"supersample must be >= 1, got {self.supersample}")
        if self.delay_seconds < 0:
            raise ValueError(f"delay_seconds must be >= 0, got {self.delay_seconds}")
        if self.model_backend not in (None, "torch", "onnx"):
            raise ValueError(f"Unknown model backend: {self.model_backend!r}")

    @classmethod
    def from_dict(cls, data: dict) -> RecognizerConfig:
        known = {f.name for f in fields(cls)}
        unknown = sorted(set(data) - known)
        if unknown:
            logger.warning("Ignoring unknown config keys: %s", ", ".join(unknown))
        return cls(**{k: v for k, v in data.items() if k in known})

    def to_dict(self) -> dict:
        return asdict(self)

    def build_rasterizer(self) -> DrawingRasterizer:
        return DrawingRasterizer(
            width=self.image_width,
            height=self.image_height,
            line_width=self.line_width,
            padding=self.padding,
            supersample=self.supersample,
        )

    def build_predictor(
        self,
        model: GestureModel,
        metrics: Optional[MetricsCollector] = None,
    ) -> GesturePredictor:
        profiler = PipelineProfiler()
        profiler.enabled = self.enable_profiling
        return GesturePredictor(
            model,
            rasterizer=self.build_rasterizer(),
            profiler=profiler,
            metrics=metrics,
        )

    def build_recognizer(
        self,
        model: GestureModel,
        metrics: Optional[MetricsCollector] = None,
    ) -> GestureRecognizer:
        return GestureRecognizer(
            self.build_predictor(model, metrics=metrics),
            min_score=self.min_score,
            delay_seconds=self.delay_seconds,
        )


def load_config(path: str | Path) -> RecognizerConfig:
    """Load a RecognizerConfig from a YAML file."""
    path = Path(path)
    with open(path) as f:
        data = yaml.safe_load(f) or {}

    if not isinstance(data, dict):
        raise ValueError(f"Config {path} must be a mapping, got {type(data).__name__}")
    if "recognizer" in data:
        data = data["recognizer"] or {}
        if not isinstance(data, dict):
            raise ValueError(f"'recognizer' section in {path} must be a mapping")

    return RecognizerConfig.from_dict(data)
