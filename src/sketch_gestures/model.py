"""Pre-trained drawing classifier backends.

The network is opaque here: it takes the normalized (1, W, H) image tensor
and returns one score per label in ``ALL_LABELS`` order. The input is named
``image`` and the output ``labelValues``.

Supported artifacts:
- TorchScript (.pt / .pth / .torchscript), run with PyTorch on CPU
- ONNX (.onnx), run with onnxruntime

An optional ``<artifact>.labels.json`` sidecar lists the label wire names in
output order; when present it must match ``ALL_LABELS`` exactly.
"""

from __future__ import annotations

import json
import logging
import threading
from pathlib import Path
from typing import Optional, Protocol

import numpy as np

from sketch_gestures.errors import ClassifierError, LabelCountMismatchError
from sketch_gestures.labels import label_names

logger = logging.getLogger("sketch_gestures.model")

INPUT_NAME = "image"
OUTPUT_NAME = "labelValues"

_TORCH_SUFFIXES = {".pt", ".pth", ".torchscript"}
_ONNX_SUFFIXES = {".onnx"}


class GestureModel(Protocol):
    """Anything that maps an input tensor to a score array."""

    def predict(self, tensor: np.ndarray) -> np.ndarray:
        ...


class TorchGestureModel:
    """TorchScript classifier run on CPU."""

    def __init__(self, path: str | Path):
        import torch

        self.path = Path(path)
        self._module = torch.jit.load(str(self.path), map_location="cpu")
        self._module.eval()

    def predict(self, tensor: np.ndarray) -> np.ndarray:
        import torch

        try:
            batch = torch.from_numpy(np.ascontiguousarray(tensor, dtype=np.float32)).unsqueeze(0)
            with torch.no_grad():
                output = self._module(batch)
            if isinstance(output, dict):
                output = output[OUTPUT_NAME]
            return output.detach().cpu().numpy().astype(np.float64).reshape(-1)
        except Exception as e:
            raise ClassifierError(f"TorchScript inference failed: {e}") from e


class OnnxGestureModel:
    """ONNX classifier run with onnxruntime."""

    def __init__(
        self,
        path: str | Path,
        input_name: str = INPUT_NAME,
        output_name: str = OUTPUT_NAME,
    ):
        import onnxruntime as ort

        self.path = Path(path)
        self._session = ort.InferenceSession(str(self.path), providers=["CPUExecutionProvider"])
        self._input_name = input_name
        self._output_name = output_name

        inputs = {i.name: i for i in self._session.get_inputs()}
        if input_name not in inputs:
            raise ValueError(
                f"ONNX model {self.path.name} has no input {input_name!r} "
                f"(inputs: {sorted(inputs)})"
            )
        self._batched = len(inputs[input_name].shape) == 4

    def predict(self, tensor: np.ndarray) -> np.ndarray:
        feed = np.ascontiguousarray(tensor, dtype=np.float32)
        if self._batched:
            feed = feed[np.newaxis, ...]
        try:
            output = self._session.run([self._output_name], {self._input_name: feed})[0]
        except Exception as e:
            raise ClassifierError(f"ONNX inference failed: {e}") from e
        return np.asarray(output, dtype=np.float64).reshape(-1)


def labels_sidecar(path: str | Path) -> Path:
    return Path(path).with_suffix(".labels.json")


def verify_label_sidecar(path: str | Path):
    """Check the ``.labels.json`` next to a model artifact, if there is one."""
    sidecar = labels_sidecar(path)
    if not sidecar.exists():
        logger.debug("No label sidecar for %s", path)
        return

    with open(sidecar) as f:
        names = json.load(f)

    expected = label_names()
    if names != expected:
        raise LabelCountMismatchError(
            f"Label sidecar {sidecar.name} does not match the label table: "
            f"got {len(names)} labels, expected {len(expected)} in fixed order"
        )


def load_model(path: str | Path, backend: Optional[str] = None) -> GestureModel:
    """Load a classifier artifact.

    Args:
        path: Model file.
        backend: "torch" or "onnx"; inferred from the file suffix when omitted.
    """
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Model not found: {path}")

    if backend is None:
        suffix = path.suffix.lower()
        if suffix in _ONNX_SUFFIXES:
            backend = "onnx"
        elif suffix in _TORCH_SUFFIXES:
            backend = "torch"
        else:
            raise ValueError(f"Cannot infer model backend from suffix {path.suffix!r}")

    verify_label_sidecar(path)

    if backend == "onnx":
        model: GestureModel = OnnxGestureModel(path)
    elif backend == "torch":
        model = TorchGestureModel(path)
    else:
        raise ValueError(f"Unknown model backend: {backend!r}")

    logger.info("Loaded %s gesture model from %s", backend, path)
    return model


_shared: dict[Path, GestureModel] = {}
_shared_lock = threading.Lock()


def shared_model(path: str | Path, backend: Optional[str] = None) -> GestureModel:
    """Process-wide model handle, loaded at most once per artifact path."""
    key = Path(path).resolve()
    with _shared_lock:
        model = _shared.get(key)
        if model is None:
            model = load_model(key, backend=backend)
            _shared[key] = model
    return model


def clear_shared_models():
    """Drop all shared model handles."""
    with _shared_lock:
        _shared.clear()
