"""sketch-gestures CLI.

Usage:
    sketch-gestures labels                       — Show the label table and policy
    sketch-gestures rasterize DRAWING -o out.png — Render a drawing as the model sees it
    sketch-gestures predict DRAWING --model M    — Score a drawing and pick a label
    sketch-gestures benchmark DRAWING --model M  — Time the prediction stages

DRAWING is a JSON file of the form {"strokes": [[[x, y], ...], ...]}.
"""

from __future__ import annotations

import json
import logging
import time
from pathlib import Path
from typing import Optional

import typer

from sketch_gestures.config import RecognizerConfig, load_config
from sketch_gestures.drawing import Drawing

app = typer.Typer(
    name="sketch-gestures",
    help="✏️  Recognize freehand gesture drawings with a pre-trained model.",
    add_completion=False,
)


@app.callback()
def main_options(
    log_level: str = typer.Option("warning", help="Log level"),
):
    logging.basicConfig(
        level=getattr(logging, log_level.upper(), logging.WARNING),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def _load_drawing(path: str) -> Drawing:
    drawing_path = Path(path)
    if not drawing_path.exists():
        typer.echo(f"❌ Drawing not found: {path}", err=True)
        raise typer.Exit(1)
    try:
        with open(drawing_path) as f:
            return Drawing.from_dict(json.load(f))
    except ValueError as e:
        typer.echo(f"❌ Invalid drawing {path}: {e}", err=True)
        raise typer.Exit(1)


def _load_config(path: Optional[str]) -> RecognizerConfig:
    if path is None:
        return RecognizerConfig()
    try:
        return load_config(path)
    except (OSError, ValueError) as e:
        typer.echo(f"❌ Invalid config {path}: {e}", err=True)
        raise typer.Exit(1)


def _load_model(model: Optional[str], config: RecognizerConfig):
    from sketch_gestures.model import shared_model

    model_path = model or config.model_path
    if not model_path:
        typer.echo("❌ No model given (use --model or model_path in the config)", err=True)
        raise typer.Exit(1)
    try:
        return shared_model(model_path, backend=config.model_backend)
    except (OSError, ValueError) as e:
        typer.echo(f"❌ Could not load model {model_path}: {e}", err=True)
        raise typer.Exit(1)


@app.command()
def labels():
    """List labels in model output order with their acceptance policy."""
    from sketch_gestures.labels import ALL_LABELS
    from sketch_gestures.policy import required_number_of_strokes, should_delay_recognition

    typer.echo(f"{'index':>5}  {'label':20s} {'strokes':>7}  delay")
    for label in ALL_LABELS:
        delay = "yes" if should_delay_recognition(label) else "-"
        typer.echo(
            f"{label.index:>5}  {label.value:20s} {required_number_of_strokes(label):>7}  {delay}"
        )


@app.command()
def rasterize(
    drawing: str = typer.Argument(..., help="Path to drawing JSON"),
    output: str = typer.Option("drawing.png", "-o", help="Output image path"),
    config: Optional[str] = typer.Option(None, help="Path to recognizer YAML config"),
):
    """Render a drawing to the grayscale image fed to the model."""
    import cv2
    from sketch_gestures.errors import RasterizationError

    cfg = _load_config(config)
    rasterizer = cfg.build_rasterizer()
    try:
        gray = rasterizer.rasterize(_load_drawing(drawing))
    except RasterizationError as e:
        typer.echo(f"❌ Could not rasterize: {e}", err=True)
        raise typer.Exit(1)

    if not cv2.imwrite(output, gray):
        typer.echo(f"❌ Could not write {output}", err=True)
        raise typer.Exit(1)
    height, width = rasterizer.shape
    typer.echo(f"🖼  Saved {width}x{height} image to: {output}")


@app.command()
def predict(
    drawing: str = typer.Argument(..., help="Path to drawing JSON"),
    model: Optional[str] = typer.Option(None, help="Path to model (.onnx or TorchScript)"),
    config: Optional[str] = typer.Option(None, help="Path to recognizer YAML config"),
    top: int = typer.Option(3, help="Number of top labels to show"),
    as_json: bool = typer.Option(False, "--json", help="Print machine-readable JSON"),
):
    """Score a drawing and show which label would be emitted."""
    from sketch_gestures.predictor import Prediction
    from sketch_gestures.recognizer import select_label

    cfg = _load_config(config)
    sketch = _load_drawing(drawing)
    predictor = cfg.build_predictor(_load_model(model, cfg))

    scores = predictor.predict_label_values(sketch)
    if scores is None:
        typer.echo("🤷 No prediction for this drawing", err=True)
        raise typer.Exit(1)

    prediction = Prediction.from_scores(scores)
    result = select_label(scores, sketch.stroke_count, cfg.min_score)

    if as_json:
        typer.echo(json.dumps({
            "top": [{"label": label.value, "score": score} for label, score in prediction.top(top)],
            "recognition": result.to_dict(),
            "timings": predictor.profiler.summary(),
        }, indent=2))
        return

    typer.echo(f"📊 Top {top} labels ({sketch.stroke_count} stroke(s)):")
    for label, score in prediction.top(top):
        typer.echo(f"   {label.value:20s} {score:.4f}")
    typer.echo(f"\n➡️  {result.label.value}: {result.decision.value}")


@app.command()
def benchmark(
    drawing: str = typer.Argument(..., help="Path to drawing JSON"),
    model: Optional[str] = typer.Option(None, help="Path to model (.onnx or TorchScript)"),
    config: Optional[str] = typer.Option(None, help="Path to recognizer YAML config"),
    iterations: int = typer.Option(200, help="Number of iterations"),
):
    """Time image generation and prediction for a drawing."""
    cfg = _load_config(config)
    sketch = _load_drawing(drawing)
    predictor = cfg.build_predictor(_load_model(model, cfg))
    predictor.profiler.enabled = True

    typer.echo(f"⚡ Running benchmark: {iterations} iterations")

    times = []
    failures = 0
    for _ in range(iterations):
        t0 = time.perf_counter()
        if predictor.predict_label_values(sketch) is None:
            failures += 1
        times.append(time.perf_counter() - t0)

    avg_ms = sum(times) / len(times) * 1000 if times else 0.0
    p95_ms = sorted(times)[int(len(times) * 0.95)] * 1000 if times else 0.0

    typer.echo(f"\n📊 Results:")
    typer.echo(f"   Average latency: {avg_ms:.2f} ms")
    typer.echo(f"   P95 latency:     {p95_ms:.2f} ms")
    typer.echo(f"   No prediction:   {failures}")

    typer.echo(f"\n📈 Stage breakdown:")
    for name, stats in predictor.profiler.summary().items():
        typer.echo(f"   {name:25s} avg={stats['avg_ms']:.3f}ms  p95={stats['p95_ms']:.3f}ms")


def main():
    app()


if __name__ == "__main__":
    main()
