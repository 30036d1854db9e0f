"""Command-line entry point: analyze an image file and print its regions as JSON."""

from __future__ import annotations

import argparse
import json
import logging
import math
import sys
from pathlib import Path
from typing import Any

from shapesight.config import settings
from shapesight.engine.context import AnalysisContext
from shapesight.engine.pipeline import create_pipeline, default_plan, parse_plan
from shapesight.engine.registry import StageCall
from shapesight.errors import ShapeSightError
from shapesight.utils.raster import draw_boxes, grid_to_image, load_grid, rgb_to_image, save_image

logger = logging.getLogger(__name__)


def _jsonable(value: Any) -> Any:
    if isinstance(value, float) and not math.isfinite(value):
        return None
    if isinstance(value, dict):
        return {k: _jsonable(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [_jsonable(v) for v in value]
    return value


def _load_plan(text: str) -> list[StageCall]:
    """Plan from a JSON file path or an inline JSON list."""
    raw = text if text.lstrip().startswith("[") else Path(text).read_text(encoding="utf-8")
    try:
        data = json.loads(raw)
    except json.JSONDecodeError as e:
        raise SystemExit(f"--plan is neither a JSON file nor valid JSON: {e}") from e
    if not isinstance(data, list):
        raise SystemExit("--plan must be a JSON list of stage calls")
    return parse_plan(data)


def build_plan(args: argparse.Namespace) -> list[StageCall]:
    if args.plan:
        plan = _load_plan(args.plan)
    else:
        plan = [StageCall("threshold", {"t": args.threshold}), *default_plan()]
    if args.output and not any(call.id == "render" for call in plan):
        if any(call.id == "label" for call in plan):
            plan.append(StageCall("render"))
    return plan


def analyze(args: argparse.Namespace) -> int:
    config = settings.pipeline_config()
    grid = load_grid(args.image, channel=args.channel, max_dim=config.max_dimension)
    ctx = AnalysisContext(source=grid, config=config)
    ctx = create_pipeline(config).run(ctx, build_plan(args))

    if args.output:
        if ctx.rendered is not None:
            image = rgb_to_image(ctx.rendered)
        else:
            image = grid_to_image(ctx.grid)
        if args.boxes:
            image = draw_boxes(image, ctx.bounding_boxes())
        out = save_image(image, args.output)
        logger.info("Wrote %s", out)

    rows = []
    for label, desc in ctx.descriptors().items():
        row = desc.to_dict()
        shape = ctx.classes.get(label)
        row["shape_class"] = shape.name.lower() if shape is not None else None
        rows.append(row)
    json.dump(_jsonable(rows), sys.stdout, indent=2)
    sys.stdout.write("\n")
    return 0


def serve(args: argparse.Namespace) -> int:
    import uvicorn

    uvicorn.run("shapesight.main:app", host=args.host, port=args.port, reload=args.reload)
    return 0


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(prog="shapesight", description="Binary image shape analysis")
    parser.add_argument(
        "--log-level",
        default=settings.shapesight_log_level,
        help="Logging level (default from SHAPESIGHT_LOG_LEVEL)",
    )
    sub = parser.add_subparsers(dest="command", required=True)

    p = sub.add_parser("analyze", help="Label, measure and classify the regions of an image")
    p.add_argument("image", help="Image file (any format Pillow reads)")
    p.add_argument("-t", "--threshold", type=int, default=127, help="Foreground is sample > T")
    p.add_argument("-p", "--plan", help="Stage plan as a JSON file or inline JSON list")
    p.add_argument(
        "-c",
        "--channel",
        default="red",
        choices=["red", "green", "blue", "luminance"],
        help="Channel reduced to the grid",
    )
    p.add_argument("-o", "--output", help="Write the rendered labels (or final grid) as PNG")
    p.add_argument("-b", "--boxes", action="store_true", help="Overlay bounding boxes on --output")
    p.set_defaults(func=analyze)

    s = sub.add_parser("serve", help="Run the HTTP API with uvicorn")
    s.add_argument("--host", default="127.0.0.1")
    s.add_argument("--port", type=int, default=8000)
    s.add_argument("--reload", action="store_true")
    s.set_defaults(func=serve)

    args = parser.parse_args(argv)
    logging.basicConfig(
        level=getattr(logging, args.log_level.upper(), logging.INFO),
        format="%(asctime)s %(name)s %(levelname)s %(message)s",
        stream=sys.stderr,
    )

    try:
        return args.func(args)
    except ShapeSightError as e:
        print(f"error: {e}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
