"""Raster adapters — image files to PixelGrid and back, via Pillow.

Decoding, encoding and drawing live here so the core never touches a
bitmap library.
"""

from __future__ import annotations

import io
from collections.abc import Iterable
from pathlib import Path
from typing import BinaryIO

import numpy as np
from numpy.typing import NDArray
from PIL import Image, ImageDraw

from shapesight.errors import InvalidGridError
from shapesight.utils.grid import MAX_DIMENSION, PixelGrid, validate_dimensions
from shapesight.utils.shape import BoundingBox


def load_grid(
    source: str | Path | bytes | BinaryIO,
    channel: str = "red",
    max_dim: int = MAX_DIMENSION,
) -> PixelGrid:
    """Decode an image and reduce it to one channel.

    Raises InvalidGridError if the image cannot be decoded or its size is
    outside [1, max_dim].
    """
    if isinstance(source, bytes):
        source = io.BytesIO(source)
    try:
        with Image.open(source) as img:
            rgb = np.asarray(img.convert("RGB"))
    except (OSError, Image.DecompressionBombError) as e:
        raise InvalidGridError(f"Could not decode image: {e}") from e
    return validate_dimensions(PixelGrid.from_rgb(rgb, channel), max_dim)


def grid_to_image(grid: PixelGrid, scale_binary: bool = True) -> Image.Image:
    """Grey image of ``grid``. 0/1 grids are stretched to 0/255 when asked."""
    samples = grid.samples
    if scale_binary and samples.size and samples.min() >= 0 and samples.max() <= 1:
        samples = samples * 255
    return Image.fromarray(np.clip(samples, 0, 255).astype(np.uint8))


def rgb_to_image(rgb: NDArray[np.uint8]) -> Image.Image:
    return Image.fromarray(np.asarray(rgb, dtype=np.uint8))


def draw_boxes(
    image: Image.Image,
    boxes: Iterable[BoundingBox],
    color: tuple[int, int, int] = (255, 0, 0),
) -> Image.Image:
    """Copy of ``image`` (as RGB) with a rectangle outline per box."""
    out = image.convert("RGB")
    draw = ImageDraw.Draw(out)
    for box in boxes:
        draw.rectangle(
            [box.x, box.y, box.x + box.width - 1, box.y + box.height - 1],
            outline=color,
        )
    return out


def save_image(image: Image.Image, path: str | Path) -> Path:
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    image.save(path)
    return path
