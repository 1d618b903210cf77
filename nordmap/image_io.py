from __future__ import annotations

from pathlib import Path
from typing import Union

import numpy as np
from PIL import Image, UnidentifiedImageError

from .constants import OUTPUT_EXT
from .core_types import U8Image, assert_u8_image_rgb

"""
Image I/O at the codec boundary: decode any Pillow-readable file to an 8-bit
RGB grid, encode a grid back to a lossless PNG.
"""

PathLike = Union[str, Path]


def load_image_rgb(path: PathLike) -> U8Image:
    """
    Decode `path` into a uint8 [H,W,3] array.

    Pixels are kept in stored order (EXIF orientation is not applied), so the
    grid has the file's own width and height. Alpha and any extra channels are dropped.
    Pillow / OS errors propagate unchanged.
    """
    with Image.open(Path(path)) as im:
        rgb = np.array(im.convert("RGB"), dtype=np.uint8)
    return np.ascontiguousarray(rgb)


def save_image_rgb(path: PathLike, rgb: np.ndarray) -> Path:
    """Write `rgb` as an 8-bit RGB PNG. Non-.png suffixes are replaced."""
    path = Path(path)
    if path.suffix.lower() != OUTPUT_EXT:
        path = path.with_suffix(OUTPUT_EXT)
    arr = np.ascontiguousarray(assert_u8_image_rgb(rgb))
    Image.fromarray(arr).save(path, format="PNG")
    return path


def is_image_file(path: PathLike) -> bool:
    try:
        with Image.open(Path(path)) as im:
            im.seek(0)
            im.load()
        return True
    except (UnidentifiedImageError, OSError):
        return False


__all__ = [
    "load_image_rgb",
    "save_image_rgb",
    "is_image_file",
]
