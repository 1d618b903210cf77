"""
Defaults and tunables used across the project.

- Output naming (OUTPUT_SUFFIX, OUTPUT_EXT)
- Folder mode extensions (IMAGE_EXTS)
- Engine knobs (CHUNK_PIXELS, DEFAULT_WORKERS)
"""
from __future__ import annotations

from typing import FrozenSet

# =========
# Output
# =========
OUTPUT_SUFFIX: str = "_nord"
OUTPUT_EXT: str = ".png"

IMAGE_EXTS: FrozenSet[str] = frozenset(
    {".png", ".jpg", ".jpeg", ".webp", ".bmp", ".gif", ".tif", ".tiff"}
)

# =========
# Engine
# =========
# Pixels per vectorised block; bounds the [chunk, N, 3] int16 diff tensor.
CHUNK_PIXELS: int = 262_144
DEFAULT_WORKERS: int = 1

__all__ = [
    "OUTPUT_SUFFIX",
    "OUTPUT_EXT",
    "IMAGE_EXTS",
    "CHUNK_PIXELS",
    "DEFAULT_WORKERS",
]
