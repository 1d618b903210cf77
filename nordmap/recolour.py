from __future__ import annotations

"""
Recolour engine.

Maps every pixel to the closest candidate colour by L1 (Manhattan) distance
in RGB, |dr| + |dg| + |db|, range 0..765. Ties go to the lowest candidate
index, so the candidate order given by the caller fully determines the output.

Two equivalent paths:
  nearest_colour   : reference scalar scan over Colour values.
  recolour_image   : vectorised NumPy mapping over a uint8 [H,W,3] grid,
                     optionally via unique colours and/or row bands on threads.
"""

from concurrent.futures import ThreadPoolExecutor
from typing import Iterable, List, Sequence, Tuple, Union

import numpy as np

from .constants import CHUNK_PIXELS, DEFAULT_WORKERS
from .core_types import (
    Colour,
    Palette,
    U8Colours,
    U8Image,
    assert_u8_colours,
    assert_u8_image_rgb,
)
from .errors import EmptyCandidateSet
from .palette_data import candidate_array
from .utils import split_rows_into_parts

CandidateLike = Union[Palette, U8Colours, Sequence[Colour]]


def colour_distance(a: Colour, b: Colour) -> int:
    """Sum of absolute per-channel differences."""
    return abs(a.r - b.r) + abs(a.g - b.g) + abs(a.b - b.b)


def nearest_colour(
    pixel: Colour, candidates: Union[Palette, Sequence[Colour]]
) -> Colour:
    """
    Closest candidate to `pixel`.

    Scans in order and only replaces the best on a strictly smaller distance,
    so the first of several equally close candidates wins.
    """
    if isinstance(candidates, Palette):
        candidates = candidates.colours
    candidates = tuple(candidates)
    if not candidates:
        raise EmptyCandidateSet()
    best = candidates[0]
    best_dist = colour_distance(best, pixel)
    for cand in candidates[1:]:
        if best_dist == 0:
            break
        d = colour_distance(cand, pixel)
        if d < best_dist:
            best, best_dist = cand, d
    return best


def nearest_indices(
    pixels: np.ndarray, candidates: U8Colours, *, chunk: int = CHUNK_PIXELS
) -> np.ndarray:
    """
    Index of the nearest candidate for each row of a uint8 [M,3] pixel block.

    Channels are widened to int16 before subtracting; np.argmin returns the
    first minimum, matching nearest_colour's tie-break.
    """
    pal = assert_u8_colours(candidates).astype(np.int16)
    pts_all = np.asarray(pixels).reshape(-1, 3)
    out = np.empty((pts_all.shape[0],), dtype=np.int32)
    chunk = max(1, int(chunk))

    for i in range(0, pts_all.shape[0], chunk):
        pts = pts_all[i : i + chunk].astype(np.int16)
        diff = np.abs(pts[:, None, :] - pal[None, :, :])
        dist = diff.sum(axis=2, dtype=np.int32)
        out[i : i + chunk] = np.argmin(dist, axis=1)

    return out


def _as_candidate_array(candidates: CandidateLike) -> U8Colours:
    if isinstance(candidates, Palette):
        return candidates.as_array()
    if isinstance(candidates, np.ndarray):
        return assert_u8_colours(candidates)
    colours = [Colour.coerce(c) for c in candidates]
    if not colours:
        raise EmptyCandidateSet()
    return np.array([c.as_tuple() for c in colours], dtype=np.uint8)


def _map_spans(
    pixels: np.ndarray,
    pal: U8Colours,
    spans: List[Tuple[int, int]],
    workers: int,
) -> np.ndarray:
    """Nearest indices for `pixels`, computed span by span (threaded when workers > 1)."""
    out = np.empty((pixels.shape[0],), dtype=np.int32)

    def _one(span: Tuple[int, int]) -> None:
        start, end = span
        out[start:end] = nearest_indices(pixels[start:end], pal)

    if workers <= 1 or len(spans) <= 1:
        for span in spans:
            _one(span)
        return out

    with ThreadPoolExecutor(max_workers=workers) as ex:
        futures = [ex.submit(_one, span) for span in spans]
        for f in futures:
            f.result()
    return out


def recolour_image(
    rgb: np.ndarray,
    candidates: CandidateLike,
    *,
    workers: int = DEFAULT_WORKERS,
    unique: bool = True,
) -> U8Image:
    """
    Replace every pixel of a uint8 [H,W,3(/4)] grid by its nearest candidate.

    Args:
      rgb        : input grid, left untouched. A 4th channel is ignored.
      candidates : Palette, uint8 [N,3] array, or sequence of Colour (N >= 1).
      workers    : threads used for the distance search.
      unique     : map each distinct colour once and scatter back.

    Returns:
      new uint8 [H,W,3] array with the same height and width.
    """
    src = assert_u8_image_rgb(rgb)
    pal = _as_candidate_array(candidates)
    height, width = src.shape[:2]
    workers = max(1, int(workers))
    if height == 0 or width == 0:
        return np.zeros((height, width, 3), dtype=np.uint8)

    flat = np.ascontiguousarray(src).reshape(-1, 3)

    if unique:
        uniq, inverse = np.unique(flat, axis=0, return_inverse=True)
        inverse = inverse.reshape(-1)
        spans = split_rows_into_parts(uniq.shape[0], workers)
        idx = _map_spans(uniq, pal, spans, workers)[inverse]
    else:
        spans = [
            (start * width, end * width)
            for start, end in split_rows_into_parts(height, workers)
        ]
        idx = _map_spans(flat, pal, spans, workers)

    return np.ascontiguousarray(pal[idx].reshape(height, width, 3))


def recolour_grid(
    rgb: np.ndarray,
    schemes: Iterable[str],
    *,
    workers: int = DEFAULT_WORKERS,
    unique: bool = True,
) -> U8Image:
    """Resolve `schemes` into one candidate set and recolour `rgb` with it."""
    return recolour_image(
        rgb, candidate_array(schemes), workers=workers, unique=unique
    )


__all__ = [
    "colour_distance",
    "nearest_colour",
    "nearest_indices",
    "recolour_image",
    "recolour_grid",
]
