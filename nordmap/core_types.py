from __future__ import annotations

"""
Core type aliases, small value objects, and lightweight helpers.
"""

from dataclasses import dataclass, field
from typing import Dict, Sequence, Tuple, Union

import numpy as np
from numpy.typing import NDArray

from .errors import EmptyCandidateSet

# Basic aliases

RGBTuple = Tuple[int, int, int]
HexStr = str

U8Image = NDArray[np.uint8]  # (H, W, 3)
U8Colours = NDArray[np.uint8]  # (N, 3)
NameOf = Dict[HexStr, str]  # "#rrggbb" -> human-readable name

# Value objects


@dataclass(frozen=True)
class Colour:
    """Opaque 8-bit sRGB colour."""

    r: int
    g: int
    b: int

    def __post_init__(self) -> None:
        for channel in (self.r, self.g, self.b):
            if isinstance(channel, bool) or not 0 <= int(channel) <= 255:
                raise ValueError(f"channel out of range 0..255: {channel!r}")
            if int(channel) != channel:
                raise ValueError(f"channel must be an integer: {channel!r}")
        # normalise numpy scalars to plain ints
        object.__setattr__(self, "r", int(self.r))
        object.__setattr__(self, "g", int(self.g))
        object.__setattr__(self, "b", int(self.b))

    @classmethod
    def from_hex(cls, hex_str: str) -> "Colour":
        return cls(*hex_to_rgb(hex_str))

    @classmethod
    def coerce(cls, value: Union["Colour", Sequence[int], NDArray[np.generic]]) -> "Colour":
        if isinstance(value, Colour):
            return value
        return cls(*coerce_to_rgb_tuple(value))

    def as_tuple(self) -> RGBTuple:
        return (self.r, self.g, self.b)

    @property
    def hex(self) -> HexStr:
        return rgb_to_hex(self.as_tuple())


@dataclass(frozen=True)
class Palette:
    """
    Named, ordered, non-empty colour sequence.

    Order is kept as declared; the engine breaks distance ties by it.
    `labels` optionally carries one human-readable name per colour.
    """

    name: str
    colours: Tuple[Colour, ...]
    labels: Tuple[str, ...] = field(default=())

    def __post_init__(self) -> None:
        object.__setattr__(self, "colours", tuple(self.colours))
        object.__setattr__(self, "labels", tuple(self.labels))
        if not self.colours:
            raise EmptyCandidateSet(f"palette {self.name!r} has no colours")
        if self.labels and len(self.labels) != len(self.colours):
            raise ValueError("labels must match colours one to one")

    def __len__(self) -> int:
        return len(self.colours)

    def __iter__(self):
        return iter(self.colours)

    def as_array(self) -> U8Colours:
        """Colours as a uint8 [P,3] array in declaration order."""
        return np.array([c.as_tuple() for c in self.colours], dtype=np.uint8)

    def label_of(self, index: int) -> str:
        return self.labels[index] if self.labels else self.colours[index].hex


# Small helpers


def rgb_to_hex(rgb: RGBTuple) -> HexStr:
    """RGB tuple to lowercase hex string '#rrggbb'."""
    return f"#{rgb[0]:02x}{rgb[1]:02x}{rgb[2]:02x}"


def hex_to_rgb(hex_str: str) -> RGBTuple:
    """Parse '#rgb' or '#rrggbb' (case-insensitive) into an RGB tuple."""
    s = hex_str.strip().lower()
    if not s.startswith("#"):
        raise ValueError("hex must start with '#'")
    if len(s) == 4:
        r, g, b = s[1], s[2], s[3]
        s = f"#{r}{r}{g}{g}{b}{b}"
    if len(s) != 7:
        raise ValueError("hex must be '#rrggbb' or '#rgb'")
    return (int(s[1:3], 16), int(s[3:5], 16), int(s[5:7], 16))


def coerce_to_rgb_tuple(value: Union[Sequence[int], NDArray[np.generic]]) -> RGBTuple:
    """
    Coerce a 3-length sequence or array to an (int, int, int) RGB tuple.
    Helpful when extracting values from NumPy rows.
    """
    if isinstance(value, np.ndarray):
        if value.size < 3:
            raise ValueError("array too small for RGB")
        flat = value.reshape(-1)
        return (int(flat[0]), int(flat[1]), int(flat[2]))
    if len(value) < 3:
        raise ValueError("sequence too small for RGB")
    return (int(value[0]), int(value[1]), int(value[2]))


def assert_u8_image_rgb(image: np.ndarray) -> U8Image:
    """Validate a uint8 (H,W,3 or 4) image and return its RGB view."""
    if not isinstance(image, np.ndarray):
        raise TypeError("expected a numpy array")
    if image.dtype != np.uint8 or image.ndim != 3 or image.shape[-1] < 3:
        raise TypeError("expected uint8 (H,W,3/4) image")
    return image[..., :3]


def assert_u8_colours(colours: np.ndarray) -> U8Colours:
    """Validate a uint8 (N,3) colour table with N >= 1."""
    arr = np.asarray(colours)
    if arr.ndim != 2 or arr.shape[-1] != 3:
        raise TypeError(f"expected (N,3) colour table, got shape {arr.shape}")
    if arr.shape[0] == 0:
        raise EmptyCandidateSet()
    if not np.issubdtype(arr.dtype, np.integer):
        raise TypeError(f"expected integer colour table, got {arr.dtype}")
    if arr.dtype != np.uint8:
        if np.any(arr < 0) or np.any(arr > 255):
            raise ValueError("colour table values must lie in 0..255")
        arr = arr.astype(np.uint8)
    return arr


__all__ = [
    # aliases / types
    "RGBTuple",
    "HexStr",
    "U8Image",
    "U8Colours",
    "NameOf",
    # value objects
    "Colour",
    "Palette",
    # helpers
    "rgb_to_hex",
    "hex_to_rgb",
    "coerce_to_rgb_tuple",
    "assert_u8_image_rgb",
    "assert_u8_colours",
]
