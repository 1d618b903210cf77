"""
nordmap package.

Purpose:
  Recolour images to the Nord colour scheme groups. See glacier.py for CLI.

Public API:
  recolour_image : map a uint8 [H,W,3] grid to its nearest candidate colours.
  recolour_grid  : same, taking scheme names instead of a candidate set.
  nearest_colour : reference single-pixel lookup.
  get_palette    : scheme name -> Palette.
  resolve_schemes: scheme names -> concatenated Palette.
  core_types     : Colour, Palette and shared aliases.
  palette_data   : the scheme registry.
  image_io       : Pillow load / save helpers.
  utils          : shared helpers (formatting, logging).

Quick start:
  from nordmap import recolour_grid
  from nordmap.image_io import load_image_rgb, save_image_rgb
  save_image_rgb("out.png", recolour_grid(load_image_rgb("in.jpg"), ["frost"]))
"""

__version__ = "0.1.0"

# Re-export namespaces for convenience.
from . import core_types
from . import palette_data
from . import image_io
from . import utils

from .core_types import Colour, Palette  # noqa: E402,F401
from .errors import EmptyCandidateSet, GlacierError, UnknownScheme  # noqa: E402,F401
from .palette_data import get_palette, resolve_schemes, scheme_names  # noqa: E402,F401
from .recolour import nearest_colour, recolour_grid, recolour_image  # noqa: E402,F401

__all__ = [
    "__version__",
    "core_types",
    "palette_data",
    "image_io",
    "utils",
    "Colour",
    "Palette",
    "GlacierError",
    "UnknownScheme",
    "EmptyCandidateSet",
    "get_palette",
    "resolve_schemes",
    "scheme_names",
    "nearest_colour",
    "recolour_image",
    "recolour_grid",
]
