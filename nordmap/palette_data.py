from __future__ import annotations

"""
Palette definitions and the scheme registry.

Exports:
  SCHEMES: dict[str, list[tuple[str, str]]]  # scheme -> [(hex, name), ...]
  get_palette(name) -> Palette
  scheme_names() -> list[str]
  resolve_schemes(names) -> Palette            # concatenated, in given order
  candidate_array(names) -> uint8 [N,3]
  name_lookup(palette) -> dict["#rrggbb", name]
"""

from types import MappingProxyType
from typing import Dict, Iterable, List, Mapping, Tuple

from .core_types import Colour, NameOf, Palette, U8Colours
from .errors import EmptyCandidateSet, UnknownScheme


# Nord colour groups; declaration order is significant for tie-breaks.
SCHEMES: Dict[str, List[Tuple[str, str]]] = {
    "frost": [
        ("#8fbcbb", "nord7"),
        ("#88c0d0", "nord8"),
        ("#81a1c1", "nord9"),
        ("#5e81ac", "nord10"),
    ],
    "polar_night": [
        ("#2e3440", "nord0"),
        ("#3b4252", "nord1"),
        ("#434c5e", "nord2"),
        ("#4c566a", "nord3"),
    ],
    "snow_storm": [
        ("#d8dee9", "nord4"),
        ("#e5e9f0", "nord5"),
        ("#eceff4", "nord6"),
    ],
    "aurora": [
        ("#bf616a", "nord11"),
        ("#d08770", "nord12"),
        ("#ebcb8b", "nord13"),
        ("#a3be8c", "nord14"),
        ("#b48ead", "nord15"),
    ],
}


def build_palette(name: str, hex_name_pairs: Iterable[Tuple[str, str]]) -> Palette:
    """Convert a list of (hex, name) into a Palette."""
    pairs = list(hex_name_pairs)
    return Palette(
        name=name,
        colours=tuple(Colour.from_hex(hx) for hx, _ in pairs),
        labels=tuple(label for _, label in pairs),
    )


# Built once at import; Palette is frozen and the mapping is read-only.
_REGISTRY: Mapping[str, Palette] = MappingProxyType(
    {name: build_palette(name, pairs) for name, pairs in SCHEMES.items()}
)


def scheme_names() -> List[str]:
    """Recognised scheme identifiers in declaration order."""
    return list(_REGISTRY.keys())


def get_palette(name: str) -> Palette:
    """Exact, case-sensitive lookup. Raises UnknownScheme for anything else."""
    try:
        return _REGISTRY[name]
    except (KeyError, TypeError):
        raise UnknownScheme(name, scheme_names()) from None


def resolve_schemes(names: Iterable[str]) -> Palette:
    """
    Concatenate the palettes for `names` in the order given.

    Colours repeated across schemes are kept; nothing is sorted or deduplicated.
    Raises EmptyCandidateSet when `names` is empty and UnknownScheme on the
    first unrecognised identifier.
    """
    if isinstance(names, str):
        names = [names]
    palettes = [get_palette(n) for n in names]
    if not palettes:
        raise EmptyCandidateSet("at least one scheme is required")
    if len(palettes) == 1:
        return palettes[0]
    colours: List[Colour] = []
    labels: List[str] = []
    for pal in palettes:
        colours.extend(pal.colours)
        labels.extend(pal.label_of(i) for i in range(len(pal)))
    return Palette(
        name="+".join(p.name for p in palettes),
        colours=tuple(colours),
        labels=tuple(labels),
    )


def candidate_array(names: Iterable[str]) -> U8Colours:
    """Candidate colours for `names` as a uint8 [N,3] array."""
    return resolve_schemes(names).as_array()


def name_lookup(palette: Palette) -> NameOf:
    """Map '#rrggbb' -> label. First occurrence wins for repeated colours."""
    out: NameOf = {}
    for i, colour in enumerate(palette.colours):
        out.setdefault(colour.hex, palette.label_of(i))
    return out


__all__ = [
    "SCHEMES",
    "build_palette",
    "scheme_names",
    "get_palette",
    "resolve_schemes",
    "candidate_array",
    "name_lookup",
]
