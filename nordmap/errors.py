from __future__ import annotations

"""
Error types raised by the palette registry and the recolour engine.

Codec errors (missing files, unreadable formats) are not wrapped here; they
come straight from Pillow / the OS.
"""

from typing import Sequence, Tuple


class GlacierError(Exception):
    """Base class for nordmap errors."""


class UnknownScheme(GlacierError, ValueError):
    """Scheme identifier that is not one of the registered palettes."""

    def __init__(self, name: str, known: Sequence[str] = ()) -> None:
        self.name = name
        self.known: Tuple[str, ...] = tuple(known)
        msg = f"unknown scheme {name!r}"
        if self.known:
            msg += f" (expected one of: {', '.join(self.known)})"
        super().__init__(msg)


class EmptyCandidateSet(GlacierError, ValueError):
    """Nearest-colour search requested with zero candidate colours."""

    def __init__(self, message: str = "candidate colour set is empty") -> None:
        super().__init__(message)


__all__ = ["GlacierError", "UnknownScheme", "EmptyCandidateSet"]
