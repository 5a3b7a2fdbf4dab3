"""Shared vocabulary for the Order builder and the comparator combinators."""

from __future__ import annotations

from typing import Any, Callable, Dict, Literal

from .config import settings
from .errors import UnknownDirectionError

__all__ = [
    "Direction",
    "DirectionSign",
    "Comparator",
    "KeyFunc",
    "Predicate",
    "direction_sign",
]

Direction = Literal["asc", "desc"]
DirectionSign = Literal[1, -1]

# (a, b) -> negative / zero / positive
Comparator = Callable[[Any, Any], int]
KeyFunc = Callable[[Any], Any]
Predicate = Callable[[Any], bool]

_SIGN_BY_DIRECTION: Dict[str, int] = {"asc": 1, "desc": -1}


def direction_sign(direction: str | None) -> int:
    """Resolve a direction flag to +1 (ascending) or -1 (descending).

    ``None`` falls back to the configured default direction.
    """
    if direction is None:
        direction = settings.DEFAULT_DIRECTION
    try:
        return _SIGN_BY_DIRECTION[direction]
    except (KeyError, TypeError):
        raise UnknownDirectionError(
            f"Unknown sort direction: {direction!r}",
            context={"direction": direction, "allowed": sorted(_SIGN_BY_DIRECTION)},
        ) from None
