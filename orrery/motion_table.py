#!/usr/bin/env python3
"""
Body motion table.

Maps a body identifier (exact, case-sensitive) to its MotionParameters. The
table is built once and never mutated; every simulator reads from it.
"""
from types import MappingProxyType
from typing import Dict, Iterator, Mapping, Optional

from .data_models import MotionParameters
from .errors import UnknownBodyId

UP = (0.0, 1.0, 0.0)


class MotionTable:
    """
    Immutable mapping from body id to MotionParameters.

    lookup() returns None on a miss; require() raises UnknownBodyId.
    """

    def __init__(self, entries: Mapping[str, MotionParameters]):
        self._entries = MappingProxyType(dict(entries))

    def lookup(self, body_id: str) -> Optional[MotionParameters]:
        return self._entries.get(body_id)

    def require(self, body_id: str) -> MotionParameters:
        params = self._entries.get(body_id)
        if params is None:
            raise UnknownBodyId(body_id)
        return params

    def extended(self, entries: Mapping[str, MotionParameters]) -> "MotionTable":
        """New table with entries added or replaced; this one is unchanged."""
        merged: Dict[str, MotionParameters] = dict(self._entries)
        merged.update(entries)
        return MotionTable(merged)

    def __contains__(self, body_id: object) -> bool:
        return body_id in self._entries

    def __iter__(self) -> Iterator[str]:
        return iter(self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    def items(self):
        return self._entries.items()


def _p(orbit_rate, orbit_axis, spin_rate, spin_axis, orbit_radius, display_scale):
    return MotionParameters(orbit_rate, orbit_axis, spin_rate, spin_axis, orbit_radius, display_scale)


# orbit deg/s, orbit axis, spin deg/s, spin axis, distance from Sun, scale
SOLAR_SYSTEM = MotionTable({
    "Sun":          _p(0.0,    UP, 14.5,  UP,              0.0,  2.0),
    "Mercury":      _p(4.74,   UP, 0.71,  UP,              1.5,  0.02),
    "Venus":        _p(1.85,   UP, -0.17, UP,              2.5,  0.04),
    "Earth":        _p(1.14,   UP, 4.17,  UP,              3.5,  0.045),
    "Mars":         _p(0.59,   UP, 4.06,  UP,              4.7,  0.025),
    "AsteroidBelt": _p(0.0,    UP, 4.5,   (0.0, 0.0, 1.0), 0.0,  0.38),
    "Jupiter":      _p(0.096,  UP, 10.1,  UP,              8.5,  0.1),
    "Saturn":       _p(0.039,  UP, 9.35,  UP,              11.5, 0.08),
    "Uranus":       _p(0.013,  UP, -5.8,  UP,              14.5, 0.04),
    "Neptune":      _p(0.0069, UP, 6.22,  UP,              17.5, 0.04),
})


def lookup(body_id: str) -> Optional[MotionParameters]:
    """Look a body up in the built-in solar system table."""
    return SOLAR_SYSTEM.lookup(body_id)
