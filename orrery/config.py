#!/usr/bin/env python3
"""
Scene configuration for the orrery.

Settings supplied once when a scene is built; the time scale stays adjustable
while the scene runs.
"""
from dataclasses import dataclass, field
from typing import Dict, Tuple

from .constants import DEFAULT_TIME_SCALE, MOON_SPIN_RATE, PREVIEW_SCALE
from .vector_utils import Vec3


@dataclass
class SceneConfig:
    """Configuration of a solar system scene, supplied once at build time."""
    # motion:
    time_scale: float = DEFAULT_TIME_SCALE
    anchor_body: str = "Sun"
    bodies: Tuple[str, ...] = (
        "Sun", "Mercury", "Venus", "Earth", "Mars", "AsteroidBelt",
        "Jupiter", "Saturn", "Uranus", "Neptune",
    )
    preview_bodies: Tuple[str, ...] = ()
    preview_scale: float = PREVIEW_SCALE
    # spin-only moon riding along with its planet:
    moon_parent: str = "Earth"
    moon_offset: Vec3 = (0.25, 0.0, 0.0)
    moon_spin_rate: float = MOON_SPIN_RATE
    moon_scale: float = 0.012
    # camera:
    tracked_bodies: Tuple[str, ...] = ("Earth", "Mars")
    camera_position: Vec3 = (0.0, 6.0, -24.0)
    # display:
    body_colors: Dict[str, Tuple[int, int, int]] = field(default_factory=lambda: {
        "Sun": (255, 204, 0),
        "Mercury": (170, 160, 150),
        "Venus": (230, 200, 140),
        "Earth": (100, 149, 237),
        "Moon": (180, 180, 200),
        "Mars": (188, 39, 50),
        "AsteroidBelt": (120, 110, 100),
        "Jupiter": (210, 180, 140),
        "Saturn": (220, 200, 150),
        "Uranus": (160, 220, 230),
        "Neptune": (80, 110, 220),
    })
