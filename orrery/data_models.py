#!/usr/bin/env python3
"""
Data models for the orrery.

This module defines the value types shared between the motion components, the
scene scheduler and the viewer.

Units and usage
- positions are in scene units, angles in degrees, rates in degrees per second.
- MotionParameters are immutable and shared read-only by every simulator.
- Transform is owned by the host (the scene); motion components only write the
  values they compute into it.
- trail stores past positions to render orbit paths.
"""
from collections import deque
from dataclasses import dataclass, field
from typing import Deque, Optional, Tuple

from .constants import TRAIL_LENGTH
from .errors import ConfigurationError
from .vector_utils import IDENTITY, ZERO, Quat, Vec3, quat_mul, quat_normalize, vec_len


@dataclass(frozen=True)
class MotionParameters:
    """
    Kinematic description of one body.

    Fields:
    - orbit_rate: degrees per second around the anchor (0 for bodies that do not orbit)
    - orbit_axis: axis of the orbit plane; normalized before use
    - spin_rate: self-rotation in degrees per second (negative spins retrograde)
    - spin_axis: axis of self-rotation; normalized before use
    - orbit_radius: distance from the anchor (>= 0)
    - display_scale: uniform scale of the rendered body (> 0)
    """
    orbit_rate: float
    orbit_axis: Vec3
    spin_rate: float
    spin_axis: Vec3
    orbit_radius: float
    display_scale: float

    def __post_init__(self):
        if self.orbit_radius < 0:
            raise ValueError(f"orbit_radius must be >= 0, got {self.orbit_radius}")
        if self.display_scale <= 0:
            raise ValueError(f"display_scale must be > 0, got {self.display_scale}")
        if vec_len(self.orbit_axis) == 0 or vec_len(self.spin_axis) == 0:
            raise ValueError("orbit_axis and spin_axis must be non-zero vectors")


@dataclass
class OrbitState:
    """Accumulated orbit angle of one simulated body, kept in [0, 360)."""
    angle_deg: float = 0.0


@dataclass
class Transform:
    """
    Host-side pose of a scene object.

    Fields:
    - name: identifier used for display and table lookup
    - position: world position
    - orientation: unit quaternion (w, x, y, z)
    - scale: per-axis scale
    - active: False once the object is gone; trackers skip inactive targets
    - color: RGB tuple used for rendering
    - trail: deque of past positions for drawing orbit paths
    """
    name: str
    position: Vec3 = ZERO
    orientation: Quat = IDENTITY
    scale: Vec3 = (1.0, 1.0, 1.0)
    active: bool = True
    color: Tuple[int, int, int] = (200, 200, 255)
    trail: Deque[Vec3] = field(default_factory=lambda: deque(maxlen=TRAIL_LENGTH))

    def add_trail_point(self) -> None:
        """Append the current position to the trail."""
        self.trail.append(self.position)


@dataclass(frozen=True)
class MotionUpdate:
    """
    Values computed by one simulator tick.

    position is None when the component does not own the position (preview
    mode). When error is set, nothing else is filled in and the caller keeps
    its previous pose.
    """
    position: Optional[Vec3] = None
    orientation_delta: Quat = IDENTITY
    scale: Optional[Vec3] = None
    error: Optional[ConfigurationError] = None

    @property
    def ok(self) -> bool:
        return self.error is None

    def apply_to(self, transform: Transform) -> None:
        """Write this update into a host transform (no-op for a failed tick)."""
        if self.error is not None:
            return
        if self.position is not None:
            transform.position = self.position
        if self.scale is not None:
            transform.scale = self.scale
        if self.orientation_delta != IDENTITY:
            transform.orientation = quat_normalize(quat_mul(transform.orientation, self.orientation_delta))
