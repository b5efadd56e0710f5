#!/usr/bin/env python3
"""
Axial rotation (spin) about a body's own axis.

The spin step is incremental: each tick composes a small rotation onto the
current orientation in the body's local frame, so it composes correctly with
whatever repositioning happened before it in the same tick.
"""
from typing import Optional

from .constants import DEFAULT_TIME_SCALE, SPIN_RATE_MULTIPLIER, WORLD_UP
from .data_models import Transform
from .vector_utils import Quat, Vec3, quat_angle_axis, quat_mul, quat_normalize


def spin_delta(dt_seconds: float, spin_rate: float, spin_axis: Vec3,
               time_scale: float = DEFAULT_TIME_SCALE) -> Quat:
    """Rotation of spin_rate * time_scale * dt degrees about normalize(spin_axis)."""
    return quat_angle_axis(spin_rate * time_scale * dt_seconds, spin_axis)


def compose_spin(orientation: Quat, delta: Quat) -> Quat:
    """Apply delta in the local frame of orientation."""
    return quat_normalize(quat_mul(orientation, delta))


def apply_spin(orientation: Quat, dt_seconds: float, spin_rate: float, spin_axis: Vec3,
               time_scale: float = DEFAULT_TIME_SCALE) -> Quat:
    return compose_spin(orientation, spin_delta(dt_seconds, spin_rate, spin_axis, time_scale))


class AxialRotation:
    """
    Spin-only motion for bodies with no orbit and no table entry.

    With use_shadow the component keeps its own orientation, composes every
    delta onto it and writes it out, so anything else that touches the
    transform's orientation between ticks is overwritten rather than
    accumulated. The shadow is captured from the transform on the first tick.
    """

    def __init__(self, spin_rate: float, spin_axis: Vec3 = WORLD_UP,
                 time_scale: float = DEFAULT_TIME_SCALE, rate_multiplier: float = SPIN_RATE_MULTIPLIER,
                 use_shadow: bool = False):
        self.spin_rate = float(spin_rate)
        self.spin_axis = spin_axis
        self.time_scale = float(time_scale)
        self.rate_multiplier = float(rate_multiplier)
        self.use_shadow = use_shadow
        self.shadow: Optional[Quat] = None

    def set_time_scale(self, s: float) -> None:
        self.time_scale = float(s)

    def reset(self) -> None:
        self.shadow = None

    def tick(self, dt_seconds: float, transform: Transform) -> Quat:
        """Advance the spin by dt and write the new orientation into transform."""
        delta = spin_delta(dt_seconds, self.spin_rate * self.rate_multiplier,
                           self.spin_axis, self.time_scale)
        if self.use_shadow:
            if self.shadow is None:
                self.shadow = transform.orientation
            self.shadow = compose_spin(self.shadow, delta)
            transform.orientation = self.shadow
        else:
            transform.orientation = compose_spin(transform.orientation, delta)
        return transform.orientation
