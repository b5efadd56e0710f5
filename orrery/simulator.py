#!/usr/bin/env python3
"""
Orbit and spin simulator.

Responsibilities
- Advance one body's orbit angle from elapsed time and its MotionParameters.
- Derive the body's position from the anchor (the star) and the orbit angle.
- Apply the shared spin step on top of the orbital placement.

Modes
- Orbiting: owns an OrbitState; position, scale and spin are produced every tick.
- Preview: no orbit state at all; the body keeps whatever position the host
  gives it, its scale is pinned to a constant and only spin applies.

The mode is a tagged variant (Orbiting | Preview) rather than a flag, so the
orbit angle simply does not exist while previewing. Switching modes starts
from a fresh state.

Units and conventions
- Angles in degrees, rates in degrees per second, time in seconds.
- Orbit angle 0 places the body along REFERENCE_RADIAL from the anchor.
- No forces are integrated; motion is purely kinematic.
"""
import logging
from dataclasses import dataclass, field
from typing import Optional, Union

from .constants import DEFAULT_TIME_SCALE, PREVIEW_SCALE, REFERENCE_RADIAL
from .data_models import MotionParameters, MotionUpdate, OrbitState, Transform
from .errors import ErrorReporter, MissingAnchor, UnknownBodyId, default_reporter
from .motion_table import SOLAR_SYSTEM, MotionTable
from .spin import spin_delta
from .vector_utils import Vec3, quat_angle_axis, quat_rotate, vec_add, vec_scale, wrap_degrees

logger = logging.getLogger(__name__)


@dataclass
class Orbiting:
    """Orbit around the anchor; carries the accumulated orbit angle."""
    state: OrbitState = field(default_factory=OrbitState)


@dataclass(frozen=True)
class Preview:
    """Spin in place at a fixed scale."""
    scale: float = PREVIEW_SCALE


Mode = Union[Orbiting, Preview]


def orbital_offset(angle_deg: float, params: MotionParameters) -> Vec3:
    """Offset from the anchor for a body at angle_deg along its orbit."""
    rotation = quat_angle_axis(angle_deg, params.orbit_axis)
    return vec_scale(quat_rotate(rotation, REFERENCE_RADIAL), params.orbit_radius)


def advance_angle(angle_deg: float, orbit_rate: float, dt_seconds: float,
                  time_scale: float = DEFAULT_TIME_SCALE) -> float:
    """Accumulate orbit_rate * time_scale * dt onto angle_deg, wrapped into [0, 360)."""
    return wrap_degrees(angle_deg + orbit_rate * time_scale * dt_seconds)


class OrbitSimulator:
    """
    Table-driven orbit and spin for a single body.

    The anchor position is passed into every call rather than held, so the
    simulator never depends on a particular scene. Configuration errors
    (unknown body id, missing anchor while orbiting) are reported and returned
    in the MotionUpdate; the previous pose is left untouched and the orbit
    angle is not advanced.
    """

    def __init__(self, body_id: str, table: MotionTable = SOLAR_SYSTEM,
                 mode: Optional[Mode] = None, time_scale: float = DEFAULT_TIME_SCALE,
                 reporter: Optional[ErrorReporter] = None):
        self.body_id = body_id
        self.table = table
        self.mode: Mode = mode if mode is not None else Orbiting()
        self.time_scale = float(time_scale)
        self.reporter = reporter or default_reporter

    @property
    def source(self) -> str:
        return f"OrbitSimulator[{self.body_id}]"

    @property
    def is_preview(self) -> bool:
        return isinstance(self.mode, Preview)

    @property
    def orbit_angle(self) -> Optional[float]:
        """Current orbit angle in degrees, or None while previewing."""
        if isinstance(self.mode, Orbiting):
            return self.mode.state.angle_deg
        return None

    def set_time_scale(self, s: float) -> None:
        self.time_scale = float(s)

    def set_mode(self, mode: Mode) -> None:
        """Switch modes. Entering Orbiting always starts from angle 0."""
        if isinstance(mode, Orbiting):
            mode = Orbiting()
        self.mode = mode
        logger.debug("%s: mode set to %s", self.source, type(mode).__name__)

    def set_preview(self, preview: bool, scale: float = PREVIEW_SCALE) -> None:
        if preview and not self.is_preview:
            self.set_mode(Preview(scale))
        elif not preview and self.is_preview:
            self.set_mode(Orbiting())

    def _resolve(self, anchor: Optional[Vec3]):
        """Check the configuration for this tick; return params or an error."""
        if isinstance(self.mode, Orbiting) and anchor is None:
            return None, self.reporter.report(self.source, MissingAnchor(self.body_id))
        params = self.table.lookup(self.body_id)
        if params is None:
            return None, self.reporter.report(self.source, UnknownBodyId(self.body_id))
        self.reporter.clear(self.source)
        return params, None

    def tick(self, dt_seconds: float, anchor: Optional[Vec3] = None) -> MotionUpdate:
        """
        Advance the body by dt_seconds.

        Args:
            dt_seconds: Elapsed time (>= 0; the scheduler clamps negatives).
            anchor: Anchor position; required while orbiting, ignored in preview.

        Returns:
            MotionUpdate with position (orbiting only), spin delta and scale,
            or with error set and nothing else.
        """
        params, error = self._resolve(anchor)
        if error is not None:
            return MotionUpdate(error=error)

        delta = spin_delta(dt_seconds, params.spin_rate, params.spin_axis, self.time_scale)

        if isinstance(self.mode, Preview):
            s = self.mode.scale
            return MotionUpdate(orientation_delta=delta, scale=(s, s, s))

        state = self.mode.state
        state.angle_deg = advance_angle(state.angle_deg, params.orbit_rate, dt_seconds, self.time_scale)
        s = params.display_scale
        return MotionUpdate(
            position=vec_add(anchor, orbital_offset(state.angle_deg, params)),
            orientation_delta=delta,
            scale=(s, s, s),
        )

    def update(self, dt_seconds: float, transform: Transform,
               anchor: Optional[Vec3] = None) -> MotionUpdate:
        """tick() and write the result into transform."""
        result = self.tick(dt_seconds, anchor)
        result.apply_to(transform)
        return result

    def apply_current(self, transform: Transform, anchor: Optional[Vec3] = None) -> MotionUpdate:
        """
        Re-derive the pose from the current orbit angle without advancing time.

        In preview mode only the preview scale is written.
        """
        params, error = self._resolve(anchor)
        if error is not None:
            return MotionUpdate(error=error)
        if isinstance(self.mode, Preview):
            s = self.mode.scale
            result = MotionUpdate(scale=(s, s, s))
        else:
            s = params.display_scale
            result = MotionUpdate(
                position=vec_add(anchor, orbital_offset(self.mode.state.angle_deg, params)),
                scale=(s, s, s),
            )
        result.apply_to(transform)
        return result
