#!/usr/bin/env python3
"""
Solar system scene: the host side of the motion components.

What this module does
- Owns every Transform (bodies, moon, camera) and the components that move them.
- Runs each frame as a two-phase update: all bodies first (orbiting bodies,
  then spin-only bodies), the camera tracker last, so the camera always frames
  the centroid of the current frame rather than the previous one.

Threading
- The viewer renders from a background thread while the UI changes settings on
  the main thread; all access goes through a re-entrant lock.
"""
import logging
import threading
from collections import deque
from dataclasses import dataclass, field, replace
from typing import Dict, List, Optional

from .camera import CentroidCameraTracker
from .config import SceneConfig
from .data_models import Transform
from .errors import ConfigurationError, ErrorReporter
from .motion_table import SOLAR_SYSTEM, MotionTable
from .simulator import OrbitSimulator, Preview
from .spin import AxialRotation
from .vector_utils import Vec3, vec_add

logger = logging.getLogger(__name__)

STEP_ONCE_DT = 1 / 60.0


@dataclass
class SpinOnlyBody:
    """A body that only spins; optionally carried along at an offset from a parent."""
    transform: Transform
    rotation: AxialRotation
    parent: Optional[Transform] = None
    offset: Vec3 = (0.0, 0.0, 0.0)


@dataclass
class SceneSnapshot:
    """Copies of everything the viewer and UI draw, taken under the scene lock."""
    camera: Transform
    bodies: List[Transform]
    selected: Optional[str]
    selected_angle: Optional[float]
    selected_preview: Optional[bool]
    time_scale: float
    playing: bool
    show_trails: bool
    errors: List[ConfigurationError] = field(default_factory=list)


class SolarSystemScene:
    """
    Shared state between the viewer thread and the UI.

    step(dt) is the per-frame entry point; dt is supplied by the caller and
    never measured here.
    """

    def __init__(self, config: Optional[SceneConfig] = None, table: MotionTable = SOLAR_SYSTEM,
                 reporter: Optional[ErrorReporter] = None):
        self.lock = threading.RLock()
        self.config = config or SceneConfig()
        self.table = table
        self.reporter = reporter or ErrorReporter(logger)
        self.running = True  # app running
        self.playing = True  # simulation running
        self.show_trails = True
        self.time_scale = self.config.time_scale
        self.frame_count = 0
        self.last_errors: List[ConfigurationError] = []

        self.bodies: Dict[str, Transform] = {}
        self.simulators: Dict[str, OrbitSimulator] = {}
        self.spin_only: Dict[str, SpinOnlyBody] = {}
        self.camera = Transform(name="Camera", position=self.config.camera_position)
        self.tracker = CentroidCameraTracker(self.camera, reporter=self.reporter)
        self.selected: Optional[str] = None

        self._trail_step_counter = 0
        self.build()

    @property
    def anchor(self) -> Optional[Transform]:
        return self.bodies.get(self.config.anchor_body)

    def build(self) -> None:
        """Create transforms and components from the config and place everything at t = 0."""
        cfg = self.config
        with self.lock:
            self.bodies.clear()
            self.simulators.clear()
            self.spin_only.clear()

            for name in cfg.bodies:
                self.bodies[name] = Transform(name=name, color=cfg.body_colors.get(name, (200, 200, 255)))
                mode = Preview(cfg.preview_scale) if name in cfg.preview_bodies else None
                self.simulators[name] = OrbitSimulator(
                    name, self.table, mode=mode, time_scale=self.time_scale, reporter=self.reporter,
                )

            parent = self.bodies.get(cfg.moon_parent)
            if parent is not None:
                moon = Transform(name="Moon", scale=(cfg.moon_scale,) * 3,
                                 color=cfg.body_colors.get("Moon", (180, 180, 200)))
                self.bodies["Moon"] = moon
                self.spin_only["Moon"] = SpinOnlyBody(
                    transform=moon,
                    rotation=AxialRotation(cfg.moon_spin_rate, time_scale=self.time_scale, use_shadow=True),
                    parent=parent,
                    offset=cfg.moon_offset,
                )

            anchor_pos = self._anchor_position()
            for name, sim in self.simulators.items():
                sim.apply_current(self.bodies[name], anchor_pos)
            self._follow_parents()

            self.tracker.initialize([self.bodies[n] for n in cfg.tracked_bodies if n in self.bodies])
            center = self.tracker.centroid()
            if center is not None:
                self.tracker.look_at(center)
            self.selected = next(iter(self.bodies), None)
        logger.info("Scene built: %d bodies, tracking %s", len(self.bodies), ", ".join(cfg.tracked_bodies))

    def _anchor_position(self) -> Optional[Vec3]:
        anchor = self.anchor
        if anchor is None or not anchor.active:
            return None
        return anchor.position

    def _follow_parents(self) -> None:
        for body in self.spin_only.values():
            if body.parent is not None and body.parent.active:
                body.transform.position = vec_add(body.parent.position, body.offset)

    def step(self, dt_seconds: float) -> List[ConfigurationError]:
        """
        Advance one frame.

        Phase 1 moves every body, phase 2 reframes the camera. Returns the
        configuration errors hit during the frame; none of them stops the frame.
        """
        if dt_seconds < 0:
            logger.warning("Negative frame time %.6f s clamped to 0", dt_seconds)
            dt_seconds = 0.0

        with self.lock:
            errors: List[ConfigurationError] = []

            anchor_pos = self._anchor_position()
            for name, sim in self.simulators.items():
                transform = self.bodies[name]
                if not transform.active:
                    continue
                result = sim.update(dt_seconds, transform, anchor_pos)
                if result.error is not None:
                    errors.append(result.error)

            self._follow_parents()
            for body in self.spin_only.values():
                if body.transform.active:
                    body.rotation.tick(dt_seconds, body.transform)

            camera_error = self.tracker.tick()
            if camera_error is not None:
                errors.append(camera_error)

            # Throttle trail sampling to reduce draw cost
            self._trail_step_counter = (self._trail_step_counter + 1) % 3
            if self.show_trails and self._trail_step_counter == 0:
                for b in self.bodies.values():
                    b.add_trail_point()

            self.frame_count += 1
            self.last_errors = errors
            return errors

    def step_once(self) -> List[ConfigurationError]:
        return self.step(STEP_ONCE_DT)

    def set_time_scale(self, s: float) -> None:
        with self.lock:
            self.time_scale = float(s)
            for sim in self.simulators.values():
                sim.set_time_scale(self.time_scale)
            for body in self.spin_only.values():
                body.rotation.set_time_scale(self.time_scale)

    def set_preview(self, name: str, preview: bool) -> None:
        """Toggle preview mode for one body. Leaving preview restarts its orbit at angle 0."""
        with self.lock:
            sim = self.simulators.get(name)
            if sim is None:
                return
            sim.set_preview(preview, self.config.preview_scale)
            sim.apply_current(self.bodies[name], self._anchor_position())
            self.bodies[name].trail.clear()

    def replace_table(self, table: MotionTable) -> None:
        """Swap the motion table and rebuild every body from t = 0."""
        with self.lock:
            self.table = table
            self.build()

    def remove_body(self, name: str) -> None:
        """Mark a body as gone; trackers and simulators skip it from now on."""
        with self.lock:
            body = self.bodies.get(name)
            if body is not None:
                body.active = False
                body.trail.clear()

    def clear_trails(self) -> None:
        with self.lock:
            for b in self.bodies.values():
                b.trail.clear()

    def active_bodies(self) -> List[Transform]:
        with self.lock:
            return [b for b in self.bodies.values() if b.active]

    def select(self, name: Optional[str]) -> None:
        with self.lock:
            self.selected = name if name in self.bodies else None

    def get_selected_body(self) -> Optional[Transform]:
        with self.lock:
            if self.selected is None:
                return None
            return self.bodies.get(self.selected)

    def snapshot(self) -> SceneSnapshot:
        """Copy the drawable state so readers never see a half-stepped frame."""
        with self.lock:
            sim = self.simulators.get(self.selected) if self.selected else None
            return SceneSnapshot(
                camera=replace(self.camera, trail=deque()),
                bodies=[replace(b, trail=deque(b.trail, maxlen=b.trail.maxlen))
                        for b in self.bodies.values() if b.active],
                selected=self.selected,
                selected_angle=sim.orbit_angle if sim is not None else None,
                selected_preview=sim.is_preview if sim is not None else None,
                time_scale=self.time_scale,
                playing=self.playing,
                show_trails=self.show_trails,
                errors=list(self.last_errors),
            )
