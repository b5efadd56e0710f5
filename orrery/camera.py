#!/usr/bin/env python3
"""
Camera utilities: centroid tracking and 3D world-to-screen projection.
"""
import logging
import math
from typing import Callable, List, Optional, Sequence, Tuple, Union

from .constants import (
    DEFAULT_FOV_DEG,
    FALLBACK_UP,
    MAX_FOV_DEG,
    MIN_FOV_DEG,
    NEAR_PLANE,
    PARALLEL_EPSILON,
    VIEW_HEIGHT,
    VIEW_WIDTH,
    WORLD_UP,
)
from .data_models import Transform
from .errors import (
    AllTargetsUnavailable,
    ConfigurationError,
    EmptyTargetSet,
    ErrorReporter,
    default_reporter,
)
from .vector_utils import (
    Quat,
    Vec3,
    clamp,
    quat_conjugate,
    quat_look_rotation,
    quat_rotate,
    vec_add,
    vec_cross,
    vec_len,
    vec_mean,
    vec_norm,
    vec_sub,
)

logger = logging.getLogger(__name__)

# A target is a scene transform or a callable returning a position (None once gone)
Target = Union[Transform, Callable[[], Optional[Vec3]]]


def target_position(target: Optional[Target]) -> Optional[Vec3]:
    """Current position of a target, or None when it is unavailable."""
    if target is None:
        return None
    if isinstance(target, Transform):
        return target.position if target.active else None
    return target()


def choose_up(forward: Vec3, prior_orientation: Quat, world_up: Vec3 = WORLD_UP) -> Vec3:
    """
    World up unless it is parallel to forward; then the camera's current up;
    then a fixed horizontal axis.
    """
    f = vec_norm(forward)
    for up in (world_up, quat_rotate(prior_orientation, (0.0, 1.0, 0.0)), FALLBACK_UP):
        if vec_len(vec_cross(f, vec_norm(up))) > PARALLEL_EPSILON:
            return up
    return (1.0, 0.0, 0.0)


class CentroidCameraTracker:
    """
    Keeps a camera framed on the centroid of a group of targets.

    The first successful tick records the camera's offset from the centroid
    and leaves the camera where it is. Every later tick moves the camera to
    centroid + offset and turns it to face the centroid. The offset is never
    re-derived: if the group spreads out or contracts the camera follows the
    centroid at the same offset.

    Unavailable targets are left out of the mean for that tick. When none is
    available the camera holds its last pose and the condition is reported.
    """

    source = "CentroidCameraTracker"

    def __init__(self, camera: Transform, reporter: Optional[ErrorReporter] = None,
                 world_up: Vec3 = WORLD_UP):
        self.camera = camera
        self.reporter = reporter or default_reporter
        self.world_up = world_up
        self.targets: List[Target] = []
        self._offset: Optional[Vec3] = None
        self.last_centroid: Optional[Vec3] = None

    @property
    def initialized(self) -> bool:
        return self._offset is not None

    @property
    def initial_offset(self) -> Optional[Vec3]:
        return self._offset

    def initialize(self, targets: Sequence[Target]) -> Optional[ConfigurationError]:
        """
        Set the targets to track. An empty sequence is reported and leaves
        the tracker un-positioned. A captured offset is kept.
        """
        targets = list(targets)
        if not targets:
            self.targets = []
            return self.reporter.report(self.source, EmptyTargetSet())
        self.targets = targets
        self.reporter.clear(self.source)
        return None

    def centroid(self) -> Optional[Vec3]:
        """Mean position of the available targets, or None if none is available."""
        points = [p for p in (target_position(t) for t in self.targets) if p is not None]
        if not points:
            return None
        return vec_mean(points)

    def tick(self) -> Optional[ConfigurationError]:
        """Recompute the centroid and reframe the camera; returns the error, if any."""
        if not self.targets:
            return self.reporter.report(self.source, EmptyTargetSet())

        center = self.centroid()
        if center is None:
            return self.reporter.report(self.source, AllTargetsUnavailable(len(self.targets)))
        self.reporter.clear(self.source)
        self.last_centroid = center

        if self._offset is None:
            self._offset = vec_sub(self.camera.position, center)
            logger.debug("%s: captured offset %s", self.source, self._offset)
            return None

        self.camera.position = vec_add(center, self._offset)
        self.look_at(center)
        return None

    def look_at(self, point: Vec3) -> None:
        forward = vec_sub(point, self.camera.position)
        if vec_len(forward) == 0:
            return
        up = choose_up(forward, self.camera.orientation, self.world_up)
        rotation = quat_look_rotation(forward, up)
        if rotation is not None:
            self.camera.orientation = rotation


class Camera3D:
    """
    Perspective projection of a camera transform onto the viewport.

    The camera looks along its local +Z with local +Y up.
    """

    def __init__(self, transform: Transform, fov_deg: float = DEFAULT_FOV_DEG):
        self.transform = transform
        self.fov_deg = clamp(fov_deg, MIN_FOV_DEG, MAX_FOV_DEG)
        self.viewport_size = (VIEW_WIDTH, VIEW_HEIGHT)

    def set_viewport_size(self, w: int, h: int) -> None:
        self.viewport_size = (w, h)

    @property
    def focal_px(self) -> float:
        return (self.viewport_size[1] / 2) / math.tan(math.radians(self.fov_deg) / 2)

    def to_camera_space(self, pos: Vec3) -> Vec3:
        rel = vec_sub(pos, self.transform.position)
        return quat_rotate(quat_conjugate(self.transform.orientation), rel)

    def world_to_screen(self, pos: Vec3) -> Optional[Tuple[int, int, float]]:
        """(px, py, depth) for a point in front of the camera, else None."""
        x, y, z = self.to_camera_space(pos)
        if z <= NEAR_PLANE:
            return None
        f = self.focal_px
        px = x / z * f + self.viewport_size[0] / 2
        py = -y / z * f + self.viewport_size[1] / 2
        return (int(px), int(py), z)

    def zoom(self, factor: float) -> None:
        factor = clamp(factor, 0.05, 20.0)
        self.fov_deg = clamp(self.fov_deg / factor, MIN_FOV_DEG, MAX_FOV_DEG)
