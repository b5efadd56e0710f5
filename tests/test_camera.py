"""
Tests for the centroid camera tracker and the perspective camera.
"""
import pytest

from orrery.camera import Camera3D, CentroidCameraTracker, choose_up, target_position
from orrery.data_models import Transform
from orrery.errors import AllTargetsUnavailable, EmptyTargetSet, ErrorReporter
from orrery.vector_utils import (
    IDENTITY,
    quat_angle_axis,
    quat_rotate,
    vec_add,
    vec_norm,
    vec_sub,
)


def _tracker(camera_pos, *target_positions):
    camera = Transform("Camera", position=camera_pos)
    targets = [Transform(f"T{i}", position=p) for i, p in enumerate(target_positions)]
    tracker = CentroidCameraTracker(camera, reporter=ErrorReporter())
    assert tracker.initialize(targets) is None
    return tracker, camera, targets


def _forward(camera):
    return quat_rotate(camera.orientation, (0.0, 0.0, 1.0))


class TestTwoTargetScenario:
    """Two targets; the second moves between ticks."""

    def test_capture_then_follow(self):
        tracker, camera, (a, b) = _tracker((5.0, 0.0, -20.0), (0.0, 0.0, 0.0), (10.0, 0.0, 0.0))

        assert tracker.tick() is None
        assert tracker.last_centroid == (5.0, 0.0, 0.0)
        assert tracker.initial_offset == (0.0, 0.0, -20.0)
        assert camera.position == (5.0, 0.0, -20.0)
        assert camera.orientation == IDENTITY

        b.position = (10.0, 0.0, 10.0)
        assert tracker.tick() is None
        assert tracker.last_centroid == (5.0, 0.0, 5.0)
        assert camera.position == pytest.approx((5.0, 0.0, -15.0))
        assert _forward(camera) == pytest.approx((0.0, 0.0, 1.0), abs=1e-9)


class TestOffsetInvariant:
    """The captured offset is kept for the tracker's lifetime."""

    def test_rigid_translation_moves_camera_by_same_vector(self):
        tracker, camera, targets = _tracker((3.0, 4.0, -9.0), (1.0, 0.0, 0.0), (-2.0, 1.0, 5.0), (0.0, 3.0, 1.0))
        tracker.tick()
        tracker.tick()
        before = camera.position
        v = (2.5, -1.0, 7.25)
        for t in targets:
            t.position = vec_add(t.position, v)
        tracker.tick()
        assert vec_sub(camera.position, before) == pytest.approx(v)

    def test_spread_change_does_not_adapt_offset(self):
        tracker, camera, (a, b) = _tracker((0.0, 5.0, -10.0), (-1.0, 0.0, 0.0), (1.0, 0.0, 0.0))
        tracker.tick()
        a.position = (-50.0, 0.0, 0.0)
        b.position = (50.0, 0.0, 0.0)
        tracker.tick()
        assert tracker.initial_offset == (0.0, 5.0, -10.0)
        assert camera.position == pytest.approx((0.0, 5.0, -10.0))

    def test_reinitialize_keeps_offset(self):
        tracker, camera, targets = _tracker((0.0, 0.0, -5.0), (0.0, 0.0, 0.0))
        tracker.tick()
        tracker.initialize([Transform("Other", position=(10.0, 0.0, 0.0))])
        tracker.tick()
        assert tracker.initial_offset == (0.0, 0.0, -5.0)
        assert camera.position == pytest.approx((10.0, 0.0, -5.0))

    def test_camera_faces_centroid(self):
        tracker, camera, (a,) = _tracker((4.0, 3.0, -6.0), (0.0, 0.0, 0.0))
        tracker.tick()
        a.position = (1.0, 2.0, 3.0)
        tracker.tick()
        expected = vec_norm(vec_sub(a.position, camera.position))
        assert _forward(camera) == pytest.approx(expected, abs=1e-9)
        # world up keeps the camera level
        assert quat_rotate(camera.orientation, (1.0, 0.0, 0.0))[1] == pytest.approx(0.0, abs=1e-9)


class TestUnavailableTargets:
    """Missing targets are skipped; losing all of them holds the camera."""

    def test_inactive_target_excluded(self):
        tracker, camera, (a, b, c) = _tracker((0.0, 0.0, -10.0), (0.0, 0.0, 0.0), (2.0, 0.0, 0.0), (100.0, 0.0, 0.0))
        c.active = False
        tracker.tick()
        assert tracker.last_centroid == (1.0, 0.0, 0.0)

    def test_callable_target_returning_none_excluded(self):
        camera = Transform("Camera", position=(0.0, 0.0, -1.0))
        tracker = CentroidCameraTracker(camera, reporter=ErrorReporter())
        tracker.initialize([lambda: (4.0, 0.0, 0.0), lambda: None])
        tracker.tick()
        assert tracker.last_centroid == (4.0, 0.0, 0.0)

    def test_all_unavailable_holds_pose(self, caplog):
        tracker, camera, (a, b) = _tracker((5.0, 0.0, -20.0), (0.0, 0.0, 0.0), (10.0, 0.0, 0.0))
        tracker.tick()
        b.position = (10.0, 0.0, 10.0)
        tracker.tick()
        pose = (camera.position, camera.orientation)
        a.active = False
        b.active = False
        error = tracker.tick()
        assert isinstance(error, AllTargetsUnavailable)
        assert (camera.position, camera.orientation) == pose
        assert tracker.initial_offset == (0.0, 0.0, -20.0)
        assert "unavailable" in caplog.text

    def test_first_tick_with_nothing_available_captures_nothing(self):
        tracker, camera, (a,) = _tracker((0.0, 0.0, -3.0), (0.0, 0.0, 0.0))
        a.active = False
        assert isinstance(tracker.tick(), AllTargetsUnavailable)
        assert not tracker.initialized

    def test_target_position_helper(self):
        assert target_position(None) is None
        assert target_position(Transform("X", position=(1.0, 2.0, 3.0))) == (1.0, 2.0, 3.0)


class TestEmptyTargetSet:
    """No targets: reported, camera left alone."""

    def test_initialize_empty(self):
        camera = Transform("Camera", position=(1.0, 1.0, 1.0))
        tracker = CentroidCameraTracker(camera, reporter=ErrorReporter())
        assert isinstance(tracker.initialize([]), EmptyTargetSet)
        assert isinstance(tracker.tick(), EmptyTargetSet)
        assert camera.position == (1.0, 1.0, 1.0)
        assert not tracker.initialized


class TestUpVectorFallback:
    """Looking straight along world up falls back to the camera's own up."""

    def test_prior_up_used_when_looking_straight_up(self):
        tracker, camera, (a,) = _tracker((0.0, 0.0, 0.0), (0.0, 10.0, 0.0))
        tracker.tick()
        camera.orientation = quat_angle_axis(90.0, (1.0, 0.0, 0.0))
        prior_up = quat_rotate(camera.orientation, (0.0, 1.0, 0.0))
        assert prior_up == pytest.approx((0.0, 0.0, -1.0), abs=1e-9)

        a.position = (1.0, 10.0, 0.0)
        tracker.tick()
        assert camera.position == pytest.approx((1.0, 0.0, 0.0))
        assert _forward(camera) == pytest.approx((0.0, 1.0, 0.0), abs=1e-9)
        assert quat_rotate(camera.orientation, (0.0, 1.0, 0.0)) == pytest.approx((0.0, 0.0, -1.0), abs=1e-9)

    def test_choose_up_last_resort(self):
        up = choose_up((0.0, 1.0, 0.0), IDENTITY)
        assert up == (0.0, 0.0, 1.0)


class TestCamera3D:
    """Perspective projection of the camera transform."""

    def test_point_ahead_projects_to_center(self):
        cam = Camera3D(Transform("Camera"))
        cam.set_viewport_size(800, 600)
        px, py, depth = cam.world_to_screen((0.0, 0.0, 10.0))
        assert (px, py) == (400, 300)
        assert depth == pytest.approx(10.0)

    def test_point_behind_is_culled(self):
        cam = Camera3D(Transform("Camera"))
        assert cam.world_to_screen((0.0, 0.0, -1.0)) is None

    def test_up_is_up_on_screen(self):
        cam = Camera3D(Transform("Camera"))
        cam.set_viewport_size(800, 600)
        _, py, _ = cam.world_to_screen((0.0, 1.0, 10.0))
        assert py < 300

    def test_zoom_narrows_field_of_view(self):
        cam = Camera3D(Transform("Camera"), fov_deg=60.0)
        cam.zoom(2.0)
        assert cam.fov_deg == pytest.approx(30.0)
        cam.zoom(0.05)
        assert cam.fov_deg == pytest.approx(120.0)
