#!/usr/bin/env python3
"""
Vector and quaternion helper functions for 3D operations.

These are small, fast functions for the math used throughout the app.
Vectors are (x, y, z) tuples; quaternions are (w, x, y, z) tuples.

Angle convention: positive angles turn +X toward +Z about +Y. All orbit and
spin rates are expressed in this sense, so a positive orbit rate about +Y
moves a body from +X toward +Z.
"""
import math
from typing import Optional, Tuple

Vec3 = Tuple[float, float, float]
Quat = Tuple[float, float, float, float]

ZERO: Vec3 = (0.0, 0.0, 0.0)
IDENTITY: Quat = (1.0, 0.0, 0.0, 0.0)


def clamp(x: float, a: float, b: float) -> float:
    """Clamp x to the inclusive range [a, b]."""
    return max(a, min(b, x))


def wrap_degrees(angle: float) -> float:
    """Wrap an angle into [0, 360), including negative inputs."""
    wrapped = math.fmod(angle, 360.0)
    if wrapped < 0.0:
        wrapped += 360.0
    # -1e-17 + 360.0 rounds to 360.0
    if wrapped >= 360.0:
        wrapped = 0.0
    return wrapped


def vec_add(a: Vec3, b: Vec3) -> Vec3:
    return (a[0] + b[0], a[1] + b[1], a[2] + b[2])


def vec_sub(a: Vec3, b: Vec3) -> Vec3:
    return (a[0] - b[0], a[1] - b[1], a[2] - b[2])


def vec_scale(a: Vec3, s: float) -> Vec3:
    return (a[0] * s, a[1] * s, a[2] * s)


def vec_len(a: Vec3) -> float:
    return math.sqrt(a[0] * a[0] + a[1] * a[1] + a[2] * a[2])


def vec_norm(a: Vec3) -> Vec3:
    l = vec_len(a)
    if l == 0:
        return ZERO
    return (a[0] / l, a[1] / l, a[2] / l)


def vec_cross(a: Vec3, b: Vec3) -> Vec3:
    return (
        a[1] * b[2] - a[2] * b[1],
        a[2] * b[0] - a[0] * b[2],
        a[0] * b[1] - a[1] * b[0],
    )


def vec_mean(points) -> Vec3:
    """Arithmetic mean per axis. Caller guarantees at least one point."""
    sx = sy = sz = 0.0
    n = 0
    for p in points:
        sx += p[0]
        sy += p[1]
        sz += p[2]
        n += 1
    return (sx / n, sy / n, sz / n)


def quat_angle_axis(angle_deg: float, axis: Vec3) -> Quat:
    """
    Rotation of angle_deg degrees about axis (normalized here).

    A zero-length axis yields the identity rotation.
    """
    ax = vec_norm(axis)
    if ax == ZERO:
        return IDENTITY
    half = -math.radians(angle_deg) * 0.5
    s = math.sin(half)
    return (math.cos(half), ax[0] * s, ax[1] * s, ax[2] * s)


def quat_mul(a: Quat, b: Quat) -> Quat:
    """Hamilton product a * b (apply b first, then a)."""
    aw, ax, ay, az = a
    bw, bx, by, bz = b
    return (
        aw * bw - ax * bx - ay * by - az * bz,
        aw * bx + ax * bw + ay * bz - az * by,
        aw * by - ax * bz + ay * bw + az * bx,
        aw * bz + ax * by - ay * bx + az * bw,
    )


def quat_conjugate(q: Quat) -> Quat:
    return (q[0], -q[1], -q[2], -q[3])


def quat_normalize(q: Quat) -> Quat:
    l = math.sqrt(q[0] * q[0] + q[1] * q[1] + q[2] * q[2] + q[3] * q[3])
    if l == 0:
        return IDENTITY
    return (q[0] / l, q[1] / l, q[2] / l, q[3] / l)


def quat_rotate(q: Quat, v: Vec3) -> Vec3:
    """Rotate vector v by unit quaternion q."""
    w = q[0]
    u = (q[1], q[2], q[3])
    t = vec_scale(vec_cross(u, v), 2.0)
    return vec_add(vec_add(v, vec_scale(t, w)), vec_cross(u, t))


def quat_look_rotation(forward: Vec3, up: Vec3) -> Optional[Quat]:
    """
    Orientation whose local +Z points along forward and whose local +Y lies in
    the plane of forward and up.

    Returns None when forward is zero-length or parallel to up.
    """
    f = vec_norm(forward)
    if f == ZERO:
        return None
    r = vec_cross(up, f)
    if vec_len(r) < 1e-9:
        return None
    r = vec_norm(r)
    u = vec_cross(f, r)

    m00, m01, m02 = r[0], u[0], f[0]
    m10, m11, m12 = r[1], u[1], f[1]
    m20, m21, m22 = r[2], u[2], f[2]
    trace = m00 + m11 + m22
    if trace > 0:
        s = math.sqrt(trace + 1.0) * 2.0
        q = (0.25 * s, (m21 - m12) / s, (m02 - m20) / s, (m10 - m01) / s)
    elif m00 > m11 and m00 > m22:
        s = math.sqrt(1.0 + m00 - m11 - m22) * 2.0
        q = ((m21 - m12) / s, 0.25 * s, (m01 + m10) / s, (m02 + m20) / s)
    elif m11 > m22:
        s = math.sqrt(1.0 + m11 - m00 - m22) * 2.0
        q = ((m02 - m20) / s, (m01 + m10) / s, 0.25 * s, (m12 + m21) / s)
    else:
        s = math.sqrt(1.0 + m22 - m00 - m11) * 2.0
        q = ((m10 - m01) / s, (m02 + m20) / s, (m12 + m21) / s, 0.25 * s)
    return quat_normalize(q)
