#!/usr/bin/env python3
"""
Shared constants for the orrery (scene units and degrees unless stated otherwise).

Keeping constants in one place helps ensure values are consistent across the
codebase and makes tuning easier.
"""

# Motion controls
DEFAULT_TIME_SCALE = 1.0  # multiplier applied to every angular rate
PREVIEW_SCALE = 1.0  # uniform scale of a body shown on its own
MOON_SPIN_RATE = 0.608  # deg/s
SPIN_RATE_MULTIPLIER = 1.0  # planet-style live spin

# Frame of reference
REFERENCE_RADIAL = (1.0, 0.0, 0.0)  # orbit angle 0 points along local +X
WORLD_UP = (0.0, 1.0, 0.0)
FALLBACK_UP = (0.0, 0.0, 1.0)
PARALLEL_EPSILON = 1e-6  # |cross| below this means two directions are parallel

# Rendering (viewport)
VIEW_WIDTH = 1100
VIEW_HEIGHT = 800
BACKGROUND_COLOR = (6, 8, 14)
HUD_COLOR = (200, 200, 200)
SELECTION_COLOR = (255, 255, 0)
TRAIL_LENGTH = 240

# Camera field of view bounds (degrees)
DEFAULT_FOV_DEG = 50.0
MIN_FOV_DEG = 5.0
MAX_FOV_DEG = 120.0
NEAR_PLANE = 0.05

# Pixels per unit of display scale at distance 1
BODY_PIXEL_FACTOR = 1.0

# Safety: avoid drawing outside reasonable integer pixel ranges
SAFE_COORD_LIMIT = 30000
