#!/usr/bin/env python3
"""
Orrery application entry point and UI/renderer coordination.

What this module does
- Starts two event loops: a Pygame rendering thread (viewport) and the Dear PyGui UI
  (running on the main thread).
- Maintains a shared SolarSystemScene that owns the bodies, the motion components and the
  tracked camera; all access is guarded by a re-entrant lock for thread-safety.
- Provides a Dear PyGui control panel for time scale, per-body preview mode, motion table
  selection and simulation controls.

Threading model
- PygameRenderer runs in a background thread and performs: input handling (for the viewport),
  stepping the scene, and drawing. It locks the scene around short critical sections to
  read shared state.
- The UI class runs in the main thread via Dear PyGui. It updates controls on a periodic
  frame callback and invokes SolarSystemScene methods as needed; these are lock-protected.

Units and conventions
- Scene units for distance, degrees for angles, seconds for time.
- The camera is positioned by the centroid tracker; the mouse wheel only changes its field of view.

Running
1) Install dependencies: `pip install pygame dearpygui`
2) Run this module: `python orrery_sim.py`
"""

import logging
import time
import threading
from typing import List, Optional

# GUI and Rendering libs
import pygame
from pygame import gfxdraw
import dearpygui.dearpygui as dpg

from orrery.camera import Camera3D
from orrery.constants import (
    BACKGROUND_COLOR,
    BODY_PIXEL_FACTOR,
    HUD_COLOR,
    SAFE_COORD_LIMIT,
    SELECTION_COLOR,
    VIEW_HEIGHT,
    VIEW_WIDTH,
)
from orrery.data_models import Transform
from orrery.motion_table import SOLAR_SYSTEM
from orrery.presets_loader import list_motion_tables, load_motion_table
from orrery.scene import SolarSystemScene

logger = logging.getLogger("orrery_sim")

BUILTIN_TABLE = "Solar system (built-in)"

# Frame time ceiling; a stalled window should not fling bodies across their orbits
MAX_FRAME_DT = 0.25

# ============================================================
# Pygame Renderer Thread
# ============================================================

class PygameRenderer(threading.Thread):
    """
    Pygame loop: steps the scene, then draws bodies, trails and the HUD as seen
    from the tracked camera.
    """
    def __init__(self, scene: SolarSystemScene):
        super().__init__(daemon=True)
        self.scene = scene
        self.camera = Camera3D(scene.camera)
        self.surface = None
        self.clock = None
        self.running = True

    def run(self):
        pygame.init()
        pygame.display.set_caption("Orrery - Viewport")
        self.surface = pygame.display.set_mode((VIEW_WIDTH, VIEW_HEIGHT), pygame.RESIZABLE)
        self.camera.set_viewport_size(VIEW_WIDTH, VIEW_HEIGHT)
        self.clock = pygame.time.Clock()

        last_time = time.perf_counter()
        while self.running and self.scene.running:
            now = time.perf_counter()
            real_dt = min(now - last_time, MAX_FRAME_DT)
            last_time = now

            self.handle_events()

            with self.scene.lock:
                playing = self.scene.playing
            if playing:
                self.scene.step(real_dt)

            self.draw()

            # Limit FPS
            self.clock.tick(60)

        pygame.quit()

    def handle_events(self):
        for event in pygame.event.get():
            if event.type == pygame.QUIT:
                self.scene.running = False
                self.running = False

            elif event.type == pygame.VIDEORESIZE:
                self.surface = pygame.display.set_mode((event.w, event.h), pygame.RESIZABLE)
                self.camera.set_viewport_size(event.w, event.h)

            elif event.type == pygame.MOUSEWHEEL:
                self.camera.zoom(1.1 if event.y > 0 else 1.0 / 1.1)

            elif event.type == pygame.KEYDOWN and event.key == pygame.K_SPACE:
                with self.scene.lock:
                    self.scene.playing = not self.scene.playing

            elif event.type == pygame.MOUSEBUTTONDOWN and event.button == 1:
                self.pick_body(pygame.mouse.get_pos())

    def _projection(self, camera: Transform) -> Camera3D:
        """Projection over a copied camera pose, sharing the viewer's FOV and viewport."""
        view = Camera3D(camera, self.camera.fov_deg)
        view.viewport_size = self.camera.viewport_size
        return view

    def pick_body(self, mouse):
        snap = self.scene.snapshot()
        view = self._projection(snap.camera)
        best = None
        best_d = 20 ** 2
        for b in snap.bodies:
            sp = view.world_to_screen(b.position)
            if sp is None:
                continue
            d = (sp[0] - mouse[0]) ** 2 + (sp[1] - mouse[1]) ** 2
            if d < best_d:
                best, best_d = b.name, d
        self.scene.select(best)

    def draw(self):
        surf = self.surface
        surf.fill(BACKGROUND_COLOR)

        # Snapshot for consistency during draw
        snap = self.scene.snapshot()
        view = self._projection(snap.camera)

        if snap.show_trails:
            for b in snap.bodies:
                pts = []
                for p in b.trail:
                    sp = view.world_to_screen(p)
                    sp_s = _safe_point(sp) if sp else None
                    if sp_s:
                        pts.append(sp_s)
                if len(pts) > 1:
                    pygame.draw.aalines(surf, b.color, False, pts)

        # Far bodies first so near ones are drawn over them
        projected = []
        for b in snap.bodies:
            sp = view.world_to_screen(b.position)
            if sp is not None:
                projected.append((sp[2], b, sp))
        projected.sort(key=lambda item: item[0], reverse=True)

        for depth, b, sp in projected:
            sp_s = _safe_point(sp)
            if sp_s is None:
                continue
            vis_r = int(b.scale[0] * BODY_PIXEL_FACTOR * view.focal_px / depth)
            vis_r = max(2, min(vis_r, 200))
            gfxdraw.filled_circle(surf, sp_s[0], sp_s[1], vis_r, b.color)
            gfxdraw.aacircle(surf, sp_s[0], sp_s[1], vis_r, (0, 0, 0))
            if b.name == snap.selected:
                gfxdraw.aacircle(surf, sp_s[0], sp_s[1], vis_r + 4, SELECTION_COLOR)

        draw_text(surf, "Click: select body | Wheel: field of view | Space: Pause/Play", 10, 10, HUD_COLOR)
        draw_text(surf, f"Speed: {snap.time_scale:.2f}x  FOV: {view.fov_deg:.0f} deg  "
                        f"[{'Playing' if snap.playing else 'Paused'}]", 10, 30, HUD_COLOR)
        if snap.errors:
            draw_text(surf, str(snap.errors[-1]), 10, 50, (255, 140, 120))

        pygame.display.flip()

_cached_font = None

def draw_text(surface, text, x, y, color):
    global _cached_font
    if not pygame.font.get_init():
        pygame.font.init()
    if _cached_font is None:
        _cached_font = pygame.font.SysFont("consolas", 16) or pygame.font.Font(None, 16)
    img = _cached_font.render(text, True, color)
    surface.blit(img, (x, y))

def _safe_point(pt):
    x, y = int(pt[0]), int(pt[1])
    if -SAFE_COORD_LIMIT <= x <= SAFE_COORD_LIMIT and -SAFE_COORD_LIMIT <= y <= SAFE_COORD_LIMIT:
        return (x, y)
    return None

# ============================================================
# Dear PyGui UI
# ============================================================

class UI:
    """
    Dear PyGui interface: motion table selection, body list with preview toggle,
    simulation controls and a diagnostics line.
    """
    def __init__(self, scene: SolarSystemScene, renderer: PygameRenderer):
        self.scene = scene
        self.renderer = renderer
        self.status_msg_id = None
        self.body_list_id = None
        self.preview_id = None
        self.angle_label_id = None
        self._table_map = {}

        self._build_ui()
        self._schedule_sync()

    def _schedule_sync(self):
        """Reschedule the periodic sync callback using frame callbacks (approx ~10Hz)."""
        dpg.set_frame_callback(dpg.get_frame_count() + 6, self._sync_ui_with_scene)

    # -----------------------
    # UI Construction
    # -----------------------

    def _build_ui(self):
        dpg.create_context()
        dpg.create_viewport(title='Orrery - Controls', width=440, height=560)

        with dpg.window(label="Controls", width=420, height=540, pos=(10, 10), tag="main_window"):
            with dpg.group(horizontal=True):
                dpg.add_text("Motion table:")
                self._table_map = {BUILTIN_TABLE: None}
                for fn, display in list_motion_tables():
                    self._table_map[display] = fn
                dpg.add_combo(list(self._table_map.keys()), default_value=BUILTIN_TABLE, width=220,
                              tag="table_combo")
                dpg.add_button(label="Load", callback=lambda: self.load_table(dpg.get_value("table_combo")))

            dpg.add_separator()
            with dpg.group(horizontal=True):
                dpg.add_button(label="Play/Pause", callback=self._toggle_play)
                dpg.add_button(label="Step", callback=self._step_once)
                dpg.add_checkbox(label="Trails", default_value=self.scene.show_trails,
                                 callback=lambda s, a: self._toggle_trails(a))
            dpg.add_slider_float(label="Time scale", default_value=self.scene.time_scale,
                                 min_value=-10.0, max_value=100.0, width=260,
                                 callback=lambda s, a: self.scene.set_time_scale(a))

            dpg.add_separator()
            dpg.add_text("Bodies")
            self.body_list_id = dpg.add_listbox([], num_items=10, width=260, callback=self._on_select_body)
            self.preview_id = dpg.add_checkbox(label="Preview (spin in place)", callback=self._on_preview)
            self.angle_label_id = dpg.add_text("Orbit angle: -")
            dpg.add_button(label="Remove body", callback=self._remove_selected)

            dpg.add_separator()
            self.status_msg_id = dpg.add_text("", color=(180, 220, 180))

        dpg.setup_dearpygui()
        dpg.show_viewport()
        dpg.set_primary_window("main_window", True)

    def _set_status(self, msg: str, color=(180, 220, 180)):
        dpg.set_value(self.status_msg_id, msg)
        dpg.configure_item(self.status_msg_id, color=color)

    def _set_error(self, msg: str):
        self._set_status(msg, color=(255, 140, 120))

    # -----------------------
    # Callbacks
    # -----------------------

    def load_table(self, display_name: str):
        fn = self._table_map.get(display_name)
        table = SOLAR_SYSTEM if fn is None else load_motion_table(fn)
        if table is None:
            self._set_error(f"Could not load {display_name}")
            return
        self.scene.replace_table(table)
        self._refresh_body_list()
        self._set_status(f"Loaded {display_name} ({len(table)} bodies)")

    def _refresh_body_list(self):
        snap = self.scene.snapshot()
        names = [b.name for b in snap.bodies]
        dpg.configure_item(self.body_list_id, items=names)
        if snap.selected in names:
            dpg.set_value(self.body_list_id, snap.selected)

    def _on_select_body(self, sender, app_data, user_data=None):
        self.scene.select(app_data)

    def _on_preview(self, sender, app_data, user_data=None):
        snap = self.scene.snapshot()
        name = snap.selected
        if snap.selected_preview is None:
            self._set_error("Preview applies to table-driven bodies only")
            dpg.set_value(self.preview_id, False)
            return
        self.scene.set_preview(name, bool(app_data))
        self._set_status(f"{name}: {'preview' if app_data else 'orbiting'}")

    def _remove_selected(self):
        name = self.scene.selected
        if name is None:
            return
        self.scene.remove_body(name)
        self.scene.select(None)
        self._refresh_body_list()
        self._set_status(f"Removed {name}")

    def _toggle_play(self):
        with self.scene.lock:
            self.scene.playing = not self.scene.playing

    def _step_once(self):
        with self.scene.lock:
            self.scene.playing = False
        self.scene.step_once()

    def _toggle_trails(self, value):
        with self.scene.lock:
            self.scene.show_trails = bool(value)
        if not value:
            self.scene.clear_trails()

    def _sync_ui_with_scene(self):
        if not self.scene.running:
            dpg.stop_dearpygui()
            return
        snap = self.scene.snapshot()
        if snap.selected_preview is not None:
            angle: Optional[float] = snap.selected_angle
            dpg.set_value(self.preview_id, snap.selected_preview)
            dpg.set_value(self.angle_label_id, "Orbit angle: -" if angle is None else f"Orbit angle: {angle:.2f} deg")
        else:
            dpg.set_value(self.angle_label_id, "Orbit angle: -")
        names: List[str] = [b.name for b in snap.bodies]
        if dpg.get_item_configuration(self.body_list_id).get("items") != names:
            self._refresh_body_list()
        if snap.errors:
            self._set_error(str(snap.errors[-1]))
        # Reschedule next sync
        self._schedule_sync()

# ============================================================
# Application Entry
# ============================================================

def main():
    logging.basicConfig(level=logging.INFO, format="%(asctime)s - %(name)s - %(levelname)s - %(message)s")

    scene = SolarSystemScene()
    renderer = PygameRenderer(scene)

    # Start Pygame renderer thread
    renderer.start()

    ui = UI(scene, renderer)

    # Keyboard shortcut in UI window to toggle play/pause (Space)
    with dpg.handler_registry():
        def key_down(sender, app_data):
            if app_data == dpg.mvKey_Spacebar:
                ui._toggle_play()
        dpg.add_key_press_handler(callback=key_down)

    # Run Dear PyGui event loop
    try:
        dpg.start_dearpygui()
    finally:
        scene.running = False
        renderer.running = False
        renderer.join(timeout=2.0)
        dpg.destroy_context()

if __name__ == "__main__":
    main()
