import math

import numpy as np
import pygame

from catalog import iter_bodies, parse_hex_color
from config import *
from physics import calculate_orbit_points
from textures import create_ring_texture, scroll_texture, texture_for

RING_LINES = 12


# --- Pygame Specific Helper Functions ---
def _focal_lengths(camera, width, height):
    """Pixels per unit of (view-space x / depth) horizontally and vertically."""
    tan_half = math.tan(math.radians(camera.fov_deg) / 2)
    return (width / 2) / (tan_half * camera.aspect), (height / 2) / tan_half


def project_points(points, camera, width, height):
    """
    Projects an (N, 3) array of world points onto the screen.

    The Math:
    Each point is moved into the camera's frame (right, up, forward), then divided by its
    depth (distance along forward) so further things shrink towards the centre of the screen.

    Returns:
        tuple: (screen_xy (N, 2) float, depth (N,), visible (N,) bool).  A point is visible
        when it is in front of the near plane and closer than the far plane.
    """
    points = np.atleast_2d(np.asarray(points, dtype=float))
    right, up, forward = camera.view_basis()
    rel = points - camera.position
    x_cam = rel @ right
    y_cam = rel @ up
    depth = rel @ forward
    visible = (depth > camera.near) & (depth < camera.far)

    fx, fy = _focal_lengths(camera, width, height)
    safe_depth = np.where(visible, depth, 1.0)
    sx = width / 2 + x_cam * fx / safe_depth
    sy = height / 2 - y_cam * fy / safe_depth
    # pygame draw calls reject coordinates outside a signed 16 bit range
    screen = np.clip(np.stack([sx, sy], axis=1), COORD_MIN, COORD_MAX)
    return screen, depth, visible


def project_point(point, camera, width, height):
    """ Single point version of project_points. Returns (sx, sy, depth) or None if behind the camera. """
    screen, depth, visible = project_points([point], camera, width, height)
    if not visible[0]:
        return None
    return int(round(screen[0, 0])), int(round(screen[0, 1])), float(depth[0])


def projected_radius(radius, depth, camera, height):
    """ On-screen radius (pixels) of a sphere of `radius` at `depth`. """
    _, fy = _focal_lengths(camera, 1, height)
    return radius * fy / depth


def distance_to_polyline(pos, points):
    """ Shortest distance (pixels) from `pos` to a polyline given as an (N, 2) array. """
    points = np.asarray(points, dtype=float)
    if len(points) == 0:
        return math.inf
    if len(points) == 1:
        return float(np.hypot(*(points[0] - pos)))
    p = np.asarray(pos, dtype=float)
    a = points[:-1]
    b = points[1:]
    ab = b - a
    length_sq = np.einsum("ij,ij->i", ab, ab)
    t = np.where(length_sq > 0, np.einsum("ij,ij->i", p - a, ab) / np.where(length_sq > 0, length_sq, 1), 0)
    t = np.clip(t, 0, 1)
    closest = a + ab * t[:, None]
    return float(np.min(np.hypot(closest[:, 0] - p[0], closest[:, 1] - p[1])))


def visible_runs(screen, visible):
    """ Splits a projected polyline into runs of consecutive visible points. """
    runs, current = [], []
    for (x, y), ok in zip(screen, visible):
        if ok:
            current.append((float(x), float(y)))
        elif current:
            runs.append(current)
            current = []
    if current:
        runs.append(current)
    return [run for run in runs if len(run) > 1]


def make_surface(pixels):
    """ (rows, cols, 3) uint8 array -> pygame Surface (pygame wants columns first). """
    return pygame.surfarray.make_surface(np.ascontiguousarray(pixels.transpose(1, 0, 2)))


def circle_sprite(pixels, diameter):
    """ Texture scaled to `diameter` and cut to a disc. """
    scaled = pygame.transform.smoothscale(make_surface(pixels), (diameter, diameter))
    sprite = pygame.Surface((diameter, diameter), pygame.SRCALPHA)
    sprite.blit(scaled, (0, 0))
    mask = pygame.Surface((diameter, diameter), pygame.SRCALPHA)
    pygame.draw.circle(mask, (255, 255, 255, 255), (diameter // 2, diameter // 2), diameter // 2)
    sprite.blit(mask, (0, 0), special_flags=pygame.BLEND_RGBA_MIN)
    return sprite


# --- Main Orrery Class ---
class Orrery:
    """
    Draws a Simulation and owns its on-screen UI.

    Functions:
    1.  **Textures**: Generates one texture per body up front, scrolled by the body's spin when drawn.
    2.  **Render Loop**: Orbits, asteroid belt, bodies (painter's algorithm), rings, labels and UI.
    3.  **Hit Testing**: Bodies first, orbit paths second, from what was drawn last frame.
    4.  **UI**: Object selector, time speed slider, buttons and the info panel.

    Event handlers only change state; drawing happens in draw() alone.
    """
    def __init__(self, simulation, width=SCREEN_WIDTH, height=SCREEN_HEIGHT, texture_seed=TEXTURE_SEED):
        self.simulation = simulation
        self.width = width
        self.height = height
        self.show_labels = True
        self.dragging_slider = False

        self.bodies = {body.name: body for body, _ in iter_bodies(simulation.catalog)}
        self.textures = {}
        self.ring_colors = {}
        for name, body in self.bodies.items():
            if body.is_root:
                continue
            self.textures[name] = texture_for(body, seed=texture_seed)
            if body.rings:
                # One colour per ring line, sampled down the ring texture.
                ring_pixels = create_ring_texture(body.rings.color, seed=texture_seed)
                rows = np.linspace(0, ring_pixels.shape[0] - 1, RING_LINES).astype(int)
                self.ring_colors[name] = [tuple(int(c) for c in ring_pixels[r].mean(axis=0)) for r in rows]

        self.body_screen_coords = {} # {name: (x, y, radius, depth)}
        self.orbit_screen_paths = {} # {name: [(x, y), ...] runs}
        self.handle_resize(width, height)

    # --- Layout ---
    def relayout(self, width, height):
        self.width = width
        self.height = height
        self.view_width = max(1, width - SIDE_PANEL_WIDTH)

        self.bottom_bar_rect = pygame.Rect(0, height - BOTTOM_BAR_HEIGHT, width, BOTTOM_BAR_HEIGHT)
        self.reset_view_button_rect = pygame.Rect(width - BUTTON_WIDTH, height - BOTTOM_BAR_HEIGHT, BUTTON_WIDTH, BOTTOM_BAR_HEIGHT)
        self.toggle_names_button_rect = self.reset_view_button_rect.move(-BUTTON_WIDTH, 0)
        self.reset_time_button_rect = self.toggle_names_button_rect.move(-BUTTON_WIDTH, 0)

        self.side_panel_rect = pygame.Rect(width - SIDE_PANEL_WIDTH, 0, SIDE_PANEL_WIDTH, height - BOTTOM_BAR_HEIGHT)
        self.selector_rows = [] # (kind, text, rect)
        y = 15
        for label, names in self.simulation.grouped_names().items():
            self.selector_rows.append(("group", label, pygame.Rect(self.side_panel_rect.x + 10, y, SIDE_PANEL_WIDTH - 20, SELECTOR_ROW_HEIGHT)))
            y += SELECTOR_ROW_HEIGHT
            for name in names:
                self.selector_rows.append(("body", name, pygame.Rect(self.side_panel_rect.x + 25, y, SIDE_PANEL_WIDTH - 35, SELECTOR_ROW_HEIGHT)))
                y += SELECTOR_ROW_HEIGHT
            y += 6

        slider_left = 20
        self.slider_rect = pygame.Rect(slider_left, height - BOTTOM_BAR_HEIGHT - 20, self.view_width - 2 * slider_left, 1)
        self.slider_handle_pos = self._time_speed_to_x(self.simulation.time_speed)
        self.info_rect = pygame.Rect(25, 85, INFO_PANEL_WIDTH, 200)

    def _time_speed_to_x(self, value):
        fraction = (value - TIME_SPEED_MIN) / (TIME_SPEED_MAX - TIME_SPEED_MIN)
        return self.slider_rect.left + fraction * self.slider_rect.width

    def _x_to_time_speed(self, x):
        fraction = (x - self.slider_rect.left) / max(1, self.slider_rect.width)
        return TIME_SPEED_MIN + fraction * (TIME_SPEED_MAX - TIME_SPEED_MIN)

    def _slider_handle_rect(self):
        r = SLIDER_HANDLE_RADIUS
        return pygame.Rect(self.slider_handle_pos - r, self.slider_rect.centery - r, r * 2, r * 2)

    def is_over_ui(self, pos):
        """True when `pos` is on a widget, so a press there must not start a camera drag."""
        return (self.bottom_bar_rect.collidepoint(pos)
                or self.side_panel_rect.collidepoint(pos)
                or self._slider_handle_rect().inflate(20, 20).collidepoint(pos)
                or self.slider_rect.inflate(0, 20).collidepoint(pos))

    # --- Events ---
    def handle_ui_event(self, event):
        """
        Handles UI events for the selector, slider and buttons.

        Returns:
            "RESET_VIEW", "RESET_TIME", ("SELECT_OBJECT", name) or None.
        """
        if event.type == pygame.MOUSEBUTTONDOWN and event.button == PRIMARY_BUTTON:
            if self.reset_view_button_rect.collidepoint(event.pos):
                return "RESET_VIEW"
            if self.reset_time_button_rect.collidepoint(event.pos):
                return "RESET_TIME"
            if self.toggle_names_button_rect.collidepoint(event.pos):
                self.show_labels = not self.show_labels
                return None
            for kind, text, rect in self.selector_rows:
                if kind == "body" and rect.collidepoint(event.pos):
                    return ("SELECT_OBJECT", text)
            # the handle and track take presses a few pixels off the drawn shape
            if self._slider_handle_rect().inflate(20, 20).collidepoint(event.pos) or \
               self.slider_rect.inflate(0, 20).collidepoint(event.pos):
                self.dragging_slider = True
                self._move_slider(event.pos[0])

        if event.type == pygame.MOUSEBUTTONUP and event.button == PRIMARY_BUTTON:
            self.dragging_slider = False

        if event.type == pygame.MOUSEMOTION and self.dragging_slider:
            self._move_slider(event.pos[0])
        return None

    def _move_slider(self, x):
        x = max(self.slider_rect.left, min(self.slider_rect.right, x))
        value = self.simulation.set_time_speed(self._x_to_time_speed(x))
        self.slider_handle_pos = self._time_speed_to_x(value)

    def pick(self, pos):
        """
        Finds what is under `pos`: the nearest body drawn there, otherwise the orbit path
        closest to it (within ORBIT_PICK_TOLERANCE pixels).
        """
        hits = []
        for name, (bx, by, br, depth) in self.body_screen_coords.items():
            # Allow a little extra margin for clicking small bodies
            if math.hypot(pos[0] - bx, pos[1] - by) <= max(br, 5):
                hits.append((depth, name))
        if hits:
            return min(hits)[1]

        best_name, best_dist = None, ORBIT_PICK_TOLERANCE
        for name, runs in self.orbit_screen_paths.items():
            for run in runs:
                dist = distance_to_polyline(pos, run)
                if dist <= best_dist:
                    best_name, best_dist = name, dist
        return best_name

    def handle_click(self, pos):
        """Left click (not a drag): show the info of whatever was clicked."""
        name = self.pick(pos)
        if name is not None:
            self.simulation.show_info(name)
        return name

    def handle_right_click(self, pos):
        """Right click on a body focuses the camera on it."""
        name = self.pick(pos)
        if name is not None and name in self.body_screen_coords:
            self.simulation.select_object(name)
            return ("SET_FOCUS", name)
        return None

    def handle_resize(self, width, height):
        self.relayout(width, height)
        self.simulation.resize(self.view_width, height)

    # --- Drawing ---
    def _project(self, points):
        return project_points(points, self.simulation.camera, self.view_width, self.height)

    def draw(self, screen, main_font, ui_font):
        """
        Renders the entire scene.

        Steps:
        1.  Clear screen.
        2.  Orbit paths (each around its parent's current position).
        3.  Asteroid belt.
        4.  Bodies sorted by depth (painter's algorithm), rings split into the half behind
            and the half in front of their planet.
        5.  The UI overlay (selector, slider, buttons, info text).
        """
        screen.fill(BLACK)
        self.body_screen_coords = {}
        self.orbit_screen_paths = {}
        sim = self.simulation
        orbits = sim.orbits

        for name, body in self.bodies.items():
            if body.is_root:
                continue
            path = calculate_orbit_points(body.distance) + orbits.orbit_center_of(name)
            screen_pts, _, visible = self._project(path)
            runs = visible_runs(screen_pts, visible)
            self.orbit_screen_paths[name] = runs
            color = parse_hex_color(body.orbit_color)
            for run in runs:
                pygame.draw.lines(screen, color, False, run, 1)

        belt_pts, _, belt_visible = self._project(sim.belt.positions())
        for (x, y), shade, ok in zip(belt_pts, sim.belt.shades, belt_visible):
            if ok:
                level = int(255 * shade)
                screen.fill((level, level, level), (int(x), int(y), 1, 1))

        drawable_objects = []
        for name, body in self.bodies.items():
            projected = project_point(orbits.position_of(name), sim.camera, self.view_width, self.height)
            if projected is None:
                continue
            sx, sy, depth = projected
            radius_px = projected_radius(body.radius, depth, sim.camera, self.height)
            radius_px = int(max(MIN_BODY_RADIUS_PIXELS, min(MAX_BODY_RADIUS_PIXELS, radius_px)))
            drawable_objects.append((depth, name, sx, sy, radius_px))
        drawable_objects.sort(reverse=True)

        for depth, name, sx, sy, radius_px in drawable_objects:
            body = self.bodies[name]
            if body.rings:
                self._draw_rings(screen, name, depth, front=False)
            if body.is_root:
                pygame.draw.circle(screen, parse_hex_color(body.color), (sx, sy), radius_px)
            else:
                pixels = scroll_texture(self.textures[name], orbits.spin_of(name))
                sprite = circle_sprite(pixels, radius_px * 2)
                screen.blit(sprite, (sx - radius_px, sy - radius_px))
            if body.rings:
                self._draw_rings(screen, name, depth, front=True)

            self.body_screen_coords[name] = (sx, sy, radius_px, depth)
            if self.show_labels:
                name_surface = main_font.render(name, True, LIGHT_GREY)
                screen.blit(name_surface, name_surface.get_rect(center=(sx, sy + radius_px + 8)))

        self._draw_ui(screen, ui_font, main_font)

    def _draw_rings(self, screen, name, body_depth, front):
        body = self.bodies[name]
        center = self.simulation.orbits.position_of(name)
        radii = np.linspace(body.rings.inner, body.rings.outer, RING_LINES)
        for radius, color in zip(radii, self.ring_colors[name]):
            screen_pts, depth, visible = self._project(calculate_orbit_points(radius, 64) + center)
            half = (depth < body_depth) if front else (depth >= body_depth)
            for run in visible_runs(screen_pts, visible & half):
                pygame.draw.lines(screen, color, False, run, 1)

    def _draw_ui(self, screen, ui_font, small_font):
        sim = self.simulation

        # Side panel: object selector
        pygame.draw.rect(screen, PANEL_BG, self.side_panel_rect)
        for kind, text, rect in self.selector_rows:
            if kind == "group":
                color = LIGHT_GREY
            elif text == sim.focused_name:
                color = HIGHLIGHT
            else:
                color = WHITE
            screen.blit(small_font.render(text, True, color), rect.topleft)

        # Bottom bar and buttons
        pygame.draw.rect(screen, GREY, self.bottom_bar_rect)
        pygame.draw.rect(screen, GREEN, self.reset_view_button_rect)
        pygame.draw.rect(screen, BLUE, self.toggle_names_button_rect)
        pygame.draw.rect(screen, DUSTY_RED, self.reset_time_button_rect)
        hint = small_font.render("Reset time | Labels | Reset view", True, LIGHT_GREY)
        screen.blit(hint, hint.get_rect(midright=(self.reset_time_button_rect.left - 10, self.bottom_bar_rect.centery)))

        # Slider
        pygame.draw.rect(screen, WHITE, self.slider_rect) # Thin line
        zero_x = int(self._time_speed_to_x(0))
        pygame.draw.line(screen, MID_GREY, (zero_x, self.slider_rect.centery - 6), (zero_x, self.slider_rect.centery + 6))
        pygame.draw.circle(screen, WHITE, (int(self.slider_handle_pos), self.slider_rect.centery), SLIDER_HANDLE_RADIUS, 3)

        # Status lines
        status = f"Time | {sim.orbits.simulation_time:.1f} days   Speed | {sim.time_speed:+.2f}x"
        screen.blit(ui_font.render(status, True, WHITE), (25, 25))
        screen.blit(ui_font.render(f"Orbit Centre | {sim.focus_label}", True, WHITE), (25, 55))

        # Info panel
        y = self.info_rect.y
        for line in sim.info_text.splitlines():
            screen.blit(small_font.render(line, True, WHITE), (self.info_rect.x, y))
            y += small_font.get_linesize()
