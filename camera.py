import math

import numpy as np

from config import (
    CAMERA_BASE_RADIUS, CAMERA_DAMPING, CAMERA_FAR, CAMERA_FOCUS_RADIUS, CAMERA_FOV_DEG,
    CAMERA_MAX_SCALE, CAMERA_MIN_SCALE, CAMERA_NEAR, CAMERA_PHI_MAX, CAMERA_PHI_MIN,
    CAMERA_RESET_PHI, CAMERA_RESET_THETA, CAMERA_ROTATE_SCALE, CAMERA_ROTATE_SPEED,
    CAMERA_START_POSITION, CAMERA_ZOOM_SPEED, PRIMARY_BUTTON, SCREEN_HEIGHT, SCREEN_WIDTH,
)

"""
CAMERA MODULE
-------------
A damped orbit camera.  The camera always looks at `target` and sits on a sphere around it.

Key Concepts:
1.  **Spherical Coordinates**: The camera offset from the target is kept as
    (radius, theta, phi) instead of (x, y, z):
    - radius: distance from the target (zoom).
    - theta:  azimuth around the vertical (y) axis.
    - phi:    polar angle measured down from +y.  Kept inside [PHI_MIN, PHI_MAX] so the
              camera never sits exactly on a pole, where the look-at basis falls apart.
    Conversion:  x = r sin(phi) sin(theta),  y = r cos(phi),  z = r sin(phi) cos(theta)

2.  **Damping**: Dragging doesn't move the camera directly.  It piles up a pending delta,
    and every update() applies only `damping` of it and shrinks the rest by (1 - damping).
    The drag keeps gliding for a while after the mouse is let go, fading out exponentially.

3.  **Zoom**: radius = base_radius * scale, scale being clamped to [1, 100].
"""

UP = np.array([0.0, 1.0, 0.0])


def spherical_to_cartesian(radius, theta, phi):
    sin_phi = math.sin(phi)
    return np.array([
        radius * sin_phi * math.sin(theta),
        radius * math.cos(phi),
        radius * sin_phi * math.cos(theta),
    ])


def cartesian_to_spherical(offset):
    """Inverse of spherical_to_cartesian. A zero offset gives (0, 0, 0)."""
    x, y, z = (float(v) for v in offset)
    radius = math.sqrt(x * x + y * y + z * z)
    if radius == 0:
        return 0.0, 0.0, 0.0
    theta = math.atan2(x, z)
    phi = math.acos(max(-1.0, min(1.0, y / radius)))
    return radius, theta, phi


def clamp(value, lower, upper):
    return max(lower, min(upper, value))


class CameraController:
    """
    Owns the camera pose and turns pointer input into orbit motion.

    The input methods (on_pointer_down / on_pointer_move / on_pointer_up / on_scroll) only
    change state.  Nothing in here draws.  The renderer reads `position` and `view_basis()`
    once per frame.
    """

    def __init__(self, aspect=SCREEN_WIDTH / SCREEN_HEIGHT, start_position=CAMERA_START_POSITION,
                 base_radius=CAMERA_BASE_RADIUS, focus_radius=CAMERA_FOCUS_RADIUS,
                 rotate_speed=CAMERA_ROTATE_SPEED, zoom_speed=CAMERA_ZOOM_SPEED,
                 damping_factor=CAMERA_DAMPING, min_scale=CAMERA_MIN_SCALE,
                 max_scale=CAMERA_MAX_SCALE, phi_min=CAMERA_PHI_MIN, phi_max=CAMERA_PHI_MAX,
                 fov_deg=CAMERA_FOV_DEG, near=CAMERA_NEAR, far=CAMERA_FAR):
        self.default_base_radius = base_radius
        self.base_radius = base_radius
        self.focus_radius = focus_radius
        self.rotate_speed = rotate_speed
        self.zoom_speed = zoom_speed
        self.damping_factor = damping_factor
        self.min_scale = min_scale
        self.max_scale = max_scale
        self.phi_min = phi_min
        self.phi_max = phi_max
        self.fov_deg = fov_deg
        self.near = near
        self.far = far
        self.aspect = aspect

        self.target = np.zeros(3)
        self.scale = 1.0
        self.pending_theta = 0.0
        self.pending_phi = 0.0
        self.drag_active = False
        self.last_pointer_position = None

        # Start from the configured camera position, looking at the origin.
        self.position = np.array(start_position, dtype=float)
        _, self.theta, self.phi = cartesian_to_spherical(self.position - self.target)
        self.phi = clamp(self.phi, self.phi_min, self.phi_max)
        self.radius = self.base_radius * self.scale
        self.update()

    @property
    def spherical(self):
        return self.radius, self.theta, self.phi

    # --- Input ---
    def on_pointer_down(self, button, x, y):
        if button != PRIMARY_BUTTON:
            return
        self.drag_active = True
        self.last_pointer_position = (x, y)

    def on_pointer_move(self, x, y):
        if not self.drag_active:
            return
        dx = x - self.last_pointer_position[0]
        dy = y - self.last_pointer_position[1]
        self.last_pointer_position = (x, y)

        self.pending_theta -= dx * self.rotate_speed * CAMERA_ROTATE_SCALE
        self.pending_phi -= dy * self.rotate_speed * CAMERA_ROTATE_SCALE
        self.update()

    def on_pointer_up(self):
        # The pending delta is left alone so the drag glides to a stop.
        self.drag_active = False

    def on_scroll(self, delta_y):
        """Positive delta_y zooms out, anything else zooms in."""
        if delta_y > 0:
            self.scale *= (1 + self.zoom_speed)
        else:
            self.scale /= (1 + self.zoom_speed)
        self.scale = clamp(self.scale, self.min_scale, self.max_scale)
        self.update()

    # --- Integration ---
    def update(self):
        """
        One damped integration step.

        1.  Apply `damping` of the pending delta to theta / phi.
        2.  Clamp phi away from the poles.
        3.  radius = base_radius * scale.
        4.  Place the camera on the sphere around the target.
        5.  Decay the pending delta by (1 - damping).
        """
        self.theta += self.pending_theta * self.damping_factor
        self.phi += self.pending_phi * self.damping_factor
        self.phi = clamp(self.phi, self.phi_min, self.phi_max)
        self.radius = self.base_radius * self.scale

        self._apply_pose()

        self.pending_theta *= (1 - self.damping_factor)
        self.pending_phi *= (1 - self.damping_factor)

    def _apply_pose(self):
        self.position = self.target + spherical_to_cartesian(self.radius, self.theta, self.phi)

    # --- Commands ---
    def focus_on_object(self, world_position):
        """Looks at `world_position` from close up (focus_radius away)."""
        self.target = np.array(world_position, dtype=float)
        self.base_radius = self.focus_radius
        self.scale = 1.0
        self.update()

    def track(self, world_position):
        """
        Moves the target along with a body without touching zoom or the pending delta.
        Used to keep a focused body centred while it orbits.
        """
        self.target = np.array(world_position, dtype=float)
        self._apply_pose()

    def reset(self):
        self.target = np.zeros(3)
        self.scale = 1.0
        self.base_radius = self.default_base_radius
        self.radius = self.base_radius
        self.theta = CAMERA_RESET_THETA
        self.phi = clamp(CAMERA_RESET_PHI, self.phi_min, self.phi_max)
        self.pending_theta = 0.0
        self.pending_phi = 0.0
        self.update()

    def set_aspect(self, aspect):
        if aspect > 0:
            self.aspect = aspect

    def view_basis(self):
        """
        Returns the (right, up, forward) unit vectors of the look-at frame.
        phi never reaches a pole, so forward is never parallel to UP.
        """
        forward = self.target - self.position
        forward = forward / np.linalg.norm(forward)
        right = np.cross(forward, UP)
        right = right / np.linalg.norm(right)
        up = np.cross(right, forward)
        return right, up, forward
