import numpy as np

from config import (
    ASTEROID_COUNT, ASTEROID_HEIGHT, ASTEROID_MAX_RADIUS, ASTEROID_MIN_RADIUS,
    ASTEROID_SPEED_FACTOR, ORBIT_SEGMENTS, SPIN_STEP,
)

"""
PHYSICS MODULE
--------------
This module moves the bodies of the Orrery around their orbits.

Key Concepts:
1.  **Circular Orbits**: Every body travels on a circle of radius `distance` in the
    y = 0 plane.  No eccentricity, no inclination.  It's an orrery, not an ephemeris.

2.  **Angle from Time**: The angle along the orbit is worked out from the accumulated
    simulation time every frame:
        angle = (simulation_time / period) * 2 * pi
    Positions are never integrated step by step, so they can't drift.  Run time backwards
    (negative time speed) and the bodies simply retrace their path.

3.  **Parent Frames**: A moon's circle is centred on its parent's *current* position, so
    the parent has to be placed before its moons.  Walking the tree from the Sun down
    guarantees that.  Seen from the Sun the moon traces an epicycloid.

Precondition: every orbiting body has period > 0.  The catalog refuses anything else at load
time, so nothing in here checks it again.
"""


def calculate_orbital_angle(simulation_time, period):
    """
    Angle (radians) along the orbit after `simulation_time` time units.
    One full period is one full turn.
    """
    return (simulation_time / period) * 2 * np.pi


def calculate_local_position(distance, angle):
    """
    Position on the orbit relative to the parent body.

    Args:
        distance (float): Orbit radius.
        angle (float): Angle along the orbit in radians.

    Returns:
        np.ndarray: (x, 0, z)
    """
    return np.array([np.cos(angle) * distance, 0.0, np.sin(angle) * distance])


def calculate_orbit_points(distance, num_points=ORBIT_SEGMENTS):
    """
    Generates the closed circle of points representing an orbital path, relative to the
    parent.  Used for drawing the orbit lines and for clicking on them.

    The first and last points are the same so the line closes.
    """
    angles = np.linspace(0, 2 * np.pi, num_points + 1)
    return np.stack([np.cos(angles) * distance, np.zeros_like(angles), np.sin(angles) * distance], axis=1)


class OrbitalMotion:
    """
    Owns the derived, mutable orbital state of the whole system.

    State:
    1.  **simulation_time**: Accumulated time, advanced by the time speed every frame.
    2.  **positions**: World position of every body, by name.
    3.  **orbit_centers**: World position of every body's parent (where its orbit line goes).
    4.  **spins**: Rotation of each body around its own axis.  A separate accumulator that
        doesn't care about time speed.
    """

    def __init__(self, root, spin_step=SPIN_STEP):
        self.root = root
        self.spin_step = spin_step
        self.simulation_time = 0.0
        self.positions = {}
        self.orbit_centers = {}
        self.spins = {}
        self._init_spins(root)
        self.recompute()

    def _init_spins(self, body):
        self.spins[body.name] = 0.0
        for moon in body.moons:
            self._init_spins(moon)

    def advance(self, time_speed):
        """Moves time on by `time_speed` and puts every body in its new place."""
        self.simulation_time += time_speed
        self.recompute()
        for name in self.spins:
            self.spins[name] += self.spin_step

    def reset_time(self):
        self.simulation_time = 0.0
        self.recompute()

    def recompute(self):
        self._place(self.root, np.zeros(3))

    def _place(self, body, parent_pos):
        """
        Places `body` and then, recursively, its moons.
        The root has no orbit and sits on `parent_pos` (the origin).
        """
        if body.is_root:
            world_pos = parent_pos.copy()
        else:
            angle = calculate_orbital_angle(self.simulation_time, body.period)
            world_pos = parent_pos + calculate_local_position(body.distance, angle)

        self.positions[body.name] = world_pos
        self.orbit_centers[body.name] = parent_pos
        for moon in body.moons:
            self._place(moon, world_pos)

    def position_of(self, name):
        return self.positions.get(name)

    def orbit_center_of(self, name):
        return self.orbit_centers.get(name)

    def spin_of(self, name):
        return self.spins.get(name, 0.0)


class AsteroidBelt:
    """
    A ring of small rocks between Mars and Jupiter.

    Unlike the planets the asteroids *are* stepped incrementally: each one has its own angle
    that grows by orbit_speed * time_speed every frame, with orbit_speed = 0.5 / radius so
    the inner edge of the belt overtakes the outer edge.
    """

    def __init__(self, count=ASTEROID_COUNT, min_radius=ASTEROID_MIN_RADIUS,
                 max_radius=ASTEROID_MAX_RADIUS, seed=None):
        rng = np.random.default_rng(seed)
        self.radii = rng.uniform(min_radius, max_radius, count)
        self.angles = rng.uniform(0, 2 * np.pi, count)
        self.heights = (rng.random(count) - 0.5) * 2 * ASTEROID_HEIGHT
        self.shades = rng.random(count) * 0.5 + 0.5
        self.orbit_speeds = ASTEROID_SPEED_FACTOR / self.radii

    def __len__(self):
        return len(self.radii)

    def advance(self, time_speed):
        self.angles += self.orbit_speeds * time_speed

    def positions(self):
        """Returns an (N, 3) array of asteroid world positions."""
        return np.stack([
            np.cos(self.angles) * self.radii,
            self.heights,
            np.sin(self.angles) * self.radii,
        ], axis=1)
