"""Tests for the orbital motion updater and the asteroid belt."""

from __future__ import annotations

import math

import numpy as np
import pytest

from catalog import build_catalog
from conftest import body, make_data
from physics import (
    AsteroidBelt, OrbitalMotion, calculate_local_position, calculate_orbit_points,
    calculate_orbital_angle,
)


def test_orbital_angle_is_full_turn_per_period():
    assert calculate_orbital_angle(365, 365) == pytest.approx(2 * math.pi)
    assert calculate_orbital_angle(0, 365) == 0


def test_local_position_lies_on_circle_in_plane():
    pos = calculate_local_position(20, 1.234)
    assert pos[1] == 0
    assert np.linalg.norm(pos) == pytest.approx(20)


def test_orbit_points_are_closed_circle():
    points = calculate_orbit_points(10, num_points=64)
    assert points.shape == (65, 3)
    np.testing.assert_allclose(points[0], points[-1], atol=1e-9)
    np.testing.assert_allclose(np.linalg.norm(points, axis=1), 10)


def test_sun_stays_at_origin(single_planet):
    motion = OrbitalMotion(single_planet)
    motion.advance(123.4)
    np.testing.assert_array_equal(motion.position_of("Sun"), np.zeros(3))


def test_start_position_at_time_zero(single_planet):
    motion = OrbitalMotion(single_planet)
    np.testing.assert_allclose(motion.position_of("Earth"), [20, 0, 0])


def test_full_period_returns_to_start(single_planet):
    motion = OrbitalMotion(single_planet)
    start = motion.position_of("Earth").copy()
    for _ in range(365):
        motion.advance(1)
    assert motion.simulation_time == pytest.approx(365)
    np.testing.assert_allclose(motion.position_of("Earth"), start, atol=1e-9)


def test_quarter_period(single_planet):
    motion = OrbitalMotion(single_planet)
    motion.advance(365 / 4)
    np.testing.assert_allclose(motion.position_of("Earth"), [0, 0, 20], atol=1e-9)


def test_advance_then_reverse_round_trips(planet_with_moon):
    motion = OrbitalMotion(planet_with_moon)
    motion.advance(17.5)
    before = {name: pos.copy() for name, pos in motion.positions.items()}
    motion.advance(250.0)
    motion.advance(-250.0)
    for name, pos in before.items():
        np.testing.assert_allclose(motion.position_of(name), pos, atol=1e-9)


def test_negative_time_runs_backwards(single_planet):
    forward = OrbitalMotion(single_planet)
    backward = OrbitalMotion(single_planet)
    forward.advance(30)
    backward.advance(-30)
    f = forward.position_of("Earth")
    b = backward.position_of("Earth")
    # Mirror images across the x axis.
    np.testing.assert_allclose([f[0], f[2]], [b[0], -b[2]], atol=1e-9)


def test_moon_orbits_parent_current_position(planet_with_moon):
    motion = OrbitalMotion(planet_with_moon)
    for t in (0.0, 13.0, 100.0, 300.0):
        motion.simulation_time = t
        motion.recompute()
        parent = motion.position_of("Earth")
        theta = (t / 27) * 2 * math.pi
        expected = parent + np.array([math.cos(theta) * 3, 0, math.sin(theta) * 3])
        np.testing.assert_allclose(motion.position_of("Moon"), expected, atol=1e-9)
        np.testing.assert_allclose(motion.orbit_center_of("Moon"), parent)


def test_moon_path_is_epicycloid_not_plain_circle(planet_with_moon):
    motion = OrbitalMotion(planet_with_moon)
    distances = []
    for _ in range(200):
        motion.advance(1)
        distances.append(np.linalg.norm(motion.position_of("Moon")))
    # Distance to the Sun swings between 20 - 3 and 20 + 3, a lone circle would be constant.
    assert min(distances) < 18
    assert max(distances) > 22
    assert all(17 - 1e-9 <= d <= 23 + 1e-9 for d in distances)


def test_moon_with_parent_at_origin_is_plain_circle():
    root = build_catalog(make_data(Pebble=body(5, 10)))
    motion = OrbitalMotion(root)
    for _ in range(25):
        motion.advance(0.7)
        assert np.linalg.norm(motion.position_of("Pebble")) == pytest.approx(5)


def test_deeply_nested_bodies_compose():
    moon = body(3, 27, moons={"Speck": body(0.5, 2)})
    root = build_catalog(make_data(Earth=body(20, 365, moons={"Moon": moon})))
    motion = OrbitalMotion(root)
    motion.advance(5)
    offset = motion.position_of("Speck") - motion.position_of("Moon")
    assert np.linalg.norm(offset) == pytest.approx(0.5)


def test_spin_is_independent_of_time_speed(single_planet):
    motion = OrbitalMotion(single_planet, spin_step=0.01)
    motion.advance(0)
    motion.advance(-50)
    motion.advance(1000)
    assert motion.spin_of("Earth") == pytest.approx(0.03)


def test_reset_time(single_planet):
    motion = OrbitalMotion(single_planet)
    motion.advance(100)
    motion.reset_time()
    assert motion.simulation_time == 0
    np.testing.assert_allclose(motion.position_of("Earth"), [20, 0, 0])


def test_unknown_body_has_no_position(single_planet):
    assert OrbitalMotion(single_planet).position_of("Vulcan") is None


def test_asteroid_belt_stays_in_band():
    belt = AsteroidBelt(count=500, min_radius=35, max_radius=45, seed=3)
    belt.advance(50)
    pos = belt.positions()
    assert pos.shape == (500, 3)
    radial = np.hypot(pos[:, 0], pos[:, 2])
    assert np.all((radial >= 35) & (radial <= 45))
    assert np.all(np.abs(pos[:, 1]) <= 1)


def test_asteroid_inner_edge_moves_faster():
    belt = AsteroidBelt(count=200, seed=1)
    start = belt.angles.copy()
    belt.advance(10)
    travelled = belt.angles - start
    inner = travelled[belt.radii < 38].mean()
    outer = travelled[belt.radii > 42].mean()
    assert inner > outer


def test_asteroid_belt_reverses():
    belt = AsteroidBelt(count=50, seed=7)
    start = belt.positions()
    belt.advance(12)
    belt.advance(-12)
    np.testing.assert_allclose(belt.positions(), start, atol=1e-9)


def test_asteroid_belt_seed_is_reproducible():
    np.testing.assert_array_equal(AsteroidBelt(count=20, seed=5).positions(), AsteroidBelt(count=20, seed=5).positions())
