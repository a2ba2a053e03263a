"""Tests for the Simulation context: stepping, selection and info lookups."""

from __future__ import annotations

import logging

import numpy as np
import pytest

from camera import CameraController
from catalog import load_catalog
from physics import AsteroidBelt
from simulation import Simulation


def make_sim(catalog, **kwargs):
    return Simulation(catalog, belt=AsteroidBelt(count=10, seed=0), **kwargs)


def test_independent_instances_do_not_share_state(single_planet):
    a = make_sim(single_planet)
    b = make_sim(single_planet)
    a.set_time_speed(5)
    a.step()
    assert b.orbits.simulation_time == 0
    assert a.camera is not b.camera


def test_step_advances_time_by_time_speed(single_planet):
    sim = make_sim(single_planet)
    sim.set_time_speed(2.5)
    for _ in range(4):
        sim.step()
    assert sim.orbits.simulation_time == pytest.approx(10)


def test_time_speed_is_clamped(single_planet):
    sim = make_sim(single_planet)
    assert sim.set_time_speed(1000) == 10
    assert sim.set_time_speed(-1000) == -10
    assert sim.set_time_speed(0) == 0


def test_select_known_body_focuses_camera(single_planet):
    sim = make_sim(single_planet)
    assert sim.select_object("Earth")
    np.testing.assert_allclose(sim.camera.target, sim.orbits.position_of("Earth"))
    assert sim.focused_name == "Earth"
    assert sim.focus_label == "Earth"


def test_select_sun_resets_view(single_planet):
    sim = make_sim(single_planet)
    sim.select_object("Earth")
    assert sim.select_object("Sun")
    assert sim.focused_name is None
    np.testing.assert_array_equal(sim.camera.target, np.zeros(3))
    assert sim.focus_label == "System Origin"


def test_select_unknown_body_is_a_logged_no_op(single_planet, caplog):
    sim = make_sim(single_planet)
    target = sim.camera.target.copy()
    with caplog.at_level(logging.WARNING):
        assert not sim.select_object("Vulcan")
    assert "Vulcan" in caplog.text
    np.testing.assert_array_equal(sim.camera.target, target)
    assert sim.focused_name is None


def test_focused_body_is_followed(single_planet):
    sim = make_sim(single_planet)
    sim.select_object("Earth")
    for _ in range(10):
        sim.step()
    earth = sim.orbits.position_of("Earth")
    np.testing.assert_allclose(sim.camera.target, earth)
    assert np.linalg.norm(sim.camera.position - earth) == pytest.approx(30)


def test_follow_can_be_disabled(single_planet):
    sim = make_sim(single_planet, follow_focus=False)
    sim.select_object("Earth")
    start = sim.camera.target.copy()
    sim.step()
    np.testing.assert_array_equal(sim.camera.target, start)


def test_show_info(single_planet, caplog):
    sim = make_sim(single_planet)
    assert sim.show_info("Sun")
    assert sim.info_text == "Sun - Our Star"
    with caplog.at_level(logging.WARNING):
        assert not sim.show_info("Nibiru")
    assert sim.info_text == "Sun - Our Star"


def test_reset_time(single_planet):
    sim = make_sim(single_planet)
    sim.step()
    sim.reset_time()
    assert sim.orbits.simulation_time == 0


def test_resize_updates_camera_aspect(single_planet):
    sim = make_sim(single_planet, camera=CameraController(aspect=1.0))
    sim.resize(1600, 800)
    assert sim.camera.aspect == 2.0
    sim.resize(0, 800)
    assert sim.camera.aspect == 2.0


def test_bundled_catalog_groups():
    sim = make_sim(load_catalog())
    groups = sim.grouped_names()
    assert groups["Sun"] == ["Sun"]
    assert "Moon" in groups["Inner Planets & Moons"]
    assert "Titan" in groups["Outer Planets & Major Moons"]
    assert "Pluto" in groups["Dwarf Planets"]
