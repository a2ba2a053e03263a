"""Shared fixtures: small hand-made catalogs and a headless pygame."""

from __future__ import annotations

import os

# pygame must never open a real window under test.
os.environ.setdefault("SDL_VIDEODRIVER", "dummy")
os.environ.setdefault("SDL_AUDIODRIVER", "dummy")

import pytest

from catalog import build_catalog


def make_data(**bodies):
    return {
        "sun": {"radius": 8, "color": "#ffff00", "info": "Sun - Our Star"},
        "bodies": bodies,
    }


def body(distance, period, radius=1.0, group="inner", **extra):
    entry = {
        "radius": radius,
        "distance": distance,
        "period": period,
        "color": "#8c8c8c",
        "orbitColor": "#4169e1",
        "info": "info",
        "group": group,
    }
    entry.update(extra)
    return entry


@pytest.fixture
def single_planet():
    return build_catalog(make_data(Earth=body(20, 365)))


@pytest.fixture
def planet_with_moon():
    earth = body(20, 365, moons={"Moon": body(3, 27, radius=0.4)})
    return build_catalog(make_data(Earth=earth))
