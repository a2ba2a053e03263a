"""Tests for the procedural texture generator.

Unseeded textures differ on every call, so most checks are structural: shape, band layout,
edge wrapping.  Seeded calls are checked for reproducibility.
"""

from __future__ import annotations

import math

import numpy as np
import pytest

from catalog import build_catalog, find_body
from conftest import body, make_data
from textures import (
    create_gas_giant_texture, create_planet_texture, scroll_texture, storm_mask, texture_for,
)


def test_planet_texture_shape_and_type():
    tex = create_planet_texture(4, 0.7, "#8c8c8c")
    assert tex.shape == (128, 128, 3)
    assert tex.dtype == np.uint8


def test_planet_texture_only_darkens_base():
    tex = create_planet_texture(4, 0.5, "#808080", seed=1)
    assert tex.max() <= 128
    assert tex.min() >= int(128 * 0.95 ** 4) - 1
    assert (tex < 128).any()


def test_full_roughness_leaves_base_colour():
    tex = create_planet_texture(3, 1.0, "#123456", seed=2)
    assert np.all(tex == np.array([0x12, 0x34, 0x56], dtype=np.uint8))


def test_seeded_textures_are_reproducible():
    a = create_planet_texture(2, 0.6, "#aa5500", seed=42)
    b = create_planet_texture(2, 0.6, "#aa5500", seed=42)
    c = create_planet_texture(2, 0.6, "#aa5500", seed=43)
    np.testing.assert_array_equal(a, b)
    assert not np.array_equal(a, c)


@pytest.mark.parametrize(
    "kwargs",
    [
        {"detail": 0, "roughness": 0.5},
        {"detail": 2, "roughness": 1.5},
        {"detail": 2, "roughness": -0.1},
        {"detail": 2, "roughness": 0.5, "size": 100},
    ],
)
def test_planet_texture_rejects_bad_arguments(kwargs):
    detail = kwargs.pop("detail")
    roughness = kwargs.pop("roughness")
    with pytest.raises(ValueError):
        create_planet_texture(detail, roughness, "#ffffff", **kwargs)


def test_gas_giant_has_twelve_alternating_bands():
    tex = create_gas_giant_texture("#808080", storms=0)
    assert tex.shape == (256, 256, 3)
    rows = tex[:, 0, 0].astype(int)
    # Every row is uniform without storms.
    assert np.all(tex == tex[:, :1, :])
    runs = 1 + np.count_nonzero(np.diff(rows))
    assert runs == 12
    band_height = 256 // 12
    assert rows[0] > 128 > rows[band_height + 1]


def test_gas_giant_storms_only_lighten():
    plain = create_gas_giant_texture("#808080", storms=0)
    stormy = create_gas_giant_texture("#808080", storms=50, seed=9)
    assert np.all(stormy >= plain)
    assert np.any(stormy > plain)


def test_storm_mask_wraps_around_edges():
    mask = storm_mask(64, 0.0, 32.0, 5.0)
    # A storm centred on the left edge shows up on the right edge too.
    assert mask[32, 0] and mask[32, 63]
    assert not mask[32, 32]


def test_bands_tile_across_both_seams():
    tex = create_gas_giant_texture("#c08040", storms=0)
    # Horizontal seam: bands run sideways, so the first and last columns match.
    np.testing.assert_array_equal(tex[:, 0], tex[:, -1])
    # Vertical seam: an even band count keeps light/dark alternating across the wrap.
    assert tex[0, 0, 0] > tex[-1, 0, 0]


def test_texture_for_picks_generator_by_kind():
    data = make_data(
        Mars=body(25, 687),
        Jupiter=body(55, 4333, group="outer", texture="gas"),
    )
    root = build_catalog(data)
    assert texture_for(find_body(root, "Mars"), seed=1).shape == (128, 128, 3)
    assert texture_for(find_body(root, "Jupiter"), seed=1).shape == (256, 256, 3)


def test_scroll_texture_wraps_full_turn():
    tex = create_planet_texture(1, 0.3, "#336699", seed=5)
    np.testing.assert_array_equal(scroll_texture(tex, 2 * math.pi), tex)
    half = scroll_texture(tex, math.pi)
    np.testing.assert_array_equal(half[:, 64:], tex[:, :64])
