"""Procedural planet textures.

Textures are plain (size, size, 3) uint8 numpy arrays, row = y, column = x.  They are meant
to be sampled with wrap-repeat addressing, so anything drawn across an edge continues on the
opposite side.  The renderer turns them into pygame surfaces.

Pass `seed=None` for a different texture on every call, or an int for a reproducible one.
"""
from __future__ import annotations

from typing import Optional

import numpy as np

from catalog import parse_hex_color
from config import (
    GAS_BANDS, GAS_STORMS, GAS_TEXTURE_SIZE, PLANET_TEXTURE_DETAIL, PLANET_TEXTURE_ROUGHNESS,
    PLANET_TEXTURE_SIZE, RING_TEXTURE_DETAIL, RING_TEXTURE_ROUGHNESS,
)

BAND_ALPHA = 0.1
STORM_ALPHA = 0.05
STORM_MIN_RADIUS = 10.0
STORM_MAX_RADIUS = 30.0
NOISE_MAX_ALPHA = 0.05


def _check_size(size: int) -> None:
    if size <= 0 or size & (size - 1):
        raise ValueError(f"Texture size must be a power of two, got {size}")


def _blend(pixels: np.ndarray, color, alpha) -> np.ndarray:
    """Alpha-composites `color` over float `pixels`; alpha may be a scalar or a per-pixel array."""
    alpha = np.asarray(alpha, dtype=float)
    if alpha.ndim == 2:
        alpha = alpha[..., None]
    return pixels * (1.0 - alpha) + np.asarray(color, dtype=float) * alpha


def _base(size: int, base_color: str) -> np.ndarray:
    return np.tile(np.array(parse_hex_color(base_color), dtype=float), (size, size, 1))


def create_planet_texture(detail: int, roughness: float, base_color: str,
                          size: int = PLANET_TEXTURE_SIZE, seed: Optional[int] = None) -> np.ndarray:
    """
    Rocky surface: the base colour with `detail` passes of speckled darkening.

    In every pass each pixel whose random draw beats `roughness` is darkened by up to 5 %,
    so roughness 1.0 leaves the base colour untouched and 0.0 speckles everything.
    """
    if detail < 1:
        raise ValueError(f"detail must be >= 1, got {detail}")
    if not 0.0 <= roughness <= 1.0:
        raise ValueError(f"roughness must be within [0, 1], got {roughness}")
    _check_size(size)

    rng = np.random.default_rng(seed)
    pixels = _base(size, base_color)
    for _ in range(detail):
        hit = rng.random((size, size)) > roughness
        # Shades below zero are transparent, hence the clip.
        shade = np.clip(rng.random((size, size)) * 0.1 - NOISE_MAX_ALPHA, 0.0, None)
        pixels = _blend(pixels, (0, 0, 0), np.where(hit, shade, 0.0))
    return np.clip(np.rint(pixels), 0, 255).astype(np.uint8)


def storm_mask(size: int, cx: float, cy: float, radius: float) -> np.ndarray:
    """Boolean disc of `radius` around (cx, cy), wrapped around the texture edges."""
    coords = np.arange(size) + 0.5
    dx = np.abs(coords - cx)
    dx = np.minimum(dx, size - dx)
    dy = np.abs(coords - cy)
    dy = np.minimum(dy, size - dy)
    return (dy[:, None] ** 2 + dx[None, :] ** 2) <= radius ** 2


def create_gas_giant_texture(base_color: str, size: int = GAS_TEXTURE_SIZE, bands: int = GAS_BANDS,
                             storms: int = GAS_STORMS, seed: Optional[int] = None) -> np.ndarray:
    """
    Banded gas giant: `bands` horizontal stripes alternating a 10 % white and 10 % black
    overlay (even bands light, odd bands dark), then `storms` faint white discs.
    """
    if bands < 1:
        raise ValueError(f"bands must be >= 1, got {bands}")
    _check_size(size)

    rng = np.random.default_rng(seed)
    pixels = _base(size, base_color)

    band_index = (np.arange(size) * bands) // size
    light = (band_index % 2 == 0)[:, None, None]
    pixels = np.where(light, _blend(pixels, (255, 255, 255), BAND_ALPHA), _blend(pixels, (0, 0, 0), BAND_ALPHA))

    for _ in range(storms):
        cx, cy = rng.random(2) * size
        radius = rng.random() * (STORM_MAX_RADIUS - STORM_MIN_RADIUS) + STORM_MIN_RADIUS
        mask = storm_mask(size, cx, cy, radius)
        pixels = _blend(pixels, (255, 255, 255), np.where(mask, STORM_ALPHA, 0.0))
    return np.clip(np.rint(pixels), 0, 255).astype(np.uint8)


def create_ring_texture(color: str, seed: Optional[int] = None) -> np.ndarray:
    return create_planet_texture(RING_TEXTURE_DETAIL, RING_TEXTURE_ROUGHNESS, color, seed=seed)


def texture_for(body, seed: Optional[int] = None) -> np.ndarray:
    if body.texture == "gas":
        return create_gas_giant_texture(body.color, seed=seed)
    return create_planet_texture(PLANET_TEXTURE_DETAIL, PLANET_TEXTURE_ROUGHNESS, body.color, seed=seed)


def scroll_texture(pixels: np.ndarray, spin: float) -> np.ndarray:
    """Shifts the texture sideways (with wrap) by `spin` radians of rotation."""
    width = pixels.shape[1]
    shift = int(round((spin / (2 * np.pi)) * width)) % width
    return np.roll(pixels, shift, axis=1)
