import json
import logging
import os
import sys
from dataclasses import dataclass
from typing import Optional

from config import BODY_GROUPS, CATALOG_FILE, ROOT_GROUP, TEXTURE_KINDS

"""
CATALOG MODULE
--------------
Loads the static description of the solar system from JSON and turns it into a tree of
`CelestialBody` objects with the Sun as the root.

The file has two top-level keys:
    "sun":    {radius, color, info}
    "bodies": {name: {radius, distance, period, color, orbitColor, info, group,
                      texture?, rings?, moons?: {name: {...}}}}

Everything is validated while loading.  Bad data (a zero period, a negative radius,
two bodies with the same name...) raises a CatalogError straight away, otherwise it would
turn into NaN positions somewhere in the middle of the render loop.
"""

logger = logging.getLogger(__name__)

SUN_NAME = "Sun"


class CatalogError(ValueError):
    """Raised when the catalog data is malformed."""


@dataclass(frozen=True)
class Rings:
    inner: float
    outer: float
    color: str


@dataclass(frozen=True)
class CelestialBody:
    name: str
    radius: float
    distance: float
    period: Optional[float]
    color: str
    orbit_color: str
    info: str
    group: str
    texture: str = "rocky"
    rings: Optional[Rings] = None
    moons: tuple = ()

    @property
    def is_root(self):
        return self.period is None


def resource_path(relative_path):
    """ Get absolute path to resource, works for dev and for PyInstaller """
    base_path = getattr(sys, "_MEIPASS", os.path.dirname(os.path.abspath(__file__)))
    return os.path.join(base_path, relative_path)


def parse_hex_color(value):
    """
    Converts a '#rrggbb' string into an (r, g, b) tuple.

    Raises:
        CatalogError: if the string is not a 6 digit hex colour.
    """
    if not isinstance(value, str) or len(value) != 7 or not value.startswith("#"):
        raise CatalogError(f"Invalid colour {value!r}, expected '#rrggbb'")
    try:
        return tuple(int(value[i:i + 2], 16) for i in (1, 3, 5))
    except ValueError:
        raise CatalogError(f"Invalid colour {value!r}, expected '#rrggbb'") from None


def _number(entry, key, name):
    value = entry.get(key)
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise CatalogError(f"{name}: '{key}' must be a number, got {value!r}")
    return float(value)


def _color(entry, key, name):
    value = entry.get(key)
    try:
        parse_hex_color(value)
    except CatalogError as e:
        raise CatalogError(f"{name}: '{key}' {e}") from None
    return value


def _parse_rings(entry, name):
    raw = entry.get("rings")
    if raw is None:
        return None
    inner = _number(raw, "inner", name)
    outer = _number(raw, "outer", name)
    if inner <= 0 or outer <= inner:
        raise CatalogError(f"{name}: rings need 0 < inner < outer, got {inner} / {outer}")
    return Rings(inner=inner, outer=outer, color=_color(raw, "color", name))


def _parse_body(name, entry, group, seen):
    """Builds one orbiting body (and, recursively, its moons)."""
    if not isinstance(entry, dict):
        raise CatalogError(f"{name}: expected an object, got {type(entry).__name__}")
    if name in seen:
        raise CatalogError(f"Duplicate body name '{name}'")
    seen.add(name)

    radius = _number(entry, "radius", name)
    distance = _number(entry, "distance", name)
    period = _number(entry, "period", name)
    if radius <= 0:
        raise CatalogError(f"{name}: radius must be > 0, got {radius}")
    if distance <= 0:
        raise CatalogError(f"{name}: distance must be > 0, got {distance}")
    if period <= 0:
        raise CatalogError(f"{name}: period must be > 0, got {period}")

    # Moons inherit their parent's group, top-level bodies must name one.
    group = entry.get("group", group)
    if group not in BODY_GROUPS or group == ROOT_GROUP:
        raise CatalogError(f"{name}: unknown group {group!r}")

    texture = entry.get("texture", "rocky")
    if texture not in TEXTURE_KINDS:
        raise CatalogError(f"{name}: unknown texture kind {texture!r}")

    raw_moons = entry.get("moons") or {}
    if not isinstance(raw_moons, dict):
        raise CatalogError(f"{name}: 'moons' must be an object")
    moons = tuple(_parse_body(moon_name, moon_entry, group, seen) for moon_name, moon_entry in raw_moons.items())

    return CelestialBody(
        name=name,
        radius=radius,
        distance=distance,
        period=period,
        color=_color(entry, "color", name),
        orbit_color=_color(entry, "orbitColor", name),
        info=str(entry.get("info", "")),
        group=group,
        texture=texture,
        rings=_parse_rings(entry, name),
        moons=moons,
    )


def build_catalog(data):
    """
    Builds the body tree from already decoded catalog data.

    Args:
        data (dict): {"sun": {...}, "bodies": {...}}

    Returns:
        CelestialBody: the Sun, with the planets as its moons.
    """
    if not isinstance(data, dict) or not isinstance(data.get("sun"), dict):
        raise CatalogError("Catalog needs a 'sun' object")
    bodies = data.get("bodies")
    if not isinstance(bodies, dict):
        raise CatalogError("Catalog needs a 'bodies' object")

    sun_entry = data["sun"]
    sun_radius = _number(sun_entry, "radius", SUN_NAME)
    if sun_radius <= 0:
        raise CatalogError(f"{SUN_NAME}: radius must be > 0, got {sun_radius}")

    seen = {SUN_NAME}
    children = tuple(_parse_body(name, entry, None, seen) for name, entry in bodies.items())
    sun_color = _color(sun_entry, "color", SUN_NAME)
    return CelestialBody(
        name=SUN_NAME,
        radius=sun_radius,
        distance=0.0,
        period=None,
        color=sun_color,
        orbit_color=sun_color,
        info=str(sun_entry.get("info", "")),
        group=ROOT_GROUP,
        moons=children,
    )


def load_catalog(path=None):
    """
    Loads and validates the catalog JSON file.

    Args:
        path (str): file to read, defaults to the bundled celestial_data.json.

    Raises:
        CatalogError: if the file is missing, is not JSON or holds bad data.
    """
    path = path or resource_path(CATALOG_FILE)
    try:
        with open(path, mode="r", encoding="utf-8") as f:
            data = json.load(f)
    except OSError as e:
        raise CatalogError(f"Could not read catalog '{path}': {e}") from e
    except json.JSONDecodeError as e:
        raise CatalogError(f"Catalog '{path}' is not valid JSON: {e}") from e

    root = build_catalog(data)
    logger.info("Loaded %d bodies from %s", sum(1 for _ in iter_bodies(root)), path)
    return root


def iter_bodies(root, parent=None):
    """Depth first walk yielding (body, parent) pairs, root first."""
    yield root, parent
    for moon in root.moons:
        yield from iter_bodies(moon, root)


def find_body(root, name):
    for body, _ in iter_bodies(root):
        if body.name == name:
            return body
    return None


def grouped_names(root):
    """
    Names for the object selector, grouped by category in display order.
    Empty groups are left out.
    """
    groups = {label: [] for label in BODY_GROUPS.values()}
    for body, _ in iter_bodies(root):
        groups[BODY_GROUPS[body.group]].append(body.name)
    return {label: names for label, names in groups.items() if names}
