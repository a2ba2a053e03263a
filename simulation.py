import logging

from camera import CameraController
from catalog import find_body, grouped_names
from config import (
    FOLLOW_FOCUSED_BODY, SCREEN_HEIGHT, SCREEN_WIDTH, TEXTURE_SEED, TIME_SPEED_DEFAULT,
    TIME_SPEED_MAX, TIME_SPEED_MIN,
)
from physics import AsteroidBelt, OrbitalMotion

logger = logging.getLogger(__name__)


class Simulation:
    """
    Everything one running Orrery owns, in one place.

    1.  **catalog**: The immutable body tree (Sun at the root).
    2.  **camera**: The CameraController.
    3.  **orbits**: OrbitalMotion, where every body is right now.
    4.  **belt**: The asteroid belt.
    5.  **UI state**: time speed, focused body and the info panel text.

    Several of these can live side by side (the tests do exactly that), nothing is global.
    """

    def __init__(self, catalog, camera=None, belt=None, width=SCREEN_WIDTH, height=SCREEN_HEIGHT,
                 follow_focus=FOLLOW_FOCUSED_BODY):
        self.catalog = catalog
        self.camera = camera or CameraController(aspect=width / height)
        self.orbits = OrbitalMotion(catalog)
        self.belt = belt if belt is not None else AsteroidBelt(seed=TEXTURE_SEED)
        self.time_speed = TIME_SPEED_DEFAULT
        self.follow_focus = follow_focus
        self.focused_name = None
        self.info_text = ""

    def set_time_speed(self, value):
        self.time_speed = max(TIME_SPEED_MIN, min(TIME_SPEED_MAX, float(value)))
        return self.time_speed

    def step(self):
        """
        One frame:  camera update -> orbital update -> (follow the focused body).
        Called exactly once per frame by the main loop.
        """
        self.camera.update()
        self.orbits.advance(self.time_speed)
        self.belt.advance(self.time_speed)

        if self.follow_focus and self.focused_name is not None:
            self.camera.track(self.orbits.position_of(self.focused_name))

    def select_object(self, name):
        """
        Points the camera at a body picked in the selector.

        The Sun resets the view.  Unknown names are ignored (with a warning), the selector
        and the live table can get out of step without that being fatal.

        Returns:
            bool: True if the camera moved.
        """
        if name == self.catalog.name:
            self.reset_view()
            return True

        position = self.orbits.position_of(name)
        if position is None:
            logger.warning("Cannot focus on '%s': no such body", name)
            return False

        self.camera.focus_on_object(position)
        self.focused_name = name
        logger.info("Orbit centre set to: %s", name)
        return True

    def show_info(self, name):
        body = find_body(self.catalog, name)
        if body is None:
            logger.warning("No info for '%s': no such body", name)
            return False
        self.info_text = body.info
        return True

    def reset_view(self):
        self.focused_name = None
        self.camera.reset()

    def reset_time(self):
        self.orbits.reset_time()

    def resize(self, width, height):
        if width > 0 and height > 0:
            self.camera.set_aspect(width / height)

    def grouped_names(self):
        return grouped_names(self.catalog)

    @property
    def focus_label(self):
        return self.focused_name or "System Origin"
