import argparse
import logging
import sys

import pygame

from catalog import CatalogError, load_catalog
from config import *
from physics import AsteroidBelt
from renderer import Orrery
from simulation import Simulation

logger = logging.getLogger("orrery")


def parse_args(argv=None):
    parser = argparse.ArgumentParser(description="Interactive solar system orrery")
    parser.add_argument(
        "--catalog",
        default=None,
        help="Path to a catalog JSON file (defaults to the bundled celestial_data.json).",
    )
    parser.add_argument(
        "--seed",
        type=int,
        default=TEXTURE_SEED,
        help="Seed for textures and the asteroid belt, for a reproducible scene.",
    )
    parser.add_argument("--verbose", action="store_true", help="Log debug messages.")
    return parser.parse_args(argv)


def handle_event(event, simulation, orrery, state):
    """
    The input adapter: turns one pygame event into controller calls.
    Only state changes here, drawing is left to the frame loop.

    `state` carries what the adapter needs between events (press position, middle click time).
    """
    camera = simulation.camera

    # UI Event Handling
    ui_action = orrery.handle_ui_event(event)
    if ui_action == "RESET_VIEW":
        simulation.reset_view()
        return
    elif ui_action == "RESET_TIME":
        simulation.reset_time()
        return
    elif isinstance(ui_action, tuple) and ui_action[0] == "SELECT_OBJECT":
        simulation.select_object(ui_action[1])
        return

    if event.type == pygame.MOUSEBUTTONDOWN:
        if event.button == 1:
            if not orrery.is_over_ui(event.pos):
                camera.on_pointer_down(event.button, *event.pos)
                state["press_pos"] = event.pos
        elif event.button == 2:
            now = pygame.time.get_ticks()
            if state["last_middle_click"] and (now - state["last_middle_click"] < DOUBLE_CLICK_MS):
                simulation.reset_view()
                state["last_middle_click"] = 0
            else:
                state["last_middle_click"] = now
        elif event.button == 3:
            orrery.handle_right_click(event.pos)
        elif event.button == 4:
            camera.on_scroll(-1)
        elif event.button == 5:
            camera.on_scroll(1)

    elif event.type == pygame.MOUSEBUTTONUP and event.button == 1:
        was_dragging = camera.drag_active
        camera.on_pointer_up()
        press_pos = state.pop("press_pos", None)
        if was_dragging and press_pos is not None:
            moved = abs(event.pos[0] - press_pos[0]) + abs(event.pos[1] - press_pos[1])
            if moved <= CLICK_SLOP:
                orrery.handle_click(event.pos)

    elif event.type == pygame.MOUSEMOTION:
        camera.on_pointer_move(*event.pos)

    elif event.type == pygame.VIDEORESIZE:
        orrery.handle_resize(event.w, event.h)


def main(argv=None):
    """
    The Main Entry Point.

    Sets up the Pygame window, initializes the simulation, and runs the main loop.

    The Loop (once per frame):
    1.  **Event Handling**: UI first, then the camera (drag, wheel, clicks).
    2.  **Update**: `simulation.step()` runs the camera update and then moves the planets
        by the current time speed.
    3.  **Draw**: `orrery.draw()` renders the frame.
    """
    args = parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

    try:
        catalog = load_catalog(args.catalog)
    except CatalogError as e:
        logger.error("Could not load the catalog: %s", e)
        sys.exit(1)

    pygame.init()
    screen = pygame.display.set_mode((SCREEN_WIDTH, SCREEN_HEIGHT), pygame.RESIZABLE)
    pygame.display.set_caption(WINDOW_TITLE)

    clock = pygame.time.Clock()
    main_body_font = pygame.font.Font(None, 18)
    ui_font = pygame.font.Font(None, 28)

    simulation = Simulation(catalog, belt=AsteroidBelt(seed=args.seed))
    orrery = Orrery(simulation, SCREEN_WIDTH, SCREEN_HEIGHT, texture_seed=args.seed)

    state = {"last_middle_click": 0}
    running = True
    while running:
        clock.tick(FPS)

        for event in pygame.event.get():
            if event.type == pygame.QUIT:
                running = False
                continue
            handle_event(event, simulation, orrery, state)

        simulation.step()
        orrery.draw(screen, main_body_font, ui_font)
        pygame.display.flip()

    pygame.quit()
    sys.exit()


if __name__ == '__main__':
    main()
