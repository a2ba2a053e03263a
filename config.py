"""
General config file for the Orrery
Contains constants and global variables which can be altered.
Can make things go wrong...  so...  good luck :)
"""
import math

# --- Window ---
SCREEN_WIDTH = 1400
SCREEN_HEIGHT = 800
FPS = 60
WINDOW_TITLE = "Orrery | Solar System"

# Colors
BLACK = (0, 0, 0)
WHITE = (255, 255, 255)
GREY = (30, 30, 30)
MID_GREY = (90, 90, 90)
LIGHT_GREY = (135, 135, 135)
PANEL_BG = (12, 12, 20)
BLUE = (100, 149, 237)
GREEN = (120, 138, 48) # #788a30
DUSTY_RED = (180, 80, 80)
HIGHLIGHT = (255, 215, 0)

# --- Catalog ---
CATALOG_FILE = "celestial_data.json"
ROOT_GROUP = "sun"
# group key -> label shown in the object selector (display order)
BODY_GROUPS = {
    "sun": "Sun",
    "inner": "Inner Planets & Moons",
    "outer": "Outer Planets & Major Moons",
    "dwarf": "Dwarf Planets",
}
TEXTURE_KINDS = ("rocky", "gas")

# --- Camera ---
CAMERA_START_POSITION = (200.0, 100.0, 200.0)
CAMERA_BASE_RADIUS = 200.0
CAMERA_FOCUS_RADIUS = 30.0
CAMERA_ROTATE_SPEED = 0.5
CAMERA_ROTATE_SCALE = 0.01 # pixels -> radians, applied on top of rotate speed
CAMERA_ZOOM_SPEED = 0.1
CAMERA_DAMPING = 0.05
CAMERA_MIN_SCALE = 1.0
CAMERA_MAX_SCALE = 100.0
CAMERA_PHI_MIN = 0.1
CAMERA_PHI_MAX = math.pi - 0.1
CAMERA_RESET_THETA = 0.0
CAMERA_RESET_PHI = math.pi / 3
CAMERA_FOV_DEG = 45.0
CAMERA_NEAR = 0.1
CAMERA_FAR = 50000.0
PRIMARY_BUTTON = 1

# --- Time ---
TIME_SPEED_DEFAULT = 1.0
TIME_SPEED_MIN = -10.0
TIME_SPEED_MAX = 10.0
SPIN_STEP = 0.01 # radians per frame, independent of time speed
FOLLOW_FOCUSED_BODY = True

# --- Textures ---
PLANET_TEXTURE_SIZE = 128
GAS_TEXTURE_SIZE = 256
PLANET_TEXTURE_DETAIL = 4
PLANET_TEXTURE_ROUGHNESS = 0.7
RING_TEXTURE_DETAIL = 2
RING_TEXTURE_ROUGHNESS = 0.9
GAS_BANDS = 12
GAS_STORMS = 50
TEXTURE_SEED = None # int for reproducible textures

# --- Asteroid belt ---
ASTEROID_COUNT = 2000
ASTEROID_MIN_RADIUS = 35.0
ASTEROID_MAX_RADIUS = 45.0
ASTEROID_SPEED_FACTOR = 0.5
ASTEROID_HEIGHT = 1.0

# --- Drawing ---
ORBIT_SEGMENTS = 128
MIN_BODY_RADIUS_PIXELS = 2
MAX_BODY_RADIUS_PIXELS = 400
ORBIT_PICK_TOLERANCE = 4.0 # pixels
CLICK_SLOP = 4 # pixels a press may move and still count as a click
DOUBLE_CLICK_MS = 500

# --- UI layout ---
SIDE_PANEL_WIDTH = 230
SELECTOR_ROW_HEIGHT = 18
BOTTOM_BAR_HEIGHT = 40
BUTTON_WIDTH = 40
SLIDER_HANDLE_RADIUS = 10
INFO_PANEL_WIDTH = 420

# Coordinate clamping limits for Pygame
COORD_MIN = -32760
COORD_MAX = 32760
