"""Sandbox-wide constants for Deepfield."""

# --- Display ---
SCREEN_WIDTH = 1280
SCREEN_HEIGHT = 720
FPS = 60
TITLE = "Deepfield"

# --- Colors (RGB) ---
BLACK = (0, 0, 0)
WHITE = (255, 255, 255)
LIGHT_GREY = (180, 180, 190)

# HUD / UI accent colors
AMBER = (255, 191, 0)
CYAN = (0, 200, 220)
RED_ALERT = (200, 40, 40)
SCAN_GREEN = (0, 255, 0)

# --- UI Panel ---
PANEL_BG = (20, 20, 30, 200)
PANEL_BORDER = (60, 60, 80)

# Spectrograph line palette, red to violet
SPECTRUM_PALETTE: list[tuple[int, int, int]] = [
    (255, 0, 0),
    (255, 136, 0),
    (255, 255, 0),
    (0, 255, 0),
    (0, 255, 255),
    (0, 136, 255),
    (255, 0, 255),
]

# --- Scales (world units) ---
SCALE_UNIVERSE = 100_000_000
SCALE_GALAXY = 1_000_000
SCALE_SYSTEM = 500
GRAVITY = 50.0

# --- Simulation timing ---
MAX_FRAME_DELTA = 0.1          # Seconds; longer frames are clipped
DEFAULT_TIME_SCALE = 0.1
PHYSICS_TIME_MULTIPLIER = 5.0  # System physics runs faster than the clock
PHYSICS_SUBSTEPS = 2
GALAXY_ROTATION_RATE = 0.005   # Radians per galaxy-second per unit speed

# --- Transitions ---
TRANSITION_TIMEOUT = 3.0       # Seconds before a transition is forced
CAMERA_DAMPING = 0.05          # Fraction of remaining distance per tick

# --- Autopilot ---
AUTOPILOT_FIRST_DELAY = 2.0
AUTOPILOT_DELAY = 5.0
AUTOPILOT_MIN_UNIVERSE_AGE = 1.0

# --- Big bang ---
BIG_BANG_FADE_RATE = 0.5       # Flash intensity lost per second

# --- Generation defaults ---
DEFAULT_SEED = 1337
DEFAULT_FILAMENT_SCATTER = 0.04
