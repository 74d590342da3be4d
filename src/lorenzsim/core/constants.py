"""Project-wide defaults for the Lorenz simulation."""

LORENZ_SIGMA = 10.0  # Lorenz sigma
LORENZ_RHO = 28.0    # Lorenz rho
LORENZ_BETA = 8.0 / 3.0  # Lorenz beta

DEFAULT_TIME_STEP = 0.01
DEFAULT_BUFFER_CAPACITY = 10_000
DEFAULT_STEPS_PER_TICK = 5
DEFAULT_SCALE = 15.0

INITIAL_STATE = (0.1, 0.0, 0.0)

# Drawing surface
DEFAULT_WIDTH = 1000
DEFAULT_HEIGHT = 800
DEFAULT_MARGIN = 50
DEFAULT_VERTICAL_SHIFT = 350
DEFAULT_TICK_INTERVAL_MS = 16
DEFAULT_LINEWIDTH = 1.0

GREEN_CHANNEL = 0.5
CAPTION = "Lorenz-Attractor Simulation – Click for Reset"
CAPTION_POSITION = (10, 20)
