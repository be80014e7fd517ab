# constants.py
"""
Application-level constants.

These values are static and do not change between simulation runs.
They cover the particle physics coefficients, the apple target's decay,
and the rendering and HUD layout. Experimental settings (seed, pool
capacity, burst size, render mode) live in `config.json`.
"""

# Visualization settings
FPS = 60
TITLE = "Firework Particles"
BACKGROUND_COLOR = (0, 0, 0)
DEFAULT_WINDOW_SIZE = (1280, 720)

# --- Particle physics (per display frame) ---
PARTICLE_MIN_START_SIZE = 1.0
PARTICLE_MAX_START_SIZE = 6.0
PARTICLE_SPEED_RANGE = 1.5     # Initial speed bias is sampled from [-1.5, 1.5].
PARTICLE_DAMPING = 0.98        # Fraction of last frame's displacement carried over.
PARTICLE_GRAVITY = 0.1         # Downward bias added to vertical motion.
PARTICLE_DECAY = 0.1           # Size lost per frame.
PARTICLE_MIN_SIZE = 0.2        # Decay stops here; off-screen particles are forced to it.
PARTICLE_DEATH_SIZE = 0.3      # Particles at or below this size are pruned.
PARTICLE_GLOW_RADIUS = 15

# --- Proximity connections ---
CONNECTION_LINE_WIDTH = 0.2

# --- Apple target ---
TARGET_START_SIZE = 20.0
TARGET_DECAY = 0.1
TARGET_EXPIRE_SIZE = 0.3
TARGET_PLACEMENT_ATTEMPTS = 100  # Resamples before giving up on avoiding the HUD.

# --- HUD ---
TEXT_PADDING = 20
TEXT_HEIGHT = 60               # Height of the HUD zone kept clear of targets.
HUD_RESERVED_WIDTH = 300       # Width of the same zone, from the right edge.
HUD_TEXT_COLOR = (255, 255, 255)
HUD_OUTLINE_COLOR = (0, 0, 0)
HUD_HINT = "Click to create firework"
METRICS_WINDOW = 120           # Frames kept for the rolling FPS readout.

# --- Bloom effect for the glow render mode ---
BLOOM_SCALE = 8                # Downscale factor used to blur the glow layer.
GLOW_ALPHA = 90                # Alpha of a glow halo before blurring (0-255).
