# --- Display ---
WIDTH = 800
HEIGHT = 600
FPS = 60

# --- World / Physics (per frame, not per second) ---
GRAVITY = 0.6               # added to vy every rendered frame
JUMP_IMPULSE = -10.0        # vy after a jump (negative = up)
GRACE_FRAMES = 60           # frames after start with the actor pinned & immune
MAX_QUEUED_COMMANDS = 8     # commands buffered between two frames; extras are refused
GROUND_HEIGHT = 20          # ground band at the bottom of the world

# --- Player ---
PLAYER_X_RATIO = 0.2        # actor's fixed x as a fraction of world width
PLAYER_HALF_W = 20
PLAYER_HALF_H = 20          # used by the ground/ceiling test
HITBOX_HALF = 15            # tighter box used against obstacles and for scoring

# --- Obstacles ---
OBSTACLE_WIDTH = 80
PIPE_SPACING = 350          # min distance between right edge and newest obstacle
MIN_OBSTACLE_EXTENT = 50    # min visible height of top and bottom segments
SPEED_SCORE_FACTOR = 0.2    # live speed = base_speed + score * factor
SEED_DEFAULT = None         # None -> random layout each launch

# --- Persistence ---
BEST_FILE_ENV = "FLOPBIRD_BEST_FILE"
BEST_FILE_DEFAULT = "~/.flopbird_best"

# --- Colors (RGB) ---
COLOR_BG = (5, 5, 5)
COLOR_GRID = (17, 17, 17)
COLOR_FG = (255, 255, 255)
COLOR_ACCENT = (0, 255, 0)
COLOR_PIPE = (26, 26, 26)
COLOR_GROUND = (0, 0, 0)
COLOR_DIM = (40, 120, 40)
COLOR_DANGER = (239, 68, 68)
