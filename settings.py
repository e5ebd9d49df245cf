# settings.py

from pathlib import Path

# Window / display
WINDOW_WIDTH = 1280
WINDOW_HEIGHT = 720
FPS = 60
TITLE = "Ship Captain"

# Colors
COLOR_BG = (237, 238, 201)
COLOR_PLAYER = (220, 210, 90)
COLOR_ENEMY = (200, 80, 80)
COLOR_NEUTRAL = (150, 150, 170)
COLOR_FLOOR = (58, 62, 78)
COLOR_WALL = (22, 22, 30)
COLOR_GRID_LINE = (40, 40, 60)
COLOR_PANEL = (3, 31, 76)
COLOR_PANEL_OUTLINE = (255, 255, 255)
COLOR_TEXT = (230, 230, 230)

# Highlight overlays (RGBA)
COLOR_HIGHLIGHT_SELECTED = (0, 255, 0, 90)
COLOR_HIGHLIGHT_MOVE = (60, 110, 220, 90)
COLOR_HIGHLIGHT_ATTACK = (220, 60, 60, 110)

# World
TILE_SIZE = 32

# Map data (Tiled JSON)
GROUND_LAYER_NAME = "Ground"
UNIT_LAYER_NAME = "Objects"
ASSETS_DIR = Path(__file__).resolve().parent / "assets"
DEFAULT_MAP_PATH = ASSETS_DIR / "maps" / "spaceship.json"

# Units
DEFAULT_PLAYER_SPRITE = "pc-1"
DEFAULT_HOSTILE_NAME = "Zombie"
DEFAULT_HOSTILE_SPRITE = "npc"
DEFAULT_HOSTILE_HP = 3
DEFAULT_HOSTILE_AP = 3

# Actions
ACTION_RADIUS = 1  # single-step movement / melee

# AI
AI_VISIBILITY_RANGE = 5
MELEE_RANGE = 1

# Presentation
MOVE_ANIMATION_SECONDS = 0.15
SIDE_PANEL_WIDTH = 200
MESSAGE_LOG_SIZE = 60
