"""
config.py — Shared constants for the entire application.
No logic, no imports from internal modules.
"""

# ── Board ─────────────────────────────────────────────────────────
ROWS, COLS      = 20, 20
INITIAL_SNAKE   = (45, 65, 85)   # tail-first, head-last linear indices
INITIAL_HEADING = "down"

# ── Gameplay ──────────────────────────────────────────────────────
OBSTACLE_COUNT  = 20             # cells placed when obstacles are enabled
DEFAULT_DIFFICULTY = "medium"

DIFFICULTIES = {
    "easy":   {"label": "Easy",   "interval_ms": 180},
    "medium": {"label": "Medium", "interval_ms": 140},
    "hard":   {"label": "Hard",   "interval_ms": 100},
}

# ── Engine States ─────────────────────────────────────────────────
STATE_IDLE    = "idle"
STATE_RUNNING = "running"
STATE_OVER    = "over"

# ── Host: input ───────────────────────────────────────────────────
SWIPE_THRESHOLD = 8.0            # pixels of drag before a swipe counts

# ── Host: window ──────────────────────────────────────────────────
CELL            = 20
PANEL_H         = 50
GAME_W, GAME_H  = COLS * CELL, ROWS * CELL
OFFSET_X        = 10
OFFSET_Y        = PANEL_H + 10
WIDTH, HEIGHT   = GAME_W + 2 * OFFSET_X, GAME_H + OFFSET_Y + 10
FPS             = 60

# ── Host: colours ─────────────────────────────────────────────────
BG          = (224, 247, 250)
EMPTY_COL   = (245, 250, 250)
GRID_COL    = (214, 226, 228)
HEAD_COL    = (0,   200, 83)
BODY_COL    = (105, 240, 174)
FOOD_COL    = (255, 87,  34)
OBSTACLE_COL = (97,  97,  97)
UI_COL      = (55,  71,  79)
PANEL_BG    = (255, 255, 255)
OVERLAY_BG  = (255, 255, 255, 215)
