"""
model.py — Model layer.

Owns ALL game state and rules. Zero rendering, zero input handling, zero I/O.
The host drives it: it calls tick() on its own clock, forwards direction
requests, and subscribes to the engine's events.

Classes:
    Direction   — immutable (dx, dy) heading
    Difficulty  — closed set of speed tiers, each mapped to a tick interval
    Board       — fixed-size grid addressed by linear cell index
    GameEngine  — session state and the per-tick rules
"""

import logging
import random
from collections import deque
from enum import Enum
from typing import Callable, Dict, Iterator, List, Mapping, Optional, Tuple

from .config import (
    ROWS, COLS, INITIAL_SNAKE, INITIAL_HEADING,
    OBSTACLE_COUNT, DIFFICULTIES, DEFAULT_DIFFICULTY,
    STATE_IDLE, STATE_RUNNING, STATE_OVER,
)

logger = logging.getLogger(__name__)


class ConfigurationError(ValueError):
    """The board, obstacle count or starting snake cannot fit together."""


# ─────────────────────────── Direction ───────────────────────────
class Direction:
    """Immutable 2-D unit heading. Screen coordinates: UP is dy = -1."""
    UP    = None  # filled below after class definition
    DOWN  = None
    LEFT  = None
    RIGHT = None

    def __init__(self, name: str, x: int, y: int):
        self.name = name
        self.x = x
        self.y = y

    def is_opposite(self, other: "Direction") -> bool:
        return self.x == -other.x and self.y == -other.y

    @classmethod
    def from_name(cls, name: str) -> "Direction":
        for d in ALL_DIRS:
            if d.name == name.lower():
                return d
        raise ValueError(f"Unknown direction: {name!r}")

    def __eq__(self, other):
        return isinstance(other, Direction) and self.x == other.x and self.y == other.y

    def __hash__(self):
        return hash((self.x, self.y))

    def __repr__(self):
        return f"Direction.{self.name.upper()}"


Direction.UP    = Direction("up",     0, -1)
Direction.DOWN  = Direction("down",   0,  1)
Direction.LEFT  = Direction("left",  -1,  0)
Direction.RIGHT = Direction("right",  1,  0)
ALL_DIRS = (Direction.UP, Direction.DOWN, Direction.LEFT, Direction.RIGHT)


# ─────────────────────────── Difficulty ──────────────────────────
class Difficulty(Enum):
    EASY   = "easy"
    MEDIUM = "medium"
    HARD   = "hard"

    @property
    def interval_ms(self) -> int:
        return DIFFICULTIES[self.value]["interval_ms"]

    @property
    def label(self) -> str:
        return DIFFICULTIES[self.value]["label"]

    @property
    def index(self) -> int:
        return list(Difficulty).index(self)

    @classmethod
    def from_index(cls, index: int) -> "Difficulty":
        """Look up a tier by position, clamping stale stored values into range."""
        members = list(cls)
        return members[max(0, min(len(members) - 1, index))]


_untimed = [d.value for d in Difficulty if d.value not in DIFFICULTIES]
if _untimed:
    raise ConfigurationError(f"No difficulty settings for: {', '.join(_untimed)}")


# ───────────────────────────── Board ─────────────────────────────
class Board:
    """
    Fixed-size grid. Cell index = y * cols + x.

    Pure geometry: conversions never reject out-of-range input, callers
    check in_bounds() themselves.
    """

    def __init__(self, rows: int = ROWS, cols: int = COLS):
        if rows <= 0 or cols <= 0:
            raise ConfigurationError(f"Board must be at least 1x1, got {cols}x{rows}")
        self._rows = rows
        self._cols = cols

    @property
    def rows(self) -> int:
        return self._rows

    @property
    def cols(self) -> int:
        return self._cols

    @property
    def total_cells(self) -> int:
        return self._rows * self._cols

    def to_coordinate(self, index: int) -> Tuple[int, int]:
        return index % self._cols, index // self._cols

    def to_index(self, x: int, y: int) -> int:
        return y * self._cols + x

    def in_bounds(self, x: int, y: int) -> bool:
        return 0 <= x < self._cols and 0 <= y < self._rows

    def neighbour(self, index: int, direction: Direction) -> Tuple[int, int]:
        """Coordinate one step away. Off-board results are returned as-is."""
        x, y = self.to_coordinate(index)
        return x + direction.x, y + direction.y

    def cells(self) -> Iterator[int]:
        return iter(range(self.total_cells))

    def __repr__(self):
        return f"Board({self._cols}x{self._rows})"


# ─────────────────────────── GameEngine ──────────────────────────
EVENTS = ("food_eaten", "game_ended", "interval_changed", "settings_changed")


class GameEngine:
    """
    Single-player session. The host calls tick() once per timer fire.

    Snake cells are kept tail-first, head-last. start() reinitialises the
    existing snake deque and obstacle set in place, so references the
    host holds stay valid across runs.
    """

    def __init__(
        self,
        board: Optional[Board] = None,
        obstacle_count: int = OBSTACLE_COUNT,
        difficulty: Optional[Difficulty] = None,
        obstacles_enabled: bool = False,
        high_score: int = 0,
        initial_snake: Tuple[int, ...] = INITIAL_SNAKE,
        initial_direction: Direction = Direction.from_name(INITIAL_HEADING),
        rng: Optional[random.Random] = None,
    ):
        self.board = board if board is not None else Board()
        self._initial_snake = tuple(initial_snake)
        self._initial_direction = initial_direction
        self._check_initial_snake()
        self._check_obstacle_count(obstacle_count)

        self.obstacle_count: int = obstacle_count
        self.difficulty: Difficulty = difficulty or Difficulty(DEFAULT_DIFFICULTY)
        self.obstacles_enabled: bool = obstacles_enabled
        self.high_score: int = high_score
        self._rng = rng or random.Random()
        self._listeners: Dict[str, List[Callable]] = {name: [] for name in EVENTS}

        self.state: str = STATE_IDLE
        self.death_reason: Optional[str] = None
        self.score: int = 0
        self.snake: deque = deque(self._initial_snake)
        self.direction: Direction = initial_direction
        self.food: Optional[int] = None
        self.obstacles: set = set()

        self.place_food()
        if self.obstacles_enabled:
            self.place_obstacles()

    # ── Accessors ────────────────────────────────────────────────
    @property
    def is_playing(self) -> bool:
        return self.state == STATE_RUNNING

    @property
    def head(self) -> int:
        return self.snake[-1]

    @property
    def tick_interval_ms(self) -> int:
        return self.difficulty.interval_ms

    # ── Events ───────────────────────────────────────────────────
    def subscribe(self, event: str, callback: Callable) -> None:
        if event not in self._listeners:
            raise ValueError(f"Unknown event {event!r}; expected one of {', '.join(EVENTS)}")
        self._listeners[event].append(callback)

    def unsubscribe(self, event: str, callback: Callable) -> None:
        if event in self._listeners and callback in self._listeners[event]:
            self._listeners[event].remove(callback)

    def _emit(self, event: str, *args) -> None:
        for callback in list(self._listeners[event]):
            callback(*args)

    # ── Commands ─────────────────────────────────────────────────
    def start(self) -> int:
        """
        Hard reset into a fresh run.

        Returns the tick interval (ms) the host should arm its clock with.
        Called from idle, paused or over alike; there is no resume.
        """
        self.snake.clear()
        self.snake.extend(self._initial_snake)
        self.direction = self._initial_direction
        self.score = 0
        self.death_reason = None
        self.place_food()
        if self.obstacles_enabled:
            self.place_obstacles()
        self.state = STATE_RUNNING
        logger.info(
            f"Run started on {self.board} at {self.difficulty.label} "
            f"({self.tick_interval_ms}ms), obstacles={len(self.obstacles)}"
        )
        return self.tick_interval_ms

    def pause(self) -> None:
        """Freeze the run. The only way back into play is start()."""
        if self.state == STATE_RUNNING:
            self.state = STATE_IDLE
            logger.debug(f"Run paused at score {self.score}")

    def request_direction(self, direction: Direction) -> bool:
        """Change the heading for the next tick. Reversals are ignored."""
        if not self.is_playing:
            return False
        if direction.is_opposite(self.direction):
            return False
        self.direction = direction
        return True

    def tick(self) -> bool:
        """
        Advance one cell.
        Returns True if the snake moved, False on a no-op or a fatal move.
        """
        if not self.is_playing:
            return False

        x, y = self.board.neighbour(self.head, self.direction)
        if not self.board.in_bounds(x, y):
            self._end_run("wall")
            return False

        new_head = self.board.to_index(x, y)
        if new_head in self.obstacles:
            self._end_run("obstacle")
            return False
        # Checked against the pre-move body, tail cell included.
        if new_head in self.snake:
            self._end_run("self")
            return False

        self.snake.append(new_head)
        if new_head == self.food:
            self.score += 1
            self.place_food()
            self._emit("food_eaten", self.score)
        else:
            self.snake.popleft()
        return True

    # ── Placement ────────────────────────────────────────────────
    def _free_cells(self, blocked: set) -> List[int]:
        return [i for i in self.board.cells() if i not in blocked]

    def place_food(self) -> Optional[int]:
        """Pick a uniformly random cell clear of the snake and obstacles."""
        free = self._free_cells(set(self.snake) | self.obstacles)
        self.food = self._rng.choice(free) if free else None
        return self.food

    def place_obstacles(self, count: Optional[int] = None) -> set:
        """Replace the obstacle set with `count` cells clear of snake and food."""
        if count is None:
            count = self.obstacle_count
        self.obstacles.clear()
        blocked = set(self.snake)
        if self.food is not None:
            blocked.add(self.food)
        free = self._free_cells(blocked)
        if count > len(free):
            logger.warning(f"Only {len(free)} free cells left, placing that many obstacles instead of {count}")
            count = len(free)
        self.obstacles.update(self._rng.sample(free, count))
        return self.obstacles

    # ── Configuration ────────────────────────────────────────────
    def set_difficulty(self, difficulty: Difficulty) -> None:
        if not isinstance(difficulty, Difficulty):
            raise TypeError(f"Expected Difficulty, got {type(difficulty).__name__}")
        if difficulty is self.difficulty:
            return
        self.difficulty = difficulty
        logger.debug(f"Difficulty set to {difficulty.label} ({difficulty.interval_ms}ms)")
        self._emit("interval_changed", difficulty.interval_ms)
        self._emit("settings_changed", self.export_settings())

    def set_obstacles_enabled(self, enabled: bool) -> None:
        """Takes effect immediately: obstacles are regenerated or cleared now."""
        self.obstacles_enabled = bool(enabled)
        if self.obstacles_enabled:
            self.place_obstacles()
        else:
            self.obstacles.clear()
        logger.debug(f"Obstacles {'enabled' if enabled else 'disabled'}")
        self._emit("settings_changed", self.export_settings())

    def set_obstacle_count(self, count: int) -> None:
        self._check_obstacle_count(count)
        self.obstacle_count = count

    def reset_high_score(self) -> None:
        self.score = 0
        self.high_score = 0
        self._emit("settings_changed", self.export_settings())

    # ── Host key-value store ─────────────────────────────────────
    def export_settings(self) -> Dict[str, object]:
        return {
            "highScore": self.high_score,
            "difficulty": self.difficulty.index,
            "obstacles": self.obstacles_enabled,
        }

    def apply_settings(self, settings: Mapping[str, object]) -> None:
        """Load values previously produced by export_settings()."""
        self.high_score = int(settings.get("highScore", 0))
        self.difficulty = Difficulty.from_index(
            int(settings.get("difficulty", Difficulty.MEDIUM.index))
        )
        self.obstacles_enabled = bool(settings.get("obstacles", False))
        if self.obstacles_enabled:
            self.place_obstacles()
        else:
            self.obstacles.clear()

    # ── Private helpers ──────────────────────────────────────────
    def _end_run(self, reason: str) -> None:
        self.state = STATE_OVER
        self.death_reason = reason
        is_new_high_score = self.score > self.high_score
        if is_new_high_score:
            self.high_score = self.score
        logger.info(
            f"Run ended by {reason} collision with score {self.score} "
            f"(high score {self.high_score})"
        )
        if is_new_high_score:
            self._emit("settings_changed", self.export_settings())
        self._emit("game_ended", self.score, is_new_high_score)

    def _check_initial_snake(self) -> None:
        cells = self._initial_snake
        if not cells:
            raise ConfigurationError("Initial snake needs at least one cell")
        if len(set(cells)) != len(cells):
            raise ConfigurationError(f"Initial snake repeats a cell: {cells}")
        outside = [i for i in cells if not 0 <= i < self.board.total_cells]
        if outside:
            raise ConfigurationError(f"Initial snake cells {outside} are off {self.board}")

    def _check_obstacle_count(self, count: int) -> None:
        limit = self.board.total_cells - len(self._initial_snake) - 1
        if count < 0 or count > limit:
            raise ConfigurationError(
                f"Obstacle count must be between 0 and {limit} on {self.board}, got {count}"
            )

    def __repr__(self):
        return (
            f"<GameEngine state={self.state}, score={self.score}, "
            f"length={len(self.snake)}, food={self.food}>"
        )
