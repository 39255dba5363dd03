"""
controller.py — Controller layer (the engine's host).

Responsibilities:
  - Own the pygame event loop and the game clock.
  - Arm a pygame timer at the engine's tick interval; call engine.tick()
    each time it fires. Re-arm when the difficulty changes mid-run,
    disarm on pause and when the run ends.
  - Translate keyboard presses and mouse drags (swipes) into engine
    commands.
  - Know nothing about rendering details (that's the View's job).
  - Know nothing about game rules (that's the Model's job).

Settings are held in memory as the engine's exported snapshot; writing
them to durable storage is left to whoever embeds the controller.
"""

import logging
import sys
from typing import Dict, Optional

import pygame

from .config import WIDTH, HEIGHT, FPS, SWIPE_THRESHOLD
from .model import Difficulty, Direction, GameEngine
from .view import GameView

logger = logging.getLogger(__name__)

TICK_EVENT = pygame.USEREVENT + 1

KEY_DIRECTIONS = {
    pygame.K_UP:    Direction.UP,
    pygame.K_DOWN:  Direction.DOWN,
    pygame.K_LEFT:  Direction.LEFT,
    pygame.K_RIGHT: Direction.RIGHT,
    pygame.K_w:     Direction.UP,
    pygame.K_s:     Direction.DOWN,
    pygame.K_a:     Direction.LEFT,
    pygame.K_d:     Direction.RIGHT,
}

KEY_DIFFICULTIES = {
    pygame.K_1: Difficulty.EASY,
    pygame.K_2: Difficulty.MEDIUM,
    pygame.K_3: Difficulty.HARD,
}


def swipe_direction(dx: float, dy: float, threshold: float = SWIPE_THRESHOLD) -> Optional[Direction]:
    """Map a drag vector to a heading; the dominant axis wins."""
    if abs(dx) < threshold and abs(dy) < threshold:
        return None
    if abs(dx) > abs(dy):
        return Direction.RIGHT if dx > 0 else Direction.LEFT
    return Direction.DOWN if dy > 0 else Direction.UP


class GameController:
    """
    Owns the main loop.
    Glues Model <-> View without them knowing about each other.
    Every engine call happens on this loop's thread.
    """

    def __init__(self, engine: Optional[GameEngine] = None):
        pygame.init()
        self.screen = pygame.display.set_mode((WIDTH, HEIGHT))
        pygame.display.set_caption("Snake")
        self.clock = pygame.time.Clock()
        self.engine = engine or GameEngine()
        self.view = GameView(self.screen)
        self.settings: Dict[str, object] = self.engine.export_settings()
        self._drag_start = None

        self.engine.subscribe("game_ended", self._on_game_ended)
        self.engine.subscribe("interval_changed", self._on_interval_changed)
        self.engine.subscribe("settings_changed", self._on_settings_changed)
        self.engine.subscribe("food_eaten", self._on_food_eaten)

    # ── Public entry point ────────────────────────────────────────
    def run(self) -> None:
        """Start and run the game loop until the player quits."""
        while True:
            self.clock.tick(FPS)
            for event in pygame.event.get():
                self.handle_event(event)
            self.view.render(self.engine)

    # ── Clock ─────────────────────────────────────────────────────
    def _arm_timer(self, interval_ms: int) -> None:
        pygame.time.set_timer(TICK_EVENT, interval_ms)

    def _disarm_timer(self) -> None:
        pygame.time.set_timer(TICK_EVENT, 0)

    def toggle_play(self) -> None:
        """Play restarts from scratch; pause only freezes."""
        if self.engine.is_playing:
            self.engine.pause()
            self._disarm_timer()
        else:
            self.view.clear_result()
            self._arm_timer(self.engine.start())

    # ── Engine callbacks ──────────────────────────────────────────
    def _on_game_ended(self, final_score: int, is_new_high_score: bool) -> None:
        self._disarm_timer()
        self.view.show_result(final_score, is_new_high_score)

    def _on_interval_changed(self, interval_ms: int) -> None:
        if self.engine.is_playing:
            self._arm_timer(interval_ms)

    def _on_settings_changed(self, settings: Dict[str, object]) -> None:
        self.settings = dict(settings)
        logger.debug(f"Settings changed: {self.settings}")

    def _on_food_eaten(self, new_score: int) -> None:
        logger.debug(f"Food eaten, score {new_score}")

    # ── Event dispatch ────────────────────────────────────────────
    def handle_event(self, event: pygame.event.Event) -> None:
        if event.type == pygame.QUIT:
            self._quit()
        elif event.type == TICK_EVENT:
            self.engine.tick()
        elif event.type == pygame.KEYDOWN:
            self._handle_keydown(event.key)
        elif event.type == pygame.MOUSEBUTTONDOWN and event.button == 1:
            self._drag_start = event.pos
        elif event.type == pygame.MOUSEBUTTONUP and event.button == 1:
            self._drag_start = None
        elif event.type == pygame.MOUSEMOTION and self._drag_start is not None:
            self._handle_drag(event.pos)

    def _handle_keydown(self, key: int) -> None:
        if key in (pygame.K_q, pygame.K_ESCAPE):
            self._quit()
        elif key in KEY_DIRECTIONS:
            self.engine.request_direction(KEY_DIRECTIONS[key])
        elif key in (pygame.K_SPACE, pygame.K_RETURN):
            self.toggle_play()
        elif key in KEY_DIFFICULTIES:
            self.engine.set_difficulty(KEY_DIFFICULTIES[key])
        elif key == pygame.K_o:
            self.engine.set_obstacles_enabled(not self.engine.obstacles_enabled)
        elif key == pygame.K_h:
            self.engine.reset_high_score()

    def _handle_drag(self, pos) -> None:
        dx = pos[0] - self._drag_start[0]
        dy = pos[1] - self._drag_start[1]
        direction = swipe_direction(dx, dy)
        if direction is not None:
            self.engine.request_direction(direction)
            self._drag_start = pos

    # ── Utilities ─────────────────────────────────────────────────
    @staticmethod
    def _quit() -> None:
        pygame.quit()
        sys.exit()


def main() -> None:
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    GameController().run()
