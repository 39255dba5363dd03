"""
view.py — View layer.

Host-side only: the engine never imports this module.
Draws the board, the HUD panel and the idle / game-over overlays from a
GameEngine snapshot.

Public API:
    GameView(screen)         — bind to a pygame surface
    view.render(engine)      — draw the current frame
    view.show_result(...)    — remember the last run's outcome for the overlay
"""

import logging
from typing import Optional, Tuple

import pygame

from .config import (
    WIDTH, PANEL_H, GAME_W, GAME_H,
    OFFSET_X, OFFSET_Y, CELL,
    BG, EMPTY_COL, GRID_COL, HEAD_COL, BODY_COL, FOOD_COL, OBSTACLE_COL,
    UI_COL, PANEL_BG, OVERLAY_BG,
    STATE_IDLE, STATE_OVER,
)
from .model import GameEngine

logger = logging.getLogger(__name__)


class GameView:
    """Renders the complete game frame from a GameEngine snapshot."""

    def __init__(self, screen: pygame.Surface):
        self.screen = screen
        self._init_fonts()
        self._last_result: Optional[Tuple[int, bool]] = None

    # ── Main entry ───────────────────────────────────────────────
    def render(self, engine: GameEngine) -> None:
        self.screen.fill(BG)
        self._draw_panel(engine)
        self._draw_board(engine)

        if engine.state == STATE_OVER:
            self._draw_game_over_overlay(engine)
        elif engine.state == STATE_IDLE:
            self._draw_idle_overlay(engine)

        pygame.display.flip()

    def show_result(self, final_score: int, is_new_high_score: bool) -> None:
        self._last_result = (final_score, is_new_high_score)

    def clear_result(self) -> None:
        self._last_result = None

    # ── Board ────────────────────────────────────────────────────
    def _cell_rect(self, engine: GameEngine, index: int) -> pygame.Rect:
        x, y = engine.board.to_coordinate(index)
        return pygame.Rect(OFFSET_X + x * CELL + 1, OFFSET_Y + y * CELL + 1, CELL - 2, CELL - 2)

    def _draw_board(self, engine: GameEngine) -> None:
        pygame.draw.rect(self.screen, GRID_COL, (OFFSET_X, OFFSET_Y, GAME_W, GAME_H))
        for index in engine.board.cells():
            pygame.draw.rect(self.screen, EMPTY_COL, self._cell_rect(engine, index), border_radius=3)

        for index in engine.obstacles:
            pygame.draw.rect(self.screen, OBSTACLE_COL, self._cell_rect(engine, index), border_radius=4)

        if engine.food is not None:
            rect = self._cell_rect(engine, engine.food)
            pygame.draw.circle(self.screen, FOOD_COL, rect.center, rect.width // 2)

        for index in engine.snake:
            color = HEAD_COL if index == engine.head else BODY_COL
            pygame.draw.rect(self.screen, color, self._cell_rect(engine, index), border_radius=5)

    # ── HUD Panel ─────────────────────────────────────────────────
    def _draw_panel(self, engine: GameEngine) -> None:
        pygame.draw.rect(self.screen, PANEL_BG, (0, 0, WIDTH, PANEL_H))
        self.screen.blit(self.font_big.render(f"Score: {engine.score}", True, UI_COL), (14, 12))

        high = self.font_small.render(f"High: {engine.high_score}", True, UI_COL)
        self.screen.blit(high, high.get_rect(topright=(WIDTH - 14, 8)))
        flags = engine.difficulty.label + ("  +obstacles" if engine.obstacles_enabled else "")
        diff = self.font_small.render(flags, True, UI_COL)
        self.screen.blit(diff, diff.get_rect(topright=(WIDTH - 14, 26)))

    # ── Overlays ─────────────────────────────────────────────────
    def _draw_overlay_base(self) -> None:
        surf = pygame.Surface((GAME_W, GAME_H), pygame.SRCALPHA)
        surf.fill(OVERLAY_BG)
        self.screen.blit(surf, (OFFSET_X, OFFSET_Y))

    def _draw_text_line(self, text: str, cy: int, font: pygame.font.Font) -> int:
        surf = font.render(text, True, UI_COL)
        self.screen.blit(surf, surf.get_rect(center=(WIDTH // 2, cy)))
        return cy + surf.get_height() + 8

    def _draw_idle_overlay(self, engine: GameEngine) -> None:
        self._draw_overlay_base()
        cy = OFFSET_Y + GAME_H // 2 - 60
        cy = self._draw_text_line("SNAKE", cy, self.font_title)
        cy = self._draw_text_line("SPACE — PLAY / PAUSE", cy, self.font_med)
        cy = self._draw_text_line("ARROWS / DRAG — MOVE", cy, self.font_small)
        self._draw_text_line("1-3 SPEED   O OBSTACLES   H RESET HIGH", cy, self.font_small)

    def _draw_game_over_overlay(self, engine: GameEngine) -> None:
        self._draw_overlay_base()
        final_score, is_new_high = self._last_result or (engine.score, False)
        cy = OFFSET_Y + GAME_H // 2 - 60
        cy = self._draw_text_line("GAME OVER", cy, self.font_title)
        cy = self._draw_text_line(f"Score: {final_score}", cy, self.font_big)
        if is_new_high:
            cy = self._draw_text_line("NEW HIGH SCORE", cy, self.font_med)
        else:
            cy = self._draw_text_line(f"High Score: {engine.high_score}", cy, self.font_med)
        self._draw_text_line("SPACE — RESTART", cy, self.font_small)

    # ── Font init ─────────────────────────────────────────────────
    def _init_fonts(self) -> None:
        specs = [
            ("font_title", "arial", 36, True),
            ("font_big",   "arial", 22, True),
            ("font_med",   "arial", 16, False),
            ("font_small", "arial", 12, False),
        ]
        for attr, name, size, bold in specs:
            try:
                setattr(self, attr, pygame.font.SysFont(name, size, bold=bold))
            except Exception as exc:  # noqa: BLE001 - fall back to pygame's bundled font
                logger.warning(f"Font {name!r} unavailable ({exc}), using default")
                setattr(self, attr, pygame.font.SysFont(None, size))
