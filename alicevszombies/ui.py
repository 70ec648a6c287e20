"""Menus, HUD, spells and overlay screens drawn on top of the world."""

from __future__ import annotations

import dataclasses
from typing import Callable, Iterable

import pygame

from alicevszombies.catalog import Difficulty
from alicevszombies.systems import update_death_effects, update_velocity
from alicevszombies.upgrades import (
    DOLL_COST,
    HEAL_COST,
    UPGRADE_COST,
    cast_doll,
    cast_heal,
    cast_upgrade,
    choose_upgrade,
)
from alicevszombies.userdata import Options, Stats, format_time_played
from alicevszombies.vector import Rect, Vec2, center_rectangle
from alicevszombies.world import World

BUTTON_SIZE = Vec2(480, 120)
BUTTON_SPACING = 40.0
CURSOR_HIDE_DELAY = 2.5
CURSOR_SCALE = 4
MENU_DIFFICULTIES = (Difficulty.EASY, Difficulty.NORMAL, Difficulty.HARD, Difficulty.LUNATIC)
STAT_DIFFICULTIES = (Difficulty.UNDEFINED, *MENU_DIFFICULTIES)
SPELL_SIZE = Vec2(200, 80)
CURSOR_TYPES = 2

_BUTTON = (60, 60, 70)
_BUTTON_ACTIVE = (110, 90, 140)
_BUTTON_DISABLED = (35, 35, 40)
_BORDER = (200, 200, 210)
_TEXT = (255, 255, 255)
_DISABLED_TEXT = (120, 120, 120)

_fonts: dict[int, pygame.font.Font] = {}


def _font(size: int) -> pygame.font.Font:
    font = _fonts.get(size)
    if font is None:
        if not pygame.font.get_init():
            pygame.font.init()
        font = pygame.font.Font(None, size)
        _fonts[size] = font
    return font


def _contains(rect: Rect, point: Vec2) -> bool:
    return rect.x <= point.x < rect.x + rect.width and rect.y <= point.y < rect.y + rect.height


def _prect(rect: Rect) -> pygame.Rect:
    return pygame.Rect(int(rect.x), int(rect.y), int(rect.width), int(rect.height))


class UI:
    """Handles input for and draws every screen that is not the world itself."""

    def __init__(
        self,
        assets=None,
        options: Options | None = None,
        stats: Stats | None = None,
        save_options: Callable[[Options], None] | None = None,
    ) -> None:
        self.assets = assets
        self.options = options if options is not None else Options()
        self.stats = stats if stats is not None else Stats()
        self._save_options = save_options
        self.screen_size = Vec2(1280, 720)
        self.stat_difficulty = Difficulty.UNDEFINED
        self.quit_requested = False

    # ----- layout -------------------------------------------------------

    @property
    def _half(self) -> Vec2:
        return self.screen_size * 0.5

    def _menu_rects(self) -> dict[str, Rect]:
        w, h = BUTTON_SIZE.x, BUTTON_SIZE.y
        step = h + BUTTON_SPACING
        x = self.screen_size.x / 20
        y = h + BUTTON_SPACING
        return {
            "title": Rect(self.screen_size.x - w * 1.5, y, w * 1.5, h),
            "start": Rect(x, y, w, h),
            "goals": Rect(x, y + step, w, h),
            "stats": Rect(x, y + 2 * step, w, h),
            "options": Rect(x, y + 3 * step, w, h),
            "exit": Rect(x, y + 4 * step, w, h),
        }

    def _submenu_origin(self) -> Vec2:
        start = BUTTON_SIZE.y + BUTTON_SPACING
        return Vec2(self.screen_size.x / 20 + BUTTON_SIZE.x * 1.1, start - BUTTON_SIZE.y / 2)

    def _difficulty_rects(self) -> list[tuple[Difficulty, Rect]]:
        origin = self._submenu_origin()
        step = BUTTON_SIZE.y + BUTTON_SPACING
        return [
            (diff, Rect(origin.x, origin.y + i * step, BUTTON_SIZE.x, BUTTON_SIZE.y))
            for i, diff in enumerate(MENU_DIFFICULTIES)
        ]

    def _options_rects(self) -> dict[str, Rect]:
        origin = self._submenu_origin()
        step = BUTTON_SIZE.y + BUTTON_SPACING
        width = BUTTON_SIZE.x - 80
        return {
            "volume": Rect(origin.x, origin.y, width, BUTTON_SIZE.y),
            "cursor": Rect(origin.x, origin.y + step, width, BUTTON_SIZE.y),
            "fullscreen": Rect(origin.x, origin.y + 2 * step, BUTTON_SIZE.x, BUTTON_SIZE.y),
        }

    def _stats_combo_rect(self) -> Rect:
        origin = self._submenu_origin()
        return Rect(origin.x, origin.y + BUTTON_SPACING, BUTTON_SIZE.x, BUTTON_SIZE.y)

    def _pause_rects(self) -> dict[str, Rect]:
        pos = Vec2(self._half.x, self._half.y * 0.9)
        size = Vec2(450, 120)
        resume = pos + Vec2(0, 120 + BUTTON_SPACING * 2)
        menu = resume + Vec2(0, size.y + BUTTON_SPACING)
        return {
            "title": center_rectangle(pos, Vec2(900, 120)),
            "resume": center_rectangle(resume, size),
            "menu": center_rectangle(menu, size),
        }

    def _death_button(self) -> Rect:
        y = self._half.y + 128 + 128
        return Rect(self._half.x - 225, y, 450, 120)

    def _spell_rects(self) -> list[Rect]:
        top = self.screen_size.y // 2 - SPELL_SIZE.y * 1.2
        return [
            center_rectangle(Vec2(300, top + i * SPELL_SIZE.y * 1.2), SPELL_SIZE)
            for i in range(3)
        ]

    # ----- input --------------------------------------------------------

    def update(self, world: World, events: Iterable, mouse_position) -> None:
        """Apply this frame's input events to the world and the menus."""
        events = list(events)
        keys = [e.key for e in events if e.type == pygame.KEYDOWN]
        clicks = [
            Vec2(*e.pos)
            for e in events
            if e.type == pygame.MOUSEBUTTONDOWN and getattr(e, "button", 1) == 1
        ]
        mouse = Vec2(*mouse_position)
        state = world.uistate

        if state.is_main_menu:
            self._update_main_menu(world, clicks)
        elif state.is_death_screen:
            state.cursor_hide_timer = 0.0
            update_death_effects(world)
            update_velocity(world)
            if pygame.K_ESCAPE in keys or any(
                _contains(self._death_button(), c) for c in clicks
            ):
                world.reset()
        else:
            if state.is_upgrade_screen:
                if pygame.K_1 in keys:
                    choose_upgrade(world, 0)
                elif pygame.K_2 in keys:
                    choose_upgrade(world, 1)
            elif pygame.K_ESCAPE in keys:
                world.paused = not world.paused
            elif world.paused:
                rects = self._pause_rects()
                for click in clicks:
                    if _contains(rects["resume"], click):
                        world.paused = False
                    elif _contains(rects["menu"], click):
                        world.reset()
                        return
            self._update_spells(world, keys, clicks)

            if mouse == state.previous_mouse_pos:
                state.cursor_hide_timer += world.dt
            else:
                state.cursor_hide_timer = 0.0
            state.previous_mouse_pos = mouse

    def _update_spells(self, world: World, keys: list[int], clicks: list[Vec2]) -> None:
        heal, doll, upgrade = self._spell_rects()
        if pygame.K_h in keys or any(_contains(heal, c) for c in clicks):
            cast_heal(world)
        if pygame.K_j in keys or any(_contains(doll, c) for c in clicks):
            cast_doll(world)
        if pygame.K_k in keys or any(_contains(upgrade, c) for c in clicks):
            cast_upgrade(world)

    def _update_main_menu(self, world: World, clicks: list[Vec2]) -> None:
        menu = world.uistate.main_menu
        rects = self._menu_rects()
        size = self.screen_size
        for click in clicks:
            if _contains(rects["title"], click):
                for i, pos in enumerate(menu.doll_positions):
                    if pos == Vec2():
                        menu.doll_positions[i] = Vec2(size.x * world.rng.random(), -20)
                        menu.doll_velocities[i] = Vec2((world.rng.random() - 0.5) * size.x, 0)
                        break
            elif _contains(rects["start"], click):
                menu.selected = 0 if menu.selected == 1 else 1
            elif _contains(rects["stats"], click):
                menu.selected = 0 if menu.selected == 2 else 2
            elif _contains(rects["options"], click):
                menu.selected = 0 if menu.selected == 3 else 3
            elif _contains(rects["exit"], click):
                self.quit_requested = True
            elif menu.selected == 1:
                for difficulty, rect in self._difficulty_rects():
                    if _contains(rect, click):
                        world.start_game(difficulty)
                        return
            elif menu.selected == 2 and _contains(self._stats_combo_rect(), click):
                index = STAT_DIFFICULTIES.index(self.stat_difficulty)
                self.stat_difficulty = STAT_DIFFICULTIES[(index + 1) % len(STAT_DIFFICULTIES)]
            elif menu.selected == 3:
                self._click_options(click)

        for i, pos in enumerate(menu.doll_positions):
            if pos != Vec2():
                menu.doll_velocities[i] = menu.doll_velocities[i] + Vec2(0, size.y * world.dt * 4)
                moved = pos + menu.doll_velocities[i] * world.dt
                menu.doll_positions[i] = Vec2() if moved.y > size.y + 100 else moved

    def _click_options(self, click: Vec2) -> None:
        rects = self._options_rects()
        options = self.options
        if _contains(rects["volume"], click):
            volume = (click.x - rects["volume"].x) / rects["volume"].width
            new = dataclasses.replace(options, volume=min(1.0, max(0.0, volume)))
        elif _contains(rects["cursor"], click):
            rect = rects["cursor"]
            delta = -1 if click.x < rect.x + rect.width / 2 else 1
            cursor = min(CURSOR_TYPES - 1, max(0, options.cursor_type + delta))
            new = dataclasses.replace(options, cursor_type=cursor)
        elif _contains(rects["fullscreen"], click):
            new = dataclasses.replace(options, fullscreen=not options.fullscreen)
        else:
            return
        if new != options:
            self.options = new
            if self._save_options is not None:
                self._save_options(new)

    # ----- drawing ------------------------------------------------------

    def render(self, surface: pygame.Surface, world: World, mouse_position) -> None:
        """Draw the current screen and the cursor."""
        self.screen_size = Vec2(*surface.get_size())
        state = world.uistate
        if state.is_main_menu:
            self._render_main_menu(surface, world)
        elif state.is_death_screen:
            self._render_death_screen(surface, world)
        else:
            self._render_hud(surface, world)
            if state.is_upgrade_screen:
                self._render_upgrade_screen(surface, world)
            elif world.paused:
                self._render_pause_menu(surface)

        if state.cursor_hide_timer < CURSOR_HIDE_DELAY and self.assets is not None:
            cursor = self.assets.textures.get(f"cursor{self.options.cursor_type}")
            if cursor is not None:
                w, h = cursor.get_size()
                scaled = pygame.transform.scale(cursor, (w * CURSOR_SCALE, h * CURSOR_SCALE))
                surface.blit(scaled, (int(mouse_position[0]), int(mouse_position[1])))

    def _shade(self, surface: pygame.Surface, alpha: float) -> None:
        overlay = pygame.Surface(surface.get_size(), pygame.SRCALPHA)
        overlay.fill((0, 0, 0, round(alpha * 255)))
        surface.blit(overlay, (0, 0))

    def _text(self, surface, text: str, size: int, center: Vec2, color=_TEXT) -> None:
        rendered = _font(size).render(text, True, color)
        w, h = rendered.get_size()
        surface.blit(rendered, (int(center.x - w / 2), int(center.y - h / 2)))

    def _button(self, surface, rect: Rect, label: str, active=False, enabled=True) -> None:
        fill = _BUTTON_DISABLED if not enabled else _BUTTON_ACTIVE if active else _BUTTON
        surface.fill(fill, _prect(rect))
        pygame.draw.rect(surface, _BORDER, _prect(rect), 3)
        if label:
            center = Vec2(rect.x + rect.width / 2, rect.y + rect.height / 2)
            self._text(surface, label, 64, center, _TEXT if enabled else _DISABLED_TEXT)

    def _render_main_menu(self, surface, world: World) -> None:
        self._shade(surface, 0.9)
        menu = world.uistate.main_menu
        rects = self._menu_rects()
        title = rects["title"]
        self._text(surface, "alicevszombies", 80,
                   Vec2(title.x + title.width / 2, title.y + title.height / 2))
        doll = self.assets.textures.get("doll_sword") if self.assets is not None else None
        if doll is not None:
            w, h = doll.get_size()
            big = pygame.transform.scale(doll, (w * 8, h * 8))
            for pos in menu.doll_positions:
                if pos != Vec2():
                    surface.blit(big, (int(pos.x), int(pos.y)))
        self._button(surface, rects["start"], "Start", menu.selected == 1)
        self._button(surface, rects["goals"], "Goals", enabled=False)
        self._button(surface, rects["stats"], "Stats", menu.selected == 2)
        self._button(surface, rects["options"], "Options", menu.selected == 3)
        self._button(surface, rects["exit"], "Exit")
        if menu.selected == 1:
            for difficulty, rect in self._difficulty_rects():
                self._button(surface, rect, difficulty.label)
        elif menu.selected == 2:
            self._render_stats(surface)
        elif menu.selected == 3:
            self._render_options(surface)

    def _render_stats(self, surface) -> None:
        origin = self._submenu_origin()
        panel = Rect(origin.x, origin.y, BUTTON_SIZE.x, BUTTON_SIZE.y * 4 + BUTTON_SPACING * 5)
        surface.fill(_BUTTON_DISABLED, _prect(panel))
        combo = self._stats_combo_rect()
        self._button(surface, combo, self.stat_difficulty.label)
        summary = self.stats.summary(self.stat_difficulty)
        lines = (
            f"Time played: {format_time_played(summary.time_played)}",
            f"Dolls summoned: {summary.dolls_summoned}",
            f"Enemies killed: {summary.enemies_killed}",
            f"Highest wave: {summary.highest_wave}",
            f"Run count: {summary.run_count}",
        )
        y = combo.y + combo.height + BUTTON_SPACING
        for line in lines:
            self._text(surface, line, 40, Vec2(origin.x + BUTTON_SIZE.x / 2, y))
            y += BUTTON_SPACING

    def _render_options(self, surface) -> None:
        rects = self._options_rects()
        volume = rects["volume"]
        surface.fill(_BUTTON, _prect(volume))
        filled = Rect(volume.x, volume.y, volume.width * self.options.volume, volume.height)
        surface.fill(_BUTTON_ACTIVE, _prect(filled))
        self._text(surface, "Volume", 48, Vec2(volume.x + volume.width + 80, volume.y + 60))
        cursor = rects["cursor"]
        self._button(surface, cursor, f"<  {self.options.cursor_type}  >")
        self._text(surface, "Cursor", 48, Vec2(cursor.x + cursor.width + 80, cursor.y + 60))
        self._button(surface, rects["fullscreen"], "Fullscreen", self.options.fullscreen)

    def _render_hud(self, surface, world: World) -> None:
        width, height = self.screen_size.x, self.screen_size.y
        hp = world.hp.get(world.player)
        self._text(surface, f"Wave {world.enemy_spawner.wave}", 32, Vec2(width / 2, 200))
        self._text(surface, f"HP: {hp.val if hp else 0:g}", 32, Vec2(width / 2, height - 250))
        self._text(surface, f"MP: {world.player_data.mana:g}", 32, Vec2(width / 2, height - 200))

        mana = world.player_data.mana
        spells = (("heal_icon", "H", HEAL_COST), ("doll_icon", "J", DOLL_COST),
                  ("pitem_icon", "K", UPGRADE_COST))
        for rect, (icon, key, cost) in zip(self._spell_rects(), spells):
            self._button(surface, rect, "", enabled=mana >= cost)
            center = Vec2(rect.x + rect.width / 2, rect.y + rect.height / 2)
            texture = self.assets.textures.get(icon) if self.assets is not None else None
            if texture is not None:
                w, h = texture.get_size()
                big = pygame.transform.scale(texture, (w * 4, h * 4))
                surface.blit(big, (int(center.x - SPELL_SIZE.x / 5 - w * 2),
                                   int(center.y - h * 2)))
            self._text(surface, key, 40, center + Vec2(SPELL_SIZE.x / 5, 0))

    def _render_upgrade_screen(self, surface, world: World) -> None:
        self._shade(surface, 0.4)
        center = self._half
        for offset, label, choice in zip((-250, 250), ("1", "2"), world.uistate.upgrade_choices):
            self._text(surface, str(choice), 40, center + Vec2(offset, -32))
            self._text(surface, label, 64, center + Vec2(offset, 32))

    def _render_pause_menu(self, surface) -> None:
        self._shade(surface, 0.4)
        rects = self._pause_rects()
        title = rects["title"]
        self._text(surface, "Paused", 256, Vec2(title.x + title.width / 2, title.y + title.height / 2))
        self._button(surface, rects["resume"], "Resume")
        self._button(surface, rects["menu"], "Main Menu")

    def _render_death_screen(self, surface, world: World) -> None:
        self._shade(surface, 0.7)
        pos = self._half
        self._text(surface, "You Died!", 256, pos)
        pos = pos + Vec2(0, 128)
        self._text(surface, f"Reached Wave {world.enemy_spawner.wave}", 64, pos)
        self._button(surface, self._death_button(), "Main Menu")