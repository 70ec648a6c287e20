import random

import pygame
import pytest

from alicevszombies.catalog import Difficulty
from alicevszombies.ui import UI
from alicevszombies.world import World


def key(k):
    return pygame.event.Event(pygame.KEYDOWN, key=k)


def click(x, y):
    return pygame.event.Event(pygame.MOUSEBUTTONDOWN, button=1, pos=(x, y))


@pytest.fixture
def world():
    w = World(rng=random.Random(1))
    w.dt = 0.016
    return w


def test_escape_toggles_pause_while_playing(world):
    ui = UI()
    world.start_game(Difficulty.NORMAL)
    ui.update(world, [key(pygame.K_ESCAPE)], (0, 0))
    assert world.paused is True
    ui.update(world, [key(pygame.K_ESCAPE)], (0, 0))
    assert world.paused is False


def test_escape_ignored_in_main_menu(world):
    ui = UI()
    ui.update(world, [key(pygame.K_ESCAPE)], (0, 0))
    assert world.uistate.is_main_menu
    assert world.paused


def test_start_then_difficulty_starts_game(world):
    ui = UI()
    ui.update(world, [click(100, 200)], (0, 0))
    assert world.uistate.main_menu.selected == 1
    ui.update(world, [click(600, 110)], (0, 0))
    assert not world.uistate.is_main_menu
    assert world.difficulty == Difficulty.EASY
    assert world.paused is False


def test_start_click_twice_deselects(world):
    ui = UI()
    ui.update(world, [click(100, 200)], (0, 0))
    ui.update(world, [click(100, 200)], (0, 0))
    assert world.uistate.main_menu.selected == 0


def test_upgrade_choice_by_key(world):
    ui = UI()
    world.start_game(Difficulty.NORMAL)
    world.player_data.mana = 10
    ui.update(world, [key(pygame.K_k)], (0, 0))
    assert world.uistate.is_upgrade_screen
    choice = world.uistate.upgrade_choices[0]
    ui.update(world, [key(pygame.K_1)], (0, 0))
    assert world.player_data.upgrades[choice] == 1
    assert not world.uistate.is_upgrade_screen
    assert world.paused is False


def test_heal_spell_key(world):
    ui = UI()
    world.start_game(Difficulty.NORMAL)
    world.player_data.mana = 5
    before = world.hp[world.player].val
    ui.update(world, [key(pygame.K_h)], (0, 0))
    assert world.hp[world.player].val == before + 5
    assert world.player_data.mana == 0


def test_death_screen_escape_returns_to_menu(world):
    ui = UI()
    world.start_game(Difficulty.NORMAL)
    world.delete_entity(world.player)
    assert world.uistate.is_death_screen
    ui.update(world, [key(pygame.K_ESCAPE)], (0, 0))
    assert world.uistate.is_main_menu
    assert not world.uistate.is_death_screen


def test_cursor_timer_grows_when_mouse_still(world):
    ui = UI()
    world.start_game(Difficulty.NORMAL)
    ui.update(world, [], (5, 5))
    ui.update(world, [], (5, 5))
    assert world.uistate.cursor_hide_timer == pytest.approx(world.dt)
    ui.update(world, [], (6, 5))
    assert world.uistate.cursor_hide_timer == 0.0