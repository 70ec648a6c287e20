"""The window, the main loop and the command that starts the game."""

from __future__ import annotations

import argparse
import logging
from pathlib import Path

import pygame

from alicevszombies.assets import SoundPlayer, load_assets
from alicevszombies.drawing import render_world
from alicevszombies.systems import step
from alicevszombies.ui import UI
from alicevszombies.userdata import (
    Options,
    load_user_data,
    save_options,
    save_stats,
    save_user_data,
)
from alicevszombies.vector import Vec2
from alicevszombies.world import World

log = logging.getLogger(__name__)

MIN_FRAME_TIME = 0.002
MAX_FRAME_TIME = 0.05
STATS_AUTOSAVE_INTERVAL = 15.0
WINDOW_SCALE = 0.8
EXIT_KEY = pygame.K_DELETE
FULLSCREEN_KEY = pygame.K_f
_MOVEMENT = {
    pygame.K_w: Vec2(0, -1),
    pygame.K_a: Vec2(-1, 0),
    pygame.K_s: Vec2(0, 1),
    pygame.K_d: Vec2(1, 0),
}


def clamp_frame_time(seconds: float) -> float:
    """Keep a frame's duration within the range the simulation handles."""
    return min(max(seconds, MIN_FRAME_TIME), MAX_FRAME_TIME)


class Game:
    """Owns the window, the loaded data and the world, and runs frames."""

    def __init__(self, directory: str | Path = ".") -> None:
        self.directory = Path(directory)
        self.user_directory = self.directory / "user"
        pygame.init()
        info = pygame.display.Info()
        self.desktop_size = (max(info.current_w, 640), max(info.current_h, 480))
        self.options, self.stats = load_user_data(self.user_directory)
        self._fullscreen = None
        self.surface = self._apply_fullscreen()
        pygame.display.set_caption("alicevszombies")
        pygame.mouse.set_visible(False)

        self.assets = load_assets(self.directory / "assets")
        if self.assets.icon is not None:
            pygame.display.set_icon(self.assets.icon)
        self.sounds = SoundPlayer(self.assets.sounds, self.options)
        self.world = World(self.stats, self.sounds, self.assets.death_effects)
        self.ui = UI(self.assets, self.options, self.stats, self._store_options)
        self._autosave_timer = 0.0
        self.running = True

    def _store_options(self, options: Options) -> None:
        self.options = options
        self.sounds.options = options
        self.user_directory.mkdir(parents=True, exist_ok=True)
        save_options(options, self.user_directory / "options.bin")

    def _apply_fullscreen(self) -> pygame.Surface:
        wanted = bool(self.options.fullscreen)
        if wanted == self._fullscreen:
            return self.surface
        self._fullscreen = wanted
        if wanted:
            return pygame.display.set_mode(self.desktop_size, pygame.NOFRAME)
        width, height = self.desktop_size
        size = (int(width * WINDOW_SCALE), int(height * WINDOW_SCALE))
        return pygame.display.set_mode(size, pygame.RESIZABLE)

    def frame(self, dt: float, events) -> bool:
        """Advance and draw one frame; return False once the game should end."""
        events = list(events)
        world = self.world
        world.dt = clamp_frame_time(dt)
        for event in events:
            if event.type == pygame.QUIT:
                self.running = False
            elif event.type == pygame.KEYDOWN and event.key == EXIT_KEY:
                self.running = False
            elif event.type == pygame.KEYDOWN and event.key == FULLSCREEN_KEY:
                self._store_options(
                    type(self.options)(**{**vars(self.options),
                                          "fullscreen": not self.options.fullscreen})
                )
                self.ui.options = self.options

        pressed = pygame.key.get_pressed()
        direction = Vec2()
        for key, offset in _MOVEMENT.items():
            if pressed[key]:
                direction = direction + offset
        step(world, direction)

        mouse = pygame.mouse.get_pos()
        self.ui.update(world, events, mouse)
        if self.ui.quit_requested:
            self.running = False
        self.surface = self._apply_fullscreen()

        self.stats.tick(world.difficulty, world.dt, world.enemy_spawner.wave)
        self._autosave_timer += world.dt
        if self._autosave_timer >= STATS_AUTOSAVE_INTERVAL:
            self._autosave_timer = 0.0
            self.user_directory.mkdir(parents=True, exist_ok=True)
            save_stats(self.stats, self.user_directory / "stats.bin")

        render_world(self.surface, world, self.assets)
        self.ui.render(self.surface, world, mouse)
        pygame.display.flip()
        return self.running

    def run(self) -> None:
        """Run frames until the player quits, then save user data."""
        clock = pygame.time.Clock()
        try:
            while self.frame(clock.tick() / 1000, pygame.event.get()):
                pass
        finally:
            self.user_directory.mkdir(parents=True, exist_ok=True)
            save_user_data(self.options, self.stats, self.user_directory)
            pygame.quit()


def main(argv=None) -> int:
    """Start the game from the given directory."""
    parser = argparse.ArgumentParser(prog="alicevszombies")
    parser.add_argument("directory", nargs="?", default=".",
                        help="directory holding assets/ and user/")
    args = parser.parse_args(argv)
    logging.basicConfig(level=logging.INFO, format="%(levelname)s: %(message)s")
    Game(args.directory).run()
    return 0