"""Loading textures, death effects and sounds, and playing sounds."""

from __future__ import annotations

import logging
from array import array
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Mapping

import pygame

from alicevszombies.userdata import Options
from alicevszombies.vector import Vec2
from alicevszombies.world import DeathEffectAsset

log = logging.getLogger(__name__)

ASSET_DIRECTORY = "assets"
ICON_NAME = "icon"

TEXTURE_NAMES = (
    "player",
    "player_walk0",
    "player_walk1",
    "cursor0",
    "cursor1",
    "doll_knife",
    "doll_magician",
    "zombie",
    "zombie_walk0",
    "zombie_walk1",
    "small_zombie",
    "small_zombie_walk0",
    "small_zombie_walk1",
    "red_zombie",
    "red_zombie_walk0",
    "red_zombie_walk1",
    "medicine",
    "medicine_walk0",
    "medicine_walk1",
    "heal_icon",
    "doll_icon",
    "pitem_icon",
    "grass",
    "knife",
    "red_bullet",
    "magic_missile",
)
FLIPPED_TEXTURE_NAMES = ("doll_sword", "doll_lance", "doll_scythe")
DEATH_EFFECT_NAMES = ("player", "zombie", "small_zombie", "red_zombie", "medicine")
SOUND_NAMES = ("player_hit", "enemy_hit")

_SAMPLE_TYPECODES = {8: "B", -8: "b", 16: "H", -16: "h"}


@dataclass
class Assets:
    """Everything loaded from the asset directory."""

    textures: dict[str, pygame.Surface] = field(default_factory=dict)
    death_effects: dict[str, DeathEffectAsset] = field(default_factory=dict)
    sounds: dict[str, Any] = field(default_factory=dict)
    icon: pygame.Surface | None = None

    def texture(self, name: str) -> pygame.Surface:
        """The texture called ``name``."""
        try:
            return self.textures[name]
        except KeyError:
            raise KeyError(f'texture with name "{name}" not found') from None


@dataclass
class SoundPlayer:
    """Plays named sounds scaled by the master volume in the options."""

    sounds: Mapping[str, Any]
    options: Options = field(default_factory=Options)
    _variants: dict[tuple[str, float], Any] = field(
        default_factory=dict, init=False, repr=False
    )

    def play(self, name: str, volume: float = 1.0, pitch: float = 1.0) -> None:
        """Play ``name`` at ``volume`` times the master volume; silent at zero volume."""
        if volume <= 0:
            return
        sound = self.sounds.get(name)
        if sound is None:
            log.debug("No sound named %s", name)
            return
        if pitch != 1.0:
            sound = self._pitched(name, sound, pitch)
        sound.set_volume(self.options.volume * volume)
        sound.play()

    def _pitched(self, name: str, sound: Any, pitch: float) -> Any:
        key = (name, round(pitch, 2))
        variant = self._variants.get(key)
        if variant is None:
            variant = _resample(sound, key[1])
            self._variants[key] = variant
        return variant


def _resample(sound: Any, pitch: float) -> Any:
    """A copy of ``sound`` played faster or slower; the original if that is impossible."""
    settings = pygame.mixer.get_init()
    if pitch <= 0 or settings is None or not hasattr(sound, "get_raw"):
        return sound
    _, sample_format, channels = settings
    typecode = _SAMPLE_TYPECODES.get(sample_format)
    if typecode is None:
        return sound
    samples = array(typecode)
    samples.frombytes(sound.get_raw())
    frames = len(samples) // channels
    resampled = array(typecode)
    for frame in range(int(frames / pitch)):
        start = int(frame * pitch) * channels
        resampled.extend(samples[start : start + channels])
    if not resampled:
        return sound
    return pygame.mixer.Sound(buffer=resampled.tobytes())


def death_effect_from_surface(surface: pygame.Surface) -> DeathEffectAsset:
    """Collect every pixel of ``surface`` that is not fully transparent."""
    width, height = surface.get_size()
    pixels: dict[Vec2, tuple[int, int, int, int]] = {}
    for x in range(width):
        for y in range(height):
            color = surface.get_at((x, y))
            if color.a > 0:
                pixels[Vec2(x, y)] = (color.r, color.g, color.b, color.a)
    return DeathEffectAsset(pixels=pixels, size=Vec2(width, height))


def _load_image(directory: Path, name: str) -> pygame.Surface:
    path = directory / f"{name}.png"
    if not path.is_file():
        raise FileNotFoundError(f"missing asset {path}")
    surface = pygame.image.load(str(path))
    if pygame.display.get_init() and pygame.display.get_surface() is not None:
        surface = surface.convert_alpha()
    return surface


def _init_audio() -> bool:
    if pygame.mixer.get_init() is not None:
        return True
    try:
        pygame.mixer.init()
    except pygame.error as error:
        log.warning("Audio unavailable: %s", error)
        return False
    return True


def load_assets(directory: str | Path = ASSET_DIRECTORY) -> Assets:
    """Load the icon, textures, death effects and sounds from ``directory``."""
    directory = Path(directory)
    log.info("Starting to load assets...")
    assets = Assets(icon=_load_image(directory, ICON_NAME))
    log.info("Icon loaded!")

    for name in TEXTURE_NAMES:
        assets.textures[name] = _load_image(directory, name)
    for name in FLIPPED_TEXTURE_NAMES:
        image = _load_image(directory, name)
        assets.textures[name] = image
        assets.textures[f"{name}_fliph"] = pygame.transform.flip(image, True, False)
    log.info("Textures loaded!")

    for name in DEATH_EFFECT_NAMES:
        assets.death_effects[name] = death_effect_from_surface(assets.texture(name))
    log.info("Death Effects loaded!")

    if _init_audio():
        for name in SOUND_NAMES:
            path = directory / f"{name}.wav"
            if not path.is_file():
                raise FileNotFoundError(f"missing asset {path}")
            assets.sounds[name] = pygame.mixer.Sound(str(path))
        log.info("Sounds loaded!")
    return assets