import wave

import pygame
import pytest

from alicevszombies.assets import (
    DEATH_EFFECT_NAMES,
    FLIPPED_TEXTURE_NAMES,
    ICON_NAME,
    SOUND_NAMES,
    TEXTURE_NAMES,
    Assets,
    SoundPlayer,
    death_effect_from_surface,
    load_assets,
)
from alicevszombies.userdata import Options
from alicevszombies.vector import Vec2


class FakeSound:
    def __init__(self):
        self.volumes = []
        self.plays = 0

    def set_volume(self, volume):
        self.volumes.append(volume)

    def play(self):
        self.plays += 1


def _png(path, size=(3, 2)):
    surface = pygame.Surface(size, pygame.SRCALPHA)
    surface.fill((0, 0, 0, 0))
    surface.set_at((0, 0), (255, 0, 0, 255))
    surface.set_at((size[0] - 1, size[1] - 1), (0, 0, 255, 255))
    pygame.image.save(surface, str(path))


def _wav(path):
    with wave.open(str(path), "wb") as handle:
        handle.setnchannels(1)
        handle.setsampwidth(2)
        handle.setframerate(22050)
        handle.writeframes(b"\x00\x00" * 100)


@pytest.fixture
def asset_dir(tmp_path, monkeypatch):
    monkeypatch.setenv("SDL_AUDIODRIVER", "dummy")
    for name in (ICON_NAME, *TEXTURE_NAMES, *FLIPPED_TEXTURE_NAMES):
        _png(tmp_path / f"{name}.png")
    for name in SOUND_NAMES:
        _wav(tmp_path / f"{name}.wav")
    yield tmp_path
    pygame.mixer.quit()


def test_death_effect_keeps_only_visible_pixels():
    surface = pygame.Surface((3, 2), pygame.SRCALPHA)
    surface.fill((0, 0, 0, 0))
    surface.set_at((1, 0), (255, 0, 0, 255))
    surface.set_at((2, 1), (0, 0, 255, 128))
    effect = death_effect_from_surface(surface)
    assert effect.size == Vec2(3, 2)
    assert dict(effect.pixels) == {
        Vec2(1, 0): (255, 0, 0, 255),
        Vec2(2, 1): (0, 0, 255, 128),
    }


def test_death_effect_of_transparent_surface_is_empty():
    surface = pygame.Surface((4, 4), pygame.SRCALPHA)
    surface.fill((0, 0, 0, 0))
    assert len(death_effect_from_surface(surface).pixels) == 0


def test_sound_player_scales_by_master_volume():
    sound = FakeSound()
    player = SoundPlayer({"hit": sound}, Options(volume=0.5))
    player.play("hit", 0.5, 1.0)
    assert sound.plays == 1
    assert sound.volumes == [pytest.approx(0.25)]


def test_sound_player_silent_at_zero_volume():
    sound = FakeSound()
    player = SoundPlayer({"hit": sound})
    player.play("hit", 0.0, 1.0)
    player.play("hit", -1.0, 1.0)
    assert sound.plays == 0


def test_sound_player_ignores_unknown_sound():
    sound = FakeSound()
    player = SoundPlayer({"hit": sound})
    player.play("missing", 1.0, 1.0)
    assert sound.plays == 0


def test_sound_player_falls_back_when_pitch_cannot_change():
    sound = FakeSound()
    player = SoundPlayer({"hit": sound})
    player.play("hit", 1.0, 0.9)
    assert sound.plays == 1


def test_assets_texture_lookup_error():
    assets = Assets()
    with pytest.raises(KeyError):
        assets.texture("nothing")


def test_load_assets_textures_and_flips(asset_dir):
    assets = load_assets(asset_dir)
    for name in TEXTURE_NAMES:
        assert name in assets.textures
    for name in FLIPPED_TEXTURE_NAMES:
        original = assets.textures[name]
        flipped = assets.textures[f"{name}_fliph"]
        width = original.get_width()
        assert flipped.get_at((width - 1, 0)) == original.get_at((0, 0))
    assert assets.icon is not None


def test_load_assets_death_effects(asset_dir):
    assets = load_assets(asset_dir)
    assert set(assets.death_effects) == set(DEATH_EFFECT_NAMES)
    effect = assets.death_effects["zombie"]
    assert effect.size == Vec2(3, 2)
    assert set(effect.pixels) == {Vec2(0, 0), Vec2(2, 1)}


def test_load_assets_missing_file(asset_dir):
    (asset_dir / "grass.png").unlink()
    with pytest.raises(FileNotFoundError):
        load_assets(asset_dir)