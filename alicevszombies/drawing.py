"""Drawing helpers and rendering of the game world."""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Iterable

import pygame

from alicevszombies.vector import Vec2, mod_f
from alicevszombies.world import World

CAMERA_ZOOM = 8
GRASS_SIZE = 32
GRASS_EXTENT = 400
COMBAT_TEXT_SIZE = 4
ROTATED_TEXTURES = frozenset({"knife", "magic_missile"})
BACKGROUND = (0, 0, 0)

_scale_cache: dict[tuple[int, float], tuple[pygame.Surface, pygame.Surface]] = {}
_fonts: dict[int, pygame.font.Font] = {}


@dataclass(frozen=True)
class Camera:
    """Maps world coordinates to screen pixels."""

    target: Vec2
    offset: Vec2
    zoom: float = CAMERA_ZOOM

    def world_to_screen(self, point: Vec2) -> Vec2:
        """Screen position of a world ``point``."""
        return (point - self.target) * self.zoom + self.offset


def screen_center(surface: pygame.Surface) -> Vec2:
    """Centre of ``surface`` in pixels."""
    width, height = surface.get_size()
    return Vec2(width / 2, height / 2)


def center_texture(texture_size: Iterable[float], center: Vec2) -> Vec2:
    """Top-left corner that centres something of ``texture_size`` on ``center``."""
    width, height = texture_size
    return center - Vec2(width / 2, height / 2)


def draw_texture_centered(
    surface: pygame.Surface, texture: pygame.Surface, center: Vec2
) -> pygame.Rect:
    """Blit ``texture`` centred on ``center``."""
    return surface.blit(texture, tuple(center_texture(texture.get_size(), center)))


def draw_texture_centered_scaled(
    surface: pygame.Surface, texture: pygame.Surface, center: Vec2, scale: float
) -> pygame.Rect:
    """Blit ``texture`` enlarged by ``scale`` and centred on ``center``."""
    return draw_texture_centered(surface, _scaled(texture, scale), center)


def draw_text_centered(
    surface: pygame.Surface,
    font: pygame.font.Font,
    text: str,
    center: Vec2,
    color: tuple[int, ...] = (255, 255, 255),
) -> pygame.Rect:
    """Render ``text`` centred on ``center``."""
    rendered = font.render(text, True, tuple(color[:3]))
    return draw_texture_centered(surface, rendered, center)


def grass_origin(player_position: Vec2, half_screen: Vec2) -> Vec2:
    """World position of the grass grid corner near the screen's top-left."""
    origin = player_position - half_screen * (1 / CAMERA_ZOOM)
    return Vec2(
        origin.x - mod_f(origin.x, GRASS_SIZE),
        origin.y - mod_f(origin.y, GRASS_SIZE),
    )


def render_order(world: World) -> list[int]:
    """Entities with a texture and a position, in drawing order."""
    return sorted(entity for entity in world.texture if entity in world.position)


def combat_text_alpha(speed: float) -> float:
    """Opacity of combat text drifting at ``speed``, between 0 and 1."""
    return max(0.0, min(speed / 2 - 0.25, 1.0))


def _scaled(texture: pygame.Surface, scale: float) -> pygame.Surface:
    if scale == 1:
        return texture
    key = (id(texture), scale)
    cached = _scale_cache.get(key)
    if cached is not None and cached[0] is texture:
        return cached[1]
    width, height = texture.get_size()
    size = (max(1, round(width * scale)), max(1, round(height * scale)))
    result = pygame.transform.scale(texture, size)
    _scale_cache[key] = (texture, result)
    return result


def _font(size: int) -> pygame.font.Font:
    font = _fonts.get(size)
    if font is None:
        if not pygame.font.get_init():
            pygame.font.init()
        font = pygame.font.Font(None, size)
        _fonts[size] = font
    return font


def _render_grass(surface: pygame.Surface, world: World, camera: Camera, assets) -> None:
    grass = assets.textures.get("grass")
    if grass is None:
        return
    scaled = _scaled(grass, camera.zoom)
    origin = grass_origin(world.player_position, screen_center(surface))
    for x in range(-GRASS_EXTENT, GRASS_EXTENT, GRASS_SIZE):
        for y in range(-GRASS_EXTENT, GRASS_EXTENT, GRASS_SIZE):
            corner = camera.world_to_screen(origin + Vec2(x, y))
            surface.blit(scaled, tuple(corner))


def _render_textures(surface: pygame.Surface, world: World, camera: Camera, assets) -> None:
    for entity in render_order(world):
        name = world.texture[entity]
        texture = assets.textures.get(name)
        if texture is None:
            continue
        scaled = _scaled(texture, camera.zoom)
        center = camera.world_to_screen(world.position[entity])
        if name in ROTATED_TEXTURES:
            heading = world.velocity.get(entity, Vec2()).angle()
            scaled = pygame.transform.rotate(scaled, -math.degrees(heading))
        draw_texture_centered(surface, scaled, center)


def _render_combat_text(surface: pygame.Surface, world: World, camera: Camera) -> None:
    font = _font(round(COMBAT_TEXT_SIZE * camera.zoom))
    for entity, text in world.combat_text.items():
        position = world.position.get(entity)
        if position is None:
            continue
        alpha = combat_text_alpha(world.velocity.get(entity, Vec2()).length())
        rendered = font.render(text.text, True, tuple(text.hue[:3]))
        rendered.set_alpha(round(alpha * 255))
        surface.blit(rendered, tuple(camera.world_to_screen(position)))


def _render_death_effects(surface: pygame.Surface, world: World, camera: Camera) -> None:
    if not world.death_effect:
        return
    overlay = pygame.Surface(surface.get_size(), pygame.SRCALPHA)
    overlay.fill((0, 0, 0, 0))
    pixel = math.ceil(camera.zoom)
    for entity, particle in world.death_effect.items():
        position = world.position.get(entity)
        if position is None:
            continue
        corner = camera.world_to_screen(position)
        alpha = round(255 * max(0.0, min(particle.time_left, 1.0)))
        color = (*particle.tint[:3], alpha)
        overlay.fill(color, pygame.Rect(int(corner.x), int(corner.y), pixel, pixel))
    surface.blit(overlay, (0, 0))


def render_world(surface: pygame.Surface, world: World, assets) -> None:
    """Draw grass, entities, combat text and death effects around the player."""
    surface.fill(BACKGROUND)
    camera = Camera(world.player_position, screen_center(surface))
    _render_grass(surface, world, camera, assets)
    _render_textures(surface, world, camera, assets)
    _render_combat_text(surface, world, camera)
    _render_death_effects(surface, world, camera)