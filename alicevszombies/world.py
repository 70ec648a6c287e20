"""The game world: entity storage and operations that create, hurt and remove entities."""

from __future__ import annotations

import logging
import random
from dataclasses import dataclass, field
from typing import Mapping, Protocol

from alicevszombies.catalog import (
    BASIC_DOLL,
    RED_BULLET,
    RED_ZOMBIE,
    Difficulty,
    DollType,
    EnemyType,
    ProjectileType,
    Upgrade,
)
from alicevszombies.userdata import Stats
from alicevszombies.vector import Vec2, random_direction

log = logging.getLogger(__name__)

Color = tuple[int, int, int, int]

WHITE: Color = (255, 255, 255, 255)
GREEN: Color = (0, 228, 48, 255)
RED: Color = (230, 41, 55, 255)

PLAYER_SIZE = Vec2(8, 16)
PROJECTILE_LIFETIME = 4.0
ENEMY_SPAWN_DISTANCE = 500.0
MAIN_MENU_DOLLS = 8


class SoundSink(Protocol):
    """Anything that can play a named sound."""

    def play(self, name: str, volume: float, pitch: float) -> None: ...


@dataclass
class HP:
    """Hit points and per-attacker immunity timers."""

    val: float
    immune_time: float = 0.5
    attacker_cooldown: dict[int, float] = field(default_factory=dict)


@dataclass
class Targeting:
    """Where an entity is heading and how hard it accelerates."""

    target: Vec2 = Vec2()
    targeting_timer: float = 0.0
    accel: float = 0.0


@dataclass
class Projectile:
    """A live projectile and the time it has left."""

    type: ProjectileType
    time_left: float = PROJECTILE_LIFETIME


@dataclass
class CombatText:
    """Floating text shown where something happened."""

    text: str
    hue: Color = WHITE


@dataclass
class DeathParticle:
    """One pixel of a death effect."""

    time_left: float
    tint: Color


@dataclass(frozen=True)
class DeathEffectAsset:
    """Opaque pixels of a texture, used to burst it into particles."""

    pixels: Mapping[Vec2, Color]
    size: Vec2


@dataclass(frozen=True)
class WalkAnimation:
    """Texture family used for walking frames."""

    base_texture: str


@dataclass
class PlayerData:
    """Resources and upgrades of the current run."""

    mana: float = 0.0
    upgrades: dict[Upgrade, int] = field(default_factory=dict)


@dataclass
class EnemySpawner:
    """Wave progress and spawn timing."""

    wave: int = 0
    enemies_to_spawn: int = 0
    spawn_timer: float = 0.0


@dataclass
class MainMenuState:
    """State of the main menu, including the falling title dolls."""

    selected: int = 0
    doll_positions: list[Vec2] = field(default_factory=lambda: [Vec2()] * MAIN_MENU_DOLLS)
    doll_velocities: list[Vec2] = field(default_factory=lambda: [Vec2()] * MAIN_MENU_DOLLS)


@dataclass
class UIState:
    """Which screen is shown and related bookkeeping."""

    is_main_menu: bool = True
    is_upgrade_screen: bool = False
    is_death_screen: bool = False
    previous_mouse_pos: Vec2 = Vec2()
    cursor_hide_timer: float = 0.0
    upgrade_choices: tuple[Upgrade, ...] = ()
    main_menu: MainMenuState = field(default_factory=MainMenuState)


def _format_number(value: float) -> str:
    return f"{value:g}"


class World:
    """All entities of a game and the components attached to them."""

    def __init__(
        self,
        stats: Stats | None = None,
        sounds: SoundSink | None = None,
        death_effects: Mapping[str, DeathEffectAsset] | None = None,
        rng: random.Random | None = None,
    ) -> None:
        self.stats = stats if stats is not None else Stats()
        self.sounds = sounds
        self.death_effects: Mapping[str, DeathEffectAsset] = death_effects or {}
        self.rng = rng if rng is not None else random.Random()
        self.dt = 0.0
        self.next_id = 0
        self.player = 0
        self.reset()

    def reset(self) -> None:
        """Return to the main menu with a fresh player and two sword dolls."""
        self.paused = True
        self.difficulty = Difficulty.UNDEFINED
        self.enemy_spawner = EnemySpawner()
        self.player_data = PlayerData()
        self.targeting: dict[int, Targeting] = {}
        self.doll: dict[int, DollType] = {}
        self.enemy: dict[int, EnemyType] = {}
        self.projectile: dict[int, Projectile] = {}
        self.position: dict[int, Vec2] = {}
        self.velocity: dict[int, Vec2] = {}
        self.drag: dict[int, float] = {}
        self.texture: dict[int, str] = {}
        self.hp: dict[int, HP] = {}
        self.combat_text: dict[int, CombatText] = {}
        self.size: dict[int, Vec2] = {}
        self.death_effect: dict[int, DeathParticle] = {}
        self.anim_timer: dict[int, float] = {}
        self.walk_animated: dict[int, WalkAnimation] = {}
        self.shoot_timer: dict[int, float] = {}
        self.uistate = UIState()

        self.spawn_player()
        doll = self.spawn_doll(BASIC_DOLL)
        self.position[doll] = Vec2(-20, 4)
        doll = self.spawn_doll(BASIC_DOLL)
        self.position[doll] = Vec2(20, -4)

    @property
    def _components(self) -> tuple[dict, ...]:
        return (
            self.targeting,
            self.doll,
            self.enemy,
            self.position,
            self.velocity,
            self.drag,
            self.texture,
            self.anim_timer,
            self.hp,
            self.combat_text,
            self.size,
            self.death_effect,
            self.walk_animated,
            self.projectile,
            self.shoot_timer,
        )

    @property
    def player_position(self) -> Vec2:
        return self.position.get(self.player, Vec2())

    def new_entity(self) -> int:
        """Allocate a new entity id."""
        entity = self.next_id
        self.next_id += 1
        return entity

    def delete_entity(self, entity: int) -> None:
        """Remove an entity, running death handling for the player and enemies."""
        if entity == self.player:
            log.info("Player died!")
            self._on_player_death()
        elif entity in self.enemy:
            self._pre_enemy_death(entity)
        for component in self._components:
            component.pop(entity, None)

    def _on_player_death(self) -> None:
        self.paused = True
        self.uistate.is_death_screen = True
        for entity in self.velocity:
            self.velocity[entity] = Vec2()
        self.spawn_death_effect("player", self.player_position)
        self.texture.pop(self.player, None)

    def _pre_enemy_death(self, entity: int) -> None:
        enemy_type = self.enemy[entity]
        position = self.position.get(entity, Vec2())
        if enemy_type == RED_ZOMBIE:
            count = 2 + int(self.difficulty) * 3
            for i in range(count):
                ratio = (i + 1) / count
                velocity = Vec2(80, 0).rotated(2 * 3.141592653589793 * ratio)
                self.spawn_projectile(position, velocity, RED_BULLET)
        self.player_data.mana += 1
        self.spawn_death_effect(enemy_type.texture, position)
        self.stats.enemies_killed[self.difficulty] += 1

    def spawn_player(self) -> int:
        """Create the player entity at the origin."""
        self.player = self.new_entity()
        self.position[self.player] = Vec2()
        self.velocity[self.player] = Vec2()
        self.drag[self.player] = 10
        self.size[self.player] = PLAYER_SIZE
        self.walk_animated[self.player] = WalkAnimation("player")
        self.texture[self.player] = "player"
        return self.player

    def spawn_doll(self, doll_type: DollType) -> int:
        """Create a doll at the origin; counts towards stats during a run."""
        entity = self.new_entity()
        self.doll[entity] = doll_type
        self.targeting[entity] = Targeting(accel=doll_type.accel)
        self.position[entity] = Vec2()
        self.velocity[entity] = Vec2()
        self.drag[entity] = 5
        self.size[entity] = doll_type.size
        self.texture[entity] = doll_type.texture
        if not self.uistate.is_main_menu and not self.uistate.is_death_screen:
            self.stats.dolls_summoned[self.difficulty] += 1
        return entity

    def spawn_enemy(self, enemy_type: EnemyType) -> int:
        """Create an enemy at a random point around the player."""
        entity = self.new_entity()
        self.enemy[entity] = enemy_type
        accel = enemy_type.acceleration
        if self.difficulty is Difficulty.EASY:
            accel *= 0.92
        self.targeting[entity] = Targeting(accel=accel)
        self.position[entity] = (
            self.player_position + random_direction(self.rng) * ENEMY_SPAWN_DISTANCE
        )
        self.velocity[entity] = Vec2()
        self.drag[entity] = 10
        self.walk_animated[entity] = WalkAnimation(enemy_type.texture)
        self.size[entity] = enemy_type.size

        wave = self.enemy_spawner.wave
        difficulty = int(self.difficulty)
        hp = enemy_type.base_hp * (1 + wave // (23 - difficulty * 3))
        if wave > 30:
            hp *= 1 + (wave - 30 + difficulty * 4) / 30
        self.hp[entity] = HP(hp)
        return entity

    def spawn_projectile(
        self, position: Vec2, velocity: Vec2, projectile_type: ProjectileType
    ) -> int:
        """Create a projectile that lives for a few seconds."""
        entity = self.new_entity()
        self.position[entity] = position
        self.velocity[entity] = velocity
        self.projectile[entity] = Projectile(projectile_type)
        self.texture[entity] = projectile_type.texture
        self.size[entity] = projectile_type.size
        return entity

    def spawn_combat_text(self, position: Vec2, text: str, color: Color = WHITE) -> int:
        """Create floating text that drifts upwards and fades."""
        entity = self.new_entity()
        self.position[entity] = position
        self.velocity[entity] = Vec2(0, -10)
        self.drag[entity] = 3 + self.rng.random()
        self.combat_text[entity] = CombatText(text, color)
        return entity

    def spawn_death_effect(self, name: str, center: Vec2) -> None:
        """Burst the named texture into one particle per opaque pixel."""
        asset = self.death_effects.get(name)
        if asset is None:
            return
        origin = center - asset.size * 0.5
        for pixel, color in asset.pixels.items():
            entity = self.new_entity()
            self.position[entity] = origin + pixel
            self.velocity[entity] = Vec2(0, 20).rotated(self.rng.random() - 0.5)
            self.drag[entity] = self.rng.random() / 10 + 0.1
            self.death_effect[entity] = DeathParticle(time_left=1.0, tint=color)

    def damage(self, entity: int, amount: float) -> None:
        """Lower an entity's HP, showing text and sound; delete it at zero."""
        hp = self.hp.get(entity)
        if hp is None:
            log.warning("Tried damaging deleted enemy with id %d", entity)
            return
        hp.val -= amount

        text = self.spawn_combat_text(self.position.get(entity, Vec2()), _format_number(amount))
        if amount < 0:
            self.combat_text[text].hue = GREEN
        elif entity == self.player:
            self._play("player_hit", 1.0, 1.0)
            self.combat_text[text].hue = RED
        elif entity in self.enemy:
            distance = self.player_position.distance_to(self.position.get(entity, Vec2()))
            if distance < 200:
                self._play("enemy_hit", 1 - distance / 200, 0.8 + 0.2 * self.rng.random())

        if hp.val <= 0:
            self.delete_entity(entity)

    def damage_with_cooldown(self, entity: int, amount: float, attacker: int) -> None:
        """Damage an entity unless ``attacker`` hit it too recently."""
        hp = self.hp.get(entity)
        if hp is None:
            log.warning("Tried damaging deleted enemy with id %d", entity)
            return
        cooldown = hp.attacker_cooldown.get(attacker)
        if cooldown is None or cooldown <= 0:
            hp.attacker_cooldown[attacker] = hp.immune_time
            self.damage(entity, amount)

    def heal(self, entity: int, amount: float) -> None:
        """Raise an entity's HP and show green text."""
        hp = self.hp.setdefault(entity, HP(0.0))
        hp.val += amount
        self.spawn_combat_text(
            self.position.get(entity, Vec2()), _format_number(amount), GREEN
        )

    def select_difficulty(self, difficulty: Difficulty) -> None:
        """Prepare the player for a run at ``difficulty``."""
        difficulty = Difficulty(difficulty)
        self.difficulty = difficulty
        self.hp[self.player] = HP(10.0, immune_time=difficulty.immune_time)
        self.player_data = PlayerData(mana=difficulty.starting_mana)
        self.stats.run_count[difficulty] += 1

    def start_game(self, difficulty: Difficulty) -> None:
        """Leave the main menu and start playing."""
        self.select_difficulty(difficulty)
        self.paused = False
        self.uistate.is_main_menu = False

    def _play(self, name: str, volume: float, pitch: float) -> None:
        if self.sounds is not None and volume > 0:
            self.sounds.play(name, volume, pitch)