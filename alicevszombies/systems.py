"""Per-frame simulation systems that move, animate and resolve the world."""

from __future__ import annotations

import math
import random
from dataclasses import replace

from alicevszombies.catalog import (
    MEDICINE,
    RED_BULLET,
    RED_ZOMBIE,
    SCYTHE_DOLL,
    SMALL_ZOMBIE,
    ZOMBIE,
    Difficulty,
    DollType,
    EnemyType,
    Upgrade,
)
from alicevszombies.vector import Rect, Vec2, center_rectangle, random_direction
from alicevszombies.vector import direction as direction_to
from alicevszombies.world import Targeting, World

PLAYER_ACCELERATION = 700.0
RETARGET_INTERVAL = 0.4
RETARGET_DISTANCE = 2.0
MAX_DOLL_CANDIDATES = 16
KNOCKBACK = 800.0
WALK_FRAME_TIME = 0.15
DOLL_PROJECTILE_SPEED = 200.0
ENEMY_PROJECTILE_SPEED = 100.0


def update_hp(world: World) -> None:
    """Count down every attacker immunity timer."""
    for hp in world.hp.values():
        for attacker in hp.attacker_cooldown:
            hp.attacker_cooldown[attacker] -= world.dt


def update_player(world: World, direction: Vec2) -> None:
    """Accelerate the player along the pressed ``direction``."""
    delta = direction.normalized() * (PLAYER_ACCELERATION * world.dt)
    player = world.player
    world.velocity[player] = world.velocity.get(player, Vec2()) + delta


def update_dolls(world: World) -> None:
    """Retarget every doll and let ranged dolls shoot."""
    for doll, doll_type in list(world.doll.items()):
        if doll not in world.doll:
            continue
        _update_doll_targeting(world, doll, doll_type)
        if doll_type.contact_damage == 0:
            _update_doll_ranged(world, doll, doll_type)


def _update_doll_targeting(world: World, doll: int, doll_type: DollType) -> None:
    targeting = world.targeting.setdefault(doll, Targeting())
    level = world.player_data.upgrades.get(Upgrade.DOLL_SPEED, 0)
    targeting.accel = doll_type.accel + 10 * level
    targeting.targeting_timer -= world.dt
    position = world.position.get(doll, Vec2())
    if (
        targeting.targeting_timer > 0
        and targeting.target.distance_to(position) >= RETARGET_DISTANCE
    ):
        return
    targeting.targeting_timer = RETARGET_INTERVAL

    player_position = world.player_position
    candidates: list[int] = []
    for enemy in world.enemy:
        enemy_position = world.position.get(enemy, Vec2())
        distance = position.distance_to(enemy_position)
        player_distance = player_position.distance_to(enemy_position)
        if player_distance < 60 and doll % 2 == 0:
            targeting.target = enemy_position
            return
        if distance < 160 and player_distance < 180:
            candidates.append(enemy)
        if len(candidates) == MAX_DOLL_CANDIDATES - 1:
            break

    if candidates:
        # Each doll keeps picking the same slot so dolls spread across enemies.
        pick = random.Random(doll).getrandbits(63) % len(candidates)
        enemy_position = world.position.get(candidates[pick], Vec2())
        if doll_type.contact_damage > 0:
            targeting.target = enemy_position
        else:
            targeting.target = enemy_position + random_direction(world.rng) * 32
    else:
        offset = Vec2(20, 0).rotated(world.rng.random() * math.pi * 2)
        targeting.target = player_position + offset


def _update_doll_ranged(world: World, doll: int, doll_type: DollType) -> None:
    timer = world.shoot_timer.get(doll, 0.0) - world.dt
    world.shoot_timer[doll] = timer
    if timer > 0 or doll_type.projectile_type is None:
        return
    position = world.position.get(doll, Vec2())
    nearest = min(
        world.enemy,
        key=lambda enemy: position.distance_to(world.position.get(enemy, Vec2())),
        default=None,
    )
    if nearest is None:
        return
    aim = direction_to(position, world.position.get(nearest, Vec2()))
    world.spawn_projectile(position, aim * DOLL_PROJECTILE_SPEED, doll_type.projectile_type)
    world.shoot_timer[doll] = 1.0


def update_projectiles(world: World) -> None:
    """Age projectiles and remove the expired ones."""
    for entity, projectile in list(world.projectile.items()):
        if entity not in world.projectile:
            continue
        time_left = projectile.time_left - world.dt
        if time_left <= 0:
            world.delete_entity(entity)
        else:
            projectile.time_left = time_left


def update_enemy_spawner(world: World) -> None:
    """Advance waves and spawn enemies when the spawn timer runs out."""
    spawner = replace(world.enemy_spawner)
    if spawner.enemies_to_spawn <= 0:
        spawner.wave += 1
        spawner.enemies_to_spawn = 2 + spawner.wave * 2

    spawner.spawn_timer -= world.dt
    if spawner.spawn_timer <= 0:
        difficulty = int(world.difficulty)
        if spawner.wave % 10 == 0 and spawner.enemies_to_spawn > 1:
            world.spawn_enemy(MEDICINE)
            spawner.spawn_timer = 15 - difficulty * 3
            spawner.enemies_to_spawn = 1
        else:
            world.spawn_enemy(enemy_type_to_spawn(world))
            timer = 2 - min(1.4, spawner.wave / 10)
            if spawner.enemies_to_spawn > 10:
                timer /= max(2, difficulty)
            if spawner.enemies_to_spawn > 30:
                timer /= 2
            spawner.spawn_timer = timer
            spawner.enemies_to_spawn -= 1

    world.enemy_spawner = spawner


def enemy_type_to_spawn(world: World) -> EnemyType:
    """Pick the kind of the next regular enemy for the current wave."""
    wave = world.enemy_spawner.wave
    rng = world.rng
    if wave > 35 and rng.random() < 0.01:
        return MEDICINE
    if (world.difficulty == Difficulty.LUNATIC or wave > 20) and (
        rng.random() < 0.05 or (wave % 6 == 0 and rng.random() < 0.2)
    ):
        return RED_ZOMBIE
    if (wave % 3 == 0 and rng.random() < 0.1) or rng.random() < 0.03:
        return SMALL_ZOMBIE
    return ZOMBIE


def update_enemies(world: World) -> None:
    """Retarget enemies towards the player and let ranged enemies shoot."""
    player_position = world.player_position
    for entity, enemy_type in list(world.enemy.items()):
        if entity not in world.enemy:
            continue
        position = world.position.get(entity, Vec2())
        targeting = world.targeting.setdefault(entity, Targeting())
        targeting.targeting_timer -= world.dt
        if (
            targeting.targeting_timer <= 0
            or targeting.target.distance_to(position) < RETARGET_DISTANCE
        ):
            targeting.targeting_timer = RETARGET_INTERVAL
            if not enemy_type.ranged:
                distance = position.distance_to(player_position)
                delta = (player_position - position).normalized()
                delta = delta.rotated(world.rng.random() / 2) * (distance / 3)
                targeting.target = position + delta
            else:
                targeting.target = player_position + random_direction(world.rng) * 70

        if enemy_type.ranged:
            timer = world.shoot_timer.get(entity, 0.0) - world.dt
            if timer <= 0:
                timer = 1 - int(world.difficulty) / 10
                aim = direction_to(position, player_position)
                world.spawn_projectile(position, aim * ENEMY_PROJECTILE_SPEED, RED_BULLET)
            world.shoot_timer[entity] = timer


def update_targeting_movement(world: World) -> None:
    """Accelerate every targeting entity towards its target."""
    for entity, targeting in world.targeting.items():
        heading = (targeting.target - world.position.get(entity, Vec2())).normalized()
        velocity = world.velocity.get(entity, Vec2())
        world.velocity[entity] = velocity + heading * (targeting.accel * world.dt)


def update_drag(world: World) -> None:
    """Slow moving entities down exponentially; stop the nearly still ones."""
    for entity, drag in world.drag.items():
        velocity = world.velocity.get(entity)
        if velocity is None:
            continue
        if velocity.length() > 1:
            world.velocity[entity] = velocity * math.exp(-drag * world.dt)
        else:
            world.velocity[entity] = Vec2()


def update_velocity(world: World) -> None:
    """Move every entity by its velocity."""
    for entity, position in world.position.items():
        velocity = world.velocity.get(entity)
        if velocity is not None:
            world.position[entity] = position + velocity * world.dt


def _rect(world: World, entity: int) -> Rect:
    return center_rectangle(
        world.position.get(entity, Vec2()), world.size.get(entity, Vec2())
    )


def _feet(rect: Rect) -> Rect:
    width = rect.width / 2
    return Rect(rect.x, rect.y + width, width, rect.height)


def update_collisions(world: World) -> None:
    """Resolve contact damage, projectile hits and enemy crowding."""
    dt = world.dt
    player = world.player
    player_rect = center_rectangle(world.player_position, world.size.get(player, Vec2()))
    bonus = world.player_data.upgrades.get(Upgrade.DOLL_DAMAGE, 0)

    for enemy in list(world.enemy):
        if enemy not in world.enemy:
            continue
        enemy_rect = _rect(world, enemy)

        if player_rect.collides(enemy_rect):
            world.damage_with_cooldown(player, 1, enemy)
            push = direction_to(world.player_position, world.position.get(enemy, Vec2()))
            world.velocity[enemy] = world.velocity.get(enemy, Vec2()) + push * (
                KNOCKBACK * dt
            )

        for doll, doll_type in list(world.doll.items()):
            if doll_type.contact_damage <= 0 or doll_type.size.x <= 0:
                continue
            if _rect(world, doll).collides(enemy_rect):
                share = 2 if doll_type == SCYTHE_DOLL else 4
                world.damage_with_cooldown(
                    enemy, doll_type.contact_damage + bonus / share, doll
                )
                break

        for entity, projectile in list(world.projectile.items()):
            if entity not in world.projectile or projectile.type.hostile:
                continue
            rect = center_rectangle(world.position.get(entity, Vec2()), projectile.type.size)
            if enemy_rect.collides(rect):
                amount = projectile.type.damage + bonus / 8
                if projectile.type.delete_on_hit:
                    world.damage(enemy, amount)
                    world.delete_entity(entity)
                else:
                    world.damage_with_cooldown(enemy, amount, entity)
                break

        if enemy not in world.enemy:
            continue
        feet = _feet(enemy_rect)
        enemy_position = world.position.get(enemy, Vec2())
        for other in list(world.enemy):
            if feet.collides(_feet(_rect(world, other))):
                push = direction_to(enemy_position, world.position.get(other, Vec2()))
                push = push * (KNOCKBACK * dt)
                world.velocity[other] = world.velocity.get(other, Vec2()) + push
                world.velocity[enemy] = world.velocity[other] - push

    for entity, projectile in list(world.projectile.items()):
        if not projectile.type.hostile:
            continue
        rect = center_rectangle(world.position.get(entity, Vec2()), projectile.type.size)
        if player_rect.collides(rect):
            world.damage_with_cooldown(player, projectile.type.damage, entity)
            break


def update_death_effects(world: World) -> None:
    """Age death particles and remove the faded ones."""
    for entity, particle in list(world.death_effect.items()):
        time_left = particle.time_left - world.dt
        if time_left > 0:
            particle.time_left = time_left
        else:
            world.delete_entity(entity)


def update_combat_text(world: World) -> None:
    """Remove combat text that has nearly stopped drifting."""
    for entity in list(world.combat_text):
        if world.velocity.get(entity, Vec2()).length() < 0.5:
            world.delete_entity(entity)


def update_animations(world: World) -> None:
    """Advance walk cycles and flip melee dolls to face their movement."""
    for entity, animation in world.walk_animated.items():
        velocity = world.velocity.get(entity)
        if velocity is None:
            continue
        base = animation.base_texture
        if velocity.length() > 0:
            timer = world.anim_timer.get(entity, 0.0)
            if timer > WALK_FRAME_TIME:
                world.anim_timer[entity] = 0.0
                first = base + "_walk0"
                world.texture[entity] = (
                    base + "_walk1" if world.texture.get(entity) == first else first
                )
            else:
                world.anim_timer[entity] = timer + world.dt
        else:
            world.anim_timer[entity] = 0.0
            world.texture[entity] = base

    for entity, doll_type in world.doll.items():
        if doll_type.contact_damage > 0:
            if world.velocity.get(entity, Vec2()).x >= 0:
                world.texture[entity] = doll_type.texture
            else:
                world.texture[entity] = doll_type.texture + "_fliph"


def step(world: World, direction: Vec2 = Vec2()) -> None:
    """Run one simulation tick unless the world is paused."""
    if world.paused:
        return
    update_hp(world)
    update_player(world, direction)
    update_dolls(world)
    update_projectiles(world)
    update_enemy_spawner(world)
    update_enemies(world)
    update_targeting_movement(world)
    update_drag(world)
    update_velocity(world)
    update_collisions(world)
    update_death_effects(world)
    update_combat_text(world)
    update_animations(world)