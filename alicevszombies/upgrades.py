"""Upgrades, the upgrade screen choice and the player's spells."""

from __future__ import annotations

from alicevszombies import catalog
from alicevszombies.catalog import UPGRADE_DOLLS, Upgrade
from alicevszombies.vector import Vec2
from alicevszombies.world import World

HEAL_COST = 5.0
HEAL_AMOUNT = 5.0
DOLL_COST = 10.0
UPGRADE_COST = 10.0


def available_upgrades(world: World) -> list[Upgrade]:
    """Upgrades that can be offered given the dolls the player owns."""
    dolls = list(world.doll.values())
    basic = sum(1 for kind in dolls if kind == catalog.BASIC_DOLL)
    lance = sum(1 for kind in dolls if kind == catalog.LANCE_DOLL)
    knife = sum(1 for kind in dolls if kind == catalog.KNIFE_DOLL)
    melee = sum(1 for kind in dolls if kind.projectile_type is None)

    offered = []
    for upgrade in Upgrade:
        if upgrade is Upgrade.DOLL_SPEED:
            allowed = basic == 0 or melee > 1
        elif upgrade in (Upgrade.LANCE_DOLL, Upgrade.KNIFE_DOLL):
            allowed = basic > 0
        elif upgrade is Upgrade.MAGICIAN_DOLL:
            allowed = knife > 1
        elif upgrade is Upgrade.SCYTHE_DOLL:
            allowed = lance > 1
        else:
            allowed = True
        if allowed:
            offered.append(upgrade)
    return offered


def random_upgrades(world: World) -> tuple[Upgrade, Upgrade]:
    """Two different random upgrades from those available."""
    available = available_upgrades(world)
    if len(available) < 2:
        raise ValueError("fewer than two upgrades are available")
    first, second = world.rng.sample(available, 2)
    return first, second


def increment_upgrade(world: World, upgrade: Upgrade) -> None:
    """Raise the level of ``upgrade`` and apply its effect."""
    upgrades = world.player_data.upgrades
    upgrades[upgrade] = upgrades.get(upgrade, 0) + 1
    world.spawn_combat_text(world.player_position - Vec2(0, 5), f"{upgrade} +")
    on_upgrade_get(world, upgrade)


def on_upgrade_get(world: World, upgrade: Upgrade) -> None:
    """Trade dolls for the doll an upgrade grants, if it grants one."""
    doll_type = UPGRADE_DOLLS.get(upgrade)
    if doll_type is None:
        return
    if upgrade in (Upgrade.MAGICIAN_DOLL, Upgrade.SCYTHE_DOLL):
        consumed = (
            catalog.KNIFE_DOLL if upgrade is Upgrade.MAGICIAN_DOLL else catalog.LANCE_DOLL
        )
        for entity in [e for e, kind in world.doll.items() if kind == consumed]:
            world.delete_entity(entity)
    else:
        basic = next(
            (e for e, kind in world.doll.items() if kind == catalog.BASIC_DOLL), None
        )
        if basic is not None:
            world.delete_entity(basic)
    doll = world.spawn_doll(doll_type)
    world.position[doll] = world.player_position


def open_upgrade_screen(world: World) -> None:
    """Show the upgrade screen with two fresh choices."""
    world.uistate.is_upgrade_screen = True
    world.uistate.upgrade_choices = random_upgrades(world)


def choose_upgrade(world: World, index: int) -> Upgrade:
    """Take choice ``index`` from the upgrade screen and resume play."""
    if not world.uistate.is_upgrade_screen:
        raise ValueError("the upgrade screen is not open")
    upgrade = world.uistate.upgrade_choices[index]
    increment_upgrade(world, upgrade)
    world.paused = False
    world.uistate.is_upgrade_screen = False
    return upgrade


def cast_heal(world: World) -> bool:
    """Spend mana to heal the player; return whether the spell was cast."""
    if world.player_data.mana < HEAL_COST or world.paused:
        return False
    world.heal(world.player, HEAL_AMOUNT)
    world.player_data.mana -= HEAL_COST
    return True


def cast_doll(world: World) -> bool:
    """Spend mana to summon a sword doll at the player."""
    if world.player_data.mana < DOLL_COST or world.paused:
        return False
    doll = world.spawn_doll(catalog.BASIC_DOLL)
    world.position[doll] = world.player_position
    world.player_data.mana -= DOLL_COST
    return True


def cast_upgrade(world: World) -> bool:
    """Spend mana to pause and open the upgrade screen."""
    if world.player_data.mana < UPGRADE_COST or world.paused:
        return False
    world.paused = True
    world.player_data.mana -= UPGRADE_COST
    open_upgrade_screen(world)
    return True