import math
import random

import pytest

from alicevszombies.catalog import (
    BASIC_DOLL,
    KNIFE,
    LANCE_DOLL,
    RED_BULLET,
    RED_ZOMBIE,
    ZOMBIE,
    Difficulty,
)
from alicevszombies.userdata import Stats
from alicevszombies.vector import Vec2
from alicevszombies.world import (
    GREEN,
    RED,
    WHITE,
    DeathEffectAsset,
    World,
)


class RecordingSounds:
    def __init__(self):
        self.calls = []

    def play(self, name, volume, pitch):
        self.calls.append((name, volume, pitch))


def make_world(**kwargs):
    kwargs.setdefault("rng", random.Random(7))
    return World(**kwargs)


def test_new_world_is_main_menu_with_two_dolls():
    world = make_world()
    assert world.paused
    assert world.uistate.is_main_menu
    assert world.player == 0
    assert world.position[world.player] == Vec2()
    assert world.texture[world.player] == "player"
    assert sorted(world.position[d] for d in world.doll) == sorted([Vec2(-20, 4), Vec2(20, -4)])
    assert all(t == BASIC_DOLL for t in world.doll.values())
    assert sum(world.stats.dolls_summoned.values()) == 0


def test_new_entity_ids_increase_across_reset():
    world = make_world()
    first = world.new_entity()
    world.reset()
    assert world.new_entity() > first
    assert world.player > first


def test_reset_clears_enemies():
    world = make_world()
    world.start_game(Difficulty.NORMAL)
    world.spawn_enemy(ZOMBIE)
    world.reset()
    assert world.enemy == {}
    assert world.difficulty is Difficulty.UNDEFINED
    assert world.uistate.is_main_menu


def test_select_difficulty_sets_player_state_and_counts_run():
    stats = Stats()
    world = make_world(stats=stats)
    world.select_difficulty(Difficulty.EASY)
    hp = world.hp[world.player]
    assert hp.val == 10
    assert hp.immune_time == Difficulty.EASY.immune_time
    assert world.player_data.mana == Difficulty.EASY.starting_mana
    assert stats.run_count[Difficulty.EASY] == 1


def test_start_game_unpauses():
    world = make_world()
    world.start_game(Difficulty.HARD)
    assert not world.paused
    assert not world.uistate.is_main_menu
    assert world.difficulty is Difficulty.HARD


def test_spawn_doll_during_run_counts_stat():
    world = make_world()
    world.start_game(Difficulty.NORMAL)
    doll = world.spawn_doll(LANCE_DOLL)
    assert world.stats.dolls_summoned[Difficulty.NORMAL] == 1
    assert world.texture[doll] == LANCE_DOLL.texture
    assert world.targeting[doll].accel == LANCE_DOLL.accel


def test_spawn_enemy_around_player():
    world = make_world()
    world.start_game(Difficulty.NORMAL)
    enemy = world.spawn_enemy(ZOMBIE)
    assert world.position[enemy].distance_to(world.position[world.player]) == pytest.approx(500)
    assert world.hp[enemy].val == ZOMBIE.base_hp
    assert world.targeting[enemy].accel == ZOMBIE.acceleration


def test_easy_enemies_are_slower():
    world = make_world()
    world.start_game(Difficulty.EASY)
    enemy = world.spawn_enemy(ZOMBIE)
    assert world.targeting[enemy].accel == pytest.approx(ZOMBIE.acceleration * 0.92)


def test_enemy_hp_grows_with_wave():
    world = make_world()
    world.start_game(Difficulty.NORMAL)
    early = world.spawn_enemy(ZOMBIE)
    world.enemy_spawner.wave = 40
    late = world.spawn_enemy(ZOMBIE)
    assert world.hp[late].val > world.hp[early].val


def test_spawn_projectile():
    world = make_world()
    proj = world.spawn_projectile(Vec2(1, 2), Vec2(3, 0), KNIFE)
    assert world.projectile[proj].time_left == 4
    assert world.texture[proj] == "knife"
    assert world.velocity[proj] == Vec2(3, 0)


def test_combat_text_drifts_up():
    world = make_world()
    text = world.spawn_combat_text(Vec2(5, 5), "hi")
    assert world.velocity[text] == Vec2(0, -10)
    assert 3 <= world.drag[text] < 4
    assert world.combat_text[text].hue == WHITE


def test_damage_reduces_hp_and_shows_amount():
    world = make_world()
    world.start_game(Difficulty.NORMAL)
    enemy = world.spawn_enemy(ZOMBIE)
    world.damage(enemy, 1)
    assert world.hp[enemy].val == ZOMBIE.base_hp - 1
    assert [c.text for c in world.combat_text.values()] == ["1"]


def test_damage_missing_entity_is_ignored():
    world = make_world()
    world.damage(999, 5)
    assert world.combat_text == {}
    assert 999 not in world.hp


def test_player_hit_plays_sound_and_red_text():
    sounds = RecordingSounds()
    world = make_world(sounds=sounds)
    world.start_game(Difficulty.NORMAL)
    world.damage(world.player, 1)
    assert sounds.calls == [("player_hit", 1.0, 1.0)]
    assert [c.hue for c in world.combat_text.values()] == [RED]


def test_enemy_hit_nearby_plays_sound():
    sounds = RecordingSounds()
    world = make_world(sounds=sounds)
    world.start_game(Difficulty.NORMAL)
    enemy = world.spawn_enemy(ZOMBIE)
    world.position[enemy] = Vec2(100, 0)
    world.damage(enemy, 1)
    assert len(sounds.calls) == 1
    name, volume, pitch = sounds.calls[0]
    assert name == "enemy_hit"
    assert volume == pytest.approx(0.5)
    assert 0.8 <= pitch <= 1.0


def test_damage_with_cooldown_blocks_repeat_hits():
    world = make_world()
    world.start_game(Difficulty.NORMAL)
    enemy = world.spawn_enemy(ZOMBIE)
    world.damage_with_cooldown(enemy, 1, attacker=42)
    world.damage_with_cooldown(enemy, 1, attacker=42)
    assert world.hp[enemy].val == ZOMBIE.base_hp - 1
    world.hp[enemy].attacker_cooldown[42] = 0
    world.damage_with_cooldown(enemy, 1, attacker=42)
    assert world.hp[enemy].val == ZOMBIE.base_hp - 2


def test_killing_enemy_gives_mana_and_stat():
    world = make_world()
    world.start_game(Difficulty.NORMAL)
    enemy = world.spawn_enemy(ZOMBIE)
    world.damage(enemy, ZOMBIE.base_hp)
    assert enemy not in world.enemy
    assert enemy not in world.position
    assert world.player_data.mana == 1
    assert world.stats.enemies_killed[Difficulty.NORMAL] == 1


def test_red_zombie_death_fires_ring_of_bullets():
    world = make_world()
    world.start_game(Difficulty.NORMAL)
    enemy = world.spawn_enemy(RED_ZOMBIE)
    world.delete_entity(enemy)
    bullets = [p for p in world.projectile.values() if p.type == RED_BULLET]
    assert len(bullets) == 2 + 3 * int(Difficulty.NORMAL)
    speeds = [world.velocity[e].length() for e in world.projectile]
    assert all(s == pytest.approx(80) for s in speeds)


def test_death_effect_spawns_particle_per_pixel():
    asset = DeathEffectAsset(
        pixels={Vec2(0, 0): (1, 2, 3, 255), Vec2(1, 1): (4, 5, 6, 255)}, size=Vec2(2, 2)
    )
    world = make_world(death_effects={"zombie": asset})
    world.spawn_death_effect("zombie", Vec2(10, 10))
    positions = sorted((world.position[e].x, world.position[e].y) for e in world.death_effect)
    assert positions == [(9, 9), (10, 10)]
    assert all(p.time_left == 1 for p in world.death_effect.values())
    assert all(world.velocity[e].length() == pytest.approx(20) for e in world.death_effect)


def test_player_death_shows_death_screen():
    asset = DeathEffectAsset(pixels={Vec2(0, 0): (9, 9, 9, 255)}, size=Vec2(1, 1))
    world = make_world(death_effects={"player": asset})
    world.start_game(Difficulty.NORMAL)
    world.velocity[world.player] = Vec2(5, 5)
    player = world.player
    world.damage(player, 100)
    assert world.uistate.is_death_screen
    assert world.paused
    assert player not in world.texture
    assert player not in world.hp
    assert len(world.death_effect) == 1
    non_particles = [e for e in world.velocity if e not in world.death_effect
                     and e not in world.combat_text]
    assert all(world.velocity[e] == Vec2() for e in non_particles)


def test_heal_raises_hp_with_green_text():
    world = make_world()
    world.start_game(Difficulty.NORMAL)
    world.heal(world.player, 5)
    assert world.hp[world.player].val == 15
    texts = list(world.combat_text.values())
    assert [t.hue for t in texts] == [GREEN]
    assert texts[0].text == "5"


def test_negative_damage_is_green():
    world = make_world()
    world.start_game(Difficulty.NORMAL)
    world.damage(world.player, -2)
    assert world.hp[world.player].val == 12
    assert [c.hue for c in world.combat_text.values()] == [GREEN]
    assert math.isclose(world.player_data.mana, 0)