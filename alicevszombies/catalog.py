"""Fixed game data: difficulties, upgrades and entity types."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, IntEnum

from alicevszombies.vector import Vec2


class Difficulty(IntEnum):
    """Game difficulty; UNDEFINED is used for the main menu and overall stats."""

    UNDEFINED = 0
    EASY = 1
    NORMAL = 2
    HARD = 3
    LUNATIC = 4

    @property
    def label(self) -> str:
        """Name shown in menus."""
        return _LABELS[self]

    @property
    def immune_time(self) -> float:
        """Seconds the player stays immune to one attacker after being hit."""
        return _IMMUNE_TIMES[self]

    @property
    def starting_mana(self) -> float:
        """Mana the player starts a run with."""
        return 10.0 if self is Difficulty.EASY else 0.0


_LABELS = {
    Difficulty.UNDEFINED: "Overall",
    Difficulty.EASY: "Easy",
    Difficulty.NORMAL: "Normal",
    Difficulty.HARD: "Hard",
    Difficulty.LUNATIC: "Lunatic",
}

_IMMUNE_TIMES = {
    Difficulty.UNDEFINED: 0.0,
    Difficulty.EASY: 1.8,
    Difficulty.NORMAL: 1.2,
    Difficulty.HARD: 1.0,
    Difficulty.LUNATIC: 0.8,
}


class Upgrade(str, Enum):
    """Upgrades the player can pick; the order is the order offered."""

    DOLL_DAMAGE = "Doll Damage"
    DOLL_SPEED = "Doll Speed"
    LANCE_DOLL = "Lance Doll"
    SCYTHE_DOLL = "Scythe Doll"
    KNIFE_DOLL = "Knife Doll"
    MAGICIAN_DOLL = "Magician Doll"

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True)
class ProjectileType:
    """Behaviour of a kind of projectile."""

    hostile: bool
    damage: float
    texture: str
    size: Vec2
    delete_on_hit: bool = False


@dataclass(frozen=True)
class DollType:
    """Behaviour of a kind of doll."""

    contact_damage: float
    texture: str
    accel: float
    size: Vec2 = Vec2()
    projectile_type: ProjectileType | None = None

    @property
    def ranged(self) -> bool:
        """True for dolls that shoot instead of touching enemies."""
        return self.projectile_type is not None


@dataclass(frozen=True)
class EnemyType:
    """Behaviour of a kind of enemy."""

    texture: str
    acceleration: float
    base_hp: float
    size: Vec2
    ranged: bool = False


KNIFE = ProjectileType(
    hostile=False, damage=1, texture="knife", size=Vec2(4, 4), delete_on_hit=True
)
RED_BULLET = ProjectileType(hostile=True, damage=5, texture="red_bullet", size=Vec2(4, 4))
MAGIC_MISSILE = ProjectileType(
    hostile=False, damage=2, texture="magic_missile", size=Vec2(4, 4), delete_on_hit=False
)

BASIC_DOLL = DollType(contact_damage=1, texture="doll_sword", accel=500, size=Vec2(8, 8))
LANCE_DOLL = DollType(contact_damage=2, texture="doll_lance", accel=500, size=Vec2(11, 8))
SCYTHE_DOLL = DollType(contact_damage=3, texture="doll_scythe", accel=650, size=Vec2(20, 8))
KNIFE_DOLL = DollType(contact_damage=0, texture="doll_knife", accel=400, projectile_type=KNIFE)
MAGICIAN_DOLL = DollType(
    contact_damage=0, texture="doll_magician", accel=550, projectile_type=MAGIC_MISSILE
)

ZOMBIE = EnemyType(texture="zombie", acceleration=680, base_hp=3, size=Vec2(8, 16))
SMALL_ZOMBIE = EnemyType(texture="small_zombie", acceleration=740, base_hp=1, size=Vec2(4, 8))
RED_ZOMBIE = EnemyType(texture="red_zombie", acceleration=700, base_hp=2, size=Vec2(8, 16))
MEDICINE = EnemyType(
    texture="medicine", acceleration=730, base_hp=50, size=Vec2(8, 16), ranged=True
)

UPGRADE_DOLLS: dict[Upgrade, DollType] = {
    Upgrade.LANCE_DOLL: LANCE_DOLL,
    Upgrade.SCYTHE_DOLL: SCYTHE_DOLL,
    Upgrade.KNIFE_DOLL: KNIFE_DOLL,
    Upgrade.MAGICIAN_DOLL: MAGICIAN_DOLL,
}