"""Player options and statistics, and their storage on disk."""

from __future__ import annotations

import logging
from collections import defaultdict
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Callable

from alicevszombies.catalog import Difficulty
from alicevszombies.encode import SerializationError, deserialize, serialize

log = logging.getLogger(__name__)

USER_DIRECTORY = "user"
OPTIONS_FILE = "options.bin"
STATS_FILE = "stats.bin"
AUTOSAVE_INTERVAL = 15.0


@dataclass
class Options:
    """User-adjustable settings."""

    fullscreen: bool = True
    volume: float = 1.0
    cursor_type: int = 0

    def to_dict(self) -> dict[str, Any]:
        return {
            "Fullscreen": self.fullscreen,
            "Volume": self.volume,
            "CursorType": self.cursor_type,
        }

    @classmethod
    def from_dict(cls, data: Any) -> Options:
        if not isinstance(data, dict):
            raise SerializationError("options must be a mapping")
        defaults = cls()
        fullscreen = data.get("Fullscreen", defaults.fullscreen)
        volume = data.get("Volume", defaults.volume)
        cursor_type = data.get("CursorType", defaults.cursor_type)
        if not isinstance(fullscreen, bool):
            raise SerializationError("Fullscreen must be a boolean")
        if isinstance(volume, bool) or not isinstance(volume, (int, float)):
            raise SerializationError("Volume must be a number")
        if isinstance(cursor_type, bool) or not isinstance(cursor_type, int):
            raise SerializationError("CursorType must be an integer")
        return cls(fullscreen=fullscreen, volume=float(volume), cursor_type=cursor_type)


@dataclass(frozen=True)
class StatsSummary:
    """Statistics for one difficulty, or all of them combined."""

    time_played: float
    dolls_summoned: int
    enemies_killed: int
    highest_wave: int
    run_count: int

    def lines(self) -> list[str]:
        """Text lines as shown on the stats panel."""
        return [
            f"Time played: {format_time_played(self.time_played)}",
            f"Dolls summoned: {self.dolls_summoned}",
            f"Enemies killed: {self.enemies_killed}",
            f"Highest wave: {self.highest_wave}",
            f"Run count: {self.run_count}",
        ]


_STAT_FIELDS = {
    "time_played": ("TimePlayed", float),
    "enemies_killed": ("EnemiesKilled", int),
    "dolls_summoned": ("DollsSummoned", int),
    "highest_wave": ("HighestWave", int),
    "run_count": ("RunCount", int),
}


@dataclass
class Stats:
    """Lifetime statistics, kept per difficulty."""

    time_played: dict[Difficulty, float] = field(default_factory=dict)
    enemies_killed: dict[Difficulty, int] = field(default_factory=dict)
    dolls_summoned: dict[Difficulty, int] = field(default_factory=dict)
    highest_wave: dict[Difficulty, int] = field(default_factory=dict)
    run_count: dict[Difficulty, int] = field(default_factory=dict)
    _autosave_timer: float = field(default=0.0, repr=False, compare=False)

    def __post_init__(self) -> None:
        for name, (_, kind) in _STAT_FIELDS.items():
            setattr(self, name, defaultdict(kind, getattr(self, name)))

    def tick(self, difficulty: Difficulty, dt: float, wave: int) -> bool:
        """Account for ``dt`` seconds of play; return True when an autosave is due."""
        self.time_played[difficulty] += dt
        if wave > self.highest_wave[difficulty]:
            self.highest_wave[difficulty] = wave
        self._autosave_timer += dt
        if self._autosave_timer >= AUTOSAVE_INTERVAL:
            self._autosave_timer = 0.0
            return True
        return False

    def summary(self, difficulty: Difficulty) -> StatsSummary:
        """Figures for one difficulty; UNDEFINED combines every difficulty."""
        if difficulty is Difficulty.UNDEFINED:
            return StatsSummary(
                time_played=sum(self.time_played.values()),
                dolls_summoned=sum(self.dolls_summoned.values()),
                enemies_killed=sum(self.enemies_killed.values()),
                highest_wave=max(self.highest_wave.values(), default=0),
                run_count=sum(self.run_count.values()),
            )
        return StatsSummary(
            time_played=self.time_played.get(difficulty, 0.0),
            dolls_summoned=self.dolls_summoned.get(difficulty, 0),
            enemies_killed=self.enemies_killed.get(difficulty, 0),
            highest_wave=self.highest_wave.get(difficulty, 0),
            run_count=self.run_count.get(difficulty, 0),
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            key: {str(int(d)): value for d, value in getattr(self, name).items()}
            for name, (key, _) in _STAT_FIELDS.items()
        }

    @classmethod
    def from_dict(cls, data: Any) -> Stats:
        if not isinstance(data, dict):
            raise SerializationError("stats must be a mapping")
        values = {
            name: _parse_counts(data.get(key, {}), kind)
            for name, (key, kind) in _STAT_FIELDS.items()
        }
        return cls(**values)


def _parse_counts(data: Any, kind: type) -> dict[Difficulty, Any]:
    if not isinstance(data, dict):
        raise SerializationError("stat table must be a mapping")
    counts: dict[Difficulty, Any] = {}
    for key, value in data.items():
        try:
            difficulty = Difficulty(int(key))
        except ValueError as error:
            raise SerializationError(f"unknown difficulty {key!r}") from error
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            raise SerializationError(f"stat value {value!r} is not a number")
        if kind is int and not isinstance(value, int):
            raise SerializationError(f"stat value {value!r} is not an integer")
        counts[difficulty] = kind(value)
    return counts


def format_time_played(seconds: float) -> str:
    """Play time as shown in stats, e.g. ``2m5s`` or ``42s``."""
    whole = int(seconds)
    if seconds > 60:
        return f"{whole // 60}m{whole % 60}s"
    return f"{whole}s"


def _write(data: bytes, path: Path) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_bytes(data)


def save_options(options: Options, path: str | Path) -> None:
    """Write options to ``path``, creating its directory if needed."""
    _write(serialize(options.to_dict()), Path(path))
    log.info("Options saved!")


def save_stats(stats: Stats, path: str | Path) -> None:
    """Write stats to ``path``, creating its directory if needed."""
    _write(serialize(stats.to_dict()), Path(path))
    log.info("Stats saved!")


def _try_save(save: Callable[[Any, Path], None], value: Any, path: Path) -> None:
    try:
        save(value, path)
    except (OSError, SerializationError) as error:
        log.error("Failed saving %s: %s", path, error)


def _load(path: Path, parse: Callable[[Any], Any], what: str) -> Any:
    try:
        data = path.read_bytes()
    except OSError:
        log.error("Failed reading %s file!", what)
        return None
    try:
        value = parse(deserialize(data))
    except SerializationError:
        log.error("Failed deserializing %s!", what)
        return None
    log.info("Loaded %s successfully!", what)
    return value


def load_options(path: str | Path) -> Options:
    """Read options; on failure return defaults and write them to ``path``."""
    path = Path(path)
    options = _load(path, Options.from_dict, "options")
    if options is None:
        log.warning("Creating default options file...")
        options = Options()
        _try_save(save_options, options, path)
    return options


def load_stats(path: str | Path) -> Stats:
    """Read stats; on failure return empty stats and write them to ``path``."""
    path = Path(path)
    stats = _load(path, Stats.from_dict, "stats")
    if stats is None:
        log.warning("Creating default stats file...")
        stats = Stats()
        _try_save(save_stats, stats, path)
    return stats


def load_user_data(directory: str | Path = USER_DIRECTORY) -> tuple[Options, Stats]:
    """Load options and stats from ``directory``."""
    directory = Path(directory)
    return load_options(directory / OPTIONS_FILE), load_stats(directory / STATS_FILE)


def save_user_data(
    options: Options, stats: Stats, directory: str | Path = USER_DIRECTORY
) -> None:
    """Save options and stats to ``directory``; failures are logged."""
    directory = Path(directory)
    _try_save(save_options, options, directory / OPTIONS_FILE)
    _try_save(save_stats, stats, directory / STATS_FILE)