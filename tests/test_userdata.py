import pytest

from alicevszombies.catalog import Difficulty
from alicevszombies.encode import serialize
from alicevszombies.userdata import (
    Options,
    Stats,
    format_time_played,
    load_options,
    load_stats,
    load_user_data,
    save_options,
    save_stats,
    save_user_data,
)


def test_option_defaults():
    assert Options() == Options(fullscreen=True, volume=1.0, cursor_type=0)


def test_options_round_trip(tmp_path):
    path = tmp_path / "user" / "options.bin"
    options = Options(fullscreen=False, volume=0.25, cursor_type=1)
    save_options(options, path)
    assert load_options(path) == options


def test_missing_options_give_defaults_and_file(tmp_path):
    path = tmp_path / "user" / "options.bin"
    assert load_options(path) == Options()
    assert path.exists()
    assert load_options(path) == Options()


@pytest.mark.parametrize(
    "payload",
    [b"not json", serialize({"Fullscreen": "yes"}), serialize([1, 2]), serialize({"Volume": True})],
)
def test_bad_options_fall_back_to_defaults(tmp_path, payload):
    path = tmp_path / "options.bin"
    path.write_bytes(payload)
    assert load_options(path) == Options()


def test_save_options_fails_when_parent_is_file(tmp_path):
    blocker = tmp_path / "file"
    blocker.write_bytes(b"")
    with pytest.raises(OSError):
        save_options(Options(), blocker / "options.bin")


def test_tick_accumulates_time_and_highest_wave():
    stats = Stats()
    stats.tick(Difficulty.HARD, 0.5, 3)
    stats.tick(Difficulty.HARD, 0.25, 2)
    assert stats.time_played[Difficulty.HARD] == pytest.approx(0.5 + 0.25)
    assert stats.highest_wave[Difficulty.HARD] == 3
    assert stats.highest_wave[Difficulty.EASY] == 0


def test_tick_signals_autosave_every_fifteen_seconds():
    stats = Stats()
    due = [stats.tick(Difficulty.NORMAL, 1.0, 1) for _ in range(16)]
    assert due.index(True) == 14
    assert due.count(True) == 1


def test_summary_for_one_difficulty():
    stats = Stats(dolls_summoned={Difficulty.EASY: 3}, run_count={Difficulty.EASY: 2})
    summary = stats.summary(Difficulty.EASY)
    assert summary.dolls_summoned == 3
    assert summary.run_count == 2
    assert summary.enemies_killed == 0
    assert summary.lines()[1] == "Dolls summoned: 3"


def test_overall_summary_sums_and_takes_max_wave():
    stats = Stats(
        time_played={Difficulty.UNDEFINED: 1.5, Difficulty.LUNATIC: 2.5},
        enemies_killed={Difficulty.EASY: 4, Difficulty.HARD: 6},
        highest_wave={Difficulty.EASY: 12, Difficulty.HARD: 7},
    )
    summary = stats.summary(Difficulty.UNDEFINED)
    assert summary.time_played == pytest.approx(1.5 + 2.5)
    assert summary.enemies_killed == 4 + 6
    assert summary.highest_wave == 12


@pytest.mark.parametrize(
    "seconds, text",
    [(59.9, "59s"), (60.5, "1m0s"), (125, "2m5s")],
)
def test_format_time_played(seconds, text):
    assert format_time_played(seconds) == text


def test_stats_round_trip(tmp_path):
    path = tmp_path / "stats.bin"
    stats = Stats(
        time_played={Difficulty.NORMAL: 12.5},
        enemies_killed={Difficulty.NORMAL: 40},
        run_count={Difficulty.LUNATIC: 1},
    )
    save_stats(stats, path)
    loaded = load_stats(path)
    assert loaded == stats
    assert loaded.summary(Difficulty.NORMAL) == stats.summary(Difficulty.NORMAL)


def test_missing_stats_give_empty_and_file(tmp_path):
    path = tmp_path / "user" / "stats.bin"
    assert load_stats(path) == Stats()
    assert path.exists()


def test_stats_with_unknown_difficulty_fall_back(tmp_path):
    path = tmp_path / "stats.bin"
    path.write_bytes(serialize({"RunCount": {"9": 1}}))
    assert load_stats(path) == Stats()


def test_user_data_round_trip(tmp_path):
    options = Options(fullscreen=False, volume=0.5, cursor_type=1)
    stats = Stats(run_count={Difficulty.EASY: 5})
    save_user_data(options, stats, tmp_path)
    assert load_user_data(tmp_path) == (options, stats)


def test_save_user_data_logs_instead_of_raising(tmp_path):
    blocker = tmp_path / "blocked"
    blocker.write_bytes(b"")
    save_user_data(Options(), Stats(), blocker)
    assert blocker.read_bytes() == b""