# alicevszombies

A top-down wave survival game built on pygame. You play a puppeteer
surrounded by ever larger waves of zombies. Defeated enemies give mana, and
mana is spent on healing, summoning sword dolls that fight for you, or
picking upgrades that turn your dolls into lancers, scythe wielders, knife
throwers and magicians.

## Installing

```
pip install .
```

## Playing

The game reads its images and sounds from an `assets` directory and keeps
saved data in a `user` directory, both inside the directory it is started
from. Start it from the directory that holds `assets`:

```
alicevszombies
```

or name that directory explicitly:

```
alicevszombies path/to/game
```

From the main menu choose **Start** and then a difficulty (Easy, Normal,
Hard or Lunatic). **Stats** shows your statistics; clicking the difficulty
box cycles between Overall and each difficulty. **Options** holds the
volume bar, the cursor style and the fullscreen toggle. **Exit** quits.
The **Goals** button is shown but disabled.

Controls during a run:

- `W` `A` `S` `D` move
- `H` heal 5 HP (costs 5 mana)
- `J` summon a sword doll (costs 10 mana)
- `K` open the upgrade screen (costs 10 mana), then `1` or `2` to choose
- `F` toggle fullscreen
- `Esc` pause and resume; on the death screen, return to the main menu
- `Delete` quit

The three spells can also be cast by clicking their buttons on the left of
the screen, and the pause menu has Resume and Main Menu buttons.

Waves grow by two enemies each. Every tenth wave brings a tough ranged
enemy that shoots at you. After wave 20, and at any wave on Lunatic, red
zombies can appear that burst into a ring of bullets when they die. Easy
starts you with 10 mana and a longer immunity after each hit.

Upgrades (`alicevszombies.catalog.Upgrade`):

- Doll Damage: more damage from every doll and projectile
- Doll Speed: dolls accelerate faster
- Lance Doll / Knife Doll: trade a sword doll for a lance or knife doll
- Scythe Doll: needs two lance dolls and trades them for a scythe doll
- Magician Doll: needs two knife dolls and trades them for a magician doll

## Saved data

`user/options.bin` keeps fullscreen, volume and cursor style; it is written
whenever an option changes. `user/stats.bin` keeps, per difficulty, time
played, enemies killed, dolls summoned, highest wave and run count; it is
saved every 15 seconds and when the game closes. Both are JSON. A missing or
unreadable file is replaced with defaults.

## Using the modules

The simulation runs without a window:

- `alicevszombies.world.World` holds the entities and offers `spawn_*`,
  `damage`, `damage_with_cooldown`, `heal`, `start_game` and `reset`.
- `alicevszombies.systems.step(world, direction)` advances one tick using
  `world.dt` as the frame time.
- `alicevszombies.upgrades` has `cast_heal`, `cast_doll`, `cast_upgrade`,
  `available_upgrades` and `choose_upgrade`.
- `alicevszombies.userdata` has `Options`, `Stats`, `load_user_data` and
  `save_user_data`.

`alicevszombies.game.Game` opens the window and runs the loop;
`alicevszombies.game.main` is the command above.

## What is not included

The package does not ship the game's images (`*.png`) or sounds (`*.wav`).
`load_assets` raises `FileNotFoundError` when one of them is missing from
the `assets` directory, so the game will not start without them.

## Running the tests

```
pip install .[test]
pytest
```