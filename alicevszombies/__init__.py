"""A top-down wave survival game with summonable fighting dolls, built on pygame."""

__version__ = "0.1.0"