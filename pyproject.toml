[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "alicevszombies"
version = "0.1.0"
description = "A top-down wave survival game where a doll-summoning heroine fends off hordes of zombies"
requires-python = ">=3.10"
keywords = ["game", "arcade", "zombies", "survival", "pygame"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Environment :: X11 Applications",
    "Environment :: MacOS X",
    "Environment :: Win32 (MS Windows)",
    "Intended Audience :: End Users/Desktop",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Games/Entertainment :: Arcade",
]
dependencies = [
    "pygame",
]

[project.optional-dependencies]
test = [
    "pytest",
]

[project.scripts]
alicevszombies = "alicevszombies.game:main"

[tool.hatch.build.targets.wheel]
packages = ["alicevszombies"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
