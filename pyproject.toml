[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "flexterm"
version = "0.9.3"
description = "Terminal emulator building blocks: sixel decoding, a reflowing screen buffer, URL detection, OSC 7 parsing and helper launchers"
requires-python = ">=3.10"
dependencies = []
keywords = ["terminal", "sixel", "reflow", "scrollback", "osc7", "xresources", "farbfeld"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Intended Audience :: Developers",
    "Operating System :: POSIX",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Terminals :: Terminal Emulators/X Terminals",
    "Topic :: Software Development :: Libraries :: Python Modules",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["flexterm"]

[tool.pytest.ini_options]
addopts = "-ra"
