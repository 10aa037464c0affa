[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "stterm"
version = "0.1.0"
description = "A VT100/xterm-compatible terminal emulation core: screen model, escape sequence parsing, selection and pty handling."
requires-python = ">=3.10"
dependencies = [
    "wcwidth",
]
keywords = [
    "terminal",
    "emulator",
    "vt100",
    "xterm",
    "ansi",
    "escape-sequences",
    "pty",
]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Environment :: Console",
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
test = [
    "pytest",
]

[tool.hatch.build.targets.wheel]
packages = ["stterm"]

[tool.pytest.ini_options]
addopts = "-ra"
testpaths = ["tests"]

[tool.ruff]
line-length = 88
target-version = "py310"

[tool.ruff.lint]
select = ["E", "F", "W", "I", "B", "UP"]

[tool.mypy]
python_version = "3.10"
warn_unused_ignores = true
warn_redundant_casts = true
