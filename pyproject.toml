[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "rsexplor"
version = "0.5.0"
description = "A two-column terminal file browser with search, clipboard and archive actions"
requires-python = ">=3.10"
dependencies = []
keywords = ["file manager", "file browser", "terminal", "curses", "tui", "termux"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Environment :: Console :: Curses",
    "Intended Audience :: End Users/Desktop",
    "Natural Language :: Chinese (Simplified)",
    "Operating System :: POSIX",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Desktop Environment :: File Managers",
    "Topic :: Utilities",
]

[project.optional-dependencies]
test = ["pytest"]

[project.scripts]
rsexplor = "rsexplor.ui:main"

[tool.hatch.build.targets.wheel]
packages = ["rsexplor"]

[tool.pytest.ini_options]
addopts = "-ra"
