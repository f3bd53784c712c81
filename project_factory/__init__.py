"""project-factory: scaffold a linted, git-initialised Python project."""

__version__ = "0.1.0"
