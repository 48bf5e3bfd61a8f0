"""Chef helpers: pipeline task helpers for Chef and Habitat tooling."""

__version__ = "0.1.0"
