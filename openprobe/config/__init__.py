"""Configuration system for openprobe."""

from .loaders import ConfigLoader
from .models import SerializationSettings, Settings, ValidationSettings

__all__ = [
    "ConfigLoader",
    "SerializationSettings",
    "Settings",
    "ValidationSettings",
]
