"""Configuration file loaders for JSON and TOML formats."""

import json
import tomllib  # Python 3.11+ built-in
from pathlib import Path

from .models import Settings


class ConfigLoader:
    """Utility class for loading Settings from configuration files.

    Examples:
        settings = ConfigLoader.from_json("openprobe.json")
        settings = ConfigLoader.from_toml("openprobe.toml")
        settings = ConfigLoader.from_file("openprobe.toml")
    """

    @staticmethod
    def from_json(path: str | Path) -> Settings:
        """Load settings from a JSON file.

        Raises:
            FileNotFoundError: If file does not exist
            json.JSONDecodeError: If file is not valid JSON
            pydantic.ValidationError: If config doesn't match schema
        """
        path = Path(path)
        with path.open("r", encoding="utf-8") as f:
            data = json.load(f)
        return Settings(**data)

    @staticmethod
    def from_toml(path: str | Path) -> Settings:
        """Load settings from a TOML file.

        The settings may sit at the top level or under a ``[tool.openprobe]``
        table, so they can live in a project's pyproject.toml.

        Raises:
            FileNotFoundError: If file does not exist
            tomllib.TOMLDecodeError: If file is not valid TOML
            pydantic.ValidationError: If config doesn't match schema
        """
        path = Path(path)
        with path.open("rb") as f:
            data = tomllib.load(f)
        data = data.get("tool", {}).get("openprobe", data)
        return Settings(**data)

    @staticmethod
    def from_file(path: str | Path) -> Settings:
        """Load settings from a file, auto-detecting format by extension.

        Raises:
            ValueError: If file extension is not .json or .toml
        """
        path = Path(path)

        if path.suffix == ".json":
            return ConfigLoader.from_json(path)
        elif path.suffix == ".toml":
            return ConfigLoader.from_toml(path)
        else:
            raise ValueError(
                f"Unsupported config file format: {path.suffix}. "
                "Only .json and .toml are supported."
            )
