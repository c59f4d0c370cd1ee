"""TOML configuration loading for the console.

config/default.toml is read first and config/<FARMSTEAD_ENV>.toml is
merged over it. Relative filesystem paths in either file are anchored on
the project root (the parent of the config directory) so that the file
cache lands in the same place whichever directory the console starts in.
"""

import os
import tomllib
from pathlib import Path
from typing import Any

DEFAULT_FILE = "default.toml"

# Dotted settings paths whose values are filesystem locations
PATH_SETTINGS: tuple[tuple[str, ...], ...] = (
    ("storage", "cache", "directory"),
)


def get_config_dir() -> Path:
    """Locate the configuration directory.

    FARMSTEAD_CONFIG_DIR wins when set. Otherwise the nearest config/
    holding a default.toml, searching upward from the working directory.
    """
    override = os.environ.get("FARMSTEAD_CONFIG_DIR")
    if override:
        path = Path(override)
        if not path.exists():
            raise FileNotFoundError(f"Config directory not found: {override}")
        return path

    cwd = Path.cwd()
    for parent in (cwd, *cwd.parents):
        candidate = parent / "config"
        if (candidate / DEFAULT_FILE).exists():
            return candidate

    return Path("config")


def get_environment() -> str:
    """Name of the active environment file, 'development' by default."""
    return os.environ.get("FARMSTEAD_ENV", "development")


def load_toml(file_path: Path) -> dict[str, Any]:
    """Parse one TOML file.

    Raises:
        FileNotFoundError: If the file doesn't exist
        tomllib.TOMLDecodeError: If the TOML syntax is invalid
    """
    if not file_path.exists():
        raise FileNotFoundError(f"Configuration file not found: {file_path}")

    with file_path.open("rb") as f:
        return tomllib.load(f)


def deep_merge(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    """Return base updated with override, merging nested tables.

    Neither argument is modified.
    """
    merged = dict(base)
    for key, value in override.items():
        current = merged.get(key)
        if isinstance(current, dict) and isinstance(value, dict):
            merged[key] = deep_merge(current, value)
        else:
            merged[key] = value
    return merged


def resolve_paths(config: dict[str, Any], root: Path) -> dict[str, Any]:
    """Anchor relative PATH_SETTINGS values on root.

    Absolute paths and missing settings are left alone.
    """
    for path in PATH_SETTINGS:
        *tables, name = path
        section: Any = config
        for table in tables:
            section = section.get(table) if isinstance(section, dict) else None
        if not isinstance(section, dict) or not isinstance(section.get(name), str):
            continue
        location = Path(section[name]).expanduser()
        if not location.is_absolute():
            section[name] = str(root / location)
    return config


def load_config() -> dict[str, Any]:
    """Load the merged TOML configuration for the active environment.

    Raises:
        FileNotFoundError: If config/default.toml is missing
    """
    config_dir = get_config_dir()

    default_path = config_dir / DEFAULT_FILE
    if not default_path.exists():
        raise FileNotFoundError(
            f"Default configuration file not found: {default_path}. "
            "Create config/default.toml or set FARMSTEAD_CONFIG_DIR."
        )

    config = load_toml(default_path)

    env_path = config_dir / f"{get_environment()}.toml"
    if env_path.exists():
        config = deep_merge(config, load_toml(env_path))

    return resolve_paths(config, config_dir.resolve().parent)
