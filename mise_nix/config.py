"""Configuration for mise-nix.

Settings come from an optional TOML file and from environment variables;
environment variables win. The file is looked up at ``$MISE_NIX_CONFIG``,
then ``$XDG_CONFIG_HOME/mise-nix/config.toml``, then
``~/.config/mise-nix/config.toml``:

    [nix]
    allow_local_flakes = true
    allow_unfree = true
    nix_binary = "/run/current-system/sw/bin/nix"
"""

import os
from collections.abc import Mapping
from dataclasses import dataclass
from pathlib import Path
from typing import Any

import tomli

from mise_nix.constants import DEFAULT_NIXHUB_URL
from mise_nix.exceptions import ConfigParseError, ConfigValidationError

CONFIG_FILENAME = "config.toml"
CONFIG_TABLE = "nix"

_TRUE_VALUES = ("1", "true", "yes", "on")
_BOOL_KEYS = ("allow_local_flakes", "allow_unfree", "allow_insecure")
_STR_KEYS = ("cache_dir", "nix_binary", "nixhub_url")


@dataclass
class BackendConfig:
    """Resolved settings for one hook invocation."""

    cache_dir: Path
    current_dir: str = ""
    allow_local_flakes: bool = False
    allow_unfree: bool = False
    allow_insecure: bool = False
    nix_binary: str = "nix"
    nixhub_url: str = DEFAULT_NIXHUB_URL


def _env_flag(value: str | None) -> bool | None:
    if value is None:
        return None
    return value.strip().lower() in _TRUE_VALUES


def find_config_file(environ: Mapping[str, str]) -> Path | None:
    """Return the config file to read, or None if there is none."""
    explicit = environ.get("MISE_NIX_CONFIG")
    if explicit:
        return Path(explicit).expanduser()

    xdg = environ.get("XDG_CONFIG_HOME")
    base = Path(xdg) if xdg else _home(environ) / ".config"
    candidate = base / "mise-nix" / CONFIG_FILENAME
    return candidate if candidate.is_file() else None


def _home(environ: Mapping[str, str]) -> Path:
    home = environ.get("HOME")
    return Path(home) if home else Path.home()


def load_config_file(path: Path) -> dict[str, Any]:
    """Load and validate the ``[nix]`` table of a config file.

    Raises:
        ConfigParseError: If the file is not valid TOML
        ConfigValidationError: If a value has the wrong type
    """
    if not path.exists():
        return {}

    try:
        with open(path, "rb") as f:
            data = tomli.load(f)
    except tomli.TOMLDecodeError as e:
        raise ConfigParseError(f"Failed to parse {path}: {e}")

    table = data.get(CONFIG_TABLE, {})
    if not isinstance(table, dict):
        raise ConfigValidationError(
            f"[{CONFIG_TABLE}] in {path} must be a table, got {type(table).__name__}"
        )

    for key, value in table.items():
        if key in _BOOL_KEYS and not isinstance(value, bool):
            raise ConfigValidationError(f"'{key}' in {path} must be true or false")
        if key in _STR_KEYS and not isinstance(value, str):
            raise ConfigValidationError(f"'{key}' in {path} must be a string")
    return table


def load_config(environ: Mapping[str, str] | None = None) -> BackendConfig:
    """Build a BackendConfig from the config file and environment.

    Args:
        environ: Environment mapping; defaults to os.environ

    Returns:
        The resolved BackendConfig
    """
    if environ is None:
        environ = os.environ

    config_path = find_config_file(environ)
    file_values = load_config_file(config_path) if config_path else {}

    cache_dir = environ.get("MISE_CACHE_DIR") or file_values.get("cache_dir")
    config = BackendConfig(
        cache_dir=Path(cache_dir).expanduser() if cache_dir else _home(environ) / ".cache" / "mise",
        current_dir=environ.get("PWD", ""),
        allow_local_flakes=file_values.get("allow_local_flakes", False),
        allow_unfree=file_values.get("allow_unfree", False),
        allow_insecure=file_values.get("allow_insecure", False),
        nix_binary=environ.get("MISE_NIX_BINARY") or file_values.get("nix_binary", "nix"),
        nixhub_url=environ.get("MISE_NIX_NIXHUB_URL") or file_values.get("nixhub_url", DEFAULT_NIXHUB_URL),
    )

    flag_sources = {
        "allow_local_flakes": ("MISE_NIX_ALLOW_LOCAL_FLAKES",),
        "allow_unfree": ("MISE_NIX_ALLOW_UNFREE", "NIXPKGS_ALLOW_UNFREE"),
        "allow_insecure": ("MISE_NIX_ALLOW_INSECURE", "NIXPKGS_ALLOW_INSECURE"),
    }
    for field_name, env_names in flag_sources.items():
        for env_name in env_names:
            flag = _env_flag(environ.get(env_name))
            if flag is not None:
                setattr(config, field_name, flag)
                break

    return config
