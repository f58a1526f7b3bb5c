"""Configuration management for the slippy layer.

This module handles loading and managing configuration settings using
Dynaconf. Settings are loaded from multiple locations in order of
increasing priority:

1. Global settings (/etc/slippylayer/)
2. User settings (~/.config/slippylayer/)
3. Current directory settings (./)
4. Environment variable specified file (SLIPPYLAYER_SETTINGS_FILE_FOR_DYNACONF)

Attributes
----------
USER_DIR : pathlib.Path
    Path to user configuration directory.
GLOB_DIR : pathlib.Path
    Path to global configuration directory.
CURR_DIR : pathlib.Path
    Path to current working directory.
DEFAULTS : dict
    Fallback values for every key the package reads.
settings : Dynaconf
    The Dynaconf settings object with loaded configuration.
"""
import os
import pathlib

from dynaconf import Dynaconf

USER_DIR = pathlib.Path("~/.config/slippylayer").expanduser()
GLOB_DIR = pathlib.Path("/etc/slippylayer/")
CURR_DIR = pathlib.Path("./").absolute()
settings_files = [
    GLOB_DIR / "settings.toml",
    GLOB_DIR / ".secrets.toml",
    USER_DIR / "settings.toml",
    USER_DIR / ".secrets.toml",
    CURR_DIR / "settings.toml",
    CURR_DIR / ".secrets.toml"
    ]
extra_file = os.getenv("SLIPPYLAYER_SETTINGS_FILE_FOR_DYNACONF")
if extra_file:
    settings_files.append(pathlib.Path(extra_file).absolute())

DEFAULTS = {
    "display_name": "Slippy Map",
    "base_url": "https://a.tile.openstreetmap.org/",
    "num_levels": 19,
    "resampling": "bilinear",
    "cache_size": 512,
    "num_workers": 4,
    "timeout": 10.0,
    "user_agent": "slippylayer/0.1",
    "tile_dir": "./tiles",
}

settings = Dynaconf(
    merge_enabled = True,
    envvar_prefix="SLIPPYLAYER",
    settings_files=settings_files,
    environments=True,
    load_dotenv=True,
)


def get(key):
    """Return a setting, falling back to the package default.

    Parameters
    ----------
    key : str
        Setting name (case-insensitive, as with Dynaconf).

    Returns
    -------
    object
        The configured value or the entry from ``DEFAULTS``.
    """
    return settings.get(key, DEFAULTS[key.lower()])


def change_env(new_env):
    """Change the active Dynaconf environment.

    Parameters
    ----------
    new_env : str
        The environment name to switch to (e.g., 'development', 'production').
    """
    settings.setenv(new_env)
    settings.reload()
