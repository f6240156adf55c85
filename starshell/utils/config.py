#!/usr/bin/env python3

import os
import sys
import copy
import yaml
from typing import Any, Dict

from ..utils.system import get_real_home

# Type definitions
ConfigDict = Dict[str, Any]

# Default paths
DEFAULT_CONFIG_PATH = "starshell.yaml"
DEFAULT_INSTALL_DIR = "./stars"
DEFAULT_MANIFEST = "./stars/.stars"
DEFAULT_HISTORY_ENABLED = True

DEFAULT_PROMPT_FORMAT = "{user}@{host} {path} {time}"
DEFAULT_PROMPT_COLORS = {
    "user": "YELLOW",
    "host": "BLUE",
    "path": "GREEN",
    "time": "MAGENTA",
}
DEFAULT_FILE_COLORS = {
    "directory": "BLUE",
    "symlink": "YELLOW",
    "compressed": "MAGENTA",
    "media": "CYAN",
    "executable": "GREEN",
}


def default_config() -> ConfigDict:
    return {
        "prompt_format": DEFAULT_PROMPT_FORMAT,
        "prompt_colors": dict(DEFAULT_PROMPT_COLORS),
        "file_colors": dict(DEFAULT_FILE_COLORS),
        "aliases": {},
        "options": {
            "install_dir": DEFAULT_INSTALL_DIR,
            "manifest": DEFAULT_MANIFEST,
            "history_enabled": DEFAULT_HISTORY_ENABLED,
        },
    }


def ensure_user_config_dir() -> str:
    """Ensure the user's config directory exists"""
    user_config_dir = os.path.join(get_real_home(), ".config/starshell")
    os.makedirs(user_config_dir, exist_ok=True)
    return user_config_dir


def find_config_file(config_path: str = DEFAULT_CONFIG_PATH) -> str:
    """
    Find the configuration file by checking multiple locations:
    1. Specified path from command line
    2. Current directory
    3. Same directory as the executable
    4. User config directory (~/.config/starshell/)
    5. System-wide location (/etc/starshell)
    """
    # Check if specified path exists
    if os.path.isfile(config_path):
        return config_path

    # Check in the current directory
    if os.path.isfile(os.path.join(os.getcwd(), DEFAULT_CONFIG_PATH)):
        return os.path.join(os.getcwd(), DEFAULT_CONFIG_PATH)

    # Check in the same directory as the executable
    exec_dir = os.path.dirname(os.path.abspath(sys.argv[0]))
    if os.path.isfile(os.path.join(exec_dir, DEFAULT_CONFIG_PATH)):
        return os.path.join(exec_dir, DEFAULT_CONFIG_PATH)

    # Check in user config directory
    user_config = os.path.join(get_real_home(), ".config/starshell", DEFAULT_CONFIG_PATH)
    if os.path.isfile(user_config):
        return user_config

    # Check in system-wide location
    system_config = os.path.join("/etc/starshell", DEFAULT_CONFIG_PATH)
    if os.path.isfile(system_config):
        return system_config

    # Return the original path (load_config falls back to defaults)
    return config_path


def create_default_config(config_path: str) -> ConfigDict:
    """Create a default configuration file"""
    config = default_config()

    # Ensure the directory exists
    os.makedirs(os.path.dirname(os.path.abspath(config_path)), exist_ok=True)

    # Write the default config
    try:
        with open(config_path, "w") as f:
            yaml.dump(config, f, default_flow_style=False)
        return config
    except OSError as e:
        raise IOError(f"Failed to create config file: {e}") from e


def merge_defaults(config: ConfigDict) -> ConfigDict:
    """Fill in every key missing from a loaded configuration"""
    merged = default_config()
    for key, value in config.items():
        if isinstance(value, dict) and isinstance(merged.get(key), dict):
            merged[key].update(value)
        elif value is not None:
            merged[key] = value
    return merged


def load_config(config_path: str) -> ConfigDict:
    """
    Load the configuration from the specified path.

    A missing file yields the default configuration so the shell can start
    without one.
    """
    try:
        with open(config_path, "r") as file:
            config = yaml.safe_load(file)
    except FileNotFoundError:
        return default_config()
    except yaml.YAMLError as e:
        raise ValueError(f"Error parsing YAML: {e}")

    if config is None:
        return default_config()
    if not isinstance(config, dict):
        raise ValueError(f"Config file {config_path} must contain a mapping")

    return merge_defaults(copy.deepcopy(config))

