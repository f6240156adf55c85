#!/usr/bin/env python3

"""
starshell - A minimal interactive shell with a tiny package manager
Features:
- Installs prebuilt binaries from the latest GitHub release of user/repo
- Picks the release asset matching the running OS and architecture
- Keeps installed packages in a JSON manifest (./stars/.stars)
- Aliases, colored prompt and directory listing from a YAML config
"""

__version__ = "1.0.0"

from .core.errors import StarError
from .core.manager import StarManager, parse_identity
from .core.manifest import Manifest, PackageRecord
from .core.operations import install_star, list_stars, uninstall_star, update_star
from .cli.cli import run_cli
