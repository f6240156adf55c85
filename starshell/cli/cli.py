#!/usr/bin/env python3

import argparse
import sys
import os
from colorama import Fore, Style

from .. import __version__
from ..utils.config import (
    DEFAULT_CONFIG_PATH,
    ensure_user_config_dir,
    create_default_config,
    find_config_file,
    load_config,
)
from ..core.manager import StarManager
from ..core.operations import (
    install_star,
    list_stars,
    uninstall_star,
    update_star,
    show_orphans,
    show_history,
    clear_history,
)
from .shell import Shell


def parse_args(argv=None):
    """Parse command-line arguments"""
    parser = argparse.ArgumentParser(
        description=f"starshell v{__version__} - A minimal shell with a package manager for GitHub release binaries",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument(
        "--config",
        default=DEFAULT_CONFIG_PATH,
        help=f"Configuration file (default: {DEFAULT_CONFIG_PATH})",
    )
    parser.add_argument(
        "--install",
        metavar="REPO",
        help="Install the latest release of a repository (format: user/repo)",
    )
    parser.add_argument(
        "--list",
        action="store_true",
        help="List all installed stars",
    )
    parser.add_argument(
        "--uninstall",
        metavar="REPO",
        help="Uninstall a star and delete its file (format: user/repo)",
    )
    parser.add_argument(
        "--update",
        metavar="REPO",
        help="Reinstall the latest release of an installed star (format: user/repo)",
    )
    parser.add_argument(
        "--orphans",
        action="store_true",
        help="Show files in the install directory without a manifest entry",
    )
    parser.add_argument(
        "--version", action="store_true", help="Show the version and exit"
    )
    parser.add_argument(
        "--init",
        action="store_true",
        help="Initialize a default config file in the user's config directory",
    )
    parser.add_argument(
        "--history",
        action="store_true",
        help="Show the history of package operations",
    )
    parser.add_argument(
        "--history-limit",
        type=int,
        metavar="N",
        help="Limit history to N entries (used with --history)",
    )
    parser.add_argument(
        "--clear-history",
        action="store_true",
        help="Clear the operation history log",
    )

    return parser.parse_args(argv)


def handle_init_command():
    """Handle the --init command to create a default config file"""
    user_config_dir = ensure_user_config_dir()
    user_config_path = os.path.join(user_config_dir, DEFAULT_CONFIG_PATH)

    if os.path.isfile(user_config_path):
        print(
            f"{Fore.YELLOW}Config file already exists at {user_config_path}{Style.RESET_ALL}"
        )
        return

    try:
        create_default_config(user_config_path)
        print(
            f"{Fore.GREEN}✅ Created default config file at {user_config_path}{Style.RESET_ALL}"
        )
    except IOError as e:
        print(f"{Fore.RED}❌ Failed to create config file: {e}{Style.RESET_ALL}")
        sys.exit(1)


def run_cli(argv=None):
    """Run the command-line interface"""
    args = parse_args(argv)

    if args.version:
        print(f"starshell v{__version__}")
        return

    if args.init:
        handle_init_command()
        return

    # History operations don't need the config
    if args.history:
        show_history(args.history_limit)
        return

    if args.clear_history:
        clear_history()
        return

    try:
        config = load_config(find_config_file(args.config))
    except ValueError as e:
        print(f"{Fore.RED}❌ {e}{Style.RESET_ALL}")
        sys.exit(1)

    history = config.get("options", {}).get("history_enabled", True)

    ok = True
    with StarManager.from_config(config) as manager:
        if args.list:
            ok = list_stars(manager)
        elif args.install:
            ok = install_star(manager, args.install, history=history)
        elif args.uninstall:
            ok = uninstall_star(manager, args.uninstall, history=history)
        elif args.update:
            ok = update_star(manager, args.update, history=history)
        elif args.orphans:
            ok = show_orphans(manager)
        else:
            # Default behavior: start the interactive shell
            Shell(config, manager, history=history).run()

    if not ok:
        sys.exit(1)


if __name__ == "__main__":
    run_cli()
