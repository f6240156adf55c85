#!/usr/bin/env python3

import os
import socket
import subprocess
import sys
from datetime import datetime
from typing import List, Optional

from colorama import Fore, Style

from ..core.manager import StarManager
from ..core.operations import (
    install_star,
    list_stars,
    uninstall_star,
    update_star,
    show_orphans,
)
from ..utils.config import ConfigDict

COMPRESSED_EXTENSIONS = (".zip", ".tar", ".gz")
MEDIA_EXTENSIONS = (".mp4", ".jpg", ".png")

STAR_USAGE = "Use 'star install|uninstall|update user/repo', 'star list' or 'star orphans'."


def color_code(name: Optional[str], fallback: str = "") -> str:
    """Resolve a colorama color name such as 'YELLOW' or 'LIGHTBLUE_EX'"""
    if not name:
        return fallback
    return getattr(Fore, str(name).upper(), fallback)


def get_home_directory() -> str:
    home = os.environ.get("HOME") or os.environ.get("USERPROFILE")
    return home or "."


def replace_home_with_tilde(path: str) -> str:
    home = os.environ.get("HOME") or os.environ.get("USERPROFILE")
    if home and path.startswith(home):
        return "~" + path[len(home):]
    return path


def is_executable(path: str) -> bool:
    if sys.platform.startswith("win"):
        return path.lower().endswith((".exe", ".bat"))
    return os.path.isfile(path) and os.access(path, os.X_OK)


class Shell:
    """Interactive command loop with a built-in 'star' package command"""

    def __init__(self, config: ConfigDict, manager: StarManager, history: bool = True):
        self.config = config
        self.manager = manager
        self.history = history

    def prompt(self) -> str:
        """Render the configured prompt format"""
        colors = self.config.get("prompt_colors", {})
        user = os.environ.get("USER") or os.environ.get("USERNAME") or ""
        try:
            host = socket.gethostname()
        except OSError:
            host = "unknown"
        try:
            path = replace_home_with_tilde(os.getcwd())
        except OSError:
            path = "unknown"
        values = {
            "user": user,
            "host": host,
            "path": path,
            "time": datetime.now().strftime("%H:%M:%S"),
        }

        prompt = self.config.get("prompt_format", "")
        for key, value in values.items():
            colored = f"{color_code(colors.get(key))}{value}{Style.RESET_ALL}"
            prompt = prompt.replace("{" + key + "}", colored)
        return prompt + " $ "

    def expand_aliases(self, args: List[str]) -> List[str]:
        """Replace the first word with its alias expansion, if any"""
        if not args:
            return args
        alias = self.config.get("aliases", {}).get(args[0])
        if alias is None:
            return args
        return str(alias).split() + args[1:]

    def file_color(self, entry: os.DirEntry) -> str:
        colors = self.config.get("file_colors", {})
        if entry.is_symlink():
            return color_code(colors.get("symlink"), Fore.YELLOW)
        if entry.is_dir():
            return color_code(colors.get("directory"), Fore.BLUE)

        name = entry.name.lower()
        if name.endswith(COMPRESSED_EXTENSIONS):
            return color_code(colors.get("compressed"), Fore.MAGENTA)
        if name.endswith(MEDIA_EXTENSIONS):
            return color_code(colors.get("media"), Fore.CYAN)
        if is_executable(entry.path):
            return color_code(colors.get("executable"), Fore.GREEN)
        return ""

    def list_directory(self) -> None:
        try:
            entries = sorted(os.scandir(os.getcwd()), key=lambda e: e.name)
        except OSError as e:
            print(f"{Fore.RED}[ERROR] Error reading directory: {e}{Style.RESET_ALL}")
            return

        for entry in entries:
            print(f"{self.file_color(entry)}{entry.name}{Style.RESET_ALL}")

    def change_directory(self, args: List[str]) -> None:
        target = args[1] if len(args) > 1 else "."
        if target == "~":
            target = get_home_directory()
        try:
            os.chdir(target)
        except OSError as e:
            print(f"{Fore.RED}[ERROR] Cannot change directory: {e}{Style.RESET_ALL}")

    def clear_screen(self) -> None:
        if sys.platform.startswith("win"):
            subprocess.run(["cmd", "/c", "cls"])
        else:
            print("\033[H\033[2J", end="", flush=True)

    def star(self, args: List[str]) -> None:
        """Dispatch 'star <subcommand> [user/repo]'"""
        if len(args) < 2:
            print(f"{Fore.RED}[ERROR] Missing subcommand. {STAR_USAGE}{Style.RESET_ALL}")
            return

        subcommand = args[1]
        if subcommand == "list":
            list_stars(self.manager)
            return
        if subcommand == "orphans":
            show_orphans(self.manager)
            return

        actions = {
            "install": install_star,
            "uninstall": uninstall_star,
            "update": update_star,
        }
        action = actions.get(subcommand)
        if action is None:
            print(f"{Fore.RED}[ERROR] Unknown 'star' subcommand. {STAR_USAGE}{Style.RESET_ALL}")
            return
        if len(args) < 3:
            print(
                f"{Fore.RED}[ERROR] Missing repository argument. "
                f"Use 'star {subcommand} user/repo'.{Style.RESET_ALL}"
            )
            return
        action(self.manager, args[2], history=self.history)

    def run_external(self, args: List[str]) -> None:
        try:
            subprocess.run(args)
        except OSError as e:
            print(f"{Fore.RED}[ERROR]{Style.RESET_ALL} {e}")

    def execute(self, line: str) -> None:
        """Execute one input line"""
        args = self.expand_aliases(line.split())
        if not args:
            return

        command = args[0]
        if command == "cd":
            self.change_directory(args)
        elif command in ("ls", "dir"):
            self.list_directory()
        elif command in ("clear", "cls"):
            self.clear_screen()
        elif command == "star":
            self.star(args)
        else:
            self.run_external(args)

    def run(self) -> None:
        """Read and execute lines until 'exit' or end of input"""
        while True:
            try:
                line = input(self.prompt())
            except EOFError:
                print()
                break
            except KeyboardInterrupt:
                print()
                continue

            line = line.strip()
            if line == "exit":
                break
            self.execute(line)
