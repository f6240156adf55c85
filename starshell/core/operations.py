#!/usr/bin/env python3

from typing import Optional

from colorama import Fore, Style

from ..utils.history import (
    add_history_entry,
    clear_history as clear_history_util,
    get_history,
    format_history_entry,
    OP_INSTALL,
    OP_UNINSTALL,
    OP_UPDATE,
)
from .errors import StarError
from .manager import StarManager, parse_identity


def _error(message: str) -> None:
    print(f"{Fore.RED}❌ {message}{Style.RESET_ALL}")


def install_star(manager: StarManager, repo: str, history: bool = True) -> bool:
    """Install the latest release of repo (user/repo)"""
    print(f"{Fore.GREEN}Installing {repo}...{Style.RESET_ALL}")
    try:
        user, name = parse_identity(repo)
        record = manager.install(user, name)
    except StarError as e:
        _error(f"Installation failed: {e}")
        if history:
            add_history_entry(OP_INSTALL, repo, details={"error": str(e)}, success=False)
        return False

    print(
        f"{Fore.GREEN}✅ {record.name} {record.version} installed successfully!{Style.RESET_ALL}"
    )
    if history:
        add_history_entry(
            OP_INSTALL,
            record.name,
            details={"version": record.version, "file": record.file},
            success=True,
        )
    return True


def list_stars(manager: StarManager) -> bool:
    """List every installed package"""
    try:
        records = manager.list()
    except StarError as e:
        _error(f"Could not list installed packages: {e}")
        return False

    if not records:
        print(f"{Fore.YELLOW}No stars installed.{Style.RESET_ALL}")
        return True

    print(f"\n{Fore.CYAN}{Style.BRIGHT}Installed stars:{Style.RESET_ALL}\n")
    for record in records:
        print(f"{Fore.GREEN}- {record.name}@{record.version}{Style.RESET_ALL}")
        print(f"  File: {record.file}")
    return True


def uninstall_star(manager: StarManager, repo: str, history: bool = True) -> bool:
    """Remove an installed package and its file"""
    print(f"{Fore.RED}Uninstalling {repo}...{Style.RESET_ALL}")
    try:
        user, name = parse_identity(repo)
        record = manager.uninstall(user, name)
    except StarError as e:
        _error(f"Uninstallation failed: {e}")
        if history:
            add_history_entry(OP_UNINSTALL, repo, details={"error": str(e)}, success=False)
        return False

    print(f"{Fore.GREEN}✅ {record.name} uninstalled successfully!{Style.RESET_ALL}")
    if history:
        add_history_entry(
            OP_UNINSTALL,
            record.name,
            details={"version": record.version, "file": record.file},
            success=True,
        )
    return True


def update_star(manager: StarManager, repo: str, history: bool = True) -> bool:
    """Reinstall the latest release of an installed package"""
    print(f"{Fore.GREEN}Updating {repo}...{Style.RESET_ALL}")
    from_version = None
    try:
        user, name = parse_identity(repo)
        previous = [r for r in manager.list() if r.matches(user, name)]
        if previous:
            from_version = previous[0].version
        record = manager.update(user, name)
    except StarError as e:
        _error(f"Update failed: {e}")
        # Installed -> Absent when the reinstall step fails
        if from_version is not None and not _is_installed(manager, repo):
            print(
                f"{Fore.YELLOW}⚠️  {repo} was uninstalled and is no longer installed. "
                f"Run install to retry.{Style.RESET_ALL}"
            )
        if history:
            details = {"error": str(e)}
            if from_version is not None:
                details["from_version"] = from_version
            add_history_entry(OP_UPDATE, repo, details=details, success=False)
        return False

    print(
        f"{Fore.GREEN}✅ {record.name} updated to {record.version}{Style.RESET_ALL}"
    )
    if history:
        add_history_entry(
            OP_UPDATE,
            record.name,
            details={
                "from_version": from_version,
                "to_version": record.version,
                "file": record.file,
            },
            success=True,
        )
    return True


def _is_installed(manager: StarManager, repo: str) -> bool:
    user, name = parse_identity(repo)
    try:
        return any(r.matches(user, name) for r in manager.list())
    except StarError:
        return False


def show_orphans(manager: StarManager) -> bool:
    """Show files in the install directory that the manifest does not know"""
    try:
        orphans = manager.orphans()
    except StarError as e:
        _error(f"Could not check for orphaned files: {e}")
        return False

    if not orphans:
        print(f"{Fore.GREEN}✓ No orphaned files in {manager.install_dir}{Style.RESET_ALL}")
        return True

    print(
        f"{Fore.YELLOW}⚠️  Files in {manager.install_dir} without a manifest entry:{Style.RESET_ALL}"
    )
    for name in orphans:
        print(f"  {name}")
    return True


def show_history(limit: Optional[int] = None) -> None:
    """Show the operation history"""
    history = get_history(limit)

    if not history:
        print(f"{Fore.YELLOW}No history entries found.{Style.RESET_ALL}")
        return

    print(f"\n{Fore.CYAN}{Style.BRIGHT}Operation History:{Style.RESET_ALL}\n")

    for entry in history:
        formatted = format_history_entry(entry)

        # Color-code based on success status
        if entry.get("success"):
            print(f"{Fore.GREEN}{formatted}{Style.RESET_ALL}")
        else:
            print(f"{Fore.RED}{formatted}{Style.RESET_ALL}")

    print(f"\nTotal entries: {len(history)}")


def clear_history() -> None:
    """Clear the operation history"""
    print(f"{Fore.YELLOW}About to clear all history entries.{Style.RESET_ALL}")
    response = input("Are you sure you want to continue? (y/N) ")

    if response.lower() != "y":
        print(f"{Fore.YELLOW}Operation cancelled.{Style.RESET_ALL}")
        return

    if clear_history_util():
        print(f"{Fore.GREEN}✅ History cleared successfully.{Style.RESET_ALL}")
    else:
        print(f"{Fore.RED}❌ Failed to clear history.{Style.RESET_ALL}")
