#!/usr/bin/env python3

import os
import json
import time
import uuid
from datetime import datetime
from typing import Dict, List, Optional, Any, Union

from colorama import Fore, Style

from .system import get_real_home

# Define history file location
HISTORY_DIR = os.path.join(get_real_home(), ".config/starshell/history")
HISTORY_FILE = os.path.join(HISTORY_DIR, "history.json")

# Define operation types
OP_INSTALL = "install"
OP_UNINSTALL = "uninstall"
OP_UPDATE = "update"


def _warn(message: str) -> None:
    print(f"{Fore.YELLOW}Warning: {message}{Style.RESET_ALL}")


def ensure_history_dir() -> None:
    """Ensure the history directory exists"""
    os.makedirs(HISTORY_DIR, exist_ok=True)


def load_history() -> List[Dict[str, Any]]:
    """Load history from the history file"""
    try:
        if os.path.exists(HISTORY_FILE):
            with open(HISTORY_FILE, "r") as f:
                history = json.load(f)
            if isinstance(history, list):
                return history
            _warn(f"Ignoring malformed history file {HISTORY_FILE}")
        return []
    except (OSError, ValueError) as e:
        _warn(f"Failed to load history: {e}")
        return []


def save_history(history: List[Dict[str, Any]]) -> None:
    """Save history to the history file"""
    try:
        ensure_history_dir()
        with open(HISTORY_FILE, "w") as f:
            json.dump(history, f, indent=2)
    except OSError as e:
        _warn(f"Failed to save history: {e}")


def add_history_entry(
    operation: str,
    repos: Union[str, List[str]],
    details: Optional[Dict[str, Any]] = None,
    success: bool = True,
) -> Dict[str, Any]:
    """
    Add a new entry to the history log

    Args:
        operation: The type of operation (install, uninstall, update)
        repos: The package or list of packages affected (user/repo)
        details: Additional details about the operation
        success: Whether the operation was successful

    Returns:
        The created history entry
    """
    history = load_history()

    # Convert string to list if needed
    if isinstance(repos, str):
        repos = [repos]

    entry = {
        "id": str(uuid.uuid4()),
        "timestamp": int(time.time()),
        "date": datetime.now().strftime("%Y-%m-%d %H:%M:%S"),
        "operation": operation,
        "repos": repos,
        "success": success,
        "details": details or {},
    }

    history.append(entry)
    save_history(history)

    return entry


def get_history(limit: Optional[int] = None) -> List[Dict[str, Any]]:
    """
    Get history entries, sorted by most recent first

    Args:
        limit: Maximum number of entries to return (None for all)

    Returns:
        List of history entries
    """
    history = load_history()

    # Sort by timestamp (most recent first)
    sorted_history = sorted(history, key=lambda x: x.get("timestamp", 0), reverse=True)

    if limit is not None:
        return sorted_history[:limit]
    return sorted_history


def clear_history() -> bool:
    """Clear all history entries"""
    try:
        if os.path.exists(HISTORY_FILE):
            os.remove(HISTORY_FILE)
        return True
    except OSError as e:
        _warn(f"Failed to clear history: {e}")
        return False


def format_history_entry(entry: Dict[str, Any]) -> str:
    """Format a history entry for display"""
    date_str = entry.get("date", "")
    operation = entry.get("operation", "").upper()
    repos = ", ".join(entry.get("repos", []))
    details = entry.get("details", {})

    if operation == OP_INSTALL.upper():
        action = "Installed"
        if "version" in details:
            action = f"Installed version {details['version']}"
    elif operation == OP_UNINSTALL.upper():
        action = "Uninstalled"
        if "file" in details:
            action = f"Uninstalled {details['file']}"
    elif operation == OP_UPDATE.upper():
        action = "Updated"
        if "from_version" in details and "to_version" in details:
            action = f"Updated from {details['from_version']} to {details['to_version']}"
    else:
        action = operation.capitalize()

    if "error" in details:
        action = f"{action}: {details['error']}"

    status = "SUCCESS" if entry.get("success") else "FAILED"

    return f"{date_str} | {status} | {operation} | {repos} | {action}"
