#!/usr/bin/env python3

import os
import platform
from typing import Optional

# Operating systems a release asset can target
OS_NAMES = {
    "linux": "linux",
    "darwin": "darwin",
    "windows": "windows",
    "freebsd": "freebsd",
    "openbsd": "openbsd",
    "netbsd": "netbsd",
}

# Machine strings reported by the interpreter, mapped to release arch names
ARCH_MAPPING = {
    "amd64": ["x86_64", "amd64", "x64"],
    "arm64": ["aarch64", "arm64", "armv8", "armv8l", "armv8b"],
    "386": ["i386", "i486", "i586", "i686", "x86"],
    "arm": ["arm", "armv5l", "armv6l", "armv7", "armv7l"],
    "ppc64le": ["ppc64le"],
    "s390x": ["s390x"],
    "riscv64": ["riscv64"],
}


def get_real_home() -> str:
    """Get the real user's home directory even when running with sudo"""
    if "SUDO_USER" in os.environ and os.environ.get("HOME") == "/root":
        real_user = os.environ["SUDO_USER"]
        return os.path.expanduser(f"~{real_user}")
    return os.path.expanduser("~")


def normalize_os(system: Optional[str] = None) -> Optional[str]:
    """Normalize the operating system name, e.g. 'Linux' -> 'linux'"""
    if system is None:
        system = platform.system()
    system = system.lower()
    # Cygwin and MSYS report e.g. 'CYGWIN_NT-10.0'
    if system.startswith(("cygwin", "msys", "mingw")):
        system = "windows"
    return OS_NAMES.get(system)


def normalize_arch(machine: Optional[str] = None) -> Optional[str]:
    """Normalize the CPU architecture name, e.g. 'x86_64' -> 'amd64'"""
    if machine is None:
        machine = platform.machine()
    machine = machine.lower()
    for target_arch, variants in ARCH_MAPPING.items():
        if machine in variants:
            return target_arch
    return None
