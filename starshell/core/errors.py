#!/usr/bin/env python3

from typing import Optional


class StarError(Exception):
    """Base class for every failure raised by the package manager"""


class InvalidIdentityError(StarError):
    def __init__(self, text: str):
        self.text = text
        super().__init__(f"Invalid package identity: {text!r}. Should be user/repo")


class UnsupportedPlatformError(StarError):
    def __init__(self, system: str, machine: str):
        self.system = system
        self.machine = machine
        super().__init__(
            f"Unsupported platform: {system or 'unknown'}/{machine or 'unknown'}"
        )


class ReleaseFetchError(StarError):
    """Transport failure, non-200 status or malformed body from the release API"""

    def __init__(
        self, identity: str, status_code: Optional[int] = None, reason: str = ""
    ):
        self.identity = identity
        self.status_code = status_code
        if status_code is not None:
            message = f"Failed to fetch release for {identity}: status code {status_code}"
        else:
            message = f"Failed to fetch release for {identity}"
        if reason:
            message = f"{message}: {reason}"
        super().__init__(message)


class NoCompatibleAssetError(StarError):
    def __init__(self, identity: str, platform: str):
        self.identity = identity
        self.platform = platform
        super().__init__(
            f"No compatible release asset for {identity} on platform: {platform}"
        )


class DownloadError(StarError):
    def __init__(self, url: str, status_code: Optional[int] = None, reason: str = ""):
        self.url = url
        self.status_code = status_code
        if status_code is not None:
            message = f"Failed to download {url}: status code {status_code}"
        else:
            message = f"Failed to download {url}"
        if reason:
            message = f"{message}: {reason}"
        super().__init__(message)


class ManifestCorrupt(StarError):
    def __init__(self, path: str, reason: str = ""):
        self.path = path
        message = f"Manifest {path} is corrupt"
        if reason:
            message = f"{message}: {reason}"
        super().__init__(message)


class ManifestWriteError(StarError):
    def __init__(self, path: str, reason: str = ""):
        self.path = path
        message = f"Failed to write manifest {path}"
        if reason:
            message = f"{message}: {reason}"
        super().__init__(message)


class PackageNotFoundError(StarError):
    def __init__(self, identity: str):
        self.identity = identity
        super().__init__(f"Package {identity} not found")


class PackageAlreadyInstalledError(StarError):
    def __init__(self, identity: str):
        self.identity = identity
        super().__init__(
            f"Package {identity} is already installed. Use update to replace it"
        )


class RemovalError(StarError):
    def __init__(self, identity: str, path: str, reason: str = ""):
        self.identity = identity
        self.path = path
        message = f"Failed to remove {path} for {identity}"
        if reason:
            message = f"{message}: {reason}"
        super().__init__(message)


class FileConflictError(StarError):
    def __init__(self, identity: str, file: str, owner: str):
        self.identity = identity
        self.file = file
        self.owner = owner
        super().__init__(
            f"Cannot install {identity}: {file} already belongs to {owner}"
        )
