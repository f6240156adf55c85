#!/usr/bin/env python3

import os
from typing import List, Optional, Tuple

import requests
from colorama import Fore, Style

from ..utils.config import DEFAULT_INSTALL_DIR, DEFAULT_MANIFEST, ConfigDict
from .errors import (
    FileConflictError,
    InvalidIdentityError,
    PackageAlreadyInstalledError,
    PackageNotFoundError,
    RemovalError,
)
from .manifest import TEMP_PREFIX, TEMP_SUFFIX, Manifest, PackageRecord
from .release import fetch, platform_token, resolve, select_asset


def parse_identity(text: str) -> Tuple[str, str]:
    """Split 'user/repo' into its two parts"""
    parts = text.strip().split("/")
    if len(parts) != 2 or not all(parts):
        raise InvalidIdentityError(text)
    return parts[0], parts[1]


class StarManager:
    """Core class for installing, listing and removing GitHub release binaries"""

    def __init__(
        self,
        install_dir: str = DEFAULT_INSTALL_DIR,
        manifest_path: str = DEFAULT_MANIFEST,
        session: Optional[requests.Session] = None,
        verbose: bool = True,
    ):
        self.install_dir = install_dir
        self.manifest = Manifest(manifest_path)
        self.session = session or requests.Session()
        self.verbose = verbose

    @classmethod
    def from_config(cls, config: ConfigDict) -> "StarManager":
        options = config.get("options", {})
        return cls(
            install_dir=options.get("install_dir", DEFAULT_INSTALL_DIR),
            manifest_path=options.get("manifest", DEFAULT_MANIFEST),
        )

    def close(self) -> None:
        """Release the HTTP session's pooled connections"""
        self.session.close()

    def __enter__(self) -> "StarManager":
        return self

    def __exit__(self, exc_type, exc_value, traceback) -> None:
        self.close()

    def _say(self, message: str) -> None:
        if self.verbose:
            print(message)

    def install(self, user: str, repo: str) -> PackageRecord:
        """
        Install the latest release of user/repo.

        The download and the manifest update are two separate steps: if the
        manifest cannot be written after a successful download, the file
        stays in the install directory without a record (see orphans()).
        """
        identity = f"{user}/{repo}"
        token = platform_token()

        if self.manifest.find(user, repo):
            raise PackageAlreadyInstalledError(identity)

        self._say(f"📥 Fetching release information for {Fore.CYAN}{identity}{Style.RESET_ALL}...")
        release = resolve(self.session, user, repo)
        asset = select_asset(identity, release.assets, token)

        # One file per package: never overwrite another record's download
        for owner in self.manifest.load():
            if owner.file == asset.name:
                raise FileConflictError(identity, asset.name, owner.name)

        dest_path = os.path.join(self.install_dir, asset.name)
        self._say(f"⬇️  Downloading {asset.name} ({release.tag_name}) for {token}")
        size = fetch(self.session, asset.download_url, dest_path)
        self._say(f"📦 Saved {size} bytes to {dest_path}")

        record = PackageRecord(
            user=user, repo=repo, version=release.tag_name, file=asset.name
        )
        self.manifest.append(record)
        return record

    def list(self) -> List[PackageRecord]:
        """Return every installed package record"""
        return self.manifest.load()

    def uninstall(self, user: str, repo: str) -> PackageRecord:
        """
        Remove the installed file of user/repo, then drop it from the manifest.

        The manifest is only rewritten once the file is gone. Every record
        with this identity is dropped, while only the first one's file is
        deleted.
        """
        identity = f"{user}/{repo}"
        records = self.manifest.load()

        matches = [r for r in records if r.matches(user, repo)]
        if not matches:
            raise PackageNotFoundError(identity)
        record = matches[0]

        file_path = os.path.join(self.install_dir, record.file)
        self._say(f"🗑️  Removing {file_path}")
        try:
            os.remove(file_path)
        except OSError as e:
            raise RemovalError(identity, file_path, str(e)) from e

        self.manifest.save([r for r in records if not r.matches(user, repo)])
        return record

    def update(self, user: str, repo: str) -> PackageRecord:
        """
        Reinstall the latest release of user/repo.

        This is uninstall followed by install. If the install step fails the
        package is left uninstalled; nothing is rolled back.
        """
        self.uninstall(user, repo)
        return self.install(user, repo)

    def orphans(self) -> List[str]:
        """Files in the install directory that no manifest record points to"""
        if not os.path.isdir(self.install_dir):
            return []

        recorded = {r.file for r in self.manifest.load()}
        manifest_path = os.path.abspath(self.manifest.path)

        orphaned = []
        for item in os.listdir(self.install_dir):
            item_path = os.path.join(self.install_dir, item)
            if not os.path.isfile(item_path):
                continue
            if os.path.abspath(item_path) == manifest_path:
                continue
            if item.startswith(TEMP_PREFIX) and item.endswith(TEMP_SUFFIX):
                continue
            if item not in recorded:
                orphaned.append(item)
        return sorted(orphaned)
