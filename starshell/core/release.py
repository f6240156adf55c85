#!/usr/bin/env python3

import os
import platform
from dataclasses import dataclass, field
from typing import List, Optional

import requests

from ..utils.system import normalize_arch, normalize_os
from .errors import (
    DownloadError,
    NoCompatibleAssetError,
    ReleaseFetchError,
    UnsupportedPlatformError,
)

RELEASE_API_URL = "https://api.github.com/repos/{user}/{repo}/releases/latest"
CHUNK_SIZE = 8192


@dataclass
class Asset:
    name: str
    download_url: str


@dataclass
class Release:
    tag_name: str
    assets: List[Asset] = field(default_factory=list)


def platform_token(system: Optional[str] = None, machine: Optional[str] = None) -> str:
    """Return the '<os>-<arch>' token used to pick a release asset"""
    if system is None:
        system = platform.system()
    if machine is None:
        machine = platform.machine()

    os_name = normalize_os(system)
    arch = normalize_arch(machine)
    if not os_name or not arch:
        raise UnsupportedPlatformError(system, machine)
    return f"{os_name}-{arch}"


def parse_release(identity: str, data) -> Release:
    """Build a Release from the decoded API document"""
    if not isinstance(data, dict):
        raise ReleaseFetchError(identity, reason="release document is not an object")

    tag_name = data.get("tag_name")
    assets = data.get("assets")
    if not isinstance(tag_name, str) or not tag_name:
        raise ReleaseFetchError(identity, reason="release has no tag name")
    if not isinstance(assets, list):
        raise ReleaseFetchError(identity, reason="release has no asset list")

    parsed = []
    for asset in assets:
        if not isinstance(asset, dict):
            raise ReleaseFetchError(identity, reason="malformed asset entry")
        name = asset.get("name")
        url = asset.get("browser_download_url")
        if not isinstance(name, str) or not isinstance(url, str):
            raise ReleaseFetchError(identity, reason="malformed asset entry")
        parsed.append(Asset(name=name, download_url=url))

    return Release(tag_name=tag_name, assets=parsed)


def resolve(session: requests.Session, user: str, repo: str) -> Release:
    """Query the latest release of user/repo"""
    identity = f"{user}/{repo}"
    api_url = RELEASE_API_URL.format(user=user, repo=repo)

    try:
        response = session.get(api_url)
    except requests.RequestException as e:
        raise ReleaseFetchError(identity, reason=str(e)) from e

    try:
        if response.status_code != 200:
            raise ReleaseFetchError(identity, status_code=response.status_code)
        try:
            data = response.json()
        except ValueError as e:
            raise ReleaseFetchError(identity, reason=f"invalid JSON: {e}") from e
    finally:
        response.close()

    return parse_release(identity, data)


def select_asset(identity: str, assets: List[Asset], token: str) -> Asset:
    """Pick the first asset whose name contains the platform token"""
    for asset in assets:
        if token in asset.name.lower():
            return asset
    raise NoCompatibleAssetError(identity, token)


def fetch(session: requests.Session, url: str, dest_path: str) -> int:
    """
    Stream url into dest_path and return the number of bytes written.

    A partially written file is left behind when the transfer fails.
    """
    try:
        response = session.get(url, stream=True)
    except requests.RequestException as e:
        raise DownloadError(url, reason=str(e)) from e

    written = 0
    try:
        if response.status_code != 200:
            raise DownloadError(url, status_code=response.status_code)

        os.makedirs(os.path.dirname(os.path.abspath(dest_path)), exist_ok=True)
        with open(dest_path, "wb") as f:
            for chunk in response.iter_content(CHUNK_SIZE):
                if chunk:
                    f.write(chunk)
                    written += len(chunk)
    except requests.RequestException as e:
        raise DownloadError(url, reason=str(e)) from e
    except OSError as e:
        raise DownloadError(url, reason=str(e)) from e
    finally:
        response.close()

    return written
