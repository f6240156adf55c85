#!/usr/bin/env python3

"""
Manifest store for installed stars.

The manifest is a JSON array of {user, repo, version, file} objects. It is
read whole and rewritten whole on every mutation; a missing file means
nothing is installed.
"""

import os
import json
import tempfile
from dataclasses import dataclass, asdict
from typing import Dict, List

from ..utils.config import DEFAULT_MANIFEST
from .errors import ManifestCorrupt, ManifestWriteError

RECORD_FIELDS = ("user", "repo", "version", "file")

TEMP_PREFIX = ".stars_"
TEMP_SUFFIX = ".tmp"


def _current_umask() -> int:
    mask = os.umask(0)
    os.umask(mask)
    return mask


@dataclass
class PackageRecord:
    user: str
    repo: str
    version: str = ""
    file: str = ""

    @property
    def name(self) -> str:
        return f"{self.user}/{self.repo}"

    def matches(self, user: str, repo: str) -> bool:
        return self.user == user and self.repo == repo

    def to_dict(self) -> Dict[str, str]:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Dict) -> "PackageRecord":
        if not isinstance(data, dict):
            raise ValueError(f"expected an object, got {type(data).__name__}")
        for field in RECORD_FIELDS:
            if not isinstance(data.get(field, ""), str):
                raise ValueError(f"field '{field}' must be a string")
        if not data.get("user") or not data.get("repo"):
            raise ValueError("record is missing 'user' or 'repo'")
        return cls(
            user=data["user"],
            repo=data["repo"],
            version=data.get("version", ""),
            file=data.get("file", ""),
        )


class Manifest:
    """Durable list of installed package records"""

    def __init__(self, path: str = DEFAULT_MANIFEST):
        self.path = path

    def load(self) -> List[PackageRecord]:
        """Load all records; a missing manifest is an empty one"""
        try:
            with open(self.path, "r") as f:
                data = json.load(f)
        except FileNotFoundError:
            return []
        except json.JSONDecodeError as e:
            raise ManifestCorrupt(self.path, str(e)) from e
        except (OSError, UnicodeDecodeError) as e:
            raise ManifestCorrupt(self.path, str(e)) from e

        # null is an empty manifest
        if data is None:
            return []
        if not isinstance(data, list):
            raise ManifestCorrupt(
                self.path, f"expected a list, got {type(data).__name__}"
            )

        try:
            return [PackageRecord.from_dict(item) for item in data]
        except ValueError as e:
            raise ManifestCorrupt(self.path, str(e)) from e

    def save(self, records: List[PackageRecord]) -> None:
        """Replace the manifest contents (write to temp file, then rename)"""
        directory = os.path.dirname(os.path.abspath(self.path))
        content = json.dumps([r.to_dict() for r in records], indent=2) + "\n"

        tmp_path = None
        try:
            os.makedirs(directory, exist_ok=True)
            fd, tmp_path = tempfile.mkstemp(
                dir=directory, prefix=TEMP_PREFIX, suffix=TEMP_SUFFIX
            )
            with os.fdopen(fd, "w") as f:
                f.write(content)
            # mkstemp creates 0600; give the manifest the usual umask mode
            os.chmod(tmp_path, 0o666 & ~_current_umask())
            os.replace(tmp_path, self.path)
        except OSError as e:
            if tmp_path and os.path.exists(tmp_path):
                os.remove(tmp_path)
            raise ManifestWriteError(self.path, str(e)) from e

    def append(self, record: PackageRecord) -> List[PackageRecord]:
        """Read-modify-write: add one record to the end of the manifest"""
        records = self.load()
        records.append(record)
        self.save(records)
        return records

    def find(self, user: str, repo: str) -> List[PackageRecord]:
        return [r for r in self.load() if r.matches(user, repo)]
