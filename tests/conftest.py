"""
Shared test fixtures: a fake HTTP session, a pinned platform and an
isolated install directory.
"""

import json
import platform
from pathlib import Path

import pytest
import requests

from starshell.core.manager import StarManager
from starshell.utils import history


API = "https://api.github.com/repos/{}/releases/latest"


class FakeResponse:
    def __init__(self, status_code=200, json_data=None, content=b"", text=None):
        self.status_code = status_code
        self._json = json_data
        self._content = content
        self._text = text
        self.closed = False

    def json(self):
        if self._text is not None:
            return json.loads(self._text)
        if self._json is None:
            raise ValueError("No JSON object could be decoded")
        return self._json

    def iter_content(self, chunk_size=1):
        for i in range(0, len(self._content), chunk_size):
            yield self._content[i : i + chunk_size]

    def close(self):
        self.closed = True


class FakeSession:
    """Stands in for requests.Session; maps URLs to canned responses"""

    def __init__(self):
        self.routes = {}
        self.calls = []
        self.closed = False

    def add(self, url, response):
        self.routes[url] = response

    def add_release(self, repo, tag, assets, content=b"binary"):
        """Register a release document plus a download for every asset"""
        documents = []
        for name in assets:
            url = f"https://github.com/{repo}/releases/download/{tag}/{name}"
            documents.append({"name": name, "browser_download_url": url})
            self.add(url, FakeResponse(content=content))
        self.add(API.format(repo), FakeResponse(json_data={"tag_name": tag, "assets": documents}))

    def get(self, url, **kwargs):
        self.calls.append(url)
        response = self.routes.get(url)
        if response is None:
            return FakeResponse(status_code=404, json_data={"message": "Not Found"})
        if isinstance(response, Exception):
            raise response
        return response

    def close(self):
        self.closed = True


@pytest.fixture
def session() -> FakeSession:
    return FakeSession()


@pytest.fixture
def linux_amd64(monkeypatch: pytest.MonkeyPatch):
    """Pretend to run on linux-amd64."""
    monkeypatch.setattr(platform, "system", lambda: "Linux")
    monkeypatch.setattr(platform, "machine", lambda: "x86_64")


@pytest.fixture
def stars_dir(tmp_path: Path) -> Path:
    return tmp_path / "stars"


@pytest.fixture
def manager(stars_dir: Path, session: FakeSession, linux_amd64) -> StarManager:
    return StarManager(
        install_dir=str(stars_dir),
        manifest_path=str(stars_dir / ".stars"),
        session=session,
        verbose=False,
    )


@pytest.fixture(autouse=True)
def isolated_history(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Keep history writes out of the real home directory."""
    history_dir = tmp_path / "history"
    monkeypatch.setattr(history, "HISTORY_DIR", str(history_dir))
    monkeypatch.setattr(history, "HISTORY_FILE", str(history_dir / "history.json"))
    return history_dir


@pytest.fixture(autouse=True)
def no_network(monkeypatch: pytest.MonkeyPatch):
    """Fail loudly if a test reaches for the real network."""

    def refuse(*args, **kwargs):
        raise AssertionError("real network access in tests")

    monkeypatch.setattr(requests.Session, "request", refuse)
