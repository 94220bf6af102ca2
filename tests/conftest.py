import threading
import time
from pathlib import Path
from urllib.parse import parse_qs, urlparse

import pytest

from octarchive.core.forge_client import ForgeClient

FORGE_API = "https://forge.example/api/v1/"


def make_repos(owner: str, count: int, start: int = 1) -> list[dict]:
    return [
        {
            "id": i,
            "full_name": f"{owner}/repo{i}",
            "clone_url": f"https://forge.example/{owner}/repo{i}.git",
            "private": False,
        }
        for i in range(start, start + count)
    ]


class FakeForge(ForgeClient):
    """ForgeClient that answers from memory instead of the network.

    ``page_cap`` imitates a server enforcing a smaller page size than the
    one requested.
    """

    def __init__(self, login="alice", orgs=(), repos=None, page_cap=None, fail_on=None):
        super().__init__(FORGE_API, "t0ken")
        self.login = login
        self.page_cap = page_cap
        self.fail_on = fail_on or {}
        self.requests: list[str] = []
        self.collections = {"/api/v1/user/orgs": [{"login": o, "id": n} for n, o in enumerate(orgs)]}
        for owner, items in (repos or {}).items():
            self.collections[f"/api/v1/users/{owner}/repos"] = items

    def get_json(self, url):
        self.requests.append(url)
        u = urlparse(url)
        if u.path in self.fail_on:
            raise self.fail_on[u.path]
        if u.path == "/api/v1/user":
            return {"login": self.login, "id": 1}
        q = parse_qs(u.query)
        per_page = int(q["per_page"][0])
        if self.page_cap:
            per_page = min(per_page, self.page_cap)
        page = int(q["page"][0])
        items = self.collections.get(u.path, [])
        return items[(page - 1) * per_page : page * per_page]

    def requests_for(self, path: str) -> list[str]:
        return [r for r in self.requests if urlparse(r).path == path]


class FakeCloner:
    """Records clone calls and writes a marker file instead of running git."""

    def __init__(self, errors=None, delay: float = 0.0, before=None):
        self.errors = errors or {}
        self.delay = delay
        self.before = before
        self.calls: list[dict] = []
        self.active = 0
        self.max_active = 0
        self._lock = threading.Lock()

    def clone(self, source, destination, *, username, token=None, shallow=False):
        with self._lock:
            self.calls.append(
                {"source": source, "destination": Path(destination), "username": username, "token": token, "shallow": shallow}
            )
            self.active += 1
            self.max_active = max(self.max_active, self.active)
        try:
            if self.before is not None:
                self.before(source, Path(destination))
            if self.delay:
                time.sleep(self.delay)
            if source in self.errors:
                raise self.errors[source]
            (Path(destination) / "HEAD").write_text("ref: refs/heads/main\n")
        finally:
            with self._lock:
                self.active -= 1

    @property
    def sources(self) -> list[str]:
        return [c["source"] for c in self.calls]


@pytest.fixture
def cloner():
    return FakeCloner()


@pytest.fixture(autouse=True)
def _clean_forge_env(monkeypatch):
    monkeypatch.delenv("FORGE_API", raising=False)
    monkeypatch.delenv("FORGE_TOKEN", raising=False)
