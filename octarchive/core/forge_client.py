"""Forge REST API access (GitHub- and Forgejo-compatible)."""

from __future__ import annotations

import json
import logging
import threading
import urllib.error
import urllib.request
from typing import Any
from urllib.parse import quote, urlencode, urlparse, urlunparse

from pydantic import TypeAdapter, ValidationError

from .constants import FORGE_API_ACCEPT, HTTP_TIMEOUT_SEC, USER_AGENT
from .errors import APIError, TransportError

log = logging.getLogger(__name__)


class TokenAuthHandler(urllib.request.BaseHandler):
    """Attach the access token to every request sent through an opener."""

    handler_order = 400

    def __init__(self, token: str) -> None:
        self.token = token

    def http_request(self, req: urllib.request.Request) -> urllib.request.Request:
        if self.token and not req.has_header("Authorization"):
            req.add_unredirected_header("Authorization", f"token {self.token}")
        return req

    https_request = http_request


class ForgeClient:
    def __init__(
        self,
        api: str,
        token: str | None = None,
        *,
        timeout: float = HTTP_TIMEOUT_SEC,
        cancel_event: threading.Event | None = None,
    ) -> None:
        self.api = api
        self.timeout = timeout
        self.cancel_event = cancel_event or threading.Event()
        handlers: list[urllib.request.BaseHandler] = []
        if token:
            handlers.append(TokenAuthHandler(token))
        self._opener = urllib.request.build_opener(*handlers)

    # ---------- urls ----------
    def url(self, *parts: str, **query: Any) -> str:
        """Join path segments onto the API base, keeping any base path (e.g. /api/v1)."""
        u = urlparse(self.api)
        path = u.path.rstrip("/")
        for part in parts:
            path += "/" + quote(str(part).strip("/"))
        qs = urlencode({k: str(v) for k, v in query.items()})
        return urlunparse((u.scheme, u.netloc, path, "", qs, ""))

    # ---------- low-level HTTP ----------
    def get_json(self, url: str) -> Any:
        if self.cancel_event.is_set():
            raise TransportError(f"cancelled before requesting {url}")

        log.debug("GET url=%s", url)
        req = urllib.request.Request(url)
        req.add_header("Accept", FORGE_API_ACCEPT)
        req.add_header("User-Agent", USER_AGENT)
        try:
            with self._opener.open(req, timeout=self.timeout) as resp:
                status = resp.status
                reason = resp.reason
                body = resp.read()
        except urllib.error.HTTPError as e:
            e.close()
            raise APIError(e.code, str(e.reason), url) from e
        except (urllib.error.URLError, OSError) as e:
            raise TransportError(f"GET {url} failed: {e}") from e

        if status != 200:
            raise APIError(status, reason, url)
        if not body:
            raise TransportError(f"invalid API response: empty body from {url}")
        try:
            return json.loads(body.decode("utf-8"))
        except ValueError as e:
            raise TransportError(f"invalid API response from {url}: {e}") from e

    def get_model(self, url: str, schema: Any) -> Any:
        """GET ``url`` and validate the payload against ``schema`` (a model or ``list[Model]``)."""
        payload = self.get_json(url)
        try:
            return TypeAdapter(schema).validate_python(payload)
        except ValidationError as e:
            raise TransportError(f"invalid API response from {url}: {e}") from e

    # ---------- clone transport ----------
    @staticmethod
    def inject_credentials(clone_url: str, username: str, token: str) -> str:
        """https://forge/owner/repo.git -> https://<username>:<token>@forge/owner/repo.git"""
        u = urlparse(clone_url)
        if u.scheme not in ("http", "https") or not token:
            return clone_url
        host = u.netloc.rsplit("@", 1)[-1]
        netloc = f"{quote(username, safe='')}:{quote(token, safe='')}@{host}"
        return urlunparse((u.scheme, netloc, u.path, u.params, u.query, u.fragment))
