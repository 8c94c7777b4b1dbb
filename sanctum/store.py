"""Persistence backends behind one load/save contract.

LocalStore keeps one JSON document per key on disk; RemoteStore keeps the
same documents in a hosted key/value table. Both wrap every backend failure
in StoreError and never retry. Concurrent writers resolve as last-write-wins.
"""

from __future__ import annotations

import json
import re
from pathlib import Path
from typing import Any, Protocol

import httpx

from sanctum.config import Settings, state_dir
from sanctum.errors import StoreError
from sanctum.fileio import read_json, write_json_atomic
from sanctum.logger import get_logger


log = get_logger("store")

_KEY_RE = re.compile(r"^[A-Za-z0-9_.-]+$")


class Store(Protocol):
    def load(self, key: str) -> Any:
        """Stored document for *key*, or None if there is none."""
        ...

    def save(self, key: str, value: Any) -> None:
        """Replace the document for *key* wholesale."""
        ...


def _check_key(key: str) -> str:
    if not _KEY_RE.match(key):
        raise StoreError(f"Invalid store key: {key!r}", key=key)
    return key


class LocalStore:
    """JSON documents under ``<root>/state/<key>.json``."""

    def __init__(self, root: Path):
        self.directory = state_dir(root)

    def _path(self, key: str) -> Path:
        return self.directory / f"{_check_key(key)}.json"

    def load(self, key: str) -> Any:
        path = self._path(key)
        try:
            return read_json(path)
        except (OSError, ValueError) as e:
            log.error("local load failed for %s: %s", key, e)
            raise StoreError(f"Could not read {path.name}: {e}", key=key) from e

    def save(self, key: str, value: Any) -> None:
        path = self._path(key)
        try:
            write_json_atomic(path, value)
        except (OSError, TypeError, ValueError) as e:
            log.error("local save failed for %s: %s", key, e)
            raise StoreError(f"Could not write {path.name}: {e}", key=key) from e


class RemoteStore:
    """Hosted table ``(key text primary key, value jsonb)`` behind a REST gateway."""

    def __init__(
        self,
        url: str,
        table: str = "engagement_state",
        api_key: str = "",
        timeout: float = 10.0,
        transport: httpx.BaseTransport | None = None,
    ):
        if not url:
            raise StoreError("Remote store URL is not configured")
        self.endpoint = f"{url.rstrip('/')}/rest/v1/{table}"
        headers = {"Content-Type": "application/json"}
        if api_key:
            headers["apikey"] = api_key
            headers["Authorization"] = f"Bearer {api_key}"
        self._client = httpx.Client(headers=headers, timeout=timeout, transport=transport)

    def close(self) -> None:
        self._client.close()

    def __enter__(self) -> RemoteStore:
        return self

    def __exit__(self, *exc: object) -> None:
        self.close()

    def load(self, key: str) -> Any:
        _check_key(key)
        try:
            response = self._client.get(self.endpoint, params={"key": f"eq.{key}", "select": "value"})
            response.raise_for_status()
            rows = response.json()
        except httpx.HTTPStatusError as e:
            log.error("remote load failed for %s: HTTP %s", key, e.response.status_code)
            raise StoreError(f"Remote load failed: HTTP {e.response.status_code}", key=key) from e
        except httpx.HTTPError as e:
            log.error("remote load failed for %s: %s", key, e)
            raise StoreError(f"Remote load failed: {e}", key=key) from e
        except json.JSONDecodeError as e:
            raise StoreError(f"Remote load returned invalid JSON: {e}", key=key) from e

        if not rows:
            return None
        return rows[0].get("value")

    def save(self, key: str, value: Any) -> None:
        _check_key(key)
        try:
            response = self._client.post(
                self.endpoint,
                json={"key": key, "value": value},
                headers={"Prefer": "resolution=merge-duplicates,return=minimal"},
            )
            response.raise_for_status()
        except httpx.HTTPStatusError as e:
            log.error("remote save failed for %s: HTTP %s", key, e.response.status_code)
            raise StoreError(f"Remote save failed: HTTP {e.response.status_code}", key=key) from e
        except httpx.HTTPError as e:
            log.error("remote save failed for %s: %s", key, e)
            raise StoreError(f"Remote save failed: {e}", key=key) from e


def open_store(settings: Settings, root: Path) -> LocalStore | RemoteStore:
    """Backend selected by the profile's ``store.backend``."""
    cfg = settings.store
    if cfg.backend == "remote":
        return RemoteStore(cfg.url, table=cfg.table, api_key=cfg.api_key, timeout=cfg.timeout)
    if cfg.backend != "local":
        raise StoreError(f"Unknown store backend: {cfg.backend!r}")
    return LocalStore(root)
