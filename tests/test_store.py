"""Tests for sanctum/store.py — local files and the remote REST table."""

import json

import httpx
import pytest

from sanctum.config import StoreSettings, Settings, load_settings
from sanctum.errors import StoreError
from sanctum.store import LocalStore, RemoteStore, open_store


def test_local_missing_key_is_none(workspace):
    assert LocalStore(workspace).load("streak") is None


def test_local_save_and_load(workspace):
    store = LocalStore(workspace)
    store.save("streak", {"currentStreak": 3})
    assert store.load("streak") == {"currentStreak": 3}
    assert (workspace / "state" / "streak.json").exists()
    # no temp files left behind
    assert [p.name for p in (workspace / "state").iterdir()] == ["streak.json"]


def test_local_corrupt_json_raises(workspace):
    store = LocalStore(workspace)
    (workspace / "state").mkdir()
    (workspace / "state" / "plans.json").write_text("{not json", encoding="utf-8")
    with pytest.raises(StoreError) as exc_info:
        store.load("plans")
    assert exc_info.value.key == "plans"


def test_local_unserializable_value_raises(workspace):
    store = LocalStore(workspace)
    with pytest.raises(StoreError):
        store.save("streak", {"bad": object()})
    assert store.load("streak") is None


def test_invalid_key_rejected(workspace):
    with pytest.raises(StoreError):
        LocalStore(workspace).load("../escape")


def _remote(handler) -> RemoteStore:
    return RemoteStore(
        "https://db.example.test/",
        table="engagement_state",
        api_key="secret",
        transport=httpx.MockTransport(handler),
    )


def test_remote_load_returns_value():
    seen = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen["url"] = str(request.url)
        seen["auth"] = request.headers.get("authorization")
        return httpx.Response(200, json=[{"value": {"currentStreak": 4}}])

    with _remote(handler) as store:
        assert store.load("streak") == {"currentStreak": 4}
    assert seen["url"].startswith("https://db.example.test/rest/v1/engagement_state")
    assert "key=eq.streak" in seen["url"]
    assert seen["auth"] == "Bearer secret"


def test_remote_load_no_rows_is_none():
    store = _remote(lambda request: httpx.Response(200, json=[]))
    assert store.load("streak") is None


def test_remote_save_upserts():
    seen = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen["method"] = request.method
        seen["prefer"] = request.headers.get("prefer")
        seen["body"] = json.loads(request.content)
        return httpx.Response(201)

    _remote(handler).save("plans", {"p": {"planId": "p"}})
    assert seen["method"] == "POST"
    assert "merge-duplicates" in seen["prefer"]
    assert seen["body"] == {"key": "plans", "value": {"p": {"planId": "p"}}}


def test_remote_http_error_raises_store_error():
    store = _remote(lambda request: httpx.Response(500, text="boom"))
    with pytest.raises(StoreError):
        store.load("streak")
    with pytest.raises(StoreError):
        store.save("streak", {})


def test_remote_connect_error_raises_store_error():
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("unreachable", request=request)

    with pytest.raises(StoreError):
        _remote(handler).load("streak")


def test_remote_requires_url():
    with pytest.raises(StoreError):
        RemoteStore("")


def test_open_store_selects_backend(workspace):
    assert isinstance(open_store(load_settings(workspace), workspace), LocalStore)
    remote = open_store(
        Settings(store=StoreSettings(backend="remote", url="https://db.example.test")), workspace
    )
    assert isinstance(remote, RemoteStore)
    remote.close()
    with pytest.raises(StoreError):
        open_store(Settings(store=StoreSettings(backend="ftp")), workspace)
