"""Workspace root, user profile settings and path helpers."""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from sanctum.activity import DEFAULT_RETENTION
from sanctum.fileio import read_yaml


def workspace_root() -> Path:
    """Directory holding profile.yaml, plans.yaml, state/ and logs/."""
    return Path(
        os.environ.get("SANCTUM_ROOT", str(Path.home() / "sanctum"))
    ).expanduser().resolve()


def profile_path(root: Path | None = None) -> Path:
    if root is None:
        root = workspace_root()
    return root / "profile.yaml"


def catalog_path(root: Path | None = None) -> Path:
    if root is None:
        root = workspace_root()
    return root / "plans.yaml"


def state_dir(root: Path | None = None) -> Path:
    if root is None:
        root = workspace_root()
    return root / "state"


def logs_dir(root: Path | None = None) -> Path:
    if root is None:
        root = workspace_root()
    return root / "logs"


# ── Settings ──────────────────────────────────────────────────


@dataclass
class StoreSettings:
    backend: str = "local"  # local, remote
    url: str = ""
    table: str = "engagement_state"
    api_key_env: str = "SANCTUM_STORE_KEY"
    timeout: float = 10.0

    @classmethod
    def from_dict(cls, d: dict[str, Any] | None) -> StoreSettings:
        if not d or not isinstance(d, dict):
            return cls()
        return cls(
            backend=str(d.get("backend", "local")).strip().lower() or "local",
            url=str(d.get("url", "")),
            table=str(d.get("table", "engagement_state")),
            api_key_env=str(d.get("api_key_env", "SANCTUM_STORE_KEY")),
            timeout=float(d.get("timeout", 10.0)),
        )

    @property
    def api_key(self) -> str:
        return os.environ.get(self.api_key_env, "")


@dataclass
class Settings:
    timezone: str = "UTC"
    activity_retention: int = DEFAULT_RETENTION
    log_level: str = "INFO"
    store: StoreSettings = field(default_factory=StoreSettings)

    @classmethod
    def from_dict(cls, d: dict[str, Any] | None) -> Settings:
        if not d or not isinstance(d, dict):
            return cls()
        return cls(
            timezone=str(d.get("timezone", "UTC")),
            activity_retention=int(d.get("activity_retention", DEFAULT_RETENTION)),
            log_level=str(d.get("log_level", "INFO")).upper(),
            store=StoreSettings.from_dict(d.get("store")),
        )

    def tzinfo(self) -> ZoneInfo:
        """User's zone, falling back to UTC for unknown names."""
        try:
            return ZoneInfo(self.timezone)
        except (ZoneInfoNotFoundError, ValueError):
            return ZoneInfo("UTC")


def load_settings(root: Path | None = None) -> Settings:
    return Settings.from_dict(read_yaml(profile_path(root)))
