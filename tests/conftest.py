"""Shared test fixtures for Sanctum tests."""

from __future__ import annotations

import os
from datetime import datetime, timezone
from pathlib import Path

import pytest
import yaml

from sanctum.clock import FixedClock
from sanctum.engagement import EngagementFacade


@pytest.fixture
def workspace(tmp_path: Path) -> Path:
    """Create a temporary workspace with a profile and a plan catalog."""
    root = tmp_path / "workspace"
    root.mkdir(parents=True)

    profile = {
        "timezone": "UTC",
        "activity_retention": 100,
        "log_level": "INFO",
        "store": {"backend": "local"},
    }
    (root / "profile.yaml").write_text(
        yaml.dump(profile, default_flow_style=False), encoding="utf-8"
    )

    catalog = {
        "plans": [
            {
                "id": "faith-foundations",
                "title": "Foundations of Faith",
                "kind": "devotional",
                "duration": 7,
                "days": [
                    {
                        "day": 1,
                        "title": "God's Unconditional Love",
                        "scripture": {"text": "For God so loved the world...", "reference": "John 3:16"},
                        "prayer": "Father, help me grasp the depth of Your love.",
                        "actionStep": "Write down three ways God has shown His love to you.",
                    },
                    {"day": 2, "title": "Grace That Saves"},
                ],
            },
            {
                "id": "daniel-fast",
                "title": "Daniel Fast",
                "kind": "fasting",
                "duration": 3,
            },
        ]
    }
    (root / "plans.yaml").write_text(
        yaml.dump(catalog, default_flow_style=False), encoding="utf-8"
    )

    os.environ["SANCTUM_ROOT"] = str(root)
    yield root
    if "SANCTUM_ROOT" in os.environ:
        del os.environ["SANCTUM_ROOT"]


@pytest.fixture
def clock() -> FixedClock:
    """Monday 2026-02-09, 09:00 UTC."""
    return FixedClock(datetime(2026, 2, 9, 9, 0, tzinfo=timezone.utc))


@pytest.fixture
def facade(workspace: Path, clock: FixedClock) -> EngagementFacade:
    return EngagementFacade.from_workspace(workspace, clock=clock)
