"""Plan catalog loaded from ``plans.yaml`` in the workspace."""

from __future__ import annotations

from pathlib import Path
from typing import Any

from sanctum.config import catalog_path
from sanctum.errors import NotFoundError
from sanctum.fileio import read_yaml
from sanctum.models import PlanDefinition


def load_catalog(root: Path | None = None) -> dict[str, PlanDefinition]:
    data = read_yaml(catalog_path(root))
    plans = {}
    for entry in data.get("plans") or []:
        definition = PlanDefinition.from_dict(entry)
        if definition.id:
            plans[definition.id] = definition
    return plans


def find_plan(catalog: dict[str, PlanDefinition], plan_id: str) -> PlanDefinition:
    try:
        return catalog[plan_id]
    except KeyError:
        raise NotFoundError("plan definition", plan_id) from None


def plan_day_content(catalog: dict[str, PlanDefinition], plan_id: str, day: int) -> dict[str, Any]:
    """Opaque payload for *day* of *plan_id* (empty if the catalog has none)."""
    return dict(find_plan(catalog, plan_id).days.get(day, {}))
