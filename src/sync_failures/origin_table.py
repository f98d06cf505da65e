from __future__ import annotations

from functools import lru_cache
from pathlib import Path

import yaml

from sync_failures.config import Settings, get_settings
from sync_failures.failure_taxonomy import DEFAULT_ORIGIN_TABLE, WorkflowActivity
from sync_failures.types import FailureOrigin


def _load_yaml(path: str) -> dict:
    with Path(path).open("r", encoding="utf-8") as handle:
        return yaml.safe_load(handle) or {}


def _parse_origin(value: str) -> FailureOrigin:
    normalized = str(value).strip().lower()
    try:
        return FailureOrigin(normalized)
    except ValueError:
        raise ValueError(f"Unknown failure origin: {value}") from None


def load_origin_table(path: str) -> dict[WorkflowActivity, FailureOrigin]:
    raw = _load_yaml(path)
    table = dict(DEFAULT_ORIGIN_TABLE)
    for index, entry in enumerate(raw.get("origins", [])):
        missing = [key for key in ("workflow", "activity", "origin") if key not in entry]
        if missing:
            raise ValueError(f"Origin table entry {index} is missing: {', '.join(missing)}")
        key = WorkflowActivity(str(entry["workflow"]), str(entry["activity"]))
        table[key] = _parse_origin(entry["origin"])
    return table


def resolve_origin_table(settings: Settings) -> dict[WorkflowActivity, FailureOrigin]:
    if not settings.origin_table_path:
        return dict(DEFAULT_ORIGIN_TABLE)
    return load_origin_table(settings.origin_table_path)


@lru_cache(maxsize=8)
def _cached_origin_table(path: str) -> dict[WorkflowActivity, FailureOrigin]:
    return load_origin_table(path)


def get_origin_table() -> dict[WorkflowActivity, FailureOrigin]:
    """Table used by the classifier when the caller does not pass one."""
    path = get_settings().origin_table_path
    if not path:
        return DEFAULT_ORIGIN_TABLE
    return _cached_origin_table(path)
