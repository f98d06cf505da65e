from pathlib import Path

import pytest

from sync_failures.config import Settings
from sync_failures.failure_taxonomy import DEFAULT_ORIGIN_TABLE, WorkflowActivity
from sync_failures.origin_table import load_origin_table, resolve_origin_table
from sync_failures.types import FailureOrigin


CONFIG_PATH = Path(__file__).resolve().parent.parent / "config" / "origin_table.yaml"


def _write_table(path: Path, lines: list[str]) -> str:
    path.write_text("\n".join(lines), encoding="utf-8")
    return str(path)


def test_shipped_table_matches_defaults():
    assert load_origin_table(str(CONFIG_PATH)) == DEFAULT_ORIGIN_TABLE


def test_load_origin_table_adds_entries(tmp_path):
    path = _write_table(
        tmp_path / "origins.yaml",
        [
            "origins:",
            "  - workflow: CheckWorkflow",
            "    activity: Check",
            "    origin: SOURCE",
            "  - workflow: SyncWorkflow",
            "    activity: Run",
            "    origin: normalization",
        ],
    )
    table = load_origin_table(path)

    assert table[WorkflowActivity("CheckWorkflow", "Check")] == FailureOrigin.SOURCE
    assert table[WorkflowActivity("SyncWorkflow", "Run")] == FailureOrigin.NORMALIZATION
    assert table[WorkflowActivity("SyncWorkflow", "Replicate")] == FailureOrigin.REPLICATION


def test_load_origin_table_empty_file(tmp_path):
    path = _write_table(tmp_path / "origins.yaml", [""])
    assert load_origin_table(path) == DEFAULT_ORIGIN_TABLE


def test_load_origin_table_unknown_origin(tmp_path):
    path = _write_table(
        tmp_path / "origins.yaml",
        ["origins:", "  - workflow: SyncWorkflow", "    activity: Run", "    origin: scheduler"],
    )
    with pytest.raises(ValueError, match="Unknown failure origin: scheduler"):
        load_origin_table(path)


def test_load_origin_table_missing_keys(tmp_path):
    path = _write_table(tmp_path / "origins.yaml", ["origins:", "  - workflow: SyncWorkflow"])
    with pytest.raises(ValueError, match="entry 0 is missing: activity, origin"):
        load_origin_table(path)


def test_resolve_origin_table_defaults():
    settings = Settings.model_validate({"ORIGIN_TABLE_PATH": ""})
    assert resolve_origin_table(settings) == DEFAULT_ORIGIN_TABLE


def test_resolve_origin_table_from_settings(tmp_path):
    path = _write_table(
        tmp_path / "origins.yaml",
        ["origins:", "  - workflow: ResetWorkflow", "    activity: Persist", "    origin: persistence"],
    )
    settings = Settings.model_validate({"ORIGIN_TABLE_PATH": f"  {path}  "})
    table = resolve_origin_table(settings)
    assert table[WorkflowActivity("ResetWorkflow", "Persist")] == FailureOrigin.PERSISTENCE
