"""
Pytest configuration to ensure paths are set up correctly for tests.

This allows imports like `from handlers import main` to work when running
tests, simulating the Lambda environment where code is deployed from the
src/ directory.
"""

import os
import sys
from datetime import datetime, timedelta, timezone
from pathlib import Path

import boto3
import pytest


def _ensure_paths_on_sys_path() -> None:
    """Add repository root AND src/ to sys.path if missing.

    The src/ directory is added to simulate Lambda's import behavior,
    where Code.from_asset("src") makes src/ the root of the package.
    """
    repo_root = Path(__file__).resolve().parents[1]
    src_root = repo_root / "src"

    for path in (repo_root, src_root):
        path_str = str(path)
        if path_str not in sys.path:
            sys.path.insert(0, path_str)


_ensure_paths_on_sys_path()

# Offline-friendly AWS defaults so tests never need real credentials.
os.environ.setdefault("AWS_REGION", "eu-west-2")
os.environ.setdefault("AWS_DEFAULT_REGION", "eu-west-2")
os.environ.setdefault("AWS_ACCESS_KEY_ID", "test")
os.environ.setdefault("AWS_SECRET_ACCESS_KEY", "test")
os.environ.setdefault("AWS_SESSION_TOKEN", "test")
os.environ.setdefault("ENVIRONMENT", "dev")

boto3.setup_default_session(region_name="eu-west-2")

NOW = datetime(2026, 3, 2, 12, 0, tzinfo=timezone.utc)


@pytest.fixture
def now() -> datetime:
    """Fixed evaluation instant shared by tests."""
    return NOW


@pytest.fixture
def make_ticket():
    """Build a Ticket opened ``hours_ago`` hours before NOW."""
    from models.ticket import Ticket

    def _make(hours_ago: float = 1.0, **overrides) -> Ticket:
        fields = {
            "id": "TCK-1001",
            "title": "VPN drops every few minutes",
            "description": "Connection resets when on the office wifi",
            "status": "Open",
            "priority": "Medium",
            "created_at": NOW - timedelta(hours=hours_ago),
            "created_by": "user-7",
            "assigned_to": "agent-3",
        }
        fields.update(overrides)
        return Ticket.model_validate(fields)

    return _make


@pytest.fixture(autouse=True)
def reset_workflow_config(monkeypatch):
    """Each test starts with default targets and an empty config cache."""
    monkeypatch.delenv("SLA_TARGETS", raising=False)
    monkeypatch.delenv("SLA_POLICY_TABLE", raising=False)

    import services.config_service as config_service

    config_service.config_cache.clear()
    monkeypatch.setattr(config_service, "_config_service", None)
    monkeypatch.setattr(config_service, "_engine", None)
    yield
    config_service.config_cache.clear()
