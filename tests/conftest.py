"""
Shared pytest fixtures for the keysample tests.

Provides:
- Isolated environment (no KEYSAMPLE_* / Slack variables leak in)
- Logs redirected to a temporary directory
- Synthetic events DataFrames and Parquet files
"""

import os
import sys
import tempfile
from pathlib import Path

import pandas as pd
import pytest

# Logs go to a throwaway directory; must be set before keysample is imported
os.environ.setdefault("KEYSAMPLE_LOG_DIR", tempfile.mkdtemp(prefix="keysample-logs-"))

# Add src to path so the tests run without an editable install
PROJECT_ROOT = Path(__file__).resolve().parent.parent
sys.path.insert(0, str(PROJECT_ROOT / "src"))

from keysample.config import SamplingConfig

SYSTEMS = ["linux", "hpc", "hdfs", "hadoop", "spark"]


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    """Strip environment overrides so YAML files under test are authoritative."""
    for var in ("KEYSAMPLE_SALT", "KEYSAMPLE_RATE", "KEYSAMPLE_KEY_COLUMNS", "SLACK_WEBHOOK_URL"):
        monkeypatch.delenv(var, raising=False)


@pytest.fixture
def project_root():
    return PROJECT_ROOT


@pytest.fixture
def default_config():
    """Default salt, 10% rate."""
    return SamplingConfig.from_args("0.1")


def make_events_df(n_per_system: int = 200) -> pd.DataFrame:
    rows = []
    for system in SYSTEMS:
        for i in range(n_per_system):
            rows.append({
                "system": system,
                "raw_id": str(i),
                "severity": "INFO" if i % 3 else "ERROR",
                "message": f"Test message {i}",
            })
    return pd.DataFrame(rows)


@pytest.fixture
def events_df():
    return make_events_df()


@pytest.fixture
def events_parquet(tmp_path, events_df):
    path = tmp_path / "interim" / "events.parquet"
    path.parent.mkdir(parents=True)
    events_df.to_parquet(path, index=False)
    return path


@pytest.fixture
def alert_logs_dir(tmp_path, monkeypatch):
    """Point the alert history file at a temp directory."""
    from keysample import alerting

    logs_dir = tmp_path / "logs"
    logs_dir.mkdir()
    monkeypatch.setattr(alerting, "LOGS_DIR", logs_dir)
    return logs_dir
