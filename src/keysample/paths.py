"""
Centralized path definitions for the sampling stage.

Supports both local development and Docker/Airflow deployment.

Usage:
    from keysample.paths import DATA_ROOT, get_sample_output_path

    out = get_sample_output_path()
"""

import os
from pathlib import Path

# Detect environment: Docker/Airflow uses /opt/airflow
_AIRFLOW_HOME = Path("/opt/airflow")
if _AIRFLOW_HOME.exists() and (_AIRFLOW_HOME / "dags").exists():
    PROJECT_ROOT = _AIRFLOW_HOME
else:
    PROJECT_ROOT = Path(__file__).resolve().parent.parent.parent

DATA_ROOT = PROJECT_ROOT / "data"
INTERIM_DIR = DATA_ROOT / "interim"
PROCESSED_DIR = DATA_ROOT / "processed"

CONFIG_DIR = PROJECT_ROOT / "config"

LOGS_DIR = Path(os.environ.get("KEYSAMPLE_LOG_DIR", str(PROJECT_ROOT / "logs")))


def get_default_config_path() -> Path:
    """Get the stage YAML config shipped with the repo."""
    return CONFIG_DIR / "sampling.yaml"


def get_sample_input_path() -> Path:
    """Get the default input file for the sampling stage."""
    return INTERIM_DIR / "events.parquet"


def get_sample_output_path() -> Path:
    """Get the default sampled output file."""
    return PROCESSED_DIR / "events_sampled.parquet"


def get_sample_report_path() -> Path:
    return PROCESSED_DIR / "sample_report.json"


__all__ = [
    "PROJECT_ROOT",
    "DATA_ROOT",
    "INTERIM_DIR",
    "PROCESSED_DIR",
    "CONFIG_DIR",
    "LOGS_DIR",
    "get_default_config_path",
    "get_sample_input_path",
    "get_sample_output_path",
    "get_sample_report_path",
]
