"""
Sample-by-key DAG
=================
Deterministically samples an interim table by its key columns:
  1. validate_sampling_config - parse salt/rate, check SHA-1 is usable
  2. sample_by_key            - filter rows, write sample + report

Config errors are deterministic, so the DAG does not retry. Failures are
reported through keysample.alerting.
"""

import logging
import sys
from datetime import datetime
from pathlib import Path

from airflow import DAG
try:
    from airflow.providers.standard.operators.python import PythonOperator
except ImportError:
    from airflow.operators.python import PythonOperator

logger = logging.getLogger(__name__)

# Project paths (relative to /opt/airflow in Docker)
PROJECT_ROOT = Path("/opt/airflow")
if not (PROJECT_ROOT / "src").exists():
    PROJECT_ROOT = Path(__file__).resolve().parent.parent

sys.path.insert(0, str(PROJECT_ROOT / "src"))

CONFIG_PATH = PROJECT_ROOT / "config" / "sampling.yaml"

from keysample.alerting import alert_config_error, on_failure_callback

default_args = {
    "owner": "mlops",
    "depends_on_past": False,
    "email_on_failure": False,
    "retries": 0,
    "on_failure_callback": on_failure_callback,
}


def validate_sampling_config():
    """Build the sampling config once so bad salts/rates fail before any data moves."""
    from keysample.config import load_settings
    from keysample.errors import SamplingError

    try:
        settings = load_settings(CONFIG_PATH)
    except SamplingError as e:
        alert_config_error("sample_by_key_pipeline", str(e))
        raise
    logger.info(
        "Sampling config OK: rate=%s seed=%d key=%s",
        settings.sampling.rate, settings.sampling.seed, list(settings.key_columns),
    )
    return {"rate": settings.sampling.rate, "key_columns": list(settings.key_columns)}


def run_sample_by_key():
    """Run the sampling stage with the YAML/env settings."""
    from keysample.config import load_settings
    from keysample.stage import run_sample_stage

    report = run_sample_stage(load_settings(CONFIG_PATH))
    return {k: report[k] for k in ("total_rows", "kept_rows", "observed_rate", "within_tolerance")}


dag = DAG(
    dag_id="sample_by_key_pipeline",
    default_args=default_args,
    description="Deterministic sample-by-key filtering of interim events",
    schedule=None,
    start_date=datetime(2024, 1, 1),
    catchup=False,
    tags=["mlops", "sampling"],
)

validate_config = PythonOperator(
    task_id="validate_sampling_config",
    python_callable=validate_sampling_config,
    dag=dag,
)

sample_by_key = PythonOperator(
    task_id="sample_by_key",
    python_callable=run_sample_by_key,
    dag=dag,
)

validate_config >> sample_by_key
