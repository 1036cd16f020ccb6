"""
Alerting for the sampling stage
===============================
Slack webhook alerts plus a local JSON alert history.

Configuration via environment variables:
    SLACK_WEBHOOK_URL - Required for Slack alerts
    SLACK_CHANNEL - Optional, for display purposes (defaults to #keysample-alerts)

Usage:
    from keysample.alerting import alert_config_error, on_failure_callback

    alert_config_error("sample_by_key", "malformed sampling rate: 'abc'")
"""

import json
import os
from datetime import datetime
from enum import Enum
from typing import Optional

import requests

from keysample.logger import get_logger
from keysample.paths import LOGS_DIR

logger = get_logger("keysample.alerting", log_file="alerts.log")

ALERT_HISTORY_LIMIT = 1000


class AlertSeverity(Enum):
    """Severity levels for alerts."""
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"
    CRITICAL = "critical"


class AlertType(Enum):
    """Types of alerts that can be sent."""
    PIPELINE_FAILURE = "pipeline_failure"
    CONFIG_ERROR = "config_error"
    SAMPLE_DRIFT = "sample_drift"


_SEVERITY_COLORS = {
    AlertSeverity.INFO: "#36a64f",
    AlertSeverity.WARNING: "#ffcc00",
    AlertSeverity.ERROR: "#ff6600",
    AlertSeverity.CRITICAL: "#ff0000",
}

_ALERT_EMOJIS = {
    AlertType.PIPELINE_FAILURE: ":x:",
    AlertType.CONFIG_ERROR: ":gear:",
    AlertType.SAMPLE_DRIFT: ":scales:",
}


def _get_slack_config() -> tuple[Optional[str], str]:
    """Get Slack configuration from environment variables."""
    webhook_url = os.environ.get("SLACK_WEBHOOK_URL", "").strip()
    channel = os.environ.get("SLACK_CHANNEL", "#keysample-alerts")
    return webhook_url if webhook_url else None, channel


def format_slack_message(
    alert_type: AlertType,
    severity: AlertSeverity,
    title: str,
    message: str,
    details: Optional[dict] = None,
    pipeline_name: Optional[str] = None,
) -> dict:
    """
    Format alert as a Slack message with blocks.

    Returns:
        dict: Slack message payload with attachments and blocks
    """
    emoji = _ALERT_EMOJIS.get(alert_type, ":bell:")
    color = _SEVERITY_COLORS.get(severity, "#808080")

    blocks = [
        {
            "type": "header",
            "text": {"type": "plain_text", "text": f"{emoji} {title}", "emoji": True},
        },
        {"type": "section", "text": {"type": "mrkdwn", "text": message}},
    ]

    if pipeline_name:
        blocks.append({
            "type": "context",
            "elements": [{"type": "mrkdwn", "text": f":gear: *Pipeline:* {pipeline_name}"}],
        })

    if details:
        detail_text = "\n".join(f"*{k}:* {v}" for k, v in details.items())
        blocks.append({
            "type": "section",
            "text": {"type": "mrkdwn", "text": f"*Details:*\n{detail_text}"},
        })

    blocks.append({
        "type": "context",
        "elements": [{
            "type": "mrkdwn",
            "text": f":clock1: {datetime.now().strftime('%Y-%m-%d %H:%M:%S')}",
        }],
    })

    return {"attachments": [{"color": color, "blocks": blocks}]}


def send_slack_alert(
    alert_type: AlertType,
    severity: AlertSeverity,
    title: str,
    message: str,
    details: Optional[dict] = None,
    pipeline_name: Optional[str] = None,
) -> bool:
    """
    Send alert to Slack via webhook.

    Returns:
        bool: True if alert was sent successfully, False otherwise
    """
    webhook_url, _ = _get_slack_config()

    if not webhook_url:
        logger.warning("SLACK_WEBHOOK_URL not configured - alert logged only: %s", title)
        return False

    payload = format_slack_message(alert_type, severity, title, message, details, pipeline_name)
    try:
        response = requests.post(webhook_url, json=payload, timeout=10)
    except requests.RequestException as e:
        logger.error("Failed to send Slack alert: %s - %s", title, e)
        return False

    if response.status_code == 200:
        logger.info("Slack alert sent successfully: %s", title)
        return True
    logger.error(
        "Slack alert failed (HTTP %d): %s - %s", response.status_code, title, response.text
    )
    return False


def log_alert(
    alert_type: AlertType,
    severity: AlertSeverity,
    title: str,
    message: str,
    details: Optional[dict] = None,
    pipeline_name: Optional[str] = None,
) -> None:
    """Log alert and append it to logs/alerts_history.json."""
    alert_record = {
        "timestamp": datetime.now().isoformat(),
        "type": alert_type.value,
        "severity": severity.value,
        "title": title,
        "message": message,
        "pipeline": pipeline_name,
        "details": details,
    }

    log_func = {
        AlertSeverity.INFO: logger.info,
        AlertSeverity.WARNING: logger.warning,
        AlertSeverity.ERROR: logger.error,
        AlertSeverity.CRITICAL: logger.critical,
    }.get(severity, logger.info)

    pipeline_ctx = f"[{pipeline_name}] " if pipeline_name else ""
    log_func("ALERT %s[%s]: %s - %s", pipeline_ctx, alert_type.value, title, message)

    alerts_file = LOGS_DIR / "alerts_history.json"
    alerts = []
    if alerts_file.exists():
        try:
            content = alerts_file.read_text(encoding="utf-8").strip()
            if content:
                alerts = json.loads(content)
        except (OSError, json.JSONDecodeError):
            logger.warning("alerts_history.json was unreadable, starting fresh")
            alerts = []
        if not isinstance(alerts, list):
            alerts = []

    alerts.append(alert_record)
    alerts = alerts[-ALERT_HISTORY_LIMIT:]

    try:
        LOGS_DIR.mkdir(parents=True, exist_ok=True)
        alerts_file.write_text(json.dumps(alerts, indent=2, default=str), encoding="utf-8")
    except OSError as e:
        logger.error("Failed to write alert to history: %s", e)


def send_alert(
    alert_type: AlertType,
    severity: AlertSeverity,
    title: str,
    message: str,
    details: Optional[dict] = None,
    pipeline_name: Optional[str] = None,
) -> dict:
    """Send alert through all configured channels (history file + Slack)."""
    log_alert(alert_type, severity, title, message, details, pipeline_name)
    slack_ok = send_slack_alert(alert_type, severity, title, message, details, pipeline_name)
    return {"log": True, "slack": slack_ok}


def alert_config_error(pipeline_name: str, error: str) -> dict:
    """Sampling config could not be built; the stage will not run."""
    return send_alert(
        AlertType.CONFIG_ERROR,
        AlertSeverity.CRITICAL,
        "Sampling Configuration Error",
        f"Sampling stage `{pipeline_name}` aborted during setup.",
        details={"error": error},
        pipeline_name=pipeline_name,
    )


def alert_sample_drift(
    pipeline_name: str,
    observed_rate: float,
    configured_rate: float,
    total_rows: int,
) -> dict:
    """Observed sample fraction is far from the configured rate."""
    return send_alert(
        AlertType.SAMPLE_DRIFT,
        AlertSeverity.WARNING,
        "Sample Rate Drift",
        f"Observed rate {observed_rate:.4f} vs configured {configured_rate}.",
        details={
            "observed_rate": f"{observed_rate:.4f}",
            "configured_rate": configured_rate,
            "total_rows": total_rows,
        },
        pipeline_name=pipeline_name,
    )


def on_failure_callback(context: dict) -> None:
    """
    Airflow callback function for task failures.

    Usage in DAG default_args:
        default_args = {
            "on_failure_callback": on_failure_callback,
        }
    """
    dag_id = context.get("dag").dag_id if context.get("dag") else "unknown"
    task_id = context.get("task_instance").task_id if context.get("task_instance") else "unknown"
    exception = context.get("exception")

    send_alert(
        AlertType.PIPELINE_FAILURE,
        AlertSeverity.ERROR,
        "Pipeline Task Failed",
        f"Task `{task_id}` in DAG `{dag_id}` failed.",
        details={
            "task_id": task_id,
            "run_id": context.get("run_id", "unknown"),
            "error": str(exception) if exception else "unknown",
        },
        pipeline_name=dag_id,
    )
