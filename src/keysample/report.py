"""Summary statistics for a sampling run.

The kept count of a Bernoulli(rate) sample over n rows has standard error
sqrt(rate * (1 - rate) / n) in rate terms; a run whose observed rate strays
further than ``tolerance_sigmas`` standard errors is flagged as drifted.
"""
import math
from datetime import datetime, timezone
from pathlib import Path
from typing import Sequence, Union

from keysample.config import SamplingConfig
from keysample.io import write_json


def build_sample_report(
    total_rows: int,
    kept_rows: int,
    config: SamplingConfig,
    key_columns: Sequence[str] = (),
    tolerance_sigmas: float = 4.0,
) -> dict:
    """Build the JSON-serialisable report for one sampling run."""
    rate = config.rate
    observed = kept_rows / total_rows if total_rows else 0.0

    expected = min(max(rate, 0.0), 1.0) if not math.isnan(rate) else 0.0
    std_error = math.sqrt(expected * (1 - expected) / total_rows) if total_rows else 0.0
    deviation = observed - expected
    if std_error > 0:
        within = abs(deviation) <= tolerance_sigmas * std_error
    else:
        # degenerate rate (0 or 1) or empty input: only exact agreement passes,
        # allowing one row of slack for the sub-zero edge of the expander
        within = abs(kept_rows - expected * total_rows) <= 1

    return {
        "generated_at": datetime.now(timezone.utc).isoformat(),
        "salt_seed": config.seed,
        "configured_rate": rate,
        "key_columns": list(key_columns),
        "total_rows": total_rows,
        "kept_rows": kept_rows,
        "dropped_rows": total_rows - kept_rows,
        "observed_rate": observed,
        "std_error": std_error,
        "deviation": deviation,
        "tolerance_sigmas": tolerance_sigmas,
        "within_tolerance": within,
    }


def write_sample_report(report: dict, path: Union[str, Path]) -> Path:
    write_json(report, str(path))
    return Path(path)
