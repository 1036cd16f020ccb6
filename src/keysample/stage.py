"""Sampling stage: read a table, keep the rows sampled by key, write it back.

Reads:  settings.input_path   (Parquet or CSV)
Output: settings.output_path  (same format rules)
Report: settings.report_path  (JSON, optional)

Usage:
    python -m keysample.stage --key-columns system,raw_id --rate 0.1
    python -m keysample.stage --config config/sampling.yaml
"""
import argparse
import sys
from pathlib import Path
from typing import Optional, Sequence

from keysample.alerting import alert_sample_drift
from keysample.config import StageSettings, load_settings
from keysample.frame import key_mask
from keysample.io import read_table, write_table
from keysample.logger import get_logger
from keysample.report import build_sample_report, write_sample_report

logger = get_logger(__name__)


def run_sample_stage(settings: StageSettings) -> dict:
    """Run one sampling pass and return its report."""
    config = settings.sampling

    # 1. Load input
    df = read_table(settings.input_path)
    logger.info("Loaded %s: %d rows", settings.input_path, len(df))

    # 2. Sample by key
    mask = key_mask(df, settings.key_columns, config)
    sampled = df[mask].reset_index(drop=True)
    pct = len(sampled) / len(df) * 100 if len(df) else 0.0
    logger.info(
        "Sampled: %d of %d rows (%.1f%%, configured rate %s) on key %s",
        len(sampled), len(df), pct, config.rate, list(settings.key_columns),
    )

    # 3. Write output + report
    write_table(sampled, settings.output_path)

    report = build_sample_report(
        total_rows=len(df),
        kept_rows=len(sampled),
        config=config,
        key_columns=settings.key_columns,
        tolerance_sigmas=settings.tolerance_sigmas,
    )
    if settings.report_path is not None:
        write_sample_report(report, settings.report_path)

    if not report["within_tolerance"]:
        logger.warning(
            "Observed rate %.4f deviates from configured rate %s by more than %.1f sigma",
            report["observed_rate"], config.rate, settings.tolerance_sigmas,
        )
        alert_sample_drift(
            pipeline_name="sample_by_key",
            observed_rate=report["observed_rate"],
            configured_rate=config.rate,
            total_rows=report["total_rows"],
        )

    logger.info("Done.")
    return report


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Deterministically sample table rows by key columns",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
    python -m keysample.stage --key-columns user_id --rate 0.05
    python -m keysample.stage --key-columns system,raw_id --salt exp42 --rate 0.1 \\
        --input data/interim/events.parquet --output data/processed/sample.parquet
        """,
    )
    parser.add_argument("--config", type=Path, help="YAML config (default: config/sampling.yaml)")
    parser.add_argument("--key-columns", help="Comma separated key columns, in key order")
    parser.add_argument("--salt", help="Salt string (default: from config, else 323148)")
    parser.add_argument("--rate", help="Sampling rate as a decimal string")
    parser.add_argument("--input", type=Path, help="Input Parquet/CSV file")
    parser.add_argument("--output", type=Path, help="Output Parquet/CSV file")
    parser.add_argument("--report", type=Path, help="Report JSON file")
    parser.add_argument("--no-report", action="store_true", help="Skip writing the report")
    return parser


def settings_from_args(args: argparse.Namespace) -> StageSettings:
    """Merge CLI flags over the YAML/env settings."""
    settings = load_settings(args.config, salt=args.salt, rate=args.rate)

    options = settings.model_dump(exclude={"sampling"})
    if args.key_columns is not None:
        options["key_columns"] = tuple(c.strip() for c in args.key_columns.split(",") if c.strip())
    if args.input is not None:
        options["input_path"] = args.input
    if args.output is not None:
        options["output_path"] = args.output
    if args.report is not None:
        options["report_path"] = args.report
    if args.no_report:
        options["report_path"] = None
    return StageSettings(sampling=settings.sampling, **options)


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = _build_parser().parse_args(argv)
    settings = settings_from_args(args)
    run_sample_stage(settings)
    return 0


if __name__ == "__main__":
    sys.exit(main())
