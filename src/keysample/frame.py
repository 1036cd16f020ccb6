"""pandas adapter: apply the sample-by-key predicate to DataFrame rows."""
from typing import Any, Sequence

import pandas as pd

from keysample.config import SamplingConfig
from keysample.predicate import evaluate


def _field_values(series: pd.Series) -> list[Any]:
    # tolist() yields Python scalars; missing values become the null sentinel
    return [None if _is_missing(v) else v for v in series.tolist()]


def _is_missing(value: Any) -> bool:
    if isinstance(value, (list, tuple, dict, bytes, bytearray)):
        return False
    try:
        return bool(pd.isna(value))
    except (TypeError, ValueError):
        return False


def key_mask(
    df: pd.DataFrame, key_columns: Sequence[str], config: SamplingConfig
) -> pd.Series:
    """Boolean Series marking the rows whose key columns fall in the sample.

    Column order in ``key_columns`` is part of the key. Integer columns with
    missing values should use a nullable integer dtype (``keysample.io.read_parquet``
    reads them that way); a float column holding whole numbers hashes as
    doubles, not integers.
    """
    missing = [c for c in key_columns if c not in df.columns]
    if missing:
        raise KeyError(f"Key columns not in frame: {missing}")

    columns = [_field_values(df[c]) for c in key_columns]
    if columns:
        keys = zip(*columns)
    else:
        keys = (() for _ in range(len(df)))
    return pd.Series(
        [evaluate(fields, config) for fields in keys], index=df.index, dtype=bool
    )


def sample_frame(
    df: pd.DataFrame, key_columns: Sequence[str], config: SamplingConfig
) -> pd.DataFrame:
    """Return the sampled rows of ``df`` with a fresh index."""
    return df[key_mask(df, key_columns, config)].reset_index(drop=True)
