"""I/O helpers for reading/writing stage data."""
import json
from pathlib import Path
from typing import Union

import pandas as pd
import pyarrow as pa
import pyarrow.parquet as pq

from keysample.logger import get_logger

logger = get_logger(__name__)

PathLike = Union[str, Path]

_PARQUET_SUFFIXES = {".parquet", ".pq"}
_CSV_SUFFIXES = {".csv"}

# integer columns stay integers even with nulls, so keys keep their integer hash
_NULLABLE_INTS = {
    pa.int8(): pd.Int8Dtype(),
    pa.int16(): pd.Int16Dtype(),
    pa.int32(): pd.Int32Dtype(),
    pa.int64(): pd.Int64Dtype(),
    pa.uint8(): pd.UInt8Dtype(),
    pa.uint16(): pd.UInt16Dtype(),
    pa.uint32(): pd.UInt32Dtype(),
    pa.uint64(): pd.UInt64Dtype(),
}


def read_csv(path: PathLike, **kwargs) -> pd.DataFrame:
    """Read a CSV with all columns as str, so key hashes match the raw text."""
    return pd.read_csv(path, dtype=str, keep_default_na=False, **kwargs)


def read_parquet(path: PathLike) -> pd.DataFrame:
    """Read a Parquet file, integer columns as pandas nullable integers."""
    return pq.read_table(path).to_pandas(types_mapper=_NULLABLE_INTS.get)


def write_parquet(df: pd.DataFrame, path: PathLike) -> None:
    """Write a DataFrame to Parquet, creating parent dirs as needed."""
    Path(path).parent.mkdir(parents=True, exist_ok=True)
    df.to_parquet(path, index=False, engine="pyarrow")
    logger.info("Written %d rows → %s", len(df), path)


def write_csv(df: pd.DataFrame, path: PathLike) -> None:
    """Write a DataFrame to CSV, creating parent dirs as needed."""
    Path(path).parent.mkdir(parents=True, exist_ok=True)
    df.to_csv(path, index=False)
    logger.info("Written %d rows → %s", len(df), path)


def write_json(data: dict, path: PathLike) -> None:
    """Write a dict as JSON, creating parent dirs as needed."""
    Path(path).parent.mkdir(parents=True, exist_ok=True)
    with open(path, "w", encoding="utf-8") as f:
        json.dump(data, f, indent=2)
    logger.info("Written JSON → %s", path)


def read_table(path: PathLike) -> pd.DataFrame:
    """Read Parquet or CSV depending on the file suffix."""
    suffix = Path(path).suffix.lower()
    if suffix in _PARQUET_SUFFIXES:
        return read_parquet(path)
    if suffix in _CSV_SUFFIXES:
        return read_csv(path)
    raise ValueError(f"Unsupported input format: {path}")


def write_table(df: pd.DataFrame, path: PathLike) -> None:
    """Write Parquet or CSV depending on the file suffix."""
    suffix = Path(path).suffix.lower()
    if suffix in _PARQUET_SUFFIXES:
        write_parquet(df, path)
    elif suffix in _CSV_SUFFIXES:
        write_csv(df, path)
    else:
        raise ValueError(f"Unsupported output format: {path}")
