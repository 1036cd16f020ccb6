"""
Deterministic sample-by-key filtering for batch pipelines.

Usage:
    from keysample import SamplingConfig, evaluate, sample_frame

    config = SamplingConfig.from_args("salt1", "0.1")
    evaluate(("user-42", 7), config)           # same answer on every run
    sampled = sample_frame(df, ["user_id"], config)
"""

from .config import DEFAULT_SALT, SamplingConfig, StageSettings, load_sampling_config, load_settings, parse_rate
from .errors import ConfigParseError, DigestUnavailableError, SamplingError, UnsupportedFieldError
from .expander import digest_int, ensure_digest_available, expand
from .frame import key_mask, sample_frame
from .hashing import combined_hash, field_hash, java_string_hash, to_int32
from .predicate import decide, evaluate, expanded_value, make_predicate, sample_records

__version__ = "0.1.0"

__all__ = [
    # Config
    "DEFAULT_SALT",
    "SamplingConfig",
    "StageSettings",
    "load_settings",
    "load_sampling_config",
    "parse_rate",
    # Errors
    "SamplingError",
    "ConfigParseError",
    "DigestUnavailableError",
    "UnsupportedFieldError",
    # Hashing
    "combined_hash",
    "field_hash",
    "java_string_hash",
    "to_int32",
    # Expansion
    "expand",
    "digest_int",
    "ensure_digest_available",
    # Decision
    "decide",
    "evaluate",
    "expanded_value",
    "make_predicate",
    "sample_records",
    # pandas
    "key_mask",
    "sample_frame",
]
