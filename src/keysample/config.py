"""Sampling configuration: salt, rate and the stage settings around them.

Configuration sources, lowest to highest precedence:
    1. config/sampling.yaml (or the path passed to load_settings)
    2. .env file / environment variables:
         KEYSAMPLE_SALT, KEYSAMPLE_RATE, KEYSAMPLE_KEY_COLUMNS (comma separated)
"""
import os
import re
from functools import lru_cache
from pathlib import Path
from typing import Optional, Union

import yaml
from dotenv import load_dotenv
from pydantic import BaseModel, ConfigDict, Field, field_validator

from keysample.errors import ConfigParseError
from keysample.expander import ensure_digest_available
from keysample.hashing import java_string_hash
from keysample.logger import get_logger
from keysample.paths import (
    PROJECT_ROOT,
    get_default_config_path,
    get_sample_input_path,
    get_sample_output_path,
    get_sample_report_path,
)

logger = get_logger(__name__)

_seed_for = lru_cache(maxsize=256)(java_string_hash)

DEFAULT_SALT = "323148"

# Decimal grammar accepted by Double.parseDouble (hex floats excluded)
_RATE_PATTERN = re.compile(
    r"^(?P<sign>[+-]?)"
    r"(?:(?P<nan>NaN)|(?P<inf>Infinity)"
    r"|(?P<num>(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?)[fFdD]?)$"
)


def parse_rate(text: str) -> float:
    """Parse a sampling rate string with JVM `Double.parseDouble` decimal rules.

    Surrounding whitespace is ignored; ``NaN``, ``Infinity`` and a trailing
    ``f``/``d`` type suffix are accepted. No range check is applied here.

    Raises:
        ConfigParseError: if ``text`` is not a decimal number.
    """
    if not isinstance(text, str):
        raise ConfigParseError(f"sampling rate must be a string, got {type(text).__name__}")
    match = _RATE_PATTERN.match(text.strip())
    if match is None:
        raise ConfigParseError(f"malformed sampling rate: {text!r}")
    if match.group("nan"):
        return float("nan")
    if match.group("inf"):
        return float(match.group("sign") + "inf")
    return float(match.group("sign") + match.group("num"))


class SamplingConfig(BaseModel):
    """Immutable salt + rate pair; the seed is always the hash of the current salt."""

    model_config = ConfigDict(frozen=True)

    salt: str = DEFAULT_SALT
    rate: float

    @field_validator("rate", mode="before")
    @classmethod
    def _parse_rate_string(cls, value):
        if isinstance(value, str):
            return parse_rate(value)
        return value

    def model_post_init(self, __context) -> None:
        ensure_digest_available()
        _seed_for(self.salt)
        if not 0.0 < self.rate <= 1.0:
            logger.warning(
                "Sampling rate %r is outside (0, 1]; sample will be empty or complete",
                self.rate,
            )

    @property
    def seed(self) -> int:
        return _seed_for(self.salt)

    @classmethod
    def from_args(cls, *args: str) -> "SamplingConfig":
        """Build from positional string arguments: ``(rate)`` or ``(salt, rate)``."""
        if len(args) == 1:
            salt, rate = DEFAULT_SALT, args[0]
        elif len(args) == 2:
            salt, rate = args
        else:
            raise ConfigParseError(
                f"expected (rate) or (salt, rate), got {len(args)} arguments"
            )
        if not isinstance(salt, str):
            raise ConfigParseError(f"salt must be a string, got {type(salt).__name__}")
        return cls(salt=salt, rate=parse_rate(rate))


class StageSettings(BaseModel):
    """Everything the sampling stage needs besides the data itself."""

    model_config = ConfigDict(frozen=True)

    sampling: SamplingConfig
    key_columns: tuple[str, ...] = ()
    input_path: Path = Field(default_factory=get_sample_input_path)
    output_path: Path = Field(default_factory=get_sample_output_path)
    report_path: Optional[Path] = Field(default_factory=get_sample_report_path)
    tolerance_sigmas: float = 4.0


def _resolve(path: Optional[str]) -> Optional[Path]:
    if path is None:
        return None
    p = Path(path)
    return p if p.is_absolute() else PROJECT_ROOT / p


def _read_yaml(path: Path) -> dict:
    try:
        data = yaml.safe_load(path.read_text(encoding="utf-8"))
    except yaml.YAMLError as e:
        raise ConfigParseError(f"invalid YAML in {path}: {e}") from e
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigParseError(f"{path} must contain a mapping at the top level")
    return data


def load_settings(
    path: Optional[Union[str, Path]] = None,
    salt: Optional[str] = None,
    rate: Optional[str] = None,
) -> StageSettings:
    """Load stage settings from YAML, applying environment overrides.

    Explicit ``salt``/``rate`` arguments (e.g. from the command line) win over
    both the environment and the file.

    Raises:
        ConfigParseError: malformed YAML, missing rate or malformed rate.
        DigestUnavailableError: SHA-1 cannot be used in this runtime.
    """
    load_dotenv()
    config_path = Path(path) if path else get_default_config_path()
    if path and not config_path.exists():
        raise ConfigParseError(f"config file not found: {config_path}")
    data = _read_yaml(config_path) if config_path.exists() else {}

    sampling = data.get("sampling") or {}
    stage = data.get("stage") or {}

    yaml_salt = sampling.get("salt")
    if salt is None:
        salt = os.environ.get("KEYSAMPLE_SALT", DEFAULT_SALT if yaml_salt is None else yaml_salt)
    if rate is None:
        rate = os.environ.get("KEYSAMPLE_RATE", sampling.get("rate"))
    if rate is None:
        raise ConfigParseError("sampling.rate is required")

    env_columns = os.environ.get("KEYSAMPLE_KEY_COLUMNS")
    if env_columns:
        key_columns = [c.strip() for c in env_columns.split(",") if c.strip()]
    else:
        key_columns = stage.get("key_columns") or []

    config = SamplingConfig.from_args(str(salt), str(rate))
    logger.info(
        "Loaded sampling config from %s: rate=%s, %d key column(s)",
        config_path, config.rate, len(key_columns),
    )

    options = {}
    for name in ("input_path", "output_path", "report_path"):
        if name in stage:
            options[name] = _resolve(stage[name])
    if "tolerance_sigmas" in stage:
        options["tolerance_sigmas"] = stage["tolerance_sigmas"]

    return StageSettings(sampling=config, key_columns=tuple(key_columns), **options)


def load_sampling_config(path: Optional[Union[str, Path]] = None) -> SamplingConfig:
    """Load only the salt/rate part of the stage config."""
    return load_settings(path).sampling
