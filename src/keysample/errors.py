"""Exceptions raised by the sampling stage.

Only configuration and environment problems are errors; the per-record path
is total for every supported field type.
"""


class SamplingError(Exception):
    """Base class for sample-by-key failures."""


class ConfigParseError(SamplingError):
    """Sampling configuration could not be parsed (bad rate, bad YAML, bad args)."""


class DigestUnavailableError(SamplingError, RuntimeError):
    """The SHA-1 digest cannot be instantiated in this runtime."""


class UnsupportedFieldError(SamplingError, TypeError):
    """A record field has a type with no pinned hash."""
