"""Keep/discard decision for a single record.

    keep = expand(config.seed, combined_hash(fields)) <= config.rate

The decision depends only on the salt, the rate and the field values, so it
is identical on every worker, every retry and every re-partitioning of the
input.
"""
from functools import partial
from typing import Any, Callable, Iterable, Iterator, Sequence

from keysample.config import SamplingConfig
from keysample.expander import expand
from keysample.hashing import combined_hash

Record = Sequence[Any]


def decide(expanded: float, rate: float) -> bool:
    """Keep iff the expanded value is at or below the rate."""
    return expanded <= rate


def expanded_value(fields: Iterable[Any], config: SamplingConfig) -> float:
    """Return the pseudo-random double the decision for ``fields`` is based on."""
    return expand(config.seed, combined_hash(fields))


def evaluate(fields: Iterable[Any], config: SamplingConfig) -> bool:
    """Decide whether the record made of ``fields`` belongs to the sample."""
    return decide(expanded_value(fields, config), config.rate)


def make_predicate(config: SamplingConfig) -> Callable[[Record], bool]:
    """Bind ``evaluate`` to a config, giving the one-argument filter most engines expect."""
    return partial(evaluate, config=config)


def sample_records(records: Iterable[Record], config: SamplingConfig) -> Iterator[Record]:
    """Lazily yield the records that belong to the sample, preserving input order."""
    for record in records:
        if evaluate(record, config):
            yield record
