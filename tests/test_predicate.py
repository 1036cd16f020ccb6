"""Unit tests for the keep/discard decision and its sampling properties."""
import types
from concurrent.futures import ThreadPoolExecutor

import pytest

from keysample.config import SamplingConfig
from keysample.predicate import decide, evaluate, expanded_value, make_predicate, sample_records

KEYS = [(f"user-{i}",) for i in range(2000)]


def _kept(config, keys=KEYS):
    return {k for k in keys if evaluate(k, config)}


class TestDecide:
    @pytest.mark.unit
    def test_keep_is_inclusive_of_rate(self):
        assert decide(0.5, 0.5) is True
        assert decide(0.49, 0.5) is True
        assert decide(0.51, 0.5) is False

    @pytest.mark.unit
    def test_sub_zero_value_kept_at_rate_zero(self):
        assert decide(-1e-10, 0.0) is True


class TestKnownVectors:
    @pytest.mark.unit
    def test_default_salt_single_field(self):
        cfg = SamplingConfig.from_args("0.5")
        assert expanded_value(("A",), cfg) == pytest.approx(0.51405123715011924, rel=1e-15)
        assert evaluate(("A",), cfg) is False
        assert evaluate(("A",), SamplingConfig.from_args("0.52")) is True
        assert evaluate(("B",), SamplingConfig.from_args("0.2")) is True
        assert evaluate(("hello",), SamplingConfig.from_args("0.9")) is False

    @pytest.mark.unit
    def test_custom_salt(self):
        cfg = SamplingConfig.from_args("salt1.5", "0.5")
        assert expanded_value(("A",), cfg) == pytest.approx(0.34384339947432441, rel=1e-15)
        assert evaluate(("A",), cfg) is True

    @pytest.mark.unit
    def test_empty_record_still_decides(self):
        value = expanded_value((), SamplingConfig.from_args("0.5"))
        assert value == pytest.approx(0.93442430064753834, rel=1e-15)
        assert evaluate((), SamplingConfig.from_args("0.5")) is False
        assert evaluate((), SamplingConfig.from_args("0.95")) is True

    @pytest.mark.unit
    def test_null_field_is_total(self):
        cfg = SamplingConfig.from_args("0.5")
        assert evaluate((None,), cfg) == evaluate((), cfg)
        assert isinstance(evaluate(("A", None, 3), cfg), bool)


class TestSamplingProperties:
    @pytest.mark.unit
    def test_deterministic(self, default_config):
        assert _kept(default_config) == _kept(default_config)
        rebuilt = SamplingConfig.from_args("0.1")
        assert _kept(rebuilt) == _kept(default_config)

    @pytest.mark.unit
    def test_salt_changes_sample(self):
        a = _kept(SamplingConfig.from_args("salt-a", "0.5"))
        b = _kept(SamplingConfig.from_args("salt-b", "0.5"))
        assert a != b

    @pytest.mark.unit
    def test_raising_rate_never_drops_a_kept_record(self):
        previous = set()
        for rate in ("0.05", "0.1", "0.3", "0.5", "0.9"):
            kept = _kept(SamplingConfig.from_args(rate))
            assert previous <= kept
            previous = kept

    @pytest.mark.unit
    def test_rate_one_keeps_everything(self):
        assert _kept(SamplingConfig.from_args("1.0")) == set(KEYS)

    @pytest.mark.unit
    def test_rate_zero_keeps_nothing(self):
        assert _kept(SamplingConfig.from_args("0.0")) == set()

    @pytest.mark.unit
    def test_fraction_close_to_rate(self):
        keys = [(f"user-{i}", i % 7) for i in range(10000)]
        kept = sum(evaluate(k, SamplingConfig.from_args("0.1")) for k in keys)
        assert 800 <= kept <= 1200, f"Expected ~1000 kept, got {kept}"

    @pytest.mark.unit
    def test_field_order_changes_expanded_value(self, default_config):
        assert expanded_value(("A", 1), default_config) != expanded_value((1, "A"), default_config)

    @pytest.mark.unit
    def test_parallel_evaluation_matches_serial(self, default_config):
        serial = [evaluate(k, default_config) for k in KEYS]
        with ThreadPoolExecutor(max_workers=8) as pool:
            parallel = list(pool.map(make_predicate(default_config), KEYS))
        assert parallel == serial


class TestPipelineHelpers:
    @pytest.mark.unit
    def test_make_predicate_binds_config(self, default_config):
        keep = make_predicate(default_config)
        assert all(keep(k) == evaluate(k, default_config) for k in KEYS[:200])

    @pytest.mark.unit
    def test_sample_records_is_lazy_and_ordered(self, default_config):
        result = sample_records(iter(KEYS), default_config)
        assert isinstance(result, types.GeneratorType)
        kept = list(result)
        assert kept == [k for k in KEYS if evaluate(k, default_config)]

    @pytest.mark.unit
    def test_sample_records_independent_of_partitioning(self, default_config):
        whole = list(sample_records(KEYS, default_config))
        parts = []
        for start in range(0, len(KEYS), 333):
            parts.extend(sample_records(KEYS[start:start + 333], default_config))
        assert parts == whole
