"""Tests for the Premier Stochastic Oscillator."""

import math

import pytest

from premier.technical_analysis import (
    Bar,
    FunctionalIndicator,
    InvalidDataError,
    InvalidParameterError,
    MissingInputError,
    PremierStochasticOscillator,
    normalize_k,
    pso_transform,
)


def feed(indicator, bars):
    """Update with every bar and collect the value after each one."""
    values = []
    for bar in bars:
        indicator.update(bar)
        values.append(indicator.value)
    return values


def same_sequence(left, right):
    """Element-wise equality where NaN matches NaN."""
    assert len(left) == len(right)
    for a, b in zip(left, right):
        if math.isnan(a):
            assert math.isnan(b)
        else:
            assert a == b


class TestTransform:
    """The normalization and squashing functions."""

    def test_normalize_k_maps_range_to_plus_minus_five(self):
        assert normalize_k(50.0) == 0.0
        assert normalize_k(100.0) == pytest.approx(5.0)
        assert normalize_k(0.0) == pytest.approx(-5.0)

    def test_zero_maps_to_zero(self):
        assert pso_transform(0.0) == 0.0
        assert pso_transform(1e-6) != 0.0
        assert pso_transform(-1e-6) != 0.0

    @pytest.mark.parametrize("ss", [-20.0, -5.0, -2.5, -0.3, 0.7, 2.5, 5.0, 20.0])
    def test_stays_strictly_inside_unit_interval(self, ss):
        assert -1.0 < pso_transform(ss) < 1.0

    @pytest.mark.parametrize("ss", [-4.0, -1.0, 0.5, 3.0])
    def test_matches_exponential_form(self, ss):
        expss = math.exp(ss)
        assert pso_transform(ss) == pytest.approx((expss - 1) / (expss + 1), abs=1e-12)

    def test_large_inputs_saturate_instead_of_overflowing(self):
        assert pso_transform(1e6) == 1.0
        assert pso_transform(-1e6) == -1.0
        assert math.isfinite(pso_transform(1e308))

    def test_monotonic(self):
        inputs = [-6.0, -3.0, -1.0, 0.0, 0.5, 2.0, 4.5]
        outputs = [pso_transform(ss) for ss in inputs]
        assert outputs == sorted(outputs)


class TestConstruction:
    """Parameters, naming and composition."""

    def test_defaults(self):
        pso = PremierStochasticOscillator()
        assert pso.period == 14
        assert pso.warm_up_period == 14
        assert pso.name == "PSO(14)"

    def test_custom_name_propagates_to_composed_node(self):
        pso = PremierStochasticOscillator(period=8, name="fast")
        assert pso.name == "fast"
        assert pso.pso.name == "fast_PSO"

    def test_exposes_composed_node_as_only_child(self):
        pso = PremierStochasticOscillator(period=8)
        assert isinstance(pso.pso, FunctionalIndicator)
        assert pso.children == [pso.pso]

    @pytest.mark.parametrize("period", [0, -3, 2.5, "14", True])
    def test_rejects_invalid_period(self, period):
        with pytest.raises(InvalidParameterError):
            PremierStochasticOscillator(period=period)

    def test_not_ready_and_nan_before_any_update(self):
        pso = PremierStochasticOscillator(period=5)
        assert not pso.is_ready
        assert math.isnan(pso.value)
        assert pso.samples == 0


class TestInputs:
    """Accepted input forms and validation."""

    def test_accepts_mappings(self):
        pso = PremierStochasticOscillator(period=5)
        sample = pso.update({'high': 105.0, 'low': 95.0, 'close': 100.0})
        assert pso.samples == 1
        assert sample.timestamp is None

    def test_missing_field(self):
        pso = PremierStochasticOscillator(period=5)
        with pytest.raises(MissingInputError):
            pso.update({'high': 105.0, 'close': 100.0})

    def test_nan_field(self):
        pso = PremierStochasticOscillator(period=5)
        with pytest.raises(InvalidDataError):
            pso.update({'high': 105.0, 'low': float('nan'), 'close': 100.0})

    def test_unsupported_input_type(self):
        pso = PremierStochasticOscillator(period=5)
        with pytest.raises(InvalidDataError):
            pso.update([105.0, 95.0, 100.0])

    @pytest.mark.parametrize("close, expected_k", [(1e308, 100.0), (-1e308, 0.0), (0.0, 50.0)])
    def test_extreme_finite_bar_keeps_pipeline_in_step(self, close, expected_k):
        pso = PremierStochasticOscillator(period=5)
        sample = pso.update({'high': 1e308, 'low': -1e308, 'close': close})

        assert pso.stochastic_k == pytest.approx(expected_k)
        assert math.isfinite(pso.normalized_k)
        assert pso.samples == pso.pso.samples == 1
        assert sample.timestamp is None

    def test_extreme_bars_reach_a_bounded_value(self):
        pso = PremierStochasticOscillator(period=5)
        for _ in range(5):
            pso.update({'high': 1.7e308, 'low': -1.7e308, 'close': 1.7e308})
        assert pso.is_ready
        assert 0.9 < pso.value < 1.0


class TestReadiness:
    """Readiness requires both the stochastic and the smoothing stage."""

    def test_flat_market_ready_at_fourteenth_bar(self, flat_bars):
        pso = PremierStochasticOscillator(period=14)
        for index, bar in enumerate(flat_bars, start=1):
            pso.update(bar)
            assert pso.is_ready == (index >= 14), f"unexpected readiness at bar {index}"

    def test_short_period_waits_for_smoothing(self, wave_bars):
        pso = PremierStochasticOscillator(period=3)
        ready_at = None
        for index, bar in enumerate(wave_bars, start=1):
            pso.update(bar)
            if pso.is_ready and ready_at is None:
                ready_at = index
        assert ready_at == 5
        # Advertised warm-up stays at the stochastic period
        assert pso.warm_up_period == 3

    def test_long_period_waits_for_stochastic(self, wave_bars):
        pso = PremierStochasticOscillator(period=9)
        for index, bar in enumerate(wave_bars[:9], start=1):
            pso.update(bar)
            assert pso.is_ready == (index == 9)

    def test_composed_node_readiness_matches(self, wave_bars):
        pso = PremierStochasticOscillator(period=6)
        for bar in wave_bars[:10]:
            pso.update(bar)
            assert pso.pso.is_ready == pso.is_ready

    def test_current_reports_computed_value_during_warm_up(self, wave_bars):
        pso = PremierStochasticOscillator(period=14)
        for bar in wave_bars[:6]:
            sample = pso.update(bar)

        # Smoothing is seeded after 5 bars, the stochastic needs 14
        assert not pso.is_ready
        assert math.isnan(pso.value)
        assert math.isfinite(sample.value)
        assert sample == pso.current
        assert sample.value == pso.pso.current.value
        assert sample.timestamp == wave_bars[5].timestamp

    def test_current_is_nan_before_smoothing_is_seeded(self, wave_bars):
        pso = PremierStochasticOscillator(period=14)
        for bar in wave_bars[:3]:
            pso.update(bar)
        assert math.isnan(pso.current.value)

    def test_value_is_nan_until_ready(self, wave_bars):
        pso = PremierStochasticOscillator(period=7)
        values = feed(pso, wave_bars[:7])
        assert all(math.isnan(v) for v in values[:6])
        assert math.isfinite(values[6])


class TestScenarios:
    """End-to-end behavior on simple bar sequences."""

    def test_flat_market_yields_zero(self, flat_bars):
        pso = PremierStochasticOscillator(period=14)
        values = feed(pso, flat_bars)

        assert pso.stochastic_k == 50.0
        assert pso.normalized_k == 0.0
        assert pso.smoothed_k == 0.0
        assert values[13:] == [0.0] * 7

    def test_ramp_rises_toward_but_below_one(self, ramp_bars):
        pso = PremierStochasticOscillator(period=5)
        values = feed(pso, ramp_bars)

        assert pso.stochastic_k == pytest.approx(100.0)
        assert pso.normalized_k == pytest.approx(5.0)

        ramp = values[4:]
        assert ramp[0] == 0.0
        assert all(later > earlier for earlier, later in zip(ramp, ramp[1:]))
        assert 0.95 < ramp[-1] < 1.0

    def test_ramp_smoothed_value_lags_input(self, ramp_bars):
        pso = PremierStochasticOscillator(period=5)
        feed(pso, ramp_bars)
        assert 0.0 < pso.smoothed_k < pso.normalized_k

    def test_output_bounded_on_wave(self, wave_bars):
        pso = PremierStochasticOscillator(period=10)
        values = feed(pso, wave_bars)
        assert all(-1.0 < v < 1.0 for v in values if not math.isnan(v))

    def test_current_carries_bar_timestamp(self, wave_bars):
        pso = PremierStochasticOscillator(period=5)
        sample = None
        for bar in wave_bars[:8]:
            sample = pso.update(bar)
        assert sample.timestamp == wave_bars[7].timestamp
        assert sample.value == pso.value
        assert pso.pso.current.value == pso.value


class TestDeterminismAndReset:
    """Replays, resets and independence from timestamps."""

    def test_two_instances_agree(self, wave_bars):
        first = feed(PremierStochasticOscillator(period=10), wave_bars)
        second = feed(PremierStochasticOscillator(period=10), wave_bars)
        same_sequence(first, second)

    def test_timestamps_do_not_affect_values(self, wave_bars):
        stamped = feed(PremierStochasticOscillator(period=10), wave_bars)
        unstamped = feed(
            PremierStochasticOscillator(period=10),
            [{'high': b.high, 'low': b.low, 'close': b.close} for b in wave_bars]
        )
        reversed_stamps = feed(
            PremierStochasticOscillator(period=10),
            [Bar(timestamp=1000 - i, open=b.open, high=b.high, low=b.low, close=b.close)
             for i, b in enumerate(wave_bars)]
        )
        same_sequence(stamped, unstamped)
        same_sequence(stamped, reversed_stamps)

    def test_reset_then_replay_reproduces_output(self, wave_bars):
        pso = PremierStochasticOscillator(period=10)
        original = feed(pso, wave_bars)

        pso.reset()
        replay = feed(pso, wave_bars)
        same_sequence(original, replay)

    def test_reset_is_transitive(self, wave_bars):
        pso = PremierStochasticOscillator(period=10)
        feed(pso, wave_bars[:20])

        pso.reset()
        assert not pso.is_ready
        assert pso.samples == 0
        assert pso.pso.samples == 0
        assert not pso.pso.is_ready
        assert math.isnan(pso.stochastic_k)
        assert math.isnan(pso.smoothed_k)
        assert pso.get_history() == []

    def test_reset_is_idempotent(self, wave_bars):
        pso = PremierStochasticOscillator(period=10)
        original = feed(pso, wave_bars)

        pso.reset()
        pso.reset()
        same_sequence(original, feed(pso, wave_bars))

    def test_higher_k_never_lowers_output(self, wave_bars):
        history = wave_bars[:20]
        last = history[-1]
        lower = PremierStochasticOscillator(period=10)
        higher = PremierStochasticOscillator(period=10)
        feed(lower, history)
        feed(higher, history)

        # Same range, higher close: strictly higher %K
        high, low = last.high + 2.0, last.low - 2.0
        lower.update(Bar(timestamp=None, open=last.close, high=high, low=low, close=low + 1.0))
        higher.update(Bar(timestamp=None, open=last.close, high=high, low=low, close=high - 1.0))

        assert higher.stochastic_k > lower.stochastic_k
        assert higher.value >= lower.value
