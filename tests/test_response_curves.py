"""
Mathematical tests for the channel response curve.
"""
import math

import numpy as np
import pytest

from spendsim.config.channels import REFERENCE_CHANNELS
from spendsim.model.response_curves import (
    MARGINAL_INCREMENT,
    ChannelParameters,
    channel_revenue,
    inflection_spend,
    marginal_return,
    return_ratio,
    revenue,
    revenue_ceiling,
    revenue_curve,
)


class TestRevenue:
    """Test the saturating revenue function."""

    @pytest.mark.parametrize("channel", REFERENCE_CHANNELS, ids=lambda c: c.id)
    def test_zero_spend_is_zero(self, channel):
        assert channel_revenue(0, channel) == 0.0
        assert return_ratio(0, channel_revenue(0, channel)) == 0.0

    @pytest.mark.parametrize("spend", [-1.0, -50000.0, float("nan")])
    def test_non_positive_spend_is_zero(self, fb_channel, spend):
        assert channel_revenue(spend, fb_channel) == 0.0

    @pytest.mark.parametrize("channel", REFERENCE_CHANNELS, ids=lambda c: c.id)
    def test_half_saturation_at_scale(self, channel):
        expected = 0.5 * channel.multiplier * channel.scale
        assert channel_revenue(channel.scale, channel) == pytest.approx(expected, rel=1e-12)

    def test_reference_scenario_matches_hill_formula(self):
        """fb at 30000 spend against a direct double-precision computation."""
        saturation = 30000 ** 1.8 / (30000 ** 1.8 + 40000 ** 1.8)
        expected = saturation * (2.5 * 40000)

        result = revenue(30000, shape=1.8, scale=40000, multiplier=2.5)

        assert result == pytest.approx(expected, rel=1e-6)
        assert 0 < result < 50000

    @pytest.mark.parametrize("channel", REFERENCE_CHANNELS, ids=lambda c: c.id)
    def test_strictly_increasing(self, channel):
        spends = np.linspace(0, 500000, 201)
        revenues = [channel_revenue(s, channel) for s in spends]

        assert all(b > a for a, b in zip(revenues, revenues[1:]))

    @pytest.mark.parametrize("channel", REFERENCE_CHANNELS, ids=lambda c: c.id)
    def test_stays_below_ceiling(self, channel):
        ceiling = channel.multiplier * channel.scale
        for spend in [1e3, 1e5, 1e6, 1e7]:
            assert channel_revenue(spend, channel) < ceiling

        assert revenue_ceiling(channel) == ceiling

    def test_large_spend_does_not_overflow(self, fb_channel):
        ceiling = revenue_ceiling(fb_channel)
        huge = channel_revenue(1e300, fb_channel)

        assert math.isfinite(huge)
        assert huge <= ceiling
        assert huge == pytest.approx(ceiling)

    def test_tiny_spend_does_not_underflow_to_error(self):
        steep = ChannelParameters(id="steep", shape=8.0, scale=1e6, multiplier=1.0)
        value = channel_revenue(1e-300, steep)

        assert math.isfinite(value)
        assert value >= 0

    def test_vectorized_matches_scalar(self, reference_channels):
        spends = np.array([0.0, 100.0, 25000.0, 40000.0, 150000.0])
        for channel in reference_channels:
            vector = revenue_curve(spends, channel.shape, channel.scale, channel.multiplier)
            scalar = [channel_revenue(s, channel) for s in spends]
            np.testing.assert_allclose(vector, scalar, rtol=1e-12)


class TestDegenerateParameters:
    """Invalid parameters resolve to zero rather than NaN or an exception."""

    @pytest.mark.parametrize("shape,scale,multiplier", [
        (1.5, 0.0, 2.0),
        (0.0, 40000, 2.0),
        (1.5, 40000, 0.0),
        (-1.0, 40000, 2.0),
        (1.5, float("nan"), 2.0),
    ])
    def test_returns_zero(self, shape, scale, multiplier):
        value = revenue(30000, shape, scale, multiplier)
        assert value == 0.0

        channel = ChannelParameters(id="bad", shape=shape, scale=scale, multiplier=multiplier)
        assert marginal_return(30000, channel) == 0.0
        assert revenue_ceiling(channel) == 0.0
        assert inflection_spend(channel) == 0.0


class TestReturnRatio:

    def test_ratio(self):
        assert return_ratio(20000, 50000) == pytest.approx(2.5)

    @pytest.mark.parametrize("spend", [0, -10])
    def test_no_spend_is_neutral(self, spend):
        assert return_ratio(spend, 1234.0) == 0.0


class TestMarginalReturn:
    """Test the finite-difference marginal return."""

    def test_default_increment(self, fb_channel):
        assert MARGINAL_INCREMENT == 100.0

        spend = 30000
        expected = (channel_revenue(spend + 100, fb_channel) - channel_revenue(spend, fb_channel)) / 100
        assert marginal_return(spend, fb_channel) == pytest.approx(expected)

    def test_custom_increment(self, fb_channel):
        spend = 30000
        expected = (channel_revenue(spend + 1000, fb_channel) - channel_revenue(spend, fb_channel)) / 1000
        assert marginal_return(spend, fb_channel, increment=1000) == pytest.approx(expected)

    @pytest.mark.parametrize("increment", [0, -100])
    def test_rejects_non_positive_increment(self, fb_channel, increment):
        with pytest.raises(ValueError):
            marginal_return(30000, fb_channel, increment=increment)

    @pytest.mark.parametrize("channel", REFERENCE_CHANNELS, ids=lambda c: c.id)
    def test_vanishes_at_saturation(self, channel):
        assert marginal_return(1e9, channel) == pytest.approx(0.0, abs=1e-3)
        assert marginal_return(1e9, channel) >= 0

    def test_small_spend_approaches_local_slope(self):
        # shape == 1 gives slope multiplier at zero spend
        linear_start = ChannelParameters(id="mm", shape=1.0, scale=1e6, multiplier=2.0)
        assert marginal_return(0, linear_start, increment=1.0) == pytest.approx(2.0, rel=1e-5)

    def test_diminishing_for_concave_curve(self):
        tv = next(c for c in REFERENCE_CHANNELS if c.id == "tv")
        spends = np.linspace(1000, 1_000_000, 300)
        marginals = np.array([marginal_return(s, tv) for s in spends])

        assert np.all(np.diff(marginals) <= 1e-12)

    @pytest.mark.parametrize("channel_id", ["fb", "search", "print"])
    def test_diminishing_beyond_inflection(self, channel_id):
        channel = next(c for c in REFERENCE_CHANNELS if c.id == channel_id)
        start = inflection_spend(channel)
        spends = np.linspace(start, start + 1_000_000, 300)
        marginals = np.array([marginal_return(s, channel) for s in spends])

        assert np.all(np.diff(marginals) <= 1e-12)

    def test_inflection_spend(self, fb_channel):
        expected = 40000 * (0.8 / 2.8) ** (1 / 1.8)
        assert inflection_spend(fb_channel) == pytest.approx(expected)
        assert inflection_spend(ChannelParameters(id="c", shape=0.9, scale=1, multiplier=1)) == 0.0
