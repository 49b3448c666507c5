"""
Simulation runner for the spend simulator.

Evaluates a spend allocation across all channels and samples a single
channel's response curve for plotting.
"""
from dataclasses import dataclass
from typing import Dict, List, Mapping, NamedTuple, Optional, Sequence, Tuple
import math

import numpy as np
import pandas as pd

from spendsim.model.response_curves import (
    MARGINAL_INCREMENT,
    ChannelParameters,
    channel_revenue,
    marginal_return,
    return_ratio,
    revenue_curve,
)

DEFAULT_CURVE_STEPS = 20
DEFAULT_CURVE_OVERSHOOT = 5


@dataclass(frozen=True)
class ChannelOutcome:
    id: str
    spend: float
    revenue: float
    return_ratio: float
    marginal_return: float  # return on the next marginal_increment of spend
    marginal_increment: float


@dataclass(frozen=True)
class SimulationResult:
    channel_results: Tuple[ChannelOutcome, ...]
    total_revenue: float
    total_spend: float
    total_return_ratio: float

    def outcome_for(self, channel_id: str) -> Optional[ChannelOutcome]:
        for outcome in self.channel_results:
            if outcome.id == channel_id:
                return outcome
        return None

    def to_frame(self) -> pd.DataFrame:
        """Per-channel outcomes as a DataFrame, one row per channel in input order."""
        columns = ["id", "spend", "revenue", "return_ratio",
                   "marginal_return", "marginal_increment"]
        return pd.DataFrame(
            [[getattr(outcome, column) for column in columns] for outcome in self.channel_results],
            columns=columns
        )


class CurvePoint(NamedTuple):
    spend: float
    revenue: float


def _allocated_spend(allocation: Mapping[str, float], channel_id: str) -> float:
    spend = allocation.get(channel_id, 0.0)
    if spend is None:
        return 0.0
    spend = float(spend)
    return 0.0 if math.isnan(spend) else spend


def simulate(allocation: Mapping[str, float],
             channels: Sequence[ChannelParameters],
             marginal_increment: float = MARGINAL_INCREMENT) -> SimulationResult:
    """
    Evaluate a spend allocation across channels.

    Args:
        allocation: Spend per channel id; missing channels spend nothing
        channels: Channel parameters, ids expected unique
        marginal_increment: Look-ahead used for each channel's marginal return

    Returns:
        SimulationResult with outcomes in the order of ``channels``
    """
    total_revenue = 0.0
    total_spend = 0.0
    outcomes: List[ChannelOutcome] = []

    for channel in channels:
        spend = _allocated_spend(allocation, channel.id)
        channel_rev = channel_revenue(spend, channel)

        outcomes.append(ChannelOutcome(
            id=channel.id,
            spend=spend,
            revenue=channel_rev,
            return_ratio=return_ratio(spend, channel_rev),
            marginal_return=marginal_return(spend, channel, marginal_increment),
            marginal_increment=marginal_increment
        ))

        total_revenue += channel_rev
        total_spend += spend

    return SimulationResult(
        channel_results=tuple(outcomes),
        total_revenue=total_revenue,
        total_spend=total_spend,
        total_return_ratio=return_ratio(total_spend, total_revenue)
    )


def sample_curve(channel: ChannelParameters,
                 max_spend: float,
                 step_count: int = DEFAULT_CURVE_STEPS,
                 overshoot: int = DEFAULT_CURVE_OVERSHOOT) -> List[CurvePoint]:
    """
    Sample a channel's response curve at evenly spaced spend levels.

    The domain runs from 0 to ``max_spend`` in ``step_count`` steps and then
    ``overshoot`` further steps past ``max_spend``, so the plotted curve shows
    it flattening beyond the budget ceiling.

    Returns:
        ``step_count + overshoot + 1`` points, strictly increasing in spend
    """
    if not (math.isfinite(max_spend) and max_spend > 0):
        raise ValueError(f"max_spend must be positive, got {max_spend}")
    if step_count < 1:
        raise ValueError(f"step_count must be at least 1, got {step_count}")
    if overshoot < 0:
        raise ValueError(f"overshoot must be non-negative, got {overshoot}")

    spends = max_spend * np.arange(step_count + overshoot + 1) / step_count
    spends[step_count] = max_spend
    revenues = revenue_curve(spends, channel.shape, channel.scale, channel.multiplier)

    return [CurvePoint(float(s), float(r)) for s, r in zip(spends, revenues)]


def curve_frame(points: Sequence[CurvePoint]) -> pd.DataFrame:
    """Sampled curve as a DataFrame with ``spend`` and ``revenue`` columns."""
    return pd.DataFrame(list(points), columns=list(CurvePoint._fields))


def efficiency_rating(total_return_ratio: float) -> Dict[str, str]:
    """Dashboard label and trend for an overall return ratio."""
    if total_return_ratio < 1.5:
        label = "Inefficient"
    elif total_return_ratio > 4:
        label = "High Efficiency"
    else:
        label = "Healthy"

    if total_return_ratio > 3:
        trend = "up"
    elif total_return_ratio < 1.5:
        trend = "down"
    else:
        trend = "neutral"

    return {"label": label, "trend": trend}
