"""
Response curve model for the spend simulator.

Maps the spend on a single channel to revenue with a Hill-type saturation
curve, and derives the average and marginal return from it. Everything here
is a pure function of its arguments.
"""
from dataclasses import dataclass
import math

import numpy as np
from scipy.special import expit


# Look-ahead, in currency units, used for the finite-difference marginal return
MARGINAL_INCREMENT = 100.0


@dataclass(frozen=True)
class ChannelParameters:
    """Saturation parameters for one marketing channel."""
    id: str
    shape: float       # alpha: steepness of the S-curve
    scale: float       # gamma: spend at which saturation reaches 50%
    multiplier: float  # coeff: scales the maximum revenue potential
    label: str = ""
    color: str = ""

    @property
    def display_name(self) -> str:
        return self.label or self.id


def _valid_parameters(shape: float, scale: float, multiplier: float) -> bool:
    return all(math.isfinite(v) and v > 0 for v in (shape, scale, multiplier))


def saturation_curve(spends, shape: float, scale: float) -> np.ndarray:
    """
    Vectorized saturation fraction ``s^shape / (s^shape + scale^shape)``.

    Evaluated as ``expit(shape * ln(s / scale))`` so large spend never
    overflows. At ``s == scale`` the exponent is exactly zero and the
    fraction is exactly 0.5. Non-positive or NaN spend maps to 0.
    """
    spends = np.asarray(spends, dtype=float)
    if not (math.isfinite(shape) and math.isfinite(scale) and shape > 0 and scale > 0):
        return np.zeros_like(spends)

    positive = spends > 0
    ratio = np.where(positive, spends, scale) / scale
    with np.errstate(divide="ignore", over="ignore"):
        exponent = shape * np.log(ratio)
    return np.where(positive, expit(exponent), 0.0)


def revenue_curve(spends, shape: float, scale: float, multiplier: float) -> np.ndarray:
    """Vectorized revenue for an array of spend levels."""
    spends = np.asarray(spends, dtype=float)
    if not _valid_parameters(shape, scale, multiplier):
        return np.zeros_like(spends)

    return saturation_curve(spends, shape, scale) * (multiplier * scale)


def revenue(spend: float, shape: float, scale: float, multiplier: float) -> float:
    """
    Revenue generated by ``spend`` on a channel.

    Args:
        spend: Spend on the channel, expected finite and non-negative
        shape: S-curve steepness (alpha)
        scale: Half-saturation spend (gamma)
        multiplier: Revenue multiplier (coeff)

    Returns:
        Revenue in ``[0, multiplier * scale)``; exactly 0 when spend <= 0
        or the parameters are degenerate.
    """
    if not spend > 0:
        return 0.0
    return float(revenue_curve(spend, shape, scale, multiplier))


def channel_revenue(spend: float, channel: ChannelParameters) -> float:
    """Revenue for ``spend`` using a channel's parameters."""
    return revenue(spend, channel.shape, channel.scale, channel.multiplier)


def return_ratio(spend: float, revenue_value: float) -> float:
    """Average return (revenue / spend); 0 for a channel with no spend."""
    if not spend > 0:
        return 0.0
    return revenue_value / spend


def marginal_return(spend: float,
                    channel: ChannelParameters,
                    increment: float = MARGINAL_INCREMENT) -> float:
    """
    Return on the next ``increment`` of spend.

    Computed as ``(revenue(spend + increment) - revenue(spend)) / increment``.
    """
    if not increment > 0:
        raise ValueError(f"Marginal increment must be positive, got {increment}")

    current = channel_revenue(spend, channel)
    ahead = channel_revenue(spend + increment, channel)
    return (ahead - current) / increment


def revenue_ceiling(channel: ChannelParameters) -> float:
    """Asymptotic revenue as spend grows without bound."""
    if not _valid_parameters(channel.shape, channel.scale, channel.multiplier):
        return 0.0
    return channel.multiplier * channel.scale


def inflection_spend(channel: ChannelParameters) -> float:
    """
    Spend where the marginal return peaks.

    Curves with shape <= 1 are concave, so returns diminish from the first
    unit of spend. Steeper curves accelerate until
    ``scale * ((shape - 1) / (shape + 1)) ** (1 / shape)``.
    """
    if not _valid_parameters(channel.shape, channel.scale, channel.multiplier):
        return 0.0
    if channel.shape <= 1:
        return 0.0
    ratio = (channel.shape - 1) / (channel.shape + 1)
    return channel.scale * ratio ** (1 / channel.shape)
