"""
Pydantic schemas for API request/response validation.
"""
from pydantic import BaseModel, Field, field_validator
from typing import Dict, List, Optional
import math

from spendsim.model.response_curves import ChannelParameters
from spendsim.model.simulation import ChannelOutcome, SimulationResult, CurvePoint, efficiency_rating
from spendsim.services.insights import EXPLANATION_TOPICS


class ChannelSchema(BaseModel):
    id: str = Field(..., description="Channel identifier")
    label: str = Field("", description="Display label")
    color: str = Field("", description="Display color")
    shape: float = Field(..., description="S-curve steepness (alpha)")
    scale: float = Field(..., description="Spend at 50% saturation (gamma)")
    multiplier: float = Field(..., description="Revenue multiplier (coeff)")

    @classmethod
    def from_parameters(cls, channel: ChannelParameters) -> "ChannelSchema":
        return cls(
            id=channel.id,
            label=channel.display_name,
            color=channel.color,
            shape=channel.shape,
            scale=channel.scale,
            multiplier=channel.multiplier
        )


class ChannelConfigurationSchema(BaseModel):
    channels: List[ChannelSchema]
    reference_allocation: Dict[str, float] = Field(..., description="Starting spend per channel")
    initial_budget: float
    max_channel_spend: float = Field(..., description="Upper bound of the per-channel spend range")
    marginal_increment: float = Field(..., description="Look-ahead used for marginal return")


def _validate_allocation(v: Dict[str, float]) -> Dict[str, float]:
    for channel_id, spend in v.items():
        if not math.isfinite(spend) or spend < 0:
            raise ValueError(f"Spend for {channel_id} must be a non-negative number")
    return v


class SimulationRequestSchema(BaseModel):
    allocation: Dict[str, float] = Field(..., description="Spend by channel id")

    @field_validator("allocation")
    @classmethod
    def validate_allocation(cls, v):
        return _validate_allocation(v)


class ChannelOutcomeSchema(BaseModel):
    id: str
    spend: float
    revenue: float
    return_ratio: float
    marginal_return: float
    marginal_increment: float

    @classmethod
    def from_outcome(cls, outcome: ChannelOutcome) -> "ChannelOutcomeSchema":
        return cls(
            id=outcome.id,
            spend=outcome.spend,
            revenue=outcome.revenue,
            return_ratio=outcome.return_ratio,
            marginal_return=outcome.marginal_return,
            marginal_increment=outcome.marginal_increment
        )


class EfficiencySchema(BaseModel):
    label: str = Field(..., description="Inefficient, Healthy or High Efficiency")
    trend: str = Field(..., description="up, down or neutral")


class SimulationResponseSchema(BaseModel):
    channel_results: List[ChannelOutcomeSchema]
    total_revenue: float
    total_spend: float
    total_return_ratio: float
    efficiency: EfficiencySchema

    @classmethod
    def from_result(cls, result: SimulationResult) -> "SimulationResponseSchema":
        return cls(
            channel_results=[ChannelOutcomeSchema.from_outcome(o) for o in result.channel_results],
            total_revenue=result.total_revenue,
            total_spend=result.total_spend,
            total_return_ratio=result.total_return_ratio,
            efficiency=EfficiencySchema(**efficiency_rating(result.total_return_ratio))
        )


class CurveRequestSchema(BaseModel):
    channel_id: str = Field(..., description="Channel to sample")
    max_spend: Optional[float] = Field(None, description="Nominal spend ceiling (settings default if omitted)")
    step_count: Optional[int] = Field(None, ge=1, le=1000, description="Steps between 0 and max_spend")
    overshoot: Optional[int] = Field(None, ge=0, le=1000, description="Extra steps past max_spend")
    current_spend: Optional[float] = Field(None, ge=0, description="Spend to mark on the curve")

    @field_validator("max_spend")
    @classmethod
    def validate_max_spend(cls, v):
        if v is not None and (not math.isfinite(v) or v <= 0):
            raise ValueError("max_spend must be positive")
        return v


class CurvePointSchema(BaseModel):
    spend: float
    revenue: float

    @classmethod
    def from_point(cls, point: CurvePoint) -> "CurvePointSchema":
        return cls(spend=point.spend, revenue=point.revenue)


class CurveResponseSchema(BaseModel):
    channel_id: str
    points: List[CurvePointSchema]
    current_point: Optional[CurvePointSchema] = None
    revenue_ceiling: float
    inflection_spend: float


class ExplanationRequestSchema(BaseModel):
    allocation: Dict[str, float] = Field(..., description="Spend by channel id")
    topic: str = Field("GENERAL", description="GENERAL, REVENUE, SPEND, ROAS or CHANNEL")
    channel_id: Optional[str] = Field(None, description="Channel of interest")

    @field_validator("allocation")
    @classmethod
    def validate_allocation(cls, v):
        return _validate_allocation(v)

    @field_validator("topic")
    @classmethod
    def validate_topic(cls, v):
        topic = v.upper()
        if topic not in EXPLANATION_TOPICS:
            raise ValueError(f"Topic must be one of: {sorted(EXPLANATION_TOPICS)}")
        return topic


class ExplanationResponseSchema(BaseModel):
    topic: str
    insight_type: str
    title: str
    description: str
    insight: str


class ErrorResponseSchema(BaseModel):
    error: str = Field(..., description="Error message")
    detail: Optional[str] = Field(None, description="Detailed error information")
