"""
Spend simulation and response curve endpoints.
"""
from fastapi import APIRouter, Depends
from typing import List
import structlog

from spendsim.api.dependencies import get_channels
from spendsim.api.schemas import (
    ChannelConfigurationSchema,
    ChannelSchema,
    CurvePointSchema,
    CurveRequestSchema,
    CurveResponseSchema,
    ErrorResponseSchema,
    SimulationRequestSchema,
    SimulationResponseSchema,
)
from spendsim.config.channels import REFERENCE_ALLOCATION, find_channel
from spendsim.config.settings import settings
from spendsim.model.response_curves import (
    ChannelParameters,
    channel_revenue,
    inflection_spend,
    revenue_ceiling,
)
from spendsim.model.simulation import sample_curve, simulate

router = APIRouter()
logger = structlog.get_logger()


@router.get("/channels", response_model=ChannelConfigurationSchema)
async def list_channels(channels: List[ChannelParameters] = Depends(get_channels)):
    """Configured channels and the simulator defaults."""
    known_ids = {channel.id for channel in channels}
    return ChannelConfigurationSchema(
        channels=[ChannelSchema.from_parameters(channel) for channel in channels],
        reference_allocation={k: v for k, v in REFERENCE_ALLOCATION.items() if k in known_ids},
        initial_budget=settings.simulation.initial_budget,
        max_channel_spend=settings.simulation.max_channel_spend,
        marginal_increment=settings.simulation.marginal_increment
    )


@router.post("/run", response_model=SimulationResponseSchema)
async def run_simulation(request: SimulationRequestSchema,
                         channels: List[ChannelParameters] = Depends(get_channels)):
    """
    Evaluate a spend allocation across all configured channels.

    Results are recomputed on every request.
    """
    known_ids = {channel.id for channel in channels}
    unknown = sorted(set(request.allocation) - known_ids)
    if unknown:
        logger.warning("Ignoring spend for unknown channels", channels=unknown)

    result = simulate(
        request.allocation,
        channels,
        marginal_increment=settings.simulation.marginal_increment
    )

    logger.info(
        "Simulation completed",
        total_spend=result.total_spend,
        total_revenue=result.total_revenue,
        total_return_ratio=result.total_return_ratio
    )

    return SimulationResponseSchema.from_result(result)


@router.post("/curve", response_model=CurveResponseSchema,
             responses={404: {"model": ErrorResponseSchema}})
async def get_response_curve(request: CurveRequestSchema,
                             channels: List[ChannelParameters] = Depends(get_channels)):
    """Sample one channel's response curve for plotting."""
    channel = find_channel(channels, request.channel_id)

    points = sample_curve(
        channel,
        max_spend=request.max_spend or settings.simulation.max_channel_spend,
        step_count=request.step_count or settings.simulation.curve_steps,
        overshoot=request.overshoot if request.overshoot is not None else settings.simulation.curve_overshoot
    )

    current_point = None
    if request.current_spend is not None:
        current_point = CurvePointSchema(
            spend=request.current_spend,
            revenue=channel_revenue(request.current_spend, channel)
        )

    return CurveResponseSchema(
        channel_id=channel.id,
        points=[CurvePointSchema.from_point(point) for point in points],
        current_point=current_point,
        revenue_ceiling=revenue_ceiling(channel),
        inflection_spend=inflection_spend(channel)
    )
