"""
AI strategist explanation endpoints.
"""
from fastapi import APIRouter, Depends
from typing import List
import structlog

from spendsim.api.dependencies import get_channels, get_insight_generator
from spendsim.api.schemas import ErrorResponseSchema, ExplanationRequestSchema, ExplanationResponseSchema
from spendsim.config.channels import find_channel
from spendsim.config.settings import settings
from spendsim.model.response_curves import ChannelParameters
from spendsim.model.simulation import simulate
from spendsim.services.insights import EXPLANATION_TOPICS, InsightGenerator, insight_type_for

router = APIRouter()
logger = structlog.get_logger()


@router.post("/explain", response_model=ExplanationResponseSchema,
             responses={404: {"model": ErrorResponseSchema}})
async def explain(request: ExplanationRequestSchema,
                  channels: List[ChannelParameters] = Depends(get_channels),
                  generator: InsightGenerator = Depends(get_insight_generator)):
    """
    Explain a metric or channel for the given allocation.

    The definition is static; the insight comes from the text-generation
    backend and falls back to a fixed message when it is unavailable.
    """
    topic = EXPLANATION_TOPICS[request.topic]
    title = topic.title
    if request.channel_id:
        channel = find_channel(channels, request.channel_id)
        title = f"{channel.display_name}: {topic.title}"

    result = simulate(
        request.allocation,
        channels,
        marginal_increment=settings.simulation.marginal_increment
    )
    insight = await generator.generate(result, channels, request.channel_id)

    logger.info("Explanation served", topic=request.topic, channel=request.channel_id)

    return ExplanationResponseSchema(
        topic=request.topic,
        insight_type=insight_type_for(request.channel_id).value,
        title=title,
        description=topic.description,
        insight=insight
    )
