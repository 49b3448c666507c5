"""
Natural-language insights on simulation results.

Wraps the Gemini text-generation API. Generation runs asynchronously, can be
cancelled by the caller and never raises on backend failure: every failure
degrades to a static message so the simulation itself is unaffected.
"""
import asyncio
from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Optional, Sequence

import structlog

from spendsim.config.settings import settings
from spendsim.model.response_curves import ChannelParameters
from spendsim.model.simulation import SimulationResult
from spendsim.utils.exceptions import InsightGenerationError

logger = structlog.get_logger()


MISSING_KEY_MESSAGE = "API Key missing. Cannot generate AI insights."
EMPTY_RESPONSE_MESSAGE = "Could not generate insight."
FAILURE_MESSAGE = "Error generating insight. Please check API configuration."


class InsightType(str, Enum):
    GENERAL = "GENERAL"
    CHANNEL_SPECIFIC = "CHANNEL_SPECIFIC"


@dataclass(frozen=True)
class ExplanationTopic:
    title: str
    description: str


EXPLANATION_TOPICS: Dict[str, ExplanationTopic] = {
    "GENERAL": ExplanationTopic(
        "Business Overview",
        "This summary analyzes your entire budget allocation effectiveness."
    ),
    "REVENUE": ExplanationTopic(
        "Total Revenue Forecast",
        "This is the predicted amount of money your business will generate based on the "
        "current marketing spend mix. It is calculated by summing up the contribution of "
        "each channel according to its unique performance curve."
    ),
    "SPEND": ExplanationTopic(
        "Total Budget Allocation",
        "The total amount of capital deployed across all channels. Keep an eye on this to "
        "ensure you stay within your quarterly limits."
    ),
    "ROAS": ExplanationTopic(
        "Return on Ad Spend (ROAS)",
        "For every $1 you put into the machine, this is how many dollars you get back. "
        "A ROAS of 3.0x means you triple your money. If this drops too low, you are wasting cash."
    ),
    "CHANNEL": ExplanationTopic(
        "Channel Performance",
        "How this channel converts spend into revenue, and what the next dollar is worth."
    ),
}


def build_insight_prompt(result: SimulationResult,
                         channels: Sequence[ChannelParameters],
                         focus_channel_id: Optional[str] = None) -> str:
    """Prompt describing the simulation state for a non-technical executive."""
    names = {channel.id: channel.display_name for channel in channels}

    channel_lines = []
    for outcome in result.channel_results:
        channel_lines.append(
            f"{names.get(outcome.id, outcome.id)}: Spend ${outcome.spend:,.0f}, "
            f"Revenue ${outcome.revenue:,.0f}, ROI {outcome.return_ratio:.2f}x, "
            f"Marginal ROI (Next ${outcome.marginal_increment:,.0f}): ${outcome.marginal_return:.2f}"
        )

    if focus_channel_id:
        focus = (
            f'The user is specifically asking about "{names.get(focus_channel_id, focus_channel_id)}". '
            "Explain why its performance looks the way it does "
            "(mention saturation or diminishing returns if applicable)."
        )
    else:
        focus = (
            "Provide a high-level executive summary. Where is the waste? "
            "Where is the opportunity? Keep it brief (max 3 sentences)."
        )

    return "\n".join([
        "You are a commercially minded senior data strategist explaining MMM "
        "(Marketing Mix Modeling) results to a non-technical CEO.",
        "",
        "Current Simulation State:",
        f"Total Spend: ${result.total_spend:,.0f}",
        f"Total Revenue: ${result.total_revenue:,.0f}",
        f"Total ROI: {result.total_return_ratio:.2f}x",
        "",
        "Channel Details:",
        *channel_lines,
        "",
        focus,
        "",
        "Style Guide:",
        '- No academic jargon (avoid "hill function", "coefficients").',
        '- Use business terms: "Diminishing returns", "Sweet spot", "Saturated", "Efficiency".',
        "- Be direct and actionable.",
    ])


class InsightGenerator:
    """Generates commentary on a simulation result through Gemini."""

    def __init__(self,
                 api_key: Optional[str] = None,
                 model: Optional[str] = None,
                 timeout_seconds: Optional[float] = None,
                 client: Any = None):
        self.api_key = api_key if api_key is not None else settings.insights.api_key
        self.model = model or settings.insights.model
        self.timeout_seconds = timeout_seconds or settings.insights.timeout_seconds
        self._client = client

    def _get_client(self) -> Any:
        if self._client is not None:
            return self._client
        if not self.api_key:
            logger.warning("Gemini API key not configured")
            return None

        from google import genai

        self._client = genai.Client(api_key=self.api_key)
        return self._client

    async def _request(self, client: Any, prompt: str) -> str:
        response = await client.aio.models.generate_content(
            model=self.model,
            contents=prompt,
        )
        text = getattr(response, "text", None)
        if not text or not text.strip():
            raise InsightGenerationError("Empty response from text-generation backend")
        return text.strip()

    async def generate(self,
                       result: SimulationResult,
                       channels: Sequence[ChannelParameters],
                       focus_channel_id: Optional[str] = None) -> str:
        """
        Commentary on ``result``, optionally focused on one channel.

        Returns a fallback message instead of raising when the backend is
        unavailable, times out or answers with nothing usable.
        """
        try:
            client = self._get_client()
        except Exception as e:
            logger.error("Failed to initialize Gemini client", error=str(e))
            return FAILURE_MESSAGE

        if client is None:
            return MISSING_KEY_MESSAGE

        prompt = build_insight_prompt(result, channels, focus_channel_id)

        try:
            insight = await asyncio.wait_for(
                self._request(client, prompt),
                timeout=self.timeout_seconds
            )
        except InsightGenerationError as e:
            logger.warning("Insight generation returned no text", error=str(e))
            return EMPTY_RESPONSE_MESSAGE
        except asyncio.TimeoutError:
            logger.error("Insight generation timed out", timeout_seconds=self.timeout_seconds)
            return FAILURE_MESSAGE
        except Exception as e:
            logger.error("Gemini API error", error=str(e), model=self.model)
            return FAILURE_MESSAGE

        logger.info("Insight generated", model=self.model, focus_channel=focus_channel_id)
        return insight


def insight_type_for(focus_channel_id: Optional[str]) -> InsightType:
    return InsightType.CHANNEL_SPECIFIC if focus_channel_id else InsightType.GENERAL
