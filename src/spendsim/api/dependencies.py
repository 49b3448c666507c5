"""
FastAPI dependencies for request handling.
"""
from typing import List

from spendsim.config.channels import get_configured_channels
from spendsim.model.response_curves import ChannelParameters
from spendsim.services.insights import InsightGenerator


def get_channels() -> List[ChannelParameters]:
    """
    Channel set used for a request.

    Read from configuration on every call so a changed channel file is
    picked up without restarting the server.

    Raises:
        ConfigurationError: If the configured channel file is invalid
    """
    return get_configured_channels()


def get_insight_generator() -> InsightGenerator:
    """Insight generator built from the current settings."""
    return InsightGenerator()
