"""
Channel configuration for the spend simulator.

The simulation core never hardcodes a channel set; callers pass a list of
ChannelParameters. This module supplies the reference channel set and loads
alternative sets from JSON files.
"""
import json
import math
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence, Union

import structlog

from spendsim.config.settings import settings
from spendsim.model.response_curves import ChannelParameters
from spendsim.utils.exceptions import ChannelNotFoundError, ConfigurationError

logger = structlog.get_logger()


REFERENCE_CHANNELS: List[ChannelParameters] = [
    ChannelParameters(id="fb", label="Facebook Ads", shape=1.8, scale=40000, multiplier=2.5, color="#1877F2"),
    ChannelParameters(id="tv", label="TV Commercials", shape=0.9, scale=150000, multiplier=1.8, color="#8B5CF6"),
    ChannelParameters(id="search", label="Google Search", shape=1.2, scale=25000, multiplier=3.5, color="#EA4335"),
    ChannelParameters(id="print", label="Print / OOH", shape=2.5, scale=60000, multiplier=1.2, color="#10B981"),
]

REFERENCE_ALLOCATION: Dict[str, float] = {
    "fb": 30000,
    "tv": 50000,
    "search": 15000,
    "print": 5000,
}

# Accepted alternative keys in channel files
_FIELD_ALIASES = {
    "alpha": "shape",
    "gamma": "scale",
    "coeff": "multiplier",
    "name": "label",
}


def channel_from_dict(data: Dict[str, Any]) -> ChannelParameters:
    """Build ChannelParameters from a mapping, accepting alpha/gamma/coeff/name keys."""
    normalized = {_FIELD_ALIASES.get(key, key): value for key, value in data.items()}

    missing = [key for key in ("id", "shape", "scale", "multiplier") if key not in normalized]
    if missing:
        raise ConfigurationError(
            f"Channel definition is missing fields: {', '.join(missing)}",
            errors=[{"channel": normalized.get("id"), "missing": missing}]
        )

    try:
        return ChannelParameters(
            id=str(normalized["id"]),
            shape=float(normalized["shape"]),
            scale=float(normalized["scale"]),
            multiplier=float(normalized["multiplier"]),
            label=str(normalized.get("label", "")),
            color=str(normalized.get("color", ""))
        )
    except (TypeError, ValueError) as e:
        raise ConfigurationError(f"Invalid channel definition {normalized.get('id')}: {e}") from e


def validate_channels(channels: Sequence[ChannelParameters]) -> List[ChannelParameters]:
    """
    Check a channel set before handing it to the simulation core.

    Raises:
        ConfigurationError: On an empty set, duplicate ids or non-positive parameters
    """
    if not channels:
        raise ConfigurationError("At least one channel must be configured")

    errors = []
    seen = set()
    for channel in channels:
        if channel.id in seen:
            errors.append({"channel": channel.id, "error": "duplicate id"})
        seen.add(channel.id)

        for name in ("shape", "scale", "multiplier"):
            value = getattr(channel, name)
            if not (math.isfinite(value) and value > 0):
                errors.append({"channel": channel.id, "error": f"{name} must be positive", "value": value})

    if errors:
        raise ConfigurationError("Invalid channel configuration", errors=errors)

    return list(channels)


def load_channels(path: Union[str, Path]) -> List[ChannelParameters]:
    """Load and validate a channel set from a JSON list of channel objects."""
    path = Path(path)
    try:
        with open(path) as f:
            raw = json.load(f)
    except (OSError, json.JSONDecodeError) as e:
        raise ConfigurationError(f"Could not read channel file {path}: {e}") from e

    if isinstance(raw, dict):
        raw = raw.get("channels", [])
    if not isinstance(raw, list):
        raise ConfigurationError(f"Channel file {path} must contain a list of channels")

    if not all(isinstance(item, dict) for item in raw):
        raise ConfigurationError(f"Channel file {path} must contain channel objects")

    channels = validate_channels([channel_from_dict(item) for item in raw])
    logger.info("Loaded channel configuration", path=str(path), channel_count=len(channels))
    return channels


def get_configured_channels(channels_file: Optional[str] = None) -> List[ChannelParameters]:
    """Channel set from ``channels_file`` (or settings), falling back to the reference set."""
    channels_file = channels_file or settings.simulation.channels_file
    if channels_file:
        return load_channels(channels_file)
    return list(REFERENCE_CHANNELS)


def find_channel(channels: Sequence[ChannelParameters], channel_id: str) -> ChannelParameters:
    """
    Look up a channel by id.

    Raises:
        ChannelNotFoundError: If no channel has that id
    """
    for channel in channels:
        if channel.id == channel_id:
            return channel
    raise ChannelNotFoundError(channel_id)
