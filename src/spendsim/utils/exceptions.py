"""
Custom exception classes for the spend simulator.
"""


class SimulatorException(Exception):
    """Base exception for the spend simulator."""
    pass


class ConfigurationError(SimulatorException):
    """Raised when configuration is invalid."""

    def __init__(self, message: str, errors: list = None):
        super().__init__(message)
        self.errors = errors or []


class ChannelNotFoundError(SimulatorException):
    """Raised when a channel id is not part of the configured channel set."""

    def __init__(self, channel_id: str):
        super().__init__(f"Channel {channel_id} not found")
        self.channel_id = channel_id


class InsightGenerationError(SimulatorException):
    """Raised when the text-generation backend returns nothing usable."""
    pass
