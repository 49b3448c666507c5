"""
Configuration management for the spend simulator.
Handles application settings, environment variables, and simulation defaults.
"""
import os
from typing import Optional
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path


class Environment(Enum):
    DEVELOPMENT = "development"
    STAGING = "staging"
    PRODUCTION = "production"
    TESTING = "testing"


@dataclass
class SimulationConfig:
    """Response curve simulation configuration."""
    marginal_increment: float = 100.0  # currency units looked ahead for marginal return
    curve_steps: int = 20
    curve_overshoot: int = 5  # extra steps past max spend so the curve visibly flattens
    max_channel_spend: float = 150000.0
    initial_budget: float = 100000.0

    # JSON file with channel parameters; reference channels are used when unset
    channels_file: Optional[str] = None


@dataclass
class InsightConfig:
    """Text-generation insight configuration."""
    api_key: Optional[str] = None
    model: str = "gemini-2.5-flash"
    timeout_seconds: float = 30.0


@dataclass
class APIConfig:
    """API server configuration."""
    host: str = "0.0.0.0"
    port: int = 8000
    debug: bool = False
    reload: bool = False

    # CORS settings
    cors_origins: list = field(default_factory=lambda: ["*"])
    cors_methods: list = field(default_factory=lambda: ["GET", "POST"])


@dataclass
class LoggingConfig:
    """Logging configuration."""
    level: str = "INFO"
    format: str = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    log_dir: str = "logs"
    max_file_size_mb: int = 10
    backup_count: int = 5

    # Structured logging
    use_json: bool = True


class Settings:
    """Main application settings class."""

    def __init__(self, env: Optional[Environment] = None):
        self.env = env or Environment(os.getenv("SPENDSIM_ENV", "development"))
        self._load_environment_variables()
        self._initialize_configs()

    def _load_environment_variables(self):
        """Loads configuration from environment variables."""
        env_file = Path(".env")
        if env_file.exists():
            self._load_env_file(env_file)

    def _load_env_file(self, env_file: Path):
        """Loads environment variables from .env file."""
        try:
            with open(env_file) as f:
                for line in f:
                    line = line.strip()
                    if line and not line.startswith("#") and "=" in line:
                        key, value = line.split("=", 1)
                        os.environ.setdefault(key.strip(), value.strip())
        except OSError as e:
            print(f"Warning: Could not load .env file: {e}")

    def _initialize_configs(self):
        """Initializes configuration objects."""
        self.simulation = SimulationConfig(
            marginal_increment=float(os.getenv("SIMULATION_MARGINAL_INCREMENT", "100")),
            curve_steps=int(os.getenv("SIMULATION_CURVE_STEPS", "20")),
            curve_overshoot=int(os.getenv("SIMULATION_CURVE_OVERSHOOT", "5")),
            max_channel_spend=float(os.getenv("MAX_CHANNEL_SPEND", "150000")),
            initial_budget=float(os.getenv("INITIAL_BUDGET", "100000")),
            channels_file=os.getenv("CHANNELS_FILE") or None
        )

        self.insights = InsightConfig(
            api_key=os.getenv("GEMINI_API_KEY") or os.getenv("API_KEY") or None,
            model=os.getenv("INSIGHT_MODEL", "gemini-2.5-flash"),
            timeout_seconds=float(os.getenv("INSIGHT_TIMEOUT", "30"))
        )

        self.api = APIConfig(
            host=os.getenv("HOST", "0.0.0.0"),
            port=int(os.getenv("PORT", "8000")),
            debug=self.env == Environment.DEVELOPMENT,
            reload=self.env == Environment.DEVELOPMENT
        )

        self.logging = LoggingConfig(
            level=os.getenv("LOG_LEVEL", "INFO"),
            log_dir=os.getenv("LOG_DIR", "logs"),
            use_json=os.getenv("USE_JSON_LOGGING", "true").lower() == "true"
        )

    def is_development(self) -> bool:
        """Check if running in development mode."""
        return self.env == Environment.DEVELOPMENT

    def is_production(self) -> bool:
        """Check if running in production mode."""
        return self.env == Environment.PRODUCTION

    def setup_directories(self):
        """Creates necessary directories."""
        Path(self.logging.log_dir).mkdir(parents=True, exist_ok=True)


# Global settings instance
settings = Settings()
