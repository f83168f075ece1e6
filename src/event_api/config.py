import logging
import os
from dataclasses import dataclass
from functools import lru_cache

from .exceptions import ConfigurationError

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class AppConfig:
    """Application configuration loaded from environment variables."""

    # --- Required Variables ---
    events_table: str

    # --- Optional Variables with Defaults ---
    service_name: str
    environment: str
    log_level: str
    dynamodb_endpoint_url: str | None

    @classmethod
    def load_from_env(cls) -> "AppConfig":
        """
        Loads configuration from environment variables, performing validation.
        Fails fast with a ConfigurationError if anything is invalid.
        """
        try:
            events_table = os.environ["EVENTS_TABLE"]
            if not events_table.strip():
                raise ValueError("EVENTS_TABLE must not be empty.")

            service_name = os.getenv("SERVICE_NAME", "event-api")
            environment = os.getenv("ENVIRONMENT", "dev")

            log_level = os.getenv("LOG_LEVEL", "INFO").upper()
            allowed_log_levels = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
            if log_level not in allowed_log_levels:
                raise ValueError(
                    f"LOG_LEVEL must be one of {allowed_log_levels}, not '{log_level}'"
                )

            # Used against DynamoDB Local / serverless-offline.
            dynamodb_endpoint_url = os.getenv("DYNAMODB_ENDPOINT_URL") or None

        except KeyError as e:
            raise ConfigurationError(
                f"Missing required environment variable: {e.args[0]}"
            ) from e
        except ValueError as e:
            raise ConfigurationError(
                f"Invalid value for an environment variable: {e}"
            ) from e

        return cls(
            events_table=events_table,
            service_name=service_name,
            environment=environment,
            log_level=log_level,
            dynamodb_endpoint_url=dynamodb_endpoint_url,
        )


# --- Singleton Factory Function (Lazy-loaded and Cached) ---
@lru_cache(maxsize=1)
def get_config() -> AppConfig:
    """
    Loads the application configuration from environment variables.
    The result is cached, so the environment is only read once per container.
    """
    logger.info("Loading application configuration from environment...")
    return AppConfig.load_from_env()
