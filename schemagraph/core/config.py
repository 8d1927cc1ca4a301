"""Configuration management for the schemagraph framework."""

from __future__ import annotations

from enum import Enum
from pathlib import Path
from typing import Dict, List, Optional, Union

from pydantic import BaseModel, Field, ValidationError
from pydantic_settings import BaseSettings

from schemagraph.core.exceptions import ConfigurationError


class LogLevel(str, Enum):
    """Logging levels."""

    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"


# =============================================================================
# Resolution Configuration
# =============================================================================


class FetchConfig(BaseModel):
    """Remote document fetch configuration."""

    timeout: float = Field(default=10.0, gt=0.0)  # Seconds per request
    max_concurrent_fetches: int = Field(default=4, ge=1)
    follow_redirects: bool = True
    headers: Dict[str, str] = Field(
        default_factory=lambda: {"Accept": "application/schema+json, application/json"}
    )


class ResolutionConfig(BaseModel):
    """Reference resolution configuration."""

    # Fetches $ref targets over the network. Only enable for trusted schemas.
    allow_remote_resolution: bool = False
    base_uri: str = ""
    # Subschemas under these keywords get parents only through $ref usage
    detached_keywords: List[str] = Field(default_factory=lambda: ["definitions", "$defs"])
    fetch: FetchConfig = Field(default_factory=FetchConfig)


# =============================================================================
# Main Configuration
# =============================================================================


class SchemaGraphConfig(BaseSettings):
    """Main schemagraph configuration."""

    log_level: LogLevel = LogLevel.INFO
    resolution: ResolutionConfig = Field(default_factory=ResolutionConfig)

    model_config = {
        "env_prefix": "SCHEMAGRAPH_",
        "env_file": ".env",
        "env_nested_delimiter": "__",
        "extra": "ignore",
    }

    @classmethod
    def from_yaml(cls, path: Union[str, Path]) -> "SchemaGraphConfig":
        """Load configuration from a YAML file."""
        import yaml

        with open(path, "r") as f:
            data = yaml.safe_load(f)
        if not data:
            return cls()
        if not isinstance(data, dict):
            raise ConfigurationError(f"Configuration file must hold a mapping: {path}")

        try:
            return cls(**data)
        except ValidationError as e:
            raise ConfigurationError(
                f"Invalid configuration in {path}",
                {"errors": [error["msg"] for error in e.errors()]},
            )

    def to_yaml(self, path: Union[str, Path]) -> None:
        """Save configuration to a YAML file."""
        import yaml

        with open(path, "w") as f:
            yaml.dump(self.model_dump(mode="json"), f, default_flow_style=False, sort_keys=False)


def load_config(path: Optional[Union[str, Path]] = None) -> SchemaGraphConfig:
    """
    Load configuration from file or create default.

    Args:
        path: Optional path to YAML config file

    Returns:
        SchemaGraphConfig instance
    """
    if path:
        return SchemaGraphConfig.from_yaml(path)
    return SchemaGraphConfig()
