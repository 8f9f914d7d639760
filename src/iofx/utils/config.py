"""
iofx Configuration Management

Configuration for the production driver and the save-file workflow.
"""

import os
from dataclasses import dataclass, field, fields
from typing import Any, Dict

import yaml

DEFAULT_UPLOAD_URL = "https://google.com"


@dataclass
class IofxConfig:
    """Configuration for drivers and bundled workflows."""

    # Collaborator configuration
    upload_url: str = DEFAULT_UPLOAD_URL
    log_path: str = "log.txt"
    timeout: float = 10.0

    # Driver limits
    max_steps: int = 100

    # Logging configuration
    log_level: str = "INFO"
    enable_structured_logging: bool = True

    # Additional metadata
    tags: Dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_env(cls) -> "IofxConfig":
        """Create configuration from environment variables."""
        return cls(
            upload_url=os.getenv("IOFX_UPLOAD_URL", DEFAULT_UPLOAD_URL),
            log_path=os.getenv("IOFX_LOG_PATH", "log.txt"),
            timeout=float(os.getenv("IOFX_TIMEOUT", "10.0")),
            max_steps=int(os.getenv("IOFX_MAX_STEPS", "100")),
            log_level=os.getenv("IOFX_LOG_LEVEL", "INFO"),
            enable_structured_logging=os.getenv(
                "IOFX_STRUCTURED_LOGGING", "true"
            ).lower()
            == "true",
        )

    @classmethod
    def from_file(cls, path: str) -> "IofxConfig":
        """Create configuration from a YAML mapping."""
        with open(path, "r") as f:
            config_data = yaml.safe_load(f) or {}

        if not isinstance(config_data, dict):
            raise ValueError(f"Configuration file {path} must contain a mapping")

        known = {f.name for f in fields(cls)}
        unknown = sorted(set(config_data) - known)
        if unknown:
            raise ValueError(f"Unknown configuration keys: {', '.join(unknown)}")

        return cls(**config_data)

    def to_dict(self) -> Dict[str, Any]:
        """Convert configuration to dictionary."""
        return {
            "upload_url": self.upload_url,
            "log_path": self.log_path,
            "timeout": self.timeout,
            "max_steps": self.max_steps,
            "log_level": self.log_level,
            "enable_structured_logging": self.enable_structured_logging,
            "tags": self.tags,
        }
