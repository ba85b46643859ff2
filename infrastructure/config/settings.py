"""
Environment-specific deployment settings.

Small defaults for dev; prod gets more Lambda headroom and a retained table.
"""

from dataclasses import dataclass
import os


@dataclass
class Settings:
    """Deployment settings for the workflow service."""

    # Environment
    environment: str = "dev"
    aws_region: str = "eu-west-2"

    # Lambda Configuration
    lambda_memory_mb: int = 256
    lambda_timeout_seconds: int = 10
    log_level: str = "INFO"

    # Workflow configuration cache (seconds between SLA policy table reads)
    config_cache_ttl_seconds: int = 300

    # Optional JSON override of SLA targets, e.g. '{"Critical": 2}'
    sla_targets_override: str = ""

    # Comma-separated origins allowed to call the API (dashboard hosts)
    allowed_origins: str = "*"

    @property
    def cors_origins(self) -> list:
        return [o.strip() for o in self.allowed_origins.split(",") if o.strip()] or ["*"]

    @classmethod
    def from_environment(cls) -> "Settings":
        """Load settings from environment variables."""
        env = os.environ.get("ENVIRONMENT", "dev")
        common = dict(
            environment=env,
            aws_region=os.environ.get("AWS_REGION", cls.aws_region),
            log_level=os.environ.get("LOG_LEVEL", cls.log_level),
            config_cache_ttl_seconds=int(os.environ.get("CONFIG_CACHE_TTL_SECONDS", "300")),
            sla_targets_override=os.environ.get("SLA_TARGETS", ""),
            allowed_origins=os.environ.get("ALLOWED_ORIGINS", "*"),
        )

        # Production overrides
        if env == "prod":
            return cls(lambda_memory_mb=512, lambda_timeout_seconds=15, **common)

        return cls(**common)
