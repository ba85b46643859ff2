"""
Workflow configuration loading.

Layers, lowest first: built-in defaults, the SLA_TARGETS environment variable
(JSON object of priority -> hours), then the DynamoDB policy table named by
SLA_POLICY_TABLE. The merged config is cached so warm invocations skip the
table read.
"""

from __future__ import annotations

import json
import math
import os
from dataclasses import dataclass, field
from typing import Dict, Optional

from botocore.exceptions import BotoCoreError, ClientError
from pydantic import ValidationError as PydanticValidationError

from models.ticket import Priority
from models.workflow import WorkflowConfig
from repositories.sla_policy_repo import SlaPolicyRepository
from services.workflow_engine import TicketWorkflowEngine
from utils.cache_service import LRUCache
from utils.error_handling import ConfigurationError
from utils.logging_config import get_logger

logger = get_logger(__name__)

_CACHE_KEY = "workflow-config"
config_cache = LRUCache(
    max_size=4, ttl_seconds=int(os.environ.get("CONFIG_CACHE_TTL_SECONDS", "300"))
)


def parse_sla_targets(raw: Optional[str]) -> Dict[str, float]:
    """Parse an SLA_TARGETS override such as ``{"Critical": 2, "Low": 96}``."""
    if not raw:
        return {}
    try:
        data = json.loads(raw)
    except json.JSONDecodeError as exc:
        raise ConfigurationError(f"SLA_TARGETS is not valid JSON: {exc}") from exc
    if not isinstance(data, dict):
        raise ConfigurationError("SLA_TARGETS must be a JSON object")

    known = {p.value for p in Priority}
    targets: Dict[str, float] = {}
    for priority, hours in data.items():
        if priority not in known:
            raise ConfigurationError(f"Unknown priority in SLA_TARGETS: {priority}")
        try:
            targets[priority] = float(hours)
        except (TypeError, ValueError) as exc:
            raise ConfigurationError(f"SLA target for {priority} must be a number") from exc
        if not math.isfinite(targets[priority]):
            raise ConfigurationError(f"SLA target for {priority} must be finite")
    return targets


@dataclass
class ConfigService:
    """Builds and caches the engine's WorkflowConfig."""

    table_name: Optional[str] = field(default_factory=lambda: os.environ.get("SLA_POLICY_TABLE"))
    cache: LRUCache = field(default_factory=lambda: config_cache)
    repository: Optional[SlaPolicyRepository] = None

    def load(self) -> WorkflowConfig:
        return self.cache.get_or_load(_CACHE_KEY, self._build)

    def refresh(self) -> WorkflowConfig:
        self.cache.clear()
        return self.load()

    def _build(self) -> WorkflowConfig:
        overrides = parse_sla_targets(os.environ.get("SLA_TARGETS"))
        overrides.update(self._table_targets())
        try:
            config = WorkflowConfig().with_sla_targets(overrides)
        except PydanticValidationError as exc:
            raise ConfigurationError(f"Invalid SLA targets: {exc}") from exc
        logger.info("Workflow config loaded", extra={"sla_targets": config.sla_targets})
        return config

    def _table_targets(self) -> Dict[str, float]:
        if not self.table_name and self.repository is None:
            return {}
        try:
            repo = self.repository or SlaPolicyRepository(self.table_name)
            return repo.load_targets()
        except (BotoCoreError, ClientError) as exc:
            logger.warning(
                "SLA policy table unavailable; using environment/default targets",
                extra={"table": self.table_name, "error": str(exc)},
            )
            return {}


# Lazy singletons reused across warm invocations.
_config_service: Optional[ConfigService] = None
_engine: Optional[TicketWorkflowEngine] = None


def get_config_service() -> ConfigService:
    global _config_service
    if _config_service is None:
        _config_service = ConfigService()
    return _config_service


def get_workflow_engine() -> TicketWorkflowEngine:
    """Engine bound to the current cached config; rebuilt when the config reloads."""
    global _engine
    config = get_config_service().load()
    if _engine is None or _engine.config is not config:
        _engine = TicketWorkflowEngine(config)
    return _engine
