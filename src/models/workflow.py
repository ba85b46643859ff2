"""Workflow configuration and engine result models."""

from __future__ import annotations

import math
from datetime import datetime
from enum import Enum
from typing import Dict, List, Tuple

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from models.ticket import Priority, Status

DEFAULT_SLA_TARGETS: Dict[str, float] = {
    Priority.CRITICAL.value: 4,
    Priority.HIGH.value: 8,
    Priority.MEDIUM.value: 24,
    Priority.LOW.value: 72,
}

DEFAULT_TRANSITIONS: Dict[Status, Tuple[Status, ...]] = {
    Status.NEW: (Status.OPEN, Status.CLOSED),
    Status.OPEN: (Status.PENDING, Status.CLOSED),
    Status.PENDING: (Status.OPEN, Status.CLOSED),
    Status.CLOSED: (),
}


class WorkflowConfig(BaseModel):
    """Tunable rule tables for the workflow engine."""

    model_config = ConfigDict(frozen=True)

    sla_targets: Dict[str, float] = Field(default_factory=lambda: dict(DEFAULT_SLA_TARGETS))
    default_sla_hours: float = 24
    transitions: Dict[Status, Tuple[Status, ...]] = Field(
        default_factory=lambda: dict(DEFAULT_TRANSITIONS)
    )
    aging_thresholds: Tuple[float, float, float] = (24, 48, 72)
    critical_escalation_hours: float = 2
    high_escalation_hours: float = 4
    unassigned_escalation_hours: float = 24

    @field_validator("sla_targets")
    @classmethod
    def validate_targets(cls, value: Dict[str, float]) -> Dict[str, float]:
        for priority, hours in value.items():
            if not math.isfinite(hours) or hours <= 0:
                raise ValueError(f"SLA target for {priority} must be a positive number of hours")
        return value

    @field_validator("default_sla_hours")
    @classmethod
    def validate_default(cls, value: float) -> float:
        if not math.isfinite(value) or value <= 0:
            raise ValueError("default_sla_hours must be a positive number of hours")
        return value

    @model_validator(mode="after")
    def validate_aging_thresholds(self) -> "WorkflowConfig":
        lower = 0.0
        for threshold in self.aging_thresholds:
            if threshold <= lower:
                raise ValueError("aging_thresholds must be positive and strictly increasing")
            lower = threshold
        return self

    def with_sla_targets(self, overrides: Dict[str, float]) -> "WorkflowConfig":
        """Return a copy with some SLA targets replaced."""
        merged = {**self.sla_targets, **overrides}
        return WorkflowConfig.model_validate({**self.model_dump(), "sla_targets": merged})


class Severity(str, Enum):
    """Ordinal aging severity, lowest first."""

    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    CRITICAL = "critical"

    @property
    def rank(self) -> int:
        return list(Severity).index(self)


class AgingBucket(BaseModel):
    """Coarse elapsed-time classification of an open ticket."""

    model_config = ConfigDict(frozen=True)

    range_label: str
    severity: Severity


class EscalationKind(str, Enum):
    """Advisory escalation actions."""

    ESCALATE = "escalate"
    AUTO_ASSIGN = "auto_assign"


class EscalationRule(BaseModel):
    """An advisory rule that currently applies to a ticket."""

    model_config = ConfigDict(frozen=True)

    kind: EscalationKind
    reason: str


class TransitionValidation(BaseModel):
    """Outcome of checking a proposed status change; errors are data, not exceptions."""

    errors: List[str] = Field(default_factory=list)

    @property
    def is_valid(self) -> bool:
        return not self.errors


class TicketEvaluation(BaseModel):
    """Everything a dashboard needs to render one ticket's workflow state."""

    ticket_id: str
    status: Status
    priority: Priority
    hours_open: float
    hours_open_display: str
    sla_target_hours: float
    sla_due_at: datetime
    sla_hours_remaining: float
    sla_violated: bool
    aging: AgingBucket
    valid_transitions: List[Status] = Field(default_factory=list)
    escalation_rules: List[EscalationRule] = Field(default_factory=list)
    should_auto_assign: bool = False
