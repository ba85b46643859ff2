"""Pydantic models for tickets, workflow rules and dashboard reports."""

from models.analytics import (  # noqa: F401
    AgingBucketSummary,
    AgingReport,
    PriorityAdherence,
    SlaAdherenceReport,
)
from models.ticket import Priority, Role, Status, Ticket, TicketBatch  # noqa: F401
from models.workflow import (  # noqa: F401
    AgingBucket,
    EscalationKind,
    EscalationRule,
    Severity,
    TicketEvaluation,
    TransitionValidation,
    WorkflowConfig,
)
