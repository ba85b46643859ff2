"""Dashboard-facing ticket helpers built on the workflow engine."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Iterable, List, Optional, Union

from models.ticket import Role, Status, Ticket
from models.workflow import TicketEvaluation
from services.workflow_engine import TicketWorkflowEngine, format_hours_open
from utils.logging_config import get_logger

logger = get_logger(__name__)


@dataclass
class TicketService:
    """Per-ticket evaluation, agent queues and edit permissions."""

    engine: TicketWorkflowEngine = field(default_factory=TicketWorkflowEngine)

    def evaluate(self, ticket: Ticket, now: Optional[datetime] = None) -> TicketEvaluation:
        """Snapshot of everything the engine can say about one ticket."""
        now = now or self.engine.clock()
        hours = self.engine.hours_open(ticket.created_at, now)
        evaluation = TicketEvaluation(
            ticket_id=ticket.id,
            status=ticket.status,
            priority=ticket.priority,
            hours_open=hours,
            hours_open_display=format_hours_open(max(hours, 0.0)),
            sla_target_hours=self.engine.sla_target(ticket.priority),
            sla_due_at=self.engine.sla_due_at(ticket),
            sla_hours_remaining=self.engine.sla_hours_remaining(ticket, now),
            sla_violated=self.engine.is_sla_violated(ticket, now),
            aging=self.engine.bucket_for_hours(hours),
            valid_transitions=self.engine.valid_transitions(ticket.status),
            escalation_rules=self.engine.escalation_rules(ticket, now),
            should_auto_assign=self.engine.should_auto_assign(ticket),
        )
        logger.info(
            "Ticket evaluated",
            extra={
                "ticket_id": ticket.id,
                "sla_violated": evaluation.sla_violated,
                "escalations": len(evaluation.escalation_rules),
            },
        )
        return evaluation

    def evaluate_many(self, tickets: Iterable[Ticket], now: Optional[datetime] = None) -> List[TicketEvaluation]:
        now = now or self.engine.clock()
        return [self.evaluate(ticket, now) for ticket in tickets]

    def sort_by_urgency(self, tickets: Iterable[Ticket]) -> List[Ticket]:
        """Most urgent priority first, oldest first within a priority."""
        return sorted(
            tickets,
            key=lambda t: (self.engine.priority_rank(t.priority), t.created_at),
        )

    def assigned_queue(self, tickets: Iterable[Ticket], agent_id: str) -> List[Ticket]:
        return [t for t in tickets if t.assigned_to == str(agent_id)]

    def unassigned_queue(self, tickets: Iterable[Ticket]) -> List[Ticket]:
        """Open work nobody has picked up yet."""
        return self.sort_by_urgency(
            t for t in tickets if not t.is_assigned and t.status != Status.CLOSED
        )

    @staticmethod
    def can_edit(ticket: Ticket, user_id: str, role: Union[Role, str]) -> bool:
        """Any role other than Normal User edits anything; requesters only their own tickets until closed."""
        if (role.value if isinstance(role, Role) else role) != Role.NORMAL_USER.value:
            return True
        return ticket.created_by == str(user_id) and ticket.status != Status.CLOSED
