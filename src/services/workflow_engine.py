"""
Ticket workflow and SLA rules.

Pure functions over ticket snapshots: no I/O, no shared state. The rule tables
come from an injected WorkflowConfig and "now" is either passed in or read
from the injected clock, so every answer is reproducible in tests.
"""

from __future__ import annotations

import math
from datetime import datetime, timedelta, timezone
from enum import Enum
from typing import Callable, List, Optional, Union

from models.ticket import Priority, Role, Status, Ticket
from models.workflow import (
    AgingBucket,
    EscalationKind,
    EscalationRule,
    Severity,
    TransitionValidation,
    WorkflowConfig,
)

Clock = Callable[[], datetime]

_SECONDS_PER_HOUR = 3600.0
_PRIORITY_ORDER = [p.value for p in Priority]


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def _value(item: Union[Enum, str, None]) -> Optional[str]:
    # str-mixin enums hash by member name, so lookups go through the raw value.
    return item.value if isinstance(item, Enum) else item


def _aware(moment: datetime) -> datetime:
    return moment if moment.tzinfo is not None else moment.replace(tzinfo=timezone.utc)


def _round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def format_hours_open(hours: float) -> str:
    """Compact age label used next to tickets: ``45m``, ``7h``, ``2d 3h``."""
    if hours < 1:
        return f"{_round_half_up(hours * 60)}m"
    if hours < 24:
        return f"{_round_half_up(hours)}h"
    days = math.floor(hours / 24)
    return f"{days}d {_round_half_up(hours % 24)}h"


class TicketWorkflowEngine:
    """Answers status-transition, SLA, aging and escalation questions for a ticket."""

    def __init__(self, config: Optional[WorkflowConfig] = None, clock: Clock = utc_now):
        self.config = config or WorkflowConfig()
        self.clock = clock

    def hours_open(self, created_at: datetime, now: Optional[datetime] = None) -> float:
        """Elapsed hours since creation; negative when created_at is in the future."""
        now = _aware(now) if now is not None else self.clock()
        return (now - _aware(created_at)).total_seconds() / _SECONDS_PER_HOUR

    def sla_target(self, priority: Union[Priority, str, None]) -> float:
        """SLA target in hours; unrecognised priorities get the default target."""
        target = self.config.sla_targets.get(_value(priority))
        return target if target is not None else self.config.default_sla_hours

    def is_sla_violated(self, ticket: Ticket, now: Optional[datetime] = None) -> bool:
        if ticket.status == Status.CLOSED:
            return False
        return self.hours_open(ticket.created_at, now) > self.sla_target(ticket.priority)

    def sla_due_at(self, ticket: Ticket) -> datetime:
        return _aware(ticket.created_at) + timedelta(hours=self.sla_target(ticket.priority))

    def sla_hours_remaining(self, ticket: Ticket, now: Optional[datetime] = None) -> float:
        return self.sla_target(ticket.priority) - self.hours_open(ticket.created_at, now)

    def aging_bucket(self, created_at: datetime, now: Optional[datetime] = None) -> AgingBucket:
        """Classify elapsed time into half-open buckets [0,24) [24,48) [48,72) [72,inf)."""
        hours = self.hours_open(created_at, now)
        return self.bucket_for_hours(hours)

    def bucket_for_hours(self, hours: float) -> AgingBucket:
        buckets = self.aging_buckets()
        for bucket, upper in zip(buckets, self.config.aging_thresholds):
            if hours < upper:
                return bucket
        return buckets[-1]

    def aging_buckets(self) -> List[AgingBucket]:
        """All buckets in ascending order of age."""
        bounds = [0, *self.config.aging_thresholds]
        labels = [f"{_fmt(lo)}-{_fmt(hi)} hours" for lo, hi in zip(bounds, bounds[1:])]
        labels.append(f"{_fmt(bounds[-1])}+ hours")
        return [
            AgingBucket(range_label=label, severity=severity)
            for label, severity in zip(labels, Severity)
        ]

    def valid_transitions(self, status: Union[Status, str]) -> List[Status]:
        try:
            current = Status(_value(status))
        except ValueError:
            return []
        return list(self.config.transitions.get(current, ()))

    def can_transition(self, current: Union[Status, str], proposed: Union[Status, str]) -> bool:
        return _value(proposed) in [s.value for s in self.valid_transitions(current)]

    def validate_transition(
        self,
        ticket: Ticket,
        proposed_status: Union[Status, str],
        acting_role: Union[Role, str],
    ) -> TransitionValidation:
        """Collect every reason the proposed status change is not allowed."""
        errors: List[str] = []
        if not self.can_transition(ticket.status, proposed_status):
            errors.append(
                f"cannot transition from {_value(ticket.status)} to {_value(proposed_status)}"
            )
        # Legacy rule: compares the requester with the assignee, not the actor.
        if (
            _value(proposed_status) == Status.CLOSED.value
            and _value(acting_role) == Role.NORMAL_USER.value
            and ticket.created_by != ticket.assigned_to
        ):
            errors.append("only the assigned agent may close this ticket")
        return TransitionValidation(errors=errors)

    def escalation_rules(self, ticket: Ticket, now: Optional[datetime] = None) -> List[EscalationRule]:
        """Advisory rules that currently apply, in fixed evaluation order."""
        cfg = self.config
        hours = self.hours_open(ticket.created_at, now)
        rules: List[EscalationRule] = []
        if ticket.priority == Priority.CRITICAL and hours > cfg.critical_escalation_hours:
            rules.append(
                EscalationRule(
                    kind=EscalationKind.ESCALATE,
                    reason=f"Critical ticket open > {_fmt(cfg.critical_escalation_hours)} hours",
                )
            )
        if ticket.priority == Priority.HIGH and hours > cfg.high_escalation_hours:
            rules.append(
                EscalationRule(
                    kind=EscalationKind.ESCALATE,
                    reason=f"High priority ticket open > {_fmt(cfg.high_escalation_hours)} hours",
                )
            )
        if hours > cfg.unassigned_escalation_hours and not ticket.is_assigned:
            rules.append(
                EscalationRule(
                    kind=EscalationKind.AUTO_ASSIGN,
                    reason=f"Unassigned ticket > {_fmt(cfg.unassigned_escalation_hours)} hours",
                )
            )
        return rules

    def should_auto_assign(self, ticket: Ticket) -> bool:
        return ticket.priority == Priority.CRITICAL and not ticket.is_assigned

    @staticmethod
    def priority_rank(priority: Union[Priority, str, None]) -> int:
        """0 for Critical through 3 for Low; unknown values sort last."""
        value = _value(priority)
        if value in _PRIORITY_ORDER:
            return _PRIORITY_ORDER.index(value)
        return len(_PRIORITY_ORDER)


def _fmt(hours: float) -> str:
    return str(int(hours)) if float(hours).is_integer() else str(hours)
