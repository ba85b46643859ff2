"""
Client-side analytics over a fetched ticket collection.

Backs the aging analysis and real-time SLA panels: the same rules the engine
applies per ticket, rolled up across the open backlog.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Iterable, Optional

from models.analytics import (
    AgingBucketSummary,
    AgingReport,
    PriorityAdherence,
    SlaAdherenceReport,
)
from models.ticket import Priority, Ticket
from services.workflow_engine import TicketWorkflowEngine
from utils.logging_config import get_logger

logger = get_logger(__name__)


@dataclass
class AnalyticsService:
    """Aging distribution and SLA adherence for dashboard panels."""

    engine: TicketWorkflowEngine = field(default_factory=TicketWorkflowEngine)

    def aging_distribution(self, tickets: Iterable[Ticket], now: Optional[datetime] = None) -> AgingReport:
        """Group open tickets by aging bucket; every bucket is present, even when empty."""
        now = now or self.engine.clock()
        summaries = [AgingBucketSummary(bucket=b) for b in self.engine.aging_buckets()]
        by_label = {s.bucket.range_label: s for s in summaries}

        for ticket in tickets:
            if ticket.is_closed:
                continue
            bucket = self.engine.aging_bucket(ticket.created_at, now)
            summary = by_label[bucket.range_label]
            summary.count += 1
            summary.tickets.append(ticket)

        report = AgingReport(buckets=summaries)
        logger.info("Aging distribution computed", extra={"open_tickets": report.total})
        return report

    def sla_adherence(self, tickets: Iterable[Ticket], now: Optional[datetime] = None) -> SlaAdherenceReport:
        """SLA standing of the open backlog, overall and per priority."""
        now = now or self.engine.clock()
        breakdown = {p.value: PriorityAdherence() for p in Priority}
        total = closed = violated = 0

        for ticket in tickets:
            total += 1
            if ticket.is_closed:
                closed += 1
                continue
            entry = breakdown[ticket.priority.value]
            entry.total += 1
            if self.engine.is_sla_violated(ticket, now):
                violated += 1
                entry.violated_sla += 1
            else:
                entry.met_sla += 1

        open_count = total - closed
        at_risk = open_count - violated
        adherence = round(at_risk / open_count * 100, 1) if open_count else 100.0

        return SlaAdherenceReport(
            total_tickets=total,
            open_tickets=open_count,
            closed_tickets=closed,
            open_violated=violated,
            open_at_risk=at_risk,
            adherence_percentage=adherence,
            priority_breakdown=breakdown,
            sla_targets=dict(self.engine.config.sla_targets),
        )
