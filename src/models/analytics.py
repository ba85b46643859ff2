"""Aggregated dashboard views computed from a ticket collection."""

from typing import Dict, List

from pydantic import BaseModel, Field

from models.ticket import Ticket
from models.workflow import AgingBucket


class AgingBucketSummary(BaseModel):
    """Open tickets falling in one aging bucket."""

    bucket: AgingBucket
    count: int = 0
    tickets: List[Ticket] = Field(default_factory=list)


class AgingReport(BaseModel):
    """Open backlog split into aging buckets, in bucket order."""

    buckets: List[AgingBucketSummary] = Field(default_factory=list)

    @property
    def total(self) -> int:
        return sum(item.count for item in self.buckets)


class PriorityAdherence(BaseModel):
    """SLA standing of open tickets for one priority."""

    total: int = 0
    met_sla: int = 0
    violated_sla: int = 0


class SlaAdherenceReport(BaseModel):
    """Open-ticket SLA adherence snapshot."""

    total_tickets: int
    open_tickets: int
    closed_tickets: int
    open_violated: int
    open_at_risk: int
    adherence_percentage: float = Field(ge=0, le=100)
    priority_breakdown: Dict[str, PriorityAdherence] = Field(default_factory=dict)
    sla_targets: Dict[str, float] = Field(default_factory=dict)
