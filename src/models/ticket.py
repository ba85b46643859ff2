"""Ticket models shared by the workflow engine and handlers."""

from __future__ import annotations

from datetime import datetime, timezone
from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


class Status(str, Enum):
    """Ticket lifecycle states."""

    NEW = "New"
    OPEN = "Open"
    PENDING = "Pending"
    CLOSED = "Closed"


class Priority(str, Enum):
    """Priority levels, declared from most to least urgent."""

    CRITICAL = "Critical"
    HIGH = "High"
    MEDIUM = "Medium"
    LOW = "Low"


class Role(str, Enum):
    """Helpdesk user roles."""

    NORMAL_USER = "Normal User"
    TECHNICAL_USER = "Technical User"
    TECHNICAL_SUPERVISOR = "Technical Supervisor"
    SYSTEM_ADMIN = "System Admin"

    @classmethod
    def parse(cls, value: Optional[str]) -> "Role":
        """Resolve a role string; unknown roles get end-user permissions."""
        try:
            return cls(value)
        except ValueError:
            return cls.NORMAL_USER


class Ticket(BaseModel):
    """Read-only ticket snapshot as returned by the helpdesk backend."""

    model_config = ConfigDict(frozen=True, extra="ignore")

    id: str
    title: str
    description: str = ""
    status: Status
    priority: Priority
    created_at: datetime
    created_by: str
    assigned_to: Optional[str] = None
    created_by_name: Optional[str] = None
    assigned_to_name: Optional[str] = None
    category: Optional[str] = None

    @field_validator("id", "created_by", "assigned_to", mode="before")
    @classmethod
    def coerce_identifier(cls, value):
        """Backend ids may arrive as integers; blank assignees mean unassigned."""
        if value is None:
            return None
        value = str(value).strip()
        return value or None

    @field_validator("created_at")
    @classmethod
    def assume_utc(cls, value: datetime) -> datetime:
        """Naive timestamps from the backend are UTC."""
        if value.tzinfo is None:
            return value.replace(tzinfo=timezone.utc)
        return value

    @property
    def is_closed(self) -> bool:
        return self.status == Status.CLOSED

    @property
    def is_assigned(self) -> bool:
        return self.assigned_to is not None


class TicketBatch(BaseModel):
    """Request body carrying a ticket collection and an optional evaluation instant."""

    tickets: list[Ticket] = Field(default_factory=list)
    now: Optional[datetime] = None
