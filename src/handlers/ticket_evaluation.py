"""
Ticket evaluation handler for POST /tickets/evaluate.

Accepts ``{"ticket": {...}}`` or ``{"tickets": [...]}`` plus an optional
``now`` and returns the engine's view of each ticket: SLA standing, aging
bucket, allowed next statuses and escalation alerts.
"""

from __future__ import annotations

import uuid
from typing import TYPE_CHECKING, Optional

from models.ticket import Ticket, TicketBatch
from utils.error_handling import AppError, ValidationError
from utils.logging_config import get_logger
from utils.responses import error_response, json_response, parse_body

if TYPE_CHECKING:
    from services.ticket_service import TicketService

logger = get_logger(__name__)

_ticket_service: Optional["TicketService"] = None


def _get_ticket_service():
    """Lazy-load TicketService bound to the current workflow config."""
    global _ticket_service
    from services.config_service import get_workflow_engine
    from services.ticket_service import TicketService

    engine = get_workflow_engine()
    if _ticket_service is None or _ticket_service.engine is not engine:
        _ticket_service = TicketService(engine=engine)
    return _ticket_service


def lambda_handler(event, context):
    correlation_id = str(uuid.uuid4())
    try:
        payload = parse_body(event)
        service = _get_ticket_service()

        if "ticket" in payload:
            ticket = Ticket.model_validate(payload["ticket"])
            batch = TicketBatch.model_validate({"now": payload.get("now")})
            evaluation = service.evaluate(ticket, batch.now)
            body = {
                "evaluation": evaluation.model_dump(mode="json"),
                "correlation_id": correlation_id,
            }
        elif "tickets" in payload:
            batch = TicketBatch.model_validate(payload)
            evaluations = service.evaluate_many(batch.tickets, batch.now)
            body = {
                "evaluations": [e.model_dump(mode="json") for e in evaluations],
                "count": len(evaluations),
                "correlation_id": correlation_id,
            }
        else:
            raise ValidationError("ticket or tickets is required")

        return json_response(200, body)
    except (AppError, ValueError) as exc:
        logger.warning(
            "Ticket evaluation rejected",
            extra={"correlation_id": correlation_id, "error": str(exc)},
        )
        return error_response(exc, correlation_id)
