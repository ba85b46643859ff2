"""
Status change validation for POST /tickets/{id}/transition.

Invalid transitions are a normal outcome: the response is 200 with
``is_valid: false`` and the reasons, so the dashboard can show them instead of
sending the update to the backend.
"""

from __future__ import annotations

import uuid

from models.ticket import Role, Status, Ticket
from utils.error_handling import AppError, ValidationError
from utils.logging_config import get_logger
from utils.responses import error_response, json_response, parse_body, path_parameter
from utils.validators import require_fields

logger = get_logger(__name__)


def _ticket_id_from_path(event) -> str:
    ticket_id = path_parameter(event, "id")
    if ticket_id:
        return ticket_id
    path = event.get("requestContext", {}).get("http", {}).get("path", "")
    parts = [p for p in path.split("/") if p]
    # /tickets/{id}/transition
    if len(parts) == 3 and parts[0] == "tickets" and parts[2] == "transition":
        return parts[1]
    return ""


def lambda_handler(event, context):
    correlation_id = str(uuid.uuid4())
    try:
        payload = parse_body(event)
        require_fields(payload, "ticket", "proposed_status", "acting_role")
        ticket = Ticket.model_validate(payload["ticket"])

        path_id = _ticket_id_from_path(event)
        if path_id and path_id != ticket.id:
            raise ValidationError(f"ticket id {ticket.id} does not match path id {path_id}")

        try:
            proposed = Status(payload["proposed_status"])
        except ValueError:
            raise ValidationError(f"Unknown status: {payload['proposed_status']}") from None
        role = Role.parse(payload["acting_role"])

        from services.config_service import get_workflow_engine

        engine = get_workflow_engine()
        result = engine.validate_transition(ticket, proposed, role)

        logger.info(
            "Transition validated",
            extra={
                "correlation_id": correlation_id,
                "ticket_id": ticket.id,
                "from_status": ticket.status.value,
                "to_status": proposed.value,
                "is_valid": result.is_valid,
            },
        )
        return json_response(
            200,
            {
                "ticket_id": ticket.id,
                "is_valid": result.is_valid,
                "errors": result.errors,
                "valid_transitions": [s.value for s in engine.valid_transitions(ticket.status)],
                "correlation_id": correlation_id,
            },
        )
    except (AppError, ValueError) as exc:
        logger.warning(
            "Transition request rejected",
            extra={"correlation_id": correlation_id, "error": str(exc)},
        )
        return error_response(exc, correlation_id)
