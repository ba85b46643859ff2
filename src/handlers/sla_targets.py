"""GET /sla/targets: the SLA targets dashboards display next to adherence charts."""

from __future__ import annotations

import uuid

from utils.error_handling import AppError
from utils.logging_config import get_logger
from utils.responses import error_response, json_response

logger = get_logger(__name__)


def lambda_handler(event, context):
    correlation_id = str(uuid.uuid4())
    try:
        from services.config_service import get_config_service

        config = get_config_service().load()
    except AppError as exc:
        logger.exception("Loading SLA targets failed", extra={"correlation_id": correlation_id})
        return error_response(exc, correlation_id)

    return json_response(
        200,
        {
            "sla_targets": config.sla_targets,
            "default_sla_hours": config.default_sla_hours,
            "correlation_id": correlation_id,
        },
    )
