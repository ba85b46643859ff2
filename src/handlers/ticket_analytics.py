"""
Dashboard analytics handlers.

POST /tickets/analytics/aging and POST /tickets/analytics/sla-adherence take
``{"tickets": [...], "now"?: ...}`` and roll the workflow rules up across the
collection.
"""

from __future__ import annotations

import uuid

from models.ticket import TicketBatch
from utils.error_handling import AppError
from utils.logging_config import get_logger
from utils.responses import error_response, json_response, parse_body
from utils.validators import require_fields

logger = get_logger(__name__)


def _get_analytics_service():
    from services.analytics_service import AnalyticsService
    from services.config_service import get_workflow_engine

    return AnalyticsService(engine=get_workflow_engine())


def _parse_batch(event) -> TicketBatch:
    payload = parse_body(event)
    require_fields(payload, "tickets")
    return TicketBatch.model_validate(payload)


def aging_handler(event, context):
    correlation_id = str(uuid.uuid4())
    try:
        batch = _parse_batch(event)
        report = _get_analytics_service().aging_distribution(batch.tickets, batch.now)
        body = {
            "buckets": {
                item.bucket.range_label: {
                    "severity": item.bucket.severity.value,
                    "count": item.count,
                    "tickets": [t.model_dump(mode="json") for t in item.tickets],
                }
                for item in report.buckets
            },
            "total_open": report.total,
            "correlation_id": correlation_id,
        }
        return json_response(200, body)
    except (AppError, ValueError) as exc:
        logger.warning(
            "Aging analysis rejected",
            extra={"correlation_id": correlation_id, "error": str(exc)},
        )
        return error_response(exc, correlation_id)


def sla_adherence_handler(event, context):
    correlation_id = str(uuid.uuid4())
    try:
        batch = _parse_batch(event)
        report = _get_analytics_service().sla_adherence(batch.tickets, batch.now)
        body = report.model_dump(mode="json")
        body["correlation_id"] = correlation_id
        return json_response(200, body)
    except (AppError, ValueError) as exc:
        logger.warning(
            "SLA adherence rejected",
            extra={"correlation_id": correlation_id, "error": str(exc)},
        )
        return error_response(exc, correlation_id)
