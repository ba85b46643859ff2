"""
Single entrypoint Lambda that routes HTTP API requests to thin handler modules.

Dashboards call one function URL for every workflow question; keeping a single
Lambda also keeps the workflow config cache warm across routes.
"""

from typing import Callable, Tuple

from . import health_check, sla_targets, ticket_analytics, ticket_evaluation, ticket_transition
from utils.responses import json_response


def lambda_handler(event, context):
    """
    Entry point invoked by API Gateway HTTP API.

    Matches "<METHOD> <path>" exactly, then the parameterised transition route.
    """
    method = event.get("requestContext", {}).get("http", {}).get("method", "")
    path = event.get("requestContext", {}).get("http", {}).get("path", "")
    route_key = f"{method.upper()} {path.rstrip('/') or '/'}"

    route_table: Tuple[Tuple[str, Callable], ...] = (
        ("GET /health", health_check.lambda_handler),
        ("GET /sla/targets", sla_targets.lambda_handler),
        ("POST /tickets/evaluate", ticket_evaluation.lambda_handler),
        ("POST /tickets/analytics/aging", ticket_analytics.aging_handler),
        ("POST /tickets/analytics/sla-adherence", ticket_analytics.sla_adherence_handler),
    )

    for route, handler in route_table:
        if route_key == route:
            return handler(event, context)

    # POST /tickets/{id}/transition
    if route_key.startswith("POST /tickets/") and route_key.endswith("/transition"):
        return ticket_transition.lambda_handler(event, context)

    return json_response(404, {"message": "Route not found", "route": route_key})
