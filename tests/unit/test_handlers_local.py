"""
Local handler tests.

Handlers are invoked with API Gateway HTTP API shaped events; no AWS access
is needed because no SLA policy table is configured.

Run with: pytest tests/unit/test_handlers_local.py -v
"""

import base64
import json
from datetime import datetime, timedelta, timezone
from unittest.mock import patch

import pytest

NOW = datetime(2026, 3, 2, 12, 0, tzinfo=timezone.utc)


def _ticket(ticket_id="TCK-1", hours_ago=1.0, **overrides):
    payload = {
        "id": ticket_id,
        "title": "Laptop will not boot",
        "description": "Stuck on the vendor logo",
        "status": "Open",
        "priority": "Medium",
        "created_at": (NOW - timedelta(hours=hours_ago)).isoformat(),
        "created_by": "user-7",
        "assigned_to": "agent-3",
    }
    payload.update(overrides)
    return payload


def _event(method, path, body=None, path_parameters=None):
    event = {"requestContext": {"http": {"method": method, "path": path}}}
    if body is not None:
        event["body"] = json.dumps(body)
    if path_parameters:
        event["pathParameters"] = path_parameters
    return event


class TestHealthCheckHandler:
    """Test the health check endpoint."""

    def test_health_check_returns_200(self):
        from handlers.health_check import lambda_handler

        result = lambda_handler({}, None)

        assert result["statusCode"] == 200
        body = json.loads(result["body"])
        assert body["status"] == "ok"
        assert body["service"] == "helpdesk-workflow"
        assert "timestamp" in body

    def test_health_check_includes_environment(self):
        from handlers.health_check import lambda_handler

        with patch.dict("os.environ", {"ENVIRONMENT": "test"}):
            body = json.loads(lambda_handler({}, None)["body"])
        assert body["environment"] == "test"


class TestSlaTargetsHandler:
    def test_default_targets(self):
        from handlers.sla_targets import lambda_handler

        result = lambda_handler(_event("GET", "/sla/targets"), None)

        assert result["statusCode"] == 200
        body = json.loads(result["body"])
        assert body["sla_targets"] == {"Critical": 4, "High": 8, "Medium": 24, "Low": 72}
        assert body["default_sla_hours"] == 24

    def test_environment_override(self, monkeypatch):
        from handlers.sla_targets import lambda_handler

        monkeypatch.setenv("SLA_TARGETS", '{"High": 6}')
        body = json.loads(lambda_handler(_event("GET", "/sla/targets"), None)["body"])
        assert body["sla_targets"]["High"] == 6

    @patch("services.config_service.SlaPolicyRepository")
    def test_table_unreachable_falls_back_to_defaults(self, mock_repo_cls, monkeypatch):
        from botocore.exceptions import NoRegionError

        from handlers.sla_targets import lambda_handler

        monkeypatch.setenv("SLA_POLICY_TABLE", "sla-policies")
        mock_repo_cls.side_effect = NoRegionError()
        result = lambda_handler(_event("GET", "/sla/targets"), None)

        assert result["statusCode"] == 200
        assert json.loads(result["body"])["sla_targets"]["Critical"] == 4

    def test_bad_configuration_returns_500(self, monkeypatch):
        from handlers.sla_targets import lambda_handler

        monkeypatch.setenv("SLA_TARGETS", "{broken")
        result = lambda_handler(_event("GET", "/sla/targets"), None)

        assert result["statusCode"] == 500
        assert "correlation_id" in json.loads(result["body"])


class TestTicketEvaluationHandler:
    def test_single_ticket(self):
        from handlers.ticket_evaluation import lambda_handler

        body = {
            "ticket": _ticket(hours_ago=5, priority="Critical", assigned_to=None),
            "now": NOW.isoformat(),
        }
        result = lambda_handler(_event("POST", "/tickets/evaluate", body), None)

        assert result["statusCode"] == 200
        evaluation = json.loads(result["body"])["evaluation"]
        assert evaluation["ticket_id"] == "TCK-1"
        assert evaluation["sla_violated"] is True
        assert evaluation["sla_target_hours"] == 4
        assert evaluation["aging"] == {"range_label": "0-24 hours", "severity": "low"}
        assert evaluation["valid_transitions"] == ["Pending", "Closed"]
        assert evaluation["escalation_rules"] == [
            {"kind": "escalate", "reason": "Critical ticket open > 2 hours"},
        ]
        assert evaluation["should_auto_assign"] is True

    def test_ticket_batch(self):
        from handlers.ticket_evaluation import lambda_handler

        body = {
            "tickets": [_ticket("A", hours_ago=1), _ticket("B", hours_ago=30, status="Closed")],
            "now": NOW.isoformat(),
        }
        result = lambda_handler(_event("POST", "/tickets/evaluate", body), None)

        payload = json.loads(result["body"])
        assert result["statusCode"] == 200
        assert payload["count"] == 2
        assert [e["ticket_id"] for e in payload["evaluations"]] == ["A", "B"]
        assert payload["evaluations"][1]["sla_violated"] is False

    def test_base64_body(self):
        from handlers.ticket_evaluation import lambda_handler

        raw = json.dumps({"ticket": _ticket(), "now": NOW.isoformat()}).encode()
        event = {
            "requestContext": {"http": {"method": "POST", "path": "/tickets/evaluate"}},
            "body": base64.b64encode(raw).decode(),
            "isBase64Encoded": True,
        }
        assert lambda_handler(event, None)["statusCode"] == 200

    def test_missing_ticket_returns_422(self):
        from handlers.ticket_evaluation import lambda_handler

        result = lambda_handler(_event("POST", "/tickets/evaluate", {"foo": 1}), None)

        assert result["statusCode"] == 422
        assert "ticket or tickets is required" in json.loads(result["body"])["message"]

    def test_invalid_ticket_returns_422(self):
        from handlers.ticket_evaluation import lambda_handler

        body = {"ticket": _ticket(status="Resolved")}
        result = lambda_handler(_event("POST", "/tickets/evaluate", body), None)

        assert result["statusCode"] == 422
        payload = json.loads(result["body"])
        assert payload["errors"]
        assert "correlation_id" in payload

    def test_malformed_json_returns_400(self):
        from handlers.ticket_evaluation import lambda_handler

        event = _event("POST", "/tickets/evaluate")
        event["body"] = "{not json"
        result = lambda_handler(event, None)

        assert result["statusCode"] == 400


class TestTicketTransitionHandler:
    def test_valid_transition(self):
        from handlers.ticket_transition import lambda_handler

        body = {
            "ticket": _ticket(status="Open"),
            "proposed_status": "Pending",
            "acting_role": "Technical User",
        }
        event = _event("POST", "/tickets/TCK-1/transition", body, {"id": "TCK-1"})
        result = lambda_handler(event, None)

        assert result["statusCode"] == 200
        payload = json.loads(result["body"])
        assert payload["is_valid"] is True
        assert payload["errors"] == []
        assert payload["valid_transitions"] == ["Pending", "Closed"]

    def test_invalid_transition_is_data_not_error(self):
        from handlers.ticket_transition import lambda_handler

        body = {
            "ticket": _ticket(status="New"),
            "proposed_status": "Pending",
            "acting_role": "Technical User",
        }
        result = lambda_handler(_event("POST", "/tickets/TCK-1/transition", body), None)

        assert result["statusCode"] == 200
        payload = json.loads(result["body"])
        assert payload["is_valid"] is False
        assert payload["errors"] == ["cannot transition from New to Pending"]

    def test_normal_user_close_rule(self):
        from handlers.ticket_transition import lambda_handler

        body = {
            "ticket": _ticket(status="Open"),
            "proposed_status": "Closed",
            "acting_role": "Normal User",
        }
        payload = json.loads(
            lambda_handler(_event("POST", "/tickets/TCK-1/transition", body), None)["body"]
        )
        assert payload["errors"] == ["only the assigned agent may close this ticket"]

    def test_path_id_mismatch_returns_422(self):
        from handlers.ticket_transition import lambda_handler

        body = {
            "ticket": _ticket("TCK-1"),
            "proposed_status": "Pending",
            "acting_role": "Technical User",
        }
        result = lambda_handler(_event("POST", "/tickets/TCK-9/transition", body), None)

        assert result["statusCode"] == 422

    def test_unknown_status_returns_422(self):
        from handlers.ticket_transition import lambda_handler

        body = {
            "ticket": _ticket(),
            "proposed_status": "Resolved",
            "acting_role": "Technical User",
        }
        result = lambda_handler(_event("POST", "/tickets/TCK-1/transition", body), None)

        assert result["statusCode"] == 422
        assert "Unknown status" in json.loads(result["body"])["message"]

    @pytest.mark.parametrize("missing", ["ticket", "proposed_status", "acting_role"])
    def test_missing_fields_return_422(self, missing):
        from handlers.ticket_transition import lambda_handler

        body = {
            "ticket": _ticket(),
            "proposed_status": "Pending",
            "acting_role": "Technical User",
        }
        del body[missing]
        result = lambda_handler(_event("POST", "/tickets/TCK-1/transition", body), None)

        assert result["statusCode"] == 422
        assert missing in json.loads(result["body"])["message"]


class TestAnalyticsHandlers:
    def _tickets(self):
        return [
            _ticket("A", hours_ago=2, priority="Critical"),
            _ticket("B", hours_ago=30, priority="Medium"),
            _ticket("C", hours_ago=80, priority="Low", status="Closed"),
        ]

    def test_aging(self):
        from handlers.ticket_analytics import aging_handler

        body = {"tickets": self._tickets(), "now": NOW.isoformat()}
        result = aging_handler(_event("POST", "/tickets/analytics/aging", body), None)

        assert result["statusCode"] == 200
        payload = json.loads(result["body"])
        assert list(payload["buckets"]) == [
            "0-24 hours", "24-48 hours", "48-72 hours", "72+ hours",
        ]
        assert payload["buckets"]["0-24 hours"]["count"] == 1
        assert payload["buckets"]["24-48 hours"]["tickets"][0]["id"] == "B"
        assert payload["buckets"]["72+ hours"]["severity"] == "critical"
        assert payload["total_open"] == 2

    def test_sla_adherence(self):
        from handlers.ticket_analytics import sla_adherence_handler

        body = {"tickets": self._tickets(), "now": NOW.isoformat()}
        result = sla_adherence_handler(
            _event("POST", "/tickets/analytics/sla-adherence", body), None
        )

        assert result["statusCode"] == 200
        payload = json.loads(result["body"])
        assert payload["open_tickets"] == 2
        assert payload["open_violated"] == 1
        assert payload["adherence_percentage"] == 50.0
        assert payload["priority_breakdown"]["Medium"]["violated_sla"] == 1

    def test_missing_tickets_returns_422(self):
        from handlers.ticket_analytics import aging_handler

        result = aging_handler(_event("POST", "/tickets/analytics/aging", {}), None)

        assert result["statusCode"] == 422
