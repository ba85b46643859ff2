"""DynamoDB repository for per-priority SLA policies."""

from decimal import Decimal
from typing import Any, Dict, List

import boto3

from models.ticket import Priority
from utils.logging_config import get_logger

logger = get_logger(__name__)


class SlaPolicyRepository:
    """Read and write SLA targets keyed by priority."""

    def __init__(self, table_name: str):
        self.table = boto3.resource("dynamodb").Table(table_name)

    def list_policies(self) -> List[Dict[str, Any]]:
        """Scan the (tiny) policy table, following pagination."""
        items: List[Dict[str, Any]] = []
        kwargs: Dict[str, Any] = {}
        while True:
            resp = self.table.scan(**kwargs)
            items.extend(resp.get("Items", []))
            last_key = resp.get("LastEvaluatedKey")
            if not last_key:
                return items
            kwargs["ExclusiveStartKey"] = last_key

    def load_targets(self) -> Dict[str, float]:
        """Return priority -> target hours, skipping unknown or malformed rows."""
        known = {p.value for p in Priority}
        targets: Dict[str, float] = {}
        for item in self.list_policies():
            priority = item.get("priority")
            hours = item.get("target_hours")
            if priority not in known or hours is None:
                logger.warning("Skipping SLA policy row", extra={"item": str(item)})
                continue
            targets[priority] = float(hours)
        return targets

    def put_target(self, priority: Priority, target_hours: float) -> None:
        self.table.put_item(
            Item={"priority": priority.value, "target_hours": Decimal(str(target_hours))}
        )
