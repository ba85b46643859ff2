"""
Data layer construct: DynamoDB table holding per-priority SLA policies.
"""

from aws_cdk import (
    RemovalPolicy,
    aws_dynamodb as dynamodb,
)
from constructs import Construct


class DataLayerConstruct(Construct):
    """Provision the SLA policy table."""

    def __init__(
        self,
        scope: Construct,
        construct_id: str,
        *,
        environment: str,
    ) -> None:
        super().__init__(scope, construct_id)

        # One item per priority: {"priority": "Critical", "target_hours": 4}.
        self.sla_policy_table = dynamodb.Table(
            self,
            "SlaPolicies",
            partition_key=dynamodb.Attribute(
                name="priority", type=dynamodb.AttributeType.STRING
            ),
            billing_mode=dynamodb.BillingMode.PAY_PER_REQUEST,
            point_in_time_recovery=environment == "prod",
            removal_policy=RemovalPolicy.RETAIN if environment == "prod" else RemovalPolicy.DESTROY,
        )
