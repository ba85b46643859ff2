"""
Main CDK Stack for the helpdesk workflow service.
"""

from aws_cdk import (
    Stack,
    Tags,
    CfnOutput,
)
from constructs import Construct

from infrastructure.constructs.data_layer import DataLayerConstruct
from infrastructure.constructs.api_layer import ApiLayerConstruct
from infrastructure.config.settings import Settings


class HelpdeskWorkflowStack(Stack):
    """Stack wiring the SLA policy table to the workflow API."""

    def __init__(
        self,
        scope: Construct,
        construct_id: str,
        *,
        settings: Settings,
        **kwargs,
    ) -> None:
        super().__init__(scope, construct_id, **kwargs)

        Tags.of(self).add("Project", "helpdesk-workflow")
        Tags.of(self).add("Environment", settings.environment)
        Tags.of(self).add("ManagedBy", "cdk")

        data_construct = DataLayerConstruct(
            self,
            "DataLayer",
            environment=settings.environment,
        )

        api_construct = ApiLayerConstruct(
            self,
            "ApiLayer",
            environment=settings.environment,
            sla_policy_table_name=data_construct.sla_policy_table.table_name,
            log_level=settings.log_level,
            config_cache_ttl_seconds=settings.config_cache_ttl_seconds,
            sla_targets_override=settings.sla_targets_override,
            cors_origins=settings.cors_origins,
            lambda_memory_mb=settings.lambda_memory_mb,
            lambda_timeout_seconds=settings.lambda_timeout_seconds,
        )

        # Policies are read at runtime; edits go through the console or scripts.
        data_construct.sla_policy_table.grant_read_data(api_construct.main_lambda)

        CfnOutput(self, "ApiEndpoint", value=api_construct.api.api_endpoint)
        CfnOutput(self, "SlaPolicyTable", value=data_construct.sla_policy_table.table_name)
