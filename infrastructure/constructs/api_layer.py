"""
API layer construct: the workflow Lambda + HTTP API routes.

A single Lambda keeps the workflow config cache warm across every route.
"""

from aws_cdk import (
    BundlingOptions,
    Duration,
    aws_lambda as _lambda,
    aws_apigatewayv2 as apigw,
    aws_apigatewayv2_integrations as integrations,
    aws_logs as logs,
)
from constructs import Construct


ROUTES = [
    (apigw.HttpMethod.GET, "/health"),
    (apigw.HttpMethod.GET, "/sla/targets"),
    (apigw.HttpMethod.POST, "/tickets/evaluate"),
    (apigw.HttpMethod.POST, "/tickets/{id}/transition"),
    (apigw.HttpMethod.POST, "/tickets/analytics/aging"),
    (apigw.HttpMethod.POST, "/tickets/analytics/sla-adherence"),
]


class ApiLayerConstruct(Construct):
    """Expose the workflow engine via HTTP API."""

    def __init__(
        self,
        scope: Construct,
        construct_id: str,
        *,
        environment: str,
        sla_policy_table_name: str,
        log_level: str = "INFO",
        config_cache_ttl_seconds: int = 300,
        sla_targets_override: str = "",
        cors_origins: list = None,
        lambda_memory_mb: int = 256,
        lambda_timeout_seconds: int = 10,
    ) -> None:
        super().__init__(scope, construct_id)

        # Powertools layer supplies pydantic and boto3 extras.
        powertools_layer = _lambda.LayerVersion.from_layer_version_arn(
            self,
            "PowertoolsLayer",
            f"arn:aws:lambda:{scope.region}:017000801446:layer:AWSLambdaPowertoolsPythonV3-python312-x86:7"
        )

        bundled_code = _lambda.Code.from_asset(
            "src",
            bundling=BundlingOptions(
                image=_lambda.Runtime.PYTHON_3_12.bundling_image,
                command=[
                    "bash", "-c",
                    "pip install -r requirements-lambda.txt -t /asset-output && "
                    "cp -r . /asset-output"
                ],
            ),
        )

        environment_vars = {
            "ENVIRONMENT": environment,
            "SLA_POLICY_TABLE": sla_policy_table_name,
            "LOG_LEVEL": log_level,
            "CONFIG_CACHE_TTL_SECONDS": str(config_cache_ttl_seconds),
        }
        if sla_targets_override:
            environment_vars["SLA_TARGETS"] = sla_targets_override

        self.main_lambda = _lambda.Function(
            self,
            "WorkflowHandler",
            runtime=_lambda.Runtime.PYTHON_3_12,
            handler="handlers.main.lambda_handler",
            code=bundled_code,
            layers=[powertools_layer],
            memory_size=lambda_memory_mb,
            timeout=Duration.seconds(lambda_timeout_seconds),
            architecture=_lambda.Architecture.X86_64,
            environment=environment_vars,
            log_retention=logs.RetentionDays.ONE_WEEK,
        )

        self.api = apigw.HttpApi(
            self,
            "HttpApi",
            api_name=f"helpdesk-workflow-api-{environment}",
            cors_preflight=apigw.CorsPreflightOptions(
                allow_origins=cors_origins or ["*"],
                allow_methods=[apigw.CorsHttpMethod.GET, apigw.CorsHttpMethod.POST],
                allow_headers=["Content-Type", "Authorization"],
            ),
        )

        integration = integrations.HttpLambdaIntegration(
            "LambdaIntegration", self.main_lambda
        )

        for method, path in ROUTES:
            self.api.add_routes(
                path=path,
                methods=[method],
                integration=integration,
            )
