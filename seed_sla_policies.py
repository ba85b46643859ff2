#!/usr/bin/env python3
"""Seed the SLA policy table with the default per-priority targets."""

import os
import sys
from pathlib import Path

import boto3

sys.path.insert(0, str(Path(__file__).resolve().parent / "src"))

from models.ticket import Priority  # noqa: E402
from models.workflow import DEFAULT_SLA_TARGETS  # noqa: E402
from repositories.sla_policy_repo import SlaPolicyRepository  # noqa: E402


def main():
    environment = os.environ.get("ENVIRONMENT", "dev")
    region = os.environ.get("AWS_REGION", "eu-west-2")

    # Get table name from CloudFormation
    cf = boto3.client('cloudformation', region_name=region)
    try:
        resp = cf.describe_stacks(StackName=f'HelpdeskWorkflowStack-{environment}')
        outputs = {o['OutputKey']: o['OutputValue'] for o in resp['Stacks'][0]['Outputs']}
        table_name = outputs['SlaPolicyTable']
    except Exception as e:
        print(f"Error getting SLA policy table: {e}")
        sys.exit(1)

    print(f"Seeding SLA policies into: {table_name}")
    repo = SlaPolicyRepository(table_name)
    for priority in Priority:
        hours = DEFAULT_SLA_TARGETS[priority.value]
        repo.put_target(priority, hours)
        print(f"  {priority.value}: {hours}h")


if __name__ == "__main__":
    main()
