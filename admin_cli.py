#!/usr/bin/env python3
"""
OpenAI Router Admin CLI

Local and operational tooling for the router Lambda.

Usage:
    admin_cli.py invoke "Hello there"            # Run the handler locally
    admin_cli.py invoke --raw-body '{"x": 1}'    # Send an arbitrary body
    admin_cli.py config                          # Show effective settings
    admin_cli.py parameter check                 # Verify the API key parameter
    admin_cli.py logs tail [--since=1h] [--lines=100]
"""

import json
import sys
import uuid
from datetime import datetime, timedelta
from types import SimpleNamespace
from typing import Any

import boto3
import click
from botocore.exceptions import ClientError, NoCredentialsError
from returns.result import Failure, Result, Success

from src.lambda_function import lambda_handler
from src.logging_config import configure_structlog
from src.settings import settings

DEFAULT_LOG_GROUP = "/aws/lambda/openai-router"


def build_proxy_event(body: str) -> dict[str, Any]:
    """Build a minimal API Gateway proxy event around a raw body."""
    return {
        "resource": "/",
        "path": "/",
        "httpMethod": "POST",
        "headers": {"Content-Type": "application/json"},
        "body": body,
        "isBase64Encoded": False,
    }


def local_context() -> SimpleNamespace:
    """Stand-in for the Lambda context object when running locally."""
    return SimpleNamespace(
        aws_request_id=f"local-{uuid.uuid4()}",
        function_name="openai-router-local",
    )


class AWSResourceManager:
    """Read-only access to the AWS resources the router depends on."""

    def __init__(self, region_name: str | None = None):
        self.region_name = region_name or settings.AWS_REGION
        self.session = boto3.Session()
        self._ssm = None
        self._logs = None

    @property
    def ssm(self):
        if self._ssm is None:
            self._ssm = self.session.client("ssm", region_name=self.region_name)
        return self._ssm

    @property
    def logs(self):
        if self._logs is None:
            self._logs = self.session.client("logs", region_name=self.region_name)
        return self._logs

    def describe_parameter(self, name: str) -> Result[dict[str, Any] | None, Exception]:
        """Look up parameter metadata. Never fetches the value."""
        try:
            response = self.ssm.describe_parameters(
                ParameterFilters=[{"Key": "Name", "Option": "Equals", "Values": [name]}]
            )
            parameters = response.get("Parameters", [])
            return Success(parameters[0] if parameters else None)
        except ClientError as e:
            return Failure(RuntimeError(f"SSM error: {e}"))
        except NoCredentialsError:
            return Failure(RuntimeError("AWS credentials not configured"))
        except Exception as e:
            return Failure(e)

    def get_logs(
        self, log_group: str, since_hours: float = 1, limit: int = 100
    ) -> Result[list[dict[str, Any]], Exception]:
        """Get CloudWatch log events for the Lambda function."""
        try:
            start_time = int(
                (datetime.now() - timedelta(hours=since_hours)).timestamp() * 1000
            )
            response = self.logs.filter_log_events(
                logGroupName=log_group,
                startTime=start_time,
                limit=limit,
            )
            return Success(response.get("events", []))
        except ClientError as e:
            return Failure(RuntimeError(f"CloudWatch error: {e}"))
        except NoCredentialsError:
            return Failure(RuntimeError("AWS credentials not configured"))
        except Exception as e:
            return Failure(e)


def parse_since(since: str) -> float | None:
    """Convert '30m', '1h' or '2d' into hours."""
    minutes_per_unit = {"m": 1, "h": 60, "d": 24 * 60}
    if len(since) < 2 or since[-1] not in minutes_per_unit or not since[:-1].isdigit():
        return None
    return int(since[:-1]) * minutes_per_unit[since[-1]] / 60


# CLI Commands
@click.group()
@click.option("--verbose", "-v", is_flag=True, help="Enable verbose logging")
def cli(verbose: bool):
    """OpenAI Router Admin CLI - invoke the handler and inspect its resources."""
    if verbose:
        configure_structlog(log_level="DEBUG")


@cli.command()
@click.argument("message", required=False)
@click.option("--raw-body", help="Send this body verbatim instead of MESSAGE")
def invoke(message: str | None, raw_body: str | None):
    """Run the Lambda handler locally with a synthetic API Gateway event."""
    if raw_body is None:
        if message is None:
            raise click.UsageError("Provide MESSAGE or --raw-body")
        raw_body = json.dumps({"gpt_message": message})

    response = lambda_handler(build_proxy_event(raw_body), local_context())

    click.echo(f"Status: {response['statusCode']}")
    click.echo(response["body"])

    if response["statusCode"] != 200:
        sys.exit(1)


@cli.command()
def config():
    """Show the effective (secret-free) settings."""
    click.echo(repr(settings))


@cli.group()
def parameter():
    """API key parameter commands."""
    pass


@parameter.command("check")
@click.option("--name", default=None, help="Parameter name (defaults to settings)")
def parameter_check(name: str | None):
    """Verify that the API key parameter exists and is encrypted."""
    name = name or settings.OPENAI_API_KEY_PARAMETER
    aws = AWSResourceManager()

    match aws.describe_parameter(name):
        case Success(None):
            click.echo(f"Parameter {name} not found.", err=True)
            sys.exit(1)

        case Success(metadata):
            param_type = metadata.get("Type", "Unknown")
            click.echo(f"{name} | {param_type} | version {metadata.get('Version', '?')}")
            if param_type != "SecureString":
                click.echo("Warning: parameter is not a SecureString", err=True)

        case Failure(error):
            click.echo(f"Error checking parameter: {error}", err=True)
            sys.exit(1)


@cli.group()
def logs():
    """CloudWatch logs management."""
    pass


@logs.command("tail")
@click.option("--log-group", default=DEFAULT_LOG_GROUP, help="CloudWatch log group")
@click.option("--since", default="1h", help="Time range (e.g., 1h, 30m, 2d)")
@click.option("--lines", default=100, help="Number of lines to show")
def logs_tail(log_group: str, since: str, lines: int):
    """Show recent log events from the router function."""
    since_hours = parse_since(since)
    if since_hours is None:
        click.echo(
            "Invalid --since format. Use format like '1h', '30m', '2d'", err=True
        )
        sys.exit(1)

    aws = AWSResourceManager()

    match aws.get_logs(log_group, since_hours=since_hours, limit=lines):
        case Success(events):
            if not events:
                click.echo("No log events found.")
                return

            for event in events[-lines:]:
                timestamp = datetime.fromtimestamp(event["timestamp"] / 1000)
                click.echo(f"{timestamp.isoformat()} | {event['message'].strip()}")

        case Failure(error):
            click.echo(f"Error getting logs: {error}", err=True)
            sys.exit(1)


if __name__ == "__main__":
    cli()
