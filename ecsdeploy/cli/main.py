"""Main CLI entrypoint for ecsdeploy."""

import json
import logging
import os
import sys
from typing import Any, Dict, Optional

import boto3
import click
from botocore.exceptions import BotoCoreError, ClientError

from ..config import DeployConfig
from ..errors import DeployError, RegistrationError
from ..orchestrator import deploy

logger = logging.getLogger(__name__)


def _input_envvar(name: str) -> str:
    """Environment variable a CI action runner sets for an input."""
    return f"INPUT_{name.upper()}"


def _json_output(data: Dict[str, Any]) -> None:
    """Output data as JSON."""
    print(json.dumps(data, indent=None))


def _write_output(name: str, value: str) -> None:
    """Publish a run output for the CI runner and the operator."""
    output_file = os.environ.get("GITHUB_OUTPUT")
    if output_file:
        with open(output_file, "a") as f:
            f.write(f"{name}={value}\n")
    if not click.get_current_context().obj.get('json', False):
        click.echo(f"{name}={value}")


def _fail(messages, output_json: bool) -> None:
    if output_json:
        _json_output({'error': messages[0], 'details': messages[1:]})
    else:
        for message in messages:
            click.echo(f"❌ {message}", err=True)
    sys.exit(1)


def _setup_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(message)s",
        stream=sys.stderr,
    )
    # botocore is very chatty at DEBUG
    logging.getLogger("botocore").setLevel(logging.WARNING)


@click.group()
@click.option('--json', 'output_json', is_flag=True, help='Output machine-readable JSON')
@click.option('--verbose', '-v', is_flag=True, help='Enable debug logging')
@click.pass_context
def main(ctx, output_json, verbose):
    """ecsdeploy - register an ECS task definition and roll it out."""
    ctx.ensure_object(dict)
    ctx.obj['json'] = output_json
    _setup_logging(verbose)


@main.command(name='deploy')
@click.option('--task-definition', envvar=_input_envvar('task-definition'), required=True,
              help='Path to the task definition file (JSON or YAML)')
@click.option('--service', envvar=_input_envvar('service'), default=None,
              help='Service to update; registration only when omitted')
@click.option('--cluster', envvar=_input_envvar('cluster'), default=None,
              help='Cluster name (default: "default")')
@click.option('--wait-for-service-stability', envvar=_input_envvar('wait-for-service-stability'),
              default=None, help='"true" to wait until the rollout is stable')
@click.option('--wait-for-minutes', envvar=_input_envvar('wait-for-minutes'), default=None,
              help='Whole minutes to wait for stability (default 30, max 360); '
                   'anything else falls back to the default')
@click.option('--force-new-deployment', envvar=_input_envvar('force-new-deployment'), default=None,
              help='"true" to force a new deployment of the service')
@click.option('--desired-count', envvar=_input_envvar('desired-count'), default=None,
              help='Whole number of tasks to run; anything else leaves the count unchanged')
@click.option('--codedeploy-appspec', envvar=_input_envvar('codedeploy-appspec'), default=None,
              help='AppSpec file for CodeDeploy deployments')
@click.option('--codedeploy-application', envvar=_input_envvar('codedeploy-application'), default=None,
              help='CodeDeploy application name')
@click.option('--codedeploy-deployment-group', envvar=_input_envvar('codedeploy-deployment-group'),
              default=None, help='CodeDeploy deployment group name')
@click.option('--codedeploy-deployment-description',
              envvar=_input_envvar('codedeploy-deployment-description'), default=None,
              help='Description for the CodeDeploy deployment')
@click.option('--codedeploy-deployment-config', envvar=_input_envvar('codedeploy-deployment-config'),
              default=None, help='CodeDeploy deployment configuration name')
@click.option('--workspace', envvar='GITHUB_WORKSPACE', default=None,
              help='Root for relative paths (default: current directory)')
@click.option('--region', envvar=['AWS_REGION', 'AWS_DEFAULT_REGION'], default=None, help='AWS region')
@click.pass_context
def deploy_cmd(ctx, task_definition, service, cluster, wait_for_service_stability, wait_for_minutes,
               force_new_deployment, desired_count, codedeploy_appspec, codedeploy_application,
               codedeploy_deployment_group, codedeploy_deployment_description,
               codedeploy_deployment_config, workspace, region):
    """Register a task definition and deploy it to a service."""
    output_json = ctx.obj.get('json', False)

    try:
        config = DeployConfig.from_inputs(
            task_definition=task_definition,
            service=service,
            cluster=cluster,
            wait_for_service_stability=wait_for_service_stability,
            wait_for_minutes=wait_for_minutes,
            force_new_deployment=force_new_deployment,
            desired_count=desired_count,
            codedeploy_appspec=codedeploy_appspec,
            codedeploy_application=codedeploy_application,
            codedeploy_deployment_group=codedeploy_deployment_group,
            codedeploy_deployment_description=codedeploy_deployment_description,
            codedeploy_deployment_config=codedeploy_deployment_config,
            workspace=workspace,
        )
    except ValueError as e:
        _fail([str(e)], output_json)

    try:
        ecs_client, codedeploy_client = _make_clients(region)
        result = deploy(config, ecs_client, codedeploy_client, emit_output=_write_output)
    except RegistrationError as e:
        _fail([str(e), e.cause_message], output_json)
    except (DeployError, ClientError, BotoCoreError) as e:
        _fail([str(e)], output_json)

    if output_json:
        _json_output({
            'task_definition_arn': result.task_definition_arn,
            'mechanism': result.mechanism.name if result.mechanism else None,
            'deployment_id': result.deployment_id,
            'waited': result.waited,
        })


def _make_clients(region: Optional[str]):
    """Create the ECS and CodeDeploy clients for one run."""
    return (
        boto3.client('ecs', region_name=region),
        boto3.client('codedeploy', region_name=region),
    )
