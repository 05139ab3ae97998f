"""
Main orchestrator for a task definition deployment.
"""

import logging
from dataclasses import dataclass
from typing import Callable, Optional

from .config import DeployConfig
from .rollout import RolloutDispatcher, StabilityWaiter
from .service import RolloutMechanism, ServiceInspector
from .taskdef import TaskDefinitionRegistrar, load_task_definition, sanitize

logger = logging.getLogger(__name__)

TASK_DEFINITION_ARN_OUTPUT = "task-definition-arn"

OutputCallback = Callable[[str, str], None]


@dataclass
class DeployResult:
    """Outcome of a successful deployment run."""
    task_definition_arn: str
    mechanism: Optional[RolloutMechanism] = None
    deployment_id: Optional[str] = None
    waited: bool = False


def deploy(
    config: DeployConfig,
    ecs_client,
    codedeploy_client=None,
    emit_output: Optional[OutputCallback] = None,
    waiter: Optional[StabilityWaiter] = None,
) -> DeployResult:
    """
    Register a task definition and roll it out to the configured service.

    The task definition ARN is emitted through ``emit_output`` as soon as
    registration succeeds, so it is available even if a later stage fails.

    Args:
        config: Deployment configuration
        ecs_client: boto3 ECS client
        codedeploy_client: boto3 CodeDeploy client, needed for CODE_DEPLOY services
        emit_output: Called with (name, value) for each run output
        waiter: Stability waiter to use (defaults to a real-time waiter)

    Returns:
        DeployResult describing what was done

    Raises:
        DeployError: Subclass describing the failing stage
    """
    path = config.resolve_path(config.task_definition)
    document = sanitize(load_task_definition(path))

    revision = TaskDefinitionRegistrar(ecs_client).register(document)
    logger.info(f"Registered task definition {revision.arn}")
    if emit_output:
        emit_output(TASK_DEFINITION_ARN_OUTPUT, revision.arn)

    result = DeployResult(task_definition_arn=revision.arn)

    if not config.service:
        logger.debug("No service given, skipping service update")
        return result

    descriptor = ServiceInspector(ecs_client).describe(config.cluster, config.service)
    result.mechanism = descriptor.mechanism

    dispatcher = RolloutDispatcher(ecs_client, codedeploy_client, waiter)
    result.deployment_id = dispatcher.dispatch(descriptor, revision.arn, config)
    result.waited = config.wait_for_service_stability

    logger.info(f"Deployment of {revision.arn} to {config.service} finished")
    return result
