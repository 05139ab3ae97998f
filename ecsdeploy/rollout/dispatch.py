"""
Rollout of a registered task definition to an ECS service.

Services on the ECS deployment controller get an in-place ``UpdateService``;
services on the CODE_DEPLOY controller get a blue/green CodeDeploy deployment
with an inline AppSpec.
"""

import logging
from typing import Any, Dict, Optional

from ..config import DeployConfig
from ..obs import ConsoleLinkBuilder
from ..service import RolloutMechanism, ServiceDescriptor
from .appspec import build_manifest
from .wait import (
    DeploymentTarget,
    ServiceTarget,
    StabilityWaiter,
    rolling_update_budget,
    staged_deployment_budget,
)

logger = logging.getLogger(__name__)

# Prefix used by the ECS console when it creates CodeDeploy resources
CODE_DEPLOY_NAME_PREFIX = "ECS"


def default_application_name(cluster: str, service: str) -> str:
    return f"App{CODE_DEPLOY_NAME_PREFIX}-{cluster}-{service}"


def default_deployment_group_name(cluster: str, service: str) -> str:
    return f"Dgp{CODE_DEPLOY_NAME_PREFIX}-{cluster}-{service}"


def _region_of(client) -> str:
    return client.meta.region_name


class RolloutDispatcher:
    """Sends a new revision to a service through the right mechanism."""

    def __init__(self, ecs_client, codedeploy_client=None, waiter: Optional[StabilityWaiter] = None):
        self.ecs = ecs_client
        self.codedeploy = codedeploy_client
        self.waiter = waiter or StabilityWaiter()

    def dispatch(
        self,
        descriptor: ServiceDescriptor,
        task_definition_arn: str,
        config: DeployConfig,
    ) -> Optional[str]:
        """
        Roll out according to the classified mechanism.

        Returns:
            The CodeDeploy deployment id for staged deployments, else None
        """
        if descriptor.mechanism is RolloutMechanism.ROLLING_UPDATE:
            self.update_service(
                cluster=descriptor.cluster,
                service=descriptor.service,
                task_definition_arn=task_definition_arn,
                desired_count=config.desired_count,
                force_new_deployment=config.force_new_deployment,
                wait=config.wait_for_service_stability,
                wait_minutes=config.wait_for_minutes,
            )
            return None

        appspec_path = None
        if config.codedeploy_appspec:
            appspec_path = config.resolve_path(config.codedeploy_appspec)
        content, digest = build_manifest(appspec_path, task_definition_arn)

        return self.create_deployment(
            application_name=config.codedeploy_application
            or default_application_name(descriptor.cluster, descriptor.service),
            deployment_group_name=config.codedeploy_deployment_group
            or default_deployment_group_name(descriptor.cluster, descriptor.service),
            content=content,
            digest=digest,
            description=config.codedeploy_deployment_description,
            deployment_config_name=config.codedeploy_deployment_config,
            wait=config.wait_for_service_stability,
            wait_minutes=config.wait_for_minutes,
        )

    def update_service(
        self,
        cluster: str,
        service: str,
        task_definition_arn: str,
        desired_count: Optional[int] = None,
        force_new_deployment: bool = False,
        wait: bool = False,
        wait_minutes: Optional[int] = None,
    ) -> None:
        """Update the service in place, optionally waiting for steady state."""
        params: Dict[str, Any] = {
            "cluster": cluster,
            "service": service,
            "taskDefinition": task_definition_arn,
            "forceNewDeployment": force_new_deployment,
        }
        if desired_count is not None:
            params["desiredCount"] = desired_count

        self.ecs.update_service(**params)

        links = ConsoleLinkBuilder(_region_of(self.ecs))
        logger.info(links.ecs_deployment_message(cluster, service))

        if wait:
            budget = rolling_update_budget(wait_minutes)
            self.waiter.wait(ServiceTarget(self.ecs, cluster, service), budget)

    def create_deployment(
        self,
        application_name: str,
        deployment_group_name: str,
        content: str,
        digest: str,
        description: Optional[str] = None,
        deployment_config_name: Optional[str] = None,
        wait: bool = False,
        wait_minutes: Optional[int] = None,
    ) -> str:
        """
        Start a CodeDeploy blue/green deployment with inline AppSpec content.

        Returns:
            The deployment id
        """
        if self.codedeploy is None:
            raise ValueError("A CodeDeploy client is required for CODE_DEPLOY services")

        params: Dict[str, Any] = {
            "applicationName": application_name,
            "deploymentGroupName": deployment_group_name,
            "revision": {
                "revisionType": "AppSpecContent",
                "appSpecContent": {
                    "content": content,
                    "sha256": digest,
                },
            },
        }
        if deployment_config_name:
            params["deploymentConfigName"] = deployment_config_name
        if description:
            params["description"] = description

        response = self.codedeploy.create_deployment(**params)
        deployment_id = response["deploymentId"]

        links = ConsoleLinkBuilder(_region_of(self.codedeploy))
        logger.info(links.codedeploy_deployment_message(deployment_id))

        if wait:
            group = self.codedeploy.get_deployment_group(
                applicationName=application_name,
                deploymentGroupName=deployment_group_name,
            )
            budget = staged_deployment_budget(wait_minutes, group.get("deploymentGroupInfo"))
            self.waiter.wait(DeploymentTarget(self.codedeploy, deployment_id), budget)

        return deployment_id
