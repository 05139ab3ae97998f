"""
Service inspection and deployment controller classification.
"""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Optional

from ..errors import ServiceStateError

logger = logging.getLogger(__name__)

ACTIVE_STATUS = "ACTIVE"


class RolloutMechanism(Enum):
    """How a new revision reaches the service."""
    ROLLING_UPDATE = "ECS"
    STAGED_DEPLOYMENT = "CODE_DEPLOY"


@dataclass(frozen=True)
class ServiceDescriptor:
    """Snapshot of the service taken once per run."""
    cluster: str
    service: str
    status: str
    controller_type: Optional[str]
    mechanism: RolloutMechanism


def classify_controller(controller_type: Optional[str]) -> RolloutMechanism:
    """
    Map a deployment controller type to a rollout mechanism.

    A missing controller means the ECS default.

    Raises:
        ServiceStateError: For controllers other than ECS or CODE_DEPLOY
    """
    if not controller_type:
        return RolloutMechanism.ROLLING_UPDATE
    try:
        return RolloutMechanism(controller_type)
    except ValueError:
        raise ServiceStateError(f"Unsupported deployment controller: {controller_type}") from None


class ServiceInspector:
    """Looks up the target service and decides how to roll out to it."""

    def __init__(self, ecs_client):
        self.ecs = ecs_client

    def describe(self, cluster: str, service: str) -> ServiceDescriptor:
        """
        Fetch and validate the service.

        Raises:
            ServiceStateError: If the service is missing, not ACTIVE, or uses
                an unsupported deployment controller
        """
        response = self.ecs.describe_services(cluster=cluster, services=[service])

        failures = response.get("failures") or []
        if failures:
            failure = failures[0]
            raise ServiceStateError(f"{failure.get('arn')} is {failure.get('reason')}")

        services = response.get("services") or []
        if not services:
            raise ServiceStateError(f"Service {service} was not found in cluster {cluster}")

        info = services[0]
        status = info.get("status")
        if status != ACTIVE_STATUS:
            raise ServiceStateError(f"Service is {status}")

        controller_type = (info.get("deploymentController") or {}).get("type")
        mechanism = classify_controller(controller_type)
        logger.debug(f"Service {service} in {cluster} uses {mechanism.name}")

        return ServiceDescriptor(
            cluster=cluster,
            service=service,
            status=status,
            controller_type=controller_type,
            mechanism=mechanism,
        )
