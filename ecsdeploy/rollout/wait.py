"""
Stability waiting for ECS services and CodeDeploy deployments.
"""

import logging
import time
from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Dict, Optional, Tuple

from botocore.exceptions import ClientError

from ..config import DEFAULT_WAIT_MINUTES, RawValue, parse_int
from ..errors import RolloutFailedError, WaitTimeoutError

logger = logging.getLogger(__name__)

POLL_INTERVAL_SECONDS = 15
MAX_WAIT_MINUTES = 360  # 6 hours


@dataclass(frozen=True)
class WaitBudget:
    """Poll interval and maximum wait, both in seconds."""
    poll_interval: int
    max_wait: int


def _capped_budget(total_minutes: int) -> WaitBudget:
    minutes = min(total_minutes, MAX_WAIT_MINUTES)
    return WaitBudget(poll_interval=POLL_INTERVAL_SECONDS, max_wait=minutes * 60)


def rolling_update_budget(wait_minutes: RawValue = None) -> WaitBudget:
    """Budget for an ECS rolling update: caller minutes (default 30), capped at 6h."""
    return _capped_budget(parse_int(wait_minutes, DEFAULT_WAIT_MINUTES))


def deployment_group_wait_minutes(deployment_group_info: Optional[Dict[str, Any]]) -> Tuple[int, int]:
    """
    Extract blue/green timing knobs from a deployment group.

    Returns:
        (deployment ready wait minutes, blue termination wait minutes)
    """
    blue_green = (deployment_group_info or {}).get("blueGreenDeploymentConfiguration") or {}
    ready = (blue_green.get("deploymentReadyOption") or {}).get("waitTimeInMinutes") or 0
    terminate = (blue_green.get("terminateBlueInstancesOnDeploymentSuccess") or {}).get(
        "terminationWaitTimeInMinutes"
    ) or 0
    return ready, terminate


def staged_deployment_budget(
    wait_minutes: RawValue = None,
    deployment_group_info: Optional[Dict[str, Any]] = None,
) -> WaitBudget:
    """
    Budget for a CodeDeploy deployment.

    Caller minutes (default 30) plus the group's ready and termination waits,
    capped at 6h after summing.
    """
    ready, terminate = deployment_group_wait_minutes(deployment_group_info)
    total = parse_int(wait_minutes, DEFAULT_WAIT_MINUTES) + ready + terminate
    return _capped_budget(total)


class PollState(Enum):
    """Result of one status check."""
    PENDING = "pending"
    SUCCESS = "success"
    FAILURE = "failure"


class ServiceTarget:
    """Polls an ECS service until it reaches steady state."""

    def __init__(self, ecs_client, cluster: str, service: str):
        self.ecs = ecs_client
        self.cluster = cluster
        self.service = service

    def __str__(self) -> str:
        return f"service {self.service} in cluster {self.cluster}"

    def poll(self) -> Tuple[PollState, str]:
        response = self.ecs.describe_services(cluster=self.cluster, services=[self.service])

        for failure in response.get("failures") or []:
            if failure.get("reason") == "MISSING":
                return PollState.FAILURE, f"{failure.get('arn')} is MISSING"

        services = response.get("services") or []
        if not services:
            return PollState.PENDING, "no service returned"

        for info in services:
            status = info.get("status")
            if status in ("DRAINING", "INACTIVE"):
                return PollState.FAILURE, f"service is {status}"

        for info in services:
            deployments = info.get("deployments") or []
            running = info.get("runningCount")
            desired = info.get("desiredCount")
            if len(deployments) != 1 or running != desired:
                return PollState.PENDING, f"{len(deployments)} deployment(s), {running}/{desired} tasks running"

        return PollState.SUCCESS, "steady state"


class DeploymentTarget:
    """Polls a CodeDeploy deployment until it succeeds."""

    def __init__(self, codedeploy_client, deployment_id: str):
        self.codedeploy = codedeploy_client
        self.deployment_id = deployment_id

    def __str__(self) -> str:
        return f"deployment {self.deployment_id}"

    def poll(self) -> Tuple[PollState, str]:
        try:
            response = self.codedeploy.get_deployment(deploymentId=self.deployment_id)
        except ClientError as e:
            if e.response.get("Error", {}).get("Code") == "DeploymentDoesNotExistException":
                return PollState.FAILURE, "deployment does not exist"
            raise

        status = (response.get("deploymentInfo") or {}).get("status", "Unknown")
        if status == "Succeeded":
            return PollState.SUCCESS, status
        if status in ("Failed", "Stopped"):
            return PollState.FAILURE, status
        return PollState.PENDING, status


class StabilityWaiter:
    """Blocking poll loop bounded by a WaitBudget."""

    def __init__(
        self,
        sleep: Callable[[float], None] = time.sleep,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.sleep = sleep
        self.clock = clock

    def wait(self, target, budget: WaitBudget) -> None:
        """
        Poll ``target`` until it succeeds.

        Raises:
            RolloutFailedError: If the target reaches a failure state
            WaitTimeoutError: If the budget runs out first
        """
        logger.info(f"Waiting up to {budget.max_wait} seconds for {target} to become stable")
        start = self.clock()

        while True:
            state, detail = target.poll()
            elapsed = self.clock() - start

            if state is PollState.SUCCESS:
                logger.info(f"{target} is stable after {int(elapsed)} seconds")
                return
            if state is PollState.FAILURE:
                raise RolloutFailedError(str(target), detail)

            remaining = budget.max_wait - elapsed
            if remaining <= 0:
                raise WaitTimeoutError(str(target), budget.max_wait, detail)

            logger.info(f"Still waiting for {target}: {detail} ({int(elapsed)}s elapsed)")
            self.sleep(min(budget.poll_interval, remaining))
