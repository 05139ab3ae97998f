"""
Rollout of new task definition revisions: service updates, CodeDeploy
deployments and stability waiting.
"""

from .appspec import DEFAULT_APPSPEC, build_manifest
from .dispatch import RolloutDispatcher, default_application_name, default_deployment_group_name
from .wait import (
    POLL_INTERVAL_SECONDS,
    DeploymentTarget,
    PollState,
    ServiceTarget,
    StabilityWaiter,
    WaitBudget,
    rolling_update_budget,
    staged_deployment_budget,
)

__all__ = [
    "DEFAULT_APPSPEC",
    "build_manifest",
    "RolloutDispatcher",
    "default_application_name",
    "default_deployment_group_name",
    "POLL_INTERVAL_SECONDS",
    "DeploymentTarget",
    "PollState",
    "ServiceTarget",
    "StabilityWaiter",
    "WaitBudget",
    "rolling_update_budget",
    "staged_deployment_budget",
]
