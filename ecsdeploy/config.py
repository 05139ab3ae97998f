"""
Deployment configuration and input parsing helpers.
"""

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional, Union

DEFAULT_CLUSTER = "default"
DEFAULT_WAIT_MINUTES = 30

RawValue = Optional[Union[str, int, bool]]


def parse_bool(value: RawValue, default: bool = False) -> bool:
    """
    Parse a flag the way CI inputs are written ("true", "TRUE", "false", "").

    Args:
        value: Raw input value
        default: Value used when the input is absent or empty

    Returns:
        True only for a case-insensitive "true" (or a real boolean True)
    """
    if value is None or value == "":
        return default
    if isinstance(value, bool):
        return value
    return str(value).strip().lower() == "true"


def parse_optional_int(value: RawValue) -> Optional[int]:
    """
    Parse an integer input, returning None when absent or unparsable.

    Only whole numbers are accepted: "1.5" and "60abc" are unparsable.
    """
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    try:
        return int(str(value).strip())
    except ValueError:
        return None


def parse_int(value: RawValue, default: int) -> int:
    """Parse a positive integer input, falling back to ``default``."""
    parsed = parse_optional_int(value)
    if parsed is None or parsed <= 0:
        return default
    return parsed


def _blank_to_none(value: Optional[str]) -> Optional[str]:
    if value is None:
        return None
    value = value.strip()
    return value or None


def default_workspace() -> Path:
    return Path(os.environ.get("GITHUB_WORKSPACE") or os.getcwd())


@dataclass
class DeployConfig:
    """Everything a single deployment run needs to know."""
    task_definition: str
    service: Optional[str] = None
    cluster: str = DEFAULT_CLUSTER
    wait_for_service_stability: bool = False
    wait_for_minutes: Optional[int] = None
    force_new_deployment: bool = False
    desired_count: Optional[int] = None
    codedeploy_appspec: Optional[str] = None
    codedeploy_application: Optional[str] = None
    codedeploy_deployment_group: Optional[str] = None
    codedeploy_deployment_description: Optional[str] = None
    codedeploy_deployment_config: Optional[str] = None
    workspace: Path = field(default_factory=default_workspace)

    @classmethod
    def from_inputs(
        cls,
        task_definition: str,
        service: Optional[str] = None,
        cluster: Optional[str] = None,
        wait_for_service_stability: RawValue = None,
        wait_for_minutes: RawValue = None,
        force_new_deployment: RawValue = None,
        desired_count: RawValue = None,
        codedeploy_appspec: Optional[str] = None,
        codedeploy_application: Optional[str] = None,
        codedeploy_deployment_group: Optional[str] = None,
        codedeploy_deployment_description: Optional[str] = None,
        codedeploy_deployment_config: Optional[str] = None,
        workspace: Optional[Union[str, Path]] = None,
    ) -> "DeployConfig":
        """
        Build a config from raw string inputs, applying defaults.

        Unparsable wait minutes fall back to the default and an unparsable
        desired count is dropped, so bad input never blocks a deployment.
        """
        task_definition = _blank_to_none(task_definition)
        if not task_definition:
            raise ValueError("Task definition path is required")

        wait_minutes = parse_optional_int(wait_for_minutes)
        if wait_minutes is not None and wait_minutes <= 0:
            wait_minutes = None

        return cls(
            task_definition=task_definition,
            service=_blank_to_none(service),
            cluster=_blank_to_none(cluster) or DEFAULT_CLUSTER,
            wait_for_service_stability=parse_bool(wait_for_service_stability),
            wait_for_minutes=wait_minutes,
            force_new_deployment=parse_bool(force_new_deployment),
            desired_count=parse_optional_int(desired_count),
            codedeploy_appspec=_blank_to_none(codedeploy_appspec),
            codedeploy_application=_blank_to_none(codedeploy_application),
            codedeploy_deployment_group=_blank_to_none(codedeploy_deployment_group),
            codedeploy_deployment_description=_blank_to_none(codedeploy_deployment_description),
            codedeploy_deployment_config=_blank_to_none(codedeploy_deployment_config),
            workspace=Path(workspace) if workspace else default_workspace(),
        )

    def resolve_path(self, path: str) -> Path:
        """Resolve a user-supplied path against the workspace root."""
        candidate = Path(path)
        if candidate.is_absolute():
            return candidate
        return self.workspace / candidate
