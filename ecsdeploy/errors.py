"""
Error types raised by the deployment core.
"""

from typing import Optional


class DeployError(Exception):
    """Base class for every failure raised while deploying."""


class TaskDefinitionFileError(DeployError):
    """Task definition file could not be found or parsed."""


class RegistrationError(DeployError):
    """The ECS registration call rejected the task definition."""

    def __init__(self, cause_message: str):
        self.cause_message = cause_message
        super().__init__(f"Failed to register task definition in ECS: {cause_message}")


class ServiceStateError(DeployError):
    """Service is missing, inactive, or uses an unsupported deployment controller."""


class ManifestValidationError(DeployError):
    """AppSpec template is malformed."""


class RolloutFailedError(DeployError):
    """The service or deployment reached a terminal failure state while waiting."""

    def __init__(self, target: str, reason: str):
        self.target = target
        self.reason = reason
        super().__init__(f"{target} failed: {reason}")


class WaitTimeoutError(DeployError, TimeoutError):
    """Stability wait ran past its budget. The rollout itself was submitted."""

    def __init__(self, target: str, max_wait: int, last_state: Optional[str] = None):
        self.target = target
        self.max_wait = max_wait
        self.last_state = last_state
        message = f"Timed out after {max_wait} seconds waiting for {target}"
        if last_state:
            message += f" (last state: {last_state})"
        super().__init__(message)
