"""
Task definition registration with ECS.
"""

import logging
from dataclasses import dataclass
from typing import Any, Dict

from ..errors import RegistrationError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RegisteredRevision:
    """A task definition revision accepted by ECS."""
    arn: str
    document: Dict[str, Any]


class TaskDefinitionRegistrar:
    """Registers sanitized task definitions through an ECS client."""

    def __init__(self, ecs_client):
        self.ecs = ecs_client

    def register(self, doc: Dict[str, Any]) -> RegisteredRevision:
        """
        Register a new task definition revision.

        The document is passed through as keyword arguments, unchanged.

        Raises:
            RegistrationError: If ECS (or client-side validation) rejects it
        """
        try:
            response = self.ecs.register_task_definition(**doc)
        except Exception as e:
            raise RegistrationError(str(e)) from e

        arn = response["taskDefinition"]["taskDefinitionArn"]
        logger.debug(f"Registered task definition {arn}")
        return RegisteredRevision(arn=arn, document=doc)
