"""
Task definition handling: loading, sanitizing and registration.
"""

from .loader import load_task_definition
from .register import RegisteredRevision, TaskDefinitionRegistrar
from .sanitize import sanitize

__all__ = [
    "load_task_definition",
    "RegisteredRevision",
    "TaskDefinitionRegistrar",
    "sanitize",
]
