"""
Task definition file loading.
"""

import logging
from pathlib import Path
from typing import Any, Dict

import yaml

from ..errors import TaskDefinitionFileError

logger = logging.getLogger(__name__)


def load_task_definition(path: Path) -> Dict[str, Any]:
    """
    Read a task definition file written as JSON or YAML.

    Args:
        path: Absolute path to the file

    Returns:
        Parsed document

    Raises:
        TaskDefinitionFileError: If the file is missing or not a mapping
    """
    try:
        text = path.read_text(encoding="utf-8")
    except OSError as e:
        raise TaskDefinitionFileError(f"Could not read task definition file {path}: {e}") from e

    try:
        # YAML is a superset of JSON, so one parser covers both encodings
        data = yaml.safe_load(text)
    except yaml.YAMLError as e:
        raise TaskDefinitionFileError(f"Could not parse task definition file {path}: {e}") from e

    if not isinstance(data, dict):
        raise TaskDefinitionFileError(f"Task definition file {path} must contain a mapping")

    logger.debug(f"Loaded task definition from {path}")
    return data
