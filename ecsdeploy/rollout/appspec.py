"""
CodeDeploy AppSpec construction.

The AppSpec content is sent inline with the deployment together with its
SHA-256, so serialization must be byte-stable: compact JSON, keys in source
order.
"""

import copy
import datetime
import hashlib
import json
import logging
from pathlib import Path
from typing import Any, Dict, Optional, Tuple

import yaml

from ..errors import ManifestValidationError

logger = logging.getLogger(__name__)

DEFAULT_APPSPEC: Dict[str, Any] = {
    "Resources": [
        {
            "TargetService": {
                "Type": "AWS::ECS::Service",
                "Properties": {
                    "TaskDefinition": "<TASK_DEFINITION>",
                    "LoadBalancerInfo": {
                        "ContainerName": "web",
                        "ContainerPort": 80,
                    },
                },
            }
        }
    ]
}


def find_appspec_key(obj: Dict[str, Any], key_name: str) -> Optional[str]:
    """
    Find ``key_name`` or its capitalized form in an AppSpec mapping.

    AppSpec files are written in either style (``resources``/``Resources``).
    """
    if key_name in obj:
        return key_name
    capitalized = key_name[0].upper() + key_name[1:]
    if capitalized in obj:
        return capitalized
    return None


def parse_appspec(text: str) -> Dict[str, Any]:
    """Parse AppSpec text written as JSON or YAML."""
    try:
        data = json.loads(text)
    except ValueError:
        try:
            data = yaml.safe_load(text)
        except yaml.YAMLError as e:
            raise ManifestValidationError(f"AppSpec file could not be parsed: {e}") from e

    if not isinstance(data, dict):
        raise ManifestValidationError("AppSpec file must include property 'resources'")
    return data


def _json_default(value: Any) -> str:
    # YAML timestamps load as date/datetime
    if isinstance(value, (datetime.date, datetime.datetime)):
        return value.isoformat()
    raise TypeError(f"Object of type {type(value).__name__} is not JSON serializable")


def serialize_appspec(appspec: Dict[str, Any]) -> str:
    """
    Serialize an AppSpec as compact JSON.

    Raises:
        ManifestValidationError: If a value has no JSON form
    """
    try:
        return json.dumps(appspec, separators=(",", ":"), ensure_ascii=False, default=_json_default)
    except TypeError as e:
        raise ManifestValidationError(f"AppSpec file could not be serialized: {e}") from e


def appspec_digest(content: str) -> str:
    return hashlib.sha256(content.encode("utf-8")).hexdigest()


def set_task_definition(appspec: Dict[str, Any], task_definition_arn: str) -> int:
    """
    Point every resource's TaskDefinition at the new revision, in place.

    Returns:
        Number of resource entries rewritten

    Raises:
        ManifestValidationError: If there is no resources list
    """
    resources_key = find_appspec_key(appspec, "resources")
    if resources_key is None:
        raise ManifestValidationError("AppSpec file must include property 'resources'")

    resources = appspec[resources_key]
    if not isinstance(resources, list):
        raise ManifestValidationError("AppSpec property 'resources' must be a list")

    rewritten = 0
    for resource in resources:
        if not isinstance(resource, dict):
            continue
        for contents in resource.values():
            if not isinstance(contents, dict):
                continue
            properties_key = find_appspec_key(contents, "properties")
            if properties_key is None or not isinstance(contents[properties_key], dict):
                continue
            properties = contents[properties_key]
            task_def_key = find_appspec_key(properties, "taskDefinition")
            if task_def_key is None:
                continue
            properties[task_def_key] = task_definition_arn
            rewritten += 1

    return rewritten


def build_manifest(template_path: Optional[Path], task_definition_arn: str) -> Tuple[str, str]:
    """
    Build the AppSpec content for a deployment and its digest.

    Args:
        template_path: AppSpec file to use, or None for the default scaffold
        task_definition_arn: Revision to deploy

    Returns:
        (serialized content, hex SHA-256 of that content)
    """
    if template_path is None:
        appspec = copy.deepcopy(DEFAULT_APPSPEC)
    else:
        try:
            text = Path(template_path).read_text(encoding="utf-8")
        except OSError as e:
            raise ManifestValidationError(f"Could not read AppSpec file {template_path}: {e}") from e
        appspec = parse_appspec(text)

    rewritten = set_task_definition(appspec, task_definition_arn)
    logger.debug(f"Set TaskDefinition on {rewritten} AppSpec resource(s)")

    content = serialize_appspec(appspec)
    return content, appspec_digest(content)
