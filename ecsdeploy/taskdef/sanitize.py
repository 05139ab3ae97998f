"""
Task definition sanitizing.

A task definition exported from the console or from ``describe-task-definition``
carries empty placeholders and read-only fields that ``RegisterTaskDefinition``
rejects. ``sanitize`` returns a fresh copy in the exact shape the API accepts.
"""

from typing import Any, Dict, List

# Fields assigned by ECS on registration; invalid when registering again.
IGNORED_TASK_DEFINITION_ATTRIBUTES = (
    "compatibilities",
    "taskDefinitionArn",
    "requiresAttributes",
    "revision",
    "status",
    "registeredAt",
    "deregisteredAt",
    "registeredBy",
)

APPMESH_PROXY_TYPE = "APPMESH"


def is_empty_value(value: Any, preserve_empty: bool = False) -> bool:
    """
    Check whether a value counts as empty.

    ``0`` and ``False`` are real values. A list or mapping is empty when every
    element in it is empty. With ``preserve_empty`` set, empty strings count
    as values.
    """
    if value is None:
        return True
    if isinstance(value, str):
        return value == "" and not preserve_empty
    if isinstance(value, list):
        return all(is_empty_value(item, preserve_empty) for item in value)
    if isinstance(value, dict):
        return all(is_empty_value(item, preserve_empty) for item in value.values())
    return False


def _clean(value: Any, preserve_empty: bool) -> Any:
    if isinstance(value, dict):
        cleaned = {}
        for key, child in value.items():
            child = _clean(child, preserve_empty)
            if not is_empty_value(child, preserve_empty):
                cleaned[key] = child
        return cleaned
    if isinstance(value, list):
        items = [_clean(item, preserve_empty) for item in value]
        return [item for item in items if not is_empty_value(item, preserve_empty)]
    return value


def _is_appmesh_proxy(proxy: Any) -> bool:
    return isinstance(proxy, dict) and proxy.get("type") == APPMESH_PROXY_TYPE


def _clean_proxy_properties(properties: List[Any]) -> List[Any]:
    # Envoy reads "" differently from an unset property, so keep both keys.
    completed = []
    for prop in _clean(properties, preserve_empty=True):
        if isinstance(prop, dict):
            prop = dict(prop)
            prop.setdefault("name", "")
            prop.setdefault("value", "")
        completed.append(prop)
    return completed


def sanitize(doc: Dict[str, Any]) -> Dict[str, Any]:
    """
    Produce a registrable copy of a task definition document.

    Args:
        doc: Task definition as parsed from JSON or YAML

    Returns:
        New document without empty values or read-only fields

    Raises:
        ValueError: If the document is not a mapping
    """
    if not isinstance(doc, dict):
        raise ValueError("Task definition must be a mapping")

    result: Dict[str, Any] = {}
    for key, value in doc.items():
        if key in IGNORED_TASK_DEFINITION_ATTRIBUTES:
            continue

        if key == "proxyConfiguration" and _is_appmesh_proxy(value):
            value = _clean_appmesh_proxy(value)
        else:
            value = _clean(value, preserve_empty=False)

        if not is_empty_value(value):
            result[key] = value

    return result


def _clean_appmesh_proxy(proxy: Dict[str, Any]) -> Dict[str, Any]:
    cleaned = {}
    for key, value in proxy.items():
        if key == "properties" and isinstance(value, list):
            value = _clean_proxy_properties(value)
            if value:
                cleaned[key] = value
            continue
        value = _clean(value, preserve_empty=False)
        if not is_empty_value(value):
            cleaned[key] = value
    return cleaned
