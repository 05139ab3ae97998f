"""
ECS service inspection.
"""

from .inspector import RolloutMechanism, ServiceDescriptor, ServiceInspector, classify_controller

__all__ = [
    "RolloutMechanism",
    "ServiceDescriptor",
    "ServiceInspector",
    "classify_controller",
]
