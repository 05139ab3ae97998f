"""
ecsdeploy - register ECS task definitions and roll them out.

Registers a new task definition revision, then deploys it to an ECS service
either with an in-place service update or with a CodeDeploy blue/green
deployment, optionally waiting until the rollout is stable.
"""

__version__ = "0.1.0"
