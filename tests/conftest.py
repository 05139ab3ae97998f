"""
Shared fixtures: mocked boto3 clients shaped like real ECS/CodeDeploy responses.
"""

import json
from unittest.mock import Mock

import pytest

READY_WAIT_MINUTES = 60
TERMINATION_WAIT_MINUTES = 30


def make_ecs_client(region="fake-region", controller_type=None, status="ACTIVE"):
    ecs = Mock()
    ecs.meta.region_name = region
    ecs.register_task_definition.return_value = {
        "taskDefinition": {"taskDefinitionArn": "task:def:arn"}
    }
    ecs.update_service.return_value = {}

    service = {"status": status}
    if controller_type:
        service["deploymentController"] = {"type": controller_type}
    ecs.describe_services.return_value = {"failures": [], "services": [service]}
    return ecs


def make_codedeploy_client(region="fake-region"):
    codedeploy = Mock()
    codedeploy.meta.region_name = region
    codedeploy.create_deployment.return_value = {"deploymentId": "deployment-1"}
    codedeploy.get_deployment_group.return_value = {
        "deploymentGroupInfo": {
            "blueGreenDeploymentConfiguration": {
                "deploymentReadyOption": {"waitTimeInMinutes": READY_WAIT_MINUTES},
                "terminateBlueInstancesOnDeploymentSuccess": {
                    "terminationWaitTimeInMinutes": TERMINATION_WAIT_MINUTES
                },
            }
        }
    }
    codedeploy.get_deployment.return_value = {"deploymentInfo": {"status": "Succeeded"}}
    return codedeploy


@pytest.fixture
def ecs_client():
    return make_ecs_client()


@pytest.fixture
def codedeploy_client():
    return make_codedeploy_client()


@pytest.fixture
def workspace(tmp_path):
    """Workspace holding a minimal task definition file."""
    (tmp_path / "task-definition.json").write_text(json.dumps({"family": "task-def-family"}))
    return tmp_path


class FakeClock:
    """Clock whose time only moves when sleep() is called."""

    def __init__(self):
        self.now = 0.0
        self.sleeps = []

    def __call__(self):
        return self.now

    def sleep(self, seconds):
        self.sleeps.append(seconds)
        self.now += seconds


@pytest.fixture
def fake_clock():
    return FakeClock()
