"""
Tests for task definition registration and service inspection.
"""

import pytest
from botocore.exceptions import ClientError

from ecsdeploy.errors import RegistrationError, ServiceStateError
from ecsdeploy.service import RolloutMechanism, ServiceInspector, classify_controller
from ecsdeploy.taskdef import TaskDefinitionRegistrar

from .conftest import make_ecs_client


class TestTaskDefinitionRegistrar:
    """Test registration and its failure wrapping."""

    def test_register_passes_document_through(self, ecs_client):
        """Test the document is sent with no extra keys."""
        revision = TaskDefinitionRegistrar(ecs_client).register({"family": "f"})

        ecs_client.register_task_definition.assert_called_once_with(family="f")
        assert revision.arn == "task:def:arn"
        assert revision.document == {"family": "f"}

    def test_register_failure_is_wrapped(self, ecs_client):
        """Test errors become RegistrationError with both messages."""
        ecs_client.register_task_definition.side_effect = Exception("Could not parse")

        with pytest.raises(RegistrationError) as excinfo:
            TaskDefinitionRegistrar(ecs_client).register({"family": "f"})

        assert str(excinfo.value) == "Failed to register task definition in ECS: Could not parse"
        assert excinfo.value.cause_message == "Could not parse"
        assert str(excinfo.value.__cause__) == "Could not parse"

    def test_register_client_error(self, ecs_client):
        """Test botocore client errors are wrapped too."""
        ecs_client.register_task_definition.side_effect = ClientError(
            {"Error": {"Code": "ClientException", "Message": "Invalid family"}},
            "RegisterTaskDefinition",
        )

        with pytest.raises(RegistrationError, match="Invalid family"):
            TaskDefinitionRegistrar(ecs_client).register({"family": "f"})


class TestClassifyController:
    """Test deployment controller classification."""

    def test_missing_controller_is_rolling_update(self):
        assert classify_controller(None) is RolloutMechanism.ROLLING_UPDATE

    def test_ecs_controller(self):
        assert classify_controller("ECS") is RolloutMechanism.ROLLING_UPDATE

    def test_code_deploy_controller(self):
        assert classify_controller("CODE_DEPLOY") is RolloutMechanism.STAGED_DEPLOYMENT

    def test_external_controller_unsupported(self):
        with pytest.raises(ServiceStateError) as excinfo:
            classify_controller("EXTERNAL")
        assert str(excinfo.value) == "Unsupported deployment controller: EXTERNAL"


class TestServiceInspector:
    """Test service lookup and validation."""

    def test_describe_active_service(self):
        """Test an ACTIVE service with no controller."""
        ecs = make_ecs_client()
        descriptor = ServiceInspector(ecs).describe("cluster-789", "service-456")

        ecs.describe_services.assert_called_once_with(cluster="cluster-789", services=["service-456"])
        assert descriptor.status == "ACTIVE"
        assert descriptor.controller_type is None
        assert descriptor.mechanism is RolloutMechanism.ROLLING_UPDATE

    def test_describe_code_deploy_service(self):
        """Test a CODE_DEPLOY service classifies as staged."""
        ecs = make_ecs_client(controller_type="CODE_DEPLOY")
        descriptor = ServiceInspector(ecs).describe("cluster-789", "service-456")
        assert descriptor.mechanism is RolloutMechanism.STAGED_DEPLOYMENT

    def test_missing_service(self):
        """Test failures are reported as '<arn> is <reason>'."""
        ecs = make_ecs_client()
        ecs.describe_services.return_value = {
            "failures": [{"arn": "hello", "reason": "MISSING"}],
            "services": [],
        }

        with pytest.raises(ServiceStateError) as excinfo:
            ServiceInspector(ecs).describe("cluster-789", "service-456")
        assert str(excinfo.value) == "hello is MISSING"

    def test_inactive_service(self):
        """Test a non-ACTIVE status is rejected."""
        ecs = make_ecs_client(status="INACTIVE")

        with pytest.raises(ServiceStateError) as excinfo:
            ServiceInspector(ecs).describe("cluster-789", "service-456")
        assert str(excinfo.value) == "Service is INACTIVE"

    def test_failure_checked_before_status(self):
        """Test failures take priority over the status check."""
        ecs = make_ecs_client()
        ecs.describe_services.return_value = {
            "failures": [{"arn": "hello", "reason": "MISSING"}],
            "services": [{"status": "INACTIVE"}],
        }

        with pytest.raises(ServiceStateError, match="^hello is MISSING$"):
            ServiceInspector(ecs).describe("c", "s")

    def test_external_controller(self):
        """Test unsupported controllers fail with the controller name."""
        ecs = make_ecs_client(controller_type="EXTERNAL")

        with pytest.raises(ServiceStateError) as excinfo:
            ServiceInspector(ecs).describe("cluster-789", "service-456")
        assert str(excinfo.value) == "Unsupported deployment controller: EXTERNAL"

    def test_empty_response(self):
        """Test a response with neither services nor failures."""
        ecs = make_ecs_client()
        ecs.describe_services.return_value = {"failures": [], "services": []}

        with pytest.raises(ServiceStateError, match="not found"):
            ServiceInspector(ecs).describe("c", "s")
