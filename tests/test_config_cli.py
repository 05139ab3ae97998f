"""
Tests for input parsing and the CLI.
"""

import json
from pathlib import Path
from unittest.mock import patch

import pytest
from click.testing import CliRunner

from ecsdeploy.cli.main import main
from ecsdeploy.config import DeployConfig, parse_bool, parse_int, parse_optional_int

from .conftest import make_codedeploy_client, make_ecs_client


class TestParsing:
    """Test raw input parsing helpers."""

    def test_parse_bool(self):
        assert parse_bool("TRUE")
        assert parse_bool("true")
        assert not parse_bool("false")
        assert not parse_bool("")
        assert not parse_bool(None)
        assert parse_bool(True)

    def test_parse_optional_int(self):
        assert parse_optional_int("4") == 4
        assert parse_optional_int("0") == 0
        assert parse_optional_int("abc") is None
        assert parse_optional_int("60abc") is None
        assert parse_optional_int("1.5") is None
        assert parse_optional_int("") is None
        assert parse_optional_int(None) is None

    def test_parse_int_fallback(self):
        assert parse_int("60", 30) == 60
        assert parse_int("abc", 30) == 30
        assert parse_int("0", 30) == 30


class TestDeployConfig:
    """Test config defaults."""

    def test_defaults(self, tmp_path):
        config = DeployConfig.from_inputs(task_definition="td.json", service="", cluster="", workspace=tmp_path)

        assert config.service is None
        assert config.cluster == "default"
        assert not config.wait_for_service_stability
        assert config.wait_for_minutes is None
        assert not config.force_new_deployment
        assert config.desired_count is None

    def test_unparsable_numbers(self, tmp_path):
        config = DeployConfig.from_inputs(task_definition="td.json", wait_for_minutes="soon",
                                          desired_count="abc", workspace=tmp_path)
        assert config.wait_for_minutes is None
        assert config.desired_count is None

    def test_task_definition_required(self, tmp_path):
        with pytest.raises(ValueError):
            DeployConfig.from_inputs(task_definition="", workspace=tmp_path)

    def test_resolve_path(self, tmp_path):
        config = DeployConfig.from_inputs(task_definition="td.json", workspace=tmp_path)
        assert config.resolve_path("td.json") == tmp_path / "td.json"
        assert config.resolve_path("/abs/td.json") == Path("/abs/td.json")

    def test_workspace_from_environment(self, tmp_path, monkeypatch):
        monkeypatch.setenv("GITHUB_WORKSPACE", str(tmp_path))
        config = DeployConfig.from_inputs(task_definition="td.json")
        assert config.workspace == tmp_path


class TestCli:
    """Test the deploy command."""

    def _run(self, args, ecs, codedeploy=None, env=None):
        runner = CliRunner()
        with patch("ecsdeploy.cli.main._make_clients", return_value=(ecs, codedeploy or make_codedeploy_client())):
            return runner.invoke(main, args, env=env or {"GITHUB_OUTPUT": None})

    def test_deploy_prints_output(self, workspace):
        ecs = make_ecs_client()
        result = self._run(["deploy", "--task-definition", "task-definition.json",
                            "--service", "service-456", "--workspace", str(workspace)], ecs)

        assert result.exit_code == 0
        assert "task-definition-arn=task:def:arn" in result.stdout
        ecs.update_service.assert_called_once()

    def test_deploy_from_input_env(self, workspace, tmp_path):
        """Test inputs and GITHUB_OUTPUT in the CI runner convention."""
        output_file = tmp_path / "github_output"
        ecs = make_ecs_client()
        env = {
            "INPUT_TASK-DEFINITION": "task-definition.json",
            "INPUT_SERVICE": "service-456",
            "INPUT_CLUSTER": "cluster-789",
            "INPUT_FORCE-NEW-DEPLOYMENT": "true",
            "INPUT_DESIRED-COUNT": "4",
            "GITHUB_WORKSPACE": str(workspace),
            "GITHUB_OUTPUT": str(output_file),
        }

        result = self._run(["deploy"], ecs, env=env)

        assert result.exit_code == 0
        ecs.update_service.assert_called_once_with(
            cluster="cluster-789",
            desiredCount=4,
            service="service-456",
            taskDefinition="task:def:arn",
            forceNewDeployment=True,
        )
        assert output_file.read_text() == "task-definition-arn=task:def:arn\n"

    def test_registration_failure_reports_twice(self, workspace):
        ecs = make_ecs_client()
        ecs.register_task_definition.side_effect = Exception("Could not parse")

        result = self._run(["deploy", "--task-definition", "task-definition.json",
                            "--workspace", str(workspace)], ecs)

        assert result.exit_code == 1
        assert "Failed to register task definition in ECS: Could not parse" in result.stderr
        assert "❌ Could not parse" in result.stderr

    def test_service_error_json(self, workspace):
        ecs = make_ecs_client(status="INACTIVE")

        result = self._run(["--json", "deploy", "--task-definition", "task-definition.json",
                            "--service", "service-456", "--workspace", str(workspace)], ecs)

        assert result.exit_code == 1
        assert json.loads(result.stdout.strip().splitlines()[-1])["error"] == "Service is INACTIVE"

    def test_help_documents_whole_numbers(self):
        result = CliRunner().invoke(main, ["deploy", "--help"])

        assert result.exit_code == 0
        assert "Whole minutes to wait" in result.stdout
        assert "Whole number of tasks" in result.stdout
