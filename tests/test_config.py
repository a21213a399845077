"""
Tests for settings loading from the environment, YAML and overrides.
"""

import pytest

from deployer.errors import ConfigurationError
from shared.config import RAILWAY_API_URL, DeploySettings, load_config_file, load_settings


class TestEnvironment:
    """Settings read from the action's environment variables."""

    def test_reads_action_variables(self, deploy_env, monkeypatch):
        monkeypatch.setenv("FIRST_SERVICE", "api")
        monkeypatch.setenv("REGISTRY_USERNAME", "user")
        monkeypatch.setenv("REGISTRY_PASSWORD", "pass")
        monkeypatch.setenv("RAILWAY_TOKEN_TYPE", "project")
        monkeypatch.setenv("DRY_RUN", "true")
        monkeypatch.setenv("GITHUB_OUTPUT", "/tmp/out")

        settings = load_settings()

        assert settings.railway_api_token == "test-token"
        assert settings.railway_env_id == "env-123"
        assert settings.image_tag == "ghcr.io/test/app:latest"
        assert settings.services == "api:svc-abc123"
        assert settings.first_service == "api"
        assert settings.wait_seconds == 0
        assert settings.registry_username == "user"
        assert settings.registry_password == "pass"
        assert settings.railway_token_type == "project"
        assert settings.dry_run is True
        assert settings.github_output == "/tmp/out"

    def test_defaults(self):
        settings = DeploySettings()

        assert settings.railway_api_token == ""
        assert settings.railway_token_type == "bearer"
        assert settings.wait_seconds == 30
        assert settings.dry_run is False
        assert settings.debug is False
        assert settings.railway_api_url == RAILWAY_API_URL
        assert settings.github_output is None

    def test_empty_variables_fall_back_to_defaults(self, monkeypatch):
        monkeypatch.setenv("WAIT_SECONDS", "")
        monkeypatch.setenv("DRY_RUN", "")

        settings = load_settings()

        assert settings.wait_seconds == 30
        assert settings.dry_run is False

    def test_multiline_services(self, monkeypatch):
        monkeypatch.setenv("SERVICES", "web:svc-web\nworker:svc-worker")

        assert load_settings().services == "web:svc-web\nworker:svc-worker"

    def test_reads_dotenv_file(self, tmp_path):
        (tmp_path / ".env").write_text("IMAGE_TAG=ghcr.io/from/dotenv:1\n", encoding="utf-8")

        assert load_settings().image_tag == "ghcr.io/from/dotenv:1"

    @pytest.mark.parametrize("value", ["-1", "soon"])
    def test_invalid_wait_seconds(self, monkeypatch, value):
        monkeypatch.setenv("WAIT_SECONDS", value)

        with pytest.raises(ConfigurationError) as exc_info:
            load_settings()

        assert "wait_seconds" in exc_info.value.details


class TestConfigFile:
    """YAML config files."""

    def test_file_overrides_environment(self, deploy_env, tmp_path):
        path = tmp_path / "deploy.yaml"
        path.write_text(
            "image_tag: ghcr.io/test/app:sha-abc123\n"
            "services: |\n"
            "  web:svc-web\n"
            "  worker:svc-worker\n"
            "first_service: web\n"
            "wait_seconds: 10\n",
            encoding="utf-8",
        )

        settings = load_settings(path)

        assert settings.image_tag == "ghcr.io/test/app:sha-abc123"
        assert settings.services == "web:svc-web\nworker:svc-worker\n"
        assert settings.first_service == "web"
        assert settings.wait_seconds == 10
        assert settings.railway_api_token == "test-token"

    def test_overrides_win_over_file(self, tmp_path):
        path = tmp_path / "deploy.yaml"
        path.write_text("wait_seconds: 10\nfirst_service: web\n", encoding="utf-8")

        settings = load_settings(path, overrides={"wait_seconds": 5, "first_service": None})

        assert settings.wait_seconds == 5
        assert settings.first_service == "web"

    def test_missing_file(self, tmp_path):
        with pytest.raises(ConfigurationError, match="Config file not found"):
            load_config_file(tmp_path / "nope.yaml")

    @pytest.mark.parametrize("content", ["", "- just\n- a list\n"])
    def test_empty_or_non_mapping_file(self, tmp_path, content):
        path = tmp_path / "deploy.yaml"
        path.write_text(content, encoding="utf-8")

        with pytest.raises(ConfigurationError, match="Empty or invalid YAML"):
            load_config_file(path)

    def test_malformed_yaml(self, tmp_path):
        path = tmp_path / "deploy.yaml"
        path.write_text("services: [unclosed\n", encoding="utf-8")

        with pytest.raises(ConfigurationError, match="Invalid YAML"):
            load_config_file(path)
