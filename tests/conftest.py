"""
Shared fixtures for deployer tests.
"""

import json
import logging
from typing import Dict, List, Optional

import pytest

from deployer.base import Transport
from deployer.graphql import GraphQLRequest
from deployer.schemas import DeployConfig, RegistryCredentials, TokenType, TransportResponse
from deployer.services import parse_services

DEPLOY_ENV_VARS = (
    "RAILWAY_API_TOKEN",
    "RAILWAY_TOKEN_TYPE",
    "RAILWAY_ENV_ID",
    "RAILWAY_API_URL",
    "RAILWAY_REQUEST_TIMEOUT",
    "IMAGE_TAG",
    "SERVICES",
    "FIRST_SERVICE",
    "WAIT_SECONDS",
    "REGISTRY_USERNAME",
    "REGISTRY_PASSWORD",
    "DRY_RUN",
    "DEBUG",
    "GITHUB_OUTPUT",
    "DEPLOY_CONFIG_FILE",
)


@pytest.fixture(autouse=True)
def clean_environment(monkeypatch, tmp_path):
    """Isolate each test from the runner's environment and any .env file."""
    for name in DEPLOY_ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    monkeypatch.chdir(tmp_path)

    root = logging.getLogger()
    level, handlers = root.level, list(root.handlers)
    yield
    root.setLevel(level)
    for handler in list(root.handlers):
        if handler not in handlers:
            root.removeHandler(handler)


class ScriptedTransport(Transport):
    """Fake transport that records requests and replays canned responses.

    Responses are consumed in order; once exhausted every call succeeds.
    """

    def __init__(self, responses: Optional[List[TransportResponse]] = None) -> None:
        super().__init__("scripted")
        self.responses = list(responses or [])

    def _send(self, request: GraphQLRequest) -> TransportResponse:
        if self.responses:
            return self.responses.pop(0)
        return TransportResponse(status_code=200, text=json.dumps({"data": {request.field: True}}))

    def calls(self, operation: Optional[str] = None) -> List[GraphQLRequest]:
        return [r for r in self.sent if operation is None or r.operation == operation]

    def service_ids(self, operation: str) -> List[str]:
        return [r.variables["serviceId"] for r in self.calls(operation)]


@pytest.fixture
def scripted_transport():
    return ScriptedTransport()


def make_config(
    services: str = "api:svc-abc123",
    first_service: Optional[str] = None,
    wait_seconds: int = 0,
    credentials: Optional[Dict[str, str]] = None,
    **overrides,
) -> DeployConfig:
    """Build a DeployConfig directly, bypassing settings."""
    values = {
        "api_token": "test-token",
        "token_type": TokenType.BEARER,
        "environment_id": "env-123",
        "image": "ghcr.io/test/app:latest",
        "services": tuple(parse_services(services)),
        "registry_credentials": RegistryCredentials(**credentials) if credentials else None,
        "first_service": first_service,
        "wait_seconds": wait_seconds,
    }
    values.update(overrides)
    return DeployConfig(**values)


@pytest.fixture
def deploy_env(monkeypatch):
    """Set the minimum valid deploy inputs in the environment."""
    values = {
        "RAILWAY_API_TOKEN": "test-token",
        "RAILWAY_ENV_ID": "env-123",
        "IMAGE_TAG": "ghcr.io/test/app:latest",
        "SERVICES": "api:svc-abc123",
        "WAIT_SECONDS": "0",
    }
    for name, value in values.items():
        monkeypatch.setenv(name, value)
    return values


@pytest.fixture
def config_factory():
    return make_config
