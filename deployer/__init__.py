"""
Railway image deployer.

Updates the image source of a set of Railway services and redeploys them,
optionally sending one "first" service ahead of the rest.
"""

from .base import Transport
from .dry_run import DryRunTransport
from .errors import (
    ApplicationError,
    ConfigurationError,
    DeployError,
    ProtocolError,
    RailwayAPIError,
    StatusCategory,
    TransportError,
    TransportFailure,
)
from .graphql import (
    GraphQLRequest,
    build_deploy_request,
    build_image_update_request,
    build_service_update_input,
)
from .orchestrator import DeployOrchestrator, DeployPhase, run_deploy
from .railway import HttpTransport, RailwayClient, create_transport
from .schemas import (
    DeployConfig,
    DeployResult,
    RegistryCredentials,
    ServiceEntry,
    TokenType,
    TransportResponse,
)
from .services import parse_services
from .validation import validate_settings

__all__ = [
    "Transport",
    "DryRunTransport",
    "HttpTransport",
    "RailwayClient",
    "create_transport",
    "ApplicationError",
    "ConfigurationError",
    "DeployError",
    "ProtocolError",
    "RailwayAPIError",
    "StatusCategory",
    "TransportError",
    "TransportFailure",
    "GraphQLRequest",
    "build_deploy_request",
    "build_image_update_request",
    "build_service_update_input",
    "DeployOrchestrator",
    "DeployPhase",
    "run_deploy",
    "DeployConfig",
    "DeployResult",
    "RegistryCredentials",
    "ServiceEntry",
    "TokenType",
    "TransportResponse",
    "parse_services",
    "validate_settings",
]
