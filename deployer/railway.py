"""
Railway API integration for image deploys.

Provides the live HTTP transport and the RailwayClient that classifies the
outcome of every GraphQL call. Nothing is retried: any failure is raised
and ends the run.
"""

from __future__ import annotations

import json
import logging
import socket
import ssl
from typing import Any, Dict, Iterator, Optional

import httpx

from .base import Transport
from .dry_run import DryRunTransport
from .errors import (
    ApplicationError,
    ProtocolError,
    StatusCategory,
    TransportError,
    TransportFailure,
)
from .graphql import GraphQLRequest, build_deploy_request, build_image_update_request
from .schemas import RAILWAY_API_URL, DeployConfig, RegistryCredentials, ServiceEntry, TokenType, TransportResponse

logger = logging.getLogger(__name__)

DNS_MARKERS = (
    "name or service not known",
    "nodename nor servname",
    "temporary failure in name resolution",
    "getaddrinfo failed",
    "no address associated",
)
TLS_MARKERS = ("ssl", "certificate", "tls")
REFUSED_MARKERS = ("connection refused", "actively refused")


def _exception_chain(exc: BaseException) -> Iterator[BaseException]:
    seen = set()
    current: Optional[BaseException] = exc
    while current is not None and id(current) not in seen:
        seen.add(id(current))
        yield current
        current = current.__cause__ or current.__context__


def classify_transport_error(exc: httpx.TransportError) -> TransportFailure:
    """Work out which kind of network failure an httpx error represents."""
    if isinstance(exc, httpx.TimeoutException):
        return TransportFailure.TIMEOUT

    chain = list(_exception_chain(exc))
    for err in chain:
        if isinstance(err, ssl.SSLError):
            return TransportFailure.TLS
        if isinstance(err, socket.gaierror):
            return TransportFailure.DNS
        if isinstance(err, ConnectionRefusedError):
            return TransportFailure.CONNECTION_REFUSED
        if isinstance(err, (socket.timeout, TimeoutError)):
            return TransportFailure.TIMEOUT

    text = " ".join(str(err) for err in chain).lower()
    if any(marker in text for marker in DNS_MARKERS):
        return TransportFailure.DNS
    if any(marker in text for marker in REFUSED_MARKERS):
        return TransportFailure.CONNECTION_REFUSED
    if any(marker in text for marker in TLS_MARKERS):
        return TransportFailure.TLS
    return TransportFailure.NETWORK


def auth_headers(api_token: str, token_type: TokenType) -> Dict[str, str]:
    """Headers carrying the token in the scheme Railway expects for its type."""
    if token_type == TokenType.PROJECT:
        return {"Project-Access-Token": api_token}
    return {"Authorization": f"Bearer {api_token}"}


class HttpTransport(Transport):
    """Sends GraphQL requests to Railway over HTTPS."""

    def __init__(
        self,
        api_token: str,
        token_type: TokenType = TokenType.BEARER,
        api_url: str = RAILWAY_API_URL,
        timeout: float = 30.0,
        client: Optional[httpx.Client] = None,
    ) -> None:
        """Initialize the HTTP transport.

        Args:
            api_token: Railway API token
            token_type: Whether the token is a bearer or project token
            api_url: GraphQL endpoint
            timeout: Per-request timeout in seconds
            client: Pre-built httpx client (used by tests to inject a MockTransport)
        """
        super().__init__("http")
        self.api_url = api_url
        self.client = client or httpx.Client(timeout=timeout)
        self.client.headers.update(
            {
                **auth_headers(api_token, token_type),
                "Content-Type": "application/json",
            }
        )

    def _send(self, request: GraphQLRequest) -> TransportResponse:
        try:
            response = self.client.post(
                self.api_url,
                content=request.to_body().encode("utf-8"),
            )
        except httpx.TransportError as exc:
            reason = classify_transport_error(exc)
            logger.debug("Transport failure (%s) on %s: %r", reason.value, request.operation, exc)
            raise TransportError(reason, details=f"{request.operation}: {exc}") from exc

        return TransportResponse(status_code=response.status_code, text=response.text)

    def close(self) -> None:
        self.client.close()


def create_transport(config: DeployConfig) -> Transport:
    """Pick the transport matching the configured mode."""
    if config.dry_run:
        return DryRunTransport(api_url=config.api_url)
    return HttpTransport(
        api_token=config.api_token,
        token_type=config.token_type,
        api_url=config.api_url,
        timeout=config.request_timeout,
    )


def _truncate(text: str, limit: int = 500) -> str:
    return text if len(text) <= limit else text[:limit] + "..."


def _error_message(error: Any) -> str:
    message = error.get("message") if isinstance(error, dict) else error
    if isinstance(message, str):
        return message
    return json.dumps(error, default=str)


class RailwayClient:
    """Railway GraphQL client for image updates and redeploys.

    Handles:
    - Service image source updates
    - Deployment triggering
    - Classification of transport, HTTP and GraphQL failures
    """

    def __init__(self, transport: Transport) -> None:
        self.transport = transport

    def _graphql_query(self, request: GraphQLRequest) -> Dict[str, Any]:
        """Execute a GraphQL request against the Railway API.

        Args:
            request: Request to send

        Returns:
            Parsed response body

        Raises:
            TransportError: If no HTTP response was obtained
            ProtocolError: If the status is not 200 or the body is not a JSON object
            ApplicationError: If the body carries a GraphQL error list
        """
        response = self.transport.send(request)

        if response.status_code != 200:
            logger.debug("Railway API HTTP %d on %s", response.status_code, request.operation)
            raise ProtocolError(
                response.status_code,
                details=f"{request.operation}: {_truncate(response.text)}" if response.text else request.operation,
            )

        try:
            data = json.loads(response.text)
        except ValueError:
            data = None

        if not isinstance(data, dict):
            raise ProtocolError(
                response.status_code,
                details=f"{request.operation}: {_truncate(response.text)}",
                category=StatusCategory.UNEXPECTED,
                message="Railway API returned a response that is not a JSON object",
            )

        errors = data.get("errors")
        if errors:
            messages = [
                _error_message(e) for e in (errors if isinstance(errors, list) else [errors])
            ]
            raise ApplicationError(messages, operation=request.operation)

        return data

    def update_image(
        self,
        service: ServiceEntry,
        environment_id: str,
        image: str,
        credentials: Optional[RegistryCredentials] = None,
    ) -> Dict[str, Any]:
        """Point a service instance at a new image without deploying it."""
        request = build_image_update_request(service.id, environment_id, image, credentials)
        result = self._graphql_query(request)
        logger.info("Updated image on %s (ID: %s)", service.label, service.id)
        return result

    def redeploy(self, service: ServiceEntry, environment_id: str) -> Dict[str, Any]:
        """Trigger a deployment of the service's currently configured image."""
        request = build_deploy_request(service.id, environment_id)
        result = self._graphql_query(request)
        logger.info("Triggered deploy of %s (ID: %s)", service.label, service.id)
        return result
