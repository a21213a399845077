"""
Transport interface for Railway GraphQL calls.

The orchestrator and RailwayClient only ever talk to a Transport, so the
live HTTP client and the dry-run recorder are interchangeable and the
deploy logic is identical in both modes.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from typing import Any, List, Optional

from .graphql import GraphQLRequest
from .schemas import TransportResponse

logger = logging.getLogger(__name__)


class Transport(ABC):
    """Abstract sender of GraphQL requests.

    Implementations:
    - HttpTransport: POSTs to the Railway API over HTTPS
    - DryRunTransport: echoes the request and returns a synthetic success
    """

    def __init__(self, name: str) -> None:
        self.name = name
        self.logger = logging.getLogger(f"{__name__}.{name}")
        self.sent: List[GraphQLRequest] = []

    @abstractmethod
    def _send(self, request: GraphQLRequest) -> TransportResponse:
        """Deliver one request and capture the raw outcome.

        Args:
            request: Request to deliver

        Returns:
            HTTP status and body text

        Raises:
            TransportError: If no HTTP response was obtained
        """
        pass

    def send(self, request: GraphQLRequest) -> TransportResponse:
        """Record and deliver a request."""
        self.sent.append(request)
        self.logger.debug(
            "-> %s variables=%s", request.operation, request.redacted()
        )
        response = self._send(request)
        self.logger.debug("<- %s HTTP %d: %s", request.operation, response.status_code, response.text)
        return response

    def close(self) -> None:
        """Release any held resources."""

    def __enter__(self) -> "Transport":
        return self

    def __exit__(self, *exc_info: Optional[Any]) -> None:
        self.close()
