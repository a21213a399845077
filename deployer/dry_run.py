"""
Dry-run transport: echoes each would-be request and answers with a
deterministic synthetic success without touching the network.
"""

from __future__ import annotations

import json
from typing import Callable, Optional

import click

from .base import Transport
from .graphql import GraphQLRequest
from .schemas import RAILWAY_API_URL, TransportResponse

DRY_RUN_MARKER = "[dry-run]"


def synthetic_response(request: GraphQLRequest) -> TransportResponse:
    """Build the fixed success body returned for a request in dry-run mode."""
    return TransportResponse(
        status_code=200,
        text=json.dumps({"data": {request.field: True}}),
    )


class DryRunTransport(Transport):
    """Transport that never leaves the process."""

    def __init__(
        self,
        api_url: str = RAILWAY_API_URL,
        echo: Optional[Callable[[str], None]] = None,
    ) -> None:
        super().__init__("dry_run")
        self.api_url = api_url
        self._echo = echo or click.echo

    def _send(self, request: GraphQLRequest) -> TransportResponse:
        self._echo(f"    {DRY_RUN_MARKER} POST {self.api_url} {request.operation}")
        self._echo(f"    {DRY_RUN_MARKER} variables: {json.dumps(request.redacted())}")
        return synthetic_response(request)
