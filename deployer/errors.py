"""
Error hierarchy for the Railway deployer.

Every failure is fatal: errors are raised where they are detected and the CLI
renders them as a message / details / hint block before exiting nonzero.
"""

from __future__ import annotations

from enum import Enum
from typing import List, Optional


class DeployError(Exception):
    """Base exception for all deployer errors."""

    kind = "error"
    title = "Deploy failed"

    def __init__(
        self,
        message: str,
        details: Optional[str] = None,
        hint: Optional[str] = None,
    ) -> None:
        self.message = message
        self.details = details
        self.hint = hint
        super().__init__(self.format_message())

    def format_message(self) -> str:
        """Format error message with optional details."""
        if self.details:
            return f"{self.message}\nDetails: {self.details}"
        return self.message


class ConfigurationError(DeployError):
    """Raised when an input is missing, malformed or inconsistent."""

    kind = "configuration"
    title = "Configuration error"


class RailwayAPIError(DeployError):
    """Raised when a call to the Railway API fails."""

    kind = "api"
    title = "Railway API error"


class TransportFailure(str, Enum):
    """Kinds of network-level failure."""

    DNS = "dns"
    CONNECTION_REFUSED = "connection_refused"
    TIMEOUT = "timeout"
    TLS = "tls"
    NETWORK = "network"


TRANSPORT_HINTS = {
    TransportFailure.DNS: "Could not resolve the Railway API host. Check DNS and outbound network access from the runner.",
    TransportFailure.CONNECTION_REFUSED: "The connection was refused. Check proxy settings and that egress to backboard.railway.app:443 is allowed.",
    TransportFailure.TIMEOUT: "The request timed out. Railway may be degraded; check https://status.railway.app and try again.",
    TransportFailure.TLS: "TLS negotiation failed. Check for an intercepting proxy or an outdated CA bundle on the runner.",
    TransportFailure.NETWORK: "A network error occurred while contacting Railway. Check the runner's connectivity.",
}


class TransportError(RailwayAPIError):
    """Raised when the request never produced an HTTP response."""

    kind = "transport"
    title = "Railway API unreachable"

    def __init__(self, reason: TransportFailure, details: Optional[str] = None) -> None:
        self.reason = reason
        super().__init__(
            f"Railway API request failed ({reason.value.replace('_', ' ')})",
            details=details,
            hint=TRANSPORT_HINTS[reason],
        )


class StatusCategory(str, Enum):
    """Classes of non-200 HTTP responses."""

    AUTHENTICATION = "authentication"
    PERMISSION = "permission"
    NOT_FOUND = "not_found"
    RATE_LIMIT = "rate_limit"
    SERVER_ERROR = "server_error"
    UNEXPECTED = "unexpected"


STATUS_HINTS = {
    StatusCategory.AUTHENTICATION: "The API token was rejected. Check that RAILWAY_API_TOKEN is valid and that RAILWAY_TOKEN_TYPE matches it (bearer for account/team tokens, project for project tokens).",
    StatusCategory.PERMISSION: "The token lacks access to this project or environment. Use a token scoped to the project that owns these services.",
    StatusCategory.NOT_FOUND: "The API endpoint was not found. Check RAILWAY_API_URL if it has been overridden.",
    StatusCategory.RATE_LIMIT: "Railway is rate limiting requests. Wait a moment before re-running the deploy.",
    StatusCategory.SERVER_ERROR: "Railway returned a server error. Check https://status.railway.app and re-run once it recovers.",
    StatusCategory.UNEXPECTED: "Railway returned an unexpected response. Re-run with DEBUG=true to inspect the exchange.",
}


def categorize_status(status_code: int) -> StatusCategory:
    """Map an HTTP status code onto its category."""
    if status_code == 401:
        return StatusCategory.AUTHENTICATION
    if status_code == 403:
        return StatusCategory.PERMISSION
    if status_code == 404:
        return StatusCategory.NOT_FOUND
    if status_code == 429:
        return StatusCategory.RATE_LIMIT
    if 500 <= status_code < 600:
        return StatusCategory.SERVER_ERROR
    return StatusCategory.UNEXPECTED


class ProtocolError(RailwayAPIError):
    """Raised when Railway answers with something other than a usable HTTP 200."""

    kind = "protocol"
    title = "Railway API HTTP error"

    def __init__(
        self,
        status_code: int,
        details: Optional[str] = None,
        category: Optional[StatusCategory] = None,
        message: Optional[str] = None,
    ) -> None:
        self.status_code = status_code
        self.category = category or categorize_status(status_code)
        super().__init__(
            message or f"Railway API returned HTTP {status_code} ({self.category.value.replace('_', ' ')})",
            details=details,
            hint=STATUS_HINTS[self.category],
        )


GENERIC_APPLICATION_HINT = "Railway rejected the request. Re-run with DEBUG=true to inspect the request and response."


def hint_for_messages(messages: List[str]) -> str:
    """Pick the most specific remediation hint for GraphQL error messages."""
    text = " ".join(messages).lower()
    if "not found" in text:
        return "A service or environment id was not found. Check the ids in SERVICES and RAILWAY_ENV_ID against the Railway dashboard."
    if "permission" in text or "forbidden" in text or "unauthorized" in text or "not authorized" in text:
        return "The token is not allowed to modify these services. Use a token with access to the project and environment."
    if "invalid" in text:
        return "Railway reported an invalid value. Check the image reference, registry credentials and ids."
    return GENERIC_APPLICATION_HINT


class ApplicationError(RailwayAPIError):
    """Raised when Railway answers HTTP 200 with a GraphQL error list."""

    kind = "application"
    title = "Railway GraphQL error"

    def __init__(self, messages: List[str], operation: Optional[str] = None) -> None:
        self.messages = messages
        self.operation = operation
        message = "Railway GraphQL error"
        if operation:
            message = f"{message} in {operation}"
        super().__init__(
            message,
            details="; ".join(messages),
            hint=hint_for_messages(messages),
        )
