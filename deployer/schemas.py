"""
Data contracts for a Railway image deploy.

ServiceEntry and DeployConfig are built once at startup and never mutated.
DeployResult accumulates the redeployed labels as the run progresses.
"""

from __future__ import annotations

from enum import Enum
from typing import List, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field

RAILWAY_API_URL = "https://backboard.railway.app/graphql/v2"


class TokenType(str, Enum):
    """How the API token is presented to Railway."""

    BEARER = "bearer"
    PROJECT = "project"


class ServiceEntry(BaseModel):
    """A single service to deploy."""

    model_config = ConfigDict(frozen=True)

    label: str = Field(..., description="Display label, unique within a deploy")
    id: str = Field(..., description="Opaque Railway service ID")


class RegistryCredentials(BaseModel):
    """Credentials for pulling the image from a private registry."""

    model_config = ConfigDict(frozen=True)

    username: str
    password: str = Field(..., repr=False)


class DeployConfig(BaseModel):
    """Validated, immutable snapshot of everything a deploy needs."""

    model_config = ConfigDict(frozen=True)

    api_token: str = Field(..., repr=False, description="Railway API token")
    token_type: TokenType = Field(TokenType.BEARER, description="Token presentation scheme")
    environment_id: str = Field(..., description="Railway environment ID")
    image: str = Field(..., description="Full image reference including tag")
    services: Tuple[ServiceEntry, ...] = Field(..., description="Services in input order")
    registry_credentials: Optional[RegistryCredentials] = None
    first_service: Optional[str] = Field(None, description="Label redeployed ahead of the rest")
    wait_seconds: int = Field(30, ge=0, description="Wait after the first service before the rest")
    dry_run: bool = False
    debug: bool = False
    api_url: str = RAILWAY_API_URL
    request_timeout: float = Field(30.0, gt=0)

    @property
    def labels(self) -> List[str]:
        return [entry.label for entry in self.services]

    def get_service(self, label: str) -> ServiceEntry:
        """Look up a service entry by label.

        Raises:
            KeyError: If no service carries the label
        """
        for entry in self.services:
            if entry.label == label:
                return entry
        raise KeyError(label)


class TransportResponse(BaseModel):
    """Raw HTTP outcome of a single GraphQL call."""

    status_code: int
    text: str = ""


class DeployResult(BaseModel):
    """Outcome of a deploy, surfaced as the action outputs."""

    image_tag: str
    deployed: List[str] = Field(default_factory=list, description="Labels in redeploy order")

    @property
    def deployed_services(self) -> str:
        return ",".join(self.deployed)
