"""
GraphQL request builder for the two mutations a deploy needs.

Requests are always serialized with the JSON encoder, so image names and
registry passwords survive whatever characters they contain.
"""

from __future__ import annotations

import copy
import json
from typing import Any, Dict, Optional

from pydantic import BaseModel, Field

from .schemas import RegistryCredentials

REDACTED = "***"

UPDATE_IMAGE_MUTATION = """
mutation UpdateServiceImage($serviceId: String!, $environmentId: String!, $input: ServiceInstanceUpdateInput!) {
    serviceInstanceUpdate(serviceId: $serviceId, environmentId: $environmentId, input: $input)
}
""".strip()

DEPLOY_MUTATION = """
mutation DeployService($serviceId: String!, $environmentId: String!) {
    serviceInstanceDeploy(serviceId: $serviceId, environmentId: $environmentId)
}
""".strip()


class GraphQLRequest(BaseModel):
    """A single GraphQL operation ready to send."""

    operation: str = Field(..., description="Operation name, for logs")
    field: str = Field(..., description="Top-level mutation field")
    query: str
    variables: Dict[str, Any] = Field(default_factory=dict)

    def envelope(self) -> Dict[str, Any]:
        return {"query": self.query, "variables": self.variables}

    def to_body(self) -> str:
        """Serialize the standard ``{query, variables}`` envelope."""
        return json.dumps(self.envelope())

    def redacted(self) -> Dict[str, Any]:
        """Variables with the registry password masked."""
        variables = copy.deepcopy(self.variables)
        creds = variables.get("input", {}).get("registryCredentials")
        if isinstance(creds, dict) and "password" in creds:
            creds["password"] = REDACTED
        return variables


def build_service_update_input(
    image: str, credentials: Optional[RegistryCredentials] = None
) -> Dict[str, Any]:
    """Build the ServiceInstanceUpdateInput payload."""
    payload: Dict[str, Any] = {"source": {"image": image}}
    if credentials is not None:
        payload["registryCredentials"] = {
            "username": credentials.username,
            "password": credentials.password,
        }
    return payload


def build_image_update_request(
    service_id: str,
    environment_id: str,
    image: str,
    credentials: Optional[RegistryCredentials] = None,
) -> GraphQLRequest:
    """Build the mutation that points a service at a new image.

    Args:
        service_id: Railway service ID
        environment_id: Railway environment ID
        image: Full image reference
        credentials: Optional private registry credentials

    Returns:
        GraphQLRequest for serviceInstanceUpdate
    """
    return GraphQLRequest(
        operation="UpdateServiceImage",
        field="serviceInstanceUpdate",
        query=UPDATE_IMAGE_MUTATION,
        variables={
            "serviceId": service_id,
            "environmentId": environment_id,
            "input": build_service_update_input(image, credentials),
        },
    )


def build_deploy_request(service_id: str, environment_id: str) -> GraphQLRequest:
    """Build the mutation that redeploys a service with its configured image."""
    return GraphQLRequest(
        operation="DeployService",
        field="serviceInstanceDeploy",
        query=DEPLOY_MUTATION,
        variables={"serviceId": service_id, "environmentId": environment_id},
    )
