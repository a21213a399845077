"""
Input validation: turns raw settings into an immutable DeployConfig.

Everything here runs before the first request, so a malformed input can
never leave a deploy half-applied.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Optional

from .errors import ConfigurationError
from .schemas import DeployConfig, RegistryCredentials, TokenType
from .services import parse_services

if TYPE_CHECKING:
    from shared.config import DeploySettings

logger = logging.getLogger(__name__)

REQUIRED_INPUTS = (
    ("railway_api_token", "RAILWAY_API_TOKEN", "Set the railway-api-token input (or RAILWAY_API_TOKEN) to a Railway API token."),
    ("railway_env_id", "RAILWAY_ENV_ID", "Set the environment-id input (or RAILWAY_ENV_ID) to the target environment's ID."),
    ("image_tag", "IMAGE_TAG", "Set the image input (or IMAGE_TAG) to a full image reference, e.g. ghcr.io/org/app:sha-abc123."),
    ("services", "SERVICES", "Set the services input (or SERVICES) to one 'label:service-id' pair per line."),
)


def _check_required(settings: DeploySettings) -> None:
    for field, env_name, hint in REQUIRED_INPUTS:
        if not getattr(settings, field).strip():
            raise ConfigurationError(f"{env_name} is not set", hint=hint)


def _registry_credentials(settings: DeploySettings) -> Optional[RegistryCredentials]:
    username = settings.registry_username
    password = settings.registry_password

    if username and not password:
        raise ConfigurationError(
            "registry-username provided without registry-password",
            details=f"registry-username: {username!r}",
            hint="Set both registry-username and registry-password, or neither for a public image.",
        )
    if password and not username:
        raise ConfigurationError(
            "registry-password provided without registry-username",
            hint="Set both registry-username and registry-password, or neither for a public image.",
        )
    if not username:
        return None
    return RegistryCredentials(username=username, password=password)


def _token_type(value: str) -> TokenType:
    try:
        return TokenType(value.strip().lower() or TokenType.BEARER.value)
    except ValueError:
        raise ConfigurationError(
            f"Unknown token type '{value}'",
            details=f"RAILWAY_TOKEN_TYPE: {value!r}",
            hint="Use 'bearer' for account or team tokens and 'project' for project tokens.",
        ) from None


def validate_settings(settings: DeploySettings) -> DeployConfig:
    """Validate raw settings and freeze them into a DeployConfig.

    Args:
        settings: Loaded settings

    Returns:
        Immutable DeployConfig

    Raises:
        ConfigurationError: On the first invalid or missing input
    """
    _check_required(settings)
    token_type = _token_type(settings.railway_token_type)
    credentials = _registry_credentials(settings)
    services = parse_services(settings.services)

    first_service = settings.first_service.strip() or None
    labels = [entry.label for entry in services]
    if first_service and first_service not in labels:
        raise ConfigurationError(
            f"first-service '{first_service}' not found in services list",
            details=f"Available services: {', '.join(labels)}",
            hint="Set first-service to one of the labels in the services input, or leave it empty.",
        )

    config = DeployConfig(
        api_token=settings.railway_api_token.strip(),
        token_type=token_type,
        environment_id=settings.railway_env_id.strip(),
        image=settings.image_tag.strip(),
        services=tuple(services),
        registry_credentials=credentials,
        first_service=first_service,
        wait_seconds=settings.wait_seconds,
        dry_run=settings.dry_run,
        debug=settings.debug,
        api_url=settings.railway_api_url,
        request_timeout=settings.railway_request_timeout,
    )
    logger.debug(
        "Validated config: env=%s image=%s services=%d first=%s wait=%ds dry_run=%s",
        config.environment_id,
        config.image,
        len(config.services),
        config.first_service,
        config.wait_seconds,
        config.dry_run,
    )
    return config
