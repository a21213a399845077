"""
Configuration management for the Railway deployer.

Settings are loaded from environment variables (the names used by the GitHub
Action wrapper), an optional ``.env`` file, an optional YAML file and CLI
overrides, in increasing order of precedence.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, Dict, Optional

import yaml
from pydantic import Field, ValidationError
from pydantic_settings import BaseSettings, SettingsConfigDict

from deployer.errors import ConfigurationError
from deployer.schemas import RAILWAY_API_URL


class DeploySettings(BaseSettings):
    """Raw deploy inputs.

    Required values default to empty strings here; presence and consistency
    are checked by ``deployer.validation`` so that every problem surfaces as
    a ConfigurationError with a hint.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        env_ignore_empty=True,
        extra="ignore",
    )

    # Railway
    railway_api_token: str = Field("", description="Railway API token")
    railway_token_type: str = Field("bearer", description="Token type: bearer or project")
    railway_env_id: str = Field("", description="Railway environment ID")
    railway_api_url: str = Field(RAILWAY_API_URL, description="Railway GraphQL endpoint")
    railway_request_timeout: float = Field(30.0, gt=0, description="Per-request timeout in seconds")

    # Image
    image_tag: str = Field("", description="Full image reference with tag")
    registry_username: str = Field("", description="Private registry username")
    registry_password: str = Field("", repr=False, description="Private registry password")

    # Services and ordering
    services: str = Field("", description="Multiline label:service-id pairs")
    first_service: str = Field("", description="Label to redeploy first")
    wait_seconds: int = Field(30, ge=0, description="Wait after the first service")

    # Behaviour
    dry_run: bool = Field(False, description="Echo requests instead of sending them")
    debug: bool = Field(False, description="Emit diagnostic traces to stderr")

    # Outputs
    github_output: Optional[str] = Field(None, description="GitHub Actions output file")


def load_config_file(filepath: Path | str) -> Dict[str, Any]:
    """Load settings overrides from a YAML file.

    Args:
        filepath: Path to YAML file whose keys are DeploySettings field names

    Returns:
        Dictionary of overrides

    Raises:
        ConfigurationError: If the file is missing, empty or not a mapping
    """
    path = Path(filepath)
    if not path.exists():
        raise ConfigurationError(
            f"Config file not found: {filepath}",
            hint="Pass an existing YAML file to --config.",
        )

    with open(path, "r", encoding="utf-8") as f:
        try:
            data = yaml.safe_load(f)
        except yaml.YAMLError as exc:
            raise ConfigurationError(
                f"Invalid YAML in {filepath}",
                details=str(exc),
                hint="Fix the YAML syntax in the config file.",
            ) from exc

    if not data or not isinstance(data, dict):
        raise ConfigurationError(
            f"Empty or invalid YAML in {filepath}",
            hint="The config file must be a mapping of setting names to values.",
        )

    return data


def load_settings(
    config_file: Optional[Path | str] = None,
    overrides: Optional[Dict[str, Any]] = None,
) -> DeploySettings:
    """Build DeploySettings from every configuration source.

    Args:
        config_file: Optional YAML file
        overrides: Values that win over every other source; None values are ignored

    Returns:
        DeploySettings instance

    Raises:
        ConfigurationError: If a value cannot be parsed (e.g. negative wait)
    """
    values: Dict[str, Any] = {}
    if config_file:
        values.update(load_config_file(config_file))
    values.update({k: v for k, v in (overrides or {}).items() if v is not None})

    try:
        return DeploySettings(**values)
    except ValidationError as exc:
        problems = "; ".join(
            f"{'.'.join(str(part) for part in err['loc'])}: {err['msg']}" for err in exc.errors()
        )
        raise ConfigurationError(
            "Invalid configuration value",
            details=problems,
            hint="WAIT_SECONDS must be a non-negative integer and DRY_RUN/DEBUG must be booleans.",
        ) from exc
