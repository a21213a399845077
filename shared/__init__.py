"""
Shared libraries for the Railway deployer.

Provides common functionality:
- Configuration management
- Observability (logging, progress, error reporting, action outputs)
"""

from .config import DeploySettings, load_config_file, load_settings
from .observability import (
    ProgressReporter,
    action_outputs,
    configure_logging,
    format_annotation,
    format_error_block,
    write_outputs,
)

__all__ = [
    # Config
    "DeploySettings",
    "load_config_file",
    "load_settings",
    # Observability
    "ProgressReporter",
    "action_outputs",
    "configure_logging",
    "format_annotation",
    "format_error_block",
    "write_outputs",
]
