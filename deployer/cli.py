"""
Command-line entry point: ``railway-deploy``.

Reads the deploy inputs from the environment (as set by the GitHub Action),
an optional YAML file and the options below, then runs the deploy.
"""

from __future__ import annotations

import logging
from typing import Optional

import click

from shared.config import load_settings
from shared.observability import ProgressReporter, configure_logging, write_outputs

from .errors import DeployError
from .orchestrator import run_deploy
from .validation import validate_settings

logger = logging.getLogger(__name__)


@click.command(context_settings={"help_option_names": ["-h", "--help"]})
@click.option(
    "--config",
    "config_file",
    type=click.Path(dir_okay=False),
    envvar="DEPLOY_CONFIG_FILE",
    help="YAML file with settings (keys are setting names, e.g. image_tag).",
)
@click.option("--services", default=None, help="Multiline 'label:service-id' pairs.")
@click.option("--first-service", default=None, help="Label to redeploy before the rest.")
@click.option("--wait-seconds", type=int, default=None, help="Seconds to wait after the first service.")
@click.option("--dry-run/--no-dry-run", default=None, help="Echo requests instead of sending them.")
@click.option("--debug/--no-debug", default=None, help="Emit diagnostic traces to stderr.")
@click.pass_context
def main(
    ctx: click.Context,
    config_file: Optional[str],
    services: Optional[str],
    first_service: Optional[str],
    wait_seconds: Optional[int],
    dry_run: Optional[bool],
    debug: Optional[bool],
) -> None:
    """Update the image on Railway services and redeploy them."""
    reporter = ProgressReporter()

    try:
        settings = load_settings(
            config_file,
            overrides={
                "services": services,
                "first_service": first_service,
                "wait_seconds": wait_seconds,
                "dry_run": dry_run,
                "debug": debug,
            },
        )
        configure_logging(settings.debug)
        config = validate_settings(settings)
        result = run_deploy(config, reporter=reporter)
        write_outputs(result, settings.github_output, reporter=reporter)
    except DeployError as exc:
        logger.debug("Deploy aborted: %s", exc.kind)
        reporter.error(exc)
        ctx.exit(1)


if __name__ == "__main__":
    main()
