"""
Deploy orchestration for Railway image rollouts.

Flow: update the image on every service, then redeploy. When a first
service is configured it is redeployed alone, the run waits a fixed time,
and the remaining services follow.
"""

from __future__ import annotations

import logging
import time
from enum import Enum
from typing import Callable, Optional

from shared.observability import ProgressReporter

from .railway import RailwayClient, create_transport
from .schemas import DeployConfig, DeployResult, ServiceEntry, TokenType

logger = logging.getLogger(__name__)


class DeployPhase(str, Enum):
    """States of a deploy run."""

    VALIDATING = "validating"
    UPDATING_ALL = "updating_all"
    REDEPLOYING = "redeploying"
    REDEPLOYING_FIRST = "redeploying_first"
    WAITING = "waiting"
    REDEPLOYING_REST = "redeploying_rest"
    DONE = "done"


class DeployOrchestrator:
    """Sequences image updates and redeploys for one environment.

    The run is fail-fast: the first error propagates and nothing already
    updated or redeployed is undone.
    """

    def __init__(
        self,
        config: DeployConfig,
        client: RailwayClient,
        reporter: Optional[ProgressReporter] = None,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        """Initialize orchestrator.

        Args:
            config: Validated deploy configuration
            client: Railway client bound to a live or dry-run transport
            reporter: Progress output (stdout by default)
            sleep: Blocking wait used between the first service and the rest
        """
        self.config = config
        self.client = client
        self.reporter = reporter or ProgressReporter()
        self._sleep = sleep
        self.phase = DeployPhase.VALIDATING
        self.result = DeployResult(image_tag=config.image)

    @property
    def total_steps(self) -> int:
        return 3 if self.config.first_service else 2

    def _enter(self, phase: DeployPhase) -> None:
        logger.debug("Phase %s -> %s", self.phase.value, phase.value)
        self.phase = phase

    def _print_header(self) -> None:
        config = self.config
        self.reporter.line(f"🐳 Image: {config.image}")
        self.reporter.line(f"🌍 Environment: {config.environment_id}")
        self.reporter.line(f"📦 Services ({len(config.services)}): {' '.join(config.labels)}")
        self.reporter.line(f"🔑 Token type: {TokenType(config.token_type).value}")
        self.reporter.line(
            f"🔐 Registry credentials: {'provided' if config.registry_credentials else 'none'}"
        )
        if config.dry_run:
            self.reporter.line("🧪 Dry run: requests are echoed, nothing is sent to Railway")
        self.reporter.line()

    def _update(self, entry: ServiceEntry) -> None:
        self.reporter.action(f"Updating image on [{entry.label}]")
        self.client.update_image(
            entry,
            self.config.environment_id,
            self.config.image,
            self.config.registry_credentials,
        )

    def _redeploy(self, entry: ServiceEntry) -> None:
        self.reporter.action(f"Redeploying [{entry.label}]")
        self.client.redeploy(entry, self.config.environment_id)
        self.result.deployed.append(entry.label)

    def run(self) -> DeployResult:
        """Execute the deploy.

        Returns:
            DeployResult listing redeployed labels, first service first

        Raises:
            RailwayAPIError: On the first failed call; the run stops there
        """
        config = self.config
        total = self.total_steps
        self._print_header()

        self._enter(DeployPhase.UPDATING_ALL)
        self.reporter.step(1, total, "Updating image source on all services")
        for entry in config.services:
            self._update(entry)
        self.reporter.line()

        if config.first_service:
            first = config.get_service(config.first_service)

            self._enter(DeployPhase.REDEPLOYING_FIRST)
            self.reporter.step(2, total, f"Redeploying [{first.label}] first")
            self._redeploy(first)

            self._enter(DeployPhase.WAITING)
            self.reporter.line(f"  ⏳ Waiting {config.wait_seconds}s for first service to stabilise...")
            self._sleep(config.wait_seconds)
            self.reporter.line()

            self._enter(DeployPhase.REDEPLOYING_REST)
            self.reporter.step(3, total, "Redeploying remaining services")
            for entry in config.services:
                if entry.label != first.label:
                    self._redeploy(entry)
        else:
            self._enter(DeployPhase.REDEPLOYING)
            self.reporter.step(2, total, "Redeploying all services")
            for entry in config.services:
                self._redeploy(entry)

        self._enter(DeployPhase.DONE)
        self.reporter.line()
        self.reporter.line(
            f"✅ Deploy complete ({len(self.result.deployed)} services): {' '.join(self.result.deployed)}"
        )
        return self.result


def run_deploy(
    config: DeployConfig,
    reporter: Optional[ProgressReporter] = None,
    sleep: Callable[[float], None] = time.sleep,
) -> DeployResult:
    """Run a deploy over the transport selected by the config's dry-run flag."""
    with create_transport(config) as transport:
        orchestrator = DeployOrchestrator(
            config,
            RailwayClient(transport),
            reporter=reporter,
            sleep=sleep,
        )
        return orchestrator.run()
