"""
Observability for deploy runs: structured logging, progress lines,
error blocks and GitHub Actions outputs.

Progress goes to stdout. Diagnostics and errors go to stderr so the
result channel stays clean.
"""

from __future__ import annotations

import logging
import sys
from pathlib import Path
from typing import Callable, Dict, List, Optional

import click

from deployer.errors import DeployError
from deployer.schemas import DeployResult

LOG_FORMAT = '{"timestamp": "%(asctime)s", "level": "%(levelname)s", "logger": "%(name)s", "message": "%(message)s"}'

ANNOTATION_PREFIX = "::error"
BLOCK_WIDTH = 70

_handler: Optional[logging.Handler] = None


def configure_logging(debug: bool = False) -> None:
    """Configure structured logging on stderr.

    Args:
        debug: Emit DEBUG traces when True, otherwise only warnings and errors
    """
    global _handler

    root = logging.getLogger()
    if _handler is None or _handler not in root.handlers:
        _handler = logging.StreamHandler(sys.stderr)
        _handler.setFormatter(logging.Formatter(LOG_FORMAT))
        root.addHandler(_handler)
    root.setLevel(logging.DEBUG if debug else logging.WARNING)

    # httpx/httpcore traces carry auth headers at DEBUG
    logging.getLogger("httpcore").setLevel(logging.WARNING)
    logging.getLogger("httpx").setLevel(logging.WARNING)


def _escape_annotation(value: str) -> str:
    return value.replace("%", "%25").replace("\r", "%0D").replace("\n", "%0A")


def format_annotation(error: DeployError) -> str:
    """Single-line workflow command that GitHub renders as an error annotation."""
    title = _escape_annotation(error.title).replace(",", "%2C").replace("::", "%3A%3A")
    return f"{ANNOTATION_PREFIX} title={title}::{_escape_annotation(error.message)}"


def format_error_block(error: DeployError) -> str:
    """Render an error as a bordered message / details / hint block."""
    header = f"╔══ ERROR: {error.title} "
    lines = [header + "═" * max(BLOCK_WIDTH - len(header), 0)]
    lines.append(f"║ {error.message}")
    if error.details:
        for index, detail in enumerate(error.details.splitlines() or [""]):
            prefix = "Details: " if index == 0 else "         "
            lines.append(f"║ {prefix}{detail}")
    if error.hint:
        lines.append(f"║ Hint:    {error.hint}")
    lines.append("╚" + "═" * (BLOCK_WIDTH - 1))
    return "\n".join(lines)


class ProgressReporter:
    """Human-readable progress for a deploy run.

    The echo callables default to click.echo on stdout and stderr; tests can
    pass list appenders instead.
    """

    def __init__(
        self,
        out: Optional[Callable[[str], None]] = None,
        err: Optional[Callable[[str], None]] = None,
    ) -> None:
        self._out = out or click.echo
        self._err = err or (lambda message: click.echo(message, err=True))

    def line(self, message: str = "") -> None:
        self._out(message)

    def step(self, number: int, total: int, message: str) -> None:
        self._out(f"Step {number}/{total}: {message}")

    def action(self, message: str) -> None:
        self._out(f"  ↳ {message}")

    def error(self, error: DeployError) -> None:
        """Report a fatal error on stderr."""
        self._err(format_annotation(error))
        self._err(format_error_block(error))


def action_outputs(result: DeployResult) -> Dict[str, str]:
    return {
        "deployed-services": result.deployed_services,
        "image-tag": result.image_tag,
    }


def write_outputs(
    result: DeployResult,
    github_output: Optional[str] = None,
    reporter: Optional[ProgressReporter] = None,
) -> List[str]:
    """Publish the deploy result as action outputs.

    Args:
        result: Finished deploy result
        github_output: Path of the GITHUB_OUTPUT file; printed to stdout when unset
        reporter: Where to print when there is no output file

    Returns:
        The ``name=value`` lines written
    """
    lines = [f"{name}={value}" for name, value in action_outputs(result).items()]

    if github_output:
        path = Path(github_output)
        with open(path, "a", encoding="utf-8") as f:
            for line in lines:
                f.write(line + "\n")
    else:
        reporter = reporter or ProgressReporter()
        for line in lines:
            reporter.line(line)

    return lines
