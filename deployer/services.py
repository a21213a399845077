"""
Parser for the multiline ``label:id`` service list.
"""

from __future__ import annotations

import logging
from typing import List

from .errors import ConfigurationError
from .schemas import ServiceEntry

logger = logging.getLogger(__name__)

SERVICES_HINT = "Provide one 'label:service-id' pair per line, e.g. 'web:3f2a...'."


def parse_services(text: str) -> List[ServiceEntry]:
    """Parse the service list into entries.

    Blank lines are skipped. Each remaining line is split on its first colon,
    so service IDs may themselves contain colons. Labels and IDs are kept
    exactly as written, surrounding whitespace included.

    Args:
        text: Raw multiline input

    Returns:
        Service entries in input order

    Raises:
        ConfigurationError: On a line without a colon, an empty label or id,
            a duplicate label, or when no entries remain
    """
    entries: List[ServiceEntry] = []
    seen = set()

    for lineno, raw in enumerate(text.splitlines(), start=1):
        line = raw.rstrip("\r")
        if not line.strip():
            continue

        if ":" not in line:
            raise ConfigurationError(
                f"Malformed service line {lineno}: expected 'label:id'",
                details=f"line {lineno}: {line!r}",
                hint=SERVICES_HINT,
            )

        label, service_id = line.split(":", 1)

        if not label.strip():
            raise ConfigurationError(
                f"Empty service label on line {lineno}",
                details=f"line {lineno}: {line!r}",
                hint=SERVICES_HINT,
            )
        if not service_id.strip():
            raise ConfigurationError(
                f"Empty service id for '{label}' on line {lineno}",
                details=f"line {lineno}: {line!r}",
                hint=SERVICES_HINT,
            )
        if label in seen:
            raise ConfigurationError(
                f"Duplicate service label '{label}'",
                details=f"line {lineno}: {line!r}",
                hint="Labels must be unique; give each service its own label.",
            )

        seen.add(label)
        entries.append(ServiceEntry(label=label, id=service_id))

    if not entries:
        raise ConfigurationError(
            "No services found in SERVICES",
            details=f"input: {text!r}",
            hint=SERVICES_HINT,
        )

    logger.debug("Parsed %d services: %s", len(entries), ", ".join(e.label for e in entries))
    return entries
