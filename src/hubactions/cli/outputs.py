"""Machine-readable step outputs for the calling pipeline."""

from __future__ import annotations

import os
from pathlib import Path

import structlog

logger = structlog.get_logger()


def set_output(name: str, value: str) -> None:
    """Append ``name=value`` to the file named by ``$GITHUB_OUTPUT``.

    Outside a workflow run the value is only logged.
    """
    output_file = os.environ.get("GITHUB_OUTPUT")
    if not output_file:
        logger.debug("output_not_written", name=name, value=value)
        return
    if "\n" in value:
        delimiter = f"ghadelimiter_{name}"
        line = f"{name}<<{delimiter}\n{value}\n{delimiter}\n"
    else:
        line = f"{name}={value}\n"
    with Path(output_file).open("a", encoding="utf-8") as handle:
        handle.write(line)
