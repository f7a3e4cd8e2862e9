"""Target selection by name filter."""

from __future__ import annotations

from typing import Sequence

from hubactions.core.errors import ProviderError, TargetNotFoundError
from hubactions.orchestration.models import Target


def resolve_targets(targets: Sequence[Target], name_filter: str | None = None) -> list[Target]:
    """
    Select the targets to operate on.

    A blank filter selects every target in discovery order; otherwise the
    single target whose name matches exactly is returned. An empty listing
    or an unknown name aborts the run before anything is triggered.
    """
    if not targets:
        raise ProviderError("No projects found")

    if not name_filter or not name_filter.strip():
        return list(targets)

    for target in targets:
        if target.name == name_filter:
            return [target]

    raise TargetNotFoundError(f"Project not found: {name_filter}", details={"name": name_filter})
