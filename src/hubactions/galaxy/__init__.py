"""galaxy.yml version tooling."""

from hubactions.galaxy.version import (
    check_version_bumped,
    compare_versions,
    increment_galaxy_version,
    read_galaxy_version,
    read_version_at_ref,
    timestamp_version,
)

__all__ = [
    "check_version_bumped",
    "compare_versions",
    "increment_galaxy_version",
    "read_galaxy_version",
    "read_version_at_ref",
    "timestamp_version",
]
