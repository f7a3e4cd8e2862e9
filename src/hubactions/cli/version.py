"""galaxy.yml version commands."""

from __future__ import annotations

from datetime import datetime

from hubactions.cli.outputs import set_output
from hubactions.cli.ux import success
from hubactions.core.errors import ExitCode, main_with_error_handling
from hubactions.galaxy import check_version_bumped, increment_galaxy_version
from hubactions.galaxy.version import DEFAULT_GALAXY_FILE, DEFAULT_TIMEZONE


@main_with_error_handling()
def version_check_command(galaxy_file: str = DEFAULT_GALAXY_FILE, ref: str = "origin/main") -> int:
    """Fail unless galaxy.yml carries a version greater than ``ref``'s."""
    current = check_version_bumped(galaxy_file, ref)
    success(f"Version {current} is greater than {ref}")
    return ExitCode.SUCCESS


@main_with_error_handling()
def version_increment_command(
    galaxy_file: str = DEFAULT_GALAXY_FILE,
    timezone: str = DEFAULT_TIMEZONE,
    now: datetime | None = None,
) -> int:
    """Stamp a clock-derived version into galaxy.yml."""
    old_version, new_version = increment_galaxy_version(galaxy_file, timezone, now=now)
    success(f"Version updated from {old_version} to {new_version} ({timezone} timezone)")
    set_output("version", new_version)
    set_output("previous-version", old_version)
    return ExitCode.SUCCESS
