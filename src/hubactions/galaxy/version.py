"""
galaxy.yml version helpers.

Read the collection version, enforce that a branch bumps it relative to
the main branch, and stamp a new clock-derived version.
"""

from __future__ import annotations

import subprocess
from datetime import datetime
from pathlib import Path
from typing import Any
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

import semver
import structlog
import yaml

from hubactions.core.errors import ConfigurationError, ValidationError

logger = structlog.get_logger()

DEFAULT_GALAXY_FILE = "galaxy.yml"
DEFAULT_TIMEZONE = "America/Chicago"


def _load_yaml(text: str) -> dict[str, Any] | None:
    data = yaml.safe_load(text)
    return data if isinstance(data, dict) else None


def read_galaxy_version(path: str | Path = DEFAULT_GALAXY_FILE) -> str | None:
    """Return the ``version`` field of a galaxy.yml, or None when unavailable."""
    galaxy_path = Path(path)
    if not galaxy_path.exists():
        return None
    try:
        data = _load_yaml(galaxy_path.read_text(encoding="utf-8"))
    except (OSError, yaml.YAMLError) as exc:
        logger.warning("galaxy_file_unreadable", path=str(galaxy_path), error=str(exc))
        return None
    if not data or data.get("version") in (None, ""):
        return None
    return str(data["version"])


def compare_versions(current: str, baseline: str) -> bool:
    """True when ``current`` is strictly greater than ``baseline`` (semver)."""
    try:
        return semver.Version.parse(current) > semver.Version.parse(baseline)
    except ValueError as exc:
        raise ValidationError(f"Invalid semantic version: {exc}") from exc


def read_version_at_ref(path: str | Path, ref: str = "origin/main") -> str | None:
    """Read the galaxy.yml version as committed at ``ref`` via ``git show``."""
    try:
        completed = subprocess.run(
            ["git", "show", f"{ref}:{Path(path).as_posix()}"],
            capture_output=True,
            text=True,
            check=True,
        )
    except (OSError, subprocess.CalledProcessError) as exc:
        stderr = getattr(exc, "stderr", "") or str(exc)
        raise ValidationError(f"Could not read {path} at {ref}: {stderr.strip()}") from exc

    try:
        data = _load_yaml(completed.stdout)
    except yaml.YAMLError as exc:
        raise ValidationError(f"Could not parse {path} at {ref}") from exc
    if not data or data.get("version") in (None, ""):
        return None
    return str(data["version"])


def check_version_bumped(path: str | Path = DEFAULT_GALAXY_FILE, ref: str = "origin/main") -> str:
    """Raise ValidationError unless the working copy version beats ``ref``.

    Returns the current version on success.
    """
    if not Path(path).exists():
        raise ValidationError(f"{path} not found in current directory")

    baseline = read_version_at_ref(path, ref)
    current = read_galaxy_version(path)
    if not baseline or not current:
        raise ValidationError("Could not find and compare main and current versions")

    if not compare_versions(current, baseline):
        raise ValidationError(
            "Current version is not greater than main branch version",
            details={"current": current, "main": baseline},
        )
    logger.info("version_bumped", current=current, main=baseline)
    return current


def timestamp_version(now: datetime | None = None, tz: str = DEFAULT_TIMEZONE) -> str:
    """
    Build a ``YEAR.MONTHDAY.HOURMINUTE`` version for the given moment.

    Leading zeros are dropped so the result stays valid semver, e.g.
    2026-01-05 09:07 becomes ``2026.105.907``.
    """
    try:
        zone = ZoneInfo(tz)
    except (ZoneInfoNotFoundError, ValueError) as exc:
        raise ConfigurationError(f"Unknown timezone: {tz}") from exc

    moment = (now or datetime.now(tz=zone)).astimezone(zone)
    month_day = int(f"{moment.month:02d}{moment.day:02d}")
    hour_minute = int(f"{moment.hour:02d}{moment.minute:02d}")
    return f"{moment.year}.{month_day}.{hour_minute}"


def increment_galaxy_version(
    path: str | Path = DEFAULT_GALAXY_FILE,
    tz: str = DEFAULT_TIMEZONE,
    now: datetime | None = None,
) -> tuple[str, str]:
    """Stamp a new version into galaxy.yml and return ``(old, new)``."""
    galaxy_path = Path(path)
    if not galaxy_path.exists():
        raise ValidationError(f"{galaxy_path} not found in current directory")

    try:
        data = _load_yaml(galaxy_path.read_text(encoding="utf-8"))
    except yaml.YAMLError as exc:
        raise ValidationError(f"Could not parse {galaxy_path}") from exc
    if data is None:
        raise ValidationError(f"Could not parse {galaxy_path}")

    old_version = str(data.get("version") or "unknown")
    new_version = timestamp_version(now, tz)
    data["version"] = new_version
    galaxy_path.write_text(yaml.safe_dump(data, sort_keys=False), encoding="utf-8")

    logger.info("version_incremented", old=old_version, new=new_version, timezone=tz)
    return old_version, new_version
