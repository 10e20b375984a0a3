"""Release list reconciliation and selection."""

import dataclasses
import logging
from typing import List, Optional, Sequence

from ..errors import ReleaseNotFoundError
from .model import Release


SNAPSHOT_SUFFIX = "-SNAPSHOT"

logger = logging.getLogger(__name__)


def normalize_version(version: Optional[str]) -> Optional[str]:
    """Remove a trailing ``-SNAPSHOT`` from a project version.

    Args:
        version: Project version, possibly None

    Returns:
        The version without the snapshot suffix
    """
    if version is not None and version.endswith(SNAPSHOT_SUFFIX):
        return version[:-len(SNAPSHOT_SUFFIX)]
    return version


def get_release(releases: Sequence[Release], version: Optional[str],
                log: Optional[logging.Logger] = None) -> Optional[Release]:
    """Get the first release with exactly the given version.

    Args:
        releases: Releases to search, in order
        version: Version to look for
        log: Logger for scan diagnostics

    Returns:
        The matching release or None
    """
    log = log or logger
    for release in releases:
        log.debug(f"The release: {release.version} has {len(release.actions)} actions.")
        if release.version is not None and release.version == version:
            log.debug(f"Found the correct release: {release.version}")
            _log_release(release, log)
            return release
    return None


def get_latest_release(releases: Sequence[Release], project_version: Optional[str],
                       log: Optional[logging.Logger] = None) -> Release:
    """Get the release that matches the project version.

    A ``-SNAPSHOT`` suffix on the project version is ignored.

    Args:
        releases: Releases to search, in order
        project_version: Version declared by the project
        log: Logger for scan diagnostics

    Returns:
        The first release whose version matches

    Raises:
        ReleaseNotFoundError: If no release matches
    """
    log = log or logger
    version = normalize_version(project_version)
    log.debug(f"Found {len(releases)} releases.")

    release = get_release(releases, version, log)
    if release is None:
        raise ReleaseNotFoundError(version)
    return release


def merge_releases(first: Optional[List[Release]],
                   second: Optional[List[Release]]) -> List[Release]:
    """Merge two release lists.

    Releases of ``first`` keep their order. When ``second`` has a release with
    the same version, its actions are appended after the ones from ``first``
    in a new Release. Releases only found in ``second`` follow, in their
    original order. Duplicate actions are kept.

    Args:
        first: Releases from the authoritative source (changes.xml)
        second: Releases from the supplementary source (issue tracker)

    Returns:
        The merged list; if one side is None the other is returned as is
    """
    if first is None and second is None:
        return []
    if first is None:
        return second
    if second is None:
        return first

    merged: List[Release] = []
    for first_release in first:
        second_release = _find(second, first_release.version)
        if second_release is not None and second_release.actions:
            first_release = dataclasses.replace(
                first_release,
                actions=tuple(first_release.actions) + tuple(second_release.actions),
            )
        merged.append(first_release)

    for second_release in second:
        if _find(merged, second_release.version) is None:
            merged.append(second_release)

    return merged


def _find(releases: Sequence[Release], version: Optional[str]) -> Optional[Release]:
    # Same matching as get_release, without the diagnostics
    for release in releases:
        if release.version is not None and release.version == version:
            return release
    return None


def _log_release(release: Release, log: logging.Logger) -> None:
    if not log.isEnabledFor(logging.DEBUG):
        return
    for action in release.actions:
        log.debug(f"o {action.type}")
        log.debug(f"issue : {action.issue}")
        log.debug(f"action : {action.action}")
        log.debug(f"dueTo : {action.due_to}")
