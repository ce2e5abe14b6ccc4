"""Release version extraction from readme and plugin header"""

import logging
import re
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable, List, Optional

from packaging.version import InvalidVersion, Version

from ..api.exceptions import (
    PlaceholderVersion,
    SourceFileMissingError,
    VersionMismatch,
    VersionNotFound,
)
from ..constants import HEADER_VERSION_LABEL, PLACEHOLDER_VERSION, README_VERSION_LABEL

logger = logging.getLogger(__name__)

# Leading whitespace and comment decoration allowed before a label,
# so ` * Version: 1.0` inside a PHP docblock is recognised
_LABEL_PREFIX = r"^[ \t]*(?:(?:\*|#|//)[ \t]*)?"


def extract_field(text: str, label: str) -> Optional[str]:
    """
    Extract the value of a labeled field from the first matching line

    Args:
        text: Source text
        label: Field label without the colon, e.g. "Stable tag"

    Returns:
        Trimmed value, or None if no line carries the label
    """
    pattern = re.compile(_LABEL_PREFIX + re.escape(label) + r"[ \t]*:(.*)$", re.MULTILINE)
    match = pattern.search(text)
    if match is None:
        return None
    return match.group(1).strip()


@dataclass(frozen=True)
class ReleaseVersion:
    """A version both sources agree on"""
    value: str
    readme_path: Optional[str] = None
    header_path: Optional[str] = None

    def __str__(self) -> str:
        return self.value


def resolve_version(readme_text: str, header_text: str,
                    readme_source: str = "readme.txt",
                    header_source: str = "plugin header") -> ReleaseVersion:
    """
    Establish the release version from readme and plugin header text

    Args:
        readme_text: Readme content (``Stable tag:``)
        header_text: Plugin header content (``Version:``)
        readme_source: Name used in diagnostics
        header_source: Name used in diagnostics

    Returns:
        The agreed release version

    Raises:
        VersionNotFound: Either source lacks a non-empty value
        PlaceholderVersion: The readme declares "trunk"
        VersionMismatch: The values differ
    """
    stable = extract_field(readme_text, README_VERSION_LABEL)
    if not stable:
        raise VersionNotFound(readme_source, README_VERSION_LABEL)

    header = extract_field(header_text, HEADER_VERSION_LABEL)
    if not header:
        raise VersionNotFound(header_source, HEADER_VERSION_LABEL)

    if stable == PLACEHOLDER_VERSION:
        raise PlaceholderVersion(stable)

    if stable != header:
        raise VersionMismatch(stable, header)

    logger.debug(f"Release version {stable} confirmed by {readme_source} and {header_source}")
    return ReleaseVersion(stable, readme_source, header_source)


def read_release_version(readme_path: Path, header_path: Path) -> ReleaseVersion:
    """
    Read both version sources from disk and resolve the release version

    Raises:
        SourceFileMissingError: Either file does not exist
        VersionError: See :func:`resolve_version`
    """
    if not readme_path.is_file():
        raise SourceFileMissingError(str(readme_path), "readme.txt")
    if not header_path.is_file():
        raise SourceFileMissingError(str(header_path), "Main plugin file")

    return resolve_version(
        readme_path.read_text(encoding='utf-8', errors='replace'),
        header_path.read_text(encoding='utf-8', errors='replace'),
        readme_source=str(readme_path),
        header_source=str(header_path)
    )


def version_warnings(version: str, existing: Iterable[str]) -> List[str]:
    """
    Advisory checks that never block a release

    Args:
        version: Release version
        existing: Names of already published tags

    Returns:
        Warning messages
    """
    warnings = []
    try:
        parsed = Version(version)
    except InvalidVersion:
        return [f"Version '{version}' is not a PEP 440 version; ordering checks skipped"]

    published = []
    for name in existing:
        try:
            published.append(Version(name))
        except InvalidVersion:
            continue

    if published:
        latest = max(published)
        if parsed <= latest:
            warnings.append(f"Version {version} is not newer than the latest published tag {latest}")

    return warnings
