"""
EnvDoctor Version Detector — Pull version numbers out of tool output.

Tools print their version in all sorts of shapes ("v18.17.0",
"rustc 1.72.0 (5680fa18f 2023-08-23)", "9.12.4"). This module can:
  1. Extract the first major.minor.patch triple from free-form text
  2. Check a triple against a minimum major version
  3. Compare full versions for callers that need a finer floor
"""

import re
from dataclasses import dataclass
from typing import Optional

from packaging.version import Version


_TRIPLE_RE = re.compile(r"(\d+)\.(\d+)\.(\d+)")


@dataclass(frozen=True)
class VersionTriple:
    """A parsed semantic version."""
    major: int
    minor: int
    patch: int

    def __str__(self) -> str:
        return f"{self.major}.{self.minor}.{self.patch}"


def parse_version(text: Optional[str]) -> Optional[VersionTriple]:
    """Extract the first major.minor.patch triple found anywhere in `text`.

    Args:
        text: Raw command output, e.g. "v16.20.0" or "rustc 1.72.0 (abc 2023-01-01)".

    Returns:
        VersionTriple, or None if the text holds no such triple. None means
        "version unknown" and is never the same as 0.0.0.
    """
    if not text:
        return None
    match = _TRIPLE_RE.search(text)
    if not match:
        return None
    return VersionTriple(
        major=int(match.group(1)),
        minor=int(match.group(2)),
        patch=int(match.group(3)),
    )


def meets_minimum(triple: Optional[VersionTriple], required_major: int) -> bool:
    """True if the version is known and its major is at least `required_major`.

    Minor and patch are informational only.
    """
    if triple is None:
        return False
    return triple.major >= required_major


def compare_versions(installed: str, boundary: str) -> int:
    """Compare two version strings.

    Returns:
        -1 if installed < boundary
         0 if installed == boundary
         1 if installed > boundary

    Raises:
        InvalidVersion: if either string is not a valid version.
    """
    v_installed = Version(installed)
    v_boundary = Version(boundary)

    if v_installed < v_boundary:
        return -1
    elif v_installed > v_boundary:
        return 1
    return 0


def meets_minimum_version(triple: Optional[VersionTriple], minimum: str) -> bool:
    """True if the version is known and is at least the full version `minimum`.

    Used only by tool specs that declare a `minimum_version`; the default
    checks gate on the major component alone.
    """
    if triple is None:
        return False
    return compare_versions(str(triple), minimum) >= 0
