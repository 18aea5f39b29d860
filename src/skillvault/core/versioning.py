"""Version parsing, ordering and next-version suggestion."""

import re
from dataclasses import dataclass

DEFAULT_FIRST_VERSION = "1"

_VERSION_RE = re.compile(
    r"^v?(?P<major>\d+)(?:\.(?P<minor>\d+))?(?:\.(?P<patch>\d+))?"
    r"(?:-(?P<pre>[0-9A-Za-z.-]+))?(?:\+(?P<build>[0-9A-Za-z.-]+))?$"
)
_LEADING_NUMBER_RE = re.compile(r"^v?(\d+)")


@dataclass(frozen=True)
class ParsedVersion:
    """A version of the form major[.minor[.patch]][-pre][+build]."""

    major: int
    minor: int
    patch: int
    prerelease: str | None

    def sort_key(self) -> tuple[int, int, int, int, str]:
        # A release sorts after any prerelease of the same triple
        if self.prerelease is None:
            return (self.major, self.minor, self.patch, 1, "")
        return (self.major, self.minor, self.patch, 0, self.prerelease)


def parse_version(value: str) -> ParsedVersion | None:
    """Parse a version string, returning None when it is not a recognized format."""
    match = _VERSION_RE.match(value.strip())
    if match is None:
        return None
    return ParsedVersion(
        major=int(match.group("major")),
        minor=int(match.group("minor") or 0),
        patch=int(match.group("patch") or 0),
        prerelease=match.group("pre"),
    )


def compare_versions(a: str, b: str) -> int:
    """Compare two version strings.

    Parseable versions always order above unparseable ones; two unparseable
    versions are compared lexically.

    Returns:
        -1 if a < b, 0 if equal, 1 if a > b
    """
    key_a = _ordering_key(a)
    key_b = _ordering_key(b)
    if key_a < key_b:
        return -1
    if key_a > key_b:
        return 1
    return 0


def _ordering_key(value: str) -> tuple[int, tuple[int, int, int, int, str], str]:
    parsed = parse_version(value)
    if parsed is None:
        return (0, (0, 0, 0, 0, ""), value)
    return (1, parsed.sort_key(), value)


def select_latest_version(versions: list[str]) -> str | None:
    """Return the highest version in the list, or None when it is empty."""
    if not versions:
        return None
    return max(versions, key=_ordering_key)


def increment_major(current: str) -> str:
    """Increment the major component, preserving the dotted shape of the input.

    "1" -> "2", "1.4" -> "2.0", "1.2.3" -> "2.0.0". When no leading number can be
    read, a minor increment suffix is appended instead ("abc" -> "abc.1").
    """
    match = _LEADING_NUMBER_RE.match(current.strip())
    if match is None:
        return f"{current}.1"

    next_major = int(match.group(1)) + 1
    core = current.strip().split("-", 1)[0].split("+", 1)[0]
    dots = core.count(".")
    if dots == 0:
        return str(next_major)
    if dots == 1:
        return f"{next_major}.0"
    return f"{next_major}.0.0"


def suggest_next_version(existing: list[str], default: str = DEFAULT_FIRST_VERSION) -> str:
    """Suggest the version to assign to new content.

    Never raises: unparseable input degrades to a suffixed increment.
    """
    latest = select_latest_version(existing)
    if latest is None:
        return default
    return increment_major(latest)
