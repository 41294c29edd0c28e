from __future__ import annotations

import re
from dataclasses import dataclass


# Tags may omit the leading "v" and carry a suffix after X.Y.Z.
_TAG_PREFIX_RE = re.compile(r"^v?(\d+)\.(\d+)\.(\d+)")
_VERSION_PREFIX_RE = re.compile(r"^(\d+)\.(\d+)\.(\d+)")


@dataclass(frozen=True, slots=True, order=True)
class SemVer:
    major: int
    minor: int
    patch: int

    def to_tag(self) -> str:
        return f"v{self.major}.{self.minor}.{self.patch}"

    def bump_patch(self) -> "SemVer":
        return SemVer(self.major, self.minor, self.patch + 1)


ZERO = SemVer(0, 0, 0)


def parse_tag_prefix(tag: str) -> SemVer | None:
    """Parse the leading ``[v]X.Y.Z`` of a tag, ignoring what follows."""
    m = _TAG_PREFIX_RE.match(tag.strip())
    if m is None:
        return None
    return SemVer(int(m.group(1)), int(m.group(2)), int(m.group(3)))


def starts_with_version(name: str) -> bool:
    """True for release branch names such as ``1.4.0`` or ``1.4.0-rc``."""
    return _VERSION_PREFIX_RE.match(name) is not None
