"""Git ref and branch pattern matching.

Three pattern tiers, checked in this order by the resolver:
- EXACT: a branch name (``develop``)
- PREFIX: a branch prefix ending in ``*`` (``release/*``)
- TAG: a tag pattern (``refs/tags/*``, ``refs/tags/v1.0.0``)

Only a trailing ``*`` is a wildcard. Workflow-style ``release/**`` is read as
``release/*``.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import IntEnum

from aksgate.core.result import Err, Ok, Result

__all__ = [
    "PatternTier",
    "RefPattern",
    "ParsedRef",
    "parse_pattern",
    "parse_ref",
    "patterns_overlap",
]

_HEADS = "refs/heads/"
_TAGS = "refs/tags/"


class PatternTier(IntEnum):
    """Matching priority; lower value is checked first."""

    EXACT = 1
    PREFIX = 2
    TAG = 3


@dataclass(frozen=True, slots=True)
class ParsedRef:
    """A ref split into its branch or tag name. Both None for other refs."""

    raw: str
    branch: str | None = None
    tag: str | None = None


@dataclass(frozen=True, slots=True)
class RefPattern:
    tier: PatternTier
    text: str  # normalized: branch name, branch prefix, or tag name/prefix
    wildcard: bool
    source: str

    def matches(self, ref: ParsedRef) -> bool:
        name = ref.tag if self.tier == PatternTier.TAG else ref.branch
        if name is None:
            return False
        if self.wildcard:
            return name.startswith(self.text)
        return name == self.text


def parse_ref(ref: str) -> ParsedRef:
    ref = ref.strip()
    if ref.startswith(_HEADS):
        return ParsedRef(raw=ref, branch=ref[len(_HEADS) :])
    if ref.startswith(_TAGS):
        return ParsedRef(raw=ref, tag=ref[len(_TAGS) :])
    if ref.startswith("refs/") or not ref:
        return ParsedRef(raw=ref)
    return ParsedRef(raw=ref, branch=ref)


def parse_pattern(pattern: str) -> Result[RefPattern, str]:
    """Parse a configured pattern. Err carries a human readable reason."""
    source = pattern
    text = pattern.strip()
    if not text:
        return Err("empty pattern")

    is_tag = text.startswith(_TAGS)
    if is_tag:
        text = text[len(_TAGS) :]
    elif text.startswith(_HEADS):
        text = text[len(_HEADS) :]
    elif text.startswith("refs/"):
        return Err(f"unsupported ref namespace in pattern '{source}'")

    if text.endswith("/**"):
        text = text[:-1]
    wildcard = text.endswith("*")
    if wildcard:
        text = text[:-1]
    if "*" in text:
        return Err(f"wildcard is only allowed at the end of '{source}'")
    if not wildcard and not text:
        return Err(f"pattern '{source}' names no branch or tag")

    if is_tag:
        tier = PatternTier.TAG
    elif wildcard:
        tier = PatternTier.PREFIX
    else:
        tier = PatternTier.EXACT
    return Ok(RefPattern(tier=tier, text=text, wildcard=wildcard, source=source))


def patterns_overlap(a: RefPattern, b: RefPattern) -> bool:
    """True if some ref would be matched by both patterns.

    Branch patterns (exact and prefix) are compared with each other; tag
    patterns only with tag patterns.
    """
    if (a.tier == PatternTier.TAG) != (b.tier == PatternTier.TAG):
        return False
    if a.wildcard and b.wildcard:
        return a.text.startswith(b.text) or b.text.startswith(a.text)
    if a.wildcard:
        return b.text.startswith(a.text)
    if b.wildcard:
        return a.text.startswith(b.text)
    return a.text == b.text
