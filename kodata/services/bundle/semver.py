"""Semantic version parsing and comparison for release tags.

Tags follow the Go module grammar: ``vMAJOR[.MINOR[.PATCH[-PRE][+BUILD]]]``.
Short forms are padded with zeros (``v1.2`` == ``v1.2.0``). Prerelease
precedence follows semver 2.0; build metadata never affects ordering.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import TypeAlias, TypeVar

from kodata.core.result import Err, Ok, Result
from kodata.services.bundle.errors import BundleError

_NUM = r"0|[1-9]\d*"
_IDENT = r"[0-9A-Za-z-]+"
_TAG_RE = re.compile(
    rf"^v(?P<major>{_NUM})"
    rf"(?:\.(?P<minor>{_NUM})"
    rf"(?:\.(?P<patch>{_NUM})"
    rf"(?:-(?P<pre>{_IDENT}(?:\.{_IDENT})*))?"
    rf"(?:\+(?P<build>{_IDENT}(?:\.{_IDENT})*))?"
    r")?)?$"
)
_LEADING_ZERO_RE = re.compile(r"^0\d+$")

# numeric identifiers sort before alphanumeric ones
_PreKey: TypeAlias = tuple[int, int, str]

K = TypeVar("K")


@dataclass(frozen=True, slots=True)
class SemVer:
    major: int
    minor: int
    patch: int
    prerelease: tuple[str, ...] = ()

    @property
    def series(self) -> tuple[int, int]:
        return (self.major, self.minor)

    def series_tag(self) -> str:
        return f"v{self.major}.{self.minor}"

    def sort_key(self) -> tuple[int, int, int, int, tuple[_PreKey, ...]]:
        pre = tuple(
            (0, int(ident), "") if ident.isdigit() else (1, 0, ident) for ident in self.prerelease
        )
        # a release outranks any of its prereleases
        return (self.major, self.minor, self.patch, 0 if self.prerelease else 1, pre)


def parse_version(tag: str) -> Result[SemVer, BundleError]:
    m = _TAG_RE.match(tag)
    if m is None:
        return Err(_malformed(tag))

    pre = m.group("pre")
    prerelease = tuple(pre.split(".")) if pre else ()
    if any(_LEADING_ZERO_RE.match(ident) for ident in prerelease):
        return Err(_malformed(tag))

    return Ok(
        SemVer(
            major=int(m.group("major")),
            minor=int(m.group("minor") or 0),
            patch=int(m.group("patch") or 0),
            prerelease=prerelease,
        )
    )


def _malformed(tag: str) -> BundleError:
    return BundleError(
        kind="malformed_version",
        message=f"invalid semantic version tag: {tag!r}",
        hint="tags must look like v1.2.3",
    )


def _cmp(a: K, b: K) -> int:
    return (a > b) - (a < b)  # type: ignore[operator]


def compare_full(a: str, b: str) -> Result[int, BundleError]:
    """Compare two tags by full precedence; -1, 0 or +1.

    Sort newest-first with ``reverse=True`` over ``SemVer.sort_key``.
    """
    va = parse_version(a)
    if isinstance(va, Err):
        return va
    vb = parse_version(b)
    if isinstance(vb, Err):
        return vb
    return Ok(_cmp(va.value.sort_key(), vb.value.sort_key()))


def compare_series(a: str, b: str) -> Result[int, BundleError]:
    """Compare two tags by major.minor only; -1, 0 or +1."""
    va = parse_version(a)
    if isinstance(va, Err):
        return va
    vb = parse_version(b)
    if isinstance(vb, Err):
        return vb
    return Ok(_cmp(va.value.series, vb.value.series))
