"""Pick the dependency release that matches a target release.

The chosen release shares the target's major.minor series and is the newest
one created no later than the target. When the target predates the whole
series, the oldest release of the series is used instead.
"""

from __future__ import annotations

from collections.abc import Iterable

from kodata.core.result import Err, Ok, Result
from kodata.services.bundle.errors import BundleError
from kodata.services.bundle.model import Release
from kodata.services.bundle.semver import SemVer, parse_version
from kodata.services.bundle.versions import newest_first


def series_range(target: SemVer, ordered: list[SemVer]) -> tuple[int, int]:
    """Half-open ``[start, end)`` range of ``ordered`` in the target's series.

    ``ordered`` must be sorted newest first. ``start == end`` means no match.
    """
    start = -1
    end = len(ordered)
    for i, version in enumerate(ordered):
        if start == -1 and version.series == target.series:
            start = i
        if version.series < target.series:
            end = i
            break
    if start == -1:
        return (end, end)
    return (start, end)


def align(target: Release, candidates: Iterable[Release]) -> Result[Release, BundleError]:
    target_version = parse_version(target.tag)
    if isinstance(target_version, Err):
        return Err(
            BundleError(
                kind="malformed_version",
                message=f"{target.source}: {target_version.error.message}",
                hint=target_version.error.hint,
            )
        )

    ordered = newest_first(candidates)
    if isinstance(ordered, Err):
        return ordered

    items = ordered.value
    start, end = series_range(target_version.value, [version for version, _ in items])
    if start == end:
        return Err(
            BundleError(
                kind="no_matching_series",
                message=(
                    f"no release in series {target_version.value.series_tag()} "
                    f"to align with {target}"
                ),
            )
        )

    window = [release for _, release in items[start:end]]
    for release in window:
        if release.created <= target.created:
            return Ok(release)
    return Ok(window[-1])
