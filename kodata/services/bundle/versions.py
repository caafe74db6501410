from __future__ import annotations

from collections.abc import Iterable

from kodata.core.result import Err, Ok, Result
from kodata.services.bundle.errors import BundleError
from kodata.services.bundle.model import Release
from kodata.services.bundle.semver import SemVer, parse_version


def newest_first(releases: Iterable[Release]) -> Result[list[tuple[SemVer, Release]], BundleError]:
    """Parse every tag once and sort newest first.

    Any malformed tag fails the whole call, annotated with its source.
    """
    parsed: list[tuple[SemVer, Release]] = []
    for release in releases:
        version = parse_version(release.tag)
        if isinstance(version, Err):
            return Err(
                BundleError(
                    kind="malformed_version",
                    message=f"{release.source}: {version.error.message}",
                    hint=version.error.hint,
                )
            )
        parsed.append((version.value, release))

    parsed.sort(key=lambda item: item[0].sort_key(), reverse=True)
    return Ok(parsed)
