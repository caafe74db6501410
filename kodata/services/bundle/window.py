from __future__ import annotations

from collections.abc import Collection

from kodata.core.result import Err, Ok, Result
from kodata.services.bundle.errors import BundleError
from kodata.services.bundle.model import Release
from kodata.services.bundle.versions import newest_first


def last_n(minors: int, releases: Collection[Release]) -> Result[list[Release], BundleError]:
    """Select the releases of the last ``minors`` minor series, newest first.

    Every patch release of a kept series is retained. ``releases`` need not be
    sorted and is not modified.
    """
    if minors < 1:
        return Err(
            BundleError(
                kind="invalid_input",
                message=f"number of minor releases must be positive, got {minors}",
            )
        )
    if not releases:
        return Err(
            BundleError(
                kind="empty_release_set",
                message="cannot select minor releases from an empty release set",
            )
        )

    ordered = newest_first(releases)
    if isinstance(ordered, Err):
        return ordered

    items = ordered.value
    remaining = minors
    previous = items[0][0].series
    end = len(items)
    for i, (version, _) in enumerate(items):
        if version.series == previous:
            continue
        previous = version.series
        remaining -= 1
        if remaining == 0:
            end = i
            break

    return Ok([release for _, release in items[:end]])
