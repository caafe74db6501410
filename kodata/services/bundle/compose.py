from __future__ import annotations

from dataclasses import replace

from kodata.core.result import Err, Ok, Result
from kodata.services.bundle.align import align
from kodata.services.bundle.errors import BundleError
from kodata.services.bundle.model import (
    Alignment,
    Asset,
    Bundle,
    Package,
    Release,
    ReleaseCollection,
)
from kodata.services.bundle.ordering import filter_assets, sort_assets
from kodata.services.bundle.semver import parse_version


def compose(
    target: Release,
    package: Package,
    all_releases: ReleaseCollection,
) -> Result[Bundle, BundleError]:
    """Compose the ordered asset bundle for one release of ``package``.

    Target assets come first (filtered by the primary rule), then the assets of
    one aligned release per additional source, marked secondary. The result is
    sorted with the placement rules; which release was aligned for each source
    is returned in ``Bundle.alignments``.
    """
    parsed = parse_version(target.tag)
    if isinstance(parsed, Err):
        error = parsed.error
        return Err(replace(error, message=f"{target.source}: {error.message}"))

    assets: list[Asset] = list(filter_assets(target.assets, package.primary.accept, target.tag))
    alignments: list[Alignment] = []

    for source in package.additional:
        key = str(source)
        chosen = align(target, all_releases.get(key, ()))
        if isinstance(chosen, Err):
            error = chosen.error
            return Err(replace(error, message=f"{key}: {error.message}"))

        release = chosen.value
        assets.extend(
            replace(asset, secondary=True)
            for asset in filter_assets(release.assets, source.accept, release.tag)
        )
        alignments.append(Alignment(source=key, target=target, chosen=release))

    return Ok(
        Bundle(
            package=package.name,
            target=target,
            assets=sort_assets(assets),
            alignments=tuple(alignments),
        )
    )
