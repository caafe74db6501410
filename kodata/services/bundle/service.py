from __future__ import annotations

from dataclasses import replace
from pathlib import Path

from kodata.core.result import Err, Ok, Result
from kodata.output.console import ConsoleProtocol, Style
from kodata.services.bundle.compose import compose
from kodata.services.bundle.errors import BundleError
from kodata.services.bundle.github import GITHUB_API_URL, fetch_all_releases
from kodata.services.bundle.model import Bundle, Package, Release
from kodata.services.bundle.store import store_bundle
from kodata.services.bundle.window import last_n
from kodata.tools.http import HttpClient

DEFAULT_MINORS = 4


class BundleService:
    """Compose and publish bundles for the releases of one package.

    Policy:
    - Release listings are fetched once per service and reused.
    - Only the last ``minors`` minor series of the primary source are built,
      unless a single tag is requested.
    - The first failure stops the run; bundles already published stay.
    """

    def __init__(
        self,
        *,
        package: Package,
        http: HttpClient,
        console: ConsoleProtocol,
        output_root: Path,
        api_url: str = GITHUB_API_URL,
    ) -> None:
        self._package = package
        self._http = http
        self._console = console
        self._output_root = output_root
        self._api_url = api_url
        self._releases: dict[str, list[Release]] | None = None

    def releases(self) -> Result[dict[str, list[Release]], BundleError]:
        if self._releases is None:
            result = fetch_all_releases(self._http, self._package, api_url=self._api_url)
            if isinstance(result, Err):
                return result
            self._releases = result.value
        return Ok(self._releases)

    def targets(self, *, minors: int, tag: str | None = None) -> Result[list[Release], BundleError]:
        all_releases = self.releases()
        if isinstance(all_releases, Err):
            return all_releases

        source = str(self._package.primary)
        primary = all_releases.value.get(source, [])
        if tag is not None:
            for release in primary:
                if release.tag == tag:
                    return Ok([release])
            return Err(
                BundleError(
                    kind="unknown_release",
                    message=f"{source} has no release {tag}",
                )
            )

        window = last_n(minors, primary)
        if isinstance(window, Err):
            return Err(replace(window.error, message=f"{source}: {window.error.message}"))
        return window

    def plan(self, tag: str) -> Result[Bundle, BundleError]:
        targets = self.targets(minors=1, tag=tag)
        if isinstance(targets, Err):
            return targets
        return self._compose(targets.value[0])

    def run(
        self,
        *,
        minors: int = DEFAULT_MINORS,
        tag: str | None = None,
        dry_run: bool = False,
    ) -> Result[list[Path], BundleError]:
        targets = self.targets(minors=minors, tag=tag)
        if isinstance(targets, Err):
            return targets

        written: list[Path] = []
        for target in targets.value:
            bundle = self._compose(target)
            if isinstance(bundle, Err):
                return bundle

            if dry_run:
                self._console.print(
                    f"would write {len(bundle.value.assets)} files for {target}", Style.DIM
                )
                continue

            stored = store_bundle(self._http, bundle.value, self._output_root)
            if isinstance(stored, Err):
                return stored
            self._console.success(f"{target} -> {stored.value}")
            written.append(stored.value)
        return Ok(written)

    def _compose(self, target: Release) -> Result[Bundle, BundleError]:
        all_releases = self.releases()
        if isinstance(all_releases, Err):
            return all_releases

        bundle = compose(target, self._package, all_releases.value)
        if isinstance(bundle, Err):
            error = bundle.error
            return Err(replace(error, message=f"{target}: {error.message}"))

        for alignment in bundle.value.alignments:
            self._console.info(alignment.describe())
        return bundle
