"""Download a composed bundle into the output tree.

Files are written to a staging directory and published in one rename, so an
interrupted run never leaves a directory that looks complete.
"""

from __future__ import annotations

import shutil
from pathlib import Path
from typing import TYPE_CHECKING

from kodata.core.result import Err, Ok, Result
from kodata.platform.files import make_staging_dir, publish_dir
from kodata.services.bundle.errors import BundleError
from kodata.services.bundle.model import Bundle

if TYPE_CHECKING:
    from kodata.tools.http import HttpClient


def bundle_dir(output_root: Path, package: str, tag: str) -> Path:
    return output_root / package / tag.removeprefix("v")


def store_bundle(http: HttpClient, bundle: Bundle, output_root: Path) -> Result[Path, BundleError]:
    dest = bundle_dir(output_root, bundle.package, bundle.target.tag)
    try:
        staging = make_staging_dir(dest)
    except OSError as e:
        return Err(BundleError(kind="write_failed", message=f"unable to create {dest}: {e}"))

    for file_name, asset in zip(bundle.file_names(), bundle.assets, strict=True):
        result = http.download(asset.url, staging / file_name)
        if isinstance(result, Err):
            shutil.rmtree(staging, ignore_errors=True)
            return Err(
                BundleError(
                    kind="fetch_failed",
                    message=f"unable to fetch {file_name}: {result.error}",
                )
            )

    try:
        publish_dir(staging, dest)
    except OSError as e:
        return Err(BundleError(kind="write_failed", message=f"unable to write {dest}: {e}"))
    return Ok(dest)
