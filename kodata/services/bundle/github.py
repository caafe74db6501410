"""GitHub release listing.

Releases are read from the REST API, one page of ``PER_PAGE`` at a time, until
a short or empty page. Draft releases are skipped since their assets are not
downloadable.
"""

from __future__ import annotations

import json
from datetime import UTC, datetime
from typing import TYPE_CHECKING

from kodata.core.result import Err, Ok, Result
from kodata.core.structured import as_obj_list, as_str_dict, get_bool, get_list, get_str
from kodata.services.bundle.errors import BundleError
from kodata.services.bundle.model import Asset, Package, Release, Source

if TYPE_CHECKING:
    from kodata.tools.http import HttpClient

__all__ = ["GITHUB_API_URL", "PER_PAGE", "fetch_all_releases", "list_releases", "parse_release"]

GITHUB_API_URL = "https://api.github.com"
PER_PAGE = 100


def releases_url(api_url: str, source: Source, page: int) -> str:
    return f"{api_url.rstrip('/')}/repos/{source}/releases?per_page={PER_PAGE}&page={page}"


def _invalid(url: str, message: str) -> BundleError:
    return BundleError(kind="invalid_response", message=f"{message} ({url})")


def _parse_created(value: str) -> datetime | None:
    try:
        created = datetime.fromisoformat(value)
    except ValueError:
        return None
    if created.tzinfo is None:
        return created.replace(tzinfo=UTC)
    return created


def parse_release(source: Source, obj: object) -> Release | None:
    """Build a Release from one API object; None if required fields are missing."""
    data = as_str_dict(obj)
    if data is None:
        return None

    tag = get_str(data, "tag_name")
    created_raw = get_str(data, "created_at")
    if tag is None or created_raw is None:
        return None
    created = _parse_created(created_raw)
    if created is None:
        return None

    assets: list[Asset] = []
    for item in get_list(data, "assets") or []:
        asset = as_str_dict(item)
        if asset is None:
            continue
        name = get_str(asset, "name")
        url = get_str(asset, "browser_download_url")
        if name and url:
            assets.append(Asset(name=name, url=url))

    return Release(org=source.org, repo=source.repo, tag=tag, created=created, assets=tuple(assets))


def list_releases(
    http: HttpClient,
    source: Source,
    *,
    api_url: str = GITHUB_API_URL,
) -> Result[list[Release], BundleError]:
    releases: list[Release] = []
    page = 1
    while True:
        url = releases_url(api_url, source, page)
        text = http.get_text(url)
        if isinstance(text, Err):
            return Err(
                BundleError(
                    kind="fetch_failed",
                    message=f"unable to list releases of {source}: {text.error}",
                )
            )

        try:
            items = as_obj_list(json.loads(text.value))
        except json.JSONDecodeError as e:
            return Err(_invalid(url, f"JSON parse error: {e}"))
        if items is None:
            return Err(_invalid(url, "expected a JSON array of releases"))

        for item in items:
            if get_bool(as_str_dict(item) or {}, "draft"):
                continue
            release = parse_release(source, item)
            if release is None:
                return Err(_invalid(url, f"malformed release entry for {source}"))
            releases.append(release)

        if len(items) < PER_PAGE:
            return Ok(releases)
        page += 1


def fetch_all_releases(
    http: HttpClient,
    package: Package,
    *,
    api_url: str = GITHUB_API_URL,
) -> Result[dict[str, list[Release]], BundleError]:
    """List releases for every source of ``package``, keyed by ``org/repo``."""
    out: dict[str, list[Release]] = {}
    for source in package.sources:
        key = str(source)
        if key in out:
            continue
        result = list_releases(http, source, api_url=api_url)
        if isinstance(result, Err):
            return result
        out[key] = result.value
    return Ok(out)
