from __future__ import annotations

from pathlib import Path

import typer

from kodata.cli.commands._helpers import exit_on_error, require_package
from kodata.cli.context import CLIContext, build_context
from kodata.core.config import DEFAULT_CONFIG_PATH
from kodata.output.console import Style
from kodata.services.bundle.service import DEFAULT_MINORS, BundleService


def _service(config: Path, package: str, out: Path | None) -> tuple[BundleService, CLIContext]:
    ctx = build_context(config)
    pkg = require_package(ctx, package)
    service = BundleService(
        package=pkg,
        http=ctx.http,
        console=ctx.console,
        output_root=out if out is not None else Path(ctx.config.settings.output),
        api_url=ctx.config.settings.api_url,
    )
    return service, ctx


def compose(
    package: str = typer.Option(..., "--package", "-p", help="Package name from the config"),
    tag: str | None = typer.Option(None, "--tag", help="Only build this release tag"),
    minors: int = typer.Option(
        DEFAULT_MINORS, "--minors", min=1, help="Number of recent minor series to build"
    ),
    config: Path = typer.Option(DEFAULT_CONFIG_PATH, "--config", help="Package file (TOML)"),
    out: Path | None = typer.Option(None, "--out", help="Output root (overrides settings)"),
    dry_run: bool = typer.Option(False, "--dry-run", help="Compose without downloading"),
) -> None:
    """Compose and download bundles for the latest releases of a package."""
    service, ctx = _service(config, package, out)
    written = exit_on_error(service.run(minors=minors, tag=tag, dry_run=dry_run), ctx)
    if not dry_run:
        ctx.console.success(f"{len(written)} bundle(s) written")


def plan(
    package: str = typer.Option(..., "--package", "-p", help="Package name from the config"),
    tag: str = typer.Option(..., "--tag", help="Release tag to compose"),
    config: Path = typer.Option(DEFAULT_CONFIG_PATH, "--config", help="Package file (TOML)"),
) -> None:
    """Show the ordered bundle for one release without downloading it."""
    service, ctx = _service(config, package, None)
    bundle = exit_on_error(service.plan(tag), ctx)

    ctx.console.header(f"{bundle.package} {bundle.target.tag}")
    for file_name, asset in zip(bundle.file_names(), bundle.assets, strict=True):
        origin = "dependency" if asset.secondary else "primary"
        ctx.console.print(f"{file_name}  ({origin})")
        ctx.console.print(f"    {asset.url}", Style.DIM)


def releases(
    package: str = typer.Option(..., "--package", "-p", help="Package name from the config"),
    minors: int = typer.Option(
        DEFAULT_MINORS, "--minors", min=1, help="Number of recent minor series to list"
    ),
    config: Path = typer.Option(DEFAULT_CONFIG_PATH, "--config", help="Package file (TOML)"),
) -> None:
    """List the primary releases that would be built, newest first."""
    service, ctx = _service(config, package, None)
    targets = exit_on_error(service.targets(minors=minors), ctx)
    for release in targets:
        ctx.console.print(f"{release.tag}  {release.created:%Y-%m-%d}")
