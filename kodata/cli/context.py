from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

import typer

from kodata.core.errors import ErrorCode
from kodata.core.result import Err
from kodata.output.console import ConsoleProtocol, RichConsole
from kodata.services.bundle.config import PackagesConfig, load_packages
from kodata.tools.http import HttpClient, RealHttpClient


@dataclass(frozen=True, slots=True)
class CLIContext:
    config: PackagesConfig
    http: HttpClient
    console: ConsoleProtocol


def build_context(config_path: Path) -> CLIContext:
    config_result = load_packages(config_path)
    if isinstance(config_result, Err):
        typer.echo(f"error: {config_result.error.message}", err=True)
        raise typer.Exit(code=int(ErrorCode.USER_ERROR))

    config = config_result.value
    return CLIContext(
        config=config,
        http=RealHttpClient(timeout=config.settings.timeout),
        console=RichConsole(),
    )
