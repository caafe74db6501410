"""Filesystem helpers."""

from __future__ import annotations

import os
import shutil
import tempfile
from pathlib import Path

__all__ = ["make_staging_dir", "publish_dir"]


def make_staging_dir(dest: Path) -> Path:
    """Create an empty temp directory next to ``dest`` (same filesystem)."""
    dest.parent.mkdir(parents=True, exist_ok=True)
    return Path(tempfile.mkdtemp(prefix=f".{dest.name}.", suffix=".tmp", dir=str(dest.parent)))


def publish_dir(staging: Path, dest: Path) -> None:
    """Replace ``dest`` with ``staging`` so readers never see a partial directory.

    An existing ``dest`` is moved aside first and restored if the final rename
    fails. ``staging`` is removed on failure.
    """
    backup: Path | None = None
    try:
        if dest.exists():
            backup = Path(
                tempfile.mkdtemp(prefix=f".{dest.name}.", suffix=".old", dir=str(dest.parent))
            )
            os.replace(dest, backup / dest.name)
        try:
            os.replace(staging, dest)
        except OSError:
            if backup is not None:
                os.replace(backup / dest.name, dest)
            raise
    finally:
        if staging.exists():
            shutil.rmtree(staging, ignore_errors=True)
        # keep the backup if the old directory could not be restored
        if backup is not None and dest.exists():
            shutil.rmtree(backup, ignore_errors=True)
