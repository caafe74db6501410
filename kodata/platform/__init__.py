"""Platform helpers."""

from .files import make_staging_dir, publish_dir

__all__ = ["make_staging_dir", "publish_dir"]
