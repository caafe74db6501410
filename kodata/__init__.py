"""kodata: compose release-aligned manifest bundles."""

__version__ = "0.1.0"
