"""
content_compliance package bootstrap.

Deterministic rule engine that scores healthcare marketing content against
TGA therapeutic-advertising and AHPRA professional-boundary rule sets before
publication.
"""

from importlib import metadata


def get_version() -> str:
    """Return the package version if installed, else '0.0.0'."""
    try:
        return metadata.version("content-compliance")
    except metadata.PackageNotFoundError:  # pragma: no cover - best effort only
        return "0.0.0"


__all__ = ["get_version"]
