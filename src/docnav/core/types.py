"""Core type definitions."""

from enum import StrEnum
from typing import NewType

# URL path for routing (e.g., "/docs", "/docs/guides/oidc-auth")
# Distinct from filesystem Path to catch type mismatches
URLPath = NewType("URLPath", str)


class Policy(StrEnum):
    """How a recoverable problem is reported."""

    ERROR = "error"
    WARN = "warn"
    IGNORE = "ignore"


def normalize_path(path: str) -> URLPath:
    """Normalize a URL path.

    Ensures a single leading slash, collapses repeated slashes and strips
    the trailing slash (except for the root path). Absolute URLs are
    returned unchanged.

    Args:
        path: Raw path (e.g., "docs/guide/", "//docs//guide")

    Returns:
        Normalized URLPath (e.g., "/docs/guide")
    """
    if "://" in path:
        return URLPath(path)
    segments = [segment for segment in path.split("/") if segment]
    return URLPath("/" + "/".join(segments))
