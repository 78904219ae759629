"""Core path resolution for mdxserve."""

from mdxserve.core.resolver import (
    PathOutsideRootError,
    PathResolver,
    Resolution,
    ResolutionKind,
)

__all__ = [
    "PathOutsideRootError",
    "PathResolver",
    "Resolution",
    "ResolutionKind",
]
