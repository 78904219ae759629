"""Request path to file resolution.

Maps an incoming URL path onto a file under the root directory using a
fixed precedence: direct file, ``<path>.mdx``, ``<path>/index.mdx``, then
the fallback document.
"""

import logging
import os
from dataclasses import dataclass
from enum import Enum
from pathlib import Path

from mdxserve.core.types import URLPath

logger = logging.getLogger(__name__)


class ResolutionKind(Enum):
    """Which rule produced a resolution."""

    STATIC = "static"
    DIRECTORY_INDEX = "directory_index"
    DIRECT = "direct"
    MDX = "mdx"
    INDEX_MDX = "index_mdx"
    FALLBACK = "fallback"


@dataclass(frozen=True)
class Resolution:
    """File selected for a request path."""

    kind: ResolutionKind
    path: Path


class PathOutsideRootError(ValueError):
    """Raised when a request path normalizes to a location outside the root."""

    def __init__(self, request_path: str) -> None:
        super().__init__(f"Path escapes root directory: {request_path}")
        self.request_path = request_path


class PathResolver:
    """Resolves request paths to files under a root directory."""

    def __init__(
        self,
        root_dir: Path,
        *,
        fallback: str = "index.html",
        extension: str = ".mdx",
        index_name: str = "index.mdx",
        directory_index: str = "index.html",
    ) -> None:
        """Initialize resolver.

        Args:
            root_dir: Directory all resolved files live under
            fallback: Document served when no content file matches
            extension: Extension appended to the content path
            index_name: File looked up inside a directory-style content path
            directory_index: File served for a request naming a directory
        """
        self._root_dir = Path(os.path.normpath(root_dir.absolute()))
        self._fallback = fallback
        self._extension = extension
        self._index_name = index_name
        self._directory_index = directory_index

    @property
    def root_dir(self) -> Path:
        """Root directory resolved files are joined onto."""
        return self._root_dir

    @property
    def fallback_path(self) -> Path:
        """Absolute path of the fallback document."""
        return self._root_dir / self._fallback

    def lookup_static(self, request_path: str) -> Resolution | None:
        """Find a file sitting at exactly the request path.

        Matches a regular file at the root-joined path, or the directory
        index of a directory there. Paths with a hidden segment never match.

        Args:
            request_path: Decoded URL path

        Returns:
            STATIC or DIRECTORY_INDEX resolution, or None when nothing is there

        Raises:
            PathOutsideRootError: If the path normalizes outside root_dir
        """
        url_path = URLPath(request_path)
        path = self._join(url_path)

        if self.is_hidden(path):
            return None

        if path.is_file():
            resolution = Resolution(ResolutionKind.STATIC, path)
        elif path.is_dir() and (path / self._directory_index).is_file():
            resolution = Resolution(
                ResolutionKind.DIRECTORY_INDEX,
                path / self._directory_index,
            )
        else:
            return None

        self._log(url_path, resolution)
        return resolution

    def is_hidden(self, path: Path) -> bool:
        """Whether any segment of path below root_dir starts with a dot."""
        return any(
            part.startswith(".") for part in path.relative_to(self._root_dir).parts
        )

    def resolve(self, request_path: str) -> Resolution:
        """Resolve a request path to a file.

        Paths containing a dot are treated as direct file references and are
        not checked for existence; sending a missing one is left to fail
        downstream. Extension-less paths always resolve to something, ending
        at the fallback document.

        Args:
            request_path: Decoded URL path (e.g., "/guide", "/img/logo.png")

        Returns:
            Resolution describing the selected file

        Raises:
            PathOutsideRootError: If the path normalizes outside root_dir
        """
        url_path = URLPath(request_path)

        if "." in url_path:
            resolution = Resolution(ResolutionKind.DIRECT, self._join(url_path))
            self._log(url_path, resolution)
            return resolution

        content_path = url_path.strip("/")

        if content_path:
            mdx_path = self._join(url_path, f"{content_path}{self._extension}")
            if mdx_path.is_file():
                resolution = Resolution(ResolutionKind.MDX, mdx_path)
                self._log(url_path, resolution)
                return resolution

        index_path = self._join(url_path, content_path, self._index_name)
        if index_path.is_file():
            resolution = Resolution(ResolutionKind.INDEX_MDX, index_path)
            self._log(url_path, resolution)
            return resolution

        resolution = Resolution(ResolutionKind.FALLBACK, self.fallback_path)
        self._log(url_path, resolution)
        return resolution

    def _join(self, url_path: URLPath, *parts: str) -> Path:
        """Join path parts onto root_dir with lexical normalization.

        When no parts are given, url_path itself is joined.
        """
        relative = os.path.join(*parts) if parts else url_path.lstrip("/")
        joined = os.path.normpath(os.path.join(self._root_dir, relative))

        if os.path.commonpath([joined, self._root_dir]) != str(self._root_dir):
            raise PathOutsideRootError(url_path)

        return Path(joined)

    def _log(self, url_path: URLPath, resolution: Resolution) -> None:
        logger.debug(
            f"Resolved '{url_path}' -> {resolution.kind.value}: {resolution.path}",
        )
