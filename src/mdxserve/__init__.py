"""mdxserve - static documentation server for MDX content."""

__version__ = "0.1.0"
