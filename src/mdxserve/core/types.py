"""Core type definitions."""

from typing import NewType

# URL path as received from the HTTP request (e.g., "/guide", "/logo.png")
# Distinct from filesystem Path to catch type mismatches
URLPath = NewType("URLPath", str)
