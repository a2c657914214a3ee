"""Core type definitions."""

from typing import NewType

# URL route for a page (e.g., "/", "/guides/create-a-store")
# Distinct from filesystem Path to catch type mismatches
URLPath = NewType("URLPath", str)
