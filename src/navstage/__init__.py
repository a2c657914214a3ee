"""Navstage - multilingual navigation trees for documentation sites."""

from navstage.core.errors import (
    DuplicateLocaleError,
    NavstageError,
    RouteNotFoundError,
    UnknownLocaleError,
    ValidationError,
)
from navstage.core.resolver import LocaleResolver, NavigationContext
from navstage.core.tree import NavTree, PageNode, build_tree

__all__ = [
    "DuplicateLocaleError",
    "LocaleResolver",
    "NavTree",
    "NavigationContext",
    "NavstageError",
    "PageNode",
    "RouteNotFoundError",
    "UnknownLocaleError",
    "ValidationError",
    "build_tree",
]
