"""Sidebar navigation builder.

Builds nested navigation items from a NavTree for UI presentation.
Navigation is a view layer over the locale's page hierarchy.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TypedDict

from navstage.core.tree import NavTree, PageNode
from navstage.core.types import URLPath


class NavItemDict(TypedDict, total=False):
    """Dictionary representation of a navigation item."""

    name: str
    title: str
    path: str | None
    children: list[NavItemDict]


@dataclass
class NavItem:
    """Navigation item with children for UI tree.

    Group nodes have no path and are rendered as section headers.
    """

    name: str
    title: str
    path: URLPath | None
    children: list[NavItem] = field(default_factory=list)

    def to_dict(self) -> NavItemDict:
        """Convert to dictionary for JSON serialization."""
        result: NavItemDict = {"name": self.name, "title": self.title, "path": self.path}
        if self.children:
            result["children"] = [child.to_dict() for child in self.children]
        return result


def build_navigation(tree: NavTree) -> list[NavItem]:
    """Build navigation items from a locale tree.

    Args:
        tree: Tree to build navigation from

    Returns:
        List of NavItem trees in authored order
    """
    return [_build_nav_item(tree, node) for node in tree.root_nodes()]


def _build_nav_item(tree: NavTree, node: PageNode) -> NavItem:
    """Recursively build NavItem from node."""
    return NavItem(
        name=node.name,
        title=node.title,
        path=node.route,
        children=[_build_nav_item(tree, child) for child in tree.children_of(node)],
    )
