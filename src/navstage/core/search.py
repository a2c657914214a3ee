"""Search index entries built from a locale tree."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any

from navstage.core.tree import NavTree
from navstage.core.types import URLPath


@dataclass(frozen=True)
class SearchEntry:
    """Indexable page: route, title and front matter."""

    route: URLPath
    title: str
    locale: str
    section: tuple[str, ...] = ()
    front_matter: Mapping[str, Any] = field(default_factory=dict, hash=False)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "route": self.route,
            "title": self.title,
            "locale": self.locale,
            "section": list(self.section),
            "frontMatter": dict(self.front_matter),
        }


def build_search_index(tree: NavTree) -> list[SearchEntry]:
    """Flatten a tree into search entries in depth-first order.

    Group nodes have no route and are not indexed, but their titles
    appear in the section of the pages beneath them.
    """
    entries: list[SearchEntry] = []
    for node in tree.flatten():
        if node.route is None:
            continue
        ancestors = tree.ancestor_chain(node.route)[:-1]
        entries.append(
            SearchEntry(
                route=node.route,
                title=node.title,
                locale=tree.locale,
                section=tuple(ancestor.title for ancestor in ancestors),
                front_matter=node.front_matter,
            )
        )
    return entries
