"""Locale-aware route resolution.

Maps a (locale, route) request onto a resolved navigation context. When a
locale's tree lacks a route, the default locale's tree is used and the
context is marked as a fallback so the UI can show that the translation
is unavailable.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any

from navstage.core.errors import (
    DuplicateLocaleError,
    FrozenResolverError,
    RouteNotFoundError,
    UnknownLocaleError,
)
from navstage.core.tree import NavTree, PageNode

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class NavigationContext:
    """Resolved navigation data handed to the rendering layer."""

    locale: str
    resolved_locale: str
    tree: NavTree
    active: PageNode
    ancestors: tuple[PageNode, ...]
    siblings: tuple[PageNode, ...]
    sibling_index: int
    previous: PageNode | None
    next: PageNode | None
    translation_available: bool

    @property
    def is_fallback(self) -> bool:
        """True when content comes from the default locale."""
        return not self.translation_available

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization.

        The full tree is left out; clients fetch it from the navigation endpoint.
        """
        return {
            "locale": self.locale,
            "resolvedLocale": self.resolved_locale,
            "translationAvailable": self.translation_available,
            "active": _node_to_dict(self.active),
            "breadcrumbs": [_node_to_dict(node) for node in self.ancestors],
            "siblings": [_node_to_dict(node) for node in self.siblings],
            "siblingIndex": self.sibling_index,
            "previous": _node_to_dict(self.previous) if self.previous else None,
            "next": _node_to_dict(self.next) if self.next else None,
        }


def _node_to_dict(node: PageNode) -> dict[str, Any]:
    return {
        "name": node.name,
        "title": node.title,
        "route": node.route,
        "frontMatter": dict(node.front_matter),
    }


class LocaleResolver:
    """Table of locale trees with default-locale fallback.

    Trees are registered once at startup, then the resolver is frozen and
    only read. Each resolve() call is a pure function of the registered
    trees and its inputs.
    """

    def __init__(self, default_locale: str) -> None:
        """Initialize resolver.

        Args:
            default_locale: Locale whose tree serves routes missing elsewhere
        """
        self._default_locale = default_locale
        self._trees: dict[str, NavTree] = {}
        self._frozen = False

    @property
    def default_locale(self) -> str:
        return self._default_locale

    @property
    def frozen(self) -> bool:
        return self._frozen

    def register(self, tree: NavTree) -> None:
        """Add a locale's tree.

        Raises:
            DuplicateLocaleError: If the locale is already registered
            FrozenResolverError: If the resolver has been frozen
        """
        if self._frozen:
            raise FrozenResolverError(
                f"Cannot register locale '{tree.locale}' on a frozen resolver"
            )
        if tree.locale in self._trees:
            raise DuplicateLocaleError(tree.locale)
        self._trees[tree.locale] = tree
        logger.debug(f"Registered locale '{tree.locale}' with {len(tree)} nodes")

    def freeze(self) -> None:
        """Close registration.

        Raises:
            UnknownLocaleError: If the default locale has no tree
        """
        if self._default_locale not in self._trees:
            raise UnknownLocaleError(self._default_locale)
        self._frozen = True

    def available_locales(self) -> list[str]:
        """Registered locale identifiers in registration order."""
        return list(self._trees)

    def locale_names(self) -> dict[str, str]:
        """Map locale identifiers to display names for a locale switcher."""
        return {locale: tree.display_name for locale, tree in self._trees.items()}

    def get_tree(self, locale: str) -> NavTree:
        """Get a locale's tree.

        Raises:
            UnknownLocaleError: If the locale is not registered
        """
        tree = self._trees.get(locale)
        if tree is None:
            raise UnknownLocaleError(locale)
        return tree

    def resolve(self, locale: str, route: str) -> NavigationContext:
        """Resolve a route for a locale.

        Args:
            locale: Requested locale
            route: Exact page route

        Returns:
            NavigationContext from the locale's tree, or from the default
            locale's tree with translation_available=False

        Raises:
            UnknownLocaleError: If the requested locale is not registered
            RouteNotFoundError: If neither tree contains the route
        """
        tree = self.get_tree(locale)
        if tree.has_route(route):
            return _build_context(locale, tree, route, translation_available=True)

        default_tree = self._trees.get(self._default_locale)
        if default_tree is None or not default_tree.has_route(route):
            raise RouteNotFoundError(route, locale)

        logger.debug(
            f"Route {route} missing in locale '{locale}', "
            f"falling back to '{self._default_locale}'"
        )
        return _build_context(locale, default_tree, route, translation_available=False)

    def missing_routes(self, locale: str) -> list[str]:
        """Routes of the default locale that the given locale lacks."""
        tree = self.get_tree(locale)
        default_tree = self.get_tree(self._default_locale)
        return [
            node.route
            for node in default_tree.flatten()
            if node.route is not None and not tree.has_route(node.route)
        ]


def _build_context(
    locale: str,
    tree: NavTree,
    route: str,
    *,
    translation_available: bool,
) -> NavigationContext:
    active = tree.find_by_route(route)
    siblings, index = tree.siblings_of(route)
    previous, following = tree.previous_and_next(route)
    return NavigationContext(
        locale=locale,
        resolved_locale=tree.locale,
        tree=tree,
        active=active,
        ancestors=tuple(tree.ancestor_chain(route)),
        siblings=tuple(siblings),
        sibling_index=index,
        previous=previous,
        next=following,
        translation_available=translation_available,
    )
