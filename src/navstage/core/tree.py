"""Navigation tree for a single locale.

Represents one locale's page map with efficient route lookups and
traversal operations. Nodes are stored in a flat pre-order list with
parent/children relationships tracked by indices, so the tree owns every
node and the parent back-reference is a plain index lookup.
"""

from __future__ import annotations

from collections.abc import Iterator, Mapping, Sequence
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, NoReturn

from navstage.core.errors import RouteNotFoundError, ValidationError
from navstage.core.types import URLPath

# Key of the folder meta record that may lead a raw page map
META_KEY = "data"

_EMPTY_MAPPING: Mapping[str, Any] = MappingProxyType({})


@dataclass(frozen=True)
class PageNode:
    """Navigation entry: a page, or a group when route is None."""

    name: str
    title: str
    route: URLPath | None
    key: str
    front_matter: Mapping[str, Any] = field(
        default_factory=lambda: _EMPTY_MAPPING, hash=False
    )

    @property
    def is_group(self) -> bool:
        """True for non-navigable group containers."""
        return self.route is None


class NavTree:
    """Validated navigation hierarchy for one locale.

    Provides O(1) route lookups through an index built at construction
    and O(d) ancestor chains where d is the node depth. Instances are
    never mutated after construction.
    """

    __slots__ = (
        "_children",
        "_display_name",
        "_key_index",
        "_locale",
        "_meta",
        "_nodes",
        "_parents",
        "_roots",
        "_route_index",
    )

    def __init__(
        self,
        locale: str,
        display_name: str,
        nodes: Sequence[PageNode],
        children: Sequence[Sequence[int]],
        parents: Sequence[int | None],
        roots: Sequence[int],
        meta: Mapping[str, Any] | None = None,
    ) -> None:
        """Initialize tree structure.

        Args:
            locale: Locale identifier (e.g., "en")
            display_name: Locale label for the locale switcher
            nodes: Flat list of all nodes in pre-order
            children: Children indices for each node
            parents: Parent index for each node (None for roots)
            roots: Indices of root-level nodes
            meta: Folder meta record from the raw page map
        """
        self._locale = locale
        self._display_name = display_name
        self._nodes = tuple(nodes)
        self._children = tuple(tuple(c) for c in children)
        self._parents = tuple(parents)
        self._roots = tuple(roots)
        self._meta = MappingProxyType(dict(meta or {}))
        self._route_index = {
            node.route: i for i, node in enumerate(self._nodes) if node.route is not None
        }
        self._key_index = {node.key: i for i, node in enumerate(self._nodes)}

    @property
    def locale(self) -> str:
        return self._locale

    @property
    def display_name(self) -> str:
        return self._display_name

    @property
    def meta(self) -> Mapping[str, Any]:
        return self._meta

    def __len__(self) -> int:
        return len(self._nodes)

    def __iter__(self) -> Iterator[PageNode]:
        return self.flatten()

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, NavTree):
            return NotImplemented
        return (
            self._locale == other._locale
            and self._display_name == other._display_name
            and self._meta == other._meta
            and self._nodes == other._nodes
            and self._parents == other._parents
        )

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        return f"NavTree(locale={self._locale!r}, nodes={len(self._nodes)})"

    def get_page(self, route: str) -> PageNode | None:
        """Get node by exact route.

        Args:
            route: Page route (e.g., "/guides/create-a-store")

        Returns:
            PageNode if found, None otherwise
        """
        idx = self._route_index.get(route)
        if idx is None:
            return None
        return self._nodes[idx]

    def find_by_route(self, route: str) -> PageNode:
        """Get node by exact route.

        Raises:
            RouteNotFoundError: If no node declares the route
        """
        node = self.get_page(route)
        if node is None:
            raise RouteNotFoundError(route, self._locale)
        return node

    def has_route(self, route: str) -> bool:
        return route in self._route_index

    def get_node(self, key: str) -> PageNode | None:
        """Get node by key path (e.g., "guides/create-a-store").

        Works for group nodes, which have no route to look up.
        """
        idx = self._key_index.get(key)
        if idx is None:
            return None
        return self._nodes[idx]

    def root_nodes(self) -> list[PageNode]:
        """Get root-level nodes in authored order."""
        return [self._nodes[i] for i in self._roots]

    def children_of(self, node: PageNode) -> list[PageNode]:
        """Get children of a node in authored order."""
        return [self._nodes[i] for i in self._children[self._index_of(node)]]

    def parent_of(self, node: PageNode) -> PageNode | None:
        """Get parent of a node, None for root-level nodes."""
        parent = self._parents[self._index_of(node)]
        if parent is None:
            return None
        return self._nodes[parent]

    def ancestor_chain(self, route: str) -> list[PageNode]:
        """Build the chain from a root-level node down to the route's node.

        Group nodes are included. The node itself is the last element.

        Raises:
            RouteNotFoundError: If no node declares the route
        """
        idx = self._route_index.get(route)
        if idx is None:
            raise RouteNotFoundError(route, self._locale)

        chain: list[PageNode] = []
        current: int | None = idx
        while current is not None:
            chain.append(self._nodes[current])
            current = self._parents[current]

        chain.reverse()
        return chain

    def siblings_of(self, route: str) -> tuple[list[PageNode], int]:
        """Get the node's sibling list (including itself) and its position.

        Raises:
            RouteNotFoundError: If no node declares the route
        """
        idx = self._route_index.get(route)
        if idx is None:
            raise RouteNotFoundError(route, self._locale)

        parent = self._parents[idx]
        indices = self._roots if parent is None else self._children[parent]
        return [self._nodes[i] for i in indices], indices.index(idx)

    def previous_and_next(self, route: str) -> tuple[PageNode | None, PageNode | None]:
        """Get nearest navigable siblings before and after the route's node.

        Group nodes are skipped since they cannot be linked to.

        Raises:
            RouteNotFoundError: If no node declares the route
        """
        siblings, position = self.siblings_of(route)
        previous = next(
            (node for node in reversed(siblings[:position]) if not node.is_group),
            None,
        )
        following = next(
            (node for node in siblings[position + 1 :] if not node.is_group),
            None,
        )
        return previous, following

    def flatten(self) -> Iterator[PageNode]:
        """Iterate nodes depth-first, parents before children.

        Each call returns a fresh iterator.
        """
        stack = list(reversed(self._roots))
        while stack:
            idx = stack.pop()
            yield self._nodes[idx]
            stack.extend(reversed(self._children[idx]))

    def to_raw(self) -> list[dict[str, Any]]:
        """Serialize back to the raw page map shape accepted by build_tree()."""
        raw: list[dict[str, Any]] = []
        if self._meta:
            raw.append({META_KEY: dict(self._meta)})
        raw.extend(self._node_to_raw(i) for i in self._roots)
        return raw

    def _node_to_raw(self, idx: int) -> dict[str, Any]:
        node = self._nodes[idx]
        result: dict[str, Any] = {
            "name": node.name,
            "route": node.route,
            "title": node.title,
            "frontMatter": dict(node.front_matter),
        }
        if self._children[idx]:
            result["children"] = [self._node_to_raw(i) for i in self._children[idx]]
        return result

    def _index_of(self, node: PageNode) -> int:
        idx = self._key_index.get(node.key)
        if idx is None or self._nodes[idx] != node:
            raise ValueError(f"Node does not belong to this tree: {node.key}")
        return idx


class TreeBuilder:
    """Builder for constructing NavTree instances."""

    def __init__(self, locale: str, display_name: str | None = None) -> None:
        self._locale = locale
        self._display_name = display_name or locale
        self._nodes: list[PageNode] = []
        self._children: list[list[int]] = []
        self._parents: list[int | None] = []
        self._roots: list[int] = []
        self._meta: Mapping[str, Any] | None = None

    def set_meta(self, meta: Mapping[str, Any]) -> None:
        self._meta = meta

    def add_node(
        self,
        name: str,
        title: str,
        route: str | None,
        parent_idx: int | None = None,
        front_matter: Mapping[str, Any] | None = None,
    ) -> int:
        """Add a node to the tree.

        Nodes must be added in pre-order (a parent before its children).

        Args:
            name: Node name, unique among its siblings
            title: Display title
            route: Page route, None for group nodes
            parent_idx: Index of parent node, None for root
            front_matter: Page-level metadata

        Returns:
            Index of the added node
        """
        if parent_idx is None:
            key = name
        else:
            key = f"{self._nodes[parent_idx].key}/{name}"

        idx = len(self._nodes)
        self._nodes.append(
            PageNode(
                name=name,
                title=title,
                route=URLPath(route) if route is not None else None,
                key=key,
                front_matter=MappingProxyType(dict(front_matter or {})),
            )
        )
        self._children.append([])
        self._parents.append(parent_idx)

        if parent_idx is None:
            self._roots.append(idx)
        else:
            self._children[parent_idx].append(idx)

        return idx

    def build(self) -> NavTree:
        """Build the NavTree instance."""
        return NavTree(
            locale=self._locale,
            display_name=self._display_name,
            nodes=self._nodes,
            children=self._children,
            parents=self._parents,
            roots=self._roots,
            meta=self._meta,
        )


def build_tree(
    raw: object,
    locale: str,
    display_name: str | None = None,
) -> NavTree:
    """Parse a raw page map into a validated NavTree.

    All invariants are checked in a single traversal. The first violation
    stops the build.

    Args:
        raw: List of node objects with name, route, title, frontMatter and
            optional children. A leading {"data": {...}} record is kept as
            tree metadata.
        locale: Locale identifier
        display_name: Locale label, defaults to the identifier

    Returns:
        NavTree for the locale

    Raises:
        ValidationError: On the first malformed or invariant-violating node
    """
    if not isinstance(raw, list):
        raise ValidationError(locale, "", "page map must be a list")

    builder = TreeBuilder(locale, display_name)
    entries = raw
    if entries and _is_meta_entry(entries[0]):
        meta = entries[0][META_KEY]
        if not isinstance(meta, Mapping):
            raise ValidationError(locale, "", "meta 'data' must be an object")
        builder.set_meta(meta)
        entries = entries[1:]

    _TreeParser(builder, locale).add_entries(entries, parent_idx=None, parent_key="")
    return builder.build()


def normalize_route(path: str) -> URLPath:
    """Normalize a request path to route form.

    Adds the leading slash and strips trailing slashes, keeping "/" for root.
    """
    route = path if path.startswith("/") else f"/{path}"
    if len(route) > 1:
        route = route.rstrip("/") or "/"
    return URLPath(route)


def title_from_name(name: str) -> str:
    """Generate a display title from a node name."""
    return name.replace("-", " ").replace("_", " ").title()


def _is_meta_entry(entry: object) -> bool:
    return isinstance(entry, Mapping) and set(entry) == {META_KEY}


def _route_problem(route: str) -> str | None:
    """Return why a route string is malformed, or None if it is valid."""
    if not route.startswith("/"):
        return f"route must start with '/': {route!r}"
    if route != "/" and route.endswith("/"):
        return f"route must not end with '/': {route!r}"
    if "//" in route:
        return f"route must not contain empty segments: {route!r}"
    return None


class _TreeParser:
    """Single-pass validating walk over raw page map entries."""

    def __init__(self, builder: TreeBuilder, locale: str) -> None:
        self._builder = builder
        self._locale = locale
        self._routes: dict[str, str] = {}

    def add_entries(
        self,
        entries: list[object],
        parent_idx: int | None,
        parent_key: str,
    ) -> None:
        names: set[str] = set()
        for position, entry in enumerate(entries):
            if not isinstance(entry, Mapping):
                self._fail(parent_key, f"entry {position} must be an object")

            name = entry.get("name")
            if not isinstance(name, str) or not name:
                self._fail(parent_key, f"entry {position} must have a non-empty name")
            if "/" in name:
                self._fail(parent_key, f"name must not contain '/': {name!r}")

            key = f"{parent_key}/{name}" if parent_key else name
            if name in names:
                self._fail(key, f"duplicate name '{name}' among siblings")
            names.add(name)

            title = entry.get("title")
            if title is None:
                title = title_from_name(name)
            elif not isinstance(title, str):
                self._fail(key, "title must be a string")

            route = entry.get("route")
            if route is not None:
                if not isinstance(route, str):
                    self._fail(key, "route must be a string or null")
                problem = _route_problem(route)
                if problem is not None:
                    self._fail(key, problem)
                if route in self._routes:
                    self._fail(
                        key,
                        f"duplicate route '{route}' (already used by '{self._routes[route]}')",
                    )
                self._routes[route] = key

            front_matter = entry.get("frontMatter")
            if front_matter is not None and not isinstance(front_matter, Mapping):
                self._fail(key, "frontMatter must be an object")

            children = entry.get("children")
            if children is not None and not isinstance(children, list):
                self._fail(key, "children must be a list")

            if route is None and not children:
                self._fail(key, "group node without a route must have children")

            idx = self._builder.add_node(
                name,
                title,
                route,
                parent_idx=parent_idx,
                front_matter=front_matter,
            )
            if children:
                self.add_entries(children, parent_idx=idx, parent_key=key)

    def _fail(self, key: str, reason: str) -> NoReturn:
        raise ValidationError(self._locale, key, reason)
