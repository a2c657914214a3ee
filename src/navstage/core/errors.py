"""Error types for navigation tree building and resolution."""


class NavstageError(Exception):
    """Base class for navstage errors."""


class ValidationError(NavstageError, ValueError):
    """Raised when a raw page map violates a tree invariant.

    Attributes:
        locale: Locale of the tree being built
        key: Slash-joined name path of the offending node ("" for the root list)
        reason: Human-readable description of the violation
    """

    def __init__(self, locale: str, key: str, reason: str) -> None:
        self.locale = locale
        self.key = key
        self.reason = reason
        location = key or "<root>"
        super().__init__(f"[{locale}] {location}: {reason}")


class RouteNotFoundError(NavstageError, LookupError):
    """Raised when a route is absent from every tree consulted."""

    def __init__(self, route: str, locale: str | None = None) -> None:
        self.route = route
        self.locale = locale
        if locale is None:
            super().__init__(f"Route not found: {route}")
        else:
            super().__init__(f"Route not found in locale '{locale}': {route}")


class UnknownLocaleError(NavstageError, LookupError):
    """Raised when a locale has no registered tree."""

    def __init__(self, locale: str) -> None:
        self.locale = locale
        super().__init__(f"Unknown locale: {locale}")


class DuplicateLocaleError(NavstageError, ValueError):
    """Raised when the same locale is registered twice."""

    def __init__(self, locale: str) -> None:
        self.locale = locale
        super().__init__(f"Locale already registered: {locale}")


class FrozenResolverError(NavstageError, RuntimeError):
    """Raised when registering a tree after the resolver has been frozen."""


class PageMapError(NavstageError, ValueError):
    """Raised when a page map file is missing or cannot be decoded."""
