"""Page map loading from per-locale JSON files.

Layout:
    pagemaps/
    ├── en.json     # Raw page map for the "en" locale
    └── ko.json     # Raw page map for the "ko" locale
"""

from __future__ import annotations

import json
import logging
from collections.abc import Sequence
from pathlib import Path

from navstage.core.errors import PageMapError
from navstage.core.resolver import LocaleResolver
from navstage.core.tree import NavTree, build_tree

logger = logging.getLogger(__name__)


class PageMapLoader:
    """Builds and caches the locale table from page map files.

    The cached resolver is replaced wholesale on reload. Readers holding
    the previous resolver keep a complete, consistent table.
    """

    def __init__(
        self,
        pagemap_dir: Path,
        locales: Sequence[tuple[str, str]],
        default_locale: str,
    ) -> None:
        """Initialize loader.

        Args:
            pagemap_dir: Directory containing <locale>.json files
            locales: (locale, display name) pairs in switcher order
            default_locale: Locale used for fallback resolution
        """
        self._pagemap_dir = pagemap_dir
        self._locales = list(locales)
        self._default_locale = default_locale
        self._resolver: LocaleResolver | None = None

    @property
    def pagemap_dir(self) -> Path:
        """Directory containing page map files."""
        return self._pagemap_dir

    @property
    def default_locale(self) -> str:
        """Locale used for fallback resolution."""
        return self._default_locale

    def load(self) -> LocaleResolver:
        """Return the cached resolver, building it on first use.

        Returns:
            Frozen LocaleResolver with every configured locale registered
        """
        resolver = self._resolver
        if resolver is None:
            resolver = self.reload()
        return resolver

    def reload(self) -> LocaleResolver:
        """Build a complete replacement table and swap it in.

        On failure the previous table stays in place and the error propagates.

        Returns:
            Newly built, frozen LocaleResolver

        Raises:
            PageMapError: If a page map file is missing or cannot be decoded
            ValidationError: If a page map violates a tree invariant
        """
        resolver = LocaleResolver(self._default_locale)
        for locale, display_name in self._locales:
            resolver.register(self.load_tree(locale, display_name))
        resolver.freeze()

        self._resolver = resolver
        logger.info(
            f"Loaded page maps for {len(self._locales)} locale(s) from {self._pagemap_dir}"
        )
        return resolver

    def invalidate(self) -> None:
        """Drop the cached table so the next load() rebuilds it."""
        self._resolver = None

    def load_tree(self, locale: str, display_name: str) -> NavTree:
        """Read and validate one locale's page map.

        Args:
            locale: Locale identifier
            display_name: Locale label for the locale switcher

        Returns:
            NavTree built from <pagemap_dir>/<locale>.json

        Raises:
            PageMapError: If the file is missing, unreadable or not valid JSON
            ValidationError: If the page map violates a tree invariant
        """
        path = self.pagemap_path(locale)
        if not path.exists():
            raise PageMapError(f"Page map not found for locale '{locale}': {path}")

        try:
            raw = json.loads(path.read_text(encoding="utf-8"))
        except json.JSONDecodeError as e:
            raise PageMapError(f"Invalid JSON in {path}: {e}") from e
        except (OSError, UnicodeDecodeError) as e:
            raise PageMapError(f"Cannot read page map {path}: {e}") from e

        return build_tree(raw, locale, display_name)

    def pagemap_path(self, locale: str) -> Path:
        """Get the page map file path for a locale.

        Args:
            locale: Locale identifier

        Returns:
            Path to <pagemap_dir>/<locale>.json
        """
        return self._pagemap_dir / f"{locale}.json"
