"""Configuration management for Navstage.

Supports TOML configuration format with auto-discovery.
"""

from __future__ import annotations

import tomllib
from dataclasses import dataclass, field, replace
from pathlib import Path

CONFIG_FILENAME = "navstage.toml"


@dataclass
class ServerConfig:
    """Server configuration."""

    host: str = "127.0.0.1"
    port: int = 8080


@dataclass
class LocaleConfig:
    """A site locale and its switcher label."""

    id: str
    name: str


def _default_locales() -> list[LocaleConfig]:
    return [LocaleConfig(id="en", name="English"), LocaleConfig(id="ko", name="한국어")]


@dataclass
class SiteConfig:
    """Page map and locale configuration."""

    pagemap_dir: Path = field(default_factory=lambda: Path("pagemaps"))
    default_locale: str = "en"
    locales: list[LocaleConfig] = field(default_factory=_default_locales)

    def locale_pairs(self) -> list[tuple[str, str]]:
        """(locale, display name) pairs in configured order."""
        return [(locale.id, locale.name) for locale in self.locales]


@dataclass
class LiveReloadConfig:
    """Live reload configuration."""

    enabled: bool = True
    watch_patterns: list[str] | None = None


@dataclass
class Config:
    """Application configuration."""

    server: ServerConfig
    site: SiteConfig
    live_reload: LiveReloadConfig
    config_path: Path | None = None

    @classmethod
    def load(cls, config_path: Path | None = None) -> Config:
        """Load configuration from file.

        If config_path is provided, loads from that file.
        Otherwise, searches for navstage.toml in current directory and parents.

        Args:
            config_path: Optional explicit path to config file

        Returns:
            Config instance with defaults for missing sections

        Raises:
            FileNotFoundError: If explicit config_path doesn't exist
            ValueError: If configuration is invalid
        """
        if config_path is not None:
            if not config_path.exists():
                raise FileNotFoundError(f"Configuration file not found: {config_path}")
            return cls._load_from_file(config_path)

        discovered_path = cls._discover_config()
        if discovered_path is None:
            return cls._default()

        return cls._load_from_file(discovered_path)

    @classmethod
    def _discover_config(cls) -> Path | None:
        """Search for config file in current directory and parents.

        Returns:
            Path to the nearest navstage.toml, or None if there is none
        """
        current = Path.cwd()
        while True:
            candidate = current / CONFIG_FILENAME
            if candidate.exists():
                return candidate
            parent = current.parent
            if parent == current:
                return None
            current = parent

    @classmethod
    def _default(cls) -> Config:
        """Build a Config with defaults for every section."""
        return cls(
            server=ServerConfig(),
            site=SiteConfig(),
            live_reload=LiveReloadConfig(),
        )

    @classmethod
    def _load_from_file(cls, path: Path) -> Config:
        """Load configuration from a specific file.

        Args:
            path: Path to a navstage.toml file

        Returns:
            Config with relative paths resolved against the file's directory

        Raises:
            ValueError: If configuration is invalid
        """
        with path.open("rb") as f:
            data = tomllib.load(f)

        config_dir = path.parent

        return cls(
            server=cls._parse_server(data.get("server")),
            site=cls._parse_site(data.get("site"), config_dir),
            live_reload=cls._parse_live_reload(data.get("live_reload")),
            config_path=path,
        )

    @classmethod
    def _parse_server(cls, data: object) -> ServerConfig:
        """Parse server configuration section.

        Args:
            data: Raw server section data

        Returns:
            ServerConfig instance
        """
        if data is None:
            return ServerConfig()

        if not isinstance(data, dict):
            raise ValueError("server section must be a dictionary")

        host = data.get("host", "127.0.0.1")
        if not isinstance(host, str):
            raise ValueError("server.host must be a string")

        port = data.get("port", 8080)
        if not isinstance(port, int) or isinstance(port, bool):
            raise ValueError("server.port must be an integer")

        return ServerConfig(host=host, port=port)

    @classmethod
    def _parse_site(cls, data: object, config_dir: Path) -> SiteConfig:
        """Parse site configuration section.

        Args:
            data: Raw site section data
            config_dir: Directory containing config file (for relative paths)

        Returns:
            SiteConfig instance
        """
        if data is None:
            return SiteConfig(pagemap_dir=config_dir / "pagemaps")

        if not isinstance(data, dict):
            raise ValueError("site section must be a dictionary")

        pagemap_dir = data.get("pagemap_dir", "pagemaps")
        if not isinstance(pagemap_dir, str):
            raise ValueError("site.pagemap_dir must be a string")

        default_locale = data.get("default_locale", "en")
        if not isinstance(default_locale, str):
            raise ValueError("site.default_locale must be a string")

        locales = _default_locales()
        locales_raw = data.get("locales")
        if locales_raw is not None:
            if not isinstance(locales_raw, list) or not locales_raw:
                raise ValueError("site.locales must be a non-empty list")
            locales = []
            seen: set[str] = set()
            for item in locales_raw:
                if not isinstance(item, dict):
                    raise ValueError("site.locales items must be tables")
                locale_id = item.get("id")
                if not isinstance(locale_id, str) or not locale_id:
                    raise ValueError("site.locales.id must be a non-empty string")
                if locale_id in seen:
                    raise ValueError(f"site.locales contains '{locale_id}' twice")
                seen.add(locale_id)
                name = item.get("name", locale_id)
                if not isinstance(name, str):
                    raise ValueError("site.locales.name must be a string")
                locales.append(LocaleConfig(id=locale_id, name=name))

        if default_locale not in {locale.id for locale in locales}:
            raise ValueError(
                f"site.default_locale '{default_locale}' is not in site.locales"
            )

        return SiteConfig(
            pagemap_dir=config_dir / pagemap_dir,
            default_locale=default_locale,
            locales=locales,
        )

    @classmethod
    def _parse_live_reload(cls, data: object) -> LiveReloadConfig:
        """Parse live reload configuration section.

        Args:
            data: Raw live_reload section data

        Returns:
            LiveReloadConfig instance
        """
        if data is None:
            return LiveReloadConfig()

        if not isinstance(data, dict):
            raise ValueError("live_reload section must be a dictionary")

        enabled = data.get("enabled", True)
        if not isinstance(enabled, bool):
            raise ValueError("live_reload.enabled must be a boolean")

        watch_patterns_raw = data.get("watch_patterns")
        watch_patterns: list[str] | None = None
        if watch_patterns_raw is not None:
            if not isinstance(watch_patterns_raw, list):
                raise ValueError("live_reload.watch_patterns must be a list")
            watch_patterns = []
            for item in watch_patterns_raw:
                if not isinstance(item, str):
                    raise ValueError("live_reload.watch_patterns items must be strings")
                watch_patterns.append(item)

        return LiveReloadConfig(enabled=enabled, watch_patterns=watch_patterns)

    def with_overrides(
        self,
        *,
        host: str | None = None,
        port: int | None = None,
        pagemap_dir: Path | None = None,
        default_locale: str | None = None,
        live_reload_enabled: bool | None = None,
    ) -> Config:
        """Create a new Config with CLI overrides applied.

        Only non-None values override the existing config. The original
        Config is not modified.

        Args:
            host: Server host override
            port: Server port override
            pagemap_dir: Page map directory override
            default_locale: Default locale override, must be configured
            live_reload_enabled: Live reload toggle override

        Returns:
            New Config with overrides applied

        Raises:
            ValueError: If default_locale is not among the configured locales
        """
        server = self.server
        if host is not None or port is not None:
            server = replace(
                self.server,
                host=host if host is not None else self.server.host,
                port=port if port is not None else self.server.port,
            )

        site = self.site
        if pagemap_dir is not None:
            site = replace(site, pagemap_dir=pagemap_dir)
        if default_locale is not None:
            if default_locale not in {locale.id for locale in site.locales}:
                raise ValueError(f"Default locale '{default_locale}' is not configured")
            site = replace(site, default_locale=default_locale)

        live_reload = self.live_reload
        if live_reload_enabled is not None:
            live_reload = replace(self.live_reload, enabled=live_reload_enabled)

        return replace(self, server=server, site=site, live_reload=live_reload)
