"""aiohttp server for Navstage.

Application factory and route registration for standalone server mode.
"""

from aiohttp import web

from navstage.api.context import create_context_routes
from navstage.api.locales import create_locales_routes
from navstage.api.navigation import create_navigation_routes
from navstage.app_keys import loader_key, verbose_key
from navstage.config import Config
from navstage.core.loader import PageMapLoader
from navstage.live import LiveReloadManager
from navstage.live.reload import create_live_reload_routes

live_reload_manager_key = web.AppKey("live_reload_manager", LiveReloadManager)


def create_app(config: Config, *, verbose: bool = False) -> web.Application:
    """Create aiohttp application.

    Page maps are loaded eagerly so that an invalid tree stops startup.

    Args:
        config: Application configuration
        verbose: Enable verbose output (log fallback resolutions)

    Returns:
        Configured aiohttp application

    Raises:
        PageMapError: If a page map file is missing or not valid JSON
        ValidationError: If a page map violates a tree invariant
    """
    app = web.Application()

    loader = PageMapLoader(
        config.site.pagemap_dir,
        config.site.locale_pairs(),
        config.site.default_locale,
    )
    loader.load()

    app[loader_key] = loader
    app[verbose_key] = verbose

    app.router.add_routes(create_locales_routes())
    app.router.add_routes(create_navigation_routes())
    app.router.add_routes(create_context_routes())

    if config.live_reload.enabled:
        manager = LiveReloadManager(
            config.site.pagemap_dir,
            watch_patterns=config.live_reload.watch_patterns,
            loader=loader,
        )
        app[live_reload_manager_key] = manager
        app.router.add_routes(create_live_reload_routes(manager))
        app.on_startup.append(_start_live_reload)
        app.on_cleanup.append(_stop_live_reload)

    return app


async def _start_live_reload(app: web.Application) -> None:
    """Start live reload on application startup."""
    await app[live_reload_manager_key].start()


async def _stop_live_reload(app: web.Application) -> None:
    """Stop live reload on application cleanup."""
    await app[live_reload_manager_key].stop()


def run_server(config: Config, *, verbose: bool = False) -> None:
    """Run the server.

    Args:
        config: Application configuration
        verbose: Enable verbose output
    """
    app = create_app(config, verbose=verbose)
    web.run_app(app, host=config.server.host, port=config.server.port)
