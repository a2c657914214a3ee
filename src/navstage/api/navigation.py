"""Navigation API endpoints.

Provides the sidebar tree and search index for a locale. Unknown locales
are redirected to the default locale.
"""

from aiohttp import web

from navstage.app_keys import loader_key
from navstage.core.errors import UnknownLocaleError
from navstage.core.navigation import build_navigation
from navstage.core.search import build_search_index


def create_navigation_routes() -> list[web.RouteDef]:
    return [
        web.get("/api/{locale}/navigation", get_navigation),
        web.get("/api/{locale}/search-index", get_search_index),
    ]


async def get_navigation(request: web.Request) -> web.Response:
    locale = request.match_info["locale"]
    resolver = request.app[loader_key].load()

    try:
        tree = resolver.get_tree(locale)
    except UnknownLocaleError:
        raise web.HTTPFound(f"/api/{resolver.default_locale}/navigation") from None

    nav_items = build_navigation(tree)
    return web.json_response(
        {
            "locale": tree.locale,
            "name": tree.display_name,
            "items": [item.to_dict() for item in nav_items],
        }
    )


async def get_search_index(request: web.Request) -> web.Response:
    locale = request.match_info["locale"]
    resolver = request.app[loader_key].load()

    try:
        tree = resolver.get_tree(locale)
    except UnknownLocaleError:
        raise web.HTTPFound(f"/api/{resolver.default_locale}/search-index") from None

    entries = build_search_index(tree)
    return web.json_response({"entries": [entry.to_dict() for entry in entries]})
