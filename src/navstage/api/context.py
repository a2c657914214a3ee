"""Navigation context API endpoint.

Resolves a route for a locale and returns the active page, breadcrumbs,
siblings and previous/next links.
"""

import json
import logging
from hashlib import md5

from aiohttp import web

from navstage.app_keys import loader_key, verbose_key
from navstage.core.errors import RouteNotFoundError, UnknownLocaleError
from navstage.core.tree import normalize_route

logger = logging.getLogger(__name__)


def create_context_routes() -> list[web.RouteDef]:
    return [
        web.get("/api/{locale}/context", get_context),
        web.get("/api/{locale}/context/{route:.*}", get_context),
    ]


async def get_context(request: web.Request) -> web.Response:
    locale = request.match_info["locale"]
    route = normalize_route(request.match_info.get("route", ""))
    resolver = request.app[loader_key].load()

    try:
        context = resolver.resolve(locale, route)
    except UnknownLocaleError:
        raise web.HTTPFound(
            f"/api/{resolver.default_locale}/context{route.rstrip('/')}"
        ) from None
    except RouteNotFoundError:
        return web.json_response(
            {"error": "Page not found", "locale": locale, "route": route},
            status=404,
        )

    if request.app[verbose_key] and context.is_fallback:
        logger.warning(
            f"{route}: no '{locale}' translation, serving '{context.resolved_locale}'"
        )

    body = json.dumps(context.to_dict())
    etag = _compute_etag(body)

    if request.headers.get("If-None-Match") == etag:
        return web.Response(status=304)

    return web.Response(
        text=body,
        content_type="application/json",
        headers={"ETag": etag, "Cache-Control": "private, max-age=60"},
    )


def _compute_etag(content: str) -> str:
    # First 16 hex chars (64 bits) are enough for cache invalidation
    content_hash = md5(content.encode("utf-8"), usedforsecurity=False).hexdigest()[:16]
    return f'"{content_hash}"'
