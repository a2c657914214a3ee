"""Locales API endpoint."""

from aiohttp import web

from navstage.app_keys import loader_key


def create_locales_routes() -> list[web.RouteDef]:
    return [web.get("/api/locales", get_locales)]


async def get_locales(request: web.Request) -> web.Response:
    resolver = request.app[loader_key].load()
    return web.json_response(
        {
            "default": resolver.default_locale,
            "locales": [
                {"locale": locale, "name": name}
                for locale, name in resolver.locale_names().items()
            ],
        }
    )
