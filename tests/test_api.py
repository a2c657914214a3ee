"""Tests for API endpoints."""

from typing import Any

import pytest
from aiohttp import web
from navstage.config import Config
from navstage.server import create_app


@pytest.fixture
def app(test_config: Config) -> web.Application:
    return create_app(test_config)


class TestGetLocales:
    """Tests for GET /api/locales."""

    @pytest.mark.asyncio
    async def test__returns_locales_and_default(
        self, aiohttp_client: Any, app: web.Application
    ) -> None:
        """Return registered locales with names and the default."""
        client = await aiohttp_client(app)
        response = await client.get("/api/locales")

        assert response.status == 200
        data = await response.json()
        assert data == {
            "default": "en",
            "locales": [
                {"locale": "en", "name": "English"},
                {"locale": "ko", "name": "한국어"},
            ],
        }


class TestGetNavigation:
    """Tests for GET /api/{locale}/navigation."""

    @pytest.mark.asyncio
    async def test__returns_tree(self, aiohttp_client: Any, app: web.Application) -> None:
        """Return the locale's sidebar tree."""
        client = await aiohttp_client(app)
        response = await client.get("/api/ko/navigation")

        assert response.status == 200
        data = await response.json()
        assert data["locale"] == "ko"
        assert data["name"] == "한국어"
        assert [item["name"] for item in data["items"]] == [
            "intro",
            "guides",
            "middlewares",
        ]
        assert data["items"][1]["path"] is None
        assert data["items"][1]["children"][0]["title"] == "스토어 만들기"

    @pytest.mark.asyncio
    async def test__unknown_locale__redirects_to_default(
        self, aiohttp_client: Any, app: web.Application
    ) -> None:
        """Redirect unknown locales to the default locale."""
        client = await aiohttp_client(app)
        response = await client.get("/api/fr/navigation", allow_redirects=False)

        assert response.status == 302
        assert response.headers["Location"] == "/api/en/navigation"


class TestGetSearchIndex:
    """Tests for GET /api/{locale}/search-index."""

    @pytest.mark.asyncio
    async def test__returns_entries(self, aiohttp_client: Any, app: web.Application) -> None:
        """Return flattened routable entries."""
        client = await aiohttp_client(app)
        response = await client.get("/api/en/search-index")

        assert response.status == 200
        data = await response.json()
        assert len(data["entries"]) == 8
        assert data["entries"][1] == {
            "route": "/guides/create-a-store",
            "title": "Create a store",
            "locale": "en",
            "section": ["Guides"],
            "frontMatter": {},
        }

    @pytest.mark.asyncio
    async def test__unknown_locale__redirects_to_default(
        self, aiohttp_client: Any, app: web.Application
    ) -> None:
        """Redirect unknown locales to the default locale."""
        client = await aiohttp_client(app)
        response = await client.get("/api/fr/search-index", allow_redirects=False)

        assert response.status == 302
        assert response.headers["Location"] == "/api/en/search-index"


class TestGetContext:
    """Tests for GET /api/{locale}/context/{route}."""

    @pytest.mark.asyncio
    async def test__route_in_locale__returns_context(
        self, aiohttp_client: Any, app: web.Application
    ) -> None:
        """Resolve a translated route."""
        client = await aiohttp_client(app)
        response = await client.get("/api/ko/context/guides/create-a-store")

        assert response.status == 200
        data = await response.json()
        assert data["translationAvailable"] is True
        assert data["resolvedLocale"] == "ko"
        assert [b["name"] for b in data["breadcrumbs"]] == ["guides", "create-a-store"]

    @pytest.mark.asyncio
    async def test__untranslated_route__returns_fallback(
        self, aiohttp_client: Any, app: web.Application
    ) -> None:
        """Serve the default locale's node with the fallback flag."""
        client = await aiohttp_client(app)
        response = await client.get("/api/ko/context/middlewares/zustand")

        assert response.status == 200
        data = await response.json()
        assert data["locale"] == "ko"
        assert data["resolvedLocale"] == "en"
        assert data["translationAvailable"] is False
        assert data["active"]["title"] == "zustand"

    @pytest.mark.asyncio
    async def test__root_route(self, aiohttp_client: Any, app: web.Application) -> None:
        """Resolve the root route without a path."""
        client = await aiohttp_client(app)
        response = await client.get("/api/en/context")

        assert response.status == 200
        data = await response.json()
        assert data["active"]["name"] == "intro"

    @pytest.mark.asyncio
    async def test__trailing_slash__normalized(
        self, aiohttp_client: Any, app: web.Application
    ) -> None:
        """Strip trailing slashes from the requested route."""
        client = await aiohttp_client(app)
        response = await client.get("/api/en/context/middlewares/")

        assert response.status == 200
        data = await response.json()
        assert data["active"]["route"] == "/middlewares"

    @pytest.mark.asyncio
    async def test__not_found__returns_404(
        self, aiohttp_client: Any, app: web.Application
    ) -> None:
        """Return 404 when no locale has the route."""
        client = await aiohttp_client(app)
        response = await client.get("/api/ko/context/nonexistent")

        assert response.status == 404
        data = await response.json()
        assert data == {"error": "Page not found", "locale": "ko", "route": "/nonexistent"}

    @pytest.mark.asyncio
    async def test__unknown_locale__redirects_to_default(
        self, aiohttp_client: Any, app: web.Application
    ) -> None:
        """Redirect unknown locales to the same route in the default locale."""
        client = await aiohttp_client(app)
        response = await client.get(
            "/api/fr/context/middlewares/persist", allow_redirects=False
        )

        assert response.status == 302
        assert response.headers["Location"] == "/api/en/context/middlewares/persist"

    @pytest.mark.asyncio
    async def test__response__includes_cache_headers(
        self, aiohttp_client: Any, app: web.Application
    ) -> None:
        """Include cache headers in response."""
        client = await aiohttp_client(app)
        response = await client.get("/api/en/context/middlewares")

        assert "ETag" in response.headers
        assert response.headers["Cache-Control"] == "private, max-age=60"

    @pytest.mark.asyncio
    async def test__matching_etag__returns_304(
        self, aiohttp_client: Any, app: web.Application
    ) -> None:
        """Return 304 when ETag matches."""
        client = await aiohttp_client(app)
        response1 = await client.get("/api/en/context/middlewares")
        etag = response1.headers["ETag"]

        response2 = await client.get(
            "/api/en/context/middlewares", headers={"If-None-Match": etag}
        )

        assert response2.status == 304
