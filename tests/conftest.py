"""Shared test fixtures."""

import json
from pathlib import Path
from typing import Any

import pytest
from navstage.config import Config, LiveReloadConfig, ServerConfig, SiteConfig
from navstage.core.tree import NavTree, build_tree


@pytest.fixture
def en_pagemap() -> list[dict[str, Any]]:
    """Raw page map for the default locale."""
    return [
        {"data": {"layout": "docs"}},
        {"name": "intro", "route": "/", "title": "Introduce the caro-kann", "frontMatter": {}},
        {
            "name": "guides",
            "route": None,
            "title": "Guides",
            "children": [
                {
                    "name": "create-a-store",
                    "route": "/guides/create-a-store",
                    "title": "Create a store",
                    "frontMatter": {},
                },
                {
                    "name": "updating-state",
                    "route": "/guides/updating-state",
                    "title": "Updating state",
                    "frontMatter": {},
                },
            ],
        },
        {
            "name": "middlewares",
            "route": "/middlewares",
            "title": "Middlewares",
            "frontMatter": {},
            "children": [
                {
                    "name": "persist",
                    "route": "/middlewares/persist",
                    "title": "persist",
                    "frontMatter": {"description": "Persist store state"},
                },
                {
                    "name": "reducer",
                    "route": "/middlewares/reducer",
                    "title": "reducer",
                    "frontMatter": {},
                },
                {
                    "name": "zustand",
                    "route": "/middlewares/zustand",
                    "title": "zustand",
                    "frontMatter": {},
                },
                {
                    "name": "devtools",
                    "route": "/middlewares/devtools",
                    "title": "devtools",
                    "frontMatter": {},
                },
            ],
        },
    ]


@pytest.fixture
def ko_pagemap() -> list[dict[str, Any]]:
    """Raw page map for a locale missing the zustand page."""
    return [
        {"data": {"layout": "docs"}},
        {"name": "intro", "route": "/", "title": "Caro-Kann 소개", "frontMatter": {}},
        {
            "name": "guides",
            "route": None,
            "title": "가이드",
            "children": [
                {
                    "name": "create-a-store",
                    "route": "/guides/create-a-store",
                    "title": "스토어 만들기",
                    "frontMatter": {},
                },
            ],
        },
        {
            "name": "middlewares",
            "route": "/middlewares",
            "title": "미들웨어",
            "frontMatter": {},
            "children": [
                {
                    "name": "persist",
                    "route": "/middlewares/persist",
                    "title": "persist",
                    "frontMatter": {},
                },
            ],
        },
    ]


@pytest.fixture
def en_tree(en_pagemap: list[dict[str, Any]]) -> NavTree:
    return build_tree(en_pagemap, "en", "English")


@pytest.fixture
def ko_tree(ko_pagemap: list[dict[str, Any]]) -> NavTree:
    return build_tree(ko_pagemap, "ko", "한국어")


@pytest.fixture
def pagemap_dir(
    tmp_path: Path,
    en_pagemap: list[dict[str, Any]],
    ko_pagemap: list[dict[str, Any]],
) -> Path:
    """Create pagemaps directory with en.json and ko.json."""
    pagemaps = tmp_path / "pagemaps"
    pagemaps.mkdir()
    (pagemaps / "en.json").write_text(json.dumps(en_pagemap), encoding="utf-8")
    (pagemaps / "ko.json").write_text(
        json.dumps(ko_pagemap, ensure_ascii=False), encoding="utf-8"
    )
    return pagemaps


@pytest.fixture
def test_config(pagemap_dir: Path) -> Config:
    """Create a test configuration pointing at the tmp_path page maps."""
    return Config(
        server=ServerConfig(),
        site=SiteConfig(pagemap_dir=pagemap_dir),
        live_reload=LiveReloadConfig(enabled=False),
    )
