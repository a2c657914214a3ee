"""Application keys for type-safe app configuration access."""

from aiohttp import web

from navstage.core.loader import PageMapLoader

loader_key = web.AppKey("loader", PageMapLoader)
verbose_key = web.AppKey("verbose", bool)
