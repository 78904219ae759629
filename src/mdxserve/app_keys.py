"""Application keys for type-safe app configuration access."""

from aiohttp import web

from mdxserve.config import Config
from mdxserve.core.resolver import PathResolver

resolver_key = web.AppKey("resolver", PathResolver)
config_key = web.AppKey("config", Config)
