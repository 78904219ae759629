"""aiohttp server for mdxserve.

Application factory, the catch-all document route, and an explicit server
lifecycle object.
"""

import asyncio
import logging

from aiohttp import web

from mdxserve.app_keys import config_key, resolver_key
from mdxserve.config import Config
from mdxserve.core.resolver import PathOutsideRootError, PathResolver, ResolutionKind

logger = logging.getLogger(__name__)


async def serve_document(request: web.Request) -> web.FileResponse:
    """Serve the file a request path resolves to.

    A file or directory index at exactly the request path wins; otherwise
    the resolver's precedence applies. Missing files are not checked before
    sending: FileResponse opens the file itself and answers 404 when it is
    gone and 403 when it cannot be read. Direct file requests therefore 404
    instead of falling back to index.html.
    """
    resolver = request.app[resolver_key]

    try:
        resolution = resolver.lookup_static(request.path)
        if resolution is None:
            resolution = resolver.resolve(request.path)
    except PathOutsideRootError as e:
        logger.warning(str(e))
        raise web.HTTPNotFound() from e

    kind = resolution.kind

    if kind is ResolutionKind.DIRECTORY_INDEX and not request.path.endswith("/"):
        url = request.rel_url
        location = url.with_path(f"{request.path}/").with_query(url.query)
        raise web.HTTPMovedPermanently(location=str(location))

    # Hidden files are never sent
    if kind is ResolutionKind.DIRECT and resolver.is_hidden(resolution.path):
        raise web.HTTPNotFound()

    return web.FileResponse(resolution.path)


def create_app(config: Config) -> web.Application:
    """Create aiohttp application.

    Args:
        config: Application configuration

    Returns:
        Configured aiohttp application
    """
    app = web.Application()

    resolver = PathResolver(
        config.docs.root_dir,
        fallback=config.docs.fallback,
        extension=config.docs.extension,
        index_name=config.docs.index_name,
    )

    app[config_key] = config
    app[resolver_key] = resolver

    app.router.add_get("/{path:.*}", serve_document)

    return app


class DocServer:
    """Owns a running application and its listening socket.

    Wraps aiohttp's AppRunner/TCPSite so the server can be started and
    stopped explicitly, e.g. from tests or an embedding event loop.
    """

    def __init__(self, config: Config) -> None:
        self._config = config
        self._runner: web.AppRunner | None = None
        self._port: int | None = None

    @property
    def is_running(self) -> bool:
        """Whether start() has bound a socket that stop() has not released."""
        return self._runner is not None

    @property
    def port(self) -> int:
        """Port actually bound (resolves port 0 to the assigned port)."""
        if self._port is None:
            raise RuntimeError("Server is not running")
        return self._port

    @property
    def url(self) -> str:
        """Base URL of the server; wildcard hosts are reported as 127.0.0.1."""
        host = self._config.server.host
        if host in ("0.0.0.0", ""):
            host = "127.0.0.1"
        return f"http://{host}:{self.port}"

    async def start(self, port: int | None = None) -> None:
        """Start listening.

        Args:
            port: Port to bind (default: config.server.port, 0 for any free port)

        Raises:
            RuntimeError: If the server is already running
        """
        if self._runner is not None:
            raise RuntimeError("Server is already running")

        bind_port = self._config.server.port if port is None else port

        runner = web.AppRunner(create_app(self._config))
        await runner.setup()
        site = web.TCPSite(runner, self._config.server.host, bind_port)
        try:
            await site.start()
        except OSError:
            await runner.cleanup()
            raise

        self._runner = runner
        self._port = runner.addresses[0][1]
        logger.info(f"Server running on port {self._port}")

    async def stop(self) -> None:
        """Stop listening and release resources. No-op when not running."""
        if self._runner is None:
            return

        await self._runner.cleanup()
        logger.info(f"Server on port {self._port} stopped")
        self._runner = None
        self._port = None


def run_server(config: Config) -> None:
    """Run the server until interrupted.

    Args:
        config: Application configuration
    """
    try:
        asyncio.run(_serve_forever(DocServer(config)))
    except KeyboardInterrupt:
        pass


async def _serve_forever(server: DocServer) -> None:
    """Start server and keep it running until the task is cancelled."""
    await server.start()
    try:
        await asyncio.Event().wait()
    finally:
        await server.stop()
