"""
Static page web server for fstoolkit
"""

import logging
from pathlib import Path
from typing import Callable, Dict, List, Optional

import aiofiles.os
import uvicorn
from fastapi import FastAPI
from fastapi.responses import HTMLResponse, Response

from .fs import FileSystemError
from .models import (
    DEFAULT_ENCODING, DEFAULT_HOST, DEFAULT_PORT, NOT_FOUND_BODY,
    UNRECOGNIZED_EXTENSION_BODY, PageRoute, ServerState,
)
from .streams import Streamer
from .utils import PathLike, build_content_types, get_content_type, normalize_url

logger = logging.getLogger(__name__)


class PageServer(uvicorn.Server):
    """Uvicorn server that reports back once its sockets are bound"""

    def __init__(self, config: uvicorn.Config, on_bound: Callable[[], None]):
        super().__init__(config)
        self.on_bound = on_bound

    async def startup(self, sockets=None) -> None:
        # uvicorn exits from startup when binding fails
        await super().startup(sockets=sockets)
        if self.started:
            self.on_bound()


class WebServer:
    """
    Serves registered files over HTTP GET

    Each instance owns its own FastAPI application and route table, so
    several servers can live in one process.
    """

    def __init__(self, content_types: Optional[Dict[str, str]] = None, title: str = "fstoolkit"):
        """
        Args:
            content_types: Extension -> content type entries merged over the
                built-in ``.json`` and ``.html``/``.htm`` mapping
            title: FastAPI application title
        """
        self.content_types = build_content_types(content_types)
        self.state = ServerState.NOT_LISTENING
        self.hostname: Optional[str] = None
        self.port: Optional[int] = None
        self.streamer = Streamer()
        self._routes: List[PageRoute] = []

        self.app = FastAPI(
            title=title,
            docs_url=None,
            redoc_url=None,
            openapi_url=None,
        )

    @property
    def routes(self) -> List[PageRoute]:
        """Registered pages in registration order"""
        return list(self._routes)

    def listen(self, port: Optional[int] = None, hostname: Optional[str] = None) -> None:
        """
        Bind and serve until interrupted

        The server only counts as listening, and "Webserver started." is only
        logged, once the socket is bound.

        Args:
            port: Default (if None) is 80
            hostname: Default (if None) is 0.0.0.0, all interfaces

        Raises:
            RuntimeError: If this server is already listening or cannot bind
        """
        if self.state is ServerState.LISTENING:
            raise RuntimeError("Webserver is already listening")

        self.port = port or DEFAULT_PORT
        self.hostname = hostname or DEFAULT_HOST

        logger.info(f"Serving {len(self._routes)} page(s) on {self.hostname}:{self.port}")

        config = uvicorn.Config(
            self.app,
            host=self.hostname,
            port=self.port,
            log_config=None,  # keep the handlers installed by setup_logging
            access_log=False,
            server_header=False,
        )
        server = PageServer(config, on_bound=self._on_bound)

        try:
            server.run()
        except SystemExit as e:
            if self.state is ServerState.LISTENING:
                raise
            raise RuntimeError(f"Webserver could not listen on {self.hostname}:{self.port}") from e

    def _on_bound(self) -> None:
        self.state = ServerState.LISTENING
        logger.warning("Webserver started.")

    def add_page(self, url: str, file_path: PathLike) -> PageRoute:
        """
        Register a GET route serving the contents of a file

        The file is looked up on every request, so it may be created, changed
        or removed after registration.

        Args:
            url: URL path. Example : "/" or "/robots.txt" or "/auth/login".
            file_path: File to serve. Example : "./src/index.html"

        Returns:
            The registered route
        """
        route = PageRoute(url=normalize_url(url), file_path=Path(file_path))

        if self.state is ServerState.LISTENING:
            logger.warning(f"Page {route.url} registered after the webserver started")

        async def serve_page() -> Response:
            return await self._serve(route)

        self.app.add_api_route(
            route.url,
            serve_page,
            methods=["GET"],
            include_in_schema=False,
            name=f"page:{route.url}",
        )
        self._routes.append(route)
        logger.debug(f"Registered page {route.url} -> {route.file_path}")
        return route

    async def _serve(self, route: PageRoute) -> Response:
        if not await aiofiles.os.path.isfile(route.file_path):
            return HTMLResponse(NOT_FOUND_BODY, status_code=404)

        content_type = get_content_type(route.file_path, self.content_types)
        if content_type is None:
            return HTMLResponse(UNRECOGNIZED_EXTENSION_BODY, status_code=422)

        try:
            chunks = [chunk async for chunk in self.streamer.aread(route.file_path, DEFAULT_ENCODING)]
        except (FileSystemError, OSError, UnicodeError) as e:
            logger.error(f"Failed to serve {route.url} from {route.file_path}: {e}")
            raise

        return Response(content="".join(chunks), status_code=200, media_type=content_type)
