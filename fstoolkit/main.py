"""
Application setup and command line entry point for fstoolkit
"""

import logging
import logging.handlers
import os
import sys
from pathlib import Path
from typing import List, Optional

from .config import load_config, DEFAULT_CONFIG_PATH
from .console import ConsoleHandler, ConsoleLogger
from .models import Config, LoggingConfig, PageRoute
from .server import WebServer


logger = logging.getLogger(__name__)


def setup_logging(config: LoggingConfig, console_logger: Optional[ConsoleLogger] = None):
    """Setup logging configuration"""

    # Configure root logger
    root_logger = logging.getLogger()
    root_logger.setLevel(getattr(logging, config.level.upper(), logging.INFO))

    # Clear existing handlers
    root_logger.handlers.clear()

    # The root console handler replaces the package default one
    package_logger = logging.getLogger("fstoolkit")
    for handler in list(package_logger.handlers):
        if isinstance(handler, ConsoleHandler):
            package_logger.removeHandler(handler)
    package_logger.setLevel(logging.NOTSET)

    # Console handler, the tag already carries the severity
    console_handler = ConsoleHandler(console_logger)
    console_handler.setFormatter(logging.Formatter('%(message)s'))
    root_logger.addHandler(console_handler)

    # File handler if configured
    if config.file:
        if config.json:
            formatter = logging.Formatter(
                '{"time":"%(asctime)s","level":"%(levelname)s","logger":"%(name)s","msg":"%(message)s"}'
            )
        else:
            formatter = logging.Formatter(
                '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
            )

        log_file = Path(config.file)
        log_file.parent.mkdir(parents=True, exist_ok=True)

        file_handler = logging.handlers.RotatingFileHandler(
            log_file,
            maxBytes=config.max_size_mb * 1024 * 1024,
            backupCount=config.backup_count,
            encoding='utf-8'
        )
        file_handler.setFormatter(formatter)
        root_logger.addHandler(file_handler)


def create_server(config: Config) -> WebServer:
    """Create a WebServer with every configured page registered"""
    server = WebServer(content_types=config.contentTypes)
    for page in config.pages:
        server.add_page(page.url, page.file_path)
    return server


def parse_page(value: str) -> PageRoute:
    """Parse a URL=FILE command line page definition"""
    url, sep, file_path = value.partition("=")
    if not sep or not url.strip() or not file_path.strip():
        raise ValueError(f"Page must look like URL=FILE, got {value!r}")
    return PageRoute(url=url.strip(), file_path=Path(file_path.strip()))


def main(argv: Optional[List[str]] = None):
    """Main entry point for running the server"""
    import argparse

    parser = argparse.ArgumentParser(description="fstoolkit static page server")
    parser.add_argument("--config", "-c", default=os.getenv("FSTOOLKIT_CONFIG", DEFAULT_CONFIG_PATH),
                        help="Configuration file path")
    parser.add_argument("--host", default=None, help="Host to bind to")
    parser.add_argument("--port", type=int, default=None, help="Port to bind to")
    parser.add_argument("--page", action="append", default=[], metavar="URL=FILE",
                        help="Serve FILE at URL (repeatable)")
    parser.add_argument("--log-level", default=None, help="Logging level")

    args = parser.parse_args(argv)

    config = load_config(args.config)

    # Override with command line args
    if args.log_level:
        config.logging.level = args.log_level
    for value in args.page:
        try:
            config.pages.append(parse_page(value))
        except ValueError as e:
            parser.error(str(e))

    setup_logging(config.logging)

    if not config.pages:
        logger.warning("No pages configured, every request will return 404")

    server = create_server(config)
    server.listen(args.port or config.server.port, args.host or config.server.addr)


if __name__ == "__main__":
    sys.exit(main())
