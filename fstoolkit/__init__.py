"""
fstoolkit: filesystem helpers and a tiny static page server
Built with FastAPI + Uvicorn + aiofiles
"""

import logging

from .console import ConsoleHandler

__version__ = "1.0.0"
__author__ = "fstoolkit"
__description__ = "Filesystem helpers with colored console logging and a static page server"

# Library operations print [<SEVERITY>] lines on stdout without any setup;
# main.setup_logging hands this over to the root logger.
package_logger = logging.getLogger(__name__)
if not any(isinstance(handler, ConsoleHandler) for handler in package_logger.handlers):
    package_logger.addHandler(ConsoleHandler())
    package_logger.setLevel(logging.INFO)
