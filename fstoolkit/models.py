"""
Data models and constants for fstoolkit
"""

from enum import Enum
from typing import Dict, List
from dataclasses import dataclass, field
from pathlib import Path


class ServerState(Enum):
    """Lifecycle of a web server instance"""
    NOT_LISTENING = "not_listening"
    LISTENING = "listening"


@dataclass
class FileInfo:
    """Directory entry descriptor"""
    name: str
    path: str
    size: int
    is_dir: bool
    modified: float
    mime_type: str = ""


@dataclass
class PageRoute:
    """GET route serving the contents of a single file"""

    url: str
    file_path: Path

    def __post_init__(self):
        if not isinstance(self.file_path, Path):
            self.file_path = Path(self.file_path)


DEFAULT_HOST = "0.0.0.0"
DEFAULT_PORT = 80


@dataclass
class ServerConfig:
    """Server configuration"""
    addr: str = DEFAULT_HOST
    port: int = DEFAULT_PORT


@dataclass
class LoggingConfig:
    """Logging configuration"""
    json: bool = False
    file: str = ""
    level: str = "INFO"
    max_size_mb: int = 10
    backup_count: int = 3


@dataclass
class Config:
    """Main configuration container"""
    server: ServerConfig = field(default_factory=ServerConfig)
    pages: List[PageRoute] = field(default_factory=list)
    contentTypes: Dict[str, str] = field(default_factory=dict)
    logging: LoggingConfig = field(default_factory=LoggingConfig)


# Content types served by WebServer.add_page unless overridden
DEFAULT_CONTENT_TYPES = {
    '.json': 'application/json',
    '.html': 'text/html',
    '.htm': 'text/html',
}

# MIME types reported in FileInfo descriptors
MIME_TYPES = {
    '.txt': 'text/plain',
    '.html': 'text/html',
    '.htm': 'text/html',
    '.css': 'text/css',
    '.js': 'application/javascript',
    '.json': 'application/json',
    '.xml': 'application/xml',
    '.md': 'text/markdown',
    '.yaml': 'application/yaml',
    '.yml': 'application/yaml',
    '.pdf': 'application/pdf',
    '.zip': 'application/zip',
    '.png': 'image/png',
    '.jpg': 'image/jpeg',
    '.jpeg': 'image/jpeg',
    '.gif': 'image/gif',
    '.svg': 'image/svg+xml',
    '.ico': 'image/x-icon',
}

# Default MIME type for unknown files
DEFAULT_MIME_TYPE = 'application/octet-stream'

DEFAULT_ENCODING = "utf-8"

# Response bodies for pages that cannot be served
NOT_FOUND_BODY = "<i>Requested file doesn't exists.</i>"
UNRECOGNIZED_EXTENSION_BODY = "<i>Unprocessable Entity!</i> <b>Unrecognized file extension.</b>"
