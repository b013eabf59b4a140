"""
Utility functions for fstoolkit
"""

import mimetypes
import os
from pathlib import Path
from typing import Dict, Optional, Union

from .models import DEFAULT_CONTENT_TYPES, DEFAULT_MIME_TYPE, MIME_TYPES

PathLike = Union[str, os.PathLike]


def get_mime_type(file_path: Path) -> str:
    """Get MIME type for file"""
    suffix = file_path.suffix.lower()

    # Check our custom MIME types first
    if suffix in MIME_TYPES:
        return MIME_TYPES[suffix]

    # Fall back to system mimetypes
    mime_type, _ = mimetypes.guess_type(str(file_path))
    return mime_type or DEFAULT_MIME_TYPE


def build_content_types(overrides: Optional[Dict[str, str]] = None) -> Dict[str, str]:
    """
    Merge caller supplied extension -> content type entries over the defaults

    Extensions are normalised to lower case with a leading dot, so both
    "txt" and ".TXT" register the ".txt" entry.
    """
    content_types = dict(DEFAULT_CONTENT_TYPES)
    for extension, content_type in (overrides or {}).items():
        extension = extension.strip().lower()
        if not extension:
            raise ValueError("Empty file extension in content type mapping")
        if not extension.startswith('.'):
            extension = f".{extension}"
        content_types[extension] = content_type
    return content_types


def get_content_type(file_path: PathLike, content_types: Dict[str, str]) -> Optional[str]:
    """
    Content type registered for the file extension, or None when unknown

    Matches on the end of the file name, so a file named ".json" counts as
    JSON and the longest registered extension wins (".tar.gz" over ".gz").
    """
    name = Path(file_path).name.lower()
    for extension in sorted(content_types, key=len, reverse=True):
        if name.endswith(extension):
            return content_types[extension]
    return None


def normalize_path(path: str) -> str:
    """Normalize path separators for cross-platform compatibility"""
    return path.replace('\\', '/')


def normalize_url(url: str) -> str:
    """Ensure a route URL starts with a single slash"""
    url = normalize_path(url.strip())
    return "/" + url.lstrip('/')
