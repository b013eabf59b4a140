"""
Filesystem operations for fstoolkit

Every operation performs a single action on the host filesystem. Failures are
logged and raised as FileSystemError; success is logged only once the action
has completed.
"""

import os
import shutil
import logging
from pathlib import Path
from typing import Callable, List, Optional, Union

from .models import DEFAULT_ENCODING, FileInfo
from .utils import PathLike, get_mime_type, normalize_path

logger = logging.getLogger(__name__)


class FileSystemError(Exception):
    """Generic filesystem error"""
    pass


def _fail(message: str, error: Exception) -> FileSystemError:
    logger.error(message)
    return FileSystemError(f"{message} {error}")


def mkdir(path: PathLike) -> None:
    """
    Create a directory and any missing parents

    Args:
        path: Folder path

    Raises:
        FileSystemError: If the folder cannot be created
    """
    try:
        os.makedirs(path, exist_ok=True)
    except OSError as e:
        raise _fail("FileSystem Error : Cannot create your folder(s).", e) from e

    logger.info("Successfully created your folder(s).")


def rmdir(path: PathLike) -> None:
    """
    Delete a folder and everything inside it

    Blocks until the folder is gone.

    Args:
        path: Folder path

    Raises:
        FileSystemError: If the folder cannot be deleted
    """
    try:
        shutil.rmtree(path)
    except OSError as e:
        raise _fail("FileSystem Error : Cannot delete your folder.", e) from e

    logger.info("Successfully deleted your folder.")


def write(path: PathLike, data: Union[str, bytes], encoding: str = DEFAULT_ENCODING) -> None:
    """
    Write data to a file, replacing previous content

    Args:
        path: File path
        data: Plain text, encoded with ``encoding``, or raw bytes
        encoding: Text encoding. Default is UTF-8.

    Raises:
        FileSystemError: If the file cannot be written
    """
    try:
        if isinstance(data, (bytes, bytearray)):
            Path(path).write_bytes(data)
        else:
            with open(path, "w", encoding=encoding or DEFAULT_ENCODING, newline="") as f:
                f.write(str(data))
    except (OSError, UnicodeError, LookupError) as e:
        raise _fail("FileSystem Error : Cannot create your file.", e) from e

    logger.info("Successfully created your file.")


def unlink(path: PathLike) -> None:
    """
    Delete a single file

    Raises:
        FileSystemError: If the file cannot be unlinked
    """
    try:
        os.unlink(path)
    except OSError as e:
        raise _fail("FileSystem Error : Cannot unlink your file.", e) from e

    logger.info("Successfully unlinked your file.")


def is_exists(path: PathLike) -> bool:
    """True if the path is an existing file or folder"""
    try:
        return os.path.exists(path)
    except (TypeError, ValueError):
        return False


def chmod(path: PathLike, mode: int, callback: Callable[[Optional[OSError]], None]) -> None:
    """
    Change permission bits of a file or folder

    The outcome is reported to ``callback``: None on success, the OSError
    otherwise. Nothing is logged and nothing is raised.

    Args:
        path: File or folder path
        mode: Permission mode, e.g. 0o644
        callback: Called exactly once before chmod returns
    """
    try:
        os.chmod(path, mode)
    except OSError as e:
        callback(e)
        return

    callback(None)


def read_dir(
    path: PathLike,
    encoding: Optional[str] = DEFAULT_ENCODING,
    with_info: bool = False,
) -> Union[List[str], List[bytes], List[FileInfo]]:
    """
    List directory contents

    Args:
        path: Folder path
        encoding: Encoding of returned names. Default is UTF-8; None returns
            raw bytes names.
        with_info: Return FileInfo descriptors instead of names

    Returns:
        Sorted entry names, or FileInfo objects with directories first

    Raises:
        FileSystemError: If the directory cannot be read
    """
    try:
        if with_info:
            return _list_entries(Path(path))

        names = os.listdir(os.fsencode(path))
        if encoding is None:
            return sorted(names)
        return sorted(name.decode(encoding, errors="surrogateescape") for name in names)

    except (OSError, LookupError) as e:
        raise _fail("Cannot read this directory.", e) from e


def _list_entries(dir_path: Path) -> List[FileInfo]:
    entries = []
    with os.scandir(dir_path) as it:
        for entry in it:
            try:
                stat = entry.stat()
                is_dir = entry.is_dir()
            except OSError as e:
                logger.warning(f"Failed to stat {entry.path}: {e}")
                continue

            entries.append(FileInfo(
                name=entry.name,
                path=normalize_path(entry.path),
                size=0 if is_dir else stat.st_size,
                is_dir=is_dir,
                modified=stat.st_mtime,
                mime_type="" if is_dir else get_mime_type(Path(entry.path))
            ))

    # Sort: directories first, then files, both alphabetically
    entries.sort(key=lambda x: (not x.is_dir, x.name.lower()))
    return entries


def read_file(path: PathLike, encoding: Optional[str] = DEFAULT_ENCODING) -> Union[str, bytes]:
    """
    Read a whole file

    Args:
        path: File path
        encoding: Text encoding. Default is UTF-8; None returns raw bytes.

    Returns:
        File content

    Raises:
        FileSystemError: If the file cannot be read or decoded
    """
    try:
        if encoding is None:
            return Path(path).read_bytes()
        # newline="" keeps the file's line endings untouched
        with open(path, "r", encoding=encoding, newline="") as f:
            return f.read()
    except (OSError, UnicodeError, LookupError) as e:
        raise _fail("Cannot read this file.", e) from e
