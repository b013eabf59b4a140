"""
File streaming for fstoolkit
"""

import logging
from typing import AsyncGenerator, IO, Iterator, Optional, Union

import aiofiles

from .fs import FileSystemError
from .models import DEFAULT_ENCODING
from .utils import PathLike

logger = logging.getLogger(__name__)

# 64KB chunks
DEFAULT_CHUNK_SIZE = 64 * 1024

Chunk = Union[str, bytes]


class ReadStream:
    """
    Lazy, single pass sequence of chunks read from an open file

    The file is closed once the last chunk has been produced. A consumed
    stream is not restartable; open a new one to read the file again.
    """

    def __init__(self, handle: IO, chunk_size: int = DEFAULT_CHUNK_SIZE):
        self._handle = handle
        self._empty = b"" if "b" in getattr(handle, "mode", "") else ""
        self.chunk_size = chunk_size

    @property
    def closed(self) -> bool:
        return self._handle.closed

    def __iter__(self) -> Iterator[Chunk]:
        return self

    def __next__(self) -> Chunk:
        if self._handle.closed:
            raise StopIteration

        chunk = self._handle.read(self.chunk_size)
        if not chunk:
            self.close()
            raise StopIteration
        return chunk

    def read(self) -> Chunk:
        """Consume the rest of the stream in one value"""
        return self._empty.join(self)

    def close(self) -> None:
        self._handle.close()

    def __enter__(self) -> "ReadStream":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()


class WriteStream:
    """Sink bound to an open file; flushing and closing is up to the caller"""

    def __init__(self, handle: IO):
        self._handle = handle

    @property
    def closed(self) -> bool:
        return self._handle.closed

    def write(self, chunk: Chunk) -> int:
        return self._handle.write(chunk)

    def flush(self) -> None:
        self._handle.flush()

    def close(self) -> None:
        self._handle.close()

    def __enter__(self) -> "WriteStream":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()


class Streamer:
    """FileSystem streamer"""

    def read(
        self,
        path: PathLike,
        encoding: Optional[str] = DEFAULT_ENCODING,
        chunk_size: int = DEFAULT_CHUNK_SIZE,
    ) -> ReadStream:
        """
        Open a file for incremental reading

        Args:
            path: File path
            encoding: File encoding. Default is UTF-8; None streams bytes.
            chunk_size: Maximum characters (or bytes) per chunk

        Raises:
            FileSystemError: If the file cannot be opened
        """
        try:
            if encoding is None:
                handle = open(path, "rb")
            else:
                handle = open(path, "r", encoding=encoding, newline="")
        except (OSError, LookupError) as e:
            logger.error("Cannot Stream (Read-State) this file.")
            raise FileSystemError(f"Cannot stream {path}: {e}") from e

        return ReadStream(handle, chunk_size)

    def write(self, path: PathLike, encoding: Optional[str] = DEFAULT_ENCODING) -> WriteStream:
        """
        Open a file for incremental writing, truncating previous content

        Args:
            path: File path
            encoding: File encoding. Default is UTF-8; None expects bytes chunks.

        Raises:
            FileSystemError: If the file cannot be opened
        """
        try:
            if encoding is None:
                handle = open(path, "wb")
            else:
                handle = open(path, "w", encoding=encoding, newline="")
        except (OSError, LookupError) as e:
            logger.error("Cannot Stream (Write-State) this file.")
            raise FileSystemError(f"Cannot stream {path}: {e}") from e

        return WriteStream(handle)

    async def aread(
        self,
        path: PathLike,
        encoding: Optional[str] = DEFAULT_ENCODING,
        chunk_size: int = DEFAULT_CHUNK_SIZE,
    ) -> AsyncGenerator[Chunk, None]:
        """
        Async variant of read() backed by aiofiles

        Opening errors surface on the first iteration.
        """
        try:
            if encoding is None:
                f = await aiofiles.open(path, "rb")
            else:
                f = await aiofiles.open(path, "r", encoding=encoding, newline="")
        except (OSError, LookupError) as e:
            logger.error("Cannot Stream (Read-State) this file.")
            raise FileSystemError(f"Cannot stream {path}: {e}") from e

        try:
            while True:
                chunk = await f.read(chunk_size)
                if not chunk:
                    break
                yield chunk
        finally:
            await f.close()
