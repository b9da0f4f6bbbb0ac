"""File service: locates files under the root and streams their bytes."""

import asyncio
import logging
from email.utils import formatdate
from typing import BinaryIO, Dict, Iterator, Tuple, Union

from explorer.config import STREAM_CHUNK_SIZE
from explorer.exceptions import InternalError, NotAFileError, NotFoundError
from explorer.formatting import quote_segment
from explorer.mime import get_mime_type
from explorer.paths import PathResolver
from explorer.types import RelativePath, ResolvedLocation

logger = logging.getLogger(__name__)


def iter_file(handle: BinaryIO, chunk_size: int = STREAM_CHUNK_SIZE) -> Iterator[bytes]:
    """
    Stream an open file in pieces, closing it when the stream ends or is abandoned.

    Args:
        handle: File opened in binary mode
        chunk_size: Size of each piece in bytes

    Yields:
        File data pieces
    """
    try:
        while True:
            piece = handle.read(chunk_size)
            if not piece:
                break
            yield piece
    finally:
        handle.close()


def build_file_headers(location: ResolvedLocation, as_attachment: bool) -> Dict[str, str]:
    headers = {
        "Content-Type": get_mime_type(location.absolute_path),
        "Content-Length": str(location.size),
        "Last-Modified": formatdate(location.stat.st_mtime, usegmt=True),
    }
    if as_attachment:
        headers["Content-Disposition"] = f'attachment; filename="{quote_segment(location.name)}"'
    return headers


class FileService:
    def __init__(self, resolver: PathResolver, chunk_size: int = STREAM_CHUNK_SIZE):
        self.resolver = resolver
        self.chunk_size = chunk_size

    async def locate(self, relative: Union[str, RelativePath, None]) -> ResolvedLocation:
        """
        Resolve a request path that must exist; it may be a file or a directory.
        """
        return await self.resolver.resolve(relative, must_exist=True)

    async def download_file(
        self,
        location: ResolvedLocation,
        as_attachment: bool = False
    ) -> Tuple[Iterator[bytes], Dict[str, str]]:
        """
        Open a resolved file for streaming.

        The file is opened before anything is sent, so open failures still
        produce a clean error response.

        Args:
            location: Location returned by locate()
            as_attachment: Mark the response as an attachment download

        Returns:
            Tuple of (byte stream, response headers)

        Raises:
            NotAFileError: If the location is not a regular file
            NotFoundError: If the file disappeared since it was located
            InternalError: If the file cannot be opened
        """
        if not location.is_file:
            raise NotAFileError()

        try:
            handle = await asyncio.to_thread(open, location.absolute_path, "rb")
        except FileNotFoundError as e:
            raise NotFoundError() from e
        except OSError as e:
            logger.error(f"Failed to open {location.relative_path!r}: {e}")
            raise InternalError() from e

        logger.info(
            f"Streaming {location.relative_path!r} ({location.size} bytes, attachment={as_attachment})"
        )
        return iter_file(handle, self.chunk_size), build_file_headers(location, as_attachment)
