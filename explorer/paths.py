"""Request path normalization and root-confined resolution."""

import asyncio
import logging
import os
import re
from typing import Optional, Union
from urllib.parse import unquote_to_bytes

from explorer.exceptions import BadRequestError, InternalError, NotFoundError, PathEscapeError
from explorer.types import RelativePath, ResolvedLocation

logger = logging.getLogger(__name__)

_SEPARATORS = re.compile(r"[\\/]+")
_MALFORMED_ESCAPE = re.compile(r"%(?![0-9A-Fa-f]{2})")
_DISCARDED_SEGMENTS = {"", ".", ".."}


def _decode_once(raw: str) -> str:
    if _MALFORMED_ESCAPE.search(raw):
        raise BadRequestError("Malformed percent-encoding in path")
    try:
        decoded = unquote_to_bytes(raw).decode("utf-8")
    except UnicodeDecodeError as e:
        raise BadRequestError("Path is not valid UTF-8") from e
    if "\x00" in decoded:
        raise BadRequestError("Path contains a null byte")
    return decoded


def normalize(raw: Union[str, RelativePath, None]) -> RelativePath:
    """
    Turn an untrusted, possibly percent-encoded path into a RelativePath.

    The input is decoded exactly once, split on runs of forward or
    backward slashes, and stripped of empty, "." and ".." segments.
    ".." never pops a parent; it is simply dropped.

    Args:
        raw: Raw request path, or an already normalized RelativePath

    Returns:
        RelativePath joined with os.sep ("" for the root)

    Raises:
        BadRequestError: If the percent-encoding is malformed or not UTF-8
    """
    if isinstance(raw, RelativePath):
        return raw
    if not raw:
        return RelativePath("")

    decoded = _decode_once(raw)
    segments = [segment for segment in _SEPARATORS.split(decoded) if segment not in _DISCARDED_SEGMENTS]
    return RelativePath(os.sep.join(segments))


def web_path_to_relative(web_path: Optional[str]) -> RelativePath:
    """
    Convert a raw URL path (e.g. "/docs/a%20b/") into a RelativePath.
    """
    if not web_path or web_path == "/":
        return RelativePath("")
    return normalize(web_path.strip("/"))


class PathResolver:
    """
    Confines resolved paths to a single root directory.
    """

    def __init__(self, root: str):
        self.root = os.path.realpath(root)
        self._root_prefix = self.root if self.root.endswith(os.sep) else self.root + os.sep

    def contains(self, canonical_path: str) -> bool:
        return canonical_path == self.root or canonical_path.startswith(self._root_prefix)

    def _canonicalize(self, relative_path: RelativePath) -> str:
        return os.path.realpath(os.path.join(self.root, relative_path))

    async def resolve(
        self,
        relative: Union[str, RelativePath, None],
        must_exist: bool = True
    ) -> ResolvedLocation:
        """
        Resolve a relative path against the root directory.

        Canonicalization follows symlinks, and the containment check runs
        on the canonical form.

        Args:
            relative: Relative path (normalized again if it is a raw string)
            must_exist: Stat the result and fail if it is missing

        Returns:
            ResolvedLocation, carrying stat metadata when must_exist is set

        Raises:
            PathEscapeError: If the canonical path is outside the root
            NotFoundError: If must_exist is set and the path is missing
            InternalError: If stat fails for any other reason
        """
        relative_path = normalize(relative)
        canonical = await asyncio.to_thread(self._canonicalize, relative_path)

        if not self.contains(canonical):
            logger.warning(f"Rejected path escaping root: {relative_path!r}")
            raise PathEscapeError()

        if not must_exist:
            return ResolvedLocation(absolute_path=canonical, relative_path=relative_path)

        try:
            stat_result = await asyncio.to_thread(os.stat, canonical)
        except (FileNotFoundError, NotADirectoryError) as e:
            raise NotFoundError() from e
        except OSError as e:
            logger.error(f"Failed to stat {relative_path!r}: {e}")
            raise InternalError() from e

        return ResolvedLocation(
            absolute_path=canonical,
            relative_path=relative_path,
            stat=stat_result,
        )
