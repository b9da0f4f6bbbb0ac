"""Listing service: enumerates, stats and sorts directory children."""

import asyncio
import logging
import os
from dataclasses import dataclass
from datetime import datetime
from stat import S_ISDIR, S_ISREG
from typing import List, Optional, Union

from explorer.config import LISTING_STAT_CONCURRENCY, ROOT_LABEL
from explorer.exceptions import InternalError, NotADirectoryPathError
from explorer.formatting import (
    format_child_count,
    format_size,
    format_timestamp,
    quote_segment
)
from explorer.paths import PathResolver
from explorer.schemas.listing import Breadcrumb, EntryKind, Listing, ListingEntry
from explorer.types import RelativePath

logger = logging.getLogger(__name__)

PARENT_ENTRY_NAME = ".."
PARENT_ENTRY_HREF = "../"


@dataclass(frozen=True)
class DirectoryChild:
    """
    Name and best-known kind of one enumerated child.
    """
    name: str
    is_directory: bool
    is_symlink: bool = False


def is_addressable(name: str) -> bool:
    """Check that a child name survives a UTF-8 round trip through a URL."""
    try:
        name.encode("utf-8")
    except UnicodeEncodeError:
        return False
    return True


def scan_directory(path: str) -> List[DirectoryChild]:
    """
    Enumerate the immediate children of a directory.

    Names that are not valid UTF-8 cannot be requested back, so they are
    left out.

    Args:
        path: Absolute directory path

    Returns:
        Children in enumeration order

    Raises:
        OSError: If the directory cannot be read
    """
    children = []
    with os.scandir(path) as it:
        for entry in it:
            if not is_addressable(entry.name):
                logger.debug(f"Skipping entry with undecodable name {entry.name!r}")
                continue
            try:
                is_directory = entry.is_dir()
                is_symlink = entry.is_symlink()
            except OSError:
                is_directory = False
                is_symlink = False
            children.append(
                DirectoryChild(name=entry.name, is_directory=is_directory, is_symlink=is_symlink)
            )
    return children


def count_children(path: str) -> Optional[int]:
    """Count immediate children of a directory, or None if it cannot be read."""
    try:
        with os.scandir(path) as it:
            return sum(1 for _ in it)
    except OSError:
        return None


def sort_key(entry: ListingEntry):
    # Directories first, then case-insensitive with lowercase ahead on ties.
    return (not entry.is_directory, entry.name.casefold(), entry.name.swapcase())


def build_breadcrumbs(relative_path: RelativePath, root_label: str = ROOT_LABEL) -> List[Breadcrumb]:
    """
    Build the breadcrumb trail for a relative path.

    Args:
        relative_path: Normalized path of the listed directory
        root_label: Label of the leading root crumb

    Returns:
        Root crumb followed by one crumb per segment, each linking to the
        cumulative encoded path with a trailing slash
    """
    crumbs = [Breadcrumb(label=root_label, href="/")]
    encoded_segments = []

    for segment in relative_path.segments:
        encoded_segments.append(quote_segment(segment))
        crumbs.append(
            Breadcrumb(label=segment, href="/" + "/".join(encoded_segments) + "/")
        )

    return crumbs


def parent_entry() -> ListingEntry:
    return ListingEntry(name=PARENT_ENTRY_NAME, kind=EntryKind.PARENT, href=PARENT_ENTRY_HREF)


class ListingService:
    def __init__(
        self,
        resolver: PathResolver,
        root_label: str = ROOT_LABEL,
        stat_concurrency: int = LISTING_STAT_CONCURRENCY,
    ):
        self.resolver = resolver
        self.root_label = root_label
        self.stat_concurrency = max(1, stat_concurrency)

    async def build_listing(self, relative: Union[str, RelativePath, None]) -> Listing:
        """
        Build the sorted listing of one directory.

        Args:
            relative: Relative path of the directory ("" for the root)

        Returns:
            Listing with entries and breadcrumbs; entries is empty for an
            empty root directory

        Raises:
            PathEscapeError: If the path resolves outside the root
            NotFoundError: If the directory does not exist
            NotADirectoryPathError: If the path is not a directory
            InternalError: If the directory cannot be enumerated
        """
        location = await self.resolver.resolve(relative, must_exist=True)

        if not location.is_directory:
            raise NotADirectoryPathError()

        try:
            children = await asyncio.to_thread(scan_directory, location.absolute_path)
        except OSError as e:
            logger.error(f"Failed to enumerate {location.relative_path!r}: {e}")
            raise InternalError() from e

        semaphore = asyncio.Semaphore(self.stat_concurrency)
        entries = list(await asyncio.gather(
            *(self._build_entry(location.absolute_path, child, semaphore) for child in children)
        ))
        entries.sort(key=sort_key)

        if not location.relative_path.is_root:
            entries.insert(0, parent_entry())

        logger.debug(f"Listed {len(children)} entries in {location.relative_path!r}")

        return Listing(
            relative_path=location.relative_path,
            entries=entries,
            breadcrumbs=build_breadcrumbs(location.relative_path, self.root_label),
        )

    def _stat_child(self, child_path: str, child: DirectoryChild) -> Optional[os.stat_result]:
        # Symlinks leading out of the root keep their target's metadata hidden.
        if child.is_symlink and not self.resolver.contains(os.path.realpath(child_path)):
            logger.debug(f"Not reporting metadata for {child.name!r}: target is outside the root")
            return None
        try:
            return os.stat(child_path)
        except OSError as e:
            # Enumeration already proved the entry exists; keep it with blank metadata.
            logger.debug(f"Stat failed for entry {child.name!r}: {e}")
            return None

    async def _build_entry(
        self,
        directory: str,
        child: DirectoryChild,
        semaphore: asyncio.Semaphore
    ) -> ListingEntry:
        child_path = os.path.join(directory, child.name)

        async with semaphore:
            stat_result = await asyncio.to_thread(self._stat_child, child_path, child)

            is_directory = S_ISDIR(stat_result.st_mode) if stat_result else child.is_directory
            item_count = None
            if is_directory and stat_result:
                item_count = await asyncio.to_thread(count_children, child_path)

        encoded_name = quote_segment(child.name)
        modified_at = datetime.fromtimestamp(stat_result.st_mtime) if stat_result else None

        if is_directory:
            return ListingEntry(
                name=child.name,
                kind=EntryKind.DIRECTORY,
                href=f"{encoded_name}/",
                item_count=item_count,
                modified_at=modified_at,
                display_size=format_child_count(item_count),
                display_modified=format_timestamp(modified_at),
            )

        # Only regular files can be streamed; pipes, sockets and devices get no download link.
        is_regular = stat_result is not None and S_ISREG(stat_result.st_mode)
        size_bytes = stat_result.st_size if is_regular else None
        return ListingEntry(
            name=child.name,
            kind=EntryKind.FILE,
            href=encoded_name,
            download_href=f"{encoded_name}?download=1" if is_regular else None,
            size_bytes=size_bytes,
            modified_at=modified_at,
            display_size=format_size(size_bytes),
            display_modified=format_timestamp(modified_at),
        )
