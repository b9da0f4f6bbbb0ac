"""Pydantic schemas for directory listings."""

from datetime import datetime
from enum import Enum
from typing import List, Optional

from pydantic import BaseModel


class EntryKind(str, Enum):
    FILE = "file"
    DIRECTORY = "directory"
    PARENT = "parent"


class ListingEntry(BaseModel):
    """One row of a directory listing."""
    name: str
    kind: EntryKind
    href: str
    download_href: Optional[str] = None
    size_bytes: Optional[int] = None
    item_count: Optional[int] = None
    modified_at: Optional[datetime] = None
    display_size: str = ""
    display_modified: str = ""

    @property
    def is_directory(self) -> bool:
        return self.kind in (EntryKind.DIRECTORY, EntryKind.PARENT)


class Breadcrumb(BaseModel):
    """Navigation link for one level of the current path."""
    label: str
    href: str


class Listing(BaseModel):
    """Sorted view of one directory plus its breadcrumb trail."""
    relative_path: str
    entries: List[ListingEntry]
    breadcrumbs: List[Breadcrumb]

    @property
    def is_empty(self) -> bool:
        return not self.entries
