"""Pydantic schemas for listings."""

from explorer.schemas.listing import (
    Breadcrumb,
    EntryKind,
    Listing,
    ListingEntry
)

__all__ = [
    "Breadcrumb",
    "EntryKind",
    "Listing",
    "ListingEntry"
]
