"""Service layer for listing and file streaming."""

from explorer.services.file_service import FileService
from explorer.services.listing_service import ListingService

__all__ = [
    "FileService",
    "ListingService",
]
