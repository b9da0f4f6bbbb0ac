"""FastAPI dependencies providing the resolver, renderer and services."""

from functools import lru_cache

from fastapi import Depends

from explorer import config
from explorer.paths import PathResolver
from explorer.rendering import TemplateRenderer
from explorer.services.file_service import FileService
from explorer.services.listing_service import ListingService


@lru_cache(maxsize=1)
def get_path_resolver() -> PathResolver:
    """Get the path resolver bound to the configured root directory."""
    return PathResolver(config.EXPLORER_ROOT)


@lru_cache(maxsize=1)
def get_renderer() -> TemplateRenderer:
    """Get the template renderer; the template is read once per process."""
    return TemplateRenderer.from_file(config.TEMPLATE_PATH)


def get_listing_service(resolver: PathResolver = Depends(get_path_resolver)) -> ListingService:
    return ListingService(
        resolver,
        root_label=config.ROOT_LABEL,
        stat_concurrency=config.LISTING_STAT_CONCURRENCY,
    )


def get_file_service(resolver: PathResolver = Depends(get_path_resolver)) -> FileService:
    return FileService(resolver, chunk_size=config.STREAM_CHUNK_SIZE)
