"""Content-type lookup by file extension."""

import os
from types import MappingProxyType

DEFAULT_MIME_TYPE = "application/octet-stream"

MIME_TYPES = MappingProxyType({
    ".html": "text/html; charset=utf-8",
    ".htm": "text/html; charset=utf-8",
    ".css": "text/css; charset=utf-8",
    ".js": "application/javascript; charset=utf-8",
    ".mjs": "application/javascript; charset=utf-8",
    ".json": "application/json; charset=utf-8",
    ".png": "image/png",
    ".jpg": "image/jpeg",
    ".jpeg": "image/jpeg",
    ".gif": "image/gif",
    ".svg": "image/svg+xml",
    ".webp": "image/webp",
    ".ico": "image/x-icon",
    ".avif": "image/avif",
    ".txt": "text/plain; charset=utf-8",
    ".md": "text/markdown; charset=utf-8",
    ".csv": "text/csv; charset=utf-8",
    ".xml": "application/xml; charset=utf-8",
    ".pdf": "application/pdf",
    ".zip": "application/zip",
    ".wasm": "application/wasm",
    ".mp4": "video/mp4",
    ".webm": "video/webm",
    ".mp3": "audio/mpeg",
    ".ogg": "audio/ogg",
    ".wav": "audio/wav",
})


def get_mime_type(file_path: str) -> str:
    """
    Look up the content type for a file path by its extension.

    Args:
        file_path: File name or path

    Returns:
        Content type, or application/octet-stream for unknown extensions
    """
    extension = os.path.splitext(file_path)[1].lower()
    return MIME_TYPES.get(extension, DEFAULT_MIME_TYPE)
