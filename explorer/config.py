"""Configuration settings for the Explorer server."""

import os
from pathlib import Path


EXPLORER_HOST = os.environ.get("EXPLORER_HOST", os.environ.get("HOST", "0.0.0.0"))

EXPLORER_PORT = int(os.environ.get("EXPLORER_PORT", os.environ.get("PORT", "10080")))

EXPLORER_ROOT = os.path.realpath(os.environ.get("EXPLORER_ROOT", os.path.join(os.getcwd(), "explorer")))

TEMPLATE_PATH = os.environ.get(
    "EXPLORER_TEMPLATE_PATH",
    str(Path(__file__).resolve().parent / "templates" / "template.html")
)

ROOT_LABEL = os.environ.get("EXPLORER_ROOT_LABEL", "explorer")

LISTING_STAT_CONCURRENCY = int(os.environ.get("EXPLORER_STAT_CONCURRENCY", "32"))

STREAM_CHUNK_SIZE = int(os.environ.get("EXPLORER_STREAM_CHUNK_SIZE", str(64 * 1024)))

DOWNLOAD_QUERY_PARAM = "download"

LEGACY_PATH_QUERY_PARAM = "path"
