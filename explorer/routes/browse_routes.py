"""Browsing routes: directory listings, file downloads and legacy query forms."""

from typing import Optional
from urllib.parse import unquote_plus

from fastapi import APIRouter, Depends, Request
from fastapi.responses import HTMLResponse, RedirectResponse, StreamingResponse

from explorer.config import DOWNLOAD_QUERY_PARAM, LEGACY_PATH_QUERY_PARAM
from explorer.dependencies import get_file_service, get_listing_service, get_renderer
from explorer.exceptions import BadRequestError, MethodNotAllowedError, NotAFileError
from explorer.formatting import quote_segment
from explorer.paths import normalize, web_path_to_relative
from explorer.rendering import TemplateRenderer
from explorer.services.file_service import FileService
from explorer.services.listing_service import ListingService
from explorer.types import RelativePath, ResolvedLocation

router = APIRouter(tags=["Browse"])

# Every method is routed here so that anything but GET gets a 405 page.
ROUTED_METHODS = ["GET", "HEAD", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"]


def require_get(request: Request) -> None:
    if request.method != "GET":
        raise MethodNotAllowedError()


def decode_raw(raw: bytes) -> str:
    try:
        return raw.decode("utf-8")
    except UnicodeDecodeError as e:
        raise BadRequestError("Request is not valid UTF-8") from e


def raw_request_path(request: Request) -> str:
    """
    Get the request path exactly as sent, still percent-encoded.
    """
    raw_path = request.scope.get("raw_path")
    if raw_path:
        return decode_raw(raw_path)
    return request.scope.get("path") or "/"


def raw_query_value(request: Request, name: str) -> Optional[str]:
    """
    Get a query parameter without percent-decoding its value.

    The parameter name is matched after decoding. In the value, "+" is
    turned into an encoded space so that normalize() performs the only
    percent-decoding pass.

    Args:
        request: Incoming request
        name: Parameter name

    Returns:
        First raw value for the parameter, or None if it is absent
    """
    query_string = decode_raw(request.scope.get("query_string", b""))
    for pair in query_string.split("&"):
        key, _, value = pair.partition("=")
        if unquote_plus(key) == name:
            return value.replace("+", "%20")
    return None


def canonical_directory_url(relative_path: RelativePath) -> str:
    if relative_path.is_root:
        return "/"
    return "/" + "/".join(quote_segment(segment) for segment in relative_path.segments) + "/"


async def render_directory(
    relative_path: RelativePath,
    listing_service: ListingService,
    renderer: TemplateRenderer
) -> HTMLResponse:
    listing = await listing_service.build_listing(relative_path)
    return HTMLResponse(renderer.render_listing(listing))


async def stream_file(
    location: ResolvedLocation,
    file_service: FileService,
    as_attachment: bool
) -> StreamingResponse:
    stream, headers = await file_service.download_file(location, as_attachment=as_attachment)
    return StreamingResponse(stream, headers=headers)


@router.api_route("/download", methods=ROUTED_METHODS)
async def legacy_download(
    request: Request,
    file_service: FileService = Depends(get_file_service)
):
    """
    Legacy download form: /download?path=<relative path>.

    Parameters:
        - path: Relative path of the file (required)

    Returns:
        - StreamingResponse with attachment disposition

    Raises:
        - 400: Missing path parameter or malformed encoding
        - 404: File not found or path is a directory
        - 405: Method other than GET
    """
    require_get(request)

    raw_path = raw_query_value(request, LEGACY_PATH_QUERY_PARAM)
    if not raw_path:
        raise BadRequestError("Missing path parameter")

    location = await file_service.locate(normalize(raw_path))
    if location.is_directory:
        raise NotAFileError()

    return await stream_file(location, file_service, as_attachment=True)


@router.api_route("/{requested_path:path}", methods=ROUTED_METHODS)
async def browse(
    request: Request,
    listing_service: ListingService = Depends(get_listing_service),
    file_service: FileService = Depends(get_file_service),
    renderer: TemplateRenderer = Depends(get_renderer)
):
    """
    Browse the root directory tree.

    Paths ending in "/" are rendered as directory listings; other paths are
    streamed as files, and directories addressed without a trailing slash
    are redirected to their canonical form. "/?path=<p>" is the legacy form
    of a listing request.

    Parameters:
        - download: Present to mark a file response as an attachment
        - path: Legacy listing path, honored on "/" only

    Raises:
        - 400: Path escapes the root or has malformed encoding
        - 404: Path not found, or a file requested as a directory
        - 405: Method other than GET
        - 500: Unexpected filesystem error
    """
    require_get(request)

    request_path = raw_request_path(request)

    if request_path == "/":
        legacy_path = raw_query_value(request, LEGACY_PATH_QUERY_PARAM)
        if legacy_path is not None:
            return await render_directory(normalize(legacy_path), listing_service, renderer)

    if request_path.endswith("/"):
        return await render_directory(web_path_to_relative(request_path), listing_service, renderer)

    location = await file_service.locate(web_path_to_relative(request_path))

    if location.is_directory:
        target = canonical_directory_url(location.relative_path)
        if request.url.query:
            target = f"{target}?{request.url.query}"
        return RedirectResponse(target, status_code=301)

    as_attachment = DOWNLOAD_QUERY_PARAM in request.query_params
    return await stream_file(location, file_service, as_attachment=as_attachment)
