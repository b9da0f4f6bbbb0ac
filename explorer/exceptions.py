"""Custom exception classes for the Explorer."""

from enum import Enum
from typing import Optional


class ErrorKind(str, Enum):
    """
    Every failure a request can end in.
    """
    PATH_ESCAPE = "PATH_ESCAPE"
    BAD_REQUEST = "BAD_REQUEST"
    NOT_FOUND = "NOT_FOUND"
    NOT_A_DIRECTORY = "NOT_A_DIRECTORY"
    NOT_A_FILE = "NOT_A_FILE"
    METHOD_NOT_ALLOWED = "METHOD_NOT_ALLOWED"
    INTERNAL = "INTERNAL"


STATUS_CODES = {
    ErrorKind.PATH_ESCAPE: 400,
    ErrorKind.BAD_REQUEST: 400,
    ErrorKind.NOT_FOUND: 404,
    ErrorKind.NOT_A_DIRECTORY: 404,
    ErrorKind.NOT_A_FILE: 404,
    ErrorKind.METHOD_NOT_ALLOWED: 405,
    ErrorKind.INTERNAL: 500,
}

REASON_PHRASES = {
    400: "Bad Request",
    404: "Not Found",
    405: "Method Not Allowed",
    500: "Internal Server Error",
}


class ExplorerError(Exception):
    """
    Base exception class for all Explorer errors.

    The message is shown to the client, so it must never carry absolute
    filesystem paths.
    """
    kind: ErrorKind = ErrorKind.INTERNAL
    default_message = "Internal Server Error"

    def __init__(self, message: Optional[str] = None):
        self.message = message or self.default_message
        super().__init__(self.message)

    @property
    def status_code(self) -> int:
        return STATUS_CODES[self.kind]

    @property
    def reason(self) -> str:
        return REASON_PHRASES[self.status_code]


class PathEscapeError(ExplorerError):
    """
    Raised when a canonicalized path falls outside the root directory.
    """
    kind = ErrorKind.PATH_ESCAPE
    default_message = "Path escapes explorer root"


class BadRequestError(ExplorerError):
    """
    Raised for malformed percent-encoding or a missing legacy parameter.
    """
    kind = ErrorKind.BAD_REQUEST
    default_message = "Bad Request"


class NotFoundError(ExplorerError):
    """
    Raised when the requested path does not exist.
    """
    kind = ErrorKind.NOT_FOUND
    default_message = "Requested path not found"


class NotADirectoryPathError(ExplorerError):
    """
    Raised when a listing is requested for something that is not a directory.
    """
    kind = ErrorKind.NOT_A_DIRECTORY
    default_message = "Requested path is not a directory"


class NotAFileError(ExplorerError):
    """
    Raised when a download is requested for something that is not a file.
    """
    kind = ErrorKind.NOT_A_FILE
    default_message = "Requested path is not a file"


class MethodNotAllowedError(ExplorerError):
    """
    Raised for any request method other than GET.
    """
    kind = ErrorKind.METHOD_NOT_ALLOWED
    default_message = "Method Not Allowed"


class InternalError(ExplorerError):
    """
    Raised when the filesystem fails in an unexpected way.
    """
    kind = ErrorKind.INTERNAL
