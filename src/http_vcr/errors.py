from pathlib import Path

from http_vcr.models import VcrRequest


class VcrError(Exception):
    """
    Base class for errors raised by the cassette engine
    """


class CassetteError(VcrError):
    pass


class CassetteFileError(VcrError):
    """
    The cassette file couldn't be read or written
    """

    def __init__(self, path: Path, cause: OSError):
        super().__init__(f"Cassette file error for {path}: {cause}")
        self.path = path
        self.cause = cause


class CassetteParseError(VcrError):
    """
    A document in the cassette doesn't decode to a tagged request/response pair
    """

    def __init__(self, message: str, path: Path | None = None, index: int | None = None, document: str | None = None):
        location = ""
        if path is not None:
            location += f" in {path}"
        if index is not None:
            location += f" (document {index})"
        super().__init__(message + location)
        self.reason = message
        self.path = path
        self.index = index
        self.document = document

    def with_path(self, path: Path) -> "CassetteParseError":
        return CassetteParseError(self.reason, path=path, index=self.index, document=self.document)


class RequestNotFoundError(VcrError):
    """
    Raised in replay mode when no recorded request matches the outgoing request
    """

    def __init__(self, request: VcrRequest):
        super().__init__(f"Request not found at {request.url}: {request!r}")
        self.request = request


class UnsupportedMethodError(VcrError):
    """
    The outgoing request uses an HTTP method that can't be stored in a cassette
    """

    def __init__(self, method: str):
        super().__init__(f"Unsupported HTTP method: {method!r}")
        self.method = method
