from dataclasses import dataclass, field
from enum import Enum
from http import HTTPMethod

from http_vcr.body import Body, TextBody


class VcrMode(str, Enum):
    """
    Determines whether the middleware should record the HTTP session or inject
    pre-recorded responses into the session
    """

    RECORD = "record"
    REPLAY = "replay"


@dataclass
class VcrRequest:
    """
    Request as recorded in a cassette.

    Two requests are considered the same (for replay matching) only when all fields are equal.
    Header names keep the case they were captured with, but the order of names is not significant.
    """

    method: HTTPMethod
    url: str
    headers: dict[str, list[str]] = field(default_factory=dict)
    body: Body = field(default_factory=lambda: TextBody(text=""))


@dataclass
class VcrResponse:
    """
    Response as recorded in a cassette.

    version is None when the transport didn't report a protocol version
    """

    status: int
    version: str | None = None
    headers: dict[str, list[str]] = field(default_factory=dict)
    body: Body = field(default_factory=lambda: TextBody(text=""))


@dataclass(frozen=True)
class Session:
    # For now we store requests and responses as a pair of parallel tuples;
    # we iterate the requests until we find the one we want and return the corresponding response.
    # TODO: key by (method, url) to avoid the linear scan for large recordings
    requests: tuple[VcrRequest, ...] = ()
    responses: tuple[VcrResponse, ...] = ()

    def __len__(self) -> int:
        return len(self.requests)
