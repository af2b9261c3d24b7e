from http import HTTPMethod
from typing import Protocol, TypeVar

import httpx

from http_vcr import body
from http_vcr.errors import UnsupportedMethodError
from http_vcr.models import VcrRequest, VcrResponse

RequestT = TypeVar("RequestT")
ResponseT = TypeVar("ResponseT")


class HttpAdapter(Protocol[RequestT, ResponseT]):
    """
    Converts between an HTTP library's request/response objects and the recorded models
    """

    async def capture_request(self, request: RequestT) -> VcrRequest: ...

    async def capture_response(self, response: ResponseT) -> VcrResponse: ...

    def build_response(self, recorded: VcrResponse) -> ResponseT: ...


def _collect_headers(headers: httpx.Headers) -> dict[str, list[str]]:
    # use the raw header items to keep names in the case they were sent/received with
    collected: dict[str, list[str]] = {}
    for raw_name, raw_value in headers.raw:
        name = raw_name.decode(headers.encoding)
        collected.setdefault(name, []).append(raw_value.decode(headers.encoding))
    return collected


class HttpxAdapter:
    async def capture_request(self, request: httpx.Request) -> VcrRequest:
        try:
            method = HTTPMethod(request.method)
        except ValueError as e:
            raise UnsupportedMethodError(request.method) from e

        # aread() buffers the body and swaps in a replayable stream,
        # so the request can still be sent after we've copied the content
        content = await request.aread()
        return VcrRequest(
            method=method,
            url=str(request.url),
            headers=_collect_headers(request.headers),
            body=body.from_bytes(content),
        )

    async def capture_response(self, response: httpx.Response) -> VcrResponse:
        content = await response.aread()
        http_version = response.extensions.get("http_version")
        if isinstance(http_version, bytes):
            http_version = http_version.decode("ascii")
        return VcrResponse(
            status=response.status_code,
            version=http_version,
            headers=_collect_headers(response.headers),
            body=body.from_bytes(content),
        )

    def build_response(self, recorded: VcrResponse) -> httpx.Response:
        # The recorded body is the decoded content, so don't ask httpx to decode it again.
        # The recorded length is that of the encoded body, httpx sets one for the content instead.
        dropped = {"content-encoding"}
        if any(name.lower() == "content-encoding" for name in recorded.headers):
            dropped.add("content-length")
        headers = [
            (name, value)
            for name, values in recorded.headers.items()
            if name.lower() not in dropped
            for value in values
        ]
        extensions = {}
        if recorded.version is not None:
            extensions["http_version"] = recorded.version.encode("ascii")
        return httpx.Response(
            status_code=recorded.status,
            headers=headers,
            content=body.to_bytes(recorded.body),
            extensions=extensions,
        )
