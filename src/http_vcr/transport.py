import httpx

from http_vcr.middleware import VcrMiddleware


class VcrTransport(httpx.AsyncBaseTransport):
    """
    httpx transport that passes every request through a VcrMiddleware.

    The wrapped transport is the "next step": it is only called in record mode.
    Transports can be nested, e.g. a recording transport wrapping a replaying one.
    """

    def __init__(self, middleware: VcrMiddleware, transport: httpx.AsyncBaseTransport | None = None):
        self._middleware = middleware
        self._transport = transport if transport is not None else httpx.AsyncHTTPTransport()

    @property
    def middleware(self) -> VcrMiddleware:
        return self._middleware

    async def handle_async_request(self, request: httpx.Request) -> httpx.Response:
        return await self._middleware.handle(request, self._transport.handle_async_request)

    async def aclose(self) -> None:
        await self._transport.aclose()
