import logging
import os
from typing import Any, Awaitable, Callable

from http_vcr.adapters import HttpAdapter, HttpxAdapter
from http_vcr.errors import RequestNotFoundError
from http_vcr.models import VcrMode, VcrRequest, VcrResponse
from http_vcr.redaction import Redactor
from http_vcr.store import Cassette, CassetteRegistry

logger = logging.getLogger(__name__)


class VcrMiddleware:
    """
    Records and replays HTTP sessions.

    In record mode each request is passed on to the next step and the request/response pair is
    appended to the cassette. In replay mode the response is looked up in the cassette and the
    next step is never called.

    Install the middleware after any other middleware that modifies the request (i.e. closest to
    the transport), otherwise those modifications won't be recorded and replayed.

    Use VcrMiddleware.create() to construct an instance - the cassette is opened up front so that a
    missing or malformed cassette fails before any request is sent.
    """

    _mode: VcrMode
    _registry: CassetteRegistry
    _adapter: HttpAdapter
    _request_redactor: Redactor | None
    _response_redactor: Redactor | None

    def __init__(
        self,
        mode: VcrMode,
        cassette_path: str | os.PathLike,
        registry: CassetteRegistry,
        adapter: HttpAdapter,
    ):
        self._mode = VcrMode(mode)
        self._cassette_path = cassette_path
        self._registry = registry
        self._adapter = adapter
        self._request_redactor = None
        self._response_redactor = None

    @classmethod
    async def create(
        cls,
        mode: VcrMode,
        cassette_path: str | os.PathLike,
        registry: CassetteRegistry | None = None,
        adapter: HttpAdapter | None = None,
    ) -> "VcrMiddleware":
        middleware = cls(
            mode=mode,
            cassette_path=cassette_path,
            registry=registry if registry is not None else CassetteRegistry(),
            adapter=adapter if adapter is not None else HttpxAdapter(),
        )
        await middleware._open()
        return middleware

    async def _open(self) -> Cassette:
        if self._mode == VcrMode.REPLAY:
            return await self._registry.open_for_replay(self._cassette_path)
        return await self._registry.open_for_record(self._cassette_path)

    async def _get_cassette(self) -> Cassette:
        cassette = self._registry.get(self._cassette_path)
        if cassette is None:
            cassette = await self._open()
        return cassette

    @property
    def mode(self) -> VcrMode:
        return self._mode

    @property
    def cassette_path(self) -> str | os.PathLike:
        return self._cassette_path

    def with_request_redactor(self, redactor: Redactor) -> "VcrMiddleware":
        self._request_redactor = redactor
        return self

    def with_response_redactor(self, redactor: Redactor) -> "VcrMiddleware":
        self._response_redactor = redactor
        return self

    async def _capture_request(self, request: Any) -> VcrRequest:
        recorded_request = await self._adapter.capture_request(request)
        if self._request_redactor:
            recorded_request = self._request_redactor.transform(recorded_request)
        return recorded_request

    async def _capture_response(self, response: Any) -> VcrResponse:
        recorded_response = await self._adapter.capture_response(response)
        if self._response_redactor:
            recorded_response = self._response_redactor.transform(recorded_response)
        return recorded_response

    async def handle(self, request: Any, next_step: Callable[[Any], Awaitable[Any]]) -> Any:
        recorded_request = await self._capture_request(request)

        if self._mode == VcrMode.RECORD:
            return await self._record(request, recorded_request, next_step)
        return await self._replay(recorded_request)

    async def _record(self, request: Any, recorded_request: VcrRequest, next_step: Callable[[Any], Awaitable[Any]]):
        response = await next_step(request)
        recorded_response = await self._capture_response(response)

        cassette = await self._get_cassette()

        logger.info("📝 Storing recording for %s %s", recorded_request.method, recorded_request.url)
        await self._registry.append(cassette, recorded_request, recorded_response)

        # The caller always gets the real response, redaction only applies to the stored copy
        return response

    async def _replay(self, recorded_request: VcrRequest):
        cassette = await self._get_cassette()
        index = self._registry.lookup(cassette, recorded_request)
        if index is None:
            logger.warning(
                "No recorded response found for request %s %s in %s",
                recorded_request.method,
                recorded_request.url,
                self._cassette_path,
            )
            raise RequestNotFoundError(recorded_request)

        return self._adapter.build_response(self._registry.response_at(cassette, index))
