import logging
import os

import httpx
from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from http_vcr.middleware import VcrMiddleware
from http_vcr.models import VcrMode
from http_vcr.redaction import Redactor
from http_vcr.store import CassetteRegistry
from http_vcr.transport import VcrTransport

logger = logging.getLogger(__name__)


class VcrSettings(BaseSettings):
    """
    Settings shared by all cassettes in a test run.

    Setting VCR_MODE=record re-records every cassette together, VCR_MODE=replay (the default)
    replays them without touching the network.
    """

    model_config = SettingsConfigDict(extra="ignore")

    mode: VcrMode = Field(default=VcrMode.REPLAY, alias="VCR_MODE")
    cassette_dir: str = Field(default="cassettes", alias="VCR_CASSETTE_DIR")

    def cassette_path(self, cassette_name: str) -> str:
        return os.path.join(self.cassette_dir, cassette_name)


async def create_vcr_transport(
    cassette_name: str,
    settings: VcrSettings | None = None,
    *,
    registry: CassetteRegistry | None = None,
    transport: httpx.AsyncBaseTransport | None = None,
    request_redactor: Redactor | None = None,
    response_redactor: Redactor | None = None,
) -> VcrTransport:
    """
    Build a VcrTransport for the named cassette using the mode and cassette directory from settings
    (loaded from environment variables when not supplied)
    """
    if settings is None:
        settings = VcrSettings()

    cassette_path = settings.cassette_path(cassette_name)
    logger.info("📼 Using cassette %s in %s mode", cassette_path, settings.mode.value)

    middleware = await VcrMiddleware.create(settings.mode, cassette_path, registry=registry)
    if request_redactor:
        middleware.with_request_redactor(request_redactor)
    if response_redactor:
        middleware.with_response_redactor(response_redactor)

    return VcrTransport(middleware, transport=transport)
