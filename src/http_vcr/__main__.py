"""
In "record" mode, retrieves the content at example.com (or another site) and stores it in a cassette.
In "play" mode, intercepts the HTTP request and provides the pre-recorded response instead of
obtaining one from the remote server.

    python -m http_vcr record
    python -m http_vcr record https://example.com/some/where
    python -m http_vcr play https://example.com/some/where
    python -m http_vcr play
"""

import asyncio
import logging
import os
import sys

import httpx

from http_vcr.middleware import VcrMiddleware
from http_vcr.models import VcrMode
from http_vcr.transport import VcrTransport

CASSETTE_PATH = "simple-recording-example.yml"
DEFAULT_SITE = "https://example.com"

modes = {"record": VcrMode.RECORD, "play": VcrMode.REPLAY}


async def fetch(mode: VcrMode, site: str, transport: httpx.AsyncBaseTransport | None = None) -> httpx.Response:
    middleware = await VcrMiddleware.create(mode, CASSETTE_PATH)
    async with httpx.AsyncClient(transport=VcrTransport(middleware, transport=transport)) as client:
        return await client.get(site, headers={"User-Agent": "http-vcr-example"})


def main(argv: list[str] | None = None, transport: httpx.AsyncBaseTransport | None = None) -> int:
    args = sys.argv if argv is None else argv
    if len(args) < 2 or args[1] not in modes:
        print(f"Usage: {args[0] if args else 'http_vcr'} record|play [URL]")
        return 2

    site = args[2] if len(args) == 3 else DEFAULT_SITE
    response = asyncio.run(fetch(modes[args[1]], site, transport=transport))
    print(f"Status: {response.status_code}")
    return 0


if __name__ == "__main__":
    logging.basicConfig(level=os.getenv("LOG_LEVEL") or "INFO")
    sys.exit(main())
