import asyncio
import logging
import os
import threading
import weakref
from pathlib import Path

from http_vcr import serialization
from http_vcr.errors import CassetteError, CassetteFileError, CassetteParseError
from http_vcr.models import Session, VcrRequest, VcrResponse

logger = logging.getLogger(__name__)


class Cassette:
    """
    Registry entry for a single cassette file.

    The load lock guards the one-time population of the session (replay),
    the write lock serialises appends to the file (record).
    Both are keyed by the file path so unrelated cassettes never contend.

    asyncio locks belong to a single event loop, so each running loop gets its own pair.
    The file lock is held by the thread doing the write and also covers appends made from other loops.
    """

    _path: Path
    _locks: "weakref.WeakKeyDictionary[asyncio.AbstractEventLoop, tuple[asyncio.Lock, asyncio.Lock]]"
    session: Session | None

    def __init__(self, path: Path):
        self._path = path
        self._locks = weakref.WeakKeyDictionary()
        self.session = None
        self.file_lock = threading.Lock()

    @property
    def path(self) -> Path:
        return self._path

    def _loop_locks(self) -> tuple[asyncio.Lock, asyncio.Lock]:
        loop = asyncio.get_running_loop()
        locks = self._locks.get(loop)
        if locks is None:
            locks = (asyncio.Lock(), asyncio.Lock())
            self._locks[loop] = locks
        return locks

    @property
    def load_lock(self) -> asyncio.Lock:
        return self._loop_locks()[0]

    @property
    def write_lock(self) -> asyncio.Lock:
        return self._loop_locks()[1]

    def __repr__(self) -> str:
        loaded = f"{len(self.session)} interactions" if self.session is not None else "not loaded"
        return f"Cassette({str(self._path)!r}, {loaded})"


def _append_text(path: Path, text: str):
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, "a", encoding="utf-8") as f:
        f.write(text)


def _write_document(cassette: Cassette, document: str):
    with cassette.file_lock:
        _append_text(cassette.path, document)


class CassetteRegistry:
    """
    Holds the cassettes used by VcrMiddleware instances.

    Create one registry (e.g. at module level or in test setup) and pass it to every middleware that should share
    loaded sessions and write locks; sessions are never evicted while the registry is alive.
    """

    _cassettes: dict[Path, Cassette]

    def __init__(self):
        self._cassettes = {}

    def _get_or_create(self, path: str | os.PathLike) -> Cassette:
        key = Path(path).resolve()
        # no await between the lookup and the insert, so this is safe on the event loop
        cassette = self._cassettes.get(key)
        if cassette is None:
            cassette = Cassette(key)
            self._cassettes[key] = cassette
        return cassette

    def get(self, path: str | os.PathLike) -> Cassette | None:
        return self._cassettes.get(Path(path).resolve())

    async def _read_text(self, path: Path) -> str:
        return await asyncio.to_thread(path.read_text, encoding="utf-8")

    async def _load_session(self, path: Path) -> Session:
        try:
            text = await self._read_text(path)
        except OSError as e:
            logger.error("No readable cassette found at %s: %s", path, e)
            raise CassetteFileError(path, e) from e

        try:
            pairs = serialization.decode_stream(text)
        except CassetteParseError as e:
            logger.error("Failed to parse cassette %s: %s", path, e)
            raise e.with_path(path) from e

        return Session(
            requests=tuple(request for request, _ in pairs),
            responses=tuple(response for _, response in pairs),
        )

    async def open_for_replay(self, path: str | os.PathLike) -> Cassette:
        cassette = self._get_or_create(path)
        async with cassette.load_lock:
            # Callers that waited on the lock find the session already populated
            if cassette.session is None:
                session = await self._load_session(cassette.path)
                cassette.session = session
                logger.info("📼 Loaded %d recorded interactions from %s", len(session), cassette.path)
        return cassette

    async def open_for_record(self, path: str | os.PathLike) -> Cassette:
        cassette = self._get_or_create(path)
        async with cassette.load_lock:
            # Drop any loaded session so that a later replay open picks up what gets recorded.
            # The write lock is kept so appends already in flight stay serialised.
            cassette.session = None
        logger.info("📼 Recording to %s", cassette.path)
        return cassette

    def lookup(self, cassette: Cassette, request: VcrRequest) -> int | None:
        session = cassette.session
        if session is None:
            raise CassetteError(f"Cassette {cassette.path} is not open for replay")

        # Stateless scan: a request recorded more than once always resolves to its first occurrence
        for index, recorded_request in enumerate(session.requests):
            if recorded_request == request:
                return index
        return None

    def response_at(self, cassette: Cassette, index: int) -> VcrResponse:
        session = cassette.session
        if session is None:
            raise CassetteError(f"Cassette {cassette.path} is not open for replay")
        return session.responses[index]

    async def append(self, cassette: Cassette, request: VcrRequest, response: VcrResponse):
        # Each interaction is a new YAML document
        document = serialization.DOCUMENT_SEPARATOR.lstrip("\n") + serialization.dump_document(request, response)
        async with cassette.write_lock:
            write = asyncio.ensure_future(asyncio.to_thread(_write_document, cassette, document))
            try:
                await asyncio.shield(write)
            except asyncio.CancelledError:
                # The thread can't be interrupted, hold the lock until it has finished writing
                await asyncio.wait([write])
                if write.exception() is not None:
                    logger.error("Failed to append to cassette %s: %s", cassette.path, write.exception())
                raise
            except OSError as e:
                raise CassetteFileError(cassette.path, e) from e
