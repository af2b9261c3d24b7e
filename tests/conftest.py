import shutil
import tempfile

import pytest

from http_vcr.store import CassetteRegistry


class TempDirectory:
    _temp_dir: str | None = None
    _prefix: str

    def __init__(self, prefix: str = "http-vcr-test-"):
        self._prefix = prefix

    def __enter__(self):
        self._temp_dir = tempfile.mkdtemp(prefix=self._prefix)
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        shutil.rmtree(self._temp_dir)

    @property
    def path(self):
        return self._temp_dir


class CountingRegistry(CassetteRegistry):
    """
    CassetteRegistry that counts how many times each cassette file is read
    """

    def __init__(self):
        super().__init__()
        self.reads = {}

    async def _read_text(self, path):
        self.reads[path] = self.reads.get(path, 0) + 1
        return await super()._read_text(path)


@pytest.fixture
def temp_dir():
    with TempDirectory() as directory:
        yield directory


@pytest.fixture
def registry():
    # one registry per test, shared by all the middleware instances the test creates
    return CountingRegistry()
