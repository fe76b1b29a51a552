"""Fixtures for crate index tests.

Shards live under data/index/ laid out like a real index checkout.
"""

from pathlib import Path
from typing import Callable, Optional

import pytest

from crate_index import VersionRecord, locate


@pytest.fixture
def index_dir() -> Path:
    """Root of the on-disk test index."""
    return Path(__file__).parent / "data" / "index"


@pytest.fixture
def shard_bytes(index_dir: Path) -> Callable[[str], bytes]:
    """Read the test shard for a package name."""

    def _read(name: str) -> bytes:
        return (index_dir / locate(name)).read_bytes()

    return _read


class MemoryFetcher:
    """In-memory fetcher that records the paths it was asked for."""

    def __init__(self, shards: dict[str, bytes]):
        self.shards = shards
        self.requested: list[str] = []

    async def fetch(self, path: str) -> Optional[bytes]:
        self.requested.append(path)
        return self.shards.get(path)


@pytest.fixture
def memory_fetcher() -> Callable[[dict[str, bytes]], MemoryFetcher]:
    """Build a fetcher serving the given {path: bytes} mapping."""
    return MemoryFetcher


@pytest.fixture
def make_record() -> Callable[..., VersionRecord]:
    """Build a VersionRecord with sensible defaults for required fields."""

    def _make(vers: str, name: str = "demo", yanked: bool = False, **fields) -> VersionRecord:
        data = {
            "name": name,
            "vers": vers,
            "deps": [],
            "cksum": "0" * 64,
            "features": {},
            "yanked": yanked,
        }
        data.update(fields)
        return VersionRecord.model_validate(data)

    return _make
