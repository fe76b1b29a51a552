"""Index shard fetchers.

The query engine only computes shard paths and consumes bytes; these
classes are the I/O edge that turns a path into bytes (or ``None`` when the
index has no such shard).

- SparseIndexClient: async HTTP client for the sparse index protocol
- LocalIndexFetcher: reads shards from a local checkout of the index

Base URL: https://index.crates.io
Docs: https://doc.rust-lang.org/cargo/reference/registry-index.html
"""

import asyncio
from pathlib import Path
from typing import Optional, Protocol

import httpx
from crate_query_common import get_logger, retry_on_exception

from crate_index.errors import IndexFetchError

logger = get_logger(__name__)

DEFAULT_INDEX_URL = "https://index.crates.io"
DEFAULT_TIMEOUT_SECONDS = 30.0
DEFAULT_USER_AGENT = "crate-query/1.0.0"

# Statuses the registry uses for crates that do not (or no longer) exist.
MISSING_STATUSES = frozenset({404, 410, 451})


class IndexFetcher(Protocol):
    """Anything that can turn a shard path into bytes."""

    async def fetch(self, path: str) -> Optional[bytes]:
        """Return shard bytes, or None if the shard does not exist."""
        ...


class SparseIndexClient:
    """Async client for a sparse HTTP registry index.

    Example:
        >>> async with SparseIndexClient() as client:
        ...     data = await client.fetch("se/rd/serde")

    Attributes:
        base_url: Index base URL (default: https://index.crates.io)
        timeout_seconds: Request timeout
        user_agent: User-Agent header sent with every request
    """

    def __init__(
        self,
        base_url: str = DEFAULT_INDEX_URL,
        timeout_seconds: float = DEFAULT_TIMEOUT_SECONDS,
        user_agent: str = DEFAULT_USER_AGENT,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self.timeout_seconds = timeout_seconds
        self.user_agent = user_agent
        self._client: httpx.AsyncClient | None = None

    async def __aenter__(self) -> "SparseIndexClient":
        """Async context manager entry."""
        self._client = httpx.AsyncClient(
            base_url=self.base_url,
            headers={"User-Agent": self.user_agent},
            timeout=httpx.Timeout(self.timeout_seconds),
            follow_redirects=True,
        )
        logger.debug("index_client_opened", base_url=self.base_url)
        return self

    async def __aexit__(self, *args) -> None:
        """Async context manager exit."""
        if self._client:
            await self._client.aclose()
            self._client = None

    async def fetch(self, path: str) -> Optional[bytes]:
        """Fetch one shard.

        The sparse index serves lowercase paths only.

        Args:
            path: Shard path (e.g., "se/rd/serde")

        Returns:
            Shard bytes, or None if the index has no such shard

        Raises:
            IndexFetchError: On server errors or exhausted transport retries
        """
        if not self._client:
            raise IndexFetchError(path, "Client not initialized. Use async context manager.")

        try:
            response = await self._get(f"/{path.lower()}")
        except httpx.HTTPError as e:
            raise IndexFetchError(path, str(e) or type(e).__name__) from e

        if response.status_code in MISSING_STATUSES:
            logger.debug("shard_missing", path=path, status=response.status_code)
            return None

        if response.status_code >= 400:
            raise IndexFetchError(path, response.text[:200], response.status_code)

        logger.debug("shard_fetched", path=path, size=len(response.content))
        return response.content

    @retry_on_exception(
        (httpx.TimeoutException, httpx.NetworkError),
        max_attempts=3,
        min_wait_seconds=0.5,
        max_wait_seconds=5.0,
    )
    async def _get(self, url: str) -> httpx.Response:
        return await self._client.get(url)


class LocalIndexFetcher:
    """Reads shards from a local index directory (e.g. a git checkout).

    Falls back to the lowercased path when the exact path is absent.
    """

    def __init__(self, root: Path) -> None:
        self.root = Path(root)

    async def __aenter__(self) -> "LocalIndexFetcher":
        return self

    async def __aexit__(self, *args) -> None:
        pass

    async def fetch(self, path: str) -> Optional[bytes]:
        return await asyncio.to_thread(self._read, path)

    def _read(self, path: str) -> Optional[bytes]:
        for candidate in (self.root / path, self.root / path.lower()):
            if candidate.is_file():
                logger.debug("shard_read", path=str(candidate))
                try:
                    return candidate.read_bytes()
                except OSError as e:
                    raise IndexFetchError(path, str(e)) from e
        return None
