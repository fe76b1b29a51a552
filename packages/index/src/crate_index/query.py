"""Query orchestration.

For every requested package this module runs

    locate -> fetch -> parse -> select -> extract

independently and concurrently, collects one outcome per package, and
renders the successes. A failure for one package never stops the others.

Usage:
    >>> async with SparseIndexClient() as client:
    ...     engine = QueryEngine(client)
    ...     report = await engine.run(["serde", "libc@0.2"], view=ViewKind.deps)
    ...     print(report.output)
"""

import asyncio
from dataclasses import dataclass, field
from enum import Enum
from typing import Optional, Sequence, Union

from crate_query_common import get_logger

from crate_index.client import IndexFetcher
from crate_index.errors import (
    CrateIndexError,
    IndexFetchError,
    InvalidPackageName,
    InvalidVersionRange,
    MalformedRecord,
    PackageNotFound,
)
from crate_index.extractor import OutputView, ViewKind, extract
from crate_index.formatters import Encoding, format_results
from crate_index.locator import locate, validate_package_name
from crate_index.parser import parse_shard
from crate_index.selector import Selection, select
from crate_index.versions import VersionReq

logger = get_logger(__name__)

DEFAULT_MAX_CONCURRENCY = 8


@dataclass(frozen=True)
class Query:
    """A single package query.

    Attributes:
        text: The query as typed (``serde`` or ``serde@^1.0``)
        name: Package name
        version_req: Requirement to satisfy, or None for the latest version
    """

    text: str
    name: str
    version_req: Optional[VersionReq] = None

    @classmethod
    def parse(cls, text: str, default_range: Optional[str] = None) -> "Query":
        """Parse ``name`` or ``name@range``.

        A range attached to the name overrides ``default_range``.

        Raises:
            InvalidPackageName: If the name part is malformed
            InvalidVersionRange: If the range part is malformed
        """
        name, _, range_text = text.partition("@")
        validate_package_name(name)

        range_text = range_text or default_range
        version_req = VersionReq.parse(range_text) if range_text else None
        return cls(text=text, name=name, version_req=version_req)

    @property
    def shard_path(self) -> str:
        return locate(self.name)


class FailureReason(str, Enum):
    """Why a query produced no result."""

    INVALID_NAME = "invalid-name"
    INVALID_VERSION_RANGE = "invalid-version-range"
    NOT_FOUND = "not-found"
    MALFORMED_RECORD = "malformed-record"
    FETCH_FAILED = "fetch-failed"
    NO_MATCHING_VERSION = "no-matching-version"


_REASONS: dict[type, FailureReason] = {
    InvalidPackageName: FailureReason.INVALID_NAME,
    InvalidVersionRange: FailureReason.INVALID_VERSION_RANGE,
    PackageNotFound: FailureReason.NOT_FOUND,
    MalformedRecord: FailureReason.MALFORMED_RECORD,
    IndexFetchError: FailureReason.FETCH_FAILED,
}


@dataclass(frozen=True)
class QueryFailure:
    """A failed query and the reason it failed."""

    query: str
    reason: FailureReason
    message: str

    @classmethod
    def from_error(cls, query: str, error: CrateIndexError) -> "QueryFailure":
        for error_type, reason in _REASONS.items():
            if isinstance(error, error_type):
                return cls(query=query, reason=reason, message=str(error))
        return cls(query=query, reason=FailureReason.FETCH_FAILED, message=str(error))


@dataclass
class QueryReport:
    """Result of a batch query.

    ``succeeded`` and ``failed`` are keyed by query text and keep the order
    the queries were requested in.
    """

    output: Optional[str] = None
    succeeded: dict[str, Selection] = field(default_factory=dict)
    failed: dict[str, QueryFailure] = field(default_factory=dict)

    @property
    def total_failure(self) -> bool:
        return not self.succeeded

    @property
    def partial_failure(self) -> bool:
        return bool(self.succeeded) and bool(self.failed)

    @property
    def exit_code(self) -> int:
        return 1 if self.failed else 0

    @property
    def yanked_fallbacks(self) -> dict[str, Selection]:
        """Queries answered with a yanked version because nothing else existed."""
        return {q: s for q, s in self.succeeded.items() if s.selected_yanked}


Outcome = Union[Selection, QueryFailure]


def _dedupe(names: Sequence[str]) -> list[str]:
    """Drop repeated queries, keeping the first spelling.

    Package names compare case-insensitively; the range part is kept as is.
    """
    seen: dict[tuple[str, str], str] = {}
    for text in names:
        name, at, range_text = text.partition("@")
        seen.setdefault((name.lower(), at + range_text), text)
    return list(seen.values())


class QueryEngine:
    """Runs package queries against an index fetcher.

    Attributes:
        fetcher: Source of shard bytes
        max_concurrency: Maximum number of shards fetched at the same time
    """

    def __init__(
        self,
        fetcher: IndexFetcher,
        max_concurrency: int = DEFAULT_MAX_CONCURRENCY,
    ) -> None:
        if max_concurrency < 1:
            raise ValueError("max_concurrency must be at least 1")
        self.fetcher = fetcher
        self.max_concurrency = max_concurrency
        self._semaphore = asyncio.Semaphore(max_concurrency)

    async def resolve(
        self,
        query: Query,
        include_yanked: bool = False,
        all_matches: bool = False,
    ) -> Selection:
        """Fetch, parse and select for one query.

        Returns:
            Selection (empty when no version satisfies the requirement)

        Raises:
            PackageNotFound: If the index has no shard for the package
            MalformedRecord: If the shard cannot be decoded
            IndexFetchError: If the shard cannot be fetched
        """
        path = query.shard_path
        async with self._semaphore:
            try:
                data = await self.fetcher.fetch(path)
            except CrateIndexError:
                raise
            except Exception as e:
                # A fetcher failure fails this query only.
                raise IndexFetchError(path, str(e) or type(e).__name__) from e

        if data is None:
            raise PackageNotFound(query.name, path)

        records = parse_shard(data)
        if not records:
            raise PackageNotFound(query.name, path)

        return select(
            records,
            query.version_req,
            include_yanked=include_yanked,
            all_matches=all_matches,
        )

    async def run(
        self,
        names: Sequence[str],
        version_range: Optional[str] = None,
        view: ViewKind = ViewKind.full,
        encoding: Encoding = Encoding.plain,
        include_yanked: bool = False,
        all_matches: bool = False,
    ) -> QueryReport:
        """Query every name and render the successes.

        Args:
            names: Queries in output order (``name`` or ``name@range``)
            version_range: Requirement applied to names without their own
            view: Attribute to show
            encoding: Output encoding
            include_yanked: Allow yanked versions to be selected
            all_matches: Select every matching version, not just the highest

        Returns:
            QueryReport; ``output`` is None when every query failed
        """
        queries = _dedupe(names)
        logger.info("query_batch_started", count=len(queries), view=view.value)

        outcomes = await asyncio.gather(
            *(
                self._run_one(text, version_range, include_yanked, all_matches)
                for text in queries
            )
        )

        report = QueryReport()
        for text, outcome in zip(queries, outcomes):
            if isinstance(outcome, QueryFailure):
                report.failed[text] = outcome
            else:
                report.succeeded[text] = outcome

        if report.succeeded:
            views: dict[str, list[OutputView]] = {
                text: [extract(record, view) for record in selection.records]
                for text, selection in report.succeeded.items()
            }
            report.output = format_results(views, encoding)

        logger.info(
            "query_batch_finished",
            succeeded=len(report.succeeded),
            failed=len(report.failed),
        )
        return report

    async def _run_one(
        self,
        text: str,
        version_range: Optional[str],
        include_yanked: bool,
        all_matches: bool,
    ) -> Outcome:
        try:
            query = Query.parse(text, default_range=version_range)
            selection = await self.resolve(
                query, include_yanked=include_yanked, all_matches=all_matches
            )
        except CrateIndexError as e:
            failure = QueryFailure.from_error(text, e)
            logger.info("query_failed", query=text, reason=failure.reason.value)
            return failure

        if not selection.found:
            logger.info("query_failed", query=text, reason=FailureReason.NO_MATCHING_VERSION.value)
            return QueryFailure(
                query=text,
                reason=FailureReason.NO_MATCHING_VERSION,
                message=f"No version of {query.name} matches {query.version_req}",
            )

        logger.debug("query_resolved", query=text, version=str(selection.best.vers))
        return selection
