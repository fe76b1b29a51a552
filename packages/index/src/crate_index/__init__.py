"""Crate index query engine.

Version: 1.0.0

Answers metadata questions about crates from a registry index:
- Shard location from a package name
- Line-delimited record parsing (pydantic models)
- Cargo-style semver requirements and version selection
- Feature / dependency views and plain, shell-list and JSON output

Usage:
    >>> from crate_index import QueryEngine, SparseIndexClient, ViewKind
    >>> async with SparseIndexClient() as client:
    ...     report = await QueryEngine(client).run(["libc"], view=ViewKind.features)
    ...     print(report.output)
"""

from crate_index.client import IndexFetcher, LocalIndexFetcher, SparseIndexClient
from crate_index.errors import (
    CrateIndexError,
    IndexFetchError,
    InvalidPackageName,
    InvalidVersion,
    InvalidVersionRange,
    MalformedRecord,
    PackageNotFound,
)
from crate_index.extractor import OutputView, ViewKind, extract
from crate_index.formatters import Encoding, format_results
from crate_index.locator import locate, validate_package_name
from crate_index.models import DependencyKind, DependencySpec, VersionRecord
from crate_index.parser import parse_shard
from crate_index.query import (
    FailureReason,
    Query,
    QueryEngine,
    QueryFailure,
    QueryReport,
)
from crate_index.selector import Selection, select
from crate_index.versions import Version, VersionReq

__version__ = "1.0.0"

__all__ = [
    # Orchestration
    "QueryEngine",
    "Query",
    "QueryReport",
    "QueryFailure",
    "FailureReason",
    # Fetchers
    "IndexFetcher",
    "SparseIndexClient",
    "LocalIndexFetcher",
    # Pipeline stages
    "validate_package_name",
    "locate",
    "parse_shard",
    "select",
    "Selection",
    "extract",
    "ViewKind",
    "OutputView",
    "format_results",
    "Encoding",
    # Models
    "VersionRecord",
    "DependencySpec",
    "DependencyKind",
    "Version",
    "VersionReq",
    # Errors
    "CrateIndexError",
    "InvalidPackageName",
    "PackageNotFound",
    "MalformedRecord",
    "InvalidVersion",
    "InvalidVersionRange",
    "IndexFetchError",
]
