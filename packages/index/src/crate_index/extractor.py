"""Attribute extractor: project a selected record into an output view."""

from dataclasses import dataclass
from enum import Enum

from crate_index.models import VersionRecord


class ViewKind(str, Enum):
    """Which attribute of a record to show.

    - full: the whole record
    - features: feature names, sorted and de-duplicated
    - deps: dependency names in declaration order, duplicates kept
    """

    full = "full"
    features = "features"
    deps = "deps"


@dataclass(frozen=True)
class OutputView:
    """A record plus the identifiers projected from it."""

    kind: ViewKind
    record: VersionRecord
    items: tuple[str, ...] = ()


def feature_names(record: VersionRecord) -> list[str]:
    """Feature names from ``features`` and ``features2``, sorted."""
    return sorted(set(record.all_features()))


def dependency_names(record: VersionRecord) -> list[str]:
    """Dependency names as declared.

    A crate may list the same dependency more than once (e.g. once as a
    normal and once as a dev dependency), so no de-duplication happens.
    """
    return [dep.name for dep in record.deps]


def extract(record: VersionRecord, view_kind: ViewKind) -> OutputView:
    """Build the requested view of ``record``."""
    if view_kind == ViewKind.features:
        return OutputView(view_kind, record, tuple(feature_names(record)))
    if view_kind == ViewKind.deps:
        return OutputView(view_kind, record, tuple(dependency_names(record)))
    return OutputView(ViewKind.full, record)
