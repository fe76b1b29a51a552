"""Version selector: pick the record(s) a query asks for.

Two modes:
- default (no requirement): highest non-yanked version, falling back to the
  highest yanked one when nothing else was ever published
- range: highest non-yanked version satisfying the requirement, or an
  empty selection when nothing satisfies it
"""

from dataclasses import dataclass
from typing import Optional, Sequence

from crate_index.models import VersionRecord
from crate_index.versions import VersionReq


@dataclass(frozen=True)
class Selection:
    """Outcome of a selection.

    Attributes:
        records: Selected records, ascending by version (empty = no match)
        selected_yanked: True when only yanked versions existed and the
            default mode fell back to them
    """

    records: tuple[VersionRecord, ...] = ()
    selected_yanked: bool = False

    @property
    def found(self) -> bool:
        return bool(self.records)

    @property
    def best(self) -> Optional[VersionRecord]:
        """Highest selected record."""
        return self.records[-1] if self.records else None


def _by_version(record: VersionRecord):
    return record.vers


def select(
    records: Sequence[VersionRecord],
    version_req: Optional[VersionReq] = None,
    include_yanked: bool = False,
    all_matches: bool = False,
) -> Selection:
    """Select records from a parsed shard.

    Args:
        records: Records in shard order
        version_req: Requirement to satisfy; None selects the latest version
        include_yanked: Treat yanked versions like any other
        all_matches: Return every eligible record instead of the highest

    Returns:
        Selection (empty when no record satisfies the requirement)
    """
    selected_yanked = False

    if version_req is None:
        candidates = [r for r in records if include_yanked or not r.yanked]
        if not candidates and records:
            candidates = list(records)
            selected_yanked = True
    else:
        candidates = [
            r
            for r in records
            if (include_yanked or not r.yanked) and version_req.matches(r.vers)
        ]

    if not candidates:
        return Selection()
    if len(candidates) == 1:
        return Selection((candidates[0],), selected_yanked)
    if all_matches:
        return Selection(tuple(sorted(candidates, key=_by_version)), selected_yanked)
    return Selection((max(candidates, key=_by_version),), selected_yanked)
