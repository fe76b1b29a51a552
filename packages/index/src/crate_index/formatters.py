"""Output formatters for query results.

Provides multiple output encodings:
- plain: one ``name:items`` line per selected record
- cargo-add-all: every item from every package on a single line, ready to
  be substituted into another command (e.g. ``cargo add $(...)``)
- json / json-pretty: array of full records in index schema order

Formatting never modifies the views it is given.
"""

import json
from enum import Enum
from typing import Mapping, Sequence

from crate_index.extractor import OutputView, ViewKind

# Scalar record fields shown by the plain full-record line, in order.
PLAIN_SCALAR_FIELDS = ("vers", "cksum", "yanked", "links", "v", "rust_version")


class Encoding(str, Enum):
    """Output encoding options."""

    plain = "plain"
    cargo_add_all = "cargo-add-all"
    json = "json"
    json_pretty = "json-pretty"


def _scalar(value) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


def format_record_plain(view: OutputView) -> str:
    """Render the scalar fields of a full-record view as ``key=value`` pairs."""
    record = view.record
    pairs = []
    for field in PLAIN_SCALAR_FIELDS:
        value = getattr(record, field)
        if value is None or not record.is_set(field):
            continue
        pairs.append(f"{field}={_scalar(value)}")
    return " ".join(pairs)


def shell_tokens(view: OutputView) -> list[str]:
    """Tokens contributed by one view to a shell list.

    Full-record views contribute ``name@version`` so the list can be fed
    straight to ``cargo add``.
    """
    if view.kind == ViewKind.full:
        return [f"{view.record.name}@{view.record.vers}"]
    return list(view.items)


def format_results_plain(results: Mapping[str, Sequence[OutputView]]) -> str:
    """One line per selected record, prefixed with the queried name."""
    lines = []
    for name, views in results.items():
        for view in views:
            if view.kind == ViewKind.full:
                body = format_record_plain(view)
            else:
                body = " ".join(view.items)
            lines.append(f"{name}:{body}")
    return "\n".join(lines)


def format_results_shell(results: Mapping[str, Sequence[OutputView]]) -> str:
    """All items from all packages on one space-separated line."""
    tokens: list[str] = []
    for views in results.values():
        for view in views:
            tokens.extend(shell_tokens(view))
    return " ".join(tokens)


def format_results_json(
    results: Mapping[str, Sequence[OutputView]],
    pretty: bool = False,
) -> str:
    """Array of full records, whatever view was requested.

    Args:
        results: Views per queried name
        pretty: Indent nested structures

    Returns:
        JSON string
    """
    payload = [view.record.to_wire() for views in results.values() for view in views]
    if pretty:
        return json.dumps(payload, indent=2, ensure_ascii=False)
    return json.dumps(payload, separators=(",", ":"), ensure_ascii=False)


def format_results(
    results: Mapping[str, Sequence[OutputView]],
    encoding: Encoding = Encoding.plain,
) -> str:
    """Render views in the requested encoding."""
    if encoding == Encoding.plain:
        return format_results_plain(results)
    if encoding == Encoding.cargo_add_all:
        return format_results_shell(results)
    if encoding == Encoding.json:
        return format_results_json(results)
    if encoding == Encoding.json_pretty:
        return format_results_json(results, pretty=True)
    raise ValueError(f"Unsupported encoding: {encoding}")
