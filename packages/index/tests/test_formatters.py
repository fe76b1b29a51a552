"""Tests for output formatters."""

import json

import pytest

from crate_index.extractor import ViewKind, extract
from crate_index.formatters import (
    Encoding,
    format_record_plain,
    format_results,
    format_results_json,
    format_results_plain,
    format_results_shell,
)
from crate_index.models import VersionRecord
from crate_index.parser import parse_shard


@pytest.fixture
def latest(shard_bytes):
    """Latest record of a test shard."""

    def _latest(name: str) -> VersionRecord:
        return parse_shard(shard_bytes(name))[-1]

    return _latest


class TestPlain:
    """Tests for the plain encoding."""

    def test_features_line(self, latest):
        results = {"libc": [extract(latest("libc"), ViewKind.features)]}
        assert format_results_plain(results) == "libc:default std use_std"

    def test_deps_lines_in_query_order(self, latest):
        results = {
            "serde": [extract(latest("serde"), ViewKind.deps)],
            "libc": [extract(latest("libc"), ViewKind.deps)],
        }
        assert format_results(results, Encoding.plain) == (
            "serde:serde_derive serde_derive\nlibc:rustc-std-workspace-core"
        )

    def test_empty_items(self, make_record):
        results = {"demo": [extract(make_record("1.0.0"), ViewKind.deps)]}
        assert format_results_plain(results) == "demo:"

    def test_full_record_shows_set_scalars(self, latest):
        line = format_record_plain(extract(latest("serde"), ViewKind.full))
        assert line == (
            "vers=1.0.190 "
            "cksum=91d3c334ca1ee894a2c6f6ad698fe8c435b76d504b13d436f0685d648d6d96f7 "
            "yanked=false v=2 rust_version=1.31"
        )

    def test_full_record_skips_unset(self, make_record):
        line = format_record_plain(extract(make_record("1.0.0", cksum="abc"), ViewKind.full))
        assert line == "vers=1.0.0 cksum=abc yanked=false"

    def test_query_text_is_prefix(self, latest):
        results = {"serde@^1.0": [extract(latest("serde"), ViewKind.features)]}
        assert format_results_plain(results).startswith("serde@^1.0:")


class TestShell:
    """Tests for the cargo-add-all encoding."""

    def test_items_on_one_line(self, latest):
        results = {
            "serde": [extract(latest("serde"), ViewKind.deps)],
            "libc": [extract(latest("libc"), ViewKind.deps)],
        }
        assert format_results_shell(results) == (
            "serde_derive serde_derive rustc-std-workspace-core"
        )

    def test_full_views_as_name_at_version(self, latest):
        results = {
            "serde": [extract(latest("serde"), ViewKind.full)],
            "semver": [extract(latest("semver"), ViewKind.full)],
        }
        assert format_results(results, Encoding.cargo_add_all) == "serde@1.0.190 semver@1.0.20"


class TestJson:
    """Tests for the json encodings."""

    def test_compact_array_of_records(self, latest):
        results = {"libc": [extract(latest("libc"), ViewKind.features)]}
        output = format_results(results, Encoding.json)

        assert "\n" not in output
        assert ", " not in output
        payload = json.loads(output)
        assert isinstance(payload, list)
        assert payload[0]["vers"] == "0.2.150"
        assert payload[0]["links"] is None

    def test_pretty_keeps_schema_order(self, latest):
        results = {"semver": [extract(latest("semver"), ViewKind.full)]}
        output = format_results(results, Encoding.json_pretty)
        payload = json.loads(output)

        assert output.startswith("[\n  {\n")
        assert list(payload[0]) == [
            "name", "vers", "deps", "cksum", "features", "yanked", "rust_version",
        ]
        assert payload[0]["deps"][0]["default_features"] is False

    def test_pretty_round_trips(self, latest):
        record = latest("log")
        output = format_results_json({"log": [extract(record, ViewKind.full)]}, pretty=True)
        reparsed = VersionRecord.model_validate(json.loads(output)[0])

        assert reparsed == record
        assert reparsed.to_wire() == record.to_wire()

    def test_source_line_reproduced(self, shard_bytes):
        line = shard_bytes("semver").splitlines()[-1].decode()
        record = parse_shard(line.encode())[0]
        output = format_results({"semver": [extract(record, ViewKind.full)]}, Encoding.json)
        assert output == f"[{line}]"

    def test_non_ascii_unescaped(self, make_record):
        record = make_record("1.0.0", features={"ünïcode": []})
        output = format_results({"demo": [extract(record, ViewKind.full)]}, Encoding.json)
        assert "ünïcode" in output


class TestFormatResults:
    """Cross-encoding behavior."""

    @pytest.mark.parametrize("encoding", list(Encoding))
    def test_idempotent(self, latest, encoding: Encoding):
        results = {"serde": [extract(latest("serde"), ViewKind.deps)]}
        assert format_results(results, encoding) == format_results(results, encoding)

    def test_multiple_views_per_query(self, make_record):
        results = {
            "demo": [
                extract(make_record("1.0.0"), ViewKind.features),
                extract(make_record("1.1.0", features={"std": []}), ViewKind.features),
            ]
        }
        assert format_results(results) == "demo:\ndemo:std"
