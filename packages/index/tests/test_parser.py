"""Tests for shard parsing and record models."""

import json

import pytest
from pydantic import ValidationError

from crate_index.errors import MalformedRecord
from crate_index.models import DependencyKind, VersionRecord
from crate_index.parser import parse_shard
from crate_index.versions import Version


class TestParseShard:
    """Tests for parse_shard()."""

    def test_records_in_file_order(self, shard_bytes):
        records = parse_shard(shard_bytes("libc"))

        assert [str(r.vers) for r in records] == ["0.1.12", "0.2.149", "0.2.150"]
        assert records[0].yanked is True
        assert all(r.name == "libc" for r in records)

    def test_blank_lines_skipped(self):
        line = b'{"name":"x","vers":"1.0.0","deps":[],"cksum":"c","features":{},"yanked":false}'
        records = parse_shard(b"\n" + line + b"\r\n\n   \n" + line + b"\n")
        assert len(records) == 2

    def test_empty_shard(self):
        assert parse_shard(b"") == []

    def test_malformed_line_aborts(self, shard_bytes):
        with pytest.raises(MalformedRecord) as exc_info:
            parse_shard(shard_bytes("broken"))
        assert exc_info.value.line_number == 2

    def test_malformed_line_can_be_skipped(self, shard_bytes):
        records = parse_shard(shard_bytes("broken"), skip_malformed=True)
        assert [str(r.vers) for r in records] == ["0.1.0"]

    def test_invalid_version_is_malformed(self):
        line = b'{"name":"x","vers":"1.0","deps":[],"cksum":"c","features":{},"yanked":false}'
        with pytest.raises(MalformedRecord) as exc_info:
            parse_shard(line)
        assert exc_info.value.line_number == 1
        assert "vers" in exc_info.value.detail

    def test_missing_required_field_is_malformed(self):
        with pytest.raises(MalformedRecord):
            parse_shard(b'{"name":"x","vers":"1.0.0","deps":[],"features":{},"yanked":false}')


class TestVersionRecord:
    """Tests for VersionRecord field presence and passthrough."""

    def test_dependency_fields(self, shard_bytes):
        record = parse_shard(shard_bytes("cc"))[0]
        dep = record.deps[0]

        assert dep.name == "libc"
        assert dep.req == "^0.2.62"
        assert dep.default_features is False
        assert dep.target == "cfg(unix)"
        assert dep.kind == DependencyKind.NORMAL
        assert dep.crate_name == "libc"

    def test_absent_optional_fields_stay_unset(self, shard_bytes):
        record = parse_shard(shard_bytes("semver"))[-1]

        assert record.vers == Version.parse("1.0.20")
        assert not record.is_set("links")
        assert not record.is_set("v")
        assert record.v == 1
        assert record.is_set("rust_version")
        assert "links" not in record.to_wire()

    def test_explicit_null_is_preserved(self, shard_bytes):
        record = parse_shard(shard_bytes("libc"))[-1]

        assert record.is_set("links")
        assert record.to_wire()["links"] is None

    def test_unknown_fields_pass_through(self, shard_bytes):
        record = parse_shard(shard_bytes("log"))[0]
        assert record.to_wire()["x-registry-note"] == "mirrored"

    def test_wire_uses_schema_order(self):
        line = json.dumps(
            {
                "rust_version": "1.60",
                "features2": {"serde": ["dep:serde"]},
                "v": 2,
                "links": "z",
                "yanked": False,
                "features": {"std": []},
                "cksum": "abc",
                "deps": [
                    {
                        "kind": "dev",
                        "package": "real-name",
                        "registry": None,
                        "target": None,
                        "default_features": True,
                        "optional": False,
                        "features": [],
                        "req": "^1",
                        "name": "alias",
                    }
                ],
                "vers": "2.0.0",
                "name": "ordered",
            }
        )
        record = VersionRecord.model_validate_json(line)
        wire = record.to_wire()

        assert list(wire) == [
            "name", "vers", "deps", "cksum", "features", "yanked",
            "links", "v", "features2", "rust_version",
        ]
        assert list(wire["deps"][0]) == [
            "name", "req", "features", "optional", "default_features",
            "target", "kind", "registry", "package",
        ]
        assert wire["vers"] == "2.0.0"
        assert record.deps[0].crate_name == "real-name"

    def test_unknown_dependency_kind_passes_through(self):
        line = (
            b'{"name":"x","vers":"1.0.0","deps":[{"name":"y","req":"^1","kind":"weird"}],'
            b'"cksum":"c","features":{},"yanked":false}'
        )
        dep = parse_shard(line)[0].deps[0]

        assert dep.kind == "weird"
        assert parse_shard(line)[0].to_wire()["deps"][0]["kind"] == "weird"

    def test_records_are_immutable(self, make_record):
        record = make_record("1.0.0")
        with pytest.raises(ValidationError):
            record.yanked = True
