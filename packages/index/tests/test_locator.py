"""Tests for shard path computation and name validation."""

import pytest

from crate_index.errors import InvalidPackageName
from crate_index.locator import locate, validate_package_name


class TestLocate:
    """Tests for locate()."""

    @pytest.mark.parametrize(
        "name,path",
        [
            ("a", "1/a"),
            ("ab", "2/ab"),
            ("abc", "3/a/abc"),
            ("abcd", "ab/cd/abcd"),
            ("abcdefgh", "ab/cd/abcdefgh"),
            ("serde_json", "se/rd/serde_json"),
        ],
    )
    def test_sharding(self, name: str, path: str):
        assert locate(name) == path

    def test_directory_keys_lowercased_name_preserved(self):
        assert locate("AbcDefGH") == "ab/cd/AbcDefGH"
        assert locate("Abc") == "3/a/Abc"
        assert locate("AB") == "2/AB"

    def test_deterministic(self):
        assert locate("tokio") == locate("tokio") == "to/ki/tokio"


class TestValidatePackageName:
    """Tests for validate_package_name()."""

    def test_valid_names_returned(self):
        assert validate_package_name("serde-json_2") == "serde-json_2"

    @pytest.mark.parametrize("name", ["", "a/b", "..\\evil", "se rde", "serde.json", "crâte"])
    def test_invalid_names(self, name: str):
        with pytest.raises(InvalidPackageName):
            validate_package_name(name)

    def test_reason_reported(self):
        with pytest.raises(InvalidPackageName) as exc_info:
            validate_package_name("../etc/passwd")
        assert "path separator" in str(exc_info.value)
