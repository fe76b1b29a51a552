"""Shard locator: package name -> index shard path.

The registry shards its index by name length and prefix:

    a          -> 1/a
    ab         -> 2/ab
    abc        -> 3/a/abc
    serde      -> se/rd/serde

Directory keys are lowercased; the final segment keeps the name as given.
"""

import re

from crate_index.errors import InvalidPackageName

_NAME_RE = re.compile(r"[A-Za-z0-9_-]+")


def validate_package_name(name: str) -> str:
    """Check that ``name`` can be used to build a shard path.

    Raises:
        InvalidPackageName: If the name is empty, contains a path
            separator, or uses characters a crate name cannot contain
    """
    if not name:
        raise InvalidPackageName(name, "name is empty")
    if "/" in name or "\\" in name:
        raise InvalidPackageName(name, "name contains a path separator")
    if not _NAME_RE.fullmatch(name):
        raise InvalidPackageName(name, "only ASCII letters, digits, '-' and '_' are allowed")
    return name


def locate(name: str) -> str:
    """Compute the shard path for an already validated package name."""
    key = name.lower()
    if len(name) <= 2:
        return f"{len(name)}/{name}"
    if len(name) == 3:
        return f"3/{key[0]}/{name}"
    return f"{key[:2]}/{key[2:4]}/{name}"
