"""Semantic versions and version requirements, Cargo flavour.

Versions follow SemVer 2.0 (``MAJOR.MINOR.PATCH[-PRE][+BUILD]``). Ordering
also takes build metadata into account so two versions only compare equal
when their text is identical.

Requirements follow the rules Cargo applies to ``Cargo.toml`` dependency
strings:

- ``1.2.3`` / ``^1.2.3``: compatible updates (left-most non-zero part fixed)
- ``~1.2.3``: patch updates only
- ``=1.2.3``, ``>1.2``, ``>=1``, ``<2``, ``<=1.4``: comparisons
- ``*``, ``1.*``, ``1.2.x``: wildcards
- ``>=1.2, <1.5``: comma-joined conjunction

A pre-release version only satisfies a requirement when one of its
comparators names the same ``MAJOR.MINOR.PATCH`` with a pre-release.
"""

import re
from dataclasses import dataclass
from enum import Enum
from functools import total_ordering
from typing import Optional

from crate_index.errors import InvalidVersion, InvalidVersionRange

_IDENTIFIERS = r"[0-9A-Za-z-]+(?:\.[0-9A-Za-z-]+)*"
_NUMBER = r"0|[1-9][0-9]*"

_VERSION_RE = re.compile(
    rf"(?P<major>{_NUMBER})\.(?P<minor>{_NUMBER})\.(?P<patch>{_NUMBER})"
    rf"(?:-(?P<pre>{_IDENTIFIERS}))?"
    rf"(?:\+(?P<build>{_IDENTIFIERS}))?"
)

_PART = rf"{_NUMBER}|[*xX]"
_COMPARATOR_RE = re.compile(
    r"(?P<op>>=|<=|=|>|<|~|\^)?\s*"
    rf"(?P<major>{_PART})"
    rf"(?:\.(?P<minor>{_PART})"
    rf"(?:\.(?P<patch>{_PART})"
    rf"(?:-(?P<pre>{_IDENTIFIERS}))?)?)?"
    rf"(?:\+{_IDENTIFIERS})?"
)

_WILDCARDS = {"*", "x", "X"}


def _identifier_key(identifier: str) -> tuple[int, int, str]:
    # Numeric identifiers sort numerically and before alphanumeric ones.
    if identifier.isdigit():
        return (0, int(identifier), identifier)
    return (1, 0, identifier)


def _pre_key(pre: tuple[str, ...]) -> tuple:
    # A release (empty pre) outranks every pre-release of the same triple.
    if not pre:
        return (1,)
    return (0, *(_identifier_key(p) for p in pre))


def _split_identifiers(text: Optional[str]) -> tuple[str, ...]:
    return tuple(text.split(".")) if text else ()


def _leading_zero(pre: tuple[str, ...]) -> Optional[str]:
    for identifier in pre:
        if identifier.isdigit() and len(identifier) > 1 and identifier.startswith("0"):
            return identifier
    return None


@total_ordering
@dataclass(frozen=True)
class Version:
    """A parsed semantic version.

    Attributes:
        major: Major component
        minor: Minor component
        patch: Patch component
        pre: Dot-separated pre-release identifiers (empty for releases)
        build: Dot-separated build metadata identifiers
    """

    major: int
    minor: int
    patch: int
    pre: tuple[str, ...] = ()
    build: tuple[str, ...] = ()

    @classmethod
    def parse(cls, text: str) -> "Version":
        """Parse a version string.

        Raises:
            InvalidVersion: If the text is not a valid semantic version
        """
        if not isinstance(text, str):
            raise InvalidVersion(repr(text), "expected a string")
        match = _VERSION_RE.fullmatch(text)
        if match is None:
            raise InvalidVersion(text)
        pre = _split_identifiers(match["pre"])
        bad = _leading_zero(pre)
        if bad is not None:
            raise InvalidVersion(text, f"leading zero in pre-release identifier {bad!r}")
        return cls(
            major=int(match["major"]),
            minor=int(match["minor"]),
            patch=int(match["patch"]),
            pre=pre,
            build=_split_identifiers(match["build"]),
        )

    @property
    def is_prerelease(self) -> bool:
        return bool(self.pre)

    def sort_key(self) -> tuple:
        """Total-order key: triple, then pre-release, then build metadata."""
        return (
            self.major,
            self.minor,
            self.patch,
            _pre_key(self.pre),
            tuple(_identifier_key(b) for b in self.build),
        )

    def __lt__(self, other: object) -> bool:
        if not isinstance(other, Version):
            return NotImplemented
        return self.sort_key() < other.sort_key()

    def __str__(self) -> str:
        text = f"{self.major}.{self.minor}.{self.patch}"
        if self.pre:
            text += "-" + ".".join(self.pre)
        if self.build:
            text += "+" + ".".join(self.build)
        return text


class Op(str, Enum):
    """Comparator operators."""

    EXACT = "="
    GREATER = ">"
    GREATER_EQ = ">="
    LESS = "<"
    LESS_EQ = "<="
    TILDE = "~"
    CARET = "^"
    WILDCARD = "*"


@dataclass(frozen=True)
class Comparator:
    """One operator applied to a possibly partial version."""

    op: Op
    major: int
    minor: Optional[int] = None
    patch: Optional[int] = None
    pre: tuple[str, ...] = ()

    def matches(self, version: Version) -> bool:
        if self.op in (Op.EXACT, Op.WILDCARD):
            return self._matches_exact(version)
        if self.op == Op.GREATER:
            return self._matches_greater(version)
        if self.op == Op.GREATER_EQ:
            return self._matches_exact(version) or self._matches_greater(version)
        if self.op == Op.LESS:
            return self._matches_less(version)
        if self.op == Op.LESS_EQ:
            return self._matches_exact(version) or self._matches_less(version)
        if self.op == Op.TILDE:
            return self._matches_tilde(version)
        return self._matches_caret(version)

    def allows_prerelease_of(self, version: Version) -> bool:
        """Whether this comparator opts in to pre-releases of ``version``'s triple."""
        return (
            bool(self.pre)
            and self.major == version.major
            and self.minor == version.minor
            and self.patch == version.patch
        )

    def _matches_exact(self, v: Version) -> bool:
        if v.major != self.major:
            return False
        if self.minor is not None and v.minor != self.minor:
            return False
        if self.patch is not None and v.patch != self.patch:
            return False
        return v.pre == self.pre

    def _matches_greater(self, v: Version) -> bool:
        if v.major != self.major:
            return v.major > self.major
        if self.minor is None:
            return False
        if v.minor != self.minor:
            return v.minor > self.minor
        if self.patch is None:
            return False
        if v.patch != self.patch:
            return v.patch > self.patch
        return _pre_key(v.pre) > _pre_key(self.pre)

    def _matches_less(self, v: Version) -> bool:
        if v.major != self.major:
            return v.major < self.major
        if self.minor is None:
            return False
        if v.minor != self.minor:
            return v.minor < self.minor
        if self.patch is None:
            return False
        if v.patch != self.patch:
            return v.patch < self.patch
        return _pre_key(v.pre) < _pre_key(self.pre)

    def _matches_tilde(self, v: Version) -> bool:
        if v.major != self.major:
            return False
        if self.minor is not None and v.minor != self.minor:
            return False
        if self.patch is not None and v.patch != self.patch:
            return v.patch > self.patch
        return _pre_key(v.pre) >= _pre_key(self.pre)

    def _matches_caret(self, v: Version) -> bool:
        if v.major != self.major:
            return False
        if self.minor is None:
            return True
        if self.patch is None:
            if self.major > 0:
                return v.minor >= self.minor
            return v.minor == self.minor
        if self.major > 0:
            if v.minor != self.minor:
                return v.minor > self.minor
            if v.patch != self.patch:
                return v.patch > self.patch
        elif self.minor > 0:
            if v.minor != self.minor:
                return False
            if v.patch != self.patch:
                return v.patch > self.patch
        elif v.minor != self.minor or v.patch != self.patch:
            return False
        return _pre_key(v.pre) >= _pre_key(self.pre)

    def __str__(self) -> str:
        parts = [str(self.major)]
        if self.minor is not None:
            parts.append(str(self.minor))
        elif self.op == Op.WILDCARD:
            parts.append("*")
        if self.patch is not None:
            parts.append(str(self.patch))
        elif self.op == Op.WILDCARD and self.minor is not None:
            parts.append("*")
        text = ".".join(parts)
        if self.pre:
            text += "-" + ".".join(self.pre)
        if self.op == Op.WILDCARD:
            return text
        return f"{self.op.value}{text}"


def _parse_comparator(text: str, whole: str) -> Comparator:
    match = _COMPARATOR_RE.fullmatch(text)
    if match is None:
        raise InvalidVersionRange(whole, f"unexpected comparator {text!r}")

    op = Op(match["op"]) if match["op"] else None
    raw = [match["major"], match["minor"], match["patch"]]
    pre = _split_identifiers(match["pre"])
    bad = _leading_zero(pre)
    if bad is not None:
        raise InvalidVersionRange(whole, f"leading zero in pre-release identifier {bad!r}")

    if raw[0] in _WILDCARDS:
        raise InvalidVersionRange(whole, "wildcard (*) must be the only comparator")

    numbers: list[Optional[int]] = []
    seen_wildcard = False
    for part in raw:
        if part is None:
            numbers.append(None)
        elif part in _WILDCARDS:
            seen_wildcard = True
            numbers.append(None)
        elif seen_wildcard:
            raise InvalidVersionRange(whole, f"unexpected number after wildcard in {text!r}")
        else:
            numbers.append(int(part))

    if seen_wildcard and pre:
        raise InvalidVersionRange(whole, f"pre-release not allowed with wildcard in {text!r}")

    if seen_wildcard and op in (None, Op.EXACT):
        op = Op.WILDCARD
    elif op is None:
        op = Op.CARET

    major, minor, patch = numbers
    return Comparator(op=op, major=major, minor=minor, patch=patch, pre=pre)


@dataclass(frozen=True)
class VersionReq:
    """A conjunction of comparators. No comparators means "any release"."""

    comparators: tuple[Comparator, ...] = ()

    @classmethod
    def parse(cls, text: str) -> "VersionReq":
        """Parse a requirement expression.

        Raises:
            InvalidVersionRange: If the expression is empty or malformed
        """
        stripped = text.strip()
        if not stripped:
            raise InvalidVersionRange(text, "empty requirement")

        parts = [part.strip() for part in stripped.split(",")]
        if any(not part for part in parts):
            raise InvalidVersionRange(text, "empty comparator")

        if any(part in _WILDCARDS for part in parts):
            if len(parts) > 1:
                raise InvalidVersionRange(text, "wildcard (*) must be the only comparator")
            return cls(())

        return cls(tuple(_parse_comparator(part, text) for part in parts))

    def matches(self, version: Version) -> bool:
        if not all(comparator.matches(version) for comparator in self.comparators):
            return False
        if not version.pre:
            return True
        return any(c.allows_prerelease_of(version) for c in self.comparators)

    def __str__(self) -> str:
        if not self.comparators:
            return "*"
        return ", ".join(str(c) for c in self.comparators)
