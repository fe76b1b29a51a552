"""Pydantic models for crate index records.

These models map directly to the line-delimited JSON records served by the
registry index (one record per published version).
See: https://doc.rust-lang.org/cargo/reference/registry-index.html

Optional attributes that are absent from a line stay *unset*: pydantic
tracks them in ``model_fields_set`` and ``to_wire()`` omits them, so a
record written back out is identical to what the index served. Unknown
registry-specific keys are kept as extras for the same reason.
"""

from enum import Enum
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, field_serializer, field_validator

from crate_index.versions import Version

Features = dict[str, list[str]]


class DependencyKind(str, Enum):
    """Dependency sections known today.

    ``DependencySpec.kind`` stays a plain string so kinds added by newer
    registries pass through instead of failing the shard.
    """

    NORMAL = "normal"
    DEV = "dev"
    BUILD = "build"


class DependencySpec(BaseModel):
    """One dependency declared by a published version.

    Note: ``name`` is the name used in the manifest; when the dependency is
    renamed, ``package`` holds the real crate name.
    """

    name: str
    req: str
    features: list[str] = Field(default_factory=list)
    optional: bool = False
    default_features: bool = True
    target: Optional[str] = None
    kind: Optional[str] = None
    registry: Optional[str] = None
    package: Optional[str] = None

    model_config = ConfigDict(extra="allow", frozen=True)

    @property
    def crate_name(self) -> str:
        """Name of the crate actually depended upon."""
        return self.package or self.name


class VersionRecord(BaseModel):
    """A single published version of a crate.

    Field declaration order is the index schema order and is the order used
    when the record is written back out.
    """

    name: str
    vers: Version
    deps: list[DependencySpec]
    cksum: str
    features: Features
    yanked: bool
    links: Optional[str] = None
    v: int = 1
    features2: Optional[Features] = None
    rust_version: Optional[str] = None

    model_config = ConfigDict(extra="allow", frozen=True, arbitrary_types_allowed=True)

    @field_validator("vers", mode="before")
    @classmethod
    def parse_vers(cls, value: Any) -> Version:
        """Parse the version string; invalid versions fail the record."""
        if isinstance(value, Version):
            return value
        return Version.parse(value)

    @field_serializer("vers")
    def serialize_vers(self, vers: Version) -> str:
        return str(vers)

    def is_set(self, field: str) -> bool:
        """Whether ``field`` was present in the source record."""
        return field in self.model_fields_set

    def all_features(self) -> Features:
        """Merge ``features`` and ``features2`` into one mapping."""
        merged = dict(self.features)
        merged.update(self.features2 or {})
        return merged

    def to_wire(self) -> dict[str, Any]:
        """Convert to the JSON-ready dict the index would serve.

        Unset optional fields are omitted; extras are passed through.
        """
        return self.model_dump(mode="json", exclude_unset=True)
