"""Base types and permission annotations of the source language."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum


class TypeSpecError(ValueError):
    """Raised for an unknown type name or an invalid permission set."""


class Type(Enum):
    """Primitive types of the language, keyed by their source spelling."""

    INT = "int"
    INT8 = "int8"
    INT16 = "int16"
    INT32 = "int32"
    INT64 = "int64"
    UINT = "uint"
    UINT8 = "uint8"
    UINT16 = "uint16"
    UINT32 = "uint32"
    UINT64 = "uint64"
    FLOAT = "float"
    FLOAT32 = "float32"
    FLOAT64 = "float64"
    BOOL = "bool"
    STRING = "string"
    UNIT = "unit"


class Permission(Enum):
    """Capabilities that may be attached to a type."""

    READ = "read"
    WRITE = "write"
    READS = "reads"
    WRITES = "writes"


def parse_type(s: str) -> Type:
    """Return the type spelled ``s``, or raise TypeSpecError."""
    try:
        return Type(s)
    except ValueError:
        raise TypeSpecError(f"Unknown type: {s}") from None


@dataclass
class PermissionedType:
    """A base type together with the permissions granted on it."""

    base_type: Type
    permissions: list[Permission] = field(default_factory=list)

    def check_validity(self) -> None:
        """Raise TypeSpecError if the permissions cannot be combined."""
        if Permission.READ in self.permissions and Permission.READS in self.permissions:
            raise TypeSpecError("Cannot combine read and reads")

    def check_write_permission(self) -> None:
        """Raise TypeSpecError unless write permission is present."""
        if Permission.WRITE not in self.permissions:
            raise TypeSpecError("Write permission required")

    def check_compatibility(self, other: PermissionedType) -> bool:
        """Tell whether a value of this type may flow into ``other``."""
        mine = tuple(self.permissions)
        theirs = tuple(other.permissions)
        if mine == (Permission.READS, Permission.WRITE):
            return theirs in ((Permission.READ,), (Permission.READS,))
        return False