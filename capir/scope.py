"""Lexical scopes, symbols and the errors raised while managing them."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from capir.types import Permission, Type


@dataclass(frozen=True)
class SourceLocation:
    """A position in a named source file."""

    line: int
    column: int
    file: str

    @classmethod
    def with_position(cls, line: int, column: int, file: str) -> SourceLocation:
        """Build a location from its parts."""
        return cls(line, column, file)


@dataclass(frozen=True)
class Symbol:
    """A named variable or function visible in some scope."""

    name: str
    typ: Type
    permissions: tuple[Permission, ...] = ()
    is_function: bool = False
    location: Optional[SourceLocation] = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "permissions", tuple(self.permissions))


class ScopeError(Exception):
    """A problem found while declaring or looking up a name."""

    def __init__(self, name: str, message: str) -> None:
        super().__init__(message)
        self.name = name

    def _key(self) -> tuple:
        return (type(self), self.name)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, ScopeError):
            return NotImplemented
        return self._key() == other._key()

    def __hash__(self) -> int:
        return hash(self._key())

    def __repr__(self) -> str:
        return f"{type(self).__name__}{self._key()[1:]!r}"


class NotFound(ScopeError):
    """A name was used but is not declared in any visible scope."""

    def __init__(self, name: str, location: Optional[SourceLocation] = None) -> None:
        super().__init__(name, f"Cannot find '{name}' in this scope")
        self.location = location

    def _key(self) -> tuple:
        return (type(self), self.name, self.location)


class AlreadyDefined(ScopeError):
    """A name was declared twice in the same scope."""

    def __init__(self, name: str, previous: Optional[SourceLocation] = None) -> None:
        super().__init__(name, f"'{name}' is already defined")
        self.previous = previous

    def _key(self) -> tuple:
        return (type(self), self.name, self.previous)


class Shadowing(ScopeError):
    """A declaration hides one from an enclosing scope."""

    def __init__(self, name: str, previous: Optional[SourceLocation] = None) -> None:
        super().__init__(name, f"'{name}' shadows a previous definition")
        self.previous = previous

    def _key(self) -> tuple:
        return (type(self), self.name, self.previous)


class SymbolTable:
    """A stack of scopes, the outermost being the global scope."""

    def __init__(self) -> None:
        self._scopes: list[dict[str, Symbol]] = [{}]

    @property
    def depth(self) -> int:
        """Number of open scopes, counting the global one."""
        return len(self._scopes)

    def enter_scope(self) -> None:
        """Open a new innermost scope."""
        self._scopes.append({})

    def exit_scope(self) -> None:
        """Close the innermost scope; the global scope is never closed."""
        if len(self._scopes) > 1:
            self._scopes.pop()

    def add_symbol(self, symbol: Symbol) -> None:
        """Declare ``symbol`` in the innermost scope.

        Raises AlreadyDefined, without declaring it, if the name exists in the
        innermost scope. If the name exists in an enclosing scope the symbol is
        declared and Shadowing is raised afterwards as a warning.
        """
        current = self._scopes[-1]
        existing = current.get(symbol.name)
        if existing is not None:
            raise AlreadyDefined(symbol.name, existing.location)
        current[symbol.name] = symbol
        outer = self._lookup_in(self._scopes[:-1], symbol.name)
        if outer is not None:
            raise Shadowing(symbol.name, outer.location)

    def lookup(self, name: str) -> Optional[Symbol]:
        """Return the innermost visible symbol called ``name``, or None."""
        return self._lookup_in(self._scopes, name)

    @staticmethod
    def _lookup_in(scopes: list[dict[str, Symbol]], name: str) -> Optional[Symbol]:
        for scope in reversed(scopes):
            if name in scope:
                return scope[name]
        return None