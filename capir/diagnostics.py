"""Diagnostics: user-facing errors, warnings and notes with source context."""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Optional

from capir.scope import AlreadyDefined, NotFound, ScopeError, Shadowing, SourceLocation


class DiagnosticLevel(Enum):
    """Severity of a diagnostic; the value is its printed prefix."""

    ERROR = "error"
    WARNING = "warning"
    HINT = "hint"
    NOTE = "note"


@dataclass(frozen=True)
class Diagnostic:
    """A message with optional location, explanation, suggestion and notes."""

    level: DiagnosticLevel
    message: str
    details: Optional[str] = None
    location: Optional[SourceLocation] = None
    suggestion: Optional[str] = None
    notes: tuple[Diagnostic, ...] = ()
    context: Optional[str] = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "notes", tuple(self.notes))

    @classmethod
    def error(cls, message: str) -> Diagnostic:
        """Create an error diagnostic."""
        return cls(DiagnosticLevel.ERROR, message)

    @classmethod
    def warning(cls, message: str) -> Diagnostic:
        """Create a warning diagnostic."""
        return cls(DiagnosticLevel.WARNING, message)

    @classmethod
    def note(cls, message: str) -> Diagnostic:
        """Create a note diagnostic."""
        return cls(DiagnosticLevel.NOTE, message)

    def with_location(self, location: SourceLocation) -> Diagnostic:
        """Return a copy pointing at ``location``."""
        return replace(self, location=location)

    def with_details(self, details: str) -> Diagnostic:
        """Return a copy carrying a detailed explanation."""
        return replace(self, details=details)

    def with_suggestion(self, suggestion: str) -> Diagnostic:
        """Return a copy carrying a suggested fix."""
        return replace(self, suggestion=suggestion)

    def with_note(self, note: Diagnostic) -> Diagnostic:
        """Return a copy with ``note`` appended to its related notes."""
        return replace(self, notes=(*self.notes, note))

    def with_context(self, context: str) -> Diagnostic:
        """Return a copy carrying a rendered source excerpt."""
        return replace(self, context=context)

    def __str__(self) -> str:
        parts = [f"{self.level.value}: {self.message}\n"]
        if self.location is not None:
            loc = self.location
            parts.append(f" --> {loc.file}:{loc.line}:{loc.column}\n")
            if self.context is not None:
                parts.append(self.context)
        if self.details is not None:
            parts.append(f"{self.details}\n")
        if self.suggestion is not None:
            parts.append(f"suggestion: {self.suggestion}\n")
        parts.extend(str(note) for note in self.notes)
        return "".join(parts)


def _source_lines(source: str) -> list[str]:
    lines = source.split("\n")
    if lines and lines[-1] == "":
        lines.pop()
    return [line[:-1] if line.endswith("\r") else line for line in lines]


def _is_token_char(c: str) -> bool:
    return c.isalnum() or c == "_"


def _token_length(text: str, pos: int) -> int:
    if pos >= len(text):
        return 1
    end = pos
    while end < len(text) and _is_token_char(text[end]):
        end += 1
    return max(end - pos, 1)


class DiagnosticReporter:
    """Collects diagnostics and renders them, optionally with source excerpts."""

    def __init__(self, source_code: Optional[str] = None) -> None:
        self.diagnostics: list[Diagnostic] = []
        self.source_code = source_code

    @classmethod
    def with_source(cls, source: str) -> DiagnosticReporter:
        """Create a reporter that quotes ``source`` in its messages."""
        return cls(source)

    @classmethod
    def from_scope_errors(
        cls, scope_errors: Iterable[ScopeError], source: Optional[str] = None
    ) -> DiagnosticReporter:
        """Create a reporter holding diagnostics for ``scope_errors``."""
        reporter = cls(source)
        reporter.add_scope_errors(scope_errors)
        return reporter

    @property
    def error_count(self) -> int:
        """Number of error diagnostics collected."""
        return sum(d.level is DiagnosticLevel.ERROR for d in self.diagnostics)

    @property
    def warning_count(self) -> int:
        """Number of warning diagnostics collected."""
        return sum(d.level is DiagnosticLevel.WARNING for d in self.diagnostics)

    def add(self, diagnostic: Diagnostic) -> None:
        """Record a diagnostic."""
        self.diagnostics.append(diagnostic)

    def report(self) -> str:
        """Render every diagnostic followed by a summary line."""
        body = "".join(f"{d}\n\n" for d in self.diagnostics)
        return (
            f"{body}{self.error_count} error(s), "
            f"{self.warning_count} warning(s) emitted\n"
        )

    def add_scope_errors(self, errors: Iterable[ScopeError]) -> None:
        """Turn scope errors into diagnostics."""
        for error in errors:
            match error:
                case NotFound(name=name, location=location):
                    loc = location or SourceLocation(1, 1, "input")
                    diag = Diagnostic.error(
                        f"Cannot find '{name}' in this scope"
                    ).with_suggestion(f"Make sure '{name}' is declared before use")
                case AlreadyDefined(name=name, previous=previous):
                    loc = previous or SourceLocation(1, 1, "unknown")
                    diag = Diagnostic.error(
                        f"Variable '{name}' is already defined"
                    ).with_suggestion(
                        f"Consider using a different name, such as '{name}_2'"
                    )
                case Shadowing(name=name, previous=previous):
                    loc = previous or SourceLocation(1, 1, "unknown")
                    diag = Diagnostic.warning(
                        f"Variable '{name}' shadows a previous definition"
                    ).with_suggestion("Consider renaming to avoid confusion")
                case _:
                    raise TypeError(f"not a scope error: {error!r}")
            diag = diag.with_location(loc)
            context = self._extract_code_context(loc.line, loc.column)
            if context is not None:
                diag = diag.with_context(context)
            self.add(diag)

    def add_scope_errors_with_source(
        self, errors: Iterable[ScopeError], source: str
    ) -> None:
        """Set the quoted source, then turn scope errors into diagnostics."""
        self.source_code = source
        self.add_scope_errors(errors)

    def _extract_code_context(self, line: int, column: int) -> Optional[str]:
        if self.source_code is None:
            return None
        lines = _source_lines(self.source_code)
        actual_line = line
        if actual_line >= len(lines):
            for i in reversed(range(len(lines))):
                if lines[i].strip():
                    actual_line = i + 1
                    break
        index = max(actual_line - 1, 0)
        if index >= len(lines):
            return None
        raw = lines[index]
        content = raw.lstrip()
        adjusted_col = max(column - (len(raw) - len(content)), 0)
        offset = max(adjusted_col - 1, 0)
        token_len = _token_length(content, offset)
        return f"{actual_line} | {content}\n    {' ' * offset}{'~' * token_len}\n"

    def has_errors(self) -> bool:
        """Tell whether any error was recorded."""
        return self.error_count > 0