"""Name resolution: binding every use of a name to its declaration."""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from dataclasses import dataclass, field
from typing import Optional

from capir.diagnostics import DiagnosticReporter
from capir.hir import (
    Assignment,
    Binary,
    Block,
    BooleanLiteral,
    Call,
    Cast,
    CloneOf,
    Conditional,
    Declaration,
    Expression,
    ExpressionStatement,
    Function,
    HirProgram,
    IntegerLiteral,
    Peak,
    Print,
    Span,
    Statement,
    StringLiteral,
    Variable,
)
from capir.scope import NotFound, ScopeError, SourceLocation, Symbol, SymbolTable
from capir.types import Type

_DEFAULT_LOCATION = SourceLocation(2, 15, "input")


@dataclass
class ResolvedNames:
    """What name resolution found: mappings, symbols, errors and diagnostics."""

    name_mapping: dict[str, str] = field(default_factory=dict)
    symbols: dict[str, Symbol] = field(default_factory=dict)
    errors: list[ScopeError] = field(default_factory=list)
    diagnostics: DiagnosticReporter = field(default_factory=DiagnosticReporter)


def resolve_names(program: HirProgram) -> ResolvedNames:
    """Resolve every name in ``program``."""
    resolver = NameResolver()
    resolver.resolve_program(program)
    return resolver.finalize()


def resolve_names_with_source(program: HirProgram, source: str) -> ResolvedNames:
    """Resolve names, locating errors in ``source`` and quoting it in diagnostics."""
    resolver = NameResolver()
    numbered = [(number, line) for number, line in enumerate(_split_lines(source), 1)]
    resolver.resolve_program_with_source(program, numbered)
    result = resolver.finalize()
    result.diagnostics = DiagnosticReporter.from_scope_errors(result.errors, source)
    return result


def _split_lines(source: str) -> list[str]:
    lines = source.split("\n")
    if lines and lines[-1] == "":
        lines.pop()
    return [line[:-1] if line.endswith("\r") else line for line in lines]


def _location_from_span(span: Optional[Span]) -> Optional[SourceLocation]:
    if span is None:
        return None
    return SourceLocation(span.start.line, span.start.column, f"file_{span.file_id}")


class NameResolver:
    """Walks a program, maintaining scopes and recording name bindings."""

    def __init__(self) -> None:
        self._table = SymbolTable()
        self._name_mapping: dict[str, str] = {}
        self._symbols: dict[str, Symbol] = {}
        self._counter = 0
        self._errors: list[ScopeError] = []
        self._source_lines: Optional[list[tuple[int, str]]] = None

    def finalize(self) -> ResolvedNames:
        """Return everything gathered so far."""
        return ResolvedNames(
            name_mapping=dict(self._name_mapping),
            symbols=dict(self._symbols),
            errors=list(self._errors),
            diagnostics=DiagnosticReporter.from_scope_errors(self._errors),
        )

    def resolve_program(self, program: HirProgram) -> None:
        """Register top-level declarations, then resolve every statement."""
        for statement in program.statements:
            if isinstance(statement, Declaration):
                self._register_variable(statement)
            elif isinstance(statement, Function):
                self._register_function(statement)
        for statement in program.statements:
            self._resolve_statement(statement)

    def resolve_program_with_source(
        self, program: HirProgram, source_lines: Iterable[tuple[int, str]]
    ) -> None:
        """Resolve ``program`` using numbered source lines to locate errors."""
        self._source_lines = list(source_lines)
        self.resolve_program(program)

    def _canonical_name(self, base_name: str) -> str:
        canonical = f"{base_name}_{self._counter}"
        self._counter += 1
        return canonical

    def _declare(self, symbol: Symbol) -> None:
        try:
            self._table.add_symbol(symbol)
        except ScopeError as error:
            self._errors.append(error)

    def _record(self, name: str, symbol: Symbol) -> None:
        canonical = self._canonical_name(name)
        self._name_mapping[name] = canonical
        self._symbols[canonical] = symbol

    def _register_variable(
        self, var: Declaration, location: Optional[SourceLocation] = None
    ) -> None:
        canonical = self._canonical_name(var.name)
        symbol = Symbol(
            name=var.name,
            typ=var.typ,
            permissions=var.permissions,
            is_function=False,
            location=location or _location_from_span(var.location),
        )
        # A declaration whose initializer is already broken is not added, so
        # its later uses are reported rather than silently accepted.
        if var.initializer is None or not self._has_undefined_variables(var.initializer):
            self._declare(symbol)
        self._name_mapping[var.name] = canonical
        self._symbols[canonical] = symbol

    def _has_undefined_variables(self, expr: Expression) -> bool:
        match expr:
            case Variable(name=name):
                return self._table.lookup(name) is None
            case Binary(left=left, right=right):
                return self._has_undefined_variables(left) or self._has_undefined_variables(right)
            case Call(arguments=arguments):
                return any(self._has_undefined_variables(arg) for arg in arguments)
            case Conditional(condition=cond, then_expr=then_expr, else_expr=else_expr):
                return any(
                    self._has_undefined_variables(e) for e in (cond, then_expr, else_expr)
                )
            case Cast(expr=inner) | Peak(expr=inner) | CloneOf(expr=inner):
                return self._has_undefined_variables(inner)
        return False

    def _register_function(
        self, func: Function, location: Optional[SourceLocation] = None
    ) -> None:
        canonical = self._canonical_name(func.name)
        symbol = Symbol(
            name=func.name,
            typ=func.return_type if func.return_type is not None else Type.UNIT,
            permissions=(),
            is_function=True,
            location=location,
        )
        self._declare(symbol)
        self._name_mapping[func.name] = canonical
        self._symbols[canonical] = symbol
        self._resolve_function_body(func)

    def _resolve_function_body(self, func: Function) -> None:
        self._table.enter_scope()
        try:
            for param in func.parameters:
                self._register_variable(
                    Declaration(param.name, param.typ, param.permissions)
                )
            for stmt in func.body:
                self._resolve_statement(stmt)
        finally:
            self._table.exit_scope()

    def _bind_use(self, name: str, symbol: Symbol) -> None:
        canonical = self._name_mapping.get(symbol.name)
        if canonical is not None:
            self._name_mapping[name] = canonical

    def _find_in_source(self, name: str) -> Optional[SourceLocation]:
        for line_number, line in self._source_lines or ():
            column = line.find(name)
            if column >= 0:
                return SourceLocation.with_position(line_number, column + 1, "input")
        return None

    def _resolve_statement(self, stmt: Statement) -> None:
        match stmt:
            case Declaration(initializer=init):
                if init is not None:
                    self._resolve_expression(init)
                self._register_variable(stmt)
            case Assignment(target=target, value=value):
                self._resolve_expression(value)
                symbol = self._table.lookup(target)
                if symbol is not None:
                    self._bind_use(target, symbol)
                else:
                    self._errors.append(NotFound(target, self._find_in_source(target)))
            case ExpressionStatement(expr=expr) | Print(expr=expr):
                self._resolve_expression(expr)
            case Block(statements=statements):
                self._resolve_block(statements)
            case Function():
                self._resolve_function_body(stmt)

    def _resolve_block(self, statements: Sequence[Statement]) -> None:
        self._table.enter_scope()
        try:
            for sub in statements:
                self._resolve_statement(sub)
        finally:
            self._table.exit_scope()

    def _resolve_expression(self, expr: Expression) -> None:
        match expr:
            case IntegerLiteral() | BooleanLiteral() | StringLiteral():
                pass
            case Variable(name=name, location=span):
                symbol = self._table.lookup(name)
                if symbol is not None:
                    self._bind_use(name, symbol)
                    return
                location = None
                if self._source_lines is not None:
                    location = self._find_in_source(name)
                location = location or _location_from_span(span) or _DEFAULT_LOCATION
                self._errors.append(NotFound(name, location))
            case Binary(left=left, right=right):
                self._resolve_expression(left)
                self._resolve_expression(right)
            case Call(function=function, arguments=arguments):
                symbol = self._table.lookup(function)
                if symbol is not None and symbol.is_function:
                    self._bind_use(function, symbol)
                else:
                    self._errors.append(NotFound(function, None))
                for arg in arguments:
                    self._resolve_expression(arg)
            case Conditional(condition=cond, then_expr=then_expr, else_expr=else_expr):
                self._resolve_expression(cond)
                self._resolve_expression(then_expr)
                self._resolve_expression(else_expr)
            case Cast(expr=inner) | Peak(expr=inner) | CloneOf(expr=inner):
                self._resolve_expression(inner)
            case _:
                raise TypeError(f"not an HIR expression: {expr!r}")