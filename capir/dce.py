"""Dead code elimination for HIR programs."""

from __future__ import annotations

from collections.abc import Iterable, Iterator
from dataclasses import replace

from capir.hir import (
    Assignment,
    Binary,
    Block,
    Call,
    Cast,
    CloneOf,
    Conditional,
    Declaration,
    Expression,
    ExpressionStatement,
    Function,
    HirProgram,
    If,
    Peak,
    Print,
    Return,
    Statement,
    Variable,
    While,
)


def eliminate_dead_code(program: HirProgram) -> None:
    """Remove declarations of variables that are never used, in place.

    Unused declarations are dropped at the top level and inside blocks,
    including blocks nested in functions and control flow.
    """
    used = find_used_variables(program)
    program.statements[:] = [
        _prune(stmt, used) for stmt in _live(program.statements, used)
    ]


def find_used_variables(program: HirProgram) -> set[str]:
    """Return the names of all variables the program reads or assigns."""
    return {name for stmt in program.statements for name in _statement_uses(stmt)}


def _live(statements: Iterable[Statement], used: set[str]) -> Iterator[Statement]:
    return (
        stmt
        for stmt in statements
        if not (isinstance(stmt, Declaration) and stmt.name not in used)
    )


def _prune(stmt: Statement, used: set[str]) -> Statement:
    match stmt:
        case Block(statements=statements):
            return Block(tuple(_prune(s, used) for s in _live(statements, used)))
        case Function(body=body):
            return replace(stmt, body=tuple(_prune(s, used) for s in body))
        case If(then_branch=then_branch, else_branch=else_branch):
            return replace(
                stmt,
                then_branch=_prune(then_branch, used),
                else_branch=None if else_branch is None else _prune(else_branch, used),
            )
        case While(body=body):
            return replace(stmt, body=_prune(body, used))
    return stmt


def _statement_uses(stmt: Statement) -> Iterator[str]:
    match stmt:
        case Declaration(initializer=init):
            if init is not None:
                yield from _expression_uses(init)
        case Assignment(target=target, value=value):
            yield target
            yield from _expression_uses(value)
        case ExpressionStatement(expr=expr) | Print(expr=expr):
            yield from _expression_uses(expr)
        case Return(value=value):
            if value is not None:
                yield from _expression_uses(value)
        case Block(statements=statements):
            for sub in statements:
                yield from _statement_uses(sub)
        case Function(parameters=parameters, body=body):
            for param in parameters:
                yield param.name
            for sub in body:
                yield from _statement_uses(sub)
        case If(condition=cond, then_branch=then_branch, else_branch=else_branch):
            yield from _expression_uses(cond)
            yield from _statement_uses(then_branch)
            if else_branch is not None:
                yield from _statement_uses(else_branch)
        case While(condition=cond, body=body):
            yield from _expression_uses(cond)
            yield from _statement_uses(body)


def _expression_uses(expr: Expression) -> Iterator[str]:
    match expr:
        case Variable(name=name):
            yield name
        case Binary(left=left, right=right):
            yield from _expression_uses(left)
            yield from _expression_uses(right)
        case Call(arguments=arguments):
            for arg in arguments:
                yield from _expression_uses(arg)
        case Conditional(condition=cond, then_expr=then_expr, else_expr=else_expr):
            yield from _expression_uses(cond)
            yield from _expression_uses(then_expr)
            yield from _expression_uses(else_expr)
        case Cast(expr=inner) | Peak(expr=inner) | CloneOf(expr=inner):
            yield from _expression_uses(inner)