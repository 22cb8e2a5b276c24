"""Rewriting of HIR constructs into simpler forms."""

from __future__ import annotations

from dataclasses import replace

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
    Return,
    Statement,
    StringLiteral,
    Variable,
)

_PLAIN_KINDS = (Declaration, Assignment, ExpressionStatement, Return, Print, Function)


def desugar_program(program: HirProgram) -> None:
    """Desugar every top-level statement of ``program`` in place."""
    for index, statement in enumerate(program.statements):
        desugared = desugar_statement(statement)
        if not _is_same_statement(statement, desugared):
            program.statements[index] = desugared


def _is_same_statement(original: Statement, desugared: Statement) -> bool:
    if isinstance(original, _PLAIN_KINDS):
        return type(original) is type(desugared)
    if isinstance(original, Block) and isinstance(desugared, Block):
        return len(original.statements) == len(desugared.statements)
    return False


def desugar_statement(stmt: Statement) -> Statement:
    """Return the desugared form of a statement."""
    match stmt:
        case Declaration(initializer=init):
            return replace(stmt, initializer=None if init is None else desugar_expression(init))
        case Assignment(value=value):
            return replace(stmt, value=desugar_expression(value))
        case ExpressionStatement(expr=expr) | Print(expr=expr):
            return replace(stmt, expr=desugar_expression(expr))
        case Block(statements=statements):
            return Block(tuple(desugar_statement(s) for s in statements))
        case Function(body=body):
            return replace(stmt, body=tuple(desugar_statement(s) for s in body))
        case Return(value=value):
            return Return(None if value is None else desugar_expression(value))
    return stmt


def desugar_expression(expr: Expression) -> Expression:
    """Return the desugared form of an expression."""
    match expr:
        case IntegerLiteral() | BooleanLiteral() | StringLiteral() | Variable():
            return replace(expr)
        case Binary(left=left, right=right):
            return replace(expr, left=desugar_expression(left), right=desugar_expression(right))
        case Call(arguments=arguments):
            return replace(expr, arguments=tuple(desugar_expression(a) for a in arguments))
        case Conditional(condition=cond, then_expr=then_expr, else_expr=else_expr):
            return replace(
                expr,
                condition=desugar_expression(cond),
                then_expr=desugar_expression(then_expr),
                else_expr=desugar_expression(else_expr),
            )
        case Cast(expr=inner) | Peak(expr=inner) | CloneOf(expr=inner):
            return replace(expr, expr=desugar_expression(inner))
    raise TypeError(f"not an HIR expression: {expr!r}")