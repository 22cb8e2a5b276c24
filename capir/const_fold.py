"""Compile-time evaluation of constant HIR expressions."""

from __future__ import annotations

from dataclasses import replace
from typing import Optional

from capir.hir import (
    Assignment,
    Binary,
    BinaryOperator,
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
    If,
    IntegerLiteral,
    Peak,
    Print,
    Return,
    Statement,
    While,
)

_BITS = 64


def _wrap(value: int) -> int:
    """Reduce ``value`` to a signed 64-bit integer with wrap-around."""
    half = 1 << (_BITS - 1)
    return (value + half) % (1 << _BITS) - half


def _truncating_div(lhs: int, rhs: int) -> int:
    quotient = abs(lhs) // abs(rhs)
    return -quotient if (lhs < 0) != (rhs < 0) else quotient


def _fold_integers(lhs: int, operator: BinaryOperator, rhs: int) -> Optional[int]:
    if operator is BinaryOperator.PLUS:
        return _wrap(lhs + rhs)
    if operator is BinaryOperator.MINUS:
        return _wrap(lhs - rhs)
    if operator is BinaryOperator.STAR:
        return _wrap(lhs * rhs)
    if operator is BinaryOperator.SLASH and rhs != 0:
        return _wrap(_truncating_div(lhs, rhs))
    return None


def fold_constants(program: HirProgram) -> None:
    """Fold constant expressions in every statement of ``program`` in place."""
    program.statements[:] = [fold_statement(s) for s in program.statements]


def fold_statement(stmt: Statement) -> Statement:
    """Return ``stmt`` with its constant expressions folded."""
    match stmt:
        case Declaration(initializer=init):
            return replace(stmt, initializer=None if init is None else fold_expression(init))
        case Assignment(value=value):
            return replace(stmt, value=fold_expression(value))
        case ExpressionStatement(expr=expr) | Print(expr=expr):
            return replace(stmt, expr=fold_expression(expr))
        case Return(value=value):
            return Return(None if value is None else fold_expression(value))
        case Function(body=body):
            return replace(stmt, body=tuple(fold_statement(s) for s in body))
        case Block(statements=statements):
            return Block(tuple(fold_statement(s) for s in statements))
        case If(condition=cond, then_branch=then_branch, else_branch=else_branch):
            return If(
                fold_expression(cond),
                fold_statement(then_branch),
                None if else_branch is None else fold_statement(else_branch),
            )
        case While(condition=cond, body=body):
            return While(fold_expression(cond), fold_statement(body))
    raise TypeError(f"not an HIR statement: {stmt!r}")


def fold_expression(expr: Expression) -> Expression:
    """Return ``expr`` with integer arithmetic and constant conditionals evaluated."""
    match expr:
        case Binary(left=left, operator=operator, right=right):
            left = fold_expression(left)
            right = fold_expression(right)
            if isinstance(left, IntegerLiteral) and isinstance(right, IntegerLiteral):
                value = _fold_integers(left.value, operator, right.value)
                if value is not None:
                    return IntegerLiteral(value)
            return replace(expr, left=left, right=right)
        case Conditional(condition=cond, then_expr=then_expr, else_expr=else_expr):
            cond = fold_expression(cond)
            if isinstance(cond, BooleanLiteral):
                return fold_expression(then_expr if cond.value else else_expr)
            return replace(
                expr,
                condition=cond,
                then_expr=fold_expression(then_expr),
                else_expr=fold_expression(else_expr),
            )
        case Call(arguments=arguments):
            return replace(expr, arguments=tuple(fold_expression(a) for a in arguments))
        case Cast(expr=inner) | Peak(expr=inner) | CloneOf(expr=inner):
            return replace(expr, expr=fold_expression(inner))
    return expr