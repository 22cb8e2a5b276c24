import pytest

from capir.desugar import desugar_expression, desugar_program, desugar_statement
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
    ExpressionStatement,
    Function,
    HirProgram,
    If,
    IntegerLiteral,
    Parameter,
    Peak,
    Position,
    Print,
    Return,
    Span,
    StringLiteral,
    Variable,
    While,
)
from capir.types import Permission, Type

SPAN = Span(2, Position(4, 7))

EXPRESSIONS = [
    IntegerLiteral(9, SPAN),
    BooleanLiteral(False),
    StringLiteral("hello"),
    Variable("x", Type.BOOL, SPAN),
    Binary(Variable("a"), BinaryOperator.STAR, IntegerLiteral(2), Type.INT),
    Call("f", [Variable("a"), Binary(IntegerLiteral(1), BinaryOperator.PLUS, IntegerLiteral(2))]),
    Conditional(BooleanLiteral(True), IntegerLiteral(1), Variable("z"), Type.INT),
    Cast(Variable("a"), Type.FLOAT64),
    Peak(Variable("a")),
    CloneOf(Peak(Variable("b"))),
]


@pytest.mark.parametrize("expr", EXPRESSIONS)
def test_desugar_expression_preserves_structure(expr):
    assert desugar_expression(expr) == expr


def test_desugar_expression_rejects_non_expression():
    with pytest.raises(TypeError):
        desugar_expression(Return())


STATEMENTS = [
    Declaration("x", Type.INT, [Permission.READ], IntegerLiteral(1), SPAN),
    Declaration("y", Type.INT),
    Assignment("x", Binary(Variable("x"), BinaryOperator.MINUS, IntegerLiteral(1))),
    ExpressionStatement(Call("f")),
    Print(StringLiteral("out")),
    Return(),
    Return(Variable("x")),
    Block([Print(Variable("x")), Block([Return()])]),
    Function("f", [Parameter("p", Type.INT)], [Return(Variable("p"))], Type.INT),
    If(BooleanLiteral(True), Print(IntegerLiteral(1)), None),
    While(Variable("c", Type.BOOL), Block()),
]


@pytest.mark.parametrize("stmt", STATEMENTS)
def test_desugar_statement_preserves_structure(stmt):
    assert desugar_statement(stmt) == stmt


def test_desugar_program_keeps_statements_and_order():
    program = HirProgram(list(STATEMENTS))
    desugar_program(program)
    assert program.statements == STATEMENTS


def test_desugar_program_keeps_type_info():
    program = HirProgram([Declaration("x", Type.INT, initializer=IntegerLiteral(1))])
    program.type_info.variables["x"] = Type.INT
    desugar_program(program)
    assert program.type_info.variables == {"x": Type.INT}


def test_desugar_program_empty():
    program = HirProgram()
    desugar_program(program)
    assert program.statements == []