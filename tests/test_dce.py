from capir.dce import eliminate_dead_code, find_used_variables
from capir.hir import (
    Assignment,
    Binary,
    BinaryOperator,
    Block,
    BooleanLiteral,
    Call,
    Declaration,
    Function,
    HirProgram,
    If,
    IntegerLiteral,
    Parameter,
    Print,
    Return,
    Variable,
    While,
)
from capir.types import Type


def decl(name, init=None):
    return Declaration(name, Type.INT, (), init)


def test_unused_top_level_declaration_removed():
    program = HirProgram([decl("x", IntegerLiteral(1)), decl("y"), Print(Variable("x"))])
    eliminate_dead_code(program)
    assert program.statements == [decl("x", IntegerLiteral(1)), Print(Variable("x"))]


def test_assignment_target_counts_as_used():
    program = HirProgram([decl("a"), Assignment("a", IntegerLiteral(3))])
    assert find_used_variables(program) == {"a"}
    eliminate_dead_code(program)
    assert program.statements[0] == decl("a")


def test_uses_collected_from_nested_expressions():
    expr = Binary(
        Call("f", (Variable("a"),)),
        BinaryOperator.PLUS,
        Variable("b"),
    )
    program = HirProgram([Print(expr), Return(Variable("c"))])
    assert find_used_variables(program) == {"a", "b", "c"}


def test_function_parameters_are_used():
    func = Function("f", (Parameter("p", Type.INT),), (Return(IntegerLiteral(0)),))
    assert find_used_variables(HirProgram([func])) == {"p"}


def test_unused_declaration_in_block_removed():
    block = Block((decl("dead"), decl("live"), Print(Variable("live"))))
    program = HirProgram([block])
    eliminate_dead_code(program)
    assert program.statements == [Block((decl("live"), Print(Variable("live"))))]


def test_function_body_declaration_kept_but_inner_block_pruned():
    func = Function("f", (), (decl("kept"), Block((decl("gone"),))))
    program = HirProgram([func])
    eliminate_dead_code(program)
    assert program.statements == [Function("f", (), (decl("kept"), Block(())))]


def test_control_flow_bodies_pruned():
    loop = While(BooleanLiteral(True), Block((decl("w"),)))
    branch = If(Variable("c"), Block((decl("t"),)), Block((decl("e"), Print(Variable("e")))))
    program = HirProgram([decl("c"), loop, branch])
    eliminate_dead_code(program)
    assert program.statements == [
        decl("c"),
        While(BooleanLiteral(True), Block(())),
        If(Variable("c"), Block(()), Block((decl("e"), Print(Variable("e"))))),
    ]


def test_declaration_used_only_in_initializer_of_dead_one_survives():
    program = HirProgram([decl("a"), decl("b", Variable("a"))])
    eliminate_dead_code(program)
    assert program.statements == [decl("a")]