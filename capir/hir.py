"""High-level intermediate representation: expressions, statements, programs."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional, Union

from capir.types import Permission, Type


def _freeze(obj: object, *names: str) -> None:
    for name in names:
        object.__setattr__(obj, name, tuple(getattr(obj, name)))


@dataclass(frozen=True)
class Position:
    """A line and column in a source file, both counted from 1."""

    line: int
    column: int


@dataclass(frozen=True)
class Span:
    """A region of a source file."""

    file_id: int
    start: Position
    end: Optional[Position] = None


class BinaryOperator(Enum):
    """Operators that may appear in a binary expression."""

    PLUS = "+"
    MINUS = "-"
    STAR = "*"
    SLASH = "/"
    GREATER = ">"
    GREATER_EQUAL = ">="
    LESS = "<"
    LESS_EQUAL = "<="
    EQUAL_EQUAL = "=="
    BANG_EQUAL = "!="


@dataclass(frozen=True)
class IntegerLiteral:
    value: int
    location: Optional[Span] = None


@dataclass(frozen=True)
class BooleanLiteral:
    value: bool


@dataclass(frozen=True)
class StringLiteral:
    value: str


@dataclass(frozen=True)
class Variable:
    name: str
    typ: Type = Type.INT
    location: Optional[Span] = None


@dataclass(frozen=True)
class Binary:
    left: Expression
    operator: BinaryOperator
    right: Expression
    result_type: Type = Type.INT


@dataclass(frozen=True)
class Call:
    function: str
    arguments: tuple[Expression, ...] = ()
    result_type: Type = Type.INT

    def __post_init__(self) -> None:
        _freeze(self, "arguments")


@dataclass(frozen=True)
class Conditional:
    condition: Expression
    then_expr: Expression
    else_expr: Expression
    result_type: Type = Type.INT


@dataclass(frozen=True)
class Cast:
    expr: Expression
    target_type: Type


@dataclass(frozen=True)
class Peak:
    """A read-only look at a value."""

    expr: Expression


@dataclass(frozen=True)
class CloneOf:
    """An explicit copy of a value."""

    expr: Expression


Expression = Union[
    IntegerLiteral,
    BooleanLiteral,
    StringLiteral,
    Variable,
    Binary,
    Call,
    Conditional,
    Cast,
    Peak,
    CloneOf,
]


@dataclass(frozen=True)
class Parameter:
    name: str
    typ: Type
    permissions: tuple[Permission, ...] = ()

    def __post_init__(self) -> None:
        _freeze(self, "permissions")


@dataclass(frozen=True)
class Declaration:
    name: str
    typ: Type
    permissions: tuple[Permission, ...] = ()
    initializer: Optional[Expression] = None
    location: Optional[Span] = None

    def __post_init__(self) -> None:
        _freeze(self, "permissions")


@dataclass(frozen=True)
class Assignment:
    target: str
    value: Expression


@dataclass(frozen=True)
class ExpressionStatement:
    expr: Expression


@dataclass(frozen=True)
class Return:
    value: Optional[Expression] = None


@dataclass(frozen=True)
class Print:
    expr: Expression


@dataclass(frozen=True)
class Function:
    name: str
    parameters: tuple[Parameter, ...] = ()
    body: tuple[Statement, ...] = ()
    return_type: Optional[Type] = None

    def __post_init__(self) -> None:
        _freeze(self, "parameters", "body")


@dataclass(frozen=True)
class Block:
    statements: tuple[Statement, ...] = ()

    def __post_init__(self) -> None:
        _freeze(self, "statements")


@dataclass(frozen=True)
class If:
    condition: Expression
    then_branch: Statement
    else_branch: Optional[Statement] = None


@dataclass(frozen=True)
class While:
    condition: Expression
    body: Statement


Statement = Union[
    Declaration,
    Assignment,
    ExpressionStatement,
    Return,
    Print,
    Function,
    Block,
    If,
    While,
]


@dataclass
class TypeInfo:
    """Types recorded for variables and function return values."""

    variables: dict[str, Type] = field(default_factory=dict)
    functions: dict[str, Optional[Type]] = field(default_factory=dict)


@dataclass
class HirProgram:
    """A whole program: its top-level statements and type information."""

    statements: list[Statement] = field(default_factory=list)
    type_info: TypeInfo = field(default_factory=TypeInfo)

    def add_statement(self, statement: Statement) -> None:
        """Append a top-level statement."""
        self.statements.append(statement)