# capir

`capir` is the middle layer of a compiler for a small language whose types
carry capability-style permissions (`read`, `write`, `reads`, `writes`). It
holds the high-level intermediate representation (HIR), passes that rewrite
it, name resolution, and readable diagnostics.

## Modules

- `capir.types`: the base types (`Type`, looked up from their spelling with
  `parse_type`, which raises `TypeSpecError` for an unknown name) and
  `Permission`. `PermissionedType` pairs a type with permissions;
  `check_validity` and `check_write_permission` raise `TypeSpecError`, and
  `check_compatibility` tells whether a value may flow into another
  permissioned type.
- `capir.hir`: immutable HIR nodes. Expressions: `IntegerLiteral`,
  `BooleanLiteral`, `StringLiteral`, `Variable`, `Binary` (with a
  `BinaryOperator`), `Call`, `Conditional`, `Cast`, `Peak`, `CloneOf`.
  Statements: `Declaration`, `Assignment`, `ExpressionStatement`, `Return`,
  `Print`, `Function` (with `Parameter`s), `Block`, `If`, `While`. Locations
  are `Span`s of `Position`s. A `HirProgram` holds the top-level statements
  and a `TypeInfo`; `add_statement` appends one.
- `capir.desugar`: `desugar_program` rewrites a program in place;
  `desugar_statement` and `desugar_expression` work on single nodes.
- `capir.const_fold`: `fold_constants` evaluates integer `+ - * /` on
  literals (64-bit wrap-around, division truncating toward zero, division by
  zero left alone) and picks the branch of a `Conditional` whose condition is
  a boolean literal. `fold_statement` and `fold_expression` work on single
  nodes.
- `capir.dce`: `eliminate_dead_code` drops declarations of variables that are
  never read or assigned, at the top level and inside blocks;
  `find_used_variables` returns the set of names in use.
- `capir.scope`: `SymbolTable`, a stack of scopes of `Symbol`s.
  `add_symbol` raises `AlreadyDefined` for a name already in the innermost
  scope, and `Shadowing` (after declaring the symbol) for one hiding an outer
  declaration. `lookup` returns the innermost match or `None`. All scope
  errors derive from `ScopeError`; `NotFound` is used for unresolved names.
  Positions are `SourceLocation`s.
- `capir.name_resolver`: `resolve_names` and `resolve_names_with_source`
  return a `ResolvedNames` with the mapping from names to canonical names
  (`x_0`, `x_1`, ...), the symbols, the collected scope errors and a
  `DiagnosticReporter`. With source text, unresolved names are located by
  searching the source lines. `NameResolver` exposes the same steps.
- `capir.diagnostics`: `Diagnostic` (built with `error`, `warning`, `note`
  and the `with_*` methods) and `DiagnosticReporter`, which turns scope
  errors into diagnostics, quotes the offending source line with the token
  underlined, counts errors and warnings, and renders it all with `report`.

## Installation

```
pip install .
```

## Example

```python
from capir.hir import HirProgram, Declaration, Print, Binary, BinaryOperator, IntegerLiteral, Variable
from capir.types import Type
from capir.const_fold import fold_constants
from capir.dce import eliminate_dead_code
from capir.name_resolver import resolve_names_with_source

program = HirProgram()
program.add_statement(Declaration(
    name="x", typ=Type.INT, permissions=[],
    initializer=Binary(IntegerLiteral(2), BinaryOperator.PLUS, IntegerLiteral(3), Type.INT),
))
program.add_statement(Print(Variable("y", Type.INT)))

fold_constants(program)        # x's initializer becomes IntegerLiteral(5)
eliminate_dead_code(program)   # x is never used, so its declaration is removed

resolved = resolve_names_with_source(program, "print y;")
print(resolved.diagnostics.report())
```

The report for this program reads:

```
error: Cannot find 'y' in this scope
 --> input:1:7
1 | print y;
          ~
suggestion: Make sure 'y' is declared before use


1 error(s), 0 warning(s) emitted
```

## What the package does not do

`capir` has no parser: programs are built by constructing `capir.hir` nodes
directly. It has no command-line tool, does no permission checking of
programs beyond the methods of `PermissionedType`, and generates no code.

## Running the tests

```
pip install .[test]
pytest
```