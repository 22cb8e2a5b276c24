import pytest

from capir.scope import (
    AlreadyDefined,
    NotFound,
    ScopeError,
    Shadowing,
    SourceLocation,
    Symbol,
    SymbolTable,
)
from capir.types import Permission, Type


def sym(name, typ=Type.INT, location=None, is_function=False):
    return Symbol(name, typ, [Permission.READ], is_function, location)


def test_with_position_builds_location():
    loc = SourceLocation.with_position(2, 15, "input")
    assert (loc.line, loc.column, loc.file) == (2, 15, "input")
    assert loc == SourceLocation(2, 15, "input")


def test_symbol_permissions_become_tuple():
    assert sym("x").permissions == (Permission.READ,)


def test_add_and_lookup():
    table = SymbolTable()
    table.add_symbol(sym("x"))
    assert table.lookup("x") == sym("x")
    assert table.lookup("missing") is None


def test_duplicate_in_same_scope_raises_already_defined():
    table = SymbolTable()
    first = SourceLocation(1, 1, "input")
    table.add_symbol(sym("x", location=first))
    with pytest.raises(AlreadyDefined) as info:
        table.add_symbol(sym("x", Type.BOOL))
    assert info.value == AlreadyDefined("x", first)
    assert table.lookup("x").typ is Type.INT


def test_shadowing_declares_and_warns():
    table = SymbolTable()
    outer_loc = SourceLocation(3, 4, "input")
    table.add_symbol(sym("x", location=outer_loc))
    table.enter_scope()
    with pytest.raises(Shadowing) as info:
        table.add_symbol(sym("x", Type.STRING))
    assert info.value.previous == outer_loc
    assert table.lookup("x").typ is Type.STRING
    table.exit_scope()
    assert table.lookup("x").typ is Type.INT


def test_inner_scope_names_vanish_on_exit():
    table = SymbolTable()
    table.enter_scope()
    table.add_symbol(sym("y"))
    assert table.depth == 2
    table.exit_scope()
    assert table.lookup("y") is None
    assert table.depth == 1


def test_global_scope_survives_extra_exit():
    table = SymbolTable()
    table.add_symbol(sym("g"))
    table.exit_scope()
    assert table.depth == 1
    assert table.lookup("g") == sym("g")


def test_scope_errors_are_exceptions_and_compare_by_value():
    err = NotFound("z", None)
    assert isinstance(err, ScopeError)
    assert err == NotFound("z")
    assert err != NotFound("z", SourceLocation(1, 1, "input"))
    assert err != AlreadyDefined("z")
    assert str(err) == "Cannot find 'z' in this scope"