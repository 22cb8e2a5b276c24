import pytest

from capir.types import Permission, PermissionedType, Type, TypeSpecError, parse_type


@pytest.mark.parametrize("typ", list(Type))
def test_parse_type_round_trip(typ):
    assert parse_type(typ.value) is typ


def test_parse_type_known_spellings():
    assert parse_type("int") is Type.INT
    assert parse_type("uint64") is Type.UINT64
    assert parse_type("unit") is Type.UNIT


def test_parse_type_unknown_raises_with_message():
    with pytest.raises(TypeSpecError, match="Unknown type: i64"):
        parse_type("i64")


def test_parse_type_is_case_sensitive():
    with pytest.raises(TypeSpecError):
        parse_type("Int")


def test_type_spec_error_is_value_error():
    with pytest.raises(ValueError):
        parse_type("")


def test_check_validity_rejects_read_with_reads():
    pt = PermissionedType(Type.INT, [Permission.READ, Permission.READS])
    with pytest.raises(TypeSpecError, match="Cannot combine read and reads"):
        pt.check_validity()


def test_check_validity_accepts_read_write():
    pt = PermissionedType(Type.INT, [Permission.READ, Permission.WRITE])
    assert pt.check_validity() is None


def test_check_write_permission_missing():
    pt = PermissionedType(Type.BOOL, [Permission.READ])
    with pytest.raises(TypeSpecError, match="Write permission required"):
        pt.check_write_permission()


def test_check_write_permission_present():
    pt = PermissionedType(Type.BOOL, [Permission.WRITE])
    assert pt.check_write_permission() is None


@pytest.mark.parametrize(
    "source, target, expected",
    [
        ([Permission.READS, Permission.WRITE], [Permission.READ], True),
        ([Permission.READS, Permission.WRITE], [Permission.READS], True),
        ([Permission.READS, Permission.WRITE], [Permission.WRITE], False),
        ([Permission.READ, Permission.WRITE], [Permission.READ], False),
        ([Permission.WRITE, Permission.READS], [Permission.READ], False),
        ([], [], False),
    ],
)
def test_check_compatibility(source, target, expected):
    a = PermissionedType(Type.INT, source)
    b = PermissionedType(Type.INT, target)
    assert a.check_compatibility(b) is expected


def test_default_permissions_are_independent():
    a = PermissionedType(Type.INT)
    b = PermissionedType(Type.INT)
    a.permissions.append(Permission.READ)
    assert b.permissions == []