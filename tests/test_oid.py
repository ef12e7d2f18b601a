import pytest
from pyasn1.type import univ

from mibkit.oid import OidPath


def test_parse_with_and_without_leading_dot() -> None:
    assert OidPath.parse(".1.3.6.1") == (1, 3, 6, 1)
    assert OidPath.parse("1.3.6.1") == (1, 3, 6, 1)
    assert OidPath.parse("") == ()


def test_parse_rejects_non_numeric_components() -> None:
    with pytest.raises(ValueError):
        OidPath.parse("1.3.x.1")
    with pytest.raises(ValueError):
        OidPath.parse("1..3")


def test_negative_components_rejected() -> None:
    with pytest.raises(ValueError):
        OidPath((1, -3))


def test_ordering_is_component_wise() -> None:
    paths = [OidPath.parse(p) for p in ["1.3.6.1.10", "1.3.6.1.9", "1.3.6.1", "1.3.6.1.9.1"]]
    assert [p.dotted for p in sorted(paths)] == ["1.3.6.1", "1.3.6.1.9", "1.3.6.1.9.1", "1.3.6.1.10"]


def test_child_parent_and_prefix() -> None:
    base = OidPath.parse("1.3.6.1.4.1")
    child = base.child(55108, 1)
    assert child.dotted == "1.3.6.1.4.1.55108.1"
    assert isinstance(child, OidPath)
    assert child.parent == base.child(55108)
    assert base.is_prefix_of(child)
    assert not child.is_prefix_of(base)


def test_text_forms() -> None:
    path = OidPath.parse("1.3.6")
    assert str(path) == "1.3.6"
    assert path.absolute == ".1.3.6"
    assert repr(path) == "OidPath('1.3.6')"


def test_coerce_accepts_common_forms() -> None:
    expected = (1, 3, 6, 1, 2, 1)
    assert OidPath.coerce("1.3.6.1.2.1") == expected
    assert OidPath.coerce((1, 3, 6, 1, 2, 1)) == expected
    assert OidPath.coerce([1, 3, 6, 1, 2, 1]) == expected
    assert OidPath.coerce(univ.ObjectIdentifier("1.3.6.1.2.1")) == expected


def test_coerce_rejects_other_types() -> None:
    with pytest.raises(TypeError):
        OidPath.coerce(42)  # type: ignore[arg-type]


def test_hash_matches_plain_tuple() -> None:
    table = {OidPath.parse("1.3.6"): "dod"}
    assert table[(1, 3, 6)] == "dod"
