import pytest

from flexterm.resources import (
    ResourcePref,
    ResourceType,
    load_resource,
    load_resources,
    parse_resource_database,
)

TEXT = """\
! a comment
#include "other"
st.font: Mono-12
*.background: #000000
St.borderpx: 4
*alpha: 0.8
"""


@pytest.fixture
def db():
    return parse_resource_database(TEXT)


def test_parse_skips_comments(db):
    assert set(db) == {"st.font", "*.background", "St.borderpx", "*alpha"}


def test_string_by_instance(db):
    assert load_resource(db, "font", ResourceType.STRING) == "Mono-12"


def test_loose_binding(db):
    assert load_resource(db, "background", ResourceType.STRING) == "#000000"


def test_integer_by_class(db):
    assert load_resource(db, "borderpx", ResourceType.INTEGER) == 4


def test_float(db):
    assert load_resource(db, "alpha", ResourceType.FLOAT) == pytest.approx(0.8)


def test_missing_is_none(db):
    assert load_resource(db, "cursor", ResourceType.STRING) is None


def test_other_instance_name(db):
    assert load_resource(db, "font", ResourceType.STRING, instance_name="myterm") is None
    assert load_resource(db, "alpha", ResourceType.FLOAT, instance_name="myterm") == pytest.approx(0.8)


def test_specific_entry_wins():
    entries = parse_resource_database("*font: B\nst.font: A\n")
    assert load_resource(entries, "font", ResourceType.STRING) == "A"


def test_integer_prefix_and_garbage():
    entries = parse_resource_database("st.a: 12px\nst.b: abc\n")
    assert load_resource(entries, "a", ResourceType.INTEGER) == 12
    assert load_resource(entries, "b", ResourceType.INTEGER) == 0


def test_continuation_line():
    entries = parse_resource_database("st.font: Mono\\\n-12\n")
    assert load_resource(entries, "font", ResourceType.STRING) == "Mono-12"


def test_load_resources(db):
    prefs = [
        ResourcePref("font", ResourceType.STRING),
        ResourcePref("borderpx", ResourceType.INTEGER),
        ResourcePref("cursor", ResourceType.STRING),
    ]
    assert load_resources(db, prefs) == {"font": "Mono-12", "borderpx": 4}