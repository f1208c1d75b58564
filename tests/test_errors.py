"""
Tests for the diagnostic catalog and reporter.
"""

import pytest

from enumscan.internals import errors as er
from enumscan.internals.report import Reporter, Span


def test_codes_are_consistent():
    for code, msg in er.REGISTRY.items():
        assert msg.code == code
        if code.startswith("CW"):
            assert msg.severity == er.Severity.WARNING
        else:
            assert msg.severity == er.Severity.ERROR


def test_catalog_attribute_access():
    assert er.ERR.CE3002 is er.REGISTRY["CE3002"]
    with pytest.raises(AttributeError):
        er.ERR.CE9999


def test_missing_format_key():
    with pytest.raises(KeyError, match="missing text key"):
        er._fmt("CE3002", member="A")


def test_raise_error_carries_code():
    with pytest.raises(er.ConfigurationError) as info:
        er.raise_error(er.ConfigurationError, "CE1001", enum="E", min=1, max=0)
    assert info.value.code == "CE1001"
    assert isinstance(info.value, ValueError)
    assert str(info.value).startswith("CE1001: ")


def test_emit_routes_by_severity():
    r = Reporter("enum E { A, A };", "test.enum")
    er.emit(r, er.ERR.CW3003, None, name="E")
    assert r.has_warnings and not r.has_errors
    assert r.exit_code() == 1
    er.emit(r, er.ERR.CE3002, Span(1, 13, 1, 14), member="A", name="E")
    assert r.codes() == ["CW3003", "CE3002"]
    assert r.exit_code() == 2


def test_plain_format():
    r = Reporter("enum E { A, A };", "test.enum")
    er.emit(r, er.ERR.CE3002, Span(1, 13, 1, 14), member="A", name="E")
    lines = r.format(use_color=False, use_unicode=False).splitlines()
    assert lines[0] == "test.enum:1:13: error [CE3002]: member 'A' already declared in enum 'E'."
    assert lines[1] == "  | enum E { A, A };"
    assert lines[2] == "  ` " + " " * 12 + "^"


def test_clean_reporter():
    r = Reporter()
    assert r.exit_code() == 0
    assert r.format() == ""
