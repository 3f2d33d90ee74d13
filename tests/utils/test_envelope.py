"""Tests for response envelope unwrapping."""
from keyenv.utils.envelope import unwrap, unwrap_list, unwrap_object


def test_unwrap_first_matching_field():
    assert unwrap({"data": [1], "secrets": [2]}, "data", "secrets") == [1]
    assert unwrap({"secrets": [2]}, "data", "secrets") == [2]
    assert unwrap({"id": "x"}, "data") == {"id": "x"}
    assert unwrap([1, 2], "data") == [1, 2]
    assert unwrap({"data": None}, "data") is None


def test_unwrap_object():
    assert unwrap_object({"secret": {"id": "s"}}, "secret") == {"id": "s"}
    assert unwrap_object({"id": "s", "key": "K"}, "secret") == {"id": "s", "key": "K"}
    # A scalar under the field name is a record field, not an envelope
    assert unwrap_object({"id": "p", "project": "legacy"}, "project") == {"id": "p", "project": "legacy"}
    assert unwrap_object(None, "secret") == {}


def test_unwrap_list():
    assert unwrap_list({"projects": [{"id": "p"}]}, "projects") == [{"id": "p"}]
    assert unwrap_list([{"id": "p"}], "projects") == [{"id": "p"}]
    assert unwrap_list(None, "projects") == []
    assert unwrap_list({}, "projects") == []
    assert unwrap_list({"projects": None}, "projects") == []
