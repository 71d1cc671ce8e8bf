import inspect
import threading
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path

import pytest

from ormkit.utils import (
    COMMON_INITIALISMS,
    SafeMap,
    SqlExpr,
    add_extra_space_if_exist,
    equal_as_string,
    expr,
    file_with_line_num,
    get_value_from_fields,
    is_blank,
    now,
    replace_initialisms,
    str_in_slice,
    to_query_condition,
    to_query_marks,
    to_query_values,
    to_searchable_map,
    to_string,
)


@dataclass
class _Point:
    x: int = 0
    label: str = ""


class _Wrapped:
    def __init__(self, inner):
        self.inner = inner

    def value(self):
        return self.inner


class _Failing:
    def value(self):
        raise ValueError("cannot convert")


@dataclass
class _Record:
    id: int = 0
    name: str = ""
    owner: object = None
    role: object = None


def _where():
    return file_with_line_num()


def test_safe_map_round_trip_and_missing_key():
    store = SafeMap()
    store.set("users", "user_table")
    assert store.get("users") == "user_table"
    assert store.get("absent") == ""
    store.set("users", "other")
    assert store.get("users") == "other"


def test_safe_map_concurrent_writes():
    store = SafeMap()

    def write(index):
        store.set(f"k{index}", str(index))

    threads = [threading.Thread(target=write, args=(i,)) for i in range(20)]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()
    assert all(store.get(f"k{i}") == str(i) for i in range(20))


def test_expr_keeps_expression_and_args():
    result = expr("price * ? + ?", 2, 100)
    assert result == SqlExpr("price * ? + ?", (2, 100))
    assert expr("name").args == ()


def test_now_lies_between_bounds():
    before = datetime.now()
    value = now()
    after = datetime.now()
    assert before <= value <= after


def test_replace_initialisms():
    assert replace_initialisms("UserID") == "UserId"
    assert replace_initialisms("plain") == "plain"
    for word in COMMON_INITIALISMS:
        assert replace_initialisms(word) != word


def test_to_query_marks():
    assert to_query_marks([[1], [1, 2]]) == "?,(?,?)"
    rows = [[1, 2, 3], [4, 5, 6]]
    result = to_query_marks(rows)
    assert result.count("?") == 6
    assert to_query_marks([]) == ""


def test_to_query_marks_single_values_have_no_parens():
    result = to_query_marks([[1], [2], [3]])
    assert "(" not in result
    assert result.split(",") == ["?", "?", "?"]


def test_to_query_condition():
    def quote(name):
        return f'"{name}"'

    assert to_query_condition(quote, ["id"]) == quote("id")
    combined = to_query_condition(quote, ["id", "locale"])
    assert combined == "(" + quote("id") + "," + quote("locale") + ")"


def test_to_query_values_flattens():
    assert to_query_values([[1, 2], [3], []]) == [1, 2, 3]
    assert to_query_values([]) == []


@pytest.mark.parametrize(
    "value, blank",
    [
        (None, True),
        ("", True),
        ("x", False),
        (False, True),
        (True, False),
        (0, True),
        (5, False),
        (0.0, True),
        (1.5, False),
        ([], True),
        ([0], False),
        ({}, True),
        (_Point(), True),
        (_Point(x=1), False),
        (object(), False),
    ],
)
def test_is_blank(value, blank):
    assert is_blank(value) is blank


def test_to_searchable_map():
    assert to_searchable_map("name", "user3") == {"name": "user3"}
    condition = {"name": "user3"}
    assert to_searchable_map(condition) is condition
    assert to_searchable_map(42) == 42
    assert to_searchable_map() is None
    assert to_searchable_map(1, 2) is None


def test_to_string_basic_forms():
    assert to_string(None) == ""
    assert to_string(b"abc") == "abc"
    assert to_string("abc") == "abc"
    assert to_string(12) == "12"
    assert to_string(True) == "true"


def test_to_string_float_uses_short_form():
    assert to_string(1000000.0) == "1e+06"
    assert to_string(2.0) == to_string(2)


def test_to_string_joins_lists():
    assert to_string([1, "a"]) == to_string(1) + "_" + to_string("a")


def test_equal_as_string():
    assert equal_as_string(1, "1")
    assert equal_as_string(b"zh", "zh")
    assert equal_as_string([1, "en"], [1, b"en"])
    assert not equal_as_string(1, 2)


def test_str_in_slice():
    assert str_in_slice("b", ["a", "b"])
    assert not str_in_slice("c", ["a", "b"])
    assert not str_in_slice("a", [])


def test_get_value_from_fields_collects_present_fields():
    record = _Record(id=7, name="jinzhu")
    assert get_value_from_fields(record, ["id", "name", "missing"]) == [7, "jinzhu"]


def test_get_value_from_fields_skips_none_and_handles_none_object():
    record = _Record(id=3)
    assert get_value_from_fields(record, ["owner", "id"]) == [3]
    assert get_value_from_fields(None, ["id"]) == []


def test_get_value_from_fields_uses_value_method():
    record = _Record(id=1, role=_Wrapped("admin"), owner=_Failing())
    assert get_value_from_fields(record, ["role", "owner"]) == ["admin", None]


def test_get_value_from_fields_with_mapping():
    assert get_value_from_fields({"id": 9, "name": None}, ["id", "name"]) == [9]


def test_add_extra_space_if_exist():
    assert add_extra_space_if_exist("LIMIT 1") == " LIMIT 1"
    assert add_extra_space_if_exist("") == ""


def test_file_with_line_num_reports_caller():
    location = _where()
    line = inspect.currentframe().f_lineno - 1
    path, _, lineno = location.rpartition(":")
    assert Path(path).resolve() == Path(__file__).resolve()
    assert int(lineno) == line