# ormkit

Helpers for building SQL query fragments and inspecting model values:
placeholder groups for single and composite keys, quoted column lists, raw
SQL expressions, blank-value detection, plain text forms of values and a
thread-safe string map. Everything lives in the `ormkit.utils` module.

## Installation

```
pip install ormkit
```

To run the test suite, install the `test` extra and run `pytest`:

```
pip install "ormkit[test]"
pytest
```

## Usage

### Raw SQL expressions

```python
from ormkit.utils import expr

price_update = expr("price * ? + ?", 2, 100)
price_update.expr   # "price * ? + ?"
price_update.args   # (2, 100)
```

`expr` returns a frozen `SqlExpr` dataclass holding the expression text and a
tuple of its arguments.

### Placeholders and conditions for keys

```python
from ormkit.utils import to_query_marks, to_query_condition, to_query_values

keys = [[1, "en"], [2, "de"]]
to_query_marks(keys)                                      # "(?,?),(?,?)"
to_query_condition(lambda c: f'"{c}"', ["id", "locale"])  # '("id","locale")'
to_query_values(keys)                                     # [1, "en", 2, "de"]
```

With single-value rows and a single column there are no parentheses:
`to_query_marks([[1], [2]])` gives `"?,?"`. `to_query_condition` takes the
quoting function as its first argument.

### Inspecting values

```python
from ormkit.utils import is_blank, to_string, equal_as_string

is_blank("")            # True
is_blank(0)             # True
is_blank(None)          # True
is_blank("x")           # False
to_string([1, "a"])     # "1_a"
to_string(True)         # "true"
to_string(None)         # ""
equal_as_string(1, "1") # True
```

`is_blank` treats `None`, `False`, zero numbers, empty strings, bytes and
containers as blank, and a dataclass instance as blank when all its fields
are blank.

`to_string` joins lists and tuples with `_`, decodes bytes as UTF-8 and
writes booleans as `true`/`false`.

`get_value_from_fields(obj, ["Name", "Age"])` reads the named attributes of
an object (or keys of a mapping) and skips those that are missing or `None`.
A value with a callable `value()` method is replaced by what that method
returns, or by `None` if the call raises.

### Other helpers

- `replace_initialisms(text)` turns the initialisms listed in
  `COMMON_INITIALISMS`, such as `ID`, `HTTP` and `URL`, into title case
  (`UserID` becomes `UserId`).
- `add_extra_space_if_exist(text)` puts a space in front of a non-empty string
  and returns `""` for an empty one.
- `str_in_slice(a, items)` tells whether a string is among the items.
- `to_searchable_map(*args)` turns a `("key", value)` pair into a one-entry
  dict and returns a single argument unchanged; with no arguments, or when the
  first of several is not a string, it returns `None`.
- `now()` returns the current time from the `now_func` hook; assign another
  callable to `ormkit.utils.now_func` to control timestamps.
- `SafeMap` is a lock-guarded string map with `set` and `get`; `get` returns
  `""` for an unknown key.
- `file_with_line_num()` gives `file:line` for the first caller outside this
  package, or `""` when none is found.

## What this package does not do

It has no database connection, no models, no query execution and no
migrations. It only builds fragments and inspects values that other code
passes to it.