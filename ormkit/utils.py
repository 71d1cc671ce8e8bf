"""Small helpers shared by the query builder: SQL fragments, value checks, string forms."""

from __future__ import annotations

import inspect
import math
import numbers
import re
import threading
from collections.abc import Callable, Iterable, Mapping, Sequence
from dataclasses import dataclass, fields, is_dataclass
from datetime import datetime
from decimal import Decimal
from pathlib import Path
from typing import Any

# Replace this hook to change what ``now()`` reports, e.g. a UTC clock.
now_func: Callable[[], datetime] = datetime.now

COMMON_INITIALISMS: tuple[str, ...] = (
    "API", "ASCII", "CPU", "CSS", "DNS", "EOF", "GUID", "HTML", "HTTP", "HTTPS",
    "ID", "IP", "JSON", "LHS", "QPS", "RAM", "RHS", "RPC", "SLA", "SMTP", "SSH",
    "TLS", "TTL", "UID", "UI", "UUID", "URI", "URL", "UTF8", "VM", "XML", "XSRF",
    "XSS",
)

# Alternatives are tried in list order at each position, so earlier entries win.
_INITIALISM_PATTERN = re.compile("|".join(re.escape(word) for word in COMMON_INITIALISMS))
_INITIALISM_REPLACEMENTS = {word: word.lower().capitalize() for word in COMMON_INITIALISMS}

_PACKAGE_DIR = Path(__file__).resolve().parent
_CALLER_DEPTH = 13


def now() -> datetime:
    """Return the current time as given by the ``now_func`` hook."""
    return now_func()


def replace_initialisms(text: str) -> str:
    """Turn common initialisms such as ``ID`` or ``HTTP`` into title case."""
    return _INITIALISM_PATTERN.sub(lambda match: _INITIALISM_REPLACEMENTS[match.group(0)], text)


class SafeMap:
    """A string-to-string map guarded by a lock."""

    def __init__(self) -> None:
        self._items: dict[str, str] = {}
        self._lock = threading.Lock()

    def set(self, key: str, value: str) -> None:
        with self._lock:
            self._items[key] = value

    def get(self, key: str) -> str:
        """Return the stored value, or an empty string when the key is unknown."""
        with self._lock:
            return self._items.get(key, "")


@dataclass(frozen=True)
class SqlExpr:
    """A raw SQL expression with its bound arguments."""

    expr: str
    args: tuple[Any, ...] = ()


def expr(expression: str, *args: Any) -> SqlExpr:
    """Build a raw SQL expression, e.g. ``expr("price * ? + ?", 2, 100)``."""
    return SqlExpr(expression, tuple(args))


def to_query_marks(primary_values: Iterable[Sequence[Any]]) -> str:
    """Render one placeholder group per row: ``?`` for one value, ``(?,?)`` for several."""
    groups = []
    for row in primary_values:
        marks = ["?"] * len(row)
        groups.append(f"({','.join(marks)})" if len(marks) > 1 else "".join(marks))
    return ",".join(groups)


def to_query_condition(quote: Callable[[str], str], columns: Sequence[str]) -> str:
    """Quote the columns and group them in parentheses when there are several."""
    quoted = ",".join(quote(column) for column in columns)
    return f"({quoted})" if len(columns) > 1 else quoted


def to_query_values(values: Iterable[Iterable[Any]]) -> list[Any]:
    """Flatten rows of values into one argument list."""
    return [item for row in values for item in row]


def _is_package_source(filename: str) -> bool:
    try:
        path = Path(filename).resolve()
    except (OSError, ValueError):
        return False
    if _PACKAGE_DIR not in path.parents:
        return False
    return not (path.name.startswith("test_") or path.name.endswith("_test.py"))


def file_with_line_num() -> str:
    """Return ``file:line`` of the first caller outside this package, or ``""``."""
    frame = inspect.currentframe()
    try:
        # Skip this function and its direct caller.
        for _ in range(2):
            frame = frame.f_back if frame is not None else None
        for _ in range(_CALLER_DEPTH):
            if frame is None:
                break
            filename = frame.f_code.co_filename
            if not _is_package_source(filename):
                return f"{filename}:{frame.f_lineno}"
            frame = frame.f_back
    finally:
        del frame
    return ""


def is_blank(value: Any) -> bool:
    """Tell whether a value is the zero value of its kind."""
    if value is None:
        return True
    if isinstance(value, bool):
        return not value
    if isinstance(value, numbers.Number):
        return value == 0
    if isinstance(value, (str, bytes, bytearray)):
        return len(value) == 0
    if is_dataclass(value) and not isinstance(value, type):
        return all(is_blank(getattr(value, field.name)) for field in fields(value))
    if isinstance(value, (Sequence, Mapping, set, frozenset)):
        return len(value) == 0
    return False


def to_searchable_map(*attrs: Any) -> Any:
    """Turn ``("name", value)`` into a one-item dict; a single argument is returned as is."""
    if len(attrs) > 1:
        if isinstance(attrs[0], str):
            return {attrs[0]: attrs[1]}
        return None
    if len(attrs) == 1:
        return attrs[0]
    return None


def _format_float(value: float) -> str:
    if math.isnan(value):
        return "NaN"
    if math.isinf(value):
        return "+Inf" if value > 0 else "-Inf"
    if value == 0:
        return "-0" if math.copysign(1.0, value) < 0 else "0"
    sign, digit_tuple, exponent = Decimal(repr(value)).normalize().as_tuple()
    digits = "".join(str(digit) for digit in digit_tuple)
    point = len(digits) + exponent
    prefix = "-" if sign else ""
    power = point - 1
    if power < -4 or power >= 6:
        mantissa = digits[0] + ("." + digits[1:] if len(digits) > 1 else "")
        exp_sign = "-" if power < 0 else "+"
        return f"{prefix}{mantissa}e{exp_sign}{abs(power):02d}"
    if point <= 0:
        return f"{prefix}0.{'0' * -point}{digits}"
    if point >= len(digits):
        return f"{prefix}{digits}{'0' * (point - len(digits))}"
    return f"{prefix}{digits[:point]}.{digits[point:]}"


def to_string(value: Any) -> str:
    """Render a value in its plain text form; lists and tuples are joined with ``_``."""
    if value is None:
        return ""
    if isinstance(value, (list, tuple)):
        return "_".join(to_string(item) for item in value)
    if isinstance(value, (bytes, bytearray)):
        return bytes(value).decode("utf-8", errors="replace")
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float):
        return _format_float(value)
    return str(value)


def equal_as_string(a: Any, b: Any) -> bool:
    """Compare two values by their text forms."""
    return to_string(a) == to_string(b)


def str_in_slice(a: str, items: Iterable[str]) -> bool:
    """Tell whether ``a`` is among ``items``."""
    return a in items


_MISSING = object()


def get_value_from_fields(value: Any, field_names: Iterable[str]) -> list[Any]:
    """Collect the named fields of an object, skipping missing or ``None`` ones.

    A field whose value has a callable ``value()`` method is replaced by what it
    returns, or by ``None`` if that call fails.
    """
    if value is None:
        return []
    results = []
    for name in field_names:
        if isinstance(value, Mapping):
            field_value = value.get(name, _MISSING)
        else:
            field_value = getattr(value, name, _MISSING)
        if field_value is _MISSING or field_value is None:
            continue
        converter = getattr(field_value, "value", None)
        if callable(converter):
            try:
                field_value = converter()
            except Exception:
                field_value = None
        results.append(field_value)
    return results


def add_extra_space_if_exist(text: str) -> str:
    """Prefix a non-empty string with a space; leave an empty one empty."""
    return f" {text}" if text else ""