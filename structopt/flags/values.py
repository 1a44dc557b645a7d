"""
Flag values: text parsers per supported kind and the adapters that bind
them to a field reference.

An adapter implements the settable value protocol (``set(text)`` and
``__str__``) and writes every parsed value through to the referenced
field, so the flag set never holds a private copy.
"""

from abc import ABC, abstractmethod
from datetime import timedelta
from functools import lru_cache
import re
from typing import Any, NewType, Protocol, runtime_checkable

from pydantic import AnyUrl, TypeAdapter

from ..utils.duration import format_duration, parse_duration

Int64 = NewType("Int64", int)
Uint64 = NewType("Uint64", int)

INT64_MIN = -(2**63)
INT64_MAX = 2**63 - 1
UINT64_MAX = 2**64 - 1

_TRUE = frozenset({"1", "t", "T", "TRUE", "true", "True"})
_FALSE = frozenset({"0", "f", "F", "FALSE", "false", "False"})
_INT_RE = re.compile(r"[+-]?[0-9]+")


@runtime_checkable
class Value(Protocol):
    """Anything that can parse itself from flag text and render itself back."""

    def set(self, text: str) -> None: ...

    def __str__(self) -> str: ...


class Ref(Protocol):
    """A writable reference to a single field."""

    def get(self) -> Any: ...

    def set(self, value: Any) -> None: ...


def parse_bool(text: str) -> bool:
    if text in _TRUE:
        return True
    if text in _FALSE:
        return False
    raise ValueError(f"invalid boolean {text!r}")


def parse_int(text: str) -> int:
    if not _INT_RE.fullmatch(text):
        raise ValueError(f"invalid integer {text!r}")
    return int(text)


def parse_int64(text: str) -> int:
    value = parse_int(text)
    if not INT64_MIN <= value <= INT64_MAX:
        raise ValueError(f"value out of range for int64: {text!r}")
    return value


def parse_uint64(text: str) -> int:
    if text.startswith("-"):
        raise ValueError(f"invalid unsigned integer {text!r}")
    value = parse_int(text)
    if value > UINT64_MAX:
        raise ValueError(f"value out of range for uint64: {text!r}")
    return value


def parse_float(text: str) -> float:
    if text != text.strip():
        raise ValueError(f"invalid float {text!r}")
    return float(text)


@lru_cache(maxsize=None)
def _url_adapter(url_type: type) -> TypeAdapter:
    return TypeAdapter(url_type)


def parse_url(text: str, url_type: type = AnyUrl) -> AnyUrl:
    """Parse an absolute URL; pydantic's ValidationError is a ValueError."""
    return _url_adapter(url_type).validate_python(text)


class RefValue(ABC):
    """Base adapter binding a parser/formatter pair to a field reference."""

    kind = "value"
    is_bool_flag = False

    def __init__(self, ref: Ref):
        self.ref = ref

    @abstractmethod
    def parse(self, text: str) -> Any: ...

    def format(self, value: Any) -> str:
        return "" if value is None else str(value)

    def set(self, text: str) -> None:
        self.ref.set(self.parse(text))

    def __str__(self) -> str:
        return self.format(self.ref.get())


class StringValue(RefValue):
    kind = "string"

    def parse(self, text: str) -> str:
        return text


class BoolValue(RefValue):
    kind = "bool"
    is_bool_flag = True

    def parse(self, text: str) -> bool:
        return parse_bool(text)

    def format(self, value: Any) -> str:
        return "true" if value else "false"


class IntValue(RefValue):
    kind = "int"

    def parse(self, text: str) -> int:
        return parse_int(text)


class Int64Value(RefValue):
    kind = "int64"

    def parse(self, text: str) -> int:
        return parse_int64(text)


class Uint64Value(RefValue):
    kind = "uint64"

    def parse(self, text: str) -> int:
        return parse_uint64(text)


class Float64Value(RefValue):
    kind = "float64"

    def parse(self, text: str) -> float:
        return parse_float(text)


class DurationValue(RefValue):
    kind = "duration"

    def parse(self, text: str) -> timedelta:
        return parse_duration(text)

    def format(self, value: Any) -> str:
        return "" if value is None else format_duration(value)


class URLValue(RefValue):
    """Adapter for URL fields, which the flag set only accepts as a settable value."""

    kind = "url"

    def __init__(self, ref: Ref, url_type: type = AnyUrl):
        super().__init__(ref)
        self.url_type = url_type

    def parse(self, text: str) -> AnyUrl:
        return parse_url(text, self.url_type)
