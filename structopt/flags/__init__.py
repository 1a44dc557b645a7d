from .flagset import Flag, FlagRegistrar, FlagSet
from .values import (
    BoolValue,
    DurationValue,
    Float64Value,
    Int64,
    Int64Value,
    IntValue,
    Ref,
    StringValue,
    Uint64,
    Uint64Value,
    URLValue,
    Value,
)

__all__ = [
    "Flag",
    "FlagRegistrar",
    "FlagSet",
    "Value",
    "Ref",
    "Int64",
    "Uint64",
    "StringValue",
    "BoolValue",
    "IntValue",
    "Int64Value",
    "Uint64Value",
    "Float64Value",
    "DurationValue",
    "URLValue",
]
