"""
structopt
=========

Bind the fields of a configuration record to environment variables and
command line flags with a single tag per field.

Usage:
    from dataclasses import dataclass
    from datetime import timedelta

    from structopt import FlagSet, load, opt

    @dataclass
    class Config:
        query_timeout: timedelta = opt("query.timeout", default=timedelta(seconds=5))
        user_name: str = opt("username", default="")

    conf = Config()
    load("APP", conf, FlagSet("app", exit_on_error=True))

The query timeout above is set by passing ``-query.timeout 2s``, by setting
``APP_QUERY_TIMEOUT=2s``, or by the field default, in that order of
precedence.

Supported field types are ``str``, ``bool``, ``int``, ``Uint64``, ``Int64``,
``float``, ``datetime.timedelta``, ``pydantic.AnyUrl`` plus any class with a
``set(text)`` method.
"""

from .config import layered_environ
from .core.errors import (
    ArgumentParseError,
    ConfigShapeError,
    EnvironmentParseError,
    StructOptError,
    UnsupportedTypeError,
)
from .flags import Flag, FlagRegistrar, FlagSet, Int64, Uint64, URLValue, Value
from .options import FieldRef, Option, apply, env_key, infer_options, load, opt
from .utils.duration import format_duration, parse_duration

__all__ = [
    # Core
    "load",
    "opt",
    "infer_options",
    "apply",
    "env_key",
    "Option",
    "FieldRef",
    # Flags
    "FlagSet",
    "FlagRegistrar",
    "Flag",
    "Value",
    "URLValue",
    "Int64",
    "Uint64",
    # Helpers
    "layered_environ",
    "parse_duration",
    "format_duration",
    # Errors
    "StructOptError",
    "ConfigShapeError",
    "UnsupportedTypeError",
    "EnvironmentParseError",
    "ArgumentParseError",
]
