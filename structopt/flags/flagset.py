"""
Flag Set
========

Command line flag registration built on ``argparse``.

Flags are named the way Go-style command line programs name them, with a
single dash and long names (``-query.timeout 2s``, ``-verbose``,
``-verbose=false``). The double dash spelling is accepted as well. Every
flag is backed by a settable value; parsing calls ``value.set(text)`` as
each flag is consumed, so the bound fields change in place.

A non-bool flag takes the next argument as its value even when it starts
with a dash (``-offset -5s``). Parsing stops at the first non-flag argument
or after ``--``; the remaining arguments are kept in ``FlagSet.args``.

Usage:
    flags = FlagSet("app")
    flags.duration_var(ref, "query.timeout", timedelta(seconds=1), "query timeout")
    flags.parse(sys.argv[1:])
"""

import argparse
from dataclasses import dataclass
from datetime import timedelta
import logging
from typing import Any, Iterator, Protocol, Sequence

from pydantic import AnyUrl

from ..core.errors import ArgumentParseError
from .values import (
    BoolValue,
    DurationValue,
    Float64Value,
    Int64Value,
    IntValue,
    Ref,
    StringValue,
    Uint64Value,
    URLValue,
    Value,
)

logger = logging.getLogger(__name__)

_HELP_NAMES = ("h", "help")
_ZERO_DEFAULTS = ("", "0", "false", "0s")


@dataclass
class Flag:
    """A registered flag. ``default`` is the value's text at registration time."""

    name: str
    usage: str
    value: Value
    default: str


class FlagRegistrar(Protocol):
    """What ``load`` needs from a flag set."""

    def string_var(self, ref: Ref, name: str, default: str, usage: str = "") -> None: ...

    def bool_var(self, ref: Ref, name: str, default: bool, usage: str = "") -> None: ...

    def int_var(self, ref: Ref, name: str, default: int, usage: str = "") -> None: ...

    def uint64_var(self, ref: Ref, name: str, default: int, usage: str = "") -> None: ...

    def int64_var(self, ref: Ref, name: str, default: int, usage: str = "") -> None: ...

    def float64_var(self, ref: Ref, name: str, default: float, usage: str = "") -> None: ...

    def duration_var(self, ref: Ref, name: str, default: timedelta, usage: str = "") -> None: ...

    def url_var(
        self, ref: Ref, name: str, default: AnyUrl | None, usage: str = "", url_type: type = AnyUrl
    ) -> None: ...

    def var(self, value: Value, name: str, usage: str = "") -> None: ...

    def parse(self, arguments: Sequence[str]) -> None: ...


class _ArgumentParser(argparse.ArgumentParser):
    """ArgumentParser that raises instead of exiting unless told otherwise."""

    def __init__(self, *args: Any, exit_on_failure: bool = False, **kwargs: Any):
        super().__init__(*args, **kwargs)
        self.exit_on_failure = exit_on_failure

    def error(self, message: str):
        if self.exit_on_failure:
            super().error(message)
        raise ArgumentParseError(message, details={"prog": self.prog})


class _ValueAction(argparse.Action):
    def __init__(self, option_strings, dest, flag: Flag, **kwargs):
        self.flag = flag
        super().__init__(option_strings, dest, **kwargs)

    def __call__(self, parser, namespace, values, option_string=None):
        try:
            self.flag.value.set(values)
        except ValueError as e:
            raise argparse.ArgumentError(self, f"invalid value {values!r}: {e}") from e
        logger.debug("Flag -%s set to %r", self.flag.name, values)


class _HelpAction(argparse.Action):
    def __init__(self, option_strings, dest, flag_set: "FlagSet", **kwargs):
        self.flag_set = flag_set
        super().__init__(option_strings, dest, nargs=0, **kwargs)

    def __call__(self, parser, namespace, values, option_string=None):
        if self.flag_set.exit_on_error:
            parser.print_help()
            parser.exit()
        raise ArgumentParseError("help requested", details={"prog": parser.prog})


class FlagSet:
    """
    A named set of flags.

    Parameters:
        name (str): Program name shown in usage text.
        exit_on_error (bool): Print usage and exit on a parse failure or
            ``-h``/``-help`` instead of raising ``ArgumentParseError``.
    """

    def __init__(self, name: str = "", exit_on_error: bool = False):
        self.name = name
        self.exit_on_error = exit_on_error
        self.parsed = False
        self.args: list[str] = []
        self._flags: dict[str, Flag] = {}

    def __iter__(self) -> Iterator[Flag]:
        return iter(self._flags.values())

    def __contains__(self, name: str) -> bool:
        return name in self._flags

    def lookup(self, name: str) -> Flag | None:
        return self._flags.get(name)

    def var(self, value: Value, name: str, usage: str = "") -> None:
        """Register a flag backed directly by ``value``."""
        if not name or name.startswith("-") or "=" in name:
            raise ArgumentParseError(f"bad flag name {name!r}", details={"prog": self.name})
        if name in self._flags:
            raise ArgumentParseError(f"flag redefined: {name}", details={"prog": self.name})
        self._flags[name] = Flag(name=name, usage=usage, value=value, default=str(value))
        logger.debug("Registered flag -%s (default %r)", name, self._flags[name].default)

    def string_var(self, ref: Ref, name: str, default: str, usage: str = "") -> None:
        ref.set(default)
        self.var(StringValue(ref), name, usage)

    def bool_var(self, ref: Ref, name: str, default: bool, usage: str = "") -> None:
        ref.set(default)
        self.var(BoolValue(ref), name, usage)

    def int_var(self, ref: Ref, name: str, default: int, usage: str = "") -> None:
        ref.set(default)
        self.var(IntValue(ref), name, usage)

    def uint64_var(self, ref: Ref, name: str, default: int, usage: str = "") -> None:
        ref.set(default)
        self.var(Uint64Value(ref), name, usage)

    def int64_var(self, ref: Ref, name: str, default: int, usage: str = "") -> None:
        ref.set(default)
        self.var(Int64Value(ref), name, usage)

    def float64_var(self, ref: Ref, name: str, default: float, usage: str = "") -> None:
        ref.set(default)
        self.var(Float64Value(ref), name, usage)

    def duration_var(self, ref: Ref, name: str, default: timedelta, usage: str = "") -> None:
        ref.set(default)
        self.var(DurationValue(ref), name, usage)

    def url_var(
        self, ref: Ref, name: str, default: AnyUrl | None, usage: str = "", url_type: type = AnyUrl
    ) -> None:
        ref.set(default)
        self.var(URLValue(ref, url_type), name, usage)

    def _build_parser(self) -> _ArgumentParser:
        parser = _ArgumentParser(
            prog=self.name or None,
            add_help=False,
            allow_abbrev=False,
            exit_on_failure=self.exit_on_error,
        )
        for flag in self._flags.values():
            help_text = flag.usage.replace("%", "%%")
            if flag.default not in _ZERO_DEFAULTS:
                help_text = f"{help_text} (default {flag.default})".strip()
            extra: dict[str, Any] = {}
            if getattr(flag.value, "is_bool_flag", False):
                extra = {"nargs": "?", "const": "true"}
            parser.add_argument(
                f"-{flag.name}",
                f"--{flag.name}",
                action=_ValueAction,
                flag=flag,
                dest=f"flag:{flag.name}",
                default=argparse.SUPPRESS,
                metavar=getattr(flag.value, "kind", "value"),
                help=help_text,
                **extra,
            )
        help_names = [n for n in _HELP_NAMES if n not in self._flags]
        if help_names:
            parser.add_argument(
                *(f"-{n}" for n in help_names),
                *(f"--{n}" for n in help_names),
                action=_HelpAction,
                flag_set=self,
                dest="flag:help",
                default=argparse.SUPPRESS,
                help="show this help message",
            )
        parser.add_argument("arguments", nargs=argparse.REMAINDER, help=argparse.SUPPRESS)
        return parser

    def _join_values(self, arguments: Sequence[str]) -> list[str]:
        """
        Rewrite ``-name value`` as ``-name=value`` for non-bool flags.

        A flag always takes the next argument as its value, even when it
        starts with a dash (``-f -1e3``, ``-d -1s``). Rewriting stops at the
        first non-flag argument or ``--``.
        """
        joined: list[str] = []
        i = 0
        while i < len(arguments):
            arg = arguments[i]
            if arg == "--" or not arg.startswith("-") or arg == "-":
                break
            name = arg[2:] if arg.startswith("--") else arg[1:]
            flag = self._flags.get(name)
            if (
                flag is not None
                and not getattr(flag.value, "is_bool_flag", False)
                and i + 1 < len(arguments)
            ):
                joined.append(f"{arg}={arguments[i + 1]}")
                i += 2
                continue
            joined.append(arg)
            i += 1
        joined.extend(arguments[i:])
        return joined

    def parse(self, arguments: Sequence[str]) -> None:
        """
        Parse flags from ``arguments``, which must not include the program name.

        Raises:
            ArgumentParseError: On an undefined flag, a missing value, a value
                rejected by the flag's ``set``, or a help request.
        """
        self.parsed = True
        namespace = self._build_parser().parse_args(self._join_values(list(arguments)))
        rest = list(namespace.arguments)
        if rest[:1] == ["--"]:
            rest = rest[1:]
        self.args = rest
        logger.debug("Parsed %d arguments for %r; %d left over", len(arguments), self.name, len(self.args))

    def format_help(self) -> str:
        return self._build_parser().format_help()
