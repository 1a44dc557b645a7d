"""
Option binding: applies the environment to each inferred option and
registers it with a flag set, so the precedence ends up as

    record default  <  environment variable  <  command line flag
"""

from datetime import timedelta
import logging
import os
import sys
from typing import Any, Callable, Mapping, Sequence, get_origin

from pydantic import AnyUrl

from ..core.errors import EnvironmentParseError, UnsupportedTypeError
from ..flags.flagset import FlagRegistrar, FlagSet
from ..flags.values import (
    Int64,
    Uint64,
    parse_bool,
    parse_float,
    parse_int,
    parse_int64,
    parse_uint64,
    parse_url,
)
from ..utils.duration import parse_duration
from .introspector import Option, infer_options

logger = logging.getLogger(__name__)

# declared type -> (parser, registrar method)
_PRIMITIVES: dict[Any, tuple[Callable[[str], Any], str]] = {
    str: (str, "string_var"),
    bool: (parse_bool, "bool_var"),
    int: (parse_int, "int_var"),
    Uint64: (parse_uint64, "uint64_var"),
    Int64: (parse_int64, "int64_var"),
    float: (parse_float, "float64_var"),
    timedelta: (parse_duration, "duration_var"),
}


def _is_class(tp: Any) -> bool:
    # list[str] passes isinstance(..., type) on 3.10
    return get_origin(tp) is None and isinstance(tp, type)


def _is_url_type(tp: Any) -> bool:
    return _is_class(tp) and issubclass(tp, AnyUrl)


def _is_settable_type(tp: Any) -> bool:
    return _is_class(tp) and callable(getattr(tp, "set", None))


def apply(option: Option, flags: FlagRegistrar, environ: Mapping[str, str] | None = None) -> None:
    """
    Apply the environment override for one option and register its flag.

    A blank environment value counts as unset. A settable-value field holding
    None is populated with a fresh instance of its declared type first.

    Raises:
        UnsupportedTypeError: If the declared type has no parser.
        EnvironmentParseError: If a non-blank environment value does not parse.
    """
    env = os.environ if environ is None else environ
    from_env = env.get(option.env_key, "")
    tp = option.declared_type
    ref = option.location

    def from_environment(parse: Callable[[str], Any]) -> None:
        if not from_env.strip():
            return
        try:
            parse(from_env)
        except ValueError as e:
            raise EnvironmentParseError(
                f"parse error {option.env_key}={from_env!r}: {e}",
                details={"env_var": option.env_key, "value": from_env},
            ) from e
        logger.debug("Applied %s to -%s", option.env_key, option.flag_name)

    if tp in _PRIMITIVES:
        parse, method = _PRIMITIVES[tp]
        from_environment(lambda text: ref.set(parse(text)))
        getattr(flags, method)(ref, option.flag_name, ref.get(), option.description)
    elif _is_url_type(tp):
        from_environment(lambda text: ref.set(parse_url(text, tp)))
        flags.url_var(ref, option.flag_name, ref.get(), option.description, url_type=tp)
    elif _is_settable_type(tp):
        if option.value is None:
            option.value = tp()
            ref.set(option.value)
        from_environment(option.value.set)
        flags.var(option.value, option.flag_name, option.description)
    else:
        raise UnsupportedTypeError(
            f"unsupported field type: {getattr(tp, '__name__', tp)}",
            details={"field": option.flag_name, "type": repr(tp)},
        )


def load(
    prefix: str,
    config: Any,
    flags: FlagRegistrar | None = None,
    *,
    environ: Mapping[str, str] | None = None,
    argv: Sequence[str] | None = None,
) -> None:
    """
    Load environment variables and command line flags into every tagged field of ``config``.

    Parameters:
        prefix (str): Environment variable prefix, e.g. ``APP`` for ``APP_QUERY_TIMEOUT``.
        config: Dataclass or pydantic model instance, updated in place.
        flags (FlagRegistrar | None): Flag set to register fields with. When given,
            it parses ``argv`` after all fields are registered. When None, only the
            environment is applied.
        environ (Mapping[str, str] | None): Environment to read; defaults to ``os.environ``.
        argv (Sequence[str] | None): Arguments without the program name; defaults to ``sys.argv[1:]``.

    Raises:
        ConfigShapeError: ``config`` is not a record instance.
        UnsupportedTypeError: A tagged field has an unsupported type.
        EnvironmentParseError: An environment value failed to parse.
        ArgumentParseError: Raised by ``flags.parse``.
    """
    options = infer_options(prefix, config)
    # Without a caller flag set, register into a throwaway one that is never parsed.
    fs = flags if flags is not None else FlagSet(prefix)
    for option in options:
        apply(option, fs, environ)
    if flags is not None:
        args = sys.argv[1:] if argv is None else list(argv)
        flags.parse(args)
    logger.debug("Loaded %d options for prefix %s", len(options), prefix)
