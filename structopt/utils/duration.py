# -*- coding: utf-8 -*-
"""
Duration text such as ``300ms``, ``1.5h`` or ``1h2m3s``, read into and
rendered from ``datetime.timedelta``.

Valid units are ``ns``, ``us`` (or ``µs``), ``ms``, ``s``, ``m`` and ``h``.
A leading sign applies to the whole duration. The bare string ``0`` is
accepted without a unit. Precision below one microsecond is rounded.
"""

from datetime import timedelta
import re

_NANOSECOND = 1
_MICROSECOND = 1000 * _NANOSECOND
_MILLISECOND = 1000 * _MICROSECOND
_SECOND = 1000 * _MILLISECOND
_MINUTE = 60 * _SECOND
_HOUR = 60 * _MINUTE

UNITS = {
    "ns": _NANOSECOND,
    "us": _MICROSECOND,
    "µs": _MICROSECOND,  # micro sign
    "μs": _MICROSECOND,  # greek mu
    "ms": _MILLISECOND,
    "s": _SECOND,
    "m": _MINUTE,
    "h": _HOUR,
}

_DURATION_RE = re.compile(r"(?:[0-9]*(?:\.[0-9]*)?[^0-9.+-]+)+")
_COMPONENT_RE = re.compile(r"([0-9]*)(?:\.([0-9]*))?([^0-9.+-]+)")


def parse_duration(text: str) -> timedelta:
    """
    Parse a duration string.

    Raises:
        ValueError: If the text is not a valid duration.
    """
    body = text
    negative = False
    if body[:1] in ("-", "+"):
        negative = body[0] == "-"
        body = body[1:]
    if body == "0":
        return timedelta(0)
    if not body or not _DURATION_RE.fullmatch(body):
        raise ValueError(f"invalid duration {text!r}")

    total_ns = 0
    for whole, frac, unit in _COMPONENT_RE.findall(body):
        if not whole and not frac:
            raise ValueError(f"invalid duration {text!r}")
        scale = UNITS.get(unit)
        if scale is None:
            raise ValueError(f"unknown unit {unit!r} in duration {text!r}")
        total_ns += int(whole or 0) * scale
        if frac:
            total_ns += int(frac) * scale // 10 ** len(frac)

    micros, rem = divmod(total_ns, _MICROSECOND)
    if rem * 2 >= _MICROSECOND:
        micros += 1
    try:
        return timedelta(microseconds=-micros if negative else micros)
    except OverflowError as e:
        raise ValueError(f"duration out of range {text!r}") from e


def _with_fraction(value: int, unit: int) -> str:
    whole, frac = divmod(value, unit)
    if not frac:
        return str(whole)
    digits = len(str(unit)) - 1
    return f"{whole}.{str(frac).zfill(digits).rstrip('0')}"


def format_duration(value: timedelta) -> str:
    """Render a timedelta the way ``parse_duration`` reads it, e.g. ``1h2m3.5s``."""
    micros = (value.days * 86400 + value.seconds) * 10**6 + value.microseconds
    if micros == 0:
        return "0s"
    sign = "-" if micros < 0 else ""
    micros = abs(micros)

    if micros < 1000:
        return f"{sign}{micros}µs"
    if micros < 10**6:
        return f"{sign}{_with_fraction(micros, 1000)}ms"

    hours, micros = divmod(micros, 3600 * 10**6)
    minutes, micros = divmod(micros, 60 * 10**6)
    seconds = _with_fraction(micros, 10**6)
    if hours:
        return f"{sign}{hours}h{minutes}m{seconds}s"
    if minutes:
        return f"{sign}{minutes}m{seconds}s"
    return f"{sign}{seconds}s"
