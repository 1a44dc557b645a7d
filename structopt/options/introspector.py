"""
Field introspection: turns the tagged fields of a configuration record into
Option descriptors.

A record is an instance of a dataclass or of a pydantic model. A field takes
part when its metadata carries an ``"opt"`` tag:

    @dataclass
    class Config:
        query_timeout: timedelta = opt("query.timeout", default=timedelta(seconds=5))
        user_name: str = field(default="", metadata={"opt": "username"})

    class Settings(BaseModel):
        endpoint: AnyUrl | None = Field(default=None, json_schema_extra={"opt": "endpoint"})
"""

import dataclasses
from dataclasses import dataclass
import logging
import types
from typing import Any, Iterator, Union, get_args, get_origin, get_type_hints

from pydantic import BaseModel

from ..config.constants import ENV_SEP, FLAG_SEPS, HELP_KEY, TAG_KEY
from ..core.errors import ConfigShapeError

logger = logging.getLogger(__name__)


@dataclass
class FieldRef:
    """Writable reference to one field of a caller-owned record."""

    record: Any
    name: str

    def get(self) -> Any:
        return getattr(self.record, self.name)

    def set(self, value: Any) -> None:
        setattr(self.record, self.name, value)


@dataclass
class Option:
    """One configurable field, valid for a single binding pass."""

    value: Any
    location: FieldRef
    env_key: str
    flag_name: str
    declared_type: Any
    description: str = ""


def opt(name: str, *, help: str = "", **kwargs: Any) -> Any:
    """
    Declare a dataclass field bound to the flag ``name``.

    Remaining keyword arguments (``default``, ``default_factory``, ...) are
    passed to ``dataclasses.field``.
    """
    metadata = dict(kwargs.pop("metadata", None) or {})
    metadata[TAG_KEY] = name
    if help:
        metadata[HELP_KEY] = help
    return dataclasses.field(metadata=metadata, **kwargs)


def env_key(prefix: str, tag: str) -> str:
    """``query.timeout`` with prefix ``APP`` becomes ``APP_QUERY_TIMEOUT``."""
    name = tag.upper()
    for sep in FLAG_SEPS:
        name = name.replace(sep, ENV_SEP)
    return prefix + ENV_SEP + name


def _unwrap_optional(tp: Any) -> Any:
    if get_origin(tp) in (Union, types.UnionType):
        args = get_args(tp)
        rest = [a for a in args if a is not type(None)]
        if len(rest) == 1 and len(args) == 2:
            return rest[0]
    return tp


def _resolve_annotation(cls: type, name: str, annotation: Any, value: Any) -> Any:
    """
    Resolve a string annotation, as left by ``from __future__ import annotations``,
    in the namespace of the record's module.

    A name that only exists locally (a class defined inside a function) still
    resolves when it names the class of the field's current value. Otherwise
    the string is returned unchanged and the binder rejects that field alone.
    """
    if not isinstance(annotation, str):
        return annotation
    holder = type(cls.__name__, (), {"__annotations__": {name: annotation}, "__module__": cls.__module__})
    try:
        return get_type_hints(holder, localns={cls.__name__: cls})[name]
    except (NameError, AttributeError, SyntaxError, TypeError):
        if value is not None:
            value_type = type(value).__name__
            if annotation.strip() in (value_type, f"Optional[{value_type}]", f"{value_type} | None"):
                return type(value)
        return annotation


def _record_fields(config: Any) -> Iterator[tuple[str, Any, dict[str, Any], bool]]:
    """Yield ``(name, declared type, metadata, writable)`` per declared field."""
    cls = type(config)
    if dataclasses.is_dataclass(config) and not isinstance(config, type):
        frozen = cls.__dataclass_params__.frozen
        for f in dataclasses.fields(config):
            declared = _resolve_annotation(cls, f.name, f.type, getattr(config, f.name, None))
            yield f.name, declared, dict(f.metadata), not frozen
    elif isinstance(config, BaseModel):
        frozen = bool(cls.model_config.get("frozen"))
        for name, info in cls.model_fields.items():
            extra = info.json_schema_extra if isinstance(info.json_schema_extra, dict) else {}
            metadata = dict(extra)
            if info.description and HELP_KEY not in metadata:
                metadata[HELP_KEY] = info.description
            yield name, info.annotation, metadata, not (frozen or info.frozen)
    else:
        raise ConfigShapeError(
            f"config must be a dataclass or pydantic model instance, got {cls.__name__}",
            details={"type": repr(cls)},
        )


def infer_options(prefix: str, config: Any) -> list[Option]:
    """
    Build one Option per tagged, writable field of ``config``, in declaration order.

    Untagged fields, fields with an empty tag, private fields and fields of
    frozen records are skipped. The record is not modified.

    Raises:
        ConfigShapeError: If ``config`` is not a dataclass or pydantic model instance.
    """
    options: list[Option] = []
    for name, declared, metadata, writable in _record_fields(config):
        tag = metadata.get(TAG_KEY)
        if not tag:
            continue
        if not writable or name.startswith("_"):
            logger.debug("Skipping read-only field %s (-%s)", name, tag)
            continue
        ref = FieldRef(config, name)
        option = Option(
            value=ref.get(),
            location=ref,
            env_key=env_key(prefix, tag),
            flag_name=tag,
            declared_type=_unwrap_optional(declared),
            description=str(metadata.get(HELP_KEY, "")),
        )
        logger.debug("Inferred option -%s from field %s (env %s)", tag, name, option.env_key)
        options.append(option)
    return options
