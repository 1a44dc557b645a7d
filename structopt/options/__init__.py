from .binder import apply, load
from .introspector import FieldRef, Option, env_key, infer_options, opt

__all__ = [
    "FieldRef",
    "Option",
    "apply",
    "env_key",
    "infer_options",
    "load",
    "opt",
]
