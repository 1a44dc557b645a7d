from .constants import ENV_SEP, FLAG_SEPS, HELP_KEY, TAG_KEY
from .environ import layered_environ, load_env_file

__all__ = [
    "ENV_SEP",
    "FLAG_SEPS",
    "HELP_KEY",
    "TAG_KEY",
    "layered_environ",
    "load_env_file",
]
