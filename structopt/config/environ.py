import logging
import os
from pathlib import Path
from typing import Mapping

from dotenv import dotenv_values

from .constants import ENV_FILE, ENV_LOCAL_FILE

logger = logging.getLogger(__name__)


def load_env_file(path: Path) -> dict[str, str]:
    """
    Load values from a dotenv file into a mapping.

    Only keys with a non-None value are included. If the file does not exist, returns an empty dict.

    Returns:
        A dict mapping environment variable names to their values as strings; keys with no value are omitted.
    """
    if not path.exists():
        return {}
    return {k: str(v) for k, v in dotenv_values(path).items() if v is not None}


def layered_environ(
    project_root: Path | str | None = None,
    base: Mapping[str, str] | None = None,
) -> dict[str, str]:
    """
    Build an environment mapping from dotenv files layered around the process environment.

    Layers, lowest precedence first:
        1. ``{project_root}/.env``
        2. ``base`` (the process environment when None)
        3. ``{project_root}/.env.local``

    The process environment itself is never modified; pass the result to
    ``load(..., environ=...)``.

    Parameters:
        project_root (Path | str | None): Directory holding the dotenv files. Defaults to the current working directory.
        base (Mapping[str, str] | None): Environment to layer the files around.

    Returns:
        dict[str, str]: The merged environment.
    """
    root = Path(project_root) if project_root is not None else Path.cwd()
    env: dict[str, str] = {}
    env.update(load_env_file(root / ENV_FILE))
    env.update(os.environ if base is None else base)
    local = load_env_file(root / ENV_LOCAL_FILE)
    env.update(local)
    logger.debug("Layered environment from %s (%d keys from %s)", root, len(local), ENV_LOCAL_FILE)
    return env
