import os
from typing import Generator
from unittest.mock import patch

import pytest

from structopt import FlagSet


@pytest.fixture(autouse=True)
def isolated_env() -> Generator[None, None, None]:
    """
    Drop APP_* variables from the process environment for each test.

    Tests that exercise the os.environ default path set their own values
    inside this patch, so nothing leaks between tests.
    """
    with patch.dict(os.environ):
        for key in [k for k in os.environ if k.startswith("APP_")]:
            del os.environ[key]
        yield


@pytest.fixture
def flag_set() -> FlagSet:
    """A flag set that raises on parse failures instead of exiting."""
    return FlagSet("test")
