import io
import os
from unittest.mock import patch

import pytest

from weblookup.backends.hooks import HookRegistry
from weblookup.backends.leo.plugin import LeoBackend
from weblookup.config.styles import StyleStore
from weblookup.dispatcher import Dispatcher


@pytest.fixture(autouse=True)
def mock_settings_env_vars(tmp_path):
    """Automatically mock HOME so no test touches the real config directory."""
    fake_home = tmp_path / "fake_home"
    fake_home.mkdir()

    with patch("pathlib.Path.home", return_value=fake_home):
        with patch.dict(os.environ, {"HOME": str(fake_home)}):
            yield


class FakeLauncher:
    def __init__(self, status: int = 0):
        self.status = status
        self.opened = []

    def open(self, uri: str) -> int:
        self.opened.append(uri)
        return self.status


@pytest.fixture
def launcher():
    return FakeLauncher()


@pytest.fixture
def make_dispatcher(launcher):
    def _make(styles=None, hooks=None):
        stdout = io.StringIO()
        stderr = io.StringIO()
        dispatcher = Dispatcher(
            StyleStore(styles or {}),
            launcher,
            hooks or HookRegistry(),
            stdout=stdout,
            stderr=stderr,
        )
        dispatcher.register(LeoBackend())
        return dispatcher, stdout, stderr

    return _make
