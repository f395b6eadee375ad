import subprocess
import webbrowser

from weblookup.launcher import LAUNCH_FAILED, LAUNCH_OK, Launcher

URI = "https://dict.leo.org/?search=word&lp=ende&lang=en"


def test_default_browser_used_without_command(monkeypatch):
    opened = []
    monkeypatch.setattr(webbrowser, "open", lambda uri: opened.append(uri) or True)

    assert Launcher().open(URI) == LAUNCH_OK
    assert opened == [URI]


def test_default_browser_unavailable(monkeypatch):
    monkeypatch.setattr(webbrowser, "open", lambda uri: False)
    assert Launcher("").open(URI) == LAUNCH_FAILED


def test_build_command_substitutes_placeholder():
    launcher = Launcher("firefox --new-tab %s")
    assert launcher.build_command(URI) == ["firefox", "--new-tab", URI]


def test_build_command_appends_uri():
    assert Launcher("w3m").build_command(URI) == ["w3m", URI]


def test_configured_command_does_not_wait(monkeypatch):
    started = []

    class _FakePopen:
        def __init__(self, argv, **kwargs):
            started.append((argv, kwargs))

        def wait(self):
            raise AssertionError("launcher must not wait")

    monkeypatch.setattr(subprocess, "Popen", _FakePopen)

    assert Launcher("mybrowser").open(URI) == LAUNCH_OK
    assert started[0][0] == ["mybrowser", URI]
    assert started[0][1]["start_new_session"] is True


def test_missing_command_fails(monkeypatch):
    def _raise(*args, **kwargs):
        raise FileNotFoundError("mybrowser")

    monkeypatch.setattr(subprocess, "Popen", _raise)
    assert Launcher("mybrowser").open(URI) == LAUNCH_FAILED
