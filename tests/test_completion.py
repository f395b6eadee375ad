"""Tests for CLI completion helpers."""

import argparse

import pytest

from weblookup.backends.base import CompletionRegistry
from weblookup.cli import completion
from weblookup.cli.main import build_completion_parser


def test_option_completer_filters_by_prefix():
    registry = CompletionRegistry()
    registry.register("-l", lambda: {"ende": "english german", "esde": "spanish german", "frde": "french german"})
    completer = completion.option_completer(registry, "-l")
    args = argparse.Namespace()

    assert completer("e", args) == {"ende": "english german", "esde": "spanish german"}
    assert completer("", args) == {
        "ende": "english german",
        "esde": "spanish german",
        "frde": "french german",
    }
    assert completer("x", args) == {}


def test_backend_name_completer():
    completer = completion.backend_name_completer(["leo", "dict", "leo"])
    args = argparse.Namespace()

    assert completer("", args) == ["leo", "dict"]
    assert completer("d", args) == ["dict"]


def test_completion_parser_wires_backend_completers(make_dispatcher):
    dispatcher, _, _ = make_dispatcher()
    parser = build_completion_parser(dispatcher)

    subparsers = next(
        action
        for action in parser._actions
        if isinstance(action, argparse._SubParsersAction)
    )
    leo_parser = subparsers.choices["leo"]
    language_action = next(
        action for action in leo_parser._actions if "-l" in action.option_strings
    )

    candidates = language_action.completer("fr", argparse.Namespace())
    assert candidates == {"frde": "french german"}


def test_enable_argcomplete_is_noop_outside_completion(monkeypatch):
    monkeypatch.delenv("_ARGCOMPLETE", raising=False)
    called = []
    monkeypatch.setattr(
        completion, "is_completing", lambda: called.append(True) or False
    )
    completion.enable_argcomplete(argparse.ArgumentParser())
    assert called == [True]


def test_build_completion_script_rejects_unknown_shell():
    with pytest.raises(ValueError, match="Unsupported shell"):
        completion.build_completion_script("fish")


def test_build_completion_script_bash():
    script = completion.build_completion_script("bash")
    assert script.startswith("# lookup argcomplete setup")
    assert "lookup" in script
