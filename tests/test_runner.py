import sys

import pytest

from argtree import Command, UnexpectedArgumentError, UnknownCommandError, help_flag, values
from argtree.command import _warn_missing_tokens


def test_runner_returns_action_result(root):
    count = values.Int()
    root.add_flag("count", value=count)
    root.action = lambda ctx: count.value * 2
    assert root(["--count", "21"]) == 42


def test_runner_action_receives_context(root):
    child = root.add_command("child", action=lambda ctx: ctx)
    assert root(["child"]) is child


def test_runner_no_action_prints_help(root, console):
    root.add_command("child", help="A child command.")
    with console.capture() as capture:
        assert root([], console=console) is None
    assert capture.get().startswith("Usage: root COMMAND\n")


def test_runner_exit_on_error(console):
    root = Command("root", error_console=console)
    with console.capture() as capture, pytest.raises(SystemExit) as e:
        root(["extra"])
    assert e.value.code == 1
    assert 'Unexpected argument: "extra".' in capture.get()


def test_runner_exit_on_error_override(console):
    root = Command("root", error_console=console)
    with console.capture(), pytest.raises(UnexpectedArgumentError):
        root(["extra"], exit_on_error=False)


def test_runner_settings_inherited(console):
    root = Command("root", error_console=console, exit_on_error=False)
    child = root.add_command("child", print_error=False)
    child.add_command("grandchild")

    with console.capture() as capture, pytest.raises(UnexpectedArgumentError):
        root(["child", "grandchild", "extra"])
    assert capture.get() == ""

    with console.capture() as capture, pytest.raises(UnknownCommandError):
        root(["extra"])
    assert 'Unknown command "root extra".' in capture.get()


def test_runner_nearest_console(console):
    root = Command("root", exit_on_error=False)
    child = root.add_command("child", error_console=console)
    child.add_command("leaf")

    with console.capture() as capture, pytest.raises(UnexpectedArgumentError):
        root(["child", "leaf", "extra"])
    assert 'Unexpected argument: "extra".' in capture.get()


def test_runner_help_on_error(root, console):
    root.add_arg("name", help="Who to greet.")
    with console.capture() as capture, pytest.raises(UnexpectedArgumentError):
        root(["a", "b"], console=console, error_console=console, print_error=True, help_on_error=True)

    actual = capture.get()
    assert actual.startswith("Usage: root [NAME]\n")
    assert actual.index("Usage:") < actual.index('Unexpected argument: "b".')


def test_runner_action_error_reported(root, console):
    def action(ctx):
        raise UnexpectedArgumentError(value="late", command=ctx)

    root.action = action
    with console.capture() as capture, pytest.raises(UnexpectedArgumentError):
        root([], error_console=console, print_error=True)
    assert 'Unexpected argument: "late".' in capture.get()


def test_runner_error_goes_to_stderr(capfd):
    root = Command("root")
    with pytest.raises(SystemExit):
        root(["--invalid-option"])

    captured = capfd.readouterr()
    assert "Unknown flag" in captured.err
    assert captured.out == ""


def test_runner_string_tokens(root):
    name = values.String()
    root.add_arg("name", value=name)
    root.action = lambda ctx: name.value
    assert root("'hello world'") == "hello world"


def test_runner_framework_warning(root, monkeypatch):
    monkeypatch.setattr(sys, "argv", ["prog"])
    monkeypatch.setenv("PYTEST_VERSION", "8")
    root.action = lambda ctx: "ran"
    _warn_missing_tokens.cache_clear()

    with pytest.warns(UserWarning, match="invoked without tokens"):
        assert root() == "ran"


def test_runner_unknown_command(root, console):
    root.add_command("child")
    root.action = lambda ctx: ctx
    with console.capture() as capture, pytest.raises(UnknownCommandError):
        root(["nothere"], error_console=console, print_error=True)
    assert 'Unknown command "root nothere".' in capture.get()


def test_runner_framework_warning_once(root, monkeypatch, recwarn):
    monkeypatch.setattr(sys, "argv", ["prog"])
    monkeypatch.setenv("PYTEST_VERSION", "8")
    root.action = lambda ctx: "ran"
    _warn_missing_tokens.cache_clear()

    root()
    root()
    assert len([w for w in recwarn if "invoked without tokens" in str(w.message)]) == 1


def test_runner_console_override_reaches_help_flag(console):
    root = Command("root")
    root.add_flag(help_flag())

    with console.capture() as capture, pytest.raises(SystemExit) as e:
        root(["-h"], console=console)

    assert e.value.code == 0
    assert capture.get().startswith("Usage: root [OPTIONS]")


def test_runner_console_override_reaches_action(console):
    root = Command("root")
    root.add_command("child", action=lambda ctx: ctx.help_print())

    with console.capture() as capture:
        root(["child"], console=console)

    assert capture.get().startswith("Usage: root child")


def test_runner_console_override_is_reset(root, console):
    root.action = lambda ctx: ctx.resolve_console()
    assert root([], console=console) is console
    assert root.resolve_console() is not console
