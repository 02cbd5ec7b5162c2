"""Rich-based usage and help-page rendering.

Rendering reads the command tree; it never parses.
"""

import math
import sys
from collections.abc import Iterable
from pathlib import Path
from typing import TYPE_CHECKING, Any

from attrs import define, field

from argtree.context import ContextView
from argtree.exceptions import UnknownCommandError
from argtree.utils import frozen
from argtree.value import Default, Kind
from argtree.values import Strings

if TYPE_CHECKING:
    from rich.console import Console, ConsoleOptions, RenderResult
    from rich.text import Text

    from argtree.command import Arg, Command, Flag


@frozen(kw_only=True)
class HelpEntry:
    """A single row of a :class:`HelpPanel`."""

    names: tuple[str, ...] = field(default=(), hash=False)
    description: str = ""
    required: bool = False


@define
class HelpPanel:
    """Titled box of :class:`HelpEntry` rows, renderable by a :class:`~rich.console.Console`.

    .. code-block:: text

        ╭─ Options ────────────────────────────────────────────────────────╮
        │ --verbose --no-verbose -v  Print more output.                    │
        │ --count -c VALUE           Number of repetitions. [default: 1]   │
        ╰──────────────────────────────────────────────────────────────────╯
    """

    title: str
    entries: list[HelpEntry] = field(factory=list)

    def __rich_console__(self, console: "Console", options: "ConsoleOptions") -> "RenderResult":
        if not self.entries:
            return

        from rich import box
        from rich.panel import Panel
        from rich.table import Table
        from rich.text import Text

        table = Table.grid(padding=(0, 2, 0, 0))
        table.add_column(style="cyan", max_width=math.ceil(options.max_width * 0.35), overflow="fold")
        table.add_column(overflow="fold")
        for entry in self.entries:
            table.add_row(Text(" ".join(entry.names)), Text(entry.description))

        yield Panel(
            table,
            title=self.title,
            title_align="left",
            box=box.ROUNDED,
            border_style="none",
            expand=True,
            padding=(0, 1),
        )


def _first_line(s: str) -> str:
    return s.strip().split("\n", 1)[0]


def _describe(help: str, required: bool, value: Any) -> str:
    parts = [help.strip()] if help.strip() else []
    if required:
        parts.append("[required]")
    elif isinstance(value, Default) and value.defaults:
        parts.append(f"[default: {', '.join(value.defaults)}]")
    return " ".join(parts)


def _brackets(s: str, optional: bool) -> str:
    return f"[{s}]" if optional else s


def _value_label(flag: "Flag") -> str:
    label = flag.placeholder or "VALUE"
    if flag.value is not None and flag.value.kind is Kind.AGGREGATE:
        label += "..."
    return label


def _arg_label(arg: "Arg") -> str:
    label = arg.name.upper()
    if arg.is_aggregate:
        label += "..."
    return label


def visible_flags(command: "Command") -> list["Flag"]:
    """Non-hidden flags usable from ``command``, sorted by name.

    An ancestor flag is omitted once every one of its names is shadowed by a descendant's flag.
    """
    view = ContextView.of(command)
    flags: list[Flag] = []
    for flag in (*view.flags.values(), *view.shorts.values()):
        if not flag.hidden and flag not in flags:
            flags.append(flag)
    return sorted(flags, key=lambda flag: flag.name or flag.short)


def visible_commands(command: "Command") -> list["Command"]:
    """Non-hidden subcommands, sorted by name."""
    return sorted((child for child in command.commands if not child.hidden), key=lambda child: child.name)


def format_usage(command: "Command") -> "Text":
    """One-line summary, e.g. ``Usage: git remote add [OPTIONS] NAME URL``."""
    from rich.text import Text

    usage = ["Usage:"]

    name = command.full_name
    if not name:
        name = Path(sys.argv[0]).name
    usage.append(name)

    flags = visible_flags(command)
    commands = visible_commands(command)

    if commands:
        usage.append(_brackets("COMMAND", command.action is not None))

    for flag in flags:
        if flag.required:
            usage.append(f"{flag.display_name} {_value_label(flag)}" if flag.value is not None else flag.display_name)

    if any(not flag.required for flag in flags):
        usage.append("[OPTIONS]")

    if not commands:
        # Positional arguments are ordered; everything before the last required one is effectively required.
        args = command.args
        last_required = max((i for i, arg in enumerate(args) if arg.required), default=-1)
        for i, arg in enumerate(args):
            usage.append(_brackets(_arg_label(arg), i > last_required))

    return Text(" ".join(usage) + "\n")


def create_command_help_panel(command: "Command") -> HelpPanel:
    return HelpPanel(
        "Commands",
        [HelpEntry(names=(child.name,), description=_first_line(child.help)) for child in visible_commands(command)],
    )


def create_argument_help_panel(command: "Command") -> HelpPanel:
    return HelpPanel(
        "Arguments",
        [
            HelpEntry(
                names=(_arg_label(arg),),
                description=_describe(arg.help, arg.required, arg.value),
                required=arg.required,
            )
            for arg in command.args
        ],
    )


def create_flag_help_panel(command: "Command") -> HelpPanel:
    flags = visible_flags(command)
    long_names = {flag.name for flag in flags}

    entries = []
    for flag in flags:
        names = []
        if flag.name:
            names.append(f"--{flag.name}")
            if flag.is_boolean and not flag.name.startswith("no-") and f"no-{flag.name}" not in long_names:
                names.append(f"--no-{flag.name}")
        if flag.short:
            names.append(f"-{flag.short}")
        if flag.value is not None and not flag.is_boolean:
            names.append(_value_label(flag))
        entries.append(
            HelpEntry(
                names=tuple(names),
                description=_describe(flag.help, flag.required, flag.value),
                required=flag.required,
            )
        )
    return HelpPanel("Options", entries)


def help_print(command: "Command", console: "Console") -> None:
    """Print usage, description, and the commands/arguments/options of ``command``."""
    from rich.text import Text

    console.print(format_usage(command))
    if command.help.strip():
        console.print(Text(command.help.strip()))
        console.print()

    # Positional arguments of a command with subcommands are never parsed, so they aren't shown.
    if command.commands:
        panels = [create_command_help_panel(command)]
    else:
        panels = [create_argument_help_panel(command)]
    panels.append(create_flag_help_panel(command))

    for panel in panels:
        if panel.entries:
            console.print(panel)


def _exit_with_help(context: "Command") -> None:
    context.help_print()
    sys.exit(0)


def help_flag(name: str = "help", short: str = "h", **kwargs) -> "Flag":
    """Create a standard help flag, printing help for the active context and exiting.

    Attach it to the root command; subcommands inherit it.
    Its pre-action fires even if the rest of the command line is malformed.
    """
    from argtree.command import Flag

    kwargs.setdefault("help", "Display this message and exit.")
    return Flag(name, short=short, pre_action=_exit_with_help, **kwargs)


def _find_command(command: "Command", names: Iterable[str]) -> "Command":
    for name in names:
        if name not in command:
            raise UnknownCommandError(
                name=" ".join(filter(None, (command.full_name, name))),
                candidates=[child.name for child in visible_commands(command)],
                command=command,
            )
        command = command[name]
    return command


def help_command(name: str = "help", **kwargs) -> "Command":
    """Create a standard help command, printing help for a subcommand path of its parent.

    With no arguments, it prints its parent's help.

    .. code-block:: console

        $ git help remote add
    """
    from argtree.command import Command

    path = Strings()

    def action(context: "Command") -> None:
        names = path.value[:]
        path.value.clear()
        parent = context.parent if context.parent is not None else context
        _find_command(parent, names).help_print()

    kwargs.setdefault("help", "Display help for a command.")
    kwargs.setdefault("check_required", False)
    command = Command(name, action=action, **kwargs)
    command.add_arg("command", help="Subcommand path to show help for.", value=path)
    return command
