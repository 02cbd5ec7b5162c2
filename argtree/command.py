import os
import sys
from collections.abc import Callable, Iterable, Iterator
from functools import lru_cache
from typing import TYPE_CHECKING, Any, Optional, TypeVar, Union

from attrs import define, field

from argtree.exceptions import ArgtreeError, CommandCollisionError, CommandTreeError
from argtree.utils import normalize_tokens
from argtree.value import Kind, Settable

if TYPE_CHECKING:
    from rich.console import Console

Action = Callable[["Command"], Any]
"""Invoked with the active context, i.e. the last command parsed."""

V = TypeVar("V")


@define(eq=False)
class Flag:
    """A named option attached to a :class:`Command`.

    Flags are inherited by subcommands unless a subcommand declares a flag with the same name.
    """

    name: str = ""
    """Unprefixed long form, e.g. ``"help"`` matches ``--help``."""

    short: str = field(default="", kw_only=True)
    """Optional single-character short form, e.g. ``"h"`` matches ``-h``."""

    help: str = field(default="", kw_only=True)

    placeholder: str = field(default="", kw_only=True)
    """Name of the flag's value in usage text. Defaults to ``VALUE``."""

    hidden: bool = field(default=False, kw_only=True)
    """Omit the flag from usage text."""

    required: bool = field(default=False, kw_only=True)

    pre_action: Action | None = field(default=None, kw_only=True)
    """Invoked after parsing, but before values are set, even if parsing failed.

    Pre-actions run in the order their flags were first encountered.
    """

    value: Settable | None = field(default=None, kw_only=True)
    """Backing value. If :obj:`None`, the flag is a marker that neither consumes nor allows a value."""

    def __attrs_post_init__(self):
        if not self.name and not self.short:
            raise CommandTreeError("Flags may not be anonymous; provide a name or a short.")
        if self.name.startswith("-"):
            raise CommandTreeError(f'Flag name "{self.name}" must not include leading hyphens.')
        if "=" in self.name:
            raise CommandTreeError(f'Flag name "{self.name}" must not contain "=".')
        if self.short and (len(self.short) != 1 or self.short == "-"):
            raise CommandTreeError(f'Short flag "{self.short}" must be a single character other than "-".')

    @property
    def display_name(self) -> str:
        return f"--{self.name}" if self.name else f"-{self.short}"

    @property
    def names(self) -> tuple[str, ...]:
        """All command-line spellings of this flag, long form first."""
        names = []
        if self.name:
            names.append(f"--{self.name}")
        if self.short:
            names.append(f"-{self.short}")
        return tuple(names)

    @property
    def is_boolean(self) -> bool:
        return self.value is not None and self.value.kind is Kind.BOOLEAN


@define(eq=False)
class Arg:
    """A positional argument attached to a :class:`Command`."""

    name: str
    """Name displayed in help and errors."""

    help: str = field(default="", kw_only=True)

    required: bool = field(default=False, kw_only=True)

    pre_action: Action | None = field(default=None, kw_only=True)

    value: Settable | None = field(default=None, kw_only=True)
    """Backing value. If :obj:`None`, the matching token is accepted and discarded."""

    @property
    def is_aggregate(self) -> bool:
        return self.value is not None and self.value.kind is Kind.AGGREGATE


@define(eq=False)
class Command:
    """A node in the command tree.

    A command can serve as an application entry point, a command group, or both.
    For example, in the command line ``git remote add``, ``git`` is the root command,
    ``remote`` is a subcommand of ``git``, and ``add`` is a subcommand of ``remote``.

    Runner settings (``console``, ``print_error``, ...) left as :obj:`None` are
    inherited from the nearest ancestor that sets them.
    """

    name: str = ""

    help: str = field(default="", kw_only=True)

    hidden: bool = field(default=False, kw_only=True)
    """Omit the command from usage text."""

    pre_action: Action | None = field(default=None, kw_only=True)
    """Invoked after parsing, but before values are set, if this command was selected on the command line."""

    action: Action | None = field(default=None, kw_only=True)
    """Invoked after a successful parse; only the active context's action runs."""

    check_required: bool = field(default=True, kw_only=True)
    """Raise on missing required flags and arguments while this command is the active context.

    Disable for commands that must run on an otherwise incomplete command line, like :func:`~argtree.help_command`.
    """

    labels: dict[str, str] = field(factory=dict, kw_only=True)
    """Client-defined labels for grouping and processing commands."""

    console: Optional["Console"] = field(default=None, kw_only=True)
    """Console to print help and runtime errors to."""

    error_console: Optional["Console"] = field(default=None, kw_only=True)
    """Console to print errors to. Defaults to a stderr version of :attr:`console`."""

    print_error: bool | None = field(default=None, kw_only=True)
    """Print a rich-formatted error on error. Defaults to :obj:`True`."""

    exit_on_error: bool | None = field(default=None, kw_only=True)
    """Invoke ``sys.exit(1)`` on error instead of raising. Defaults to :obj:`True`."""

    help_on_error: bool | None = field(default=None, kw_only=True)
    """Print the help-page before printing an error. Defaults to :obj:`False`."""

    verbose: bool | None = field(default=None, kw_only=True)
    """Populate exception strings with information intended for developers. Defaults to :obj:`False`."""

    _parent: Optional["Command"] = field(default=None, init=False, repr=False)
    _commands: list["Command"] = field(factory=list, init=False, repr=False)
    _flags: list[Flag] = field(factory=list, init=False, repr=False)
    _args: list[Arg] = field(factory=list, init=False, repr=False)
    # Stack of ``console`` arguments of the __call__s currently running on this command.
    _console_overrides: list[Optional["Console"]] = field(factory=list, init=False, repr=False)

    @property
    def parent(self) -> Optional["Command"]:
        return self._parent

    @property
    def full_name(self) -> str:
        """Space-separated names from the root down to this command."""
        return " ".join(command.name for command in self.ancestors() if command.name)

    @property
    def commands(self) -> tuple["Command", ...]:
        """Immediate children."""
        return tuple(self._commands)

    @property
    def flags(self) -> tuple[Flag, ...]:
        """Flags declared on this command, not including those of its parents."""
        return tuple(self._flags)

    @property
    def args(self) -> tuple[Arg, ...]:
        """Positional arguments declared on this command, not including those of its parents."""
        return tuple(self._args)

    @property
    def full_flags(self) -> tuple[Flag, ...]:
        """Flags visible from this command, ordered parent to child."""
        return tuple(flag for command in self.ancestors() for flag in command._flags)

    def ancestors(self) -> list["Command"]:
        """Command chain from the root down to, and including, this command."""
        chain = []
        command = self
        while command is not None:
            chain.append(command)
            command = command._parent
        chain.reverse()
        return chain

    def __getitem__(self, key: str) -> "Command":
        """Get a subcommand by name."""
        for command in self._commands:
            if command.name == key:
                return command
        raise KeyError(key)

    def __contains__(self, key: str) -> bool:
        return any(command.name == key for command in self._commands)

    def __iter__(self) -> Iterator[str]:
        """Iterate over subcommand names."""
        for command in self._commands:
            yield command.name

    def add_command(self, command: Union["Command", str], **kwargs) -> "Command":
        """Attach a child command.

        Parameters
        ----------
        command: Command | str
            Command to attach, or the name of a new :class:`Command` constructed with ``kwargs``.

        Returns
        -------
        Command
            The attached command.

        Raises
        ------
        CommandTreeError
            The command already has a parent, or attaching it would form a cycle.
        CommandCollisionError
            A sibling with the same name already exists.
        """
        if isinstance(command, str):
            command = Command(command, **kwargs)
        elif kwargs:
            raise TypeError("Keyword arguments are only accepted when adding a command by name.")

        if not command.name:
            raise CommandTreeError("Subcommands must have a name.")
        if command in self.ancestors():
            raise CommandTreeError(f'Cannot add command "{command.name}" to itself or its descendant.')
        if command._parent is not None:
            raise CommandTreeError(f'Command "{command.name}" already belongs to "{command._parent.full_name}".')
        if command.name in self:
            raise CommandCollisionError(f'Command "{command.name}" already registered to "{self.full_name}".')

        command._parent = self
        self._commands.append(command)
        return command

    def add_flag(self, flag: Flag | str = "", **kwargs) -> Flag:
        """Attach a flag, or construct one from ``kwargs``.

        .. code-block:: python

            count = values.Int()
            root.add_flag("count", short="c", value=count, help="Number of repetitions.")

        Raises
        ------
        CommandCollisionError
            This command already declares a flag with the same long or short name.
        """
        if isinstance(flag, str):
            flag = Flag(flag, **kwargs)
        elif kwargs:
            raise TypeError("Keyword arguments are only accepted when adding a flag by name.")

        for existing in self._flags:
            if flag.name and flag.name == existing.name:
                raise CommandCollisionError(f'Flag "--{flag.name}" already registered to "{self.full_name}".')
            if flag.short and flag.short == existing.short:
                raise CommandCollisionError(f'Flag "-{flag.short}" already registered to "{self.full_name}".')

        self._flags.append(flag)
        return flag

    def add_arg(self, arg: Arg | str, **kwargs) -> Arg:
        """Attach a positional argument, or construct one from ``kwargs``.

        Arguments are filled in the order they are added.

        Raises
        ------
        CommandTreeError
            An aggregate argument, which captures all remaining positional tokens, was already added.
        """
        if isinstance(arg, str):
            arg = Arg(arg, **kwargs)
        elif kwargs:
            raise TypeError("Keyword arguments are only accepted when adding an argument by name.")

        if self._args and self._args[-1].is_aggregate:
            raise CommandTreeError(
                f'Cannot add argument "{arg.name}" after aggregate argument "{self._args[-1].name}"; '
                "an aggregate argument must be last."
            )

        self._args.append(arg)
        return arg

    def _resolve(self, attribute: str, fallback: V, override: V | None = None) -> V:
        """Resolve a runner setting, nearest command first."""
        if override is not None:
            return override
        command = self
        while command is not None:
            value = getattr(command, attribute)
            if value is not None:
                return value
            command = command._parent
        return fallback

    def resolve_console(self, override: Optional["Console"] = None) -> "Console":
        """Console for help output.

        Resolution order: ``override``, the ``console`` passed to the running :meth:`__call__`,
        then the nearest command's :attr:`console`.
        """
        command = self
        while override is None and command is not None:
            if command._console_overrides:
                override = command._console_overrides[-1]
            command = command._parent
        console = self._resolve("console", None, override)
        if console is None:
            from rich.console import Console

            console = Console()
        return console

    def resolve_error_console(
        self,
        override: Optional["Console"] = None,
        console: Optional["Console"] = None,
    ) -> "Console":
        """Console for error panels; defaults to a stderr twin of :meth:`resolve_console`."""
        error_console = self._resolve("error_console", None, override)
        if error_console is None:
            from rich.console import Console

            source = self.resolve_console(console)
            error_console = Console(
                stderr=True,
                width=source.width,
                color_system=source.color_system,  # type: ignore[arg-type]
                no_color=source.no_color,
            )
        return error_console

    def parse(self, tokens: None | str | Iterable[str] = None) -> "Command":
        """Interpret tokens, set every value, and return the active context.

        Pre-actions of everything matched are invoked before values are set, even
        if parsing failed, so that e.g. a help flag works alongside malformed input.
        An error raised by a pre-action supersedes the parse error.

        Parameters
        ----------
        tokens: None | str | Iterable[str]
            Either a string, or a list of strings. Defaults to ``sys.argv[1:]``.

        Returns
        -------
        Command
            The last command selected on the command line.

        Raises
        ------
        ArgtreeError
            Parsing or value application failed. Values set before the failure stay set.
        """
        from argtree.bind import apply_values, invoke_pre_actions
        from argtree.parser import Parser

        parser = Parser(self, normalize_tokens(tokens))
        parse_error: ArgtreeError | None = None
        try:
            resolutions = parser.parse()
        except ArgtreeError as e:
            parse_error = e
            resolutions = []

        context = parser.context
        invoke_pre_actions(context, parser.encountered)
        if parse_error is not None:
            raise parse_error

        apply_values(context, resolutions)
        return context

    def help_print(self, console: Optional["Console"] = None) -> None:
        """Print the help page of this command."""
        from argtree.help import help_print

        help_print(self, self.resolve_console(console))

    def __call__(
        self,
        tokens: None | str | Iterable[str] = None,
        *,
        console: Optional["Console"] = None,
        error_console: Optional["Console"] = None,
        print_error: bool | None = None,
        exit_on_error: bool | None = None,
        help_on_error: bool | None = None,
        verbose: bool | None = None,
    ) -> Any:
        """Parse tokens and run the active context's action.

        If the active context has no action, its help page is printed.

        Parameters
        ----------
        tokens: None | str | Iterable[str]
            Either a string, or a list of strings. Defaults to ``sys.argv[1:]``.
        console: ~rich.console.Console
            Console to print help to. Overrides :attr:`console`.
        error_console: ~rich.console.Console
            Console to print errors to. Overrides :attr:`error_console`.
        print_error: bool | None
            Overrides :attr:`print_error`.
        exit_on_error: bool | None
            Overrides :attr:`exit_on_error`.
        help_on_error: bool | None
            Overrides :attr:`help_on_error`.
        verbose: bool | None
            Overrides :attr:`verbose`.

        Returns
        -------
        return_value: Any
            The value the action returns.
        """
        if tokens is None:
            _warn_if_testing(self)

        tokens = normalize_tokens(tokens)

        self._console_overrides.append(console)
        try:
            context = self.parse(tokens)
            if context.action is None:
                context.help_print(console)
                return None
            # Actions may raise ArgtreeError to report a bad command line, too.
            return context.action(context)
        except ArgtreeError as e:
            context = e.command if e.command is not None else self
            e.verbose = context._resolve("verbose", False, verbose)
            e.root_input_tokens = tokens
            if context._resolve("help_on_error", False, help_on_error):
                context.help_print(console)
            if context._resolve("print_error", True, print_error):
                from argtree.panel import error_panel

                context.resolve_error_console(error_console, console).print(error_panel(e))
            if context._resolve("exit_on_error", True, exit_on_error):
                sys.exit(1)
            raise
        finally:
            self._console_overrides.pop()


def _warn_if_testing(command: Command) -> None:
    # PYTEST_VERSION is also set for scripts launched via subprocess from a test.
    if "pytest" in sys.modules and "PYTEST_VERSION" in os.environ:
        _warn_missing_tokens(command.full_name or "root")


@lru_cache  # One warning per command.
def _warn_missing_tokens(name: str) -> None:
    """Flag a command called with no tokens inside a pytest run.

    Tests almost never want to read :obj:`sys.argv`; they should pass ``[]`` explicitly.
    """
    import warnings

    warnings.warn(
        UserWarning(f'Command "{name}" invoked without tokens while running under pytest; pass [] to parse nothing.'),
        stacklevel=4,
    )
