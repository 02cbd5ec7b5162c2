from collections.abc import Sequence
from typing import TYPE_CHECKING, Optional, Union

from attrs import define, field

from argtree.token import Token
from argtree.utils import closest_match

if TYPE_CHECKING:
    from argtree.command import Arg, Command, Flag


__all__ = [
    "ArgtreeError",
    "CommandCollisionError",
    "CommandTreeError",
    "InvalidValueError",
    "MissingOperandError",
    "MissingRequiredError",
    "UnexpectedArgumentError",
    "UnknownCommandError",
    "UnknownFlagError",
    "ValueNotSettableError",
]


class CommandTreeError(Exception):
    """The command tree was assembled incorrectly.

    For example, a command was given two parents, or a flag has neither a long nor a short name.
    """

    # This doesn't derive from ArgtreeError since this is a developer error
    # rather than a runtime error.


class CommandCollisionError(Exception):
    """A command, or flag, with the same name has already been registered."""


@define
class ArgtreeError(Exception):
    """Root exception for runtime parsing errors.

    As ArgtreeErrors bubble up to :meth:`.Command.__call__`, more information is added to it.
    Subclasses describe themselves through :meth:`response`.
    """

    msg: str | None = None
    """
    If set, override automatic message generation.
    """

    verbose: bool = False
    """
    More verbose error messages; aimed towards developers debugging their application.
    """

    root_input_tokens: list[str] | None = None
    """
    The CLI tokens that were initially fed into the root :class:`.Command`.
    """

    command: Optional["Command"] = field(default=None, kw_only=True)
    """
    Active context when the error occurred.
    """

    def __str__(self):
        if self.msg is not None:
            return self.msg

        strings = []
        if self.verbose:
            strings.append(type(self).__name__)
            if self.command is not None:
                strings.append(f'Context: "{self.command.full_name}"')
            if self.root_input_tokens is not None:
                strings.append(f"Root Input Tokens: {self.root_input_tokens}")
        if response := self.response():
            strings.append(response)
        return "\n".join(strings)

    def response(self) -> str:
        """End-user description of the error."""
        return ""


@define(kw_only=True)
class UnknownFlagError(ArgtreeError):
    """Unknown/unregistered flag provided by the cli.

    A nearest-neighbor flag suggestion may be printed.
    """

    token: Token
    """Token without a matching flag."""

    candidates: Sequence[str] = ()
    """Flags (e.g. ``"--verbose"``, ``"-v"``) that were visible in the active context."""

    def response(self) -> str:
        response = f'Unknown flag: "{self.token}".'
        if suggestion := closest_match(str(self.token), self.candidates):
            response += f' Did you mean "{suggestion}"?'
        return response


@define(kw_only=True)
class UnknownCommandError(ArgtreeError):
    """CLI token did not name a subcommand of the active context."""

    name: str
    """Fully qualified attempted command, e.g. ``"root nothere"``."""

    candidates: Sequence[str] = ()
    """Visible subcommand names of the active context."""

    def response(self) -> str:
        response = f'Unknown command "{self.name}".'

        attempted = self.name.rsplit(" ", 1)[-1]
        if suggestion := closest_match(attempted, self.candidates):
            response += f' Did you mean "{suggestion}"?'

        # List a few siblings; a mistyped path is often a forgotten parent command.
        max_commands = 8
        if self.candidates:
            if len(self.candidates) > max_commands:
                response += f" Available commands: {', '.join(self.candidates[:max_commands])}, ..."
            else:
                response += f" Available commands: {', '.join(self.candidates)}."

        return response


@define(kw_only=True)
class MissingOperandError(ArgtreeError):
    """A flag requiring a value was the last token."""

    token: Token

    def response(self) -> str:
        return f'Flag "{self.token}" requires a value.'


@define(kw_only=True)
class InvalidValueError(ArgtreeError):
    """A value could not be converted from its string form.

    The underlying conversion error is available as ``__cause__``.
    """

    name: str
    """Flag as written on the command line (``"--int"``, ``"-i"``), or positional argument name."""

    value: str
    """Raw string that failed conversion."""

    def response(self) -> str:
        response = f'Invalid value "{self.value}" for "{self.name}"'
        if self.__cause__ is not None and str(self.__cause__):
            return response + f": {self.__cause__}."
        return response + "."


@define(kw_only=True)
class UnexpectedArgumentError(ArgtreeError):
    """A positional token arrived after all positional arguments were filled."""

    value: str

    def response(self) -> str:
        return f'Unexpected argument: "{self.value}".'


@define(kw_only=True)
class MissingRequiredError(ArgtreeError):
    """A required flag or argument was not provided."""

    entity: Union["Flag", "Arg"]

    def response(self) -> str:
        from argtree.command import Flag

        if isinstance(self.entity, Flag):
            return f'Missing required flag "{self.entity.display_name}".'
        return f'Missing required argument "{self.entity.name}".'


@define(kw_only=True)
class ValueNotSettableError(ArgtreeError):
    """An explicit value was supplied to a flag that doesn't take one."""

    token: Token
    value: str

    def response(self) -> str:
        return f'Flag "{self.token}" does not accept a value; got "{self.value}".'
