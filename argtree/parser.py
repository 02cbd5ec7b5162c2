"""Resolve a token stream against a live command tree."""

from collections.abc import Iterable
from typing import TYPE_CHECKING, Union

from argtree._convert import _bool
from argtree.context import ContextView
from argtree.exceptions import (
    InvalidValueError,
    MissingOperandError,
    UnexpectedArgumentError,
    UnknownCommandError,
    UnknownFlagError,
    ValueNotSettableError,
)
from argtree.scanner import Scanner
from argtree.token import Token, TokenType
from argtree.utils import frozen

if TYPE_CHECKING:
    from argtree.command import Arg, Command, Flag

Entity = Union["Command", "Flag", "Arg"]


@frozen
class Resolution:
    """A flag or argument matched on the command line, along with its raw value."""

    entity: Union["Flag", "Arg"]

    token: Token
    """Token that matched ``entity``."""

    value: str | None
    """Raw string to set. :obj:`None` for marker flags."""

    @property
    def name(self) -> str:
        """How the entity is referred to in error messages."""
        if self.token.type in (TokenType.LONG, TokenType.SHORT):
            return str(self.token)
        return self.entity.name


class Parser:
    """Multi-phase command-line parser.

    Parsers are stateful and single-use.

    Parameters
    ----------
    root: Command
        Initial context.
    args: Iterable[str]
        Argument strings, excluding the program name.
    """

    def __init__(self, root: "Command", args: Iterable[str]):
        self.scanner = Scanner(args)
        self.view = ContextView.of(root)
        self.resolutions: list[Resolution] = []
        self.encountered: list[Entity] = []
        """Matched commands, flags and arguments, each once, in the order first seen."""
        self._verbatim = False
        self._consumed = False

    @property
    def context(self) -> "Command":
        """Most recent command selected by the parser. Never :obj:`None`."""
        return self.view.command

    def parse(self) -> list[Resolution]:
        """Consume every token.

        Returns
        -------
        list[Resolution]
            Every matched flag and argument, in encounter order.

        Raises
        ------
        ArgtreeError
            On the first unknown flag or command, missing operand, or excess argument.
        """
        if self._consumed:
            raise RuntimeError("Parsers are single-use.")
        self._consumed = True

        while True:
            token = self.scanner.next(self._verbatim)
            if token.type is TokenType.EOF:
                return self.resolutions
            elif token.type is TokenType.VERBATIM:
                self._verbatim = True
            elif token.type is TokenType.LONG:
                self._parse_long(token)
            elif token.type is TokenType.SHORT:
                self._parse_short(token)
            else:
                self._parse_value(token)

    def _parse_long(self, token: Token):
        name = token.value
        negated = False
        flag = self.view.flags.get(name)
        if flag is None and name.startswith("no-"):
            # This may be a boolean flag; try its negated form.
            flag = self.view.flags.get(name[3:])
            negated = True
        if flag is None or (negated and not flag.is_boolean):
            raise UnknownFlagError(token=token, candidates=self.view.flag_names(), command=self.context)

        self._encounter(flag)
        assigned = self._assigned()

        if flag.value is None:
            if assigned is not None:
                raise ValueNotSettableError(token=token, value=assigned, command=self.context)
            self._resolve(flag, token, None)
        elif flag.is_boolean:
            if assigned is None:
                value = "false" if negated else "true"
            elif negated:
                value = self._negate(token, assigned)
            else:
                value = assigned
            self._resolve(flag, token, value)
        elif assigned is not None:
            self._resolve(flag, token, assigned)
        else:
            self._resolve(flag, token, self._operand(token))

    def _parse_short(self, token: Token):
        flag = self.view.shorts.get(token.value)
        if flag is None:
            raise UnknownFlagError(token=token, candidates=self.view.flag_names(), command=self.context)

        self._encounter(flag)
        # Booleans and markers leave the rest of a cluster to be read as more short flags.
        if flag.value is None:
            self._resolve(flag, token, None)
        elif flag.is_boolean:
            self._resolve(flag, token, "true")
        else:
            self._resolve(flag, token, self._operand(token))

    def _parse_value(self, token: Token):
        # Commands take precedence over positional arguments.
        if self.view.has_commands:
            command = self.view.commands.get(token.value)
            if command is None:
                raise UnknownCommandError(
                    name=" ".join(filter(None, (self.context.full_name, token.value))),
                    candidates=self.view.command_names(),
                    command=self.context,
                )
            # Any unfilled arguments of the previous context are abandoned.
            self.view = ContextView.of(command)
            self._encounter(command)
            return

        try:
            arg, self.view = self.view.consume_arg()
        except IndexError:
            raise UnexpectedArgumentError(value=token.value, command=self.context) from None
        self._encounter(arg)
        self._resolve(arg, token, token.value)

    def _assigned(self) -> str | None:
        """Consume an ``=value`` attached to the preceding long flag, if any."""
        if self.scanner.peek().type is TokenType.ASSIGNED:
            return self.scanner.next(verbatim=True).value
        return None

    def _operand(self, token: Token) -> str:
        operand = self.scanner.next(verbatim=True)
        if operand.type is TokenType.EOF:
            raise MissingOperandError(token=token, command=self.context)
        return operand.value

    def _negate(self, token: Token, value: str) -> str:
        try:
            return "false" if _bool(value) else "true"
        except ValueError as e:
            raise InvalidValueError(name=str(token), value=value, command=self.context) from e

    def _encounter(self, entity: Entity):
        if entity not in self.encountered:
            self.encountered.append(entity)

    def _resolve(self, entity: Union["Flag", "Arg"], token: Token, value: str | None):
        self.resolutions.append(Resolution(entity, token, value))
