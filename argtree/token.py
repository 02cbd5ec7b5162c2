from enum import Enum

from argtree.utils import frozen


class TokenType(Enum):
    """Lexical category of a scanned token."""

    EOF = "eof"
    LONG = "long"
    """``--name``; the value is the name without dashes."""

    SHORT = "short"
    """A single character of a ``-abc`` cluster."""

    VALUE = "value"
    """A positional value, or a flag's operand."""

    ASSIGNED = "assigned"
    """Text following ``=`` in ``--name=text``."""

    VERBATIM = "verbatim"
    """The bare ``--`` switch."""


@frozen
class Token:
    """A single unit produced by the :class:`~argtree.scanner.Scanner`."""

    type: TokenType
    value: str = ""

    def __str__(self):
        if self.type is TokenType.LONG:
            return f"--{self.value}"
        elif self.type is TokenType.SHORT:
            return f"-{self.value}"
        elif self.type is TokenType.VERBATIM:
            return "--"
        return self.value


EOF = Token(TokenType.EOF)
