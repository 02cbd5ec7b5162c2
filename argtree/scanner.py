"""Lexical scanning of raw command-line arguments into :class:`~argtree.token.Token`."""

from collections import deque
from collections.abc import Iterable, Iterator

from argtree.token import EOF, Token, TokenType


class Scanner:
    """Produce one :class:`Token` per call from a sequence of argument strings.

    The scanner keeps two small pieces of state between calls:

    * a single-slot ``buffer`` holding the ``ASSIGNED`` token split off ``--name=value``.
    * the ``remainder`` of a short-flag cluster. ``-abc`` yields ``-a`` and keeps ``"bc"``
      to be read either as more short flags, or as the joined operand of ``-a``.

    Parameters
    ----------
    args: Iterable[str]
        Argument strings, excluding the program name.
    """

    def __init__(self, args: Iterable[str]):
        self._args = deque(args)
        self._buffer: Token | None = None
        self._remainder = ""

    def __repr__(self):
        return f"{type(self).__name__}(args={list(self._args)!r}, buffer={self._buffer!r}, remainder={self._remainder!r})"

    def peek(self) -> Token:
        """Return the next token without consuming it."""
        if self._buffer is not None:
            return self._buffer

        remainder = self._remainder
        arg = self._args[0] if not remainder and self._args else None
        token = self.next()

        # Rewind; peeking never changes what ``next`` returns.
        self._buffer = None
        self._remainder = remainder
        if arg is not None:
            self._args.appendleft(arg)
        return token

    def next(self, verbatim: bool = False) -> Token:
        """Consume and return the next token.

        Parameters
        ----------
        verbatim: bool
            The caller requires a raw value.
            A pending assigned value or cluster remainder is returned first,
            then the next argument string as-is, without lexical interpretation.

        Returns
        -------
        Token
            :data:`~argtree.token.EOF` once all input is consumed.
        """
        if self._buffer is not None:
            token, self._buffer = self._buffer, None
            return Token(TokenType.VALUE, token.value) if verbatim else token

        if verbatim:
            if self._remainder:
                value, self._remainder = self._remainder, ""
                return Token(TokenType.VALUE, value)
            if self._args:
                return Token(TokenType.VALUE, self._args.popleft())
            return EOF

        if self._remainder:
            arg, self._remainder = "-" + self._remainder, ""
        elif self._args:
            arg = self._args.popleft()
        else:
            return EOF

        if arg == "--":
            return Token(TokenType.VERBATIM, arg)

        if arg.startswith("--"):
            name, sep, value = arg[2:].partition("=")
            if sep:
                self._buffer = Token(TokenType.ASSIGNED, value)
            return Token(TokenType.LONG, name)

        if arg.startswith("-") and arg != "-":
            # Indexing a str yields a whole code point, so non-ASCII shorts work.
            self._remainder = arg[2:]
            return Token(TokenType.SHORT, arg[1])

        return Token(TokenType.VALUE, arg)

    def __iter__(self) -> Iterator[Token]:
        while (token := self.next()) is not EOF:
            yield token
