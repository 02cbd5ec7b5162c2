import pytest

from argtree import EOF, Scanner, Token, TokenType

LONG, SHORT, VALUE, ASSIGNED, VERBATIM = (
    TokenType.LONG,
    TokenType.SHORT,
    TokenType.VALUE,
    TokenType.ASSIGNED,
    TokenType.VERBATIM,
)


@pytest.mark.parametrize(
    "args, expected",
    [
        ([], []),
        (["--foo"], [(LONG, "foo")]),
        (
            ["--one", "--two", "--", "--three"],
            [(LONG, "one"), (LONG, "two"), (VERBATIM, "--"), (LONG, "three")],
        ),
        (["-1"], [(SHORT, "1")]),
        (
            ["-ab", "-", "-c"],
            [(SHORT, "a"), (SHORT, "b"), (VALUE, "-"), (SHORT, "c")],
        ),
        (
            ["--one", "arg1", "-2", "arg2"],
            [(LONG, "one"), (VALUE, "arg1"), (SHORT, "2"), (VALUE, "arg2")],
        ),
        (
            ["--one=arg", "--two=--"],
            [(LONG, "one"), (ASSIGNED, "arg"), (LONG, "two"), (ASSIGNED, "--")],
        ),
        (["--flag="], [(LONG, "flag"), (ASSIGNED, "")]),
        (["--a=b=c"], [(LONG, "a"), (ASSIGNED, "b=c")]),
        (["-äb"], [(SHORT, "ä"), (SHORT, "b")]),
        (["foo", "bar"], [(VALUE, "foo"), (VALUE, "bar")]),
    ],
)
def test_scanner_tokens(args, expected):
    assert list(Scanner(args)) == [Token(type_, value) for type_, value in expected]


@pytest.mark.parametrize(
    "args, skip_first, expected",
    [
        ([], False, []),
        (["--one", "--two", "--", "--three"], False, ["--one", "--two", "--", "--three"]),
        (["-1", "-", "-two"], False, ["-1", "-", "-two"]),
        (["-123"], True, ["23"]),
        (["--one=arg"], True, ["arg"]),
        (["--flag="], True, [""]),
    ],
)
def test_scanner_verbatim(args, skip_first, expected):
    scanner = Scanner(args)
    if skip_first:
        scanner.next()

    actual = []
    while (token := scanner.next(verbatim=True)) is not EOF:
        assert token.type is VALUE
        actual.append(token.value)

    assert actual == expected


def test_scanner_eof_repeats():
    scanner = Scanner([])
    assert scanner.next() is EOF
    assert scanner.next() is EOF
    assert scanner.next(verbatim=True) is EOF


def test_scanner_peek_does_not_consume():
    scanner = Scanner(["-ab", "--c=d", "e"])

    assert scanner.peek() == Token(SHORT, "a")
    assert scanner.peek() == Token(SHORT, "a")
    assert scanner.next() == Token(SHORT, "a")

    assert scanner.peek() == Token(SHORT, "b")
    assert scanner.next() == Token(SHORT, "b")

    assert scanner.peek() == Token(LONG, "c")
    assert scanner.next() == Token(LONG, "c")

    assert scanner.peek() == Token(ASSIGNED, "d")
    assert scanner.next() == Token(ASSIGNED, "d")

    assert scanner.peek() == Token(VALUE, "e")
    assert scanner.next() == Token(VALUE, "e")

    assert scanner.peek() is EOF
    assert scanner.next() is EOF


def test_scanner_peek_then_verbatim_remainder():
    scanner = Scanner(["-i27"])
    assert scanner.next() == Token(SHORT, "i")
    assert scanner.peek() == Token(SHORT, "2")
    assert scanner.next(verbatim=True) == Token(VALUE, "27")


@pytest.mark.parametrize(
    "token, expected",
    [
        (Token(LONG, "foo"), "--foo"),
        (Token(SHORT, "f"), "-f"),
        (Token(VERBATIM, "--"), "--"),
        (Token(VALUE, "bar"), "bar"),
        (Token(ASSIGNED, "baz"), "baz"),
    ],
)
def test_token_str(token, expected):
    assert str(token) == expected
