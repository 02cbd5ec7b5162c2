import re
from datetime import timedelta

_TRUE_STRINGS = frozenset({"yes", "y", "1", "true", "t"})
_FALSE_STRINGS = frozenset({"no", "n", "0", "false", "f"})

_DURATION_UNITS = {
    "ns": 1e-9,
    "us": 1e-6,
    "µs": 1e-6,
    "μs": 1e-6,
    "ms": 1e-3,
    "s": 1.0,
    "m": 60.0,
    "h": 3600.0,
    "d": 86400.0,
    "w": 604800.0,
}

# Longest units first so "ms" isn't read as "m" followed by garbage.
_DURATION_PATTERN = re.compile(
    r"(\d+(?:\.\d*)?|\.\d+)(" + "|".join(sorted(map(re.escape, _DURATION_UNITS), key=len, reverse=True)) + ")"
)


def _bool(s: str) -> bool:
    s = s.lower()
    if s in _FALSE_STRINGS:
        return False
    elif s in _TRUE_STRINGS:
        return True
    else:
        # argtree is a little bit conservative when coercing strings into boolean.
        raise ValueError(f'unable to convert "{s}" into bool')


def _int(s: str) -> int:
    """Parse an integer, honoring ``0x``, ``0o`` and ``0b`` prefixes.

    Surrounding whitespace and digit-group underscores are rejected.
    """
    try:
        if s != s.strip() or "_" in s:
            raise ValueError
        return int(s, 0)
    except ValueError:
        raise ValueError(f'unable to convert "{s}" into int') from None


def _uint(s: str) -> int:
    """Parse a non-negative integer, with the same syntax as :func:`_int`."""
    try:
        value = _int(s)
    except ValueError:
        raise ValueError(f'unable to convert "{s}" into unsigned int') from None
    if value < 0:
        raise ValueError(f'unable to convert "{s}" into unsigned int')
    return value


def _float(s: str) -> float:
    try:
        return float(s)
    except ValueError:
        raise ValueError(f'unable to convert "{s}" into float') from None


def _timedelta(s: str) -> timedelta:
    """Parse a duration string such as ``"1h30m"``, ``"1.5s"`` or ``"-300ms"``."""
    text = s
    negative = False
    if text[:1] in ("-", "+"):
        negative = text[0] == "-"
        text = text[1:]

    if text == "0":
        return timedelta()

    seconds = 0.0
    position = 0
    for match in _DURATION_PATTERN.finditer(text):
        if match.start() != position:
            break
        value, unit = match.groups()
        seconds += float(value) * _DURATION_UNITS[unit]
        position = match.end()

    if not text or position != len(text):
        raise ValueError(f'unable to convert "{s}" into duration')

    if negative:
        seconds = -seconds
    try:
        return timedelta(seconds=seconds)
    except OverflowError:
        raise ValueError(f'unable to convert "{s}" into duration; out of range') from None
