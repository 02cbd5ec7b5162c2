"""Ready-made :class:`~argtree.value.Value` factories for common python types.

Every factory accepts the keyword arguments of :class:`~argtree.value.Value`
(``target`` and ``dest``) to additionally write parsed results elsewhere.

.. code-block:: python

    verbose = values.Bool()
    root.add_flag("verbose", short="v", value=verbose)
    root.parse(["-v"])
    assert verbose.value is True
"""

from datetime import timedelta
from typing import Any

from argtree._convert import _bool, _float, _int, _timedelta, _uint
from argtree.value import Kind, Value

__all__ = [
    "Bool",
    "Duration",
    "Durations",
    "Float",
    "Floats",
    "Int",
    "Ints",
    "NegatedBool",
    "String",
    "Strings",
    "UInt",
    "UInts",
]


def _str(s: str) -> str:
    return s


def _negated_bool(s: str) -> bool:
    return not _bool(s)


def Bool(value: bool = False, **kwargs: Any) -> Value:  # noqa: N802
    """A boolean; usable as a flag without an operand."""
    return Value(_bool, kind=Kind.BOOLEAN, value=value, **kwargs)


def NegatedBool(value: bool = False, **kwargs: Any) -> Value:  # noqa: N802
    """A boolean set to the opposite of what is parsed.

    Mostly useful to explicitly declare a ``--no-<name>`` flag sharing a target with a :func:`Bool`.
    """
    return Value(_negated_bool, kind=Kind.BOOLEAN, value=value, **kwargs)


def String(value: str = "", **kwargs: Any) -> Value:  # noqa: N802
    return Value(_str, value=value, **kwargs)


def Strings(value: list[str] | None = None, **kwargs: Any) -> Value:  # noqa: N802
    return Value(_str, kind=Kind.AGGREGATE, value=value, **kwargs)


def Int(value: int = 0, **kwargs: Any) -> Value:  # noqa: N802
    """An integer; ``0x``, ``0o`` and ``0b`` prefixes are honored."""
    return Value(_int, value=value, **kwargs)


def Ints(value: list[int] | None = None, **kwargs: Any) -> Value:  # noqa: N802
    return Value(_int, kind=Kind.AGGREGATE, value=value, **kwargs)


def UInt(value: int = 0, **kwargs: Any) -> Value:  # noqa: N802
    """A non-negative integer; a leading ``-`` is rejected."""
    return Value(_uint, value=value, **kwargs)


def UInts(value: list[int] | None = None, **kwargs: Any) -> Value:  # noqa: N802
    return Value(_uint, kind=Kind.AGGREGATE, value=value, **kwargs)


def Float(value: float = 0.0, **kwargs: Any) -> Value:  # noqa: N802
    return Value(_float, value=value, **kwargs)


def Floats(value: list[float] | None = None, **kwargs: Any) -> Value:  # noqa: N802
    return Value(_float, kind=Kind.AGGREGATE, value=value, **kwargs)


def Duration(value: timedelta | None = None, **kwargs: Any) -> Value:  # noqa: N802
    """A :class:`~datetime.timedelta` written with units, e.g. ``"1h30m"`` or ``"250ms"``."""
    return Value(_timedelta, value=timedelta() if value is None else value, **kwargs)


def Durations(value: list[timedelta] | None = None, **kwargs: Any) -> Value:  # noqa: N802
    return Value(_timedelta, kind=Kind.AGGREGATE, value=value, **kwargs)
