from collections.abc import Callable, MutableMapping
from enum import Enum
from typing import Any, Protocol, runtime_checkable

from attrs import define, field


class Kind(Enum):
    """Parsing capabilities of a :class:`Value`."""

    PLAIN = "plain"
    """Consumes exactly one token; later occurrences overwrite earlier ones."""

    BOOLEAN = "boolean"
    """Satisfied by presence alone; flags also get a ``--no-`` form."""

    AGGREGATE = "aggregate"
    """May be set many times, accumulating. A positional aggregate captures the rest."""


@runtime_checkable
class Settable(Protocol):
    """Anything the parser can feed raw strings into."""

    @property
    def kind(self) -> Kind: ...

    def set(self, raw: str) -> None: ...


@define
class Value:
    """A single typed setting, parsed from strings.

    The parsed result lives in :attr:`value`. If a ``target`` is provided,
    every successful :meth:`set` also writes the result to ``target.dest``
    (or ``target[dest]`` for mappings).
    """

    converter: Callable[[str], Any]
    """Converts a raw string into a python object. Raises :exc:`ValueError` on bad input."""

    kind: Kind = field(default=Kind.PLAIN, kw_only=True)

    value: Any = field(default=None, kw_only=True)
    """Current value. Aggregates start out as an empty list."""

    target: Any = field(default=None, kw_only=True, repr=False)

    dest: str | None = field(default=None, kw_only=True)

    def __attrs_post_init__(self):
        if self.target is not None and not self.dest:
            raise ValueError("A Value bound to a target requires a dest.")
        if self.kind is Kind.AGGREGATE and self.value is None:
            self.value = []

    @property
    def is_boolean(self) -> bool:
        return self.kind is Kind.BOOLEAN

    @property
    def is_aggregate(self) -> bool:
        return self.kind is Kind.AGGREGATE

    def set(self, raw: str) -> None:
        converted = self.converter(raw)
        if self.is_aggregate:
            self.value.append(converted)
        else:
            self.value = converted
        self._write()

    def _write(self):
        if self.target is None:
            return
        assert self.dest is not None
        if isinstance(self.target, MutableMapping):
            self.target[self.dest] = self.value
        else:
            setattr(self.target, self.dest, self.value)


@define
class Default:
    """Decorates a value with fallback strings, applied if nothing on the command line reached it.

    Multiple fallbacks are only allowed for aggregate values.
    """

    inner: Settable
    defaults: tuple[str, ...] = field(default=(), converter=tuple)

    def __attrs_post_init__(self):
        if len(self.defaults) > 1 and self.inner.kind is not Kind.AGGREGATE:
            raise ValueError("Only aggregate values may have multiple defaults.")

    @property
    def kind(self) -> Kind:
        return self.inner.kind

    @property
    def is_boolean(self) -> bool:
        return self.inner.kind is Kind.BOOLEAN

    @property
    def is_aggregate(self) -> bool:
        return self.inner.kind is Kind.AGGREGATE

    @property
    def value(self) -> Any:
        return getattr(self.inner, "value", None)

    def set(self, raw: str) -> None:
        self.inner.set(raw)

    def apply_default(self) -> None:
        """Set each fallback string in order, stopping at the first failure."""
        for default in self.defaults:
            self.inner.set(default)


def with_default(value: Settable, *defaults: str) -> Default:
    """Wrap ``value`` with string default(s), applied after parsing if it was left unset."""
    return Default(value, defaults)
