"""Helpers shared across argtree; this module never imports anything else from argtree."""

import functools
import shlex
import sys
from collections.abc import Iterable
from typing import TYPE_CHECKING

# https://threeofwands.com/attra-iv-zero-overhead-frozen-attrs-classes/
if TYPE_CHECKING:
    from attrs import frozen
else:
    from attrs import define

    frozen = functools.partial(define, unsafe_hash=True)


def normalize_tokens(tokens: None | str | Iterable[str]) -> list[str]:
    """Argument strings for a parse; ``None`` reads ``sys.argv[1:]``, a string is split like a shell would."""
    if tokens is None:
        return sys.argv[1:]
    if isinstance(tokens, str):
        return shlex.split(tokens)
    return list(tokens)


def closest_match(word: str, candidates: Iterable[str]) -> str | None:
    """Return the closest candidate to ``word``, or :obj:`None` if nothing is similar enough."""
    import difflib

    close_matches = difflib.get_close_matches(word, list(candidates), n=1, cutoff=0.6)
    return close_matches[0] if close_matches else None
