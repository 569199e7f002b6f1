"""Regex patterns shared by every rule and layer.

Patterns compile at construction. A bad expression raises PatternError
immediately instead of quietly matching nothing.

Layer patterns are also turned into *fragments* (anchors stripped) and
re-wrapped so they match at a path-segment boundary anywhere in a path.
A fragment ``domain`` then covers ``domain``, ``domain/entities`` and
``example.com/shop/domain`` but not ``mydomain``.
"""

from __future__ import annotations

import re
from typing import Iterable, Optional

from ..exceptions import PatternError

_INLINE_FLAGS = re.compile(r"\(\?([aiLmsux]+)\)")


class Pattern:
    """A compiled regular expression plus the text it came from.

    Matching is unanchored (``re.search``); anchors in the source text
    decide whether the whole candidate must match.
    """

    __slots__ = ("source", "_regex")

    def __init__(self, source: str, role: Optional[str] = None) -> None:
        try:
            self._regex = re.compile(source)
        except re.error as e:
            raise PatternError(source, str(e), role=role) from e
        self.source = source

    def matches(self, candidate: str) -> bool:
        return self._regex.search(candidate) is not None

    def __eq__(self, other: object) -> bool:
        if isinstance(other, Pattern):
            return self.source == other.source
        return NotImplemented

    def __hash__(self) -> int:
        return hash(self.source)

    def __repr__(self) -> str:
        return f"Pattern({self.source!r})"

    def __str__(self) -> str:
        return self.source


def split_inline_flags(pattern: str) -> tuple[str, str]:
    """Separate leading global flag groups such as ``(?i)`` from the rest.

    >>> split_inline_flags("(?i)(?s)^domain$")
    ('is', '^domain$')
    """
    flags = ""
    match = _INLINE_FLAGS.match(pattern)
    while match:
        flags += match.group(1)
        pattern = pattern[match.end():]
        match = _INLINE_FLAGS.match(pattern)
    return "".join(dict.fromkeys(flags)), pattern


def scope_flags(flags: str, body: str) -> str:
    """Re-apply lifted global flags as a scoped group so ``body`` can be embedded."""
    if not flags:
        return body
    return f"(?{flags}:{body})"


def strip_anchors(pattern: str) -> str:
    """Turn a layer pattern into a fragment: drop one leading ``^`` and one trailing ``$``.

    Leading global flags are kept, scoped to the fragment.
    """
    flags, pattern = split_inline_flags(pattern)
    if pattern.startswith("^"):
        pattern = pattern[1:]
    if pattern.endswith("$") and not pattern.endswith("\\$"):
        pattern = pattern[:-1]
    return scope_flags(flags, pattern)


def segment_suffix_pattern(pattern: str) -> str:
    """Match paths ending in the fragment of ``pattern`` or nested beneath it.

    >>> segment_suffix_pattern("^utils$")
    '(?:^|/)(?:utils)(?:/.*)?$'
    """
    return f"(?:^|/)(?:{strip_anchors(pattern)})(?:/.*)?$"


def any_of(patterns: Iterable[str]) -> str:
    """Alternation of several expressions, each kept in its own group."""
    return "|".join(f"(?:{p})" for p in patterns)


def layer_path_pattern(patterns: Iterable[str]) -> str:
    """Segment-suffix alternation over every pattern of a layer."""
    return any_of(segment_suffix_pattern(p) for p in patterns)


def scoped_struct_pattern(layer_patterns: Iterable[str], struct_pattern: str) -> str:
    """Restrict ``struct_pattern`` to structs whose package belongs to a layer.

    The result matches qualified struct names ``<package path>.<Name>``.
    A pattern that already starts with ``^`` is treated as pre-scoped and
    returned unchanged.
    """
    flags, body = split_inline_flags(struct_pattern)
    if body.startswith("^"):
        return struct_pattern
    struct_fragment = scope_flags(flags, body)
    scoped = [
        f"^(?:.*/)?(?:{strip_anchors(p)})(?:/[^.]*)?\\.(?:{struct_fragment})"
        for p in layer_patterns
    ]
    return "(?:" + "|".join(scoped) + ")"
