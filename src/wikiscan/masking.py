# Hiding characters from later splitting steps
#
# Copyright (c) 2020-2022 Tatu Ylonen.  See file LICENSE and https://ylonen.org
#
# Two strategies are used.  Pipes and equals signs that must not be taken
# as separators are tracked as sets of protected offsets into the original
# text, so nothing is ever written into the text and nothing needs to be
# restored.  Whole regions that must survive a rewrite unchanged are cut
# out by offset and replaced by magic characters, then put back.

from collections.abc import Sequence

from .common import ESCAPED_EQUALS_RE, MAGIC_FIRST, MAGIC_RE, MAX_MAGICS


def wikilink_pipes(text: str) -> set[int]:
    """Returns the offsets of vertical bars inside [[...]] links.  File
    links may contain several pipes and other links in their captions;
    all of them are protected.  Pipes after a [[ that is never closed
    are not protected."""
    protected: set[int] = set()
    pending: list[list[int]] = []
    i = 0
    n = len(text)
    while i < n:
        if text.startswith("[[", i):
            pending.append([])
            i += 2
        elif text.startswith("]]", i) and pending:
            pipes = pending.pop()
            if pending:
                pending[-1].extend(pipes)
            else:
                protected.update(pipes)
            i += 2
        else:
            if text[i] == "|" and pending:
                pending[-1].append(i)
            i += 1
    return protected


def escaped_equals_offsets(text: str) -> set[int]:
    """Returns every offset covered by a {{=}} magic word."""
    offsets: set[int] = set()
    for m in ESCAPED_EQUALS_RE.finditer(text):
        offsets.update(range(m.start(), m.end()))
    return offsets


def split_unprotected(
    text: str, sep: str, protected: set[int]
) -> list[tuple[int, str]]:
    """Splits ``text`` on the single character ``sep``, ignoring
    occurrences at protected offsets.  Returns (offset, part) pairs."""
    assert len(sep) == 1
    parts: list[tuple[int, str]] = []
    start = 0
    for i, ch in enumerate(text):
        if ch == sep and i not in protected:
            parts.append((start, text[start:i]))
            start = i + 1
    parts.append((start, text[start:]))
    return parts


def find_unprotected(
    text: str, char: str, protected: set[int], offset: int = 0
) -> int:
    """Like ``str.find()``, but skips protected offsets.  ``offset`` is the
    position of ``text`` within the string the offsets refer to."""
    i = text.find(char)
    while i >= 0 and offset + i in protected:
        i = text.find(char, i + 1)
    return i


def shield(
    text: str, spans: Sequence[tuple[int, int]]
) -> tuple[str, list[str]]:
    """Replaces each (start, end) span of ``text`` by its own magic
    character.  Spans must be sorted and must not overlap.  Returns the
    shielded text and the removed span texts, indexed by magic character."""
    assert len(spans) <= MAX_MAGICS
    parts: list[str] = []
    saved: list[str] = []
    pos = 0
    for start, end in spans:
        assert pos <= start <= end
        parts.append(text[pos:start])
        parts.append(chr(MAGIC_FIRST + len(saved)))
        saved.append(text[start:end])
        pos = end
    parts.append(text[pos:])
    return "".join(parts), saved


def restore(text: str, saved: Sequence[str]) -> str:
    """Puts back the spans removed by shield()."""

    def _magic_repl(m) -> str:
        idx = ord(m.group(0)) - MAGIC_FIRST
        if idx < len(saved):
            return saved[idx]
        return m.group(0)

    return MAGIC_RE.sub(_magic_repl, text)


def contains_magic(text: str) -> bool:
    return MAGIC_RE.search(text) is not None
