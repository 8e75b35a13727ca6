# Definitions shared by the template scanner, the tag scanner and the
# scoped substitution code.
#
# Copyright (c) 2020-2022 Tatu Ylonen.  See file LICENSE and https://ylonen.org

import re

# Character range used for marking magic sequences.  This package
# assumes that these characters do not occur on Wikitext pages.  These
# characters are in the Unicode private use area U+100000..U+10FFFF.
# Magic characters stand in for verbatim regions while the text around
# them is being rewritten.
MAGIC_FIRST: int = 0x0010203D
MAGIC_LAST: int = 0x0010FFF0
MAX_MAGICS = MAGIC_LAST - MAGIC_FIRST + 1

MAGIC_RE_PATTERN = r"[{:c}-{:c}]".format(MAGIC_FIRST, MAGIC_LAST)
MAGIC_RE: re.Pattern[str] = re.compile(MAGIC_RE_PATTERN)

# Name used for <!-- ... --> spans
COMMENT_TAG = "comment"

# Tags inside which templates are not transcluded.  Text inside these is
# never interpreted by the scanners.
VERBATIM_TAGS: frozenset[str] = frozenset(
    [
        COMMENT_TAG,
        "nowiki",
        "pre",
        "syntaxhighlight",
        "source",
    ]
)

# Generic HTML-like tags.  Only ASCII letters are accepted in tag names.
OPENING_TAG_RE = re.compile(r"<!--|<([a-z]+) ?[^/>]*?>", re.IGNORECASE)
CLOSING_TAG_RE = re.compile(r"-->|</([a-z]+) ?[^>]*?>", re.IGNORECASE)
SELFCLOSING_TAG_RE = re.compile(r"<([a-z]+) ?[^>]*?/>", re.IGNORECASE)

_verbatim_names = "|".join(
    sorted(x for x in VERBATIM_TAGS if x != COMMENT_TAG)
)
# Start and end of a verbatim region, as seen by the template scanner.
# <nowiki/> and friends do not open a region.
VERBATIM_OPEN_RE = re.compile(
    r"<!--|<(" + _verbatim_names + r")\b ?[^>]*?(?<!/)>", re.IGNORECASE
)
VERBATIM_CLOSE_RE = re.compile(
    r"-->|</(" + _verbatim_names + r")\b ?[^>]*?>", re.IGNORECASE
)

# The {{=}} magic word, used to write a literal "=" in template arguments.
# Whitespace around the equals sign is tolerated.
ESCAPED_EQUALS_RE = re.compile(r"\{\{\s*=\s*\}\}")


def tag_name(m: re.Match[str]) -> str:
    """Returns the lower-cased tag name of a tag pattern match, or
    COMMENT_TAG for the comment delimiters."""
    name = m.group(1)
    if name is None:
        return COMMENT_TAG
    return name.lower()
