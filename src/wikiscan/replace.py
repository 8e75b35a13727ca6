# Text replacement that leaves comments and <nowiki> etc. alone
#
# Copyright (c) 2020-2022 Tatu Ylonen.  See file LICENSE and https://ylonen.org

import re
from collections.abc import Sequence
from typing import Optional, Union

from .common import MAGIC_RE_PATTERN
from .logging_utils import logger
from .masking import contains_magic, restore, shield
from .wikihtml import get_verbatim_spans

Replacee = Union[str, re.Pattern]

# Splits shielded text into the pieces between magic characters, keeping
# the magic characters at the odd indices
SEGMENT_SPLIT_RE = re.compile("({})".format(MAGIC_RE_PATTERN))


def _replace_segments(text: str, replacee: Replacee, replacer: str) -> str:
    """Replaces only inside the text between shielded regions, so that no
    match can start before a region and end after it."""
    parts = SEGMENT_SPLIT_RE.split(text)
    for i in range(0, len(parts), 2):
        if isinstance(replacee, re.Pattern):
            parts[i] = replacee.sub(replacer, parts[i])
        else:
            parts[i] = parts[i].replace(replacee, replacer)
    return "".join(parts)


def replace_wikitext(
    wikitext: str,
    replacees: Sequence[Replacee],
    replacers: Union[str, Sequence[str]],
) -> Optional[str]:
    """Replaces strings in wikitext, ignoring those inside tags that
    prevent transclusion (<!-- -->, <nowiki>, <pre>, <syntaxhighlight>,
    <source>).  ``replacees`` may contain plain strings, which are
    replaced everywhere, and compiled regular expressions, which are
    substituted with re.sub() semantics.  Replacements are made in order,
    separately in each stretch of text between such tags, so a match never
    spans a tag.

    ``replacers`` must have as many elements as ``replacees``, except that
    a single string (or a list with a single string) is used for all of
    them.  Returns None without changing anything if the arguments are
    invalid."""
    if not isinstance(wikitext, str):
        logger.error("replace_wikitext: wikitext must be a string")
        return None
    if not isinstance(replacees, (list, tuple)):
        logger.error("replace_wikitext: replacees must be a list")
        return None
    if isinstance(replacers, str):
        replacers_lst = [replacers]
    elif isinstance(replacers, (list, tuple)):
        replacers_lst = list(replacers)
    else:
        logger.error("replace_wikitext: replacers must be a string or a list")
        return None
    if len(replacees) != len(replacers_lst) and len(replacers_lst) == 1:
        replacers_lst = replacers_lst * len(replacees)
    if len(replacees) != len(replacers_lst):
        logger.error(
            "replace_wikitext: replacees and replacers must have the same "
            "number of elements"
        )
        return None
    for replacee, replacer in zip(replacees, replacers_lst):
        if not isinstance(replacee, (str, re.Pattern)) or not isinstance(
            replacer, str
        ):
            logger.error(
                f"replace_wikitext: cannot replace {replacee!r} "
                f"with {replacer!r}"
            )
            return None
    if contains_magic(wikitext) or any(contains_magic(x) for x in replacers_lst):
        logger.warning(
            "replace_wikitext: text contains reserved private use characters"
        )
        return None

    spans = get_verbatim_spans(wikitext)
    text, saved = shield(
        wikitext, [(span.index.start, span.index.end) for span in spans]
    )
    for replacee, replacer in zip(replacees, replacers_lst):
        if isinstance(replacee, re.Pattern) or replacee:
            text = _replace_segments(text, replacee, replacer)
    return restore(text, saved)
