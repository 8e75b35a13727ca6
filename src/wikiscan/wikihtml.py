# Matching of HTML-like tags in wikitext
#
# Copyright (c) 2020-2022 Tatu Ylonen.  See file LICENSE and https://ylonen.org
#
# Wikitext is not well-formed HTML.  Tags are matched with a simple stack
# machine: a closing tag closes the most recently opened tag of the same
# name, and any tags opened after that one which are still open are taken
# to be self-closing (e.g. <br> in "<p>a<br>b</p>").  A closing tag with
# no matching open tag is ignored.  Tags still open at the end of the
# text are self-closing as well.

from collections.abc import Callable, Mapping
from typing import Any, NamedTuple, Optional

from .common import (
    CLOSING_TAG_RE,
    OPENING_TAG_RE,
    SELFCLOSING_TAG_RE,
    VERBATIM_TAGS,
    tag_name,
)
from .logging_utils import logger
from .records import HtmlSpan, SpanIndex
from .utils import merge_config

TagNamePredicate = Callable[[str], bool]
HtmlPredicate = Callable[[HtmlSpan], bool]

DEFAULT_HTML_CONFIG: dict[str, Any] = {
    "name_predicate": None,
    "html_predicate": None,
}


class OpenTag(NamedTuple):
    name: str
    start: int
    selfclosing_end: int  # end of the opening tag itself


def _span(html: str, start: int, end: int, name: str, selfclosing: bool):
    return HtmlSpan(
        text=html[start:end],
        name=name,
        selfclosing=selfclosing,
        index=SpanIndex(start, end),
    )


def _scan_tags(html: str) -> list[HtmlSpan]:
    parsed: list[HtmlSpan] = []
    tags: list[OpenTag] = []  # stack; innermost last

    i = 0
    n = len(html)
    while i < n:
        if html[i] not in "<-":
            i += 1
            continue
        m = SELFCLOSING_TAG_RE.match(html, i)
        if m is not None:
            parsed.append(_span(html, i, m.end(), tag_name(m), True))
            i = m.end()
            continue
        m = OPENING_TAG_RE.match(html, i)
        if m is not None:
            tags.append(OpenTag(tag_name(m), i, m.end()))
            i = m.end()
            continue
        m = CLOSING_TAG_RE.match(html, i)
        if m is None:
            i += 1
            continue
        name = tag_name(m)
        for j in range(len(tags) - 1, -1, -1):
            if tags[j].name == name:
                break
        else:
            logger.debug(f"unmatched closing tag {m.group(0)!r} at {i}")
            i = m.end()
            continue
        opener = tags[j]
        parsed.append(_span(html, opener.start, m.end(), name, False))
        # Tags opened after the matched one were never closed
        for tag in tags[j + 1 :]:
            parsed.append(
                _span(html, tag.start, tag.selfclosing_end, tag.name, True)
            )
        del tags[j:]
        i = m.end()

    for tag in tags:
        parsed.append(
            _span(html, tag.start, tag.selfclosing_end, tag.name, True)
        )
    return parsed


def _set_nestlevels(spans: list[HtmlSpan]) -> list[HtmlSpan]:
    # Nest levels are a property of the whole set, not of the scan order
    spans = sorted(spans, key=lambda x: x.index.start)
    return [
        HtmlSpan(
            text=span.text,
            name=span.name,
            selfclosing=span.selfclosing,
            index=span.index,
            nestlevel=sum(1 for x in spans if x.index.contains(span.index)),
        )
        for span in spans
    ]


def parse_html(
    html: str,
    config: Optional[Mapping[str, Any]] = None,
    *,
    name_predicate: Optional[TagNamePredicate] = None,
    html_predicate: Optional[HtmlPredicate] = None,
) -> list[HtmlSpan]:
    """Finds HTML-like tags in the text and returns their outer HTML,
    ordered by start offset.  Comments are named "comment".  The nest
    level of a span is the number of other spans that strictly contain
    it.  ``name_predicate`` is called with each tag name and
    ``html_predicate`` with each HtmlSpan to filter the result."""
    if not isinstance(html, str):
        raise TypeError(f"html must be a str, not {type(html).__name__}")
    options = merge_config(
        DEFAULT_HTML_CONFIG,
        config,
        {"name_predicate": name_predicate, "html_predicate": html_predicate},
    )

    parsed = _set_nestlevels(_scan_tags(html))
    if callable(options["name_predicate"]):
        parsed = [x for x in parsed if options["name_predicate"](x.name)]
    if callable(options["html_predicate"]):
        parsed = [x for x in parsed if options["html_predicate"](x)]
    return parsed


def get_verbatim_spans(wikitext: str) -> list[HtmlSpan]:
    """Returns the outermost comments and <nowiki>, <pre>,
    <syntaxhighlight> and <source> tags in the text."""
    spans = parse_html(wikitext, name_predicate=lambda x: x in VERBATIM_TAGS)
    return [
        span
        for span in spans
        if not any(x.index.contains(span.index) for x in spans)
    ]


def get_comment_tags(wikitext: str) -> list[str]:
    """Gets the text of comments and <nowiki>, <pre>, <syntaxhighlight>
    and <source> tags, not including those nested inside other such
    tags."""
    return [span.text for span in get_verbatim_spans(wikitext)]
