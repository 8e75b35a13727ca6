# Extraction of template invocations from wikitext
#
# Copyright (c) 2020-2022 Tatu Ylonen.  See file LICENSE and https://ylonen.org
#
# This is a lexical scanner, not a parser.  It tracks brace nesting,
# {{{parameter}}} placeholders and the regions inside comments and
# <nowiki>, <pre>, <syntaxhighlight> and <source> tags in a single pass
# over the text, and reports every outermost {{...}} it finds.  Nested
# templates are found by scanning the inside of each template again.

import re
from collections.abc import Callable, Mapping
from typing import Any, Optional

from .common import VERBATIM_CLOSE_RE, VERBATIM_OPEN_RE, tag_name
from .logging_utils import logger
from .masking import (
    escaped_equals_offsets,
    find_unprotected,
    split_unprotected,
    wikilink_pipes,
)
from .records import ArgumentRecord, TemplateRecord
from .utils import capitalize_first_letter, merge_config

NamePredicate = Callable[[str], bool]
TemplatePredicate = Callable[[TemplateRecord], bool]

# Matches anything that could still contain a template
NESTED_TEMPLATE_RE = re.compile(r"\{\{.*?\}\}", re.DOTALL)

# The template name ends at the first vertical bar or closing brace
TEMPLATE_NAME_END_RE = re.compile(r"[|}]")

DEFAULT_TEMPLATE_CONFIG: dict[str, Any] = {
    "recursive": True,
    "name_predicate": None,
    "template_predicate": None,
}


def parse_template_arguments(
    text: str, protected: Optional[set[int]] = None
) -> list[ArgumentRecord]:
    """Splits the text of one template invocation into its arguments.
    ``protected`` holds the offsets (into ``text``) of vertical bars that
    belong to nested templates and thus do not separate arguments; the
    template scanner computes these.  Vertical bars inside [[links]] and
    equals signs inside {{=}} are recognized here."""
    if not isinstance(text, str):
        raise TypeError(f"text must be a str, not {type(text).__name__}")
    if protected is None:
        protected = set()
    if find_unprotected(text, "|", protected) < 0:
        return []

    inner = text[2:-2]  # Remove braces
    inner_protected = {p - 2 for p in protected} | wikilink_pipes(inner)
    parts = split_unprotected(inner, "|", inner_protected)

    args: list[ArgumentRecord] = []
    unnamed_arg_count = 0
    for _, arg in parts[1:]:  # parts[0] is the template name
        idx = find_unprotected(arg, "=", escaped_equals_offsets(arg))
        if idx >= 0:
            arg_name = arg[:idx].strip()
            arg_value = arg[idx + 1 :].strip()
            # {{foo|a|2=b|c}}: "2=" takes the second position
            if arg_name == str(unnamed_arg_count + 1):
                unnamed_arg_count += 1
        else:
            unnamed_arg_count += 1
            arg_name = str(unnamed_arg_count)
            arg_value = arg.strip()
        args.append(ArgumentRecord(text=arg, name=arg_name, value=arg_value))
    return args


def _template_record(
    text: str, protected: set[int], nestlevel: int
) -> TemplateRecord:
    name = TEMPLATE_NAME_END_RE.split(text[2:], maxsplit=1)[0]
    return TemplateRecord(
        text=text,
        name=capitalize_first_letter(name.strip()),
        arguments=parse_template_arguments(text, protected),
        nestlevel=nestlevel,
    )


def _scan_templates(wikitext: str, nestlevel: int) -> list[TemplateRecord]:
    """Returns the outermost templates in ``wikitext``."""
    parsed: list[TemplateRecord] = []
    # Number of unclosed braces of templates
    num_unclosed = 0
    start = 0
    # Offsets of vertical bars that belong to nested templates
    protected: set[int] = set()
    # Depth of {{{parameter}}} placeholders, and of template braces inside
    # them
    in_parameter = 0
    parameter_braces = 0
    # Stack of open transclusion-preventing tags
    verbatim_tags: list[str] = []

    i = 0
    n = len(wikitext)
    while i < n:
        ch = wikitext[i]
        if in_parameter:
            if wikitext.startswith("}}}", i) and parameter_braces == 0:
                in_parameter -= 1
                i += 3
            elif wikitext.startswith("{{{", i) and not wikitext.startswith(
                "{", i + 3
            ):
                in_parameter += 1
                i += 3
            elif wikitext.startswith("{{", i):
                parameter_braces += 2
                i += 2
            elif wikitext.startswith("}}", i) and parameter_braces > 0:
                parameter_braces -= 2
                i += 2
            else:
                if ch == "|" and num_unclosed > 0:
                    protected.add(i)
                i += 1
            continue

        if verbatim_tags:
            m = VERBATIM_CLOSE_RE.match(wikitext, i)
            if m is not None and tag_name(m) == verbatim_tags[-1]:
                verbatim_tags.pop()
                i = m.end()
                continue
            if ch == "|" and num_unclosed > 0:
                protected.add(i)
            i += 1
            continue

        if wikitext.startswith("{{{", i) and not wikitext.startswith(
            "{", i + 3
        ):
            in_parameter = 1
            parameter_braces = 0
            i += 3
        elif wikitext.startswith("{{", i):
            if num_unclosed == 0:
                start = i
            num_unclosed += 2
            i += 2
        elif wikitext.startswith("}}", i):
            if num_unclosed == 0:
                # Stray closing braces never close anything that follows
                logger.debug(f"unmatched }}}} at offset {i}")
            else:
                if num_unclosed == 2:
                    end = i + 2
                    parsed.append(
                        _template_record(
                            wikitext[start:end],
                            {p - start for p in protected if start <= p < end},
                            nestlevel,
                        )
                    )
                num_unclosed -= 2
            i += 2
        elif ch == "|" and num_unclosed > 2:
            # Inside a nested template
            protected.add(i)
            i += 1
        else:
            m = VERBATIM_OPEN_RE.match(wikitext, i)
            if m is not None:
                verbatim_tags.append(tag_name(m))
                i = m.end()
            else:
                i += 1

    return parsed


def _parse_templates(
    wikitext: str, recursive: bool, nestlevel: int
) -> list[TemplateRecord]:
    # Depth first over an explicit stack: the templates found at one level
    # come first, then everything nested in each of them in turn.
    result: list[TemplateRecord] = []
    stack: list[tuple[str, int]] = [(wikitext, nestlevel)]
    while stack:
        text, level = stack.pop()
        parsed = _scan_templates(text, level)
        result.extend(parsed)
        if not recursive:
            continue
        for template in reversed(parsed):
            inner = template.text[2:-2]
            if NESTED_TEMPLATE_RE.search(inner):
                stack.append((inner, level + 1))
    return result


def parse_templates(
    wikitext: str,
    config: Optional[Mapping[str, Any]] = None,
    *,
    recursive: Optional[bool] = None,
    name_predicate: Optional[NamePredicate] = None,
    template_predicate: Optional[TemplatePredicate] = None,
) -> list[TemplateRecord]:
    """Parses templates in wikitext.  Templates within tags that prevent
    transclusion (<!-- -->, <nowiki>, <pre>, <syntaxhighlight>, <source>)
    are not parsed.

    With ``recursive`` (the default), templates nested in the arguments
    of other templates are returned too, after the templates that
    contain them, with ``nestlevel`` one greater than their container.
    ``name_predicate`` is called with each template name and
    ``template_predicate`` with each TemplateRecord; templates for which
    either returns false are dropped.  The same options may be given in
    the ``config`` mapping; unknown keys are ignored."""
    if not isinstance(wikitext, str):
        raise TypeError(
            f"wikitext must be a str, not {type(wikitext).__name__}"
        )
    options = merge_config(
        DEFAULT_TEMPLATE_CONFIG,
        config,
        {
            "recursive": recursive,
            "name_predicate": name_predicate,
            "template_predicate": template_predicate,
        },
    )

    parsed = _parse_templates(wikitext, bool(options["recursive"]), 0)
    if callable(options["name_predicate"]):
        parsed = [t for t in parsed if options["name_predicate"](t.name)]
    if callable(options["template_predicate"]):
        parsed = [t for t in parsed if options["template_predicate"](t)]
    return parsed
