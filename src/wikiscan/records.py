# Records returned by the scanners
#
# Copyright (c) 2020-2022 Tatu Ylonen.  See file LICENSE and https://ylonen.org

from dataclasses import dataclass, field


@dataclass(frozen=True)
class ArgumentRecord:
    """One argument of a template invocation.  For ``{{foo|1=Wikipedian}}``
    the argument has text "1=Wikipedian", name "1" and value "Wikipedian".
    Unnamed arguments get their positional index as name."""

    text: str
    name: str
    value: str


@dataclass(frozen=True)
class TemplateRecord:
    text: str  # whole invocation, including the braces
    name: str  # first letter upper-cased
    arguments: list[ArgumentRecord] = field(default_factory=list)
    nestlevel: int = 0  # 0 if not inside another template


@dataclass(frozen=True)
class SpanIndex:
    """Half-open character offsets; ``text[start:end]`` is the span."""

    start: int
    end: int

    def contains(self, other: "SpanIndex") -> bool:
        return self.start < other.start and other.end < self.end


@dataclass(frozen=True)
class HtmlSpan:
    text: str
    name: str  # lower-cased tag name, or "comment" for <!-- -->
    selfclosing: bool
    index: SpanIndex
    nestlevel: int = 0
