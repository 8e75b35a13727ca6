from .api import ApiError, WikiApi
from .common import MAGIC_FIRST, MAGIC_LAST, VERBATIM_TAGS
from .records import ArgumentRecord, HtmlSpan, SpanIndex, TemplateRecord
from .replace import replace_wikitext
from .templates import parse_template_arguments, parse_templates
from .utils import arrays_equal, concat_query_response
from .wikihtml import get_comment_tags, get_verbatim_spans, parse_html

__all__ = (
    "ApiError",
    "WikiApi",
    "ArgumentRecord",
    "HtmlSpan",
    "SpanIndex",
    "TemplateRecord",
    "parse_templates",
    "parse_template_arguments",
    "parse_html",
    "get_comment_tags",
    "get_verbatim_spans",
    "replace_wikitext",
    "arrays_equal",
    "concat_query_response",
    "MAGIC_FIRST",  # Some applications wish to use the same ranges
    "MAGIC_LAST",
    "VERBATIM_TAGS",
)
