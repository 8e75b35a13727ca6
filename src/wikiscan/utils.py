# Small helpers used by the scanners and by the API helpers
#
# Copyright (c) 2020-2022 Tatu Ylonen.  See file LICENSE and https://ylonen.org

from collections.abc import Mapping, Sequence
from typing import Any, Optional

from .logging_utils import logger


def capitalize_first_letter(text: str) -> str:
    """Upper-cases the first character only; unlike str.capitalize() the
    rest of the string is left alone."""
    return text[:1].upper() + text[1:]


def merge_config(
    defaults: dict[str, Any],
    config: Optional[Mapping[str, Any]],
    overrides: Mapping[str, Any],
) -> dict[str, Any]:
    """Combines default options, a user-supplied option mapping and
    keyword arguments.  Keys not present in ``defaults`` are ignored, and
    keyword arguments that are None do not override anything."""
    ret = dict(defaults)
    if config:
        for k, v in config.items():
            if k in ret:
                ret[k] = v
    for k, v in overrides.items():
        if v is not None and k in ret:
            ret[k] = v
    return ret


def arrays_equal(
    array1: Sequence, array2: Sequence, order_insensitive: bool = False
) -> Optional[bool]:
    """Checks whether two lists of scalar values are equal.  Returns None
    if either argument is not a list or a tuple."""
    if not isinstance(array1, (list, tuple)) or not isinstance(
        array2, (list, tuple)
    ):
        logger.error("arrays_equal() takes two lists")
        return None
    if len(array1) != len(array2):
        return False
    if order_insensitive:
        return all(x in array2 for x in array1)
    return all(x == y for x, y in zip(array1, array2))


def concat_query_response(
    responses: Sequence[Any], concat_key: str
) -> Optional[list[Any]]:
    """Concatenates the ``res["query"][concat_key]`` lists of several API
    responses, e.g. those returned by WikiApi.continued_query() or
    WikiApi.mass_query().  Responses without such a list are skipped."""
    if not isinstance(responses, (list, tuple)):
        logger.error("concat_query_response() takes a list of responses")
        return None
    if not isinstance(concat_key, str):
        logger.error("concat_query_response() takes a string key")
        return None

    ret: list[Any] = []
    for res in responses:
        if not isinstance(res, dict) or not isinstance(res.get("query"), dict):
            continue
        value = res["query"].get(concat_key)
        if value is None:
            continue
        if not isinstance(value, list):
            logger.warning(
                f"concat_query_response: non-list in res.query.{concat_key}"
            )
            continue
        ret.extend(value)
    return ret
