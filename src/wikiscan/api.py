# Minimal client for the MediaWiki action API
#
# Copyright (c) 2020-2022 Tatu Ylonen.  See file LICENSE and https://ylonen.org

import html
import logging
import re
from collections.abc import Mapping, Sequence
from typing import Any, Literal, Optional, TypedDict, Union

from .logging_utils import logger
from .utils import arrays_equal

DEFAULT_URL = "https://en.wikipedia.org/w/api.php"

DEFAULT_PARAMETERS: dict[str, str] = {
    "action": "query",
    "format": "json",
    "formatversion": "2",
}

# Number of values a multi-value field may hold in one request
HIGH_BATCH_LIMIT = 500
BATCH_LIMIT = 50

# Pages holding the predefined reasons of the block/delete/protect forms
INTERFACE_PAGES: dict[str, str] = {
    "block": "MediaWiki:Ipbreason-dropdown",
    "delete": "MediaWiki:Deletereason-dropdown",
    "protect": "MediaWiki:Protect-dropdown",
}

# "** Some reason" -> depth 2, caption "Some reason"
REASON_RE = re.compile(r"(\*+)[^\S\r\n]*([^\n]+)\n?")

ApiParameters = Mapping[str, Any]
ApiResponse = dict[str, Any]


class ReadResponse(TypedDict):
    is_redirect: bool
    basetimestamp: str
    curtimestamp: str
    content: str
    revid: str


class InterfaceReason(TypedDict):
    index: int
    caption: str


class ApiError(Exception):
    """A failed API call.  ``code`` is "http" for transport errors,
    "ok-but-empty" for an empty response, or the error code returned by
    the API ("unknown" if it returned none).  ``details`` holds the parsed
    response or a dict describing the transport failure."""

    def __init__(self, code: str, details: Any = None) -> None:
        super().__init__(code)
        self.code = code
        self.details = details

    @property
    def info(self) -> str:
        if isinstance(self.details, dict):
            error = self.details.get("error")
            if isinstance(error, dict) and "info" in error:
                return str(error["info"])
            errors = self.details.get("errors")
            if isinstance(errors, list) and errors:
                return str(errors[0].get("text", self.code))
        return self.code


def encode_parameters(parameters: ApiParameters) -> dict[str, str]:
    """Converts parameter values to the form the API expects: lists are
    joined with vertical bars, true booleans are sent as "1" and false
    booleans and None are left out."""
    ret: dict[str, str] = {}
    for k, v in parameters.items():
        if v is None or v is False:
            continue
        if v is True:
            ret[k] = "1"
        elif isinstance(v, (list, tuple)):
            ret[k] = "|".join(str(x) for x in v)
        else:
            ret[k] = str(v)
    return ret


class WikiApi:
    """Context for sending requests to one wiki.  ``api_high_limits``
    tells whether the acting user has the apihighlimits right, which
    raises the number of values allowed in multi-value fields."""

    __slots__ = (
        "url",  # URL of api.php
        "timeout",  # Request timeout in seconds
        "user_agent",
        "api_high_limits",  # User may use the higher batch size
        "default_parameters",  # Merged under every request
    )

    def __init__(
        self,
        url: str = DEFAULT_URL,
        timeout: float = 30,
        user_agent: str = "wikiscan",
        api_high_limits: bool = False,
        default_parameters: Optional[Mapping[str, Any]] = None,
        quiet: bool = False,
    ):
        self.url = url
        self.timeout = timeout
        self.user_agent = user_agent
        self.api_high_limits = api_high_limits
        self.default_parameters: dict[str, Any] = dict(DEFAULT_PARAMETERS)
        if default_parameters is not None:
            self.default_parameters.update(default_parameters)
        if not quiet:
            logger.setLevel(logging.DEBUG)

    @property
    def batch_limit(self) -> int:
        return HIGH_BATCH_LIMIT if self.api_high_limits else BATCH_LIMIT

    def request(
        self, parameters: ApiParameters, method: str = "GET"
    ) -> ApiResponse:
        """Sends a request to the API and returns the parsed response.
        Raises ApiError if the request fails or the API reports an
        error."""
        import requests

        params = encode_parameters({**self.default_parameters, **parameters})
        headers = {"user-agent": self.user_agent}
        try:
            if method == "POST":
                r = requests.post(
                    self.url, data=params, headers=headers, timeout=self.timeout
                )
            else:
                r = requests.get(
                    self.url,
                    params=params,
                    headers=headers,
                    timeout=self.timeout,
                )
        except requests.RequestException as e:
            raise ApiError("http", {"exception": e}) from e
        if not r.ok:
            raise ApiError(
                "http", {"status_code": getattr(r, "status_code", None)}
            )
        try:
            result = r.json()
        except ValueError as e:
            raise ApiError("http", {"exception": e}) from e

        if result is None or result == "":
            raise ApiError("ok-but-empty", result)
        if not isinstance(result, dict):
            raise ApiError("unknown", result)
        if result.get("error"):
            # errorformat=bc
            raise ApiError(result["error"].get("code", "unknown"), result)
        if result.get("errors"):
            # errorformat!=bc
            raise ApiError(result["errors"][0].get("code", "unknown"), result)
        return result

    def get(self, parameters: ApiParameters) -> ApiResponse:
        return self.request(parameters, "GET")

    def post(self, parameters: ApiParameters) -> ApiResponse:
        return self.request(parameters, "POST")

    def read(self, pagename: str) -> Union[ReadResponse, Literal[False], None]:
        """Gets the latest revision of a page.  Returns False if the page
        does not exist and None on errors; never raises ApiError."""
        try:
            res = self.get(
                {
                    "titles": pagename,
                    "prop": "info|revisions",
                    "rvprop": "ids|timestamp|content",
                    "rvslots": "main",
                    "curtimestamp": True,
                }
            )
        except ApiError as e:
            logger.warning(f"read({pagename!r}) failed: {e.info}")
            return None

        pages = res.get("query", {}).get("pages")
        if not isinstance(pages, list) or len(pages) == 0:
            logger.warning("read() received an invalid response from the API")
            return None
        page = pages[0]
        if page.get("missing"):
            return False
        try:
            rev = page["revisions"][0]
            return {
                "is_redirect": bool(page.get("redirect")),
                "basetimestamp": rev["timestamp"],
                "curtimestamp": res["curtimestamp"],
                "content": rev["slots"]["main"]["content"],
                "revid": str(rev["revid"]),
            }
        except (KeyError, IndexError, TypeError):
            logger.warning("read() received an invalid response from the API")
            return None

    def continued_query(
        self, parameters: ApiParameters, limit: int = 10
    ) -> list[ApiResponse]:
        """Repeats a query as long as the response has a "continue" member,
        at most ``limit`` times.  Returns all responses received; a failed
        request ends the loop but is not an error."""
        responses: list[ApiResponse] = []
        params = dict(parameters)
        count = 1
        while True:
            try:
                res = self.get(params)
            except ApiError as e:
                logger.warning(
                    f"continued_query: query failed (reason: {e.info}, "
                    f"loop count: {count})"
                )
                break
            responses.append(res)
            cont = res.get("continue")
            if not cont or count >= limit:
                break
            params.update(cont)
            count += 1
        return responses

    def mass_query(
        self,
        parameters: ApiParameters,
        batch_param: Union[str, Sequence[str]],
        batch_limit: Optional[int] = None,
    ) -> Optional[list[Optional[ApiResponse]]]:
        """Sends a query with a multi-value field that may hold more values
        than one request allows.  The field (or fields, which must then all
        hold the same list) is given as a list and split into batches of
        ``batch_limit`` values, 500 or 50 by default depending on
        ``api_high_limits``.  Without an explicit ``batch_limit`` the
        "...limit" parameter, if any, is set to "max".

        Returns one element per batch: the response, or None if that
        request failed.  Returns None if the batch fields are invalid."""
        params = dict(parameters)
        if isinstance(batch_param, str):
            names = [batch_param]
        else:
            names = list(batch_param)
        arrays = [params.get(name) for name in names]
        if not names or not all(isinstance(x, (list, tuple)) for x in arrays):
            logger.error("mass_query: batch field in query must be a list")
            return None
        if not all(arrays_equal(arrays[0], x) for x in arrays[1:]):
            logger.error("mass_query: batch fields have different lists")
            return None
        batch = list(arrays[0])
        if len(batch) == 0:
            logger.warning(
                f"mass_query: batch field is an empty list ({', '.join(names)})"
            )
            return []

        if batch_limit is None:
            batch_limit = self.batch_limit
            for key in params:
                if key.endswith("limit"):
                    params[key] = "max"
                    break

        results: list[Optional[ApiResponse]] = []
        for i in range(0, len(batch), batch_limit):
            chunk = "|".join(str(x) for x in batch[i : i + batch_limit])
            for name in names:
                params[name] = chunk
            try:
                results.append(self.post(params))
            except ApiError as e:
                logger.warning(
                    f"mass_query: batch {i // batch_limit} failed: {e.info}"
                )
                results.append(None)
        return results

    def get_interface(
        self, interface_name: str, create_option_tags: bool = False
    ) -> Union[list[InterfaceReason], str, None]:
        """Gets the bulleted list of predefined reasons for the "block",
        "delete" or "protect" form.  Returns a list of reasons with their
        bullet depth, or, with ``create_option_tags``, the reasons as
        <optgroup> and <option> tags for a <select> element.  Returns None
        on errors."""
        title = INTERFACE_PAGES.get(interface_name)
        if title is None:
            logger.error(
                "get_interface() only accepts "
                + ", ".join(repr(x) for x in INTERFACE_PAGES)
            )
            return None
        try:
            res = self.get(
                {
                    "titles": title,
                    "prop": "revisions",
                    "rvprop": "content",
                    "rvslots": "main",
                }
            )
        except ApiError as e:
            logger.error(f"get_interface({interface_name!r}) failed: {e.info}")
            return None
        try:
            content = res["query"]["pages"][0]["revisions"][0]["slots"]["main"][
                "content"
            ]
        except (KeyError, IndexError, TypeError):
            logger.warning(
                "get_interface() received an invalid response from the API"
            )
            return None

        reasons: list[InterfaceReason] = [
            {"index": len(m.group(1)), "caption": m.group(2)}
            for m in REASON_RE.finditer(content)
        ]
        if not reasons:
            logger.warning(f"get_interface(): no reasons in {title}")
            return None
        if not create_option_tags:
            return reasons
        return reasons_to_option_tags(reasons)


def reasons_to_option_tags(reasons: Sequence[InterfaceReason]) -> str:
    """Top-level reasons become <optgroup>s, deeper ones <option>s."""
    parts: list[str] = []
    in_group = False
    for reason in reasons:
        caption = html.escape(reason["caption"].strip())
        if reason["index"] == 1:
            if in_group:
                parts.append("</optgroup>")
            parts.append(f'<optgroup label="{caption}">')
            in_group = True
        else:
            parts.append(f"<option>{caption}</option>")
    if in_group:
        parts.append("</optgroup>")
    return "".join(parts)
