"""
Tolerant token response parsing.

Providers answer the token endpoint either with a JSON object or with a
URL-encoded query string (``access_token=...&expires_in=3600``). The parser
tries an ordered sequence of strategies; the first one able to decode the
body decides the outcome, and a field that can't be found is reported as
None rather than raised.
"""

import json
import logging
from collections.abc import Callable, Sequence
from dataclasses import dataclass
from urllib.parse import parse_qs

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ParseResult:
    """
    Outcome of one parsing strategy.

    Attributes:
        decoded: Whether the strategy understood the body's encoding
        value: Field value, None when the field is absent
    """

    decoded: bool
    value: str | None = None


NOT_DECODED = ParseResult(decoded=False)

ParseStrategy = Callable[[str, str], ParseResult]


def _stringify(value: object) -> str | None:
    if value is None:
        return None
    if isinstance(value, str):
        return value
    if isinstance(value, float) and value.is_integer():
        # 3600.0 -> "3600"
        return str(int(value))
    return json.dumps(value, ensure_ascii=False)


def parse_json_field(content: str, key: str) -> ParseResult:
    """
    Look up ``key`` in a JSON object body.

    Dots in ``key`` walk into nested objects. Bodies that are not a JSON
    object (arrays, bare scalars, invalid JSON) are not decoded.
    """
    try:
        document = json.loads(content)
    except ValueError:
        return NOT_DECODED

    if not isinstance(document, dict):
        return NOT_DECODED

    node: object = document
    for part in key.split("."):
        if not isinstance(node, dict) or part not in node:
            return ParseResult(decoded=True)
        node = node[part]

    return ParseResult(decoded=True, value=_stringify(node))


def parse_query_string_field(content: str, key: str) -> ParseResult:
    """Look up ``key`` in a ``param1=val1&param2=val2`` body."""
    try:
        params = parse_qs(content.strip(), keep_blank_values=True)
    except ValueError:
        return NOT_DECODED

    values = params.get(key)
    if not values:
        return ParseResult(decoded=True)
    return ParseResult(decoded=True, value=",".join(values))


DEFAULT_STRATEGIES: tuple[ParseStrategy, ...] = (
    parse_json_field,
    parse_query_string_field,
)


class TokenResponseParser:
    """
    Extracts token fields from raw token endpoint responses.

    Usage:
        parser = TokenResponseParser()
        parser.parse('{"access_token": "abc"}', "access_token")  # "abc"
        parser.parse("access_token=abc&expires_in=3600", "expires_in")  # "3600"

    Add support for another encoding by passing a longer strategy sequence.
    """

    def __init__(self, strategies: Sequence[ParseStrategy] = DEFAULT_STRATEGIES):
        self.strategies = tuple(strategies)

    def parse(self, content: str | None, key: str) -> str | None:
        """
        Return the value of ``key`` in ``content``, or None if not found.

        Never raises on malformed content.
        """
        if not content or not key:
            return None

        for strategy in self.strategies:
            result = strategy(content, key)
            if result.decoded:
                return result.value

        logger.debug(
            "Token response not decodable by any strategy",
            extra={"field_name": key},
        )
        return None

    __call__ = parse


__all__ = [
    "ParseResult",
    "ParseStrategy",
    "parse_json_field",
    "parse_query_string_field",
    "DEFAULT_STRATEGIES",
    "TokenResponseParser",
]
