"""
GoTrue API request helpers

URL/query construction and session expiry math shared by every operation.
"""

import time
from typing import Iterable, Mapping, Optional, Sequence, Tuple, Union
from urllib.parse import quote, urlencode


# Characters encodeURIComponent leaves alone besides alphanumerics and "-_.~"
_URI_COMPONENT_SAFE = "!*'()"

QueryParams = Union[Mapping[str, str], Sequence[Tuple[str, str]]]


def encode_uri_component(value: str) -> str:
    """Percent-encode a single query value or path segment."""
    return quote(str(value), safe=_URI_COMPONENT_SAFE)


def build_query_string(
    params: Iterable[Tuple[str, Optional[str]]],
    extra: Optional[QueryParams] = None,
) -> str:
    """
    Build a ``?``-prefixed query string.

    Each ``(key, value)`` pair in ``params`` is emitted in order and its value
    percent-encoded on its own; pairs with an empty value are skipped.
    ``extra`` is form-encoded as one trailing fragment, keeping the caller's
    ordering. Returns an empty string when there is nothing to send.
    """
    parts = [f"{key}={encode_uri_component(value)}" for key, value in params if value]
    if extra:
        parts.append(urlencode(extra))
    return "?" + "&".join(parts) if parts else ""


def expires_at(expires_in: int, now: Optional[float] = None) -> int:
    """Absolute expiry (epoch seconds) for a token valid ``expires_in`` seconds."""
    if now is None:
        now = time.time()
    return round(now) + int(expires_in)
