"""In-memory list pagination and list query parsing.

Pages are windows over a fully materialized, already ordered sequence. The
page token is the base64-encoded decimal offset of the next window, so callers
can rely on stable ordinal offsets between requests.
"""

from __future__ import annotations

import base64
import binascii
from dataclasses import dataclass, field
from typing import Any, Generic, List, Mapping, Optional, Sequence, TypeVar

from backoffice.services.coercion import clamp, parse_int

T = TypeVar("T")

DEFAULT_LIMIT = 25
MIN_LIMIT = 1
MAX_LIMIT = 100


@dataclass
class Page(Generic[T]):
    items: List[T] = field(default_factory=list)
    next_page_token: Optional[str] = None


@dataclass(frozen=True)
class ListParams:
    limit: int = DEFAULT_LIMIT
    page_token: Optional[str] = None


def encode_page_token(offset: int) -> str:
    return base64.b64encode(str(offset).encode("utf-8")).decode("ascii")


def decode_page_token(token: str) -> Optional[int]:
    """Return the offset encoded in ``token``, or ``None`` if it is not one."""

    try:
        raw = base64.b64decode(token.encode("ascii"), validate=True).decode("utf-8")
    except (binascii.Error, UnicodeError, ValueError):
        return None
    offset = parse_int(raw)
    if offset is None or offset < 0:
        return None
    return offset


def paginate(items: Sequence[T], limit: int, page_token: str | None = None) -> Page[T]:
    if page_token:
        start = decode_page_token(page_token)
        if start is None:
            return Page()
    else:
        start = 0

    if start >= len(items):
        return Page()

    end = min(start + max(limit, MIN_LIMIT), len(items))
    next_token = encode_page_token(end) if end < len(items) else None
    return Page(items=list(items[start:end]), next_page_token=next_token)


def parse_list_params(params: Mapping[str, Any]) -> ListParams:
    """Read ``limit`` and ``pageToken`` from untyped request parameters.

    A missing or non-numeric limit falls back to the default instead of
    raising.
    """

    limit = parse_int(params.get("limit"))
    if limit is None:
        limit = DEFAULT_LIMIT
    token = params.get("pageToken")
    return ListParams(
        limit=clamp(limit, MIN_LIMIT, MAX_LIMIT),
        page_token=str(token) if token else None,
    )
