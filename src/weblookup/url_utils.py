"""Query encoding and URL assembly helpers."""

from __future__ import annotations

from typing import TYPE_CHECKING, Iterable, Tuple
from urllib.parse import quote, urlsplit, urlunsplit

if TYPE_CHECKING:
    from weblookup.backends.base import Invocation

# RFC 3986 unreserved characters, except for the alphanumerics quote() keeps.
QUERY_SAFE_CHARACTERS = "-_.~"


def encode_query(text: str) -> str:
    """Percent-encode ``text`` for use inside a URL query component.

    Only unreserved characters survive unescaped; spaces become ``%20``, so
    ``urllib.parse.unquote`` gives back the input exactly.
    """
    if not text:
        return ""
    return quote(str(text), safe=QUERY_SAFE_CHARACTERS, encoding="utf-8")


def encoded_query(invocation: "Invocation") -> str:
    """Return the reserved query of ``invocation`` in encoded form."""
    return encode_query(invocation.query)


def build_query_string(pairs: Iterable[Tuple[str, str]]) -> str:
    """Join already-encoded ``key=value`` pairs in the given order."""
    return "&".join(f"{encode_query(key)}={value}" for key, value in pairs)


def build_url(base_url: str, pairs: Iterable[Tuple[str, str]]) -> str:
    """Attach encoded query pairs to ``base_url``, keeping the given order."""
    parsed = urlsplit(base_url)
    query = build_query_string(pairs)
    if parsed.query:
        query = f"{parsed.query}&{query}" if query else parsed.query
    return urlunsplit(
        (parsed.scheme, parsed.netloc, parsed.path or "/", query, parsed.fragment)
    )
