"""Read-only access to the URI parts the fetch filter inspects.

URIs arrive already normalized by the crawler frontier. This module only
splits them far enough to expose scheme, host and the full string form.
"""

import re
from dataclasses import dataclass
from typing import Optional, Union
from urllib.parse import ParseResult, SplitResult, urlsplit


URILike = Union[str, SplitResult, ParseResult]

ALLOWED_SCHEMES = frozenset({"http", "https"})

_SCHEME_PREFIX = re.compile(r"^\s*([A-Za-z][A-Za-z0-9+.\-]*):")


@dataclass(frozen=True)
class URIView:
    """Scheme, host and string form of a URI.

    ``error`` is set when the URI could not be split, in which case ``host``
    is None and ``scheme`` is taken from the raw text.
    """

    text: str
    scheme: str
    host: Optional[str] = None
    error: Optional[str] = None

    @property
    def has_allowed_scheme(self) -> bool:
        return self.scheme in ALLOWED_SCHEMES


def as_uri_view(uri: URILike) -> URIView:
    """Build a URIView from a URI string or an already split URI.

    Other objects (e.g. pydantic URL types) are converted with ``str()``.
    """
    if isinstance(uri, (SplitResult, ParseResult)):
        text = uri.geturl()
        try:
            return URIView(text=text, scheme=uri.scheme.lower(), host=uri.hostname)
        except ValueError as e:
            return URIView(text=text, scheme=uri.scheme.lower(), error=str(e))

    text = str(uri)
    try:
        parts = urlsplit(text)
        return URIView(text=text, scheme=parts.scheme.lower(), host=parts.hostname)
    except ValueError as e:
        match = _SCHEME_PREFIX.match(text)
        scheme = match.group(1).lower() if match else ""
        return URIView(text=text, scheme=scheme, error=str(e))
