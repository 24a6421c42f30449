"""Card link normalization: absolute Google URLs without the client parameter."""

from __future__ import annotations

import re

from core.config import ExtractorConfig


# One pass over the original string: a client token (plus its separator),
# or an '&' that already ends the URL.
_CLIENT_PARAM_RE = re.compile(r"client=[^&]+&?|&$")


def strip_client_param(url: str) -> str:
    """
    Remove the `client=` tracking parameter from a URL.

    Rules:
    - URLs without `client=` are returned unchanged
    - `client=<value>` is removed together with the `&` that follows it
    - a trailing `&` present in the original URL is removed

    The trailing-`&` rule sees the original string only, so when `client` is
    the last parameter the separator before it survives:
    `?q=1&client=foo` becomes `?q=1&`.
    """
    if ExtractorConfig.CLIENT_PARAM_MARKER not in url:
        return url
    return _CLIENT_PARAM_RE.sub("", url)


def card_link(href: str | None) -> str:
    """Absolute card URL for a site-relative `href`; a missing href yields the bare origin."""
    return strip_client_param(f"{ExtractorConfig.GOOGLE_ORIGIN}{href or ''}")
