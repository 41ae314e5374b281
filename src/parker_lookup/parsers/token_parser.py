"""Rails ``authenticity_token`` extraction.

Parker renders the token in two places: the layout's
``<meta name="csrf-token" content="...">`` and a hidden
``<input name="authenticity_token" value="...">`` inside every form.
Attribute values may be entity-encoded (``&amp;``, ``&#43;``, ``&#x2F;`` ...).
"""

from __future__ import annotations

import html as html_mod
import re

from ..errors import TokenExtractionError

# Tried in order; the first hit wins.
_TOKEN_PATTERNS = (
    re.compile(r"""<meta\s[^>]*?content=["']([^"']+)["'][^>]*?name=["']csrf-token["']""", re.IGNORECASE),
    re.compile(r"""<meta\s[^>]*?name=["']csrf-token["'][^>]*?content=["']([^"']+)["']""", re.IGNORECASE),
    re.compile(r"""<input\s[^>]*?value=["']([^"']+)["'][^>]*?name=["']authenticity_token["']""", re.IGNORECASE),
    re.compile(r"""<input\s[^>]*?name=["']authenticity_token["'][^>]*?value=["']([^"']+)["']""", re.IGNORECASE),
)


def extract_token(html: str | None) -> str:
    """Return the decoded token, or ``""`` when the page carries none."""
    if not html:
        return ""
    for pattern in _TOKEN_PATTERNS:
        m = pattern.search(html)
        if m:
            return html_mod.unescape(m.group(1))
    return ""


def require_token(html: str | None, context: str) -> str:
    token = extract_token(html)
    if not token:
        raise TokenExtractionError(context)
    return token
