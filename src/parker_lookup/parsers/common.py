"""Shared text cleaning, URL normalization and selector helpers."""

from __future__ import annotations

import html as html_mod
import re
from urllib.parse import unquote, urlparse

from scrapling.parser import Adaptor

from ..errors import CandidateIdError

PROFILE_URL_RE = re.compile(r"linkedin\.com/in/[^/?#\s\"']+", re.IGNORECASE)
DETAIL_PATH_RE = re.compile(r"^/candidates/(\d+)$")
_CANDIDATE_ID_RE = re.compile(r"/candidates/(\d+)(?=/|$)")
# LinkedIn appends an opaque id to duplicate vanity names: "-398131117", "-b166a9171".
# Only tokens with a digit count, so a plain surname like "-smith" stays.
_SLUG_ID_SUFFIX_RE = re.compile(r"-(?=[a-z]*\d)[a-z0-9]{5,}$", re.IGNORECASE)


def clean_text(text: str | None) -> str | None:
    """Strip whitespace, collapse internal runs, remove zero-width chars."""
    if not text:
        return None
    text = re.sub(r"[\u200b\u200c\u200d\ufeff]", "", text)
    text = re.sub(r"\s+", " ", text).strip()
    return text or None


def strip_markup(fragment: str | None) -> str | None:
    """Drop tags, decode entities and collapse whitespace."""
    if not fragment:
        return None
    return clean_text(html_mod.unescape(re.sub(r"<[^>]*>", " ", fragment)))


def to_selector(source: str | Adaptor) -> Adaptor:
    if isinstance(source, str):
        return Adaptor(source or "<html></html>")
    return source


def full_text(el: object) -> str:
    """Flattened text of an element including its children."""
    if hasattr(el, "html_content"):
        raw = el.html_content
        if isinstance(raw, str):
            return strip_markup(raw) or ""
    if hasattr(el, "get_all_text"):
        return clean_text(el.get_all_text(separator=" ")) or ""
    return clean_text(getattr(el, "text", None)) or ""


def normalize_profile_url(url: str) -> str:
    """Canonical form for comparing LinkedIn URLs.

    Lowercased, scheme forced to https, leading "www." prefixes removed and
    trailing slashes and whitespace stripped. Applying it twice gives the same result.
    """
    url = (url or "").strip().lower()
    url = re.sub(r"^(?:https?:)?//", "", url)
    url = re.sub(r"^(?:www\.)+", "", url)
    url = re.sub(r"[/\s]+$", "", url)
    return f"https://{url}" if url else ""


def is_profile_url(href: str | None) -> bool:
    return bool(href and PROFILE_URL_RE.search(href))


def profile_slug(url: str) -> str | None:
    m = re.search(r"/in/([^/?#]+)", url or "")
    if not m:
        return None
    return unquote(m.group(1)).strip() or None


def tokens_from_slug(value: str) -> list[str]:
    """Searchable name parts from a profile URL or a bare slug.

    ``kaidi-cao-398131117`` gives ``["kaidi", "cao"]``. A slug without hyphens
    (``anshulsaha``) is kept whole as a single token; single-character parts
    are dropped.
    """
    slug = profile_slug(value)
    if slug is None:
        slug = (value or "").strip().split("?")[0].split("#")[0].rstrip("/").rsplit("/", 1)[-1]
    slug = _SLUG_ID_SUFFIX_RE.sub("", slug)
    return [part for part in slug.split("-") if len(part) > 1]


def is_detail_url(url: str) -> bool:
    """True when ``url`` is exactly a candidate detail page (``/candidates/<id>``)."""
    return bool(DETAIL_PATH_RE.match(urlparse(url or "").path))


def detail_path(href: str | None) -> str | None:
    """Reduce an absolute or relative detail link to ``/candidates/<id>``."""
    if not href:
        return None
    path = urlparse(href.strip()).path
    return path if DETAIL_PATH_RE.match(path) else None


def candidate_id_from_url(url: str) -> str:
    m = _CANDIDATE_ID_RE.search(urlparse(url or "").path)
    if not m:
        raise CandidateIdError(url)
    return m.group(1)
