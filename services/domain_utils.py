from __future__ import annotations

from typing import Optional
from urllib.parse import unquote, urlparse
import unicodedata

import tldextract


# Offline extractor: rely on the bundled public suffix snapshot, never fetch it
_EXTRACT = tldextract.TLDExtract(suffix_list_urls=())


def extract_apex_domain(url_or_domain: Optional[str]) -> Optional[str]:
    if not url_or_domain:
        return None
    text = str(url_or_domain).strip().lower()
    if not text.startswith('http://') and not text.startswith('https://'):
        text = f"http://{text}"
    ext = _EXTRACT(text)
    if ext.domain and ext.suffix:
        return f"{ext.domain}.{ext.suffix}"
    return None


def _clean_slug(slug: str) -> str:
    # Decode percent-encoding and normalize Unicode
    slug = unquote(slug)
    slug = unicodedata.normalize('NFKC', slug).strip()
    # Remove invisible characters occasionally present
    return slug.replace('\u200b', '').replace('\u200c', '').replace('\u200d', '')


def _with_scheme(url: str) -> str:
    text = url.strip()
    if not text.startswith('http://') and not text.startswith('https://'):
        text = f"https://{text}"
    return text


def normalize_linkedin_profile_url(url: Optional[str]) -> Optional[str]:
    """Canonical https://linkedin.com/in/{slug}, or None when not a profile URL."""
    if not url or not url.strip():
        return None
    text = _with_scheme(url)
    if extract_apex_domain(text) != 'linkedin.com':
        return None
    path = (urlparse(text).path or '').rstrip('/')
    # Keep only /in/{slug} and drop trailing locale/segments (e.g., /de, /en)
    parts = [p for p in path.split('/') if p]
    if len(parts) < 2 or parts[0] != 'in':
        return None
    slug = _clean_slug(parts[1]).lower()
    return f"https://linkedin.com/in/{slug}" if slug else None


def normalize_github_url(url: Optional[str]) -> Optional[str]:
    """Canonical https://github.com/{user}, or None when not a GitHub URL."""
    if not url or not url.strip():
        return None
    text = _with_scheme(url)
    if extract_apex_domain(text) != 'github.com':
        return None
    parts = [p for p in (urlparse(text).path or '').split('/') if p]
    if not parts:
        return None
    user = _clean_slug(parts[0])
    return f"https://github.com/{user}" if user else None
