"""URL normalization and validation for user-supplied audit targets."""

import re
from urllib.parse import urlsplit, urlunsplit

from .models import UrlValidation

_LABEL = r"[a-z0-9](?:[a-z0-9-]{0,61}[a-z0-9])?"
_HOSTNAME_RE = re.compile(rf"^{_LABEL}(?:\.{_LABEL})*\.[a-z]{{2,}}$")
_SCHEME_RE = re.compile(r"^[a-zA-Z][a-zA-Z0-9+.-]*://")


def normalize_url(raw: str) -> UrlValidation:
    """
    Validate and canonicalize an address into a fetch target.

    Adds ``https://`` when no scheme is given, lowercases scheme and host,
    drops the fragment and the trailing slash of a bare root path. Applying
    it to its own output returns the same value.
    """
    candidate = (raw or "").strip()
    if not candidate:
        return UrlValidation(valid=False, error="URL is required")

    if not _SCHEME_RE.match(candidate):
        candidate = "https://" + candidate

    try:
        parts = urlsplit(candidate)
        hostname = parts.hostname or ""
        port = parts.port
    except ValueError:
        return UrlValidation(valid=False, normalized=candidate, error="Invalid URL format")

    scheme = parts.scheme.lower()
    if scheme not in ("http", "https"):
        return UrlValidation(valid=False, normalized=candidate, error="Unsupported URL scheme")

    netloc = hostname if port is None else f"{hostname}:{port}"
    path = parts.path if parts.path != "/" else ""
    normalized = urlunsplit((scheme, netloc, path, parts.query, ""))

    if len(hostname) < 4:
        return UrlValidation(valid=False, normalized=normalized, error="Invalid URL")
    if not _HOSTNAME_RE.match(hostname):
        return UrlValidation(valid=False, normalized=normalized, error="Invalid domain format")

    return UrlValidation(valid=True, normalized=normalized)
