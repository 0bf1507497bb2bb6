"""
Runtime settings for the audit engine.

Values come from environment variables; everything has a default so the
engine runs without any configuration (PageSpeed data is then skipped).

Environment variables:
    GOOGLE_PAGESPEED_API_KEY     - enables desktop/mobile PageSpeed scorecards
    SEO_AUDIT_REQUEST_TIMEOUT    - page fetch timeout in seconds (default: 30)
    SEO_AUDIT_PAGESPEED_TIMEOUT  - PageSpeed timeout in seconds (default: 60)
    SEO_AUDIT_USER_AGENT         - User-Agent sent when fetching pages
    SEO_AUDIT_MIN_CONTENT_LENGTH - minimum visible body text, in characters (default: 1)
"""

import os
from typing import Mapping, Optional

from pydantic import BaseModel

DEFAULT_USER_AGENT = "Mozilla/5.0 (compatible; SEO-Audit-Bot/1.0)"


class AuditSettings(BaseModel):
    pagespeed_api_key: Optional[str] = None
    request_timeout: float = 30.0
    pagespeed_timeout: float = 60.0
    user_agent: str = DEFAULT_USER_AGENT
    min_content_length: int = 1

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "AuditSettings":
        env = os.environ if environ is None else environ
        return cls(
            pagespeed_api_key=env.get("GOOGLE_PAGESPEED_API_KEY") or None,
            request_timeout=float(env.get("SEO_AUDIT_REQUEST_TIMEOUT", "30")),
            pagespeed_timeout=float(env.get("SEO_AUDIT_PAGESPEED_TIMEOUT", "60")),
            user_agent=env.get("SEO_AUDIT_USER_AGENT", DEFAULT_USER_AGENT),
            min_content_length=int(env.get("SEO_AUDIT_MIN_CONTENT_LENGTH", "1")),
        )
