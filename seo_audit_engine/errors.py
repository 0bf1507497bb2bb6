"""
Run-level error kinds.

Only InvalidUrl, FetchFailed and EmptyContent abort an audit. Findings
about the page itself are Issues, never exceptions.
"""

from enum import Enum
from typing import Union


class FetchFailureKind(str, Enum):
    UNREACHABLE = "unreachable"
    FORBIDDEN = "forbidden"
    NOT_FOUND = "not_found"
    SERVER_ERROR = "server_error"
    TIMEOUT = "timeout"


USER_MESSAGES = {
    "invalid_url": "The address entered is not a valid URL. Check the domain and try again.",
    FetchFailureKind.UNREACHABLE: "We could not reach this website. Check that the address is correct and the site is online.",
    FetchFailureKind.FORBIDDEN: "The website blocked our access. It may be protected against automated tools.",
    FetchFailureKind.NOT_FOUND: "The page was not found (404). Check that the address is correct.",
    FetchFailureKind.SERVER_ERROR: "The website returned a server error. Try again in a few minutes.",
    FetchFailureKind.TIMEOUT: "The website took too long to respond. Try again later.",
    "empty_content": "The page has too little content to analyze.",
    "unknown": "The audit could not be completed. Try again later.",
}


class AuditError(Exception):
    """Base class for errors that abort an audit run."""

    user_message = USER_MESSAGES["unknown"]


class InvalidUrl(AuditError):
    user_message = USER_MESSAGES["invalid_url"]


class FetchFailed(AuditError):
    def __init__(self, kind: FetchFailureKind, detail: str = ""):
        self.kind = kind
        self.detail = detail
        super().__init__(f"Failed to fetch webpage ({kind.value}): {detail}")

    @property
    def user_message(self) -> str:
        return USER_MESSAGES[self.kind]


class EmptyContent(AuditError):
    user_message = USER_MESSAGES["empty_content"]


class MetricsUnavailable(AuditError):
    """Raised by metrics collaborators; callers downgrade it to placeholders."""

    user_message = "Performance data is temporarily unavailable."


# Ordered: first matching fragment wins.
_TEXT_PATTERNS = [
    (("timeout", "timed out"), USER_MESSAGES[FetchFailureKind.TIMEOUT]),
    (("http 404", "http 410", "not found"), USER_MESSAGES[FetchFailureKind.NOT_FOUND]),
    (("http 401", "http 403", "forbidden"), USER_MESSAGES[FetchFailureKind.FORBIDDEN]),
    (("http 5", "server error"), USER_MESSAGES[FetchFailureKind.SERVER_ERROR]),
    (
        ("dns", "name or service", "connection refused", "connecterror", "unreachable", "failed to fetch"),
        USER_MESSAGES[FetchFailureKind.UNREACHABLE],
    ),
    (("invalid url", "url inválida", "invalid domain"), USER_MESSAGES["invalid_url"]),
    (("too short", "empty body", "no content"), USER_MESSAGES["empty_content"]),
]


def translate_error(error: Union[BaseException, str]) -> str:
    """Map an exception or raw error text to a user-facing sentence."""
    if isinstance(error, AuditError):
        return error.user_message
    text = str(error).lower()
    for fragments, message in _TEXT_PATTERNS:
        if any(fragment in text for fragment in fragments):
            return message
    return USER_MESSAGES["unknown"]
