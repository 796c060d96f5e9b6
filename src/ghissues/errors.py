"""Local exception types & redaction.

API outcomes are never exceptions here: a 404 or a 422 is a status code on
the returned :class:`~ghissues.models.ApiResult`. The exceptions below cover
the two local failure modes only:

- configuration that cannot produce a client (``ConfigError``)
- a success body that does not match the expected record shape
  (``ResponseShapeError``)

Transport failures (``requests.RequestException``) propagate untouched.
"""
from __future__ import annotations

import re

# Token patterns that must never reach log output
_SENSITIVE_PATTERNS: list[re.Pattern[str]] = [
    re.compile(r"ghp_[A-Za-z0-9]{20,40}"),  # GitHub classic tokens
    re.compile(r"github_pat_\w{20,}"),  # GitHub fine-grained tokens
    re.compile(r"(?i)(authorization:\s*basic\s+)[A-Za-z0-9+/=]+"),
]

_REDACTION_PLACEHOLDER = "<redacted>"


class GhIssuesError(RuntimeError):
    """Base class for errors raised by ghissues itself."""


class ConfigError(GhIssuesError):
    pass


class ResponseShapeError(GhIssuesError):
    """Raised when a response body does not deserialize into the expected record."""

    def __init__(self, message: str, *, record_type: str, payload: object = None):
        super().__init__(message)
        self.record_type = record_type
        self.payload = payload


def redact(text: str) -> str:
    """Redact sensitive tokens in arbitrary text."""
    if not text:
        return text
    redacted = text
    for pat in _SENSITIVE_PATTERNS:
        if pat.groups:
            redacted = pat.sub(lambda m: m.group(1) + _REDACTION_PLACEHOLDER, redacted)
        else:
            redacted = pat.sub(_REDACTION_PLACEHOLDER, redacted)
    return redacted


__all__ = ["GhIssuesError", "ConfigError", "ResponseShapeError", "redact"]
