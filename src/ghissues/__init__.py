"""ghissues - client & contract suite for the GitHub issues REST API.

High-level public API:

from ghissues import IssuesApiClient, load_settings

client = IssuesApiClient.from_settings(load_settings())
created = client.create_issue("New issue", "Body")
assert created.status_code == 201
comment = client.create_comment("First!", created.unwrap().number)

Each call returns an ``ApiResult`` pairing the deserialized record with the
observed HTTP status; API errors are statuses, not exceptions.
"""

from __future__ import annotations

# Defined before submodule imports; ghissues.client reads it for User-Agent
__version__ = "0.1.0"

from .client import IssuesApiClient  # noqa: E402
from .config import Settings, load_settings  # noqa: E402
from .errors import ConfigError, GhIssuesError, ResponseShapeError  # noqa: E402
from .models import ApiResult, Comment, Issue, Label  # noqa: E402

__all__ = [
    "ApiResult",
    "Comment",
    "ConfigError",
    "GhIssuesError",
    "Issue",
    "IssuesApiClient",
    "Label",
    "ResponseShapeError",
    "Settings",
    "load_settings",
    "__version__",
]
