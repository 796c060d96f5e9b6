"""Thin REST client for the GitHub issues endpoints.

Every public method issues exactly one HTTP call and returns an
:class:`~ghissues.models.ApiResult` carrying whatever status the service
answered with. Nothing is validated locally: an empty title is sent as-is
and the resulting 422 is the caller's to assert on. There are no retries;
``requests`` exceptions propagate.
"""

from __future__ import annotations

import time
from collections.abc import Callable
from dataclasses import dataclass, field, replace
from typing import Any, TypeVar

import requests
from requests.auth import HTTPBasicAuth

from . import __version__
from .config import DEFAULT_BASE_URL, Settings
from .errors import ResponseShapeError
from .logging import get_logger
from .models import ApiResult, Comment, Issue, Label, parse_list

USER_AGENT = f"ghissues/{__version__}"
HTTP_NO_CONTENT = 204

R = TypeVar("R")


@dataclass
class IssuesApiClient:
    """Client bound to one ``{user}/{repo}`` pair with basic authentication."""

    user: str
    repo: str
    token: str
    base_url: str = DEFAULT_BASE_URL
    timeout: float | None = None
    session: requests.Session | None = None
    _session: requests.Session = field(init=False, repr=False)

    def __post_init__(self) -> None:
        self._session = self.session or requests.Session()
        self._session.headers.setdefault("Accept", "application/vnd.github+json")
        self._session.headers.setdefault("User-Agent", USER_AGENT)

    @classmethod
    def from_settings(
        cls, settings: Settings, *, session: requests.Session | None = None
    ) -> IssuesApiClient:
        user, repo = settings.require_target()
        return cls(
            user=user,
            repo=repo,
            token=settings.token or "",
            base_url=settings.base_url,
            timeout=settings.timeout,
            session=session,
        )

    def with_token(self, token: str) -> IssuesApiClient:
        """Return a client for the same repository using different credentials.

        Credentials are attached per request, so an injected session can be
        shared by both clients.
        """
        return replace(self, token=token, session=self.session)

    @property
    def issues_path(self) -> str:
        return f"/repos/{self.user}/{self.repo}/issues"

    # ---- transport ----------------------------------------------------
    def _request(
        self,
        method: str,
        path: str,
        *,
        params: dict[str, Any] | None = None,
        json_body: Any | None = None,
    ) -> requests.Response:
        url = f"{self.base_url.rstrip('/')}/{path.lstrip('/')}"
        start = time.perf_counter()
        response = self._session.request(
            method,
            url,
            params=params,
            json=json_body,
            auth=HTTPBasicAuth(self.user, self.token),
            timeout=self.timeout,
        )
        get_logger().log_request(
            method, path, response.status_code, (time.perf_counter() - start) * 1000
        )
        return response

    @staticmethod
    def _error_message(response: requests.Response) -> str | None:
        if not response.content:
            return None
        try:
            data = response.json()
        except ValueError:
            return response.text or None
        if isinstance(data, dict) and isinstance(data.get("message"), str):
            return data["message"]
        return None

    def _result(
        self, response: requests.Response, parse: Callable[[Any], R], record_type: str
    ) -> ApiResult[R]:
        status = response.status_code
        if not 200 <= status < 300:
            return ApiResult(status_code=status, message=self._error_message(response))
        if status == HTTP_NO_CONTENT or not response.content:
            return ApiResult(status_code=status)
        try:
            data = response.json()
        except ValueError as exc:
            raise ResponseShapeError(
                f"{record_type} response body is not JSON",
                record_type=record_type,
                payload=response.text,
            ) from exc
        return ApiResult(status_code=status, record=parse(data))

    # ---- issues -------------------------------------------------------
    def list_issues(self, *, state: str | None = None) -> ApiResult[list[Issue]]:
        params = {"state": state} if state else None
        response = self._request("GET", self.issues_path, params=params)
        return self._result(
            response, lambda data: parse_list(data, Issue.from_json, "Issue"), "Issue"
        )

    def create_issue(self, title: str, body: str) -> ApiResult[Issue]:
        response = self._request(
            "POST", self.issues_path, json_body={"title": title, "body": body}
        )
        return self._result(response, Issue.from_json, "Issue")

    def get_issue(self, number: int) -> ApiResult[Issue]:
        response = self._request("GET", f"{self.issues_path}/{number}")
        return self._result(response, Issue.from_json, "Issue")

    def update_issue(
        self,
        number: int,
        *,
        title: str | None = None,
        body: str | None = None,
        state: str | None = None,
    ) -> ApiResult[Issue]:
        payload: dict[str, Any] = {}
        if title is not None:
            payload["title"] = title
        if body is not None:
            payload["body"] = body
        if state is not None:
            payload["state"] = state
        response = self._request("PATCH", f"{self.issues_path}/{number}", json_body=payload)
        return self._result(response, Issue.from_json, "Issue")

    def close_issue(self, number: int) -> ApiResult[Issue]:
        return self.update_issue(number, state="closed")

    def list_labels(self, number: int) -> ApiResult[list[Label]]:
        response = self._request("GET", f"{self.issues_path}/{number}/labels")
        return self._result(
            response, lambda data: parse_list(data, Label.from_json, "Label"), "Label"
        )

    # ---- comments -----------------------------------------------------
    def list_comments(self, number: int) -> ApiResult[list[Comment]]:
        response = self._request("GET", f"{self.issues_path}/{number}/comments")
        return self._result(
            response, lambda data: parse_list(data, Comment.from_json, "Comment"), "Comment"
        )

    def create_comment(self, body: str, issue_number: int) -> ApiResult[Comment]:
        response = self._request(
            "POST", f"{self.issues_path}/{issue_number}/comments", json_body={"body": body}
        )
        return self._result(response, Comment.from_json, "Comment")

    def get_comment(self, comment_id: int) -> ApiResult[Comment]:
        response = self._request("GET", f"{self.issues_path}/comments/{comment_id}")
        return self._result(response, Comment.from_json, "Comment")

    def update_comment(self, comment_id: int, body: str) -> ApiResult[Comment]:
        response = self._request(
            "PATCH", f"{self.issues_path}/comments/{comment_id}", json_body={"body": body}
        )
        return self._result(response, Comment.from_json, "Comment")

    def delete_comment(self, comment: Comment | int) -> None:
        comment_id = comment.id if isinstance(comment, Comment) else comment
        self._request("DELETE", f"{self.issues_path}/comments/{comment_id}")


__all__ = ["IssuesApiClient", "USER_AGENT"]
