"""ghissues CLI.

Command groups:
  issues    -> list / create / get / update / close
  labels    -> list labels of an issue
  comments  -> list / create / get / update / delete

Every command performs one API call and prints the observed status with the
deserialized record as JSON. Exit status is 0 for a 2xx answer, 1 for any
other status and 2 when configuration is incomplete.
"""

from __future__ import annotations

import argparse
import json
import sys
from collections.abc import Callable
from http import HTTPStatus
from typing import Any

from ghissues.client import IssuesApiClient
from ghissues.config import CONFIG_DEFAULT, Settings, load_settings
from ghissues.errors import ConfigError
from ghissues.logging import configure_logging
from ghissues.models import ISSUE_STATES, ApiResult

EXIT_OK = 0
EXIT_API_ERROR = 1
EXIT_CONFIG_ERROR = 2

_MAX_HELP_WIDTH = 100


class _HelpFormatter(argparse.HelpFormatter):
    def __init__(self, prog: str) -> None:
        super().__init__(prog, max_help_position=30, width=_MAX_HELP_WIDTH)


class _FormatterArgumentParser(argparse.ArgumentParser):
    def __init__(self, *args: Any, **kwargs: Any) -> None:
        kwargs.setdefault("formatter_class", _HelpFormatter)
        super().__init__(*args, **kwargs)


def _build_parser() -> argparse.ArgumentParser:
    p = _FormatterArgumentParser(
        prog="ghissues", description="Exercise the GitHub issues REST API"
    )
    p.add_argument("--config", help=f"YAML settings file (default: {CONFIG_DEFAULT} if present)")
    p.add_argument("--json-logs", action="store_true", help="Emit logs as JSON lines")
    p.add_argument("--log-level", help="Override logging level (DEBUG, INFO, WARNING, ...)")
    groups = p.add_subparsers(
        dest="group",
        required=True,
        parser_class=_FormatterArgumentParser,
        metavar="<group>",
    )

    issues = groups.add_parser("issues", help="Issue operations")
    isub = issues.add_subparsers(dest="action", required=True, metavar="<action>")
    il = isub.add_parser("list", help="List repository issues")
    il.add_argument("--state", choices=[*ISSUE_STATES, "all"])
    ic = isub.add_parser("create", help="Create an issue")
    ic.add_argument("--title", required=True)
    ic.add_argument("--body", default="")
    ig = isub.add_parser("get", help="Fetch an issue by number")
    ig.add_argument("number", type=int)
    iu = isub.add_parser("update", help="Update title, body or state of an issue")
    iu.add_argument("number", type=int)
    iu.add_argument("--title")
    iu.add_argument("--body")
    iu.add_argument("--state", choices=ISSUE_STATES)
    icl = isub.add_parser("close", help="Close an issue")
    icl.add_argument("number", type=int)

    labels = groups.add_parser("labels", help="Label operations")
    lsub = labels.add_subparsers(dest="action", required=True, metavar="<action>")
    ll = lsub.add_parser("list", help="List labels of an issue")
    ll.add_argument("number", type=int)

    comments = groups.add_parser("comments", help="Comment operations")
    csub = comments.add_subparsers(dest="action", required=True, metavar="<action>")
    cl = csub.add_parser("list", help="List comments of an issue")
    cl.add_argument("number", type=int)
    cc = csub.add_parser("create", help="Comment on an issue")
    cc.add_argument("number", type=int)
    cc.add_argument("--body", required=True)
    cg = csub.add_parser("get", help="Fetch a comment by id")
    cg.add_argument("comment_id", type=int)
    cu = csub.add_parser("update", help="Replace the body of a comment")
    cu.add_argument("comment_id", type=int)
    cu.add_argument("--body", required=True)
    cd = csub.add_parser("delete", help="Delete a comment")
    cd.add_argument("comment_id", type=int)
    return p


def _make_client(settings: Settings) -> IssuesApiClient:
    return IssuesApiClient.from_settings(settings)


def _record_json(record: Any) -> Any:
    if record is None:
        return None
    if isinstance(record, list):
        return [item.to_json() for item in record]
    return record.to_json()


def _emit(result: ApiResult[Any]) -> int:
    payload = {
        "status": result.status_code,
        "record": _record_json(result.record),
        "message": result.message,
    }
    print(json.dumps(payload, indent=2))
    return EXIT_OK if result.ok else EXIT_API_ERROR


Handler = Callable[[IssuesApiClient, argparse.Namespace], ApiResult[Any]]


def _cmd_comment_delete(client: IssuesApiClient, args: argparse.Namespace) -> int:
    client.delete_comment(args.comment_id)
    # Deletion returns nothing; a follow-up fetch answering 404 confirms it
    check = client.get_comment(args.comment_id)
    deleted = check.status_code == HTTPStatus.NOT_FOUND
    payload = {
        "status": check.status_code,
        "record": None,
        "message": f"comment {args.comment_id} deleted" if deleted else check.message,
    }
    print(json.dumps(payload, indent=2))
    return EXIT_OK if deleted else EXIT_API_ERROR


_HANDLERS: dict[tuple[str, str], Handler] = {
    ("issues", "list"): lambda c, a: c.list_issues(state=a.state),
    ("issues", "create"): lambda c, a: c.create_issue(a.title, a.body),
    ("issues", "get"): lambda c, a: c.get_issue(a.number),
    ("issues", "update"): lambda c, a: c.update_issue(
        a.number, title=a.title, body=a.body, state=a.state
    ),
    ("issues", "close"): lambda c, a: c.close_issue(a.number),
    ("labels", "list"): lambda c, a: c.list_labels(a.number),
    ("comments", "list"): lambda c, a: c.list_comments(a.number),
    ("comments", "create"): lambda c, a: c.create_comment(a.body, a.number),
    ("comments", "get"): lambda c, a: c.get_comment(a.comment_id),
    ("comments", "update"): lambda c, a: c.update_comment(a.comment_id, a.body),
}


def main(argv: list[str] | None = None) -> int:
    parser = _build_parser()
    args = parser.parse_args(argv)
    try:
        settings = load_settings(args.config)
    except ConfigError as exc:
        print(f"[config] {exc}", file=sys.stderr)
        return EXIT_CONFIG_ERROR
    logger = configure_logging(
        json_logging=args.json_logs or settings.logging_json_enabled,
        level=args.log_level or settings.logging_level,
        # stdout carries the JSON result only
        stream=sys.stderr,
    )
    try:
        client = _make_client(settings)
    except ConfigError as exc:
        print(f"[config] {exc}", file=sys.stderr)
        return EXIT_CONFIG_ERROR

    with logger.timed_operation(f"{args.group}_{args.action}"):
        if (args.group, args.action) == ("comments", "delete"):
            return _cmd_comment_delete(client, args)
        result = _HANDLERS[(args.group, args.action)](client, args)
    return _emit(result)


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
