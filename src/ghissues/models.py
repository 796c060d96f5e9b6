"""Records mirroring the GitHub issues API payloads.

Records are immutable reflections of one HTTP response. The status code that
produced them lives on :class:`ApiResult`, not on the record.
"""

from __future__ import annotations

from collections.abc import Callable, Mapping
from dataclasses import asdict, dataclass
from http import HTTPStatus
from typing import Any, Generic, TypeVar

from .errors import ResponseShapeError

T = TypeVar("T")
R = TypeVar("R")

ISSUE_STATES = ("open", "closed")


def _require_mapping(payload: Any, record_type: str) -> Mapping[str, Any]:
    if not isinstance(payload, Mapping):
        raise ResponseShapeError(
            f"{record_type} payload must be a JSON object, got {type(payload).__name__}",
            record_type=record_type,
            payload=payload,
        )
    return payload


def _field(
    payload: Mapping[str, Any],
    key: str,
    kind: type | tuple[type, ...],
    record_type: str,
    *,
    optional: bool = False,
) -> Any:
    if key not in payload:
        if optional:
            return None
        raise ResponseShapeError(
            f"{record_type} payload missing '{key}'", record_type=record_type, payload=payload
        )
    value = payload[key]
    if value is None and optional:
        return None
    # bool is a subclass of int; never accept it for numeric ids
    if isinstance(value, bool) and kind is not bool:
        ok = False
    else:
        ok = isinstance(value, kind)
    if not ok:
        raise ResponseShapeError(
            f"{record_type}.{key} has unexpected type {type(value).__name__}",
            record_type=record_type,
            payload=payload,
        )
    return value


@dataclass(frozen=True)
class Issue:
    id: int
    number: int
    title: str
    body: str | None
    state: str

    @classmethod
    def from_json(cls, payload: Any) -> Issue:
        data = _require_mapping(payload, "Issue")
        return cls(
            id=_field(data, "id", int, "Issue"),
            number=_field(data, "number", int, "Issue"),
            title=_field(data, "title", str, "Issue"),
            body=_field(data, "body", str, "Issue", optional=True),
            state=_field(data, "state", str, "Issue"),
        )

    @property
    def is_open(self) -> bool:
        return self.state == "open"

    def to_json(self) -> dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True)
class Comment:
    id: int
    body: str

    @classmethod
    def from_json(cls, payload: Any) -> Comment:
        data = _require_mapping(payload, "Comment")
        return cls(
            id=_field(data, "id", int, "Comment"),
            body=_field(data, "body", str, "Comment"),
        )

    def to_json(self) -> dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True)
class Label:
    id: int
    node_id: str
    url: str
    name: str
    color: str
    default: bool
    description: str | None = None

    @classmethod
    def from_json(cls, payload: Any) -> Label:
        data = _require_mapping(payload, "Label")
        return cls(
            id=_field(data, "id", int, "Label"),
            node_id=_field(data, "node_id", str, "Label"),
            url=_field(data, "url", str, "Label"),
            name=_field(data, "name", str, "Label"),
            color=_field(data, "color", str, "Label"),
            default=_field(data, "default", bool, "Label"),
            description=_field(data, "description", str, "Label", optional=True),
        )

    def to_json(self) -> dict[str, Any]:
        return asdict(self)


def parse_list(payload: Any, parse: Callable[[Any], R], record_type: str) -> list[R]:
    """Deserialize a JSON array, failing on the first malformed element."""
    if not isinstance(payload, list):
        raise ResponseShapeError(
            f"expected a JSON array of {record_type}, got {type(payload).__name__}",
            record_type=record_type,
            payload=payload,
        )
    return [parse(item) for item in payload]


@dataclass(frozen=True)
class ApiResult(Generic[T]):
    """A deserialized record paired with the status code that produced it.

    ``record`` is ``None`` for non-success responses and for empty success
    bodies. ``message`` carries the API's error message when one was sent.
    """

    status_code: int
    record: T | None = None
    message: str | None = None

    @property
    def status(self) -> HTTPStatus | int:
        """The status as ``HTTPStatus``; codes outside the enum (e.g. 520) stay plain ints."""
        try:
            return HTTPStatus(self.status_code)
        except ValueError:
            return self.status_code

    @property
    def ok(self) -> bool:
        return 200 <= self.status_code < 300

    def unwrap(self) -> T:
        """Return the record, failing when the response carried none."""
        if self.record is None:
            raise AssertionError(
                f"expected a record, got status {self.status_code}"
                + (f": {self.message}" if self.message else "")
            )
        return self.record


__all__ = ["ApiResult", "Comment", "Issue", "Label", "ISSUE_STATES", "parse_list"]
