"""
Typed outcomes of gateway operations and their HTTP rendering.
"""
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict, Union

from fastapi.responses import JSONResponse


class FailureKind(str, Enum):
    CONFIGURATION = "CONFIGURATION"
    VALIDATION = "VALIDATION"
    NOT_FOUND = "NOT_FOUND"
    UPSTREAM = "UPSTREAM"
    CONTRACT_VIOLATION = "CONTRACT_VIOLATION"


STATUS_BY_KIND = {
    FailureKind.CONFIGURATION: 500,
    FailureKind.VALIDATION: 400,
    FailureKind.NOT_FOUND: 404,
    FailureKind.UPSTREAM: 500,
    FailureKind.CONTRACT_VIOLATION: 500,
}


@dataclass
class Success:
    payload: Dict[str, Any]


@dataclass
class Failure:
    kind: FailureKind
    message: str
    details: Dict[str, Any] = field(default_factory=dict)

    @property
    def status_code(self) -> int:
        return STATUS_BY_KIND[self.kind]


Result = Union[Success, Failure]


def utc_timestamp() -> str:
    """ISO-8601 UTC timestamp with millisecond precision."""
    return datetime.now(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


def error_body(message: str, **details: Any) -> Dict[str, Any]:
    body = {"success": False, "error": message}
    body.update(details)
    body.setdefault("timestamp", utc_timestamp())
    return body


def to_response(result: Result) -> JSONResponse:
    if isinstance(result, Success):
        return JSONResponse(status_code=200, content={"success": True, "data": result.payload})
    return JSONResponse(
        status_code=result.status_code,
        content=error_body(result.message, **result.details),
    )
