from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, cast

from .errors import ErrorCode


class DispatchStatus(str, Enum):
    OK = "ok"
    EMPTY = "empty"
    NOT_FOUND = "not-found"
    USAGE = "usage"
    FAILED = "failed"
    EXIT = "exit"


@dataclass(frozen=True)
class DispatchResult:
    """Outcome of dispatching one line.

    ``text`` is what the interactive loop prints. A matched command that
    returned an empty string is ``OK`` with empty text, never ``NOT_FOUND``.
    """

    status: DispatchStatus
    text: str = ""
    code: ErrorCode = ErrorCode.OK
    details: Dict[str, Any] = field(default_factory=lambda: cast(Dict[str, Any], {}))

    @property
    def ok(self) -> bool:
        return self.code is ErrorCode.OK

    @property
    def visible(self) -> bool:
        return self.status in (DispatchStatus.OK, DispatchStatus.NOT_FOUND, DispatchStatus.USAGE)

    @classmethod
    def output(cls, text: str, **details: Any) -> "DispatchResult":
        return cls(DispatchStatus.OK, text=text, details=details)

    @classmethod
    def fail(
        cls,
        status: DispatchStatus,
        message: str = "",
        *,
        code: ErrorCode,
        details: dict[str, Any] | None = None,
    ) -> "DispatchResult":
        return cls(status, text=message, code=code, details=details or {})


EMPTY = DispatchResult(DispatchStatus.EMPTY, code=ErrorCode.E_INPUT_EMPTY)
EXIT = DispatchResult(DispatchStatus.EXIT)
