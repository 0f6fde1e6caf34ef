"""Result model for dispatched method calls."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Literal, Optional


ResultStatus = Literal["success", "error", "not_implemented"]


@dataclass(slots=True)
class MethodResult:
    """Outcome of one method call: a value, a tagged error, or not implemented."""

    status: ResultStatus
    value: Any = None

    error_code: Optional[str] = None
    error_message: Optional[str] = None
    error_details: Optional[dict[str, Any]] = None

    @classmethod
    def success(cls, value: Any) -> MethodResult:
        return cls(status="success", value=value)

    @classmethod
    def error(
        cls,
        code: str,
        message: Optional[str] = None,
        details: Optional[dict[str, Any]] = None,
    ) -> MethodResult:
        return cls(
            status="error",
            error_code=code,
            error_message=message,
            error_details=details,
        )

    @classmethod
    def not_implemented(cls) -> MethodResult:
        return cls(status="not_implemented")

    @property
    def ok(self) -> bool:
        return self.status == "success"
