"""
Custom exceptions for flexhours operations.

Every recognised failure of an acquisition cycle maps to one of these classes.
Each carries the user-facing message and whether a retry makes sense.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from flexhours.domain.validation import ValidationResult


class FlexHoursError(Exception):
    """Base exception for all flexhours errors."""

    retryable: bool = True

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class NoDataFound(FlexHoursError):
    """Raised when no worked-time fragment could be located in a snapshot."""

    def __init__(
        self, message: str = "근무 시간 데이터를 찾을 수 없습니다. 페이지를 새로고침해주세요."
    ) -> None:
        super().__init__(message)


class ValidationFailed(FlexHoursError):
    """Raised when parsed time data fails validation."""

    def __init__(self, result: ValidationResult) -> None:
        super().__init__(", ".join(result.errors))
        self.result = result


class AcquisitionTimedOut(FlexHoursError):
    """Raised when the hard acquisition timeout passes without a result."""

    def __init__(
        self,
        message: str = "근무 시간 데이터를 찾을 수 없습니다. 페이지를 새로고침해주세요.",
        cause: FlexHoursError | None = None,
    ) -> None:
        super().__init__(message)
        self.cause = cause


class CalculationError(FlexHoursError):
    """Raised when an unexpected error interrupts a calculation."""

    def __init__(
        self, message: str = "시간 계산 중 오류가 발생했습니다. 페이지를 새로고침해주세요."
    ) -> None:
        super().__init__(message)


class PresentationFailure(FlexHoursError):
    """Raised when the presenter fails to build the result display."""

    retryable = False

    def __init__(self, message: str = "화면 표시 중 오류가 발생했습니다.") -> None:
        super().__init__(message)
