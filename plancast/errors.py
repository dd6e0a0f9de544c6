from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class PlancastError(Exception):
    code: str
    message: str

    def __str__(self) -> str:
        return f"{self.code}: {self.message}"


class InvalidHorizonError(PlancastError):
    """Forecast horizon must be a positive number of weeks."""

    def __init__(self, horizon_weeks: int) -> None:
        super().__init__(
            code="INVALID_HORIZON",
            message=f"horizon_weeks must be >= 1, got {horizon_weeks}",
        )


class InvalidInputError(PlancastError):
    """A value could not be read as a number or a known label."""

    def __init__(self, message: str) -> None:
        super().__init__(code="INVALID_INPUT", message=message)
