"""
Domain errors raised by the scheduling engine.

Each error is raised where the rule is checked and propagates unchanged to the
request boundary, where ``clinicops.main`` maps it to an HTTP response.
Only ScheduleBusyError is transient; the rest need a different request.
"""

from typing import Any
from uuid import UUID


class ClinicOpsError(Exception):
    """Base class for all application errors."""

    status_code: int = 400

    def __init__(self, message: str = "An application error occurred") -> None:
        super().__init__(message)
        self.message = message

    def __str__(self) -> str:
        return self.message

    def to_payload(self) -> dict[str, Any]:
        return {"detail": self.message}


class SchedulingError(ClinicOpsError):
    """Calendar, overlap or edit-guard rule violation."""

    def __init__(self, message: str, violation: str | None = None) -> None:
        super().__init__(message)
        self.violation = violation

    def to_payload(self) -> dict[str, Any]:
        payload = super().to_payload()
        if self.violation:
            payload["violation"] = self.violation
        return payload


class SessionLimitError(ClinicOpsError):
    """All contracted sessions of a treatment-plan procedure are already booked."""

    def __init__(self, contracted_sessions: int, scheduled_dates: list[str]) -> None:
        message = (
            f"All {contracted_sessions} contracted session(s) are already booked on: "
            + ", ".join(scheduled_dates)
        )
        super().__init__(message)
        self.contracted_sessions = contracted_sessions
        self.scheduled_dates = scheduled_dates

    def to_payload(self) -> dict[str, Any]:
        payload = super().to_payload()
        payload["contracted_sessions"] = self.contracted_sessions
        payload["scheduled_dates"] = self.scheduled_dates
        return payload


class NotFoundError(ClinicOpsError):
    """A referenced clinic, professional, procedure or appointment does not exist."""

    status_code = 404

    def __init__(self, entity: str, entity_id: UUID | str) -> None:
        super().__init__(f"{entity} {entity_id} not found")
        self.entity = entity
        self.entity_id = entity_id


class ScheduleBusyError(ClinicOpsError):
    """Timed out waiting for another booking on the same calendar or session budget."""

    status_code = 503

    def __init__(self, key: UUID) -> None:
        super().__init__(f"Schedule {key} is busy with another booking, try again")
        self.key = key
