"""
Scheduling error taxonomy.

Every rejected scheduling request surfaces one of these. They are expected,
locally-handled outcomes: the API layer renders them as JSON and the library
caller catches ``SchedulingError``.
"""
from datetime import datetime
from typing import Optional


class SchedulingError(Exception):
    reason_code = "scheduling_error"
    status_code = 400
    retryable = False

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message
        # RequestState the request was in when it was rejected (set by the scheduler)
        self.rejected_at = None

    def to_dict(self) -> dict:
        return {"reason_code": self.reason_code, "message": self.message}


class ValidationError(SchedulingError):
    reason_code = "validation_failed"
    status_code = 422

    def __init__(self, errors: dict[str, str], message: str = "Screening request is invalid"):
        super().__init__(message)
        self.errors = dict(errors)

    def to_dict(self) -> dict:
        body = super().to_dict()
        body["errors"] = self.errors
        return body


class ConflictError(SchedulingError):
    reason_code = "schedule_conflict"
    status_code = 409

    def __init__(self, message: str, conflicting_title: str, conflicting_end_time: datetime):
        super().__init__(message)
        self.conflicting_title = conflicting_title
        self.conflicting_end_time = conflicting_end_time

    def to_dict(self) -> dict:
        body = super().to_dict()
        body["conflicting_screening"] = {
            "title": self.conflicting_title,
            "end_time": self.conflicting_end_time.isoformat(),
        }
        return body


class DeleteBlockedError(SchedulingError):
    reason_code = "active_bookings"
    status_code = 409

    def __init__(self, active_bookings: int):
        super().__init__(
            f"Cannot delete screening - it has {active_bookings} active booking(s)"
        )
        self.active_bookings = active_bookings

    def to_dict(self) -> dict:
        body = super().to_dict()
        body["active_bookings"] = self.active_bookings
        return body


class NotFoundError(SchedulingError):
    reason_code = "not_found"
    status_code = 404

    def __init__(self, entity: str, entity_id: Optional[object] = None):
        message = f"{entity} not found" if entity_id is None else f"{entity} {entity_id} not found"
        super().__init__(message)
        self.entity = entity


class StorageContentionError(SchedulingError):
    """Concurrent writes on the same hall prevented an atomic commit."""

    reason_code = "storage_contention"
    status_code = 503
    retryable = True
