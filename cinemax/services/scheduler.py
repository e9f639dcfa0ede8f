"""
Screening scheduling transaction manager.

Each create/update/delete request walks a small state machine:

    RECEIVED -> VALIDATED -> CONFLICT_CHECKED -> COMMITTED
    RECEIVED | VALIDATED | CONFLICT_CHECKED -> REJECTED

The conflict check and the write for a hall happen in one database
transaction while the hall's lock is held, so two requests for the same hall
can never both pass the check. Requests for different halls do not contend.
"""
import enum
import logging
import time
from datetime import datetime
from decimal import Decimal
from typing import Callable, Optional
from uuid import UUID

from sqlalchemy import func
from sqlalchemy.exc import DBAPIError
from sqlalchemy.orm import Session

from cinemax.core.config import SchedulingPolicy, settings
from cinemax.core.errors import (
    ConflictError,
    DeleteBlockedError,
    NotFoundError,
    SchedulingError,
    StorageContentionError,
    ValidationError,
)
from cinemax.db.types import as_utc
from cinemax.models.booking import Booking, ACTIVE_BOOKING_STATUSES
from cinemax.models.hall import Hall
from cinemax.models.movie import Movie
from cinemax.models.screening import Screening
from cinemax.schemas.screening import ScreeningView
from cinemax.services.conflicts import find_conflicting_screening
from cinemax.services.locks import HallLockRegistry, hall_locks
from cinemax.services.validation import PRICE_QUANTUM, validate_screening_request, validate_screening_update
from cinemax.utils.scheduling import compute_end_time, format_conflict_message, utcnow

logger = logging.getLogger(__name__)

# PostgreSQL: serialization_failure, deadlock_detected, lock_not_available
_CONTENTION_PGCODES = {"40001", "40P01", "55P03"}


class RequestState(str, enum.Enum):
    RECEIVED = "received"
    VALIDATED = "validated"
    CONFLICT_CHECKED = "conflict_checked"
    COMMITTED = "committed"
    REJECTED = "rejected"


_TRANSITIONS = {
    RequestState.RECEIVED: {RequestState.VALIDATED, RequestState.REJECTED},
    # delete has no conflict check and commits straight from VALIDATED
    RequestState.VALIDATED: {RequestState.CONFLICT_CHECKED, RequestState.COMMITTED, RequestState.REJECTED},
    RequestState.CONFLICT_CHECKED: {RequestState.COMMITTED, RequestState.REJECTED},
    RequestState.COMMITTED: set(),
    RequestState.REJECTED: set(),
}


class SchedulingRequest:
    """Progress of a single scheduling request through the state machine."""

    def __init__(self, operation: str, attempt: int = 1):
        self.operation = operation
        self.attempt = attempt
        self.state = RequestState.RECEIVED
        self.history = [RequestState.RECEIVED]

    def advance(self, state: RequestState) -> None:
        if state not in _TRANSITIONS[self.state]:
            raise RuntimeError(f"Illegal transition {self.state.value} -> {state.value}")
        logger.debug("%s (attempt %d): %s -> %s", self.operation, self.attempt, self.state.value, state.value)
        self.state = state
        self.history.append(state)

    def reject(self, error: SchedulingError) -> SchedulingError:
        error.rejected_at = self.state
        self.advance(RequestState.REJECTED)
        logger.info("%s rejected at %s: [%s] %s", self.operation, error.rejected_at.value, error.reason_code, error.message)
        return error


def _is_contention(exc: DBAPIError) -> bool:
    orig = exc.orig
    if getattr(orig, "pgcode", None) in _CONTENTION_PGCODES:
        return True
    # SQLite reports writer contention as an OperationalError
    return "database is locked" in str(orig).lower()


def _parse_id(value) -> Optional[UUID]:
    if value is None or isinstance(value, UUID):
        return value
    try:
        return UUID(str(value).strip())
    except ValueError:
        return None


class ScreeningScheduler:
    """
    Creates, reschedules and deletes screenings on one database session.

    ``locks`` should be shared by every scheduler in the process; ``clock``
    supplies "now" for the future-only start time rule.
    """

    def __init__(
        self,
        db: Session,
        policy: Optional[SchedulingPolicy] = None,
        locks: Optional[HallLockRegistry] = None,
        clock: Callable[[], datetime] = utcnow,
    ):
        self.db = db
        self.policy = policy or settings.scheduling_policy()
        self.locks = locks or hall_locks
        self.clock = clock

    # ------------------------------------------------------------------
    # Public operations
    # ------------------------------------------------------------------

    def create_screening(self, movie_id, hall_id, start_time: Optional[datetime], base_price) -> ScreeningView:
        return self._run("create_screening", self._create, movie_id, hall_id, start_time, base_price)

    def update_screening(self, screening_id, start_time: Optional[datetime], base_price) -> ScreeningView:
        return self._run("update_screening", self._update, screening_id, start_time, base_price)

    def delete_screening(self, screening_id) -> None:
        self._run("delete_screening", self._delete, screening_id)

    # ------------------------------------------------------------------
    # Retry / rejection envelope
    # ------------------------------------------------------------------

    def _run(self, operation: str, step, *args):
        attempt = 1
        while True:
            request = SchedulingRequest(operation, attempt)
            try:
                try:
                    return step(request, *args)
                except DBAPIError as exc:
                    if not _is_contention(exc):
                        raise
                    raise StorageContentionError("Concurrent writes on this hall, please retry") from exc
            except SchedulingError as exc:
                self.db.rollback()
                if request.state is not RequestState.REJECTED:
                    request.reject(exc)
                if not exc.retryable or attempt >= self.policy.max_attempts:
                    raise
                delay = self.policy.retry_backoff_seconds * (2 ** (attempt - 1))
                logger.warning(
                    "%s hit storage contention (attempt %d/%d), retrying in %.3fs",
                    operation, attempt, self.policy.max_attempts, delay,
                )
                time.sleep(delay)
                attempt += 1
            except Exception:
                self.db.rollback()
                raise

    # ------------------------------------------------------------------
    # Steps
    # ------------------------------------------------------------------

    def _create(self, request: SchedulingRequest, movie_id, hall_id, start_time, base_price) -> ScreeningView:
        movie_uuid = _parse_id(movie_id)
        hall_uuid = _parse_id(hall_id)
        if start_time is not None:
            start_time = as_utc(start_time)

        movie = self.db.get(Movie, movie_uuid) if movie_uuid else None
        hall = self.db.get(Hall, hall_uuid) if hall_uuid else None

        errors = validate_screening_request(
            movie_id, hall_id, start_time, base_price, movie, hall, self.policy, self.clock()
        )
        if errors:
            raise ValidationError(errors)
        request.advance(RequestState.VALIDATED)

        end_time = compute_end_time(start_time, movie.duration_minutes, self.policy.buffer_minutes)

        with self.locks.hold(hall.id, self.policy.hall_lock_timeout_seconds):
            self._lock_hall_row(hall.id)
            self._check_conflict(hall.id, start_time, end_time)
            request.advance(RequestState.CONFLICT_CHECKED)

            screening = Screening(
                movie_id=movie.id,
                hall_id=hall.id,
                start_time=start_time,
                end_time=end_time,
                base_price=Decimal(str(base_price)).quantize(PRICE_QUANTUM),
            )
            self.db.add(screening)
            self.db.commit()
            request.advance(RequestState.COMMITTED)

        logger.info(
            'Scheduled "%s" in hall %s from %s to %s (screening %s)',
            movie.title, hall.name, start_time.isoformat(), end_time.isoformat(), screening.id,
        )
        return ScreeningView.model_validate(screening)

    def _update(self, request: SchedulingRequest, screening_id, start_time, base_price) -> ScreeningView:
        screening_uuid = _parse_id(screening_id)
        screening = self.db.get(Screening, screening_uuid) if screening_uuid else None
        if not screening:
            raise NotFoundError("Screening", screening_id)
        if start_time is not None:
            start_time = as_utc(start_time)

        movie = screening.movie
        errors = validate_screening_update(start_time, base_price, movie, self.policy, self.clock())
        if errors:
            raise ValidationError(errors)
        request.advance(RequestState.VALIDATED)

        hall_id = screening.hall_id

        with self.locks.hold(hall_id, self.policy.hall_lock_timeout_seconds):
            self._lock_hall_row(hall_id)
            screening = self._reload_for_update(screening_uuid)
            # end_time must follow the runtime as it stands under the lock
            movie = self.db.get(Movie, screening.movie_id, populate_existing=True)
            end_time = compute_end_time(start_time, movie.duration_minutes, self.policy.buffer_minutes)
            self._check_conflict(hall_id, start_time, end_time, exclude_screening_id=screening.id)
            request.advance(RequestState.CONFLICT_CHECKED)

            screening.start_time = start_time
            screening.end_time = end_time
            screening.base_price = Decimal(str(base_price)).quantize(PRICE_QUANTUM)
            self.db.commit()
            request.advance(RequestState.COMMITTED)

        logger.info("Rescheduled screening %s to %s-%s", screening.id, start_time.isoformat(), end_time.isoformat())
        return ScreeningView.model_validate(screening)

    def _delete(self, request: SchedulingRequest, screening_id) -> None:
        screening_uuid = _parse_id(screening_id)
        screening = self.db.get(Screening, screening_uuid) if screening_uuid else None
        if not screening:
            raise NotFoundError("Screening", screening_id)
        hall_id = screening.hall_id

        with self.locks.hold(hall_id, self.policy.hall_lock_timeout_seconds):
            self._lock_hall_row(hall_id)
            screening = self._reload_for_update(screening_uuid)
            active = (
                self.db.query(func.count(Booking.id))
                .filter(
                    Booking.screening_id == screening.id,
                    Booking.status.in_(ACTIVE_BOOKING_STATUSES),
                )
                .scalar()
            )
            if active:
                raise DeleteBlockedError(active)
            request.advance(RequestState.VALIDATED)

            title = screening.movie.title if screening.movie else ""
            self.db.delete(screening)
            self.db.commit()
            request.advance(RequestState.COMMITTED)

        logger.info('Deleted screening %s ("%s")', screening_uuid, title)

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _lock_hall_row(self, hall_id: UUID) -> None:
        # Serialises writers across processes; ignored by SQLite
        self.db.query(Hall.id).filter(Hall.id == hall_id).with_for_update().first()

    def _reload_for_update(self, screening_id: UUID) -> Screening:
        screening = (
            self.db.query(Screening)
            .filter(Screening.id == screening_id)
            .populate_existing()
            .with_for_update()
            .first()
        )
        if not screening:
            raise NotFoundError("Screening", screening_id)
        return screening

    def _check_conflict(self, hall_id: UUID, start_time: datetime, end_time: datetime,
                        exclude_screening_id: Optional[UUID] = None) -> None:
        conflict = find_conflicting_screening(
            self.db, hall_id, start_time, end_time, exclude_screening_id=exclude_screening_id
        )
        if conflict:
            title = conflict.movie.title if conflict.movie else ""
            raise ConflictError(
                format_conflict_message(title, conflict.end_time, self.policy.buffer_minutes),
                conflicting_title=title,
                conflicting_end_time=conflict.end_time,
            )
