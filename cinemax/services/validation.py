from datetime import datetime
from decimal import Decimal, InvalidOperation
from typing import Optional

from cinemax.core.config import SchedulingPolicy
from cinemax.models.hall import Hall
from cinemax.models.movie import Movie

# Matches the DECIMAL(10, 2) price column
PRICE_QUANTUM = Decimal("0.01")


def _status_label(movie: Movie) -> str:
    status = movie.status
    return status.value if hasattr(status, "value") else str(status)


def validate_start_time(start_time: Optional[datetime], now: datetime, errors: dict) -> None:
    if start_time is None:
        errors["start_time"] = "Start time is required"
    elif start_time <= now:
        errors["start_time"] = "Start time must be in the future"


def validate_base_price(base_price, policy: SchedulingPolicy, errors: dict) -> None:
    if base_price is None:
        errors["base_price"] = "Base price is required"
        return
    try:
        price = Decimal(str(base_price))
    except (InvalidOperation, ValueError):
        errors["base_price"] = "Base price must be a number"
        return
    if not price.is_finite():
        errors["base_price"] = "Base price must be a finite number"
    elif price <= 0:
        errors["base_price"] = "Base price must be greater than 0"
    elif price > policy.max_base_price:
        errors["base_price"] = f"Base price exceeds maximum limit ({policy.max_base_price})"
    elif price != price.quantize(PRICE_QUANTUM):
        errors["base_price"] = "Base price cannot have more than 2 decimal places"


def validate_movie(movie: Optional[Movie], errors: dict, check_status: bool = True) -> None:
    if movie is None:
        errors["movie_id"] = "Selected movie not found"
        return
    if check_status and not movie.is_schedulable:
        errors["movie_id"] = f'Cannot schedule "{movie.title}" - status is {_status_label(movie)}'
    if not movie.duration_minutes or movie.duration_minutes <= 0:
        errors["movie_duration"] = "Invalid movie duration"


def validate_screening_request(
    movie_id,
    hall_id,
    start_time: Optional[datetime],
    base_price,
    movie: Optional[Movie],
    hall: Optional[Hall],
    policy: SchedulingPolicy,
    now: datetime,
) -> dict[str, str]:
    """
    Check a create request and collect every problem at once.

    ``movie``/``hall`` are the records resolved from ``movie_id``/``hall_id``
    (``None`` when the id is empty or did not resolve). Returns an empty dict
    when the request is valid, otherwise ``{field: message}``.
    """
    errors: dict[str, str] = {}

    if not movie_id or not str(movie_id).strip():
        errors["movie_id"] = "Movie is required"
    else:
        validate_movie(movie, errors)

    if not hall_id or not str(hall_id).strip():
        errors["hall_id"] = "Hall is required"
    elif hall is None or not hall.is_active:
        errors["hall_id"] = "Selected hall not found"

    validate_start_time(start_time, now, errors)
    validate_base_price(base_price, policy, errors)
    return errors


def validate_screening_update(
    start_time: Optional[datetime],
    base_price,
    movie: Optional[Movie],
    policy: SchedulingPolicy,
    now: datetime,
) -> dict[str, str]:
    """Checks for rescheduling an existing screening; hall and movie status are not re-checked."""
    errors: dict[str, str] = {}
    validate_start_time(start_time, now, errors)
    validate_base_price(base_price, policy, errors)
    validate_movie(movie, errors, check_status=False)
    return errors
