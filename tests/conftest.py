from datetime import datetime, timezone
from uuid import UUID

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.orm import sessionmaker

from cinemax.api.deps import get_scheduler
from cinemax.core.config import SchedulingPolicy
from cinemax.db.base import Base
from cinemax.db.session import build_engine, get_db
from cinemax.main import app
from cinemax.models.booking import Booking, BookingStatus
from cinemax.models.hall import Hall
from cinemax.models.movie import Movie, MovieStatus
from cinemax.services.locks import HallLockRegistry
from cinemax.services.scheduler import ScreeningScheduler

# Fixed "now" for every scheduler built in tests
NOW = datetime(2030, 1, 15, 12, 0, tzinfo=timezone.utc)


def at(hour: int, minute: int = 0, day: int = 15) -> datetime:
    return datetime(2030, 1, day, hour, minute, tzinfo=timezone.utc)


@pytest.fixture
def engine(tmp_path):
    # File-backed so worker threads can open their own connections
    engine = build_engine(f"sqlite:///{tmp_path / 'cinemax.db'}")
    Base.metadata.create_all(bind=engine)
    yield engine
    engine.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture
def db(session_factory):
    session = session_factory()
    yield session
    session.close()


@pytest.fixture
def policy():
    return SchedulingPolicy(retry_backoff_seconds=0, hall_lock_timeout_seconds=5)


@pytest.fixture
def locks():
    return HallLockRegistry()


@pytest.fixture
def clock():
    return lambda: NOW


@pytest.fixture
def scheduler(db, policy, locks, clock):
    return ScreeningScheduler(db, policy=policy, locks=locks, clock=clock)


@pytest.fixture
def movie(db):
    movie = Movie(title="Inception", duration_minutes=120, status=MovieStatus.NOW_SHOWING)
    db.add(movie)
    db.commit()
    return movie


@pytest.fixture
def short_movie(db):
    movie = Movie(title="Paprika", duration_minutes=100, status=MovieStatus.NOW_SHOWING)
    db.add(movie)
    db.commit()
    return movie


@pytest.fixture
def upcoming_movie(db):
    movie = Movie(title="Dune: Messiah", duration_minutes=150, status=MovieStatus.COMING_SOON)
    db.add(movie)
    db.commit()
    return movie


@pytest.fixture
def hall(db):
    hall = Hall(name="Hall 1", type="imax", capacity=120)
    db.add(hall)
    db.commit()
    return hall


@pytest.fixture
def other_hall(db):
    hall = Hall(name="Hall 2", type="standard", capacity=80)
    db.add(hall)
    db.commit()
    return hall


@pytest.fixture
def add_booking(db):
    def _add(screening_id, status=BookingStatus.CONFIRMED):
        if isinstance(screening_id, str):
            screening_id = UUID(screening_id)
        booking = Booking(screening_id=screening_id, status=status)
        db.add(booking)
        db.commit()
        return booking

    return _add


@pytest.fixture
def client(session_factory, policy, locks, clock):
    def _get_db():
        session = session_factory()
        try:
            yield session
        finally:
            session.close()

    def _get_scheduler():
        session = session_factory()
        try:
            yield ScreeningScheduler(session, policy=policy, locks=locks, clock=clock)
        finally:
            session.close()

    app.dependency_overrides[get_db] = _get_db
    app.dependency_overrides[get_scheduler] = _get_scheduler
    yield TestClient(app)
    app.dependency_overrides.clear()
