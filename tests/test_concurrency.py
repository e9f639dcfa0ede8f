import threading
from decimal import Decimal

from cinemax.core.errors import ConflictError, SchedulingError, StorageContentionError
from cinemax.models.screening import Screening
from cinemax.services.scheduler import ScreeningScheduler
from conftest import at


def _race(session_factory, policy, locks, clock, jobs):
    """Run ``jobs`` (movie_id, hall_id, start) at the same instant, one session per thread."""
    barrier = threading.Barrier(len(jobs))
    results = [None] * len(jobs)

    def worker(index, movie_id, hall_id, start):
        session = session_factory()
        try:
            scheduler = ScreeningScheduler(session, policy=policy, locks=locks, clock=clock)
            barrier.wait()
            results[index] = scheduler.create_screening(movie_id, hall_id, start, Decimal("10"))
        except SchedulingError as exc:
            results[index] = exc
        finally:
            session.close()

    threads = [threading.Thread(target=worker, args=(i, *job)) for i, job in enumerate(jobs)]
    for t in threads:
        t.start()
    for t in threads:
        t.join(timeout=30)
    return results


def test_simultaneous_creates_for_same_slot_commit_once(session_factory, policy, locks, clock, db, movie, hall):
    jobs = [(movie.id, hall.id, at(18))] * 4
    results = _race(session_factory, policy, locks, clock, jobs)

    committed = [r for r in results if not isinstance(r, Exception)]
    rejected = [r for r in results if isinstance(r, Exception)]
    assert len(committed) == 1
    assert len(rejected) == 3
    assert all(isinstance(r, (ConflictError, StorageContentionError)) for r in rejected)
    assert db.query(Screening).filter(Screening.hall_id == hall.id).count() == 1


def test_partially_overlapping_race_commits_once(session_factory, policy, locks, clock, db, movie, hall):
    jobs = [(movie.id, hall.id, at(18)), (movie.id, hall.id, at(19))]
    results = _race(session_factory, policy, locks, clock, jobs)

    assert sum(1 for r in results if not isinstance(r, Exception)) == 1
    assert db.query(Screening).count() == 1


def test_different_halls_do_not_block_each_other(session_factory, policy, locks, clock, db, movie,
                                                  hall, other_hall):
    jobs = [(movie.id, hall.id, at(18)), (movie.id, other_hall.id, at(18))]
    results = _race(session_factory, policy, locks, clock, jobs)

    assert not any(isinstance(r, Exception) for r in results)
    assert {r.hall.name for r in results} == {"Hall 1", "Hall 2"}
    assert locks.get_lock(hall.id) is not locks.get_lock(other_hall.id)
