# Shared fixtures: a virtual-clock scheduler so playback timing is
# deterministic, plus ready-made controller, session and Flask client.

import itertools

import pytest

from config import Settings
from algorithms import generate_steps
from engine import ManualScheduler, PlaybackController, SortingSession
from main import create_app


@pytest.fixture
def settings():
    return Settings()


@pytest.fixture
def scheduler():
    return ManualScheduler()


@pytest.fixture
def controller(settings, scheduler):
    return PlaybackController(settings, scheduler)


@pytest.fixture
def three_steps():
    # [1, 2]: one compare, the pass-end step, the completion step
    steps = generate_steps("bubble_sort", [1, 2])
    assert len(steps) == 3
    return steps


@pytest.fixture
def session(settings, scheduler):
    sess = SortingSession(settings, scheduler)
    ids = itertools.count(1)
    sess.store._id_factory = lambda: f"snap-{next(ids)}"
    return sess


@pytest.fixture
def app(settings, scheduler):
    app = create_app(settings=settings, scheduler=scheduler)
    app.config.update(TESTING=True)
    return app


@pytest.fixture
def client(app):
    return app.test_client()
