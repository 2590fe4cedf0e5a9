import os
from datetime import datetime, timedelta, timezone
from types import SimpleNamespace

import pytest

# Must be set before yoruba.core.database creates its engine
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["SEED_ON_STARTUP"] = "false"

from yoruba.models.enums import LevelColor
from yoruba.repositories.memory import MemoryContentRepository, MemoryProgressStore
from yoruba.schemas.content import ChoiceOption, MultipleChoiceContent
from yoruba.services.life_service import LifePolicy
from yoruba.services.progression_service import ProgressionEngine, UserLockRegistry
from yoruba.services.reward_service import DEFAULT_LEVEL_XP


class FakeClock:
    """Callable clock that only moves when told to."""

    def __init__(self, now: datetime):
        self.now = now

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs) -> datetime:
        self.now = self.now + timedelta(**kwargs)
        return self.now


def multiple_choice(correct_id: int = 1, count: int = 3) -> MultipleChoiceContent:
    return MultipleChoiceContent(options=[
        ChoiceOption(id=option_id, text=f"option {option_id}", is_correct=option_id == correct_id)
        for option_id in range(1, count + 1)
    ])


@pytest.fixture
def clock():
    return FakeClock(datetime(2026, 3, 2, 12, 0, 0, tzinfo=timezone.utc))


@pytest.fixture
def world(clock):
    """
    Two trails of four tiered levels. Trail 1 level 1 has five exercises,
    every other level has two.
    """
    content = MemoryContentRepository()
    trails = {}
    levels = {}
    for trail_order in (1, 2):
        trail = content.add_trail(f"Trilha {trail_order}", trail_order)
        trails[trail_order] = trail
        for level_order, color in enumerate(LevelColor, start=1):
            level = content.add_level(trail.id, level_order, color, DEFAULT_LEVEL_XP[color])
            levels[(trail_order, level_order)] = level
            exercise_count = 5 if (trail_order, level_order) == (1, 1) else 2
            for index in range(exercise_count):
                content.add_exercise(level.id, f"T{trail_order}L{level_order} Q{index + 1}", multiple_choice())

    store = MemoryProgressStore(content)
    user = store.add_user("ade")
    engine = ProgressionEngine(
        content,
        store,
        life_policy=LifePolicy(max_lives=5, regen_interval=timedelta(minutes=30)),
        clock=clock,
        locks=UserLockRegistry(),
    )
    return SimpleNamespace(
        content=content,
        store=store,
        engine=engine,
        user=user,
        trails=trails,
        levels=levels,
        clock=clock,
    )


@pytest.fixture
def play_level():
    """Answer every remaining exercise of a level correctly; returns the last result."""

    def _play(world, level, user_id=None):
        user_id = user_id or world.user.user_id
        entry = world.engine.start_or_resume_level(user_id, level.id)
        result = None
        exercise = entry.exercise
        while exercise is not None:
            result = world.engine.submit_answer(user_id, level.id, exercise.id, True)
            exercise = result.next_exercise
        return result if result is not None else entry

    return _play


@pytest.fixture
def client():
    """TestClient over a fresh in-memory database loaded with the starter content."""
    from fastapi.testclient import TestClient
    from sqlmodel import Session, SQLModel

    from yoruba.core.database import engine as db_engine
    from yoruba.main import app
    from yoruba.models import models  # noqa: F401
    from yoruba.services.seed_service import seed_content

    SQLModel.metadata.drop_all(db_engine)
    SQLModel.metadata.create_all(db_engine)
    with Session(db_engine) as session:
        seed_content(session)

    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def db_session(client):
    from sqlmodel import Session

    from yoruba.core.database import engine as db_engine

    with Session(db_engine) as session:
        yield session


@pytest.fixture
def register(client):
    """Register a learner through the API and return its user payload."""

    def _register(username="ade", password="secret1", email=None):
        payload = {"username": username, "password": password}
        if email:
            payload["email"] = email
        response = client.post("/api/v1/auth/register", json=payload)
        assert response.status_code == 201, response.text
        return response.json()["user"]

    return _register
