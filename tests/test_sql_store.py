from datetime import timedelta, timezone

import pytest
from sqlalchemy.dialects import postgresql, sqlite
from sqlmodel import Session, SQLModel

from yoruba.core.database import engine as db_engine
from yoruba.models.models import User
from yoruba.repositories.sql import SqlContentRepository, SqlProgressStore, user_for_update
from yoruba.services.life_service import LifePolicy
from yoruba.services.progression_service import ProgressionEngine, UserLockRegistry


@pytest.fixture
def session():
    SQLModel.metadata.drop_all(db_engine)
    SQLModel.metadata.create_all(db_engine)
    with Session(db_engine) as session:
        yield session


@pytest.fixture
def account(session):
    user = User(username="ade", password=User.hash_password("secret1"))
    session.add(user)
    session.commit()
    session.refresh(user)
    return user


class TestTimestamps:

    def test_next_life_at_round_trip(self, session, account, clock):
        store = SqlProgressStore(session)
        deadline = clock() + timedelta(minutes=30)
        with store.transaction():
            store.update_user_resources(account.id, lives=4, next_life_at=deadline)

        session.expire_all()
        resources = store.get_user_resources(account.id)

        assert resources.lives == 4
        assert resources.next_life_at == deadline
        assert resources.next_life_at.tzinfo == timezone.utc

    def test_weekly_window_query(self, session, account, clock):
        store = SqlProgressStore(session)
        with store.transaction():
            store.append_user_exercise_attempt(account.id, 1, True, clock() - timedelta(days=8))
            store.append_user_exercise_attempt(account.id, 1, True, clock() - timedelta(days=1))

        attempts = store.get_correct_attempts_since(clock() - timedelta(days=7))

        assert len(attempts) == 1
        assert attempts[0].created_at == clock() - timedelta(days=1)

    def test_regeneration_against_stored_deadline(self, session, account, clock):
        store = SqlProgressStore(session)
        with store.transaction():
            store.update_user_resources(account.id, lives=2, next_life_at=clock() - timedelta(minutes=1))
        engine = ProgressionEngine(
            SqlContentRepository(session),
            store,
            life_policy=LifePolicy(max_lives=5, regen_interval=timedelta(minutes=30)),
            clock=clock,
            locks=UserLockRegistry(),
        )

        resources = engine.refresh_lives(account.id)

        assert resources.lives == 3
        assert resources.next_life_at == clock() + timedelta(minutes=30)


class TestUserRowLock:

    def test_postgres_selects_for_update(self):
        sql = str(user_for_update(7).compile(dialect=postgresql.dialect()))
        assert "FOR UPDATE" in sql

    def test_sqlite_omits_row_lock(self):
        sql = str(user_for_update(7).compile(dialect=sqlite.dialect()))
        assert "FOR UPDATE" not in sql

    def test_lock_user_reloads_the_row(self, session, account):
        store = SqlProgressStore(session)
        with store.transaction():
            store.lock_user(account.id)
            store.update_user_resources(account.id, diamonds_delta=3)

        assert store.get_user_resources(account.id).diamonds == 3
