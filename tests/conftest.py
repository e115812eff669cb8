"""Pytest configuration for global fixtures and logging setup."""
from __future__ import annotations

import os
import tempfile
from datetime import date, timedelta
from pathlib import Path
from typing import Callable, Iterator

import pytest
from fastapi.testclient import TestClient

_TMP_DIR = Path(tempfile.mkdtemp(prefix="race-plans-tests-"))
os.environ["DATABASE_URL"] = f"sqlite:///{_TMP_DIR / 'race_plans.db'}"
os.environ["LOG_DIR"] = str(_TMP_DIR / "logs")

from app.logging_config import configure_logging

configure_logging()

from app.database import Base, SessionLocal, engine
from app.main import app
from app.models.database_models import SavedState
from app.models.schemas import (
    GoalInput,
    TrainingPlan,
    Week,
    Weekday,
    Workout,
    WorkoutType,
)

Base.metadata.create_all(engine)


@pytest.fixture(scope="session")
def test_client() -> TestClient:
    """Provide a FastAPI test client."""

    return TestClient(app)


@pytest.fixture(autouse=True)
def clear_saved_state() -> Iterator[None]:
    """Each test starts without a stored goal or plan."""

    yield
    db = SessionLocal()
    try:
        db.query(SavedState).delete()
        db.commit()
    finally:
        db.close()


@pytest.fixture
def db_session():
    db = SessionLocal()
    try:
        yield db
    finally:
        db.rollback()
        db.close()


@pytest.fixture
def make_goal() -> Callable[..., GoalInput]:
    """Build a goal: 10k race ten weeks out, easy Monday, long Saturday."""

    def _make(**overrides) -> GoalInput:
        values = {
            "today_date": date(2024, 1, 1),
            "race_date": date(2024, 3, 10),
            "race_distance": "10k",
            "training_days": [
                {"day": "Mon", "workouts": [{"type": "Easy"}]},
                {"day": "Sat", "workouts": [{"type": "Long"}]},
            ],
        }
        values.update(overrides)
        return GoalInput.model_validate(values)

    return _make


def make_workout(
    workout_type: WorkoutType, distance: float, nickname: str | None = None, workout_id: str | None = None
) -> Workout:
    return Workout(
        id=workout_id or f"{workout_type.value.lower()}-{distance}-{nickname or ''}",
        type=workout_type,
        distance=distance,
        nickname=nickname,
    )


def make_week(week: int, days: dict[Weekday, list[Workout]] | None = None, weekly_total: int | None = None) -> Week:
    days = days or {}
    if weekly_total is None:
        weekly_total = round(sum(w.distance for workouts in days.values() for w in workouts))
    return Week(
        week=week,
        start_date=date(2024, 1, 1) + timedelta(weeks=week - 1),
        days=days,
        weekly_total=weekly_total,
    )


@pytest.fixture
def two_week_plan() -> TrainingPlan:
    """Week 1: Mon easy 5 km, Wed tempo 8 km + strength. Week 2: Sat long 12 km."""

    return TrainingPlan(
        weeks=[
            make_week(
                1,
                {
                    Weekday.MON: [make_workout(WorkoutType.EASY, 5, workout_id="w1-mon-easy")],
                    Weekday.WED: [
                        make_workout(WorkoutType.TEMPO, 8, workout_id="w1-wed-tempo"),
                        make_workout(WorkoutType.STRENGTH, 0, nickname="Core", workout_id="w1-wed-strength"),
                    ],
                },
            ),
            make_week(
                2,
                {Weekday.SAT: [make_workout(WorkoutType.LONG, 12, workout_id="w2-sat-long")]},
            ),
        ]
    )
