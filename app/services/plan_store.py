"""Persistence of the last submitted goal and the last generated plan."""
from __future__ import annotations

import logging
from datetime import datetime
from typing import TypeVar

from pydantic import BaseModel, ValidationError
from sqlalchemy.orm import Session

from app.models.database_models import SavedState
from app.models.schemas import GoalInput, TrainingPlan


logger = logging.getLogger(__name__)

GOAL_KEY = "training-form-values"
PLAN_KEY = "training-plan"

ModelT = TypeVar("ModelT", bound=BaseModel)


class PlanStore:
    """Load and save planner state as opaque whole-value blobs."""

    def __init__(self, db: Session):
        """Initialize with the caller's database session."""
        self.db = db

    def _save(self, key: str, value: BaseModel) -> None:
        payload = value.model_dump(mode="json")
        row = self.db.get(SavedState, key)
        if row is None:
            self.db.add(SavedState(key=key, payload=payload))
        else:
            row.payload = payload
            row.updated_at = datetime.utcnow()
        self.db.flush()

    def _load(self, key: str, model: type[ModelT]) -> ModelT | None:
        row = self.db.get(SavedState, key)
        if row is None:
            return None
        try:
            return model.model_validate(row.payload)
        except ValidationError:
            logger.warning("Stored %s payload is no longer valid - ignoring it", key, exc_info=True)
            return None

    def save_goal(self, goal: GoalInput) -> None:
        self._save(GOAL_KEY, goal)

    def load_goal(self) -> GoalInput | None:
        return self._load(GOAL_KEY, GoalInput)

    def save_plan(self, plan: TrainingPlan) -> None:
        self._save(PLAN_KEY, plan)
        logger.info("Saved plan with %d weeks", len(plan.weeks))

    def load_plan(self) -> TrainingPlan | None:
        return self._load(PLAN_KEY, TrainingPlan)

    def last_saved_at(self) -> datetime | None:
        """Timestamp of the last plan write, if a plan is stored."""
        row = self.db.get(SavedState, PLAN_KEY)
        return row.updated_at if row else None

    def clear(self) -> None:
        """Forget both the goal and the plan."""
        deleted = (
            self.db.query(SavedState)
            .filter(SavedState.key.in_([GOAL_KEY, PLAN_KEY]))
            .delete()
        )
        self.db.flush()
        logger.info("Cleared saved planner state (%d entries)", deleted)
