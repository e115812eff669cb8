"""API endpoints for race plan generation, calendar edits and export."""
from __future__ import annotations

import logging
from datetime import date
from typing import Annotated, Literal

from fastapi import APIRouter, Depends, HTTPException
from fastapi.responses import HTMLResponse
from pydantic import ValidationError
from sqlalchemy.orm import Session

from app.config import get_settings
from app.database import get_db
from app.models.schemas import (
    AddWorkoutRequest,
    ExportOptions,
    GoalInput,
    GoalSubmission,
    MoveWorkoutRequest,
    PlanEdit,
    PlanSummary,
    RemoveWorkoutRequest,
    TrainingPlan,
    UpdateDistanceRequest,
    UpdateNicknameRequest,
)
from app.services.plan_editor import apply_edit
from app.services.plan_exporter import export_filename, render_plan_document, summarize_plan
from app.services.plan_generator import generate_plan
from app.services.plan_store import PlanStore


logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/plans", tags=["plans"])


def _require_plan(store: PlanStore) -> TrainingPlan:
    plan = store.load_plan()
    if plan is None:
        raise HTTPException(status_code=404, detail="No training plan found. Generate a plan first.")
    return plan


def _edit_current_plan(db: Session, edit: PlanEdit) -> TrainingPlan:
    """Load the stored plan, apply one edit, store and return the result."""

    try:
        store = PlanStore(db)
        plan = _require_plan(store)
        updated = apply_edit(plan, edit)
        if updated is not plan:
            store.save_plan(updated)
        logger.info("Applied %s edit (changed=%s)", edit.action, updated is not plan)
        return updated

    except HTTPException:
        raise
    except Exception as e:
        logger.exception("Failed to apply %s edit", edit.action)
        raise HTTPException(
            status_code=500,
            detail=f"Failed to update training plan: {str(e)}"
        )


@router.post("/generate", response_model=TrainingPlan, status_code=201)
async def generate_training_plan(
    goal: GoalSubmission,
    db: Annotated[Session, Depends(get_db)],
):
    """
    Generate a new training plan from a race goal.

    The goal and the resulting plan replace whatever was stored before.

    Args:
        goal: Dates, race distance and weekly training day selection

    Returns:
        TrainingPlan: Generated calendar
    """
    try:
        plan = generate_plan(goal)

        store = PlanStore(db)
        store.save_goal(goal)
        store.save_plan(plan)

        logger.info(
            "Generated training plan: race=%s, distance=%s, weeks=%d",
            goal.race_date.isoformat(),
            goal.race_distance.value,
            len(plan.weeks),
        )
        return plan

    except Exception as e:
        logger.exception("Failed to generate training plan")
        raise HTTPException(
            status_code=500,
            detail=f"Failed to generate training plan: {str(e)}"
        )


@router.get("/current", response_model=TrainingPlan)
async def get_current_plan(db: Annotated[Session, Depends(get_db)]):
    """Return the stored training plan."""
    return _require_plan(PlanStore(db))


@router.get("/current/summary", response_model=PlanSummary)
async def get_plan_summary(db: Annotated[Session, Depends(get_db)]):
    """Return week count, total distance and peak week of the stored plan."""
    return summarize_plan(_require_plan(PlanStore(db)))


@router.get("/goal", response_model=GoalInput)
async def get_saved_goal(db: Annotated[Session, Depends(get_db)]):
    """Return the last submitted goal so the form can be pre-filled."""
    goal = PlanStore(db).load_goal()
    if goal is None:
        raise HTTPException(status_code=404, detail="No saved goal found")
    return goal


@router.delete("/current", status_code=200)
async def reset_plan(db: Annotated[Session, Depends(get_db)]):
    """Start over: forget the stored goal and plan."""
    PlanStore(db).clear()
    return {"message": "Training plan cleared"}


@router.put("/current/workouts/distance", response_model=TrainingPlan)
async def update_workout_distance(
    edit: UpdateDistanceRequest,
    db: Annotated[Session, Depends(get_db)],
):
    """Change one workout's distance; the week total is recomputed."""
    return _edit_current_plan(db, edit)


@router.put("/current/workouts/nickname", response_model=TrainingPlan)
async def update_workout_nickname(
    edit: UpdateNicknameRequest,
    db: Annotated[Session, Depends(get_db)],
):
    """Set or clear one workout's nickname."""
    return _edit_current_plan(db, edit)


@router.post("/current/workouts", response_model=TrainingPlan)
async def add_workout(
    edit: AddWorkoutRequest,
    db: Annotated[Session, Depends(get_db)],
):
    """Append a workout to a day."""
    return _edit_current_plan(db, edit)


@router.delete("/current/workouts/{week}/{day}/{index}", response_model=TrainingPlan)
async def remove_workout(
    week: int,
    day: str,
    index: int,
    db: Annotated[Session, Depends(get_db)],
):
    """Remove one workout from a day."""
    return _edit_current_plan(db, RemoveWorkoutRequest(week=week, day=day, index=index))


@router.post("/current/workouts/move", response_model=TrainingPlan)
async def move_workout(
    edit: MoveWorkoutRequest,
    db: Annotated[Session, Depends(get_db)],
):
    """Reorder a workout within its day or move it to another day or week."""
    return _edit_current_plan(db, edit)


@router.get("/current/export", response_class=HTMLResponse)
async def export_plan(
    db: Annotated[Session, Depends(get_db)],
    title: str | None = None,
    orientation: Literal["portrait", "landscape"] | None = None,
    header_color: str | None = None,
    download: bool = False,
):
    """
    Render the stored plan as a printable page.

    Args:
        title: Document title (defaults to EXPORT_TITLE)
        orientation: portrait or landscape A4 page
        header_color: Hex colour of the table header row
        download: Serve as an attachment named training-plan-YYYY-MM-DD.html

    Returns:
        HTMLResponse: The rendered document
    """
    plan = _require_plan(PlanStore(db))

    settings = get_settings()
    try:
        options = ExportOptions(
            title=title or settings.export_title,
            orientation=orientation or settings.export_orientation,
            header_color=header_color or settings.export_header_color,
        )
    except ValidationError as e:
        logger.warning("Invalid export options: %s", e.errors())
        raise HTTPException(status_code=400, detail="Invalid export options")

    html = render_plan_document(plan, options)
    headers = {}
    if download:
        headers["Content-Disposition"] = f'attachment; filename="{export_filename(date.today())}"'
    return HTMLResponse(content=html, headers=headers)
