"""Printable rendering of a finalized training plan."""
from __future__ import annotations

import logging
from datetime import date
from pathlib import Path

from jinja2 import Environment, FileSystemLoader, select_autoescape

from app.models.schemas import ExportOptions, PlanSummary, TrainingPlan, Weekday, Workout


logger = logging.getLogger(__name__)

TEMPLATES_DIR = Path(__file__).resolve().parent.parent / "templates"
EXPORT_TEMPLATE = "plan_export.html"


def format_km(distance: float | None) -> str:
    """Render a distance without a trailing ``.0`` (5.0 -> "5", 21.1 -> "21.1")."""

    if not distance:
        return "0"
    if float(distance).is_integer():
        return str(int(distance))
    return f"{distance:g}"


def workout_label(workout: Workout) -> str:
    return workout.nickname or workout.type.value


def _environment() -> Environment:
    env = Environment(
        loader=FileSystemLoader(str(TEMPLATES_DIR)),
        autoescape=select_autoescape(["html"]),
        trim_blocks=True,
        lstrip_blocks=True,
    )
    env.filters["km"] = format_km
    env.filters["workout_label"] = workout_label
    return env


def render_plan_document(plan: TrainingPlan, options: ExportOptions | None = None) -> str:
    """
    Lay out the plan as a one-table printable HTML page.

    Each week row lists every workout of every day (distance plus nickname or
    type), "Rest" for empty days, and the week's stored total. Totals are
    printed as stored and never recomputed here.

    Args:
        plan: Plan to render, read-only
        options: Title, page orientation and header colour

    Returns:
        Complete HTML document as a string
    """
    options = options or ExportOptions()
    html = _environment().get_template(EXPORT_TEMPLATE).render(
        plan=plan,
        options=options,
        weekdays=list(Weekday),
    )
    logger.info(
        "Rendered plan export: weeks=%d, orientation=%s",
        len(plan.weeks),
        options.orientation,
    )
    return html


def export_filename(on: date) -> str:
    """Download name for an export produced on ``on``."""
    return f"training-plan-{on.isoformat()}.html"


def summarize_plan(plan: TrainingPlan) -> PlanSummary:
    """Headline figures shown before exporting."""

    peak = max(plan.weeks, key=lambda week: week.weekly_total, default=None)
    return PlanSummary(
        total_weeks=len(plan.weeks),
        total_workouts=plan.workout_count(),
        total_distance=sum(week.weekly_total for week in plan.weeks),
        peak_week=peak.week if peak else None,
        peak_weekly_total=peak.weekly_total if peak else 0,
    )
