"""Calendar edits over an existing training plan.

Every operation returns a new ``TrainingPlan`` and leaves its input untouched.
Weeks and workouts that an edit does not touch are shared between the old and
the new plan, which is safe because all plan models are frozen.

Addressing that does not resolve to an existing location (unknown week number,
bad day key, stale workout index) is a no-op: the plan is returned unchanged.
"""
from __future__ import annotations

import logging
import math
from typing import Any

from app.models.schemas import (
    MAX_DISTANCE_KM,
    AddWorkoutRequest,
    MoveWorkoutRequest,
    PlanEdit,
    RemoveWorkoutRequest,
    TrainingPlan,
    UpdateDistanceRequest,
    UpdateNicknameRequest,
    Week,
    Weekday,
    Workout,
    WorkoutType,
)
from app.models.workout_library import (
    ADDED_WORKOUT_DISTANCE_KM,
    DEFAULT_ADDED_WORKOUT_DISTANCE_KM,
)
from app.services.plan_generator import clean_nickname, new_workout_id, round_half_up


logger = logging.getLogger(__name__)

DayKey = Weekday | str


def coerce_distance(value: Any) -> float:
    """Coerce user input to a distance between 0 and MAX_DISTANCE_KM; anything invalid becomes 0."""

    if value is None or isinstance(value, bool):
        return 0.0
    if isinstance(value, str):
        value = value.strip()
        if not value:
            return 0.0
    try:
        distance = float(value)
    except (TypeError, ValueError):
        return 0.0
    if not math.isfinite(distance) or not 0 <= distance <= MAX_DISTANCE_KM:
        return 0.0
    return distance


def _coerce_day(day: DayKey) -> Weekday | None:
    try:
        return Weekday(day)
    except (TypeError, ValueError):
        return None


def _is_index(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool) and value >= 0


def _find_week_index(plan: TrainingPlan, week_number: int) -> int | None:
    for position, week in enumerate(plan.weeks):
        if week.week == week_number:
            return position
    return None


def _locate(
    plan: TrainingPlan, week_number: int, day: DayKey, index: int
) -> tuple[int, Weekday] | None:
    """Resolve a (week, day, index) address, or None if it names no workout."""

    position = _find_week_index(plan, week_number)
    weekday = _coerce_day(day)
    if position is None or weekday is None or not _is_index(index):
        return None
    if index >= len(plan.weeks[position].days[weekday]):
        return None
    return position, weekday


def _ignored(operation: str, **address: Any) -> None:
    logger.debug("Ignoring %s at unknown location %s", operation, address)


def recalculate_weekly_total(week: Week) -> Week:
    """Return ``week`` with its total recomputed from every workout of every day."""

    return _rebuild_week(week, week.days)


def _rebuild_week(
    week: Week, days: dict[Weekday, list[Workout]], weekly_total: int | None = None
) -> Week:
    if weekly_total is None:
        total = sum(workout.distance for workouts in days.values() for workout in workouts)
        weekly_total = round_half_up(total)
    return Week(
        week=week.week,
        start_date=week.start_date,
        days=days,
        weekly_total=weekly_total,
    )


def _replace_weeks(plan: TrainingPlan, replacements: dict[int, Week]) -> TrainingPlan:
    weeks = list(plan.weeks)
    for position, week in replacements.items():
        weeks[position] = week
    return TrainingPlan(weeks=weeks)


def _replace_workout(
    plan: TrainingPlan,
    position: int,
    weekday: Weekday,
    index: int,
    workout: Workout,
    recalculate: bool = True,
) -> TrainingPlan:
    week = plan.weeks[position]
    days = dict(week.days)
    workouts = list(days[weekday])
    workouts[index] = workout
    days[weekday] = workouts
    weekly_total = None if recalculate else week.weekly_total
    return _replace_weeks(plan, {position: _rebuild_week(week, days, weekly_total)})


def update_distance(
    plan: TrainingPlan, week: int, day: DayKey, index: int, distance: Any
) -> TrainingPlan:
    """Set one workout's distance and recompute its week's total."""

    location = _locate(plan, week, day, index)
    if location is None:
        _ignored("update_distance", week=week, day=day, index=index)
        return plan

    position, weekday = location
    current = plan.weeks[position].days[weekday][index]
    updated = current.model_copy(update={"distance": coerce_distance(distance)})
    return _replace_workout(plan, position, weekday, index, updated)


def update_nickname(
    plan: TrainingPlan, week: int, day: DayKey, index: int, nickname: str | None
) -> TrainingPlan:
    """Set or clear one workout's nickname. Totals are unaffected."""

    location = _locate(plan, week, day, index)
    if location is None:
        _ignored("update_nickname", week=week, day=day, index=index)
        return plan

    position, weekday = location
    current = plan.weeks[position].days[weekday][index]
    updated = current.model_copy(update={"nickname": clean_nickname(nickname)})
    return _replace_workout(plan, position, weekday, index, updated, recalculate=False)


def add_workout(
    plan: TrainingPlan,
    week: int,
    day: DayKey,
    workout_type: WorkoutType | str,
    nickname: str | None = None,
) -> TrainingPlan:
    """
    Append a new workout to the end of a day.

    Strength workouts start at 0 km, every other type at 5 km. Rest is the
    absence of workouts, so adding a Rest entry is a no-op.
    """
    position = _find_week_index(plan, week)
    weekday = _coerce_day(day)
    try:
        workout_type = WorkoutType(workout_type)
    except (TypeError, ValueError):
        workout_type = None
    if position is None or weekday is None or workout_type in (None, WorkoutType.REST):
        _ignored("add_workout", week=week, day=day, type=workout_type)
        return plan

    workout = Workout(
        id=new_workout_id(),
        type=workout_type,
        distance=ADDED_WORKOUT_DISTANCE_KM.get(workout_type, DEFAULT_ADDED_WORKOUT_DISTANCE_KM),
        nickname=clean_nickname(nickname),
    )
    target = plan.weeks[position]
    days = dict(target.days)
    days[weekday] = [*days[weekday], workout]
    return _replace_weeks(plan, {position: _rebuild_week(target, days)})


def remove_workout(plan: TrainingPlan, week: int, day: DayKey, index: int) -> TrainingPlan:
    """Delete one workout and recompute its week's total."""

    location = _locate(plan, week, day, index)
    if location is None:
        _ignored("remove_workout", week=week, day=day, index=index)
        return plan

    position, weekday = location
    target = plan.weeks[position]
    days = dict(target.days)
    days[weekday] = [w for i, w in enumerate(days[weekday]) if i != index]
    return _replace_weeks(plan, {position: _rebuild_week(target, days)})


def move_workout(
    plan: TrainingPlan,
    from_week: int,
    from_day: DayKey,
    from_index: int,
    to_week: int,
    to_day: DayKey,
    to_index: int,
) -> TrainingPlan:
    """
    Move one workout to another position, day or week.

    ``to_index`` is read against the destination day after the workout has
    been taken out of its source, and may equal that day's length to append.
    The moved workout keeps its id, type, distance and nickname.
    """
    source = _locate(plan, from_week, from_day, from_index)
    destination_position = _find_week_index(plan, to_week)
    destination_day = _coerce_day(to_day)
    if source is None or destination_position is None or destination_day is None:
        _ignored(
            "move_workout",
            source=(from_week, from_day, from_index),
            destination=(to_week, to_day, to_index),
        )
        return plan

    source_position, source_day = source
    source_days = dict(plan.weeks[source_position].days)
    remaining = list(source_days[source_day])
    moved = remaining.pop(from_index)
    source_days[source_day] = remaining

    same_week = destination_position == source_position
    destination_days = source_days if same_week else dict(plan.weeks[destination_position].days)
    receiving = list(destination_days[destination_day])
    if not _is_index(to_index) or to_index > len(receiving):
        _ignored(
            "move_workout",
            source=(from_week, from_day, from_index),
            destination=(to_week, to_day, to_index),
        )
        return plan
    receiving.insert(to_index, moved)
    destination_days[destination_day] = receiving

    replacements = {
        source_position: _rebuild_week(plan.weeks[source_position], source_days),
    }
    if not same_week:
        replacements[destination_position] = _rebuild_week(
            plan.weeks[destination_position], destination_days
        )
    return _replace_weeks(plan, replacements)


def apply_edit(plan: TrainingPlan, edit: PlanEdit) -> TrainingPlan:
    """Apply one edit request to ``plan``."""

    if isinstance(edit, UpdateDistanceRequest):
        return update_distance(plan, edit.week, edit.day, edit.index, edit.distance)
    if isinstance(edit, UpdateNicknameRequest):
        return update_nickname(plan, edit.week, edit.day, edit.index, edit.nickname)
    if isinstance(edit, AddWorkoutRequest):
        return add_workout(plan, edit.week, edit.day, edit.type, edit.nickname)
    if isinstance(edit, RemoveWorkoutRequest):
        return remove_workout(plan, edit.week, edit.day, edit.index)
    if isinstance(edit, MoveWorkoutRequest):
        return move_workout(
            plan,
            edit.from_week,
            edit.from_day,
            edit.from_index,
            edit.to_week,
            edit.to_day,
            edit.to_index,
        )
    raise TypeError(f"Unsupported plan edit: {type(edit).__name__}")
