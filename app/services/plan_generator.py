"""Race training plan generation."""
from __future__ import annotations

import logging
import math
from datetime import date, timedelta
from uuid import uuid4

from app.models.schemas import (
    MAX_DISTANCE_KM,
    GoalInput,
    RaceDistance,
    TrainingPlan,
    Week,
    Weekday,
    Workout,
    WorkoutType,
)
from app.models.workout_library import (
    BUILD_FRACTIONS,
    DEFAULT_RACE_DISTANCE_KM,
    LONG_RUN_RAMP,
    LONG_RUN_START,
    MAX_PLAN_WEEKS,
    RACE_DISTANCES_KM,
    SHORT_PLAN_FRACTIONS,
    SHORT_PLAN_WEEKS,
    TAPER_FRACTIONS,
    TAPER_WEEKS,
)


logger = logging.getLogger(__name__)


def round_half_up(value: float) -> int:
    """Round to the nearest whole unit with halves rounding up (2.5 -> 3)."""
    return math.floor(value + 0.5)


def new_workout_id() -> str:
    """Return a fresh workout identifier."""
    return uuid4().hex


def clean_nickname(nickname: str | None) -> str | None:
    """Return the nickname, or None when it is missing or blank."""
    if nickname is None or not nickname.strip():
        return None
    return nickname


def week_start(value: date) -> date:
    """Return the ISO week start (Monday) on or before ``value``."""
    return value - timedelta(days=value.weekday())


def count_plan_weeks(today_date: date, race_date: date) -> int:
    """
    Count the calendar weeks from today's week up to and including the race week.

    Returns 1 when both dates fall in the same ISO week and a value <= 0 when the
    race week lies before today's week.
    """
    return (week_start(race_date) - week_start(today_date)).days // 7 + 1


def resolve_race_distance(
    selector: RaceDistance | str,
    custom_distance: float | None = None,
) -> float:
    """
    Resolve the race distance selector to kilometres.

    Args:
        selector: One of ``5k``, ``10k``, ``half``, ``full`` or ``custom``
        custom_distance: Distance used when ``custom`` is selected

    Returns:
        Target race distance in km. A custom selection without a positive,
        finite distance up to MAX_DISTANCE_KM, or an unknown selector,
        resolves to 10 km.
    """
    try:
        selector = RaceDistance(selector)
    except ValueError:
        logger.warning("Unknown race distance selector %r - using %s km", selector, DEFAULT_RACE_DISTANCE_KM)
        return DEFAULT_RACE_DISTANCE_KM

    if selector == RaceDistance.CUSTOM:
        if custom_distance is None or not 0 < custom_distance <= MAX_DISTANCE_KM:
            logger.warning(
                "Custom race distance missing or out of range (%r) - using %s km",
                custom_distance,
                DEFAULT_RACE_DISTANCE_KM,
            )
            return DEFAULT_RACE_DISTANCE_KM
        return float(custom_distance)

    return float(RACE_DISTANCES_KM[selector])


def get_run_distance(
    run_type: WorkoutType,
    week_number: int,
    total_weeks: int,
    max_distance: float,
) -> int:
    """
    Target distance for one workout in a given week of the plan.

    Plans shorter than three weeks use fixed fractions of the race distance.
    Otherwise the last two weeks taper, and during the build long runs ramp
    linearly from 20% to 90% of the race distance while other types stay flat.
    """
    if total_weeks < SHORT_PLAN_WEEKS:
        fraction = SHORT_PLAN_FRACTIONS.get(run_type, 0)
    elif week_number > total_weeks - TAPER_WEEKS:
        fraction = TAPER_FRACTIONS.get(run_type, 0)
    elif run_type == WorkoutType.LONG:
        progress = week_number / (total_weeks - TAPER_WEEKS)
        fraction = LONG_RUN_START + LONG_RUN_RAMP * progress
    else:
        fraction = BUILD_FRACTIONS.get(run_type, 0)

    return max(0, round_half_up(max_distance * fraction))


def _empty_days() -> dict[Weekday, list[Workout]]:
    return {day: [] for day in Weekday}


def _override_race_day(last_week: Week, race_date: date, race_distance: float) -> Week:
    """Replace whatever is scheduled on the race weekday of the final week with the race."""

    race_day = Weekday.from_date(race_date)
    replaced = last_week.days[race_day]
    running_total = last_week.weekly_total - sum(workout.distance for workout in replaced)
    if replaced:
        logger.debug(
            "Race day %s in week %d replaces %d scheduled workout(s)",
            race_day.value,
            last_week.week,
            len(replaced),
        )

    days = dict(last_week.days)
    days[race_day] = [
        Workout(id=new_workout_id(), type=WorkoutType.RACE, distance=race_distance)
    ]
    return Week(
        week=last_week.week,
        start_date=last_week.start_date,
        days=days,
        weekly_total=round_half_up(running_total + race_distance),
    )


def generate_plan(goal: GoalInput) -> TrainingPlan:
    """
    Build the initial training calendar for a race goal.

    The result depends only on ``goal``; today's date is part of the input.
    Degenerate goals never raise: a race week before today's week or an empty
    training day selection yields an empty plan, and spans longer than 52
    weeks are truncated with a warning.

    Args:
        goal: Dates, race distance selector and weekly training day selection

    Returns:
        TrainingPlan with weeks numbered 1..N (N <= 52), the race on the final
        week's race weekday
    """
    total_weeks = count_plan_weeks(goal.today_date, goal.race_date)

    if total_weeks <= 0 or goal.race_date <= goal.today_date:
        logger.info(
            "Race date %s is not after today (%s) - returning empty plan",
            goal.race_date.isoformat(),
            goal.today_date.isoformat(),
        )
        return TrainingPlan(weeks=[])

    if total_weeks > MAX_PLAN_WEEKS:
        logger.warning(
            "Training plan limited to %d weeks maximum (race is %d weeks away)",
            MAX_PLAN_WEEKS,
            total_weeks,
        )

    if not goal.training_days:
        logger.info("No training days selected - returning empty plan")
        return TrainingPlan(weeks=[])

    max_distance = resolve_race_distance(goal.race_distance, goal.custom_race_distance)
    limited_weeks = min(total_weeks, MAX_PLAN_WEEKS)
    first_week_start = week_start(goal.today_date)

    weeks: list[Week] = []
    for index in range(limited_weeks):
        week_number = index + 1
        days = _empty_days()
        weekly_total = 0.0

        for selection in goal.training_days:
            for descriptor in selection.workouts:
                if descriptor.type == WorkoutType.REST:
                    # Rest days are represented by an empty slot.
                    continue
                distance = get_run_distance(
                    descriptor.type, week_number, limited_weeks, max_distance
                )
                days[selection.day].append(
                    Workout(
                        id=new_workout_id(),
                        type=descriptor.type,
                        distance=distance,
                        nickname=clean_nickname(descriptor.nickname),
                    )
                )
                weekly_total += distance

        weeks.append(
            Week(
                week=week_number,
                start_date=first_week_start + timedelta(weeks=index),
                days=days,
                weekly_total=round_half_up(weekly_total),
            )
        )

    weeks[-1] = _override_race_day(weeks[-1], goal.race_date, max_distance)

    logger.info(
        "Generated %d-week plan for %s race on %s (%.1f km)",
        len(weeks),
        goal.race_distance.value,
        goal.race_date.isoformat(),
        max_distance,
    )
    return TrainingPlan(weeks=weeks)
