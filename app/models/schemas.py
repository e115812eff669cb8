"""Pydantic models describing goal inputs, training plans and API payloads."""
from __future__ import annotations

from datetime import date
from enum import Enum
from typing import Annotated, Literal, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from app.config import HEX_COLOR_PATTERN


class WorkoutType(str, Enum):
    """Kinds of scheduled activity. ``Rest`` is never stored as an entry."""

    REST = "Rest"
    EASY = "Easy"
    LONG = "Long"
    INTERVAL = "Interval"
    TEMPO = "Tempo"
    RACE = "Race"
    STRENGTH = "Strength"


class Weekday(str, Enum):
    """Day slots of a calendar week, in ISO order."""

    MON = "Mon"
    TUE = "Tue"
    WED = "Wed"
    THU = "Thu"
    FRI = "Fri"
    SAT = "Sat"
    SUN = "Sun"

    @classmethod
    def from_date(cls, value: date) -> "Weekday":
        return list(cls)[value.weekday()]


class RaceDistance(str, Enum):
    """Race distance selector offered on the goal form."""

    FIVE_K = "5k"
    TEN_K = "10k"
    HALF = "half"
    FULL = "full"
    CUSTOM = "custom"


# Workout types a runner may pick for a training day.
SCHEDULABLE_TYPES = frozenset(
    {
        WorkoutType.EASY,
        WorkoutType.LONG,
        WorkoutType.INTERVAL,
        WorkoutType.TEMPO,
        WorkoutType.STRENGTH,
    }
)

# Upper bound for any single distance (workout or custom race), in km.
MAX_DISTANCE_KM = 10_000


# Goal input
class WorkoutDescriptor(BaseModel):
    """One workout requested for a training day."""

    type: WorkoutType
    nickname: str | None = None


class TrainingDaySelection(BaseModel):
    """A weekday and the workouts to schedule on it every week."""

    day: Weekday
    workouts: list[WorkoutDescriptor] = []


class GoalInput(BaseModel):
    """Race goal consumed by the plan generator.

    Only field types are checked here so degenerate goals (race in the past,
    no training days) can still reach the generator, which degrades to an
    empty plan instead of failing.
    """

    today_date: date
    race_date: date
    race_distance: RaceDistance
    custom_race_distance: float | None = None
    training_days: list[TrainingDaySelection] = []


class GoalSubmission(GoalInput):
    """Goal input as accepted from the form, with its validation rules."""

    custom_race_distance: Annotated[
        float, Field(le=MAX_DISTANCE_KM, allow_inf_nan=False)
    ] | None = None
    training_days: list[TrainingDaySelection] = Field(min_length=1)

    @field_validator("training_days")
    @classmethod
    def validate_training_days(
        cls, value: list[TrainingDaySelection]
    ) -> list[TrainingDaySelection]:
        seen: set[Weekday] = set()
        for selection in value:
            if selection.day in seen:
                raise ValueError(f"{selection.day.value} selected more than once")
            seen.add(selection.day)
            if not selection.workouts:
                raise ValueError(f"At least one workout required on {selection.day.value}")
            for workout in selection.workouts:
                if workout.type not in SCHEDULABLE_TYPES:
                    raise ValueError(
                        f"{workout.type.value} workouts cannot be scheduled on a training day"
                    )
        return value

    @model_validator(mode="after")
    def validate_goal(self) -> "GoalSubmission":
        if self.race_date <= self.today_date:
            raise ValueError("Race date must be after today's date")
        if self.race_distance == RaceDistance.CUSTOM and not (
            self.custom_race_distance and self.custom_race_distance > 0
        ):
            raise ValueError("Custom distance is required and must be greater than 0")
        return self


# Training plan
class Workout(BaseModel):
    """One scheduled activity instance."""

    model_config = ConfigDict(frozen=True)

    id: str
    type: WorkoutType
    distance: float = Field(default=0, ge=0, le=MAX_DISTANCE_KM, description="Distance in km")
    nickname: str | None = None


class Week(BaseModel):
    """One calendar week of the plan."""

    model_config = ConfigDict(frozen=True)

    week: int = Field(ge=1)
    start_date: date
    days: dict[Weekday, list[Workout]]
    weekly_total: int = 0

    @field_validator("days")
    @classmethod
    def fill_all_days(cls, value: dict[Weekday, list[Workout]]) -> dict[Weekday, list[Workout]]:
        """Every week carries all seven day slots, in Mon..Sun order."""

        return {day: list(value.get(day, [])) for day in Weekday}

    def workout_count(self) -> int:
        return sum(len(workouts) for workouts in self.days.values())


class TrainingPlan(BaseModel):
    """Ordered sequence of weeks numbered 1..N."""

    model_config = ConfigDict(frozen=True)

    weeks: list[Week] = Field(default_factory=list, max_length=52)

    def get_week(self, week_number: int) -> Week | None:
        for week in self.weeks:
            if week.week == week_number:
                return week
        return None

    def workout_count(self) -> int:
        return sum(week.workout_count() for week in self.weeks)


class PlanSummary(BaseModel):
    """Headline figures for a plan."""

    total_weeks: int
    total_workouts: int
    total_distance: int
    peak_week: int | None = None
    peak_weekly_total: int = 0


# Calendar edits
class WorkoutAddress(BaseModel):
    """Location of a workout inside the plan."""

    week: int
    day: str
    index: int


class UpdateDistanceRequest(WorkoutAddress):
    action: Literal["update_distance"] = "update_distance"
    distance: float | str | None = None


class UpdateNicknameRequest(WorkoutAddress):
    action: Literal["update_nickname"] = "update_nickname"
    nickname: str | None = None


class AddWorkoutRequest(BaseModel):
    action: Literal["add_workout"] = "add_workout"
    week: int
    day: str
    type: WorkoutType
    nickname: str | None = None


class RemoveWorkoutRequest(WorkoutAddress):
    action: Literal["remove_workout"] = "remove_workout"


class MoveWorkoutRequest(BaseModel):
    action: Literal["move_workout"] = "move_workout"
    from_week: int
    from_day: str
    from_index: int
    to_week: int
    to_day: str
    to_index: int


PlanEdit = Annotated[
    Union[
        UpdateDistanceRequest,
        UpdateNicknameRequest,
        AddWorkoutRequest,
        RemoveWorkoutRequest,
        MoveWorkoutRequest,
    ],
    Field(discriminator="action"),
]


# Export
class ExportOptions(BaseModel):
    """Display configuration for the printable plan document."""

    title: str = Field(default="Your Training Plan", min_length=1, max_length=120)
    orientation: Literal["portrait", "landscape"] = "portrait"
    header_color: str = "#f3f4f6"

    @field_validator("header_color")
    @classmethod
    def validate_header_color(cls, value: str) -> str:
        if not HEX_COLOR_PATTERN.match(value):
            raise ValueError("header_color must be a hex colour such as #f3f4f6")
        return value.lower()
