"""Static distance tables consumed by the plan generator and calendar editor."""
from typing import Dict

from app.models.schemas import RaceDistance, WorkoutType


RACE_DISTANCES_KM: Dict[RaceDistance, float] = {
    RaceDistance.FIVE_K: 5,
    RaceDistance.TEN_K: 10,
    RaceDistance.HALF: 21.1,
    RaceDistance.FULL: 42.2,
}

# Used when a custom distance is selected but missing or not positive.
DEFAULT_RACE_DISTANCE_KM = 10.0

# Fractions of the race distance per workout type. Types not listed get 0.
SHORT_PLAN_FRACTIONS: Dict[WorkoutType, float] = {
    WorkoutType.LONG: 0.6,
    WorkoutType.EASY: 0.3,
    WorkoutType.TEMPO: 0.4,
    WorkoutType.INTERVAL: 0.2,
    WorkoutType.STRENGTH: 0,
}

TAPER_FRACTIONS: Dict[WorkoutType, float] = {
    WorkoutType.LONG: 0.35,
    WorkoutType.EASY: 0.15,
    WorkoutType.TEMPO: 0.2,
    WorkoutType.INTERVAL: 0.1,
}

# Long runs ramp from LONG_RUN_START to LONG_RUN_START + LONG_RUN_RAMP during the build.
BUILD_FRACTIONS: Dict[WorkoutType, float] = {
    WorkoutType.EASY: 0.25,
    WorkoutType.TEMPO: 0.4,
    WorkoutType.INTERVAL: 0.2,
    WorkoutType.STRENGTH: 0,
}
LONG_RUN_START = 0.2
LONG_RUN_RAMP = 0.7

SHORT_PLAN_WEEKS = 3
TAPER_WEEKS = 2
MAX_PLAN_WEEKS = 52

# Distance given to a workout added by hand in the calendar.
ADDED_WORKOUT_DISTANCE_KM: Dict[WorkoutType, float] = {
    WorkoutType.STRENGTH: 0,
}
DEFAULT_ADDED_WORKOUT_DISTANCE_KM = 5.0
