"""
Burnout risk detection: three or more low-mood days in a row.
"""

from collections.abc import Iterable, Mapping
from typing import Any

from .models import MoodObservation

LOW_MOOD_THRESHOLD = 2
BURNOUT_STREAK = 3

# Observations the read path looks at, most recent first.
BURNOUT_WINDOW = 14


def _mood_of(observation: MoodObservation | Mapping[str, Any]) -> int:
    if isinstance(observation, Mapping):
        if "mood_level" in observation:
            return int(observation["mood_level"])
        return int(observation["mood"])
    return observation.mood_level


def detect_burnout(observations: Iterable[MoodObservation | Mapping[str, Any]]) -> bool:
    """
    Scan observations in the given order for a run of low moods.

    A mood of 2 or lower extends the current streak and anything higher
    resets it. Returns True as soon as the streak reaches three.
    """
    streak = 0
    for observation in observations:
        if _mood_of(observation) <= LOW_MOOD_THRESHOLD:
            streak += 1
            if streak >= BURNOUT_STREAK:
                return True
        else:
            streak = 0
    return False
