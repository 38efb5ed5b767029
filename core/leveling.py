from dataclasses import dataclass
from typing import List, Optional


@dataclass(frozen=True)
class Level:
    number: int
    title: str
    required_completions: int
    quote: str


# Fixed table, ordered by threshold. Small improvements compound over time.
LEVELS: List[Level] = [
    Level(1, "Beginner", 0,
          "Every action is a vote for the type of person you wish to become."),
    Level(2, "Apprentice", 10,
          "You do not rise to the level of your goals. You fall to the level of your systems."),
    Level(3, "Dedicated", 30,
          "Habits are the compound interest of self-improvement."),
    Level(4, "Consistent Creator", 75,
          "The most effective way to change your habits is to focus on who you wish to become."),
    Level(5, "Habit Master", 150,
          "Success is the product of daily habits, not once-in-a-lifetime transformations."),
    Level(6, "Discipline Expert", 300,
          "You should be far more concerned with your current trajectory than with your current results."),
    Level(7, "Lifestyle Architect", 500,
          "Environment is the invisible hand that shapes human behavior."),
    Level(8, "Legend", 1000,
          "The ultimate form of intrinsic motivation is when a habit becomes part of your identity."),
]


def current_level(total_completions: int) -> Level:
    """
    Returns the highest level whose threshold has been reached.

    Args:
        total_completions (int): The user's lifetime completion count.

    Returns:
        Level: The matching table entry (the first tier for zero or less).
    """
    level = LEVELS[0]
    for candidate in LEVELS:
        if total_completions >= candidate.required_completions:
            level = candidate
        else:
            break
    return level


def next_level(total_completions: int) -> Optional[Level]:
    index = LEVELS.index(current_level(total_completions)) + 1
    if index < len(LEVELS):
        return LEVELS[index]
    return None


def level_progress(total_completions: int) -> float:
    """Linear progress from the current level toward the next one, 1.0 at the top tier."""
    current = current_level(total_completions)
    upcoming = next_level(total_completions)
    if upcoming is None:
        return 1.0
    progress_in_level = total_completions - current.required_completions
    level_range = upcoming.required_completions - current.required_completions
    return progress_in_level / level_range


def completions_to_next_level(total_completions: int) -> int:
    upcoming = next_level(total_completions)
    if upcoming is None:
        return 0
    return upcoming.required_completions - total_completions
