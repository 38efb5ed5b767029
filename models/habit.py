from pydantic import BaseModel, Field, field_serializer, field_validator
from typing import Optional, Set
from datetime import date, datetime, time as dt_time
from enum import Enum

from models.common import new_id, reject_null
from core.time_utils import get_current_time, day_token, days_ago

MAX_RESPONSE_LEVEL = 3

class HabitType(str, Enum):
    BUILD = "build"
    BREAK = "break"

class HabitCue(BaseModel):
    """Law 1: Make it Obvious. When, where and after what."""
    time: Optional[dt_time] = None
    location: str = ""
    current_habit: str = ""

    @property
    def implementation_intention(self) -> Optional[str]:
        parts = []
        if self.time is not None:
            parts.append(f"at {self.time.strftime('%H:%M')}")
        if self.location:
            parts.append(f"in {self.location}")
        return " ".join(parts) if parts else None

    @property
    def habit_stacking_statement(self) -> Optional[str]:
        if not self.current_habit:
            return None
        return f"After I {self.current_habit}"

class HabitCraving(BaseModel):
    """Law 2: Make it Attractive."""
    identity_statement: str = ""
    motivation: str = ""
    temptation_bundle: str = ""

class HabitResponse(BaseModel):
    """
    Law 3: Make it Easy. The 2-Minute Rule ladder.

    Levels:
    - 0: Gateway (2 min)
    - 1: Building (5 min)
    - 2: Growing (10 min)
    - 3: Mastered (full habit)
    """
    two_minute_version: str = ""
    five_minute_version: str = ""
    ten_minute_version: str = ""
    full_version: str = ""
    current_level: int = 0

    @field_validator("current_level")
    @classmethod
    def clamp_level(cls, value: int) -> int:
        return max(0, min(MAX_RESPONSE_LEVEL, value))

    @property
    def current_version_name(self) -> str:
        if self.current_level == 0:
            return self.two_minute_version or "2-minute version"
        if self.current_level == 1:
            return self.five_minute_version or "5-minute version"
        if self.current_level == 2:
            return self.ten_minute_version or "10-minute version"
        return self.full_version or "Full habit"

    @property
    def level_name(self) -> str:
        return {
            0: "Gateway (2 min)",
            1: "Building (5 min)",
            2: "Growing (10 min)",
        }.get(self.current_level, "Mastered")

    @property
    def progress_percentage(self) -> float:
        return self.current_level / MAX_RESPONSE_LEVEL

class HabitRewardPlan(BaseModel):
    """Law 4: Make it Satisfying."""
    immediate_reward: str = ""
    visual_progress: bool = True
    never_miss_twice: bool = True

class Habit(BaseModel):
    """
    A single habit and the calendar days it was completed on.

    Completion days are stored as normalized day tokens, so a day is either
    completed or not. All derived queries take an explicit `today` so they
    stay pure.

    Attributes:
    - completed_dates: Day tokens (YYYY-MM-DD) with a completion.
    - recovered_dates: Day tokens completed right after a single missed day.
    - response: Current rung on the 2-Minute Rule ladder.
    """
    id: str = Field(default_factory=new_id)
    name: str = Field(..., min_length=1, max_length=100)
    icon: str = "star.fill"
    habit_type: HabitType = HabitType.BUILD
    description: str = ""
    created_at: datetime = Field(default_factory=get_current_time)
    is_archived: bool = False

    cue: HabitCue = Field(default_factory=HabitCue)
    craving: HabitCraving = Field(default_factory=HabitCraving)
    response: HabitResponse = Field(default_factory=HabitResponse)
    reward: HabitRewardPlan = Field(default_factory=HabitRewardPlan)

    streak_warning: Optional[str] = None
    reminder_time: Optional[dt_time] = None

    completed_dates: Set[str] = Field(default_factory=set)
    recovered_dates: Set[str] = Field(default_factory=set)

    class Config:
        populate_by_name = True
        validate_assignment = True

    @field_serializer("completed_dates", "recovered_dates")
    def serialize_days(self, days: Set[str], _info):
        return sorted(days)

    # Completion

    def is_completed(self, day: Optional[date]) -> bool:
        # None is a day before the calendar starts, never completed.
        return day is not None and day_token(day) in self.completed_dates

    def toggle_completion(self, day: date) -> bool:
        """Flips the day's membership. Returns True if the day is now completed."""
        token = day_token(day)
        if token in self.completed_dates:
            self.completed_dates.discard(token)
            return False
        self.completed_dates.add(token)
        return True

    @property
    def total_completions(self) -> int:
        return len(self.completed_dates)

    @property
    def recovery_count(self) -> int:
        return len(self.recovered_dates)

    # Streaks

    def current_streak(self, today: date) -> int:
        # Today not done yet doesn't break the chain, start from yesterday.
        check = today if self.is_completed(today) else days_ago(today, 1)
        streak = 0
        while self.is_completed(check):
            streak += 1
            check = days_ago(check, 1)
        return streak

    def is_streak_at_risk(self, today: date) -> bool:
        return (
            not self.is_completed(today)
            and not self.is_completed(days_ago(today, 1))
            and self.current_streak(today) == 0
        )

    def is_in_recovery_mode(self, today: date) -> bool:
        """Missed yesterday, completed the day before, today still open."""
        return (
            not self.is_completed(days_ago(today, 1))
            and self.is_completed(days_ago(today, 2))
            and not self.is_completed(today)
        )

    def weekly_completion_rate(self, today: date) -> float:
        completed = sum(1 for offset in range(7) if self.is_completed(days_ago(today, offset)))
        return completed / 7.0

    # 1% better

    def compound_growth_days(self, today: date) -> int:
        return max(1, (today - self.created_at.date()).days)

    def compound_growth_multiplier(self, today: date) -> float:
        return 1.01 ** self.compound_growth_days(today)

    # Statements

    @property
    def implementation_intention_statement(self) -> str:
        statement = f"I will {self.response.current_version_name}"
        cue_statement = self.cue.implementation_intention
        if cue_statement:
            statement += f" {cue_statement}"
        stack_statement = self.cue.habit_stacking_statement
        if stack_statement:
            statement = f"{stack_statement}, {statement.lower()}"
        return statement

    @property
    def identity_statement(self) -> Optional[str]:
        if not self.craving.identity_statement:
            return None
        return f"I am {self.craving.identity_statement}"

    def level_up_response(self) -> bool:
        """Moves one rung up the 2-minute ladder. Returns False when already mastered."""
        if self.response.current_level >= MAX_RESPONSE_LEVEL:
            return False
        self.response.current_level += 1
        return True

class HabitResponseUpdate(BaseModel):
    """Ladder texts only. The level moves through level-up, never through an edit."""
    two_minute_version: Optional[str] = None
    five_minute_version: Optional[str] = None
    ten_minute_version: Optional[str] = None
    full_version: Optional[str] = None

    @field_validator(
        "two_minute_version", "five_minute_version", "ten_minute_version", "full_version"
    )
    @classmethod
    def not_null(cls, value):
        return reject_null(value)

class HabitUpdate(BaseModel):
    """
    Partial habit edit. Omitted fields are left alone; only `streak_warning`
    and `reminder_time` may be cleared with an explicit null.
    """
    name: Optional[str] = Field(default=None, min_length=1, max_length=100)
    icon: Optional[str] = None
    description: Optional[str] = None
    habit_type: Optional[HabitType] = None
    cue: Optional[HabitCue] = None
    craving: Optional[HabitCraving] = None
    response: Optional[HabitResponseUpdate] = None
    reward: Optional[HabitRewardPlan] = None
    streak_warning: Optional[str] = None
    reminder_time: Optional[dt_time] = None

    @field_validator(
        "name", "icon", "description", "habit_type", "cue", "craving", "response", "reward"
    )
    @classmethod
    def not_null(cls, value):
        return reject_null(value)

class HabitStats(BaseModel):
    habit_id: str
    current_streak: int
    weekly_completion_rate: float
    is_completed_today: bool
    is_streak_at_risk: bool
    is_in_recovery_mode: bool
    recovery_count: int
    total_completions: int
    response_level: int
    response_level_name: str
    response_progress: float
    implementation_intention: str
    identity_statement: Optional[str] = None
    compound_growth_days: int
    compound_growth_multiplier: float
