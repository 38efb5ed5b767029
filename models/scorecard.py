from pydantic import BaseModel, Field, field_validator
from typing import Dict, List, Optional
from datetime import datetime
from enum import Enum

from models.common import new_id, reject_null
from core.time_utils import get_current_time

class BehaviorRating(str, Enum):
    POSITIVE = "positive"
    NEUTRAL = "neutral"
    NEGATIVE = "negative"

class BehaviorCategory(str, Enum):
    MORNING = "morning"
    AFTERNOON = "afternoon"
    EVENING = "evening"
    WORK = "work"
    HOME = "home"
    SOCIAL = "social"
    OTHER = "other"

class ScorecardBehavior(BaseModel):
    id: str = Field(default_factory=new_id)
    behavior: str = Field(..., min_length=1)
    rating: BehaviorRating = BehaviorRating.NEUTRAL
    category: BehaviorCategory = BehaviorCategory.MORNING
    notes: str = ""
    linked_habit_id: Optional[str] = None # Set once converted to a habit
    created_at: datetime = Field(default_factory=get_current_time)

class BehaviorCreate(BaseModel):
    behavior: str = Field(..., min_length=1)
    rating: BehaviorRating = BehaviorRating.NEUTRAL
    category: BehaviorCategory = BehaviorCategory.MORNING
    notes: str = ""

class BehaviorUpdate(BaseModel):
    behavior: Optional[str] = Field(default=None, min_length=1)
    rating: Optional[BehaviorRating] = None
    category: Optional[BehaviorCategory] = None
    notes: Optional[str] = None

    @field_validator("behavior", "rating", "category", "notes")
    @classmethod
    def not_null(cls, value):
        return reject_null(value)

class HabitScorecard(BaseModel):
    """
    The habit scorecard: every daily behavior rated +, = or -.

    Used for awareness before building or breaking anything.
    """
    behaviors: List[ScorecardBehavior] = []
    last_review_date: Optional[datetime] = None

    def _count(self, rating: BehaviorRating) -> int:
        return sum(1 for b in self.behaviors if b.rating == rating)

    @property
    def positive_count(self) -> int:
        return self._count(BehaviorRating.POSITIVE)

    @property
    def negative_count(self) -> int:
        return self._count(BehaviorRating.NEGATIVE)

    @property
    def neutral_count(self) -> int:
        return self._count(BehaviorRating.NEUTRAL)

    @property
    def balance_score(self) -> int:
        """From -100 (all negative) to +100 (all positive)."""
        if not self.behaviors:
            return 0
        return int((self.positive_count - self.negative_count) * 100 / len(self.behaviors))

    @property
    def behaviors_by_category(self) -> Dict[BehaviorCategory, List[ScorecardBehavior]]:
        grouped: Dict[BehaviorCategory, List[ScorecardBehavior]] = {}
        for behavior in self.behaviors:
            grouped.setdefault(behavior.category, []).append(behavior)
        return grouped

    @property
    def habit_candidates(self) -> List[ScorecardBehavior]:
        return [b for b in self.behaviors if b.rating == BehaviorRating.POSITIVE and b.linked_habit_id is None]

    @property
    def breaking_candidates(self) -> List[ScorecardBehavior]:
        return [b for b in self.behaviors if b.rating == BehaviorRating.NEGATIVE]

    def get_behavior(self, behavior_id: str) -> Optional[ScorecardBehavior]:
        return next((b for b in self.behaviors if b.id == behavior_id), None)

class ScorecardView(BaseModel):
    behaviors: List[ScorecardBehavior]
    last_review_date: Optional[datetime] = None
    positive_count: int
    negative_count: int
    neutral_count: int
    balance_score: int
    habit_candidates: List[ScorecardBehavior]
    breaking_candidates: List[ScorecardBehavior]
