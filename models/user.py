from pydantic import BaseModel, Field
from typing import List, Optional
from datetime import date, datetime
from enum import Enum

from models.common import new_id
from core.config import settings
from core.time_utils import get_current_time

class IdentityCategory(str, Enum):
    HEALTH = "health"
    FITNESS = "fitness"
    LEARNING = "learning"
    CREATIVITY = "creativity"
    PRODUCTIVITY = "productivity"
    RELATIONSHIPS = "relationships"
    MINDFULNESS = "mindfulness"
    FINANCE = "finance"
    CAREER = "career"
    OTHER = "other"

class IdentityStatement(BaseModel):
    """
    "I am the type of person who..."

    Every completion of a linked habit casts one vote for this identity.
    """
    id: str = Field(default_factory=new_id)
    statement: str = Field(..., min_length=1)
    category: IdentityCategory = IdentityCategory.HEALTH
    linked_habit_ids: List[str] = []
    votes_count: int = Field(default=0, ge=0)
    created_at: datetime = Field(default_factory=get_current_time)

    @property
    def full_statement(self) -> str:
        return f"I am {self.statement}"

    @property
    def strength(self) -> str:
        current = None
        for name, threshold in settings.IDENTITY_STRENGTH_THRESHOLDS.items():
            if self.votes_count >= threshold:
                current = name
        return current

class IdentityCreate(BaseModel):
    statement: str = Field(..., min_length=1)
    category: IdentityCategory = IdentityCategory.OTHER
    linked_habit_ids: List[str] = []

class UserProfile(BaseModel):
    name: str = "User"
    total_completions: int = 0
    current_streak: int = 0
    best_streak: int = 0

    # Identity based tracking
    identity_statements: List[IdentityStatement] = []
    never_miss_twice_recoveries: int = 0

    started_at: datetime = Field(default_factory=get_current_time)

    def days_since_start(self, today: date) -> int:
        return max(0, (today - self.started_at.date()).days)

    def compound_growth(self, today: date) -> float:
        # 1% better every day compounds to ~37x in a year
        return 1.01 ** self.days_since_start(today)

    def compound_growth_message(self, today: date) -> str:
        multiplier = self.compound_growth(today)
        if multiplier < 2:
            return f"{(multiplier - 1) * 100:.0f}% improved"
        return f"{multiplier:.1f}x better than day 1"

    @property
    def primary_identity(self) -> Optional[IdentityStatement]:
        if not self.identity_statements:
            return None
        return max(self.identity_statements, key=lambda identity: identity.votes_count)

    def get_identity(self, identity_id: str) -> Optional[IdentityStatement]:
        return next((i for i in self.identity_statements if i.id == identity_id), None)

    def vote_for_identity(self, identity_id: str) -> bool:
        identity = self.get_identity(identity_id)
        if identity is None:
            return False
        identity.votes_count += 1
        return True

class NameUpdate(BaseModel):
    name: str = Field(..., min_length=1, max_length=100)

class ProfileView(BaseModel):
    name: str
    total_completions: int
    current_streak: int
    best_streak: int
    never_miss_twice_recoveries: int
    level: int
    level_title: str
    level_progress: float
    level_quote: str
    completions_to_next_level: int
    days_since_start: int
    compound_growth_message: str
    primary_identity: Optional[IdentityStatement] = None
