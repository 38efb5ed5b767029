from pydantic import BaseModel, Field, computed_field, field_validator
from typing import Optional

from models.common import new_id, reject_null

class Reward(BaseModel):
    """
    A temptation-bundling reward unlocked by habit completions.

    `is_unlocked` is derived from the two counters and never stored on its
    own, so redeeming (earned back to 0) locks the reward again.
    """
    id: str = Field(default_factory=new_id)
    name: str = Field(..., min_length=1, max_length=100)
    description: str = ""
    points_required: int = Field(..., ge=1)
    points_earned: int = Field(default=0, ge=0)
    linked_habit_id: Optional[str] = None

    class Config:
        populate_by_name = True

    @computed_field
    @property
    def is_unlocked(self) -> bool:
        return self.points_earned >= self.points_required

    @computed_field
    @property
    def progress(self) -> float:
        return self.points_earned / self.points_required

class RewardCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=100)
    description: str = ""
    points_required: int = Field(..., ge=1)
    linked_habit_id: Optional[str] = None

class RewardUpdate(BaseModel):
    """Partial reward edit. Only `linked_habit_id` may be cleared with null."""
    name: Optional[str] = Field(default=None, min_length=1, max_length=100)
    description: Optional[str] = None
    points_required: Optional[int] = Field(default=None, ge=1)
    linked_habit_id: Optional[str] = None

    @field_validator("name", "description", "points_required")
    @classmethod
    def not_null(cls, value):
        return reject_null(value)
