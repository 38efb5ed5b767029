from pydantic import BaseModel, Field
from typing import List
from datetime import datetime, timedelta

from models.common import new_id
from core.time_utils import get_current_time, whole_days_between

class ExperimentNote(BaseModel):
    id: str = Field(default_factory=new_id)
    content: str = Field(..., min_length=1)
    date: datetime = Field(default_factory=get_current_time)

class Experiment(BaseModel):
    """A time-boxed trial of a new habit or routine."""
    id: str = Field(default_factory=new_id)
    name: str = Field(..., min_length=1, max_length=100)
    description: str = ""
    duration_days: int = Field(default=7, ge=1)
    is_active: bool = True
    start_date: datetime = Field(default_factory=get_current_time)
    linked_habit_ids: List[str] = []
    notes: List[ExperimentNote] = []

    class Config:
        populate_by_name = True

    @property
    def end_date(self) -> datetime:
        return self.start_date + timedelta(days=self.duration_days)

    def days_remaining(self, now: datetime) -> int:
        if not self.is_active:
            return 0
        return max(0, whole_days_between(now, self.end_date))

    def progress(self, now: datetime) -> float:
        days_passed = whole_days_between(self.start_date, now)
        return max(0.0, min(1.0, days_passed / self.duration_days))

    def is_completed(self, now: datetime) -> bool:
        return self.days_remaining(now) == 0 and self.progress(now) >= 1.0

    def has_elapsed(self, now: datetime) -> bool:
        return now >= self.end_date

class ExperimentCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=100)
    description: str = ""
    duration_days: int = Field(default=7, ge=1)
    linked_habit_ids: List[str] = []

class NoteCreate(BaseModel):
    content: str = Field(..., min_length=1)

class ExperimentView(BaseModel):
    id: str
    name: str
    description: str
    duration_days: int
    is_active: bool
    start_date: datetime
    linked_habit_ids: List[str]
    notes: List[ExperimentNote]
    days_remaining: int
    progress: float
    is_completed: bool

    @classmethod
    def from_experiment(cls, experiment: Experiment, now: datetime) -> "ExperimentView":
        return cls(
            **experiment.model_dump(),
            days_remaining=experiment.days_remaining(now),
            progress=experiment.progress(now),
            is_completed=experiment.is_completed(now),
        )
