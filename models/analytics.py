from pydantic import BaseModel
from datetime import date

class TodaySummary(BaseModel):
    day: date
    completed_count: int
    total_count: int
    completion_rate: float
    current_streak: int

class MonthSummary(BaseModel):
    year: int
    month: int
    completion_rate: float # Share of elapsed days with at least one completion

class CalendarDay(BaseModel):
    day: date
    completed_count: int
    total_habits: int
    is_future: bool

class WeeklyHabitRate(BaseModel):
    habit_id: str
    name: str
    weekly_completion_rate: float
    current_streak: int
