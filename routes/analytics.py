from fastapi import APIRouter, Depends, Query
from typing import List, Optional
import calendar
from datetime import date
from models.analytics import CalendarDay, MonthSummary, TodaySummary, WeeklyHabitRate
from routes.deps import get_ledger
from core.ledger import HabitLedger
from core.time_utils import get_today

router = APIRouter(prefix="/analytics", tags=["Analytics"])

@router.get("/today", response_model=TodaySummary)
async def get_today_summary(ledger: HabitLedger = Depends(get_ledger)):
    today = get_today()
    active = ledger.active_habits
    return TodaySummary(
        day=today,
        completed_count=sum(1 for h in active if h.is_completed(today)),
        total_count=len(active),
        completion_rate=ledger.today_completion_rate(today),
        current_streak=ledger.profile.current_streak,
    )

@router.get("/month", response_model=MonthSummary)
async def get_month_summary(
    year: Optional[int] = Query(default=None, ge=1, le=9999),
    month: Optional[int] = Query(default=None, ge=1, le=12),
    ledger: HabitLedger = Depends(get_ledger),
):
    today = get_today()
    year = year or today.year
    month = month or today.month
    return MonthSummary(
        year=year,
        month=month,
        completion_rate=ledger.month_completion_rate(year, month, today),
    )

@router.get("/calendar", response_model=List[CalendarDay])
async def get_calendar(
    year: Optional[int] = Query(default=None, ge=1, le=9999),
    month: Optional[int] = Query(default=None, ge=1, le=12),
    ledger: HabitLedger = Depends(get_ledger),
):
    """Completion count per day of the month, for a heatmap grid."""
    today = get_today()
    year = year or today.year
    month = month or today.month
    total_habits = max(len(ledger.habits), 1)

    result = []
    for day_number in range(1, calendar.monthrange(year, month)[1] + 1):
        day = date(year, month, day_number)
        result.append(CalendarDay(
            day=day,
            completed_count=ledger.completion_count(day),
            total_habits=total_habits,
            is_future=day > today,
        ))
    return result

@router.get("/weekly", response_model=List[WeeklyHabitRate])
async def get_weekly_rates(ledger: HabitLedger = Depends(get_ledger)):
    """Completion rate over the last 7 days for each active habit."""
    today = get_today()
    return [
        WeeklyHabitRate(
            habit_id=h.id,
            name=h.name,
            weekly_completion_rate=h.weekly_completion_rate(today),
            current_streak=h.current_streak(today),
        )
        for h in ledger.active_habits
    ]
