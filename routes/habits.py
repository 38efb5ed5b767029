from fastapi import APIRouter, HTTPException, status, Depends
from typing import List, Optional
from datetime import date
from pydantic import BaseModel
from models.habit import Habit, HabitStats, HabitUpdate
from models.habit_draft import HabitDraft
from routes.deps import get_ledger
from core.ledger import HabitLedger
from core.time_utils import get_today

router = APIRouter(prefix="/habits", tags=["Habits"])

class HabitToggle(BaseModel):
    day: Optional[date] = None # Defaults to today

def _get_or_404(ledger: HabitLedger, habit_id: str) -> Habit:
    habit = ledger.get_habit(habit_id)
    if habit is None:
        raise HTTPException(status_code=404, detail="Habit not found")
    return habit

@router.get("/", response_model=List[Habit])
async def get_habits(include_archived: bool = False, ledger: HabitLedger = Depends(get_ledger)):
    return ledger.habits if include_archived else ledger.active_habits

@router.post("/", response_model=Habit, status_code=status.HTTP_201_CREATED)
async def create_habit(draft: HabitDraft, ledger: HabitLedger = Depends(get_ledger)):
    """
    Create a Habit from the four-step draft.

    If the draft carries an identity statement, a matching identity is
    created and linked to the new habit.
    """
    try:
        habit, identity = draft.build()
    except ValueError as e:
        raise HTTPException(status_code=422, detail=str(e))

    ledger.add_habit(habit)
    if identity is not None:
        ledger.add_identity_statement(identity)
    return habit

@router.get("/{habit_id}", response_model=Habit)
async def get_habit(habit_id: str, ledger: HabitLedger = Depends(get_ledger)):
    return _get_or_404(ledger, habit_id)

@router.put("/{habit_id}", response_model=Habit)
async def update_habit(habit_id: str, habit_in: HabitUpdate, ledger: HabitLedger = Depends(get_ledger)):
    changes = habit_in.model_dump(exclude_unset=True)
    habit = ledger.update_habit(habit_id, **changes)
    if habit is None:
        raise HTTPException(status_code=404, detail="Habit not found")
    return habit

@router.delete("/{habit_id}")
async def delete_habit(habit_id: str, ledger: HabitLedger = Depends(get_ledger)):
    if not ledger.delete_habit(habit_id):
        raise HTTPException(status_code=404, detail="Habit not found")
    return {"message": "Habit deleted"}

@router.post("/{habit_id}/archive", response_model=Habit)
async def archive_habit(habit_id: str, ledger: HabitLedger = Depends(get_ledger)):
    habit = ledger.archive_habit(habit_id)
    if habit is None:
        raise HTTPException(status_code=404, detail="Habit not found")
    return habit

@router.post("/{habit_id}/toggle", response_model=dict)
async def toggle_habit(habit_id: str, toggle: Optional[HabitToggle] = None, ledger: HabitLedger = Depends(get_ledger)):
    """
    Check in (or undo a check-in) for a day.

    Completing: +1 total completion, +1 point on every locked reward, +1 vote
    on every linked identity, and a recovery if yesterday was the only miss.
    Undoing: -1 total completion. Points and votes are kept.

    Returns:
        dict: {
            "habit": Updated Habit Object,
            "completed": bool (state of the day after the toggle),
            "current_streak": int,
            "total_completions": int
        }
    """
    today = get_today()
    day = toggle.day if toggle and toggle.day else today
    habit = ledger.toggle_completion(habit_id, day, today=today)
    if habit is None:
        raise HTTPException(status_code=404, detail="Habit not found")

    return {
        "habit": habit,
        "completed": habit.is_completed(day),
        "current_streak": habit.current_streak(today),
        "total_completions": ledger.profile.total_completions,
    }

@router.post("/{habit_id}/level-up", response_model=Habit)
async def level_up_habit(habit_id: str, ledger: HabitLedger = Depends(get_ledger)):
    habit = ledger.level_up_response(habit_id)
    if habit is None:
        raise HTTPException(status_code=404, detail="Habit not found")
    return habit

@router.get("/{habit_id}/stats", response_model=HabitStats)
async def get_habit_stats(habit_id: str, ledger: HabitLedger = Depends(get_ledger)):
    habit = _get_or_404(ledger, habit_id)
    today = get_today()
    return HabitStats(
        habit_id=habit.id,
        current_streak=habit.current_streak(today),
        weekly_completion_rate=habit.weekly_completion_rate(today),
        is_completed_today=habit.is_completed(today),
        is_streak_at_risk=habit.is_streak_at_risk(today),
        is_in_recovery_mode=habit.is_in_recovery_mode(today),
        recovery_count=habit.recovery_count,
        total_completions=habit.total_completions,
        response_level=habit.response.current_level,
        response_level_name=habit.response.level_name,
        response_progress=habit.response.progress_percentage,
        implementation_intention=habit.implementation_intention_statement,
        identity_statement=habit.identity_statement,
        compound_growth_days=habit.compound_growth_days(today),
        compound_growth_multiplier=habit.compound_growth_multiplier(today),
    )
