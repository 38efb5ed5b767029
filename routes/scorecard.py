from fastapi import APIRouter, HTTPException, status, Depends
from pydantic import BaseModel
from models.scorecard import (
    BehaviorCreate,
    BehaviorUpdate,
    HabitScorecard,
    ScorecardBehavior,
    ScorecardView,
)
from routes.deps import get_ledger
from core.ledger import HabitLedger
from core.time_utils import get_current_time

router = APIRouter(prefix="/scorecard", tags=["Scorecard"])

class BehaviorLink(BaseModel):
    habit_id: str

def _scorecard_view(scorecard: HabitScorecard) -> ScorecardView:
    return ScorecardView(
        behaviors=scorecard.behaviors,
        last_review_date=scorecard.last_review_date,
        positive_count=scorecard.positive_count,
        negative_count=scorecard.negative_count,
        neutral_count=scorecard.neutral_count,
        balance_score=scorecard.balance_score,
        habit_candidates=scorecard.habit_candidates,
        breaking_candidates=scorecard.breaking_candidates,
    )

@router.get("/", response_model=ScorecardView)
async def get_scorecard(ledger: HabitLedger = Depends(get_ledger)):
    return _scorecard_view(ledger.scorecard)

@router.post("/behaviors", response_model=ScorecardBehavior, status_code=status.HTTP_201_CREATED)
async def add_behavior(behavior_in: BehaviorCreate, ledger: HabitLedger = Depends(get_ledger)):
    return ledger.add_behavior(ScorecardBehavior(**behavior_in.model_dump()))

@router.put("/behaviors/{behavior_id}", response_model=ScorecardBehavior)
async def update_behavior(behavior_id: str, behavior_in: BehaviorUpdate, ledger: HabitLedger = Depends(get_ledger)):
    changes = behavior_in.model_dump(exclude_unset=True)
    behavior = ledger.update_behavior(behavior_id, **changes)
    if behavior is None:
        raise HTTPException(status_code=404, detail="Behavior not found")
    return behavior

@router.delete("/behaviors/{behavior_id}")
async def delete_behavior(behavior_id: str, ledger: HabitLedger = Depends(get_ledger)):
    if not ledger.delete_behavior(behavior_id):
        raise HTTPException(status_code=404, detail="Behavior not found")
    return {"message": "Behavior deleted"}

@router.post("/behaviors/{behavior_id}/link", response_model=ScorecardBehavior)
async def link_behavior(behavior_id: str, link: BehaviorLink, ledger: HabitLedger = Depends(get_ledger)):
    """Mark a behavior as converted into an existing habit."""
    behavior = ledger.link_behavior_to_habit(behavior_id, link.habit_id)
    if behavior is None:
        raise HTTPException(status_code=404, detail="Behavior or habit not found")
    return behavior

@router.post("/review", response_model=ScorecardView)
async def review_scorecard(ledger: HabitLedger = Depends(get_ledger)):
    return _scorecard_view(ledger.mark_scorecard_reviewed(get_current_time()))
