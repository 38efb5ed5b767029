from fastapi import APIRouter, HTTPException, status, Depends
from typing import List
from models.user import IdentityCreate, IdentityStatement, NameUpdate, ProfileView
from routes.deps import get_ledger
from core.ledger import HabitLedger
from core.leveling import completions_to_next_level, current_level, level_progress
from core.time_utils import get_today

router = APIRouter(prefix="/profile", tags=["Profile"])

def _profile_view(ledger: HabitLedger) -> ProfileView:
    profile = ledger.profile
    today = get_today()
    level = current_level(profile.total_completions)
    return ProfileView(
        name=profile.name,
        total_completions=profile.total_completions,
        current_streak=profile.current_streak,
        best_streak=profile.best_streak,
        never_miss_twice_recoveries=profile.never_miss_twice_recoveries,
        level=level.number,
        level_title=level.title,
        level_progress=level_progress(profile.total_completions),
        level_quote=level.quote,
        completions_to_next_level=completions_to_next_level(profile.total_completions),
        days_since_start=profile.days_since_start(today),
        compound_growth_message=profile.compound_growth_message(today),
        primary_identity=profile.primary_identity,
    )

@router.get("/", response_model=ProfileView)
async def get_profile(ledger: HabitLedger = Depends(get_ledger)):
    return _profile_view(ledger)

@router.put("/name", response_model=ProfileView)
async def update_name(name_in: NameUpdate, ledger: HabitLedger = Depends(get_ledger)):
    ledger.update_user_name(name_in.name)
    return _profile_view(ledger)

@router.post("/reset", response_model=ProfileView)
async def reset_progress(ledger: HabitLedger = Depends(get_ledger)):
    """Wipe completions, streaks, identities and reward points. Habits and rewards stay."""
    ledger.reset_progress()
    return _profile_view(ledger)

# Identity statements

@router.get("/identities", response_model=List[IdentityStatement])
async def get_identities(ledger: HabitLedger = Depends(get_ledger)):
    return ledger.profile.identity_statements

@router.post("/identities", response_model=IdentityStatement, status_code=status.HTTP_201_CREATED)
async def create_identity(identity_in: IdentityCreate, ledger: HabitLedger = Depends(get_ledger)):
    return ledger.add_identity_statement(IdentityStatement(**identity_in.model_dump()))

@router.delete("/identities/{identity_id}")
async def delete_identity(identity_id: str, ledger: HabitLedger = Depends(get_ledger)):
    if not ledger.delete_identity_statement(identity_id):
        raise HTTPException(status_code=404, detail="Identity not found")
    return {"message": "Identity deleted"}
