from fastapi import APIRouter, HTTPException, status, Depends
from typing import List
from models.reward import Reward, RewardCreate, RewardUpdate
from routes.deps import get_ledger
from core.ledger import HabitLedger

router = APIRouter(prefix="/rewards", tags=["Rewards"])

@router.get("/", response_model=List[Reward])
async def get_rewards(ledger: HabitLedger = Depends(get_ledger)):
    return ledger.rewards

@router.post("/", response_model=Reward, status_code=status.HTTP_201_CREATED)
async def create_reward(reward_in: RewardCreate, ledger: HabitLedger = Depends(get_ledger)):
    """Create a reward. It starts locked with zero points."""
    return ledger.add_reward(Reward(**reward_in.model_dump()))

@router.put("/{reward_id}", response_model=Reward)
async def update_reward(reward_id: str, reward_in: RewardUpdate, ledger: HabitLedger = Depends(get_ledger)):
    changes = reward_in.model_dump(exclude_unset=True)
    reward = ledger.update_reward(reward_id, **changes)
    if reward is None:
        raise HTTPException(status_code=404, detail="Reward not found")
    return reward

@router.delete("/{reward_id}")
async def delete_reward(reward_id: str, ledger: HabitLedger = Depends(get_ledger)):
    if not ledger.delete_reward(reward_id):
        raise HTTPException(status_code=404, detail="Reward not found")
    return {"message": "Reward deleted"}

@router.post("/{reward_id}/redeem", response_model=Reward)
async def redeem_reward(reward_id: str, ledger: HabitLedger = Depends(get_ledger)):
    """
    Redeem an unlocked reward.

    Both counters reset together: points go back to 0 and the reward locks
    again until it is earned anew.
    """
    reward = ledger.get_reward(reward_id)
    if reward is None:
        raise HTTPException(status_code=404, detail="Reward not found")
    if not reward.is_unlocked:
        raise HTTPException(status_code=400, detail="Not enough points")
    return ledger.redeem_reward(reward_id)
