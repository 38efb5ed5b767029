from fastapi import HTTPException, Request

from core.ledger import HabitLedger


async def get_ledger(request: Request) -> HabitLedger:
    ledger = getattr(request.app.state, "ledger", None)
    if ledger is None:
        raise HTTPException(status_code=503, detail="Ledger not loaded")
    return ledger
