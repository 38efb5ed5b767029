from fastapi import APIRouter, HTTPException, status, Depends
from typing import List
from models.experiment import Experiment, ExperimentCreate, ExperimentView, NoteCreate
from routes.deps import get_ledger
from core.ledger import HabitLedger
from core.time_utils import get_current_time

router = APIRouter(prefix="/experiments", tags=["Experiments"])

def _view_or_404(experiment, now) -> ExperimentView:
    if experiment is None:
        raise HTTPException(status_code=404, detail="Experiment not found")
    return ExperimentView.from_experiment(experiment, now)

@router.get("/", response_model=List[ExperimentView])
async def get_experiments(active_only: bool = False, ledger: HabitLedger = Depends(get_ledger)):
    """List experiments. Those whose duration has run out are ended first."""
    now = get_current_time()
    ledger.expire_experiments(now)
    experiments = ledger.active_experiments if active_only else ledger.experiments
    return [ExperimentView.from_experiment(e, now) for e in experiments]

@router.post("/", response_model=ExperimentView, status_code=status.HTTP_201_CREATED)
async def create_experiment(experiment_in: ExperimentCreate, ledger: HabitLedger = Depends(get_ledger)):
    now = get_current_time()
    experiment = ledger.add_experiment(Experiment(**experiment_in.model_dump(), start_date=now))
    return ExperimentView.from_experiment(experiment, now)

@router.post("/{experiment_id}/start", response_model=ExperimentView)
async def start_experiment(experiment_id: str, ledger: HabitLedger = Depends(get_ledger)):
    now = get_current_time()
    return _view_or_404(ledger.start_experiment(experiment_id, now), now)

@router.post("/{experiment_id}/end", response_model=ExperimentView)
async def end_experiment(experiment_id: str, ledger: HabitLedger = Depends(get_ledger)):
    return _view_or_404(ledger.end_experiment(experiment_id), get_current_time())

@router.post("/{experiment_id}/notes", response_model=ExperimentView)
async def add_note(experiment_id: str, note_in: NoteCreate, ledger: HabitLedger = Depends(get_ledger)):
    now = get_current_time()
    return _view_or_404(ledger.add_note_to_experiment(experiment_id, note_in.content, now), now)

@router.delete("/{experiment_id}")
async def delete_experiment(experiment_id: str, ledger: HabitLedger = Depends(get_ledger)):
    if not ledger.delete_experiment(experiment_id):
        raise HTTPException(status_code=404, detail="Experiment not found")
    return {"message": "Experiment deleted"}
