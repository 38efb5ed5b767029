from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from contextlib import asynccontextmanager
from loguru import logger
from routes import habits, rewards, experiments, profile, scorecard, analytics
from core.config import settings
from core.ledger import HabitLedger
from core.logger import setup_logging
from core.scheduler import start_scheduler, stop_scheduler
from core.storage import SnapshotStore, create_blob_store


@asynccontextmanager
async def lifespan(app: FastAPI):
    setup_logging()
    if getattr(app.state, "ledger", None) is None:
        store = SnapshotStore(create_blob_store())
        app.state.ledger = HabitLedger.load(store)
    app.state.ledger.refresh()

    if settings.SCHEDULER_ENABLED:
        start_scheduler(app.state.ledger)
    logger.info(f"{settings.APP_NAME} started ({settings.STORAGE_BACKEND} storage)")

    yield

    if settings.SCHEDULER_ENABLED:
        stop_scheduler()
    app.state.ledger.save()
    logger.info(f"{settings.APP_NAME} stopped")


app = FastAPI(title=settings.APP_NAME, lifespan=lifespan)

# CORS
origins = [
    settings.FRONTEND_URL,
    "http://localhost:5173",
    "http://127.0.0.1:5173",
    "http://localhost:3000", # Common alternative
]

app.add_middleware(
    CORSMiddleware,
    allow_origins=origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Routers
app.include_router(habits.router)
app.include_router(rewards.router)
app.include_router(experiments.router)
app.include_router(profile.router)
app.include_router(scorecard.router)
app.include_router(analytics.router)

@app.get("/")
def read_root():
    return {"message": f"Welcome to {settings.APP_NAME} API"}

if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=8000)
