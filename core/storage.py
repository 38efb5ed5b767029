import os
from pathlib import Path
from typing import Dict, List, Optional

from loguru import logger
from pydantic import BaseModel, Field, TypeAdapter, ValidationError

from core.config import settings
from models.experiment import Experiment
from models.habit import Habit
from models.reward import Reward
from models.scorecard import HabitScorecard
from models.user import UserProfile

HABITS_KEY = "SavedHabits"
REWARDS_KEY = "SavedRewards"
PROFILE_KEY = "SavedProfile"
EXPERIMENTS_KEY = "SavedExperiments"
SCORECARD_KEY = "SavedScorecard"


class BlobStore:
    """Flat key-value persistence of opaque byte blobs."""

    def read(self, key: str) -> Optional[bytes]:
        raise NotImplementedError

    def write(self, key: str, data: bytes) -> None:
        raise NotImplementedError


class MemoryBlobStore(BlobStore):
    def __init__(self):
        self._blobs: Dict[str, bytes] = {}

    def read(self, key: str) -> Optional[bytes]:
        return self._blobs.get(key)

    def write(self, key: str, data: bytes) -> None:
        self._blobs[key] = data


class FileBlobStore(BlobStore):
    """One `<key>.json` file per key under a data directory."""

    def __init__(self, data_dir: str):
        self.data_dir = Path(data_dir)
        self.data_dir.mkdir(parents=True, exist_ok=True)

    def _path(self, key: str) -> Path:
        return self.data_dir / f"{key}.json"

    def read(self, key: str) -> Optional[bytes]:
        path = self._path(key)
        if not path.exists():
            return None
        return path.read_bytes()

    def write(self, key: str, data: bytes) -> None:
        path = self._path(key)
        tmp_path = path.with_suffix(".tmp")
        tmp_path.write_bytes(data)
        os.replace(tmp_path, path)


class LedgerSnapshot(BaseModel):
    habits: List[Habit] = []
    rewards: List[Reward] = []
    experiments: List[Experiment] = []
    profile: UserProfile = Field(default_factory=UserProfile)
    scorecard: HabitScorecard = Field(default_factory=HabitScorecard)


_ADAPTERS = {
    HABITS_KEY: TypeAdapter(List[Habit]),
    REWARDS_KEY: TypeAdapter(List[Reward]),
    EXPERIMENTS_KEY: TypeAdapter(List[Experiment]),
    PROFILE_KEY: TypeAdapter(UserProfile),
    SCORECARD_KEY: TypeAdapter(HabitScorecard),
}


class SnapshotStore:
    """
    Encodes ledger collections into a BlobStore, one fixed key per collection.

    Saving is best effort: failures are logged and swallowed. Loading treats a
    blob that fails to decode exactly like a missing one.
    """

    def __init__(self, blobs: BlobStore):
        self.blobs = blobs

    def save(self, snapshot: LedgerSnapshot) -> bool:
        values = {
            HABITS_KEY: snapshot.habits,
            REWARDS_KEY: snapshot.rewards,
            EXPERIMENTS_KEY: snapshot.experiments,
            PROFILE_KEY: snapshot.profile,
            SCORECARD_KEY: snapshot.scorecard,
        }
        ok = True
        for key, value in values.items():
            try:
                self.blobs.write(key, _ADAPTERS[key].dump_json(value))
            except Exception:
                logger.exception(f"Failed to save {key}")
                ok = False
        return ok

    def load(self, key: str):
        try:
            data = self.blobs.read(key)
        except Exception:
            logger.exception(f"Failed to read {key}")
            return None
        if data is None:
            return None
        try:
            return _ADAPTERS[key].validate_json(data)
        except ValidationError as e:
            logger.warning(f"Discarding unreadable snapshot {key}: {e.error_count()} errors")
            return None

    def load_snapshot(self) -> LedgerSnapshot:
        """Assembles a snapshot, falling back to defaults for anything absent or corrupt."""
        snapshot = LedgerSnapshot()
        habits = self.load(HABITS_KEY)
        if habits is not None:
            snapshot.habits = habits
        rewards = self.load(REWARDS_KEY)
        if rewards is not None:
            snapshot.rewards = rewards
        experiments = self.load(EXPERIMENTS_KEY)
        if experiments is not None:
            snapshot.experiments = experiments
        profile = self.load(PROFILE_KEY)
        if profile is not None:
            snapshot.profile = profile
        scorecard = self.load(SCORECARD_KEY)
        if scorecard is not None:
            snapshot.scorecard = scorecard
        return snapshot


def create_blob_store(backend: str = None, data_dir: str = None) -> BlobStore:
    backend = backend or settings.STORAGE_BACKEND
    if backend == "memory":
        return MemoryBlobStore()
    if backend == "file":
        return FileBlobStore(data_dir or settings.DATA_DIR)
    raise ValueError(f"Unknown storage backend: {backend}")
