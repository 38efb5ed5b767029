import calendar
from datetime import date, datetime
from typing import List, Optional

from loguru import logger

from core.config import settings
from core.storage import LedgerSnapshot, SnapshotStore
from core.time_utils import day_token, get_current_time, get_today
from models.experiment import Experiment, ExperimentNote
from models.habit import Habit
from models.reward import Reward
from models.scorecard import HabitScorecard, ScorecardBehavior
from models.user import IdentityStatement, UserProfile


def sample_snapshot() -> LedgerSnapshot:
    """Starter data shown on a first launch."""
    return LedgerSnapshot(
        habits=[
            Habit(name="Read 10 pages", description="After pouring coffee.", icon="book.fill"),
            Habit(name="Meditate 5 mins", description="Before brushing teeth.", icon="brain.head.profile"),
            Habit(
                name="Journaling",
                description="After dinner.",
                icon="pencil.line",
                streak_warning="Recover the streak. Don't miss twice.",
            ),
        ],
        rewards=[
            Reward(name="Watch an Episode", description="Unlock with 5 points", points_required=5),
            Reward(name="Listen to Podcast", description="Unlock with 3 points", points_required=3),
            Reward(name="Social Media Scroll", description="Unlock with 10 points", points_required=10),
        ],
        experiments=[
            Experiment(
                name="Morning Routine Stack",
                description="Try stacking 3 habits after waking up",
                duration_days=7,
            ),
            Experiment(
                name="Evening Wind-down",
                description="No screens 1 hour before bed",
                duration_days=14,
            ),
        ],
    )


class HabitLedger:
    """
    The in-memory aggregate of habits, rewards, experiments, profile and scorecard.

    Every mutation runs to completion (including the derived streak, reward
    and vote updates) and then saves a snapshot. Operations addressed by an id
    that does not exist are silent no-ops and return None or False.
    """

    def __init__(self, store: Optional[SnapshotStore] = None, snapshot: Optional[LedgerSnapshot] = None):
        self.store = store
        snapshot = snapshot or LedgerSnapshot()
        self.habits: List[Habit] = snapshot.habits
        self.rewards: List[Reward] = snapshot.rewards
        self.experiments: List[Experiment] = snapshot.experiments
        self.profile: UserProfile = snapshot.profile
        self.scorecard: HabitScorecard = snapshot.scorecard

    @classmethod
    def load(cls, store: SnapshotStore, load_sample_data: bool = None) -> "HabitLedger":
        if load_sample_data is None:
            load_sample_data = settings.LOAD_SAMPLE_DATA
        snapshot = store.load_snapshot()
        if load_sample_data and not snapshot.habits and not snapshot.rewards:
            logger.info("No saved habits or rewards, seeding sample data")
            sample = sample_snapshot()
            snapshot.habits = sample.habits
            snapshot.rewards = sample.rewards
            snapshot.experiments = sample.experiments
        logger.info(
            f"Ledger loaded: {len(snapshot.habits)} habits, {len(snapshot.rewards)} rewards, "
            f"{len(snapshot.experiments)} experiments"
        )
        return cls(store=store, snapshot=snapshot)

    # --- Persistence ---

    def snapshot(self) -> LedgerSnapshot:
        return LedgerSnapshot(
            habits=self.habits,
            rewards=self.rewards,
            experiments=self.experiments,
            profile=self.profile,
            scorecard=self.scorecard,
        )

    def save(self):
        if self.store is None:
            return
        self.store.save(self.snapshot())

    # --- Habits ---

    def get_habit(self, habit_id: str) -> Optional[Habit]:
        return next((h for h in self.habits if h.id == habit_id), None)

    @property
    def active_habits(self) -> List[Habit]:
        return [h for h in self.habits if not h.is_archived]

    @property
    def archived_habits(self) -> List[Habit]:
        return [h for h in self.habits if h.is_archived]

    def add_habit(self, habit: Habit) -> Habit:
        self.habits.append(habit)
        logger.debug(f"Habit added: {habit.name} ({habit.id})")
        self.save()
        return habit

    def update_habit(self, habit_id: str, **changes) -> Optional[Habit]:
        """
        Applies field changes to a habit.

        `response` is merged into the current ladder as a dict of texts, so the
        response level is kept.
        """
        habit = self.get_habit(habit_id)
        if habit is None:
            return None
        response_changes = changes.pop("response", None)
        if response_changes:
            texts = {k: v for k, v in response_changes.items() if k != "current_level" and v is not None}
            habit.response = habit.response.model_copy(update=texts)
        for field, value in changes.items():
            setattr(habit, field, value)
        self.save()
        return habit

    def delete_habit(self, habit_id: str) -> bool:
        before = len(self.habits)
        self.habits = [h for h in self.habits if h.id != habit_id]
        if len(self.habits) == before:
            return False
        self.save()
        return True

    def archive_habit(self, habit_id: str) -> Optional[Habit]:
        habit = self.get_habit(habit_id)
        if habit is None:
            return None
        habit.is_archived = True
        self.save()
        return habit

    def toggle_completion(self, habit_id: str, day: date, today: Optional[date] = None) -> Optional[Habit]:
        """
        Flips the habit's completion for `day` and applies the side effects.

        Completing grants a completion, reward points, identity votes and
        possibly a "Never Miss Twice" recovery. Un-completing only takes the
        completion back: points, votes and recoveries already granted stay.
        """
        habit = self.get_habit(habit_id)
        if habit is None:
            return None
        today = today or get_today()

        was_in_recovery = habit.is_in_recovery_mode(day)
        completed = habit.toggle_completion(day)

        if completed:
            self.profile.total_completions += 1
            self.add_points_to_rewards(settings.POINTS_PER_COMPLETION, save=False)
            self._vote_for_linked_identities(habit.id)
            token = day_token(day)
            if was_in_recovery and not habit.is_in_recovery_mode(day) and token not in habit.recovered_dates:
                habit.recovered_dates.add(token)
                self.profile.never_miss_twice_recoveries += 1
                logger.info(f"Never miss twice: {habit.name} recovered on {token}")
        else:
            self.profile.total_completions = max(0, self.profile.total_completions - 1)

        self.update_streak(today)
        self.save()
        return habit

    def level_up_response(self, habit_id: str) -> Optional[Habit]:
        habit = self.get_habit(habit_id)
        if habit is None:
            return None
        if habit.level_up_response():
            logger.info(f"{habit.name} leveled up to {habit.response.level_name}")
            self.save()
        return habit

    # --- Streaks & stats ---

    def update_streak(self, today: Optional[date] = None):
        today = today or get_today()
        streaks = [h.current_streak(today) for h in self.active_habits]
        self.profile.current_streak = max(streaks, default=0)
        self.profile.best_streak = max(self.profile.best_streak, self.profile.current_streak)

    def completion_count(self, day: date) -> int:
        return sum(1 for h in self.habits if h.is_completed(day))

    def today_completion_rate(self, today: Optional[date] = None) -> float:
        today = today or get_today()
        active = self.active_habits
        if not active:
            return 0.0
        completed = sum(1 for h in active if h.is_completed(today))
        return completed / len(active)

    def month_completion_rate(self, year: int, month: int, today: Optional[date] = None) -> float:
        """Share of the month's days up to today on which any habit was completed."""
        today = today or get_today()
        completed_days = 0
        total_days = 0
        for day_number in range(1, calendar.monthrange(year, month)[1] + 1):
            day = date(year, month, day_number)
            if day > today:
                continue
            total_days += 1
            if any(h.is_completed(day) for h in self.habits):
                completed_days += 1
        return completed_days / total_days if total_days else 0.0

    # --- Rewards ---

    def get_reward(self, reward_id: str) -> Optional[Reward]:
        return next((r for r in self.rewards if r.id == reward_id), None)

    def add_reward(self, reward: Reward) -> Reward:
        self.rewards.append(reward)
        self.save()
        return reward

    def update_reward(self, reward_id: str, **changes) -> Optional[Reward]:
        reward = self.get_reward(reward_id)
        if reward is None:
            return None
        for field, value in changes.items():
            setattr(reward, field, value)
        self.save()
        return reward

    def delete_reward(self, reward_id: str) -> bool:
        before = len(self.rewards)
        self.rewards = [r for r in self.rewards if r.id != reward_id]
        if len(self.rewards) == before:
            return False
        self.save()
        return True

    def add_points_to_rewards(self, points: int, save: bool = True):
        for reward in self.rewards:
            if reward.is_unlocked:
                continue
            reward.points_earned += points
            if reward.is_unlocked:
                logger.info(f"Reward unlocked: {reward.name}")
        if save:
            self.save()

    def redeem_reward(self, reward_id: str) -> Optional[Reward]:
        reward = self.get_reward(reward_id)
        if reward is None:
            return None
        reward.points_earned = 0
        logger.info(f"Reward redeemed: {reward.name}")
        self.save()
        return reward

    # --- Experiments ---

    def get_experiment(self, experiment_id: str) -> Optional[Experiment]:
        return next((e for e in self.experiments if e.id == experiment_id), None)

    @property
    def active_experiments(self) -> List[Experiment]:
        return [e for e in self.experiments if e.is_active]

    def add_experiment(self, experiment: Experiment) -> Experiment:
        self.experiments.append(experiment)
        self.save()
        return experiment

    def start_experiment(self, experiment_id: str, now: Optional[datetime] = None) -> Optional[Experiment]:
        experiment = self.get_experiment(experiment_id)
        if experiment is None:
            return None
        experiment.is_active = True
        experiment.start_date = now or get_current_time()
        self.save()
        return experiment

    def end_experiment(self, experiment_id: str) -> Optional[Experiment]:
        experiment = self.get_experiment(experiment_id)
        if experiment is None:
            return None
        experiment.is_active = False
        self.save()
        return experiment

    def delete_experiment(self, experiment_id: str) -> bool:
        before = len(self.experiments)
        self.experiments = [e for e in self.experiments if e.id != experiment_id]
        if len(self.experiments) == before:
            return False
        self.save()
        return True

    def add_note_to_experiment(self, experiment_id: str, content: str, now: Optional[datetime] = None) -> Optional[Experiment]:
        experiment = self.get_experiment(experiment_id)
        if experiment is None:
            return None
        experiment.notes.append(ExperimentNote(content=content, date=now or get_current_time()))
        self.save()
        return experiment

    def expire_experiments(self, now: Optional[datetime] = None) -> List[Experiment]:
        """Ends every active experiment whose duration has run out."""
        now = now or get_current_time()
        expired = [e for e in self.active_experiments if e.has_elapsed(now)]
        for experiment in expired:
            experiment.is_active = False
            logger.info(f"Experiment finished: {experiment.name}")
        if expired:
            self.save()
        return expired

    # --- Identity ---

    def add_identity_statement(self, identity: IdentityStatement) -> IdentityStatement:
        self.profile.identity_statements.append(identity)
        self.save()
        return identity

    def delete_identity_statement(self, identity_id: str) -> bool:
        before = len(self.profile.identity_statements)
        self.profile.identity_statements = [
            i for i in self.profile.identity_statements if i.id != identity_id
        ]
        if len(self.profile.identity_statements) == before:
            return False
        self.save()
        return True

    def vote_for_identity(self, identity_id: str) -> bool:
        if not self.profile.vote_for_identity(identity_id):
            return False
        self.save()
        return True

    def _vote_for_linked_identities(self, habit_id: str):
        for identity in self.profile.identity_statements:
            if habit_id in identity.linked_habit_ids:
                identity.votes_count += 1

    # --- Scorecard ---

    def add_behavior(self, behavior: ScorecardBehavior) -> ScorecardBehavior:
        self.scorecard.behaviors.append(behavior)
        self.save()
        return behavior

    def update_behavior(self, behavior_id: str, **changes) -> Optional[ScorecardBehavior]:
        behavior = self.scorecard.get_behavior(behavior_id)
        if behavior is None:
            return None
        for field, value in changes.items():
            setattr(behavior, field, value)
        self.save()
        return behavior

    def delete_behavior(self, behavior_id: str) -> bool:
        before = len(self.scorecard.behaviors)
        self.scorecard.behaviors = [b for b in self.scorecard.behaviors if b.id != behavior_id]
        if len(self.scorecard.behaviors) == before:
            return False
        self.save()
        return True

    def link_behavior_to_habit(self, behavior_id: str, habit_id: str) -> Optional[ScorecardBehavior]:
        behavior = self.scorecard.get_behavior(behavior_id)
        if behavior is None or self.get_habit(habit_id) is None:
            return None
        behavior.linked_habit_id = habit_id
        self.save()
        return behavior

    def mark_scorecard_reviewed(self, now: Optional[datetime] = None) -> HabitScorecard:
        self.scorecard.last_review_date = now or get_current_time()
        self.save()
        return self.scorecard

    # --- Profile ---

    def update_user_name(self, name: str) -> UserProfile:
        self.profile.name = name
        self.save()
        return self.profile

    def reset_progress(self):
        """Clears all progress. Keeps the user's name, habits and rewards."""
        self.profile = UserProfile(name=self.profile.name)
        for habit in self.habits:
            habit.completed_dates = set()
            habit.recovered_dates = set()
        for reward in self.rewards:
            reward.points_earned = 0
        logger.warning("Progress reset")
        self.save()

    # --- Maintenance ---

    def refresh(self, now: Optional[datetime] = None):
        """Day rollover: recompute streaks for the new day and end elapsed experiments."""
        now = now or get_current_time()
        self.update_streak(now.date())
        self.expire_experiments(now)
        self.save()
