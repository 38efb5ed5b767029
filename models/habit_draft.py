from pydantic import BaseModel
from typing import Optional, Tuple
from datetime import time as dt_time
from enum import IntEnum

from models.habit import (
    Habit,
    HabitCraving,
    HabitCue,
    HabitResponse,
    HabitRewardPlan,
    HabitType,
)
from models.user import IdentityCategory, IdentityStatement

class DraftStep(IntEnum):
    IDENTITY = 0  # Who do you want to be?
    CUE = 1       # Make it obvious
    RESPONSE = 2  # Make it easy
    REWARD = 3    # Make it satisfying

STEP_TITLES = {
    DraftStep.IDENTITY: "Who Do You Want to Be?",
    DraftStep.CUE: "Make it Obvious",
    DraftStep.RESPONSE: "Make it Easy",
    DraftStep.REWARD: "Make it Satisfying",
}

class HabitDraft(BaseModel):
    """
    The four-step "new habit" flow as a state machine.

    Each step has a validation predicate; `advance` only moves forward when
    the current step is valid, and `build` requires every step to be valid.
    """
    step: DraftStep = DraftStep.IDENTITY

    # Step 0
    name: str = ""
    icon: str = "star.fill"
    habit_type: HabitType = HabitType.BUILD
    identity_statement: str = ""
    motivation: str = ""

    # Step 1
    cue_time: Optional[dt_time] = None
    cue_location: str = ""
    current_habit: str = ""

    # Step 2
    two_minute_version: str = ""
    five_minute_version: str = ""
    ten_minute_version: str = ""
    full_version: str = ""

    # Step 3
    immediate_reward: str = ""
    temptation_bundle: str = ""
    never_miss_twice: bool = True

    @property
    def title(self) -> str:
        return STEP_TITLES.get(self.step, "New Habit")

    def is_step_valid(self, step: DraftStep) -> bool:
        if step == DraftStep.IDENTITY:
            return bool(self.name.strip())
        return True

    @property
    def can_advance(self) -> bool:
        return self.step < DraftStep.REWARD and self.is_step_valid(self.step)

    @property
    def can_finish(self) -> bool:
        return all(self.is_step_valid(step) for step in DraftStep)

    def advance(self) -> bool:
        if not self.can_advance:
            return False
        self.step = DraftStep(self.step + 1)
        return True

    def back(self) -> bool:
        if self.step == DraftStep.IDENTITY:
            return False
        self.step = DraftStep(self.step - 1)
        return True

    @property
    def implementation_intention_preview(self) -> str:
        parts = []
        if self.current_habit:
            parts.append(f"After I {self.current_habit},")
        if self.name:
            parts.append(f"I will {self.name.lower()}")
        else:
            parts.append("I will [habit]")
        if self.cue_time is not None:
            parts.append(f"at {self.cue_time.strftime('%H:%M')}")
        if self.cue_location:
            parts.append(f"in {self.cue_location}")
        return " ".join(parts) + "."

    def build(self) -> Tuple[Habit, Optional[IdentityStatement]]:
        """
        Turns the draft into a Habit, plus a linked identity if one was given.

        Raises:
            ValueError: If a step's validation predicate does not hold.
        """
        if not self.can_finish:
            raise ValueError("Habit name is required")

        name = self.name.strip()
        habit = Habit(
            name=name,
            icon=self.icon,
            habit_type=self.habit_type,
            cue=HabitCue(
                time=self.cue_time,
                location=self.cue_location,
                current_habit=self.current_habit,
            ),
            craving=HabitCraving(
                identity_statement=self.identity_statement,
                motivation=self.motivation,
                temptation_bundle=self.temptation_bundle,
            ),
            response=HabitResponse(
                two_minute_version=self.two_minute_version or name,
                five_minute_version=self.five_minute_version,
                ten_minute_version=self.ten_minute_version,
                full_version=self.full_version or name,
                current_level=0,
            ),
            reward=HabitRewardPlan(
                immediate_reward=self.immediate_reward,
                visual_progress=True,
                never_miss_twice=self.never_miss_twice,
            ),
        )

        identity = None
        if self.identity_statement:
            identity = IdentityStatement(
                statement=self.identity_statement,
                category=IdentityCategory.OTHER,
                linked_habit_ids=[habit.id],
            )
        return habit, identity
