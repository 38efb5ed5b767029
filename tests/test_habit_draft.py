from datetime import time

import pytest

from models.habit_draft import DraftStep, HabitDraft
from models.user import IdentityCategory


def test_cannot_leave_first_step_without_a_name():
    draft = HabitDraft()
    assert draft.title == "Who Do You Want to Be?"
    assert not draft.can_advance
    assert draft.advance() is False
    assert draft.step == DraftStep.IDENTITY

    draft.name = "   "
    assert not draft.can_advance


def test_walks_through_all_steps():
    draft = HabitDraft(name="Read")
    assert draft.advance()
    assert draft.step == DraftStep.CUE
    assert draft.title == "Make it Obvious"
    assert draft.advance()
    assert draft.advance()
    assert draft.step == DraftStep.REWARD
    assert draft.advance() is False

    assert draft.back()
    assert draft.step == DraftStep.RESPONSE


def test_back_from_first_step_is_noop():
    draft = HabitDraft(name="Read")
    assert draft.back() is False
    assert draft.step == DraftStep.IDENTITY


def test_build_requires_name():
    with pytest.raises(ValueError):
        HabitDraft().build()


def test_build_fills_versions_and_links_identity():
    draft = HabitDraft(
        name="Read",
        identity_statement="a reader",
        five_minute_version="Read 5 pages",
        cue_location="the couch",
        never_miss_twice=False,
    )
    habit, identity = draft.build()

    assert habit.response.two_minute_version == "Read"
    assert habit.response.five_minute_version == "Read 5 pages"
    assert habit.response.full_version == "Read"
    assert habit.response.current_level == 0
    assert habit.reward.never_miss_twice is False
    assert habit.cue.location == "the couch"
    assert habit.identity_statement == "I am a reader"

    assert identity.statement == "a reader"
    assert identity.category == IdentityCategory.OTHER
    assert identity.linked_habit_ids == [habit.id]


def test_build_without_identity():
    _, identity = HabitDraft(name="Stretch").build()
    assert identity is None


def test_implementation_intention_preview():
    assert HabitDraft().implementation_intention_preview == "I will [habit]."
    draft = HabitDraft(name="Meditate", current_habit="brush my teeth", cue_time=time(21, 30), cue_location="my room")
    assert draft.implementation_intention_preview == "After I brush my teeth, I will meditate at 21:30 in my room."
