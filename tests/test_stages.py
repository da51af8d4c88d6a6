"""Tests for the wizard transition table."""

import pytest

from seedbed.models.result import Stage
from seedbed.wizard.stages import Action, Effect, Transition, next_transition

SUB_STAGES = [Stage.EXISTING_LOCAL, Stage.CREATE_NEW, Stage.GITHUB_CLONE]
CHOICES = [Action.CHOOSE_EXISTING, Action.CHOOSE_NEW, Action.CHOOSE_GITHUB]


class TestNextTransition:
    """Tests for next_transition."""

    @pytest.mark.parametrize(
        "action,target",
        [
            (Action.CHOOSE_EXISTING, Stage.EXISTING_LOCAL),
            (Action.CHOOSE_NEW, Stage.CREATE_NEW),
            (Action.CHOOSE_GITHUB, Stage.GITHUB_CLONE),
        ],
    )
    def test_choices_from_options(self, action: Action, target: Stage) -> None:
        """Test that each option enters its stage."""
        assert next_transition(Stage.OPTIONS, action, busy=False) == Transition(
            target, Effect.ENTER_STAGE
        )

    @pytest.mark.parametrize("stage", SUB_STAGES)
    @pytest.mark.parametrize("action", CHOICES)
    def test_choices_only_from_options(self, stage: Stage, action: Action) -> None:
        """Test that sub-stages cannot jump to each other."""
        assert next_transition(stage, action, busy=False) is None

    @pytest.mark.parametrize("stage", SUB_STAGES)
    def test_back_returns_to_options(self, stage: Stage) -> None:
        assert next_transition(stage, Action.BACK, busy=False) == Transition(
            Stage.OPTIONS, Effect.LEAVE_STAGE
        )

    def test_back_from_options_not_allowed(self) -> None:
        assert next_transition(Stage.OPTIONS, Action.BACK, busy=False) is None

    @pytest.mark.parametrize("stage", [Stage.OPTIONS, *SUB_STAGES])
    def test_cancel_resolves(self, stage: Stage) -> None:
        """Test that cancel is available from every stage."""
        assert next_transition(stage, Action.CANCEL, busy=False) == Transition(
            stage, Effect.RESOLVE_CANCELLED
        )

    @pytest.mark.parametrize("stage", SUB_STAGES)
    @pytest.mark.parametrize("action", [Action.BACK, Action.CANCEL])
    def test_busy_blocks_leaving(self, stage: Stage, action: Action) -> None:
        """Test that a side effect in flight pins the stage."""
        assert next_transition(stage, action, busy=True) is None
