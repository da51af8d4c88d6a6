"""Stage transition table of the repository wizard.

The table is pure: given the current stage, a user action and whether a
side-effecting call is in flight, it returns the next stage and the effect
the controller has to carry out, or None if the action is not allowed.
"""

from dataclasses import dataclass
from enum import Enum

from seedbed.models.result import Stage


class Action(Enum):
    """User actions understood by the wizard."""

    CHOOSE_EXISTING = "choose_existing"
    CHOOSE_NEW = "choose_new"
    CHOOSE_GITHUB = "choose_github"
    BACK = "back"
    CANCEL = "cancel"


class Effect(Enum):
    """Side effect executed by the controller after a transition."""

    ENTER_STAGE = "enter_stage"
    LEAVE_STAGE = "leave_stage"
    RESOLVE_CANCELLED = "resolve_cancelled"


@dataclass(frozen=True)
class Transition:
    """Result of dispatching an action."""

    target: Stage
    effect: Effect


CHOICES = {
    Action.CHOOSE_EXISTING: Stage.EXISTING_LOCAL,
    Action.CHOOSE_NEW: Stage.CREATE_NEW,
    Action.CHOOSE_GITHUB: Stage.GITHUB_CLONE,
}

STAGE_ACTIONS = {stage: action for action, stage in CHOICES.items()}


def next_transition(stage: Stage, action: Action, busy: bool) -> Transition | None:
    """Map (stage, action) to a transition.

    Args:
        stage: Current stage
        action: Requested action
        busy: True while a registration, initialization or clone is running

    Returns:
        The transition, or None if the action is not permitted
    """
    if action in CHOICES:
        if stage is not Stage.OPTIONS:
            return None
        return Transition(CHOICES[action], Effect.ENTER_STAGE)

    if busy:
        return None

    if action is Action.BACK:
        if stage is Stage.OPTIONS:
            return None
        return Transition(Stage.OPTIONS, Effect.LEAVE_STAGE)

    if action is Action.CANCEL:
        return Transition(stage, Effect.RESOLVE_CANCELLED)

    return None
