"""Repository provisioning wizard."""

from .collaborators import FolderPicker, WizardCollaborators
from .controller import WizardController
from .create_form import CreateRepoForm
from .local_browser import LocalRepoBrowser
from .remote_browser import RemotePhase, RemoteRepoBrowser, join_destination
from .stages import Action, Effect, Transition, next_transition

__all__ = [
    "Action",
    "CreateRepoForm",
    "Effect",
    "FolderPicker",
    "LocalRepoBrowser",
    "RemotePhase",
    "RemoteRepoBrowser",
    "Transition",
    "WizardCollaborators",
    "WizardController",
    "join_destination",
    "next_transition",
]
