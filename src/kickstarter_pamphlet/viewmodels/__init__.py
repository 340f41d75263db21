from kickstarter_pamphlet.viewmodels.environment import CookieStorage, Environment, LoggingTracker
from kickstarter_pamphlet.viewmodels.message_dialog_vm import MessageDialogViewModel
from kickstarter_pamphlet.viewmodels.project_pamphlet_vm import (
    PamphletState,
    PledgeCTAContainerViewData,
    ProjectPamphletViewModel,
    SizeClass,
    TraitCollection,
)
from kickstarter_pamphlet.viewmodels.signal import Signal

__all__ = [
    "CookieStorage",
    "Environment",
    "LoggingTracker",
    "MessageDialogViewModel",
    "PamphletState",
    "PledgeCTAContainerViewData",
    "ProjectPamphletViewModel",
    "Signal",
    "SizeClass",
    "TraitCollection",
]
