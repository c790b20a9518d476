"""
Velero-UI - Interactive Velero backup and restore wizard

Walks an operator through:
- choosing a backup or restore
- choosing a kube context, namespaces and optionally resources
- submitting the operation to Velero and waiting for it to finish
"""

__version__ = "1.0.0"

from .executor import CommandExecutor
from .sources import ItemSource
from .poller import CompletionPoller
from .selection import SelectionSet
from .state_machine import OperationWizard, WizardSession
from .core.config import Settings

__all__ = [
    "CommandExecutor",
    "ItemSource",
    "CompletionPoller",
    "SelectionSet",
    "OperationWizard",
    "WizardSession",
    "Settings",
]
