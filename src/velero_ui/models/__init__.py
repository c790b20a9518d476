"""
Velero-UI Domain Models

Pydantic models shared by the wizard, its adapters and the terminal driver.
"""

from .item import SelectableItem
from .operation import (
    OperationKind,
    Phase,
    Step,
    Outcome,
    OperationRecord,
    OPERATION_ITEMS,
    YES_NO_ITEMS,
)

__all__ = [
    "SelectableItem",
    "OperationKind",
    "Phase",
    "Step",
    "Outcome",
    "OperationRecord",
    "OPERATION_ITEMS",
    "YES_NO_ITEMS",
]
