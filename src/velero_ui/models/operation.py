"""
Operation domain models.

Defines the wizard steps and outcomes, the external tool's phases and the
ephemeral record an operation is dispatched from.
"""

from enum import Enum
from typing import Optional, Union

from pydantic import BaseModel, ConfigDict, Field

from .item import SelectableItem


class OperationKind(str, Enum):
    """Cluster operations the wizard can submit."""
    BACKUP = "backup"
    RESTORE = "restore"

    @property
    def label(self) -> str:
        return self.value.capitalize()


class Phase(str, Enum):
    """Lifecycle phases reported by Velero for backups and restores."""
    NEW = "New"
    IN_PROGRESS = "InProgress"
    COMPLETED = "Completed"
    PARTIALLY_FAILED = "PartiallyFailed"
    FAILED = "Failed"
    FAILED_VALIDATION = "FailedValidation"

    @property
    def is_completed(self) -> bool:
        return self is Phase.COMPLETED

    @property
    def is_failed(self) -> bool:
        return self in (Phase.PARTIALLY_FAILED, Phase.FAILED, Phase.FAILED_VALIDATION)


class Step(str, Enum):
    """Wizard steps in flow order."""
    CHOOSE_OPERATION = "choose_operation"
    CHOOSE_BACKUP = "choose_backup"
    CHOOSE_CONTEXT = "choose_context"
    CHOOSE_NAMESPACES = "choose_namespaces"
    DECIDE_RESOURCES = "decide_resources"
    CHOOSE_RESOURCES = "choose_resources"
    ENTER_NAME = "enter_name"
    EXECUTE = "execute"
    TERMINAL = "terminal"


class Outcome(str, Enum):
    """How a wizard session ended."""
    PENDING = "pending"
    SUCCEEDED = "succeeded"
    FAILED = "failed"
    QUIT = "quit"


class OperationRecord(BaseModel):
    """
    Everything needed to dispatch and poll one operation.

    Built once at the execute step from the confirmed selections.
    """

    model_config = ConfigDict(frozen=True)

    kind: OperationKind
    context: str
    name: str = Field(
        default="",
        description="Name entered by the operator"
    )
    namespaces: tuple[str, ...] = Field(
        default=(),
        description="Selected namespaces in selection order"
    )
    resources: tuple[str, ...] = Field(
        default=(),
        description="Selected type/name resources in selection order"
    )
    backup: Optional[str] = Field(
        default=None,
        description="Source backup for a restore"
    )

    @property
    def resource_types(self) -> list[str]:
        """Resource types of the selected resources, first-seen order."""
        types: list[str] = []
        for resource in self.resources:
            kind = resource.split("/", 1)[0]
            if kind not in types:
                types.append(kind)
        return types

    @property
    def poll_name(self) -> str:
        """Name the external tool knows the operation by."""
        if self.kind is OperationKind.RESTORE:
            return self.backup or ""
        return self.name

    def template_fields(self) -> dict[str, Union[str, tuple[str, ...]]]:
        """
        Parameters available to the dispatch command templates.

        List-valued fields are tuples so each element is quoted separately.
        """
        return {
            "kind": self.kind.value,
            "name": self.name,
            "context": self.context,
            "namespaces": self.namespaces,
            "resources": self.resources,
            "resource_types": tuple(self.resource_types),
            "backup": self.backup or "",
        }


OPERATION_ITEMS = (
    SelectableItem(title=OperationKind.BACKUP.label, description="Create a velero backup"),
    SelectableItem(title=OperationKind.RESTORE.label, description="Restore a velero backup"),
)

YES_NO_ITEMS = (
    SelectableItem(title="Yes", description="Pick specific resources to include"),
    SelectableItem(title="No", description="Include everything in the selected namespaces"),
)
