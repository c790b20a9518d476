"""
Selectable item model.

Every entity the wizard offers for selection (operations, contexts,
namespaces, resources, backups, yes/no answers) is a SelectableItem.
"""

from pydantic import BaseModel, ConfigDict, Field


class SelectableItem(BaseModel):
    """A (title, description) pair identified by its title."""

    model_config = ConfigDict(frozen=True)

    title: str = Field(
        ...,
        description="Display title, also the item's identity"
    )
    description: str = Field(
        default="",
        description="Optional secondary text"
    )

    @property
    def filter_value(self) -> str:
        """Identity key used for selection and de-duplication."""
        return self.title

    def __eq__(self, other: object) -> bool:
        if isinstance(other, SelectableItem):
            return self.title == other.title
        return NotImplemented

    def __hash__(self) -> int:
        return hash(self.title)

    def __str__(self) -> str:
        return self.title
