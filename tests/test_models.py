"""
Tests for Pydantic domain models.
"""

import pytest
from pydantic import ValidationError

from velero_ui.models import (
    OperationKind,
    OperationRecord,
    Phase,
    SelectableItem,
    OPERATION_ITEMS,
)


class TestSelectableItem:
    """Tests for SelectableItem."""

    def test_defaults(self):
        """Test that description defaults to empty."""
        item = SelectableItem(title="prod")
        assert item.title == "prod"
        assert item.description == ""
        assert item.filter_value == "prod"
        assert str(item) == "prod"

    def test_equality_by_title(self):
        """Test that identity is the title only."""
        assert SelectableItem(title="a", description="x") == SelectableItem(title="a", description="y")
        assert SelectableItem(title="a") != SelectableItem(title="b")
        assert len({SelectableItem(title="a"), SelectableItem(title="a", description="z")}) == 1

    def test_immutable(self):
        """Test that items cannot be modified."""
        item = SelectableItem(title="a")
        with pytest.raises(ValidationError):
            item.title = "b"

    def test_title_required(self):
        """Test that a title is required."""
        with pytest.raises(ValidationError):
            SelectableItem()


class TestEnums:
    """Tests for operation enums."""

    def test_operation_kind_values(self):
        """Test OperationKind values and labels."""
        assert OperationKind.BACKUP == "backup"
        assert OperationKind.RESTORE == "restore"
        assert OperationKind.BACKUP.label == "Backup"
        assert [i.title for i in OPERATION_ITEMS] == ["Backup", "Restore"]

    def test_phase_classification(self):
        """Test terminal phase helpers."""
        assert Phase.COMPLETED.is_completed
        assert not Phase.IN_PROGRESS.is_completed
        assert Phase.FAILED.is_failed
        assert Phase.PARTIALLY_FAILED.is_failed
        assert Phase.FAILED_VALIDATION.is_failed
        assert not Phase.NEW.is_failed
        assert not Phase.COMPLETED.is_failed


class TestOperationRecord:
    """Tests for OperationRecord."""

    def test_backup_fields(self):
        """Test template fields of a backup."""
        record = OperationRecord(
            kind=OperationKind.BACKUP,
            context="prod",
            name="nightly",
            namespaces=["ns1", "ns2"],
        )
        fields = record.template_fields()

        assert fields["name"] == "nightly"
        assert fields["namespaces"] == ("ns1", "ns2")
        assert fields["context"] == "prod"
        assert fields["kind"] == "backup"
        assert record.poll_name == "nightly"

    def test_restore_polls_backup_name(self):
        """Test that a restore is polled under its source backup."""
        record = OperationRecord(
            kind=OperationKind.RESTORE,
            context="prod",
            name="typed",
            backup="weekly",
        )
        assert record.poll_name == "weekly"
        assert record.template_fields()["backup"] == "weekly"

    def test_resource_types_deduplicated_in_order(self):
        """Test resource type extraction."""
        record = OperationRecord(
            kind=OperationKind.BACKUP,
            context="prod",
            resources=["service/a", "pod/b", "service/c", "deployment.apps/d"],
        )
        assert record.resource_types == ["service", "pod", "deployment.apps"]
        assert record.template_fields()["resource_types"] == ("service", "pod", "deployment.apps")

    def test_invalid_kind(self):
        """Test that only known operations are accepted."""
        with pytest.raises(ValidationError):
            OperationRecord(kind="migrate", context="prod")
