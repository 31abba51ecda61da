"""
Audit log model for package and shipment lifecycle changes.
"""

from decimal import Decimal
from django.db import models
from django.conf import settings
from django.utils import timezone


class AuditLog(models.Model):
    """
    Append-only history of changes to packages and shipments.

    Every creation and status change writes one entry, so the sequence of
    statuses an entity went through can be read back in order.
    """

    id = models.BigAutoField(primary_key=True)

    # Entity being audited
    entity_type = models.CharField(
        max_length=50,
        help_text="Type of entity (Package, Shipment)"
    )
    entity_id = models.UUIDField(
        help_text="UUID of the entity being audited"
    )

    action = models.CharField(
        max_length=50,
        help_text="Action performed (created, status_changed, linked, code_issued, ...)"
    )

    user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='audit_logs',
        help_text="User who performed the action"
    )

    old_values = models.JSONField(default=dict, blank=True)
    new_values = models.JSONField(default=dict, blank=True)
    field_changes = models.JSONField(default=dict, blank=True)

    timestamp = models.DateTimeField(default=timezone.now)
    notes = models.TextField(blank=True)

    class Meta:
        ordering = ['-timestamp']
        indexes = [
            models.Index(fields=['entity_type', 'entity_id', '-timestamp'], name='audit_entity_idx'),
            models.Index(fields=['action', '-timestamp'], name='audit_action_idx'),
        ]

    def __str__(self):
        return f"{self.entity_type} {self.entity_id} - {self.action} by {self.user} at {self.timestamp}"

    @classmethod
    def log_change(cls, entity, action: str, user=None, old_values=None,
                   new_values=None, field_changes=None, notes=""):
        """
        Create an audit log entry for an entity change.

        Args:
            entity: The model instance being audited
            action: The action performed
            user: User who performed the action
            old_values: Previous state
            new_values: New state
            field_changes: Specific field changes
            notes: Additional notes
        """
        def convert_decimals(obj):
            if isinstance(obj, dict):
                return {k: convert_decimals(v) for k, v in obj.items()}
            elif isinstance(obj, list):
                return [convert_decimals(item) for item in obj]
            elif isinstance(obj, Decimal):
                return str(obj)
            else:
                return obj

        return cls.objects.create(
            entity_type=entity.__class__.__name__,
            entity_id=entity.id,
            action=action,
            user=user,
            old_values=convert_decimals(old_values or {}),
            new_values=convert_decimals(new_values or {}),
            field_changes=convert_decimals(field_changes or {}),
            notes=notes,
        )

    @classmethod
    def log_status_change(cls, entity, old_status: str, new_status: str, user=None, notes=""):
        """Log a status change for an entity."""
        return cls.log_change(
            entity=entity,
            action='status_changed',
            user=user,
            old_values={'status': old_status},
            new_values={'status': new_status},
            field_changes={'status': {'old': old_status, 'new': new_status}},
            notes=notes
        )

    @classmethod
    def status_history(cls, entity):
        """Return the ordered list of statuses recorded for an entity."""
        entries = cls.objects.filter(
            entity_type=entity.__class__.__name__,
            entity_id=entity.id,
            action__in=['created', 'status_changed', 'status_corrected'],
        ).order_by('id')
        return [entry.new_values.get('status') for entry in entries]
