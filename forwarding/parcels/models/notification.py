"""
Notification records handed to the external sender.
"""

import uuid
from django.db import models
from django.conf import settings
from django.utils import timezone


class NotificationKind(models.TextChoices):
    PACKAGE_DELIVERED = 'package_delivered', 'Package Delivered'
    PACKAGE_ARRIVED = 'package_arrived', 'Package Arrived'
    SHIPMENT_CREATED = 'shipment_created', 'Shipment Created'


class Notification(models.Model):
    """Outbound customer notification waiting to be sent by the notifier."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    recipient = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name='notifications',
    )
    kind = models.CharField(max_length=30, choices=NotificationKind.choices)

    package = models.ForeignKey(
        'Package',
        on_delete=models.CASCADE,
        null=True,
        blank=True,
        related_name='notifications',
    )
    shipment = models.ForeignKey(
        'Shipment',
        on_delete=models.CASCADE,
        null=True,
        blank=True,
        related_name='notifications',
    )

    title = models.CharField(max_length=200)
    message = models.TextField()
    action_url = models.CharField(max_length=200, blank=True)

    is_read = models.BooleanField(default=False)
    read_at = models.DateTimeField(null=True, blank=True)

    created_at = models.DateTimeField(default=timezone.now)

    class Meta:
        ordering = ['-created_at']
        indexes = [
            models.Index(fields=['recipient', 'is_read'], name='notification_unread_idx'),
        ]

    def __str__(self):
        return f"{self.title} - {self.recipient}"

    @property
    def package_ref(self):
        return self.package.package_id if self.package_id else None

    def mark_as_read(self):
        """Mark notification as read."""
        if not self.is_read:
            self.is_read = True
            self.read_at = timezone.now()
            self.save(update_fields=['is_read', 'read_at'])
