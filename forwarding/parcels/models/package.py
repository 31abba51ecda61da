"""
Package models for the forwarding warehouse.
"""

import uuid
from django.db import models
from django.db.models import Q
from django.conf import settings
from django.utils import timezone


class PackageStatus(models.TextChoices):
    """Package status enumeration following the forwarding lifecycle."""
    PENDING = 'pending', 'Pending'
    RECEIVED = 'received', 'Received'
    PROCESSING = 'processing', 'Processing'
    SHIPPED = 'shipped', 'Shipped'
    ARRIVED = 'arrived', 'Arrived'
    DELIVERED = 'delivered', 'Delivered'


# Statuses at which a delivery code may exist on the package
CODE_BEARING_STATUSES = [PackageStatus.ARRIVED, PackageStatus.DELIVERED]


class Package(models.Model):
    """
    A customer package held at the warehouse under the customer's suite number.

    Moves forward through the lifecycle from pre-alert to pickup, is grouped
    into at most one active shipment, and carries the one-time delivery
    authorization code once it has arrived at destination.
    """

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)

    # Identification
    package_id = models.CharField(
        max_length=20,
        unique=True,
        help_text="Human-readable package identifier (PKG + YY + sequence)"
    )
    tracking_number = models.CharField(
        max_length=20,
        unique=True,
        help_text="Warehouse tracking number (VC + YY + sequence)"
    )

    # Ownership
    customer = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.PROTECT,
        related_name='packages',
        help_text="Customer who owns the package"
    )

    status = models.CharField(
        max_length=20,
        choices=PackageStatus.choices,
        default=PackageStatus.PENDING,
        help_text="Current package status"
    )

    # Descriptive attributes
    description = models.TextField(blank=True)
    weight = models.DecimalField(
        max_digits=8,
        decimal_places=2,
        null=True,
        blank=True,
        help_text="Weight in kg"
    )
    declared_value = models.DecimalField(
        max_digits=10,
        decimal_places=2,
        null=True,
        blank=True,
        help_text="Declared customs value"
    )
    store_name = models.CharField(max_length=200, blank=True)
    vendor_name = models.CharField(max_length=200, blank=True)
    notes = models.TextField(blank=True)

    scanned_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='scanned_packages',
        help_text="Staff member who took the package in"
    )

    # Consolidation
    linked_to_shipment = models.ForeignKey(
        'Shipment',
        on_delete=models.PROTECT,
        null=True,
        blank=True,
        related_name='packages',
        help_text="Active shipment this package is consolidated into"
    )

    # Delivery authorization
    delivery_auth_code = models.CharField(max_length=6, null=True, blank=True)
    auth_code_generated_at = models.DateTimeField(null=True, blank=True)
    auth_code_used_at = models.DateTimeField(null=True, blank=True)
    auth_code_used_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='released_packages',
        help_text="Staff member who released the package"
    )

    # Timestamps
    received_at = models.DateTimeField(null=True, blank=True)
    created_at = models.DateTimeField(default=timezone.now)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ['-created_at']
        indexes = [
            models.Index(fields=['customer', 'status'], name='package_customer_status_idx'),
            models.Index(fields=['linked_to_shipment', 'status'], name='package_shipment_status_idx'),
            models.Index(fields=['received_at'], name='package_received_at_idx'),
        ]
        constraints = [
            models.UniqueConstraint(
                fields=['delivery_auth_code'],
                condition=Q(auth_code_used_at__isnull=True, delivery_auth_code__isnull=False),
                name='unique_unused_delivery_auth_code',
            ),
            models.CheckConstraint(
                condition=Q(auth_code_used_at__isnull=True) | Q(status=PackageStatus.DELIVERED),
                name='auth_code_used_only_when_delivered',
            ),
            models.CheckConstraint(
                condition=Q(delivery_auth_code__isnull=True) | Q(status__in=CODE_BEARING_STATUSES),
                name='auth_code_only_after_arrival',
            ),
        ]

    def __str__(self):
        return f"Package {self.package_id} ({self.status})"

    @property
    def suite_number(self):
        return self.customer.suite_number

    @property
    def has_outstanding_code(self):
        """Check if an unused delivery code is waiting for pickup."""
        return bool(self.delivery_auth_code) and self.auth_code_used_at is None

    @property
    def is_delivered(self):
        return self.status == PackageStatus.DELIVERED

    @property
    def is_consolidated(self):
        return self.linked_to_shipment_id is not None
