"""
Shipment models for consolidated forwarding.
"""

import uuid
from datetime import timedelta
from decimal import Decimal
from django.db import models
from django.conf import settings
from django.utils import timezone

from ..conf import forwarding_setting


class ShipmentStatus(models.TextChoices):
    """Shipment status enumeration following the delivery lifecycle."""
    PENDING = 'pending', 'Pending'
    PROCESSING = 'processing', 'Processing'
    SHIPPED = 'shipped', 'Shipped'
    IN_TRANSIT = 'in_transit', 'In Transit'
    ARRIVED = 'arrived', 'Arrived'
    DELIVERED = 'delivered', 'Delivered'


class ServiceType(models.TextChoices):
    STANDARD = 'standard', 'Standard'
    EXPRESS = 'express', 'Express'


class Shipment(models.Model):
    """
    Shipment consolidating one or more packages of a single customer.

    Travels to the destination country as one unit and aggregates weight and
    value of its member packages.
    """

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)

    tracking_number = models.CharField(
        max_length=20,
        unique=True,
        help_text="Shipment tracking number (shares the package tracking namespace)"
    )

    customer = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.PROTECT,
        related_name='shipments',
        help_text="Customer who owns every package in the shipment"
    )

    status = models.CharField(
        max_length=20,
        choices=ShipmentStatus.choices,
        default=ShipmentStatus.PENDING,
        help_text="Current shipment status"
    )
    service_type = models.CharField(
        max_length=20,
        choices=ServiceType.choices,
        default=ServiceType.STANDARD
    )

    # Recipient details
    recipient_name = models.CharField(max_length=200)
    recipient_phone = models.CharField(max_length=30, blank=True)
    delivery_address = models.TextField(blank=True)
    delivery_city = models.CharField(max_length=100, blank=True)
    delivery_country = models.CharField(max_length=100)

    # Aggregates (computed from member packages at consolidation)
    total_weight = models.DecimalField(
        max_digits=10,
        decimal_places=2,
        default=Decimal('0.00'),
        help_text="Total shipment weight in kg"
    )
    total_value = models.DecimalField(
        max_digits=12,
        decimal_places=2,
        default=Decimal('0.00'),
        help_text="Total declared value"
    )
    total_packages = models.PositiveIntegerField(default=0)

    estimated_delivery = models.DateField(null=True, blank=True)

    created_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='created_shipments',
        help_text="Staff member who consolidated the shipment"
    )

    notes = models.TextField(blank=True)

    # Timestamps
    delivered_at = models.DateTimeField(null=True, blank=True)
    created_at = models.DateTimeField(default=timezone.now)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ['-created_at']
        indexes = [
            models.Index(fields=['status', 'estimated_delivery'], name='shipment_status_eta_idx'),
            models.Index(fields=['customer', 'status'], name='shipment_customer_status_idx'),
        ]

    def __str__(self):
        return f"Shipment {self.tracking_number} ({self.status})"

    def save(self, *args, **kwargs):
        """Default the estimated delivery date when none was given."""
        if self.estimated_delivery is None:
            days = forwarding_setting('ESTIMATED_DELIVERY_DAYS')
            self.estimated_delivery = (self.created_at + timedelta(days=days)).date()
        super().save(*args, **kwargs)

    @property
    def is_delivered(self):
        """Check if shipment has been delivered."""
        return self.status == ShipmentStatus.DELIVERED

    @property
    def is_in_transit(self):
        return self.status in [ShipmentStatus.SHIPPED, ShipmentStatus.IN_TRANSIT]


class PackageShipment(models.Model):
    """
    Historical link between a package and the shipment it was consolidated into.

    Rows are written once at consolidation and never changed.
    """

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    package = models.ForeignKey(
        'Package',
        on_delete=models.PROTECT,
        related_name='shipment_links',
    )
    shipment = models.ForeignKey(
        Shipment,
        on_delete=models.PROTECT,
        related_name='package_links',
    )
    linked_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='+',
    )
    created_at = models.DateTimeField(default=timezone.now)

    class Meta:
        ordering = ['shipment', 'created_at']
        constraints = [
            models.UniqueConstraint(fields=['package', 'shipment'], name='unique_package_shipment_link'),
        ]

    def __str__(self):
        return f"Package {self.package.package_id} in Shipment {self.shipment.tracking_number}"
