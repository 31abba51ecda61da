"""
Notification Service for package forwarding.

Only appends notification records; the external sender picks them up.
"""

import logging
from django.core.exceptions import ValidationError

from ..conf import forwarding_setting
from ..exceptions import NotFoundException
from ..models import Notification, NotificationKind, Package, Shipment

logger = logging.getLogger(__name__)


class NotificationService:
    """Service class for notification records."""

    @staticmethod
    def emit_package_delivered(package: Package) -> Notification:
        """Record a delivery-completed notification for the package owner."""
        company = forwarding_setting('COMPANY_NAME')
        notification = Notification.objects.create(
            recipient=package.customer,
            kind=NotificationKind.PACKAGE_DELIVERED,
            package=package,
            title="Package Delivered",
            message=(
                f"Your package {package.package_id} has been successfully delivered! "
                f"Thank you for choosing {company}."
            ),
            action_url=f"/packages/{package.tracking_number}",
        )
        logger.info(f"Delivery notification queued for {package.customer} (package {package.package_id})")
        return notification

    @staticmethod
    def emit_package_arrived(package: Package) -> Notification:
        """Tell the owner their package is ready for pickup."""
        return Notification.objects.create(
            recipient=package.customer,
            kind=NotificationKind.PACKAGE_ARRIVED,
            package=package,
            shipment=package.linked_to_shipment,
            title="Package Ready for Pickup",
            message=(
                f"Your package {package.package_id} has arrived and is ready for pickup. "
                f"Bring your suite number and delivery code."
            ),
            action_url=f"/packages/{package.tracking_number}",
        )

    @staticmethod
    def emit_shipment_created(shipment: Shipment) -> Notification:
        return Notification.objects.create(
            recipient=shipment.customer,
            kind=NotificationKind.SHIPMENT_CREATED,
            shipment=shipment,
            title="Shipment Created",
            message=(
                f"Your packages have been consolidated into shipment {shipment.tracking_number} "
                f"({shipment.total_packages} packages)."
            ),
            action_url=f"/shipments/{shipment.tracking_number}",
        )

    @staticmethod
    def mark_as_read(notification_id: str, user) -> Notification:
        try:
            notification = Notification.objects.get(id=notification_id, recipient=user)
        except (Notification.DoesNotExist, ValidationError):
            raise NotFoundException("Notification", notification_id)
        notification.mark_as_read()
        return notification
