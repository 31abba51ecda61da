"""
Consolidation Service for package forwarding.

Maintains the package to shipment grouping: a package belongs to at most one
active shipment, and every link leaves a historical row behind.
"""

import logging
from django.db import IntegrityError, transaction

from ..models import Package, Shipment, PackageShipment, AuditLog
from ..exceptions import AlreadyExistsException, AlreadyLinkedException

logger = logging.getLogger(__name__)


class ConsolidationService:
    """Service class for package consolidation links."""

    @staticmethod
    def link(package: Package, shipment: Shipment, linked_by=None) -> None:
        """
        Link a package to a shipment.

        Linking a package to the shipment it already belongs to is a no-op.

        Raises:
            AlreadyLinkedException: If the package belongs to another shipment
            AlreadyExistsException: If a link row for the pair already exists
        """
        with transaction.atomic():
            current = Package.objects.select_for_update().get(pk=package.pk)

            if current.linked_to_shipment_id == shipment.id:
                return
            if current.linked_to_shipment_id is not None:
                raise AlreadyLinkedException(current.package_id, current.linked_to_shipment.tracking_number)

            try:
                with transaction.atomic():
                    PackageShipment.objects.create(
                        package=current,
                        shipment=shipment,
                        linked_by=linked_by,
                    )
            except IntegrityError:
                raise AlreadyExistsException(
                    f"Package {current.package_id} was already linked to shipment {shipment.tracking_number}",
                    {'package_id': current.package_id, 'shipment_tracking_number': shipment.tracking_number}
                )

            Package.objects.filter(pk=current.pk).update(linked_to_shipment=shipment)
            package.linked_to_shipment = shipment

            AuditLog.log_change(
                entity=package,
                action='linked',
                user=linked_by,
                new_values={'shipment': shipment.tracking_number},
                notes=f"Consolidated into shipment {shipment.tracking_number}"
            )

        logger.info(f"Package {package.package_id} linked to shipment {shipment.tracking_number}")

    @staticmethod
    def get_linked_packages(shipment: Shipment):
        """Packages currently consolidated into the shipment, by package ID."""
        return Package.objects.filter(
            linked_to_shipment=shipment
        ).select_related('customer').order_by('package_id')
