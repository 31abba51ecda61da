"""
Shipment Service for package forwarding.

Handles consolidated shipment creation, status progression and the
completion cascade from packages to their shipment.
"""

import logging
from decimal import Decimal
from typing import Dict, Any, List
from django.db import transaction
from django.utils import timezone

from ..conf import forwarding_setting
from ..models import Package, PackageStatus, Shipment, ShipmentStatus, AuditLog
from ..exceptions import AlreadyLinkedException, BusinessException, ValidationException
from .consolidation_service import ConsolidationService
from .identifiers import IdentifierGenerator, create_with_identifiers
from .lookups import get_package, get_shipment
from .notification_service import NotificationService
from .package_service import PackageService
from .workflow import ShipmentWorkflow, validate_shipment_workflow

logger = logging.getLogger(__name__)

CONSOLIDATABLE_STATUSES = [PackageStatus.RECEIVED, PackageStatus.PROCESSING]


class ShipmentService:
    """Service class for shipment operations."""

    @staticmethod
    def create_shipment(package_refs: List[Any], shipment_data: Dict[str, Any], created_by) -> Shipment:
        """
        Consolidate packages of one customer into a new shipment.

        Args:
            package_refs: Packages to consolidate (UUIDs, package IDs or tracking numbers)
            shipment_data: Recipient and service details
            created_by: Staff member creating the shipment

        Returns:
            Created Shipment instance

        Raises:
            ValidationException: If the package set or shipment data is invalid
            AlreadyLinkedException: If a package already belongs to a shipment
        """
        if not package_refs:
            raise ValidationException("A shipment must contain at least one package")
        if not shipment_data.get('delivery_country'):
            raise ValidationException("Delivery country is required", {'delivery_country': 'required'})

        with transaction.atomic():
            resolved = [get_package(ref) for ref in package_refs]
            package_pks = {package.pk for package in resolved}
            if len(package_pks) != len(resolved):
                raise ValidationException("The same package was listed more than once")

            # Rows are locked in primary key order
            packages = list(
                Package.objects.select_for_update().filter(pk__in=package_pks).order_by('pk')
            )

            owners = {package.customer_id for package in packages}
            if len(owners) > 1:
                raise ValidationException(
                    "All packages in a shipment must belong to the same customer",
                    {'package_ids': sorted(package.package_id for package in packages)}
                )

            not_ready = [p.package_id for p in packages if p.status not in CONSOLIDATABLE_STATUSES]
            if not_ready:
                raise ValidationException(
                    "Some packages are not ready for shipment (must be received or processing)",
                    {'package_ids': sorted(not_ready)}
                )

            for package in packages:
                if package.linked_to_shipment_id is not None:
                    raise AlreadyLinkedException(package.package_id, package.linked_to_shipment.tracking_number)

            customer = packages[0].customer
            total_weight = sum((p.weight or Decimal('0.00') for p in packages), Decimal('0.00'))
            total_value = sum((p.declared_value or Decimal('0.00') for p in packages), Decimal('0.00'))

            def build(rejected):
                rejected = rejected or {}
                return {
                    'tracking_number': IdentifierGenerator.next_tracking_number(after=rejected.get('tracking_number'))
                }

            def create(identifiers):
                return Shipment.objects.create(
                    customer=customer,
                    status=ShipmentStatus.PENDING,
                    service_type=shipment_data.get('service_type', 'standard'),
                    recipient_name=shipment_data.get('recipient_name') or customer.full_name,
                    recipient_phone=shipment_data.get('recipient_phone', ''),
                    delivery_address=shipment_data.get('delivery_address', ''),
                    delivery_city=shipment_data.get('delivery_city', ''),
                    delivery_country=shipment_data['delivery_country'],
                    estimated_delivery=shipment_data.get('estimated_delivery'),
                    notes=shipment_data.get('notes', ''),
                    total_weight=total_weight,
                    total_value=total_value,
                    total_packages=len(packages),
                    created_by=created_by,
                    **identifiers,
                )

            shipment = create_with_identifiers(build, create, label='shipment')

            AuditLog.log_change(
                entity=shipment,
                action='created',
                user=created_by,
                new_values={'status': ShipmentStatus.PENDING, 'tracking_number': shipment.tracking_number},
                notes=f"Shipment created with {len(packages)} packages"
            )

            for package in packages:
                ConsolidationService.link(package, shipment, created_by)
                if package.status == PackageStatus.RECEIVED:
                    PackageService.apply_status(
                        package, PackageStatus.PROCESSING, created_by,
                        notes=f"Consolidated into shipment {shipment.tracking_number}"
                    )

            NotificationService.emit_shipment_created(shipment)

        logger.info(f"Shipment {shipment.tracking_number} created for {customer} with {len(packages)} packages")
        return shipment

    @staticmethod
    def update_shipment_status(shipment_ref, new_status: str, updated_by=None) -> Shipment:
        """
        Advance a shipment to the next status and cascade it to its packages.

        Shipped moves processing packages to shipped; arrived moves shipped
        packages to arrived and issues their delivery codes. Delivered is
        derived from package pickups and cannot be set directly.

        Raises:
            InvalidTransitionException: If new_status is not the immediate successor
            BusinessException: If new_status is delivered
        """
        if new_status == ShipmentStatus.DELIVERED:
            raise BusinessException(
                "Shipments are delivered once every package has been picked up",
                "DELIVERY_IS_DERIVED"
            )

        with transaction.atomic():
            shipment = get_shipment(shipment_ref, for_update=True)
            validate_shipment_workflow(shipment, new_status)

            old_status = shipment.status
            shipment.status = new_status
            shipment.save()

            AuditLog.log_status_change(
                entity=shipment,
                old_status=old_status,
                new_status=new_status,
                user=updated_by,
            )

            cascaded = 0
            cascade = ShipmentWorkflow.MEMBER_CASCADE.get(new_status)
            if cascade:
                from_status, to_status = cascade
                members = Package.objects.select_for_update().filter(
                    linked_to_shipment=shipment,
                    status=from_status,
                ).order_by('pk')

                notes = f"Shipment {shipment.tracking_number} {new_status}"
                for package in members:
                    if to_status == PackageStatus.ARRIVED:
                        PackageService.arrive(package, updated_by, notes=notes)
                    else:
                        PackageService.apply_status(package, to_status, updated_by, notes=notes)
                    cascaded += 1

        logger.info(
            f"Shipment {shipment.tracking_number} status updated to {new_status} "
            f"({cascaded} packages cascaded)"
        )
        return shipment

    @staticmethod
    def reconcile_completion(shipment_ref) -> bool:
        """
        Mark the shipment delivered once every linked package is delivered.

        Idempotent; the shipment row lock serializes concurrent pickups of
        sibling packages so the last one observes the complete set.

        Returns:
            True if the shipment transitioned to delivered
        """
        with transaction.atomic():
            shipment = get_shipment(shipment_ref, for_update=True)

            if shipment.status == ShipmentStatus.DELIVERED:
                return False

            statuses = list(
                Package.objects.filter(linked_to_shipment=shipment).values_list('status', flat=True)
            )
            delivered = sum(1 for status in statuses if status == PackageStatus.DELIVERED)

            if not statuses or delivered < len(statuses):
                logger.info(
                    f"Shipment {shipment.tracking_number} partially delivered ({delivered}/{len(statuses)})"
                )
                return False

            old_status = shipment.status
            shipment.status = ShipmentStatus.DELIVERED
            shipment.delivered_at = timezone.now()
            shipment.save()

            AuditLog.log_status_change(
                entity=shipment,
                old_status=old_status,
                new_status=ShipmentStatus.DELIVERED,
                notes=f"All {len(statuses)} packages delivered"
            )

        logger.info(f"Shipment {shipment.tracking_number} marked delivered ({delivered}/{len(statuses)})")
        return True

    @staticmethod
    def get_shipment_details(shipment_ref) -> Dict[str, Any]:
        """
        Consolidated shipment view with its packages, used for the waybill.

        Args:
            shipment_ref: Shipment UUID or tracking number

        Returns:
            Shipment details
        """
        shipment = get_shipment(shipment_ref)
        packages = ConsolidationService.get_linked_packages(shipment)

        details = {
            'shipment_id': str(shipment.id),
            'tracking_number': shipment.tracking_number,
            'status': shipment.status,
            'service_type': shipment.service_type,
            'customer_name': shipment.customer.full_name,
            'suite_number': shipment.customer.suite_number,
            'recipient_name': shipment.recipient_name,
            'recipient_phone': shipment.recipient_phone,
            'delivery_address': shipment.delivery_address,
            'delivery_city': shipment.delivery_city,
            'delivery_country': shipment.delivery_country,
            'total_weight': shipment.total_weight,
            'total_value': shipment.total_value,
            'total_packages': shipment.total_packages,
            'estimated_delivery': shipment.estimated_delivery,
            'sender_name': forwarding_setting('COMPANY_NAME'),
            'created_at': shipment.created_at,
            'delivered_at': shipment.delivered_at,
            'packages': []
        }

        for package in packages:
            details['packages'].append({
                'package_id': package.package_id,
                'tracking_number': package.tracking_number,
                'description': package.description,
                'weight': package.weight,
                'declared_value': package.declared_value,
                'status': package.status,
                'store_name': package.store_name,
                'vendor_name': package.vendor_name,
            })

        return details
