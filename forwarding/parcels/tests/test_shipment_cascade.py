"""
Tests for shipment status progression and its cascade to packages.
"""

from django.test import TestCase

from ..exceptions import BusinessException, InvalidTransitionException
from ..models import AuditLog, Notification, NotificationKind, Package, PackageStatus, ShipmentStatus
from ..services import DeliveryService, ShipmentService
from .factories import make_customer, make_staff, intake


class ShipmentCascadeTest(TestCase):
    """Test shipment transitions."""

    def setUp(self):
        self.customer = make_customer('alice', 'VC-001')
        self.staff = make_staff()
        self.packages = [intake(self.customer, self.staff) for _ in range(2)]
        self.shipment = ShipmentService.create_shipment(
            [p.id for p in self.packages], {'delivery_country': 'Ghana'}, self.staff
        )

    def advance(self, *statuses):
        for new_status in statuses:
            ShipmentService.update_shipment_status(self.shipment.tracking_number, new_status, self.staff)
        self.shipment.refresh_from_db()

    def member_statuses(self):
        return sorted(Package.objects.filter(linked_to_shipment=self.shipment).values_list('status', flat=True))

    def test_shipped_cascades_to_packages(self):
        self.advance(ShipmentStatus.PROCESSING, ShipmentStatus.SHIPPED)

        self.assertEqual(self.shipment.status, ShipmentStatus.SHIPPED)
        self.assertEqual(self.member_statuses(), [PackageStatus.SHIPPED] * 2)

    def test_in_transit_leaves_packages_shipped(self):
        self.advance(ShipmentStatus.PROCESSING, ShipmentStatus.SHIPPED, ShipmentStatus.IN_TRANSIT)
        self.assertEqual(self.member_statuses(), [PackageStatus.SHIPPED] * 2)

    def test_arrival_issues_codes(self):
        self.advance(
            ShipmentStatus.PROCESSING, ShipmentStatus.SHIPPED,
            ShipmentStatus.IN_TRANSIT, ShipmentStatus.ARRIVED
        )

        packages = Package.objects.filter(linked_to_shipment=self.shipment)
        codes = {p.delivery_auth_code for p in packages}
        self.assertEqual(len(codes), 2)
        self.assertNotIn(None, codes)
        self.assertEqual(self.member_statuses(), [PackageStatus.ARRIVED] * 2)
        self.assertEqual(
            Notification.objects.filter(kind=NotificationKind.PACKAGE_ARRIVED).count(), 2
        )
        self.assertEqual(
            AuditLog.status_history(self.shipment),
            ['pending', 'processing', 'shipped', 'in_transit', 'arrived']
        )

    def test_cannot_skip_statuses(self):
        with self.assertRaises(InvalidTransitionException):
            self.advance(ShipmentStatus.SHIPPED)

    def test_delivered_is_derived(self):
        with self.assertRaises(BusinessException) as ctx:
            self.advance(ShipmentStatus.DELIVERED)
        self.assertEqual(ctx.exception.code, 'DELIVERY_IS_DERIVED')

    def test_reconcile_with_undelivered_packages(self):
        self.assertFalse(ShipmentService.reconcile_completion(self.shipment.id))
        self.shipment.refresh_from_db()
        self.assertEqual(self.shipment.status, ShipmentStatus.PENDING)

    def test_issue_missing_codes(self):
        self.advance(
            ShipmentStatus.PROCESSING, ShipmentStatus.SHIPPED,
            ShipmentStatus.IN_TRANSIT, ShipmentStatus.ARRIVED
        )
        first = self.packages[0]
        Package.objects.filter(pk=first.pk).update(delivery_auth_code=None, auth_code_generated_at=None)

        self.assertEqual(DeliveryService.issue_codes_for_shipment(self.shipment.tracking_number), 1)
        first.refresh_from_db()
        self.assertIsNotNone(first.delivery_auth_code)

    def test_shipment_details(self):
        details = ShipmentService.get_shipment_details(self.shipment.tracking_number)

        self.assertEqual(details['sender_name'], 'VanguardCargo')
        self.assertEqual(details['suite_number'], 'VC-001')
        self.assertEqual(
            sorted(p['package_id'] for p in details['packages']),
            sorted(p.package_id for p in self.packages)
        )
