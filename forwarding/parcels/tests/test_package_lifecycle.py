"""
Tests for package intake, lifecycle transitions and delivery codes.
"""

from unittest import mock
from django.test import TestCase

from ..exceptions import (
    BusinessException, InvalidTransitionException, NotFoundException, ValidationException
)
from ..models import AuditLog, Notification, NotificationKind, PackageStatus
from ..services import PackageService
from ..services.package_service import generate_delivery_code
from .factories import make_customer, make_staff, intake, advance_to_arrived


class PackageIntakeTest(TestCase):
    """Test taking packages in at the warehouse."""

    def setUp(self):
        self.customer = make_customer('alice', 'VC-001', first_name='Alice', last_name='Mensah')
        self.staff = make_staff()

    def test_intake_by_suite_number(self):
        package = PackageService.intake_package(' vc-001 ', {'description': 'Shoes'}, self.staff)

        self.assertEqual(package.customer, self.customer)
        self.assertEqual(package.status, PackageStatus.RECEIVED)
        self.assertIsNotNone(package.received_at)
        self.assertEqual(package.scanned_by, self.staff)
        self.assertEqual(AuditLog.status_history(package), ['pending', 'received'])

    def test_intake_unknown_suite(self):
        with self.assertRaises(NotFoundException):
            PackageService.intake_package('VC-999', {}, self.staff)

    def test_intake_inactive_customer(self):
        self.customer.status = 'inactive'
        self.customer.save()

        with self.assertRaises(NotFoundException):
            PackageService.intake_package('VC-001', {}, self.staff)

    def test_intake_requires_suite_number(self):
        with self.assertRaises(ValidationException):
            PackageService.intake_package('  ', {}, self.staff)

    def test_pre_alert_then_mark_received(self):
        package = PackageService.register_incoming(self.customer, {'store_name': 'Amazon'})
        self.assertEqual(package.status, PackageStatus.PENDING)
        self.assertIsNone(package.received_at)

        received = PackageService.mark_received(package.package_id, self.staff)
        self.assertEqual(received.status, PackageStatus.RECEIVED)
        first_received_at = received.received_at

        again = PackageService.mark_received(package.package_id, self.staff)
        self.assertEqual(again.received_at, first_received_at)
        self.assertEqual(AuditLog.status_history(package), ['pending', 'received'])

    def test_received_today_count(self):
        intake(self.customer, self.staff)
        intake(self.customer, self.staff)
        PackageService.register_incoming(self.customer, {})

        self.assertEqual(PackageService.received_today_count(), 2)


class PackageTransitionTest(TestCase):
    """Test lifecycle rules."""

    def setUp(self):
        self.customer = make_customer('alice', 'VC-001')
        self.staff = make_staff()
        self.package = intake(self.customer, self.staff)

    def test_cannot_skip_statuses(self):
        with self.assertRaises(InvalidTransitionException) as ctx:
            PackageService.update_package_status(self.package.id, PackageStatus.SHIPPED, self.staff)
        self.assertEqual(ctx.exception.details['current_status'], PackageStatus.RECEIVED)

    def test_same_status_is_rejected(self):
        with self.assertRaises(InvalidTransitionException):
            PackageService.update_package_status(self.package.id, PackageStatus.RECEIVED, self.staff)

    def test_cannot_move_backward(self):
        PackageService.update_package_status(self.package.id, PackageStatus.PROCESSING, self.staff)

        with self.assertRaises(InvalidTransitionException):
            PackageService.update_package_status(self.package.id, PackageStatus.RECEIVED, self.staff)

    def test_delivered_requires_verification(self):
        with self.assertRaises(BusinessException) as ctx:
            PackageService.update_package_status(self.package.id, PackageStatus.DELIVERED, self.staff)
        self.assertEqual(ctx.exception.code, 'DELIVERY_REQUIRES_VERIFICATION')

    def test_arrival_issues_code_and_notifies(self):
        package = advance_to_arrived(self.package, self.staff)

        self.assertEqual(package.status, PackageStatus.ARRIVED)
        self.assertEqual(len(package.delivery_auth_code), 6)
        self.assertIsNotNone(package.auth_code_generated_at)
        self.assertTrue(Notification.objects.filter(
            recipient=self.customer, package=package, kind=NotificationKind.PACKAGE_ARRIVED
        ).exists())
        self.assertEqual(
            AuditLog.status_history(package),
            ['pending', 'received', 'processing', 'shipped', 'arrived']
        )


class DeliveryCodeTest(TestCase):
    """Test delivery code issuance."""

    def setUp(self):
        self.customer = make_customer('alice', 'VC-001')
        self.staff = make_staff()

    def test_code_range(self):
        for _ in range(200):
            code = generate_delivery_code()
            self.assertEqual(len(code), 6)
            self.assertTrue(100000 <= int(code) <= 999999)

    def test_code_requires_arrival(self):
        package = intake(self.customer, self.staff)

        with self.assertRaises(BusinessException) as ctx:
            PackageService.issue_delivery_code(package.id)
        self.assertEqual(ctx.exception.code, 'PACKAGE_NOT_ARRIVED')

    def test_outstanding_code_is_returned_again(self):
        package = advance_to_arrived(intake(self.customer, self.staff), self.staff, code='482193')

        self.assertEqual(PackageService.issue_delivery_code(package.id), '482193')
        self.assertEqual(AuditLog.objects.filter(entity_id=package.id, action='code_issued').count(), 1)

    def test_collision_with_unused_code_is_retried(self):
        advance_to_arrived(intake(self.customer, self.staff), self.staff, code='111111')
        second = intake(self.customer, self.staff)
        PackageService.update_package_status(second.id, PackageStatus.PROCESSING, self.staff)
        PackageService.update_package_status(second.id, PackageStatus.SHIPPED, self.staff)

        with mock.patch(
            'parcels.services.package_service.generate_delivery_code',
            side_effect=['111111', '222222']
        ):
            PackageService.update_package_status(second.id, PackageStatus.ARRIVED, self.staff)

        second.refresh_from_db()
        self.assertEqual(second.delivery_auth_code, '222222')


class StatusCorrectionTest(TestCase):
    """Test administrative status corrections."""

    def setUp(self):
        self.customer = make_customer('alice', 'VC-001')
        self.staff = make_staff()
        self.admin = make_staff('boss', role='admin')
        self.package = advance_to_arrived(intake(self.customer, self.staff), self.staff)

    def test_correction_before_arrival_drops_code(self):
        package = PackageService.correct_status(
            self.package.id, PackageStatus.RECEIVED, self.admin, 'Scanned by mistake'
        )

        self.assertEqual(package.status, PackageStatus.RECEIVED)
        self.assertIsNone(package.delivery_auth_code)
        self.assertIsNotNone(package.received_at)
        entry = AuditLog.objects.get(entity_id=package.id, action='status_corrected')
        self.assertEqual(entry.notes, 'Scanned by mistake')
        self.assertEqual(entry.user, self.admin)

    def test_correction_to_pending_clears_received_at(self):
        package = PackageService.correct_status(self.package.id, PackageStatus.PENDING, self.admin, 'Wrong suite')
        self.assertIsNone(package.received_at)

    def test_correction_requires_reason(self):
        with self.assertRaises(ValidationException):
            PackageService.correct_status(self.package.id, PackageStatus.RECEIVED, self.admin, ' ')

    def test_correction_must_move_backward(self):
        with self.assertRaises(ValidationException):
            PackageService.correct_status(self.package.id, PackageStatus.ARRIVED, self.admin, 'Same status')
