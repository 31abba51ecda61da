"""
Tests for identifier generation and customer registration.
"""

from unittest import mock
from django.db import IntegrityError
from django.test import TestCase, override_settings
from django.utils import timezone

from users.services import register_customer
from ..exceptions import AlreadyExistsException, ExhaustedSequenceException, StorageException
from ..models import PackageStatus, Shipment
from ..services import IdentifierGenerator, create_with_identifiers
from .factories import make_customer, make_staff, intake


class IdentifierGeneratorTest(TestCase):
    """Test identifier formats and sequencing."""

    def setUp(self):
        self.yy = timezone.now().strftime('%y')

    def test_first_suite_number(self):
        self.assertEqual(IdentifierGenerator.next_suite_number(), 'VC-001')

    def test_suite_number_follows_highest(self):
        make_customer('alice', 'VC-006')
        make_customer('bob', 'VC-002')
        self.assertEqual(IdentifierGenerator.next_suite_number(), 'VC-007')

    def test_suite_number_after_rejected_candidate(self):
        make_customer('alice', 'VC-001')
        self.assertEqual(IdentifierGenerator.next_suite_number(after='VC-010'), 'VC-011')

    def test_package_identifiers_use_year_prefix(self):
        customer = make_customer('alice', 'VC-001')
        package = intake(customer, make_staff())

        self.assertEqual(package.package_id, f'PKG{self.yy}0001')
        self.assertEqual(package.tracking_number, f'VC{self.yy}0001')

    def test_tracking_numbers_shared_with_shipments(self):
        customer = make_customer('alice', 'VC-001')
        Shipment.objects.create(
            tracking_number=f'VC{self.yy}0005',
            customer=customer,
            recipient_name='Alice',
            delivery_country='Ghana',
        )
        self.assertEqual(IdentifierGenerator.next_tracking_number(), f'VC{self.yy}0006')

    @override_settings(FORWARDING={'SEQUENCE_CEILING': 2})
    def test_sequence_ceiling(self):
        make_customer('alice', 'VC-001')
        make_customer('bob', 'VC-002')

        with self.assertRaises(ExhaustedSequenceException) as ctx:
            IdentifierGenerator.next_suite_number()
        self.assertEqual(ctx.exception.code, 'EXHAUSTED_SEQUENCE')
        self.assertEqual(ctx.exception.details['ceiling'], 2)


class CreateWithIdentifiersTest(TestCase):
    """Test retries of inserts rejected by unique constraints."""

    def test_retries_with_later_candidate(self):
        seen = []

        def build(rejected):
            seen.append(rejected)
            return {'value': 'B' if rejected else 'A'}

        def create(identifiers):
            if identifiers['value'] == 'A':
                raise IntegrityError('duplicate key')
            return identifiers

        result = create_with_identifiers(build, create, label='record')

        self.assertEqual(result, {'value': 'B'})
        self.assertEqual(seen, [None, {'value': 'A'}])

    @override_settings(FORWARDING={'IDENTIFIER_MAX_ATTEMPTS': 3})
    def test_gives_up_after_max_attempts(self):
        create = mock.Mock(side_effect=IntegrityError('duplicate key'))

        with self.assertRaises(StorageException) as ctx:
            create_with_identifiers(lambda rejected: {'value': 'A'}, create, label='record')

        self.assertEqual(create.call_count, 3)
        self.assertIsInstance(ctx.exception.original, IntegrityError)


class RegisterCustomerTest(TestCase):
    """Test customer registration."""

    def test_sequential_suite_numbers(self):
        first = register_customer('alice', 'alice@example.com', 'testpass123')
        second = register_customer('bob', 'bob@example.com', 'testpass123', first_name='Bob')

        self.assertEqual(first.suite_number, 'VC-001')
        self.assertEqual(second.suite_number, 'VC-002')
        self.assertEqual(second.role, 'customer')
        self.assertEqual(second.full_name, 'Bob')

    def test_duplicate_username(self):
        register_customer('alice', 'alice@example.com', 'testpass123')

        with self.assertRaises(AlreadyExistsException):
            register_customer('alice', 'other@example.com', 'testpass123')


class IntakeIdentifierCollisionTest(TestCase):
    """Test intake when the generated package ID is already taken."""

    def setUp(self):
        self.customer = make_customer('alice', 'VC-001')
        self.staff = make_staff()
        self.yy = timezone.now().strftime('%y')

    def test_intake_retries_with_next_package_id(self):
        existing = intake(self.customer, self.staff)
        generate = IdentifierGenerator.next_package_id
        stale = [existing.package_id]

        def next_package_id(after=None):
            return stale.pop() if stale else generate(after=after)

        with mock.patch.object(IdentifierGenerator, 'next_package_id', side_effect=next_package_id) as patched:
            package = intake(self.customer, self.staff)

        self.assertEqual(patched.call_count, 2)
        self.assertEqual(patched.call_args_list[1], mock.call(after=existing.package_id))
        self.assertEqual(package.package_id, f'PKG{self.yy}0002')
        self.assertEqual(package.status, PackageStatus.RECEIVED)
