"""
Shared builders for package forwarding tests.
"""

from decimal import Decimal
from unittest import mock
from django.contrib.auth import get_user_model

from ..models import PackageStatus
from ..services import PackageService


def make_customer(username, suite_number, **extra):
    return get_user_model().objects.create_user(
        username=username,
        email=f'{username}@example.com',
        password='testpass123',
        role='customer',
        suite_number=suite_number,
        **extra
    )


def make_staff(username='clerk', role='warehouse_admin'):
    return get_user_model().objects.create_user(
        username=username,
        email=f'{username}@example.com',
        password='testpass123',
        role=role,
    )


def intake(customer, staff, weight='2.50', value='40.00', description='Books'):
    return PackageService.intake_package(customer.suite_number, {
        'description': description,
        'weight': Decimal(weight),
        'declared_value': Decimal(value),
    }, staff)


def advance_to_arrived(package, staff, code=None):
    """Walk a received package through the lifecycle up to arrived."""
    PackageService.update_package_status(package.id, PackageStatus.PROCESSING, staff)
    PackageService.update_package_status(package.id, PackageStatus.SHIPPED, staff)
    if code is None:
        PackageService.update_package_status(package.id, PackageStatus.ARRIVED, staff)
    else:
        with mock.patch('parcels.services.package_service.generate_delivery_code', return_value=code):
            PackageService.update_package_status(package.id, PackageStatus.ARRIVED, staff)
    package.refresh_from_db()
    return package
