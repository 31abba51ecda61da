"""
Package Service for package forwarding.

Handles package intake, lifecycle transitions and delivery code issuance.
"""

import logging
import secrets
from typing import Dict, Any, Optional
from django.contrib.auth import get_user_model
from django.db import IntegrityError, transaction
from django.utils import timezone

from ..conf import forwarding_setting
from ..models import Package, PackageStatus, AuditLog
from ..exceptions import (
    BusinessException, NotFoundException, StorageException, ValidationException
)
from .identifiers import IdentifierGenerator, create_with_identifiers
from .lookups import get_package
from .notification_service import NotificationService
from .workflow import PackageWorkflow, validate_package_workflow

logger = logging.getLogger(__name__)


def generate_delivery_code() -> str:
    """Uniform random 6-digit code in the 100000-999999 range."""
    return str(100000 + secrets.randbelow(900000))


def _package_identifiers(rejected: Optional[Dict[str, str]]) -> Dict[str, str]:
    rejected = rejected or {}
    return {
        'package_id': IdentifierGenerator.next_package_id(after=rejected.get('package_id')),
        'tracking_number': IdentifierGenerator.next_tracking_number(after=rejected.get('tracking_number')),
    }


class PackageService:
    """Service class for package operations."""

    @staticmethod
    def _create_package(customer, package_data: Dict[str, Any], created_by=None) -> Package:
        def create(identifiers):
            return Package.objects.create(
                customer=customer,
                status=PackageStatus.PENDING,
                description=package_data.get('description', ''),
                weight=package_data.get('weight'),
                declared_value=package_data.get('declared_value'),
                store_name=package_data.get('store_name', ''),
                vendor_name=package_data.get('vendor_name', ''),
                notes=package_data.get('notes', ''),
                **identifiers,
            )

        package = create_with_identifiers(_package_identifiers, create, label='package')

        AuditLog.log_change(
            entity=package,
            action='created',
            user=created_by,
            new_values={
                'status': PackageStatus.PENDING,
                'package_id': package.package_id,
                'tracking_number': package.tracking_number,
            },
            notes=f"Package created for {customer}"
        )
        return package

    @staticmethod
    def apply_status(package: Package, new_status: str, user=None, notes: str = "") -> Package:
        """
        Write a validated status change to a locked package and audit it.

        Callers validate the transition and hold the row lock.
        """
        old_status = package.status
        package.status = new_status
        if new_status == PackageStatus.RECEIVED and package.received_at is None:
            package.received_at = timezone.now()
        package.save()

        AuditLog.log_status_change(
            entity=package,
            old_status=old_status,
            new_status=new_status,
            user=user,
            notes=notes
        )
        return package

    @staticmethod
    def register_incoming(customer, package_data: Dict[str, Any], created_by=None) -> Package:
        """
        Register a package the customer expects at the warehouse (pre-alert).

        Args:
            customer: Customer user instance
            package_data: Descriptive attributes (description, weight, ...)
            created_by: User creating the record

        Returns:
            Created Package in pending status
        """
        with transaction.atomic():
            package = PackageService._create_package(customer, package_data, created_by or customer)

        logger.info(f"Incoming package {package.package_id} registered for {customer}")
        return package

    @staticmethod
    def intake_package(suite_number: str, package_data: Dict[str, Any], scanned_by) -> Package:
        """
        Take a package in at the warehouse under a customer's suite number.

        Args:
            suite_number: Suite number on the label (case-insensitive)
            package_data: Descriptive attributes
            scanned_by: Warehouse staff member performing the intake

        Returns:
            Created Package in received status

        Raises:
            NotFoundException: If no active customer has the suite number
        """
        User = get_user_model()
        normalized = (suite_number or '').strip()
        if not normalized:
            raise ValidationException("Suite number is required", {'suite_number': 'required'})

        customer = User.objects.filter(
            suite_number__iexact=normalized,
            status='active',
        ).first()
        if customer is None:
            raise NotFoundException("Customer", normalized)

        with transaction.atomic():
            package = PackageService._create_package(customer, package_data, scanned_by)
            package.scanned_by = scanned_by
            PackageService.apply_status(
                package, PackageStatus.RECEIVED, scanned_by,
                notes=f"Received at warehouse under suite {customer.suite_number}"
            )

        logger.info(f"Package {package.package_id} taken in for suite {customer.suite_number}")
        return package

    @staticmethod
    def mark_received(package_ref, received_by=None) -> Package:
        """
        Mark a pending package as received at the warehouse.

        Re-marking a package that is already received is a no-op.

        Raises:
            InvalidTransitionException: If the package is past received
        """
        with transaction.atomic():
            package = get_package(package_ref, for_update=True)

            if package.status == PackageStatus.RECEIVED:
                return package

            validate_package_workflow(package, PackageStatus.RECEIVED)
            PackageService.apply_status(package, PackageStatus.RECEIVED, received_by, notes="Marked received")

        logger.info(f"Package {package.package_id} marked received")
        return package

    @staticmethod
    def update_package_status(package_ref, new_status: str, updated_by=None) -> Package:
        """
        Advance a package to the next status of its lifecycle.

        Reaching arrived issues the delivery code. Delivered is reserved for
        pickup verification.

        Raises:
            InvalidTransitionException: If new_status is not the immediate successor
            BusinessException: If new_status is delivered
        """
        if new_status == PackageStatus.DELIVERED:
            raise BusinessException(
                "Packages can only be delivered through pickup code verification",
                "DELIVERY_REQUIRES_VERIFICATION"
            )

        with transaction.atomic():
            package = get_package(package_ref, for_update=True)
            validate_package_workflow(package, new_status)

            if new_status == PackageStatus.ARRIVED:
                PackageService.arrive(package, updated_by)
            else:
                PackageService.apply_status(package, new_status, updated_by)

        logger.info(f"Package {package.package_id} status updated to {new_status}")
        return package

    @staticmethod
    def arrive(package: Package, user=None, notes: str = "") -> Package:
        """Move a locked, shipped package to arrived, issue its code and notify the owner."""
        PackageService.apply_status(package, PackageStatus.ARRIVED, user, notes=notes)
        PackageService._issue_code_locked(package)
        NotificationService.emit_package_arrived(package)
        return package

    @staticmethod
    def issue_delivery_code(package_ref) -> str:
        """
        Issue the one-time pickup code for an arrived package.

        Returns the outstanding code if one was already issued and not used.

        Raises:
            BusinessException: If the package has not arrived
            StorageException: If no unique code could be stored
        """
        with transaction.atomic():
            package = get_package(package_ref, for_update=True)
            return PackageService._issue_code_locked(package)

    @staticmethod
    def _issue_code_locked(package: Package) -> str:
        if package.status != PackageStatus.ARRIVED:
            raise BusinessException(
                f"Delivery codes can only be issued for arrived packages (current: {package.status})",
                "PACKAGE_NOT_ARRIVED",
                {'package_id': package.package_id, 'status': package.status}
            )

        if package.has_outstanding_code:
            return package.delivery_auth_code

        max_attempts = forwarding_setting('DELIVERY_CODE_MAX_ATTEMPTS')
        last_error = None
        for attempt in range(1, max_attempts + 1):
            code = generate_delivery_code()
            now = timezone.now()
            try:
                with transaction.atomic():
                    Package.objects.filter(pk=package.pk).update(
                        delivery_auth_code=code,
                        auth_code_generated_at=now,
                        updated_at=now,
                    )
            except IntegrityError as e:
                # Another unused code already has this value
                logger.warning(f"Delivery code collision for package {package.package_id} (attempt {attempt})")
                last_error = e
                continue

            package.delivery_auth_code = code
            package.auth_code_generated_at = now
            AuditLog.log_change(
                entity=package,
                action='code_issued',
                new_values={'auth_code_generated_at': now.isoformat()},
                notes="Delivery authorization code issued"
            )
            logger.info(f"Delivery code issued for package {package.package_id}")
            return code

        raise StorageException(
            f"Could not store a unique delivery code for package {package.package_id}",
            last_error
        )

    @staticmethod
    def correct_status(package_ref, new_status: str, corrected_by, reason: str) -> Package:
        """
        Administrative correction moving a package back to an earlier status.

        Not part of the normal lifecycle. Clears received_at when the package
        returns to pending and drops an unused code when it returns before arrival.

        Raises:
            ValidationException: If the move is not backward or no reason is given
            BusinessException: If the package was already delivered
        """
        if not reason or not reason.strip():
            raise ValidationException("A reason is required for status corrections", {'reason': 'required'})
        if new_status not in PackageWorkflow.LIFECYCLE:
            raise ValidationException(f"Unknown package status: {new_status}", {'status': new_status})

        with transaction.atomic():
            package = get_package(package_ref, for_update=True)

            if package.status == PackageStatus.DELIVERED:
                raise BusinessException(
                    f"Package {package.package_id} was released to the customer and cannot be corrected",
                    "PACKAGE_DELIVERED"
                )
            if PackageWorkflow.rank(new_status) >= PackageWorkflow.rank(package.status):
                raise ValidationException(
                    f"Corrections must move a package backward (current: {package.status})",
                    {'current_status': package.status, 'attempted_status': new_status}
                )

            old_status = package.status
            package.status = new_status
            if new_status == PackageStatus.PENDING:
                package.received_at = None
            if PackageWorkflow.rank(new_status) < PackageWorkflow.rank(PackageStatus.ARRIVED):
                package.delivery_auth_code = None
                package.auth_code_generated_at = None
            package.save()

            AuditLog.log_change(
                entity=package,
                action='status_corrected',
                user=corrected_by,
                old_values={'status': old_status},
                new_values={'status': new_status},
                field_changes={'status': {'old': old_status, 'new': new_status}},
                notes=reason.strip()
            )

        logger.warning(f"Package {package.package_id} status corrected from {old_status} to {new_status}: {reason}")
        return package

    @staticmethod
    def received_today_count() -> int:
        """Number of packages received today that are still waiting in the warehouse."""
        return Package.objects.filter(
            status=PackageStatus.RECEIVED,
            received_at__date=timezone.localdate(),
        ).count()
