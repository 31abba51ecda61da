"""
Delivery Service for package forwarding.

Releases packages to customers at pickup. A package is released only when the
suite number and the one-time delivery code match, and every attempt is
written to the verification log whatever its outcome.
"""

import logging
from dataclasses import dataclass, asdict, field
from datetime import datetime
from typing import Dict, Any, List, Optional
from django.db import DatabaseError, transaction
from django.utils import timezone

from ..models import Package, PackageStatus, VerificationLog, AuditLog
from ..exceptions import StorageException
from .lookups import get_actor, get_package, get_shipment
from .notification_service import NotificationService
from .package_service import PackageService
from .shipment_service import ShipmentService

logger = logging.getLogger(__name__)


class VerificationFailure:
    """Failure codes and the reasons shown at the counter."""

    SUITE_MISMATCH = 'SUITE_MISMATCH'
    NO_DELIVERY_CODE = 'NO_DELIVERY_CODE'
    INVALID_CODE = 'INVALID_CODE'
    CODE_ALREADY_USED = 'CODE_ALREADY_USED'
    NOT_ARRIVED = 'NOT_ARRIVED'

    REASONS = {
        SUITE_MISMATCH: "Suite number mismatch",
        NO_DELIVERY_CODE: "No delivery code generated for this package",
        INVALID_CODE: "Invalid delivery code",
        CODE_ALREADY_USED: "Delivery code already used",
        NOT_ARRIVED: "Package not in arrived status (current: {status})",
    }

    @classmethod
    def reason(cls, code: str, **context) -> str:
        return cls.REASONS[code].format(**context)


@dataclass
class VerificationResult:
    """Outcome of a pickup verification attempt."""

    verified: bool
    message: str
    package_id: str
    failure_code: Optional[str] = None
    tracking_number: Optional[str] = None
    customer_name: Optional[str] = None
    delivered_at: Optional[datetime] = None
    shipment_delivered: bool = False
    checks: Dict[str, bool] = field(default_factory=dict)

    @property
    def failure_reason(self) -> Optional[str]:
        return None if self.verified else self.message

    def to_dict(self) -> Dict[str, Any]:
        data = asdict(self)
        data['attempts_logged'] = True
        return data


class DeliveryService:
    """Service class for pickup verification and delivery codes."""

    @staticmethod
    def _evaluate_checks(package: Package, suite_number: str, auth_code: str) -> Dict[str, bool]:
        """Run every pickup check; none short-circuits another."""
        entered_suite = (suite_number or '').strip().upper()
        entered_code = (auth_code or '').strip()
        owner_suite = (package.customer.suite_number or '').upper()

        return {
            'suite_number_matches': bool(owner_suite) and owner_suite == entered_suite,
            'code_exists': bool(package.delivery_auth_code),
            'code_matches': bool(package.delivery_auth_code) and package.delivery_auth_code == entered_code,
            'code_unused': package.auth_code_used_at is None,
            'status_arrived': package.status == PackageStatus.ARRIVED,
        }

    @staticmethod
    def _first_failure(package: Package, checks: Dict[str, bool]) -> Optional[str]:
        if not checks['suite_number_matches']:
            return VerificationFailure.SUITE_MISMATCH
        if not checks['code_exists']:
            return VerificationFailure.NO_DELIVERY_CODE
        if not checks['code_matches']:
            return VerificationFailure.INVALID_CODE
        if not checks['code_unused']:
            return VerificationFailure.CODE_ALREADY_USED
        if not checks['status_arrived']:
            return VerificationFailure.NOT_ARRIVED
        return None

    @staticmethod
    def consume_code(package: Package, staff, used_at: datetime) -> bool:
        """
        Compare-and-swap the package from arrived to delivered.

        Returns:
            False if another pickup already consumed the code
        """
        consumed = Package.objects.filter(
            pk=package.pk,
            status=PackageStatus.ARRIVED,
            auth_code_used_at__isnull=True,
            delivery_auth_code=package.delivery_auth_code,
        ).update(
            status=PackageStatus.DELIVERED,
            auth_code_used_at=used_at,
            auth_code_used_by=staff,
            updated_at=used_at,
        )
        return consumed == 1

    @staticmethod
    def verify_and_deliver(package_ref, suite_number: str, auth_code: str, staff,
                           ip_address: str = None, user_agent: str = "") -> VerificationResult:
        """
        Verify a pickup and release the package to its owner.

        Args:
            package_ref: Package UUID, package ID or tracking number
            suite_number: Suite number given by the customer
            auth_code: Delivery code given by the customer
            staff: Staff member performing the release
            ip_address: Client address of the verifying terminal
            user_agent: Client identification of the verifying terminal

        Returns:
            VerificationResult; validation failures are results, not exceptions

        Raises:
            NotFoundException: If the package or the staff member does not exist
            StorageException: If the store fails; nothing is written in that case
        """
        try:
            with transaction.atomic():
                package = get_package(package_ref, for_update=True)
                actor = get_actor(staff)

                checks = DeliveryService._evaluate_checks(package, suite_number, auth_code)
                failure = DeliveryService._first_failure(package, checks)

                now = timezone.now()
                if failure is None and not DeliveryService.consume_code(package, actor, now):
                    checks['code_unused'] = False
                    failure = VerificationFailure.CODE_ALREADY_USED

                reason = (
                    VerificationFailure.reason(failure, status=package.status) if failure else None
                )

                VerificationLog.objects.create(
                    package=package,
                    suite_number=suite_number or '',
                    auth_code_entered=auth_code or '',
                    verification_success=failure is None,
                    failure_reason=reason,
                    failure_code=failure,
                    checks=checks,
                    verified_by=actor,
                    verified_by_role=actor.role,
                    verified_at=now,
                    ip_address=ip_address,
                    user_agent=user_agent or '',
                )

                if failure is not None:
                    logger.warning(f"Delivery verification failed for package {package.package_id}: {reason}")
                    return VerificationResult(
                        verified=False,
                        message=reason,
                        package_id=package.package_id,
                        failure_code=failure,
                        checks=checks,
                    )

                package.refresh_from_db()
                AuditLog.log_status_change(
                    entity=package,
                    old_status=PackageStatus.ARRIVED,
                    new_status=PackageStatus.DELIVERED,
                    user=actor,
                    notes="Released at pickup after code verification"
                )

                shipment_delivered = False
                if package.linked_to_shipment_id is not None:
                    shipment_delivered = ShipmentService.reconcile_completion(package.linked_to_shipment_id)

                NotificationService.emit_package_delivered(package)

                customer = package.customer
                message = f"Package {package.package_id} successfully delivered to {customer.full_name}"
                logger.info(f"{message} (staff: {actor})")

                return VerificationResult(
                    verified=True,
                    message=message,
                    package_id=package.package_id,
                    tracking_number=package.tracking_number,
                    customer_name=customer.full_name,
                    delivered_at=now,
                    shipment_delivered=shipment_delivered,
                    checks=checks,
                )
        except DatabaseError as e:
            logger.exception(f"Storage error while verifying delivery of {package_ref}")
            raise StorageException("Delivery verification could not be completed", e) from e

    @staticmethod
    def issue_codes_for_shipment(shipment_ref) -> int:
        """
        Issue codes for arrived packages of a shipment that have none outstanding.

        Returns:
            Number of packages that received a new code
        """
        shipment = get_shipment(shipment_ref)
        issued = 0
        with transaction.atomic():
            packages = Package.objects.select_for_update().filter(
                linked_to_shipment=shipment,
                status=PackageStatus.ARRIVED,
                delivery_auth_code__isnull=True,
            ).order_by('pk')
            for package in packages:
                PackageService.issue_delivery_code(package)
                issued += 1

        logger.info(f"Issued {issued} delivery codes for shipment {shipment.tracking_number}")
        return issued

    @staticmethod
    def get_customer_delivery_codes(customer) -> List[Dict[str, Any]]:
        """Outstanding pickup codes of a customer, newest first."""
        packages = Package.objects.filter(
            customer=customer,
            status=PackageStatus.ARRIVED,
            delivery_auth_code__isnull=False,
            auth_code_used_at__isnull=True,
        ).select_related('linked_to_shipment').order_by('-auth_code_generated_at')

        return [
            {
                'package_id': package.package_id,
                'tracking_number': package.tracking_number,
                'delivery_code': package.delivery_auth_code,
                'shipment_tracking': (
                    package.linked_to_shipment.tracking_number if package.linked_to_shipment_id else None
                ),
                'status': package.status,
                'generated_at': package.auth_code_generated_at,
                'description': package.description,
            }
            for package in packages
        ]

    @staticmethod
    def get_verification_logs(package_ref=None, success: Optional[bool] = None):
        """Verification attempts, optionally for one package or one outcome."""
        logs = VerificationLog.objects.select_related('package', 'verified_by')
        if package_ref is not None:
            logs = logs.filter(package=get_package(package_ref))
        if success is not None:
            logs = logs.filter(verification_success=success)
        return logs
