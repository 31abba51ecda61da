"""
Package Forwarding Services
"""

from .workflow import validate_package_workflow, validate_shipment_workflow
from .identifiers import IdentifierGenerator, create_with_identifiers
from .notification_service import NotificationService
from .package_service import PackageService
from .consolidation_service import ConsolidationService
from .shipment_service import ShipmentService
from .delivery_service import DeliveryService, VerificationResult, VerificationFailure

__all__ = [
    # Workflow validators
    'validate_package_workflow', 'validate_shipment_workflow',

    # Identifiers
    'IdentifierGenerator', 'create_with_identifiers',

    # Services
    'NotificationService', 'PackageService', 'ConsolidationService',
    'ShipmentService', 'DeliveryService',

    # Results
    'VerificationResult', 'VerificationFailure',
]
