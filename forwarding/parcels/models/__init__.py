"""
Package Forwarding Models
"""

from .package import Package, PackageStatus
from .shipment import Shipment, ShipmentStatus, ServiceType, PackageShipment
from .verification import VerificationLog
from .notification import Notification, NotificationKind
from .audit import AuditLog

__all__ = [
    # Package models
    'Package', 'PackageStatus',

    # Shipment models
    'Shipment', 'ShipmentStatus', 'ServiceType', 'PackageShipment',

    # Pickup verification
    'VerificationLog',

    # Notifications
    'Notification', 'NotificationKind',

    # Audit
    'AuditLog',
]
