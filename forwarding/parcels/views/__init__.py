"""
Package Forwarding Views
"""

from .package_views import PackageViewSet
from .shipment_views import ShipmentViewSet
from .delivery_views import DeliveryViewSet, VerificationLogViewSet, NotificationViewSet

__all__ = [
    'PackageViewSet',
    'ShipmentViewSet',
    'DeliveryViewSet',
    'VerificationLogViewSet',
    'NotificationViewSet',
]
