"""
URL configuration for package forwarding.

Provides API endpoints for packages, shipments and pickup verification.
"""

from rest_framework.routers import DefaultRouter

from .views import (
    PackageViewSet, ShipmentViewSet, DeliveryViewSet,
    VerificationLogViewSet, NotificationViewSet
)

router = DefaultRouter()
router.register(r'packages', PackageViewSet, basename='package')
router.register(r'shipments', ShipmentViewSet, basename='shipment')
router.register(r'delivery', DeliveryViewSet, basename='delivery')
router.register(r'verification-logs', VerificationLogViewSet, basename='verification-log')
router.register(r'notifications', NotificationViewSet, basename='notification')

urlpatterns = router.urls
